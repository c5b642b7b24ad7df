import logging
from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import Field, StrictBool, StrictFloat, model_validator

from harvest_mcp.client import HarvestClient
from harvest_mcp.registry import ToolGroup
from harvest_mcp.validation import (
    ClockTime,
    IsoDate,
    IsoDateTime,
    PaginatedQuery,
    PositiveId,
    ToolInput,
    Url,
)

logger = logging.getLogger("harvest-mcp.tools.time_entries")

tools = ToolGroup("time_entries")

NOTES_MAX_LENGTH = 2000


class ExternalReference(ToolInput):
    id: Optional[str] = Field(None, description="External reference ID")
    group_id: Optional[str] = Field(None, description="External group ID")
    account_id: Optional[str] = Field(None, description="External account ID")
    permalink: Optional[Url] = Field(None, description="External permalink URL")


class TimeEntryQuery(PaginatedQuery):
    user_id: Optional[PositiveId] = Field(None, description="Filter by user ID")
    client_id: Optional[PositiveId] = Field(None, description="Filter by client ID")
    project_id: Optional[PositiveId] = Field(None, description="Filter by project ID")
    task_id: Optional[PositiveId] = Field(None, description="Filter by task ID")
    is_billed: Optional[StrictBool] = Field(None, description="Filter by billing status")
    is_running: Optional[StrictBool] = Field(None, description="Filter by running timer status")
    updated_since: Optional[IsoDateTime] = Field(
        None, description="Only return entries updated since this ISO 8601 timestamp"
    )
    from_: Optional[IsoDate] = Field(None, alias="from", description="Start of date range (YYYY-MM-DD)")
    to: Optional[IsoDate] = Field(None, description="End of date range (YYYY-MM-DD)")


class TimeEntryId(ToolInput):
    time_entry_id: PositiveId = Field(..., description="The ID of the time entry")


class TimerId(ToolInput):
    id: PositiveId = Field(..., description="The ID of the time entry")


class CreateTimeEntry(ToolInput):
    project_id: PositiveId = Field(..., description="The project ID to log time against")
    task_id: PositiveId = Field(..., description="The task ID to log time against")
    spent_date: IsoDate = Field(..., description="The date the time was spent (YYYY-MM-DD)")
    user_id: Optional[PositiveId] = Field(
        None, description="The user to log time for. Defaults to the authenticated user"
    )
    started_time: Optional[ClockTime] = Field(None, description="Start time in HH:MM format (24-hour)")
    ended_time: Optional[ClockTime] = Field(None, description="End time in HH:MM format (24-hour)")
    hours: Optional[StrictFloat] = Field(
        None, ge=0, le=24, description="Decimal hours (e.g., 0.5 = 30min, 1.25 = 1h15m)"
    )
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH, description="Notes for the time entry")
    external_reference: Optional[ExternalReference] = None

    @model_validator(mode="after")
    def _require_duration(self) -> "CreateTimeEntry":
        has_hours = self.hours is not None and self.hours > 0
        has_times = bool(self.started_time and self.ended_time)
        if not (has_hours or has_times):
            raise ValueError("Must provide either 'hours' or both 'started_time' and 'ended_time'")
        return self


class UpdateTimeEntry(ToolInput):
    id: PositiveId = Field(..., description="The ID of the time entry to update")
    project_id: Optional[PositiveId] = Field(None, description="Update the project ID")
    task_id: Optional[PositiveId] = Field(None, description="Update the task ID")
    spent_date: Optional[IsoDate] = Field(None, description="Update the spent date (YYYY-MM-DD)")
    started_time: Optional[ClockTime] = Field(None, description="Update start time in HH:MM format")
    ended_time: Optional[ClockTime] = Field(None, description="Update end time in HH:MM format")
    hours: Optional[StrictFloat] = Field(None, ge=0, le=24, description="Update decimal hours")
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH, description="Update notes")
    external_reference: Optional[ExternalReference] = None


class StartTimer(ToolInput):
    project_id: PositiveId = Field(..., description="The project ID to start the timer for")
    task_id: PositiveId = Field(..., description="The task ID to start the timer for")
    spent_date: Optional[IsoDate] = Field(None, description="Date for the timer (defaults to today)")
    user_id: Optional[PositiveId] = Field(None, description="The user to start the timer for")
    notes: Optional[str] = Field(None, max_length=NOTES_MAX_LENGTH, description="Initial notes for the timer")
    external_reference: Optional[ExternalReference] = None


@tools.tool(TimeEntryQuery)
async def list_time_entries(client: HarvestClient, params: TimeEntryQuery) -> Dict[str, Any]:
    """Retrieve a list of time entries with optional filtering.

    Supports filtering by user, client, project, task, billing status, date
    ranges, and more. Returns paginated results.
    """
    time_entries = await client.get("time_entries", params.to_params())
    logger.info(f"Retrieved {len(time_entries.get('time_entries', []))} time entries")
    return time_entries


@tools.tool(TimeEntryId)
async def get_time_entry(client: HarvestClient, params: TimeEntryId) -> Dict[str, Any]:
    """Retrieve a specific time entry by its ID.

    Returns complete time entry details including project, task, user, and
    timing information.
    """
    time_entry = await client.get(f"time_entries/{params.time_entry_id}")
    logger.info(f"Retrieved time entry {params.time_entry_id}")
    return time_entry


@tools.tool(CreateTimeEntry)
async def create_time_entry(client: HarvestClient, params: CreateTimeEntry) -> Dict[str, Any]:
    """Create a new time entry.

    Requires project_id, task_id, and spent_date. Must provide either hours OR
    both started_time and ended_time.
    """
    time_entry = await client.post("time_entries", params.to_params())
    logger.info(
        f"Created time entry for project {params.project_id}, task {params.task_id} on {params.spent_date}"
    )
    return time_entry


@tools.tool(UpdateTimeEntry)
async def update_time_entry(client: HarvestClient, params: UpdateTimeEntry) -> Dict[str, Any]:
    """Update an existing time entry.

    Can modify project, task, hours, notes, and other fields. Only provided
    fields will be updated.
    """
    time_entry = await client.patch(f"time_entries/{params.id}", params.to_params(exclude={"id"}))
    logger.info(f"Updated time entry {params.id}")
    return time_entry


@tools.tool(TimeEntryId)
async def delete_time_entry(client: HarvestClient, params: TimeEntryId) -> Dict[str, Any]:
    """Delete a time entry permanently. This action cannot be undone.

    Deleting a time entry is only possible if it's not closed and the associated
    project and task haven't been archived. Admins can delete closed entries.
    """
    await client.delete(f"time_entries/{params.time_entry_id}")
    logger.info(f"Deleted time entry {params.time_entry_id}")
    return {"message": f"Time entry {params.time_entry_id} deleted successfully"}


@tools.tool(TimeEntryId)
async def delete_time_entry_external_reference(client: HarvestClient, params: TimeEntryId) -> Dict[str, Any]:
    """Delete a time entry's external reference, leaving the entry itself untouched."""
    await client.delete(f"time_entries/{params.time_entry_id}/external_reference")
    logger.info(f"Deleted external reference for time entry {params.time_entry_id}")
    return {"message": f"External reference for time entry {params.time_entry_id} deleted successfully"}


@tools.tool(StartTimer)
async def start_timer(client: HarvestClient, params: StartTimer) -> Dict[str, Any]:
    """Start a timer for a new time entry.

    Creates a running time entry that tracks time automatically.
    """
    data = params.to_params()
    data.setdefault("spent_date", date.today().isoformat())
    # a started_time without an ended_time leaves the entry running
    data["started_time"] = datetime.now().strftime("%H:%M")

    time_entry = await client.post("time_entries", data)
    logger.info(
        f"Started timer {time_entry.get('id')} for project {params.project_id}, "
        f"task {params.task_id} at {data['started_time']}"
    )
    return time_entry


@tools.tool(TimerId)
async def stop_timer(client: HarvestClient, params: TimerId) -> Dict[str, Any]:
    """Stop a running timer and finalize the time entry with calculated hours.

    Stopping a time entry is only possible if it's currently running.
    """
    time_entry = await client.patch(f"time_entries/{params.id}/stop")
    logger.info(f"Stopped time entry {params.id}")
    return time_entry


@tools.tool(TimerId)
async def restart_timer(client: HarvestClient, params: TimerId) -> Dict[str, Any]:
    """Restart a previously stopped timer.

    Restarting a time entry is only possible if it isn't currently running.
    """
    time_entry = await client.patch(f"time_entries/{params.id}/restart")
    logger.info(f"Restarted time entry {params.id}")
    return time_entry
