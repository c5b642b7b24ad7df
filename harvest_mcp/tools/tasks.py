import logging
from typing import Any, Dict, Optional

from pydantic import Field, StrictBool

from harvest_mcp.client import HarvestClient
from harvest_mcp.registry import ToolGroup
from harvest_mcp.validation import Amount, IsoDateTime, NonEmptyStr, PaginatedQuery, PositiveId, ToolInput

logger = logging.getLogger("harvest-mcp.tools.tasks")

tools = ToolGroup("tasks")


class TaskQuery(PaginatedQuery):
    is_active: Optional[StrictBool] = Field(None, description="Filter by active status")
    updated_since: Optional[IsoDateTime] = Field(
        None, description="Only return tasks updated since this ISO 8601 timestamp"
    )


class TaskId(ToolInput):
    task_id: PositiveId = Field(..., description="The ID of the task")


class CreateTask(ToolInput):
    name: NonEmptyStr = Field(..., description="The name of the task")
    billable_by_default: StrictBool = Field(True, description="Whether new assignments of this task are billable")
    default_hourly_rate: Optional[Amount] = Field(None, description="Default rate for new task assignments")
    is_default: StrictBool = Field(False, description="Whether the task is added to new projects automatically")
    is_active: StrictBool = Field(True, description="Whether the task is active")


class UpdateTask(ToolInput):
    id: PositiveId = Field(..., description="The ID of the task to update")
    name: Optional[NonEmptyStr] = None
    billable_by_default: Optional[StrictBool] = None
    default_hourly_rate: Optional[Amount] = None
    is_default: Optional[StrictBool] = None
    is_active: Optional[StrictBool] = None


@tools.tool(TaskQuery)
async def list_tasks(client: HarvestClient, params: TaskQuery) -> Dict[str, Any]:
    """List all tasks with optional filtering by active status."""
    tasks = await client.get("tasks", params.to_params())
    logger.info(f"Retrieved {len(tasks.get('tasks', []))} tasks")
    return tasks


@tools.tool(TaskId)
async def get_task(client: HarvestClient, params: TaskId) -> Dict[str, Any]:
    """Retrieve details of a specific task by ID."""
    return await client.get(f"tasks/{params.task_id}")


@tools.tool(CreateTask)
async def create_task(client: HarvestClient, params: CreateTask) -> Dict[str, Any]:
    """Create a new task that can be assigned to projects."""
    task = await client.post("tasks", params.to_params())
    logger.info(f"Created task {task.get('id')} ({params.name})")
    return task


@tools.tool(UpdateTask)
async def update_task(client: HarvestClient, params: UpdateTask) -> Dict[str, Any]:
    """Update an existing task. Only provided fields will be updated."""
    task = await client.patch(f"tasks/{params.id}", params.to_params(exclude={"id"}))
    logger.info(f"Updated task {params.id}")
    return task


@tools.tool(TaskId)
async def delete_task(client: HarvestClient, params: TaskId) -> Dict[str, Any]:
    """Delete a task. Only possible if no time has been logged against it."""
    await client.delete(f"tasks/{params.task_id}")
    logger.info(f"Deleted task {params.task_id}")
    return {"message": f"Task {params.task_id} deleted successfully"}
