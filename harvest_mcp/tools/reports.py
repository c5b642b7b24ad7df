"""Report tools.

Harvest splits each report into one endpoint per grouping, so ``group_by``
selects the path and is never sent as a query parameter. A ``date`` grouping
has no endpoint of its own and falls back to the per-project report.
"""

import logging
from typing import Any, Dict, Literal, Optional

from pydantic import Field, StrictBool

from harvest_mcp.client import HarvestClient
from harvest_mcp.registry import ToolGroup
from harvest_mcp.validation import IsoDate, IsoDateTime, PaginatedQuery, PositiveId

logger = logging.getLogger("harvest-mcp.tools.reports")

tools = ToolGroup("reports")

TIME_REPORT_PATHS = {
    "client": "reports/time/clients",
    "project": "reports/time/projects",
    "task": "reports/time/tasks",
    "user": "reports/time/team",
}

EXPENSE_REPORT_PATHS = {
    "client": "reports/expenses/clients",
    "project": "reports/expenses/projects",
    "expense_category": "reports/expenses/categories",
    "user": "reports/expenses/team",
}


class ReportRange(PaginatedQuery):
    from_: IsoDate = Field(..., alias="from", description="Start of the reporting period (YYYY-MM-DD)")
    to: IsoDate = Field(..., description="End of the reporting period (YYYY-MM-DD)")


class TimeReportQuery(ReportRange):
    user_id: Optional[PositiveId] = Field(None, description="Filter by user ID")
    client_id: Optional[PositiveId] = Field(None, description="Filter by client ID")
    project_id: Optional[PositiveId] = Field(None, description="Filter by project ID")
    task_id: Optional[PositiveId] = Field(None, description="Filter by task ID")
    billable: Optional[StrictBool] = Field(None, description="Filter by billable status")
    is_billed: Optional[StrictBool] = Field(None, description="Filter by billing status")
    is_running: Optional[StrictBool] = Field(None, description="Filter by running timer status")
    updated_since: Optional[IsoDateTime] = Field(None, description="Only include entries updated since")
    group_by: Optional[Literal["user", "client", "project", "task", "date"]] = Field(
        None, description="How to group the report (defaults to project)"
    )


class ExpenseReportQuery(ReportRange):
    user_id: Optional[PositiveId] = Field(None, description="Filter by user ID")
    client_id: Optional[PositiveId] = Field(None, description="Filter by client ID")
    project_id: Optional[PositiveId] = Field(None, description="Filter by project ID")
    expense_category_id: Optional[PositiveId] = Field(None, description="Filter by expense category ID")
    billable: Optional[StrictBool] = Field(None, description="Filter by billable status")
    is_billed: Optional[StrictBool] = Field(None, description="Filter by billing status")
    updated_since: Optional[IsoDateTime] = Field(None, description="Only include expenses updated since")
    group_by: Optional[Literal["user", "client", "project", "expense_category", "date"]] = Field(
        None, description="How to group the report (defaults to project)"
    )


class ProjectBudgetQuery(PaginatedQuery):
    is_active: Optional[StrictBool] = Field(None, description="Filter by active status")
    client_id: Optional[PositiveId] = Field(None, description="Filter by client ID")
    over_budget: Optional[StrictBool] = Field(None, description="Only include projects that are over budget")


class UninvoicedQuery(ReportRange):
    client_id: Optional[PositiveId] = Field(None, description="Filter by client ID")
    project_id: Optional[PositiveId] = Field(None, description="Filter by project ID")


@tools.tool(TimeReportQuery)
async def get_time_report(client: HarvestClient, params: TimeReportQuery) -> Dict[str, Any]:
    """Generate a time report for a date range.

    Results are grouped by client, project, task or user (team); project is the
    default grouping.
    """
    path = TIME_REPORT_PATHS.get(params.group_by, TIME_REPORT_PATHS["project"])
    report = await client.get(path, params.to_params(exclude={"group_by"}))
    logger.info(f"Generated time report {path} for {params.from_} to {params.to}")
    return report


@tools.tool(ExpenseReportQuery)
async def get_expense_report(client: HarvestClient, params: ExpenseReportQuery) -> Dict[str, Any]:
    """Generate an expense report for a date range.

    Results are grouped by client, project, expense category or user (team);
    project is the default grouping.
    """
    path = EXPENSE_REPORT_PATHS.get(params.group_by, EXPENSE_REPORT_PATHS["project"])
    report = await client.get(path, params.to_params(exclude={"group_by"}))
    logger.info(f"Generated expense report {path} for {params.from_} to {params.to}")
    return report


@tools.tool(ProjectBudgetQuery)
async def get_project_budget_report(client: HarvestClient, params: ProjectBudgetQuery) -> Dict[str, Any]:
    """Report budget usage for projects that have a budget."""
    return await client.get("reports/project_budget", params.to_params())


@tools.tool(UninvoicedQuery)
async def get_uninvoiced_report(client: HarvestClient, params: UninvoicedQuery) -> Dict[str, Any]:
    """Report uninvoiced hours and expenses per project for a date range."""
    return await client.get("reports/uninvoiced", params.to_params())
