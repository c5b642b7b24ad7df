import logging
from typing import Any, Dict, Literal, Optional

from pydantic import Field, StrictBool

from harvest_mcp.client import HarvestClient
from harvest_mcp.registry import ToolGroup
from harvest_mcp.validation import (
    Amount,
    IsoDate,
    IsoDateTime,
    NonEmptyStr,
    PaginatedQuery,
    Percentage,
    PositiveId,
    ToolInput,
)

logger = logging.getLogger("harvest-mcp.tools.projects")

tools = ToolGroup("projects")

BillBy = Literal["Project", "Tasks", "People", "none"]
BudgetBy = Literal["project", "project_cost", "task", "task_fees", "person", "none"]


class ProjectQuery(PaginatedQuery):
    is_active: Optional[StrictBool] = Field(None, description="Filter by active status")
    client_id: Optional[PositiveId] = Field(None, description="Filter by client ID")
    updated_since: Optional[IsoDateTime] = Field(
        None, description="Only return projects updated since this ISO 8601 timestamp"
    )


class ProjectId(ToolInput):
    project_id: PositiveId = Field(..., description="The ID of the project")


class CreateProject(ToolInput):
    name: NonEmptyStr = Field(..., description="The name of the project")
    client_id: PositiveId = Field(..., description="The client to associate this project with")
    code: Optional[str] = Field(None, description="The project code")
    is_active: StrictBool = Field(True, description="Whether the project is active")
    is_billable: StrictBool = Field(True, description="Whether the project is billable")
    is_fixed_fee: StrictBool = Field(False, description="Whether the project is a fixed-fee project")
    bill_by: BillBy = Field("none", description="The method by which the project is invoiced")
    hourly_rate: Optional[Amount] = Field(None, description="Rate for projects billed by Project Hourly Rate")
    budget: Optional[Amount] = Field(None, description="The budget in hours for the project")
    budget_by: Optional[BudgetBy] = Field(None, description="The method by which the project is budgeted")
    budget_is_monthly: StrictBool = Field(False, description="Whether the budget resets every month")
    notify_when_over_budget: StrictBool = Field(False, description="Whether to notify when the project goes over budget")
    over_budget_notification_percentage: Optional[Percentage] = Field(
        None, description="Percentage of budget at which to send the notification"
    )
    show_budget_to_all: StrictBool = Field(False, description="Whether the budget is visible to everyone")
    cost_budget: Optional[Amount] = Field(None, description="The monetary budget for the project")
    cost_budget_include_expenses: StrictBool = Field(False, description="Whether the cost budget includes expenses")
    fee: Optional[Amount] = Field(None, description="The amount to invoice for a fixed-fee project")
    notes: Optional[str] = Field(None, description="Project notes")
    starts_on: Optional[IsoDate] = Field(None, description="Date the project starts (YYYY-MM-DD)")
    ends_on: Optional[IsoDate] = Field(None, description="Date the project ends (YYYY-MM-DD)")


class UpdateProject(ToolInput):
    id: PositiveId = Field(..., description="The ID of the project to update")
    name: Optional[NonEmptyStr] = None
    client_id: Optional[PositiveId] = None
    code: Optional[str] = None
    is_active: Optional[StrictBool] = None
    is_billable: Optional[StrictBool] = None
    is_fixed_fee: Optional[StrictBool] = None
    bill_by: Optional[BillBy] = None
    hourly_rate: Optional[Amount] = None
    budget: Optional[Amount] = None
    budget_by: Optional[BudgetBy] = None
    budget_is_monthly: Optional[StrictBool] = None
    notify_when_over_budget: Optional[StrictBool] = None
    over_budget_notification_percentage: Optional[Percentage] = None
    show_budget_to_all: Optional[StrictBool] = None
    cost_budget: Optional[Amount] = None
    cost_budget_include_expenses: Optional[StrictBool] = None
    fee: Optional[Amount] = None
    notes: Optional[str] = None
    starts_on: Optional[IsoDate] = None
    ends_on: Optional[IsoDate] = None


class TaskAssignmentQuery(PaginatedQuery):
    project_id: PositiveId = Field(..., description="The ID of the project")
    is_active: Optional[StrictBool] = Field(None, description="Filter by active status")
    updated_since: Optional[IsoDateTime] = Field(
        None, description="Only return assignments updated since this ISO 8601 timestamp"
    )


class CreateTaskAssignment(ToolInput):
    project_id: PositiveId = Field(..., description="The ID of the project")
    task_id: PositiveId = Field(..., description="The ID of the task to assign")
    is_active: StrictBool = Field(True, description="Whether the assignment is active")
    billable: StrictBool = Field(True, description="Whether the assignment is billable")
    hourly_rate: Optional[Amount] = Field(None, description="Rate used when the project bills by task")
    budget: Optional[Amount] = Field(None, description="Budget used when the project budgets by task")


class UpdateTaskAssignment(ToolInput):
    project_id: PositiveId = Field(..., description="The ID of the project")
    id: PositiveId = Field(..., description="The ID of the task assignment to update")
    is_active: Optional[StrictBool] = None
    billable: Optional[StrictBool] = None
    hourly_rate: Optional[Amount] = None
    budget: Optional[Amount] = None


class TaskAssignmentId(ToolInput):
    project_id: PositiveId = Field(..., description="The ID of the project")
    task_assignment_id: PositiveId = Field(..., description="The ID of the task assignment")


@tools.tool(ProjectQuery)
async def list_projects(client: HarvestClient, params: ProjectQuery) -> Dict[str, Any]:
    """List all projects with optional filtering by client and active status."""
    projects = await client.get("projects", params.to_params())
    logger.info(f"Retrieved {len(projects.get('projects', []))} projects")
    return projects


@tools.tool(ProjectId)
async def get_project(client: HarvestClient, params: ProjectId) -> Dict[str, Any]:
    """Retrieve details of a specific project by ID."""
    return await client.get(f"projects/{params.project_id}")


@tools.tool(CreateProject)
async def create_project(client: HarvestClient, params: CreateProject) -> Dict[str, Any]:
    """Create a new project.

    Requires name and client_id. Billing defaults to billable with bill_by "none".
    """
    project = await client.post("projects", params.to_params())
    logger.info(f"Created project {project.get('id')} ({params.name}) for client {params.client_id}")
    return project


@tools.tool(UpdateProject)
async def update_project(client: HarvestClient, params: UpdateProject) -> Dict[str, Any]:
    """Update an existing project. Only provided fields will be updated."""
    project = await client.patch(f"projects/{params.id}", params.to_params(exclude={"id"}))
    logger.info(f"Updated project {params.id}")
    return project


@tools.tool(ProjectId)
async def delete_project(client: HarvestClient, params: ProjectId) -> Dict[str, Any]:
    """Delete a project permanently. This action cannot be undone.

    Deletes the project along with its time entries and expenses.
    """
    await client.delete(f"projects/{params.project_id}")
    logger.info(f"Deleted project {params.project_id}")
    return {"message": f"Project {params.project_id} deleted successfully"}


@tools.tool(TaskAssignmentQuery)
async def list_project_task_assignments(client: HarvestClient, params: TaskAssignmentQuery) -> Dict[str, Any]:
    """List the task assignments of a project."""
    assignments = await client.get(
        f"projects/{params.project_id}/task_assignments",
        params.to_params(exclude={"project_id"}),
    )
    logger.info(
        f"Retrieved {len(assignments.get('task_assignments', []))} task assignments "
        f"for project {params.project_id}"
    )
    return assignments


@tools.tool(CreateTaskAssignment)
async def create_project_task_assignment(client: HarvestClient, params: CreateTaskAssignment) -> Dict[str, Any]:
    """Assign a task to a project."""
    assignment = await client.post(
        f"projects/{params.project_id}/task_assignments",
        params.to_params(exclude={"project_id"}),
    )
    logger.info(f"Assigned task {params.task_id} to project {params.project_id}")
    return assignment


@tools.tool(UpdateTaskAssignment)
async def update_project_task_assignment(client: HarvestClient, params: UpdateTaskAssignment) -> Dict[str, Any]:
    """Update a project's task assignment. Only provided fields will be updated."""
    assignment = await client.patch(
        f"projects/{params.project_id}/task_assignments/{params.id}",
        params.to_params(exclude={"project_id", "id"}),
    )
    logger.info(f"Updated task assignment {params.id} on project {params.project_id}")
    return assignment


@tools.tool(TaskAssignmentId)
async def delete_project_task_assignment(client: HarvestClient, params: TaskAssignmentId) -> Dict[str, Any]:
    """Remove a task assignment from a project.

    Only possible if no time has been logged against the assignment.
    """
    await client.delete(f"projects/{params.project_id}/task_assignments/{params.task_assignment_id}")
    logger.info(f"Deleted task assignment {params.task_assignment_id} from project {params.project_id}")
    return {"message": f"Task assignment {params.task_assignment_id} deleted successfully"}
