import logging
from typing import Any, Dict, Optional

from pydantic import Field, StrictBool, StrictFloat

from harvest_mcp.client import HarvestClient
from harvest_mcp.registry import ToolGroup
from harvest_mcp.validation import Amount, IsoDate, IsoDateTime, PaginatedQuery, PositiveId, ToolInput

logger = logging.getLogger("harvest-mcp.tools.expenses")

tools = ToolGroup("expenses")


class ExpenseQuery(PaginatedQuery):
    user_id: Optional[PositiveId] = Field(None, description="Filter by user ID")
    client_id: Optional[PositiveId] = Field(None, description="Filter by client ID")
    project_id: Optional[PositiveId] = Field(None, description="Filter by project ID")
    is_billed: Optional[StrictBool] = Field(None, description="Filter by billing status")
    is_closed: Optional[StrictBool] = Field(None, description="Filter by approval status")
    from_: Optional[IsoDate] = Field(None, alias="from", description="Start of date range (YYYY-MM-DD)")
    to: Optional[IsoDate] = Field(None, description="End of date range (YYYY-MM-DD)")
    updated_since: Optional[IsoDateTime] = Field(
        None, description="Only return expenses updated since this ISO 8601 timestamp"
    )


class ExpenseCategoryQuery(PaginatedQuery):
    is_active: Optional[StrictBool] = Field(None, description="Filter by active status")
    updated_since: Optional[IsoDateTime] = Field(
        None, description="Only return categories updated since this ISO 8601 timestamp"
    )


class ExpenseId(ToolInput):
    expense_id: PositiveId = Field(..., description="The ID of the expense")


class CreateExpense(ToolInput):
    project_id: PositiveId = Field(..., description="The project the expense belongs to")
    expense_category_id: PositiveId = Field(..., description="The expense category")
    spent_date: IsoDate = Field(..., description="Date the expense occurred (YYYY-MM-DD)")
    total_cost: Amount = Field(..., description="The total amount of the expense")
    user_id: Optional[PositiveId] = Field(
        None, description="The user the expense is for. Defaults to the authenticated user"
    )
    units: Optional[StrictFloat] = Field(None, ge=0, description="Units, for unit-based expense categories")
    notes: Optional[str] = Field(None, description="Notes about the expense")
    billable: StrictBool = Field(True, description="Whether the expense is billable")


class UpdateExpense(ToolInput):
    id: PositiveId = Field(..., description="The ID of the expense to update")
    project_id: Optional[PositiveId] = None
    expense_category_id: Optional[PositiveId] = None
    spent_date: Optional[IsoDate] = None
    total_cost: Optional[Amount] = None
    user_id: Optional[PositiveId] = None
    units: Optional[StrictFloat] = Field(None, ge=0)
    notes: Optional[str] = None
    billable: Optional[StrictBool] = None


@tools.tool(ExpenseQuery)
async def list_expenses(client: HarvestClient, params: ExpenseQuery) -> Dict[str, Any]:
    """List expenses with optional filtering by user, client, project, status and date range."""
    expenses = await client.get("expenses", params.to_params())
    logger.info(f"Retrieved {len(expenses.get('expenses', []))} expenses")
    return expenses


@tools.tool(ExpenseId)
async def get_expense(client: HarvestClient, params: ExpenseId) -> Dict[str, Any]:
    """Retrieve details of a specific expense by ID."""
    return await client.get(f"expenses/{params.expense_id}")


@tools.tool(CreateExpense)
async def create_expense(client: HarvestClient, params: CreateExpense) -> Dict[str, Any]:
    """Create a new expense.

    Requires project_id, expense_category_id, spent_date and total_cost.
    """
    expense = await client.post("expenses", params.to_params())
    logger.info(f"Created expense {expense.get('id')} for project {params.project_id}")
    return expense


@tools.tool(UpdateExpense)
async def update_expense(client: HarvestClient, params: UpdateExpense) -> Dict[str, Any]:
    """Update an existing expense. Only provided fields will be updated."""
    expense = await client.patch(f"expenses/{params.id}", params.to_params(exclude={"id"}))
    logger.info(f"Updated expense {params.id}")
    return expense


@tools.tool(ExpenseId)
async def delete_expense(client: HarvestClient, params: ExpenseId) -> Dict[str, Any]:
    """Delete an expense. Only possible if it has not been invoiced or approved."""
    await client.delete(f"expenses/{params.expense_id}")
    logger.info(f"Deleted expense {params.expense_id}")
    return {"message": f"Expense {params.expense_id} deleted successfully"}


@tools.tool(ExpenseCategoryQuery)
async def list_expense_categories(client: HarvestClient, params: ExpenseCategoryQuery) -> Dict[str, Any]:
    """List the expense categories available for logging expenses."""
    categories = await client.get("expense_categories", params.to_params())
    logger.info(f"Retrieved {len(categories.get('expense_categories', []))} expense categories")
    return categories
