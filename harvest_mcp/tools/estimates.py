import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from harvest_mcp.client import HarvestClient
from harvest_mcp.registry import ToolGroup
from harvest_mcp.tools.invoices import LineItem
from harvest_mcp.validation import Currency, IsoDate, IsoDateTime, PaginatedQuery, Percentage, PositiveId, ToolInput

logger = logging.getLogger("harvest-mcp.tools.estimates")

tools = ToolGroup("estimates")


class EstimateQuery(PaginatedQuery):
    client_id: Optional[PositiveId] = Field(None, description="Filter by client ID")
    state: Optional[Literal["draft", "sent", "accepted", "declined"]] = Field(
        None, description="Filter by state"
    )
    from_: Optional[IsoDate] = Field(None, alias="from", description="Issue date on or after (YYYY-MM-DD)")
    to: Optional[IsoDate] = Field(None, description="Issue date on or before (YYYY-MM-DD)")
    updated_since: Optional[IsoDateTime] = Field(
        None, description="Only return estimates updated since this ISO 8601 timestamp"
    )


class EstimateId(ToolInput):
    estimate_id: PositiveId = Field(..., description="The ID of the estimate")


class CreateEstimate(ToolInput):
    client_id: PositiveId = Field(..., description="The client the estimate is for")
    subject: Optional[str] = Field(None, description="The estimate subject")
    notes: Optional[str] = Field(None, description="Additional notes shown on the estimate")
    currency: Currency = Field("USD", description="The currency of the estimate")
    issue_date: Optional[IsoDate] = Field(None, description="Date the estimate was issued (YYYY-MM-DD)")
    tax: Optional[Percentage] = Field(None, description="First tax percentage")
    tax2: Optional[Percentage] = Field(None, description="Second tax percentage")
    discount: Optional[Percentage] = Field(None, description="Discount percentage")
    purchase_order: Optional[str] = Field(None, description="The purchase order number")
    line_items: Optional[List[LineItem]] = Field(None, description="Line items of the estimate")


class UpdateEstimate(ToolInput):
    id: PositiveId = Field(..., description="The ID of the estimate to update")
    client_id: Optional[PositiveId] = None
    subject: Optional[str] = None
    notes: Optional[str] = None
    currency: Optional[Currency] = None
    issue_date: Optional[IsoDate] = None
    tax: Optional[Percentage] = None
    tax2: Optional[Percentage] = None
    discount: Optional[Percentage] = None
    purchase_order: Optional[str] = None
    line_items: Optional[List[LineItem]] = None


@tools.tool(EstimateQuery)
async def list_estimates(client: HarvestClient, params: EstimateQuery) -> Dict[str, Any]:
    """List estimates with optional filtering by client, state and date range."""
    estimates = await client.get("estimates", params.to_params())
    logger.info(f"Retrieved {len(estimates.get('estimates', []))} estimates")
    return estimates


@tools.tool(EstimateId)
async def get_estimate(client: HarvestClient, params: EstimateId) -> Dict[str, Any]:
    """Retrieve details of a specific estimate by ID, including its line items."""
    return await client.get(f"estimates/{params.estimate_id}")


@tools.tool(CreateEstimate)
async def create_estimate(client: HarvestClient, params: CreateEstimate) -> Dict[str, Any]:
    """Create a new estimate for a client. Requires client_id."""
    estimate = await client.post("estimates", params.to_params())
    logger.info(f"Created estimate {estimate.get('id')} for client {params.client_id}")
    return estimate


@tools.tool(UpdateEstimate)
async def update_estimate(client: HarvestClient, params: UpdateEstimate) -> Dict[str, Any]:
    """Update an existing estimate. Only provided fields will be updated."""
    estimate = await client.patch(f"estimates/{params.id}", params.to_params(exclude={"id"}))
    logger.info(f"Updated estimate {params.id}")
    return estimate


@tools.tool(EstimateId)
async def delete_estimate(client: HarvestClient, params: EstimateId) -> Dict[str, Any]:
    """Delete an estimate permanently. This action cannot be undone."""
    await client.delete(f"estimates/{params.estimate_id}")
    logger.info(f"Deleted estimate {params.estimate_id}")
    return {"message": f"Estimate {params.estimate_id} deleted successfully"}
