import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, StrictBool, StrictFloat

from harvest_mcp.client import HarvestClient
from harvest_mcp.registry import ToolGroup
from harvest_mcp.validation import (
    Amount,
    Currency,
    IsoDate,
    IsoDateTime,
    PaginatedQuery,
    Percentage,
    PositiveId,
    ToolInput,
)

logger = logging.getLogger("harvest-mcp.tools.invoices")

tools = ToolGroup("invoices")

LineItemKind = Literal["Service", "Product"]


class LineItem(ToolInput):
    """One billable line, shared by invoices and estimates."""

    kind: LineItemKind = Field("Service", description="The name of the line item category")
    description: Optional[str] = Field(None, description="Text description of the line item")
    quantity: StrictFloat = Field(1, gt=0, description="The unit quantity of the item")
    unit_price: Amount = Field(..., description="The individual price per unit")
    taxed: StrictBool = Field(False, description="Whether the tax percentage applies to this line item")
    taxed2: StrictBool = Field(False, description="Whether the tax2 percentage applies to this line item")


class InvoiceLineItem(LineItem):
    project_id: Optional[PositiveId] = Field(None, description="The project associated with this line item")


class InvoiceQuery(PaginatedQuery):
    client_id: Optional[PositiveId] = Field(None, description="Filter by client ID")
    project_id: Optional[PositiveId] = Field(None, description="Filter by project ID")
    state: Optional[Literal["draft", "open", "paid", "closed"]] = Field(None, description="Filter by state")
    from_: Optional[IsoDate] = Field(None, alias="from", description="Issue date on or after (YYYY-MM-DD)")
    to: Optional[IsoDate] = Field(None, description="Issue date on or before (YYYY-MM-DD)")
    updated_since: Optional[IsoDateTime] = Field(
        None, description="Only return invoices updated since this ISO 8601 timestamp"
    )


class InvoiceId(ToolInput):
    invoice_id: PositiveId = Field(..., description="The ID of the invoice")


class CreateInvoice(ToolInput):
    client_id: PositiveId = Field(..., description="The client to invoice")
    subject: Optional[str] = Field(None, description="The invoice subject")
    notes: Optional[str] = Field(None, description="Additional notes shown on the invoice")
    currency: Currency = Field("USD", description="The currency of the invoice")
    issue_date: Optional[IsoDate] = Field(None, description="Date the invoice was issued (YYYY-MM-DD)")
    due_date: Optional[IsoDate] = Field(None, description="Date the invoice is due (YYYY-MM-DD)")
    payment_term: Optional[str] = Field(None, description="Timeframe for payment, e.g. net 30")
    tax: Optional[Percentage] = Field(None, description="First tax percentage")
    tax2: Optional[Percentage] = Field(None, description="Second tax percentage")
    discount: Optional[Percentage] = Field(None, description="Discount percentage")
    purchase_order: Optional[str] = Field(None, description="The purchase order number")
    line_items: Optional[List[InvoiceLineItem]] = Field(None, description="Line items of the invoice")


class UpdateInvoice(ToolInput):
    id: PositiveId = Field(..., description="The ID of the invoice to update")
    client_id: Optional[PositiveId] = None
    subject: Optional[str] = None
    notes: Optional[str] = None
    currency: Optional[Currency] = None
    issue_date: Optional[IsoDate] = None
    due_date: Optional[IsoDate] = None
    payment_term: Optional[str] = None
    tax: Optional[Percentage] = None
    tax2: Optional[Percentage] = None
    discount: Optional[Percentage] = None
    purchase_order: Optional[str] = None
    line_items: Optional[List[InvoiceLineItem]] = None


@tools.tool(InvoiceQuery)
async def list_invoices(client: HarvestClient, params: InvoiceQuery) -> Dict[str, Any]:
    """List invoices with optional filtering by client, project, state and date range."""
    invoices = await client.get("invoices", params.to_params())
    logger.info(f"Retrieved {len(invoices.get('invoices', []))} invoices")
    return invoices


@tools.tool(InvoiceId)
async def get_invoice(client: HarvestClient, params: InvoiceId) -> Dict[str, Any]:
    """Retrieve details of a specific invoice by ID, including its line items."""
    return await client.get(f"invoices/{params.invoice_id}")


@tools.tool(CreateInvoice)
async def create_invoice(client: HarvestClient, params: CreateInvoice) -> Dict[str, Any]:
    """Create a new free-form invoice for a client.

    Requires client_id. Line items may be supplied inline.
    """
    invoice = await client.post("invoices", params.to_params())
    logger.info(f"Created invoice {invoice.get('id')} for client {params.client_id}")
    return invoice


@tools.tool(UpdateInvoice)
async def update_invoice(client: HarvestClient, params: UpdateInvoice) -> Dict[str, Any]:
    """Update an existing invoice. Only provided fields will be updated."""
    invoice = await client.patch(f"invoices/{params.id}", params.to_params(exclude={"id"}))
    logger.info(f"Updated invoice {params.id}")
    return invoice


@tools.tool(InvoiceId)
async def delete_invoice(client: HarvestClient, params: InvoiceId) -> Dict[str, Any]:
    """Delete an invoice permanently. This action cannot be undone."""
    await client.delete(f"invoices/{params.invoice_id}")
    logger.info(f"Deleted invoice {params.invoice_id}")
    return {"message": f"Invoice {params.invoice_id} deleted successfully"}
