import logging
from typing import Any, Dict, Optional

from pydantic import Field, StrictBool

from harvest_mcp.client import HarvestClient
from harvest_mcp.registry import ToolGroup
from harvest_mcp.validation import Currency, IsoDateTime, NonEmptyStr, PaginatedQuery, PositiveId, ToolInput

logger = logging.getLogger("harvest-mcp.tools.clients")

tools = ToolGroup("clients")


class ClientQuery(PaginatedQuery):
    is_active: Optional[StrictBool] = Field(None, description="Filter by active status")
    updated_since: Optional[IsoDateTime] = Field(
        None, description="Only return clients updated since this ISO 8601 timestamp"
    )


class ClientId(ToolInput):
    client_id: PositiveId = Field(..., description="The ID of the client")


class CreateClient(ToolInput):
    name: NonEmptyStr = Field(..., description="A textual description of the client")
    is_active: StrictBool = Field(True, description="Whether the client is active")
    address: Optional[str] = Field(None, description="The physical address for the client")
    currency: Currency = Field("USD", description="The currency code used by the client (e.g. USD, EUR)")


class UpdateClient(ToolInput):
    id: PositiveId = Field(..., description="The ID of the client to update")
    name: Optional[NonEmptyStr] = None
    is_active: Optional[StrictBool] = None
    address: Optional[str] = None
    currency: Optional[Currency] = None


@tools.tool(ClientQuery)
async def list_clients(client: HarvestClient, params: ClientQuery) -> Dict[str, Any]:
    """List all clients with optional filtering by active status."""
    clients = await client.get("clients", params.to_params())
    logger.info(f"Retrieved {len(clients.get('clients', []))} clients")
    return clients


@tools.tool(ClientId)
async def get_client(client: HarvestClient, params: ClientId) -> Dict[str, Any]:
    """Retrieve details of a specific client by ID."""
    return await client.get(f"clients/{params.client_id}")


@tools.tool(CreateClient)
async def create_client(client: HarvestClient, params: CreateClient) -> Dict[str, Any]:
    """Create a new client. Requires a name; currency defaults to USD."""
    created = await client.post("clients", params.to_params())
    logger.info(f"Created client {created.get('id')} ({params.name})")
    return created


@tools.tool(UpdateClient)
async def update_client(client: HarvestClient, params: UpdateClient) -> Dict[str, Any]:
    """Update an existing client. Only provided fields will be updated."""
    updated = await client.patch(f"clients/{params.id}", params.to_params(exclude={"id"}))
    logger.info(f"Updated client {params.id}")
    return updated


@tools.tool(ClientId)
async def delete_client(client: HarvestClient, params: ClientId) -> Dict[str, Any]:
    """Delete a client.

    Only possible if the client has no projects, invoices, or estimates.
    """
    await client.delete(f"clients/{params.client_id}")
    logger.info(f"Deleted client {params.client_id}")
    return {"message": f"Client {params.client_id} deleted successfully"}
