"""Tool catalogue, one module per Harvest resource category."""

from harvest_mcp.client import HarvestClient
from harvest_mcp.registry import ToolRegistry
from harvest_mcp.tools import (
    clients,
    company,
    estimates,
    expenses,
    invoices,
    projects,
    reports,
    tasks,
    time_entries,
    users,
)

GROUPS = (
    company.tools,
    time_entries.tools,
    projects.tools,
    tasks.tools,
    clients.tools,
    users.tools,
    invoices.tools,
    expenses.tools,
    estimates.tools,
    reports.tools,
)


def build_registry(client: HarvestClient) -> ToolRegistry:
    registry = ToolRegistry(client)
    for group in GROUPS:
        registry.include(group)
    return registry
