import logging
from typing import Any, Dict

from harvest_mcp.client import HarvestClient
from harvest_mcp.registry import ToolGroup
from harvest_mcp.validation import EmptyInput

logger = logging.getLogger("harvest-mcp.tools.company")

tools = ToolGroup("company")


@tools.tool()
async def get_company(client: HarvestClient, params: EmptyInput) -> Dict[str, Any]:
    """Retrieve company information and settings for the authenticated account.

    Returns comprehensive company details including billing configuration,
    time tracking preferences (such as wants_timestamp_timers), and enabled features.
    """
    company = await client.get("company")
    logger.info(f"Retrieved company {company.get('name')}")
    return company
