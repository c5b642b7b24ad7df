import logging
from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field, StrictBool, StrictInt

from harvest_mcp.client import HarvestClient
from harvest_mcp.registry import ToolGroup
from harvest_mcp.validation import Amount, EmptyInput, IsoDateTime, NonEmptyStr, PaginatedQuery, PositiveId, ToolInput

logger = logging.getLogger("harvest-mcp.tools.users")

tools = ToolGroup("users")

# 40 hours, in seconds
DEFAULT_WEEKLY_CAPACITY = 144000


class UserQuery(PaginatedQuery):
    is_active: Optional[StrictBool] = Field(None, description="Filter by active status")
    updated_since: Optional[IsoDateTime] = Field(
        None, description="Only return users updated since this ISO 8601 timestamp"
    )


class UserId(ToolInput):
    user_id: PositiveId = Field(..., description="The ID of the user")


class CreateUser(ToolInput):
    first_name: NonEmptyStr = Field(..., description="The first name of the user")
    last_name: NonEmptyStr = Field(..., description="The last name of the user")
    email: EmailStr = Field(..., description="The email address of the user")
    telephone: Optional[str] = Field(None, description="The user's telephone number")
    timezone: str = Field("UTC", description="The user's timezone")
    has_access_to_all_future_projects: StrictBool = Field(
        False, description="Whether the user is added to future projects automatically"
    )
    is_contractor: StrictBool = Field(False, description="Whether the user is a contractor")
    is_active: StrictBool = Field(True, description="Whether the user is active")
    weekly_capacity: StrictInt = Field(
        DEFAULT_WEEKLY_CAPACITY, ge=0, description="Available working time per week, in seconds"
    )
    default_hourly_rate: Optional[Amount] = Field(None, description="Default billable rate for the user")
    cost_rate: Optional[Amount] = Field(None, description="Cost rate for the user")
    roles: Optional[List[str]] = Field(None, description="Descriptive role names assigned to the user")
    access_roles: Optional[List[str]] = Field(
        None, description="Permission roles, e.g. administrator, manager, member"
    )


class UpdateUser(ToolInput):
    id: PositiveId = Field(..., description="The ID of the user to update")
    first_name: Optional[NonEmptyStr] = None
    last_name: Optional[NonEmptyStr] = None
    email: Optional[EmailStr] = None
    telephone: Optional[str] = None
    timezone: Optional[str] = None
    has_access_to_all_future_projects: Optional[StrictBool] = None
    is_contractor: Optional[StrictBool] = None
    is_active: Optional[StrictBool] = None
    weekly_capacity: Optional[StrictInt] = Field(None, ge=0)
    default_hourly_rate: Optional[Amount] = None
    cost_rate: Optional[Amount] = None
    roles: Optional[List[str]] = None
    access_roles: Optional[List[str]] = None


@tools.tool(UserQuery)
async def list_users(client: HarvestClient, params: UserQuery) -> Dict[str, Any]:
    """List all users in the account with optional filtering by active status."""
    users = await client.get("users", params.to_params())
    logger.info(f"Retrieved {len(users.get('users', []))} users")
    return users


@tools.tool(UserId)
async def get_user(client: HarvestClient, params: UserId) -> Dict[str, Any]:
    """Retrieve details of a specific user by ID."""
    return await client.get(f"users/{params.user_id}")


@tools.tool(EmptyInput)
async def get_current_user(client: HarvestClient, params: EmptyInput) -> Dict[str, Any]:
    """Retrieve the currently authenticated user."""
    user = await client.get("users/me")
    logger.info(f"Authenticated as user {user.get('id')}")
    return user


@tools.tool(CreateUser)
async def create_user(client: HarvestClient, params: CreateUser) -> Dict[str, Any]:
    """Create a new user. Requires first_name, last_name and email."""
    user = await client.post("users", params.to_params())
    logger.info(f"Created user {user.get('id')}")
    return user


@tools.tool(UpdateUser)
async def update_user(client: HarvestClient, params: UpdateUser) -> Dict[str, Any]:
    """Update an existing user. Only provided fields will be updated."""
    user = await client.patch(f"users/{params.id}", params.to_params(exclude={"id"}))
    logger.info(f"Updated user {params.id}")
    return user


@tools.tool(UserId)
async def delete_user(client: HarvestClient, params: UserId) -> Dict[str, Any]:
    """Delete a user. Only possible if the user has no time entries or expenses."""
    await client.delete(f"users/{params.user_id}")
    logger.info(f"Deleted user {params.user_id}")
    return {"message": f"User {params.user_id} deleted successfully"}
