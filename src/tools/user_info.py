"""MCP tool returning the authenticated Sourcegraph user."""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.queries import CURRENT_USER_QUERY
from core.errors import ExternalServiceError, NotFoundError, NotFoundKind
from core.formatting import error_message
from core.interfaces import GraphQLClient
from core.models import Organization, UserInfoResult


NO_USER = "No authenticated user found. Please check your access token."


async def user_info(client: GraphQLClient) -> UserInfoResult:
    try:
        data = await client.query(CURRENT_USER_QUERY)
    except Exception as e:
        raise ExternalServiceError(f"Failed to fetch user info: {error_message(e)}") from e

    user = data.get("currentUser")
    if not user:
        raise NotFoundError(f"Failed to fetch user info: {NO_USER}", kind=NotFoundKind.USER)

    organizations = (user.get("organizations") or {}).get("nodes") or []
    return UserInfoResult(
        username=user.get("username") or "",
        email=user.get("email"),
        display_name=user.get("displayName"),
        organizations=tuple(
            Organization(name=org.get("name") or "", display_name=org.get("displayName"))
            for org in organizations
            if org
        ),
    )


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="user_info")
    async def user_info_tool() -> Dict[str, Any]:
        """Get the authenticated user's profile and organizations.

        Returns:
          {username, email, display_name, organizations: [{name, display_name}]}.
        """
        result = await user_info(sourcegraph_client)
        return result.to_dict()
