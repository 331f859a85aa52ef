"""MCP tool checking that the Sourcegraph endpoint and token work."""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.queries import SITE_INFO_QUERY
from core.formatting import error_message
from core.interfaces import GraphQLClient
from core.log import get_logger


log = get_logger("connection_test")


async def connection_test(client: GraphQLClient) -> Dict[str, Any]:
    try:
        data = await client.query(SITE_INFO_QUERY)
        site = data.get("site") or {}
        user = data.get("currentUser") or {}
        organizations = (user.get("organizations") or {}).get("nodes") or []

        return {
            "success": True,
            "message": "Successfully connected to Sourcegraph",
            "details": {
                "version": site.get("productVersion"),
                "user": user.get("username"),
                "email": user.get("email"),
                "organizations": [org.get("name") for org in organizations if org],
                "code_intelligence": site.get("hasCodeIntelligence"),
            },
        }
    except Exception as e:
        log.warning("connection_test_failed", error=error_message(e))
        return {"success": False, "message": f"Connection failed: {error_message(e)}"}


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="connection_test")
    async def connection_test_tool() -> Dict[str, Any]:
        """Test the connection to Sourcegraph.

        Returns {success, message, details}; details carries the product
        version and the authenticated user. Never raises.
        """
        return await connection_test(sourcegraph_client)
