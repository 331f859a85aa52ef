"""MCP tool that lists repositories known to the Sourcegraph instance.

Registers 'repo_list', a single page of repositories with a summary header
and the cursor for the next page.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.inputs import normalize_limit
from clients.sourcegraph.queries import REPOSITORY_LIST_QUERY
from core.formatting import error_message
from core.interfaces import GraphQLClient


RepositoryOrderField = Literal["REPOSITORY_NAME", "STARS", "UPDATED_AT", "COMMIT_DATE", "CREATED_AT"]
OrderDirection = Literal["ASC", "DESC"]

DEFAULT_FIRST = 20
MAX_FIRST = 100
DEFAULT_ORDER_FIELD: RepositoryOrderField = "REPOSITORY_NAME"
DEFAULT_ORDER_DIRECTION: OrderDirection = "ASC"


def build_list_variables(
    *,
    query: Optional[str] = None,
    first: Any = None,
    after: Optional[str] = None,
    order_field: Optional[str] = None,
    order_direction: Optional[str] = None,
) -> Dict[str, Any]:
    variables: Dict[str, Any] = {
        "first": normalize_limit(first, default=DEFAULT_FIRST, maximum=MAX_FIRST),
        "orderBy": {
            "field": order_field or DEFAULT_ORDER_FIELD,
            "direction": order_direction or DEFAULT_ORDER_DIRECTION,
        },
    }

    query_clean = (query or "").strip()
    if query_clean:
        variables["query"] = query_clean
    if after:
        variables["after"] = after
    return variables


def _format_status(repository: Mapping[str, Any]) -> Optional[str]:
    statuses: List[str] = []
    if repository.get("isPrivate"):
        statuses.append("private")
    if repository.get("isFork"):
        statuses.append("fork")
    if repository.get("isArchived"):
        statuses.append("archived")
    if repository.get("viewerCanAdminister"):
        statuses.append("admin")

    mirror = repository.get("mirrorInfo")
    if mirror is not None:
        if not mirror.get("cloned"):
            statuses.append("not cloned")
        if mirror.get("cloneInProgress"):
            statuses.append("cloning")

    return f"Status: {', '.join(statuses)}" if statuses else None


def _format_repository(repository: Mapping[str, Any], index: int) -> List[str]:
    lines = [
        f"Repository {index + 1}:",
        f"Name: {repository.get('name') or 'unknown'}",
        f"URL: {repository.get('url') or 'unknown'}",
    ]

    description = repository.get("description")
    if description:
        lines.append(f"Description: {description}")

    status = _format_status(repository)
    if status:
        lines.append(status)

    default_branch = (repository.get("defaultBranch") or {}).get("displayName")
    if default_branch:
        lines.append(f"Default Branch: {default_branch}")

    lines.append(f"Updated At: {repository.get('updatedAt') or 'unknown'}")
    return lines


async def repo_list(
    client: GraphQLClient,
    *,
    query: Optional[str] = None,
    first: Optional[int] = None,
    after: Optional[str] = None,
    order_field: Optional[str] = None,
    order_direction: Optional[str] = None,
) -> str:
    variables = build_list_variables(
        query=query,
        first=first,
        after=after,
        order_field=order_field,
        order_direction=order_direction,
    )

    try:
        data = await client.query(REPOSITORY_LIST_QUERY, variables)
        repositories = data.get("repositories") or {}
        nodes = [n for n in repositories.get("nodes") or [] if n]
        page_info = repositories.get("pageInfo") or {}
        has_next = bool(page_info.get("hasNextPage"))
        total = repositories.get("totalCount")

        lines = [
            "Repository List",
            f"Total Count: {total if total is not None else 'unknown'}",
            f"Requested: {variables['first']}",
        ]
        if "query" in variables:
            lines.append(f"Query: {variables['query']}")
        lines.append(f"Has Next Page: {'yes' if has_next else 'no'}")
        lines.append(f"Order: {variables['orderBy']['field']} ({variables['orderBy']['direction']})")

        if "after" in variables:
            lines.append(f"Starting Cursor: {variables['after']}")

        end_cursor = page_info.get("endCursor")
        if has_next and end_cursor:
            lines.append(f"Next Page Cursor: {end_cursor}")

        if not nodes:
            lines.extend(["", "No repositories found."])
            return "\n".join(lines) + "\n"

        for i, repository in enumerate(nodes):
            lines.append("")
            lines.extend(_format_repository(repository, i))

        return "\n".join(lines) + "\n"
    except Exception as e:
        return f"Error listing repositories: {error_message(e)}"


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="repo_list")
    async def repo_list_tool(
        query: Optional[str] = None,
        first: Optional[int] = None,
        after: Optional[str] = None,
        order_field: Optional[RepositoryOrderField] = None,
        order_direction: Optional[OrderDirection] = None,
    ) -> str:
        """List repositories, one page at a time.

        Params:
          - query: filter repositories by name or pattern.
          - first: page size (default: 20, max: 100).
          - after: cursor from a previous page's "Next Page Cursor".
          - order_field: REPOSITORY_NAME (default), STARS, UPDATED_AT, COMMIT_DATE, CREATED_AT.
          - order_direction: ASC (default) or DESC.
        """
        return await repo_list(
            sourcegraph_client,
            query=query,
            first=first,
            after=after,
            order_field=order_field,
            order_direction=order_direction,
        )
