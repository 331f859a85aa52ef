"""MCP tool that lists a repository's branches.

Registers 'repo_branches'. Branches are collected page by page with the
`after` cursor until the requested limit is reached or the server has no
further pages; each page asks for at most MAX_PAGE_SIZE nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.inputs import normalize_limit
from clients.sourcegraph.queries import REPO_BRANCHES_QUERY
from core.formatting import error_message, first_non_blank
from core.interfaces import GraphQLClient
from core.log import get_logger


DEFAULT_LIMIT = 20
MAX_LIMIT = 100
MAX_PAGE_SIZE = 50

log = get_logger("repo_branches")


@dataclass
class BranchPage:
    """Accumulated result of the pagination walk.

    `repository` is None when the repository could not be found.
    """

    repository: Optional[Mapping[str, Any]] = None
    branches: List[Mapping[str, Any]] = field(default_factory=list)
    more_available: bool = False
    requests: int = 0


async def collect_branches(
    client: GraphQLClient,
    *,
    repo: str,
    limit: int,
    query: Optional[str] = None,
) -> BranchPage:
    page = BranchPage()
    after: Optional[str] = None

    while len(page.branches) < limit:
        variables: Dict[str, Any] = {
            "name": repo,
            "first": min(limit - len(page.branches), MAX_PAGE_SIZE),
        }
        if query:
            variables["query"] = query
        if after:
            variables["after"] = after

        data = await client.query(REPO_BRANCHES_QUERY, variables)
        page.requests += 1

        repository = data.get("repository")
        if not repository:
            return BranchPage(requests=page.requests)
        if page.repository is None:
            page.repository = repository

        # a null connection is read as an empty, final page
        connection = repository.get("branches") or {}
        page.branches.extend(node for node in connection.get("nodes") or [] if node)

        page_info = connection.get("pageInfo") or {}
        has_next = bool(page_info.get("hasNextPage"))
        end_cursor = page_info.get("endCursor")

        if len(page.branches) >= limit:
            page.more_available = has_next
            break

        if has_next and end_cursor:
            after = end_cursor
        else:
            page.more_available = False
            break

    del page.branches[limit:]
    log.debug("branches_collected", repo=repo, count=len(page.branches), requests=page.requests)
    return page


def _format_branch(branch: Mapping[str, Any], index: int) -> List[str]:
    abbreviated = first_non_blank(branch.get("abbrevName"), branch.get("abbreviatedName"))
    label = first_non_blank(branch.get("displayName"), abbreviated, branch.get("name")) or "unknown"

    lines = [f"Branch {index + 1}: {label}"]
    if branch.get("name"):
        lines.append(f"  Name: {branch['name']}")
    if abbreviated:
        lines.append(f"  Abbreviated: {abbreviated}")

    target = branch.get("target") or {}
    target_oid = target.get("abbreviatedOID") or target.get("oid")
    if target_oid:
        lines.append(f"  Target: {target_oid}")

    if branch.get("url"):
        lines.append(f"  URL: {branch['url']}")

    lines.append("")
    return lines


async def repo_branches(
    client: GraphQLClient,
    *,
    repo: str,
    query: Optional[str] = None,
    limit: Optional[int] = None,
) -> str:
    query_clean = (query or "").strip() or None
    limit_clean = normalize_limit(limit, default=DEFAULT_LIMIT, maximum=MAX_LIMIT)

    try:
        page = await collect_branches(client, repo=repo, limit=limit_clean, query=query_clean)

        if page.repository is None:
            return f"Repository not found: {repo}"

        repository = page.repository
        lines = [
            f"Repository: {repository.get('name') or repo}",
            f"URL: {repository.get('url') or 'unknown'}",
        ]

        default_branch = (repository.get("defaultBranch") or {}).get("displayName")
        if default_branch:
            lines.append(f"Default Branch: {default_branch}")
        if query_clean:
            lines.append(f"Filter: {query_clean}")

        lines.extend([f"Returned Branches: {len(page.branches)}", ""])

        if not page.branches:
            lines.append("No branches found.")
            if query_clean:
                lines.append("Try adjusting your filter or increasing the limit.")
            return "\n".join(lines) + "\n"

        for i, branch in enumerate(page.branches):
            lines.extend(_format_branch(branch, i))

        if page.more_available:
            lines.append(f"Note: Additional branches available beyond the {limit_clean} shown.")

        return "\n".join(lines) + "\n"
    except Exception as e:
        return f"Error fetching branches: {error_message(e)}"


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="repo_branches")
    async def repo_branches_tool(
        repo: str,
        query: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> str:
        """List branches of a repository.

        Params:
          - repo: full repository name.
          - query: optional branch name filter (e.g. "feature/").
          - limit: number of branches to return (default: 20, max: 100).
        """
        return await repo_branches(sourcegraph_client, repo=repo, query=query, limit=limit)
