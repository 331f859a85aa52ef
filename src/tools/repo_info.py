"""MCP tool describing a single repository.

`repo_info` returns a structured RepoInfoResult and raises on failure;
`format_repo_info` renders it for the 'repo_info' tool.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.queries import REPO_INFO_QUERY
from core.errors import ExternalServiceError, NotFoundError, NotFoundKind, ValidationError
from core.formatting import error_message, first_non_blank
from core.interfaces import GraphQLClient
from core.models import RepoCloneStatus, RepoInfoResult, RepoInfoStats


def derive_clone_status(mirror_info: Optional[Mapping[str, Any]]) -> RepoCloneStatus:
    if mirror_info is None:
        return RepoCloneStatus(state="UNKNOWN")
    if mirror_info.get("cloned"):
        return RepoCloneStatus(state="CLONED")
    if mirror_info.get("cloneInProgress"):
        return RepoCloneStatus(state="CLONING", progress=first_non_blank(mirror_info.get("cloneProgress")))
    return RepoCloneStatus(state="NOT_CLONED")


def _format_clone_status(status: RepoCloneStatus) -> str:
    if status.state == "CLONED":
        return "Cloned"
    if status.state == "CLONING":
        return f"Cloning ({status.progress or 'in progress'})"
    if status.state == "NOT_CLONED":
        return "Not cloned"
    return "Unknown"


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def format_repo_info(result: RepoInfoResult) -> str:
    stats = result.stats
    lines = [
        f"Repository: {result.name}",
        f"URL: {result.url}",
        f"Description: {result.description or 'No description provided.'}",
        f"Default Branch: {result.default_branch or 'Not set'}",
        f"Visibility: {'Private' if stats.is_private else 'Public'}",
        f"Fork: {_yes_no(stats.is_fork)}",
        f"Archived: {_yes_no(stats.is_archived)}",
        f"Clone Status: {_format_clone_status(result.clone_status)}",
    ]

    details: List[str] = []
    if stats.viewer_can_administer is not None:
        details.append(f"Can Administer: {_yes_no(stats.viewer_can_administer)}")
    if stats.disk_usage is not None:
        details.append(f"Disk Usage: {stats.disk_usage} KB")
    if stats.updated_at:
        details.append(f"Last Updated: {stats.updated_at}")

    if details:
        lines.extend(["", "Repository Stats:"])
        lines.extend(f"- {d}" for d in details)

    return "\n".join(lines) + "\n"


async def repo_info(client: GraphQLClient, *, name: str) -> RepoInfoResult:
    name_clean = (name or "").strip()
    if not name_clean:
        raise ValidationError("Repository name is required")

    try:
        data = await client.query(REPO_INFO_QUERY, {"name": name_clean})
    except Exception as e:
        raise ExternalServiceError(f"Error fetching repository info: {error_message(e)}") from e

    repository = data.get("repository")
    if repository is None:
        raise NotFoundError(f"Repository not found: {name_clean}", kind=NotFoundKind.REPOSITORY)

    viewer_can_administer = repository.get("viewerCanAdminister")
    disk_usage = repository.get("diskUsage")

    return RepoInfoResult(
        name=repository.get("name") or name_clean,
        description=first_non_blank(repository.get("description")),
        url=repository.get("url") or "",
        default_branch=(repository.get("defaultBranch") or {}).get("displayName"),
        clone_status=derive_clone_status(repository.get("mirrorInfo")),
        stats=RepoInfoStats(
            is_private=bool(repository.get("isPrivate")),
            is_fork=bool(repository.get("isFork")),
            is_archived=bool(repository.get("isArchived")),
            viewer_can_administer=viewer_can_administer if isinstance(viewer_can_administer, bool) else None,
            disk_usage=disk_usage if isinstance(disk_usage, int) and not isinstance(disk_usage, bool) else None,
            updated_at=repository.get("updatedAt"),
        ),
    )


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="repo_info")
    async def repo_info_tool(name: str) -> str:
        """Describe a repository: URL, default branch, visibility, clone status and stats.

        Params:
          - name: full repository name (e.g. "github.com/sourcegraph/sourcegraph").

        Raises:
          NotFoundError when the repository does not exist, ExternalServiceError
          when the request fails.
        """
        result = await repo_info(sourcegraph_client, name=name)
        return format_repo_info(result)
