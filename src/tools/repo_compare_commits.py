"""MCP tool comparing two revisions of a repository.

Registers 'repo_compare_commits', which summarises the commits between
base and head and the file diffs with stats and truncated hunks.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.queries import REPO_COMPARISON_QUERY
from core.formatting import error_message, first_non_blank
from core.interfaces import GraphQLClient


DEFAULT_COMMIT_LIMIT = 20
DEFAULT_DIFF_LIMIT = 20
MAX_HUNK_LINES = 10
ELLIPSIS = "…"
EMPTY_START = "∅"


def resolve_author(author: Optional[Mapping[str, Any]]) -> str:
    if not author:
        return "Unknown"
    person = author.get("person") or {}
    name = first_non_blank(person.get("displayName"), person.get("name"), person.get("email"))
    date = first_non_blank(author.get("date"))
    if name and date:
        return f"{name} ({date})"
    return name or date or "Unknown"


def format_range(hunk_range: Optional[Mapping[str, Any]], prefix: str) -> str:
    start = (hunk_range or {}).get("startLine")
    if start is None:
        return f"{prefix}{EMPTY_START}"
    lines = (hunk_range or {}).get("lines")
    if lines is None:
        return f"{prefix}{start}"
    return f"{prefix}{start},{lines}"


def describe_diff(diff: Mapping[str, Any]) -> str:
    old_path = diff.get("oldPath")
    new_path = diff.get("newPath")
    if old_path and new_path and old_path != new_path:
        return f"renamed from {old_path} to {new_path}"
    if not old_path and new_path:
        return f"added {new_path}"
    if old_path and not new_path:
        return f"deleted {old_path}"
    target = new_path or old_path
    return f"modified {target}" if target else "modified unknown file"


def format_stats(stat: Optional[Mapping[str, Any]]) -> str:
    if stat is None:
        return "Stats: unavailable."

    parts: List[str] = []
    for key, sign in (("added", "+"), ("changed", "~"), ("deleted", "-")):
        value = stat.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            parts.append(f"{sign}{value}")

    return f"Stats: {' '.join(parts)}" if parts else "Stats: unavailable."


def summarise_hunk(hunk: Mapping[str, Any], index: int) -> List[str]:
    old_label = format_range(hunk.get("oldRange"), "-")
    new_label = format_range(hunk.get("newRange"), "+")
    out = [f"     Hunk {index + 1}: {old_label} {new_label}"]

    body = (hunk.get("body") or "").replace("\r\n", "\n").replace("\r", "\n")
    body_lines = body.split("\n")
    out.extend(f"       {line}" for line in body_lines[:MAX_HUNK_LINES])
    if len(body_lines) > MAX_HUNK_LINES:
        out.append(f"       {ELLIPSIS}")
    return out


def summarise_file_diff(diff: Mapping[str, Any], index: int) -> List[str]:
    out = [
        f"  {index + 1}. {describe_diff(diff)}",
        f"     {format_stats(diff.get('stat'))}",
    ]

    hunks = [h for h in diff.get("hunks") or [] if h]
    if not hunks:
        out.append("     No diff hunks available (file may be binary or diff omitted).")
        return out

    for i, hunk in enumerate(hunks):
        out.extend(summarise_hunk(hunk, i))
    return out


def summarise_commit(commit: Mapping[str, Any], index: int) -> List[str]:
    identifier = commit.get("abbreviatedOID") or commit.get("oid") or "unknown"
    subject = first_non_blank(commit.get("subject")) or "(no subject)"
    out = [
        f"  {index + 1}. {identifier} - {subject}",
        f"     Author: {resolve_author(commit.get('author'))}",
    ]
    if commit.get("url"):
        out.append(f"     URL: {commit['url']}")
    return out


def _total(connection: Mapping[str, Any]) -> str:
    total = connection.get("totalCount")
    return str(total) if total is not None else "unknown"


async def repo_compare_commits(
    client: GraphQLClient,
    *,
    repo: str,
    base_rev: str,
    head_rev: str,
) -> str:
    repo_clean = (repo or "").strip()
    base = (base_rev or "").strip()
    head = (head_rev or "").strip()

    if not repo_clean:
        return "Repository name is required."
    if not base:
        return "Base revision is required for comparison."
    if not head:
        return "Head revision is required for comparison."

    variables = {
        "name": repo_clean,
        "base": base,
        "head": head,
        "firstCommits": DEFAULT_COMMIT_LIMIT,
        "firstDiffs": DEFAULT_DIFF_LIMIT,
    }

    try:
        data = await client.query(REPO_COMPARISON_QUERY, variables)

        repository = data.get("repository")
        if not repository:
            return f"Repository not found: {repo_clean}"

        comparison = repository.get("comparison")
        if not comparison:
            return f"No comparison available between {base} and {head} in {repo_clean}."

        lines = [
            f"Repository: {repository.get('name') or repo_clean}",
            f"Base Revision: {base}",
            f"Head Revision: {head}",
            "",
        ]

        commits = comparison.get("commits") or {}
        commit_nodes = [c for c in commits.get("nodes") or [] if c]
        lines.append(f"Commits: showing {len(commit_nodes)} of {_total(commits)} total")
        if not commit_nodes:
            lines.append("  No commits found in this comparison.")
        for i, commit in enumerate(commit_nodes):
            lines.extend(summarise_commit(commit, i))

        lines.append("")

        diffs = comparison.get("fileDiffs") or {}
        diff_nodes = [d for d in diffs.get("nodes") or [] if d]
        lines.append(f"File Diffs: showing {len(diff_nodes)} of {_total(diffs)} total")
        if not diff_nodes:
            lines.append("  No file changes detected between the revisions.")
        for i, diff in enumerate(diff_nodes):
            lines.extend(summarise_file_diff(diff, i))

        lines.append("")
        return "\n".join(lines) + "\n"
    except Exception as e:
        return f"Error comparing revisions: {error_message(e)}"


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="repo_compare_commits")
    async def repo_compare_commits_tool(repo: str, base_rev: str, head_rev: str) -> str:
        """Compare two revisions and summarise commits and file diffs.

        Params:
          - repo: full repository name.
          - base_rev: base revision, branch, tag or commit.
          - head_rev: head revision to compare against base.
        """
        return await repo_compare_commits(
            sourcegraph_client, repo=repo, base_rev=base_rev, head_rev=head_rev
        )
