"""MCP tool searching commit history."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.inputs import build_commit_search_query, has_filter_value, normalize_limit
from clients.sourcegraph.queries import COMMIT_SEARCH_QUERY
from core.formatting import error_message, first_non_blank, format_date, format_highlighted_value
from core.interfaces import GraphQLClient


DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def _format_commit(result: Mapping[str, Any], index: int) -> List[str]:
    commit = result["commit"]
    repository = (commit.get("repository") or {}).get("name") or "Unknown repository"
    author = commit.get("author") or {}
    person = author.get("person") or {}

    lines = [
        f"Result {index}:",
        f"Repository: {repository}",
        f"Commit: {commit.get('abbreviatedOID') or commit.get('oid') or 'unknown'}",
        f"URL: {commit.get('url') or 'unknown'}",
        f"Author: {first_non_blank(person.get('displayName'), person.get('email')) or 'Unknown author'}",
        f"Date: {format_date(author.get('date'))}",
        f"Subject: {first_non_blank(commit.get('subject')) or '(no subject)'}",
    ]

    body = first_non_blank(commit.get("body"))
    if body:
        lines.extend(["Body:", body])

    message_preview = format_highlighted_value(result.get("messagePreview"))
    if message_preview:
        lines.extend(["Message Preview:", message_preview])

    diff_preview = format_highlighted_value(result.get("diffPreview"))
    if diff_preview:
        lines.extend(["Diff Preview:", diff_preview])

    lines.append("")
    return lines


async def search_commits(
    client: GraphQLClient,
    *,
    query: str,
    author: Optional[str] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    limit: Any = None,
) -> str:
    limit_clean = normalize_limit(limit, default=DEFAULT_LIMIT, maximum=MAX_LIMIT)
    search_query = build_commit_search_query(
        query, author=author, after=after, before=before, limit=limit_clean
    )

    try:
        data = await client.query(COMMIT_SEARCH_QUERY, {"query": search_query})
        results = (data.get("search") or {}).get("results") or {}

        lines = [f"Search Query: {query}"]
        if has_filter_value(author):
            lines.append(f"Author Filter: {author.strip()}")  # type: ignore[union-attr]
        if has_filter_value(after):
            lines.append(f"After: {after.strip()}")  # type: ignore[union-attr]
        if has_filter_value(before):
            lines.append(f"Before: {before.strip()}")  # type: ignore[union-attr]
        lines.extend([f"Result Count: {results.get('matchCount') or 0}", ""])

        if results.get("limitHit"):
            lines.extend([f"Note: Result limit hit, showing first {limit_clean} commits", ""])

        shown = 0
        for result in results.get("results") or []:
            if not result or result.get("__typename") != "CommitSearchResult" or not result.get("commit"):
                continue
            shown += 1
            lines.extend(_format_commit(result, shown))

        if shown == 0:
            lines.append("No commits found.")

        return "\n".join(lines) + "\n"
    except Exception as e:
        return f"Error searching commits: {error_message(e)}"


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="search_commits")
    async def search_commits_tool(
        query: str,
        author: Optional[str] = None,
        after: Optional[str] = None,
        before: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> str:
        """Search commits by message, author and date range.

        Params:
          - query: text to match in commit messages (may include repo: filters).
          - author: author name or email filter.
          - after / before: date bounds such as "2024-01-01" or "2 weeks ago".
          - limit: maximum commits (default: 20, max: 100).
        """
        return await search_commits(
            sourcegraph_client, query=query, author=author, after=after, before=before, limit=limit
        )
