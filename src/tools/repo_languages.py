"""MCP tool reporting a repository's language breakdown.

Registers 'repo_languages', which returns an indented JSON document whose
shares add up to exactly 1 (ratio) and 100 (percentage).
"""

from __future__ import annotations

import json
from typing import Any, Iterable, List, Mapping, Optional

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.inputs import normalize_revision
from clients.sourcegraph.queries import REPO_LANGUAGES_QUERY
from core.formatting import error_message, first_non_blank, is_finite_number
from core.interfaces import GraphQLClient
from core.models import LanguageBreakdown, RepoLanguagesResult
from core.shares import normalize_shares


def build_breakdown(repo: str, revision: str, stats: Iterable[Optional[Mapping[str, Any]]]) -> RepoLanguagesResult:
    usable = [
        s for s in stats
        if s and is_finite_number(s.get("totalBytes")) and s["totalBytes"] >= 0
    ]
    # sorted() is stable, so equal byte counts keep server order
    usable = sorted(usable, key=lambda s: s["totalBytes"], reverse=True)
    shares = normalize_shares([s["totalBytes"] for s in usable])

    languages: List[LanguageBreakdown] = []
    for stat, share in zip(usable, shares):
        name = stat.get("name") or "Unknown"
        total_lines = stat.get("totalLines")
        languages.append(
            LanguageBreakdown(
                name=name,
                display_name=first_non_blank(stat.get("displayName")) or name,
                total_bytes=stat["totalBytes"],
                share=share,
                color=first_non_blank(stat.get("color")),
                total_lines=total_lines if is_finite_number(total_lines) else None,
            )
        )

    return RepoLanguagesResult(
        repo=repo,
        revision=revision,
        total_bytes=sum(lang.total_bytes for lang in languages),
        languages=tuple(languages),
    )


async def repo_languages(
    client: GraphQLClient,
    *,
    repo: str,
    rev: Optional[str] = None,
) -> str:
    revision = normalize_revision(rev)

    try:
        data = await client.query(REPO_LANGUAGES_QUERY, {"name": repo})
        repository = data.get("repository")
        if not repository:
            return f"Repository not found: {repo}"

        result = build_breakdown(repo, revision, repository.get("languageStatistics") or [])
        return json.dumps(result.to_dict(), indent=2) + "\n"
    except Exception as e:
        return f"Error fetching repository languages: {error_message(e)}"


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="repo_languages")
    async def repo_languages_tool(repo: str, rev: Optional[str] = None) -> str:
        """Language breakdown of a repository as JSON.

        Params:
          - repo: full repository name.
          - rev: revision label echoed in the result (default: "HEAD").

        Returns:
          JSON with repo, revision, total_bytes and languages sorted by bytes,
          each with share.ratio (6 decimals) and share.percentage (2 decimals).
        """
        return await repo_languages(sourcegraph_client, repo=repo, rev=rev)
