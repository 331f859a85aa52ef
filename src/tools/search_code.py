"""MCP tool running a Sourcegraph code search.

Registers 'search_code'. Results come back structured: file, repository and
commit matches are partitioned by GraphQL typename, alongside the dynamic
filters and the cloning/timed-out/missing repository status.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.inputs import build_code_search_query, normalize_limit
from clients.sourcegraph.queries import CODE_SEARCH_QUERY
from core.errors import ExternalServiceError, ValidationError
from core.formatting import error_message, first_non_blank
from core.interfaces import GraphQLClient
from core.log import get_logger
from core.models import (
    SearchCodeResult,
    SearchCommitMatch,
    SearchFileMatch,
    SearchFilter,
    SearchLineMatch,
    SearchMissingRepo,
    SearchRepositoryMatch,
    SearchStatus,
)


SearchVersion = Literal["V1", "V2", "V3"]

DEFAULT_LIMIT = 10
MAX_LIMIT = 500
DEFAULT_VERSION: SearchVersion = "V3"

log = get_logger("search_code")


def ensure_query(raw_query: Optional[str]) -> str:
    query = (raw_query or "").strip()
    if not query:
        raise ValidationError("Search query must not be empty.")
    return query


def _map_line_matches(matches: Optional[List[Mapping[str, Any]]]) -> Tuple[SearchLineMatch, ...]:
    out: List[SearchLineMatch] = []
    for match in matches or []:
        if not match:
            continue
        offsets = tuple(
            (pair[0], pair[1]) for pair in match.get("offsetAndLengths") or [] if pair and len(pair) >= 2
        )
        out.append(
            SearchLineMatch(
                line_number=match.get("lineNumber") or 0,
                preview=match.get("preview") or "",
                offsets=offsets,
            )
        )
    return tuple(out)


def map_file_match(result: Mapping[str, Any]) -> Optional[SearchFileMatch]:
    repository = result.get("repository")
    file = result.get("file")
    if not repository or not file:
        return None

    return SearchFileMatch(
        repository=repository.get("name") or "",
        repository_url=repository.get("url") or "",
        path=file.get("path") or "",
        url=file.get("url") or "",
        line_matches=_map_line_matches(result.get("lineMatches")),
    )


def map_commit_match(result: Mapping[str, Any]) -> Optional[SearchCommitMatch]:
    commit = result.get("commit")
    if not commit:
        return None

    repository = commit.get("repository") or {}
    preview = result.get("messagePreview") or {}
    return SearchCommitMatch(
        repository=repository.get("name") or "unknown",
        repository_url=repository.get("url"),
        oid=commit.get("oid") or "",
        abbreviated_oid=commit.get("abbreviatedOID"),
        url=commit.get("url") or "",
        subject=commit.get("subject"),
        message_preview=first_non_blank(preview.get("value")),
    )


def _map_status(results: Mapping[str, Any]) -> SearchStatus:
    return SearchStatus(
        cloning=tuple(r.get("name") or "" for r in results.get("cloning") or [] if r),
        timedout=tuple(r.get("name") or "" for r in results.get("timedout") or [] if r),
        missing=tuple(
            SearchMissingRepo(name=r.get("name") or "", reason=r.get("reason"), url=r.get("url"))
            for r in results.get("missing") or []
            if r
        ),
    )


def build_search_result(
    *,
    query: str,
    executed_query: str,
    limit: int,
    version: str,
    results: Mapping[str, Any],
) -> SearchCodeResult:
    file_matches: List[SearchFileMatch] = []
    repository_matches: List[SearchRepositoryMatch] = []
    commit_matches: List[SearchCommitMatch] = []

    for result in results.get("results") or []:
        if not result:
            continue
        typename = result.get("__typename")

        if typename == "FileMatch":
            mapped = map_file_match(result)
            if mapped:
                file_matches.append(mapped)
        elif typename == "Repository":
            repository_matches.append(
                SearchRepositoryMatch(
                    name=result.get("name") or "",
                    url=result.get("url") or "",
                    description=result.get("description"),
                )
            )
        elif typename == "CommitSearchResult":
            mapped_commit = map_commit_match(result)
            if mapped_commit:
                commit_matches.append(mapped_commit)

    dynamic_filters = tuple(
        SearchFilter(
            value=f.get("value") or "",
            label=f.get("label") or "",
            count=f.get("count") or 0,
            kind=f.get("kind") or "",
        )
        for f in results.get("dynamicFilters") or []
        if f
    )

    return SearchCodeResult(
        query=query,
        executed_query=executed_query,
        limit=limit,
        version=version,
        match_count=results.get("matchCount") or 0,
        approximate_result_count=str(results.get("approximateResultCount") or "0"),
        limit_hit=bool(results.get("limitHit")),
        dynamic_filters=dynamic_filters,
        file_matches=tuple(file_matches),
        repository_matches=tuple(repository_matches),
        commit_matches=tuple(commit_matches),
        status=_map_status(results),
    )


async def search_code(
    client: GraphQLClient,
    *,
    query: str,
    limit: Any = None,
    version: Optional[str] = None,
    timeout: Any = None,
) -> SearchCodeResult:
    """Run a code search and return the partitioned matches.

    Raises ValidationError for a blank query (no request is made) and
    ExternalServiceError prefixed "Code search failed:" for anything else.
    """
    query_clean = ensure_query(query)
    limit_clean = normalize_limit(limit, default=DEFAULT_LIMIT, maximum=MAX_LIMIT)
    version_clean = version or DEFAULT_VERSION
    executed_query = build_code_search_query(query_clean, limit_clean, timeout)

    try:
        data = await client.query(CODE_SEARCH_QUERY, {"query": executed_query, "version": version_clean})
        results = (data.get("search") or {}).get("results")
        if results is None:
            raise ExternalServiceError("search returned no results object")

        result = build_search_result(
            query=query_clean,
            executed_query=executed_query,
            limit=limit_clean,
            version=version_clean,
            results=results,
        )
    except Exception as e:
        raise ExternalServiceError(f"Code search failed: {error_message(e)}") from e

    log.debug(
        "code_search_done",
        executed_query=executed_query,
        files=len(result.file_matches),
        repositories=len(result.repository_matches),
        commits=len(result.commit_matches),
    )
    return result


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="search_code")
    async def search_code_tool(
        query: str,
        limit: Optional[int] = None,
        version: Optional[SearchVersion] = None,
        timeout: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Search code across repositories with Sourcegraph query syntax.

        Params:
          - query: search query, e.g. "repo:^github\\.com/org/repo$ lang:go func main".
          - limit: maximum results (default: 10, max: 500); ignored when the
            query already contains count:N.
          - version: search syntax version (default: "V3").
          - timeout: search timeout in milliseconds, added as a timeout: filter.

        Returns:
          {query, executed_query, limit, version, match_count,
          approximate_result_count, limit_hit, dynamic_filters, file_matches,
          repository_matches, commit_matches, status}.
        """
        result = await search_code(
            sourcegraph_client, query=query, limit=limit, version=version, timeout=timeout
        )
        return result.to_dict()
