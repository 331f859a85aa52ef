"""MCP tool searching symbol definitions.

Registers 'search_symbols'. Symbol type names go through the alias table in
`clients.sourcegraph.inputs`; names it does not know are reported back as
ignored filters instead of failing the search.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.inputs import build_symbol_search_query, normalize_limit, resolve_symbol_kinds
from clients.sourcegraph.queries import SYMBOL_SEARCH_QUERY
from core.formatting import error_message
from core.interfaces import GraphQLClient


DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def to_one_based(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value + 1


def _format_symbol(symbol: Mapping[str, Any], index: int) -> List[str]:
    lines = [
        f"Result {index + 1}:",
        f"Name: {symbol.get('name') or 'unknown'}",
        f"Kind: {symbol.get('kind') or 'unknown'}",
        f"Language: {symbol.get('language') or 'unknown'}",
    ]
    if symbol.get("containerName"):
        lines.append(f"Container: {symbol['containerName']}")

    location = symbol.get("location") or {}
    resource = location.get("resource") or {}
    repository_name = (resource.get("repository") or {}).get("name")
    if repository_name:
        lines.append(f"Repository: {repository_name}")
    if resource.get("path"):
        lines.append(f"File: {resource['path']}")

    lines.append(f"URL: {symbol.get('url') or 'unknown'}")

    start = (location.get("range") or {}).get("start") or {}
    line = to_one_based(start.get("line"))
    column = to_one_based(start.get("character"))
    if line is not None:
        lines.append(f"Line: {line}")
    if column is not None:
        lines.append(f"Column: {column}")

    lines.append("")
    return lines


async def search_symbols(
    client: GraphQLClient,
    *,
    query: str,
    types: Optional[List[str]] = None,
    limit: Any = None,
    cursor: Optional[str] = None,
) -> str:
    accepted, ignored = resolve_symbol_kinds(types)
    limit_clean = normalize_limit(limit, default=DEFAULT_LIMIT, maximum=MAX_LIMIT)
    search_query = build_symbol_search_query(query, accepted, limit_clean)

    variables: Dict[str, Any] = {
        "query": search_query,
        "cursor": cursor if cursor and cursor.strip() else None,
    }

    try:
        data = await client.query(SYMBOL_SEARCH_QUERY, variables)
        results = (data.get("search") or {}).get("results") or {}

        lines = ["Symbol Search Results", f"Query: {query}"]
        if accepted:
            lines.append(f"Type Filters: {', '.join(accepted)}")
        if ignored:
            lines.append(f"Ignored Type Filters: {', '.join(ignored)}")
        lines.append(f"Requested: {limit_clean}")
        lines.append(f"Match Count: {results.get('matchCount') or 0}")

        page_info = results.get("pageInfo")
        if page_info:
            has_next = bool(page_info.get("hasNextPage"))
            lines.append(f"Has Next Page: {'yes' if has_next else 'no'}")
            if has_next and page_info.get("endCursor"):
                lines.append(f"Next Page Cursor: {page_info['endCursor']}")

        lines.append("")
        if results.get("limitHit"):
            lines.extend([f"Note: Result limit hit, showing first {limit_clean} symbols", ""])

        symbols = [
            r["symbol"]
            for r in results.get("results") or []
            if r and r.get("__typename") == "SymbolSearchResult" and r.get("symbol")
        ]
        if not symbols:
            lines.append("No symbols found.")
            return "\n".join(lines) + "\n"

        for i, symbol in enumerate(symbols):
            lines.extend(_format_symbol(symbol, i))

        return "\n".join(lines) + "\n"
    except Exception as e:
        return f"Error searching symbols: {error_message(e)}"


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="search_symbols")
    async def search_symbols_tool(
        query: str,
        types: Optional[List[str]] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> str:
        """Search for symbol definitions (functions, classes, variables, ...).

        Params:
          - query: symbol name or pattern, optionally with repo:/file: filters.
          - types: symbol kinds such as "function", "class", "method"; aliases
            like "func" or "const" are accepted, unknown names are ignored.
          - limit: maximum symbols (default: 10, max: 100).
          - cursor: "Next Page Cursor" from a previous call.
        """
        return await search_symbols(
            sourcegraph_client, query=query, types=types, limit=limit, cursor=cursor
        )
