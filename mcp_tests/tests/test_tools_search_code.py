import math

import pytest

from core.errors import ExternalServiceError, ValidationError
from tools import search_code as search_code_tool


def _search_response(results, **extra):
    body = {
        "matchCount": len(results),
        "approximateResultCount": str(len(results)),
        "limitHit": False,
        "dynamicFilters": [],
        "results": results,
        "cloning": [],
        "timedout": [],
        "missing": [],
    }
    body.update(extra)
    return {"search": {"results": body}}


@pytest.mark.asyncio
async def test_search_code_partitions_results(dummy_mcp, fake_client):
    client = fake_client(
        [
            _search_response(
                [
                    {
                        "__typename": "FileMatch",
                        "repository": {"name": "github.com/a/r", "url": "/github.com/a/r"},
                        "file": {"path": "main.go", "url": "/github.com/a/r/-/blob/main.go"},
                        "lineMatches": [{"lineNumber": 4, "preview": "func main() {", "offsetAndLengths": [[0, 4]]}],
                    },
                    {"__typename": "FileMatch", "repository": None, "file": {"path": "x"}},
                    {"__typename": "Repository", "name": "github.com/a/r", "url": "/github.com/a/r", "description": None},
                    {
                        "__typename": "CommitSearchResult",
                        "commit": {
                            "repository": {"name": "github.com/a/r", "url": "/github.com/a/r"},
                            "oid": "abc123",
                            "abbreviatedOID": "abc",
                            "url": "/c/abc",
                            "subject": "Fix",
                        },
                        "messagePreview": {"value": "  Fix it  "},
                    },
                    {"__typename": "CommitSearchResult", "commit": None},
                    {"__typename": "SomethingNew", "name": "ignored"},
                ],
                dynamicFilters=[{"value": "lang:go", "label": "Go", "count": 3, "kind": "lang"}],
                cloning=[{"name": "github.com/a/cloning"}],
                missing=[{"name": "github.com/a/missing", "url": "/github.com/a/missing"}],
            )
        ]
    )
    search_code_tool.register(dummy_mcp, sourcegraph_client=client)

    out = await dummy_mcp.tools["search_code"](query="  func main  ")

    assert client.calls[0][1] == {"query": "func main count:10", "version": "V3"}
    assert out["query"] == "func main"
    assert out["executed_query"] == "func main count:10"
    assert out["limit"] == 10

    assert out["file_matches"] == [
        {
            "repository": "github.com/a/r",
            "repository_url": "/github.com/a/r",
            "path": "main.go",
            "url": "/github.com/a/r/-/blob/main.go",
            "line_matches": [{"line_number": 4, "preview": "func main() {", "offsets": [[0, 4]]}],
        }
    ]
    assert out["repository_matches"] == [{"name": "github.com/a/r", "url": "/github.com/a/r", "description": None}]
    assert len(out["commit_matches"]) == 1
    assert out["commit_matches"][0]["message_preview"] == "Fix it"
    assert out["dynamic_filters"] == [{"value": "lang:go", "label": "Go", "count": 3, "kind": "lang"}]
    assert out["status"]["cloning"] == ["github.com/a/cloning"]
    assert out["status"]["missing"] == [{"name": "github.com/a/missing", "reason": None, "url": "/github.com/a/missing"}]


@pytest.mark.asyncio
@pytest.mark.parametrize("limit,expected", [(math.nan, 10), (99999, 500), (-1, 10), (25, 25)])
async def test_search_code_limit_normalization(fake_client, limit, expected):
    client = fake_client([_search_response([])])
    result = await search_code_tool.search_code(client, query="foo", limit=limit)

    assert result.limit == expected
    assert client.calls[0][1]["query"] == f"foo count:{expected}"


@pytest.mark.asyncio
async def test_search_code_keeps_existing_count_and_adds_timeout(fake_client):
    client = fake_client([_search_response([])])
    result = await search_code_tool.search_code(
        client, query="foo count:3", version="V2", timeout=2500
    )

    assert client.calls[0][1] == {"query": "foo count:3 timeout:2500ms", "version": "V2"}
    assert result.version == "V2"


@pytest.mark.asyncio
async def test_search_code_empty_query_makes_no_request(fake_client):
    client = fake_client([])
    with pytest.raises(ValidationError, match="Search query must not be empty."):
        await search_code_tool.search_code(client, query="   ")
    assert client.calls == []


@pytest.mark.asyncio
async def test_search_code_wraps_failures(fake_client):
    with pytest.raises(ExternalServiceError) as excinfo:
        await search_code_tool.search_code(fake_client([RuntimeError("boom")]), query="foo")
    assert str(excinfo.value) == "Code search failed: boom"
