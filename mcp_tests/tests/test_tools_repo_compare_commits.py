import pytest

from tools import repo_compare_commits as compare_tool
from tools.repo_compare_commits import format_range, format_stats


def _comparison(commits=None, diffs=None):
    return {
        "repository": {
            "name": "github.com/a/r",
            "comparison": {
                "commits": {"nodes": commits or [], "totalCount": len(commits or [])},
                "fileDiffs": {"nodes": diffs or [], "totalCount": len(diffs or [])},
            },
        }
    }


def test_format_range():
    assert format_range({"startLine": 3, "lines": 4}, "-") == "-3,4"
    assert format_range({"startLine": 3, "lines": None}, "+") == "+3"
    assert format_range({"startLine": None, "lines": 2}, "-") == "-∅"
    assert format_range(None, "+") == "+∅"


def test_format_stats():
    assert format_stats({"added": 3, "changed": 1, "deleted": 2}) == "Stats: +3 ~1 -2"
    assert format_stats({"added": 5, "changed": None, "deleted": None}) == "Stats: +5"
    assert format_stats({"added": None, "changed": None, "deleted": None}) == "Stats: unavailable."
    assert format_stats(None) == "Stats: unavailable."


@pytest.mark.asyncio
async def test_compare_rejects_blank_inputs_without_network(fake_client):
    client = fake_client([])

    assert await compare_tool.repo_compare_commits(client, repo=" ", base_rev="a", head_rev="b") == (
        "Repository name is required."
    )
    assert await compare_tool.repo_compare_commits(client, repo="r", base_rev="", head_rev="b") == (
        "Base revision is required for comparison."
    )
    assert await compare_tool.repo_compare_commits(client, repo="r", base_rev="a", head_rev="  ") == (
        "Head revision is required for comparison."
    )
    assert client.calls == []


@pytest.mark.asyncio
async def test_compare_truncates_long_hunks(dummy_mcp, fake_client):
    body = "\n".join(f"+line {i}" for i in range(1, 16))
    client = fake_client(
        [
            _comparison(
                commits=[
                    {
                        "oid": "abcdef123456",
                        "abbreviatedOID": "abcdef1",
                        "subject": "Add feature",
                        "url": "/c/abcdef1",
                        "author": {"person": {"displayName": "Alice"}, "date": "2024-01-01"},
                    }
                ],
                diffs=[
                    {
                        "oldPath": None,
                        "newPath": "src/new.py",
                        "stat": {"added": 15, "changed": 0, "deleted": 0},
                        "hunks": [
                            {
                                "oldRange": {"startLine": None, "lines": 0},
                                "newRange": {"startLine": 1, "lines": 15},
                                "body": body,
                            }
                        ],
                    }
                ],
            )
        ]
    )
    compare_tool.register(dummy_mcp, sourcegraph_client=client)

    out = await dummy_mcp.tools["repo_compare_commits"](repo="github.com/a/r", base_rev="main", head_rev="feature")

    assert client.calls[0][1] == {
        "name": "github.com/a/r",
        "base": "main",
        "head": "feature",
        "firstCommits": 20,
        "firstDiffs": 20,
    }
    assert "Commits: showing 1 of 1 total\n" in out
    assert "  1. abcdef1 - Add feature\n     Author: Alice (2024-01-01)\n     URL: /c/abcdef1\n" in out
    assert "  1. added src/new.py\n     Stats: +15 ~0 -0\n     Hunk 1: -∅ +1,15\n" in out

    body_lines = [line for line in out.split("\n") if line.startswith("       +line")]
    assert body_lines == [f"       +line {i}" for i in range(1, 11)]
    assert "       …\n" in out
    assert "+line 11" not in out


@pytest.mark.asyncio
async def test_compare_empty_sections_and_missing_hunks(fake_client):
    client = fake_client(
        [_comparison(diffs=[{"oldPath": "a.bin", "newPath": "a.bin", "stat": None, "hunks": []}])]
    )
    out = await compare_tool.repo_compare_commits(client, repo="r", base_rev="a", head_rev="b")

    assert "  No commits found in this comparison.\n" in out
    assert "  1. modified a.bin\n     Stats: unavailable.\n" in out
    assert "     No diff hunks available (file may be binary or diff omitted).\n" in out


@pytest.mark.asyncio
async def test_compare_not_found_messages(fake_client):
    out = await compare_tool.repo_compare_commits(
        fake_client([{"repository": None}]), repo="r", base_rev="a", head_rev="b"
    )
    assert out == "Repository not found: r"

    out = await compare_tool.repo_compare_commits(
        fake_client([{"repository": {"name": "r", "comparison": None}}]), repo="r", base_rev="a", head_rev="b"
    )
    assert out == "No comparison available between a and b in r."


@pytest.mark.asyncio
async def test_compare_error_is_text(fake_client):
    out = await compare_tool.repo_compare_commits(
        fake_client([RuntimeError("boom")]), repo="r", base_rev="a", head_rev="b"
    )
    assert out == "Error comparing revisions: boom"


@pytest.mark.asyncio
async def test_compare_output_is_repeatable(fake_client):
    response = _comparison(
        commits=[{"oid": "abcdef123456", "abbreviatedOID": "abcdef1", "subject": "Add  feature", "url": "/c/1"}],
        diffs=[
            {
                "oldPath": "a.py",
                "newPath": "a.py",
                "stat": {"added": 12, "changed": 0, "deleted": 1},
                "hunks": [
                    {
                        "oldRange": {"startLine": 1, "lines": 1},
                        "newRange": {"startLine": 1, "lines": 12},
                        "body": "\n".join(f"+line {i}" for i in range(12)),
                    }
                ],
            }
        ],
    )
    client = fake_client([response, response])

    first = await compare_tool.repo_compare_commits(client, repo="r", base_rev="a", head_rev="b")
    second = await compare_tool.repo_compare_commits(client, repo="r", base_rev="a", head_rev="b")

    assert first == second
    assert "…" in first
