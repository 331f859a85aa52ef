import json
import math

import pytest

from tools import repo_languages as repo_languages_tool


@pytest.mark.asyncio
async def test_repo_languages_json_document(dummy_mcp, fake_client):
    client = fake_client(
        [
            {
                "repository": {
                    "name": "github.com/a/r",
                    "languageStatistics": [
                        {"name": "Go", "displayName": " Go ", "color": " #00ADD8 ", "totalBytes": 100, "totalLines": 10},
                        {"name": "Python", "displayName": None, "color": None, "totalBytes": 300, "totalLines": None},
                        {"name": "Broken", "totalBytes": -1},
                        {"name": "Weird", "totalBytes": math.nan},
                        None,
                        {"name": "Shell", "displayName": "", "totalBytes": 100},
                    ],
                }
            }
        ]
    )
    repo_languages_tool.register(dummy_mcp, sourcegraph_client=client)

    out = await dummy_mcp.tools["repo_languages"](repo="github.com/a/r", rev="v1")

    assert client.calls[0][1] == {"name": "github.com/a/r"}
    assert out.endswith("\n")
    doc = json.loads(out)

    assert doc["repo"] == "github.com/a/r"
    assert doc["revision"] == "v1"
    assert doc["total_bytes"] == 500
    assert [lang["name"] for lang in doc["languages"]] == ["Python", "Go", "Shell"]

    python, go, shell = doc["languages"]
    assert python["display_name"] == "Python"
    assert python["share"] == {"ratio": 0.6, "percentage": 60.0}
    assert go["display_name"] == "Go"
    assert go["color"] == "#00ADD8"
    assert go["total_lines"] == 10
    assert shell["display_name"] == "Shell"
    assert sum(lang["share"]["ratio"] for lang in doc["languages"]) == pytest.approx(1.0, abs=1e-9)
    assert sum(lang["share"]["percentage"] for lang in doc["languages"]) == pytest.approx(100.0, abs=1e-9)


@pytest.mark.asyncio
async def test_repo_languages_defaults_revision_and_empty_stats(fake_client):
    out = await repo_languages_tool.repo_languages(
        fake_client([{"repository": {"name": "r", "languageStatistics": []}}]), repo="r"
    )
    assert json.loads(out) == {"repo": "r", "revision": "HEAD", "total_bytes": 0, "languages": []}


@pytest.mark.asyncio
async def test_repo_languages_not_found_and_errors(fake_client):
    out = await repo_languages_tool.repo_languages(fake_client([{"repository": None}]), repo="r")
    assert out == "Repository not found: r"

    out = await repo_languages_tool.repo_languages(fake_client([RuntimeError("boom")]), repo="r")
    assert out == "Error fetching repository languages: boom"


def test_build_breakdown_is_repeatable():
    stats = [
        {"name": "Go", "displayName": "Go", "color": "#00ADD8", "totalBytes": 1, "totalLines": 1},
        {"name": "Python", "totalBytes": 1},
        {"name": "Shell", "totalBytes": 1},
    ]

    first = repo_languages_tool.build_breakdown("r", "HEAD", stats)
    second = repo_languages_tool.build_breakdown("r", "HEAD", stats)

    assert first == second
    assert json.dumps(first.to_dict(), indent=2) == json.dumps(second.to_dict(), indent=2)
    assert [lang["name"] for lang in stats] == ["Go", "Python", "Shell"]
