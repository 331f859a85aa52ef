import pytest

from core.errors import ExternalServiceError
from tools import file_get as file_get_tool


def _blob_response(**blob):
    base = {
        "path": "src/app.py",
        "content": "print('hi')\n",
        "byteSize": 12,
        "isBinary": False,
        "languages": ["Python"],
        "highlight": {"aborted": False},
    }
    base.update(blob)
    return {
        "repository": {
            "name": "github.com/a/r",
            "url": "/github.com/a/r",
            "commit": {"oid": "abc123", "blob": base},
        }
    }


@pytest.mark.asyncio
async def test_file_get_renders_metadata_and_content(dummy_mcp, fake_client):
    client = fake_client([_blob_response()])
    file_get_tool.register(dummy_mcp, sourcegraph_client=client)

    out = await dummy_mcp.tools["file_get"](repo="github.com/a/r", path="src/app.py")

    assert client.calls[0][1] == {"repo": "github.com/a/r", "path": "src/app.py", "rev": "HEAD"}
    assert out == (
        "Repository: github.com/a/r\n"
        "Repository URL: /github.com/a/r\n"
        "Path: src/app.py\n"
        "Revision Requested: HEAD\n"
        "Revision OID: abc123\n"
        "Size: 12 bytes\n"
        "Language: Python\n"
        "\n"
        "print('hi')\n"
    )


@pytest.mark.asyncio
async def test_file_get_binary_and_highlight_warnings(fake_client):
    client = fake_client([_blob_response(isBinary=True, highlight={"aborted": True}, byteSize=None, languages=[])])

    out = await file_get_tool.file_get(client, repo="github.com/a/r", path="img.png", rev="main")

    assert "Revision Requested: main\n" in out
    assert "Size: unknown\n" in out
    assert "Language: unknown\n" in out
    assert "Warning: Syntax highlighting was aborted due to timeout.\n" in out
    assert out.endswith("\nWarning: Binary file content is not displayed.\n")
    assert "print" not in out


@pytest.mark.asyncio
@pytest.mark.parametrize("byte_size", [float("inf"), float("nan"), True, "12"])
async def test_file_get_unusable_size_is_unknown(fake_client, byte_size):
    client = fake_client([_blob_response(byteSize=byte_size)])

    out = await file_get_tool.file_get(client, repo="github.com/a/r", path="src/app.py")

    assert "Size: unknown\n" in out


@pytest.mark.asyncio
async def test_file_get_empty_content(fake_client):
    out = await file_get_tool.file_get(fake_client([_blob_response(content="")]), repo="r", path="p")
    assert out.endswith("\nNo content available for this file.\n")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response,expected",
    [
        ({"repository": None}, "Repository r not found."),
        ({"repository": {"commit": None}}, "Revision v2 not found in r."),
        ({"repository": {"commit": {"oid": "x", "blob": None}}}, "File a.txt not found at v2 in r."),
    ],
)
async def test_file_get_not_found_chain(fake_client, response, expected):
    out = await file_get_tool.file_get(fake_client([response]), repo="r", path="a.txt", rev="v2")
    assert out == expected


@pytest.mark.asyncio
async def test_file_get_transport_error_is_text(fake_client):
    client = fake_client([ExternalServiceError("GraphQL query failed: HTTP 500: Internal Server Error")])
    out = await file_get_tool.file_get(client, repo="r", path="a.txt")
    assert out == "Error retrieving file: GraphQL query failed: HTTP 500: Internal Server Error"
