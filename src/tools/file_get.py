"""MCP tool that reads a file from a repository at a revision.

Registers 'file_get', which returns a metadata header followed by the file
contents (or a note when the blob is binary or empty).
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.inputs import normalize_revision
from clients.sourcegraph.queries import FILE_CONTENT_QUERY
from core.formatting import error_message, first_non_blank, is_finite_number
from core.interfaces import GraphQLClient


UNKNOWN = "unknown"


def _format_size(byte_size: Any) -> str:
    if not is_finite_number(byte_size):
        return UNKNOWN
    return f"{int(byte_size)} bytes"


def _format_language(blob: Mapping[str, Any]) -> str:
    languages = blob.get("languages") or []
    return first_non_blank(*languages) or UNKNOWN


async def file_get(
    client: GraphQLClient,
    *,
    repo: str,
    path: str,
    rev: Optional[str] = None,
) -> str:
    revision = normalize_revision(rev)

    try:
        data = await client.query(FILE_CONTENT_QUERY, {"repo": repo, "path": path, "rev": revision})

        repository = data.get("repository")
        if not repository:
            return f"Repository {repo} not found."

        commit = repository.get("commit")
        if not commit:
            return f"Revision {revision} not found in {repo}."

        blob = commit.get("blob")
        if not blob:
            return f"File {path} not found at {revision} in {repo}."

        lines: List[str] = [
            f"Repository: {repository.get('name') or repo}",
            f"Repository URL: {repository.get('url') or UNKNOWN}",
            f"Path: {blob.get('path') or path}",
            f"Revision Requested: {revision}",
            f"Revision OID: {commit.get('oid') or UNKNOWN}",
            f"Size: {_format_size(blob.get('byteSize'))}",
            f"Language: {_format_language(blob)}",
        ]

        highlight = blob.get("highlight") or {}
        if highlight.get("aborted"):
            lines.append("Warning: Syntax highlighting was aborted due to timeout.")

        if blob.get("isBinary"):
            lines.extend(["", "Warning: Binary file content is not displayed."])
            return "\n".join(lines) + "\n"

        content = blob.get("content")
        if not content:
            lines.extend(["", "No content available for this file."])
            return "\n".join(lines) + "\n"

        lines.extend(["", content])
        return "\n".join(lines)
    except Exception as e:
        return f"Error retrieving file: {error_message(e)}"


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="file_get")
    async def file_get_tool(repo: str, path: str, rev: Optional[str] = None) -> str:
        """Read a file and return its metadata and contents as text.

        Params:
          - repo: repository name (e.g. "github.com/sourcegraph/sourcegraph").
          - path: file path inside the repository (e.g. "src/index.ts").
          - rev: revision, branch or commit (default: "HEAD").
        """
        return await file_get(sourcegraph_client, repo=repo, path=path, rev=rev)
