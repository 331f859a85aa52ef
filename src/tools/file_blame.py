"""MCP tool that renders git blame for a file as a line-by-line table.

Registers 'file_blame'. Every blame range is expanded into one row per line
number, each row repeating the range's commit and author.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.inputs import normalize_revision
from clients.sourcegraph.queries import FILE_BLAME_QUERY
from core.formatting import (
    collapse_whitespace,
    error_message,
    first_non_blank,
    format_date,
    is_finite_number,
)
from core.interfaces import GraphQLClient


TABLE_HEADER = "Line | Commit | Author | Date | Subject | URL"
HEADER_SEPARATOR = "-" * len(TABLE_HEADER)
NO_BLAME = "No blame information available for the requested range."


def _format_author(author: Optional[Mapping[str, Any]]) -> str:
    person = (author or {}).get("person") or {}
    email = first_non_blank(person.get("email"))
    name = first_non_blank(person.get("displayName")) or email or "Unknown author"
    return f"{name} <{email}>" if email else name


def _format_subject(subject: Optional[str]) -> str:
    return collapse_whitespace(subject) or "No subject"


def _expand_range(blame_range: Mapping[str, Any]) -> List[str]:
    start = blame_range.get("startLine")
    end = blame_range.get("endLine")
    if not (is_finite_number(start) and is_finite_number(end)):
        return []

    commit = blame_range.get("commit") or {}
    author = blame_range.get("author") or {}

    label = commit.get("abbreviatedOID") or commit.get("oid") or "unknown"
    who = _format_author(author)
    when = format_date(author.get("date"))
    subject = _format_subject(commit.get("subject"))
    url = first_non_blank(commit.get("url")) or "No URL"

    return [
        f"{line} | {label} | {who} | {when} | {subject} | {url}"
        for line in range(int(start), int(end) + 1)
    ]


def build_blame_variables(
    *,
    repo: str,
    path: str,
    revision: str,
    start_line: Optional[int],
    end_line: Optional[int],
) -> Dict[str, Any]:
    variables: Dict[str, Any] = {"repo": repo, "path": path, "rev": revision}
    if is_finite_number(start_line):
        variables["startLine"] = int(start_line)  # type: ignore[arg-type]
    if is_finite_number(end_line):
        variables["endLine"] = int(end_line)  # type: ignore[arg-type]
    return variables


async def file_blame(
    client: GraphQLClient,
    *,
    repo: str,
    path: str,
    rev: Optional[str] = None,
    start_line: Optional[int] = None,
    end_line: Optional[int] = None,
) -> str:
    if is_finite_number(start_line) and is_finite_number(end_line) and start_line > end_line:  # type: ignore[operator]
        return "Invalid blame range: start_line must be less than or equal to end_line."

    revision = normalize_revision(rev)
    variables = build_blame_variables(
        repo=repo, path=path, revision=revision, start_line=start_line, end_line=end_line
    )

    try:
        data = await client.query(FILE_BLAME_QUERY, variables)

        repository = data.get("repository")
        if not repository:
            return f"Repository {repo} not found."

        commit = repository.get("commit")
        if not commit:
            return f"Revision {revision} not found in {repo}."

        blob = commit.get("blob")
        if not blob:
            return f"File {path} not found at {revision} in {repo}."

        lines = [
            f"Repository: {repository.get('name') or repo}",
            f"Repository URL: {repository.get('url') or 'unknown'}",
            f"Path: {blob.get('path') or path}",
            f"Revision Requested: {revision}",
            f"Revision OID: {commit.get('oid') or 'unknown'}",
        ]

        rows: List[str] = []
        for blame_range in (blob.get("blame") or {}).get("ranges") or []:
            if blame_range:
                rows.extend(_expand_range(blame_range))

        if not rows:
            lines.extend(["", NO_BLAME])
            return "\n".join(lines)

        lines.extend(["", TABLE_HEADER, HEADER_SEPARATOR, *rows])
        return "\n".join(lines)
    except Exception as e:
        return f"Error retrieving blame information: {error_message(e)}"


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="file_blame")
    async def file_blame_tool(
        repo: str,
        path: str,
        rev: Optional[str] = None,
        start_line: Optional[int] = None,
        end_line: Optional[int] = None,
    ) -> str:
        """Show which commit last touched each line of a file.

        Params:
          - repo: repository name.
          - path: file path inside the repository.
          - rev: revision, branch or commit (default: "HEAD").
          - start_line / end_line: optional 1-based inclusive line window.
        """
        return await file_blame(
            sourcegraph_client,
            repo=repo,
            path=path,
            rev=rev,
            start_line=start_line,
            end_line=end_line,
        )
