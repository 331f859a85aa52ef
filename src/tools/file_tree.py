"""MCP tool that returns a fully materialized directory tree.

Registers 'file_tree'. The tree is assembled depth-first with one GraphQL
request per directory; the next request is only issued after the previous
one returned, since each sub-path comes from the parent's listing.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from clients.sourcegraph.inputs import normalize_revision, normalize_tree_path
from clients.sourcegraph.queries import FILE_TREE_QUERY
from core.errors import NotFoundError, NotFoundKind, ValidationError
from core.interfaces import GraphQLClient
from core.log import get_logger
from core.models import FileTreeResult, TreeDirectory, TreeFile, TreeListing, TreeSubmodule


log = get_logger("file_tree")


async def fetch_tree(
    client: GraphQLClient,
    *,
    repo: str,
    revision: str,
    path: str,
) -> TreeListing:
    """Fetch `path` and, recursively, every directory below it.

    Raises NotFoundError tagged with the missing level; a failure at any depth
    aborts the whole walk.
    """
    data = await client.query(FILE_TREE_QUERY, {"repo": repo, "path": path, "rev": revision})

    repository = data.get("repository")
    if repository is None:
        raise NotFoundError(f"Repository not found: {repo}", kind=NotFoundKind.REPOSITORY, path=path)

    commit = repository.get("commit")
    if commit is None:
        raise NotFoundError(f"Revision not found: {revision}", kind=NotFoundKind.REVISION, path=path)

    tree = commit.get("tree")
    if tree is None:
        missing = path or "/"
        raise NotFoundError(f"Path not found: {missing}", kind=NotFoundKind.PATH, path=missing)

    directories: List[TreeDirectory] = []
    files: List[TreeFile] = []
    submodules: List[TreeSubmodule] = []

    for entry in tree.get("entries") or []:
        name = entry.get("name") or ""
        entry_path = entry.get("path") or ""
        url = entry.get("url") or ""

        # a submodule is never descended into, whatever isDirectory says
        submodule = entry.get("submodule")
        if submodule is not None:
            submodules.append(
                TreeSubmodule(
                    name=name,
                    path=entry_path,
                    url=url,
                    submodule_url=submodule.get("url") or "",
                )
            )
            continue

        if entry.get("isDirectory"):
            child = await fetch_tree(client, repo=repo, revision=revision, path=entry_path)
            directories.append(
                TreeDirectory(
                    name=name,
                    path=entry_path,
                    url=child.url,
                    is_single_child=bool(entry.get("isSingleChild")),
                    directories=child.directories,
                    files=child.files,
                    submodules=child.submodules,
                )
            )
            continue

        files.append(TreeFile(name=name, path=entry_path, url=url))

    return TreeListing(
        url=tree.get("url") or "",
        directories=tuple(directories),
        files=tuple(files),
        submodules=tuple(submodules),
    )


async def get_file_tree(
    client: GraphQLClient,
    *,
    repo: str,
    path: Optional[str] = None,
    rev: Optional[str] = None,
) -> FileTreeResult:
    repo_clean = (repo or "").strip()
    if not repo_clean:
        raise ValidationError("Repository name is required")

    revision = normalize_revision(rev)
    query_path, display_path = normalize_tree_path(path)

    listing = await fetch_tree(client, repo=repo_clean, revision=revision, path=query_path)
    log.debug("file_tree_fetched", repo=repo_clean, path=display_path, nodes=listing.node_count())

    return FileTreeResult(
        repo=repo_clean,
        revision=revision,
        path=display_path,
        url=listing.url,
        directories=listing.directories,
        files=listing.files,
        submodules=listing.submodules,
    )


def register(mcp: FastMCP, *, sourcegraph_client: GraphQLClient) -> None:
    @mcp.tool(name="file_tree")
    async def file_tree(
        repo: str,
        path: Optional[str] = None,
        rev: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Return the nested directory tree of a repository path.

        Params:
          - repo: repository name (e.g. "github.com/sourcegraph/sourcegraph").
          - path: directory inside the repository (default: root).
          - rev: revision, branch or commit (default: "HEAD").

        Returns:
          {repo, revision, path, url, directories, files, submodules}; each
          directory carries its own directories/files/submodules.

        Raises:
          NotFoundError naming the missing repository, revision or path, and
          ExternalServiceError when a request fails.
        """
        result = await get_file_tree(sourcegraph_client, repo=repo, path=path, rev=rev)
        return result.to_dict()
