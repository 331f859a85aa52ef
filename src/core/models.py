"""Immutable dataclasses for the structured tool results.

Covers the recursive file tree (TreeDirectory/TreeFile/TreeSubmodule),
repository info, language breakdowns, code search results and the current
user. All of them are request-scoped values; `to_dict()` (via
`dataclasses.asdict`) gives the JSON-serializable form the tools return.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Literal, Optional, Tuple


def _as_lists(value: Any) -> Any:
    # asdict keeps tuples; tool results go out as JSON arrays
    if isinstance(value, dict):
        return {k: _as_lists(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_as_lists(v) for v in value]
    return value


@dataclass(frozen=True)
class _Serializable:
    def to_dict(self) -> Dict[str, Any]:
        return _as_lists(asdict(self))


# --- file tree ---


def _count_nodes(node: Any) -> int:
    # every file, submodule and directory below `node`
    return len(node.files) + len(node.submodules) + sum(
        1 + _count_nodes(d) for d in node.directories
    )


@dataclass(frozen=True)
class TreeFile(_Serializable):
    name: str
    path: str
    url: str
    type: Literal["file"] = "file"


@dataclass(frozen=True)
class TreeSubmodule(_Serializable):
    name: str
    path: str
    url: str
    submodule_url: str
    type: Literal["submodule"] = "submodule"


@dataclass(frozen=True)
class TreeListing:
    """Buckets of one directory level, children already materialized."""

    url: str
    directories: Tuple["TreeDirectory", ...] = ()
    files: Tuple[TreeFile, ...] = ()
    submodules: Tuple[TreeSubmodule, ...] = ()

    def node_count(self) -> int:
        return _count_nodes(self)


@dataclass(frozen=True)
class TreeDirectory(_Serializable):
    name: str
    path: str
    url: str
    is_single_child: bool
    directories: Tuple["TreeDirectory", ...] = ()
    files: Tuple[TreeFile, ...] = ()
    submodules: Tuple[TreeSubmodule, ...] = ()
    type: Literal["directory"] = "directory"


@dataclass(frozen=True)
class FileTreeResult(_Serializable):
    repo: str
    revision: str
    path: str
    url: str
    directories: Tuple[TreeDirectory, ...] = ()
    files: Tuple[TreeFile, ...] = ()
    submodules: Tuple[TreeSubmodule, ...] = ()

    def node_count(self) -> int:
        return _count_nodes(self)


# --- repository info ---


CloneState = Literal["CLONED", "CLONING", "NOT_CLONED", "UNKNOWN"]


@dataclass(frozen=True)
class RepoCloneStatus(_Serializable):
    state: CloneState
    progress: Optional[str] = None


@dataclass(frozen=True)
class RepoInfoStats(_Serializable):
    is_private: bool
    is_fork: bool
    is_archived: bool
    viewer_can_administer: Optional[bool] = None
    disk_usage: Optional[int] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class RepoInfoResult(_Serializable):
    name: str
    description: Optional[str]
    url: str
    default_branch: Optional[str]
    clone_status: RepoCloneStatus
    stats: RepoInfoStats


# --- languages ---


@dataclass(frozen=True)
class LanguageShare(_Serializable):
    ratio: float
    percentage: float


@dataclass(frozen=True)
class LanguageBreakdown(_Serializable):
    name: str
    display_name: str
    total_bytes: int
    share: LanguageShare
    color: Optional[str] = None
    total_lines: Optional[int] = None


@dataclass(frozen=True)
class RepoLanguagesResult(_Serializable):
    repo: str
    revision: str
    total_bytes: int
    languages: Tuple[LanguageBreakdown, ...] = field(default_factory=tuple)


# --- code search ---


@dataclass(frozen=True)
class SearchLineMatch(_Serializable):
    line_number: int
    preview: str
    offsets: Tuple[Tuple[int, int], ...] = ()


@dataclass(frozen=True)
class SearchFileMatch(_Serializable):
    repository: str
    repository_url: str
    path: str
    url: str
    line_matches: Tuple[SearchLineMatch, ...] = ()


@dataclass(frozen=True)
class SearchRepositoryMatch(_Serializable):
    name: str
    url: str
    description: Optional[str] = None


@dataclass(frozen=True)
class SearchCommitMatch(_Serializable):
    repository: str
    oid: str
    url: str
    repository_url: Optional[str] = None
    abbreviated_oid: Optional[str] = None
    subject: Optional[str] = None
    message_preview: Optional[str] = None


@dataclass(frozen=True)
class SearchFilter(_Serializable):
    value: str
    label: str
    count: int
    kind: str


@dataclass(frozen=True)
class SearchMissingRepo(_Serializable):
    name: str
    reason: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class SearchStatus(_Serializable):
    cloning: Tuple[str, ...] = ()
    timedout: Tuple[str, ...] = ()
    missing: Tuple[SearchMissingRepo, ...] = ()


@dataclass(frozen=True)
class SearchCodeResult(_Serializable):
    query: str
    executed_query: str
    limit: int
    version: str
    match_count: int
    approximate_result_count: str
    limit_hit: bool
    dynamic_filters: Tuple[SearchFilter, ...] = ()
    file_matches: Tuple[SearchFileMatch, ...] = ()
    repository_matches: Tuple[SearchRepositoryMatch, ...] = ()
    commit_matches: Tuple[SearchCommitMatch, ...] = ()
    status: SearchStatus = field(default_factory=SearchStatus)


# --- user ---


@dataclass(frozen=True)
class Organization(_Serializable):
    name: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class UserInfoResult(_Serializable):
    username: str
    email: Optional[str]
    display_name: Optional[str]
    organizations: Tuple[Organization, ...] = ()
