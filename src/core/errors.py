from __future__ import annotations

from enum import Enum
from typing import Optional


class SourcegraphMCPError(Exception):
    """Base error for the Sourcegraph MCP server."""


class ValidationError(SourcegraphMCPError):
    """Raised when user input is invalid."""


class ExternalServiceError(SourcegraphMCPError):
    """Raised when the Sourcegraph API call fails."""


class NotFoundKind(str, Enum):
    REPOSITORY = "REPOSITORY_NOT_FOUND"
    REVISION = "REVISION_NOT_FOUND"
    PATH = "PATH_NOT_FOUND"
    FILE = "FILE_NOT_FOUND"
    USER = "USER_NOT_FOUND"


class NotFoundError(SourcegraphMCPError):
    """Raised when a container in the GraphQL response chain is null.

    `kind` names the level that was missing; `path` is the tree or file path
    being resolved at the time, when there is one.
    """

    def __init__(self, message: str, *, kind: NotFoundKind, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.path = path
