"""Core protocol and interface definitions.

Defines the GraphQLClient protocol the tools depend on, so tests and
alternative transports can stand in for SourcegraphClient.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class GraphQLClient(Protocol):
    """Contract for anything that can execute a GraphQL document."""
    async def query(
        self,
        document: str,
        variables: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        ...
