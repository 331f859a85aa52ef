"""Sourcegraph GraphQL client.

A small async transport: POST a GraphQL document plus variables to
`<endpoint>/.api/graphql` with the access token attached, return the `data`
member, and turn every transport, HTTP or GraphQL error into
`ExternalServiceError("GraphQL query failed: ...")`.

The client holds no per-request state, so a single instance is shared by all
tools. It does not cache and does not retry.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

import httpx

from config import Config
from core.errors import ExternalServiceError
from core.log import get_logger


_OPERATION_RE = re.compile(r"\b(?:query|mutation)\s+(\w+)")

log = get_logger("SourcegraphClient")


def _operation_name(document: str) -> str:
    m = _OPERATION_RE.search(document or "")
    return m.group(1) if m else "anonymous"


class SourcegraphClient:
    """Async GraphQL client for a Sourcegraph instance.

    Purpose:
      - query(document, variables=None) -> dict (the GraphQL `data` object)

    Key behavior:
      - Bearer-style `token` authorization header from the injected Config.
      - Per-request timeout from Config.timeout_ms.
      - Errors are wrapped with a stable "GraphQL query failed:" prefix.
    """

    USER_AGENT = "sourcegraph-mcp-server"

    def __init__(self, config: Config) -> None:
        self._url = config.graphql_url
        self._timeout = config.timeout_seconds
        self._verify = bool(config.http_verify)
        self._headers = {
            "Authorization": f"token {config.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.USER_AGENT,
        }

    async def query(self, document: str, variables: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        operation = _operation_name(document)
        payload = {"query": document, "variables": dict(variables or {})}
        log.debug("graphql_request", operation=operation)

        try:
            async with self._create_client() as client:
                resp = await client.post(self._url, json=payload)
                resp.raise_for_status()
                body = resp.json()
        except httpx.HTTPStatusError as e:
            raise self._failed(operation, f"HTTP {e.response.status_code}: {e.response.reason_phrase}") from e
        except httpx.HTTPError as e:
            raise self._failed(operation, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise self._failed(operation, f"invalid JSON response: {e}") from e

        if not isinstance(body, dict):
            raise self._failed(operation, "unexpected response shape")

        errors = body.get("errors")
        if errors:
            raise self._failed(operation, self._join_errors(errors))

        data = body.get("data")
        if not isinstance(data, dict):
            raise self._failed(operation, "response contained no data")
        return data

    # --- HTTP helpers ---

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout,
            verify=self._verify,
        )

    def _failed(self, operation: str, message: str) -> ExternalServiceError:
        log.warning("graphql_request_failed", operation=operation, error=message)
        return ExternalServiceError(f"GraphQL query failed: {message}")

    @staticmethod
    def _join_errors(errors: Any) -> str:
        if not isinstance(errors, list):
            return str(errors)
        messages = []
        for err in errors:
            if isinstance(err, Mapping) and err.get("message"):
                messages.append(str(err["message"]))
            else:
                messages.append(str(err))
        return "; ".join(messages)
