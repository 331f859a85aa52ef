"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and the
`Config` value that is loaded once at process start and injected into the
Sourcegraph client (endpoint, access token, timeout, log level).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Mapping, Optional
from urllib.parse import urlparse

from core.errors import ValidationError


LogLevel = Literal["error", "warn", "info", "debug"]

DEFAULT_ENDPOINT = "https://sourcegraph.com"
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_LOG_LEVEL: LogLevel = "info"

_LOG_LEVELS = ("error", "warn", "info", "debug")


def _env_str(environ: Mapping[str, str], name: str) -> Optional[str]:
    raw = environ.get(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_log_level(environ: Mapping[str, str], name: str) -> LogLevel:
    raw = (_env_str(environ, name) or DEFAULT_LOG_LEVEL).lower()
    if raw == "warning":
        raw = "warn"
    return raw if raw in _LOG_LEVELS else DEFAULT_LOG_LEVEL  # type: ignore[return-value]


@dataclass(frozen=True)
class Config:
    """Process configuration for the Sourcegraph connection.

    Field groups:
    - Connection: endpoint, access_token, http_verify
    - Limits: timeout_ms (applied per GraphQL request)
    - Output: log_level
    """

    endpoint: str
    access_token: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    log_level: LogLevel = DEFAULT_LOG_LEVEL
    http_verify: bool = True

    @property
    def graphql_url(self) -> str:
        return f"{self.endpoint}/.api/graphql"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Read configuration from environment variables.

    SRC_ENDPOINT, SRC_ACCESS_TOKEN (required), TIMEOUT_MS, LOG_LEVEL, HTTP_VERIFY.
    """
    env = os.environ if environ is None else environ

    token = _env_str(env, "SRC_ACCESS_TOKEN")
    if not token:
        raise ValidationError("SRC_ACCESS_TOKEN environment variable is required")

    endpoint = (_env_str(env, "SRC_ENDPOINT") or DEFAULT_ENDPOINT).rstrip("/")

    return Config(
        endpoint=endpoint,
        access_token=token,
        timeout_ms=_env_int(env, "TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
        log_level=_env_log_level(env, "LOG_LEVEL"),
        http_verify=_env_bool(env, "HTTP_VERIFY", True),
    )


def validate_config(config: Config) -> None:
    if not config.endpoint:
        raise ValidationError("Sourcegraph endpoint is required")

    if not config.access_token:
        raise ValidationError("Sourcegraph access token is required")

    parsed = urlparse(config.endpoint)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"Invalid Sourcegraph endpoint URL: {config.endpoint}")

    if config.timeout_ms <= 0:
        raise ValidationError("TIMEOUT_MS must be positive")
