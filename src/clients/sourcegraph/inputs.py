"""Query builders: tool parameters -> GraphQL variables and search strings.

Everything here is pure. Defaults and clamping rules live next to the tool
that owns them; these helpers only implement the shared mechanics.
"""

from __future__ import annotations

import math
import re
from types import MappingProxyType
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from core.formatting import is_finite_number


DEFAULT_REVISION = "HEAD"

_COUNT_FILTER_RE = re.compile(r"\bcount:\d+\b", re.IGNORECASE)
_TIMEOUT_FILTER_RE = re.compile(r"\btimeout:\S+", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s")


KNOWN_SYMBOL_KINDS = frozenset(
    {
        "FILE", "MODULE", "NAMESPACE", "PACKAGE", "CLASS", "METHOD", "PROPERTY",
        "FIELD", "CONSTRUCTOR", "ENUM", "INTERFACE", "FUNCTION", "VARIABLE",
        "CONSTANT", "STRING", "NUMBER", "BOOLEAN", "ARRAY", "OBJECT", "KEY",
        "NULL", "ENUMMEMBER", "STRUCT", "EVENT", "OPERATOR", "TYPEPARAMETER",
    }
)

SYMBOL_KIND_ALIASES = MappingProxyType(
    {
        "file": "FILE",
        "module": "MODULE",
        "namespace": "NAMESPACE",
        "pkg": "PACKAGE",
        "package": "PACKAGE",
        "class": "CLASS",
        "method": "METHOD",
        "property": "PROPERTY",
        "field": "FIELD",
        "ctor": "CONSTRUCTOR",
        "constructor": "CONSTRUCTOR",
        "enum": "ENUM",
        "interface": "INTERFACE",
        "function": "FUNCTION",
        "func": "FUNCTION",
        "def": "FUNCTION",
        "variable": "VARIABLE",
        "var": "VARIABLE",
        "let": "VARIABLE",
        "constant": "CONSTANT",
        "const": "CONSTANT",
        "string": "STRING",
        "number": "NUMBER",
        "boolean": "BOOLEAN",
        "array": "ARRAY",
        "object": "OBJECT",
        "key": "KEY",
        "null": "NULL",
        "enum member": "ENUMMEMBER",
        "enummember": "ENUMMEMBER",
        "struct": "STRUCT",
        "event": "EVENT",
        "operator": "OPERATOR",
        "type parameter": "TYPEPARAMETER",
        "typeparameter": "TYPEPARAMETER",
    }
)


def normalize_revision(rev: Optional[str]) -> str:
    rev_clean = (rev or "").strip()
    return rev_clean or DEFAULT_REVISION


def normalize_limit(value: Any, *, default: int, maximum: int) -> int:
    """Clamp a user limit into [1, maximum]; unusable values give `default`."""
    if not is_finite_number(value):
        return default
    n = int(value)
    if n <= 0:
        return default
    return min(max(n, 1), maximum)


def has_filter_value(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())


def quote_if_needed(value: str) -> str:
    # author:"Alice Example" style tokens; inner quotes are escaped
    trimmed = value.strip()
    if _WHITESPACE_RE.search(trimmed):
        escaped = trimmed.replace('"', '\\"')
        return f'"{escaped}"'
    return trimmed


def normalize_tree_path(path: Optional[str]) -> Tuple[str, str]:
    """Return (query_path, display_path); the repository root is ("", "/")."""
    trimmed = (path or "").strip()
    normalized = trimmed.strip("/")
    if not normalized:
        return "", "/"
    return normalized, normalized


def resolve_symbol_kinds(types: Optional[Iterable[Any]]) -> Tuple[List[str], List[str]]:
    """Map user symbol type names to canonical kinds.

    Returns (accepted, ignored). Accepted kinds are de-duplicated in first-seen
    order; unknown names are kept verbatim in `ignored`.
    """
    accepted: List[str] = []
    ignored: List[str] = []
    if not types:
        return accepted, ignored

    for raw in types:
        if not isinstance(raw, str):
            continue
        trimmed = raw.strip()
        if not trimmed:
            continue

        canonical = SYMBOL_KIND_ALIASES.get(trimmed.lower())
        if canonical is None and trimmed.upper() in KNOWN_SYMBOL_KINDS:
            canonical = trimmed.upper()

        if canonical is None:
            ignored.append(trimmed)
        elif canonical not in accepted:
            accepted.append(canonical)

    return accepted, ignored


def format_timeout_filter(timeout_ms: Any, query: str) -> Optional[str]:
    if not is_finite_number(timeout_ms) or timeout_ms <= 0:
        return None
    if _TIMEOUT_FILTER_RE.search(query):
        return None

    rounded = int(math.floor(timeout_ms + 0.5))
    if rounded <= 0:
        return None
    if rounded % 1000 == 0:
        return f"timeout:{max(1, rounded // 1000)}s"
    return f"timeout:{rounded}ms"


def build_code_search_query(query: str, limit: int, timeout_ms: Any = None) -> str:
    segments = [query]
    if not _COUNT_FILTER_RE.search(query):
        segments.append(f"count:{limit}")

    timeout_filter = format_timeout_filter(timeout_ms, query)
    if timeout_filter:
        segments.append(timeout_filter)

    return " ".join(segments)


def build_commit_search_query(
    query: str,
    *,
    author: Optional[str] = None,
    after: Optional[str] = None,
    before: Optional[str] = None,
    limit: int,
) -> str:
    segments = ["type:commit", query or ""]
    if has_filter_value(author):
        segments.append(f"author:{quote_if_needed(author)}")  # type: ignore[arg-type]
    if has_filter_value(after):
        segments.append(f"after:{quote_if_needed(after)}")  # type: ignore[arg-type]
    if has_filter_value(before):
        segments.append(f"before:{quote_if_needed(before)}")  # type: ignore[arg-type]
    segments.append(f"count:{limit}")

    return " ".join(s.strip() for s in segments if s.strip())


def build_kind_filter(kinds: Sequence[str]) -> Optional[str]:
    if not kinds:
        return None
    filters = [f"kind:{quote_if_needed(k)}" for k in kinds]
    if len(filters) == 1:
        return filters[0]
    return "(" + " OR ".join(filters) + ")"


def build_symbol_search_query(query: str, kinds: Sequence[str], limit: int) -> str:
    segments = ["type:symbol"]
    if (query or "").strip():
        segments.append(query.strip())

    kind_filter = build_kind_filter(kinds)
    if kind_filter:
        segments.append(kind_filter)

    segments.append(f"count:{limit}")
    return " ".join(segments)
