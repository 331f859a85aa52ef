"""Display helpers shared by the response normalizers.

Turns nullable GraphQL leaves into placeholder text, re-emits ISO dates in
canonical UTC form and flattens HTML-highlighted previews to plain text.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional


UNKNOWN_DATE = "Unknown date"

_BR_RE = re.compile(r"<br\s*/?\s*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RUN_RE = re.compile(r"\s+")
_ISO_DATETIME_RE = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})"
    r"(?:T(?P<time>\d{2}:\d{2}(?::\d{2})?)(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})?)?"
)

# applied in order: &amp; comes after &lt;/&gt; so "&amp;lt;" decodes once
HTML_ENTITIES = MappingProxyType(
    {
        "&lt;": "<",
        "&gt;": ">",
        "&amp;": "&",
        "&quot;": '"',
        "&#39;": "'",
        "&nbsp;": " ",
    }
)


def first_non_blank(*values: Any) -> Optional[str]:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def collapse_whitespace(value: Optional[str]) -> str:
    return _WHITESPACE_RUN_RE.sub(" ", value or "").strip()


def is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def format_date(value: Optional[str]) -> str:
    """Re-emit an ISO timestamp as UTC `YYYY-MM-DDTHH:MM:SS.mmmZ`.

    Only the extended form (`2024-03-05T10:20:30.5Z`) is parsed, whatever the
    interpreter's `fromisoformat` would accept. Blank input gives
    "Unknown date"; anything else is returned as-is.
    """
    if not isinstance(value, str) or not value.strip():
        return UNKNOWN_DATE

    match = _ISO_DATETIME_RE.fullmatch(value.strip())
    if match is None:
        return value

    candidate = match.group("date")
    if match.group("time"):
        candidate += "T" + match.group("time")
        if match.group("fraction"):
            candidate += "." + match.group("fraction").ljust(6, "0")[:6]
        offset = match.group("offset") or ""
        candidate += "+00:00" if offset in ("Z", "z") else offset
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return value

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    utc = parsed.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def strip_html_tags(value: str) -> str:
    return _TAG_RE.sub("", _BR_RE.sub("\n", value))


def decode_html_entities(value: str) -> str:
    out = value
    for entity, replacement in HTML_ENTITIES.items():
        out = re.sub(re.escape(entity), replacement, out, flags=re.IGNORECASE)
    return out


def format_highlighted_value(highlight: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Plain text of a `{value: <html>}` highlight, or None when empty."""
    if not isinstance(highlight, Mapping):
        return None
    value = highlight.get("value")
    if not isinstance(value, str):
        return None

    text = decode_html_entities(strip_html_tags(value)).replace("\u00a0", " ").strip()
    return text or None


def error_message(err: BaseException) -> str:
    return str(err) or type(err).__name__
