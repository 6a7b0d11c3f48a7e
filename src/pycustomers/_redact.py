"""Helpers for safe debug logging.

Customer payloads carry personal data (names, e-mail addresses). This
module redacts those fields before request/response bodies are emitted
to DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_PERSONAL_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "firstname",
        "lastname",
        "businessname",
        "first_name",
        "last_name",
        "business_name",
    }
)

_EMAIL_KEYS: frozenset[str] = frozenset({"email"})


def mask_email(value: str) -> str:
    """Keep the first character of the local part and the domain."""
    local, sep, domain = value.partition("@")
    if not sep:
        return "<redacted>"
    head = local[:1]
    return f"{head}***@{domain}"


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            lowered = key.lower()
            if lowered in _PERSONAL_VALUE_KEYS:
                redacted[key] = "<redacted>" if v else v
            elif lowered in _EMAIL_KEYS and isinstance(v, str):
                redacted[key] = mask_email(v)
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    # Fallback: represent unknown objects without dumping internals.
    return repr(value)
