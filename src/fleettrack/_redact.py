"""Helpers for safe debug logging.

Update payloads and API responses may carry bearer tokens, broker
credentials, and driver identities. This module provides a small utility
to redact sensitive fields before emitting DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "authorization",
        "cookie",
        # Operator identity
        "driver",
        "driverid",
        "email",
    }
)

# Matched against the lower-cased key with "_" removed, so ``mqtt_password``,
# ``mqttPassword`` and ``apiToken`` are all caught.
_SENSITIVE_KEY_SUFFIXES: tuple[str, ...] = ("password", "token", "secret")


def _is_sensitive(key: str) -> bool:
    normalized = key.lower().replace("_", "")
    return normalized in _SENSITIVE_VALUE_KEYS or normalized.endswith(_SENSITIVE_KEY_SUFFIXES)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Mappings have sensitive keys masked, sequences are redacted element by
    element, long strings are truncated and raw bytes are summarized by size.
    """
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {
            str(key): "<redacted>"
            if _is_sensitive(str(key))
            else redact_for_log(item, max_string=max_string, _depth=_depth + 1)
            for key, item in value.items()
        }

    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]

    return repr(value)
