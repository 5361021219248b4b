"""Helpers for safe debug logging.

Request bodies and headers carry the service pass, the app id bound into
every hash and, for REGISTER, the application secret in the URL path.
Everything logged at DEBUG goes through :func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "servicepass",
        "service_pass",
        "passid",
        "appid",
        "app_id",
        "apphash",
        "secret",
        "credentials",
        "wwsvc-hash",
        "authorization",
        "cookie",
    }
)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)


def redact_path_tail(url: str, marker: str) -> str:
    """Replace everything after *marker* in *url* with ``<redacted>``.

    Used for ``WWSERVICE/REGISTER/...`` and ``WWSERVICE/DEREGISTER/...``
    whose path segments are secrets.
    """
    head, sep, _tail = url.partition(marker)
    if not sep:
        return url
    return f"{head}{marker}<redacted>"
