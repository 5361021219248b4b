"""Per-request signature for authenticated WEBSERVICES calls."""

from __future__ import annotations

import dataclasses
from datetime import UTC, datetime
from email.utils import format_datetime

from pywwsvc._crypto.hashing import md5_hex_legacy


def http_date(now: datetime | None = None) -> str:
    """Format *now* (default: current time) as an IMF-fixdate.

    Example: ``Tue, 15 Nov 1994 08:12:31 GMT``.
    """
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return format_datetime(now.astimezone(UTC), usegmt=True)


@dataclasses.dataclass(frozen=True)
class RequestSignature:
    """Signature values for one outgoing request.

    ``timestamp`` is the exact string that went into ``hash`` and must be
    sent verbatim as ``WWSVC-TS`` and ``TIMESTAMP``.
    """

    request_id: int
    hash: str
    timestamp: str


def sign_request(current_request_id: int, app_id: str, *, now: datetime | None = None) -> RequestSignature:
    """Sign the next request of a session.

    Algorithm:
      1. Format the current time as an HTTP-date
      2. Concatenate ``app_id + date``
      3. MD5 over the Windows-1252 bytes, lowercase hex

    Parameters
    ----------
    current_request_id : int
        The last request id used by the session.
    app_id : str
        The ``APPID`` issued by REGISTER.
    now : datetime or None
        Clock override, mainly for tests.

    Returns
    -------
    RequestSignature
        Signature carrying ``current_request_id + 1``.
    """
    if current_request_id < 0:
        raise ValueError(f"request id must be non-negative, got {current_request_id}")
    timestamp = http_date(now)
    return RequestSignature(
        request_id=current_request_id + 1,
        hash=md5_hex_legacy(f"{app_id}{timestamp}"),
        timestamp=timestamp,
    )
