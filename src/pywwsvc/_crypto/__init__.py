"""Hashing and signing primitives for WEBSERVICES requests."""

from __future__ import annotations

from pywwsvc._crypto.hashing import encode_legacy, md5_hex_legacy
from pywwsvc._crypto.signing import RequestSignature, http_date, sign_request

__all__ = [
    "RequestSignature",
    "encode_legacy",
    "http_date",
    "md5_hex_legacy",
    "sign_request",
]
