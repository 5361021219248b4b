"""Hash helpers for WEBSERVICES request signing.

The server hashes the Windows-1252 bytes of the signed string, so the
client must do the same; hashing the UTF-8 bytes gives a different digest
as soon as a non-ASCII character is involved.
"""

from __future__ import annotations

import codecs
import hashlib

LEGACY_ENCODING = "cp1252"
_ERROR_HANDLER = "pywwsvc.whatwg-1252"

# Python's cp1252 leaves these bytes undefined; the WHATWG windows-1252
# table maps them to the C1 code point with the same value.
_C1_PASSTHROUGH: frozenset[int] = frozenset({0x81, 0x8D, 0x8F, 0x90, 0x9D})


def _whatwg_fallback(exc: UnicodeError) -> tuple[bytes, int]:
    """Encode unmappable characters the way a WHATWG encoder does.

    C1 passthrough code points become their own byte, everything else
    becomes a decimal numeric character reference (``&#322;``).
    """
    if not isinstance(exc, UnicodeEncodeError):
        raise exc
    out = bytearray()
    for char in exc.object[exc.start : exc.end]:
        code_point = ord(char)
        if code_point in _C1_PASSTHROUGH:
            out.append(code_point)
        else:
            out.extend(f"&#{code_point};".encode("ascii"))
    return bytes(out), exc.end


codecs.register_error(_ERROR_HANDLER, _whatwg_fallback)


def encode_legacy(value: str) -> bytes:
    """Encode *value* as Windows-1252, never raising on unmappable input."""
    return value.encode(LEGACY_ENCODING, errors=_ERROR_HANDLER)


def md5_hex_legacy(value: str) -> str:
    """Compute MD5 over the Windows-1252 bytes of *value*, lowercase hex.

    Parameters
    ----------
    value : str
        The string to hash.

    Returns
    -------
    str
        32-character lowercase hex digest.
    """
    return hashlib.md5(encode_legacy(value)).hexdigest()
