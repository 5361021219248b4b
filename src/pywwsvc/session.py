"""Session state for authenticated WEBSERVICES calls.

:class:`WebwareSession` holds the fixed configuration, the credentials
issued by REGISTER and the mutable per-call state: request counter, cursor
and cursor suspension flag. The mutable state is guarded by one
:class:`asyncio.Lock` held across "sign -> read cursor -> build headers",
so concurrent calls can never emit the same request id or pair an id with
another call's hash.
"""

from __future__ import annotations

import asyncio
import dataclasses
import enum
from collections.abc import Mapping
from datetime import datetime

from pywwsvc._constants import (
    EXECUTE_MODE_SYNCHRON,
    HEADER_CURSOR,
    HEADER_EXECUTE_MODE,
    HEADER_HASH,
    HEADER_REQUEST_ID,
    HEADER_RESULT_MAX_LINES,
    HEADER_RESULT_TYPE,
    HEADER_TIMESTAMP,
)
from pywwsvc._crypto.signing import sign_request
from pywwsvc.config import WwsvcConfig
from pywwsvc.cursor import Cursor
from pywwsvc.exceptions import WwsvcInvalidHeaderError, WwsvcNotAuthenticatedError
from pywwsvc.models.credentials import Credentials


class SessionState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class ResultType(enum.StrEnum):
    """Value of ``WWSVC-ACCEPT-RESULT-TYPE``."""

    JSON = "JSON"
    BIN = "BIN"


@dataclasses.dataclass
class _MutableState:
    result_max_lines: int
    cursor: Cursor | None = None
    current_request: int = 0
    suspend_cursor: bool = False


def _check_header(name: str, value: str) -> None:
    if not name.isascii() or not value.isascii() or any(ch in value for ch in "\r\n\0"):
        raise WwsvcInvalidHeaderError(
            f"Header {name!r} has a value that cannot be transmitted: {value!r}",
            header=name,
        )


class WebwareSession:
    """Credentials, request counter and cursor of one WEBSERVICES client.

    The session starts :attr:`SessionState.UNAUTHENTICATED`, even when the
    configuration carries pre-provisioned credentials; those only become
    active through :meth:`authenticate`.
    """

    def __init__(self, config: WwsvcConfig) -> None:
        self._config = config
        self._credentials: Credentials | None = None
        self._state = _MutableState(result_max_lines=config.result_max_lines)
        self._lock = asyncio.Lock()

    @property
    def config(self) -> WwsvcConfig:
        return self._config

    @property
    def credentials(self) -> Credentials | None:
        return self._credentials

    @property
    def state(self) -> SessionState:
        if self._credentials is None:
            return SessionState.UNAUTHENTICATED
        return SessionState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self._credentials is not None

    @property
    def current_request_id(self) -> int:
        """The last request id handed out (``0`` before the first call)."""
        return self._state.current_request

    def authenticate(self, credentials: Credentials) -> None:
        self._credentials = credentials

    def clear_credentials(self) -> None:
        self._credentials = None

    def require_credentials(self) -> Credentials:
        if self._credentials is None:
            raise WwsvcNotAuthenticatedError()
        return self._credentials

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    async def build_headers(
        self,
        extra: Mapping[str, str] | None = None,
        *,
        result_type: ResultType = ResultType.JSON,
        now: datetime | None = None,
    ) -> dict[str, str]:
        """Return the headers for the next call.

        When authenticated this signs the call and consumes a request id,
        so every returned header set must be sent at most once.
        ``extra`` headers are merged last and win over the defaults.
        """
        _credentials, headers = await self.sign_headers(extra, result_type=result_type, now=now)
        return headers

    async def sign_headers(
        self,
        extra: Mapping[str, str] | None = None,
        *,
        result_type: ResultType = ResultType.JSON,
        now: datetime | None = None,
    ) -> tuple[Credentials | None, dict[str, str]]:
        """Like :meth:`build_headers`, also returning the signing credentials.

        Both are read under the same lock, so the service pass sent in a
        request body always belongs to the app id its hash is bound to.
        ``None`` means the headers are unsigned.
        """
        extra_headers = {str(k): str(v) for k, v in (extra or {}).items()}
        for name, value in extra_headers.items():
            _check_header(name, value)

        async with self._lock:
            state = self._state
            max_lines = state.result_max_lines
            headers: dict[str, str] = {}
            credentials = self._credentials

            if credentials is not None:
                signature = sign_request(state.current_request, credentials.app_id, now=now)
                state.current_request = signature.request_id

                headers[HEADER_REQUEST_ID] = str(signature.request_id)
                headers[HEADER_TIMESTAMP] = signature.timestamp
                headers[HEADER_HASH] = signature.hash

            cursor = state.cursor
            if not state.suspend_cursor and cursor is not None and not cursor.is_closed():
                headers[HEADER_CURSOR] = cursor.cursor_id
                max_lines = cursor.page_size

        headers[HEADER_EXECUTE_MODE] = EXECUTE_MODE_SYNCHRON
        headers[HEADER_RESULT_TYPE] = str(result_type)
        headers[HEADER_RESULT_MAX_LINES] = str(max_lines)
        headers.update(extra_headers)

        for name, value in headers.items():
            _check_header(name, value)
        return credentials, headers

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    async def create_cursor(self, page_size: int) -> Cursor:
        """Install a fresh cursor used by all following calls until closed."""
        cursor = Cursor(page_size=page_size)
        async with self._lock:
            self._state.cursor = cursor
        return cursor

    async def close_cursor(self) -> None:
        async with self._lock:
            self._state.cursor = None

    async def has_cursor(self) -> bool:
        async with self._lock:
            return self._state.cursor is not None

    async def cursor_closed(self) -> bool:
        """Whether there is no cursor, or the server closed it."""
        async with self._lock:
            cursor = self._state.cursor
            return cursor is None or cursor.is_closed()

    async def suspend_cursor(self) -> None:
        """Send the following calls without the cursor, keeping it intact."""
        async with self._lock:
            self._state.suspend_cursor = True

    async def resume_cursor(self) -> None:
        async with self._lock:
            self._state.suspend_cursor = False

    async def set_result_max_lines(self, max_lines: int) -> None:
        if max_lines <= 0:
            raise ValueError(f"max_lines must be positive, got {max_lines}")
        async with self._lock:
            self._state.result_max_lines = max_lines

    async def apply_response_cursor(self, cursor_id: str | None) -> None:
        """Advance the cursor to the id a response carried in ``WWSVC-CURSOR``.

        Ignored while the cursor is suspended, closed or absent.
        """
        if cursor_id is None:
            return
        async with self._lock:
            cursor = self._state.cursor
            if self._state.suspend_cursor or cursor is None or cursor.is_closed():
                return
            cursor.advance(cursor_id.strip())
