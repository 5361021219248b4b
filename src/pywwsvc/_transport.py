"""HTTP transport for the WEBSERVICES endpoints."""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pywwsvc._constants import DEFAULT_TIMEOUT, USER_AGENT
from pywwsvc.exceptions import WwsvcDecodeError, WwsvcTransportError

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RawResponse:
    """A fully buffered HTTP response.

    The body is read before the connection is released, so decoding never
    touches the network.
    """

    status: int
    headers: Mapping[str, str]
    body: bytes = b""
    endpoint: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse the body as JSON.

        Raises
        ------
        WwsvcDecodeError
            If the body is not valid JSON.
        """
        text = self.text()
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise WwsvcDecodeError(
                f"Invalid JSON from {self.endpoint}: {text[:200]}",
                endpoint=self.endpoint,
                body=text,
            ) from exc


class Transport(Protocol):
    """Structural transport interface used by the client.

    Tests pass hand-written doubles; production uses :class:`HttpTransport`.
    """

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        json_body: Mapping[str, Any] | None = None,
        endpoint: str = "",
    ) -> RawResponse: ...


class HttpTransport:
    """aiohttp-backed transport with per-request timeout and optional TLS bypass."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        allow_insecure: bool = False,
        user_agent: str = USER_AGENT,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._allow_insecure = allow_insecure
        self._user_agent = user_agent

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        json_body: Mapping[str, Any] | None = None,
        endpoint: str = "",
    ) -> RawResponse:
        """Send one request and buffer the whole response.

        Non-2xx statuses are returned, not raised; only failures to complete
        the exchange raise :class:`WwsvcTransportError`.
        """
        endpoint = endpoint or url
        request_headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": self._user_agent,
        }
        data: bytes | None = None
        if json_body is not None:
            data = json.dumps(json_body, ensure_ascii=False).encode("utf-8")
            request_headers["content-type"] = "application/json; charset=utf-8"
        if headers:
            request_headers.update(headers)

        kwargs: dict[str, Any] = {}
        if self._allow_insecure:
            kwargs["ssl"] = False

        _logger.debug("%s %s", method, endpoint)

        try:
            async with self._http.request(
                method,
                url,
                data=data,
                headers=request_headers,
                timeout=self._timeout,
                **kwargs,
            ) as resp:
                body = await resp.read()
                return RawResponse(
                    status=resp.status,
                    headers=dict(resp.headers),
                    body=body,
                    endpoint=endpoint,
                )
        except aiohttp.ClientError as exc:
            raise WwsvcTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc
        except TimeoutError as exc:
            raise WwsvcTransportError(
                f"Request to {endpoint} timed out after {self._timeout.total}s",
                endpoint=endpoint,
            ) from exc
