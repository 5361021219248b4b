"""High-level async client for SoftENGINE WEBSERVICES."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from typing import Any, TypeVar

import aiohttp
from pydantic import TypeAdapter, ValidationError

from pywwsvc._api._envelope import Parameters, PreparedRequest, build_exec_json_request
from pywwsvc._api.records import build_record_call
from pywwsvc._api.register import (
    DEREGISTER_ENDPOINT,
    EXEC_JSON_ENDPOINT,
    REGISTER_ENDPOINT,
    build_deregister_url,
    build_exec_json_url,
    build_register_url,
    parse_register_response,
    service_base_url,
)
from pywwsvc._constants import DEFAULT_PAGE_SIZE, HEADER_CURSOR
from pywwsvc._redact import redact_path_tail
from pywwsvc._transport import HttpTransport, RawResponse, Transport
from pywwsvc.config import WwsvcConfig
from pywwsvc.cursor import Cursor
from pywwsvc.exceptions import (
    WwsvcDecodeError,
    WwsvcError,
    WwsvcMissingCredentialsError,
    WwsvcNotAuthenticatedError,
    WwsvcTransportError,
)
from pywwsvc.models.credentials import Credentials
from pywwsvc.models.record import WwsvcRecord
from pywwsvc.models.responses import ListResponse
from pywwsvc.pagination import CursoredResponse
from pywwsvc.session import ResultType, SessionState, WebwareSession

_logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R", bound=WwsvcRecord)


class WebwareClient:
    """Async client for SoftENGINE WEBSERVICES.

    Usage::

        async with WebwareClient(config) as client:
            async with client.registered():
                articles = await client.get(Article, {"ARTNR": "4711"})
    """

    def __init__(
        self,
        config: WwsvcConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._base_url = service_base_url(config.webware_url)
        self._external_session = session is not None
        self._http_session = session
        self._external_transport = transport is not None
        self._transport = transport
        self._session = WebwareSession(config)
        self._register_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> WebwareClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(
                self._http_session,
                timeout=self._config.timeout,
                allow_insecure=self._config.allow_insecure,
                user_agent=self._config.user_agent,
            )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Session info
    # ------------------------------------------------------------------

    @property
    def config(self) -> WwsvcConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session(self) -> WebwareSession:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    @property
    def credentials(self) -> Credentials | None:
        return self._session.credentials

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register(self) -> WebwareClient:
        """Obtain a service pass, unless the client already holds one.

        Pre-provisioned credentials from the configuration are activated
        without a network call.

        Raises
        ------
        WwsvcAuthenticationError
            If the server answered but did not issue a service pass.
        WwsvcTransportError
            If the REGISTER exchange itself failed.
        """
        async with self._register_lock:
            if self._session.is_authenticated:
                return self
            if self._config.credentials is not None:
                self._session.authenticate(self._config.credentials)
                return self

            transport = self._require_transport()
            url = build_register_url(
                self._base_url,
                self._config.vendor_hash,
                self._config.app_hash,
                self._config.secret,
                self._config.revision,
            )
            response = await transport.request(
                "GET",
                url,
                endpoint=redact_path_tail(url, REGISTER_ENDPOINT),
            )
            credentials = parse_register_response(response)
            self._session.authenticate(credentials)
            _logger.info("Registered with WEBSERVICES at %s", self._base_url)
            return self

    def assume_registered(self) -> WebwareClient:
        """Activate the configured credentials without contacting the server.

        Raises
        ------
        WwsvcMissingCredentialsError
            If the configuration carries no credentials.
        """
        if self._session.is_authenticated:
            return self
        if self._config.credentials is None:
            raise WwsvcMissingCredentialsError()
        self._session.authenticate(self._config.credentials)
        return self

    async def deregister(self) -> WebwareClient:
        """Invalidate the service pass and drop it locally.

        The DEREGISTER call is best effort: its failure is logged and the
        local credentials are discarded regardless.
        """
        credentials = self._session.credentials
        if credentials is None:
            return self
        try:
            transport = self._require_transport()
            url = build_deregister_url(self._base_url, credentials.service_pass)
            headers = await self._session.build_headers()
            await transport.request(
                "GET",
                url,
                headers=headers,
                endpoint=redact_path_tail(url, DEREGISTER_ENDPOINT),
            )
        except WwsvcError:
            _logger.debug("DEREGISTER failed, discarding credentials anyway", exc_info=True)
        finally:
            self._session.clear_credentials()
        return self

    async def with_registered(self, fn: Callable[[WebwareClient], Awaitable[T]]) -> T:
        """Register, run *fn* with this client, then always deregister."""
        async with self.registered():
            return await fn(self)

    @contextlib.asynccontextmanager
    async def registered(self) -> AsyncIterator[WebwareClient]:
        await self.register()
        try:
            yield self
        finally:
            await self.deregister()

    # ------------------------------------------------------------------
    # Headers and cursor
    # ------------------------------------------------------------------

    async def build_headers(
        self,
        extra: Mapping[str, str] | None = None,
        *,
        result_type: ResultType = ResultType.JSON,
    ) -> dict[str, str]:
        """Headers for a hand-made call; consumes a request id when authenticated."""
        return await self._session.build_headers(extra, result_type=result_type)

    async def create_cursor(self, page_size: int = DEFAULT_PAGE_SIZE) -> Cursor:
        return await self._session.create_cursor(page_size)

    async def close_cursor(self) -> None:
        await self._session.close_cursor()

    async def has_cursor(self) -> bool:
        return await self._session.has_cursor()

    async def cursor_closed(self) -> bool:
        return await self._session.cursor_closed()

    async def suspend_cursor(self) -> None:
        await self._session.suspend_cursor()

    async def resume_cursor(self) -> None:
        await self._session.resume_cursor()

    async def set_result_max_lines(self, max_lines: int) -> None:
        await self._session.set_result_max_lines(max_lines)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise WwsvcError("Client not initialized. Use 'async with WebwareClient(...) as client:'")
        return self._transport

    async def prepare_request(
        self,
        method: str,
        function: str,
        version: int = 1,
        parameters: Parameters | None = None,
        headers: Mapping[str, str] | None = None,
        *,
        result_type: ResultType = ResultType.JSON,
    ) -> PreparedRequest:
        """Sign and build an EXECJSON request.

        This consumes a request id. The returned request must be passed to
        :meth:`execute_request` once.

        Raises
        ------
        WwsvcNotAuthenticatedError
            If the client holds no service pass. Nothing is sent.
        """
        self._session.require_credentials()
        url = build_exec_json_url(self._base_url)
        credentials, signed = await self._session.sign_headers(headers, result_type=result_type)
        if credentials is None:
            # deregistered while waiting for the session lock
            raise WwsvcNotAuthenticatedError()
        body = build_exec_json_request(
            function=function,
            version=version,
            parameters=parameters,
            service_pass=credentials.service_pass,
            headers=signed,
        )
        return PreparedRequest(method=method.upper(), url=url, headers=signed, body=body)

    async def execute_request(self, request: PreparedRequest) -> RawResponse:
        """Send a prepared request and advance the cursor from the response.

        The response is returned whatever its HTTP status.
        """
        transport = self._require_transport()
        if _logger.isEnabledFor(logging.DEBUG):
            _logger.debug("send request\n%s", request.to_http_string())
        response = await transport.request(
            request.method,
            request.url,
            headers=request.headers,
            json_body=request.json_body(),
            endpoint=EXEC_JSON_ENDPOINT,
        )
        await self._session.apply_response_cursor(response.header(HEADER_CURSOR))
        return response

    async def request_response(
        self,
        method: str,
        function: str,
        version: int = 1,
        parameters: Parameters | None = None,
        headers: Mapping[str, str] | None = None,
        *,
        result_type: ResultType = ResultType.JSON,
    ) -> RawResponse:
        """Prepare and execute a request, returning the raw response."""
        prepared = await self.prepare_request(
            method, function, version, parameters, headers, result_type=result_type
        )
        return await self.execute_request(prepared)

    async def request(
        self,
        method: str,
        function: str,
        version: int = 1,
        parameters: Parameters | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Perform a request and return the parsed JSON body."""
        response = await self.request_response(method, function, version, parameters, headers)
        return _decode_json(response)

    async def request_as(
        self,
        target: type[T],
        method: str,
        function: str,
        version: int = 1,
        parameters: Parameters | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> T:
        """Perform a request and validate the JSON body as *target*.

        Raises
        ------
        WwsvcDecodeError
            If the body does not match *target*; ``payload`` holds the
            parsed JSON for manual inspection.
        """
        response = await self.request_response(method, function, version, parameters, headers)
        payload = _decode_json(response)
        try:
            return TypeAdapter(target).validate_python(payload)
        except ValidationError as exc:
            raise WwsvcDecodeError(
                f"{function} response does not match {getattr(target, '__name__', target)}: {exc}",
                endpoint=EXEC_JSON_ENDPOINT,
                body=response.text(),
                payload=payload,
            ) from exc

    async def request_list(
        self,
        item_type: type[T],
        method: str,
        function: str,
        version: int = 1,
        parameters: Parameters | None = None,
        headers: Mapping[str, str] | None = None,
        *,
        container_key: str | None = None,
        item_key: str | None = None,
    ) -> ListResponse[T]:
        """Perform a list request and decode it as ``ListResponse[item_type]``."""
        response = await self.request_response(method, function, version, parameters, headers)
        payload = _decode_json(response)
        if not isinstance(payload, Mapping):
            raise WwsvcDecodeError(
                f"{function} response is not a JSON object",
                endpoint=EXEC_JSON_ENDPOINT,
                body=response.text(),
                payload=payload,
            )
        try:
            return ListResponse[item_type].from_payload(  # type: ignore[valid-type]
                payload,
                function,
                container_key=container_key,
                item_key=item_key,
            )
        except ValidationError as exc:
            raise WwsvcDecodeError(
                f"{function} list items do not match {getattr(item_type, '__name__', item_type)}: {exc}",
                endpoint=EXEC_JSON_ENDPOINT,
                body=response.text(),
                payload=payload,
            ) from exc

    def cursored_request(
        self,
        item_type: type[T],
        method: str,
        function: str,
        version: int = 1,
        parameters: Parameters | None = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        headers: Mapping[str, str] | None = None,
        container_key: str | None = None,
        item_key: str | None = None,
        stop_on_empty_page: bool = True,
    ) -> CursoredResponse[T]:
        """Return a paginator over a cursored list function.

        No request is sent until the first page is fetched.
        """
        return CursoredResponse(
            self,
            item_type,
            method,
            function,
            version,
            parameters,
            page_size=page_size,
            headers=headers,
            container_key=container_key,
            item_key=item_key,
            stop_on_empty_page=stop_on_empty_page,
        )

    # ------------------------------------------------------------------
    # Typed records
    # ------------------------------------------------------------------

    async def get(
        self,
        record_type: type[R],
        parameters: Parameters | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> ListResponse[R]:
        """Fetch ``<FUNCTION>.GET`` for *record_type* in one request."""
        call = build_record_call(record_type, parameters)
        return await self.request_list(
            record_type,
            call.method,
            call.function,
            call.version,
            call.parameters,
            headers,
            container_key=call.container_key,
            item_key=call.item_key,
        )

    def get_cursored(
        self,
        record_type: type[R],
        parameters: Parameters | None = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        stop_on_empty_page: bool = True,
    ) -> CursoredResponse[R]:
        """Paginate ``<FUNCTION>.GET`` for *record_type*."""
        call = build_record_call(record_type, parameters)
        return self.cursored_request(
            record_type,
            call.method,
            call.function,
            call.version,
            call.parameters,
            page_size=page_size,
            container_key=call.container_key,
            item_key=call.item_key,
            stop_on_empty_page=stop_on_empty_page,
        )


def _decode_json(response: RawResponse) -> Any:
    """Raise for non-2xx responses, then parse the body."""
    if not response.ok:
        text = response.text()
        raise WwsvcTransportError(
            f"HTTP {response.status} from {response.endpoint}: {text[:200]}",
            status_code=response.status,
            endpoint=response.endpoint,
            body=text,
        )
    return response.json()
