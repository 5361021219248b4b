from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest

from pywwsvc._crypto.hashing import md5_hex_legacy
from pywwsvc.config import WwsvcConfig
from pywwsvc.exceptions import WwsvcInvalidHeaderError, WwsvcNotAuthenticatedError
from pywwsvc.models.credentials import Credentials
from pywwsvc.session import ResultType, SessionState, WebwareSession

FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)
FIXED_DATE = "Fri, 01 Mar 2024 12:00:00 GMT"


def _make_config(**overrides: object) -> WwsvcConfig:
    values: dict[str, object] = {
        "webware_url": "https://webware.example.com:8080",
        "vendor_hash": "vendor-hash",
        "app_hash": "app-hash",
        "secret": "1",
        "revision": 1,
    }
    values.update(overrides)
    return WwsvcConfig(**values)  # type: ignore[arg-type]


def _make_session(*, authenticated: bool = True) -> WebwareSession:
    session = WebwareSession(_make_config())
    if authenticated:
        session.authenticate(Credentials(service_pass="p1", app_id="a1"))
    return session


@pytest.mark.asyncio
async def test_unauthenticated_headers_are_unsigned() -> None:
    session = _make_session(authenticated=False)

    headers = await session.build_headers()

    assert headers == {
        "WWSVC-EXECUTE-MODE": "SYNCHRON",
        "WWSVC-ACCEPT-RESULT-TYPE": "JSON",
        "WWSVC-ACCEPT-RESULT-MAX-LINES": "1000",
    }
    assert session.current_request_id == 0


@pytest.mark.asyncio
async def test_authenticated_headers_are_signed_with_app_id() -> None:
    session = _make_session()

    first = await session.build_headers(now=FIXED_NOW)
    second = await session.build_headers(now=FIXED_NOW)

    assert first["WWSVC-REQID"] == "1"
    assert first["WWSVC-TS"] == FIXED_DATE
    assert first["WWSVC-HASH"] == md5_hex_legacy(f"a1{FIXED_DATE}")
    assert second["WWSVC-REQID"] == "2"
    assert session.current_request_id == 2


@pytest.mark.asyncio
async def test_bin_result_type() -> None:
    session = _make_session()

    headers = await session.build_headers(result_type=ResultType.BIN)

    assert headers["WWSVC-ACCEPT-RESULT-TYPE"] == "BIN"


@pytest.mark.asyncio
async def test_open_cursor_is_sent_with_its_page_size() -> None:
    session = _make_session()
    await session.create_cursor(25)

    headers = await session.build_headers()
    await session.apply_response_cursor("tok1")
    advanced = await session.build_headers()

    assert headers["WWSVC-CURSOR"] == "CREATE"
    assert headers["WWSVC-ACCEPT-RESULT-MAX-LINES"] == "25"
    assert advanced["WWSVC-CURSOR"] == "tok1"


@pytest.mark.asyncio
async def test_closed_cursor_is_not_sent() -> None:
    session = _make_session()
    await session.create_cursor(25)
    await session.apply_response_cursor("CLOSED")

    headers = await session.build_headers()

    assert "WWSVC-CURSOR" not in headers
    assert headers["WWSVC-ACCEPT-RESULT-MAX-LINES"] == "1000"
    assert await session.cursor_closed()
    assert await session.has_cursor()


@pytest.mark.asyncio
async def test_closed_cursor_ignores_further_ids() -> None:
    session = _make_session()
    await session.create_cursor(25)
    await session.apply_response_cursor("CLOSED")
    await session.apply_response_cursor("tok9")

    assert await session.cursor_closed()


@pytest.mark.asyncio
async def test_suspended_cursor_is_neither_sent_nor_advanced() -> None:
    session = _make_session()
    await session.create_cursor(25)
    await session.suspend_cursor()

    suspended = await session.build_headers()
    await session.apply_response_cursor("tok1")
    await session.resume_cursor()
    resumed = await session.build_headers()

    assert "WWSVC-CURSOR" not in suspended
    assert suspended["WWSVC-ACCEPT-RESULT-MAX-LINES"] == "1000"
    assert resumed["WWSVC-CURSOR"] == "CREATE"


@pytest.mark.asyncio
async def test_missing_cursor_counts_as_closed() -> None:
    session = _make_session()

    assert not await session.has_cursor()
    assert await session.cursor_closed()

    await session.create_cursor(10)
    assert not await session.cursor_closed()

    await session.close_cursor()
    assert not await session.has_cursor()


@pytest.mark.asyncio
async def test_extra_headers_are_merged_last() -> None:
    session = _make_session()

    headers = await session.build_headers({"WWSVC-ACCEPT-RESULT-MAX-LINES": "5", "X-Trace": "abc"})

    assert headers["WWSVC-ACCEPT-RESULT-MAX-LINES"] == "5"
    assert headers["X-Trace"] == "abc"
    assert headers["WWSVC-REQID"] == "1"


@pytest.mark.asyncio
async def test_invalid_extra_header_does_not_consume_a_request_id() -> None:
    session = _make_session()

    with pytest.raises(WwsvcInvalidHeaderError) as exc_info:
        await session.build_headers({"X-Name": "Müller"})

    assert exc_info.value.header == "X-Name"
    assert session.current_request_id == 0

    with pytest.raises(WwsvcInvalidHeaderError):
        await session.build_headers({"X-Split": "a\r\nb"})


@pytest.mark.asyncio
async def test_concurrent_header_builds_never_share_a_request_id() -> None:
    session = _make_session()
    await session.create_cursor(10)

    results = await asyncio.gather(*(session.build_headers() for _ in range(50)))

    ids = sorted(int(headers["WWSVC-REQID"]) for headers in results)
    assert ids == list(range(1, 51))
    assert session.current_request_id == 50


@pytest.mark.asyncio
async def test_set_result_max_lines() -> None:
    session = _make_session()
    await session.set_result_max_lines(42)

    headers = await session.build_headers()

    assert headers["WWSVC-ACCEPT-RESULT-MAX-LINES"] == "42"
    with pytest.raises(ValueError):
        await session.set_result_max_lines(0)


def test_state_follows_credentials() -> None:
    session = _make_session(authenticated=False)
    assert session.state is SessionState.UNAUTHENTICATED
    with pytest.raises(WwsvcNotAuthenticatedError):
        session.require_credentials()

    session.authenticate(Credentials(service_pass="p1", app_id="a1"))
    assert session.state is SessionState.AUTHENTICATED
    assert session.require_credentials().service_pass == "p1"

    session.clear_credentials()
    assert not session.is_authenticated


def test_configured_credentials_are_not_active_until_authenticated() -> None:
    session = WebwareSession(_make_config(credentials=Credentials(service_pass="p1", app_id="a1")))

    assert session.state is SessionState.UNAUTHENTICATED
