"""REGISTER / DEREGISTER endpoints and URL composition.

Endpoints (relative to ``<webware_url>/WWSVC/``):
  - WWSERVICE/REGISTER/<vendor_hash>/<app_hash>/<secret>/<revision>/
  - WWSERVICE/DEREGISTER/<service_pass>/
  - EXECJSON
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote, urljoin, urlsplit

from pydantic import ValidationError

from pywwsvc._constants import SERVICE_PATH
from pywwsvc._redact import redact_for_log
from pywwsvc._transport import RawResponse
from pywwsvc.exceptions import WwsvcAuthenticationError, WwsvcDecodeError, WwsvcUrlError
from pywwsvc.models.credentials import Credentials
from pywwsvc.models.results import ComResult, RegisterResponse

_logger = logging.getLogger(__name__)

REGISTER_ENDPOINT = "WWSERVICE/REGISTER/"
DEREGISTER_ENDPOINT = "WWSERVICE/DEREGISTER/"
EXEC_JSON_ENDPOINT = "EXECJSON"


def service_base_url(webware_url: str) -> str:
    """Join the instance URL with the service path.

    ``https://host:8080`` and ``https://host:8080/anything`` both become
    ``https://host:8080/WWSVC/``.
    """
    url = webware_url.strip()
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise WwsvcUrlError(f"webware_url must be an absolute http(s) URL, got {webware_url!r}")
    return urljoin(url, SERVICE_PATH)


def _segment(value: object, name: str) -> str:
    text = str(value).strip()
    if not text:
        raise WwsvcUrlError(f"Empty path segment for {name}")
    return quote(text, safe="")


def build_register_url(base_url: str, vendor_hash: str, app_hash: str, secret: str, revision: int) -> str:
    segments = "/".join(
        (
            _segment(vendor_hash, "vendor_hash"),
            _segment(app_hash, "app_hash"),
            _segment(secret, "secret"),
            _segment(revision, "revision"),
        )
    )
    return f"{base_url}{REGISTER_ENDPOINT}{segments}/"


def build_deregister_url(base_url: str, service_pass: str) -> str:
    return f"{base_url}{DEREGISTER_ENDPOINT}{_segment(service_pass, 'service_pass')}/"


def build_exec_json_url(base_url: str) -> str:
    return f"{base_url}{EXEC_JSON_ENDPOINT}"


def _com_result_of(payload: Any) -> ComResult | None:
    if not isinstance(payload, dict):
        return None
    try:
        return ComResult.model_validate(payload.get("COMRESULT"))
    except ValidationError:
        return None


def parse_register_response(response: RawResponse) -> Credentials:
    """Extract the service pass from a REGISTER response.

    Raises
    ------
    WwsvcAuthenticationError
        On a non-2xx status, a body that is not JSON, or a missing
        ``SERVICEPASS.PASSID``/``APPID``.
    """
    try:
        payload = response.json()
    except WwsvcDecodeError as exc:
        raise WwsvcAuthenticationError(
            f"REGISTER failed: HTTP {response.status}, body is not JSON",
            status_code=response.status,
        ) from exc

    _logger.debug("REGISTER response status=%s parsed=%s", response.status, redact_for_log(payload))
    com_result = _com_result_of(payload)

    if not response.ok:
        raise WwsvcAuthenticationError(
            f"REGISTER failed: HTTP {response.status}",
            status_code=response.status,
            com_result=com_result,
        )

    try:
        parsed = RegisterResponse.model_validate(payload)
    except ValidationError as exc:
        raise WwsvcAuthenticationError(
            "REGISTER response missing SERVICEPASS.PASSID/APPID",
            status_code=response.status,
            com_result=com_result,
        ) from exc

    service_pass = parsed.service_pass
    if not service_pass.pass_id.strip() or not service_pass.app_id.strip():
        raise WwsvcAuthenticationError(
            "REGISTER response has an empty SERVICEPASS.PASSID/APPID",
            status_code=response.status,
            com_result=com_result,
        )

    return Credentials(service_pass=service_pass.pass_id, app_id=service_pass.app_id)
