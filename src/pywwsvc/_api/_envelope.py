"""EXECJSON request construction.

The pass info block repeats the signature values from the headers; it
is filled from the very header set that will be sent so the body and the
headers can never disagree.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from pywwsvc._constants import HEADER_HASH, HEADER_REQUEST_ID, HEADER_TIMESTAMP
from pywwsvc._redact import redact_for_log
from pywwsvc.models.requests import (
    ExecJsonRequest,
    ServiceFunction,
    ServiceFunctionParameter,
    ServicePassInfo,
)

Parameters = Mapping[str, Any]


def to_service_function_parameters(parameters: Parameters | None) -> list[ServiceFunctionParameter]:
    """Convert a mapping into ``PNAME``/``PCONTENT`` pairs, values via ``str()``."""
    if not parameters:
        return []
    return [ServiceFunctionParameter(name=str(name), content=str(value)) for name, value in parameters.items()]


def build_exec_json_request(
    *,
    function: str,
    version: int,
    parameters: Parameters | None,
    service_pass: str,
    headers: Mapping[str, str],
) -> ExecJsonRequest:
    """Build the EXECJSON body from signed *headers*."""
    return ExecJsonRequest(
        function=ServiceFunction(
            function_name=function,
            parameters=to_service_function_parameters(parameters),
            revision=version,
        ),
        pass_info=ServicePassInfo(
            service_pass=service_pass,
            app_hash=headers.get(HEADER_HASH, ""),
            timestamp=headers.get(HEADER_TIMESTAMP, ""),
            request_id=int(headers.get(HEADER_REQUEST_ID, "0")),
        ),
    )


@dataclasses.dataclass(frozen=True)
class PreparedRequest:
    """A signed request ready to be executed exactly once."""

    method: str
    url: str
    headers: dict[str, str]
    body: ExecJsonRequest

    @property
    def request_id(self) -> int:
        return self.body.pass_info.request_id

    def json_body(self) -> dict[str, Any]:
        return self.body.to_wire()

    def to_http_string(self, *, redact: bool = True) -> str:
        """Render the request as an HTTP/1.1 message, secrets redacted by default."""
        parts = urlsplit(self.url)
        target = parts.path + (f"?{parts.query}" if parts.query else "")
        headers: Mapping[str, Any] = redact_for_log(self.headers) if redact else self.headers
        body: Any = redact_for_log(self.json_body()) if redact else self.json_body()

        lines = [f"{self.method} {target} HTTP/1.1"]
        if parts.netloc:
            lines.append(f"host: {parts.netloc}")
        lines.extend(f"{name}: {value}" for name, value in headers.items())
        lines.append("")
        lines.append(json.dumps(body, ensure_ascii=False))
        return "\n".join(lines)
