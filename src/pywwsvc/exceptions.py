"""Custom exception hierarchy for pywwsvc."""

from __future__ import annotations

from typing import Any


class WwsvcError(Exception):
    """Base exception for all pywwsvc errors."""


class WwsvcConfigError(WwsvcError):
    """Invalid or missing configuration."""


class WwsvcUrlError(WwsvcError):
    """Base URL or path segment cannot be composed into a request URL."""


class WwsvcNotAuthenticatedError(WwsvcError):
    """A signed request was attempted on a session without credentials."""

    def __init__(self, message: str = "The client is not authenticated.") -> None:
        super().__init__(message)


class WwsvcMissingCredentialsError(WwsvcError):
    """Authentication was forced but no credentials are configured."""

    def __init__(self, message: str = "Missing credentials.") -> None:
        super().__init__(message)


class WwsvcInvalidHeaderError(WwsvcError):
    """A composed header value cannot be transmitted."""

    def __init__(self, message: str, *, header: str = "") -> None:
        self.header = header
        super().__init__(message)


class WwsvcTransportError(WwsvcError):
    """HTTP-level failure (network, timeout, non-2xx)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        body: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.body = body
        super().__init__(message)


class WwsvcAuthenticationError(WwsvcError):
    """REGISTER was answered but did not yield a usable service pass."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        com_result: Any = None,
    ) -> None:
        self.status_code = status_code
        self.com_result = com_result
        super().__init__(message)


class WwsvcDecodeError(WwsvcError):
    """Response body did not match the expected shape.

    ``payload`` holds the parsed JSON when the body was valid JSON but failed
    validation, so callers can still inspect it; it is ``None`` when the body
    was not JSON at all. ``body`` always holds the raw text.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: str = "",
        body: str = "",
        payload: Any = None,
    ) -> None:
        self.endpoint = endpoint
        self.body = body
        self.payload = payload
        super().__init__(message)
