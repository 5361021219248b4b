"""pywwsvc - Async Python client for SoftENGINE WEBSERVICES."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pywwsvc")
except PackageNotFoundError:
    __version__ = "0+local"

from pywwsvc._api._envelope import PreparedRequest
from pywwsvc._crypto.signing import RequestSignature, sign_request
from pywwsvc._transport import HttpTransport, RawResponse, Transport
from pywwsvc.client import WebwareClient
from pywwsvc.config import WwsvcConfig
from pywwsvc.cursor import Cursor, CursorState
from pywwsvc.exceptions import (
    WwsvcAuthenticationError,
    WwsvcConfigError,
    WwsvcDecodeError,
    WwsvcError,
    WwsvcInvalidHeaderError,
    WwsvcMissingCredentialsError,
    WwsvcNotAuthenticatedError,
    WwsvcTransportError,
    WwsvcUrlError,
)
from pywwsvc.models import (
    ComResult,
    Credentials,
    ListResponse,
    WwsvcRecord,
    list_field_names,
)
from pywwsvc.pagination import CursoredResponse, CursorPage
from pywwsvc.session import ResultType, SessionState, WebwareSession

__all__ = [
    "__version__",
    "ComResult",
    "Credentials",
    "Cursor",
    "CursorPage",
    "CursorState",
    "CursoredResponse",
    "HttpTransport",
    "ListResponse",
    "PreparedRequest",
    "RawResponse",
    "RequestSignature",
    "ResultType",
    "SessionState",
    "Transport",
    "WebwareClient",
    "WebwareSession",
    "WwsvcAuthenticationError",
    "WwsvcConfig",
    "WwsvcConfigError",
    "WwsvcDecodeError",
    "WwsvcError",
    "WwsvcInvalidHeaderError",
    "WwsvcMissingCredentialsError",
    "WwsvcNotAuthenticatedError",
    "WwsvcRecord",
    "WwsvcTransportError",
    "WwsvcUrlError",
    "list_field_names",
    "sign_request",
]
