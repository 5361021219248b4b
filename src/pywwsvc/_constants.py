"""Internal constants shared across the library."""

SERVICE_PATH = "/WWSVC/"
USER_AGENT = "pywwsvc/0.1"

HEADER_EXECUTE_MODE = "WWSVC-EXECUTE-MODE"
HEADER_RESULT_TYPE = "WWSVC-ACCEPT-RESULT-TYPE"
HEADER_RESULT_MAX_LINES = "WWSVC-ACCEPT-RESULT-MAX-LINES"
HEADER_REQUEST_ID = "WWSVC-REQID"
HEADER_TIMESTAMP = "WWSVC-TS"
HEADER_HASH = "WWSVC-HASH"
HEADER_CURSOR = "WWSVC-CURSOR"

EXECUTE_MODE_SYNCHRON = "SYNCHRON"

# Cursor ids with a protocol meaning; anything else is an opaque server token.
CURSOR_CREATE = "CREATE"
CURSOR_CLOSED = "CLOSED"

DEFAULT_RESULT_MAX_LINES = 1000
DEFAULT_PAGE_SIZE = 500
DEFAULT_TIMEOUT = 60.0

DEFAULT_RECORD_METHOD = "PUT"
FIELDS_PARAMETER = "FELDER"
