"""Application-wide constants and limits."""


class StatusRanges:
    """HTTP status boundaries used to pick a log severity."""

    CLIENT_ERROR_MIN = 400  # First status logged as a warning
    SERVER_ERROR_MIN = 500  # First status logged as an error


class Headers:
    """Header names read or written by the request logger."""

    REQUEST_ID = "X-Request-ID"
    FORWARDED_FOR = "X-Forwarded-For"
    USER_AGENT = "User-Agent"


class RecordFields:
    """Field names of the fixed part of a request log record."""

    TAG = "tag"
    TAG_VALUE = "request"
    ID = "id"
    STATUS = "status"
    METHOD = "method"
    PATH = "path"
    REMOTE_IP = "remote_ip"
    PROTOCOL = "protocol"
    LATENCY = "latency"
    HOST = "host"
    USER_AGENT = "user-agent"
    FORWARDED_FOR = "forwarded_for"
    USERNAME = "username"


# Request state attribute holding the error returned by the handler chain
CHAIN_ERROR_STATE_KEY = "chain_error"

# Default request state attribute read when username logging is switched on
DEFAULT_USERNAME_KEY = "username"

# Keys a tag or tagged header may not use: the fixed record fields, the
# optional toggled fields and the keys structlog itself writes
RESERVED_FIELD_NAMES = frozenset(
    {
        RecordFields.TAG,
        RecordFields.ID,
        RecordFields.STATUS,
        RecordFields.METHOD,
        RecordFields.PATH,
        RecordFields.REMOTE_IP,
        RecordFields.PROTOCOL,
        RecordFields.LATENCY,
        RecordFields.HOST,
        RecordFields.USER_AGENT,
        RecordFields.FORWARDED_FOR,
        RecordFields.USERNAME,
        "event",
        "level",
        "log_level",
        "logger",
        "timestamp",
    }
)
