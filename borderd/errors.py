"""
borderd Error Model

Status codes follow the network stack's numbering so that every
reply's "Error" field can be compared directly with stack logs.
"""

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric status written into every reply's "Error" field."""
    NONE = 0
    FAILED = 1
    DROP = 2
    NO_BUFS = 3
    NO_ROUTE = 4
    BUSY = 5
    PARSE = 6
    INVALID_ARGS = 7
    SECURITY = 8
    ADDRESS_QUERY = 9
    NO_ADDRESS = 10
    ABORT = 11
    NOT_IMPLEMENTED = 12
    INVALID_STATE = 13
    NO_ACK = 14
    DETACHED = 16
    NOT_FOUND = 23
    ALREADY = 24
    NOT_CAPABLE = 27
    RESPONSE_TIMEOUT = 28
    DUPLICATED = 29
    GENERIC = 255


class GatewayError(Exception):
    """Base error carrying a reply status code."""

    code = ErrorCode.FAILED

    def __init__(self, message: str = "", code: "ErrorCode | None" = None):
        super().__init__(message or self.__class__.__name__)
        if code is not None:
            self.code = ErrorCode(code)
        self.message = str(self)


class ParseError(GatewayError):
    """Malformed RPC parameter (bad hex, wrong length, non-numeric)."""

    code = ErrorCode.PARSE


class StackError(GatewayError):
    """Error reported by the network stack, propagated verbatim."""

    def __init__(self, code: ErrorCode, message: str = ""):
        super().__init__(message or f"stack error {ErrorCode(code).name}", code)


class WakeError(GatewayError):
    """Failed to signal the event-notification channel."""

    code = ErrorCode.FAILED
