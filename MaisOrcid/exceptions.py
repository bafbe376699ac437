from __future__ import annotations

import json
import socket
from typing import Optional

import requests

__all__ = [
    "MaisOrcidError",
    "InvalidArgumentError",
    "UpstreamStatusError",
    "UpstreamPayloadError",
    "TransientTransportError",
    "TokenError",
    "TIMEOUT_ERRORS",
    "TRANSPORT_ERRORS",
    "JSON_ERRORS",
    "FILE_IO_ERRORS",
    "FILE_READ_ERRORS",
    "UPSTREAM_ERRORS",
    "ALL_API_ERRORS",
]


class MaisOrcidError(RuntimeError):
    """
    Base class for every error raised by the MAIS ORCID client.
    """


class InvalidArgumentError(MaisOrcidError, ValueError):
    """
    Raised before any request is sent when the caller passes missing or
    malformed arguments, such as a lookup without a SUNet ID or ORCID iD.
    """


class UpstreamStatusError(MaisOrcidError):
    """
    The API answered with an HTTP status we do not accept.
    """

    def __init__(self, status: int, message: Optional[str] = None):
        self.status = status
        super().__init__(message or f"UIT MAIS ORCID User API returned {status}")


class UpstreamPayloadError(MaisOrcidError):
    """
    The API answered 200 but the body carries an error or cannot be used.
    The raw body is kept for diagnosis.
    """

    def __init__(self, body: str, message: Optional[str] = None):
        self.body = body
        super().__init__(message or f"UIT MAIS ORCID User API returned an error: {body}")


class TransientTransportError(MaisOrcidError):
    """
    Connection failures and timeouts that were still failing after the retry
    policy gave up.
    """


class TokenError(MaisOrcidError):
    """
    The client credentials exchange did not produce an access token.
    """

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(message)


# errors that signal an operation has taken too long at the HTTP client, OS or socket level
TIMEOUT_ERRORS = (requests.exceptions.Timeout, TimeoutError, socket.timeout)

# transient failures of the transport itself; a received HTTP status is never one of these
TRANSPORT_ERRORS = (requests.exceptions.ConnectionError,) + TIMEOUT_ERRORS

# JSON parsing errors when decoding API responses
JSON_ERRORS = (json.JSONDecodeError, ValueError, TypeError)

# file system operation errors when reading the credentials file
# Note: FileNotFoundError is a subclass of OSError, so both are included for clarity
FILE_IO_ERRORS = (FileNotFoundError, OSError)

# credentials file read errors including I/O failures, encoding issues, and malformed content
FILE_READ_ERRORS = FILE_IO_ERRORS + (UnicodeDecodeError, ValueError)

# errors raised after the API answered, one way or another
UPSTREAM_ERRORS = (UpstreamStatusError, UpstreamPayloadError)

# everything a caller of the client may see from a network operation
ALL_API_ERRORS = UPSTREAM_ERRORS + (TransientTransportError, TokenError)
