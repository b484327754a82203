# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import errno
import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorKind(str, Enum):
    """Semantic grouping of failures as seen by probe callers."""

    INPUT_INVALID = "INPUT_INVALID"
    NETWORK_UNREACHABLE = "NETWORK_UNREACHABLE"
    INDETERMINATE = "INDETERMINATE"
    REMOTE_ERROR = "REMOTE_ERROR"
    NONE = "NONE"


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    DNS_ERROR = "DNS_ERROR"
    CONNECTION_REFUSED = "CONNECTION_REFUSED"
    HOST_UNREACHABLE = "HOST_UNREACHABLE"
    NETWORK_UNREACHABLE = "NETWORK_UNREACHABLE"
    ADDRESS_NOT_AVAILABLE = "ADDRESS_NOT_AVAILABLE"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    SSL_ERROR = "SSL_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"

    @property
    def kind(self) -> ErrorKind:
        return _CATEGORY_KINDS.get(self, ErrorKind.INDETERMINATE)


_CATEGORY_KINDS = {
    ErrorCategory.INVALID_INPUT: ErrorKind.INPUT_INVALID,
    ErrorCategory.CONNECTION_REFUSED: ErrorKind.NETWORK_UNREACHABLE,
    ErrorCategory.HOST_UNREACHABLE: ErrorKind.NETWORK_UNREACHABLE,
    ErrorCategory.NETWORK_UNREACHABLE: ErrorKind.NETWORK_UNREACHABLE,
    ErrorCategory.HTTP_ERROR: ErrorKind.REMOTE_ERROR,
    ErrorCategory.NONE: ErrorKind.NONE,
}

_ERRNO_CATEGORIES = {
    errno.ECONNREFUSED: ErrorCategory.CONNECTION_REFUSED,
    errno.EHOSTUNREACH: ErrorCategory.HOST_UNREACHABLE,
    errno.ENETUNREACH: ErrorCategory.NETWORK_UNREACHABLE,
    errno.EADDRNOTAVAIL: ErrorCategory.ADDRESS_NOT_AVAILABLE,
    errno.ETIMEDOUT: ErrorCategory.TIMEOUT,
}


def _categorize_os_error(exc: OSError) -> ErrorCategory:
    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR
    if isinstance(exc, (socket.timeout, TimeoutError)):
        return ErrorCategory.TIMEOUT
    if isinstance(exc, ssl_module.SSLError):
        return ErrorCategory.SSL_ERROR
    if isinstance(exc, ConnectionRefusedError):
        return ErrorCategory.CONNECTION_REFUSED
    category = _ERRNO_CATEGORIES.get(exc.errno)
    if category is not None:
        return category
    if isinstance(exc, ConnectionError):
        return ErrorCategory.CONNECTION_ERROR
    return ErrorCategory.UNKNOWN_ERROR


def _root_cause(exc: BaseException) -> OSError | None:
    seen: set[int] = set()
    cause = exc.__cause__ or exc.__context__
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        if isinstance(cause, OSError):
            return cause
        cause = cause.__cause__ or cause.__context__
    return None


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    httpx wraps socket-level failures in its own transport exceptions; the
    underlying OSError (when chained) decides between refused, unreachable and
    DNS failures.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.HTTPStatusError):
        return ErrorCategory.HTTP_ERROR

    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return ErrorCategory.INVALID_INPUT

    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.RemoteProtocolError, httpx.ProxyError)):
        cause = _root_cause(exc)
        if cause is not None:
            category = _categorize_os_error(cause)
            if category is not ErrorCategory.UNKNOWN_ERROR:
                return category
        message = str(exc).lower()
        if "name or service not known" in message or "nodename nor servname" in message:
            return ErrorCategory.DNS_ERROR
        if "certificate" in message or "ssl" in message:
            return ErrorCategory.SSL_ERROR
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, OSError):
        return _categorize_os_error(exc)

    if isinstance(exc, (ValueError, TypeError, UnicodeError)):
        return ErrorCategory.INVALID_INPUT

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout during probe",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.CONNECTION_REFUSED: "Connection refused",
        ErrorCategory.HOST_UNREACHABLE: "Host unreachable",
        ErrorCategory.NETWORK_UNREACHABLE: "Network unreachable",
        ErrorCategory.ADDRESS_NOT_AVAILABLE: "Address not available",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.HTTP_ERROR: "Remote returned an error status",
        ErrorCategory.INVALID_INPUT: "Invalid probe input",
        ErrorCategory.UNKNOWN_ERROR: "Network error during probe",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Probe failed due to network error")


__all__ = ["ErrorCategory", "ErrorKind", "categorize_exception", "error_category_to_reason"]
