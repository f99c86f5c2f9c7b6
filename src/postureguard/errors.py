# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    INVALID_URL = "INVALID_URL"
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class PostureGuardError(Exception):
    """Base class for errors raised by PostureGuard."""

    category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR

    @property
    def reason(self) -> str:
        return error_category_to_reason(self.category)


class InvalidURLError(PostureGuardError, ValueError):
    """The target URL could not be parsed as an absolute URL."""

    category = ErrorCategory.INVALID_URL

    def __init__(self, url: str, detail: str = ""):
        self.url = url
        self.detail = detail
        message = f"failed to parse URL {url!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class FetchError(PostureGuardError):
    """The page could not be fetched, so there is nothing to analyze."""

    def __init__(self, url: str, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR):
        self.url = url
        self.category = category
        super().__init__(f"failed to fetch {url}: {message}")


def categorize_exception(exc: Exception) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, InvalidURLError):
        return ErrorCategory.INVALID_URL

    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return ErrorCategory.INVALID_URL

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.INVALID_URL: "Target URL is not a valid absolute URL",
        ErrorCategory.TIMEOUT: "Network timeout while fetching page",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Network error while fetching page",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Fetch failed due to network error")


__all__ = [
    "ErrorCategory",
    "FetchError",
    "InvalidURLError",
    "PostureGuardError",
    "categorize_exception",
    "error_category_to_reason",
]
