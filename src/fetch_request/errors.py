"""
Error types for fetch-request.
"""
from typing import Any, Optional

import httpx


class FetchError(Exception):
    """Base exception for request construction and dispatch errors."""

    def __init__(self, message: str, url: Optional[Any] = None):
        super().__init__(message)
        self.url = url

    def with_url(self, url: Any) -> "FetchError":
        self.url = url
        return self

    def __str__(self) -> str:
        msg = super().__str__()
        if self.url is not None:
            return f"{msg} (url: {self.url})"
        return msg


class BuilderError(FetchError):
    """Raised when a request could not be constructed."""
    pass


class TransportError(FetchError):
    def __init__(self, cause: Exception, url: Optional[Any] = None):
        msg = f"Error sending request: {type(cause).__name__}: {cause}"
        super().__init__(msg, url)
        self.cause = cause

    def is_timeout(self) -> bool:
        return isinstance(self.cause, httpx.TimeoutException)

    def is_connect(self) -> bool:
        return isinstance(self.cause, httpx.ConnectError)


class StatusError(FetchError):
    def __init__(self, status: int, status_text: str, url: Optional[Any] = None):
        kind = "client" if status < 500 else "server"
        msg = f"HTTP status {kind} error ({status} {status_text})"
        super().__init__(msg, url)
        self.status = status
        self.status_text = status_text
