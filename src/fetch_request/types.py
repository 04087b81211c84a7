"""
Core type definitions for fetch-request.
"""
import re
from enum import Enum
from typing import Any, Dict, Literal, TypedDict, Union

from .errors import BuilderError

# HTTP Methods
HttpMethod = Literal[
    "GET", "POST", "PUT", "DELETE", "HEAD", "OPTIONS", "CONNECT", "PATCH", "TRACE"
]

STANDARD_METHODS = (
    "GET", "POST", "PUT", "DELETE", "HEAD", "OPTIONS", "CONNECT", "PATCH", "TRACE"
)

# RFC 7230 token characters
TOKEN_PATTERN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


class FetchMode(str, Enum):
    """
    Cross-origin fetch mode.
    See https://developer.mozilla.org/en-US/docs/Web/API/Request/mode
    """
    SAME_ORIGIN = "same-origin"
    NO_CORS = "no-cors"
    CORS = "cors"
    NAVIGATE = "navigate"


class CacheMode(str, Enum):
    """
    Cache interaction mode.
    See https://developer.mozilla.org/en-US/docs/Web/API/Request/cache
    """
    DEFAULT = "default"
    NO_STORE = "no-store"
    RELOAD = "reload"
    NO_CACHE = "no-cache"
    FORCE_CACHE = "force-cache"
    ONLY_IF_CACHED = "only-if-cached"


def to_method(value: Union[str, bytes]) -> str:
    """Validate an HTTP method token. Methods are case-sensitive."""
    if isinstance(value, bytes):
        try:
            value = value.decode("ascii")
        except UnicodeDecodeError:
            raise BuilderError(f"invalid HTTP method: {value!r}")
    if not isinstance(value, str):
        raise BuilderError(f"invalid HTTP method type: {type(value).__name__}")
    if value in STANDARD_METHODS:
        return value
    if not TOKEN_PATTERN.fullmatch(value):
        raise BuilderError(f"invalid HTTP method: {value!r}")
    return value


class RequestContext(TypedDict):
    """Context passed to auth callbacks."""
    method: str
    url: str
    headers: Dict[str, str]
    body: Any
