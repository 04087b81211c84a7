"""
Fetch Request - deferred-error request builder over httpx
"""

__version__ = "0.1.0"

from .errors import FetchError, BuilderError, TransportError, StatusError
from .types import HttpMethod, FetchMode, CacheMode, to_method
from .headers import HeaderMap, HeaderName, HeaderValue
from .body import Body
from .request import Request, RequestBuilder
from .config import ClientConfig, AuthConfig, TimeoutConfig
from .response import FetchResponse
from .client import FetchClient

__all__ = [
    "FetchError", "BuilderError", "TransportError", "StatusError",
    "HttpMethod", "FetchMode", "CacheMode", "to_method",
    "HeaderMap", "HeaderName", "HeaderValue",
    "Body",
    "Request", "RequestBuilder",
    "ClientConfig", "AuthConfig", "TimeoutConfig",
    "FetchResponse",
    "FetchClient",
]
