"""
Request value object and its fluent builder.

``RequestBuilder`` never raises mid-chain. A failing step (bad header name or
value, bad mode token, unserializable JSON) is captured, every later step
becomes a pass-through, and the first captured error is raised by ``send()``
or ``build()``.
"""
import base64
import copy
import json as jsonlib
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Type, TypeVar, Union

import httpx

from .body import Body, BodyLike, FormData
from .errors import BuilderError
from .headers import HeaderItems, HeaderMap, HeaderName, HeaderNameLike, HeaderValue, HeaderValueLike
from .types import CacheMode, FetchMode, to_method

if TYPE_CHECKING:
    from .client import FetchClient
    from .response import FetchResponse

logger = logging.getLogger(__name__)

LOG_PREFIX = "[RequestBuilder]"

_E = TypeVar("_E", bound=Enum)


def to_url(value: Union[str, httpx.URL]) -> httpx.URL:
    """Parse a URL, requiring it to be absolute."""
    try:
        url = value if isinstance(value, httpx.URL) else httpx.URL(value)
    except (httpx.InvalidURL, TypeError) as e:
        raise BuilderError(f"invalid URL: {e}", url=value) from e
    if not url.scheme or not url.host:
        raise BuilderError("URL must be absolute", url=value)
    if url.scheme not in ("http", "https"):
        raise BuilderError(f"URL scheme is not allowed: {url.scheme}", url=value)
    return url


def _to_mode(enum_cls: Type[_E], value: Union[_E, str]) -> _E:
    try:
        return enum_cls(value)
    except ValueError as e:
        raise BuilderError(f"invalid {enum_cls.__name__} token: {value!r}") from e


class Request:
    """A request which can be executed with ``FetchClient.execute()``."""

    def __init__(self, method: Union[str, bytes], url: Union[str, httpx.URL]):
        self._method = to_method(method)
        self._url = to_url(url)
        self._headers = HeaderMap()
        self._body: Optional[Body] = None
        self._fetch_mode: Optional[FetchMode] = None
        self._cache_mode: Optional[CacheMode] = None
        self._timeout: Optional[float] = None

    @property
    def method(self) -> str:
        return self._method

    @method.setter
    def method(self, value: str) -> None:
        # Not re-validated.
        self._method = value

    @property
    def url(self) -> httpx.URL:
        return self._url

    @url.setter
    def url(self, value: Union[str, httpx.URL]) -> None:
        self._url = value if isinstance(value, httpx.URL) else httpx.URL(value)

    @property
    def headers(self) -> HeaderMap:
        """
        The live header map.

        Mutating it directly bypasses the builder's deferred errors:
        ``HeaderMap.append`` raises ``BuilderError`` at once on bad input.
        """
        return self._headers

    @headers.setter
    def headers(self, value: HeaderMap) -> None:
        self._headers = value

    @property
    def body(self) -> Optional[Body]:
        return self._body

    @body.setter
    def body(self, value: Optional[BodyLike]) -> None:
        self._body = None if value is None else Body.from_value(value)

    @property
    def fetch_mode(self) -> Optional[FetchMode]:
        return self._fetch_mode

    @fetch_mode.setter
    def fetch_mode(self, value: Optional[Union[FetchMode, str]]) -> None:
        self._fetch_mode = None if value is None else FetchMode(value)

    @property
    def cache_mode(self) -> Optional[CacheMode]:
        return self._cache_mode

    @cache_mode.setter
    def cache_mode(self, value: Optional[Union[CacheMode, str]]) -> None:
        self._cache_mode = None if value is None else CacheMode(value)

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    @timeout.setter
    def timeout(self, value: Optional[float]) -> None:
        self._timeout = value

    def try_clone(self) -> "Request":
        """Copy the request. Bodies are held in memory, so this always succeeds."""
        clone = copy.copy(self)
        clone._headers = self._headers.copy()
        return clone

    def __repr__(self) -> str:
        return f"Request({_fmt_request_fields(self)})"


def _fmt_request_fields(req: Request) -> str:
    return f"method={req.method!r}, url={str(req.url)!r}, headers={req.headers!r}"


class RequestBuilder:
    """
    Fluent builder for a ``Request``.

    Holds either a valid request or the first construction error. Each chain
    method returns the builder itself. A builder is single-use: ``send()`` or
    ``build()`` consumes it and any further call raises ``RuntimeError``.
    """

    def __init__(self, client: "FetchClient", request: Union[Request, BuilderError]):
        self._client = client
        self._request: Optional[Request] = None
        self._error: Optional[BuilderError] = None
        self._consumed = False
        if isinstance(request, BuilderError):
            self._error = request
        else:
            self._request = request

    @property
    def client(self) -> "FetchClient":
        return self._client

    @property
    def error(self) -> Optional[BuilderError]:
        """The captured construction error, if any."""
        return self._error

    def _active(self, op: str) -> Optional[Request]:
        if self._consumed:
            raise RuntimeError(f"RequestBuilder.{op}() called after the builder was consumed")
        if self._request is None:
            logger.debug(f"{LOG_PREFIX} {op}: skipped, builder already failed")
        return self._request

    def _fail(self, error: BuilderError) -> None:
        assert self._request is not None
        if error.url is None:
            error.with_url(self._request.url)
        logger.debug(f"{LOG_PREFIX} captured construction error: {error}")
        self._request = None
        self._error = error

    def _take(self, op: str) -> Request:
        if self._consumed:
            raise RuntimeError(f"RequestBuilder.{op}() called after the builder was consumed")
        request, error = self._request, self._error
        self._consumed = True
        self._request = None
        self._error = None
        if error is not None:
            raise error
        assert request is not None
        return request

    def body(self, value: BodyLike) -> "RequestBuilder":
        """Set the request body."""
        req = self._active("body")
        if req is not None:
            req.body = Body.from_value(value)
        return self

    def header(self, name: HeaderNameLike, value: HeaderValueLike) -> "RequestBuilder":
        """Append a header. Repeated names accumulate values."""
        req = self._active("header")
        if req is not None:
            try:
                key = HeaderName.from_value(name)
                val = HeaderValue.from_value(value)
            except BuilderError as e:
                self._fail(e)
            else:
                req.headers.append(key, val)
        return self

    def headers(self, items: HeaderItems) -> "RequestBuilder":
        """Append several headers. Nothing is appended if any pair is invalid."""
        req = self._active("headers")
        if req is not None:
            try:
                validated = HeaderMap(items)
            except BuilderError as e:
                self._fail(e)
            except (TypeError, ValueError) as e:
                self._fail(BuilderError(f"invalid headers: {e}"))
            else:
                req.headers.extend(validated)
        return self

    def _sensitive_header(self, op: str, name: str, value: str) -> "RequestBuilder":
        req = self._active(op)
        if req is not None:
            try:
                val = HeaderValue.from_value(value, sensitive=True)
            except BuilderError as e:
                self._fail(e)
            else:
                req.headers.append(name, val)
        return self

    def bearer_auth(self, token: str) -> "RequestBuilder":
        """Append a bearer ``Authorization`` header, marked sensitive."""
        return self._sensitive_header("bearer_auth", "authorization", f"Bearer {token}")

    def basic_auth(self, username: str, password: Optional[str] = None) -> "RequestBuilder":
        """Append a basic ``Authorization`` header, marked sensitive."""
        raw = f"{username}:{password}" if password is not None else f"{username}:"
        encoded = base64.b64encode(raw.encode()).decode()
        return self._sensitive_header("basic_auth", "authorization", f"Basic {encoded}")

    def query(self, params: Any) -> "RequestBuilder":
        """Add query parameters to the URL, keeping any already present."""
        req = self._active("query")
        if req is not None:
            try:
                url = req.url
                for key, value in httpx.QueryParams(params).multi_items():
                    url = url.copy_add_param(key, value)
            except (TypeError, ValueError) as e:
                self._fail(BuilderError(f"invalid query parameters: {e}"))
            else:
                req.url = url
        return self

    def json(self, data: Any) -> "RequestBuilder":
        """Serialize ``data`` as the JSON body."""
        req = self._active("json")
        if req is not None:
            try:
                payload = jsonlib.dumps(data, allow_nan=False)
            except (TypeError, ValueError) as e:
                self._fail(BuilderError(f"cannot serialize JSON body: {e}"))
            else:
                if "content-type" not in req.headers:
                    req.headers.insert("content-type", "application/json")
                req.body = payload
        return self

    def form(self, data: FormData) -> "RequestBuilder":
        """Url-encode ``data`` as the body."""
        req = self._active("form")
        if req is not None:
            try:
                payload = Body.from_value(data)
            except (TypeError, ValueError) as e:
                self._fail(BuilderError(f"cannot encode form body: {e}"))
            else:
                if "content-type" not in req.headers:
                    req.headers.insert("content-type", "application/x-www-form-urlencoded")
                req.body = payload
        return self

    def timeout(self, seconds: float) -> "RequestBuilder":
        req = self._active("timeout")
        if req is not None:
            req.timeout = seconds
        return self

    def fetch_mode(self, mode: Union[FetchMode, str]) -> "RequestBuilder":
        """
        Set the fetch mode.
        See https://developer.mozilla.org/en-US/docs/Web/API/Request/mode
        """
        req = self._active("fetch_mode")
        if req is not None:
            try:
                req.fetch_mode = _to_mode(FetchMode, mode)
            except BuilderError as e:
                self._fail(e)
        return self

    def cache_mode(self, mode: Union[CacheMode, str]) -> "RequestBuilder":
        """
        Set the cache mode.
        See https://developer.mozilla.org/en-US/docs/Web/API/Request/cache
        """
        req = self._active("cache_mode")
        if req is not None:
            try:
                req.cache_mode = _to_mode(CacheMode, mode)
            except BuilderError as e:
                self._fail(e)
        return self

    def build(self) -> Request:
        """Return the finished request, or raise the captured error."""
        return self._take("build")

    async def send(self) -> "FetchResponse":
        """
        Build the request and send it with the builder's client.

        Raises the captured ``BuilderError`` without touching the network,
        or ``TransportError`` if the exchange itself fails.
        """
        request = self._take("send")
        return await self._client.execute(request)

    def __repr__(self) -> str:
        if self._request is not None:
            return f"RequestBuilder({_fmt_request_fields(self._request)})"
        if self._error is not None:
            return f"RequestBuilder(error={self._error!r})"
        return "RequestBuilder(<consumed>)"
