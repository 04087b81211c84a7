"""
FetchClient: creates request builders and dispatches finished requests
through httpx.
"""
import logging
from typing import Any, Dict, Optional, Union

import httpx

from .auth.auth_handler import AuthHandler, create_auth_handler
from .config import ClientConfig, ResolvedConfig, resolve_config
from .errors import BuilderError, TransportError
from .headers import HeaderMap, HeaderValue
from .request import Request, RequestBuilder
from .response import FetchResponse
from .types import RequestContext

logger = logging.getLogger(__name__)

# Constants
LOG_PREFIX = "[FetchClient]"
EXTENSION_FETCH_MODE = "fetch_mode"
EXTENSION_CACHE_MODE = "cache_mode"


def _format_body(body: Optional[bytes]) -> str:
    """Format body for logging, never dumping binary payloads."""
    if not body:
        return "<empty>"
    return f"<{len(body)} bytes>"


class FetchClient:
    """
    HTTP client wrapping httpx.AsyncClient.

    ``request()`` and the verb helpers return a ``RequestBuilder``; a builder
    created from an invalid method or URL starts out failed.
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        config = config or ClientConfig()
        self._config_raw = config
        self._config: ResolvedConfig = resolve_config(config)
        self._client: Optional[httpx.AsyncClient] = config.httpx_client
        self._default_headers = HeaderMap(self._config.headers)
        self._auth_handler: Optional[AuthHandler] = None

        if self._config.auth:
            self._auth_handler = create_auth_handler(self._config.auth)

        # Flag to track if we own the client (created it)
        self._own_client = self._client is None

    @classmethod
    def create(cls, config: Optional[ClientConfig] = None) -> "FetchClient":
        """Factory method to create a client."""
        return cls(config)

    @property
    def config(self) -> ResolvedConfig:
        return self._config

    async def connect(self) -> None:
        """Initialize the client if needed."""
        if self._client:
            return

        timeout = httpx.Timeout(
            connect=self._config.timeout.connect,
            read=self._config.timeout.read,
            write=self._config.timeout.write,
            pool=self._config.timeout.pool
        )

        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=self._config.follow_redirects,
        )

    async def close(self) -> None:
        """Close the client if we own it."""
        if self._own_client and self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FetchClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _resolve_url(self, url: Union[str, httpx.URL]) -> Union[str, httpx.URL]:
        base_url = self._config.base_url
        if base_url and isinstance(url, str) and "://" not in url:
            return f"{base_url}/{url.lstrip('/')}"
        return url

    def request(self, method: Union[str, bytes], url: Union[str, httpx.URL]) -> RequestBuilder:
        """Start building a request for ``method`` and ``url``."""
        try:
            req = Request(method, self._resolve_url(url))
        except BuilderError as e:
            logger.debug(f"{LOG_PREFIX} request({method!r}, {str(url)!r}) failed: {e}")
            return RequestBuilder(self, e)
        return RequestBuilder(self, req)

    def get(self, url: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request("GET", url)

    def post(self, url: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request("POST", url)

    def put(self, url: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request("PUT", url)

    def patch(self, url: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request("PATCH", url)

    def delete(self, url: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request("DELETE", url)

    def head(self, url: Union[str, httpx.URL]) -> RequestBuilder:
        return self.request("HEAD", url)

    def _prepare_headers(self, request: Request) -> HeaderMap:
        """Merge default and auth headers the request does not already carry."""
        headers = request.headers.copy()
        for name in self._default_headers:
            if name not in headers:
                for value in self._default_headers.get_all(name):
                    headers.append(name, value)

        if self._auth_handler:
            context: RequestContext = {
                "method": request.method,
                "url": str(request.url),
                "headers": {
                    str(name): value.as_bytes().decode("latin-1")
                    for name, value in headers.items()
                },
                "body": request.body.as_bytes() if request.body is not None else None,
            }
            auth_headers = self._auth_handler.get_header(context)
            for name, value in (auth_headers or {}).items():
                if name not in headers:
                    headers.append(name, HeaderValue.from_value(value, sensitive=True))
        return headers

    def _build_extensions(self, request: Request) -> Dict[str, Any]:
        extensions: Dict[str, Any] = {}
        if request.fetch_mode is not None:
            extensions[EXTENSION_FETCH_MODE] = request.fetch_mode.value
        if request.cache_mode is not None:
            extensions[EXTENSION_CACHE_MODE] = request.cache_mode.value
        return extensions

    async def execute(self, request: Request) -> FetchResponse:
        """Send a finished request and wait for the response."""
        if not self._client:
            await self.connect()

        assert self._client is not None

        headers = self._prepare_headers(request)
        content = request.body.as_bytes() if request.body is not None else None

        http_request = self._client.build_request(
            method=request.method,
            url=request.url,
            headers=headers.raw(),
            content=content,
            timeout=request.timeout if request.timeout is not None else httpx.USE_CLIENT_DEFAULT,
            extensions=self._build_extensions(request),
        )

        logger.debug(f"{LOG_PREFIX} Request: {request.method} {request.url} body={_format_body(content)}")

        try:
            response = await self._client.send(http_request)
        except httpx.RequestError as e:
            logger.error(f"{LOG_PREFIX} Request failed: {request.method} {request.url}: {e}")
            raise TransportError(e, url=str(request.url)) from e

        logger.debug(f"{LOG_PREFIX} Response: {response.status_code} {response.url}")

        res_data: Any = None
        try:
            res_data = response.json()
        except ValueError:
            res_data = response.text

        return FetchResponse(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            url=str(response.url),
            content=response.content,
            data=res_data,
            ok=response.is_success,
        )
