"""
Auth handler utilities for fetch_request.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from ..types import RequestContext
from ..config import AuthConfig

logger = logging.getLogger(__name__)
LOG_PREFIX = "[AUTH]"


def _mask_value(val: Optional[str]) -> str:
    """Mask sensitive value for logging, showing first 10 chars."""
    if not val:
        return "<empty>"
    if len(val) <= 10:
        return "*" * len(val)
    return val[:10] + "*" * (len(val) - 10)


KeyResolver = Callable[[RequestContext], Optional[str]]


class AuthHandler(ABC):
    """
    Auth handler interface.

    A per-request key from ``get_api_key_for_request`` takes precedence over
    the static ``api_key``; no header is produced when neither yields a key.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        get_api_key_for_request: Optional[KeyResolver] = None,
    ):
        self._api_key = api_key
        self._get_api_key_for_request = get_api_key_for_request

    def resolve_key(self, context: RequestContext) -> Optional[str]:
        key = None
        if self._get_api_key_for_request:
            key = self._get_api_key_for_request(context)
        return key or self._api_key or None

    def get_header(self, context: RequestContext) -> Optional[Dict[str, str]]:
        """Get auth header for request."""
        key = self.resolve_key(context)
        if not key:
            return None
        header = self.format_header(key)
        logger.debug(
            f"{LOG_PREFIX} {type(self).__name__}.get_header: "
            f"{', '.join(header)}={_mask_value(key)}"
        )
        return header

    @abstractmethod
    def format_header(self, key: str) -> Dict[str, str]:
        ...


class BearerAuthHandler(AuthHandler):
    """Bearer token auth handler."""

    def format_header(self, key: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {key}"}


class CustomAuthHandler(AuthHandler):
    """Fixed header name auth handler (x-api-key, custom headers, basic)."""

    def __init__(
        self,
        header_name: str,
        api_key: Optional[str] = None,
        get_api_key_for_request: Optional[KeyResolver] = None,
    ):
        super().__init__(api_key, get_api_key_for_request)
        self._header_name = header_name

    def format_header(self, key: str) -> Dict[str, str]:
        return {self._header_name: key}


def create_auth_handler(config: AuthConfig) -> AuthHandler:
    """Create auth handler from config."""
    raw_key = config.raw_api_key.get_secret_value() if config.raw_api_key else None

    logger.debug(
        f"{LOG_PREFIX} create_auth_handler: type={config.type}, "
        f"raw_api_key={_mask_value(raw_key)}, username={_mask_value(config.username)}"
    )

    t = config.type

    if t == "basic":
        return CustomAuthHandler(
            header_name="Authorization",
            api_key="Basic " + config.api_key,
            get_api_key_for_request=config.get_api_key_for_request,
        )

    if t == "bearer":
        return BearerAuthHandler(raw_key, config.get_api_key_for_request)

    # x-api-key and custom
    return CustomAuthHandler(
        config.get_auth_header_name(),
        raw_key,
        config.get_api_key_for_request,
    )
