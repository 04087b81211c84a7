"""
Configuration models and validation for fetch-request.
"""
import base64
from dataclasses import dataclass
from typing import Any, Callable, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

from .types import RequestContext

# Constants
DEFAULT_TIMEOUT_CONNECT = 5.0
DEFAULT_TIMEOUT_READ = 30.0
DEFAULT_TIMEOUT_WRITE = 10.0

AuthType = Literal["basic", "bearer", "x-api-key", "custom"]


class TimeoutConfig(BaseModel):
    """Timeout configuration."""
    connect: float = DEFAULT_TIMEOUT_CONNECT
    read: float = DEFAULT_TIMEOUT_READ
    write: float = DEFAULT_TIMEOUT_WRITE
    pool: Optional[float] = None


class AuthConfig(BaseModel):
    """Default authentication applied to every request the client sends."""
    type: AuthType
    raw_api_key: Optional[SecretStr] = None
    username: Optional[str] = None
    password: Optional[SecretStr] = None
    header_name: Optional[str] = None

    # Callback for dynamic key resolution
    get_api_key_for_request: Optional[Callable[[RequestContext], Optional[str]]] = None

    @property
    def api_key(self) -> str:
        """
        Get the computed API key ready for the header.
        - For basic: Returns the base64 encoded ``username:password``
        - For bearer/x-api-key/custom: Returns the raw key
        """
        if self.type == "basic":
            if self.username and self.password:
                raw = f"{self.username}:{self.password.get_secret_value()}"
                return base64.b64encode(raw.encode()).decode()
            return ""
        if self.raw_api_key:
            return self.raw_api_key.get_secret_value()
        return ""

    def get_auth_header_name(self) -> str:
        """Get the expected header name."""
        if self.type == "x-api-key":
            return "x-api-key"
        if self.type == "custom":
            return self.header_name or "Authorization"
        return "Authorization"

    @model_validator(mode='after')
    def validate_auth_config(self) -> 'AuthConfig':
        """Validate that required fields are present for the selected auth type."""
        t = self.type

        if t == "basic" and not (self.username and self.password):
            raise ValueError("Basic auth requires 'username' and 'password'")

        if t in ("bearer", "x-api-key") and not self.raw_api_key:
            raise ValueError(f"{t} requires 'raw_api_key'")

        if t == "custom" and not (self.header_name and self.raw_api_key):
            raise ValueError(f"{t} requires 'header_name' and 'raw_api_key'")

        return self


class ClientConfig(BaseModel):
    """Client configuration."""
    model_config = {"arbitrary_types_allowed": True}

    base_url: Optional[str] = None
    auth: Optional[AuthConfig] = None
    timeout: Optional[Union[float, TimeoutConfig]] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    follow_redirects: bool = True

    # Optional pre-configured client (httpx)
    httpx_client: Any = None

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")


def normalize_timeout(timeout: Optional[Union[float, TimeoutConfig]]) -> TimeoutConfig:
    """Normalize timeout to TimeoutConfig object."""
    if timeout is None:
        return TimeoutConfig()
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=float(timeout), read=float(timeout), write=float(timeout))
    return timeout


@dataclass
class ResolvedConfig:
    """Fully resolved configuration ready for usage."""
    base_url: Optional[str]
    auth: Optional[AuthConfig]
    timeout: TimeoutConfig
    headers: Dict[str, str]
    follow_redirects: bool


def resolve_config(config: ClientConfig) -> ResolvedConfig:
    """Apply defaults and return resolved config."""
    return ResolvedConfig(
        base_url=config.base_url,
        auth=config.auth,
        timeout=normalize_timeout(config.timeout),
        headers=dict(config.headers),
        follow_redirects=config.follow_redirects,
    )
