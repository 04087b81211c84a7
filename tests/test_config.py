"""
Tests for configuration models and auth handlers.
"""
import pytest
from pydantic import ValidationError

from fetch_request.auth import BearerAuthHandler, CustomAuthHandler, create_auth_handler
from fetch_request.config import (
    AuthConfig,
    ClientConfig,
    TimeoutConfig,
    normalize_timeout,
    resolve_config,
)

CONTEXT = {"method": "GET", "url": "https://example.com/api", "headers": {}, "body": None}


class TestClientConfig:

    def test_defaults(self):
        config = ClientConfig()
        assert config.base_url is None
        assert config.headers == {}
        assert config.follow_redirects is True

    def test_base_url_trailing_slash_stripped(self):
        config = ClientConfig(base_url="https://api.example.com/v1/")
        assert config.base_url == "https://api.example.com/v1"

    def test_base_url_requires_http_scheme(self):
        with pytest.raises(ValidationError):
            ClientConfig(base_url="ftp://example.com")

    def test_resolve_config(self):
        resolved = resolve_config(ClientConfig(timeout=3, headers={"X-A": "1"}))
        assert resolved.timeout.connect == 3.0
        assert resolved.timeout.read == 3.0
        assert resolved.headers == {"X-A": "1"}


def test_normalize_timeout():
    assert normalize_timeout(None) == TimeoutConfig()
    custom = TimeoutConfig(connect=1.0)
    assert normalize_timeout(custom) is custom


class TestAuthConfig:

    def test_bearer_requires_key(self):
        with pytest.raises(ValidationError):
            AuthConfig(type="bearer")

    def test_basic_requires_username_and_password(self):
        with pytest.raises(ValidationError):
            AuthConfig(type="basic", username="user")

    def test_custom_requires_header_name(self):
        with pytest.raises(ValidationError):
            AuthConfig(type="custom", raw_api_key="k")

    def test_basic_api_key_is_base64(self):
        config = AuthConfig(type="basic", username="user", password="pass")
        assert config.api_key == "dXNlcjpwYXNz"

    def test_header_names(self):
        assert AuthConfig(type="x-api-key", raw_api_key="k").get_auth_header_name() == "x-api-key"
        assert AuthConfig(
            type="custom", raw_api_key="k", header_name="X-Token"
        ).get_auth_header_name() == "X-Token"
        assert AuthConfig(type="bearer", raw_api_key="k").get_auth_header_name() == "Authorization"


class TestAuthHandlers:

    def test_bearer(self):
        handler = create_auth_handler(AuthConfig(type="bearer", raw_api_key="tok"))
        assert isinstance(handler, BearerAuthHandler)
        assert handler.get_header(CONTEXT) == {"Authorization": "Bearer tok"}

    def test_basic(self):
        handler = create_auth_handler(AuthConfig(type="basic", username="user", password="pass"))
        assert handler.get_header(CONTEXT) == {"Authorization": "Basic dXNlcjpwYXNz"}

    def test_x_api_key(self):
        handler = create_auth_handler(AuthConfig(type="x-api-key", raw_api_key="k"))
        assert isinstance(handler, CustomAuthHandler)
        assert handler.get_header(CONTEXT) == {"x-api-key": "k"}

    def test_missing_key_gives_no_header(self):
        handler = BearerAuthHandler(get_api_key_for_request=lambda ctx: None)
        assert handler.resolve_key(CONTEXT) is None
        assert handler.get_header(CONTEXT) is None

    def test_custom_header_name(self):
        handler = CustomAuthHandler("X-Token", api_key="k")
        assert handler.resolve_key(CONTEXT) == "k"
        assert handler.get_header(CONTEXT) == {"X-Token": "k"}

    def test_dynamic_key_wins(self):
        config = AuthConfig(
            type="bearer",
            raw_api_key="static",
            get_api_key_for_request=lambda ctx: "dynamic" if ctx["method"] == "GET" else None,
        )
        handler = create_auth_handler(config)
        assert handler.get_header(CONTEXT) == {"Authorization": "Bearer dynamic"}
        assert handler.get_header({**CONTEXT, "method": "POST"}) == {"Authorization": "Bearer static"}
