"""
Tests for HeaderMap, HeaderName and HeaderValue.
"""
import pytest

from fetch_request.errors import BuilderError
from fetch_request.headers import HeaderMap, HeaderName, HeaderValue


class TestHeaderName:

    def test_lowercases(self):
        assert HeaderName.from_value("X-Request-Id") == "x-request-id"

    def test_accepts_bytes(self):
        assert HeaderName.from_value(b"Accept") == "accept"

    @pytest.mark.parametrize("name", ["", "Bad\nName", "with space", "colon:", "café"])
    def test_rejects_invalid(self, name):
        with pytest.raises(BuilderError):
            HeaderName.from_value(name)

    def test_rejects_non_string(self):
        with pytest.raises(BuilderError):
            HeaderName.from_value(42)


class TestHeaderValue:

    def test_text_value(self):
        value = HeaderValue.from_value("text/plain; charset=utf-8")
        assert value.to_str() == "text/plain; charset=utf-8"
        assert value == "text/plain; charset=utf-8"

    def test_int_value(self):
        assert HeaderValue.from_value(1024) == "1024"

    def test_bool_rejected(self):
        with pytest.raises(BuilderError):
            HeaderValue.from_value(True)

    @pytest.mark.parametrize("value", ["a\r\nInjected: 1", "nul\x00", "del\x7f"])
    def test_rejects_control_characters(self, value):
        with pytest.raises(BuilderError):
            HeaderValue.from_value(value)

    def test_tab_allowed(self):
        assert HeaderValue.from_value("a\tb").as_bytes() == b"a\tb"

    def test_non_ascii_text_rejected(self):
        with pytest.raises(BuilderError):
            HeaderValue.from_value("café")

    def test_obs_text_bytes_accepted(self):
        value = HeaderValue.from_value(b"caf\xe9")
        assert value.as_bytes() == b"caf\xe9"
        with pytest.raises(ValueError):
            value.to_str()

    def test_text_comparison_is_exact(self):
        value = HeaderValue.from_value(b"?")
        assert value != "\u20ac"
        assert value == "?"
        assert HeaderValue.from_value(b"caf\xe9") == "caf\u00e9"

    def test_sensitive_repr(self):
        value = HeaderValue.from_value("Bearer secret", sensitive=True)
        assert value.is_sensitive
        assert repr(value) == "Sensitive"


class TestHeaderMap:

    def test_append_accumulates_in_order(self):
        headers = HeaderMap()
        headers.append("X-A", "1")
        headers.append("Accept", "*/*")
        headers.append("x-a", "2")

        assert headers.get_all("X-A") == ["1", "2"]
        assert headers.keys() == ["x-a", "accept"]
        assert len(headers) == 3
        assert [(str(k), v.to_str()) for k, v in headers.items()] == [
            ("x-a", "1"), ("accept", "*/*"), ("x-a", "2")
        ]

    def test_lookup_is_case_insensitive(self):
        headers = HeaderMap({"Content-Type": "application/json"})
        assert "content-type" in headers
        assert "CONTENT-TYPE" in headers
        assert headers.get("Content-Type") == "application/json"
        assert headers.get("missing") is None

    def test_insert_replaces(self):
        headers = HeaderMap([("X-A", "1"), ("X-A", "2")])
        previous = headers.insert("x-a", "3")
        assert previous == ["1", "2"]
        assert headers.get_all("X-A") == ["3"]

    def test_remove(self):
        headers = HeaderMap([("X-A", "1"), ("X-B", "2")])
        assert headers.remove("x-a") == ["1"]
        assert "x-a" not in headers
        assert len(headers) == 1

    def test_append_invalid_raises_immediately(self):
        headers = HeaderMap()
        with pytest.raises(BuilderError):
            headers.append("Bad\nName", "v")
        assert len(headers) == 0

    def test_copy_is_independent(self):
        headers = HeaderMap([("X-A", "1")])
        clone = headers.copy()
        clone.append("X-A", "2")
        assert headers.get_all("x-a") == ["1"]
        assert clone.get_all("x-a") == ["1", "2"]

    def test_raw(self):
        headers = HeaderMap([("X-A", "1")])
        assert headers.raw() == [(b"x-a", b"1")]

    def test_repr_masks_sensitive(self):
        headers = HeaderMap()
        headers.append("Accept", "*/*")
        headers.append("Authorization", HeaderValue.from_value("Bearer secret", sensitive=True))
        text = repr(headers)
        assert "'accept', '*/*'" in text
        assert "Sensitive" in text
        assert "secret" not in text
