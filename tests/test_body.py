"""
Tests for Body conversion.
"""
import pytest

from fetch_request.body import Body


def test_text_is_utf8_encoded():
    assert Body.from_value("héllo").as_bytes() == "héllo".encode("utf-8")


def test_bytes_like():
    assert Body.from_value(b"raw").as_bytes() == b"raw"
    assert Body.from_value(bytearray(b"raw")).as_bytes() == b"raw"
    assert Body.from_value(memoryview(b"raw")).as_bytes() == b"raw"


def test_form_mapping():
    body = Body.from_value({"q": "a b", "tag": ["x", "y"]})
    assert body.as_bytes() == b"q=a+b&tag=x&tag=y"


def test_form_pairs():
    assert Body.from_value([("a", "1"), ("a", "2")]).as_bytes() == b"a=1&a=2"


def test_form_iterable_of_pairs():
    pairs = ((k, v) for k, v in {"a": "1", "b": "2"}.items())
    assert Body.from_value(pairs).as_bytes() == b"a=1&b=2"


def test_body_passthrough():
    body = Body(b"x")
    assert Body.from_value(body) is body


def test_unsupported_type():
    with pytest.raises(TypeError):
        Body.from_value(object())


def test_repr_hides_content():
    body = Body.from_value("secret payload")
    assert repr(body) == "Body(<14 bytes>)"
    assert len(body) == 14
