"""
Request body payload.
"""
from typing import Any, Iterable, Mapping, Tuple, Union
from urllib.parse import urlencode

FormData = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]
BodyLike = Union["Body", bytes, bytearray, memoryview, str, FormData]


class Body:
    """In-memory request payload."""

    __slots__ = ("_content",)

    def __init__(self, content: bytes = b""):
        self._content = content

    @classmethod
    def from_value(cls, value: BodyLike) -> "Body":
        """
        Convert a supported value into a Body.

        Bytes-like values are copied, text is UTF-8 encoded, and mappings or
        iterables of pairs are url-encoded as form data.
        """
        if isinstance(value, Body):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(bytes(value))
        if isinstance(value, str):
            return cls(value.encode("utf-8"))
        if isinstance(value, Mapping):
            return cls(urlencode(list(value.items()), doseq=True).encode("ascii"))
        if isinstance(value, Iterable):
            return cls(urlencode(list(value), doseq=True).encode("ascii"))
        raise TypeError(f"cannot convert {type(value).__name__} into a request body")

    def as_bytes(self) -> bytes:
        return self._content

    def __len__(self) -> int:
        return len(self._content)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Body):
            return self._content == other._content
        if isinstance(other, (bytes, bytearray)):
            return self._content == bytes(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._content)

    def __repr__(self) -> str:
        return f"Body(<{len(self._content)} bytes>)"
