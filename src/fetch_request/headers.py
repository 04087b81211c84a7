"""
Validated, ordered header multi-map.

Header names are RFC 7230 tokens and are stored lowercase. Lookups are
case-insensitive. A name may hold several values; ``append`` accumulates,
``insert`` replaces.
"""
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import BuilderError
from .types import TOKEN_PATTERN

MAX_HEADER_NAME_LEN = 1 << 16

HeaderNameLike = Union[str, bytes, "HeaderName"]
HeaderValueLike = Union[str, bytes, bytearray, int, "HeaderValue"]
HeaderItems = Union[Mapping[Any, Any], Iterable[Tuple[Any, Any]], "HeaderMap"]


class HeaderName(str):
    """Lowercased, validated header name."""

    @classmethod
    def from_value(cls, value: HeaderNameLike) -> "HeaderName":
        if isinstance(value, HeaderName):
            return value
        if isinstance(value, (bytes, bytearray)):
            try:
                value = bytes(value).decode("ascii")
            except UnicodeDecodeError:
                raise BuilderError(f"invalid header name: {value!r}")
        if not isinstance(value, str):
            raise BuilderError(f"invalid header name type: {type(value).__name__}")
        if not value or len(value) > MAX_HEADER_NAME_LEN:
            raise BuilderError(f"invalid header name: {value!r}")
        if not TOKEN_PATTERN.fullmatch(value):
            raise BuilderError(f"invalid header name: {value!r}")
        return cls(value.lower())


def _is_valid_value_byte(b: int) -> bool:
    return b == 0x09 or (b >= 0x20 and b != 0x7F)


class HeaderValue:
    """
    Validated header value.

    Text values must be visible ASCII, space or tab. Byte values may also
    carry obs-text (0x80-0xFF). Control characters other than tab, including
    CR and LF, are rejected.
    """

    __slots__ = ("_value", "_sensitive")

    def __init__(self, value: bytes, sensitive: bool = False):
        self._value = value
        self._sensitive = sensitive

    @classmethod
    def from_value(cls, value: HeaderValueLike, sensitive: bool = False) -> "HeaderValue":
        if isinstance(value, HeaderValue):
            if sensitive and not value.is_sensitive:
                return cls(value.as_bytes(), True)
            return value
        if isinstance(value, bool):
            raise BuilderError("invalid header value type: bool")
        if isinstance(value, int):
            value = str(value)
        if isinstance(value, str):
            if any(not (c == "\t" or " " <= c <= "~") for c in value):
                raise BuilderError(f"invalid header value: {value!r}")
            return cls(value.encode("ascii"), sensitive)
        if isinstance(value, (bytes, bytearray)):
            raw = bytes(value)
            if not all(_is_valid_value_byte(b) for b in raw):
                raise BuilderError(f"invalid header value: {raw!r}")
            return cls(raw, sensitive)
        raise BuilderError(f"invalid header value type: {type(value).__name__}")

    @property
    def is_sensitive(self) -> bool:
        return self._sensitive

    def set_sensitive(self, sensitive: bool) -> None:
        self._sensitive = sensitive

    def as_bytes(self) -> bytes:
        return self._value

    def to_str(self) -> str:
        """Return the value as text. Fails when it holds non-ASCII bytes."""
        try:
            return self._value.decode("ascii")
        except UnicodeDecodeError:
            raise ValueError("header value contains non-visible-ASCII bytes")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderValue):
            return self._value == other._value
        if isinstance(other, str):
            try:
                return self._value == other.encode("latin-1")
            except UnicodeEncodeError:
                return False
        if isinstance(other, (bytes, bytearray)):
            return self._value == bytes(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        if self._sensitive:
            return "Sensitive"
        try:
            return repr(self.to_str())
        except ValueError:
            return repr(self._value)


class HeaderMap:
    """Ordered multi-map of header name to one-or-more values."""

    def __init__(self, items: Optional[HeaderItems] = None):
        self._entries: List[Tuple[HeaderName, HeaderValue]] = []
        if items is not None:
            self.extend(items)

    @staticmethod
    def _pairs(items: HeaderItems) -> Iterable[Tuple[Any, Any]]:
        if isinstance(items, HeaderMap):
            return items.items()
        if isinstance(items, Mapping):
            return items.items()
        return items

    def append(self, name: HeaderNameLike, value: HeaderValueLike) -> None:
        """Add a value, keeping any existing values for the same name."""
        key = HeaderName.from_value(name)
        val = HeaderValue.from_value(value)
        self._entries.append((key, val))

    def insert(self, name: HeaderNameLike, value: HeaderValueLike) -> List[HeaderValue]:
        """Replace all values of ``name`` with ``value``; returns the old values."""
        key = HeaderName.from_value(name)
        val = HeaderValue.from_value(value)
        previous = self.remove(key)
        self._entries.append((key, val))
        return previous

    def extend(self, items: HeaderItems) -> None:
        for name, value in self._pairs(items):
            self.append(name, value)

    def get(self, name: str, default: Optional[HeaderValue] = None) -> Optional[HeaderValue]:
        key = name.lower()
        for entry_name, value in self._entries:
            if entry_name == key:
                return value
        return default

    def get_all(self, name: str) -> List[HeaderValue]:
        key = name.lower()
        return [value for entry_name, value in self._entries if entry_name == key]

    def remove(self, name: str) -> List[HeaderValue]:
        key = name.lower()
        removed = [value for entry_name, value in self._entries if entry_name == key]
        self._entries = [entry for entry in self._entries if entry[0] != key]
        return removed

    def keys(self) -> List[HeaderName]:
        seen: List[HeaderName] = []
        for entry_name, _ in self._entries:
            if entry_name not in seen:
                seen.append(entry_name)
        return seen

    def items(self) -> List[Tuple[HeaderName, HeaderValue]]:
        return list(self._entries)

    def raw(self) -> List[Tuple[bytes, bytes]]:
        """Header pairs in wire form, for handing to httpx."""
        return [(name.encode("ascii"), value.as_bytes()) for name, value in self._entries]

    def copy(self) -> "HeaderMap":
        clone = HeaderMap()
        clone._entries = list(self._entries)
        return clone

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.lower()
        return any(entry_name == key for entry_name, _ in self._entries)

    def __iter__(self) -> Iterator[HeaderName]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderMap):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        pairs = ", ".join(f"({str(name)!r}, {value!r})" for name, value in self._entries)
        return f"HeaderMap([{pairs}])"
