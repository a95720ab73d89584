"""Length-prefixed strings, fixed-width strings and container encodings."""

from __future__ import annotations

from typing import BinaryIO, Callable, Hashable, Iterable, Mapping, TypeVar

from .serialize import (
    SerializationError,
    encode_compact_size,
    read_compact_size,
    read_exact,
)

__all__ = [
    "encode_string",
    "read_string",
    "encode_fixed_string",
    "read_fixed_string",
    "encode_sequence",
    "read_sequence",
    "encode_set",
    "read_set",
    "encode_mapping",
    "read_mapping",
]

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


def _to_bytes(text: "str | bytes") -> bytes:
    if isinstance(text, str):
        return text.encode("utf-8")
    return bytes(text)


def _to_text(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SerializationError(f"string is not valid UTF-8: {exc}") from None


def encode_string(text: "str | bytes") -> bytes:
    """Encode a string as a compact-size length followed by its UTF-8 bytes."""
    raw = _to_bytes(text)
    return encode_compact_size(len(raw)) + raw


def read_string(stream: BinaryIO) -> str:
    """Read a length-prefixed UTF-8 string."""
    return _to_text(read_exact(stream, read_compact_size(stream)))


def encode_fixed_string(text: "str | bytes", length: int) -> bytes:
    """Encode into exactly ``length`` bytes: truncated, or padded with NULs."""
    if length < 0:
        raise ValueError("length must not be negative")
    return _to_bytes(text)[:length].ljust(length, b"\x00")


def read_fixed_string(stream: BinaryIO, length: int) -> str:
    """Read a ``length``-byte field and return the text before its first NUL."""
    raw = read_exact(stream, length)
    return _to_text(raw.split(b"\x00", 1)[0])


def encode_sequence(items: Iterable[T], encode_item: Callable[[T], bytes]) -> bytes:
    """Encode items as a compact-size count followed by each encoded item."""
    parts = [bytes(encode_item(item)) for item in items]
    return encode_compact_size(len(parts)) + b"".join(parts)


def read_sequence(stream: BinaryIO, read_item: Callable[[BinaryIO], T]) -> list[T]:
    """Read a compact-size count and that many items."""
    count = read_compact_size(stream)
    return [read_item(stream) for _ in range(count)]


def encode_set(items: Iterable[T], encode_item: Callable[[T], bytes]) -> bytes:
    """Encode distinct items in ascending order."""
    return encode_sequence(sorted(set(items)), encode_item)


def read_set(stream: BinaryIO, read_item: Callable[[BinaryIO], T]) -> set[T]:
    """Read a counted run of items into a set."""
    return set(read_sequence(stream, read_item))


def encode_mapping(
    mapping: Mapping[K, V],
    encode_key: Callable[[K], bytes],
    encode_value: Callable[[V], bytes],
) -> bytes:
    """Encode key/value pairs in ascending key order."""
    return encode_sequence(
        sorted(mapping.items(), key=lambda pair: pair[0]),
        lambda pair: bytes(encode_key(pair[0])) + bytes(encode_value(pair[1])),
    )


def read_mapping(
    stream: BinaryIO,
    read_key: Callable[[BinaryIO], K],
    read_value: Callable[[BinaryIO], V],
) -> dict[K, V]:
    """Read counted key/value pairs; where a key repeats, the first value wins."""
    result: dict[K, V] = {}
    for _ in range(read_compact_size(stream)):
        key = read_key(stream)
        value = read_value(stream)
        result.setdefault(key, value)
    return result