"""Compact-size integers and length-prefixed byte strings of the wire format."""

from __future__ import annotations

import enum
import struct
from typing import BinaryIO

__all__ = [
    "MAX_SIZE",
    "PROTOCOL_VERSION",
    "SerializationError",
    "SerType",
    "compact_size_length",
    "encode_compact_size",
    "read_compact_size",
    "encode_var_bytes",
    "read_var_bytes",
    "read_exact",
]

MAX_SIZE = 0x02000000
PROTOCOL_VERSION = 70002

_USHRT_MAX = 0xFFFF
_UINT_MAX = 0xFFFFFFFF
_UINT64_MAX = 0xFFFFFFFFFFFFFFFF


class SerializationError(ValueError):
    """Raised when data cannot be serialized or read back."""


class SerType(enum.IntFlag):
    """Serialization purpose flags and modifiers."""

    NETWORK = 1 << 0
    DISK = 1 << 1
    GETHASH = 1 << 2
    SKIPSIG = 1 << 16
    BLOCKHEADERONLY = 1 << 17


def _check_range(size: int) -> None:
    if not 0 <= size <= _UINT64_MAX:
        raise SerializationError(f"compact size out of range: {size}")


def compact_size_length(size: int) -> int:
    """Return how many bytes the compact-size encoding of ``size`` takes."""
    _check_range(size)
    if size < 253:
        return 1
    if size <= _USHRT_MAX:
        return 3
    if size <= _UINT_MAX:
        return 5
    return 9


def encode_compact_size(size: int) -> bytes:
    """Encode ``size`` as a little-endian compact-size integer."""
    _check_range(size)
    if size < 253:
        return bytes([size])
    if size <= _USHRT_MAX:
        return b"\xfd" + struct.pack("<H", size)
    if size <= _UINT_MAX:
        return b"\xfe" + struct.pack("<I", size)
    return b"\xff" + struct.pack("<Q", size)


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes from ``stream`` or raise SerializationError."""
    if size < 0:
        raise ValueError("size must not be negative")
    data = stream.read(size)
    if data is None or len(data) != size:
        raise SerializationError("end of data")
    return bytes(data)


def read_compact_size(stream: BinaryIO) -> int:
    """Read a compact-size integer, refusing values above MAX_SIZE."""
    first = read_exact(stream, 1)[0]
    if first < 253:
        size = first
    elif first == 253:
        (size,) = struct.unpack("<H", read_exact(stream, 2))
    elif first == 254:
        (size,) = struct.unpack("<I", read_exact(stream, 4))
    else:
        (size,) = struct.unpack("<Q", read_exact(stream, 8))
    if size > MAX_SIZE:
        raise SerializationError("compact size too large")
    return size


def encode_var_bytes(data: bytes) -> bytes:
    """Encode ``data`` prefixed with its compact-size length."""
    data = bytes(data)
    return encode_compact_size(len(data)) + data


def read_var_bytes(stream: BinaryIO) -> bytes:
    """Read a compact-size length followed by that many bytes."""
    return read_exact(stream, read_compact_size(stream))