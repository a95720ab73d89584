"""An in-memory byte stream with a read position, for wire serialization."""

from __future__ import annotations

import struct
from typing import Any, Union

from .serialize import (
    PROTOCOL_VERSION,
    SerializationError,
    SerType,
    encode_compact_size,
    encode_var_bytes,
    read_compact_size,
    read_var_bytes,
)

__all__ = ["DataStream"]

_BytesLike = Union[bytes, bytearray, memoryview]


class DataStream:
    """A growable buffer that is written at the end and read from the front.

    Reading exactly up to the end empties the buffer, so bytes read before
    that point can no longer be rewound. Reading past the end raises
    :class:`SerializationError` and leaves the stream unchanged.
    """

    def __init__(
        self,
        data: _BytesLike = b"",
        ser_type: int = SerType.NETWORK,
        version: int = PROTOCOL_VERSION,
    ) -> None:
        self._buf = bytearray(data)
        self._pos = 0
        self.ser_type = ser_type
        self.version = version

    def __len__(self) -> int:
        return len(self._buf) - self._pos

    def __bytes__(self) -> bytes:
        return bytes(self._buf[self._pos :])

    def __repr__(self) -> str:
        return f"DataStream({bytes(self)!r})"

    def __iadd__(self, other: "DataStream | _BytesLike") -> "DataStream":
        self._buf += bytes(other)
        return self

    def __add__(self, other: "DataStream | _BytesLike") -> "DataStream":
        result = DataStream(bytes(self), self.ser_type, self.version)
        result += other
        return result

    def write(self, data: _BytesLike) -> int:
        """Append ``data`` to the end of the stream."""
        data = bytes(data)
        self._buf += data
        return len(data)

    def _advance(self, size: int, what: str) -> bytes:
        if size < 0:
            raise ValueError("size must not be negative")
        end = self._pos + size
        if end > len(self._buf):
            raise SerializationError(f"{what} : end of data")
        chunk = bytes(self._buf[self._pos : end])
        if end == len(self._buf):
            self.clear()
        else:
            self._pos = end
        return chunk

    def read(self, size: int) -> bytes:
        """Read exactly ``size`` bytes from the front."""
        return self._advance(size, "read")

    def ignore(self, size: int) -> None:
        """Skip ``size`` bytes from the front."""
        self._advance(size, "ignore")

    def rewind(self, size: int) -> bool:
        """Step back ``size`` bytes if they are still buffered."""
        if size < 0:
            raise ValueError("size must not be negative")
        if size > self._pos:
            return False
        self._pos -= size
        return True

    def compact(self) -> None:
        """Drop the bytes already read."""
        del self._buf[: self._pos]
        self._pos = 0

    def clear(self) -> None:
        """Empty the stream."""
        self._buf.clear()
        self._pos = 0

    def eof(self) -> bool:
        return len(self) == 0

    def pack(self, fmt: str, *args: Any) -> None:
        """Append values packed with a :mod:`struct` format."""
        self.write(struct.pack(fmt, *args))

    def unpack(self, fmt: str) -> tuple:
        """Read and unpack values of a :mod:`struct` format."""
        return struct.unpack(fmt, self.read(struct.calcsize(fmt)))

    def write_compact_size(self, size: int) -> None:
        self.write(encode_compact_size(size))

    def read_compact_size(self) -> int:
        return read_compact_size(self)

    def write_var_bytes(self, data: _BytesLike) -> None:
        self.write(encode_var_bytes(data))

    def read_var_bytes(self) -> bytes:
        return read_var_bytes(self)