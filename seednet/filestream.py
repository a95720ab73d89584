"""A serialization stream over a binary file object that closes itself."""

from __future__ import annotations

import struct
import sys
from typing import Any, BinaryIO, Optional

from .serialize import PROTOCOL_VERSION, SerializationError, SerType

__all__ = ["FileStream"]


def _is_standard_stream(file: object) -> bool:
    for std in (sys.stdin, sys.stdout, sys.stderr):
        if std is None:
            continue
        if file is std or file is getattr(std, "buffer", None):
            return True
    return False


class FileStream:
    """Reads and writes exact byte counts on a file, closing it when done.

    The standard input, output and error streams are never closed.
    """

    def __init__(
        self,
        file: Optional[BinaryIO] = None,
        ser_type: int = SerType.DISK,
        version: int = PROTOCOL_VERSION,
    ) -> None:
        self._file = file
        self.ser_type = ser_type
        self.version = version

    @property
    def file(self) -> Optional[BinaryIO]:
        """The wrapped file object, or None once closed or released."""
        return self._file

    def __enter__(self) -> "FileStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the file unless it is a standard stream, and forget it."""
        file, self._file = self._file, None
        if file is not None and not _is_standard_stream(file):
            file.close()

    def release(self) -> Optional[BinaryIO]:
        """Hand the file back to the caller without closing it."""
        file, self._file = self._file, None
        return file

    def _require_file(self, what: str) -> BinaryIO:
        if self._file is None:
            raise SerializationError(f"{what} : file handle is None")
        return self._file

    def read(self, size: int) -> bytes:
        """Read exactly ``size`` bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        file = self._require_file("read")
        data = file.read(size)
        if data is None or len(data) != size:
            raise SerializationError("read : end of file")
        return bytes(data)

    def write(self, data: bytes) -> int:
        """Write all of ``data``."""
        file = self._require_file("write")
        data = bytes(data)
        written = file.write(data)
        if written is not None and written != len(data):
            raise SerializationError("write : write failed")
        return len(data)

    def pack(self, fmt: str, *args: Any) -> None:
        """Write values packed with a :mod:`struct` format."""
        self.write(struct.pack(fmt, *args))

    def unpack(self, fmt: str) -> tuple:
        """Read and unpack values of a :mod:`struct` format."""
        return struct.unpack(fmt, self.read(struct.calcsize(fmt)))