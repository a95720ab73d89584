"""Peer-to-peer message headers, peer addresses and inventory entries."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import BinaryIO

from .netaddr import NetAddr, Service
from .serialize import MAX_SIZE, PROTOCOL_VERSION, SerType, read_exact

__all__ = [
    "MESSAGE_START",
    "COMMAND_SIZE",
    "ServiceFlag",
    "default_port",
    "MessageHeader",
    "Address",
    "Inventory",
]

MESSAGE_START = bytes([0xFB, 0xC0, 0xB6, 0xDB])
COMMAND_SIZE = 12
_DEFAULT_COMMAND = b"\x00\x01" + bytes(COMMAND_SIZE - 2)
_DEFAULT_TIME = 100000000
_TYPE_NAMES = ("ERROR", "tx", "block")


class ServiceFlag(enum.IntFlag):
    """Service bits a node advertises."""

    NETWORK = 1 << 0
    BLOOM = 1 << 2
    WITNESS = 1 << 3
    COMPACT_FILTERS = 1 << 6
    NETWORK_LIMITED = 1 << 10
    P2P_V2 = 1 << 11
    MWEB_LIGHT_CLIENT = 1 << 23
    MWEB = 1 << 24


def default_port(testnet: bool = False, override: int = 0) -> int:
    """The default peer port, unless ``override`` is non-zero."""
    if override:
        return override
    return 19335 if testnet else 9333


@dataclass
class MessageHeader:
    """Message start, 12-byte command, payload size and checksum."""

    command: bytes = _DEFAULT_COMMAND
    message_size: int = 0xFFFFFFFF
    checksum: int = 0
    message_start: bytes = MESSAGE_START

    def __post_init__(self) -> None:
        raw = self.command.encode("latin-1") if isinstance(self.command, str) else bytes(self.command)
        if len(raw) != COMMAND_SIZE:
            raw = raw.split(b"\x00", 1)[0][:COMMAND_SIZE].ljust(COMMAND_SIZE, b"\x00")
        self.command = raw
        self.message_start = bytes(self.message_start)
        if len(self.message_start) != len(MESSAGE_START):
            raise ValueError("message start takes 4 bytes")
        for name in ("message_size", "checksum"):
            if not 0 <= getattr(self, name) <= 0xFFFFFFFF:
                raise ValueError(f"{name} out of range")

    def command_name(self) -> str:
        """The command as text, cut at the first NUL."""
        if self.command[-1] == 0:
            return self.command.split(b"\x00", 1)[0].decode("latin-1")
        return self.command.decode("latin-1")

    def is_valid(self) -> bool:
        if self.message_start != MESSAGE_START:
            return False
        name, nul, rest = self.command.partition(b"\x00")
        if any(ch < 0x20 or ch > 0x7E for ch in name):
            return False
        if nul and any(rest):
            return False
        return self.message_size <= MAX_SIZE

    def serialize(self, stream: BinaryIO, version: int = PROTOCOL_VERSION) -> None:
        stream.write(self.message_start)
        stream.write(self.command)
        stream.write(struct.pack("<I", self.message_size))
        if version >= 209:
            stream.write(struct.pack("<I", self.checksum))

    @classmethod
    def deserialize(cls, stream: BinaryIO, version: int = PROTOCOL_VERSION) -> "MessageHeader":
        start = read_exact(stream, 4)
        command = read_exact(stream, COMMAND_SIZE)
        (size,) = struct.unpack("<I", read_exact(stream, 4))
        checksum = 0
        if version >= 209:
            (checksum,) = struct.unpack("<I", read_exact(stream, 4))
        return cls(command, size, checksum, start)


class Address(Service):
    """A peer address with its advertised services and last-seen time."""

    __slots__ = ("services", "time")

    def __init__(
        self,
        ip: "bytes | NetAddr | None" = None,
        port: int = 0,
        services: int = ServiceFlag.NETWORK,
        time: int = _DEFAULT_TIME,
    ) -> None:
        super().__init__(ip, port)
        self.services = int(services)
        self.time = int(time)

    def __repr__(self) -> str:
        return (
            f"Address({self.to_string_ip_port()!r}, services={self.services:#x}, time={self.time})"
        )

    def __str__(self) -> str:
        return self.to_string_ip_port()

    def serialize(
        self,
        stream: BinaryIO,
        ser_type: int = SerType.NETWORK,
        version: int = PROTOCOL_VERSION,
    ) -> None:
        if ser_type & SerType.DISK:
            stream.write(struct.pack("<i", version))
        if (ser_type & SerType.DISK) or (version >= 31402 and not ser_type & SerType.GETHASH):
            stream.write(struct.pack("<I", self.time))
        stream.write(struct.pack("<Q", self.services))
        super().serialize(stream)

    @classmethod
    def deserialize(
        cls,
        stream: BinaryIO,
        ser_type: int = SerType.NETWORK,
        version: int = PROTOCOL_VERSION,
    ) -> "Address":
        if ser_type & SerType.DISK:
            (version,) = struct.unpack("<i", read_exact(stream, 4))
        time = _DEFAULT_TIME
        if (ser_type & SerType.DISK) or (version >= 31402 and not ser_type & SerType.GETHASH):
            (time,) = struct.unpack("<I", read_exact(stream, 4))
        (services,) = struct.unpack("<Q", read_exact(stream, 8))
        service = Service.deserialize(stream)
        return cls(service, service.port, services, time)


@dataclass(frozen=True)
class Inventory:
    """An inventory entry: an object type and a 256-bit hash."""

    type: int = 0
    hash: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.hash < 1 << 256:
            raise ValueError("hash must fit in 256 bits")

    @classmethod
    def from_name(cls, name: str, hash: int = 0) -> "Inventory":
        """Build from a type name such as ``"tx"`` or ``"block"``."""
        try:
            type_ = _TYPE_NAMES.index(name, 1)
        except ValueError:
            raise ValueError(f"unknown inventory type: {name!r}") from None
        return cls(type_, hash)

    def __lt__(self, other: "Inventory") -> bool:
        if not isinstance(other, Inventory):
            return NotImplemented
        return (self.type, self.hash) < (other.type, other.hash)

    def is_known_type(self) -> bool:
        return 1 <= self.type < len(_TYPE_NAMES)

    def command(self) -> str:
        if not self.is_known_type():
            raise ValueError(f"unknown inventory type: {self.type}")
        return _TYPE_NAMES[self.type]

    def serialize(self, stream: BinaryIO) -> None:
        stream.write(struct.pack("<i", self.type))
        stream.write(self.hash.to_bytes(32, "little"))

    @classmethod
    def deserialize(cls, stream: BinaryIO) -> "Inventory":
        (type_,) = struct.unpack("<i", read_exact(stream, 4))
        return cls(type_, int.from_bytes(read_exact(stream, 32), "little"))