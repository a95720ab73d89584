"""Network addresses (IPv4, IPv6, Tor, I2P) and address/port pairs."""

from __future__ import annotations

import enum
import ipaddress
import socket
import struct
from typing import BinaryIO, Optional

from .serialize import read_exact
from .util import decode_base32, double_sha256, encode_base32

__all__ = [
    "Network",
    "Reachability",
    "parse_network",
    "NetAddr",
    "Service",
]

_IPV4_PREFIX = bytes(10) + b"\xff\xff"
_ONION_CAT = bytes([0xFD, 0x87, 0xD8, 0x7E, 0xEB, 0x43])
_GARLIC_CAT = bytes([0xFD, 0x60, 0xDB, 0x4D, 0xDD, 0xB5])
_RFC6052_PREFIX = bytes([0x00, 0x64, 0xFF, 0x9B]) + bytes(8)
_RFC6145_PREFIX = bytes(8) + b"\xff\xff\x00\x00"
_RFC4862_PREFIX = bytes([0xFE, 0x80]) + bytes(6)
_IPV6_LOOPBACK = bytes(15) + b"\x01"
_ONION_SUFFIX = ".onion"
_GARLIC_SUFFIX = ".oc.b32.i2p"


class Network(enum.IntEnum):
    """The network an address belongs to."""

    UNROUTABLE = 0
    IPV4 = 1
    IPV6 = 2
    TOR = 3
    I2P = 4


class Reachability(enum.IntEnum):
    """How well an address can be reached from a partner, higher is better."""

    UNREACHABLE = 0
    DEFAULT = 1
    TEREDO = 2
    IPV6_WEAK = 3
    IPV4 = 4
    IPV6_STRONG = 5
    PRIVATE = 6


# Extended network kinds used only when ranking reachability.
_NET_UNKNOWN = len(Network)
_NET_TEREDO = len(Network) + 1


def parse_network(name: str) -> Network:
    """Map a network name such as ``"ipv4"`` or ``"Tor"`` onto a Network."""
    return {
        "ipv4": Network.IPV4,
        "ipv6": Network.IPV6,
        "tor": Network.TOR,
        "i2p": Network.I2P,
    }.get(name.lower(), Network.UNROUTABLE)


class NetAddr:
    """A 16-byte network address; IPv4 lives in the mapped ::ffff:0:0/96 range."""

    __slots__ = ("_ip",)

    def __init__(self, ip: "bytes | NetAddr | None" = None) -> None:
        if ip is None:
            raw = bytes(16)
        elif isinstance(ip, NetAddr):
            raw = ip._ip
        else:
            raw = bytes(ip)
        if len(raw) != 16:
            raise ValueError(f"an address takes 16 bytes, got {len(raw)}")
        self._ip = raw

    @property
    def ip(self) -> bytes:
        """The address in network byte order."""
        return self._ip

    @classmethod
    def from_ipv4(cls, packed: bytes) -> "NetAddr":
        """Build an address from 4 packed IPv4 bytes."""
        packed = bytes(packed)
        if len(packed) != 4:
            raise ValueError("an IPv4 address takes 4 bytes")
        return cls(_IPV4_PREFIX + packed)

    @classmethod
    def from_ipv6(cls, packed: bytes) -> "NetAddr":
        """Build an address from 16 packed IPv6 bytes."""
        return cls(bytes(packed))

    @classmethod
    def from_special(cls, name: str) -> Optional["NetAddr"]:
        """Parse a ``.onion`` or ``.oc.b32.i2p`` name; None if it is not one."""
        for suffix in (_ONION_SUFFIX, _GARLIC_SUFFIX):
            if len(name) > len(suffix) and name.endswith(suffix):
                payload = decode_base32(name[: -len(suffix)])
                if len(payload) != 16 - len(_ONION_CAT):
                    return None
                # Both kinds of name are placed in the onion-cat range.
                return cls(_ONION_CAT + payload)
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NetAddr):
            return NotImplemented
        return self._ip == other._ip

    def __lt__(self, other: "NetAddr") -> bool:
        if not isinstance(other, NetAddr):
            return NotImplemented
        return self._ip < other._ip

    def __hash__(self) -> int:
        return hash(self._ip)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_string_ip()!r})"

    def get_byte(self, n: int) -> int:
        """Return byte ``n`` counted from the least significant end."""
        return self._ip[15 - n]

    def is_ipv4(self) -> bool:
        return self._ip[:12] == _IPV4_PREFIX

    def is_ipv6(self) -> bool:
        return not (self.is_ipv4() or self.is_tor() or self.is_i2p())

    def is_rfc1918(self) -> bool:
        """IPv4 private networks."""
        if not self.is_ipv4():
            return False
        a, b = self._ip[12], self._ip[13]
        return a == 10 or (a == 192 and b == 168) or (a == 172 and 16 <= b <= 31)

    def is_reserved(self) -> bool:
        """IPv4 240.0.0.0/4."""
        return self.is_ipv4() and self._ip[12] >= 240

    def is_rfc3849(self) -> bool:
        """IPv6 documentation range 2001:db8::/32."""
        return self._ip[:4] == b"\x20\x01\x0d\xb8"

    def is_rfc3927(self) -> bool:
        """IPv4 link-local 169.254.0.0/16."""
        return self.is_ipv4() and self._ip[12] == 169 and self._ip[13] == 254

    def is_rfc3964(self) -> bool:
        """IPv6 6to4 tunnelling 2002::/16."""
        return self._ip[:2] == b"\x20\x02"

    def is_rfc4193(self) -> bool:
        """IPv6 unique local fc00::/7."""
        return (self._ip[0] & 0xFE) == 0xFC

    def is_rfc4380(self) -> bool:
        """IPv6 Teredo tunnelling 2001::/32."""
        return self._ip[:4] == b"\x20\x01\x00\x00"

    def is_rfc4843(self) -> bool:
        """IPv6 ORCHID 2001:10::/28."""
        return self._ip[:3] == b"\x20\x01\x00" and (self._ip[3] & 0xF0) == 0x10

    def is_rfc4862(self) -> bool:
        """IPv6 link-local fe80::/64."""
        return self._ip[:8] == _RFC4862_PREFIX

    def is_rfc6052(self) -> bool:
        """IPv6 well-known prefix 64:ff9b::/96."""
        return self._ip[:12] == _RFC6052_PREFIX

    def is_rfc6145(self) -> bool:
        """IPv6 IPv4-translated ::ffff:0:0:0/96."""
        return self._ip[:12] == _RFC6145_PREFIX

    def is_tor(self) -> bool:
        return self._ip[:6] == _ONION_CAT

    def is_i2p(self) -> bool:
        return self._ip[:6] == _GARLIC_CAT

    def is_local(self) -> bool:
        """Loopback or IPv4 0.0.0.0/8."""
        if self.is_ipv4() and self._ip[12] in (127, 0):
            return True
        return self._ip == _IPV6_LOOPBACK

    def is_multicast(self) -> bool:
        return (self.is_ipv4() and (self._ip[12] & 0xF0) == 0xE0) or self._ip[0] == 0xFF

    def is_valid(self) -> bool:
        """False for unspecified, documentation and garbled addresses."""
        # Addresses shifted by three bytes, produced by old clients' bad length fields.
        if self._ip[:9] == _IPV4_PREFIX[3:]:
            return False
        if self._ip == bytes(16):
            return False
        if self.is_rfc3849():
            return False
        if self.is_ipv4() and self._ip[12:] in (b"\xff\xff\xff\xff", bytes(4)):
            return False
        return True

    def is_routable(self) -> bool:
        return self.is_valid() and not (
            self.is_reserved()
            or self.is_rfc1918()
            or self.is_rfc3927()
            or self.is_rfc4862()
            or (self.is_rfc4193() and not self.is_tor() and not self.is_i2p())
            or self.is_rfc4843()
            or self.is_local()
        )

    def network(self) -> Network:
        if not self.is_routable():
            return Network.UNROUTABLE
        if self.is_ipv4():
            return Network.IPV4
        if self.is_tor():
            return Network.TOR
        if self.is_i2p():
            return Network.I2P
        return Network.IPV6

    def to_string_ip(self) -> str:
        """Textual form of the address without a port."""
        if self.is_tor():
            return encode_base32(self._ip[6:]) + _ONION_SUFFIX
        if self.is_i2p():
            return encode_base32(self._ip[6:]) + _GARLIC_SUFFIX
        if self.is_ipv4():
            return str(ipaddress.IPv4Address(self._ip[12:]))
        return str(ipaddress.IPv6Address(self._ip))

    def __str__(self) -> str:
        return self.to_string_ip()

    def ipv4_bytes(self) -> bytes:
        """The 4 packed IPv4 bytes; ValueError if this is not IPv4."""
        if not self.is_ipv4():
            raise ValueError("not an IPv4 address")
        return self._ip[12:]

    def group(self) -> bytes:
        """Canonical identifier of the address' group."""
        net_class = int(Network.IPV6)
        start = 0
        bits = 16

        if self.is_local():
            net_class = 255
            bits = 0

        if not self.is_routable():
            net_class = int(Network.UNROUTABLE)
            bits = 0
        elif self.is_ipv4() or self.is_rfc6145() or self.is_rfc6052():
            net_class = int(Network.IPV4)
            start = 12
        elif self.is_rfc3964():
            net_class = int(Network.IPV4)
            start = 2
        elif self.is_rfc4380():
            return bytes([Network.IPV4, self._ip[12] ^ 0xFF, self._ip[13] ^ 0xFF])
        elif self.is_tor():
            net_class = int(Network.TOR)
            start = 6
            bits = 4
        elif self.is_i2p():
            net_class = int(Network.I2P)
            start = 6
            bits = 4
        elif self._ip[:4] == b"\x20\x11\x04\x70":
            bits = 36
        else:
            bits = 32

        whole, rest = divmod(bits, 8)
        out = bytearray([net_class])
        out += self._ip[start : start + whole]
        if rest:
            out.append(self._ip[start + whole] | ((1 << rest) - 1))
        return bytes(out)

    def hash64(self) -> int:
        """First 8 bytes of the double SHA-256 of the address, little-endian."""
        return int.from_bytes(double_sha256(self._ip)[:8], "little")

    def _ext_network(self) -> int:
        if self.is_rfc4380():
            return _NET_TEREDO
        return int(self.network())

    def reachability_from(self, partner: Optional["NetAddr"] = None) -> Reachability:
        """Rank how reachable this address is from ``partner``."""
        if not self.is_routable():
            return Reachability.UNREACHABLE
        ours = self._ext_network()
        theirs = _NET_UNKNOWN if partner is None else partner._ext_network()
        tunnel = self.is_rfc3964() or self.is_rfc6052() or self.is_rfc6145()

        if theirs == Network.IPV4:
            table = {Network.IPV4: Reachability.IPV4}
        elif theirs == Network.IPV6:
            table = {
                _NET_TEREDO: Reachability.TEREDO,
                Network.IPV4: Reachability.IPV4,
                Network.IPV6: Reachability.IPV6_WEAK if tunnel else Reachability.IPV6_STRONG,
            }
        elif theirs == Network.TOR:
            table = {Network.IPV4: Reachability.IPV4, Network.TOR: Reachability.PRIVATE}
        elif theirs == Network.I2P:
            table = {Network.I2P: Reachability.PRIVATE}
        elif theirs == _NET_TEREDO:
            table = {
                _NET_TEREDO: Reachability.TEREDO,
                Network.IPV6: Reachability.IPV6_WEAK,
                Network.IPV4: Reachability.IPV4,
            }
        else:
            table = {
                _NET_TEREDO: Reachability.TEREDO,
                Network.IPV6: Reachability.IPV6_WEAK,
                Network.IPV4: Reachability.IPV4,
                Network.I2P: Reachability.PRIVATE,
                Network.TOR: Reachability.PRIVATE,
            }
        return table.get(ours, Reachability.DEFAULT)

    def serialize(self, stream: BinaryIO) -> None:
        """Write the 16 raw address bytes."""
        stream.write(self._ip)

    @classmethod
    def deserialize(cls, stream: BinaryIO) -> "NetAddr":
        """Read 16 raw address bytes."""
        return cls(read_exact(stream, 16))


class Service(NetAddr):
    """A network address together with a TCP port."""

    __slots__ = ("_port",)

    def __init__(self, ip: "bytes | NetAddr | None" = None, port: int = 0) -> None:
        super().__init__(ip)
        port = int(port)
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port out of range: {port}")
        self._port = port

    @property
    def port(self) -> int:
        return self._port

    @classmethod
    def from_sockaddr(cls, family: int, sockaddr: tuple) -> "Service":
        """Build from a socket family and a socket-module address tuple."""
        host, port = sockaddr[0], sockaddr[1]
        if family == socket.AF_INET:
            return cls(NetAddr.from_ipv4(ipaddress.IPv4Address(host).packed), port)
        if family == socket.AF_INET6:
            packed = ipaddress.IPv6Address(host.split("%", 1)[0]).packed
            return cls(NetAddr.from_ipv6(packed), port)
        raise ValueError(f"unsupported address family: {family}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Service):
            return NotImplemented
        return self._ip == other._ip and self._port == other._port

    def __lt__(self, other: NetAddr) -> bool:
        if not isinstance(other, Service):
            return NotImplemented
        return (self._ip, self._port) < (other._ip, other._port)

    def __hash__(self) -> int:
        return hash((self._ip, self._port))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_string_ip_port()!r})"

    def to_sockaddr(self) -> tuple:
        """Return ``(family, address tuple)`` for the socket module."""
        if self.is_ipv4():
            return socket.AF_INET, (self.to_string_ip(), self._port)
        if self.is_ipv6():
            return socket.AF_INET6, (str(ipaddress.IPv6Address(self._ip)), self._port, 0, 0)
        raise ValueError(f"no socket address for {self.to_string_ip()}")

    def key(self) -> bytes:
        """The 16 address bytes followed by the port, big-endian."""
        return self._ip + struct.pack(">H", self._port)

    def to_string_port(self) -> str:
        return str(self._port)

    def to_string_ip_port(self) -> str:
        if self.is_ipv4() or self.is_tor() or self.is_i2p():
            return f"{self.to_string_ip()}:{self.to_string_port()}"
        return f"[{self.to_string_ip()}]:{self.to_string_port()}"

    def __str__(self) -> str:
        return self.to_string_ip_port()

    def serialize(self, stream: BinaryIO) -> None:
        """Write the address bytes and the port in network byte order."""
        stream.write(self._ip)
        stream.write(struct.pack(">H", self._port))

    @classmethod
    def deserialize(cls, stream: BinaryIO) -> "Service":
        ip = read_exact(stream, 16)
        (port,) = struct.unpack(">H", read_exact(stream, 2))
        return cls(ip, port)