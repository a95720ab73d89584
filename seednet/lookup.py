"""Host name and address lookups, and host:port splitting."""

from __future__ import annotations

import re
import socket
from typing import Optional

from .netaddr import NetAddr, Service

__all__ = [
    "split_host_port",
    "lookup_host",
    "lookup_host_numeric",
    "lookup",
    "lookup_one",
    "lookup_numeric",
    "parse_netaddr",
    "parse_service",
]

_MAX_NAME = 255
_PORT_NUMBER = re.compile(r"[ \t\n\v\f\r]*([+-]?)([0-9]+)")
_LONG_MIN = -(1 << 63)
_LONG_MAX = (1 << 63) - 1


def _parse_port_suffix(text: str) -> Optional[int]:
    """Value of ``text`` if it is entirely a decimal integer, as a C int."""
    if text == "":
        return 0
    match = _PORT_NUMBER.fullmatch(text)
    if match is None:
        return None
    value = int(match.group(2))
    if match.group(1) == "-":
        value = -value
    value = max(_LONG_MIN, min(_LONG_MAX, value))
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


def split_host_port(text: str, default_port: int = 0) -> tuple[str, int]:
    """Split ``host:port`` or ``[host]:port`` into ``(host, port)``.

    A colon counts as port separator only when it follows a bracketed host
    or is the only colon. An out-of-range port leaves ``default_port``.
    """
    port = default_port
    colon = text.rfind(":")
    if colon != -1:
        bracketed = text.startswith("[") and colon > 0 and text[colon - 1] == "]"
        multi_colon = text.rfind(":", 0, colon) != -1
        if colon == 0 or bracketed or not multi_colon:
            number = _parse_port_suffix(text[colon + 1 :])
            if number is not None and number >= 0:
                text = text[:colon]
                if 0 < number < 0x10000:
                    port = number
    if len(text) > 1 and text.startswith("[") and text.endswith("]"):
        host = text[1:-1]
    elif text == "[]":
        host = ""
    else:
        host = text
    return host, port


def _resolve(name: str, max_solutions: int, allow_lookup: bool) -> list[NetAddr]:
    special = NetAddr.from_special(name)
    if special is not None:
        return [special]

    flags = socket.AI_ADDRCONFIG if allow_lookup else socket.AI_NUMERICHOST
    try:
        infos = socket.getaddrinfo(
            name, None, socket.AF_UNSPEC, socket.SOCK_STREAM, socket.IPPROTO_TCP, flags
        )
    except (socket.gaierror, UnicodeError, ValueError):
        return []

    found: list[NetAddr] = []
    for family, _type, _proto, _canon, sockaddr in infos:
        if max_solutions and len(found) >= max_solutions:
            break
        if family in (socket.AF_INET, socket.AF_INET6):
            found.append(NetAddr(Service.from_sockaddr(family, sockaddr)))
    return found


def lookup_host(name: str, max_solutions: int = 0, allow_lookup: bool = True) -> list[NetAddr]:
    """Resolve a host name (optionally in brackets) to addresses.

    ``max_solutions`` of 0 means no limit. An empty list means failure.
    """
    if not name:
        return []
    name = name[:_MAX_NAME]
    if name.startswith("[") and name.endswith("]"):
        name = name[1:-1]
    return _resolve(name, max_solutions, allow_lookup)


def lookup_host_numeric(name: str, max_solutions: int = 0) -> list[NetAddr]:
    """Parse a numeric host without querying name servers."""
    return lookup_host(name, max_solutions, False)


def lookup(
    name: str,
    default_port: int = 0,
    allow_lookup: bool = True,
    max_solutions: int = 0,
) -> list[Service]:
    """Resolve ``host[:port]`` to services; an empty list means failure."""
    if not name:
        return []
    host, port = split_host_port(name, default_port)
    return [Service(ip, port) for ip in _resolve(host, max_solutions, allow_lookup)]


def lookup_one(name: str, default_port: int = 0, allow_lookup: bool = True) -> Optional[Service]:
    """Resolve ``host[:port]`` to its first service, or None."""
    found = lookup(name, default_port, allow_lookup, 1)
    return found[0] if found else None


def lookup_numeric(name: str, default_port: int = 0) -> Optional[Service]:
    """Parse a numeric ``host[:port]`` to a service, or None."""
    return lookup_one(name, default_port, False)


def parse_netaddr(text: str, allow_lookup: bool = False) -> NetAddr:
    """Parse an address; the all-zero (invalid) address if it cannot be."""
    found = lookup_host(text, 1, allow_lookup)
    return found[0] if found else NetAddr()


def parse_service(text: str, default_port: int = 0, allow_lookup: bool = False) -> Service:
    """Parse ``host[:port]``; the all-zero (invalid) service if it cannot be."""
    found = lookup_one(text, default_port, allow_lookup)
    return found if found is not None else Service()