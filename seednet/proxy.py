"""Direct TCP connections and SOCKS4/SOCKS5 proxy handshakes."""

from __future__ import annotations

import socket
import struct

from .netaddr import Service

__all__ = ["ProxyError", "socks4_handshake", "socks5_handshake", "connect_directly"]

DEFAULT_CONNECT_TIMEOUT = 5.0

_SOCKS5_ERRORS = {
    0x01: "Proxy error: general failure",
    0x02: "Proxy error: connection not allowed",
    0x03: "Proxy error: network unreachable",
    0x04: "Proxy error: host unreachable",
    0x05: "Proxy error: connection refused",
    0x06: "Proxy error: TTL expired",
    0x07: "Proxy error: protocol error",
    0x08: "Proxy error: address type not supported",
}
_ADDRESS_LENGTHS = {0x01: 4, 0x04: 16}


class ProxyError(ConnectionError):
    """Raised when a proxy handshake fails."""


def _fail(sock: socket.socket, message: str) -> ProxyError:
    sock.close()
    return ProxyError(message)


def _send(sock: socket.socket, data: bytes) -> None:
    try:
        sock.sendall(data)
    except OSError:
        raise _fail(sock, "Error sending to proxy") from None


def _recv_exact(sock: socket.socket, size: int, message: str) -> bytes:
    data = bytearray()
    try:
        while len(data) < size:
            chunk = sock.recv(size - len(data))
            if not chunk:
                break
            data += chunk
    except OSError:
        raise _fail(sock, message) from None
    if len(data) != size:
        raise _fail(sock, message)
    return bytes(data)


def socks4_handshake(sock: socket.socket, dest: Service) -> None:
    """Ask a SOCKS4 proxy on ``sock`` to connect to the IPv4 ``dest``.

    On failure the socket is closed and :class:`ProxyError` raised.
    """
    if not dest.is_ipv4():
        raise _fail(sock, "Proxy destination is not IPv4")
    request = b"\x04\x01" + struct.pack(">H", dest.port) + dest.ipv4_bytes() + b"user\x00"
    _send(sock, request)
    reply = _recv_exact(sock, 8, "Error reading proxy response")
    if reply[1] != 0x5A:
        if reply[1] == 0x5B:
            raise _fail(sock, "Proxy rejected the request")
        raise _fail(sock, f"Proxy returned error {reply[1]}")


def socks5_handshake(sock: socket.socket, host: str, port: int) -> None:
    """Ask a SOCKS5 proxy on ``sock`` to connect to ``host``:``port`` by name.

    On failure the socket is closed and :class:`ProxyError` raised.
    """
    name = host.encode("utf-8")
    if len(name) > 255:
        raise _fail(sock, "Hostname too long")
    if not 0 <= port <= 0xFFFF:
        raise _fail(sock, f"port out of range: {port}")

    _send(sock, b"\x05\x01\x00")
    greeting = _recv_exact(sock, 2, "Error reading proxy response")
    if greeting != b"\x05\x00":
        raise _fail(sock, "Proxy failed to initialize")

    _send(sock, b"\x05\x01\x00\x03" + bytes([len(name)]) + name + struct.pack(">H", port))
    reply = _recv_exact(sock, 4, "Error reading proxy response")
    if reply[0] != 0x05:
        raise _fail(sock, "Proxy failed to accept request")
    if reply[1] != 0x00:
        raise _fail(sock, _SOCKS5_ERRORS.get(reply[1], "Proxy error: unknown"))
    if reply[2] != 0x00:
        raise _fail(sock, "Error: malformed proxy response")

    address_type = reply[3]
    if address_type in _ADDRESS_LENGTHS:
        _recv_exact(sock, _ADDRESS_LENGTHS[address_type], "Error reading from proxy")
    elif address_type == 0x03:
        (length,) = _recv_exact(sock, 1, "Error reading from proxy")
        _recv_exact(sock, length, "Error reading from proxy")
    else:
        raise _fail(sock, "Error: malformed proxy response")
    _recv_exact(sock, 2, "Error reading from proxy")


def connect_directly(service: Service, timeout: float = DEFAULT_CONNECT_TIMEOUT) -> socket.socket:
    """Open a blocking TCP connection to ``service``, waiting at most ``timeout`` seconds."""
    try:
        family, sockaddr = service.to_sockaddr()
    except ValueError:
        raise ConnectionError(f"Cannot connect to {service}: unsupported network") from None

    sock = socket.socket(family, socket.SOCK_STREAM, socket.IPPROTO_TCP)
    try:
        if hasattr(socket, "SO_NOSIGPIPE"):
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_NOSIGPIPE, 1)
        sock.settimeout(timeout)
        try:
            sock.connect(sockaddr)
        except socket.timeout:
            raise TimeoutError("connection timeout") from None
        sock.settimeout(None)
    except BaseException:
        sock.close()
        raise
    return sock