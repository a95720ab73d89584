"""Proxy settings and connecting to peers directly or through SOCKS proxies."""

from __future__ import annotations

import socket
from typing import Optional

from .lookup import parse_netaddr, split_host_port
from .netaddr import NetAddr, Network, Service
from .proxy import DEFAULT_CONNECT_TIMEOUT, connect_directly, socks4_handshake, socks5_handshake

__all__ = ["ProxyRegistry"]

_PROXY_VERSIONS = (0, 4, 5)
_NAME_PROXY_VERSIONS = (0, 5)


class ProxyRegistry:
    """Per-network SOCKS proxies and a proxy for connecting by host name."""

    def __init__(
        self,
        name_lookup: bool = False,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ) -> None:
        self.name_lookup = name_lookup
        self.connect_timeout = connect_timeout
        self._proxies: dict[Network, tuple[Service, int]] = {}
        self._name_proxy: Optional[tuple[Service, int]] = None

    def set_proxy(self, network: int, service: Service, socks_version: int = 5) -> None:
        """Route ``network`` through ``service``; version 0 removes the proxy."""
        network = Network(network)
        if socks_version not in _PROXY_VERSIONS:
            raise ValueError(f"unsupported SOCKS version: {socks_version}")
        if socks_version and not service.is_valid():
            raise ValueError(f"invalid proxy address: {service}")
        self._proxies[network] = (service, socks_version)

    def get_proxy(self, network: int) -> Optional[Service]:
        """The proxy for ``network``, or None if there is none."""
        service, version = self._proxies.get(Network(network), (None, 0))
        return service if version else None

    def set_name_proxy(self, service: Service, socks_version: int = 5) -> None:
        """Use ``service`` to connect by name; version 0 removes it."""
        if socks_version not in _NAME_PROXY_VERSIONS:
            raise ValueError(f"unsupported SOCKS version for names: {socks_version}")
        if socks_version and not service.is_valid():
            raise ValueError(f"invalid proxy address: {service}")
        self._name_proxy = (service, socks_version)

    def has_name_proxy(self) -> bool:
        return self._name_proxy is not None and self._name_proxy[1] != 0

    def is_proxy(self, addr: NetAddr) -> bool:
        """Whether ``addr`` is the address of one of the network proxies."""
        return any(
            version and service.ip == addr.ip for service, version in self._proxies.values()
        )

    def connect(self, dest: Service, timeout: Optional[float] = None) -> socket.socket:
        """Connect to ``dest``, through its network's proxy if one is set."""
        if timeout is None:
            timeout = self.connect_timeout
        proxy, version = self._proxies.get(dest.network(), (None, 0))
        if not version:
            return connect_directly(dest, timeout)
        sock = connect_directly(proxy, timeout)
        if version == 4:
            socks4_handshake(sock, dest)
        else:
            socks5_handshake(sock, dest.to_string_ip(), dest.port)
        return sock

    def connect_by_name(
        self,
        dest: str,
        default_port: int = 0,
        timeout: Optional[float] = None,
    ) -> tuple[Service, socket.socket]:
        """Connect to ``host[:port]``.

        Returns the resolved service and the socket. When the name cannot be
        resolved locally and a name proxy is set, the proxy resolves it and
        the returned service is ``0.0.0.0:0``.
        """
        if timeout is None:
            timeout = self.connect_timeout
        host, port = split_host_port(dest, default_port)
        has_name_proxy = self.has_name_proxy()
        resolved = Service(parse_netaddr(host, self.name_lookup and not has_name_proxy), port)
        if resolved.is_valid():
            return resolved, self.connect(resolved, timeout)
        if not has_name_proxy:
            raise ConnectionError(f"cannot resolve {dest}")
        proxy, _version = self._name_proxy
        sock = connect_directly(proxy, timeout)
        socks5_handshake(sock, host, port)
        return Service(NetAddr.from_ipv4(bytes(4)), 0), sock