"""Network addresses, wire serialization, name lookup and SOCKS connection helpers for a peer-to-peer seeder."""

__version__ = "0.1.0"

__all__ = [
    "connect",
    "containers",
    "datastream",
    "filestream",
    "lookup",
    "netaddr",
    "protocol",
    "proxy",
    "serialize",
    "util",
]