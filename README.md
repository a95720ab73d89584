# seednet

Building blocks for a peer-to-peer network seeder: 16-byte network
addresses (IPv4, IPv6, Tor and I2P), the little-endian binary wire format,
peer message headers and addresses, host name lookup, and direct or
SOCKS-proxied TCP connections. It uses only the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `seednet.util`: `encode_base32` (lower case, `=` padding),
  `decode_base32(text, strict=False)` and `double_sha256`. In strict mode,
  malformed groups, wrong padding or left-over bits raise `Base32Error`.
  Without strict mode, decoding stops at the first character outside the
  alphabet.
- `seednet.serialize`: compact-size integers (`compact_size_length`,
  `encode_compact_size`, `read_compact_size`), length-prefixed bytes
  (`encode_var_bytes`, `read_var_bytes`), `read_exact`, the `SerType` flags
  and the constants `MAX_SIZE` and `PROTOCOL_VERSION`. Reading past the end,
  or a compact size above `MAX_SIZE`, raises `SerializationError`.
- `seednet.containers`: encoders and readers for UTF-8 strings, fixed-width
  NUL-padded strings, sequences, sets (written in ascending order) and
  mappings (written in ascending key order).
- `seednet.datastream.DataStream`: an in-memory buffer that is written at
  the end and read from the front. It has `read`, `ignore`, `rewind`,
  `compact`, struct-based `pack` and `unpack`, and compact-size and
  var-bytes helpers. Streams can be joined with `+` and `+=`.
- `seednet.filestream.FileStream`: reads and writes exact byte counts on a
  binary file object. It is a context manager that closes the file on exit,
  except for the standard streams. `release()` hands the file back without
  closing it.
- `seednet.netaddr`: `NetAddr`, a 16-byte address in which IPv4 uses the
  mapped `::ffff:0:0/96` range, and `Service`, an address with a port.
  Both offer RFC range checks (`is_rfc1918`, `is_rfc4193`, ...),
  `is_valid`, `is_routable`, `network()`, `group()`, `hash64()`,
  `reachability_from()`, text forms, and 16- or 18-byte serialization.
  `parse_network` maps names such as `"ipv4"` or `"tor"` to `Network`.
- `seednet.protocol`: `MessageHeader` (message start, 12-byte command, size
  and checksum), `Address` (a `Service` with service bits and a timestamp,
  serialized according to `SerType` and the protocol version), `Inventory`,
  `ServiceFlag`, `default_port(testnet=False, override=0)` (9333, or 19335
  on testnet) and the constant `MESSAGE_START`.
- `seednet.lookup`: `split_host_port`, `lookup_host`, `lookup_host_numeric`,
  `lookup`, `lookup_one`, `lookup_numeric`, `parse_netaddr` and
  `parse_service`. `.onion` and `.oc.b32.i2p` names are decoded without
  DNS. Failed lookups return an empty list or `None`. The `parse_*`
  functions return the all-zero, invalid address instead.
- `seednet.proxy`: `connect_directly(service, timeout=5.0)` opens a blocking
  TCP socket. `socks4_handshake` and `socks5_handshake` ask a proxy to
  connect onwards. A failed handshake closes the socket and raises
  `ProxyError`.
- `seednet.connect.ProxyRegistry`: stores a SOCKS proxy for each `Network`
  and an optional SOCKS5 proxy for host names. `connect(dest)` uses the
  proxy set for the destination's network. `connect_by_name("host:port")`
  returns the resolved `Service` and the socket.

## Examples

```python
from seednet.lookup import parse_service
from seednet.netaddr import NetAddr, Network
from seednet.util import encode_base32

svc = parse_service("[2001:4860::1]:9333")
assert svc.to_string_ip_port() == "[2001:4860::1]:9333"
assert svc.network() is Network.IPV6

name = encode_base32(bytes(range(10))) + ".onion"
onion = NetAddr.from_special(name)
assert onion.is_tor() and str(onion) == name
```

```python
from seednet.datastream import DataStream
from seednet.protocol import MessageHeader

stream = DataStream()
MessageHeader("ping", 0).serialize(stream)
header = MessageHeader.deserialize(stream)
assert header.command_name() == "ping" and header.is_valid()
```

```python
from seednet.connect import ProxyRegistry
from seednet.lookup import parse_service
from seednet.netaddr import Network

proxies = ProxyRegistry()
proxies.set_proxy(Network.TOR, parse_service("127.0.0.1:9050"), 5)
assert proxies.get_proxy(Network.TOR).port == 9050
```

## What it does not do

This is a library of parts only. It has no command-line program, no DNS
server that answers queries, no crawler that speaks the peer protocol to
find and test nodes, and no storage for a database of known peers.