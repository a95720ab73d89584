import pytest

from seednet.lookup import (
    lookup,
    lookup_host,
    lookup_host_numeric,
    lookup_numeric,
    lookup_one,
    parse_netaddr,
    parse_service,
    split_host_port,
)
from seednet.netaddr import NetAddr, Network, Service
from seednet.util import encode_base32

ONION = encode_base32(bytes(range(10))) + ".onion"


@pytest.mark.parametrize(
    "text, host, port",
    [
        ("1.2.3.4:8333", "1.2.3.4", 8333),
        ("[::1]:80", "::1", 80),
        ("::1", "::1", 7),
        ("[::1]", "::1", 7),
        ("host:", "host", 7),
        ("host:abc", "host:abc", 7),
        ("host:70000", "host", 7),
        ("host:0", "host", 7),
        ("host:-1", "host:-1", 7),
        (":5", "", 5),
        ("plainhost", "plainhost", 7),
    ],
)
def test_split_host_port(text, host, port):
    assert split_host_port(text, 7) == (host, port)


def test_split_host_port_default_is_zero():
    assert split_host_port("example.com") == ("example.com", 0)


def test_lookup_host_numeric_ipv4():
    found = lookup_host_numeric("127.0.0.1")
    assert len(found) == 1
    assert found[0].is_ipv4()
    assert found[0].ipv4_bytes() == bytes([127, 0, 0, 1])


def test_lookup_host_numeric_bracketed_ipv6():
    found = lookup_host_numeric("[::1]")
    assert [addr.is_local() for addr in found] == [True]


def test_lookup_host_empty():
    assert lookup_host("") == []


def test_lookup_host_non_numeric_without_lookup():
    assert lookup_host("seed.example.invalid", allow_lookup=False) == []


def test_lookup_host_onion_bypasses_resolver():
    found = lookup_host(ONION)
    assert found == [NetAddr.from_special(ONION)]
    assert found[0].is_tor()
    assert found[0].to_string_ip() == ONION


def test_lookup_with_port():
    services = lookup("10.0.0.1:1234", allow_lookup=False)
    assert len(services) == 1
    assert services[0].port == 1234
    assert services[0].to_string_ip() == "10.0.0.1"


def test_lookup_default_port():
    services = lookup("10.0.0.1", default_port=9333, allow_lookup=False)
    assert [s.port for s in services] == [9333]


def test_lookup_empty_name():
    assert lookup("", 80) == []


def test_lookup_one_ipv6_with_port():
    service = lookup_one("[2001:db8::5]:8333", allow_lookup=False)
    assert service is not None
    assert service.port == 8333
    assert service.is_rfc3849()


def test_lookup_numeric_failure():
    assert lookup_numeric("not-a-number.example.invalid", 80) is None


def test_lookup_numeric_round_trips_string():
    service = lookup_numeric("8.8.4.4:53")
    assert service is not None
    assert service.to_string_ip_port() == "8.8.4.4:53"
    assert service.network() == Network.IPV4


def test_parse_netaddr_invalid_gives_zero_address():
    addr = parse_netaddr("garbage.example.invalid")
    assert addr == NetAddr()
    assert not addr.is_valid()


def test_parse_netaddr_valid():
    addr = parse_netaddr("192.168.1.1")
    assert addr.is_rfc1918()
    assert str(addr) == "192.168.1.1"


def test_parse_service_invalid_gives_zero_service():
    service = parse_service("garbage.example.invalid", 80)
    assert service == Service()
    assert service.port == 0


def test_parse_service_onion():
    service = parse_service(ONION + ":9333")
    assert service.is_tor()
    assert service.port == 9333
    assert service.to_string_ip_port() == ONION + ":9333"