import pytest

from seednet.datastream import DataStream
from seednet.netaddr import NetAddr, Service
from seednet.serialize import MAX_SIZE, SerializationError, SerType, encode_compact_size


def test_write_then_read_round_trip():
    stream = DataStream()
    stream.write(b"hello")
    stream.write(b"world")
    assert stream.read(5) == b"hello"
    assert stream.read(5) == b"world"
    assert stream.eof()


def test_initial_data_and_length():
    stream = DataStream(b"abcdef")
    assert len(stream) == 6
    stream.read(2)
    assert len(stream) == 4
    assert bytes(stream) == b"cdef"


def test_read_past_end_raises_and_keeps_data():
    stream = DataStream(b"abc")
    with pytest.raises(SerializationError):
        stream.read(4)
    assert bytes(stream) == b"abc"


def test_ignore_past_end_raises():
    stream = DataStream(b"ab")
    with pytest.raises(SerializationError):
        stream.ignore(3)
    assert len(stream) == 2


def test_negative_read_rejected():
    with pytest.raises(ValueError):
        DataStream(b"ab").read(-1)


def test_ignore_skips_bytes():
    stream = DataStream(b"abcdef")
    stream.ignore(4)
    assert stream.read(2) == b"ef"


def test_rewind_after_partial_read():
    stream = DataStream(b"abcdef")
    stream.read(3)
    assert stream.rewind(2) is True
    assert bytes(stream) == b"bcdef"
    assert stream.rewind(5) is False


def test_reading_to_end_clears_buffer():
    stream = DataStream(b"abc")
    stream.read(3)
    assert stream.rewind(1) is False
    assert len(stream) == 0


def test_compact_drops_read_bytes():
    stream = DataStream(b"abcdef")
    stream.read(2)
    stream.compact()
    assert stream.rewind(1) is False
    assert bytes(stream) == b"cdef"


def test_clear():
    stream = DataStream(b"abc")
    stream.clear()
    assert stream.eof()
    assert bytes(stream) == b""


def test_add_and_iadd_use_unread_part():
    first = DataStream(b"xxab")
    first.read(2)
    second = DataStream(b"cd")
    combined = first + second
    assert bytes(combined) == b"abcd"
    assert bytes(first) == b"ab"
    first += second
    assert bytes(first) == b"abcd"


def test_add_keeps_type_and_version():
    stream = DataStream(b"a", ser_type=SerType.DISK, version=209)
    combined = stream + b"b"
    assert combined.ser_type == SerType.DISK
    assert combined.version == 209


def test_pack_unpack_round_trip():
    stream = DataStream()
    stream.pack("<IHq", 7, 65535, -3)
    assert stream.unpack("<IHq") == (7, 65535, -3)
    assert stream.eof()


@pytest.mark.parametrize("size", [0, 252, 253, 0xFFFF, 0x10000, MAX_SIZE])
def test_compact_size_round_trip(size):
    stream = DataStream()
    stream.write_compact_size(size)
    assert bytes(stream) == encode_compact_size(size)
    assert stream.read_compact_size() == size


def test_compact_size_too_large_on_read():
    stream = DataStream()
    stream.write_compact_size(MAX_SIZE + 1)
    with pytest.raises(SerializationError):
        stream.read_compact_size()


def test_var_bytes_round_trip():
    stream = DataStream()
    stream.write_var_bytes(b"payload")
    stream.write_var_bytes(b"")
    assert stream.read_var_bytes() == b"payload"
    assert stream.read_var_bytes() == b""
    assert stream.eof()


def test_truncated_var_bytes_raises():
    stream = DataStream(encode_compact_size(10) + b"short")
    with pytest.raises(SerializationError):
        stream.read_var_bytes()


def test_service_serializes_through_stream():
    service = Service(NetAddr.from_ipv4(bytes([1, 2, 3, 4])), 9333)
    stream = DataStream()
    service.serialize(stream)
    assert len(stream) == 18
    assert Service.deserialize(stream) == service