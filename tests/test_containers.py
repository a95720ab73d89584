import io
import struct

import pytest

from seednet.containers import (
    encode_fixed_string,
    encode_mapping,
    encode_sequence,
    encode_set,
    encode_string,
    read_fixed_string,
    read_mapping,
    read_sequence,
    read_set,
    read_string,
)
from seednet.serialize import SerializationError, encode_compact_size


def _u8(value):
    return bytes([value])


def _read_u8(stream):
    data = stream.read(1)
    if len(data) != 1:
        raise SerializationError("end of data")
    return data[0]


def _u32(value):
    return struct.pack("<I", value)


def _read_u32(stream):
    return struct.unpack("<I", stream.read(4))[0]


def test_encode_string_wire_bytes():
    assert encode_string("abc") == b"\x03abc"


def test_encode_empty_string():
    assert encode_string("") == b"\x00"


@pytest.mark.parametrize("text", ["", "seed", "x" * 300, "h\u00e9llo"])
def test_string_round_trip(text):
    stream = io.BytesIO(encode_string(text))
    assert read_string(stream) == text
    assert stream.read() == b""


def test_read_string_truncated():
    with pytest.raises(SerializationError):
        read_string(io.BytesIO(b"\x05ab"))


def test_read_string_too_large():
    data = b"\xfe" + struct.pack("<I", 0x02000001)
    with pytest.raises(SerializationError):
        read_string(io.BytesIO(data))


def test_read_string_invalid_utf8():
    with pytest.raises(SerializationError):
        read_string(io.BytesIO(b"\x02\xff\xfe"))


def test_fixed_string_pads_with_nul():
    assert encode_fixed_string("ab", 4) == b"ab\x00\x00"


def test_fixed_string_truncates():
    assert encode_fixed_string("abcdef", 4) == b"abcd"


def test_fixed_string_negative_length():
    with pytest.raises(ValueError):
        encode_fixed_string("ab", -1)


def test_read_fixed_string_stops_at_nul():
    stream = io.BytesIO(b"ab\x00x")
    assert read_fixed_string(stream, 4) == "ab"
    assert stream.read() == b""


def test_fixed_string_round_trip():
    data = encode_fixed_string("version", 12)
    assert len(data) == 12
    assert read_fixed_string(io.BytesIO(data), 12) == "version"


def test_read_fixed_string_short_input():
    with pytest.raises(SerializationError):
        read_fixed_string(io.BytesIO(b"ab"), 4)


def test_sequence_layout_and_round_trip():
    items = [1, 2, 0xDEADBEEF]
    data = encode_sequence(items, _u32)
    assert data[:1] == encode_compact_size(3)
    assert len(data) == 1 + 4 * 3
    assert read_sequence(io.BytesIO(data), _read_u32) == items


def test_empty_sequence():
    assert encode_sequence([], _u8) == b"\x00"
    assert read_sequence(io.BytesIO(b"\x00"), _read_u8) == []


def test_read_sequence_truncated():
    with pytest.raises(SerializationError):
        read_sequence(io.BytesIO(b"\x03\x01\x02"), _read_u8)


def test_set_encoded_in_order():
    assert encode_set({3, 1, 2}, _u8) == b"\x03\x01\x02\x03"


def test_set_round_trip():
    items = {5, 9, 200, 0}
    assert read_set(io.BytesIO(encode_set(items, _u8)), _read_u8) == items


def test_read_set_collapses_duplicates():
    assert read_set(io.BytesIO(b"\x03\x07\x07\x08"), _read_u8) == {7, 8}


def test_mapping_encoded_in_key_order():
    data = encode_mapping({2: 20, 1: 10}, _u8, _u8)
    assert data == b"\x02\x01\x0a\x02\x14"


def test_mapping_round_trip():
    mapping = {"b": 2, "a": 1, "c": 3}
    data = encode_mapping(mapping, encode_string, _u32)
    assert read_mapping(io.BytesIO(data), read_string, _read_u32) == mapping


def test_read_mapping_first_value_wins():
    data = b"\x02\x01\x0a\x01\x14"
    assert read_mapping(io.BytesIO(data), _read_u8, _read_u8) == {1: 10}