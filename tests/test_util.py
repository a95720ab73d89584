import os

import pytest

from seednet.util import Base32Error, decode_base32, double_sha256, encode_base32


def test_encode_empty():
    assert encode_base32(b"") == ""


def test_encode_rfc_vector():
    assert encode_base32(b"foobar") == "mzxw6ytboi======"


def test_encode_single_byte_padding():
    assert encode_base32(b"f") == "my======"


@pytest.mark.parametrize("length", range(0, 21))
def test_encoded_length_is_multiple_of_eight(length):
    encoded = encode_base32(bytes(range(length)))
    assert len(encoded) % 8 == 0
    assert encoded == encoded.lower()


@pytest.mark.parametrize("length", range(0, 21))
def test_round_trip_strict(length):
    data = os.urandom(length)
    assert decode_base32(encode_base32(data), strict=True) == data


def test_round_trip_ten_bytes_has_no_padding():
    data = os.urandom(10)
    encoded = encode_base32(data)
    assert "=" not in encoded
    assert len(encoded) == 16
    assert decode_base32(encoded) == data


def test_decode_upper_case():
    assert decode_base32(encode_base32(b"foobar").upper(), strict=True) == b"foobar"


def test_decode_without_padding_non_strict():
    encoded = encode_base32(b"foobar").rstrip("=")
    assert decode_base32(encoded) == b"foobar"


def test_decode_without_padding_strict_fails():
    encoded = encode_base32(b"foobar").rstrip("=")
    with pytest.raises(Base32Error):
        decode_base32(encoded, strict=True)


def test_decode_stops_at_invalid_character():
    encoded = encode_base32(b"hello")
    assert decode_base32(encoded + "!" + encode_base32(b"world")) == b"hello"


def test_single_character_is_impossible():
    assert decode_base32("m") == b""
    with pytest.raises(Base32Error):
        decode_base32("m", strict=True)


def test_short_padding_is_rejected():
    with pytest.raises(Base32Error):
        decode_base32("my=====", strict=True)


def test_leftover_bits_are_rejected():
    assert decode_base32("mz======") == b"f"
    with pytest.raises(Base32Error):
        decode_base32("mz======", strict=True)


def test_data_after_padding_is_rejected():
    with pytest.raises(Base32Error):
        decode_base32("my======x", strict=True)


def test_non_alphabet_after_padding_is_accepted():
    assert decode_base32("my======.onion", strict=True) == b"f"


def test_base32_error_is_value_error():
    with pytest.raises(ValueError):
        decode_base32("abc", strict=True)


def test_double_sha256_empty():
    assert double_sha256(b"").hex() == (
        "5df6e0e2761359d30a8275058e299fcc0381534545f55cf43e41983f5d4c9456"
    )


def test_double_sha256_length_and_determinism():
    data = os.urandom(40)
    digest = double_sha256(data)
    assert len(digest) == 32
    assert digest == double_sha256(bytearray(data))
    assert digest != double_sha256(data + b"\x00")