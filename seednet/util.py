"""Base32 coding for onion and garlic addresses, and double SHA-256 hashing."""

from __future__ import annotations

import base64
import hashlib

__all__ = ["Base32Error", "encode_base32", "decode_base32", "double_sha256"]

_ALPHABET = "abcdefghijklmnopqrstuvwxyz234567"
_DECODE = {ch: value for value, ch in enumerate(_ALPHABET)}
_DECODE.update({ch.upper(): value for ch, value in list(_DECODE.items())})

# Number of '=' characters required after 8n + k data characters.
_PADDING = {2: 6, 4: 4, 5: 3, 7: 1}
_IMPOSSIBLE_REMAINDERS = frozenset({1, 3, 6})


class Base32Error(ValueError):
    """Raised when strict base32 decoding meets malformed input."""


def encode_base32(data: bytes) -> str:
    """Encode bytes as lower-case base32 with '=' padding."""
    return base64.b32encode(bytes(data)).decode("ascii").lower()


def decode_base32(text: str, strict: bool = False) -> bytes:
    """Decode base32 text, stopping at the first character outside the alphabet.

    Upper and lower case letters are both accepted.  Without ``strict`` any
    trailing partial group or garbage is ignored; with ``strict`` a malformed
    group, wrong padding or non-zero leftover bits raise :class:`Base32Error`.
    """
    out = bytearray()
    acc = 0
    bits = 0
    count = 0
    for ch in text:
        value = _DECODE.get(ch)
        if value is None:
            break
        count += 1
        acc = (acc << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append(acc >> bits)
            acc &= (1 << bits) - 1

    if strict:
        _check_tail(text[count:], count % 8, acc)
    return bytes(out)


def _check_tail(rest: str, remainder: int, leftover: int) -> None:
    if remainder == 0:
        return
    if remainder in _IMPOSSIBLE_REMAINDERS:
        raise Base32Error(f"impossible number of base32 characters (8n+{remainder})")
    pads = _PADDING[remainder]
    if leftover:
        raise Base32Error("non-zero bits left over after the last byte")
    if not rest.startswith("=" * pads):
        raise Base32Error(f"expected {pads} padding characters")
    if len(rest) > pads and rest[pads] in _DECODE:
        raise Base32Error("base32 data follows the padding")


def double_sha256(data: bytes) -> bytes:
    """Return SHA-256 applied twice to ``data``."""
    return hashlib.sha256(hashlib.sha256(bytes(data)).digest()).digest()