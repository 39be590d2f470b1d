"""
Unsigned LEB128 varint encoding and decoding.

WHERE VARINTS APPEAR IN A MULTIADDR
-----------------------------------
Every multiaddr record starts with its protocol code as a varint. Protocols
with a variable-size address (such as ipfs) add a second varint holding the
byte length of the address that follows::

    [code varint][address bytes]                    fixed-size protocols
    [code varint][length varint][address bytes]     variable-size protocols

Most protocol codes are below 128 and take a single byte. Codes such as
421 (ipfs) or 480 (http) need two.


HOW LEB128 ENCODING WORKS
-------------------------
The integer is split into 7-bit groups, least-significant group first. Each
group goes into one byte whose MSB signals continuation:

- MSB = 1: More bytes follow
- MSB = 0: This is the final byte

Byte structure::

    [C|D D D D D D D]
     ^-- Continuation bit (1 = more bytes, 0 = last byte)
       ^-----------^-- 7 bits of data


ENCODING EXAMPLE: CODE 421 (ipfs)
---------------------------------
    421 = 0b110100101

    Group 0 (bits 0-6):  0100101 = 0x25, more follows -> 0xA5
    Group 1 (bits 7-13): 0000011 = 0x03, final byte   -> 0x03

Result: [0xA5, 0x03]


WIDTH LIMIT
-----------
Multiaddr codes and lengths are unsigned 32-bit values. A 32-bit value needs
at most 5 bytes (35 payload bits, 3 unused). Longer encodings, or 5-byte
encodings carrying more than 32 bits, are rejected rather than truncated.

References:
    unsigned-varint specification:
        https://github.com/multiformats/unsigned-varint
    LEB128:
        https://en.wikipedia.org/wiki/LEB128
"""

from __future__ import annotations

from typing import Final

MAX_VALUE: Final = 2**32 - 1
"""Largest value a multiaddr varint may carry."""

MAX_LENGTH: Final = 5
"""Maximum number of bytes in an encoded 32-bit varint."""


class VarintError(Exception):
    """Raised when varint encoding or decoding fails."""


class TruncatedVarintError(VarintError):
    """Raised when the input ends before the final varint byte."""


def encode_varint(value: int) -> bytes:
    """
    Encode an unsigned 32-bit integer as LEB128 varint.

    Args:
        value: Integer in [0, 2^32 - 1].

    Returns:
        Varint-encoded bytes, 1 to 5 bytes long.

    Raises:
        ValueError: If value is negative or does not fit in 32 bits.
    """
    if value < 0:
        raise ValueError("Varint must be non-negative")
    if value > MAX_VALUE:
        raise ValueError(f"Varint exceeds 32 bits: {value}")

    result = bytearray()

    # Emit 7 bits at a time with the continuation bit set,
    # until what is left fits in a single final byte.
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7

    result.append(value)

    return bytes(result)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode a varint from bytes at the given offset.

    Args:
        data: Input bytes containing the varint.
        offset: Starting position in data. Defaults to 0.

    Returns:
        Tuple of (decoded_value, bytes_consumed).

    Raises:
        TruncatedVarintError: If the input runs out of bytes before
            the final byte.
        VarintError: If the encoding runs past 5 bytes or decodes
            to a value wider than 32 bits.
    """
    result = 0
    shift = 0
    pos = offset

    while True:
        if pos >= len(data):
            raise TruncatedVarintError("Truncated varint")

        byte = data[pos]
        pos += 1

        result |= (byte & 0x7F) << shift
        shift += 7

        if not (byte & 0x80):
            break

        # Still continuing after the fifth byte: cannot be a 32-bit value.
        if pos - offset >= MAX_LENGTH:
            raise VarintError("Varint too long")

    if result > MAX_VALUE:
        raise VarintError(f"Varint exceeds 32 bits: {result}")

    return result, pos - offset
