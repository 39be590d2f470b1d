"""
Multihash parsing and Base58 text encoding.

The ipfs protocol carries a content hash in multihash form::

    [code (varint)][length (varint)][digest]

In the textual multiaddr the multihash is written in Base58 (Bitcoin
alphabet), e.g. `QmcgpsyWgH8Y8ajJz1Cu72KnS5uo2Aa2LpzU7kinSupNKC`, which
decodes to a 34-byte sha2-256 multihash (0x12, 0x20, 32-byte digest).

The multiaddr codec only needs the multihash as an opaque blob, but a
structurally invalid one is still rejected on the way in.

References:
    - https://github.com/multiformats/multihash
    - https://github.com/multiformats/multicodec/blob/master/table.csv
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from . import varint

__all__ = [
    "Base58",
    "Multihash",
    "MultihashCode",
    "MultihashError",
    "decode_base58",
    "encode_base58",
]


class MultihashError(ValueError):
    """Raised when a multihash or its Base58 text form is malformed."""


class MultihashCode(IntEnum):
    """Hash function codes accepted inside a multihash."""

    IDENTITY = 0x00
    """Identity "hash" - the digest is the raw data."""

    SHA1 = 0x11
    SHA2_256 = 0x12
    SHA2_512 = 0x13
    SHA3_512 = 0x14
    SHA3_384 = 0x15
    SHA3_256 = 0x16
    SHA3_224 = 0x17
    KECCAK_256 = 0x1B
    BLAKE2B_256 = 0xB220
    BLAKE2B_512 = 0xB240
    BLAKE2S_256 = 0xB260


_DIGEST_SIZES: Final[dict[MultihashCode, int]] = {
    MultihashCode.SHA1: 20,
    MultihashCode.SHA2_256: 32,
    MultihashCode.SHA2_512: 64,
    MultihashCode.SHA3_512: 64,
    MultihashCode.SHA3_384: 48,
    MultihashCode.SHA3_256: 32,
    MultihashCode.SHA3_224: 28,
    MultihashCode.KECCAK_256: 32,
    MultihashCode.BLAKE2B_256: 32,
    MultihashCode.BLAKE2B_512: 64,
    MultihashCode.BLAKE2S_256: 32,
}
"""Full digest size per hash function. Identity has no fixed size."""


class Base58:
    """
    Base58 encoding/decoding (Bitcoin-style alphabet).

    Base58 excludes visually ambiguous characters (0, O, I, l).

    The alphabet is: 123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz
    """

    ALPHABET: Final[str] = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
    """Base58 alphabet (Bitcoin style, excludes 0, O, I, l)."""

    @classmethod
    def encode(cls, data: bytes) -> str:
        """
        Encode bytes as Base58 string.

        Leading zero bytes become leading '1' characters.
        """
        leading_zeros = len(data) - len(data.lstrip(b"\x00"))

        num = int.from_bytes(data, "big")
        result: list[str] = []

        while num > 0:
            num, remainder = divmod(num, 58)
            result.append(cls.ALPHABET[remainder])

        result.extend([cls.ALPHABET[0]] * leading_zeros)
        return "".join(reversed(result))

    @classmethod
    def decode(cls, s: str) -> bytes:
        """
        Decode Base58 string to bytes.

        Leading '1' characters become leading zero bytes.

        Raises:
            MultihashError: If string contains invalid characters.
        """
        leading_ones = len(s) - len(s.lstrip(cls.ALPHABET[0]))

        num = 0
        for char in s:
            index = cls.ALPHABET.find(char)
            if index < 0:
                raise MultihashError(f"Invalid Base58 character: {char!r}")
            num = num * 58 + index

        if num == 0:
            result = b""
        else:
            result = num.to_bytes((num.bit_length() + 7) // 8, "big")

        return b"\x00" * leading_ones + result


@dataclass(frozen=True, slots=True)
class Multihash:
    """
    A self-describing hash in multihash format.

    Attributes:
        code: Hash function identifier.
        digest: Hash output (or raw data for identity).
    """

    code: MultihashCode
    """Hash function used."""

    digest: bytes
    """Hash output or identity data."""

    def encode(self) -> bytes:
        """Encode as `[code][length][digest]` multihash bytes."""
        header = varint.encode_varint(self.code) + varint.encode_varint(len(self.digest))
        return header + self.digest

    @classmethod
    def from_bytes(cls, data: bytes) -> Multihash:
        """
        Parse and validate multihash bytes.

        The declared length must cover the rest of the input exactly, and
        may not exceed the full digest size of the hash function.

        Raises:
            MultihashError: If the structure is invalid.
        """
        try:
            code, pos = varint.decode_varint(data)
            length, consumed = varint.decode_varint(data, pos)
        except varint.VarintError as e:
            raise MultihashError(f"Invalid multihash header: {e}") from e
        pos += consumed

        try:
            hash_code = MultihashCode(code)
        except ValueError:
            raise MultihashError(f"Unknown multihash function code: {code:#x}") from None

        max_size = _DIGEST_SIZES.get(hash_code)
        if max_size is not None and length > max_size:
            raise MultihashError(
                f"Digest length {length} exceeds {max_size} bytes for {hash_code.name.lower()}"
            )

        digest = data[pos:]
        if len(digest) != length:
            raise MultihashError(
                f"Inconsistent multihash length: declared {length}, found {len(digest)}"
            )

        return cls(code=hash_code, digest=digest)


def decode_base58(text: str) -> bytes:
    """
    Decode a Base58 multihash string to its validated binary form.

    Raises:
        MultihashError: If the text is not Base58 or not a valid multihash.
    """
    data = Base58.decode(text)
    Multihash.from_bytes(data)
    return data


def encode_base58(data: bytes) -> str:
    """Encode multihash bytes as Base58 text."""
    return Base58.encode(data)
