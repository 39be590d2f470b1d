"""
Multiaddr Protocol Registry
===========================

The closed set of protocols a multiaddr may be built from.

Each protocol has three fixed attributes:

| Label | Code | Address size           |
|-------|------|------------------------|
| ip4   | 4    | 4 bytes                |
| tcp   | 6    | 2 bytes                |
| udp   | 17   | 2 bytes                |
| dccp  | 33   | 2 bytes                |
| ip6   | 41   | 16 bytes               |
| sctp  | 132  | 2 bytes                |
| utp   | 301  | none                   |
| udt   | 302  | none                   |
| ipfs  | 421  | varint length + bytes  |
| https | 443  | none                   |
| onion | 444  | 10 bytes               |
| http  | 480  | none                   |

Codes come from the shared multicodec table and must never be reassigned.
Sizes are in bytes.

References:
----------
- https://github.com/multiformats/multiaddr/blob/master/protocols.csv
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from .exceptions import UnknownCodeError, UnknownProtocolError

__all__ = [
    "Fixed",
    "Protocol",
    "SizeClass",
    "VARIABLE",
    "Variable",
    "lookup_by_code",
    "lookup_by_name",
    "size_class",
]


@dataclass(frozen=True, slots=True)
class Fixed:
    """An address value of exactly `size` bytes. Zero means no address at all."""

    size: int


@dataclass(frozen=True, slots=True)
class Variable:
    """An address value prefixed by its own varint-encoded byte length."""


VARIABLE: Final = Variable()

SizeClass = Fixed | Variable
"""How a protocol's address value is delimited on the wire."""


class Protocol(IntEnum):
    """
    Registered multiaddr protocols.

    The integer value of a member is its wire code.
    """

    label: str
    """Canonical lowercase name used in the textual form."""

    size: SizeClass
    """Size class of the address value."""

    def __new__(cls, code: int, label: str, size: SizeClass) -> Protocol:
        member = int.__new__(cls, code)
        member._value_ = code
        member.label = label
        member.size = size
        return member

    IP4 = (4, "ip4", Fixed(4))
    TCP = (6, "tcp", Fixed(2))
    UDP = (17, "udp", Fixed(2))
    DCCP = (33, "dccp", Fixed(2))
    IP6 = (41, "ip6", Fixed(16))
    SCTP = (132, "sctp", Fixed(2))
    UTP = (301, "utp", Fixed(0))
    UDT = (302, "udt", Fixed(0))
    IPFS = (421, "ipfs", VARIABLE)
    HTTPS = (443, "https", Fixed(0))
    ONION = (444, "onion", Fixed(10))
    HTTP = (480, "http", Fixed(0))

    @property
    def code(self) -> int:
        """Numeric code used in the binary encoding."""
        return int(self)

    @property
    def is_zero_width(self) -> bool:
        """Whether the protocol carries no address value."""
        return self.size == Fixed(0)

    def __str__(self) -> str:
        return self.label


_BY_NAME: Final[dict[str, Protocol]] = {protocol.label: protocol for protocol in Protocol}
_BY_CODE: Final[dict[int, Protocol]] = {protocol.code: protocol for protocol in Protocol}


def lookup_by_name(name: str) -> Protocol:
    """
    Resolve a textual protocol label (exact, case-sensitive).

    Raises:
        UnknownProtocolError: If no protocol has this label.
    """
    try:
        return _BY_NAME[name]
    except KeyError:
        raise UnknownProtocolError(name) from None


def lookup_by_code(code: int) -> Protocol:
    """
    Resolve a wire code.

    Raises:
        UnknownCodeError: If no protocol has this code.
    """
    try:
        return _BY_CODE[code]
    except KeyError:
        raise UnknownCodeError(code) from None


def size_class(protocol: Protocol) -> SizeClass:
    """Return the address size class of a protocol."""
    return protocol.size
