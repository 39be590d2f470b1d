"""
The Multiaddr value type.

A multiaddr is an immutable, validated binary encoding of a protocol path.
It can only be built from text that parses or from bytes that validate, so
every instance holds a well-formed encoding.

    >>> addr = Multiaddr.from_string("/ip4/127.0.0.1/tcp/1234")
    >>> addr.as_bytes().hex()
    '047f0000010604d2'
    >>> str(addr)
    '/ip4/127.0.0.1/tcp/1234'

Two multiaddrs are equal iff their bytes are identical.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address
from typing import Any

from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from . import codec, varint
from .exceptions import ParseError
from .protocols import Protocol

__all__ = [
    "Multiaddr",
    "parse",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Multiaddr:
    """
    A self-describing network address.

    Attributes:
        data: The binary encoding (validated on construction).
    """

    data: bytes
    """Concatenated `(code, address)` records in wire format."""

    def __post_init__(self) -> None:
        """Coerce to immutable bytes and reject malformed encodings."""
        data = bytes(self.data)
        codec.validate_bytes(data)
        object.__setattr__(self, "data", data)

    @classmethod
    def from_string(cls, text: str) -> Self:
        """
        Parse a textual multiaddr such as `/ip4/1.2.3.4/tcp/80`.

        Raises:
            ParseError: If the text is not a valid multiaddr.
        """
        try:
            data = codec.string_to_bytes(text)
        except ParseError as e:
            logger.debug("Rejected multiaddr %r: %s", text, e)
            raise
        return cls(data)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        """
        Build a multiaddr from its binary encoding.

        The buffer is validated record by record; the original bytes are
        kept unchanged.

        Raises:
            ParseError: If the bytes are not a well-formed multiaddr.
        """
        try:
            return cls(data)
        except ParseError as e:
            logger.debug("Rejected multiaddr bytes %s: %s", bytes(data).hex(), e)
            raise

    @classmethod
    def from_ip_address(cls, address: IPv4Address | IPv6Address) -> Self:
        """Build a single-record `/ip4/...` or `/ip6/...` multiaddr."""
        protocol = Protocol.IP4 if address.version == 4 else Protocol.IP6
        return cls(varint.encode_varint(protocol.code) + address.packed)

    def as_bytes(self) -> bytes:
        """Return the binary encoding."""
        return self.data

    to_bytes = as_bytes
    __bytes__ = as_bytes

    def records(self) -> list[tuple[Protocol, bytes]]:
        """Return `(protocol, raw address)` pairs in order."""
        return list(codec.iter_records(self.data))

    def protocols(self) -> list[Protocol]:
        """Return the protocols of this address in order."""
        return [protocol for protocol, _ in codec.iter_records(self.data)]

    def segments(self) -> list[str]:
        """Return the textual path segments, e.g. `['ip4', '1.2.3.4', 'tcp', '80']`."""
        return str(self).split("/")[1:] if self.data else []

    def __len__(self) -> int:
        """Number of records."""
        return sum(1 for _ in codec.iter_records(self.data))

    def __str__(self) -> str:
        """
        Canonical textual form.

        Raises:
            UnsupportedProtocolError: If the address contains an onion record.
        """
        return codec.bytes_to_string(self.data)

    def __repr__(self) -> str:
        return f"Multiaddr({self.data.hex()})"

    @classmethod
    def _validate(cls, value: Any) -> Multiaddr:
        """Build from an existing instance, the text form or the binary form."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, (bytes, bytearray)):
            return cls.from_bytes(bytes(value))
        raise ValueError(f"Expected Multiaddr, str or bytes, got {type(value).__name__}")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        Hook into Pydantic's validation system.

        Accepts an existing Multiaddr, its text form or its binary form,
        and serializes to the text form.
        """
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


def parse(text: str) -> Multiaddr:
    """Parse a textual multiaddr. Shorthand for `Multiaddr.from_string`."""
    return Multiaddr.from_string(text)
