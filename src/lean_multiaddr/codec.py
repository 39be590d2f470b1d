"""
Multiaddr text and binary codec.

Textual form::

    /ip4/127.0.0.1/tcp/1234/http

Binary form, one record per protocol in the order written::

    [code varint]                                   zero-width protocols
    [code varint][address bytes]                    fixed-size protocols
    [code varint][length varint][address bytes]     variable-size protocols

For the example above::

    04 7f 00 00 01      ip4 127.0.0.1
    06 04 d2            tcp 1234
    e0 03               http

Conversions in both directions go through the protocol registry; nothing in
this module hard-codes a protocol's code or size.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Callable, Iterator
from typing import Final

from . import multihash, varint
from .exceptions import (
    InvalidAddressValueError,
    MalformedPathError,
    MalformedVarintError,
    MissingAddressError,
    TruncatedError,
    UnknownCodeError,
    UnsupportedProtocolError,
)
from .protocols import Fixed, Protocol, Variable, lookup_by_code, lookup_by_name

__all__ = [
    "address_bytes_to_string",
    "address_string_to_bytes",
    "bytes_to_string",
    "iter_records",
    "string_to_bytes",
    "validate_bytes",
]


# =============================================================================
# Address values: string -> bytes
# =============================================================================


def _ip4_to_bytes(value: str) -> bytes:
    try:
        return ipaddress.IPv4Address(value).packed
    except ValueError as e:
        raise InvalidAddressValueError("ip4", str(e)) from e


def _ip6_to_bytes(value: str) -> bytes:
    try:
        address = ipaddress.IPv6Address(value)
    except ValueError as e:
        raise InvalidAddressValueError("ip6", str(e)) from e

    # A zone index has no place in the 16-byte wire form.
    if address.scope_id is not None:
        raise InvalidAddressValueError("ip6", f"scoped addresses are not allowed: {value!r}")

    return address.packed


def _port_to_bytes(protocol: Protocol) -> Callable[[str], bytes]:
    def convert(value: str) -> bytes:
        # Plain ASCII digits only. int() alone would also take
        # signs, whitespace, underscores and non-ASCII digits.
        if not (value.isascii() and value.isdigit()):
            raise InvalidAddressValueError(protocol.label, f"port is not a number: {value!r}")

        port = int(value)
        if port > 0xFFFF:
            raise InvalidAddressValueError(protocol.label, f"port is out of range: {port}")

        return port.to_bytes(2, "big")

    return convert


def _ipfs_to_bytes(value: str) -> bytes:
    try:
        data = multihash.decode_base58(value)
    except multihash.MultihashError as e:
        raise InvalidAddressValueError("ipfs", str(e)) from e

    return varint.encode_varint(len(data)) + data


def _onion_to_bytes(value: str) -> bytes:
    raise UnsupportedProtocolError("onion")


_STRING_TO_BYTES: Final[dict[Protocol, Callable[[str], bytes]]] = {
    Protocol.IP4: _ip4_to_bytes,
    Protocol.IP6: _ip6_to_bytes,
    Protocol.TCP: _port_to_bytes(Protocol.TCP),
    Protocol.UDP: _port_to_bytes(Protocol.UDP),
    Protocol.SCTP: _port_to_bytes(Protocol.SCTP),
    Protocol.DCCP: _port_to_bytes(Protocol.DCCP),
    Protocol.IPFS: _ipfs_to_bytes,
    Protocol.ONION: _onion_to_bytes,
}
"""Address converters, one per protocol that carries an address value."""

# Every protocol with an address must have a converter, and no other.
if set(_STRING_TO_BYTES) != {p for p in Protocol if not p.is_zero_width}:
    raise RuntimeError("Address converters do not match the protocol registry")


def address_string_to_bytes(protocol: Protocol, value: str) -> bytes:
    """
    Convert a textual address value to its on-wire bytes.

    For variable-size protocols the result includes the length prefix.

    Raises:
        InvalidAddressValueError: If the literal is not valid for the protocol.
        UnsupportedProtocolError: If conversion is not implemented (onion).
    """
    return _STRING_TO_BYTES[protocol](value)


# =============================================================================
# Address values: bytes -> string
# =============================================================================


def _port_to_string(data: bytes) -> str:
    return str(int.from_bytes(data, "big"))


def _ipfs_to_string(data: bytes) -> str:
    try:
        multihash.Multihash.from_bytes(data)
    except multihash.MultihashError as e:
        raise InvalidAddressValueError("ipfs", str(e)) from e

    return multihash.encode_base58(data)


def _onion_to_string(data: bytes) -> str:
    raise UnsupportedProtocolError("onion")


_BYTES_TO_STRING: Final[dict[Protocol, Callable[[bytes], str]]] = {
    Protocol.IP4: lambda data: str(ipaddress.IPv4Address(data)),
    Protocol.IP6: lambda data: str(ipaddress.IPv6Address(data)),
    Protocol.TCP: _port_to_string,
    Protocol.UDP: _port_to_string,
    Protocol.SCTP: _port_to_string,
    Protocol.DCCP: _port_to_string,
    Protocol.IPFS: _ipfs_to_string,
    Protocol.ONION: _onion_to_string,
}

if set(_BYTES_TO_STRING) != set(_STRING_TO_BYTES):
    raise RuntimeError("Address renderers do not match the address converters")


def address_bytes_to_string(protocol: Protocol, data: bytes) -> str:
    """
    Convert on-wire address bytes back to their textual form.

    `data` is the address value without any length prefix, as yielded
    by `iter_records`.

    Raises:
        InvalidAddressValueError: If an ipfs value is not a valid multihash.
        UnsupportedProtocolError: If conversion is not implemented (onion).
    """
    return _BYTES_TO_STRING[protocol](data)


# =============================================================================
# Whole addresses
# =============================================================================


def string_to_bytes(text: str) -> bytes:
    """
    Parse a textual multiaddr into its binary encoding.

    A single trailing '/' is ignored. `/` on its own is the empty address.

    Raises:
        MalformedPathError: If the text does not start with '/'.
        UnknownProtocolError: If a segment names no registered protocol.
        MissingAddressError: If the path ends where an address is required.
        InvalidAddressValueError: If an address literal is rejected.
        UnsupportedProtocolError: If the path uses onion.
    """
    if not text.startswith("/"):
        raise MalformedPathError(text)

    segments = text.removesuffix("/").split("/")[1:]
    out = bytearray()

    # Walk the segments: a protocol label, then its address unless zero-width.
    i = 0
    while i < len(segments):
        protocol = lookup_by_name(segments[i])
        i += 1

        if protocol.is_zero_width:
            out += varint.encode_varint(protocol.code)
            continue

        if i == len(segments):
            raise MissingAddressError(protocol.label)

        address = address_string_to_bytes(protocol, segments[i])
        i += 1

        out += varint.encode_varint(protocol.code)
        out += address

    return bytes(out)


def _read_varint(data: bytes, offset: int) -> tuple[int, int]:
    try:
        return varint.decode_varint(data, offset)
    except varint.TruncatedVarintError as e:
        raise TruncatedError(expected=None, actual=len(data) - offset, offset=offset) from e
    except varint.VarintError as e:
        raise MalformedVarintError(str(e), offset=offset) from e


def iter_records(data: bytes) -> Iterator[tuple[Protocol, bytes]]:
    """
    Walk the records of a binary multiaddr.

    Yields `(protocol, address)` pairs where `address` is the raw value,
    without the length prefix of variable-size protocols (empty for
    zero-width ones). Address bytes are delimited, never interpreted.

    Raises:
        UnknownCodeError: If a record's code is not registered.
        TruncatedError: If the buffer ends inside a record.
        MalformedVarintError: If a varint overflows 32 bits.
    """
    pos = 0
    while pos < len(data):
        start = pos
        code, consumed = _read_varint(data, pos)
        pos += consumed

        try:
            protocol = lookup_by_code(code)
        except UnknownCodeError:
            raise UnknownCodeError(code, offset=start) from None

        match protocol.size:
            case Fixed(size=size):
                pass
            case Variable():
                size, consumed = _read_varint(data, pos)
                pos += consumed

        remaining = len(data) - pos
        if remaining < size:
            raise TruncatedError(expected=size, actual=remaining, offset=pos)

        yield protocol, data[pos : pos + size]
        pos += size


def validate_bytes(data: bytes) -> None:
    """
    Check that `data` is a well-formed binary multiaddr.

    Raises:
        ParseError: The specific subclass describes the first problem found.
    """
    for _ in iter_records(data):
        pass


def bytes_to_string(data: bytes) -> str:
    """
    Render a binary multiaddr in canonical textual form.

    Raises:
        ParseError: If `data` is malformed or a record has no textual form
            (onion, or an ipfs value that is not a valid multihash).
    """
    parts: list[str] = []
    for protocol, address in iter_records(data):
        parts.append(protocol.label)
        if not protocol.is_zero_width:
            parts.append(address_bytes_to_string(protocol, address))

    return "".join(f"/{part}" for part in parts) or "/"
