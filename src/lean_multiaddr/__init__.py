"""Self-describing network addresses: registry, codec and value type."""

from .exceptions import (
    InvalidAddressValueError,
    MalformedPathError,
    MalformedVarintError,
    MissingAddressError,
    MultiaddrError,
    ParseError,
    TruncatedError,
    UnknownCodeError,
    UnknownProtocolError,
    UnsupportedProtocolError,
)
from .multiaddr import Multiaddr, parse
from .protocols import Fixed, Protocol, SizeClass, Variable, lookup_by_code, lookup_by_name

__all__ = [
    # Value type
    "Multiaddr",
    "parse",
    # Registry
    "Protocol",
    "Fixed",
    "Variable",
    "SizeClass",
    "lookup_by_name",
    "lookup_by_code",
    # Exceptions
    "MultiaddrError",
    "ParseError",
    "MalformedPathError",
    "UnknownProtocolError",
    "UnknownCodeError",
    "MissingAddressError",
    "InvalidAddressValueError",
    "TruncatedError",
    "MalformedVarintError",
    "UnsupportedProtocolError",
]
