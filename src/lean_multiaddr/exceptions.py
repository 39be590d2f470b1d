"""Exception hierarchy for multiaddr parsing and validation."""

from __future__ import annotations


class MultiaddrError(Exception):
    """
    Base exception for all multiaddr errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ParseError(MultiaddrError, ValueError):
    """
    Base class for errors raised while building a multiaddr.

    Every failure of text parsing or byte validation is a subclass of this,
    so callers can catch the whole family or program against a single kind.
    """


class MalformedPathError(ParseError):
    """
    Raised when a textual multiaddr does not begin with '/'.

    Attributes:
        text: The rejected input.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Multiaddr must begin with '/': {text!r}")


class UnknownProtocolError(ParseError):
    """
    Raised when a path segment names no registered protocol.

    Attributes:
        name: The unrecognized protocol name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown protocol: {name!r}")


class UnknownCodeError(ParseError):
    """
    Raised when a wire code matches no registered protocol.

    Attributes:
        code: The unrecognized protocol code.
        offset: Byte offset of the record carrying the code (if known).
    """

    def __init__(self, code: int, *, offset: int | None = None) -> None:
        self.code = code
        self.offset = offset

        msg = f"Unknown protocol code: {code}"
        if offset is not None:
            msg = f"{msg} (at byte offset {offset})"

        super().__init__(msg)


class MissingAddressError(ParseError):
    """
    Raised when a protocol that needs an address value ends the path.

    Attributes:
        protocol: Label of the protocol missing its address.
    """

    def __init__(self, protocol: str) -> None:
        self.protocol = protocol
        super().__init__(f"Address not found for protocol {protocol}")


class InvalidAddressValueError(ParseError):
    """
    Raised when an address literal fails protocol-specific conversion.

    Attributes:
        protocol: Label of the protocol whose address was rejected.
        detail: Description of what went wrong.
    """

    def __init__(self, protocol: str, detail: str) -> None:
        self.protocol = protocol
        self.detail = detail
        super().__init__(f"Invalid {protocol} address: {detail}")


class TruncatedError(ParseError):
    """
    Raised when a byte buffer ends in the middle of a record.

    Attributes:
        expected: Number of bytes the record still needed.
        actual: Number of bytes that were left in the buffer.
        offset: Byte offset where the missing data should have started.
    """

    def __init__(self, *, expected: int | None, actual: int, offset: int) -> None:
        self.expected = expected
        self.actual = actual
        self.offset = offset

        if expected is None:
            msg = f"Unexpected end of bytes at offset {offset}"
        else:
            msg = (
                f"Unexpected end of bytes at offset {offset}, "
                f"expected {expected} more, found {actual}"
            )

        super().__init__(msg)


class MalformedVarintError(ParseError):
    """
    Raised when a varint on the wire cannot be read as a 32-bit value.

    Attributes:
        detail: Description of what went wrong.
        offset: Byte offset where the varint starts.
    """

    def __init__(self, detail: str, *, offset: int) -> None:
        self.detail = detail
        self.offset = offset
        super().__init__(f"Malformed varint at offset {offset}: {detail}")


class UnsupportedProtocolError(ParseError):
    """
    Raised for a registered protocol whose address conversion is not implemented.

    Attributes:
        protocol: Label of the unsupported protocol.
    """

    def __init__(self, protocol: str) -> None:
        self.protocol = protocol
        super().__init__(f"Address conversion is not supported for protocol {protocol}")
