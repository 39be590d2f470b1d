"""Tests for the Multiaddr value type."""

from __future__ import annotations

import logging
from ipaddress import IPv4Address, IPv6Address

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import BaseModel, ValidationError

from lean_multiaddr import (
    InvalidAddressValueError,
    Multiaddr,
    MultiaddrError,
    ParseError,
    Protocol,
    TruncatedError,
    UnknownCodeError,
    UnsupportedProtocolError,
    parse,
)
from lean_multiaddr.multihash import Base58

# -----------------------------------------------------------------------------
# Strategies
# -----------------------------------------------------------------------------

_ports = st.integers(min_value=0, max_value=0xFFFF).map(str)


def _ipfs_component(digest: bytes) -> str:
    """Wrap a digest as a sha2-256 multihash path component."""
    return "/ipfs/" + Base58.encode(b"\x12\x20" + digest)


_components = st.one_of(
    st.ip_addresses(v=4).map(lambda ip: f"/ip4/{ip}"),
    st.ip_addresses(v=6).map(lambda ip: f"/ip6/{ip}"),
    st.tuples(st.sampled_from(["tcp", "udp", "sctp", "dccp"]), _ports).map(
        lambda pair: f"/{pair[0]}/{pair[1]}"
    ),
    st.binary(min_size=32, max_size=32).map(_ipfs_component),
    st.sampled_from(["/utp", "/udt", "/http", "/https"]),
)

paths = st.lists(_components, max_size=6).map(lambda parts: "".join(parts) or "/")
"""Any path built from supported protocols."""


class TestConstruction:
    """Building multiaddrs from text and bytes."""

    def test_from_string(self, tcp_address: tuple[str, bytes]) -> None:
        """Text is encoded into the binary form."""
        text, data = tcp_address
        assert Multiaddr.from_string(text).as_bytes() == data

    def test_parse_shorthand(self, tcp_address: tuple[str, bytes]) -> None:
        """parse() is Multiaddr.from_string()."""
        text, _ = tcp_address
        assert parse(text) == Multiaddr.from_string(text)

    def test_from_bytes_keeps_buffer(self, tcp_address: tuple[str, bytes]) -> None:
        """Validated bytes are kept unchanged."""
        _, data = tcp_address
        assert Multiaddr.from_bytes(data).as_bytes() == data

    def test_from_bytearray(self, tcp_address: tuple[str, bytes]) -> None:
        """Mutable buffers are copied into immutable bytes."""
        _, data = tcp_address
        buffer = bytearray(data)
        addr = Multiaddr.from_bytes(buffer)
        buffer[0] = 0x29
        assert type(addr.as_bytes()) is bytes
        assert addr.as_bytes() == data

    def test_constructor_validates(self) -> None:
        """Direct construction cannot bypass validation."""
        with pytest.raises(UnknownCodeError):
            Multiaddr(b"\x05")

    def test_from_bytes_truncated(self) -> None:
        """Partial records are never accepted."""
        with pytest.raises(TruncatedError):
            Multiaddr.from_bytes(b"\x04\x7f\x00")

    def test_errors_are_value_errors(self) -> None:
        """Parse errors can be caught as ValueError or MultiaddrError."""
        with pytest.raises(ValueError):
            parse("/tcp/65536")
        with pytest.raises(MultiaddrError):
            parse("/tcp/65536")

    def test_rejection_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Rejected input is reported at debug level."""
        with caplog.at_level(logging.DEBUG, logger="lean_multiaddr.multiaddr"):
            with pytest.raises(ParseError):
                parse("/ip4")
        assert "Rejected multiaddr '/ip4'" in caplog.text

    def test_empty(self) -> None:
        """'/' is the empty address."""
        addr = parse("/")
        assert addr.as_bytes() == b""
        assert str(addr) == "/"
        assert len(addr) == 0
        assert addr.segments() == []
        assert addr == Multiaddr.from_bytes(b"")


class TestFromIpAddress:
    """Typed IP addresses convert to single-record multiaddrs."""

    def test_ip4(self) -> None:
        """An IPv4Address matches its parsed /ip4 form."""
        assert Multiaddr.from_ip_address(IPv4Address("1.2.3.4")) == parse("/ip4/1.2.3.4")

    @pytest.mark.parametrize("path", ["/ip6/2601:9:4f81:9700:803e:ca65:66e8:c21", "/ip6/::1"])
    def test_ip6(self, path: str) -> None:
        """An IPv6Address matches its parsed /ip6 form."""
        ip = IPv6Address(path.removeprefix("/ip6/"))
        assert Multiaddr.from_ip_address(ip) == parse(path)


class TestEquality:
    """Equality is exact byte equality."""

    @pytest.mark.parametrize(
        ("left", "right"),
        [
            ("/ip6/::1", "/ip6/0:0:0:0:0:0:0:1"),
            ("/tcp/80", "/tcp/080"),
            ("/ip4/127.0.0.1/tcp/1234/", "/ip4/127.0.0.1/tcp/1234"),
        ],
    )
    def test_byte_equivalent_inputs_are_equal(self, left: str, right: str) -> None:
        """Different spellings of the same bytes are equal and hash alike."""
        assert parse(left) == parse(right)
        assert hash(parse(left)) == hash(parse(right))

    @pytest.mark.parametrize(
        ("left", "right"),
        [
            ("/tcp/1234/udp/1234", "/udp/1234/tcp/1234"),
            ("/tcp/80", "/udp/80"),
            ("/tcp/80", "/tcp/81"),
            ("/tcp/1234", "/tcp/1234/http"),
        ],
    )
    def test_different_bytes_are_unequal(self, left: str, right: str) -> None:
        """One differing byte, including record order, breaks equality."""
        assert parse(left) != parse(right)

    def test_not_equal_to_bytes(self, tcp_address: tuple[str, bytes]) -> None:
        """A multiaddr is not equal to its raw bytes."""
        text, data = tcp_address
        assert parse(text) != data

    def test_usable_as_dict_key(self) -> None:
        """Equal addresses collapse in sets."""
        assert len({parse("/tcp/80"), parse("/tcp/080"), parse("/udp/80")}) == 2

    def test_immutable(self, tcp_address: tuple[str, bytes]) -> None:
        """The buffer cannot be replaced after construction."""
        text, _ = tcp_address
        addr = parse(text)
        with pytest.raises(AttributeError):
            addr.data = b""  # type: ignore[misc]


class TestAccessors:
    """Derived views of a multiaddr."""

    def test_protocols(self, ipfs_hash: str) -> None:
        """Protocols are listed in record order."""
        addr = parse(f"/ip4/127.0.0.1/ipfs/{ipfs_hash}/tcp/1234")
        assert addr.protocols() == [Protocol.IP4, Protocol.IPFS, Protocol.TCP]
        assert len(addr) == 3

    def test_segments(self, tcp_address: tuple[str, bytes]) -> None:
        """Segments mirror the canonical path."""
        text, _ = tcp_address
        assert parse(text).segments() == ["ip4", "127.0.0.1", "tcp", "1234"]

    def test_segments_zero_width(self) -> None:
        """Zero-width protocols contribute a single segment."""
        assert parse("/udp/1234/udt").segments() == ["udp", "1234", "udt"]

    def test_records(self) -> None:
        """Records expose raw address values."""
        assert parse("/tcp/1234/http").records() == [
            (Protocol.TCP, b"\x04\xd2"),
            (Protocol.HTTP, b""),
        ]

    def test_bytes_conversions(self, tcp_address: tuple[str, bytes]) -> None:
        """as_bytes, to_bytes and bytes() agree."""
        text, data = tcp_address
        addr = parse(text)
        assert addr.to_bytes() == bytes(addr) == data

    def test_str_and_repr(self, tcp_address: tuple[str, bytes]) -> None:
        """str() is the path, repr() the hex encoding."""
        text, data = tcp_address
        addr = parse(text)
        assert str(addr) == text
        assert repr(addr) == f"Multiaddr({data.hex()})"

    def test_onion_repr_without_text(self) -> None:
        """An onion record cannot be rendered as text, but repr still works."""
        addr = Multiaddr.from_bytes(b"\xbc\x03" + bytes(10))
        assert repr(addr) == "Multiaddr(bc03" + "00" * 10 + ")"
        with pytest.raises(UnsupportedProtocolError):
            str(addr)

    def test_ipfs_without_multihash_has_no_text(self) -> None:
        """An ipfs record that is not a multihash validates but does not render."""
        addr = Multiaddr.from_bytes(b"\xa5\x03\x00")
        with pytest.raises(InvalidAddressValueError):
            str(addr)


class TestRoundtrip:
    """Property tests over generated paths."""

    @given(paths)
    def test_bytes_roundtrip(self, path: str) -> None:
        """from_bytes(parse(p).as_bytes()) is byte-identical to parse(p)."""
        addr = parse(path)
        assert Multiaddr.from_bytes(addr.as_bytes()) == addr

    @given(paths)
    def test_text_roundtrip(self, path: str) -> None:
        """The canonical text of an address parses back to the same address."""
        addr = parse(path)
        assert parse(str(addr)) == addr

    @given(paths)
    def test_truncation_never_accepted(self, path: str) -> None:
        """Cutting the last byte off a non-empty address always fails."""
        data = parse(path).as_bytes()
        if data:
            with pytest.raises(TruncatedError):
                Multiaddr.from_bytes(data[:-1])


class _Peer(BaseModel):
    address: Multiaddr


class TestPydantic:
    """Multiaddr as a pydantic field type."""

    def test_from_string(self, tcp_address: tuple[str, bytes]) -> None:
        """Text is validated into a Multiaddr."""
        text, _ = tcp_address
        assert _Peer(address=text).address == parse(text)

    def test_from_bytes(self, tcp_address: tuple[str, bytes]) -> None:
        """Binary input is validated into a Multiaddr."""
        text, data = tcp_address
        assert _Peer(address=data).address == parse(text)

    def test_instance_passthrough(self, tcp_address: tuple[str, bytes]) -> None:
        """An existing instance is accepted as is."""
        text, _ = tcp_address
        addr = parse(text)
        assert _Peer(address=addr).address is addr

    @pytest.mark.parametrize("value", ["/ip4", "tcp/80", "", "\x06\x00P", b"\x05", 80])
    def test_invalid(self, value: str | bytes | int) -> None:
        """Malformed addresses become validation errors."""
        with pytest.raises(ValidationError):
            _Peer(address=value)

    def test_serializes_to_text(self, tcp_address: tuple[str, bytes]) -> None:
        """Dumps use the textual form."""
        text, _ = tcp_address
        peer = _Peer(address=text)
        assert peer.model_dump() == {"address": text}
        assert peer.model_dump_json() == f'{{"address":"{text}"}}'

    @pytest.mark.parametrize("value", ["", "\x06\x00P"])
    def test_text_is_never_read_as_bytes(self, value: str) -> None:
        """Strings that are valid binary encodings are still parsed as paths."""
        with pytest.raises(ValidationError, match="must begin with"):
            _Peer(address=value)

    def test_bytearray(self, tcp_address: tuple[str, bytes]) -> None:
        """Mutable buffers are copied into an immutable address."""
        text, data = tcp_address
        assert _Peer(address=bytearray(data)).address == parse(text)
