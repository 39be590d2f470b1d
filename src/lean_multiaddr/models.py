"""Strict pydantic models describing the registry and decoded addresses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .multiaddr import Multiaddr
from .protocols import Fixed, Protocol


class CamelModel(BaseModel):
    """
    Report model whose JSON keys are camelCase, e.g. `size_bytes` as `sizeBytes`.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class StrictBaseModel(CamelModel):
    """An immutable report model that rejects unknown fields and coerced values."""

    model_config = CamelModel.model_config | {"extra": "forbid", "frozen": True, "strict": True}


class ProtocolEntry(StrictBaseModel):
    """One row of the protocol registry."""

    name: str
    """Textual label, e.g. `ip4`."""

    code: int
    """Wire code."""

    size_bytes: int | None
    """Fixed address size, or None for length-prefixed addresses."""

    @classmethod
    def from_protocol(cls, protocol: Protocol) -> ProtocolEntry:
        match protocol.size:
            case Fixed(size=size):
                size_bytes: int | None = size
            case _:
                size_bytes = None
        return cls(name=protocol.label, code=protocol.code, size_bytes=size_bytes)


class RecordEntry(StrictBaseModel):
    """A single decoded record of a multiaddr."""

    protocol: str
    """Protocol label."""

    code: int
    """Wire code."""

    value_hex: str
    """Raw address bytes, hex encoded (empty for zero-width protocols)."""


class AddressReport(StrictBaseModel):
    """Breakdown of a multiaddr into its records."""

    address: Multiaddr
    """The address itself, serialized as text."""

    bytes_hex: str
    """Full binary encoding, hex encoded."""

    records: list[RecordEntry]
    """Records in wire order."""

    @classmethod
    def from_multiaddr(cls, address: Multiaddr) -> AddressReport:
        return cls(
            address=address,
            bytes_hex=address.as_bytes().hex(),
            records=[
                RecordEntry(protocol=protocol.label, code=protocol.code, value_hex=value.hex())
                for protocol, value in address.records()
            ],
        )
