"""
Command line interface for inspecting multiaddrs.

Usage::

    lean-multiaddr parse /ip4/127.0.0.1/tcp/1234
    lean-multiaddr decode 047f0000010604d2
    lean-multiaddr inspect /ip4/127.0.0.1/tcp/1234/http
    lean-multiaddr protocols --json
"""

from __future__ import annotations

import json
import logging
from typing import Sequence

import click

from . import config
from .exceptions import ParseError
from .models import AddressReport, ProtocolEntry
from .multiaddr import Multiaddr
from .protocols import Protocol


def setup_logging(level: str) -> None:
    """Configure the root logger for command line use."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _load(address: str) -> Multiaddr:
    """Accept either the textual form or a hex encoding of the binary form."""
    if address.startswith("/"):
        return Multiaddr.from_string(address)

    try:
        data = bytes.fromhex(address.removeprefix("0x"))
    except ValueError:
        raise click.BadParameter(f"not a path or hex string: {address!r}") from None

    return Multiaddr.from_bytes(data)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=config.LOG_LEVEL,
    show_default=True,
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """Parse, validate and inspect multiaddrs."""
    setup_logging(log_level.upper())


@cli.command()
@click.argument("addresses", nargs=-1, required=True)
def parse(addresses: Sequence[str]) -> None:
    """Print the hex-encoded binary form of each textual ADDRESS."""
    for address in addresses:
        try:
            click.echo(Multiaddr.from_string(address).as_bytes().hex())
        except ParseError as e:
            raise click.ClickException(str(e)) from e


@cli.command()
@click.argument("encoded", nargs=-1, required=True)
def decode(encoded: Sequence[str]) -> None:
    """Validate each hex-encoded binary multiaddr and print its textual form."""
    for value in encoded:
        try:
            data = bytes.fromhex(value.removeprefix("0x"))
        except ValueError:
            raise click.BadParameter(f"not a hex string: {value!r}") from None

        try:
            click.echo(str(Multiaddr.from_bytes(data)))
        except ParseError as e:
            raise click.ClickException(str(e)) from e


@cli.command()
@click.argument("address")
def inspect(address: str) -> None:
    """Print the record breakdown of ADDRESS (text or hex) as JSON."""
    try:
        multiaddr = _load(address)
        # Onion records cannot be rendered as text; fail before serializing.
        str(multiaddr)
        report = AddressReport.from_multiaddr(multiaddr)
        click.echo(report.model_dump_json(by_alias=True, indent=2))
    except ParseError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Emit the registry as JSON.")
def protocols(as_json: bool) -> None:
    """List the supported protocols."""
    entries = [ProtocolEntry.from_protocol(protocol) for protocol in Protocol]

    if as_json:
        click.echo(json.dumps([entry.model_dump(by_alias=True) for entry in entries], indent=2))
        return

    for entry in entries:
        size = "variable" if entry.size_bytes is None else str(entry.size_bytes)
        click.echo(f"{entry.code:>5}  {entry.name:<6} {size}")


if __name__ == "__main__":
    cli()
