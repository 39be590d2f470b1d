"""
Shared pytest fixtures for multiaddr tests.

Provides well-known addresses and their binary encodings.
"""

from __future__ import annotations

import pytest

from tests.lean_multiaddr.helpers import IPFS_HASH


@pytest.fixture
def ipfs_hash() -> str:
    """Base58 multihash accepted by the ipfs protocol."""
    return IPFS_HASH


@pytest.fixture
def tcp_address() -> tuple[str, bytes]:
    """`/ip4/127.0.0.1/tcp/1234` and its binary form."""
    return "/ip4/127.0.0.1/tcp/1234", bytes.fromhex("047f0000010604d2")
