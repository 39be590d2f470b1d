"""Shared constants for multiaddr tests."""

IPFS_HASH = "QmcgpsyWgH8Y8ajJz1Cu72KnS5uo2Aa2LpzU7kinSupNKC"
"""A sha2-256 multihash in Base58, as used across multiaddr implementations."""
