"""
Command line entry point.

Usage::

    python -m lean_multiaddr parse /ip4/127.0.0.1/tcp/1234
"""

from lean_multiaddr.cli import cli

if __name__ == "__main__":
    cli()
