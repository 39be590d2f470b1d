"""
Global configuration for lean-multiaddr.

Settings are read from the environment once, at import time.
"""

import os

_SUPPORTED_LOG_LEVELS: list[str] = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_LEVEL = os.environ.get("LEAN_MULTIADDR_LOG_LEVEL", "WARNING").upper()
"""Default logging level for the command line. Overridden by `--log-level`."""

if LOG_LEVEL not in _SUPPORTED_LOG_LEVELS:
    raise ValueError(
        f"Invalid LEAN_MULTIADDR_LOG_LEVEL environment variable: '{LOG_LEVEL}'. "
        f"Supported values: {_SUPPORTED_LOG_LEVELS}"
    )
