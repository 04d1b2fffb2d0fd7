"""Process-wide logging setup for the CLI and server entry points."""

from __future__ import annotations

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def setup_logging(level: str | int = logging.INFO, fmt: str = DEFAULT_FORMAT) -> None:
    """Configure the root logger once, writing to stderr so stdout stays parseable."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=fmt, stream=sys.stderr)
