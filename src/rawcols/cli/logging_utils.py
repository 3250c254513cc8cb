"""Logging setup for the `rawcols` CLI.

The library itself never configures logging; only the CLI entrypoint does.
Every record goes to stderr so stdout carries nothing but command output
(`OK (<n> raw columns)`, the summary table, or the CSV path).
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(name)s - %(levelname)s - %(message)s"


def configure_cli_logging(*, verbose: bool = False, formatter: Optional[logging.Formatter] = None) -> None:
    """Install a single stderr handler on the root logger.

    `verbose` lowers the threshold from WARNING to DEBUG.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(formatter or logging.Formatter(DEFAULT_FORMAT))
    root.addHandler(handler)
