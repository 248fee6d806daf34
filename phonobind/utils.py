"""
phonobind Utilities - Shared helper functions.

Responsibilities:
- JSON serialization helpers
- Logging setup for command-line use

Invariants:
- JSON output is deterministic (sorted keys, 2-space indent, trailing newline)
"""

import json
import logging
import sys
from typing import Any, Mapping

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def serialize_json(data: Mapping[str, Any]) -> str:
    """
    Serialize dictionary to JSON deterministically.

    Args:
        data: Dictionary to serialize.

    Returns:
        JSON string with sorted keys, 2-space indent, trailing newline.
    """
    return json.dumps(data, indent=2, sort_keys=True) + "\n"


def configure_logging(level: str = "WARNING") -> None:
    """Send phonobind log records to stderr at `level`."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger = logging.getLogger("phonobind")
    logger.handlers[:] = [handler]
    logger.setLevel(level)
