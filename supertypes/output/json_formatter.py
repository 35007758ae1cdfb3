"""JSON output formatter."""

from typing import Any

import msgspec


def to_json(data: Any) -> str:
    """Encode data as indented JSON."""
    return msgspec.json.format(msgspec.json.encode(data), indent=2).decode("utf-8")


def print_json(data: Any):
    """Print data as formatted JSON to stdout."""
    print(to_json(data))
