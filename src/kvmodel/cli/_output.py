"""Output formatting helpers for the CLI."""

from __future__ import annotations

import json
import sys
from datetime import datetime
from typing import Any


def _jsonable(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="backslashreplace")
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def print_values(values: list[Any], *, json_mode: bool = False) -> None:
    """Print a list one item per line, or as a JSON array."""
    if json_mode:
        print(json.dumps(values, default=_jsonable))
        return
    for value in values:
        print(value)


def print_object(data: dict[str, Any], *, json_mode: bool = False) -> None:
    """Print a mapping as JSON or as aligned key and value columns."""
    if json_mode:
        print(json.dumps(data, indent=2, default=_jsonable))
        return

    if not data:
        return
    width = max(len(str(k)) for k in data)
    for k, v in data.items():
        text = v if isinstance(v, (str, int)) else repr(v)
        print(f"{str(k).ljust(width)}  {text}")


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    print(f"Error: {msg}", file=sys.stderr)
