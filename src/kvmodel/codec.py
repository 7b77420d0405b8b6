"""Attribute value encoding.

Values are written as MessagePack. Reads sniff the leading bytes so that
hashes written by older encoders stay loadable without a migration:

* pickle (``\\x80`` + protocol byte) from the object-graph era,
* YAML documents (``---``) from the text era,
* MessagePack, falling back to the raw value for plain strings written
  before any serialization was applied.

Timestamps are packed as ``(year, month, day, hour, minute, second, "+HH:MM")``
so any MessagePack reader can rebuild them.
"""

from __future__ import annotations

import logging
import pickle
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import msgpack
import yaml

logger = logging.getLogger(__name__)

# Only protocols 2-5 carry a sniffable header. Protocol 0/1 pickles and
# non-Python object graphs (e.g. Ruby Marshal, "\x04\x08") decode as raw values.
PICKLE_MARKERS: tuple[bytes, ...] = tuple(bytes([0x80, proto]) for proto in range(2, 6))
YAML_MARKER = b"---"

TIMESTAMP = "timestamp"


def _format_offset(offset: timedelta | None) -> str:
    minutes = int((offset or timedelta(0)).total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def _parse_offset(text: str) -> timezone:
    sign = -1 if text.startswith("-") else 1
    hours, _, minutes = text.lstrip("+-").partition(":")
    return timezone(sign * timedelta(hours=int(hours), minutes=int(minutes or 0)))


def timestamp_to_tuple(value: datetime) -> tuple[Any, ...]:
    if value.tzinfo is None:
        value = value.astimezone()
    return (
        value.year,
        value.month,
        value.day,
        value.hour,
        value.minute,
        value.second,
        _format_offset(value.utcoffset()),
    )


def timestamp_from_tuple(parts: list[Any] | tuple[Any, ...]) -> datetime:
    if len(parts) != 7:
        raise ValueError(f"expected 7 timestamp fields, got {len(parts)}")
    year, month, day, hour, minute, second, offset = parts
    return datetime(year, month, day, hour, minute, second, tzinfo=_parse_offset(offset))


def encode(value: Any) -> bytes:
    """Encode one attribute value with the canonical MessagePack format."""
    if isinstance(value, datetime):
        value = timestamp_to_tuple(value)
    return msgpack.packb(value, use_bin_type=True)


def _raw(data: bytes) -> str | bytes:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data


def _decode_pickle(data: bytes, declared_type: Any) -> Any:
    return pickle.loads(data)  # noqa: S301


def _decode_yaml(data: bytes, declared_type: Any) -> Any:
    return yaml.safe_load(data)


def _decode_msgpack(data: bytes, declared_type: Any) -> Any:
    value = msgpack.unpackb(data, raw=False, strict_map_key=False)
    if value is None or declared_type != TIMESTAMP:
        return value
    try:
        return timestamp_from_tuple(value)
    except (TypeError, ValueError, AttributeError) as e:
        # Unpacked but not a timestamp tuple: keep the unpacked value.
        logger.debug("Keeping unpacked value after timestamp rebuild failed: %s", e)
        return value


Sniffer = Callable[[bytes], bool]
Decoder = Callable[[bytes, Any], Any]

# Tried in order; the last entry accepts anything.
DECODERS: list[tuple[str, Sniffer, Decoder]] = [
    ("pickle", lambda data: data.startswith(PICKLE_MARKERS), _decode_pickle),
    ("yaml", lambda data: data.startswith(YAML_MARKER), _decode_yaml),
    ("msgpack", lambda data: True, _decode_msgpack),
]


def detect_format(data: bytes) -> str:
    """Name of the decoder that ``decode`` would try for ``data``."""
    for name, sniff, _ in DECODERS:
        if sniff(data):
            return name
    return "raw"


def decode(data: bytes | str, declared_type: Any = None) -> Any:
    """Decode a stored value, never raising.

    ``declared_type`` is the attribute's declared type name; only
    ``"timestamp"`` changes the result.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    for name, sniff, decoder in DECODERS:
        if not sniff(data):
            continue
        try:
            return decoder(data, declared_type)
        except Exception as e:  # noqa: BLE001
            logger.debug("Falling back to raw value after %s decode failed: %s", name, e)
            return _raw(data)
    return _raw(data)
