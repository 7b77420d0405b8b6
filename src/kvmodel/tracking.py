"""Dirty-attribute tracking and the minimal write set for a save."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from kvmodel import codec

if TYPE_CHECKING:
    from kvmodel.model import Model


class _Unchanged:
    """Outcome of a save that had no attribute to write."""

    _instance: _Unchanged | None = None

    def __new__(cls) -> _Unchanged:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNCHANGED"

    def __bool__(self) -> bool:
        return False


UNCHANGED = _Unchanged()


class ChangeTracker:
    """Original values of attributes assigned since the last load or save."""

    def __init__(self) -> None:
        self._original: dict[str, Any] = {}

    def will_change(self, name: str, old: Any, new: Any) -> None:
        if name in self._original:
            # Assigning the original value back is not a change.
            if self._original[name] == new:
                del self._original[name]
        elif old != new:
            self._original[name] = old

    def changed(self) -> list[str]:
        return list(self._original)

    def changes(self, current: dict[str, Any]) -> dict[str, tuple[Any, Any]]:
        return {name: (old, current.get(name)) for name, old in self._original.items()}

    def __contains__(self, name: str) -> bool:
        return name in self._original

    def reset(self) -> None:
        self._original.clear()


def coerced_attributes(record: Model) -> list[tuple[str, bytes]]:
    """Encoded ``(name, value)`` pairs the next save must write, in schema order.

    A new record writes every attribute that differs from its declared
    default; a persisted one writes only attributes changed since load.
    """
    schema = type(record).schema()
    values = record._values
    if record.new_record:
        names = [n for n, spec in schema.items() if values.get(n) != spec.default]
    else:
        names = [n for n in schema if n in record._changes]
    return [(name, codec.encode(values.get(name))) for name in names]
