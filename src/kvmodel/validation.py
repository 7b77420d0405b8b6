"""Record validation: an errors collection and validator methods."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


class Errors:
    """Validation messages keyed by attribute name (``"base"`` for the record)."""

    def __init__(self) -> None:
        self._messages: dict[str, list[str]] = {}

    def add(self, attribute: str, message: str) -> None:
        self._messages.setdefault(attribute, []).append(message)

    def clear(self) -> None:
        self._messages.clear()

    def __getitem__(self, attribute: str) -> list[str]:
        return list(self._messages.get(attribute, ()))

    def __bool__(self) -> bool:
        return any(self._messages.values())

    def __len__(self) -> int:
        return sum(len(m) for m in self._messages.values())

    def __iter__(self) -> Iterator[tuple[str, str]]:
        for attribute, messages in self._messages.items():
            for message in messages:
                yield attribute, message

    def full_messages(self) -> list[str]:
        return [
            message if attribute == "base" else f"{attribute.replace('_', ' ').capitalize()} {message}"
            for attribute, message in self
        ]

    def to_dict(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self._messages.items() if v}


def validator(func: F) -> F:
    """Mark a model method as a validator; it records problems on ``self.errors``."""
    func._kvmodel_validator = True  # type: ignore[attr-defined]
    return func


def collect_validators(namespace: dict[str, Any]) -> list[str]:
    return [name for name, value in namespace.items() if getattr(value, "_kvmodel_validator", False)]
