"""Lifecycle hook decorators and the per-model hook table."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Any, Literal, TypeVar, Union

HookKind = Literal["before", "after", "around"]

PUBLIC_EVENTS = ("validation", "save", "create", "update", "destroy")
# Reserved for index maintenance; fired inside the write pipeline.
INTERNAL_EVENTS = ("_internal_create", "_internal_update", "_internal_destroy")
EVENTS = PUBLIC_EVENTS + INTERNAL_EVENTS

F = TypeVar("F", bound=Callable[..., Any])

# A method name (resolved on the record, so overrides apply) or a plain
# function called with the record.
HookTarget = Union[str, Callable[[Any], Any]]


@dataclass(frozen=True)
class HookMeta:
    """Metadata stored on decorated hook methods."""

    kind: HookKind
    event: str


def _check_event(event: str, *, internal: bool = False) -> None:
    allowed = EVENTS if internal else PUBLIC_EVENTS
    if event not in allowed:
        raise ValueError(f"Unknown lifecycle event '{event}'; expected one of {list(allowed)}")


def _marker(kind: HookKind, *events: str) -> Callable[[F], F]:
    for event in events:
        _check_event(event)

    def decorator(func: F) -> F:
        existing: list[HookMeta] = list(getattr(func, "_kvmodel_hooks", ()))
        existing.extend(HookMeta(kind=kind, event=event) for event in events)
        func._kvmodel_hooks = existing  # type: ignore[attr-defined]
        return func

    return decorator


def before(*events: str) -> Callable[[F], F]:
    """Run the decorated method before ``events``; raising aborts the operation."""
    return _marker("before", *events)


def after(*events: str) -> Callable[[F], F]:
    return _marker("after", *events)


def around(*events: str) -> Callable[[F], F]:
    """Wrap ``events`` with a generator method that yields exactly once."""
    return _marker("around", *events)


class HookTable:
    """Ordered hooks per event; a subclass table starts as a copy of its parent's."""

    def __init__(self, parent: HookTable | None = None) -> None:
        self._hooks: dict[str, list[tuple[HookKind, HookTarget]]] = {}
        if parent is not None:
            self._hooks = {event: list(entries) for event, entries in parent._hooks.items()}

    def register(
        self, kind: HookKind, event: str, target: HookTarget, *, internal: bool = False
    ) -> None:
        _check_event(event, internal=internal)
        entries = self._hooks.setdefault(event, [])
        if (kind, target) not in entries:
            entries.append((kind, target))

    def collect(self, namespace: dict[str, Any]) -> None:
        """Register methods of a class body decorated with before/after/around."""
        for attr, value in namespace.items():
            for meta in getattr(value, "_kvmodel_hooks", ()):
                self.register(meta.kind, meta.event, attr)

    def entries(self, event: str) -> list[tuple[HookKind, HookTarget]]:
        return list(self._hooks.get(event, ()))

    @staticmethod
    def _bind(record: Any, target: HookTarget) -> Callable[[], Any]:
        if isinstance(target, str):
            return getattr(record, target)
        return lambda: target(record)

    @contextmanager
    def run(self, record: Any, event: str) -> Iterator[None]:
        """Fire befores, enter arounds, run the body, then fire afters."""
        entries = self.entries(event)
        for kind, target in entries:
            if kind == "before":
                self._bind(record, target)()
        with ExitStack() as stack:
            for kind, target in entries:
                if kind == "around":
                    stack.enter_context(contextmanager(self._bind(record, target))())
            yield
        for kind, target in entries:
            if kind == "after":
                self._bind(record, target)()
