"""Key derivation for records, index sets and id sequences."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from kvmodel.config import get_config

if TYPE_CHECKING:
    from kvmodel.model import Model

INDEX_KEY = "all"
SEQUENCE_SUFFIX = "_id_seq"

_ACRONYM_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_RE = re.compile(r"([a-z\d])([A-Z])")


def underscore(name: str) -> str:
    """CamelCase -> snake_case, keeping acronyms together (``HTTPServer`` -> ``http_server``)."""
    name = _ACRONYM_RE.sub(r"\1_\2", name)
    name = _WORD_RE.sub(r"\1_\2", name)
    return name.replace("-", "_").lower()


def default_namespace(cls: type) -> str:
    """Snake-cased ``__qualname__`` components joined by colons; the module is not part of it."""
    parts = [p for p in cls.__qualname__.split(".") if p != "<locals>"]
    return ":".join(underscore(p) for p in parts)


def namespace(cls: type[Model]) -> str:
    if cls.sti_child:
        return namespace(cls.sti_parent)
    cached = cls.__dict__.get("_namespace")
    if cached:
        return cached
    value = default_namespace(cls)
    cls._namespace = value
    return value


def absolute_namespace(cls: type[Model]) -> str:
    return absolute(namespace(cls))


def key_for(cls: type[Model], id_or_marker: Any) -> str:
    return f"{absolute_namespace(cls)}:{id_or_marker}"


def index_key(cls: type[Model]) -> str:
    return key_for(cls, INDEX_KEY)


def sequence_key(cls: type[Model]) -> str:
    return f"{absolute_namespace(cls)}{SEQUENCE_SUFFIX}"


def absolute(type_namespace: str) -> str:
    """Prefix a type-local namespace with the global one.

    Read on every call: the global namespace may be configured after models
    are imported.
    """
    parts = [get_config().namespace, type_namespace]
    return ":".join(p for p in parts if p)
