"""Attribute declarations and type checking for models."""

from __future__ import annotations

import copy
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from kvmodel.errors import AttributeCoercionError, SchemaError

if TYPE_CHECKING:
    from kvmodel.model import Model

# Exact-class lookup: a bool is never an integer.
TYPES: dict[type, str] = {
    str: "string",
    int: "integer",
    float: "float",
    bool: "boolean",
    datetime: "timestamp",
    list: "array",
    tuple: "array",
    dict: "hash",
}

ATTRIBUTE_TYPES = frozenset(TYPES.values())


def type_name_of(value: Any) -> str | None:
    return TYPES.get(type(value))


class AttributeSpec(BaseModel):
    """Declared schema of one attribute: ``{type, default}`` plus the index flag."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    type: tuple[str, ...]
    default: Any = None
    index: bool = False

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            types: tuple[str, ...] = (value,)
        elif isinstance(value, (list, tuple, set, frozenset)):
            types = tuple(value)
        else:
            raise ValueError(f"attribute type must be a name or a list of names, got {value!r}")
        if not types:
            raise ValueError("at least one attribute type is required")
        unknown = [t for t in types if t not in ATTRIBUTE_TYPES]
        if unknown:
            raise ValueError(
                f"unknown attribute type(s) {unknown}; expected one of {sorted(ATTRIBUTE_TYPES)}"
            )
        return types

    @model_validator(mode="after")
    def check_default(self) -> AttributeSpec:
        if self.default is not None and not self.accepts(self.default):
            raise ValueError(
                f"default {self.default!r} does not match declared type(s) {list(self.type)}"
            )
        return self

    @property
    def decode_type(self) -> str | None:
        """Type name handed to the codec; alternatives decode untyped."""
        return self.type[0] if len(self.type) == 1 else None

    def accepts(self, value: Any) -> bool:
        return value is None or type_name_of(value) in self.type

    def get_default(self) -> Any:
        # Mutable defaults must not be shared between records.
        return copy.deepcopy(self.default)


def build_spec(name: str, type_: Any, default: Any = None, index: bool = False) -> AttributeSpec:
    try:
        return AttributeSpec(name=name, type=type_, default=default, index=index)
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise SchemaError(f"Invalid declaration for attribute '{name}': {messages}") from e


def ensure_type(spec: AttributeSpec, value: Any) -> None:
    """Raise ``AttributeCoercionError`` unless ``value`` fits the declared type."""
    if spec.accepts(value):
        return
    raise AttributeCoercionError(spec.name, type_name_of(value), list(spec.type))


class Attribute:
    """Data descriptor declaring a persisted attribute on a model class.

    ::

        class Widget(Model):
            name = Attribute("string", default="")
            count = Attribute("integer", default=0)
    """

    def __init__(self, type: Any = "string", default: Any = None, *, index: bool = False) -> None:
        self.type = type
        self.default = default
        self.index = index
        self.name: str = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Model | None, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        return obj._values.get(self.name)

    def __set__(self, obj: Model, value: Any) -> None:
        obj.write_attribute(self.name, value)

    def spec(self) -> AttributeSpec:
        return build_spec(self.name, self.type, self.default, self.index)

    def __repr__(self) -> str:
        return f"Attribute({self.type!r}, default={self.default!r})"
