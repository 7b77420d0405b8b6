"""The ``Model`` base class."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, ClassVar

from kvmodel import index, keyspace, sti
from kvmodel.attributes import Attribute, AttributeSpec, ensure_type
from kvmodel.errors import SchemaError, UnknownAttributeError
from kvmodel.finder import Finder
from kvmodel.hooks import HookTable
from kvmodel.persistence import Persistence
from kvmodel.tracking import ChangeTracker
from kvmodel.validation import Errors, collect_validators

# Instance state set on every record; underscore names are private state too.
RESERVED_ATTRIBUTES = frozenset({"id", "errors"})


def _base_hooks() -> HookTable:
    hooks = HookTable()
    index.install(hooks)
    return hooks


def _concrete_parent(cls: type[Model]) -> type[Model] | None:
    for base in cls.__bases__:
        if issubclass(base, Model) and base is not Model and not base.__dict__.get("_abstract"):
            return base
    return None


class Model(Persistence, Finder):
    """Base class for records persisted as one hash per id.

    Subclassing ``Model`` (or an abstract model) declares a new type with its
    own namespace. Subclassing a concrete model declares an STI variant that
    shares its root's schema and keys.

    The default namespace comes from the class's qualified name without its
    module, so same-named top-level models in different modules share keys.
    Pass ``namespace=`` (or call ``set_namespace``) to keep them apart.
    """

    sti_child: ClassVar[bool] = False
    sti_parent: ClassVar[type[Model] | None] = None
    _schema: ClassVar[dict[str, AttributeSpec]] = {}
    _indexed: ClassVar[list[str]] = []
    _hooks: ClassVar[HookTable] = _base_hooks()
    _validators: ClassVar[tuple[str, ...]] = ()

    def __init_subclass__(
        cls, namespace: str | None = None, abstract: bool = False, **kwargs: Any
    ) -> None:
        super().__init_subclass__(**kwargs)
        cls._abstract = abstract
        cls._hooks = HookTable(cls._hooks)
        cls._hooks.collect(cls.__dict__)
        cls._validators = tuple(
            dict.fromkeys(cls._validators + tuple(collect_validators(cls.__dict__)))
        )

        parent = _concrete_parent(cls)
        cls.sti_child = False
        cls.sti_parent = None
        if parent is not None:
            if namespace is not None:
                raise TypeError(
                    f"{cls.__name__} shares the namespace of {sti.sti_root(parent).__name__} "
                    "and cannot override it"
                )
            sti.bootstrap_sti(sti.sti_root(parent), cls)
        else:
            inherited = next((b for b in cls.__mro__[1:] if issubclass(b, Model)), Model)
            cls._schema = dict(inherited.schema())
            cls._indexed = list(inherited.indexed_attributes())
            if namespace is not None:
                cls._namespace = namespace

        for value in list(cls.__dict__.values()):
            if isinstance(value, Attribute):
                cls._add_attribute(value)

    # schema

    @classmethod
    def schema(cls) -> dict[str, AttributeSpec]:
        """Attribute specs by name; STI variants return their root's mapping itself."""
        if cls.sti_child:
            return cls.sti_parent.schema()
        return cls._schema

    @classmethod
    def indexed_attributes(cls) -> list[str]:
        if cls.sti_child:
            return cls.sti_parent.indexed_attributes()
        return cls._indexed

    @classmethod
    def attribute(
        cls, name: str, type: Any = "string", default: Any = None, *, index: bool = False
    ) -> AttributeSpec:
        """Declare an attribute after class creation."""
        attr = Attribute(type, default, index=index)
        attr.name = name
        return cls._add_attribute(attr)

    @classmethod
    def _add_attribute(cls, attr: Attribute) -> AttributeSpec:
        name = attr.name
        if name in RESERVED_ATTRIBUTES or name.startswith("_") or hasattr(Model, name):
            raise SchemaError(f"'{name}' is reserved and cannot be declared as an attribute")
        spec = attr.spec()
        cls.schema()[spec.name] = spec
        indexed = cls.indexed_attributes()
        if spec.index and spec.name not in indexed:
            indexed.append(spec.name)
        if not isinstance(getattr(cls, spec.name, None), Attribute):
            setattr(cls, spec.name, attr)
        root = sti.sti_root(cls)
        if not isinstance(getattr(root, spec.name, None), Attribute):
            setattr(root, spec.name, attr)
        return spec

    # keys

    @classmethod
    def namespace(cls) -> str:
        return keyspace.namespace(cls)

    @classmethod
    def set_namespace(cls, value: str) -> None:
        if cls.sti_child:
            raise TypeError(f"{cls.__name__} delegates its namespace to {cls.sti_parent.__name__}")
        cls._namespace = value

    @classmethod
    def absolute_namespace(cls) -> str:
        return keyspace.absolute_namespace(cls)

    @classmethod
    def key_for(cls, id_or_marker: Any) -> str:
        return keyspace.key_for(cls, id_or_marker)

    # instances

    def __init__(self, **attributes: Any) -> None:
        self._reset_state()
        if self.sti_child:
            self._values[sti.TYPE_ATTRIBUTE] = type(self).__name__
        self.assign_attributes(**attributes)

    @classmethod
    def _from_store(cls, record_id: int, values: dict[str, Any]) -> Model:
        record = cls.__new__(cls)
        record._load(record_id, values)
        return record

    def _reset_state(self) -> None:
        self.id: int | None = None
        self._new_record = True
        self._values: dict[str, Any] = {
            name: spec.get_default() for name, spec in self.schema().items()
        }
        self._changes = ChangeTracker()
        self.errors = Errors()

    def _load(self, record_id: int, values: dict[str, Any]) -> None:
        # Stored values are trusted as decoded; legacy formats may not match
        # the declared type exactly.
        self._reset_state()
        schema = self.schema()
        self._values.update({k: v for k, v in values.items() if k in schema})
        self.id = record_id
        self._new_record = False

    def _spec(self, name: str) -> AttributeSpec:
        spec = self.schema().get(name)
        if spec is None:
            raise UnknownAttributeError(type(self).__name__, name)
        return spec

    def read_attribute(self, name: str) -> Any:
        self._spec(name)
        return self._values.get(name)

    def write_attribute(self, name: str, value: Any) -> None:
        """Type-check and assign one attribute, recording it as changed."""
        ensure_type(self._spec(name), value)
        self._changes.will_change(name, self._values.get(name), value)
        self._values[name] = value

    def assign_attributes(self, **attributes: Any) -> None:
        for name, value in attributes.items():
            self.write_attribute(name, value)

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self._values)

    @property
    def changed(self) -> list[str]:
        return self._changes.changed()

    @property
    def changes(self) -> dict[str, tuple[Any, Any]]:
        """``{name: (original, current)}`` for attributes changed since load or save."""
        return self._changes.changes(self._values)

    @property
    def changed_attributes(self) -> dict[str, Any]:
        """``{name: original}`` for attributes changed since load or save."""
        return {name: old for name, (old, _) in self.changes.items()}

    def reset_changes(self) -> None:
        self._changes.reset()

    # hooks and validation

    def run_hooks(self, event: str) -> AbstractContextManager[None]:
        return type(self)._hooks.run(self, event)

    def validate(self) -> None:
        """Override to add messages to ``self.errors``."""

    def valid(self) -> bool:
        self.errors.clear()
        with self.run_hooks("validation"):
            self.validate()
            for name in self._validators:
                getattr(self, name)()
        return not self.errors

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"{type(self).__name__}(id={self.id!r}, {fields})"
