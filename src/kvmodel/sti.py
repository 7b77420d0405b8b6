"""Single-table inheritance: variants sharing one schema and namespace.

Subclassing a concrete model makes the subclass an STI child of the root
model. Children store their records under the root's keys and delegate
schema lookups to the root; the stored ``type`` field names the variant.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from kvmodel.model import Model

logger = logging.getLogger(__name__)

TYPE_ATTRIBUTE = "type"


def sti_root(cls: type[Model]) -> type[Model]:
    return cls.sti_parent if cls.sti_child else cls


def bootstrap_sti(parent: type[Model], child: type[Model]) -> None:
    """Bind ``child`` to ``parent``'s schema, indexed attributes and namespace."""
    if TYPE_ATTRIBUTE not in parent.schema():
        parent.attribute(TYPE_ATTRIBUTE, "string")
    if "_sti_variants" not in parent.__dict__:
        parent._sti_variants = {}
    parent._sti_variants[child.__name__] = child

    child.sti_child = True
    child.sti_parent = parent
    logger.debug("Bound STI child %s to %s", child.__name__, parent.__name__)


def is_sti_parent(cls: type[Model]) -> bool:
    return bool(cls.__dict__.get("_sti_variants"))


def model_for(cls: type[Model], attributes: dict[str, Any]) -> type[Model]:
    """Concrete class for a stored hash, discriminated by its ``type`` field."""
    root = sti_root(cls)
    if not is_sti_parent(root):
        return cls
    type_name = attributes.get(TYPE_ATTRIBUTE)
    if not type_name:
        return root
    variant = root._sti_variants.get(type_name)
    if variant is None:
        logger.debug("Unknown STI type %r for %s; using the root class", type_name, root.__name__)
        return root
    return variant
