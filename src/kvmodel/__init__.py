"""kvmodel: typed records persisted in a Redis-compatible key-value store."""

__version__ = "0.1.0"

from kvmodel.attributes import Attribute, AttributeSpec
from kvmodel.codec import decode, encode
from kvmodel.config import KvModelConfig, configure, get_config
from kvmodel.connection import connect, disconnect, transaction, with_connection
from kvmodel.errors import (
    AttributeCoercionError,
    ConfigurationError,
    KvModelError,
    RecordInvalid,
    RecordNotFound,
    RecordNotSaved,
    SchemaError,
    UnknownAttributeError,
)
from kvmodel.hooks import after, around, before
from kvmodel.model import Model
from kvmodel.tracking import UNCHANGED
from kvmodel.validation import Errors, validator

__all__ = [
    "__version__",
    "Model",
    "Attribute",
    "AttributeSpec",
    "encode",
    "decode",
    "KvModelConfig",
    "configure",
    "get_config",
    "connect",
    "disconnect",
    "transaction",
    "with_connection",
    "before",
    "after",
    "around",
    "validator",
    "Errors",
    "UNCHANGED",
    "KvModelError",
    "ConfigurationError",
    "SchemaError",
    "UnknownAttributeError",
    "AttributeCoercionError",
    "RecordInvalid",
    "RecordNotSaved",
    "RecordNotFound",
]
