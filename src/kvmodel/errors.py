"""Structured error types for kvmodel."""

from __future__ import annotations

from typing import Any


class KvModelError(Exception):
    """Base error for all kvmodel errors."""


class ConfigurationError(KvModelError):
    """Raised when configuration or a store URL is invalid."""

    def __init__(self, setting: str, detail: str) -> None:
        self.setting = setting
        self.detail = detail
        super().__init__(f"Invalid configuration for {setting}: {detail}")


class SchemaError(KvModelError, TypeError):
    """Raised when an attribute is declared with an unknown type."""


class UnknownAttributeError(KvModelError, AttributeError):
    """Raised when assigning an attribute the model does not declare."""

    def __init__(self, model_name: str, attribute: str) -> None:
        self.model_name = model_name
        self.attribute = attribute
        super().__init__(f"{model_name} has no attribute '{attribute}'")


class AttributeCoercionError(KvModelError, TypeError):
    """Raised when a value does not match the declared attribute type."""

    def __init__(self, attribute: str, received: str | None, expected: list[str]) -> None:
        self.attribute = attribute
        self.received = received
        self.expected = expected
        super().__init__(
            f"Received value of type {received!r}, expected "
            f"{', '.join(repr(e) for e in expected)} for attribute '{attribute}'."
        )


class RecordInvalid(KvModelError):
    """Raised when a record fails validation before being saved."""

    def __init__(self, record: Any, messages: list[str]) -> None:
        self.record = record
        self.messages = messages
        super().__init__(", ".join(messages))


class RecordNotSaved(KvModelError):
    """Raised by the strict save variants when the store rejects a write."""

    def __init__(self, record: Any) -> None:
        self.record = record
        super().__init__(f"{record.__class__.__name__} could not be saved")


class RecordNotFound(KvModelError, LookupError):
    """Raised when no record exists for the requested id."""

    def __init__(self, model_name: str, record_id: Any) -> None:
        self.model_name = model_name
        self.record_id = record_id
        super().__init__(f"Couldn't find {model_name} with id={record_id}")


class FutureNotReady(KvModelError):
    """Raised when a pipelined result is read before the pipeline ran."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(
            f"Value of pipelined {command} is not available until the pipeline executes"
        )
