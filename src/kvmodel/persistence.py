"""Save, destroy and reload.

A save runs::

    validate -> allocate id (new records) -> pipeline{HSET?, SADD} -> interpret

The id is allocated with INCR inside the save's transaction but outside the
pipeline, so every queued command already carries the final id. The SADD is
issued by the index hooks fired around the hash write, which join the same
pipeline. A save with nothing to write skips the HSET and reports
``UNCHANGED``, which counts as success.
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any

from kvmodel import connection, finder, keyspace
from kvmodel.connection import Future, Transaction
from kvmodel.errors import RecordInvalid, RecordNotSaved
from kvmodel.tracking import UNCHANGED, _Unchanged, coerced_attributes

if TYPE_CHECKING:
    from kvmodel.model import Model

logger = logging.getLogger(__name__)


class Persistence:
    """Write-side operations mixed into ``Model``."""

    id: int | None
    _new_record: bool

    @classmethod
    def create(cls, **attributes: Any) -> Any:
        """Build and save a record; check ``new_record`` or ``errors`` for the outcome."""
        record = cls(**attributes)
        record.save()
        return record

    @classmethod
    def create_or_raise(cls, **attributes: Any) -> Any:
        record = cls(**attributes)
        record.save_or_raise()
        return record

    @classmethod
    def transaction(cls) -> AbstractContextManager[Transaction]:
        """Group several saves and destroys on one borrowed connection."""
        return connection.transaction()

    @property
    def new_record(self) -> bool:
        return self._new_record

    @property
    def persisted(self) -> bool:
        return not self._new_record

    @property
    def key(self) -> str | None:
        return None if self._new_record else keyspace.key_for(type(self), self.id)

    def save(self: Model, *, validate: bool = True) -> bool:
        """Persist the record; returns False when invalid or rejected by the store."""
        try:
            return self._create_or_update(validate=validate)
        except RecordInvalid:
            return False

    def save_or_raise(self: Model, *, validate: bool = True) -> bool:
        """Persist the record, raising ``RecordInvalid`` or ``RecordNotSaved`` on failure."""
        if not self._create_or_update(validate=validate):
            raise RecordNotSaved(self)
        return True

    def update_attribute(self: Model, name: str, value: Any) -> bool:
        """Assign one attribute and save without validation."""
        self.assign_attributes(**{name: value})
        return self.save(validate=False)

    def update_attributes(self: Model, **attributes: Any) -> bool:
        self.assign_attributes(**attributes)
        return self.save()

    def update_attributes_or_raise(self: Model, **attributes: Any) -> bool:
        self.assign_attributes(**attributes)
        return self.save_or_raise()

    def destroy(self: Model) -> bool:
        """Delete the record's hash and drop its id from the index set.

        The in-memory object is left as it was; only inspection is meaningful
        afterwards.
        """
        if self._new_record:
            return False
        with connection.transaction() as tx:
            with self.run_hooks("destroy"):
                with tx.pipelined() as pipe:
                    with self.run_hooks("_internal_destroy"):
                        outcome = pipe.delete(keyspace.key_for(type(self), self.id))
        if outcome.failed:
            logger.warning("Store rejected delete of %s: %s", self.key, outcome.value)
            return False
        return True

    def reload(self: Model) -> Model:
        """Replace in-memory state with what the store holds; drops unsaved changes."""
        values = finder.fetch_attributes(type(self), self.id)
        self._load(self.id, values)
        return self

    # internals

    def _validate(self: Model, validate: bool) -> None:
        if not validate or self.valid():
            return
        raise RecordInvalid(self, self.errors.full_messages())

    def _create_or_update(self: Model, *, validate: bool = True) -> bool:
        self._validate(validate)
        outcome = self._persist()
        if isinstance(outcome, _Unchanged) or not outcome.failed:
            self.reset_changes()
            self._new_record = False
            return True
        logger.warning(
            "Store rejected write of %s:%s: %s",
            keyspace.absolute_namespace(type(self)),
            self.id,
            outcome.value,
        )
        return False

    def _allocate_id(self: Model, tx: Transaction) -> None:
        sequence = keyspace.sequence_key(type(self))
        self.id = int(tx.client.incr(sequence))
        logger.debug("Allocated id %s from %s", self.id, sequence)

    def _persist(self: Model) -> Future | _Unchanged:
        event = "create" if self._new_record else "update"
        with connection.transaction() as tx:
            if self._new_record:
                self._allocate_id(tx)
            with self.run_hooks("save"), self.run_hooks(event):
                attrs = coerced_attributes(self)
                with tx.pipelined() as pipe:
                    with self.run_hooks(f"_internal_{event}"):
                        if attrs:
                            outcome: Future | _Unchanged = pipe.hset(
                                keyspace.key_for(type(self), self.id), dict(attrs)
                            )
                        else:
                            outcome = UNCHANGED
        return outcome
