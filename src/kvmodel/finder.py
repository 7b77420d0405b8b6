"""Fetch by id, fetch all, and list ids."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kvmodel import codec, index, keyspace, sti
from kvmodel.connection import Future, pipelined
from kvmodel.errors import RecordNotFound

if TYPE_CHECKING:
    from kvmodel.model import Model

logger = logging.getLogger(__name__)


def _result(future: Future) -> Any:
    if future.failed:
        raise future.value
    return future.value


def decode_hash(cls: type[Model], raw: dict[Any, Any]) -> dict[str, Any]:
    """Decode a stored hash field by field, using each field's declared type."""
    schema = cls.schema()
    values: dict[str, Any] = {}
    for field, data in raw.items():
        name = field.decode("utf-8") if isinstance(field, bytes) else str(field)
        spec = schema.get(name)
        values[name] = codec.decode(data, spec.decode_type if spec else None)
    return values


def fetch_attributes(cls: type[Model], record_id: Any) -> dict[str, Any]:
    """Decoded hash of one record.

    A record saved with only default values has no hash at all; its id in
    the index set is what proves it exists.
    """
    if record_id is None:
        raise RecordNotFound(cls.__name__, record_id)
    with pipelined() as pipe:
        hash_future = pipe.hgetall(keyspace.key_for(cls, record_id))
        member_future = pipe.sismember(keyspace.index_key(cls), record_id)
    raw = _result(hash_future)
    if not raw and not _result(member_future):
        raise RecordNotFound(cls.__name__, record_id)
    return decode_hash(cls, raw)


def _instantiate(cls: type[Model], record_id: int, values: dict[str, Any]) -> Model | None:
    model_cls = sti.model_for(cls, values)
    if not issubclass(model_cls, cls):
        return None
    return model_cls._from_store(record_id, values)


class Finder:
    """Read-side class methods mixed into ``Model``."""

    @classmethod
    def find(cls, record_id: int | str) -> Any:
        """Load one record by id, as the concrete STI variant it was stored as."""
        try:
            record_id = int(record_id)
        except (TypeError, ValueError):
            raise RecordNotFound(cls.__name__, record_id) from None
        values = fetch_attributes(cls, record_id)
        record = _instantiate(cls, record_id, values)
        if record is None:
            raise RecordNotFound(cls.__name__, record_id)
        return record

    @classmethod
    def all(cls) -> list[Any]:
        """Every live record, ordered by id.

        Through an STI child, only records of that variant are returned.
        """
        ids = index.ids(cls)
        if not ids:
            return []
        with pipelined() as pipe:
            futures = [pipe.hgetall(keyspace.key_for(cls, i)) for i in ids]
        records = []
        for record_id, future in zip(ids, futures):
            values = decode_hash(cls, _result(future))
            record = _instantiate(cls, record_id, values)
            if record is not None:
                records.append(record)
        return records

    @classmethod
    def ids(cls) -> list[int]:
        """Ids in the index set; STI variants share one set with their root."""
        return index.ids(cls)
