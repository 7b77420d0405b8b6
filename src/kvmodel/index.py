"""The per-type index set of live ids.

Membership is maintained only through internal lifecycle hooks registered on
``Model``: every create and update re-asserts the id, every destroy removes
it. The commands join the pipeline of the write that triggered them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from kvmodel import keyspace
from kvmodel.connection import pipelined, with_connection
from kvmodel.hooks import HookTable

if TYPE_CHECKING:
    from kvmodel.model import Model


def track(record: Model) -> None:
    with pipelined() as pipe:
        pipe.sadd(keyspace.index_key(type(record)), record.id)


def untrack(record: Model) -> None:
    with pipelined() as pipe:
        pipe.srem(keyspace.index_key(type(record)), record.id)


def install(hooks: HookTable) -> None:
    hooks.register("after", "_internal_create", track, internal=True)
    hooks.register("after", "_internal_update", track, internal=True)
    hooks.register("before", "_internal_destroy", untrack, internal=True)


def ids(cls: type[Model]) -> list[int]:
    with with_connection() as client:
        members = client.smembers(keyspace.index_key(cls))
    return sorted(int(m) for m in members)
