"""Shared store client, transactions and pipelining.

A transaction borrows the shared client for one logical operation. Inside
it, ``pipelined()`` scopes nest: the outermost scope owns the batch and
sends every queued command in one round trip when it exits cleanly; a scope
left by an exception discards the batch so nothing is sent. Code that is
not handed the pipeline (lifecycle hooks) joins it via the module-level
``pipelined()``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import redis

from kvmodel.config import get_config
from kvmodel.errors import ConfigurationError, FutureNotReady

logger = logging.getLogger(__name__)

_PENDING = object()

_client: redis.Redis | None = None
_client_lock = threading.Lock()
_active_transaction: ContextVar[Transaction | None] = ContextVar(
    "kvmodel_active_transaction", default=None
)


def connect(url: str | None = None, *, client: redis.Redis | None = None) -> redis.Redis:
    """Replace the shared client, from ``client`` or a ``redis://`` URL."""
    global _client
    if client is None:
        url = url or get_config().redis_url
        try:
            # Values are binary; responses must stay as bytes.
            client = redis.Redis.from_url(url, decode_responses=False)
        except ValueError as e:
            raise ConfigurationError("redis_url", str(e)) from e
        logger.debug("Connecting to %s", url)
    with _client_lock:
        _client = client
    return client


def disconnect() -> None:
    global _client
    with _client_lock:
        client, _client = _client, None
    if client is not None:
        client.close()


def get_client() -> redis.Redis:
    if _client is None:
        return connect()
    return _client


@contextmanager
def with_connection() -> Iterator[redis.Redis]:
    """Borrow the shared client for the duration of one operation."""
    yield get_client()


class Future:
    """Result of a queued command, available once its pipeline executes."""

    __slots__ = ("command", "_value")

    def __init__(self, command: str) -> None:
        self.command = command
        self._value: Any = _PENDING

    def _resolve(self, value: Any) -> None:
        self._value = value

    @property
    def ready(self) -> bool:
        return self._value is not _PENDING

    @property
    def value(self) -> Any:
        if self._value is _PENDING:
            raise FutureNotReady(self.command)
        return self._value

    @property
    def failed(self) -> bool:
        """True when the store answered this command with an error."""
        return isinstance(self.value, Exception)

    def __repr__(self) -> str:
        state = repr(self._value) if self.ready else "pending"
        return f"<Future {self.command} {state}>"


class Pipeline:
    """Queue of commands sent together; each call returns a ``Future``."""

    def __init__(self, client: redis.Redis) -> None:
        self._pipe = client.pipeline(transaction=False)
        self._futures: list[Future] = []

    def _queue(self, command: str, *args: Any, **kwargs: Any) -> Future:
        getattr(self._pipe, command)(*args, **kwargs)
        future = Future(command.upper())
        self._futures.append(future)
        return future

    def hset(self, key: str, mapping: dict[str, bytes]) -> Future:
        return self._queue("hset", key, mapping=mapping)

    def hgetall(self, key: str) -> Future:
        return self._queue("hgetall", key)

    def sadd(self, key: str, *members: Any) -> Future:
        return self._queue("sadd", key, *members)

    def srem(self, key: str, *members: Any) -> Future:
        return self._queue("srem", key, *members)

    def sismember(self, key: str, member: Any) -> Future:
        return self._queue("sismember", key, member)

    def delete(self, *keys: str) -> Future:
        return self._queue("delete", *keys)

    def __len__(self) -> int:
        return len(self._futures)

    def execute(self) -> list[Any]:
        """Send the batch; command errors become the value of their future."""
        if not self._futures:
            return []
        commands = [f.command for f in self._futures]
        results = self._pipe.execute(raise_on_error=False)
        logger.debug("Executed pipeline %s", commands)
        for future, result in zip(self._futures, results):
            future._resolve(result)
        self._futures = []
        return results

    def discard(self) -> None:
        if self._futures:
            logger.debug("Discarding %d queued command(s)", len(self._futures))
        self._pipe.reset()
        self._futures = []


class Transaction:
    """One borrowed client plus the pipeline currently being filled, if any."""

    def __init__(self, client: redis.Redis) -> None:
        self.client = client
        self._pipeline: Pipeline | None = None

    @contextmanager
    def pipelined(self) -> Iterator[Pipeline]:
        if self._pipeline is not None:
            yield self._pipeline
            return
        pipe = Pipeline(self.client)
        self._pipeline = pipe
        try:
            yield pipe
        except BaseException:
            pipe.discard()
            raise
        else:
            pipe.execute()
        finally:
            self._pipeline = None


def current_transaction() -> Transaction | None:
    return _active_transaction.get()


@contextmanager
def transaction() -> Iterator[Transaction]:
    """Group the commands of one logical operation.

    This is pipelining, not MULTI/EXEC: nothing is rolled back if a later
    step fails. Nested calls reuse the enclosing transaction.
    """
    active = _active_transaction.get()
    if active is not None:
        yield active
        return
    with with_connection() as client:
        tx = Transaction(client)
        token = _active_transaction.set(tx)
        try:
            yield tx
        finally:
            _active_transaction.reset(token)


@contextmanager
def pipelined() -> Iterator[Pipeline]:
    """Join the active pipeline, or run a batch of one's own."""
    with transaction() as tx:
        with tx.pipelined() as pipe:
            yield pipe
