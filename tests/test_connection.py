"""Tests for the shared client, transactions and pipelining."""

from __future__ import annotations

import pytest
import redis

from kvmodel import connection
from kvmodel.connection import Future, Pipeline, pipelined, transaction
from kvmodel.errors import ConfigurationError, FutureNotReady


class TestConnect:
    def test_injected_client_is_shared(self, store):
        assert connection.get_client() is store

    def test_bad_url(self):
        with pytest.raises(ConfigurationError, match="redis_url"):
            connection.connect("bogus://nowhere")

    def test_url_builds_binary_client(self):
        client = connection.connect("redis://localhost:6390/2")
        assert isinstance(client, redis.Redis)
        assert client.connection_pool.connection_kwargs["db"] == 2
        assert client.connection_pool.connection_kwargs.get("decode_responses") is False

    def test_with_connection(self, store):
        with connection.with_connection() as client:
            assert client is store


class TestFuture:
    def test_value_before_execute(self):
        future = Future("HGETALL")
        assert not future.ready
        with pytest.raises(FutureNotReady, match="HGETALL"):
            future.value

    def test_resolved(self):
        future = Future("SADD")
        future._resolve(1)
        assert future.ready
        assert future.value == 1
        assert not future.failed


class TestPipelining:
    def test_results_available_after_scope(self, store):
        store.sadd("k", "a")
        with pipelined() as pipe:
            member = pipe.sismember("k", "a")
            missing = pipe.sismember("k", "b")
            assert not member.ready
        assert member.value
        assert not missing.value

    def test_nested_scopes_share_one_pipeline(self, store):
        with pipelined() as outer:
            outer.sadd("k", "a")
            with pipelined() as inner:
                assert inner is outer
                inner.sadd("k", "b")
            # Nothing is sent until the outermost scope exits.
            assert store.smembers("k") == set()
            assert len(outer) == 2
        assert store.smembers("k") == {b"a", b"b"}

    def test_exception_discards_batch(self, store):
        with pytest.raises(RuntimeError):
            with pipelined() as pipe:
                pipe.sadd("k", "a")
                raise RuntimeError("stop")
        assert store.smembers("k") == set()

    def test_command_errors_become_future_values(self, store):
        store.set("s", "text")
        with pipelined() as pipe:
            bad = pipe.sadd("s", "a")
            good = pipe.sadd("k", "a")
        assert bad.failed
        assert isinstance(bad.value, redis.ResponseError)
        assert good.value == 1

    def test_empty_pipeline(self, store):
        assert Pipeline(store).execute() == []


class TestTransaction:
    def test_nested_transactions_reuse_outer(self):
        with transaction() as outer:
            assert connection.current_transaction() is outer
            with transaction() as inner:
                assert inner is outer
        assert connection.current_transaction() is None

    def test_sequential_pipelines_in_one_transaction(self, store):
        with transaction() as tx:
            with tx.pipelined() as first:
                first.sadd("k", "a")
            assert store.smembers("k") == {b"a"}
            with tx.pipelined() as second:
                assert second is not first
                second.srem("k", "a")
        assert store.smembers("k") == set()
