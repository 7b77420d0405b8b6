"""kvmodel info: keys and counters of one type."""

from __future__ import annotations

import redis
import typer

from kvmodel import keyspace
from kvmodel.cli import _exitcodes as ec
from kvmodel.cli._output import print_error, print_object
from kvmodel.connection import with_connection


def info_cmd(
    type_namespace: str = typer.Argument(..., help="Type namespace, e.g. 'widget'"),
) -> None:
    """Show the index size and id sequence of a type."""
    from kvmodel.cli import state

    prefix = keyspace.absolute(type_namespace)
    index_key = f"{prefix}:{keyspace.INDEX_KEY}"
    sequence_key = f"{prefix}{keyspace.SEQUENCE_SUFFIX}"
    try:
        with with_connection() as client:
            size = client.scard(index_key)
            sequence = client.get(sequence_key)
    except redis.RedisError as e:
        print_error(f"Could not read {prefix}: {e}")
        raise typer.Exit(ec.STORE_ERROR)

    print_object(
        {
            "namespace": prefix,
            "index_key": index_key,
            "sequence_key": sequence_key,
            "records": int(size),
            "last_id": int(sequence) if sequence is not None else 0,
        },
        json_mode=state.json_output,
    )
