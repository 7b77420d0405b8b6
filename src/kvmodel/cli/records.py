"""kvmodel ids / show: read index sets and record hashes."""

from __future__ import annotations

from typing import Any

import redis
import typer

from kvmodel import codec, keyspace
from kvmodel.cli import _exitcodes as ec
from kvmodel.cli._output import print_error, print_object, print_values
from kvmodel.connection import with_connection


def ids_cmd(
    type_namespace: str = typer.Argument(..., help="Type namespace, e.g. 'widget'"),
) -> None:
    """List the ids in a type's index set."""
    from kvmodel.cli import state

    key = f"{keyspace.absolute(type_namespace)}:{keyspace.INDEX_KEY}"
    try:
        with with_connection() as client:
            members = client.smembers(key)
    except redis.RedisError as e:
        print_error(f"Could not read {key}: {e}")
        raise typer.Exit(ec.STORE_ERROR)
    print_values(sorted(int(m) for m in members), json_mode=state.json_output)


def show_cmd(
    type_namespace: str = typer.Argument(..., help="Type namespace, e.g. 'widget'"),
    record_id: int = typer.Argument(..., help="Record id"),
    formats: bool = typer.Option(
        False, "--formats", help="Show which stored format each field was decoded from"
    ),
) -> None:
    """Print the decoded attribute hash of one record."""
    from kvmodel.cli import state

    prefix = keyspace.absolute(type_namespace)
    key = f"{prefix}:{record_id}"
    try:
        with with_connection() as client:
            raw = client.hgetall(key)
            member = client.sismember(f"{prefix}:{keyspace.INDEX_KEY}", record_id)
    except redis.RedisError as e:
        print_error(f"Could not read {key}: {e}")
        raise typer.Exit(ec.STORE_ERROR)

    if not raw and not member:
        print_error(f"No record at {key}")
        raise typer.Exit(ec.NOT_FOUND)

    data: dict[str, Any] = {}
    for field, value in sorted(raw.items()):
        name = field.decode("utf-8") if isinstance(field, bytes) else str(field)
        decoded = codec.decode(value)
        if formats:
            data[name] = {"format": codec.detect_format(value), "value": decoded}
        else:
            data[name] = decoded
    print_object(data, json_mode=state.json_output)
