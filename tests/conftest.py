"""Shared test fixtures for kvmodel tests."""

from __future__ import annotations

import fakeredis
import pytest

from kvmodel import Attribute, Model, configure, connection
from kvmodel.config import reset_config

NAMESPACE = "kvmodel_test"

# --- Test model types ---


class Widget(Model):
    name = Attribute("string", default="")
    count = Attribute("integer", default=0)


class Event(Model):
    title = Attribute("string")
    starts_at = Attribute("timestamp")
    tags = Attribute("array", default=[])
    details = Attribute("hash", default={})
    ratio = Attribute("float", default=1.0)
    public = Attribute("boolean", default=False)
    code = Attribute(["string", "integer"])


class Vehicle(Model):
    name = Attribute("string", default="")
    wheels = Attribute("integer", default=4)


class Car(Vehicle):
    pass


class Truck(Vehicle):
    payload = Attribute("integer", default=0)


# --- Fixtures ---


@pytest.fixture(autouse=True)
def store():
    """Point kvmodel at a fresh in-memory server; delete namespaced keys afterwards."""
    reset_config()
    configure(namespace=NAMESPACE)
    client = fakeredis.FakeRedis(server=fakeredis.FakeServer())
    connection.connect(client=client)
    yield client
    keys = client.keys(f"{NAMESPACE}:*")
    if keys:
        client.delete(*keys)
    connection.disconnect()
    reset_config()
