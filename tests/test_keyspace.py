"""Tests for namespace and key derivation."""

from __future__ import annotations

import pytest

from kvmodel import Attribute, Model, configure, keyspace
from tests.conftest import NAMESPACE, Widget


class HTTPServer(Model):
    host = Attribute("string")


class Outer:
    class InnerThing(Model):
        pass


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Widget", "widget"),
        ("HTTPServer", "http_server"),
        ("OrderLineItem", "order_line_item"),
        ("V2Record", "v2_record"),
        ("already_snake", "already_snake"),
    ],
)
def test_underscore(name, expected):
    assert keyspace.underscore(name) == expected


class TestNamespace:
    def test_default_from_class_name(self):
        assert Widget.namespace() == "widget"
        assert HTTPServer.namespace() == "http_server"

    def test_nested_class(self):
        assert Outer.InnerThing.namespace() == "outer:inner_thing"

    def test_local_class_drops_locals_marker(self):
        class Local(Model):
            pass

        assert Local.namespace().endswith(":local")
        assert "<locals>" not in Local.namespace()

    def test_declared_namespace(self):
        class Ticket(Model, namespace="support:ticket"):
            pass

        assert Ticket.namespace() == "support:ticket"
        assert Ticket.key_for(3) == f"{NAMESPACE}:support:ticket:3"

    def test_module_is_not_part_of_default_namespace(self):
        billing = type("Invoice", (Model,), {"__module__": "billing.models"})
        shipping = type("Invoice", (Model,), {"__module__": "shipping.models"})
        assert billing.namespace() == shipping.namespace() == "invoice"

        separate = type(
            "Invoice", (Model,), {"__module__": "shipping.models"}, namespace="shipping:invoice"
        )
        assert separate.key_for(1) == f"{NAMESPACE}:shipping:invoice:1"

    def test_set_namespace(self):
        class Ledger(Model):
            pass

        Ledger.set_namespace("books")
        assert Ledger.namespace() == "books"

    def test_namespace_not_inherited_by_abstract_subclass(self):
        class Base(Model, abstract=True, namespace="base"):
            pass

        class Entry(Base):
            pass

        assert Entry.namespace().endswith(":entry")


class TestKeys:
    def test_record_key(self):
        assert Widget.key_for(1) == f"{NAMESPACE}:widget:1"

    def test_index_key(self):
        assert keyspace.index_key(Widget) == f"{NAMESPACE}:widget:all"

    def test_sequence_key(self):
        assert keyspace.sequence_key(Widget) == f"{NAMESPACE}:widget_id_seq"

    def test_absolute_namespace_follows_config(self):
        assert Widget.absolute_namespace() == f"{NAMESPACE}:widget"
        configure(namespace="other")
        assert Widget.absolute_namespace() == "other:widget"

    def test_no_global_namespace(self):
        configure(namespace=None)
        assert Widget.key_for(1) == "widget:1"
        assert keyspace.sequence_key(Widget) == "widget_id_seq"

    def test_absolute(self):
        assert keyspace.absolute("widget") == f"{NAMESPACE}:widget"
