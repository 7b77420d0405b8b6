"""Tests for single-table inheritance."""

from __future__ import annotations

import pytest

from kvmodel import Attribute, Model
from kvmodel.errors import RecordNotFound
from tests.conftest import NAMESPACE, Car, Truck, Vehicle


class TestBootstrap:
    def test_child_flags(self):
        assert Car.sti_child
        assert Car.sti_parent is Vehicle
        assert not Vehicle.sti_child
        assert Vehicle.sti_parent is None

    def test_schema_is_shared_not_copied(self):
        assert Car.schema() is Vehicle.schema()
        assert Truck.schema() is Vehicle.schema()
        assert Car.indexed_attributes() is Vehicle.indexed_attributes()

    def test_parent_gains_type_attribute(self):
        assert Vehicle.schema()["type"].type == ("string",)

    def test_type_attribute_added_once(self):
        assert list(Vehicle.schema()).count("type") == 1

    def test_child_attributes_land_in_parent_schema(self):
        assert "payload" in Vehicle.schema()
        assert Car().payload == 0

    def test_namespace_delegated(self):
        assert Car.namespace() == Vehicle.namespace() == "vehicle"
        assert Car.key_for(3) == f"{NAMESPACE}:vehicle:3"

    def test_schema_change_after_bootstrap_is_visible(self):
        class Device(Model):
            name = Attribute("string")

        class Phone(Device):
            pass

        Device.attribute("serial", "string")
        assert "serial" in Phone.schema()
        assert Phone(serial="X1").serial == "X1"

    def test_existing_type_attribute_kept(self):
        class Shape(Model):
            type = Attribute("string", default="shape")

        class Circle(Shape):
            pass

        assert Shape.schema()["type"].default == "shape"
        assert Circle().type == "Circle"

    def test_grandchild_binds_to_root(self):
        class Animal(Model):
            name = Attribute("string")

        class Dog(Animal):
            pass

        class Puppy(Dog):
            pass

        assert Puppy.sti_parent is Animal
        assert Puppy.schema() is Animal.schema()

    def test_child_cannot_override_namespace(self):
        with pytest.raises(TypeError):

            class Van(Vehicle, namespace="vans"):
                pass

        with pytest.raises(TypeError):
            Car.set_namespace("cars")


class TestPersistence:
    def test_child_sets_type(self):
        assert Car().type == "Car"
        assert Vehicle().type is None

    def test_children_share_keys(self, store):
        car = Car.create(name="mini")
        truck = Truck.create(name="hauler", payload=10)
        assert (car.id, truck.id) == (1, 2)
        assert car.key == f"{NAMESPACE}:vehicle:1"
        assert {int(m) for m in store.smembers(Vehicle.key_for("all"))} == {1, 2}
        assert store.hget(car.key, "type") is not None

    def test_find_through_parent_returns_variant(self):
        car = Car.create(name="mini")
        truck = Truck.create(name="hauler", payload=10)
        plain = Vehicle.create(name="cart", wheels=2)
        assert type(Vehicle.find(car.id)) is Car
        assert type(Vehicle.find(truck.id)) is Truck
        assert Vehicle.find(truck.id).payload == 10
        assert type(Vehicle.find(plain.id)) is Vehicle

    def test_find_through_other_variant(self):
        car = Car.create(name="mini")
        assert Car.find(car.id).name == "mini"
        with pytest.raises(RecordNotFound):
            Truck.find(car.id)

    def test_all_filters_by_variant(self):
        Car.create(name="a")
        Truck.create(name="b")
        Car.create(name="c")
        assert [v.name for v in Vehicle.all()] == ["a", "b", "c"]
        assert [c.name for c in Car.all()] == ["a", "c"]
        assert [t.name for t in Truck.all()] == ["b"]

    def test_destroy_child_untracks_shared_index(self):
        car = Car.create(name="mini")
        truck = Truck.create(name="hauler")
        car.destroy()
        assert Vehicle.ids() == [truck.id]
