"""Example 02: Single-Table Inheritance, Hooks and Validation.

This example demonstrates:
- Subclassing a concrete model to declare variants sharing one namespace
- Loading through the root model returns the stored variant
- before/after/around lifecycle hooks
- Validators and the strict save variants

Requires a Redis-compatible server at KVMODEL_REDIS_URL
(default redis://localhost:6379/0).
"""

from datetime import datetime, timezone

from kvmodel import (
    Attribute,
    KvModelConfig,
    Model,
    RecordInvalid,
    after,
    around,
    before,
    configure,
    validator,
)


class Vehicle(Model):
    """Root of the vehicle variants; every variant is stored under ``vehicle``."""

    name = Attribute("string", default="")
    wheels = Attribute("integer", default=4)
    registered_at = Attribute("timestamp")

    @validator
    def name_present(self):
        if not self.name:
            self.errors.add("name", "can't be blank")

    @before("create")
    def stamp(self):
        self.registered_at = datetime.now(timezone.utc)

    @around("save")
    def report(self):
        print(f"  saving {type(self).__name__} {self.changed}")
        yield
        print(f"  saved as {self.key}")

    @after("destroy")
    def farewell(self):
        print(f"  destroyed {self.key}")


class Car(Vehicle):
    pass


class Truck(Vehicle):
    payload = Attribute("integer", default=0)


def main():
    """Run the inheritance and hooks example."""
    print("=" * 80)
    print("KVMODEL INHERITANCE AND HOOKS EXAMPLE")
    print("=" * 80)

    env = KvModelConfig.from_env()
    configure(namespace="examples", redis_url=env.redis_url)

    # Step 1: Save variants; all share the vehicle id sequence
    print("\nCreating vehicles:")
    with Vehicle.transaction():
        car = Car.create(name="mini")
        truck = Truck.create(name="hauler", wheels=6, payload=2000)

    # Step 2: Load through the root
    print("\nLoading through Vehicle:")
    for vehicle in Vehicle.all():
        print(f"  {vehicle!r}")
    print(f"Trucks only: {[t.name for t in Truck.all()]}")

    # Step 3: Validation
    print("\nValidation:")
    blank = Car()
    print(f"  save() -> {blank.save()}, errors: {blank.errors.full_messages()}")
    try:
        blank.save_or_raise()
    except RecordInvalid as e:
        print(f"  save_or_raise() -> RecordInvalid: {e}")

    # Step 4: Clean up
    print("\nDestroying:")
    car.destroy()
    truck.destroy()


if __name__ == "__main__":
    main()
