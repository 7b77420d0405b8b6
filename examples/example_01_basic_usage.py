"""Example 01: Basic Usage - kvmodel Fundamentals.

This example demonstrates the fundamental operations:
- Declaring a model with typed attributes and defaults
- Creating, updating and destroying records
- Finding records by id and listing every record of a type
- Dirty tracking: only changed attributes are written on update

Requires a Redis-compatible server at KVMODEL_REDIS_URL
(default redis://localhost:6379/0).
"""

from kvmodel import Attribute, KvModelConfig, Model, RecordNotFound, configure


# Step 1: Declare a model
# Each attribute has a type name and an optional default.
class Widget(Model):
    """A stocked part."""

    name = Attribute("string", default="")
    count = Attribute("integer", default=0)
    tags = Attribute("array", default=[])


def main():
    """Run the basic usage example."""
    print("=" * 80)
    print("KVMODEL BASIC USAGE EXAMPLE")
    print("=" * 80)

    # Step 2: Configure the global namespace and store URL
    env = KvModelConfig.from_env()
    configure(namespace="examples", redis_url=env.redis_url)

    # Step 3: Create records
    bolt = Widget(name="bolt")
    bolt.save()
    nut = Widget.create(name="nut", count=12, tags=["m6"])
    print(f"\nCreated {bolt!r} at {bolt.key}")
    print(f"Created {nut!r} at {nut.key}")

    # Step 4: Update; only `count` is written
    bolt.count = 5
    print(f"\nPending changes: {bolt.changes}")
    bolt.save()

    # Step 5: Find and list
    print(f"\nFound: {Widget.find(bolt.id)!r}")
    print(f"All ids: {Widget.ids()}")
    for widget in Widget.all():
        print(f"  - {widget.name}: {widget.count}")

    # Step 6: Destroy
    for widget in Widget.all():
        widget.destroy()
    try:
        Widget.find(bolt.id)
    except RecordNotFound as e:
        print(f"\nAfter destroy: {e}")


if __name__ == "__main__":
    main()
