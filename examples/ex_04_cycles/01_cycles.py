"""Cycles: break constructor-time cycles with inject_async or inject_lazy.

A synchronous cycle raises ``DependencyCycleError``. ``inject_async`` defers
one side to the next event loop iteration, ``inject_lazy`` defers it to the
first attribute access.
"""

from __future__ import annotations

import asyncio

from dioma import Container, DependencyCycleError, Scope, resolve_lazy

container = Container(name="app")


class Parent:
    scope = Scope.CONTAINER

    def __init__(self) -> None:
        self.child = container.inject(Child)


class Child:
    scope = Scope.CONTAINER

    def __init__(self) -> None:
        self.parent: Parent | None = None
        container.inject_async(Parent).add_done_callback(self._set_parent)

    def _set_parent(self, future: asyncio.Future[Parent]) -> None:
        self.parent = future.result()


class Chicken:
    def __init__(self) -> None:
        self.egg = container.inject(Egg)


class Egg:
    def __init__(self) -> None:
        self.chicken = container.inject(Chicken)


class Owner:
    scope = Scope.CONTAINER

    def __init__(self) -> None:
        self.pet = container.inject(Pet)


class Pet:
    scope = Scope.CONTAINER

    def __init__(self) -> None:
        self.owner = container.inject_lazy(Owner)


async def main() -> None:
    parent = container.inject(Parent)
    print(f"parent_before={parent.child.parent}")  # => parent_before=None

    await asyncio.sleep(0)
    await asyncio.sleep(0)
    print(f"parent_after={parent.child.parent is parent}")  # => parent_after=True

    try:
        container.inject(Chicken)
    except DependencyCycleError as error:
        print(f"error={error}")  # => error=Circular dependency detected

    owner = container.inject(Owner)
    print(f"lazy_owner={resolve_lazy(owner.pet.owner) is owner}")  # => lazy_owner=True
    print(f"looks_like_owner={isinstance(owner.pet.owner, Owner)}")  # => looks_like_owner=True


if __name__ == "__main__":
    asyncio.run(main())
