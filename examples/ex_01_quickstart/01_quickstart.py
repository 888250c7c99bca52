"""Quickstart: request dependencies from inside constructors.

Classes ask the container for what they need while they are being built.
Resolve only the top-level service and dioma builds the rest of the chain.
"""

from __future__ import annotations

from dioma import Container, Scope

container = Container(name="app")


class Database:
    scope = Scope.CONTAINER

    def __init__(self) -> None:
        self.host = "localhost"


class UserRepository:
    def __init__(self) -> None:
        self.database = container.inject(Database)


class UserService:
    def __init__(self) -> None:
        self.repository = container.inject(UserRepository)


def main() -> None:
    service = container.inject(UserService)

    print(f"db_host={service.repository.database.host}")  # => db_host=localhost

    chain = (
        f"{type(service).__name__}"
        f">{type(service.repository).__name__}"
        f">{type(service.repository.database).__name__}"
    )
    print(f"chain={chain}")  # => chain=UserService>UserRepository>Database

    other = container.inject(UserService)
    print(f"shared_database={other.repository.database is service.repository.database}")  # => shared_database=True


if __name__ == "__main__":
    main()
