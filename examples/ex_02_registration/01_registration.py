"""Registration: tokens, values, factories and hooks.

Bare classes never need registering. Register when the key is not the class
itself, when the value already exists, or when construction needs a hook.
"""

from __future__ import annotations

from typing import Any

from dioma import ClassDescriptor, Container, Scope, Token, TokenNotRegisteredError

DATABASE_URL = Token[str]("database_url")
REPOSITORY = Token[Any]("repository")
REQUEST_ID = Token[str]("request_id")


class SqlRepository:
    scope = Scope.CONTAINER

    def __init__(self, url: str) -> None:
        self.url = url


def main() -> None:
    container = Container(name="app")

    container.register_value(DATABASE_URL, "sqlite:///app.db")
    container.register(
        ClassDescriptor(
            SqlRepository,
            token=REPOSITORY,
            before_create=lambda owner, _: (owner.inject(DATABASE_URL),),
        ),
    )

    repository = container.inject(REPOSITORY)
    print(f"url={repository.url}")  # => url=sqlite:///app.db
    print(f"same_by_class={container.inject(SqlRepository) is repository}")  # => same_by_class=True

    counter = iter(range(1, 100))
    container.register_factory(REQUEST_ID, lambda _owner: f"req-{next(counter)}")
    print(container.inject(REQUEST_ID), container.inject(REQUEST_ID))  # => req-1 req-2

    @container.register_class(scope=Scope.CONTAINER)
    class Settings:
        debug = True

    print(f"debug={container.inject(Settings).debug}")  # => debug=True

    container.unregister(REPOSITORY)
    try:
        container.inject(REPOSITORY)
    except TokenNotRegisteredError as error:
        print(f"after_unregister={error}")  # => after_unregister=Token is not registered in the container


if __name__ == "__main__":
    main()
