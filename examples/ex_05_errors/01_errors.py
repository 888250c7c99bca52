"""Errors: every failure derives from ``DiomaError``."""

from __future__ import annotations

import asyncio

from dioma import (
    ArgumentsError,
    AsyncDependencyCycleError,
    Container,
    DiomaError,
    InvalidDescriptorError,
    Scope,
    Token,
    TokenNotRegisteredError,
)

container = Container(name="app", max_async_deferrals=10)


class Configured:
    scope = Scope.SINGLETON

    def __init__(self, value: int) -> None:
        self.value = value


class Ping:
    def __init__(self) -> None:
        self.pong = container.inject_async(Pong)


class Pong:
    def __init__(self) -> None:
        self.ping = container.inject_async(Ping)


async def async_cycle() -> str:
    container.inject(Ping)
    future = container.inject_async(Ping)
    while True:
        try:
            await future
            future = future.result().pong
            await future
            future = future.result().ping
        except AsyncDependencyCycleError as error:
            return f"limit={error.limit}"


def main() -> None:
    try:
        container.inject(Token("missing"))
    except TokenNotRegisteredError as error:
        print(f"not_registered={type(error).__name__}")  # => not_registered=TokenNotRegisteredError

    try:
        container.inject(Configured, 1)
    except ArgumentsError as error:
        print(error)  # => Arguments are not supported for SingletonScope of Configured

    try:
        container.register("not a descriptor")  # type: ignore[arg-type]
    except InvalidDescriptorError as error:
        print(f"is_dioma_error={isinstance(error, DiomaError)}")  # => is_dioma_error=True

    print(asyncio.run(async_cycle()))  # => limit=10


if __name__ == "__main__":
    main()
