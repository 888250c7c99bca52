"""Shared pytest fixtures for dioma tests."""

import asyncio
from collections.abc import Awaitable, Callable, Iterator

import pytest

from dioma.container import Container
from dioma.container_context import container_context


@pytest.fixture(autouse=True)
def _reset_default_container() -> Iterator[None]:
    """Every test starts from an empty default container."""
    container_context.reset()
    yield
    container_context.reset()


@pytest.fixture()
def container() -> Container:
    """Standalone container without a parent."""
    return Container(name="parent")


@pytest.fixture()
def settle() -> Callable[..., Awaitable[None]]:
    """Let the event loop run pending deferred resolutions and their callbacks."""

    async def _settle(iterations: int = 10) -> None:
        for _ in range(iterations):
            await asyncio.sleep(0)

    return _settle
