from __future__ import annotations

from collections.abc import Iterator

import pytest

from dioma.container import Container
from dioma.container_context import container_context


@pytest.fixture()
def dioma_container() -> Container:
    """Create a per-test container with no parent.

    The fixture is function-scoped, so registrations and cached instances are
    isolated between tests unless users override the fixture scope explicitly.

    Returns:
        A new ``Container`` instance.

    """
    return Container(name="test container")


@pytest.fixture()
def dioma_default_container() -> Iterator[Container]:
    """Yield the default container, reset before and after the test.

    Use it for code relying on the free ``inject`` functions or on
    singleton-scoped classes, which always cache on the default container.
    """
    container_context.reset()
    yield container_context.get_current()
    container_context.reset()
