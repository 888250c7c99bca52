from __future__ import annotations

import asyncio
import logging
from typing import Any, TypeVar, overload

from dioma.container import Container
from dioma.defaults import DEFAULT_CONTAINER_NAME
from dioma.descriptors import Descriptor
from dioma.types import TokenOrClass

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ContainerContext:
    """Process-wide default container used by the free ``inject`` functions.

    The default container is created on first use and lives until the process
    exits or another container is bound with ``set_current``. It has no
    parent. Singleton-scoped instances are cached on it, whichever container
    resolved them. Code that needs isolated container trees can build its own
    ``Container`` instances without touching this one.
    """

    def __init__(self) -> None:
        self._container: Container | None = None

    def get_current(self) -> Container:
        """Return the default container, creating it on first use."""
        if self._container is None:
            self._container = Container(name=DEFAULT_CONTAINER_NAME)
            logger.debug("Created default container %r", self._container)
        return self._container

    def set_current(self, container: Container) -> None:
        """Bind ``container`` as the default container."""
        self._container = container

    def reset(self) -> None:
        """Reset the default container, mainly for test isolation."""
        if self._container is not None:
            self._container.reset()

    @overload
    def inject(self, key: TokenOrClass[T], *args: Any) -> T: ...

    @overload
    def inject(self, key: Any, *args: Any) -> Any: ...

    def inject(self, key: Any, *args: Any) -> Any:
        return self.get_current().inject(key, *args)

    @overload
    def inject_async(self, key: TokenOrClass[T], *args: Any) -> asyncio.Future[T]: ...

    @overload
    def inject_async(self, key: Any, *args: Any) -> asyncio.Future[Any]: ...

    def inject_async(self, key: Any, *args: Any) -> asyncio.Future[Any]:
        return self.get_current().inject_async(key, *args)

    @overload
    def inject_lazy(self, key: TokenOrClass[T], *args: Any) -> T: ...

    @overload
    def inject_lazy(self, key: Any, *args: Any) -> Any: ...

    def inject_lazy(self, key: Any, *args: Any) -> Any:
        return self.get_current().inject_lazy(key, *args)

    def register(self, descriptor: Descriptor) -> None:
        self.get_current().register(descriptor)

    def unregister(self, key: Any) -> None:
        self.get_current().unregister(key)

    def child_container(self, name: str | None = None) -> Container:
        return self.get_current().child_container(name)


container_context = ContainerContext()

inject = container_context.inject
inject_async = container_context.inject_async
inject_lazy = container_context.inject_lazy
register = container_context.register
unregister = container_context.unregister
child_container = container_context.child_container
