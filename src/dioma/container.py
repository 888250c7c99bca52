from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, overload
from weakref import WeakKeyDictionary

from dioma.defaults import DEFAULT_MAX_ASYNC_DEFERRALS, RESOLUTION_CONTAINER_NAME
from dioma.descriptors import (
    ClassDescriptor,
    Descriptor,
    DescriptorRegistry,
    FactoryDescriptor,
    ValueDescriptor,
    run_before_inject,
)
from dioma.exceptions import (
    AsyncDependencyCycleError,
    AsyncResolutionWithoutEventLoopError,
    DependencyCycleError,
    InvalidDescriptorError,
    TokenNotRegisteredError,
)
from dioma.lazy import LazyProxy
from dioma.scope import ScopeHandler
from dioma.tokens import Token
from dioma.types import Factory, InjectionHook, TokenOrClass

if TYPE_CHECKING:
    from typing_extensions import Self

T = TypeVar("T")
C = TypeVar("C", bound=type[Any])

logger = logging.getLogger(__name__)
_MISSING: Any = object()


class Container:
    """Resolve classes and tokens to instances according to their scope.

    Containers form a tree. Descriptor lookups and cached instances fall back
    to the parent chain, while writes only ever touch the container they are
    called on. Classes register themselves implicitly on first resolution,
    tokens must be registered explicitly.

    Dependencies are requested imperatively while an instance is being
    constructed, by calling ``inject`` (or ``inject_async``/``inject_lazy``)
    inside ``__init__``:

    ```python
    class Service:
        scope = Scope.CONTAINER

        def __init__(self) -> None:
            self.repository = container.inject(Repository)
    ```

    Every outer ``inject`` call owns a resolution container that backs
    ``Scope.RESOLUTION`` and is shared by all nested resolutions. Synchronous
    cycles raise ``DependencyCycleError``; ``inject_async`` breaks cycles by
    deferring construction to the next event loop iteration.

    The container assumes cooperative single-threaded execution and performs
    no locking.
    """

    def __init__(
        self,
        parent: Container | None = None,
        name: str | None = None,
        *,
        max_async_deferrals: int = DEFAULT_MAX_ASYNC_DEFERRALS,
    ) -> None:
        """Initialize a container, optionally as a child of ``parent``.

        Args:
            parent: Container consulted when a descriptor or cached instance
                is missing here.
            name: Human-readable name used in ``repr`` and logs.
            max_async_deferrals: Deferred resolutions allowed within one
                unresolved call chain before ``AsyncDependencyCycleError``.

        """
        self.name = name
        self._parent = parent
        self._max_async_deferrals = max_async_deferrals

        self._instances: WeakKeyDictionary[type[Any], Any] = WeakKeyDictionary()
        self._registry = DescriptorRegistry(
            owner=self,
            parent=parent._registry if parent is not None else None,  # noqa: SLF001
        )
        self._resolution_stack: list[Any] = []
        self._resolution_container: Container | None = None
        self._pending: dict[Any, asyncio.Future[Any]] = {}

        self.loop_counter = 0

    @property
    def parent(self) -> Container | None:
        return self._parent

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    def child_container(self, name: str | None = None) -> Self:
        """Create a container whose lookups fall back to this one."""
        return type(self)(self, name, max_async_deferrals=self._max_async_deferrals)

    # Registration

    def register(self, descriptor: Descriptor) -> None:
        """Register a class, value or factory descriptor on this container.

        The descriptor is stored under its token, or under its class when no
        token is given. A class descriptor with a token is additionally
        indexed under the bare class, so resolving either key yields the same
        cached instance.

        Raises:
            InvalidDescriptorError: If ``descriptor`` is not a well formed
                ``ClassDescriptor``, ``ValueDescriptor`` or ``FactoryDescriptor``.

        """
        self._registry.add(descriptor)

    @overload
    def register_class(
        self,
        cls: C,
        *,
        token: Token[Any] | None = None,
        scope: ScopeHandler | None = None,
        before_inject: InjectionHook | None = None,
        before_create: InjectionHook | None = None,
    ) -> C: ...

    @overload
    def register_class(
        self,
        cls: None = None,
        *,
        token: Token[Any] | None = None,
        scope: ScopeHandler | None = None,
        before_inject: InjectionHook | None = None,
        before_create: InjectionHook | None = None,
    ) -> Callable[[C], C]: ...

    def register_class(
        self,
        cls: C | None = None,
        *,
        token: Token[Any] | None = None,
        scope: ScopeHandler | None = None,
        before_inject: InjectionHook | None = None,
        before_create: InjectionHook | None = None,
    ) -> C | Callable[[C], C]:
        """Register a class, directly or as a class decorator.

        Examples:
            ```python
            container.register_class(SqlRepository, token=REPOSITORY)


            @container.register_class(scope=Scope.SINGLETON)
            class Settings: ...
            ```

        """

        def decorator(decorated: C) -> C:
            self.register(
                ClassDescriptor(
                    decorated,
                    token=token,
                    scope=scope,
                    before_inject=before_inject,
                    before_create=before_create,
                ),
            )
            return decorated

        if cls is None:
            return decorator
        return decorator(cls)

    def register_value(
        self,
        token: TokenOrClass[T],
        value: T,
        *,
        before_inject: InjectionHook | None = None,
    ) -> None:
        """Register a pre-existing value returned as is on every resolution."""
        self.register(ValueDescriptor(token, value, before_inject=before_inject))

    def register_factory(
        self,
        token: Token[Any] | type[Any],
        factory: Factory,
        *,
        before_inject: InjectionHook | None = None,
    ) -> None:
        """Register ``factory(container, *args)`` called on every resolution."""
        self.register(FactoryDescriptor(token, factory, before_inject=before_inject))

    def unregister(self, key: Any) -> None:
        """Remove the descriptor for ``key`` and evict its cached instance here.

        Parents and children are left untouched.
        """
        found = self._registry.find(key)
        self._registry.remove(key)

        if found is not None and isinstance(found[0], ClassDescriptor):
            self._instances.pop(found[0].cls, None)
        elif isinstance(key, type):
            self._instances.pop(key, None)

        logger.debug("Unregistered %r from %r", key, self)

    def reset(self) -> None:
        """Clear registrations, cached instances and in-flight resolution state.

        Pending deferred resolutions still run to completion.
        """
        self._instances = WeakKeyDictionary()
        self._registry.clear()
        self._resolution_stack.clear()
        self._pending.clear()
        self._resolution_container = None
        self.loop_counter = 0
        logger.debug("Reset %r", self)

    # Resolution

    @overload
    def inject(self, key: TokenOrClass[T], *args: Any) -> T: ...

    @overload
    def inject(self, key: Any, *args: Any) -> Any: ...

    def inject(self, key: Any, *args: Any) -> Any:
        """Resolve ``key`` to an instance, constructing it when needed.

        Args:
            key: A class or a registered ``Token``.
            *args: Positional constructor arguments, only allowed for transient
                and resolution scopes.

        Raises:
            DependencyCycleError: If ``key`` is already being resolved on this
                container's call stack.
            TokenNotRegisteredError: If ``key`` is a token without a descriptor
                in the container chain.
            ArgumentsError: If arguments are passed to a singleton or
                container scoped class.

        """
        return self._inject(key, args, None)

    @overload
    def inject_async(self, key: TokenOrClass[T], *args: Any) -> asyncio.Future[T]: ...

    @overload
    def inject_async(self, key: Any, *args: Any) -> asyncio.Future[Any]: ...

    def inject_async(self, key: Any, *args: Any) -> asyncio.Future[Any]:
        """Resolve ``key`` on the next event loop iteration.

        The deferred resolution runs inside the resolution container active at
        call time. Requests for a key that is already pending share one future,
        and a key with a cached instance on this container resolves
        immediately.

        Raises:
            AsyncDependencyCycleError: If more deferred resolutions than the
                configured ceiling were started within one unresolved call chain.
            AsyncResolutionWithoutEventLoopError: If no event loop is running.

        """
        resolution_container = self._resolution_container

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as error:
            msg = f"inject_async({key!r}) requires a running event loop."
            raise AsyncResolutionWithoutEventLoopError(msg) from error

        # A call outside any resolution starts a new chain.
        if resolution_container is None:
            self.loop_counter = 0

        self.loop_counter += 1
        if self.loop_counter > self._max_async_deferrals:
            logger.debug("Async resolution ceiling reached for %r on %r", key, self)
            raise AsyncDependencyCycleError(key, self._max_async_deferrals)

        pending = self._pending.get(key)
        if pending is not None:
            return pending

        future: asyncio.Future[Any] = loop.create_future()

        cached = self._find_cached_instance(key)
        if cached is not _MISSING:
            future.set_result(cached)
            return future

        self._pending[key] = future
        loop.call_soon(self._run_deferred, key, args, resolution_container, future)
        logger.debug("Deferred resolution of %r on %r", key, self)
        return future

    @overload
    def inject_lazy(self, key: TokenOrClass[T], *args: Any) -> T: ...

    @overload
    def inject_lazy(self, key: Any, *args: Any) -> Any: ...

    def inject_lazy(self, key: Any, *args: Any) -> Any:
        """Return a stand-in that resolves ``key`` on first real use.

        Nothing is looked up here, so errors surface on first use of the proxy.
        """
        return LazyProxy(self, key, args)

    def get_instance(self, cls: type[T], args: tuple[Any, ...] = ()) -> T:
        """Return the cached instance of ``cls`` from this container or a parent.

        When no container in the chain caches ``cls``, construct it with
        ``args`` and cache it here.
        """
        return self.get_or_create(ClassDescriptor(cls), args)

    def get_or_create(self, descriptor: ClassDescriptor, args: tuple[Any, ...] = ()) -> Any:
        """Cache-or-construct primitive used by caching scopes."""
        container: Container | None = self
        while container is not None:
            instance = container._instances.get(descriptor.cls, _MISSING)  # noqa: SLF001
            if instance is not _MISSING:
                return instance
            container = container._parent  # noqa: SLF001

        instance = descriptor.create(self, args)
        self._instances[descriptor.cls] = instance
        return instance

    def _inject(
        self,
        key: Any,
        args: tuple[Any, ...],
        resolution_container: Container | None,
    ) -> Any:
        previous = self._resolution_container
        is_outermost = previous is None and resolution_container is None

        if resolution_container is not None:
            self._resolution_container = resolution_container
        elif previous is None:
            self._resolution_container = Container(name=RESOLUTION_CONTAINER_NAME)

        pushed = False
        try:
            if key in self._resolution_stack:
                logger.debug("Circular dependency on %r: %r", key, self._resolution_stack)
                raise DependencyCycleError(key, self._resolution_stack)

            self._resolution_stack.append(key)
            pushed = True

            descriptor, owner = self._find_descriptor(key)
            return self._dispatch(descriptor, owner, args)
        finally:
            if pushed and key in self._resolution_stack:
                self._resolution_stack.remove(key)
            self._resolution_container = previous
            if is_outermost:
                self.loop_counter = 0

    def _find_descriptor(self, key: Any) -> tuple[Descriptor, Container]:
        found = self._registry.find(key)
        if found is not None:
            return found
        if isinstance(key, type):
            return ClassDescriptor(key), self
        raise TokenNotRegisteredError(key)

    def _dispatch(self, descriptor: Descriptor, owner: Container, args: tuple[Any, ...]) -> Any:
        args = run_before_inject(descriptor, owner, args)

        if isinstance(descriptor, ValueDescriptor):
            return descriptor.value

        if isinstance(descriptor, FactoryDescriptor):
            return descriptor.factory(owner, *args)

        if isinstance(descriptor, ClassDescriptor):
            scope = descriptor.resolve_scope()
            return scope(descriptor, args, owner, self._resolution_container)

        raise InvalidDescriptorError(descriptor)

    def _find_cached_instance(self, key: Any) -> Any:
        if isinstance(key, type):
            cls: type[Any] | None = key
        else:
            found = self._registry.find(key)
            cls = found[0].cls if found is not None and isinstance(found[0], ClassDescriptor) else None

        if cls is None:
            return _MISSING
        return self._instances.get(cls, _MISSING)

    def _run_deferred(
        self,
        key: Any,
        args: tuple[Any, ...],
        resolution_container: Container | None,
        future: asyncio.Future[Any],
    ) -> None:
        try:
            instance = self._inject(key, args, resolution_container)
        except Exception as error:  # noqa: BLE001
            if not future.done():
                future.set_exception(error)
        else:
            if not future.done():
                future.set_result(instance)
        finally:
            if self._pending.get(key) is future:
                del self._pending[key]
