from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Protocol

from dioma.exceptions import ArgumentsError

if TYPE_CHECKING:
    from dioma.container import Container
    from dioma.descriptors import ClassDescriptor


class ScopeHandler(Protocol):
    """Decide where a resolved instance is cached and when it is constructed.

    A handler receives the class descriptor, the positional arguments of the
    call, the container owning the descriptor and the resolution container of
    the current outer ``inject`` call.
    """

    def __call__(
        self,
        descriptor: ClassDescriptor,
        args: tuple[Any, ...],
        container: Container,
        resolution_container: Container,
    ) -> Any: ...


class BaseScope:
    """Base class for built-in scope handlers."""

    accepts_arguments: ClassVar[bool] = True

    scope_name: str = "UNBOUND"

    def __set_name__(self, owner: type[Any], name: str) -> None:
        # User classes declare ``scope = Scope.X`` and must not rename the shared handler.
        if owner is Scopes:
            self.scope_name = name

    def __call__(
        self,
        descriptor: ClassDescriptor,
        args: tuple[Any, ...],
        container: Container,
        resolution_container: Container,
    ) -> Any:
        raise NotImplementedError

    def check_arguments(self, descriptor: ClassDescriptor, args: tuple[Any, ...]) -> None:
        if args and not self.accepts_arguments:
            raise ArgumentsError(type(self).__name__, descriptor.cls.__name__)

    def __repr__(self) -> str:
        return f"Scope.{self.scope_name}"


class TransientScope(BaseScope):
    """Construct a new instance on every resolution, never cached."""

    def __call__(
        self,
        descriptor: ClassDescriptor,
        args: tuple[Any, ...],
        container: Container,
        resolution_container: Container,
    ) -> Any:
        return descriptor.create(container, args)


class SingletonScope(BaseScope):
    """Cache one instance in the default container, shared by every container."""

    accepts_arguments = False

    def __call__(
        self,
        descriptor: ClassDescriptor,
        args: tuple[Any, ...],
        container: Container,
        resolution_container: Container,
    ) -> Any:
        self.check_arguments(descriptor, args)

        from dioma.container_context import container_context  # noqa: PLC0415

        return container_context.get_current().get_or_create(descriptor)


class ContainerScope(BaseScope):
    """Cache one instance in the container owning the registration.

    Descendant containers reuse the cached instance, sibling containers
    resolving an unregistered class build their own.
    """

    accepts_arguments = False

    def __call__(
        self,
        descriptor: ClassDescriptor,
        args: tuple[Any, ...],
        container: Container,
        resolution_container: Container,
    ) -> Any:
        self.check_arguments(descriptor, args)
        return container.get_or_create(descriptor)


class ResolutionScope(BaseScope):
    """Share one instance across a single outer ``inject`` call tree.

    The first request within the call tree decides the constructor arguments.
    """

    def __call__(
        self,
        descriptor: ClassDescriptor,
        args: tuple[Any, ...],
        container: Container,
        resolution_container: Container,
    ) -> Any:
        return resolution_container.get_or_create(descriptor, args)


@dataclass(frozen=True)
class Scopes:
    """Enum like class for the built-in scope handlers."""

    TRANSIENT: BaseScope = field(default=TransientScope())
    SINGLETON: BaseScope = field(default=SingletonScope())
    CONTAINER: BaseScope = field(default=ContainerScope())
    RESOLUTION: BaseScope = field(default=ResolutionScope())

    @property
    def SCOPED(self) -> BaseScope:  # noqa: N802
        """Alias of ``CONTAINER``."""
        return self.CONTAINER


Scope = Scopes()
"""Enum like instance for scopes."""
