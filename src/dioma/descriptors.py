from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from dioma.exceptions import InvalidDescriptorError
from dioma.scope import Scope, ScopeHandler
from dioma.tokens import Token
from dioma.types import Factory, InjectionHook

if TYPE_CHECKING:
    from dioma.container import Container

logger = logging.getLogger(__name__)


def _apply_hook(
    hook: InjectionHook | None,
    container: Container,
    args: tuple[Any, ...],
) -> tuple[Any, ...]:
    if hook is None:
        return args
    replaced = hook(container, args)
    return args if replaced is None else tuple(replaced)


@dataclass(frozen=True)
class ClassDescriptor:
    """Resolve a key by constructing ``cls``.

    The scope is taken from ``scope`` when given, then from ``cls.scope``, and
    defaults to transient.
    """

    cls: type[Any]
    token: Token[Any] | None = None
    scope: ScopeHandler | None = None
    before_inject: InjectionHook | None = None
    """Called on every resolution, before scope dispatch."""
    before_create: InjectionHook | None = None
    """Called only when an instance is about to be constructed."""

    @property
    def key(self) -> Any:
        return self.token if self.token is not None else self.cls

    def resolve_scope(self) -> ScopeHandler:
        if self.scope is not None:
            return self.scope
        class_scope = getattr(self.cls, "scope", None)
        if class_scope is not None:
            return class_scope
        return Scope.TRANSIENT

    def create(self, container: Container, args: tuple[Any, ...] = ()) -> Any:
        args = _apply_hook(self.before_create, container, args)
        return self.cls(*args)


@dataclass(frozen=True)
class ValueDescriptor:
    """Resolve a key to a pre-existing value, never constructed or cached."""

    token: Any
    value: Any
    before_inject: InjectionHook | None = None

    @property
    def key(self) -> Any:
        return self.token


@dataclass(frozen=True)
class FactoryDescriptor:
    """Resolve a key by calling ``factory(container, *args)`` on every resolution.

    The factory receives the owning container and may call ``inject`` itself.
    """

    token: Any
    factory: Factory
    before_inject: InjectionHook | None = None

    @property
    def key(self) -> Any:
        return self.token


Descriptor: TypeAlias = ClassDescriptor | ValueDescriptor | FactoryDescriptor


def run_before_inject(
    descriptor: Descriptor,
    container: Container,
    args: tuple[Any, ...],
) -> tuple[Any, ...]:
    return _apply_hook(descriptor.before_inject, container, args)


def validate_descriptor(descriptor: Any) -> None:
    """Raise ``InvalidDescriptorError`` unless ``descriptor`` is well formed."""
    if isinstance(descriptor, ClassDescriptor):
        if not inspect.isclass(descriptor.cls):
            raise InvalidDescriptorError(descriptor, "cls must be a class")
        if descriptor.token is not None and not isinstance(descriptor.token, Token):
            raise InvalidDescriptorError(descriptor, "token must be a Token")
        return

    if isinstance(descriptor, (ValueDescriptor, FactoryDescriptor)):
        if not isinstance(descriptor.token, Token) and not inspect.isclass(descriptor.token):
            raise InvalidDescriptorError(descriptor, "token must be a Token or a class")
        if isinstance(descriptor, FactoryDescriptor) and not callable(descriptor.factory):
            raise InvalidDescriptorError(descriptor, "factory must be callable")
        return

    raise InvalidDescriptorError(descriptor)


class DescriptorRegistry:
    """Per-container mapping from token or class to its descriptor.

    Lookups fall back to the parent registry; writes only touch this one.
    """

    def __init__(self, owner: Container, parent: DescriptorRegistry | None = None) -> None:
        self._owner = owner
        self._parent = parent
        self._descriptors: dict[Any, Descriptor] = {}

    def add(self, descriptor: Descriptor) -> None:
        validate_descriptor(descriptor)
        self._descriptors[descriptor.key] = descriptor
        if isinstance(descriptor, ClassDescriptor) and descriptor.token is not None:
            # Resolving the bare class must hit the same descriptor and cache entry.
            self._descriptors[descriptor.cls] = descriptor
        logger.debug("Registered %r for %r on %r", descriptor, descriptor.key, self._owner)

    def remove(self, key: Any) -> Descriptor | None:
        descriptor = self._descriptors.pop(key, None)
        if (
            isinstance(descriptor, ClassDescriptor)
            and descriptor.token is not None
            and self._descriptors.get(descriptor.cls) is descriptor
        ):
            del self._descriptors[descriptor.cls]
        return descriptor

    def find(self, key: Any) -> tuple[Descriptor, Container] | None:
        """Return the first descriptor for ``key`` and its owning container."""
        registry: DescriptorRegistry | None = self
        while registry is not None:
            descriptor = registry._descriptors.get(key)  # noqa: SLF001
            if descriptor is not None:
                return descriptor, registry._owner  # noqa: SLF001
            registry = registry._parent  # noqa: SLF001
        return None

    def clear(self) -> None:
        self._descriptors.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)
