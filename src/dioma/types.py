from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, TypeAlias, TypeVar, runtime_checkable

from dioma.tokens import Token

if TYPE_CHECKING:
    from dioma.scope import ScopeHandler

T = TypeVar("T")


@runtime_checkable
class ScopedClass(Protocol):
    """A constructible class that declares its own scope handler.

    Classes without a ``scope`` attribute resolve as transient.
    """

    scope: ClassVar[ScopeHandler]


TokenOrClass: TypeAlias = type[T] | Token[T]
"""Anything accepted as a resolution key."""

InjectionHook: TypeAlias = Callable[..., Sequence[Any] | None]
"""Hook called as ``hook(container, args)``, may return replacement args."""

Factory: TypeAlias = Callable[..., Any]
"""A callable invoked as ``factory(container, *args)``."""
