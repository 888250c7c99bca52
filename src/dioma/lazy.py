from __future__ import annotations

import copy
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from dioma.container import Container

T = TypeVar("T")

_UNRESOLVED: Any = object()


class LazyProxy(Generic[T]):
    """Transparent stand-in for an instance that is resolved on first use.

    Attribute access and assignment, calls, ``dir()``, ``str()``, truthiness,
    comparison, hashing, the container protocol and ``isinstance`` checks
    resolve the key through the container once and forward to the result.
    ``repr()`` does not trigger resolution. Copying a proxy copies the
    resolved instance.
    """

    __slots__ = ("_dioma_args", "_dioma_container", "_dioma_instance", "_dioma_key")

    def __init__(self, container: Container, key: Any, args: tuple[Any, ...] = ()) -> None:
        object.__setattr__(self, "_dioma_container", container)
        object.__setattr__(self, "_dioma_key", key)
        object.__setattr__(self, "_dioma_args", args)
        object.__setattr__(self, "_dioma_instance", _UNRESOLVED)

    def _dioma_resolve(self) -> T:
        instance = object.__getattribute__(self, "_dioma_instance")
        if instance is _UNRESOLVED:
            container = object.__getattribute__(self, "_dioma_container")
            key = object.__getattribute__(self, "_dioma_key")
            args = object.__getattribute__(self, "_dioma_args")
            instance = container.inject(key, *args)
            object.__setattr__(self, "_dioma_instance", instance)
        return instance

    @property  # type: ignore[misc]
    def __class__(self) -> type[Any]:  # type: ignore[override]
        return type(self._dioma_resolve())

    def __getattr__(self, name: str) -> Any:
        return getattr(self._dioma_resolve(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._dioma_resolve(), name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self._dioma_resolve(), name)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._dioma_resolve()(*args, **kwargs)

    def __dir__(self) -> list[str]:
        return dir(self._dioma_resolve())

    def __str__(self) -> str:
        return str(self._dioma_resolve())

    def __repr__(self) -> str:
        instance = object.__getattribute__(self, "_dioma_instance")
        if instance is _UNRESOLVED:
            key = object.__getattribute__(self, "_dioma_key")
            return f"<LazyProxy {key!r} (unresolved)>"
        return repr(instance)

    def __bool__(self) -> bool:
        return bool(self._dioma_resolve())

    def __eq__(self, other: object) -> bool:
        return self._dioma_resolve() == resolve_lazy(other)

    def __hash__(self) -> int:
        return hash(self._dioma_resolve())

    def __len__(self) -> int:
        return len(self._dioma_resolve())  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._dioma_resolve())  # type: ignore[call-overload]

    def __contains__(self, item: object) -> bool:
        return item in self._dioma_resolve()  # type: ignore[operator]

    def __getitem__(self, key: Any) -> Any:
        return self._dioma_resolve()[key]  # type: ignore[index]

    def __setitem__(self, key: Any, value: Any) -> None:
        self._dioma_resolve()[key] = value  # type: ignore[index]

    def __delitem__(self, key: Any) -> None:
        del self._dioma_resolve()[key]  # type: ignore[attr-defined]

    def __copy__(self) -> Any:
        return copy.copy(self._dioma_resolve())

    def __deepcopy__(self, memo: dict[int, Any]) -> Any:
        return copy.deepcopy(self._dioma_resolve(), memo)


def resolve_lazy(proxy: Any) -> Any:
    """Return the instance behind ``proxy``, resolving it when needed.

    Values that are not lazy proxies are returned unchanged.
    """
    if type(proxy) is LazyProxy:
        return proxy._dioma_resolve()  # noqa: SLF001
    return proxy


def is_resolved(proxy: LazyProxy[Any]) -> bool:
    """Tell whether ``proxy`` already resolved its instance."""
    return object.__getattribute__(proxy, "_dioma_instance") is not _UNRESOLVED
