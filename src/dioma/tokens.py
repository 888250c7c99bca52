from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class Token(Generic[T]):
    """Identity-only registration key resolving to ``T``.

    Use a token when the resolved type cannot or should not be its own key:
    primitives, protocols, or several registrations of the same class.
    Tokens compare by identity, two tokens with the same name are different keys.

    Example:
        ```python
        DATABASE_URL = Token[str]("database_url")
        container.register_value(DATABASE_URL, "sqlite://")
        ```
    """

    __slots__ = ("name",)

    def __init__(self, name: str | None = None) -> None:
        self.name = name

    def __repr__(self) -> str:
        if self.name is None:
            return f"Token(<anonymous {id(self):#x}>)"
        return f"Token({self.name!r})"
