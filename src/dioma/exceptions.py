from __future__ import annotations

from typing import Any


class DiomaError(Exception):
    """Represent a base class for all dioma-specific failures.

    Catch this type when you want to handle any dioma error path without
    matching each concrete exception class individually.
    """


class DependencyCycleError(DiomaError):
    """Signal a synchronous dependency cycle.

    Raised by ``Container.inject`` when the requested class or token is already
    being resolved on the current call stack of the same container, for example
    when ``A.__init__`` injects ``B`` and ``B.__init__`` injects ``A`` again
    before ``A`` finished constructing.

    Typical fixes include breaking one side of the cycle with
    ``Container.inject_async`` or ``Container.inject_lazy``.
    """

    def __init__(self, key: Any, chain: list[Any] | None = None) -> None:
        self.key = key
        self.chain = list(chain or [])
        super().__init__("Circular dependency detected")


class AsyncDependencyCycleError(DiomaError):
    """Signal an asynchronous cycle that never converges.

    Raised by ``Container.inject_async`` once the number of deferred
    resolutions started within one unresolved call chain exceeds the ceiling.
    Only the chain that tipped the counter observes this error.

    Typical fix is making at least one side of the cycle inject the other
    synchronously so that one construction can complete.
    """

    def __init__(self, key: Any, limit: int) -> None:
        self.key = key
        self.limit = limit
        super().__init__("Circular dependency detected in async resolution")


class TokenNotRegisteredError(DiomaError):
    """Signal that a token has no descriptor anywhere in the container chain.

    Bare classes never raise this error because they register themselves
    implicitly on first use.
    """

    def __init__(self, token: Any) -> None:
        self.token = token
        super().__init__("Token is not registered in the container")


class ArgumentsError(DiomaError):
    """Signal positional arguments passed to a cached scope.

    Singleton and container scopes cache one instance per class, so arguments
    supplied for a single call cannot be honored.
    """

    def __init__(self, scope_name: str, class_name: str) -> None:
        self.scope_name = scope_name
        self.class_name = class_name
        super().__init__(f"Arguments are not supported for {scope_name} of {class_name}")


class InvalidDescriptorError(DiomaError):
    """Signal a registration that is not a class, value or factory descriptor.

    Raised by ``Container.register``. This is a programming error at
    registration time, not a runtime condition to recover from.
    """

    def __init__(self, descriptor: Any, reason: str | None = None) -> None:
        self.descriptor = descriptor
        msg = f"Invalid descriptor: {descriptor!r}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class AsyncResolutionWithoutEventLoopError(DiomaError):
    """Signal ``inject_async`` called without a running event loop.

    Deferred resolutions are scheduled on the running asyncio loop. Call
    ``inject_async`` from code driven by ``asyncio.run`` or an async test.
    """
