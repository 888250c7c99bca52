"""Scopes: how long a resolved instance lives.

- ``Scope.TRANSIENT`` (default): a new instance on every ``inject``.
- ``Scope.SINGLETON``: one instance per process, cached on the default container.
- ``Scope.CONTAINER``: one instance per container tree branch.
- ``Scope.RESOLUTION``: one instance per top-level ``inject`` call.
"""

from __future__ import annotations

from dioma import ClassDescriptor, Container, Scope, inject

app = Container(name="app")


class Clock:
    scope = Scope.SINGLETON


class RequestContext:
    scope = Scope.CONTAINER


class UnitOfWork:
    scope = Scope.RESOLUTION


class Handler:
    def __init__(self) -> None:
        self.unit_of_work = app.inject(UnitOfWork)
        self.audit = app.inject(AuditLog)


class AuditLog:
    def __init__(self) -> None:
        self.unit_of_work = app.inject(UnitOfWork)


def main() -> None:
    print(f"transient_new={app.inject(Handler) is not app.inject(Handler)}")  # => transient_new=True
    print(f"singleton_global={app.inject(Clock) is inject(Clock)}")  # => singleton_global=True

    first_request = app.child_container("request-1")
    second_request = app.child_container("request-2")
    print(
        f"per_request={first_request.inject(RequestContext) is first_request.inject(RequestContext)}",
    )  # => per_request=True
    print(
        f"isolated={first_request.inject(RequestContext) is not second_request.inject(RequestContext)}",
    )  # => isolated=True

    app.register(ClassDescriptor(RequestContext))
    shared = first_request.inject(RequestContext)
    print(f"registered_on_parent={second_request.inject(RequestContext) is shared}")  # => registered_on_parent=True

    handler = app.inject(Handler)
    print(f"same_unit_of_work={handler.unit_of_work is handler.audit.unit_of_work}")  # => same_unit_of_work=True
    print(f"fresh_per_call={app.inject(Handler).unit_of_work is not handler.unit_of_work}")  # => fresh_per_call=True


if __name__ == "__main__":
    main()
