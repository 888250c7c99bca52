"""Tests for explicit registration: class, value and factory descriptors."""

from __future__ import annotations

from typing import Any

import pytest

from dioma import (
    ClassDescriptor,
    Container,
    FactoryDescriptor,
    Scope,
    Token,
    TokenNotRegisteredError,
    ValueDescriptor,
    inject,
    register,
)


class TestRegisterClass:
    def test_register_class(self) -> None:
        class RegisterClass:
            scope = Scope.TRANSIENT

        register(ClassDescriptor(RegisterClass))

        assert isinstance(inject(RegisterClass), RegisterClass)

    def test_register_class_on_container(self, container: Container) -> None:
        class RegisterClass:
            scope = Scope.CONTAINER

        container.register(ClassDescriptor(RegisterClass))

        assert container.inject(RegisterClass) is container.inject(RegisterClass)

    def test_registered_class_on_parent(self, container: Container) -> None:
        class RegisterClass:
            scope = Scope.CONTAINER

        container.register(ClassDescriptor(RegisterClass))
        child = container.child_container("child")

        instance = child.inject(RegisterClass)

        assert isinstance(instance, RegisterClass)
        assert container.inject(RegisterClass) is instance

        container.unregister(RegisterClass)
        instance3 = child.inject(RegisterClass)

        assert isinstance(instance3, RegisterClass)
        assert instance3 is not instance

    def test_register_class_helper(self, container: Container) -> None:
        class Settings:
            pass

        returned = container.register_class(Settings, scope=Scope.CONTAINER)

        assert returned is Settings
        assert container.inject(Settings) is container.inject(Settings)

    def test_register_class_as_decorator(self, container: Container) -> None:
        token: Token[Any] = Token("settings")

        @container.register_class(token=token, scope=Scope.CONTAINER)
        class Settings:
            pass

        assert isinstance(Settings, type)
        assert container.inject(token) is container.inject(Settings)

    def test_later_registration_replaces_earlier(self, container: Container) -> None:
        token: Token[Any] = Token("service")

        class First:
            pass

        class Second:
            pass

        container.register(ClassDescriptor(First, token=token))
        container.register(ClassDescriptor(Second, token=token))

        assert isinstance(container.inject(token), Second)

    def test_child_registration_shadows_parent(self, container: Container) -> None:
        token: Token[Any] = Token("service")

        class Real:
            pass

        class Fake:
            pass

        container.register(ClassDescriptor(Real, token=token))
        child = container.child_container()
        child.register(ClassDescriptor(Fake, token=token))

        assert isinstance(child.inject(token), Fake)
        assert isinstance(container.inject(token), Real)


class TestTokens:
    def test_inject_token(self, container: Container) -> None:
        token: Token[Any] = Token()

        class TokenClass:
            scope = Scope.TRANSIENT

        container.register(ClassDescriptor(TokenClass, token=token))

        assert isinstance(container.inject(token), TokenClass)

    def test_inject_token_with_arguments(self, container: Container) -> None:
        token: Token[Any] = Token()

        class TokenClass:
            def __init__(self, value: str) -> None:
                self.value = value

        container.register(ClassDescriptor(TokenClass, token=token))

        instance = container.inject(token, "test")

        assert isinstance(instance, TokenClass)
        assert instance.value == "test"

    def test_inject_token_from_parent(self, container: Container) -> None:
        token: Token[Any] = Token()

        class TokenClass:
            scope = Scope.CONTAINER

        container.register(ClassDescriptor(TokenClass, token=token))
        child = container.child_container("child")

        instance = child.inject(token)

        assert isinstance(instance, TokenClass)
        assert container.inject(token) is instance

        container.unregister(token)
        instance3 = child.inject(TokenClass)

        assert isinstance(instance3, TokenClass)
        assert instance3 is not instance

    def test_token_and_class_share_instance(self, container: Container) -> None:
        token: Token[Any] = Token()

        class TokenClass:
            scope = Scope.CONTAINER

        container.register(ClassDescriptor(TokenClass, token=token))

        assert container.inject(token) is container.inject(TokenClass)

    def test_tokens_compare_by_identity(self, container: Container) -> None:
        first: Token[int] = Token("same")
        second: Token[int] = Token("same")
        container.register_value(first, 1)

        assert first != second
        with pytest.raises(TokenNotRegisteredError):
            container.inject(second)

    def test_token_repr(self) -> None:
        assert repr(Token("database")) == "Token('database')"
        assert repr(Token()).startswith("Token(<anonymous")


class TestUnregister:
    def test_unregister_token(self, container: Container) -> None:
        token: Token[Any] = Token()

        class TokenClass:
            scope = Scope.CONTAINER

        container.register(ClassDescriptor(TokenClass, token=token))
        assert isinstance(container.inject(token), TokenClass)

        container.unregister(token)

        with pytest.raises(TokenNotRegisteredError):
            container.inject(token)

    def test_unregister_token_from_parent(self, container: Container) -> None:
        token: Token[Any] = Token()

        class TokenClass:
            scope = Scope.CONTAINER

        container.register(ClassDescriptor(TokenClass, token=token))
        child = container.child_container("child")
        assert isinstance(child.inject(token), TokenClass)

        container.unregister(token)

        with pytest.raises(TokenNotRegisteredError):
            child.inject(token)

    def test_unregister_drops_cached_instance(self, container: Container) -> None:
        token: Token[Any] = Token()

        class TokenClass:
            scope = Scope.CONTAINER

        container.register(ClassDescriptor(TokenClass, token=token))
        instance = container.inject(token)

        container.unregister(token)

        assert container.inject(TokenClass) is not instance

    def test_unregister_unknown_key_is_noop(self, container: Container) -> None:
        class Unknown:
            pass

        container.unregister(Unknown)
        container.unregister(Token("unknown"))

        assert len(container._registry) == 0

    def test_unregister_on_child_leaves_parent_registration(self, container: Container) -> None:
        token: Token[int] = Token()
        container.register_value(token, 1)
        child = container.child_container()

        child.unregister(token)

        assert child.inject(token) == 1


class TestValueDescriptor:
    def test_value_is_returned_as_is(self, container: Container) -> None:
        token: Token[dict[str, str]] = Token("config")
        config = {"url": "sqlite://"}
        container.register(ValueDescriptor(token, config))

        assert container.inject(token) is config
        assert container.child_container().inject(token) is config

    def test_value_registered_under_class(self, container: Container) -> None:
        class Clock:
            pass

        frozen = Clock()
        container.register_value(Clock, frozen)

        assert container.inject(Clock) is frozen

    def test_value_ignores_arguments(self, container: Container) -> None:
        token: Token[int] = Token()
        container.register_value(token, 7)

        assert container.inject(token, "ignored") == 7


class TestFactoryDescriptor:
    def test_factory_called_on_every_resolution(self, container: Container) -> None:
        token: Token[list[int]] = Token("list")
        container.register(FactoryDescriptor(token, lambda _: []))

        assert container.inject(token) == []
        assert container.inject(token) is not container.inject(token)

    def test_factory_receives_owner_and_arguments(self, container: Container) -> None:
        token: Token[Any] = Token("pair")
        calls: list[tuple[Container, tuple[Any, ...]]] = []

        def factory(owner: Container, *args: Any) -> tuple[Any, ...]:
            calls.append((owner, args))
            return args

        container.register_factory(token, factory)
        child = container.child_container()

        assert child.inject(token, 1, 2) == (1, 2)
        assert calls == [(container, (1, 2))]

    def test_factory_can_inject(self, container: Container) -> None:
        token: Token[Any] = Token("wrapper")

        class Dependency:
            scope = Scope.CONTAINER

        container.register_factory(token, lambda c: ("wrapped", c.inject(Dependency)))

        label, dependency = container.inject(token)

        assert label == "wrapped"
        assert dependency is container.inject(Dependency)


class TestHooks:
    def test_before_inject_runs_on_every_resolution(self, container: Container) -> None:
        calls: list[tuple[Any, ...]] = []

        class Cached:
            scope = Scope.CONTAINER

        container.register(
            ClassDescriptor(Cached, before_inject=lambda _, args: calls.append(args)),
        )

        container.inject(Cached)
        container.inject(Cached)

        assert calls == [(), ()]

    def test_before_create_runs_only_on_construction(self, container: Container) -> None:
        calls: list[Container] = []

        class Cached:
            scope = Scope.CONTAINER

        def before_create(owner: Container, args: tuple[Any, ...]) -> None:
            calls.append(owner)

        container.register(ClassDescriptor(Cached, before_create=before_create))

        container.inject(Cached)
        container.inject(Cached)

        assert calls == [container]

    def test_hooks_can_replace_arguments(self, container: Container) -> None:
        class Greeting:
            def __init__(self, text: str) -> None:
                self.text = text

        container.register(
            ClassDescriptor(
                Greeting,
                before_inject=lambda _, args: args or ("hello",),
                before_create=lambda _, args: (args[0].upper(),),
            ),
        )

        assert container.inject(Greeting).text == "HELLO"
        assert container.inject(Greeting, "bye").text == "BYE"

    def test_before_inject_on_value_and_factory(self, container: Container) -> None:
        seen: list[str] = []
        value_token: Token[int] = Token("value")
        factory_token: Token[int] = Token("factory")

        container.register_value(value_token, 1, before_inject=lambda *_: seen.append("value"))
        container.register_factory(
            factory_token,
            lambda _, amount: amount,
            before_inject=lambda _, args: (args[0] * 2,),
        )

        assert container.inject(value_token) == 1
        assert container.inject(factory_token, 21) == 42
        assert seen == ["value"]
