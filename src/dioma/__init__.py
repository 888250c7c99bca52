from dioma.container import Container
from dioma.container_context import (
    ContainerContext,
    child_container,
    container_context,
    inject,
    inject_async,
    inject_lazy,
    register,
    unregister,
)
from dioma.descriptors import ClassDescriptor, Descriptor, FactoryDescriptor, ValueDescriptor
from dioma.exceptions import (
    ArgumentsError,
    AsyncDependencyCycleError,
    AsyncResolutionWithoutEventLoopError,
    DependencyCycleError,
    DiomaError,
    InvalidDescriptorError,
    TokenNotRegisteredError,
)
from dioma.lazy import LazyProxy, resolve_lazy
from dioma.scope import BaseScope, Scope, ScopeHandler
from dioma.tokens import Token
from dioma.types import ScopedClass

__all__ = [
    "ArgumentsError",
    "AsyncDependencyCycleError",
    "AsyncResolutionWithoutEventLoopError",
    "BaseScope",
    "ClassDescriptor",
    "Container",
    "ContainerContext",
    "DependencyCycleError",
    "Descriptor",
    "DiomaError",
    "FactoryDescriptor",
    "InvalidDescriptorError",
    "LazyProxy",
    "Scope",
    "ScopeHandler",
    "ScopedClass",
    "Token",
    "TokenNotRegisteredError",
    "ValueDescriptor",
    "child_container",
    "container_context",
    "inject",
    "inject_async",
    "inject_lazy",
    "register",
    "resolve_lazy",
    "unregister",
]
