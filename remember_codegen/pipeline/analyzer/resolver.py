"""
Default-strategy resolver.

Maps each parameter's default policy to a concrete default expression.
The expression text depends on the host language, so the shapes of the
calls come from the backend's ExpressionSyntax.
"""

from __future__ import annotations

from typing import Protocol

from ..config import InjectionMode
from ..errors import MissingProviderName, UnresolvableDefault
from .model import (
    NO_DEFAULT,
    AmbientScope,
    ClassModel,
    CustomProvide,
    DefaultKind,
    FrameworkInject,
    LiteralValue,
    NamedInject,
    NoDefault,
    ParamSpec,
    ResolvedDefault,
)

# Source text of a call plus the (module, name) imports it needs
Call = tuple[str, tuple[tuple[str, str], ...]]


class ExpressionSyntax(Protocol):
    """Host-language shapes of the default-value calls."""

    def framework_inject_call(self, param: ParamSpec, args: tuple[str, ...], model: ClassModel) -> Call: ...

    def named_inject_call(self, injector: str, param: ParamSpec, args: tuple[str, ...], model: ClassModel) -> Call: ...

    def provider_call(self, provider: str, args: tuple[str, ...], model: ClassModel) -> Call: ...

    def ambient_scope_call(self, model: ClassModel) -> Call: ...


class DefaultStrategyResolver:
    """Resolves parameter defaults for one host language."""

    def __init__(self, syntax: ExpressionSyntax):
        self.syntax = syntax

    def resolve(self, param: ParamSpec, model: ClassModel) -> ResolvedDefault:
        """
        Resolve the default of one parameter.

        Args:
            param: The parameter
            model: The class the parameter belongs to

        Returns:
            The resolved default, or NO_DEFAULT for a required parameter

        Raises:
            UnresolvableDefault: If an injection default has no way to be resolved
            MissingProviderName: If a provider default has no function name
        """
        policy = param.default_policy
        framework = model.injection_mode is InjectionMode.FRAMEWORK_CALL

        match policy:
            case NoDefault():
                return NO_DEFAULT

            case LiteralValue(expression=expression):
                return ResolvedDefault(kind=DefaultKind.LITERAL, expression=expression)

            case FrameworkInject(args=args):
                if not framework:
                    raise UnresolvableDefault(model.qualified_name, "framework injection is disabled", param.name)
                return self._call(self.syntax.framework_inject_call(param, args, model))

            case NamedInject(args=args):
                if model.injector_name:
                    return self._call(self.syntax.named_inject_call(model.injector_name, param, args, model))
                if framework:
                    return self._call(self.syntax.framework_inject_call(param, args, model))
                raise UnresolvableDefault(model.qualified_name, "no injector and framework injection is disabled", param.name)

            case CustomProvide(provider_name=provider, args=args):
                if not provider.strip():
                    raise MissingProviderName(model.qualified_name, "custom-provide marker needs a provider function", param.name)
                return self._call(self.syntax.provider_call(provider.strip(), args, model))

            case AmbientScope():
                return self._call(self.syntax.ambient_scope_call(model))

        raise TypeError(f"Unknown default policy {policy!r}")

    def resolve_all(self, model: ClassModel) -> list[ResolvedDefault]:
        """Resolve every parameter of a class, in declaration order."""
        return [self.resolve(param, model) for param in model.params]

    def _call(self, call: Call) -> ResolvedDefault:
        expression, imports = call
        return ResolvedDefault(kind=DefaultKind.CALL, expression=expression, imports=imports)
