"""
Class model node definitions.

These nodes represent one annotated class after extraction: every marker
has been classified into a typed default policy, so emitters never look
at raw marker payloads. The model is immutable once validated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..config import InjectionMode
from ..declarations.nodes import TypeRef


@dataclass(frozen=True)
class NoDefault:
    """No default; the caller must supply the parameter."""


@dataclass(frozen=True)
class LiteralValue:
    """A literal source expression, used verbatim."""

    expression: str = ""


@dataclass(frozen=True)
class FrameworkInject:
    """Resolved by the injection framework, optionally with arguments."""

    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class NamedInject:
    """Resolved by the class-level injector called with the parameter type."""

    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class CustomProvide:
    """Resolved by calling a named provider function."""

    provider_name: str = ""
    args: tuple[str, ...] = ()


@dataclass(frozen=True)
class AmbientScope:
    """Resolved by capturing the caller-scoped ambient value."""


DefaultPolicy = NoDefault | LiteralValue | FrameworkInject | NamedInject | CustomProvide | AmbientScope


@dataclass(frozen=True)
class ParamSpec:
    """One constructor parameter."""

    name: str = ""
    declared_type: TypeRef = field(default_factory=TypeRef)
    default_policy: DefaultPolicy = field(default_factory=NoDefault)
    is_invalidation_key: bool = False
    saveable_key: str | None = None


@dataclass(frozen=True)
class PropertySaveSpec:
    """One property carrying a persisted-key marker."""

    name: str = ""
    saveable_key: str = ""


@dataclass(frozen=True)
class ClassModel:
    """One annotated class, ready for validation and emission."""

    qualified_name: str = ""
    namespace: str = ""
    simple_name: str = ""

    # Constructor parameters in declaration order
    params: tuple[ParamSpec, ...] = ()

    saveable_properties: tuple[PropertySaveSpec, ...] = ()
    has_ambient_scope_param: bool = False

    # Shared by every NamedInject parameter of the class
    injector_name: str | None = None

    # Whether the persistence adapter is generated too
    persistence: bool = False

    # Effective injection mode (class override or run configuration)
    injection_mode: InjectionMode = InjectionMode.NONE

    @property
    def invalidation_keys(self) -> list[str]:
        """Names of the invalidation-key parameters, in declaration order."""
        return [param.name for param in self.params if param.is_invalidation_key]

    @property
    def saved_params(self) -> list[ParamSpec]:
        return [param for param in self.params if param.saveable_key is not None]

    @property
    def saver_params(self) -> list[ParamSpec]:
        """Parameters that are not persisted and must be passed to the saver."""
        return [param for param in self.params if param.saveable_key is None]


class DefaultKind(Enum):
    """Shape of a resolved default."""

    NONE = "none"  # Required parameter
    LITERAL = "literal"  # Literal expression, verbatim
    CALL = "call"  # Call expression, must be evaluated at call time


@dataclass(frozen=True)
class ResolvedDefault:
    """A default ready to splice into a generated signature.

    Attributes:
        kind: Shape of the default
        expression: Source text of the default (empty for NONE)
        imports: (module, name) pairs the expression needs
    """

    kind: DefaultKind = DefaultKind.NONE
    expression: str = ""
    imports: tuple[tuple[str, str], ...] = ()

    @property
    def is_required(self) -> bool:
        return self.kind is DefaultKind.NONE


NO_DEFAULT = ResolvedDefault()
