"""
Declaration model node definitions.

These nodes represent annotated type declarations exactly as a front-end
reports them: names, structural types and the raw markers attached to
parameters, properties and classes. No policy has been decided yet.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MarkerKind(Enum):
    """Kind of marker attached to a parameter or property."""

    LITERAL_VALUE = "literal-value"  # default is a literal expression
    FRAMEWORK_INJECT = "framework-inject"  # default comes from the injection framework
    NAMED_INJECT = "named-inject"  # default comes from the class-level injector function
    CUSTOM_PROVIDE = "custom-provide"  # default comes from a named provider function
    AMBIENT_SCOPE = "ambient-scope"  # default is the caller-scoped ambient value
    INVALIDATION_KEY = "invalidation-key"  # change of value rebuilds the memoized instance
    PERSISTED_KEY = "persisted-key"  # value is saved under a key


DEFAULT_POLICY_MARKERS = frozenset(
    {
        MarkerKind.LITERAL_VALUE,
        MarkerKind.FRAMEWORK_INJECT,
        MarkerKind.NAMED_INJECT,
        MarkerKind.CUSTOM_PROVIDE,
        MarkerKind.AMBIENT_SCOPE,
    }
)


@dataclass(frozen=True)
class TypeRef:
    """A structural type descriptor: name, generic arguments and nullability."""

    name: str = ""  # Simple name (e.g., "List", "User")
    module: str | None = None  # Package or module the type is declared in
    type_args: tuple[TypeRef, ...] = ()
    nullable: bool = False

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}" if self.module else self.name


@dataclass(frozen=True)
class Marker:
    """A declarative marker with its payload.

    Attributes:
        kind: What the marker means
        value: Literal expression, provider name or persisted key
        args: Argument expressions forwarded verbatim to the generated call
    """

    kind: MarkerKind
    value: str | None = None
    args: tuple[str, ...] = ()


@dataclass
class ParamDecl:
    """A constructor parameter."""

    name: str = ""
    type_ref: TypeRef = field(default_factory=TypeRef)
    markers: list[Marker] = field(default_factory=list)


@dataclass
class PropertyDecl:
    """A declared property of the type."""

    name: str = ""
    type_ref: TypeRef | None = None
    markers: list[Marker] = field(default_factory=list)


@dataclass
class TypeDecl:
    """An annotated type declaration."""

    name: str = ""  # Simple name
    namespace: str = ""  # Kotlin package or Python module

    # Constructor parameters, in declaration order
    params: list[ParamDecl] = field(default_factory=list)

    # Declared properties (only the ones with markers matter)
    properties: list[PropertyDecl] = field(default_factory=list)

    # Class-level markers
    persistence: bool = False
    injector: str | None = None
    injection_mode: str | None = None

    # Where the declaration came from (for error messages)
    source: str = ""

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name
