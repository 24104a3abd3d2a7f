"""
Metadata extractor that turns declarations into class models.

Phase 2 of the pipeline: classify every parameter's default-value policy,
invalidation role and persisted key. Pure transform, no side effects.
"""

from __future__ import annotations

from ..config import CodeGeneratorConfig, InjectionMode
from ..declarations.nodes import DEFAULT_POLICY_MARKERS, Marker, MarkerKind, ParamDecl, TypeDecl, TypeRef
from ..errors import ConflictingDefaultPolicy, DeclarationError
from .model import (
    AmbientScope,
    ClassModel,
    CustomProvide,
    DefaultPolicy,
    FrameworkInject,
    LiteralValue,
    NamedInject,
    NoDefault,
    ParamSpec,
    PropertySaveSpec,
)


def is_ambient_scope_type(type_ref: TypeRef, ambient_scope_type: str) -> bool:
    """Check whether a type structurally matches the ambient scope type.

    A dotted configured name is compared with the qualified type name,
    a simple one with the simple type name.
    """
    if "." in ambient_scope_type:
        return type_ref.qualified_name == ambient_scope_type
    return type_ref.name == ambient_scope_type


class MetadataExtractor:
    """Builds a ClassModel from a TypeDecl."""

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the extractor.

        Args:
            config: Code generation configuration
        """
        self.config = config

    def extract(self, decl: TypeDecl) -> ClassModel:
        """
        Extract the class model of one declaration.

        Args:
            decl: The annotated type declaration

        Returns:
            The class model

        Raises:
            ConflictingDefaultPolicy: If a parameter carries several default markers
            DeclarationError: If the declaration is structurally broken
        """
        class_name = decl.qualified_name

        seen: set[str] = set()
        params = []
        for param in decl.params:
            if param.name in seen:
                raise DeclarationError(class_name, "duplicate parameter name", param.name)
            seen.add(param.name)
            params.append(self._extract_param(param, class_name))

        saveable_properties = []
        for prop in decl.properties:
            for marker in prop.markers:
                if marker.kind is MarkerKind.PERSISTED_KEY:
                    if marker.value is None:
                        raise DeclarationError(class_name, "persisted-key marker needs a key", prop.name)
                    saveable_properties.append(PropertySaveSpec(name=prop.name, saveable_key=marker.value))

        return ClassModel(
            qualified_name=class_name,
            namespace=decl.namespace,
            simple_name=decl.name,
            params=tuple(params),
            saveable_properties=tuple(saveable_properties),
            has_ambient_scope_param=any(isinstance(p.default_policy, AmbientScope) for p in params),
            injector_name=decl.injector or None,
            persistence=decl.persistence,
            injection_mode=self._injection_mode(decl),
        )

    def _injection_mode(self, decl: TypeDecl) -> InjectionMode:
        """A class-level injection mode overrides the run configuration."""
        if decl.injection_mode is None:
            return self.config.injection_mode
        try:
            return InjectionMode(decl.injection_mode)
        except ValueError:
            raise DeclarationError(decl.qualified_name, f"unknown injection mode {decl.injection_mode!r}") from None

    def _extract_param(self, param: ParamDecl, class_name: str) -> ParamSpec:
        policy_markers = [m for m in param.markers if m.kind in DEFAULT_POLICY_MARKERS]
        if len(policy_markers) > 1:
            kinds = ", ".join(m.kind.value for m in policy_markers)
            raise ConflictingDefaultPolicy(class_name, f"conflicting default markers: {kinds}", param.name)

        persisted_keys = {m.value for m in param.markers if m.kind is MarkerKind.PERSISTED_KEY}
        if len(persisted_keys) > 1:
            keys = ", ".join(sorted(str(key) for key in persisted_keys))
            raise ConflictingDefaultPolicy(class_name, f"conflicting persisted keys: {keys}", param.name)
        if None in persisted_keys:
            raise DeclarationError(class_name, "persisted-key marker needs a key", param.name)

        if policy_markers:
            policy = self._policy_from_marker(policy_markers[0], class_name, param.name)
        elif is_ambient_scope_type(param.type_ref, self.config.ambient_scope_type):
            # Implicit, only once every explicit marker is ruled out
            policy = AmbientScope()
        else:
            policy = NoDefault()

        return ParamSpec(
            name=param.name,
            declared_type=param.type_ref,
            default_policy=policy,
            is_invalidation_key=any(m.kind is MarkerKind.INVALIDATION_KEY for m in param.markers),
            saveable_key=next(iter(persisted_keys), None),
        )

    def _policy_from_marker(self, marker: Marker, class_name: str, param_name: str) -> DefaultPolicy:
        match marker.kind:
            case MarkerKind.LITERAL_VALUE:
                if marker.value is None:
                    raise DeclarationError(class_name, "literal-value marker needs a value", param_name)
                return LiteralValue(expression=marker.value)
            case MarkerKind.FRAMEWORK_INJECT:
                return FrameworkInject(args=marker.args)
            case MarkerKind.NAMED_INJECT:
                return NamedInject(args=marker.args)
            case MarkerKind.CUSTOM_PROVIDE:
                return CustomProvide(provider_name=marker.value or "", args=marker.args)
            case MarkerKind.AMBIENT_SCOPE:
                return AmbientScope()
        raise DeclarationError(class_name, f"marker {marker.kind.value} is not a default policy", param_name)
