"""
Consistency validator for class models.

Checks the cross-cutting invariants of a class model before anything is
emitted. The first failing check raises; no partial generation happens.
"""

from __future__ import annotations

from collections import Counter

from ..config import CodeGeneratorConfig, InjectionMode
from ..errors import (
    InvalidAmbientScopeUsage,
    MissingProviderName,
    MissingSaveableProperty,
    SaveableKeyMismatch,
    UnresolvableDefault,
)
from .extractor import is_ambient_scope_type
from .model import AmbientScope, ClassModel, CustomProvide, FrameworkInject, NamedInject


class ConsistencyValidator:
    """Validates a ClassModel."""

    def __init__(self, config: CodeGeneratorConfig):
        self.config = config

    def validate(self, model: ClassModel) -> ClassModel:
        """
        Validate a class model.

        Args:
            model: The extracted class model

        Returns:
            The same, unchanged model

        Raises:
            GenerationError: The first failed check
        """
        if model.persistence:
            self._check_saveable_keys(model)
        self._check_injection(model)
        self._check_providers(model)
        self._check_ambient_scope(model)
        return model

    def _check_saveable_keys(self, model: ClassModel) -> None:
        property_keys = Counter(prop.saveable_key for prop in model.saveable_properties)

        for param in model.saved_params:
            if param.saveable_key not in property_keys:
                raise MissingSaveableProperty(
                    model.qualified_name,
                    f"no property is persisted under key '{param.saveable_key}'",
                    param.name,
                )

        param_keys = Counter(param.saveable_key for param in model.saved_params)
        if param_keys != property_keys:
            # Report the first key whose counts differ, in declaration order
            keys = [param.saveable_key for param in model.saved_params]
            keys += [prop.saveable_key for prop in model.saveable_properties]
            key = next(k for k in keys if param_keys[k] != property_keys[k])
            member = next((prop.name for prop in model.saveable_properties if prop.saveable_key == key), None)
            raise SaveableKeyMismatch(
                model.qualified_name,
                f"key '{key}' is used by {param_keys[key]} parameter(s) and {property_keys[key]} property(ies)",
                member,
            )

    def _check_injection(self, model: ClassModel) -> None:
        framework = model.injection_mode is InjectionMode.FRAMEWORK_CALL
        for param in model.params:
            policy = param.default_policy
            if isinstance(policy, NamedInject) and not model.injector_name and not framework:
                raise UnresolvableDefault(
                    model.qualified_name,
                    "named injection needs a class-level injector or framework injection",
                    param.name,
                )
            if isinstance(policy, FrameworkInject) and not framework:
                raise UnresolvableDefault(
                    model.qualified_name,
                    "framework injection is disabled for this class",
                    param.name,
                )

    def _check_providers(self, model: ClassModel) -> None:
        for param in model.params:
            policy = param.default_policy
            if isinstance(policy, CustomProvide) and not policy.provider_name.strip():
                raise MissingProviderName(model.qualified_name, "custom-provide marker needs a provider function", param.name)

    def _check_ambient_scope(self, model: ClassModel) -> None:
        for param in model.params:
            if not isinstance(param.default_policy, AmbientScope):
                continue
            if not is_ambient_scope_type(param.declared_type, self.config.ambient_scope_type):
                raise InvalidAmbientScopeUsage(
                    model.qualified_name,
                    f"ambient scope default on a parameter that is not a {self.config.ambient_scope_type}",
                    param.name,
                )
            if model.persistence and param.saveable_key is not None:
                raise InvalidAmbientScopeUsage(model.qualified_name, "the ambient scope cannot be persisted", param.name)
