"""
Analyzer module.

Contains metadata extraction, consistency validation and default
resolution.
"""

from __future__ import annotations

from .extractor import MetadataExtractor, is_ambient_scope_type
from .model import (
    NO_DEFAULT,
    AmbientScope,
    ClassModel,
    CustomProvide,
    DefaultKind,
    DefaultPolicy,
    FrameworkInject,
    LiteralValue,
    NamedInject,
    NoDefault,
    ParamSpec,
    PropertySaveSpec,
    ResolvedDefault,
)
from .resolver import DefaultStrategyResolver, ExpressionSyntax
from .validator import ConsistencyValidator

__all__ = [
    "NO_DEFAULT",
    "AmbientScope",
    "ClassModel",
    "ConsistencyValidator",
    "CustomProvide",
    "DefaultKind",
    "DefaultPolicy",
    "DefaultStrategyResolver",
    "ExpressionSyntax",
    "FrameworkInject",
    "LiteralValue",
    "MetadataExtractor",
    "NamedInject",
    "NoDefault",
    "ParamSpec",
    "PropertySaveSpec",
    "ResolvedDefault",
    "is_ambient_scope_type",
]
