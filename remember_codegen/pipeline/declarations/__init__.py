"""
Declaration adapters.

Translate a front-end's view of annotated types (JSON documents or
Python source) into the declaration model consumed by the analyzer.
"""

from __future__ import annotations

from .json_adapter import JsonDeclarationAdapter, ParsedDeclarations
from .nodes import (
    DEFAULT_POLICY_MARKERS,
    Marker,
    MarkerKind,
    ParamDecl,
    PropertyDecl,
    TypeDecl,
    TypeRef,
)
from .python_adapter import PythonSourceAdapter, module_name_for
from .type_parser import TypeParseError, parse_type

__all__ = [
    "DEFAULT_POLICY_MARKERS",
    "JsonDeclarationAdapter",
    "Marker",
    "MarkerKind",
    "ParamDecl",
    "ParsedDeclarations",
    "PropertyDecl",
    "PythonSourceAdapter",
    "TypeDecl",
    "TypeParseError",
    "TypeRef",
    "module_name_for",
    "parse_type",
]
