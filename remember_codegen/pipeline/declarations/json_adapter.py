"""
JSON declaration adapter.

Phase 1 of the pipeline for JSON input: read a declaration document into
the declaration model without deciding any default-value policy.

Document shape::

    {
      "declarations": [
        {
          "name": "CounterState",
          "namespace": "com.example.counter",
          "persistence": true,
          "injector": "injectClass",
          "params": [
            {"name": "initialIndex", "type": "Int",
             "markers": [{"type": "literal-value", "value": "10"}, "invalidation-key"]}
          ],
          "properties": [
            {"name": "index", "type": "Int",
             "markers": [{"type": "persisted-key", "key": "index"}]}
          ]
        }
      ]
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import DeclarationError
from .nodes import Marker, MarkerKind, ParamDecl, PropertyDecl, TypeDecl, TypeRef
from .type_parser import TypeParseError, parse_type


@dataclass
class ParsedDeclarations:
    """Declarations read by an adapter, plus the ones it could not read."""

    declarations: list[TypeDecl] = field(default_factory=list)
    errors: list[DeclarationError] = field(default_factory=list)

    def extend(self, other: ParsedDeclarations) -> None:
        self.declarations.extend(other.declarations)
        self.errors.extend(other.errors)


class JsonDeclarationAdapter:
    """Reads JSON declaration documents into TypeDecl nodes."""

    # Payload key used by each marker kind, besides "args"
    VALUE_KEYS = {
        MarkerKind.LITERAL_VALUE: "value",
        MarkerKind.CUSTOM_PROVIDE: "provider",
        MarkerKind.PERSISTED_KEY: "key",
    }

    def parse_file(self, path: Path) -> ParsedDeclarations:
        """
        Read a JSON declaration file.

        Args:
            path: Path to the document

        Returns:
            The parsed declarations and per-declaration errors
        """
        with open(path, encoding="utf-8") as f:
            try:
                document = json.load(f)
            except json.JSONDecodeError as e:
                result = ParsedDeclarations()
                result.errors.append(DeclarationError(str(path), f"invalid JSON: {e}"))
                return result
        return self.parse(document, source=str(path))

    def parse(self, document: Any, source: str = "<memory>") -> ParsedDeclarations:
        """
        Parse an already loaded declaration document.

        Args:
            document: Either {"declarations": [...]} or a bare list
            source: Where the document came from

        Returns:
            The parsed declarations and per-declaration errors
        """
        result = ParsedDeclarations()

        if isinstance(document, dict):
            entries = document.get("declarations", [])
        else:
            entries = document

        if not isinstance(entries, list):
            result.errors.append(DeclarationError(source, "expected a list of declarations"))
            return result

        for index, entry in enumerate(entries):
            try:
                result.declarations.append(self._parse_declaration(entry, source, index))
            except DeclarationError as e:
                e.source = e.source or source
                result.errors.append(e)

        return result

    def _parse_declaration(self, entry: Any, source: str, index: int) -> TypeDecl:
        if not isinstance(entry, dict) or not entry.get("name"):
            raise DeclarationError(f"declaration {index}", "declaration must be an object with a 'name'")

        decl = TypeDecl(
            name=entry["name"],
            namespace=entry.get("namespace") or "",
            persistence=bool(entry.get("persistence", False)),
            injector=entry.get("injector") or None,
            injection_mode=entry.get("injection_mode"),
            source=source,
        )
        class_name = decl.qualified_name

        for param in entry.get("params", []):
            name = self._require_name(param, class_name, "parameter")
            decl.params.append(
                ParamDecl(
                    name=name,
                    type_ref=self._parse_type(param.get("type"), class_name, name),
                    markers=self._parse_markers(param.get("markers", []), class_name, name),
                )
            )

        for prop in entry.get("properties", []):
            name = self._require_name(prop, class_name, "property")
            type_ref = self._parse_type(prop["type"], class_name, name) if prop.get("type") else None
            decl.properties.append(
                PropertyDecl(
                    name=name,
                    type_ref=type_ref,
                    markers=self._parse_markers(prop.get("markers", []), class_name, name),
                )
            )

        return decl

    def _require_name(self, entry: Any, class_name: str, what: str) -> str:
        if not isinstance(entry, dict) or not entry.get("name"):
            raise DeclarationError(class_name, f"every {what} must be an object with a 'name'")
        return entry["name"]

    def _parse_type(self, value: Any, class_name: str, member: str) -> TypeRef:
        """Parse a type given as a string or as an object."""
        if isinstance(value, str):
            try:
                return parse_type(value)
            except TypeParseError as e:
                raise DeclarationError(class_name, str(e), member) from e

        if isinstance(value, dict) and value.get("name"):
            return TypeRef(
                name=value["name"],
                module=value.get("module") or None,
                type_args=tuple(self._parse_type(arg, class_name, member) for arg in value.get("args", [])),
                nullable=bool(value.get("nullable", False)),
            )

        raise DeclarationError(class_name, "missing or malformed 'type'", member)

    def _parse_markers(self, values: list[Any], class_name: str, member: str) -> list[Marker]:
        return [self._parse_marker(value, class_name, member) for value in values]

    def _parse_marker(self, value: Any, class_name: str, member: str) -> Marker:
        """Parse a marker given as a bare kind string or as an object."""
        if isinstance(value, str):
            value = {"type": value}

        if not isinstance(value, dict):
            raise DeclarationError(class_name, f"malformed marker {value!r}", member)

        try:
            kind = MarkerKind(value.get("type"))
        except ValueError:
            raise DeclarationError(class_name, f"unknown marker type {value.get('type')!r}", member) from None

        payload = value.get(self.VALUE_KEYS.get(kind, "value"))
        if payload is not None:
            payload = str(payload)

        args = value.get("args", [])
        if not isinstance(args, list):
            raise DeclarationError(class_name, "marker 'args' must be a list", member)

        return Marker(kind=kind, value=payload, args=tuple(str(arg) for arg in args))
