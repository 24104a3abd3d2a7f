"""
Parser for type descriptors written in generic notation.

Accepts strings such as ``Int``, ``kotlin.collections.List<String>?`` or
``Map<String, List<app.model.User?>>`` and builds a ``TypeRef``.
"""

from __future__ import annotations

import re

from .nodes import TypeRef

_TOKEN_PATTERN = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_.]*|[<>,?*])")


class TypeParseError(ValueError):
    """Raised when a type string is not valid generic notation."""


class TypeParser:
    """Recursive-descent parser for generic type notation."""

    def parse(self, text: str) -> TypeRef:
        """
        Parse a type string.

        Args:
            text: Type in generic notation

        Returns:
            The parsed TypeRef

        Raises:
            TypeParseError: If the string is malformed
        """
        self._tokens = self._tokenize(text)
        self._pos = 0
        self._text = text

        type_ref = self._parse_type()
        if self._pos != len(self._tokens):
            raise TypeParseError(f"Unexpected '{self._tokens[self._pos]}' in type '{text}'")
        return type_ref

    def _tokenize(self, text: str) -> list[str]:
        tokens = []
        pos = 0
        stripped = text.rstrip()
        while pos < len(stripped):
            match = _TOKEN_PATTERN.match(stripped, pos)
            if not match:
                raise TypeParseError(f"Invalid character at offset {pos} in type '{text}'")
            tokens.append(match.group(1))
            pos = match.end()
        if not tokens:
            raise TypeParseError("Empty type")
        return tokens

    def _peek(self) -> str | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _expect(self, token: str) -> None:
        if self._peek() != token:
            raise TypeParseError(f"Expected '{token}' in type '{self._text}'")
        self._pos += 1

    def _parse_type(self) -> TypeRef:
        token = self._peek()
        if token is None or not (token[0].isalpha() or token[0] == "_" or token == "*"):
            raise TypeParseError(f"Expected a type name in '{self._text}'")
        self._pos += 1

        # Star projection (List<*>)
        if token == "*":
            return TypeRef(name="*")

        module, _, name = token.rpartition(".")

        type_args: list[TypeRef] = []
        if self._peek() == "<":
            self._pos += 1
            type_args.append(self._parse_type())
            while self._peek() == ",":
                self._pos += 1
                type_args.append(self._parse_type())
            self._expect(">")

        nullable = False
        if self._peek() == "?":
            self._pos += 1
            nullable = True

        return TypeRef(name=name, module=module or None, type_args=tuple(type_args), nullable=nullable)


def parse_type(text: str) -> TypeRef:
    """Convenience function to parse a single type string."""
    return TypeParser().parse(text)
