"""
Errors raised by the generation pipeline.

Each error is tied to a single annotated class. The generator catches
them per class, so one broken declaration never stops the others from
being generated, but the run as a whole is reported as failed.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for all per-class generation failures.

    Attributes:
        class_name: Qualified name of the offending class
        member: Parameter or property name, when the error is about one
        message: Human readable description
        source: File the declaration was read from, when known
    """

    def __init__(self, class_name: str, message: str, member: str | None = None, source: str | None = None):
        self.class_name = class_name
        self.member = member
        self.message = message
        self.source = source
        super().__init__(class_name, message)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        location = self.class_name if self.member is None else f"{self.class_name}.{self.member}"
        text = f"{self.kind} in {location}: {self.message}"
        return f"{text} ({self.source})" if self.source else text


class DeclarationError(GenerationError):
    """Raised when an adapter cannot read a declaration (malformed input)."""


class ConflictingDefaultPolicy(GenerationError):
    """Raised when a parameter carries more than one default-value marker."""


class UnresolvableDefault(GenerationError):
    """Raised when an injection default has neither an injector nor framework injection."""


class MissingProviderName(GenerationError):
    """Raised when a custom-provide marker has no provider function name."""


class SaveableKeyMismatch(GenerationError):
    """Raised when parameter and property saveable keys differ as multisets."""


class MissingSaveableProperty(GenerationError):
    """Raised when a saveable parameter key has no property carrying the same key."""


class InvalidAmbientScopeUsage(GenerationError):
    """Raised when the ambient scope is requested or persisted where it cannot be."""


class OutputCollision(GenerationError):
    """Raised when a class would generate a file another class already generates."""


class OutputValidationError(Exception):
    """Raised when generated text fails validation before it is written.

    This can happen when:
    - Generated Python code cannot be parsed
    - Generated Kotlin code has unbalanced braces or no function definition
    """

    pass
