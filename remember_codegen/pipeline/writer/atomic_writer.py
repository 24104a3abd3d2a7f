"""
Atomic file writer for generated units.

Ensures that file writes are atomic so an interrupted run never leaves a
half-written source file behind.
"""

from __future__ import annotations

import ast
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..errors import OutputValidationError


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(
        self,
        validate_python: Callable[[str], None] | None = None,
        validate_kotlin: Callable[[str], None] | None = None,
    ):
        """Initialize the atomic writer.

        Args:
            validate_python: Optional validation function for Python code
            validate_kotlin: Optional validation function for Kotlin code
        """
        self._validate_python = validate_python or self._default_validate_python
        self._validate_kotlin = validate_kotlin or self._default_validate_kotlin

    def write(
        self,
        path: Path,
        content: str,
        language: str,
        validate: bool = True,
    ) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation ("python" or "kotlin")
            validate: Whether to validate before finalizing

        Raises:
            OutputValidationError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self.validate(content, language)

            temp_path.replace(path)

        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

    def validate(self, content: str, language: str) -> None:
        """Validate content based on language.

        Args:
            content: The content to validate
            language: The language ("python" or "kotlin")

        Raises:
            OutputValidationError: If validation fails
        """
        if language == "python":
            self._validate_python(content)
        elif language == "kotlin":
            self._validate_kotlin(content)

    def _default_validate_python(self, content: str) -> None:
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise OutputValidationError(f"Generated Python code is not valid: {e}") from e

        if "def " not in content:
            raise OutputValidationError("Generated Python code has no function definitions")

    def _default_validate_kotlin(self, content: str) -> None:
        # Basic structural checks, there is no Kotlin parser here
        if "fun " not in content:
            raise OutputValidationError("Generated Kotlin code has no function definitions")

        # Check for balanced braces (simple heuristic)
        open_braces = content.count("{")
        close_braces = content.count("}")
        if open_braces != close_braces:
            raise OutputValidationError(f"Generated Kotlin code has unbalanced braces: {open_braces} open, {close_braces} close")
