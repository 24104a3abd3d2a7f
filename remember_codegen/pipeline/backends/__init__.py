"""
Code generation backends.

Contains host-language code generators.
"""

from __future__ import annotations

from ..config import CodeGeneratorConfig
from .base import CodeBackend, GeneratedUnit
from .kotlin_backend import KotlinBackend
from .python_backend import PythonBackend

BACKENDS: dict[str, type[CodeBackend]] = {
    "kotlin": KotlinBackend,
    "python": PythonBackend,
}


def get_backend(language: str, config: CodeGeneratorConfig) -> CodeBackend:
    """
    Create the backend for a language.

    Args:
        language: "kotlin" or "python"
        config: Code generation configuration

    Returns:
        The backend instance

    Raises:
        ValueError: If the language is not supported
    """
    try:
        backend_class = BACKENDS[language]
    except KeyError:
        raise ValueError(f"Unsupported language: {language}. Expected one of {', '.join(sorted(BACKENDS))}") from None
    return backend_class(config)


__all__ = [
    "BACKENDS",
    "CodeBackend",
    "GeneratedUnit",
    "KotlinBackend",
    "PythonBackend",
    "get_backend",
]
