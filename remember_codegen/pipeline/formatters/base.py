"""
Base class for code formatters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import FormatterConfig


class Formatter(ABC):
    """Abstract base class for code formatters."""

    # Backend language the formatter applies to
    LANGUAGE: str = ""

    @abstractmethod
    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format the given code.

        Args:
            code: The source code to format
            config: Formatter configuration

        Returns:
            Formatted code
        """

    def applies_to(self, language: str) -> bool:
        return language == self.LANGUAGE
