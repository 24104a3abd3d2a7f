"""
Black formatter for generated Python code.
"""

from __future__ import annotations

import logging

import black

from ..config import FormatterConfig
from .base import Formatter

logger = logging.getLogger(__name__)


class BlackFormatter(Formatter):
    """Formatter using black for Python code."""

    LANGUAGE = "python"

    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format Python code using black.

        Args:
            code: Python source code to format
            config: Formatter configuration

        Returns:
            Formatted code, or the input unchanged if black rejects it
        """
        target_versions = set()
        if config.target_version:
            target = getattr(black.TargetVersion, config.target_version.upper(), None)
            if target is None:
                logger.warning("Unknown black target version %s, using black's default", config.target_version)
            else:
                target_versions.add(target)

        mode = black.Mode(
            target_versions=target_versions,
            line_length=config.line_length,
            string_normalization=config.string_normalization,
            magic_trailing_comma=config.magic_trailing_comma,
        )

        try:
            return black.format_str(code, mode=mode)
        except black.InvalidInput as e:
            logger.warning("black could not format generated code: %s", e)
            return code
