"""
Configuration for the code generator pipeline.

Run-wide options are passed explicitly into the generator; nothing is
read from global state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class InjectionMode(str, Enum):
    """Whether framework injection calls may be emitted."""

    NONE = "none"  # Only class-level injectors resolve injection defaults
    FRAMEWORK_CALL = "framework_call"  # Emit calls into the injection framework


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    FORCE = "force"  # Default: overwrite (unchanged files are left untouched)
    ERROR_IF_EXISTS = "error"  # Raise error if file exists


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to validate code before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.FORCE
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for post-processing formatters (Python output only)."""

    # Whether formatting is enabled
    enabled: bool = False

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312", "py313")
    target_version: str = "py312"

    # Whether to use string normalization (convert single quotes to double)
    string_normalization: bool = True

    # Whether to honor magic trailing commas
    magic_trailing_comma: bool = True


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Whether FrameworkInject defaults (and NamedInject without injector) can be resolved
    injection_mode: InjectionMode = InjectionMode.NONE

    # Type that receives the ambient scope default; a dotted name matches the qualified type
    ambient_scope_type: str = "CoroutineScope"

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Append a timestamp comment at the end of each file
    include_timestamp: bool = False

    # Visibility modifier of generated Kotlin functions ("" for public)
    kotlin_visibility: str = "internal"

    # Module providing remember, remember_saveable, map_saver and remember_coroutine_scope
    python_runtime_module: str = "remember_runtime"

    # Module providing the framework inject function for Python output
    python_injection_module: str = "remember_runtime"

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.FORCE)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif k == "injection_mode":
                config.injection_mode = InjectionMode(v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "injection_mode": self.injection_mode.value,
            "ambient_scope_type": self.ambient_scope_type,
            "add_generation_comment": self.add_generation_comment,
            "include_timestamp": self.include_timestamp,
            "kotlin_visibility": self.kotlin_visibility,
            "python_runtime_module": self.python_runtime_module,
            "python_injection_module": self.python_injection_module,
            "formatter": {
                "enabled": self.formatter.enabled,
                "line_length": self.formatter.line_length,
                "target_version": self.formatter.target_version,
                "string_normalization": self.formatter.string_normalization,
                "magic_trailing_comma": self.formatter.magic_trailing_comma,
            },
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
