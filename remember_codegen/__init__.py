"""Remember Codegen

A Python package for generating memoized construction functions from
annotated class declarations. Supports Kotlin (Jetpack Compose) and
Python output, with optional state persistence through map-based savers.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    FormatterConfig,
    GenerationResult,
    InjectionMode,
    OutputConfig,
    OutputMode,
    OutputWriter,
    PipelineGenerator,
)

__all__ = [
    "PipelineGenerator",
    "GenerationResult",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "InjectionMode",
    "OutputConfig",
    "OutputMode",
    "OutputWriter",
    "AtomicWriter",
]
