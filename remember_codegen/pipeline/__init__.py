"""
Pipeline - annotated classes to memoized construction functions.

This module provides a multi-phase architecture for generating remember
functions from annotated class declarations:

1. Phase 1 (Declarations): Read JSON documents or Python source into declarations
2. Phase 2 (Extractor): Build a class model with one default policy per parameter
3. Phase 3 (Validator): Check keys, injection, providers and ambient scope usage
4. Phase 4 (Backend): Resolve defaults and render factory/persistence units
5. Phase 5 (Formatter): Optional post-processing (black for Python)
6. Phase 6 (Writer): Atomically write units into their namespace directories
"""

from __future__ import annotations

from .backends import GeneratedUnit, get_backend
from .config import CodeGeneratorConfig, FormatterConfig, InjectionMode, OutputConfig, OutputMode
from .errors import GenerationError, OutputValidationError
from .generator import GenerationResult, PipelineGenerator, load_declarations, strip_generation_timestamp
from .writer import AtomicWriter, OutputWriter

__all__ = [
    "PipelineGenerator",
    "GenerationResult",
    "GeneratedUnit",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "InjectionMode",
    "OutputConfig",
    "OutputMode",
    "GenerationError",
    "OutputValidationError",
    "AtomicWriter",
    "OutputWriter",
    "get_backend",
    "load_declarations",
    "strip_generation_timestamp",
]
