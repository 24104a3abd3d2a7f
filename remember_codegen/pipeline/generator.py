"""
Pipeline generator.

Runs every annotated class through extraction, validation, default
resolution and emission. Classes are independent: a failing class is
reported and skipped while the others are still generated.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path, PurePosixPath

from .. import __version__
from .analyzer import ConsistencyValidator, MetadataExtractor
from .backends import CodeBackend, GeneratedUnit, get_backend
from .config import CodeGeneratorConfig
from .declarations import JsonDeclarationAdapter, ParsedDeclarations, PythonSourceAdapter, TypeDecl
from .errors import GenerationError, OutputCollision
from .formatters import BlackFormatter, Formatter

logger = logging.getLogger(__name__)

TIMESTAMP_PREFIX = "Generated at "

_TIMESTAMP_LINE = re.compile(rf"\n*^(//|#) {TIMESTAMP_PREFIX}.*$\n?", re.MULTILINE)


def strip_generation_timestamp(content: str) -> str:
    """Remove the timestamp footer so two generated texts can be compared."""
    stripped = _TIMESTAMP_LINE.sub("\n", content)
    return stripped.rstrip("\n") + "\n"


def load_declarations(paths: Iterable[Path]) -> ParsedDeclarations:
    """
    Read declarations from input files, choosing the adapter by extension.

    Args:
        paths: .json declaration documents and/or .py source files

    Returns:
        All parsed declarations and per-declaration errors
    """
    json_adapter = JsonDeclarationAdapter()
    python_adapter = PythonSourceAdapter()

    result = ParsedDeclarations()
    for path in paths:
        path = Path(path)
        if path.suffix == ".py":
            result.extend(python_adapter.parse_file(path))
        else:
            result.extend(json_adapter.parse_file(path))
    return result


@dataclass
class GenerationResult:
    """Outcome of one generation run.

    Attributes:
        units: Generated units of every class that succeeded
        failures: One error per class that failed
    """

    units: list[GeneratedUnit] = field(default_factory=list)
    failures: list[GenerationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class PipelineGenerator:
    """
    Generator that turns annotated class declarations into source units.

    Phases per class:
    1. Extract: declaration -> ClassModel (policy per parameter)
    2. Validate: cross-cutting consistency checks
    3. Resolve + emit: factory unit, plus persistence unit in persistence mode
    4. Format: optional black pass on Python output
    """

    def __init__(
        self,
        config: CodeGeneratorConfig | None = None,
        language: str = "kotlin",
        command_line: str = "remember_codegen",
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the generator.

        Args:
            config: Code generation configuration
            language: Target language ("kotlin" or "python")
            command_line: Command line recorded in the generation comment
            clock: Source of the timestamp when include_timestamp is on
        """
        self.config = config or CodeGeneratorConfig()
        self.language = language
        self.command_line = command_line
        self.clock = clock

        self.backend: CodeBackend = get_backend(language, self.config)
        self.extractor = MetadataExtractor(self.config)
        self.validator = ConsistencyValidator(self.config)
        self.formatters: list[Formatter] = [BlackFormatter()]

    def generate(self, declarations: Iterable[TypeDecl]) -> GenerationResult:
        """
        Generate units for every declaration.

        Args:
            declarations: Annotated class declarations

        Returns:
            The generated units and per-class failures
        """
        result = GenerationResult()
        owners: dict[PurePosixPath, str] = {}
        for decl in declarations:
            try:
                units = self.generate_class(decl)
                self._claim_outputs(units, owners)
            except GenerationError as e:
                e.source = e.source or decl.source or None
                logger.error("%s", e)
                result.failures.append(e)
                continue
            result.units.extend(units)
        return result

    def generate_class(self, decl: TypeDecl) -> list[GeneratedUnit]:
        """
        Generate the units of one class.

        Args:
            decl: The annotated class declaration

        Returns:
            The factory unit, followed by the persistence unit in persistence mode

        Raises:
            GenerationError: If the class cannot be generated
        """
        logger.debug("Generating %s", decl.qualified_name)
        model = self.validator.validate(self.extractor.extract(decl))

        header = self._generation_comment()
        footer = self._timestamp_comment()

        units = [self.backend.render_factory(model, header, footer)]
        if model.persistence:
            units.append(self.backend.render_persistence(model, header, footer))

        return [self._format(unit) for unit in units]

    def _claim_outputs(self, units: list[GeneratedUnit], owners: dict[PurePosixPath, str]) -> None:
        """Record the files of one class, refusing any another class already generates."""
        for unit in units:
            owner = owners.get(unit.relative_path)
            if owner is not None:
                raise OutputCollision(unit.class_name, f"{unit.relative_path} is already generated for {owner}")
        owners.update((unit.relative_path, unit.class_name) for unit in units)

    def _generation_comment(self) -> str:
        if not self.config.add_generation_comment:
            return ""
        return self.backend.comment(f"Generated by remember_codegen v{__version__} : {self.command_line}")

    def _timestamp_comment(self) -> str:
        if not self.config.include_timestamp:
            return ""
        return self.backend.comment(f"{TIMESTAMP_PREFIX}{self.clock().isoformat(timespec='seconds')}")

    def _format(self, unit: GeneratedUnit) -> GeneratedUnit:
        if not self.config.formatter.enabled:
            return unit

        content = unit.content
        for formatter in self.formatters:
            if formatter.applies_to(unit.language):
                content = formatter.format(content, self.config.formatter)

        if content == unit.content:
            return unit
        return replace(unit, content=content)
