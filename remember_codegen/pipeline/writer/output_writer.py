"""
Output writer.

Persists generated units under an output root, one file per unit, in the
directory of the unit's namespace.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..backends.base import GeneratedUnit
from ..config import CodeGeneratorConfig, OutputMode
from .atomic_writer import AtomicWriter

logger = logging.getLogger(__name__)


@dataclass
class WriteReport:
    """Paths touched by one write call."""

    written: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)


class OutputWriter:
    """Writes generated units to disk according to the output configuration."""

    def __init__(self, config: CodeGeneratorConfig, atomic_writer: AtomicWriter | None = None):
        self.config = config
        self.atomic_writer = atomic_writer or AtomicWriter()

    def target_path(self, unit: GeneratedUnit, root: Path) -> Path:
        return Path(root).joinpath(*unit.relative_path.parts)

    def write(self, units: list[GeneratedUnit], root: Path) -> WriteReport:
        """
        Write units below an output root.

        Files whose content is already up to date are left untouched.

        Args:
            units: Units to write
            root: Output root directory

        Returns:
            Report of written and unchanged paths

        Raises:
            FileExistsError: If a target exists and the mode is ERROR_IF_EXISTS
            OutputValidationError: If a unit fails validation
            ValueError: If two units map to the same path
        """
        output = self.config.output
        targets = [(unit, self.target_path(unit, root)) for unit in units]

        seen: dict[Path, str] = {}
        for unit, path in targets:
            if path in seen:
                raise ValueError(f"{unit.class_name} and {seen[path]} both generate {path}")
            seen[path] = unit.class_name

        if output.mode == OutputMode.ERROR_IF_EXISTS:
            for _, path in targets:
                if path.exists():
                    raise FileExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")

        report = WriteReport()
        for unit, path in targets:
            if path.is_file() and path.read_text(encoding="utf-8") == unit.content:
                logger.debug("Unchanged %s", path)
                report.unchanged.append(path)
                continue

            if output.atomic_write:
                self.atomic_writer.write(path, unit.content, unit.language, validate=output.validate_before_write)
            else:
                if output.validate_before_write:
                    self.atomic_writer.validate(unit.content, unit.language)
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(unit.content, encoding="utf-8")

            logger.info("Wrote %s", path)
            report.written.append(path)

        return report
