"""
Output writing for generated units.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .output_writer import OutputWriter, WriteReport

__all__ = [
    "AtomicWriter",
    "OutputWriter",
    "WriteReport",
]
