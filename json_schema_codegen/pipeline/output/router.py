"""
Output routing for generated files.

The generator never opens files itself: it asks an output resolver for a
text sink per TargetFileName. FileOutputResolver writes to disk,
OutputCapture keeps everything in memory.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from .atomic_writer import AtomicWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetFileName:
    """Where one generated class goes."""

    name: str
    extension: str
    dirs: tuple[str, ...] = ()
    base_directory: str = "."

    @property
    def file_name(self) -> str:
        return f"{self.name}.{self.extension}"

    @property
    def relative_path(self) -> Path:
        return Path(*self.dirs, self.file_name)

    @property
    def path(self) -> Path:
        return Path(self.base_directory) / self.relative_path

    def __str__(self) -> str:
        return str(self.path)


OutputResolver = Callable[[TargetFileName], AbstractContextManager[TextIO]]


class FileOutputResolver:
    """Resolve targets to files under their base directory, written atomically."""

    def __init__(self, atomic_writer: AtomicWriter | None = None):
        self.atomic_writer = atomic_writer or AtomicWriter()

    @contextmanager
    def __call__(self, target: TargetFileName) -> Iterator[TextIO]:
        buffer = io.StringIO()
        yield buffer
        self.atomic_writer.write(target.path, buffer.getvalue())
        logger.info("Generated %s", target.path)


class OutputCapture:
    """In-memory output resolver; a target that was never written reads as ""."""

    def __init__(self):
        self.outputs: dict[TargetFileName, str] = {}

    @contextmanager
    def __call__(self, target: TargetFileName) -> Iterator[TextIO]:
        buffer = io.StringIO()
        yield buffer
        self.outputs[target] = buffer.getvalue()

    def __getitem__(self, target: TargetFileName) -> str:
        return self.outputs.get(target, "")

    def __contains__(self, target: TargetFileName) -> bool:
        return target in self.outputs

    @property
    def targets(self) -> list[TargetFileName]:
        return list(self.outputs)

    def by_name(self, name: str) -> str:
        """Captured text of the first target with the given class name, or ""."""
        for target, text in self.outputs.items():
            if target.name == name:
                return text
        return ""
