"""
Atomic file writer for generated sources.

Ensures that file writes are atomic, so an interrupted run never leaves a
half-written class file behind.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class AtomicWriter:
    """Handles atomic file writes.

    Uses a two-phase approach:
    1. Write to a temporary file in the same directory
    2. Atomically replace the target file
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def write(self, path: Path, content: str) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write

        Raises:
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory keeps the rename on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding=self.encoding, newline="\n") as f:
                f.write(content)
            temp_path.replace(path)
        except BaseException:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    logger.warning("Could not remove temporary file %s", temp_path)
            raise
        logger.debug("Wrote %s", path)
