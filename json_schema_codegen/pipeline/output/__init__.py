"""
Output module.

Target file names and the resolvers that turn them into text sinks.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .router import FileOutputResolver, OutputCapture, OutputResolver, TargetFileName

__all__ = [
    "AtomicWriter",
    "FileOutputResolver",
    "OutputCapture",
    "OutputResolver",
    "TargetFileName",
]
