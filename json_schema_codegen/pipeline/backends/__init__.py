"""
Code generation backends.

Contains language-specific code generators.
"""

from __future__ import annotations

from ..config import CodeGeneratorConfig, TargetLanguage
from .base import CodeBackend
from .java_backend import JavaBackend
from .kotlin_backend import KotlinBackend
from .python_backend import PythonBackend

BACKENDS: dict[TargetLanguage, type[CodeBackend]] = {
    TargetLanguage.KOTLIN: KotlinBackend,
    TargetLanguage.JAVA: JavaBackend,
    TargetLanguage.PYTHON: PythonBackend,
}


def get_backend(language: TargetLanguage | str, config: CodeGeneratorConfig) -> CodeBackend:
    """Create the backend for a target language."""
    return BACKENDS[TargetLanguage(language)](config)


__all__ = [
    "BACKENDS",
    "CodeBackend",
    "KotlinBackend",
    "JavaBackend",
    "PythonBackend",
    "get_backend",
]
