"""
Configuration for the code generator pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum


class TargetLanguage(str, Enum):
    """Target language, selecting the emission backend."""

    KOTLIN = "kotlin"
    JAVA = "java"
    PYTHON = "python"

    @property
    def suffix(self) -> str:
        return {"kotlin": "kt", "java": "java", "python": "py"}[self.value]


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Package / namespace applied to every generated class
    base_package: str = ""

    # Directory handed to the output resolver as the root of all targets
    base_directory: str = "."

    # Derive output sub-directories from the package ("com.example" -> com/example)
    derive_directories: bool = True

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Container members never rendered (they are still built when referenced)
    ignore_classes: list[str] = field(default_factory=list)

    # Emit constructor / initializer guards for validation keywords
    add_validation: bool = True

    @property
    def package_dirs(self) -> tuple[str, ...]:
        if not self.derive_directories or not self.base_package:
            return ()
        return tuple(self.base_package.split("."))

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k in {f.name for f in fields(config)}:
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "base_package": self.base_package,
            "base_directory": self.base_directory,
            "derive_directories": self.derive_directories,
            "add_generation_comment": self.add_generation_comment,
            "ignore_classes": self.ignore_classes,
            "add_validation": self.add_validation,
        }
