"""
Pipeline - JSON Schema to typed classes generator.

This module provides a multi-phase architecture for generating one source
file per class from JSON schemas:

1. Phase 1 (Schema AST): Read JSON / YAML into a generic node tree
2. Phase 2 (Analyzer): Resolve references and build the class model graph
3. Phase 3 (Validator): Translate validation keywords into ordered guards
4. Phase 4 (Backend): Render each top-level class with jinja2 templates
5. Phase 5 (Output): Hand the text to an injected output resolver
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, TargetLanguage
from .errors import (
    CodeGenerationError,
    CyclicReference,
    UnresolvedReference,
    UnsupportedSchemaConstruct,
    UnsupportedTargetConstruct,
)
from .generator import CodeGenerator
from .output import AtomicWriter, FileOutputResolver, OutputCapture, OutputResolver, TargetFileName

__all__ = [
    "CodeGenerator",
    "CodeGeneratorConfig",
    "TargetLanguage",
    "CodeGenerationError",
    "CyclicReference",
    "UnresolvedReference",
    "UnsupportedSchemaConstruct",
    "UnsupportedTargetConstruct",
    "AtomicWriter",
    "FileOutputResolver",
    "OutputCapture",
    "OutputResolver",
    "TargetFileName",
]
