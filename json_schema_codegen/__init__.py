"""JSON Schema Code Generator

A Python package for generating validated data classes from JSON Schema
documents and Swagger / OpenAPI definitions. Supports Kotlin, Java and
Python, one file per class.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    CodeGenerationError,
    CodeGenerator,
    CodeGeneratorConfig,
    CyclicReference,
    FileOutputResolver,
    OutputCapture,
    TargetFileName,
    TargetLanguage,
    UnresolvedReference,
    UnsupportedSchemaConstruct,
    UnsupportedTargetConstruct,
)

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
    "TargetFileName",
]
