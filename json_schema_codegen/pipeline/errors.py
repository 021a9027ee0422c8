"""
Errors raised by the code generator.

All of them are fatal: they abort the whole generation run and nothing is
written for it.
"""

from __future__ import annotations


class CodeGenerationError(Exception):
    """Base class for generator failures."""


class UnresolvedReference(CodeGenerationError):
    """Raised when a $ref or container pointer does not designate a node."""

    def __init__(self, pointer: str, reason: str = ""):
        self.pointer = pointer
        message = f"Unresolved reference: {pointer}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class CyclicReference(CodeGenerationError):
    """Raised when a reference cycle cannot be represented as a recursive type."""

    def __init__(self, pointer: str, reason: str = ""):
        self.pointer = pointer
        message = f"Cyclic reference: {pointer}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnsupportedSchemaConstruct(CodeGenerationError):
    """Raised when the class model builder cannot model a keyword combination.

    This can happen when:
    - allOf has more than one $ref, or nests another allOf
    - a oneOf/anyOf alternative is neither an object nor a $ref to one
    - an enum has non-string values
    - two classes would need the same name in the same scope
    """

    def __init__(self, pointer: str, construct: str):
        self.pointer = pointer
        self.construct = construct
        super().__init__(f"Unsupported schema construct at {pointer or '#'}: {construct}")


class UnsupportedTargetConstruct(CodeGenerationError):
    """Raised when a backend cannot render a type or class kind."""

    def __init__(self, language: str, construct: str):
        self.language = language
        self.construct = construct
        super().__init__(f"Cannot render for {language}: {construct}")
