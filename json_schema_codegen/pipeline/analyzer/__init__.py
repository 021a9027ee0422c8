"""
Analyzer module.

Contains reference resolution, name resolution, and class model building.
"""

from __future__ import annotations

from .analyzer import SchemaAnalyzer
from .ir_nodes import (
    ClassKind,
    ClassModel,
    Constraint,
    ConstraintKind,
    EnumDef,
    PrimitiveKind,
    PropertyDef,
    TypeKind,
    TypeRef,
)
from .name_resolver import NameResolver
from .reference_resolver import DefinitionEntry, ReferenceResolver, ResolvedRef

__all__ = [
    "ClassKind",
    "ClassModel",
    "Constraint",
    "ConstraintKind",
    "EnumDef",
    "PrimitiveKind",
    "PropertyDef",
    "TypeKind",
    "TypeRef",
    "NameResolver",
    "DefinitionEntry",
    "ReferenceResolver",
    "ResolvedRef",
    "SchemaAnalyzer",
]
