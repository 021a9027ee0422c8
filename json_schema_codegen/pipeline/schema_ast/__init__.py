"""
Schema AST module.

Contains the generic node tree and the JSON / YAML readers producing it.
"""

from __future__ import annotations

from .loader import load_json, load_schema, load_yaml
from .nodes import JsonType, SchemaNode

__all__ = [
    "JsonType",
    "SchemaNode",
    "load_json",
    "load_yaml",
    "load_schema",
]
