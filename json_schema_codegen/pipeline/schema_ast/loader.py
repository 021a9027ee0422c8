"""
Readers turning JSON or YAML text into a SchemaNode tree.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from .nodes import SchemaNode


def load_json(text: str) -> SchemaNode:
    return SchemaNode.from_value(json.loads(text))


def load_yaml(text: str) -> SchemaNode:
    return SchemaNode.from_value(yaml.safe_load(text))


def load_schema(path: str | Path) -> SchemaNode:
    """Read a schema document, choosing the parser from the file suffix."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return load_yaml(text)
    return load_json(text)
