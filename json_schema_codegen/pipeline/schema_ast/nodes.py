"""
Generic node tree for JSON Schema documents.

Every node is tagged with its JSON type and carries the JSON Pointer it was
read from, so later phases can report errors against the source document and
key their caches by pointer.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class JsonType(Enum):
    """JSON type of a document node."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


def escape_pointer_segment(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


@dataclass(eq=False)
class SchemaNode:
    """A raw document node."""

    json_type: JsonType = JsonType.NULL

    # Original source location in the document (JSON Pointer, "" for the root)
    source_path: str = ""

    # Scalar value for string / number / boolean / null nodes
    value: Any = None

    # Members of an object node, in document order
    members: dict[str, SchemaNode] = field(default_factory=dict)

    # Items of an array node
    items: list[SchemaNode] = field(default_factory=list)

    @classmethod
    def from_value(cls, value: Any, source_path: str = "") -> SchemaNode:
        """Build a node tree from parsed JSON / YAML data."""
        if isinstance(value, dict):
            members = {
                str(k): cls.from_value(v, f"{source_path}/{escape_pointer_segment(str(k))}")
                for k, v in value.items()
            }
            return cls(JsonType.OBJECT, source_path, members=members)
        if isinstance(value, (list, tuple)):
            items = [cls.from_value(v, f"{source_path}/{i}") for i, v in enumerate(value)]
            return cls(JsonType.ARRAY, source_path, items=items)
        if isinstance(value, bool):
            return cls(JsonType.BOOLEAN, source_path, value=value)
        if isinstance(value, (int, float)):
            return cls(JsonType.NUMBER, source_path, value=value)
        if isinstance(value, str):
            return cls(JsonType.STRING, source_path, value=value)
        if value is None:
            return cls(JsonType.NULL, source_path)
        # YAML can produce dates and timestamps; keep their text form
        return cls(JsonType.STRING, source_path, value=str(value))

    @property
    def is_object(self) -> bool:
        return self.json_type is JsonType.OBJECT

    @property
    def is_array(self) -> bool:
        return self.json_type is JsonType.ARRAY

    @property
    def pointer(self) -> str:
        """The node location in "#/..." form, for messages."""
        return "#" + self.source_path

    def __contains__(self, key: str) -> bool:
        return key in self.members

    def __iter__(self) -> Iterator[str]:
        return iter(self.members)

    def get(self, key: str) -> SchemaNode | None:
        return self.members.get(key)

    def child(self, segment: str) -> SchemaNode | None:
        """Step one JSON Pointer segment down (member name or array index)."""
        if self.is_object:
            return self.members.get(segment)
        if self.is_array and segment.isdigit():
            index = int(segment)
            if index < len(self.items):
                return self.items[index]
        return None

    def get_value(self, key: str, default: Any = None) -> Any:
        """Return the plain value of a member (scalars, lists and dicts)."""
        node = self.members.get(key)
        if node is None:
            return default
        return node.to_value()

    def to_value(self) -> Any:
        if self.is_object:
            return {k: v.to_value() for k, v in self.members.items()}
        if self.is_array:
            return [item.to_value() for item in self.items]
        return self.value
