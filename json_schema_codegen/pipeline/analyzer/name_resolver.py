"""
Name resolver for class naming and collision handling.

Derives class names from titles and property / definition names, and decides
the scope a class is declared in. Collisions never produce invented suffixes:
a class whose name is taken beside its referencing class is nested inside the
referencing class instead.
"""

from __future__ import annotations

from ...utils import snake_to_pascal_case
from ..errors import UnsupportedSchemaConstruct
from ..schema_ast.nodes import SchemaNode
from .ir_nodes import ClassModel


class NameResolver:
    """Resolves class names and scopes for one generation run."""

    def __init__(self):
        # Top-level class name -> source path of the schema that owns it
        self._top_level: dict[str, str] = {}

    def derive_name(self, node: SchemaNode | None, fallback: str) -> str:
        """Class name from the node title if present, else from the fallback name."""
        title = node.get_value("title") if node is not None and node.is_object else None
        if isinstance(title, str) and title.strip():
            name = snake_to_pascal_case(title.strip())
        else:
            name = snake_to_pascal_case(fallback)
        if not name:
            raise UnsupportedSchemaConstruct(node.source_path if node else "", f"cannot derive a class name from {fallback!r}")
        return name

    def reserve_top_level(self, name: str, source_path: str) -> None:
        """Register a top-level class (root or definitions member)."""
        owner = self._top_level.get(name)
        if owner is not None and owner != source_path:
            raise UnsupportedSchemaConstruct(source_path, f"class name {name} is already used by #{owner}")
        self._top_level[name] = source_path

    def place(self, name: str, source_path: str, referencing: ClassModel | None) -> ClassModel | None:
        """
        Choose the enclosing class for a new inline class.

        Args:
            name: Derived class name
            source_path: Pointer of the schema the class is built from
            referencing: The class whose property refers to the new class

        Returns:
            The enclosing class, or None for the top level
        """
        if referencing is None:
            self.reserve_top_level(name, source_path)
            return None

        default_scope = referencing.enclosing
        if default_scope is None:
            if name not in self._top_level:
                self._top_level[name] = source_path
                return None
        elif self.is_free_in(default_scope, name):
            return default_scope

        if self.is_free_in(referencing, name):
            return referencing
        raise UnsupportedSchemaConstruct(
            source_path,
            f"class name {name} collides in {referencing.nested_name} and beside it",
        )

    def is_free_in(self, scope: ClassModel, name: str) -> bool:
        """Check that a name is not declared in, or by, the given class scope."""
        if name == scope.name or any(name == outer.name for outer in scope.enclosing_chain):
            return False
        if any(name == nested.name for nested in scope.nested):
            return False
        return not any(name == enum_def.name for enum_def in scope.enums)

    def place_nested(self, name: str, source_path: str, scope: ClassModel) -> ClassModel:
        """Place a class or enum that must be declared inside the given class."""
        if not self.is_free_in(scope, name):
            raise UnsupportedSchemaConstruct(source_path, f"class name {name} collides in {scope.nested_name}")
        return scope
