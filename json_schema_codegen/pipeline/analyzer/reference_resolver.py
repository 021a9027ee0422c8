"""
Reference resolver for $ref resolution.

Resolves JSON Pointer references within one document, iterates definitions
containers and detects reference cycles.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from urllib.parse import unquote

from ..errors import CyclicReference, UnresolvedReference
from ..schema_ast.nodes import SchemaNode

logger = logging.getLogger(__name__)


@dataclass
class ResolvedRef:
    """A resolved $ref."""

    pointer: str = ""  # canonical pointer ("/$defs/Name")
    target_node: SchemaNode | None = None
    in_progress: bool = False  # resolution of this pointer has not completed yet


@dataclass
class DefinitionEntry:
    """A member of a definitions container."""

    name: str
    node: SchemaNode
    selected: bool = True


def canonical(pointer: str) -> str:
    """Normalize "#/a/b", "/a/b" and "#" to the "/a/b" form ("" is the root)."""
    if pointer.startswith("#"):
        pointer = unquote(pointer[1:])
    return pointer.rstrip("/") if pointer != "/" else pointer


class ReferenceResolver:
    """Resolves pointers to nodes of a single document."""

    def __init__(self, root: SchemaNode):
        """
        Initialize the resolver.

        Args:
            root: Root node of the document that references are relative to
        """
        self.root = root
        self._in_progress: set[str] = set()

    def resolve(self, pointer: str) -> SchemaNode:
        """
        Resolve a pointer to its node.

        Args:
            pointer: "#/$defs/Name", "/definitions/Name" or "#"

        Returns:
            The designated SchemaNode

        Raises:
            UnresolvedReference: If the pointer is external or designates nothing
        """
        if not pointer.startswith(("#", "/")):
            raise UnresolvedReference(pointer, "external documents are not supported")

        path = canonical(pointer)
        node = self.root
        if path:
            for segment in path.split("/")[1:]:
                segment = segment.replace("~1", "/").replace("~0", "~")
                next_node = node.child(segment)
                if next_node is None:
                    raise UnresolvedReference(pointer)
                node = next_node
        return node

    def follow(self, node: SchemaNode) -> ResolvedRef:
        """
        Follow a chain of $ref nodes to the first node that is not a pure reference.

        Args:
            node: A node that may carry "$ref"

        Returns:
            ResolvedRef of the final target (pointer "" when node has no $ref)
        """
        pointer = ""
        seen: list[str] = []
        while node.is_object and "$ref" in node:
            ref = node.get_value("$ref")
            if not isinstance(ref, str):
                raise UnresolvedReference(str(ref), f"$ref at {node.pointer} is not a string")
            pointer = canonical(ref) if ref.startswith(("#", "/")) else ref
            if pointer in seen:
                raise CyclicReference(ref, "reference alias loop " + " -> ".join(seen + [pointer]))
            seen.append(pointer)
            node = self.resolve(ref)
        return ResolvedRef(pointer=pointer, target_node=node, in_progress=pointer in self._in_progress)

    @contextmanager
    def resolving(self, pointer: str) -> Iterator[ResolvedRef]:
        """
        Mark a pointer as being resolved for the duration of the block.

        Raises:
            CyclicReference: If the pointer is already being resolved
        """
        path = canonical(pointer)
        if path in self._in_progress:
            raise CyclicReference(pointer, "cycle through a type that is not an object class")
        self._in_progress.add(path)
        try:
            yield ResolvedRef(pointer=path, target_node=self.resolve(pointer), in_progress=True)
        finally:
            self._in_progress.discard(path)

    def iter_definitions(
        self,
        pointer: str,
        name_filter: Callable[[str], bool] | None = None,
    ) -> Iterator[DefinitionEntry]:
        """
        Lazily iterate the members of a definitions container, in document order.

        Args:
            pointer: Pointer to the container, e.g. "/$defs" or "#/definitions"
            name_filter: Optional predicate selecting which members are rendered

        Yields:
            DefinitionEntry for every member; non-matching members have selected=False
        """
        container = self.resolve(pointer)
        if not container.is_object:
            raise UnresolvedReference(pointer, "definitions container is not an object")
        for name, node in container.members.items():
            selected = name_filter(name) if name_filter is not None else True
            if not selected:
                logger.debug("Definition %s filtered out of rendering", name)
            yield DefinitionEntry(name=name, node=node, selected=selected)
