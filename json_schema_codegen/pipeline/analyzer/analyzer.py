"""
Schema analyzer that turns resolved schema nodes into the class model graph.

One SchemaAnalyzer serves one generation run: it owns the pointer -> ClassModel
cache, so a schema reached through several references is built exactly once,
and an entry that is still being built doubles as the back-reference of a
recursive type.
"""

from __future__ import annotations

import logging
import re

from ...utils import pointer_tail
from ..config import CodeGeneratorConfig
from ..errors import CyclicReference, UnsupportedSchemaConstruct
from ..schema_ast.nodes import SchemaNode
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
from .reference_resolver import DefinitionEntry, ReferenceResolver

logger = logging.getLogger(__name__)

COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf")

STRING_FORMATS = {
    "date": PrimitiveKind.DATE,
    "date-time": PrimitiveKind.DATE_TIME,
    "time": PrimitiveKind.TIME,
    "uuid": PrimitiveKind.UUID,
    "uri": PrimitiveKind.URI,
}


class SchemaAnalyzer:
    """Builds ClassModels from schema nodes."""

    def __init__(self, resolver: ReferenceResolver, config: CodeGeneratorConfig):
        """
        Initialize the analyzer.

        Args:
            resolver: Reference resolver bound to the document being compiled
            config: Code generation configuration
        """
        self.resolver = resolver
        self.config = config
        self.names = NameResolver()

        # Canonical pointer -> ClassModel (complete or in progress)
        self._classes: dict[str, ClassModel] = {}

        # Pointer -> name of the classes pinned to the top level (root, container members)
        self._top_level_names: dict[str, str] = {}

        # Top-level classes in build order
        self.top_level_classes: list[ClassModel] = []

        # Pointer of a top-level inline class -> root or definition class it was first reached from
        self._owners: dict[str, ClassModel] = {}

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def build_root(self, node: SchemaNode, name: str | None = None) -> ClassModel:
        """Build the single root class of a schema document."""
        if not self.is_class_schema(node, allow_empty=True):
            raise UnsupportedSchemaConstruct(node.source_path, "root schema is not an object schema")
        class_name = self.names.derive_name(node, name or "")
        self.names.reserve_top_level(class_name, node.source_path)
        self._top_level_names[node.source_path] = class_name
        return self._class_for(node, class_name, None)

    def register_definitions(self, entries: list[DefinitionEntry]) -> list[DefinitionEntry]:
        """
        Reserve top-level names for the container members that become classes.

        Must run before any member is built, so an inline class can never take
        the name of a definition that has not been reached yet.

        Returns:
            The entries that describe classes, in document order
        """
        class_entries = []
        for entry in entries:
            if not self.is_class_schema(entry.node, allow_empty=True):
                logger.debug("Definition %s is not an object schema, no class generated", entry.name)
                continue
            class_name = self.names.derive_name(entry.node, entry.name)
            self.names.reserve_top_level(class_name, entry.node.source_path)
            self._top_level_names[entry.node.source_path] = class_name
            class_entries.append(entry)
        return class_entries

    def build_definition(self, entry: DefinitionEntry) -> ClassModel:
        return self._class_for(entry.node, entry.name, None)

    def owner_of(self, model: ClassModel) -> ClassModel:
        """The root or definition class a top-level class belongs to (itself for those)."""
        return self._owners.get(model.source_path, model)

    # ------------------------------------------------------------------
    # Classes
    # ------------------------------------------------------------------

    def is_class_schema(self, node: SchemaNode, allow_empty: bool = False) -> bool:
        """
        Check whether a node describes a class.

        Args:
            node: The schema node
            allow_empty: Whether a bare {"type": "object"} counts as a (empty) class
        """
        if not node.is_object or "$ref" in node or "enum" in node:
            return False
        types = self._type_names(node)
        if types and types[0] != "object":
            return False
        if any(keyword in node for keyword in COMPOSITION_KEYWORDS):
            return self._nullable_alternative(node) is None
        if "properties" in node:
            return True
        if types:
            additional = node.get("additionalProperties")
            if additional is not None and additional.is_object:
                return False
            return allow_empty
        return False

    def _class_for(self, node: SchemaNode, fallback_name: str, referencing: ClassModel | None) -> ClassModel:
        path = node.source_path
        model = self._classes.get(path)
        if model is not None:
            if not model.built:
                logger.debug("Back-reference to %s while it is being built", model.name)
            return model

        if path in self._top_level_names:
            name = self._top_level_names[path]
            enclosing = None
        else:
            name = self.names.derive_name(node, fallback_name)
            enclosing = self.names.place(name, path, referencing)

        model = ClassModel(
            name=name,
            package=self.config.base_package,
            enclosing=enclosing,
            source_path=path,
        )
        self._classes[path] = model
        if enclosing is not None:
            enclosing.nested.append(model)
        else:
            self.top_level_classes.append(model)
            if path not in self._top_level_names and referencing is not None:
                self._owners[path] = self.owner_of(referencing.top_level)

        self._populate(model, node)
        model.built = True
        return model

    def _populate(self, model: ClassModel, node: SchemaNode) -> None:
        if "allOf" in node:
            self._apply_all_of(model, node)
        elif "oneOf" in node or "anyOf" in node:
            self._apply_one_of(model, node)
        else:
            model.properties = self._build_properties(node, model)
            model.kind = ClassKind.DATA if model.properties else ClassKind.PLAIN

    def _apply_all_of(self, model: ClassModel, node: SchemaNode) -> None:
        """Flatten allOf of one $ref plus inline objects into an extension of the referenced class."""
        members = node.get("allOf")
        if not members.is_array or not members.items:
            raise UnsupportedSchemaConstruct(members.source_path, "allOf must be a non-empty array")
        if "oneOf" in node or "anyOf" in node:
            raise UnsupportedSchemaConstruct(node.source_path, "allOf combined with oneOf/anyOf")

        refs = [member for member in members.items if member.is_object and "$ref" in member]
        inline = [member for member in members.items if not any(member is ref for ref in refs)]
        if len(refs) != 1:
            raise UnsupportedSchemaConstruct(members.source_path, f"allOf with {len(refs)} references")
        for part in inline:
            if (
                not part.is_object
                or any(keyword in part for keyword in COMPOSITION_KEYWORDS)
                or self._type_names(part) not in ([], ["object"])
            ):
                raise UnsupportedSchemaConstruct(part.source_path, "allOf member is not an inline object")

        resolved = self.resolver.follow(refs[0])
        target = resolved.target_node
        if not self.is_class_schema(target, allow_empty=True):
            raise UnsupportedSchemaConstruct(refs[0].source_path, "allOf reference is not an object schema")
        base = self._class_for(target, pointer_tail(resolved.pointer), model)
        if not base.built:
            raise CyclicReference(resolved.pointer, "allOf base is still being built")
        if base.kind in (ClassKind.OPEN_BASE, ClassKind.NESTED_VARIANT):
            raise UnsupportedSchemaConstruct(refs[0].source_path, "allOf extending a oneOf/anyOf class")

        inherited = {prop.name for prop in base.all_properties()}
        own: list[PropertyDef] = []
        for part in inline + [node]:
            for prop in self._build_properties(part, model):
                if prop.name in inherited or any(prop.name == other.name for other in own):
                    raise UnsupportedSchemaConstruct(prop.source_path, f"property {prop.name} redeclared in allOf")
                own.append(prop)

        model.base = base
        model.properties = own
        model.kind = ClassKind.DATA if model.all_properties() else ClassKind.PLAIN
        logger.debug("%s extends %s", model.name, base.name)

    def _apply_one_of(self, model: ClassModel, node: SchemaNode) -> None:
        """Build an open base class with one nested variant per alternative."""
        if "oneOf" in node and "anyOf" in node:
            raise UnsupportedSchemaConstruct(node.source_path, "oneOf combined with anyOf")
        keyword = "oneOf" if "oneOf" in node else "anyOf"
        alternatives = node.get(keyword)
        if not alternatives.is_array or not alternatives.items:
            raise UnsupportedSchemaConstruct(alternatives.source_path, f"{keyword} must be a non-empty array")

        model.kind = ClassKind.OPEN_BASE
        model.properties = self._build_properties(node, model)
        shared = {prop.name for prop in model.properties}

        for alternative in alternatives.items:
            if not alternative.is_object:
                raise UnsupportedSchemaConstruct(alternative.source_path, f"{keyword} alternative is not a schema")
            if "$ref" in alternative:
                resolved = self.resolver.follow(alternative)
                source = resolved.target_node
                name = self.names.derive_name(source, pointer_tail(resolved.pointer))
            else:
                source = alternative
                title = source.get_value("title")
                if not isinstance(title, str) or not title.strip():
                    raise UnsupportedSchemaConstruct(alternative.source_path, f"inline {keyword} alternative without a title")
                name = self.names.derive_name(source, title)
            if any(keyword in source for keyword in COMPOSITION_KEYWORDS) or not self.is_class_schema(source, allow_empty=True):
                raise UnsupportedSchemaConstruct(alternative.source_path, f"{keyword} alternative is not an object schema")

            self.names.place_nested(name, alternative.source_path, model)
            variant = ClassModel(
                name=name,
                package=model.package,
                enclosing=model,
                kind=ClassKind.NESTED_VARIANT,
                base=model,
                source_path=alternative.source_path,
            )
            self._classes[alternative.source_path] = variant
            model.nested.append(variant)
            variant.properties = self._build_properties(source, variant, skip_names=shared)
            variant.built = True

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def _build_properties(
        self,
        node: SchemaNode,
        owner: ClassModel,
        skip_names: set[str] | frozenset[str] = frozenset(),
    ) -> list[PropertyDef]:
        """Create one PropertyDef per member of "properties", in document order."""
        properties = node.get("properties")
        if properties is None:
            return []
        if not properties.is_object:
            raise UnsupportedSchemaConstruct(properties.source_path, "properties is not an object")
        required = node.get_value("required", [])
        if not isinstance(required, list):
            raise UnsupportedSchemaConstruct(node.source_path, "required is not an array")

        result = []
        for name, prop_node in properties.members.items():
            if name in skip_names:
                logger.debug("Property %s of %s is inherited from the base class", name, owner.name)
                continue
            result.append(self._build_property(name, prop_node, name in required, owner))
        return result

    def _build_property(self, name: str, node: SchemaNode, is_required: bool, owner: ClassModel) -> PropertyDef:
        if not node.is_object:
            raise UnsupportedSchemaConstruct(node.source_path, f"property {name} is not a schema object")

        type_ref, source = self._type_for(node, name, owner)
        admits_null = self._admits_null(node)
        prop = PropertyDef(
            name=name,
            type_ref=type_ref,
            nullable=admits_null or not is_required,
            required=is_required,
            source_path=node.source_path,
        )

        if not is_required and "default" in node:
            default = node.get_value("default")
            if default is not None:
                self._check_default(type_ref, default, node)
                prop.has_default = True
                prop.default_value = default
                prop.nullable = admits_null

        if is_required and not admits_null:
            prop.constraints.append(Constraint(ConstraintKind.REQUIRED))
        prop.constraints.extend(self._constraints_for(source, type_ref))
        return prop

    def _check_default(self, type_ref: TypeRef, value, node: SchemaNode) -> None:
        valid = False
        if type_ref.kind is TypeKind.ENUM:
            valid = value in type_ref.enum_def.values
        elif type_ref.kind is TypeKind.PRIMITIVE:
            if type_ref.primitive is PrimitiveKind.STRING:
                valid = isinstance(value, str)
            elif type_ref.primitive is PrimitiveKind.BOOLEAN:
                valid = isinstance(value, bool)
            elif type_ref.primitive in (PrimitiveKind.INTEGER, PrimitiveKind.LONG):
                valid = isinstance(value, int) and not isinstance(value, bool)
            elif type_ref.primitive is PrimitiveKind.NUMBER:
                valid = isinstance(value, (int, float)) and not isinstance(value, bool)
        if not valid:
            raise UnsupportedSchemaConstruct(node.source_path, f"default {value!r} for this property type")

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def _type_names(self, node: SchemaNode) -> list[str]:
        """Non-null names from "type"; a single name at most."""
        type_value = node.get_value("type")
        if type_value is None:
            return []
        names = type_value if isinstance(type_value, list) else [type_value]
        non_null = [t for t in names if t != "null"]
        if not non_null and names:
            return ["null"]
        if len(non_null) > 1 or not all(isinstance(t, str) for t in non_null):
            raise UnsupportedSchemaConstruct(node.source_path, f"type {type_value!r}")
        return non_null

    def _nullable_alternative(self, node: SchemaNode) -> SchemaNode | None:
        """For oneOf/anyOf [T, {type: null}] without other members, return T."""
        if "properties" in node:
            return None
        for keyword in ("oneOf", "anyOf"):
            alternatives = node.get(keyword)
            if alternatives is None or not alternatives.is_array or len(alternatives.items) != 2:
                continue
            non_null = [alt for alt in alternatives.items if not (alt.is_object and alt.get_value("type") == "null")]
            if len(non_null) == 1:
                return non_null[0]
        return None

    def _admits_null(self, node: SchemaNode) -> bool:
        """Whether a property schema is a nullable union: type [T, "null"] or oneOf/anyOf [T, {type: null}]."""
        if not node.is_object or "$ref" in node:
            return False
        type_value = node.get_value("type")
        if isinstance(type_value, list) and "null" in type_value:
            return True
        return "allOf" not in node and self._nullable_alternative(node) is not None

    def _type_for(self, node: SchemaNode, name_hint: str, owner: ClassModel) -> tuple[TypeRef, SchemaNode]:
        """
        Determine the type of a property or array element.

        Returns:
            The type and the node its validation keywords are read from
        """
        if "$ref" in node:
            resolved = self.resolver.follow(node)
            target = resolved.target_node
            fallback = pointer_tail(resolved.pointer)
            if self.is_class_schema(target, allow_empty=True):
                return TypeRef.of_class(self._class_for(target, fallback, owner)), target
            with self.resolver.resolving(resolved.pointer):
                type_ref, _ = self._type_for(target, fallback, owner)
            return type_ref, target

        if not node.is_object:
            return TypeRef.of_primitive(PrimitiveKind.ANY), node

        types = self._type_names(node)
        if "enum" in node:
            return self._enum_type(node, name_hint, owner), node

        alternative = self._nullable_alternative(node)
        if alternative is not None and "allOf" not in node:
            return self._type_for(alternative, name_hint, owner)

        if self.is_class_schema(node):
            return TypeRef.of_class(self._class_for(node, name_hint, owner)), node

        type_name = types[0] if types else None
        if type_name == "array" or (type_name is None and "items" in node):
            return self._sequence_type(node, name_hint, owner), node
        if type_name == "object":
            additional = node.get("additionalProperties")
            if additional is not None and additional.is_object:
                value_type, _ = self._type_for(additional, name_hint, owner)
                return TypeRef.map_of(value_type), node
            return TypeRef.of_primitive(PrimitiveKind.ANY), node
        if type_name in ("string", "integer", "number", "boolean"):
            return self._primitive_type(type_name, node.get_value("format")), node
        if type_name is None:
            if any(keyword in node for keyword in COMPOSITION_KEYWORDS):
                raise UnsupportedSchemaConstruct(node.source_path, "composition of non-object schemas")
            return TypeRef.of_primitive(PrimitiveKind.ANY), node
        raise UnsupportedSchemaConstruct(node.source_path, f"type {type_name!r}")

    def _primitive_type(self, type_name: str, format: str | None) -> TypeRef:
        if type_name == "string":
            return TypeRef.of_primitive(STRING_FORMATS.get(format, PrimitiveKind.STRING), format)
        if type_name == "integer":
            kind = PrimitiveKind.LONG if format == "int64" else PrimitiveKind.INTEGER
            return TypeRef.of_primitive(kind, format)
        if type_name == "number":
            return TypeRef.of_primitive(PrimitiveKind.NUMBER, format)
        return TypeRef.of_primitive(PrimitiveKind.BOOLEAN, format)

    def _sequence_type(self, node: SchemaNode, name_hint: str, owner: ClassModel) -> TypeRef:
        items = node.get("items")
        if items is None or not items.is_object and not items.is_array:
            return TypeRef.sequence_of(TypeRef.of_primitive(PrimitiveKind.ANY))
        if items.is_array:
            raise UnsupportedSchemaConstruct(items.source_path, "tuple items")
        item_type, source = self._type_for(items, name_hint, owner)
        item_type.constraints = self._constraints_for(source, item_type)
        return TypeRef.sequence_of(item_type)

    def _enum_type(self, node: SchemaNode, name_hint: str, owner: ClassModel) -> TypeRef:
        values = node.get_value("enum")
        if not isinstance(values, list) or not values or not all(isinstance(v, str) for v in values):
            raise UnsupportedSchemaConstruct(node.source_path, "enum values must be strings")
        if self._type_names(node) not in ([], ["string"]):
            raise UnsupportedSchemaConstruct(node.source_path, "enum of a non-string type")

        for enum_def in owner.enums:
            if enum_def.source_path == node.source_path:
                return TypeRef.enum_of(enum_def)
        name = self.names.derive_name(node, name_hint)
        self.names.place_nested(name, node.source_path, owner)
        enum_def = EnumDef(name=name, values=list(dict.fromkeys(values)), enclosing=owner, source_path=node.source_path)
        owner.enums.append(enum_def)
        return TypeRef.enum_of(enum_def)

    # ------------------------------------------------------------------
    # Constraints
    # ------------------------------------------------------------------

    def _constraints_for(self, node: SchemaNode, type_ref: TypeRef) -> list[Constraint]:
        """Collect the validation keywords that apply to the given type."""
        if not node.is_object:
            return []
        if type_ref.kind is TypeKind.PRIMITIVE and type_ref.primitive.is_numeric:
            return self._numeric_constraints(node)
        if type_ref.kind is TypeKind.PRIMITIVE and type_ref.primitive is PrimitiveKind.STRING:
            return self._string_constraints(node)
        if type_ref.kind is TypeKind.SEQUENCE:
            return self._array_constraints(node)
        return []

    def _numeric_constraints(self, node: SchemaNode) -> list[Constraint]:
        minimum = node.get_value("minimum")
        maximum = node.get_value("maximum")
        exclusive_minimum = node.get_value("exclusiveMinimum")
        exclusive_maximum = node.get_value("exclusiveMaximum")

        # Draft 4 / Swagger 2.0 boolean form
        if isinstance(exclusive_minimum, bool):
            exclusive_minimum, minimum = (minimum, None) if exclusive_minimum else (None, minimum)
        if isinstance(exclusive_maximum, bool):
            exclusive_maximum, maximum = (maximum, None) if exclusive_maximum else (None, maximum)

        constraints = []
        for kind, value in (
            (ConstraintKind.MINIMUM, minimum),
            (ConstraintKind.EXCLUSIVE_MINIMUM, exclusive_minimum),
            (ConstraintKind.MAXIMUM, maximum),
            (ConstraintKind.EXCLUSIVE_MAXIMUM, exclusive_maximum),
        ):
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise UnsupportedSchemaConstruct(node.source_path, f"{kind.value} must be a number")
            constraints.append(Constraint(kind, value))
        return constraints

    def _string_constraints(self, node: SchemaNode) -> list[Constraint]:
        constraints = []
        for kind in (ConstraintKind.MIN_LENGTH, ConstraintKind.MAX_LENGTH):
            value = node.get_value(kind.value)
            if value is not None:
                constraints.append(Constraint(kind, self._count(node, kind, value)))
        pattern = node.get_value("pattern")
        if pattern is not None:
            if not isinstance(pattern, str):
                raise UnsupportedSchemaConstruct(node.source_path, "pattern must be a string")
            try:
                re.compile(pattern)
            except re.error as e:
                raise UnsupportedSchemaConstruct(node.source_path, f"invalid pattern {pattern!r}: {e}") from e
            constraints.append(Constraint(ConstraintKind.PATTERN, pattern))
        return constraints

    def _array_constraints(self, node: SchemaNode) -> list[Constraint]:
        constraints = []
        for kind in (ConstraintKind.MIN_ITEMS, ConstraintKind.MAX_ITEMS):
            value = node.get_value(kind.value)
            if value is not None:
                constraints.append(Constraint(kind, self._count(node, kind, value)))
        if node.get_value("uniqueItems") is True:
            constraints.append(Constraint(ConstraintKind.UNIQUE_ITEMS, True))
        return constraints

    def _count(self, node: SchemaNode, kind: ConstraintKind, value) -> int:
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise UnsupportedSchemaConstruct(node.source_path, f"{kind.value} must be a non-negative integer")
        return value
