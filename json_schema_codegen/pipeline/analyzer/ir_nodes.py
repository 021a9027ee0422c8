"""
IR (Intermediate Representation) node definitions.

These nodes represent the analyzed and resolved schema, ready for
code generation. All references are resolved and types are determined.
ClassModels are compared by identity: one instance exists per schema
pointer and is shared wherever that pointer is referenced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ClassKind(Enum):
    """Shape of a generated class."""

    PLAIN = "plain"  # no properties, identity semantics
    DATA = "data"  # value class with generated equality
    OPEN_BASE = "open_base"  # oneOf/anyOf base holding shared properties
    NESTED_VARIANT = "nested_variant"  # oneOf/anyOf alternative nested in its base


class PrimitiveKind(Enum):
    """Primitive types, after applying "format"."""

    STRING = "string"
    INTEGER = "integer"  # int32
    LONG = "long"  # integer + format int64
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATE_TIME = "date-time"
    TIME = "time"
    UUID = "uuid"
    URI = "uri"
    ANY = "any"

    @property
    def is_numeric(self) -> bool:
        return self in (PrimitiveKind.INTEGER, PrimitiveKind.LONG, PrimitiveKind.NUMBER)


class TypeKind(Enum):
    """Kind of type in the IR."""

    PRIMITIVE = "primitive"  # int, string, bool, number, formatted strings, any
    CLASS = "class"  # a generated class
    SEQUENCE = "sequence"  # list[T]
    MAP = "map"  # dict[str, T]
    ENUM = "enum"  # enum declared in the owning class


class ConstraintKind(Enum):
    """Validation keywords interpreted by the generator."""

    REQUIRED = "required"
    MINIMUM = "minimum"
    EXCLUSIVE_MINIMUM = "exclusiveMinimum"
    MAXIMUM = "maximum"
    EXCLUSIVE_MAXIMUM = "exclusiveMaximum"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    PATTERN = "pattern"
    MIN_ITEMS = "minItems"
    MAX_ITEMS = "maxItems"
    UNIQUE_ITEMS = "uniqueItems"


@dataclass(frozen=True)
class Constraint:
    """A validation keyword with its operand."""

    kind: ConstraintKind
    value: Any = None


@dataclass(eq=False)
class EnumDef:
    """A string enum, declared inside the class that owns the property."""

    name: str = ""
    values: list[str] = field(default_factory=list)
    enclosing: ClassModel | None = None
    source_path: str = ""


@dataclass(eq=False)
class TypeRef:
    """A resolved type. Exactly one variant is active, selected by kind."""

    kind: TypeKind = TypeKind.PRIMITIVE

    # PRIMITIVE
    primitive: PrimitiveKind | None = None
    format: str | None = None

    # CLASS
    class_model: ClassModel | None = None

    # SEQUENCE element / MAP value
    item_type: TypeRef | None = None

    # MAP key (always a string primitive for JSON objects)
    key_type: TypeRef | None = None

    # ENUM
    enum_def: EnumDef | None = None

    # Element-level constraints (from "items" of an array)
    constraints: list[Constraint] = field(default_factory=list)

    @staticmethod
    def of_primitive(primitive: PrimitiveKind, format: str | None = None) -> TypeRef:
        return TypeRef(kind=TypeKind.PRIMITIVE, primitive=primitive, format=format)

    @staticmethod
    def of_class(class_model: ClassModel) -> TypeRef:
        return TypeRef(kind=TypeKind.CLASS, class_model=class_model)

    @staticmethod
    def sequence_of(item_type: TypeRef) -> TypeRef:
        return TypeRef(kind=TypeKind.SEQUENCE, item_type=item_type)

    @staticmethod
    def map_of(value_type: TypeRef) -> TypeRef:
        return TypeRef(
            kind=TypeKind.MAP,
            key_type=TypeRef.of_primitive(PrimitiveKind.STRING),
            item_type=value_type,
        )

    @staticmethod
    def enum_of(enum_def: EnumDef) -> TypeRef:
        return TypeRef(kind=TypeKind.ENUM, enum_def=enum_def)


@dataclass(eq=False)
class PropertyDef:
    """A property of a generated class."""

    name: str = ""
    type_ref: TypeRef | None = None
    nullable: bool = False
    required: bool = False
    has_default: bool = False
    default_value: Any = None
    constraints: list[Constraint] = field(default_factory=list)
    source_path: str = ""


@dataclass(eq=False)
class ClassModel:
    """A generated class."""

    name: str = ""
    package: str = ""
    enclosing: ClassModel | None = None
    kind: ClassKind = ClassKind.DATA

    properties: list[PropertyDef] = field(default_factory=list)

    # Base class (oneOf variants, allOf extension)
    base: ClassModel | None = None

    # Nested classes (variants, inline objects placed inside this class)
    nested: list[ClassModel] = field(default_factory=list)

    # Enums declared inside this class
    enums: list[EnumDef] = field(default_factory=list)

    source_path: str = ""

    # False while the builder is still populating this class
    built: bool = False

    @property
    def enclosing_chain(self) -> list[ClassModel]:
        """Enclosing classes, outermost first."""
        chain = []
        outer = self.enclosing
        while outer is not None:
            chain.insert(0, outer)
            outer = outer.enclosing
        return chain

    @property
    def top_level(self) -> ClassModel:
        return self.enclosing_chain[0] if self.enclosing else self

    @property
    def nested_name(self) -> str:
        """Name qualified by the enclosing classes, e.g. "TypeA.A"."""
        return ".".join([c.name for c in self.enclosing_chain] + [self.name])

    def all_properties(self) -> list[PropertyDef]:
        """Base properties first, then own properties."""
        inherited = self.base.all_properties() if self.base else []
        return inherited + self.properties
