"""
Kotlin code generation backend.

Generates one Kotlin file per top-level class: data classes for value
objects, and open base classes with nested subclasses for oneOf / anyOf.
"""

from __future__ import annotations

from typing import Any

from ...utils import is_identifier
from ...validation_rules import Guard
from ..analyzer.ir_nodes import ClassKind, ClassModel, ConstraintKind, EnumDef, PrimitiveKind, PropertyDef, TypeKind, TypeRef
from ..errors import UnsupportedTargetConstruct
from .base import INDENT, CodeBackend, indent_lines


class KotlinBackend(CodeBackend):
    """Kotlin code generation backend."""

    TEMPLATE_LANG = "kotlin"
    FILE_EXTENSION = "kt"

    TYPE_MAP = {
        PrimitiveKind.STRING: "String",
        PrimitiveKind.INTEGER: "Int",
        PrimitiveKind.LONG: "Long",
        PrimitiveKind.NUMBER: "Double",
        PrimitiveKind.BOOLEAN: "Boolean",
        PrimitiveKind.DATE: "LocalDate",
        PrimitiveKind.DATE_TIME: "OffsetDateTime",
        PrimitiveKind.TIME: "LocalTime",
        PrimitiveKind.UUID: "UUID",
        PrimitiveKind.URI: "URI",
        PrimitiveKind.ANY: "Any",
    }

    TYPE_IMPORTS = {
        PrimitiveKind.DATE: "java.time.LocalDate",
        PrimitiveKind.DATE_TIME: "java.time.OffsetDateTime",
        PrimitiveKind.TIME: "java.time.LocalTime",
        PrimitiveKind.UUID: "java.util.UUID",
        PrimitiveKind.URI: "java.net.URI",
    }

    KEYWORDS = frozenset(
        "as break class continue do else false for fun if in interface is null object package "
        "return super this throw true try typealias typeof val var when while".split()
    )

    CLASS_KEYWORDS = {
        ClassKind.PLAIN: "class",
        ClassKind.DATA: "data class",
        ClassKind.OPEN_BASE: "open class",
        ClassKind.NESTED_VARIANT: "class",
    }

    def can_extend(self, model: ClassModel, base: ClassModel) -> bool:
        # Data classes are final
        return base.kind is ClassKind.OPEN_BASE

    def escape_keyword(self, name: str) -> str:
        return f"`{name}`"

    def skip_guard(self, guard: Guard, prop: PropertyDef) -> bool:
        # Required properties have a non-null type
        return guard.kind is ConstraintKind.REQUIRED

    def render_class(self, model: ClassModel) -> str:
        """Render a Kotlin class declaration."""
        base = self.extended_base(model)
        inherited, own = self.split_fields(model)
        params = [self._parameter(prop, declare=False) for prop in inherited]
        params += [self._parameter(prop, declare=True) for prop in own]

        supertype = ""
        if base is not None:
            args = ", ".join(self.field_name(prop) for prop in inherited)
            supertype = f" : {self.base_type_name(model, base)}({args})"

        keyword = self.CLASS_KEYWORDS[model.kind]
        if params:
            declaration = [f"{keyword} {model.name}("]
            declaration += [f"{INDENT}{param}," for param in params[:-1]]
            declaration += [f"{INDENT}{params[-1]}", f"){supertype}"]
        else:
            declaration = [f"{keyword} {model.name}{supertype}"]

        sections = [self._enum_section(enum_def) for enum_def in model.enums]
        init = self._init_section(own)
        if init:
            sections.append(init)
        if model.kind in (ClassKind.OPEN_BASE, ClassKind.NESTED_VARIANT):
            sections.append(self._equals_section(model, base, own))
            sections.append(self._hash_code_section(base, own))
        sections.extend(self._render_nested(model))

        if sections:
            declaration[-1] += " {"
        return self._render_template(declaration, sections)

    def _parameter(self, prop: PropertyDef, declare: bool) -> str:
        text = f"{self.field_name(prop)}: {self.translate_type(prop.type_ref, prop.nullable)}"
        if declare:
            text = f"val {text}"
        if prop.has_default:
            text += f" = {self.format_default_value(prop.default_value, prop.type_ref)}"
        elif prop.nullable and not prop.required:
            text += " = null"
        return text

    def _enum_section(self, enum_def: EnumDef) -> list[str]:
        constants = [self.enum_constant(enum_def, value) for value in enum_def.values]
        lines = [f"enum class {enum_def.name} {{"]
        lines += [f"{INDENT}{constant}," for constant in constants[:-1]]
        lines += [f"{INDENT}{constants[-1]}", "}"]
        return indent_lines(lines)

    def _init_section(self, own: list[PropertyDef]) -> list[str]:
        lines = []
        for prop in own:
            for guard in self.property_guards(prop):
                lines.extend(self.render_guard(guard, self.field_name(prop)))
        if not lines:
            return []
        return indent_lines(["init {"] + indent_lines(lines) + ["}"])

    def _equals_section(self, model: ClassModel, base: ClassModel | None, own: list[PropertyDef]) -> list[str]:
        head = f"override fun equals(other: Any?): Boolean = this === other || other is {model.name}"
        if base is not None:
            head += " && super.equals(other)"
        comparisons = [f"{name} == other.{name}" for name in map(self.field_name, own)]
        if not comparisons:
            return indent_lines([head])
        continuation = INDENT * 2
        lines = [f"{head} &&"]
        lines += [f"{continuation}{comparison} &&" for comparison in comparisons[:-1]]
        lines.append(f"{continuation}{comparisons[-1]}")
        return indent_lines(lines)

    def _hash_code_section(self, base: ClassModel | None, own: list[PropertyDef]) -> list[str]:
        terms = ["super.hashCode()"] if base is not None else []
        terms += [f"{name}.hashCode()" for name in map(self.field_name, own)]
        head = "override fun hashCode(): Int"
        if not terms:
            lines = [f"{head} = 0"]
        elif len(terms) == 1:
            lines = [f"{head} = {terms[0]}"]
        elif len(terms) == 2:
            lines = [f"{head} = 31 * {terms[0]} + {terms[1]}"]
        else:
            lines = [f"{head} {{", f"{INDENT}var hash = {terms[0]}"]
            lines += [f"{INDENT}hash = 31 * hash + {term}" for term in terms[1:]]
            lines += [f"{INDENT}return hash", "}"]
        return indent_lines(lines)

    def translate_type(self, type_ref: TypeRef, nullable: bool = False) -> str:
        """Translate IR type to Kotlin type string."""
        if type_ref.kind is TypeKind.PRIMITIVE:
            result = self.TYPE_MAP[type_ref.primitive]
            if type_ref.primitive in self.TYPE_IMPORTS:
                self.imports.add(self.TYPE_IMPORTS[type_ref.primitive])
        elif type_ref.kind is TypeKind.CLASS:
            result = self.class_type_name(type_ref.class_model)
        elif type_ref.kind is TypeKind.SEQUENCE:
            result = f"List<{self.translate_type(type_ref.item_type)}>"
        elif type_ref.kind is TypeKind.MAP:
            result = f"Map<String, {self.translate_type(type_ref.item_type)}>"
        elif type_ref.kind is TypeKind.ENUM:
            result = self.enum_type_name(type_ref.enum_def)
        else:
            raise UnsupportedTargetConstruct(self.TEMPLATE_LANG, f"type {type_ref.kind}")
        return f"{result}?" if nullable else result

    def format_default_value(self, value: Any, type_ref: TypeRef) -> str:
        """Format a default value for Kotlin."""
        if type_ref.kind is TypeKind.ENUM:
            return f"{self.enum_type_name(type_ref.enum_def)}.{self.enum_constant(type_ref.enum_def, value)}"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return self.string_literal(value)
        if type_ref.primitive is PrimitiveKind.NUMBER:
            return repr(float(value))
        return str(value)

    def string_literal(self, text: str) -> str:
        return super().string_literal(text).replace("$", "\\$")

    def message_literal(self, message: str, actual: str | None) -> str:
        if actual is None:
            return self.string_literal(message)
        interpolation = f"${actual}" if is_identifier(actual) else f"${{{actual}}}"
        return f"{self.string_literal(message + ' - ')[:-1]}{interpolation}\""
