"""
Java code generation backend.

Generates one Java file per top-level class: immutable classes with a
validating constructor, getters, equals and hashCode. Variants of a oneOf /
anyOf base are public static nested classes extending the base.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from ...validation_rules import Guard
from ..analyzer.ir_nodes import ClassKind, ClassModel, ConstraintKind, EnumDef, PrimitiveKind, PropertyDef, TypeKind, TypeRef
from ..errors import UnsupportedTargetConstruct
from .base import INDENT, CodeBackend, indent_lines

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


class JavaBackend(CodeBackend):
    """Java code generation backend."""

    TEMPLATE_LANG = "java"
    FILE_EXTENSION = "java"

    TYPE_MAP = {
        PrimitiveKind.STRING: "String",
        PrimitiveKind.INTEGER: "int",
        PrimitiveKind.LONG: "long",
        PrimitiveKind.NUMBER: "double",
        PrimitiveKind.BOOLEAN: "boolean",
        PrimitiveKind.DATE: "LocalDate",
        PrimitiveKind.DATE_TIME: "OffsetDateTime",
        PrimitiveKind.TIME: "LocalTime",
        PrimitiveKind.UUID: "UUID",
        PrimitiveKind.URI: "URI",
        PrimitiveKind.ANY: "Object",
    }

    TYPE_IMPORTS = {
        PrimitiveKind.DATE: "java.time.LocalDate",
        PrimitiveKind.DATE_TIME: "java.time.OffsetDateTime",
        PrimitiveKind.TIME: "java.time.LocalTime",
        PrimitiveKind.UUID: "java.util.UUID",
        PrimitiveKind.URI: "java.net.URI",
    }

    # Primitive types and their boxed form, used where null is possible
    BOXED = {"int": "Integer", "long": "Long", "double": "Double", "boolean": "Boolean"}

    HASH_FUNCTIONS = {
        "int": "{0}",
        "long": "Long.hashCode({0})",
        "double": "Double.hashCode({0})",
        "boolean": "Boolean.hashCode({0})",
    }

    KEYWORDS = frozenset(
        "abstract assert boolean break byte case catch char class const continue default do double "
        "else enum extends false final finally float for goto if implements import instanceof int "
        "interface long native new null package private protected public return short static "
        "strictfp super switch synchronized this throw throws transient true try void volatile "
        "while var record yield".split()
    )

    def skip_guard(self, guard: Guard, prop: PropertyDef) -> bool:
        # A primitive cannot be null
        return guard.kind is ConstraintKind.REQUIRED and self._field_type(prop) in self.BOXED

    def property_guards(self, prop: PropertyDef) -> list[Guard]:
        guards = super().property_guards(prop)
        if prop.has_default:
            # The parameter is nullable; null selects the default
            guards = [dataclasses.replace(guard, nullable=True) for guard in guards]
        return guards

    def render_class(self, model: ClassModel) -> str:
        """Render a Java class declaration."""
        base = self.extended_base(model)
        inherited, own = self.split_fields(model)

        modifiers = "public static class" if model.enclosing is not None else "public class"
        extends = f" extends {self.base_type_name(model, base)}" if base is not None else ""
        declaration = [f"{modifiers} {model.name}{extends} {{"]

        sections = []
        if own:
            sections.append(indent_lines([f"private final {self._field_type(prop)} {self.field_name(prop)};" for prop in own]))
        if inherited or own:
            sections.append(self._constructor_section(model, base, inherited, own))
        sections.extend(self._getter_section(prop) for prop in own)
        if model.kind is not ClassKind.PLAIN:
            sections.append(self._equals_section(model, base, own))
            sections.append(self._hash_code_section(base, own))
        sections.extend(self._enum_section(enum_def) for enum_def in model.enums)
        sections.extend(self._render_nested(model))
        return self._render_template(declaration, sections)

    def _field_type(self, prop: PropertyDef) -> str:
        return self.translate_type(prop.type_ref, prop.nullable)

    def _parameter_type(self, prop: PropertyDef) -> str:
        return self.translate_type(prop.type_ref, prop.nullable or prop.has_default)

    def _constructor_section(
        self,
        model: ClassModel,
        base: ClassModel | None,
        inherited: list[PropertyDef],
        own: list[PropertyDef],
    ) -> list[str]:
        params = [f"{self._parameter_type(prop)} {self.field_name(prop)}" for prop in inherited + own]
        lines = [f"public {model.name}("]
        lines += [f"{INDENT * 2}{param}," for param in params[:-1]]
        lines += [f"{INDENT * 2}{params[-1]}", ") {"]

        body = []
        if base is not None and inherited:
            body.append(f"super({', '.join(self.field_name(prop) for prop in inherited)});")
        for prop in own:
            name = self.field_name(prop)
            item_type = ""
            if prop.type_ref.kind is TypeKind.SEQUENCE:
                item_type = self.translate_type(prop.type_ref.item_type, nullable=True)
            for guard in self.property_guards(prop):
                body.extend(self.render_guard(guard, name, item_type))
            if prop.has_default:
                default = self.format_default_value(prop.default_value, prop.type_ref)
                body.append(f"this.{name} = {name} != null ? {name} : {default};")
            else:
                body.append(f"this.{name} = {name};")
        return indent_lines(lines + indent_lines(body) + ["}"])

    def _getter_section(self, prop: PropertyDef) -> list[str]:
        name = self.field_name(prop)
        return indent_lines(
            [
                f"public {self._field_type(prop)} get{name[0].upper()}{name[1:]}() {{",
                f"{INDENT}return {name};",
                "}",
            ]
        )

    def _equals_section(self, model: ClassModel, base: ClassModel | None, own: list[PropertyDef]) -> list[str]:
        lines = [
            "@Override",
            "public boolean equals(Object other) {",
            f"{INDENT}if (this == other)",
            f"{INDENT * 2}return true;",
            f"{INDENT}if (!(other instanceof {model.name}))",
            f"{INDENT * 2}return false;",
        ]
        if base is not None:
            if own:
                lines += [f"{INDENT}if (!super.equals(other))", f"{INDENT * 2}return false;"]
            else:
                lines.append(f"{INDENT}return super.equals(other);")
        if own:
            lines.append(f"{INDENT}{model.name} typedOther = ({model.name})other;")
            for prop in own[:-1]:
                lines += [f"{INDENT}if ({self._not_equal(prop)})", f"{INDENT * 2}return false;"]
            lines.append(f"{INDENT}return {self._equal(own[-1])};")
        elif base is None:
            lines.append(f"{INDENT}return true;")
        lines.append("}")
        return indent_lines(lines)

    def _equal(self, prop: PropertyDef) -> str:
        name = self.field_name(prop)
        if self._field_type(prop) in self.BOXED:
            return f"{name} == typedOther.{name}"
        if prop.nullable:
            return f"{name} == null ? typedOther.{name} == null : {name}.equals(typedOther.{name})"
        return f"{name}.equals(typedOther.{name})"

    def _not_equal(self, prop: PropertyDef) -> str:
        name = self.field_name(prop)
        if self._field_type(prop) in self.BOXED:
            return f"{name} != typedOther.{name}"
        if prop.nullable:
            return f"!({self._equal(prop)})"
        return f"!{name}.equals(typedOther.{name})"

    def _hash_term(self, prop: PropertyDef) -> str:
        name = self.field_name(prop)
        field_type = self._field_type(prop)
        if field_type in self.HASH_FUNCTIONS:
            return self.HASH_FUNCTIONS[field_type].format(name)
        if prop.nullable:
            return f"({name} != null ? {name}.hashCode() : 0)"
        return f"{name}.hashCode()"

    def _hash_code_section(self, base: ClassModel | None, own: list[PropertyDef]) -> list[str]:
        terms = ["super.hashCode()"] if base is not None else []
        terms += [self._hash_term(prop) for prop in own]
        lines = ["@Override", "public int hashCode() {"]
        if not terms:
            lines.append(f"{INDENT}return 0;")
        elif len(terms) == 1:
            lines.append(f"{INDENT}return {terms[0]};")
        else:
            lines.append(f"{INDENT}int hash = {terms[0]};")
            lines += [f"{INDENT}hash = 31 * hash + {term};" for term in terms[1:]]
            lines.append(f"{INDENT}return hash;")
        lines.append("}")
        return indent_lines(lines)

    def _enum_section(self, enum_def: EnumDef) -> list[str]:
        constants = [self.enum_constant(enum_def, value) for value in enum_def.values]
        lines = [f"public enum {enum_def.name} {{"]
        lines += [f"{INDENT}{constant}," for constant in constants[:-1]]
        lines += [f"{INDENT}{constants[-1]}", "}"]
        return indent_lines(lines)

    def translate_type(self, type_ref: TypeRef, nullable: bool = False) -> str:
        """Translate IR type to Java type string."""
        if type_ref.kind is TypeKind.PRIMITIVE:
            result = self.TYPE_MAP[type_ref.primitive]
            if type_ref.primitive in self.TYPE_IMPORTS:
                self.imports.add(self.TYPE_IMPORTS[type_ref.primitive])
            if nullable:
                result = self.BOXED.get(result, result)
        elif type_ref.kind is TypeKind.CLASS:
            result = self.class_type_name(type_ref.class_model)
        elif type_ref.kind is TypeKind.SEQUENCE:
            self.imports.add("java.util.List")
            result = f"List<{self.translate_type(type_ref.item_type, nullable=True)}>"
        elif type_ref.kind is TypeKind.MAP:
            self.imports.add("java.util.Map")
            result = f"Map<String, {self.translate_type(type_ref.item_type, nullable=True)}>"
        elif type_ref.kind is TypeKind.ENUM:
            result = self.enum_type_name(type_ref.enum_def)
        else:
            raise UnsupportedTargetConstruct(self.TEMPLATE_LANG, f"type {type_ref.kind}")
        return result

    def format_default_value(self, value: Any, type_ref: TypeRef) -> str:
        """Format a default value for Java."""
        if type_ref.kind is TypeKind.ENUM:
            return f"{self.enum_type_name(type_ref.enum_def)}.{self.enum_constant(type_ref.enum_def, value)}"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return self.string_literal(value)
        if type_ref.primitive is PrimitiveKind.NUMBER:
            return repr(float(value))
        if type_ref.primitive is PrimitiveKind.LONG:
            return f"{value}L"
        return str(value)

    def number_literal(self, value: int | float) -> str:
        if isinstance(value, int) and not INT_MIN <= value <= INT_MAX:
            return f"{value}L"
        return repr(value)

    def message_literal(self, message: str, actual: str | None) -> str:
        if actual is None:
            return self.string_literal(message)
        return f"{self.string_literal(message + ' - ')} + {actual}"
