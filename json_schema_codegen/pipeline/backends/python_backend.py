"""
Python code generation backend.

Generates one module per top-level class, holding frozen keyword-only
dataclasses that validate themselves in __post_init__. A class body cannot
name the class it is nested in, so a nested class with a base (oneOf / anyOf
variants, allOf extensions) is declared at module level after the top-level
class and then attached to its enclosing class.
"""

from __future__ import annotations

import collections
import keyword
import re
from collections.abc import Iterator
from typing import Any

from ...utils import is_identifier
from ...validation_rules import Guard
from ..analyzer.ir_nodes import (
    ClassKind,
    ClassModel,
    ConstraintKind,
    EnumDef,
    PrimitiveKind,
    PropertyDef,
    TypeKind,
    TypeRef,
)
from ..errors import UnsupportedTargetConstruct
from .base import INDENT, CodeBackend, indent_lines


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"

    TYPE_MAP = {
        PrimitiveKind.STRING: "str",
        PrimitiveKind.INTEGER: "int",
        PrimitiveKind.LONG: "int",
        PrimitiveKind.NUMBER: "float",
        PrimitiveKind.BOOLEAN: "bool",
        PrimitiveKind.DATE: "datetime.date",
        PrimitiveKind.DATE_TIME: "datetime.datetime",
        PrimitiveKind.TIME: "datetime.time",
        PrimitiveKind.UUID: "uuid.UUID",
        PrimitiveKind.URI: "str",
        PrimitiveKind.ANY: "Any",
    }

    TYPE_IMPORTS = {
        PrimitiveKind.DATE: "datetime",
        PrimitiveKind.DATE_TIME: "datetime",
        PrimitiveKind.TIME: "datetime",
        PrimitiveKind.UUID: "uuid",
    }

    KEYWORDS = frozenset(keyword.kwlist)

    DATACLASS_DECORATOR = "@dataclass(frozen=True, kw_only=True)"

    # Name of the module-level helper turning lists and dicts into hashable values
    FROZEN = "_frozen"

    def __init__(self, config):
        super().__init__(config)
        self.frozen_template = self.jinja_env.get_template("frozen.py.jinja2")
        self.python_imports: set[tuple[str, str]] = set()
        # (class name, local name) of the sibling modules imported for annotations only
        self.type_checking: set[tuple[str, str]] = set()
        # Sibling modules imported at runtime, for base classes
        self.runtime_imports: set[str] = set()
        self.needs_frozen = False

    def generate(self, model: ClassModel) -> str:
        """Generate a Python module for a top-level class."""
        self.python_imports = set()
        self.type_checking = set()
        self.runtime_imports = set()
        self.needs_frozen = False
        return super().generate(model)

    def render_body(self, model: ClassModel) -> str:
        """The top-level class, then every nested class with a base, attached to its enclosing class."""
        blocks = [self.render_scoped(model)]
        hoisted = self._hoisting_order(model)
        for nested in hoisted:
            blocks.append(self.render_scoped(nested))
            blocks.append(f"{nested.nested_name} = {nested.name}\n")
        self._check_module_names(model, hoisted)
        if self.needs_frozen:
            blocks.insert(0, self.frozen_template.render())
        return "\n\n".join(blocks)

    def render_class(self, model: ClassModel) -> str:
        """Render a Python class declaration."""
        base = self.extended_base(model)
        inherited, fields = self.split_fields(model)

        field_lines = [self._field_line(model, prop) for prop in fields]
        post_init = self._post_init_section(inherited, fields)

        sections = [self._enum_section(enum_def) for enum_def in model.enums]
        sections.extend(self._render_nested(model))
        if field_lines:
            sections.append(indent_lines(field_lines))
        if post_init:
            sections.append(post_init)
        if model.kind is not ClassKind.PLAIN:
            hash_section = self._hash_section(inherited + fields)
            if hash_section:
                sections.append(hash_section)
        if not sections:
            sections.append(indent_lines(["pass"]))

        bases = f"({self._base_name(base)})" if base is not None else ""
        if model.kind is ClassKind.PLAIN:
            declaration = [f"class {model.name}{bases}:"]
        else:
            self.python_imports.add(("dataclasses", "dataclass"))
            declaration = [self.DATACLASS_DECORATOR, f"class {model.name}{bases}:"]
        return self._render_template(declaration, sections)

    def _render_nested(self, model: ClassModel) -> list[list[str]]:
        return [
            indent_lines(self.render_scoped(nested).splitlines()) for nested in model.nested if not self._hoisted(nested)
        ]

    def _field_line(self, model: ClassModel, prop: PropertyDef) -> str:
        line = f"{self.field_name(prop)}: {self.translate_type(prop.type_ref, prop.nullable)}"
        if prop.has_default:
            if prop.type_ref.kind is TypeKind.ENUM and prop.type_ref.enum_def.enclosing is not model:
                raise UnsupportedTargetConstruct(
                    self.TEMPLATE_LANG,
                    f"default of {prop.name} in {model.nested_name} uses an enum declared in another class",
                )
            line += f" = {self.format_default_value(prop.default_value, prop.type_ref)}"
        elif prop.nullable and not prop.required:
            line += " = None"
        return line

    def _post_init_section(self, inherited: list[PropertyDef], fields: list[PropertyDef]) -> list[str]:
        lines = []
        for prop in fields:
            for guard in self.property_guards(prop):
                lines.extend(self.render_guard(guard, f"self.{self.field_name(prop)}", key=self._condition_key(guard, prop)))
        if not lines:
            return []
        if any(self.property_guards(prop) for prop in inherited):
            lines.insert(0, "super().__post_init__()")
        return indent_lines(["def __post_init__(self):"] + indent_lines(lines))

    def _condition_key(self, guard: Guard, prop: PropertyDef) -> str | None:
        """Distinct items of an unhashable type are compared in their frozen form."""
        if guard.kind is not ConstraintKind.UNIQUE_ITEMS:
            return None
        sequence = prop.type_ref.item_type if guard.element else prop.type_ref
        if not self.needs_freezing(sequence.item_type):
            return None
        self.needs_frozen = True
        return "uniqueItems_frozen"

    def _hash_section(self, fields: list[PropertyDef]) -> list[str]:
        # The generated dataclass hash fails on list and dict values
        if not any(self.needs_freezing(prop.type_ref) for prop in fields):
            return []
        self.needs_frozen = True
        terms = []
        for prop in fields:
            value = f"self.{self.field_name(prop)}"
            terms.append(f"{self.FROZEN}({value})" if self.needs_freezing(prop.type_ref) else value)
        values = ", ".join(terms) + ("," if len(terms) == 1 else "")
        return indent_lines(["def __hash__(self):", f"{INDENT}return hash(({values}))"])

    def needs_freezing(self, type_ref: TypeRef) -> bool:
        """Whether values of a type can be lists or dicts."""
        if type_ref.kind in (TypeKind.SEQUENCE, TypeKind.MAP):
            return True
        return type_ref.kind is TypeKind.PRIMITIVE and type_ref.primitive is PrimitiveKind.ANY

    def _enum_section(self, enum_def: EnumDef) -> list[str]:
        self.python_imports.add(("enum", "Enum"))
        members = [(self.enum_constant(enum_def, value), value) for value in enum_def.values]
        names = [name for name, _ in members]
        if len(set(names)) != len(names):
            raise UnsupportedTargetConstruct(self.TEMPLATE_LANG, f"enum values of {enum_def.name} map to the same member name")
        lines = [f"class {enum_def.name}(str, Enum):"]
        lines += [f"{INDENT}{name} = {self.string_literal(value)}" for name, value in members]
        return indent_lines(lines)

    def enum_constant(self, enum_def: EnumDef, value: str) -> str:
        name = re.sub(r"[^0-9A-Za-z_]", "_", value).upper()
        if not is_identifier(name) or name in self.KEYWORDS:
            raise UnsupportedTargetConstruct(self.TEMPLATE_LANG, f"enum value {value!r} of {enum_def.name} has no member name")
        return name

    # ------------------------------------------------------------------
    # Inheritance
    # ------------------------------------------------------------------

    def can_extend(self, model: ClassModel, base: ClassModel) -> bool:
        # A base declared inside the class does not exist yet when the class statement runs
        return base is not model and model not in base.enclosing_chain

    def _hoisted(self, model: ClassModel) -> bool:
        return model.enclosing is not None and self.extended_base(model) is not None

    def _base_name(self, base: ClassModel) -> str:
        head = base.top_level
        if head is not self.current:
            self.runtime_imports.add(head.name)
        return base.nested_name

    def _nested_classes(self, model: ClassModel) -> Iterator[ClassModel]:
        for nested in model.nested:
            yield nested
            yield from self._nested_classes(nested)

    def _hoisting_order(self, top: ClassModel) -> list[ClassModel]:
        """Nested classes declared after the top-level class, each after its enclosing and base classes."""
        ordered: list[ClassModel] = []
        for nested in self._nested_classes(top):
            self._hoist(nested, top, ordered, [])
        return ordered

    def _hoist(self, model: ClassModel, top: ClassModel, ordered: list[ClassModel], visiting: list[ClassModel]) -> None:
        if not self._hoisted(model) or model in ordered:
            return
        if model in visiting:
            raise UnsupportedTargetConstruct(self.TEMPLATE_LANG, f"{model.nested_name} cannot be declared after its base class")
        visiting.append(model)
        required = list(model.enclosing_chain)
        base = self.extended_base(model)
        if base.top_level is top:
            required += base.enclosing_chain + [base]
        for outer in required:
            self._hoist(outer, top, ordered, visiting)
        ordered.append(model)

    def _check_module_names(self, model: ClassModel, hoisted: list[ClassModel]) -> None:
        taken = {model.name, self.FROZEN}
        taken.update(self.imports)
        taken.update(name for _, name in self.python_imports)
        taken.update(local for _, local in self.type_checking)
        taken.update(self.runtime_imports)
        if self.type_checking:
            taken.add("TYPE_CHECKING")
        for nested in hoisted:
            if nested.name in taken:
                raise UnsupportedTargetConstruct(
                    self.TEMPLATE_LANG,
                    f"{nested.nested_name} clashes with the module-level name {nested.name}",
                )
            taken.add(nested.name)

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def lookup_scopes(self) -> list[ClassModel]:
        # Class bodies do not see the names of their enclosing classes
        return [self.scope] if self.scope is not None else []

    def qualify(self, head: ClassModel, name: str) -> str:
        """Names of other modules are imported for type checking, under an alias when hidden."""
        if head is self.current:
            return name
        local = f"_{head.name}" if self.is_shadowed(head) else head.name
        self.type_checking.add((head.name, local))
        return local + name[len(head.name) :]

    def translate_type(self, type_ref: TypeRef, nullable: bool = False) -> str:
        """Translate IR type to Python type string."""
        if type_ref.kind is TypeKind.PRIMITIVE:
            result = self.TYPE_MAP[type_ref.primitive]
            if type_ref.primitive in self.TYPE_IMPORTS:
                self.imports.add(self.TYPE_IMPORTS[type_ref.primitive])
            if type_ref.primitive is PrimitiveKind.ANY:
                self.python_imports.add(("typing", "Any"))
        elif type_ref.kind is TypeKind.CLASS:
            result = self.class_type_name(type_ref.class_model)
        elif type_ref.kind is TypeKind.SEQUENCE:
            result = f"list[{self.translate_type(type_ref.item_type)}]"
        elif type_ref.kind is TypeKind.MAP:
            result = f"dict[str, {self.translate_type(type_ref.item_type)}]"
        elif type_ref.kind is TypeKind.ENUM:
            result = self.enum_type_name(type_ref.enum_def)
        else:
            raise UnsupportedTargetConstruct(self.TEMPLATE_LANG, f"type {type_ref.kind}")
        return f"{result} | None" if nullable else result

    def format_default_value(self, value: Any, type_ref: TypeRef) -> str:
        """Format a default value for Python."""
        if type_ref.kind is TypeKind.ENUM:
            return f"{type_ref.enum_def.name}.{self.enum_constant(type_ref.enum_def, value)}"
        if isinstance(value, bool):
            return "True" if value else "False"
        if isinstance(value, str):
            return self.string_literal(value)
        if type_ref.primitive is PrimitiveKind.NUMBER:
            return repr(float(value))
        return str(value)

    def message_literal(self, message: str, actual: str | None) -> str:
        if actual is None:
            return self.string_literal(message)
        escaped = self.string_literal(message + " - ").replace("{", "{{").replace("}", "}}")
        return f'f{escaped[:-1]}{{{actual}}}"'

    def _assemble_imports(self) -> list[str]:
        """Assemble Python import statements."""
        type_checking = sorted(
            (name, local) for name, local in self.type_checking if local != name or name not in self.runtime_imports
        )
        if type_checking:
            self.python_imports.add(("typing", "TYPE_CHECKING"))

        import_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.python_imports:
            import_groups[module].add(name)

        standard = [f"import {module}" for module in sorted(self.imports)]
        for module in sorted(import_groups):
            standard.append(f"from {module} import {', '.join(sorted(import_groups[module]))}")
        sections = [
            ["from __future__ import annotations"],
            standard,
            [f"from .{name} import {name}" for name in sorted(self.runtime_imports)],
        ]
        if type_checking:
            checked = [
                f"{INDENT}from .{name} import {name}" + (f" as {local}" if local != name else "")
                for name, local in type_checking
            ]
            sections.append(["if TYPE_CHECKING:"] + checked)

        assembled: list[str] = []
        for section in sections:
            if section:
                if assembled:
                    assembled.append("")
                assembled += section
        return assembled
