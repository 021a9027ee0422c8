"""
Base class for code generation backends.

Defines the interface that all language-specific backends must implement,
plus what they share: template setup, the inheritance capability check and
guard rendering from the per-language string templates.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import jinja2

from ...utils import is_identifier
from ...validation_rules import ActualValue, Guard
from ...validator import ConstraintTranslator
from ..analyzer.ir_nodes import ClassModel, ConstraintKind, EnumDef, PrimitiveKind, PropertyDef, TypeRef
from ..config import CodeGeneratorConfig
from ..errors import UnsupportedTargetConstruct

logger = logging.getLogger(__name__)

TEMPLATE_ROOT = Path(__file__).parent.parent.parent / "templates"

INDENT = "    "


def indent_lines(lines: list[str], levels: int = 1) -> list[str]:
    """Indent every non-empty line."""
    prefix = INDENT * levels
    return [prefix + line if line else line for line in lines]


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Type mapping from primitive kinds to language types
    TYPE_MAP: dict[PrimitiveKind, str] = {}

    # Import needed by a primitive type
    TYPE_IMPORTS: dict[PrimitiveKind, str] = {}

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    # Reserved words that cannot be used as plain identifiers
    KEYWORDS: frozenset[str] = frozenset()

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self.translator = ConstraintTranslator()
        self.imports: set[str] = set()

        # Top-level class of the file being rendered
        self.current: ClassModel | None = None

        # Class whose body is being rendered; type names are resolved from here
        self.scope: ClassModel | None = None

        self._setup_templates()
        self.string_templates = self._load_string_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = TEMPLATE_ROOT / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.class_template = self.jinja_env.get_template(f"class.{self.FILE_EXTENSION}.jinja2")

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def generate(self, model: ClassModel) -> str:
        """
        Render a top-level class, with everything nested in it, to file text.

        Args:
            model: A top-level class of the model graph

        Returns:
            Header block followed by the class body
        """
        self.imports = set()
        self.current = model
        self.scope = None
        body = self.render_body(model)
        prefix = self.prefix_template.render(
            generation_comment=self.config.add_generation_comment,
            file_name=f"{model.name}.{self.FILE_EXTENSION}",
            package=model.package,
            imports=self._assemble_imports(),
        )
        return prefix + body

    def render_body(self, model: ClassModel) -> str:
        """Everything after the header block: the top-level class declaration."""
        return self.render_scoped(model)

    def render_scoped(self, model: ClassModel) -> str:
        """Render a class with its body as the scope for type names."""
        outer, self.scope = self.scope, model
        try:
            return self.render_class(model)
        finally:
            self.scope = outer

    @abstractmethod
    def render_class(self, model: ClassModel) -> str:
        """
        Render one class declaration, including its nested classes.

        Args:
            model: The class

        Returns:
            Declaration text, not indented, ending with a newline
        """

    @abstractmethod
    def translate_type(self, type_ref: TypeRef, nullable: bool = False) -> str:
        """
        Translate an IR type to a language-specific type string.

        Args:
            type_ref: The type reference
            nullable: Whether the value may be null

        Returns:
            Language-specific type string
        """

    @abstractmethod
    def format_default_value(self, value: Any, type_ref: TypeRef) -> str:
        """
        Format a default value for the target language.

        Args:
            value: The default value (a scalar)
            type_ref: The type of the value

        Returns:
            Formatted default value string
        """

    @abstractmethod
    def message_literal(self, message: str, actual: str | None) -> str:
        """
        Build the string expression of a guard failure message.

        Args:
            message: Static part of the message
            actual: Expression of the actual value appended after " - ", if any
        """

    def _assemble_imports(self) -> list[str]:
        return sorted(self.imports)

    def _render_template(self, declaration: list[str], sections: list[list[str]]) -> str:
        return self.class_template.render(declaration=declaration, sections=sections)

    def _render_nested(self, model: ClassModel) -> list[list[str]]:
        return [indent_lines(self.render_scoped(nested).splitlines()) for nested in model.nested]

    # ------------------------------------------------------------------
    # Class shape
    # ------------------------------------------------------------------

    def can_extend(self, model: ClassModel, base: ClassModel) -> bool:
        """Whether a class may extend the given base; otherwise its fields are flattened."""
        return True

    def extended_base(self, model: ClassModel) -> ClassModel | None:
        """The base class rendered with "extends", or None when there is none or it is flattened."""
        if model.base is None:
            return None
        if self.can_extend(model, model.base):
            return model.base
        logger.debug("Flattening fields of %s into %s for %s", model.base.name, model.name, self.TEMPLATE_LANG)
        return None

    def split_fields(self, model: ClassModel) -> tuple[list[PropertyDef], list[PropertyDef]]:
        """
        Split the fields of a class into inherited and own ones.

        In the flattened fallback all fields, base ones first, are own fields.
        """
        base = self.extended_base(model)
        if base is None:
            return [], model.all_properties()
        return base.all_properties(), list(model.properties)

    def field_name(self, prop: PropertyDef) -> str:
        """Identifier of a property in the target language."""
        if not is_identifier(prop.name):
            raise UnsupportedTargetConstruct(self.TEMPLATE_LANG, f"property name {prop.name!r} is not an identifier")
        if prop.name in self.KEYWORDS:
            return self.escape_keyword(prop.name)
        return prop.name

    def escape_keyword(self, name: str) -> str:
        return f"{name}_"

    def enum_constant(self, enum_def: EnumDef, value: str) -> str:
        """Name of an enum constant; the value itself for Kotlin and Java."""
        if not is_identifier(value) or value in self.KEYWORDS:
            raise UnsupportedTargetConstruct(self.TEMPLATE_LANG, f"enum value {value!r} of {enum_def.name} is not an identifier")
        return value

    # ------------------------------------------------------------------
    # Type names
    # ------------------------------------------------------------------

    def class_type_name(self, model: ClassModel) -> str:
        """Name of a class as written inside the current scope, e.g. "TypeA.A"."""
        return self.qualify(model.top_level, model.nested_name)

    def enum_type_name(self, enum_def: EnumDef) -> str:
        return self.qualify(enum_def.enclosing.top_level, f"{enum_def.enclosing.nested_name}.{enum_def.name}")

    def base_type_name(self, model: ClassModel, base: ClassModel) -> str:
        """Name of a base class in the declaration of model, which is resolved outside its body."""
        outer, self.scope = self.scope, model.enclosing
        try:
            return self.class_type_name(base)
        finally:
            self.scope = outer

    def qualify(self, head: ClassModel, name: str) -> str:
        """
        Prefix a name with the package when its top-level class is hidden in the current scope.

        Args:
            head: Top-level class the name starts with
            name: Name relative to the package
        """
        if not self.is_shadowed(head):
            return name
        if not head.package:
            raise UnsupportedTargetConstruct(
                self.TEMPLATE_LANG,
                f"{name} is hidden by a class nested in {self.scope.nested_name} and has no package",
            )
        return f"{head.package}.{name}"

    def is_shadowed(self, head: ClassModel) -> bool:
        """Whether the simple name of a top-level class resolves to another class in the current scope."""
        for scope in self.lookup_scopes():
            for member in scope.nested + scope.enums:
                if member.name == head.name:
                    return member is not head
        return False

    def lookup_scopes(self) -> list[ClassModel]:
        """Classes whose members are visible by simple name, innermost first."""
        if self.scope is None:
            return []
        scopes: list[ClassModel] = []
        for scope in [self.scope] + self.scope.enclosing_chain[::-1]:
            while scope is not None and scope not in scopes:
                scopes.append(scope)
                scope = self.extended_base(scope)
        return scopes

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def _load_string_templates(self) -> dict[str, Any]:
        """Load the guard string templates of this backend's language from its JSON file."""
        template_file = TEMPLATE_ROOT / self.TEMPLATE_LANG / "guards.json"
        with open(template_file, "r", encoding="utf-8") as f:
            return json.load(f)

    def get_string(self, key: str, **format_params) -> str | list[str]:
        """
        Get a guard string template and format it.

        Args:
            key: The template key (a keyword like "minimum", or "_template.guard")
            **format_params: Parameters to format into the string template
        """
        templates = self.string_templates
        template: Any = templates
        for part in key.split("."):
            if part not in template:
                raise KeyError(f"No guard template {key!r} for {self.TEMPLATE_LANG}")
            template = template[part]
        return self._format_template(template, format_params)

    def has_string(self, key: str) -> bool:
        templates = self.string_templates
        section, _, name = key.rpartition(".")
        return name in (templates.get(section, {}) if section else templates)

    def _format_template(self, template, format_params: dict):
        """Recursively format a template that can be a string or a list."""
        if isinstance(template, str):
            return template.format(**format_params)
        elif isinstance(template, list):
            return [self._format_template(item, format_params) for item in template]
        return template

    def property_guards(self, prop: PropertyDef) -> list[Guard]:
        if not self.config.add_validation:
            return []
        return [guard for guard in self.translator.translate(prop) if not self.skip_guard(guard, prop)]

    def skip_guard(self, guard: Guard, prop: PropertyDef) -> bool:
        """Whether a guard is already enforced by the declared type."""
        return False

    def render_guard(self, guard: Guard, value: str, item_type: str = "", key: str | None = None) -> list[str]:
        """
        Render one guard to statement lines.

        Args:
            guard: The guard
            value: Expression of the property value in the constructor
            item_type: Element type, for guards on sequence items
            key: Template of the condition, instead of the one named after the guard kind
        """
        templates = self.string_templates
        self.imports.update(templates.get("_imports", {}).get(guard.kind.value, []))

        target = "item" if guard.element else value
        condition = self._condition(guard, target, key)
        if guard.nullable and not guard.element and self.has_string("_template.null_check"):
            condition = self.get_string("_template.null_check", value=value, condition=condition)
            nullable_block = False
        else:
            nullable_block = guard.nullable

        actual = None
        if guard.actual is not ActualValue.NONE:
            actual = self.get_string(f"_actual.{guard.actual.value}", value=target)
        message = self.message_literal(guard.message, actual)
        lines = self.get_string("_template.guard", condition=condition, message=message)

        if guard.element:
            lines = [self.get_string("_template.loop", value=value, item_type=item_type)] + indent_lines(lines)
        if nullable_block:
            lines = [self.get_string("_template.null_block", value=value)] + indent_lines(lines)
        return lines

    def _condition(self, guard: Guard, target: str, key: str | None = None) -> str:
        operand = self.format_operand(guard)
        if key is None:
            key = guard.kind.value
            if isinstance(guard.operand, int) and not isinstance(guard.operand, bool):
                special = f"{key}_{guard.operand}"
                if self.has_string(special):
                    key = special
        return self.get_string(key, value=target, operand=operand)

    def format_operand(self, guard: Guard) -> str:
        if guard.kind is ConstraintKind.PATTERN:
            return self.pattern_literal(guard.operand)
        if guard.operand is None or isinstance(guard.operand, bool):
            return ""
        return self.number_literal(guard.operand)

    def number_literal(self, value: int | float) -> str:
        return repr(value)

    def pattern_literal(self, pattern: str) -> str:
        return self.string_literal(pattern)

    def string_literal(self, text: str) -> str:
        """A double-quoted literal with JSON escapes, valid in all targets."""
        return json.dumps(text)

