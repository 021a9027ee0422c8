"""
Code generator entry point.

Runs the phases for one document: node tree -> reference resolver -> class
model builder -> backend rendering -> output resolver. Every call to generate
or generate_all owns its resolver, its class cache and its backend, and
renders all files before the first one is written.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .analyzer import ClassModel, ReferenceResolver, SchemaAnalyzer
from .backends import get_backend
from .config import CodeGeneratorConfig, TargetLanguage
from .output import FileOutputResolver, OutputResolver, TargetFileName
from .schema_ast import SchemaNode

logger = logging.getLogger(__name__)


class CodeGenerator:
    """Generates one source file per top-level class of a schema document."""

    def __init__(
        self,
        language: TargetLanguage | str = TargetLanguage.KOTLIN,
        config: CodeGeneratorConfig | None = None,
        output_resolver: OutputResolver | None = None,
    ):
        """
        Initialize the generator.

        Args:
            language: Target language selecting the backend
            config: Code generation configuration
            output_resolver: Callable giving a text sink per target file (files on disk by default)
        """
        self.language = TargetLanguage(language)
        self.config = config or CodeGeneratorConfig()
        self.output_resolver = output_resolver or FileOutputResolver()

    def generate(self, schema: SchemaNode | dict, name: str | None = None) -> list[TargetFileName]:
        """
        Generate the root class of a schema document, and the classes it defines inline.

        Args:
            schema: Schema node tree or parsed JSON / YAML data
            name: Class name used when the schema has no title

        Returns:
            The written targets, in emission order
        """
        return self.write(self.render(schema, name))

    def generate_all(
        self,
        root: SchemaNode | dict,
        pointer: str,
        name_filter: Callable[[str], bool] | None = None,
    ) -> list[TargetFileName]:
        """
        Generate one root class per member of a definitions container.

        Args:
            root: Document holding the container
            pointer: Pointer to the container, e.g. "#/definitions" or "/components/schemas"
            name_filter: Predicate on member names; members it rejects are built when
                referenced but never written

        Returns:
            The written targets, in emission order
        """
        return self.write(self.render_all(root, pointer, name_filter))

    def render(self, schema: SchemaNode | dict, name: str | None = None) -> dict[TargetFileName, str]:
        """Render like generate, returning the text per target instead of writing it."""
        node = self._as_node(schema)
        analyzer = SchemaAnalyzer(ReferenceResolver(node), self.config)
        root_model = analyzer.build_root(node, name)
        return self._render_models(analyzer, [root_model])

    def render_all(
        self,
        root: SchemaNode | dict,
        pointer: str,
        name_filter: Callable[[str], bool] | None = None,
    ) -> dict[TargetFileName, str]:
        """Render like generate_all, returning the text per target instead of writing it."""
        node = self._as_node(root)
        resolver = ReferenceResolver(node)
        analyzer = SchemaAnalyzer(resolver, self.config)

        entries = analyzer.register_definitions(list(resolver.iter_definitions(pointer, name_filter)))
        selected = [analyzer.build_definition(entry) for entry in entries if entry.selected]
        return self._render_models(analyzer, selected)

    def _render_models(self, analyzer: SchemaAnalyzer, owners: list[ClassModel]) -> dict[TargetFileName, str]:
        backend = get_backend(self.language, self.config)
        rendered: dict[TargetFileName, str] = {}
        for owner in owners:
            for model in self._owned_classes(analyzer, owner):
                if model.name in self.config.ignore_classes:
                    logger.debug("Skipping ignored class %s", model.name)
                    continue
                rendered[self.target_for(model)] = backend.generate(model)
        logger.info("Rendered %d %s files", len(rendered), self.language.value)
        return rendered

    def _owned_classes(self, analyzer: SchemaAnalyzer, owner: ClassModel) -> list[ClassModel]:
        """The owner first, then the top-level inline classes first reached from it."""
        owned = [
            model for model in analyzer.top_level_classes if model is not owner and analyzer.owner_of(model) is owner
        ]
        return [owner] + owned

    def target_for(self, model: ClassModel) -> TargetFileName:
        return TargetFileName(
            name=model.name,
            extension=self.language.suffix,
            dirs=self.config.package_dirs,
            base_directory=self.config.base_directory,
        )

    def write(self, rendered: dict[TargetFileName, str]) -> list[TargetFileName]:
        for target, text in rendered.items():
            with self.output_resolver(target) as sink:
                sink.write(text)
        return list(rendered)

    @staticmethod
    def _as_node(schema: SchemaNode | Any) -> SchemaNode:
        if isinstance(schema, SchemaNode):
            return schema
        return SchemaNode.from_value(schema)
