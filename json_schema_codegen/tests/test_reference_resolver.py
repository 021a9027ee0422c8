"""
Unit tests for pointer resolution and definitions iteration.
"""

import unittest

from json_schema_codegen import CyclicReference, UnresolvedReference
from json_schema_codegen.pipeline.analyzer import ReferenceResolver
from json_schema_codegen.pipeline.analyzer.reference_resolver import canonical
from json_schema_codegen.pipeline.schema_ast import SchemaNode, load_json, load_yaml

DOCUMENT = {
    "definitions": {
        "Person": {"type": "object"},
        "a/b": {"type": "string"},
        "with space": {"type": "integer"},
        "Alias": {"$ref": "#/definitions/Person"},
        "AliasOfAlias": {"$ref": "#/definitions/Alias"},
    },
    "list": [{"type": "boolean"}],
}


class TestReferenceResolver(unittest.TestCase):
    def setUp(self):
        self.root = SchemaNode.from_value(DOCUMENT)
        self.resolver = ReferenceResolver(self.root)

    def test_pointer_forms(self):
        person = self.root.get("definitions").get("Person")
        self.assertIs(self.resolver.resolve("#/definitions/Person"), person)
        self.assertIs(self.resolver.resolve("/definitions/Person"), person)
        self.assertIs(self.resolver.resolve("#"), self.root)
        self.assertEqual(person.source_path, "/definitions/Person")

    def test_escapes(self):
        self.assertEqual(self.resolver.resolve("#/definitions/a~1b").get_value("type"), "string")
        self.assertEqual(self.resolver.resolve("#/definitions/with%20space").get_value("type"), "integer")
        self.assertEqual(self.resolver.resolve("/list/0").get_value("type"), "boolean")

    def test_canonical(self):
        self.assertEqual(canonical("#/definitions/Person"), "/definitions/Person")
        self.assertEqual(canonical("/definitions/Person"), "/definitions/Person")
        self.assertEqual(canonical("#"), "")

    def test_unresolved(self):
        for pointer in ("#/definitions/Missing", "/list/3", "other.json#/definitions/Person"):
            with self.assertRaises(UnresolvedReference) as ctx:
                self.resolver.resolve(pointer)
            self.assertEqual(ctx.exception.pointer, pointer)

    def test_follow_alias_chain(self):
        resolved = self.resolver.follow(self.root.get("definitions").get("AliasOfAlias"))
        self.assertEqual(resolved.pointer, "/definitions/Person")
        self.assertIs(resolved.target_node, self.resolver.resolve("/definitions/Person"))
        self.assertFalse(resolved.in_progress)

    def test_resolving_detects_reentry(self):
        with self.resolver.resolving("#/definitions/Person") as resolved:
            self.assertTrue(resolved.in_progress)
            self.assertTrue(self.resolver.follow(self.root.get("definitions").get("Alias")).in_progress)
            with self.assertRaises(CyclicReference):
                with self.resolver.resolving("/definitions/Person"):
                    pass
        with self.resolver.resolving("/definitions/Person"):
            pass

    def test_iter_definitions(self):
        entries = list(self.resolver.iter_definitions("#/definitions", lambda name: name.startswith("A")))
        self.assertEqual([entry.name for entry in entries], ["Person", "a/b", "with space", "Alias", "AliasOfAlias"])
        self.assertEqual([entry.selected for entry in entries], [False, False, False, True, True])

    def test_iter_definitions_is_lazy(self):
        iterator = self.resolver.iter_definitions("/definitions")
        self.assertEqual(next(iterator).name, "Person")

    def test_iter_definitions_of_non_object(self):
        with self.assertRaises(UnresolvedReference):
            list(self.resolver.iter_definitions("/list"))


class TestLoaders(unittest.TestCase):
    def test_json_and_yaml_agree(self):
        from_json = load_json('{"type": "object", "properties": {"a": {"type": "string"}}}')
        from_yaml = load_yaml("type: object\nproperties:\n  a:\n    type: string\n")
        self.assertEqual(from_json.to_value(), from_yaml.to_value())
        self.assertEqual(from_yaml.get("properties").get("a").source_path, "/properties/a")

    def test_member_order_is_kept(self):
        node = load_yaml("properties:\n  zeta: {}\n  alpha: {}\n  mid: {}\n")
        self.assertEqual(list(node.get("properties")), ["zeta", "alpha", "mid"])
