"""
Tests for the generator run: emission set, sharing, naming and failure behaviour.
"""

import pytest
from conftest import PACKAGE_DIRS, make_generator

from json_schema_codegen import (
    CyclicReference,
    TargetFileName,
    TargetLanguage,
    UnresolvedReference,
    UnsupportedSchemaConstruct,
    UnsupportedTargetConstruct,
)
from json_schema_codegen.pipeline.analyzer import ReferenceResolver, SchemaAnalyzer
from json_schema_codegen.pipeline.backends import get_backend
from json_schema_codegen.pipeline.config import CodeGeneratorConfig
from json_schema_codegen.pipeline.schema_ast import SchemaNode


def kt(name):
    return TargetFileName(name, "kt", PACKAGE_DIRS, "dummy")


ORDER_SCHEMA = {
    "title": "Order",
    "type": "object",
    "properties": {
        "billing": {"$ref": "#/$defs/Address"},
        "shipping": {"$ref": "#/$defs/Address"},
    },
    "$defs": {
        "Address": {"type": "object", "properties": {"street": {"type": "string"}}},
    },
}


def test_fan_in_builds_and_emits_once(capture):
    node = SchemaNode.from_value(ORDER_SCHEMA)
    analyzer = SchemaAnalyzer(ReferenceResolver(node), CodeGeneratorConfig())
    order = analyzer.build_root(node)
    billing, shipping = order.properties
    assert billing.type_ref.class_model is shipping.type_ref.class_model

    targets = make_generator(TargetLanguage.KOTLIN, capture).generate(ORDER_SCHEMA)
    assert targets == [kt("Order"), kt("Address")]
    assert "    val billing: Address? = null,\n    val shipping: Address? = null\n" in capture[kt("Order")]


def test_determinism(swagger_doc, oneof_doc):
    for doc, pointer in ((swagger_doc, "/definitions"), (oneof_doc, "/$defs")):
        for language in TargetLanguage:
            first = make_generator(language, None).render_all(doc, pointer)
            second = make_generator(language, None).render_all(doc, pointer)
            assert first == second
            assert list(first) == list(second)


def test_collision_nests_inline_class_in_referencing_class(capture):
    doc = {
        "definitions": {
            "Person": {
                "type": "object",
                "properties": {"address": {"type": "object", "properties": {"line": {"type": "string"}}}},
            },
            "Address": {"type": "object", "properties": {"street": {"type": "string"}}},
        }
    }
    targets = make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate_all(doc, "/definitions")
    assert targets == [kt("Person"), kt("Address")]
    assert capture[kt("Person")] == (
        "package com.example\n"
        "\n"
        "data class Person(\n"
        "    val address: Person.Address? = null\n"
        ") {\n"
        "\n"
        "    data class Address(\n"
        "        val line: String? = null\n"
        "    )\n"
        "\n"
        "}\n"
    )
    assert "    val street: String? = null\n" in capture[kt("Address")]


def test_inline_class_without_collision_is_top_level(capture):
    doc = {
        "definitions": {
            "Customer": {
                "type": "object",
                "properties": {"contact": {"type": "object", "properties": {"email": {"type": "string"}}}},
            },
            "Invoice": {"type": "object", "properties": {"total": {"type": "number"}}},
        }
    }
    generator = make_generator(TargetLanguage.KOTLIN, capture)
    targets = generator.generate_all(doc, "/definitions", lambda name: name == "Customer")
    assert targets == [kt("Customer"), kt("Contact")]
    assert "    val contact: Contact? = null\n" in capture[kt("Customer")]


def test_recursive_type(capture):
    doc = {
        "definitions": {
            "Node": {"type": "object", "properties": {"value": {"type": "string"}, "next": {"$ref": "#/definitions/Node"}}},
        }
    }
    make_generator(TargetLanguage.KOTLIN, capture).generate_all(doc, "/definitions")
    assert "    val next: Node? = null\n" in capture[kt("Node")]


def test_all_of_extends_reference(capture):
    doc = {
        "$defs": {
            "Animal": {"type": "object", "required": ["name"], "properties": {"name": {"type": "string"}}},
            "Dog": {
                "allOf": [
                    {"$ref": "#/$defs/Animal"},
                    {"type": "object", "properties": {"breed": {"type": "string"}}},
                ]
            },
        }
    }
    make_generator(TargetLanguage.JAVA, capture, add_generation_comment=False).generate_all(doc, "/$defs")
    text = capture[TargetFileName("Dog", "java", PACKAGE_DIRS, "dummy")]
    assert "public class Dog extends Animal {\n" in text
    assert "            String name,\n            String breed\n" in text
    assert "        super(name);\n" in text

    kotlin = make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False)
    kotlin.generate_all(doc, "/$defs")
    assert capture[kt("Dog")] == (
        "package com.example\n"
        "\n"
        "data class Dog(\n"
        "    val name: String,\n"
        "    val breed: String? = null\n"
        ")\n"
    )


def test_non_object_members_are_skipped(capture):
    doc = {
        "definitions": {
            "Id": {"type": "string", "minLength": 3},
            "Colour": {"type": "string", "enum": ["red", "green"]},
            "Item": {
                "type": "object",
                "required": ["id"],
                "properties": {"id": {"$ref": "#/definitions/Id"}, "colour": {"$ref": "#/definitions/Colour"}},
            },
        }
    }
    targets = make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate_all(doc, "/definitions")
    assert targets == [kt("Item")]
    text = capture[kt("Item")]
    assert "    val id: String,\n    val colour: Item.Colour? = null\n" in text
    assert '        require(id.length >= 3) { "id length < minimum 3 - ${id.length}" }\n' in text


def test_ignore_classes(swagger_doc, capture):
    generator = make_generator(TargetLanguage.KOTLIN, capture, ignore_classes=["QueryResponse"])
    assert generator.generate_all(swagger_doc, "/definitions") == [kt("Person")]


def test_no_validation(swagger_doc, capture):
    make_generator(TargetLanguage.KOTLIN, capture, add_validation=False).generate_all(swagger_doc, "/definitions")
    assert "require(" not in capture[kt("Person")]


def test_unresolved_reference():
    schema = {"title": "Broken", "type": "object", "properties": {"other": {"$ref": "#/definitions/Missing"}}}
    with pytest.raises(UnresolvedReference) as exc_info:
        make_generator(TargetLanguage.KOTLIN, None).render(schema)
    assert exc_info.value.pointer == "#/definitions/Missing"


def test_cycle_through_array_alias():
    doc = {
        "definitions": {
            "Tree": {"type": "array", "items": {"$ref": "#/definitions/Tree"}},
            "Holder": {"type": "object", "properties": {"tree": {"$ref": "#/definitions/Tree"}}},
        }
    }
    with pytest.raises(CyclicReference):
        make_generator(TargetLanguage.KOTLIN, None).render_all(doc, "/definitions")


def test_reference_alias_loop():
    doc = {
        "definitions": {
            "A": {"$ref": "#/definitions/B"},
            "B": {"$ref": "#/definitions/A"},
            "Holder": {"type": "object", "properties": {"a": {"$ref": "#/definitions/A"}}},
        }
    }
    with pytest.raises(CyclicReference):
        make_generator(TargetLanguage.KOTLIN, None).render_all(doc, "/definitions")


@pytest.mark.parametrize(
    "schema",
    [
        {"allOf": [{"$ref": "#/$defs/X"}, {"$ref": "#/$defs/Y"}], "$defs": {"X": {"type": "object"}, "Y": {"type": "object"}}},
        {"type": "object", "properties": {"n": {"type": "integer", "enum": [1, 2]}}},
        {"type": "object", "properties": {"v": {"oneOf": [{"type": "object", "properties": {"x": {"type": "string"}}}]}}},
        {"type": "object", "properties": {"v": {"type": ["string", "integer"]}}},
        {"type": "object", "properties": {"s": {"type": "string", "pattern": "("}}},
    ],
)
def test_unsupported_schema_construct(schema):
    with pytest.raises(UnsupportedSchemaConstruct):
        make_generator(TargetLanguage.KOTLIN, None).render(schema, "Root")


def test_duplicate_definition_class_names():
    doc = {"definitions": {"person": {"type": "object"}, "Person": {"type": "object"}}}
    with pytest.raises(UnsupportedSchemaConstruct):
        make_generator(TargetLanguage.KOTLIN, None).render_all(doc, "/definitions")


def test_failure_writes_nothing(capture):
    doc = {
        "definitions": {
            "Good": {"type": "object", "properties": {"name": {"type": "string"}}},
            "Bad": {"type": "object", "properties": {"first-name": {"type": "string"}}},
        }
    }
    with pytest.raises(UnsupportedTargetConstruct):
        make_generator(TargetLanguage.KOTLIN, capture).generate_all(doc, "/definitions")
    assert capture.targets == []
    assert capture[kt("Good")] == ""


SHADOWED_DOC = {
    "definitions": {
        "Person": {
            "type": "object",
            "properties": {
                "address": {"type": "object", "properties": {"street": {"type": "string"}}},
                "home": {"$ref": "#/definitions/Address"},
            },
        },
        "Address": {"type": "object", "properties": {"city": {"type": "string"}}},
    }
}


def test_top_level_class_hidden_by_nested_class_is_qualified(capture):
    targets = make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate_all(
        SHADOWED_DOC, "/definitions"
    )
    assert targets == [kt("Person"), kt("Address")]
    assert capture[kt("Person")] == (
        "package com.example\n"
        "\n"
        "data class Person(\n"
        "    val address: Person.Address? = null,\n"
        "    val home: com.example.Address? = null\n"
        ") {\n"
        "\n"
        "    data class Address(\n"
        "        val street: String? = null\n"
        "    )\n"
        "\n"
        "}\n"
    )

    make_generator(TargetLanguage.JAVA, capture, add_generation_comment=False).generate_all(SHADOWED_DOC, "/definitions")
    text = capture[TargetFileName("Person", "java", PACKAGE_DIRS, "dummy")]
    assert "    private final Person.Address address;\n    private final com.example.Address home;\n" in text


def test_hidden_class_without_package():
    with pytest.raises(UnsupportedTargetConstruct):
        make_generator(TargetLanguage.KOTLIN, None, base_package="").render_all(SHADOWED_DOC, "/definitions")


def test_referenced_variant_hides_top_level_class(capture):
    doc = {
        "$defs": {
            "Shape": {
                "type": "object",
                "properties": {"next": {"$ref": "#/$defs/Circle"}},
                "oneOf": [{"$ref": "#/$defs/Circle"}],
            },
            "Circle": {"type": "object", "properties": {"radius": {"type": "number"}}},
        }
    }
    make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate_all(doc, "/$defs")
    text = capture[kt("Shape")]
    assert "    val next: com.example.Circle? = null\n" in text
    assert "        next: com.example.Circle? = null,\n        val radius: Double? = null\n" in text
    assert "    ) : Shape(next) {\n" in text


def test_components_schemas_container(capture):
    doc = {
        "openapi": "3.0.0",
        "components": {
            "schemas": {
                "Pet": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {"name": {"type": "string"}, "owner": {"$ref": "#/components/schemas/Owner"}},
                },
                "Owner": {"type": "object", "properties": {"email": {"type": "string"}}},
            }
        },
    }
    generator = make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False)
    assert generator.generate_all(doc, "#/components/schemas") == [kt("Pet"), kt("Owner")]
    assert capture[kt("Pet")] == (
        "package com.example\n"
        "\n"
        "data class Pet(\n"
        "    val name: String,\n"
        "    val owner: Owner? = null\n"
        ")\n"
    )
    assert capture[kt("Owner")] == "package com.example\n\ndata class Owner(\n    val email: String? = null\n)\n"


def test_guard_templates_are_per_backend():
    first = get_backend(TargetLanguage.KOTLIN, CodeGeneratorConfig())
    second = get_backend(TargetLanguage.KOTLIN, CodeGeneratorConfig())
    assert first.string_templates is not second.string_templates
    first.string_templates["minimum"] = "broken"
    assert second.string_templates["minimum"] == "{value} >= {operand}"
    assert get_backend(TargetLanguage.JAVA, CodeGeneratorConfig()).string_templates["minimum"] == "{value} < {operand}"
