"""
Tests for Kotlin generation: exact file text for the main class shapes.
"""

from conftest import PACKAGE_DIRS, header, make_generator

from json_schema_codegen import TargetFileName, TargetLanguage


def kt(name):
    return TargetFileName(name, "kt", PACKAGE_DIRS, "dummy")


EXPECTED_EMPTY = """package com.example

class TestEmpty
"""

EXPECTED_QUERY_RESPONSE = """package com.example

data class QueryResponse(
    val data: Person,
    val message: String? = null
)
"""

EXPECTED_PERSON = """package com.example

data class Person(
    val id: Int,
    val name: String
) {

    init {
        require(id >= 1) { "id < minimum 1 - $id" }
        require(id <= 9999) { "id > maximum 9999 - $id" }
        require(name.isNotEmpty()) { "name length < minimum 1 - ${name.length}" }
    }

}
"""

EXPECTED_TYPE_A = """package com.example

open class TypeA(
    val aaa: Long? = null
) {

    override fun equals(other: Any?): Boolean = this === other || other is TypeA &&
            aaa == other.aaa

    override fun hashCode(): Int = aaa.hashCode()

    class A(
        aaa: Long? = null,
        val xxx: String? = null
    ) : TypeA(aaa) {

        override fun equals(other: Any?): Boolean = this === other || other is A && super.equals(other) &&
                xxx == other.xxx

        override fun hashCode(): Int = 31 * super.hashCode() + xxx.hashCode()

    }

    class B(
        aaa: Long? = null,
        val yyy: String? = null
    ) : TypeA(aaa) {

        override fun equals(other: Any?): Boolean = this === other || other is B && super.equals(other) &&
                yyy == other.yyy

        override fun hashCode(): Int = 31 * super.hashCode() + yyy.hashCode()

    }

    class C(
        aaa: Long? = null,
        val zzz: String? = null
    ) : TypeA(aaa) {

        override fun equals(other: Any?): Boolean = this === other || other is C && super.equals(other) &&
                zzz == other.zzz

        override fun hashCode(): Int = 31 * super.hashCode() + zzz.hashCode()

    }

    class D(
        aaa: Long? = null,
        val qqq: String? = null
    ) : TypeA(aaa) {

        init {
            if (qqq != null)
                require(qqq.isNotEmpty()) { "qqq length < minimum 1 - ${qqq.length}" }
        }

        override fun equals(other: Any?): Boolean = this === other || other is D && super.equals(other) &&
                qqq == other.qqq

        override fun hashCode(): Int = 31 * super.hashCode() + qqq.hashCode()

    }

}
"""

EXPECTED_TYPE_B = """package com.example

data class TypeB(
    val xxx: String
)
"""

EXPECTED_TYPE_C = """package com.example

data class TypeC(
    val yyy: String
)
"""


def test_empty_class(empty_doc, capture):
    make_generator(TargetLanguage.KOTLIN, capture).generate(empty_doc)
    assert capture[kt("TestEmpty")] == header("TestEmpty.kt") + EXPECTED_EMPTY


def test_swagger_definitions(swagger_doc, capture):
    targets = make_generator(TargetLanguage.KOTLIN, capture).generate_all(swagger_doc, "/definitions")
    assert targets == [kt("QueryResponse"), kt("Person")]
    assert capture[kt("QueryResponse")] == header("QueryResponse.kt") + EXPECTED_QUERY_RESPONSE
    assert capture[kt("Person")] == header("Person.kt") + EXPECTED_PERSON


def test_swagger_definitions_with_filter(swagger_doc, capture):
    generator = make_generator(TargetLanguage.KOTLIN, capture)
    targets = generator.generate_all(swagger_doc, "/definitions", lambda name: name == "Person")
    assert targets == [kt("Person")]
    assert capture[kt("QueryResponse")] == ""
    assert capture[kt("Person")] == header("Person.kt") + EXPECTED_PERSON


def test_filtered_member_is_built_when_referenced(swagger_doc, capture):
    generator = make_generator(TargetLanguage.KOTLIN, capture)
    generator.generate_all(swagger_doc, "#/definitions", lambda name: name == "QueryResponse")
    assert capture.targets == [kt("QueryResponse")]
    assert capture[kt("QueryResponse")] == header("QueryResponse.kt") + EXPECTED_QUERY_RESPONSE


def test_one_of_base_and_variants(oneof_doc, capture):
    make_generator(TargetLanguage.KOTLIN, capture).generate_all(oneof_doc, "/$defs")
    assert capture[kt("TypeA")] == header("TypeA.kt") + EXPECTED_TYPE_A
    assert capture[kt("TypeB")] == header("TypeB.kt") + EXPECTED_TYPE_B
    assert capture[kt("TypeC")] == header("TypeC.kt") + EXPECTED_TYPE_C


def test_no_generation_comment(empty_doc, capture):
    make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate(empty_doc)
    assert capture[kt("TestEmpty")] == EXPECTED_EMPTY


def test_no_package(empty_doc, capture):
    make_generator(TargetLanguage.KOTLIN, capture, base_package="", add_generation_comment=False).generate(empty_doc)
    assert capture[TargetFileName("TestEmpty", "kt", (), "dummy")] == "class TestEmpty\n"


def test_enum_and_default(capture):
    schema = {
        "title": "Shape",
        "type": "object",
        "required": ["kind"],
        "properties": {
            "kind": {"type": "string", "enum": ["circle", "square"]},
            "size": {"type": "number", "default": 1},
        },
    }
    make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate(schema)
    assert capture[kt("Shape")] == (
        "package com.example\n"
        "\n"
        "data class Shape(\n"
        "    val kind: Shape.Kind,\n"
        "    val size: Double = 1.0\n"
        ") {\n"
        "\n"
        "    enum class Kind {\n"
        "        circle,\n"
        "        square\n"
        "    }\n"
        "\n"
        "}\n"
    )


def test_array_guards(capture):
    schema = {
        "title": "Tagged",
        "type": "object",
        "required": ["tags"],
        "properties": {
            "tags": {
                "type": "array",
                "items": {"type": "string", "maxLength": 10},
                "minItems": 1,
                "uniqueItems": True,
            },
            "code": {"type": "string", "pattern": "^[A-Z]{3}$"},
        },
    }
    make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate(schema)
    assert capture[kt("Tagged")] == (
        "package com.example\n"
        "\n"
        "data class Tagged(\n"
        "    val tags: List<String>,\n"
        "    val code: String? = null\n"
        ") {\n"
        "\n"
        "    init {\n"
        '        require(tags.isNotEmpty()) { "tags size < minimum 1 - ${tags.size}" }\n'
        '        require(tags.toSet().size == tags.size) { "tags items not unique" }\n'
        "        for (item in tags)\n"
        '            require(item.length <= 10) { "tags item length > maximum 10 - ${item.length}" }\n'
        "        if (code != null)\n"
        '            require(Regex("^[A-Z]{3}\\$").containsMatchIn(code)) { "code does not match pattern ^[A-Z]{3}\\$ - $code" }\n'
        "    }\n"
        "\n"
        "}\n"
    )


def test_formats_add_imports(capture):
    schema = {
        "title": "Event",
        "type": "object",
        "required": ["id", "at"],
        "properties": {
            "id": {"type": "string", "format": "uuid"},
            "at": {"type": "string", "format": "date-time"},
        },
    }
    make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate(schema)
    assert capture[kt("Event")] == (
        "package com.example\n"
        "\n"
        "import java.time.OffsetDateTime\n"
        "import java.util.UUID\n"
        "\n"
        "data class Event(\n"
        "    val id: UUID,\n"
        "    val at: OffsetDateTime\n"
        ")\n"
    )


def test_keyword_property_is_escaped(capture):
    schema = {"title": "Holder", "type": "object", "properties": {"object": {"type": "boolean"}}}
    make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate(schema)
    assert "    val `object`: Boolean? = null\n" in capture[kt("Holder")]


def test_required_nullable_union(capture):
    schema = {
        "title": "R",
        "type": "object",
        "required": ["s", "o"],
        "properties": {
            "s": {"type": ["string", "null"]},
            "o": {"oneOf": [{"type": "integer", "minimum": 0}, {"type": "null"}]},
        },
    }
    make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate(schema)
    assert capture[kt("R")] == (
        "package com.example\n"
        "\n"
        "data class R(\n"
        "    val s: String?,\n"
        "    val o: Int?\n"
        ") {\n"
        "\n"
        "    init {\n"
        "        if (o != null)\n"
        '            require(o >= 0) { "o < minimum 0 - $o" }\n'
        "    }\n"
        "\n"
        "}\n"
    )


def test_any_of_base_and_variants(capture):
    schema = {
        "title": "Payment",
        "type": "object",
        "required": ["amount"],
        "properties": {"amount": {"type": "number", "exclusiveMinimum": 0}},
        "anyOf": [
            {"title": "Card", "type": "object", "properties": {"number": {"type": "string"}}},
            {"title": "Cash", "type": "object"},
        ],
    }
    make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate(schema)
    assert capture[kt("Payment")] == (
        "package com.example\n"
        "\n"
        "open class Payment(\n"
        "    val amount: Double\n"
        ") {\n"
        "\n"
        "    init {\n"
        '        require(amount > 0) { "amount <= exclusiveMinimum 0 - $amount" }\n'
        "    }\n"
        "\n"
        "    override fun equals(other: Any?): Boolean = this === other || other is Payment &&\n"
        "            amount == other.amount\n"
        "\n"
        "    override fun hashCode(): Int = amount.hashCode()\n"
        "\n"
        "    class Card(\n"
        "        amount: Double,\n"
        "        val number: String? = null\n"
        "    ) : Payment(amount) {\n"
        "\n"
        "        override fun equals(other: Any?): Boolean = this === other || other is Card && super.equals(other) &&\n"
        "                number == other.number\n"
        "\n"
        "        override fun hashCode(): Int = 31 * super.hashCode() + number.hashCode()\n"
        "\n"
        "    }\n"
        "\n"
        "    class Cash(\n"
        "        amount: Double\n"
        "    ) : Payment(amount) {\n"
        "\n"
        "        override fun equals(other: Any?): Boolean = this === other || other is Cash && super.equals(other)\n"
        "\n"
        "        override fun hashCode(): Int = super.hashCode()\n"
        "\n"
        "    }\n"
        "\n"
        "}\n"
    )


def test_boolean_exclusive_bounds(capture):
    schema = {
        "title": "Range",
        "type": "object",
        "required": ["low"],
        "properties": {
            "low": {"type": "integer", "minimum": 1, "exclusiveMinimum": True, "maximum": 10, "exclusiveMaximum": False},
            "ratio": {"type": "number", "maximum": 1.5, "exclusiveMaximum": True},
        },
    }
    make_generator(TargetLanguage.KOTLIN, capture, add_generation_comment=False).generate(schema)
    assert capture[kt("Range")] == (
        "package com.example\n"
        "\n"
        "data class Range(\n"
        "    val low: Int,\n"
        "    val ratio: Double? = null\n"
        ") {\n"
        "\n"
        "    init {\n"
        '        require(low > 1) { "low <= exclusiveMinimum 1 - $low" }\n'
        '        require(low <= 10) { "low > maximum 10 - $low" }\n'
        "        if (ratio != null)\n"
        '            require(ratio < 1.5) { "ratio >= exclusiveMaximum 1.5 - $ratio" }\n'
        "    }\n"
        "\n"
        "}\n"
    )
