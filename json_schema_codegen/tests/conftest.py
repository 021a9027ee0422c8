from pathlib import Path

import pytest

from json_schema_codegen import CodeGenerator, CodeGeneratorConfig, OutputCapture
from json_schema_codegen.pipeline.schema_ast import load_schema

TEST_DATA = Path(__file__).parent / "test_data"

PACKAGE_DIRS = ("com", "example")


def header(file_name: str) -> str:
    return f"/*\n * {file_name}\n *\n * Generated by json_schema_codegen. Do not edit.\n */\n\n"


def python_header(file_name: str) -> str:
    return f"#\n# {file_name}\n#\n# Generated by json_schema_codegen. Do not edit.\n#\n\n"


def make_generator(language, capture, **config):
    config.setdefault("base_package", "com.example")
    config.setdefault("base_directory", "dummy")
    return CodeGenerator(language, CodeGeneratorConfig.from_dict(config), capture)


@pytest.fixture
def capture():
    return OutputCapture()


@pytest.fixture
def swagger_doc():
    return load_schema(TEST_DATA / "test-swagger.yaml")


@pytest.fixture
def oneof_doc():
    return load_schema(TEST_DATA / "test-oneof-2.schema.json")


@pytest.fixture
def empty_doc():
    return load_schema(TEST_DATA / "test-empty-object.schema.json")
