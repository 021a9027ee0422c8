"""
Tests for target file names, output resolvers and configuration.
"""

from pathlib import Path

from conftest import make_generator

from json_schema_codegen import (
    AtomicWriter,
    CodeGenerator,
    CodeGeneratorConfig,
    FileOutputResolver,
    OutputCapture,
    TargetFileName,
    TargetLanguage,
)


def test_target_file_name():
    target = TargetFileName("Person", "kt", ("com", "example"), "out")
    assert target.file_name == "Person.kt"
    assert target.path == Path("out", "com", "example", "Person.kt")
    assert target == TargetFileName("Person", "kt", ("com", "example"), "out")
    assert TargetFileName("Person", "kt").path == Path("Person.kt")


def test_output_capture_unrequested_target_is_empty():
    capture = OutputCapture()
    with capture(TargetFileName("A", "kt")) as sink:
        sink.write("class A\n")
    assert capture[TargetFileName("A", "kt")] == "class A\n"
    assert capture[TargetFileName("B", "kt")] == ""
    assert TargetFileName("B", "kt") not in capture
    assert capture.by_name("A") == "class A\n"


def test_atomic_writer(tmp_path):
    path = tmp_path / "nested" / "dir" / "File.kt"
    AtomicWriter().write(path, "first\n")
    AtomicWriter().write(path, "second\n")
    assert path.read_text() == "second\n"
    assert [p.name for p in path.parent.iterdir()] == ["File.kt"]


def test_file_output_resolver(tmp_path, swagger_doc):
    config = CodeGeneratorConfig(base_package="com.example", base_directory=str(tmp_path))
    targets = CodeGenerator(TargetLanguage.JAVA, config, FileOutputResolver()).generate_all(swagger_doc, "/definitions")
    assert [target.path for target in targets] == [
        tmp_path / "com" / "example" / "QueryResponse.java",
        tmp_path / "com" / "example" / "Person.java",
    ]
    assert (tmp_path / "com" / "example" / "Person.java").read_text().startswith("/*\n * Person.java\n")


def test_flat_directories(swagger_doc):
    capture = OutputCapture()
    make_generator(TargetLanguage.KOTLIN, capture, derive_directories=False).generate_all(swagger_doc, "/definitions")
    assert [target.dirs for target in capture.targets] == [(), ()]


def test_config_round_trip():
    config = CodeGeneratorConfig.from_dict(
        {"base_package": "org.acme", "add_validation": False, "ignore_classes": ["X"], "unknown": 1}
    )
    assert config.base_package == "org.acme"
    assert config.add_validation is False
    assert config.package_dirs == ("org", "acme")
    assert CodeGeneratorConfig.from_dict(config.to_dict()) == config
    assert not hasattr(config, "unknown")


def test_target_language_suffix():
    assert [language.suffix for language in TargetLanguage] == ["kt", "java", "py"]
    assert TargetLanguage("java") is TargetLanguage.JAVA
