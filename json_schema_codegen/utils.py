"""
Utility functions for the JSON Schema code generator.
"""

import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, dots) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace(".", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def _capitalize_and_join(words: list[str]) -> str:
    """Capitalize each word and join them together."""
    return "".join(word.capitalize() for word in words if word)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Names that are already PascalCase identifiers are kept as they are, so
    definition keys like "QueryResponse" or "TypeA" survive unchanged.

    Examples:
        "first_name" -> "FirstName"
        "FIRST_NAME" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "first 3 rows" -> "First3Rows"
        "TypeA" -> "TypeA"

    Args:
        text: The text to convert (snake_case, camelCase, UPPER_SNAKE_CASE, or space-separated)

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    if text[0].isupper() and re.match(r"^[A-Za-z0-9]+$", text) and not text.isupper():
        return text
    normalized = _normalize_separators(text)
    words = _split_into_words(normalized)
    result = _capitalize_and_join(words)
    if result and result[0].isdigit():
        result = "_" + result
    return result


def is_identifier(text: str) -> bool:
    """Check whether text is a plain ASCII identifier in the C family of languages."""
    return bool(_IDENTIFIER_PATTERN.match(text))


def pointer_tail(pointer: str) -> str:
    """Return the last segment of a JSON Pointer, unescaped."""
    segment = pointer.rstrip("/").rsplit("/", 1)[-1]
    return segment.replace("~1", "/").replace("~0", "~")
