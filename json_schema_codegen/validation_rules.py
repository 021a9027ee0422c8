"""
Validation rule objects that describe constructor guards.

Each rule represents one validation keyword of a property and knows the
deterministic failure message for it. The rules produce language-neutral
Guard objects; the backends turn those into predicates using the string
templates in templates/<language>/guards.json.
"""

from __future__ import annotations

import json
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .pipeline.analyzer.ir_nodes import ConstraintKind


class ActualValue(Enum):
    """What a failure message reports after the threshold."""

    VALUE = "value"
    LENGTH = "length"
    SIZE = "size"
    NONE = "none"


@dataclass(frozen=True)
class Guard:
    """A constructor check, independent of the target language."""

    kind: ConstraintKind
    field_name: str
    operand: Any
    message: str
    actual: ActualValue = ActualValue.NONE

    # The field may be null; the check only runs on a present value
    nullable: bool = False

    # The check runs on every item of a sequence field
    element: bool = False


def format_operand(value: Any) -> str:
    """Format a threshold for a failure message ("1", "0.5", patterns as is)."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


class ValidationRule(ABC):
    """Base class for all validation rules"""

    KIND: ConstraintKind
    MESSAGE: str = ""
    ACTUAL: ActualValue = ActualValue.VALUE

    def __init__(
        self,
        field_name: str,
        display_name: str,
        operand: Any = None,
        nullable: bool = False,
        element: bool = False,
    ):
        """
        Initialize a validation rule.

        Args:
            field_name: Name of the property being validated
            display_name: Name used in the failure message ("tags item" for elements)
            operand: The keyword value (threshold, pattern)
            nullable: Whether the property may be null (the check then skips null)
            element: Whether the rule applies to the items of a sequence
        """
        self.field_name = field_name
        self.display_name = display_name
        self.operand = operand
        self.nullable = nullable
        self.element = element

    def get_message(self) -> str:
        return self.MESSAGE.format(name=self.display_name, operand=format_operand(self.operand))

    def to_guard(self) -> Guard:
        return Guard(
            kind=self.KIND,
            field_name=self.field_name,
            operand=self.operand,
            message=self.get_message(),
            actual=self.ACTUAL,
            nullable=self.nullable,
            element=self.element,
        )


class RequiredRule(ValidationRule):
    """Validates that a required property is present (not null)"""

    KIND = ConstraintKind.REQUIRED
    MESSAGE = "Must not be null - {name}"
    ACTUAL = ActualValue.NONE


class MinimumRule(ValidationRule):
    """Validates minimum numeric value"""

    KIND = ConstraintKind.MINIMUM
    MESSAGE = "{name} < minimum {operand}"


class ExclusiveMinimumRule(ValidationRule):
    """Validates exclusive minimum numeric value"""

    KIND = ConstraintKind.EXCLUSIVE_MINIMUM
    MESSAGE = "{name} <= exclusiveMinimum {operand}"


class MaximumRule(ValidationRule):
    """Validates maximum numeric value"""

    KIND = ConstraintKind.MAXIMUM
    MESSAGE = "{name} > maximum {operand}"


class ExclusiveMaximumRule(ValidationRule):
    """Validates exclusive maximum numeric value"""

    KIND = ConstraintKind.EXCLUSIVE_MAXIMUM
    MESSAGE = "{name} >= exclusiveMaximum {operand}"


class MinLengthRule(ValidationRule):
    """Validates minimum string length"""

    KIND = ConstraintKind.MIN_LENGTH
    MESSAGE = "{name} length < minimum {operand}"
    ACTUAL = ActualValue.LENGTH


class MaxLengthRule(ValidationRule):
    """Validates maximum string length"""

    KIND = ConstraintKind.MAX_LENGTH
    MESSAGE = "{name} length > maximum {operand}"
    ACTUAL = ActualValue.LENGTH


class PatternRule(ValidationRule):
    """Validates that a string contains a match of a regex pattern"""

    KIND = ConstraintKind.PATTERN
    MESSAGE = "{name} does not match pattern {operand}"


class MinItemsRule(ValidationRule):
    """Validates minimum array length"""

    KIND = ConstraintKind.MIN_ITEMS
    MESSAGE = "{name} size < minimum {operand}"
    ACTUAL = ActualValue.SIZE


class MaxItemsRule(ValidationRule):
    """Validates maximum array length"""

    KIND = ConstraintKind.MAX_ITEMS
    MESSAGE = "{name} size > maximum {operand}"
    ACTUAL = ActualValue.SIZE


class UniqueItemsRule(ValidationRule):
    """Validates that array items are distinct"""

    KIND = ConstraintKind.UNIQUE_ITEMS
    MESSAGE = "{name} items not unique"
    ACTUAL = ActualValue.NONE
