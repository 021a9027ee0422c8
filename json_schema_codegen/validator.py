"""
Constraint translator for property validation keywords.

This module turns the constraints collected on a property into the ordered
list of guards its generated constructor runs, using validation rule objects.
"""

from __future__ import annotations

from .pipeline.analyzer.ir_nodes import Constraint, ConstraintKind, PropertyDef, TypeKind
from .validation_rules import (
    ExclusiveMaximumRule,
    ExclusiveMinimumRule,
    Guard,
    MaximumRule,
    MaxItemsRule,
    MaxLengthRule,
    MinimumRule,
    MinItemsRule,
    MinLengthRule,
    PatternRule,
    RequiredRule,
    UniqueItemsRule,
    ValidationRule,
)


class ConstraintTranslator:
    """Translate property constraints into guards, in a fixed precedence"""

    RULES: dict[ConstraintKind, type[ValidationRule]] = {
        ConstraintKind.REQUIRED: RequiredRule,
        ConstraintKind.MINIMUM: MinimumRule,
        ConstraintKind.EXCLUSIVE_MINIMUM: ExclusiveMinimumRule,
        ConstraintKind.MAXIMUM: MaximumRule,
        ConstraintKind.EXCLUSIVE_MAXIMUM: ExclusiveMaximumRule,
        ConstraintKind.MIN_LENGTH: MinLengthRule,
        ConstraintKind.MAX_LENGTH: MaxLengthRule,
        ConstraintKind.PATTERN: PatternRule,
        ConstraintKind.MIN_ITEMS: MinItemsRule,
        ConstraintKind.MAX_ITEMS: MaxItemsRule,
        ConstraintKind.UNIQUE_ITEMS: UniqueItemsRule,
    }

    # Dict order is the guard precedence
    PRECEDENCE = tuple(RULES)

    def translate(self, prop: PropertyDef) -> list[Guard]:
        """
        Produce the guards for one property.

        Container guards come first; guards on the items of a sequence follow
        them in the same precedence, named "<name> item" in their messages.

        Args:
            prop: The property definition

        Returns:
            Ordered list of guards (empty for an unconstrained property)
        """
        guards = self._create_guards(prop.name, prop.name, prop.constraints, prop.nullable)
        type_ref = prop.type_ref
        if type_ref is not None and type_ref.kind is TypeKind.SEQUENCE and type_ref.item_type.constraints:
            guards.extend(
                self._create_guards(
                    prop.name,
                    f"{prop.name} item",
                    type_ref.item_type.constraints,
                    prop.nullable,
                    element=True,
                )
            )
        return guards

    def _create_guards(
        self,
        field_name: str,
        display_name: str,
        constraints: list[Constraint],
        nullable: bool,
        element: bool = False,
    ) -> list[Guard]:
        by_kind = {constraint.kind: constraint for constraint in constraints}
        rules = [
            self.RULES[kind](field_name, display_name, by_kind[kind].value, nullable, element)
            for kind in self.PRECEDENCE
            if kind in by_kind
        ]
        return [rule.to_guard() for rule in rules]
