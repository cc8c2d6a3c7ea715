"""
Constraint Engine - Determine applicable retrofits for a building.

Evaluates each measure's applicability constraints against the building
attributes to decide which measures are offered and which are excluded.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from ..core.models import BuildingAttributes
from .catalog import (
    ApplicabilityConstraint,
    ConstraintOperator,
    RetrofitCatalog,
    RetrofitDefinition,
)

logger = logging.getLogger(__name__)


@dataclass
class ConstraintResult:
    """Result of constraint evaluation."""
    retrofit_id: int
    is_applicable: bool
    failed_constraints: List[Tuple[str, str]]  # (field, reason)


class ConstraintEngine:
    """
    Evaluate applicability constraints against building attributes.

    Usage:
        engine = ConstraintEngine()
        applicable = engine.get_applicable(attrs)
    """

    def __init__(self, catalog: Optional[RetrofitCatalog] = None):
        self.catalog = catalog or RetrofitCatalog()

    def evaluate_constraint(
        self,
        constraint: ApplicabilityConstraint,
        attrs: BuildingAttributes
    ) -> Tuple[bool, Optional[str]]:
        """
        Evaluate a single constraint.

        Returns:
            (passed, failure_reason)

        Raises:
            AttributeError: If the constraint names a field attrs lacks
            ValueError: If the operator is not a ConstraintOperator
        """
        if constraint.field not in type(attrs).model_fields:
            raise AttributeError(f"Constraint references unknown field: {constraint.field}")

        value = getattr(attrs, constraint.field)

        op = constraint.operator
        if op == ConstraintOperator.EQ:
            passed = value == constraint.value
        elif op == ConstraintOperator.NE:
            passed = value != constraint.value
        elif op == ConstraintOperator.IN:
            passed = value in constraint.value
        elif op == ConstraintOperator.NOT_IN:
            passed = value not in constraint.value
        else:
            raise ValueError(f"Unknown constraint operator: {op!r}")

        return passed, None if passed else constraint.reason

    def evaluate(self, definition: RetrofitDefinition, attrs: BuildingAttributes) -> ConstraintResult:
        """Evaluate all constraints for a measure."""
        failed = []

        for constraint in definition.constraints:
            passed, reason = self.evaluate_constraint(constraint, attrs)
            if not passed:
                failed.append((constraint.field, reason))

        return ConstraintResult(
            retrofit_id=definition.id,
            is_applicable=len(failed) == 0,
            failed_constraints=failed
        )

    def is_applicable(self, definition: RetrofitDefinition, attrs: BuildingAttributes) -> bool:
        return self.evaluate(definition, attrs).is_applicable

    def get_applicable(self, attrs: BuildingAttributes) -> List[RetrofitDefinition]:
        """
        Get all measures applicable to a building, in catalog order.
        """
        applicable = [d for d in self.catalog.all() if self.is_applicable(d, attrs)]
        logger.debug(f"{len(applicable)}/{len(self.catalog)} retrofits applicable")
        return applicable

    def get_excluded(
        self,
        attrs: BuildingAttributes
    ) -> List[Tuple[RetrofitDefinition, List[Tuple[str, str]]]]:
        """
        Get excluded measures with reasons.

        Returns:
            List of (definition, [(field, reason), ...]) for excluded measures
        """
        excluded = []
        for definition in self.catalog.all():
            result = self.evaluate(definition, attrs)
            if not result.is_applicable:
                excluded.append((definition, result.failed_constraints))
        return excluded

    def explain(self, attrs: BuildingAttributes) -> str:
        """
        Generate human-readable explanation of applicable/excluded measures.
        """
        lines = []
        lines.append(
            f"Retrofit applicability for {attrs.floor_area_sqm:,.0f} m² building ({attrs.year_built})"
        )
        lines.append(
            f"Insulation: {attrs.insulation_quality.value}, Heating: {attrs.heating_system.value}, "
            f"Windows: {attrs.window_type.value}"
        )
        lines.append("")

        lines.append("APPLICABLE:")
        for definition in self.get_applicable(attrs):
            lines.append(f"  ✓ {definition.name}")

        lines.append("")
        lines.append("EXCLUDED:")
        for definition, reasons in self.get_excluded(attrs):
            lines.append(f"  ✗ {definition.name}")
            for _field, reason in reasons:
                lines.append(f"      - {reason}")

        return "\n".join(lines)
