"""
Calculator Session - One building, one selection, current results.

Recomputation policy: results are recomputed automatically after every
successful attribute change, so they always describe the current
attributes. There is no explicit "calculate" step and no stale state.
"""

from typing import Any, Dict, List, Optional, Set
import logging

from .models import BuildingAttributes, DEFAULT_ATTRIBUTES, EnergyResults
from ..baseline.impact import driving_miles_equivalent, estimate
from ..roi.calculator import (
    EvaluatedRetrofit,
    RetrofitCalculator,
    RetrofitProjection,
    RetrofitTotals,
)
from ..utils.validation import ValidationError, build_attributes

logger = logging.getLogger(__name__)


class CalculatorSession:
    """
    Interactive calculator state.

    Usage:
        session = CalculatorSession()
        session.set_field("insulation", "good")
        session.toggle(4)
        totals = session.totals()
    """

    def __init__(
        self,
        attributes: Optional[BuildingAttributes] = None,
        current_year: Optional[int] = None,
        calculator: Optional[RetrofitCalculator] = None,
    ):
        self.current_year = current_year
        self.calculator = calculator or RetrofitCalculator()
        self.attributes = attributes or DEFAULT_ATTRIBUTES
        self.selection: Set[int] = set()
        self.results = self._recompute()

    def _recompute(self) -> EnergyResults:
        self.results = estimate(self.attributes, self.current_year)
        return self.results

    def update(self, changes: Dict[str, Any]) -> EnergyResults:
        """
        Apply raw field edits and recompute.

        On a validation error nothing changes.

        Raises:
            ValidationError: If any edited field is invalid
        """
        self.attributes = build_attributes(changes, base=self.attributes)
        logger.debug(f"Attributes updated: {', '.join(changes)}")
        return self._recompute()

    def set_field(self, name: str, value: Any) -> EnergyResults:
        """Edit a single field and recompute."""
        return self.update({name: value})

    def toggle(self, retrofit_id: int) -> bool:
        """
        Toggle a retrofit in the selection.

        Returns:
            True if the retrofit is now selected

        Raises:
            ValidationError: If the id is not in the catalog
        """
        if self.calculator.catalog.get(retrofit_id) is None:
            raise ValidationError(
                f"Unknown retrofit id {retrofit_id}",
                field="retrofit_id",
                suggestions=[f"Valid ids are: {', '.join(map(str, self.calculator.catalog.ids()))}"],
            )

        if retrofit_id in self.selection:
            self.selection.discard(retrofit_id)
            selected = False
        else:
            self.selection.add(retrofit_id)
            selected = True

        logger.debug(f"Retrofit {'selected' if selected else 'deselected'}",
                     extra={"retrofit_id": retrofit_id})
        return selected

    def reset(self) -> EnergyResults:
        """Restore default attributes, clear the selection and recompute."""
        self.attributes = DEFAULT_ATTRIBUTES
        self.selection = set()
        logger.info("Session reset to defaults")
        return self._recompute()

    def evaluated_retrofits(self) -> List[EvaluatedRetrofit]:
        return self.calculator.evaluate_applicable(self.attributes, self.results)

    def totals(self) -> Optional[RetrofitTotals]:
        return self.calculator.totals(self.attributes, self.results, self.selection)

    def projection(self) -> RetrofitProjection:
        return self.calculator.project(self.results, self.totals())

    def to_dict(self) -> Dict:
        """Snapshot of the whole session for JSON output."""
        totals = self.totals()
        return {
            "attributes": self.attributes.model_dump(mode="json"),
            "results": self.results.to_dict(),
            "driving_miles_equivalent": driving_miles_equivalent(self.results.annual_co2_kg),
            "retrofits": [r.to_dict() for r in self.evaluated_retrofits()],
            "excluded": [
                {"id": d.id, "name": d.name, "reasons": [reason for _, reason in reasons]}
                for d, reasons in self.calculator.engine.get_excluded(self.attributes)
            ],
            "selection": sorted(self.selection),
            "totals": totals.to_dict() if totals is not None else None,
            "projection": self.calculator.project(self.results, totals).to_dict(),
        }
