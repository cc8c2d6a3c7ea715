"""
Retrofit Calculator - Savings and returns for retrofit measures.

Metrics:
- Annual energy, CO2 and cost savings per measure
- Investment cost and property value increase
- Simple payback period
- Totals, average payback and return on investment over a selection
- Projected figures after the selected measures
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import logging
import math

from ..baseline.impact import driving_miles_equivalent
from ..core.models import BuildingAttributes, EnergyResults
from ..ecm.catalog import RetrofitCatalog, RetrofitDefinition
from ..ecm.constraints import ConstraintEngine

logger = logging.getLogger(__name__)


def simple_payback(cost: float, annual_savings: float) -> float:
    """Years to recover cost; math.inf when there are no savings."""
    return cost / annual_savings if annual_savings > 0 else math.inf


# Years of cost savings counted towards return on investment
ROI_SAVINGS_YEARS = 10


def return_on_investment(value_increase: float, annual_savings: float, cost: float) -> float:
    """
    Return on investment in percent.

    Counts the property value increase plus ROI_SAVINGS_YEARS of cost
    savings against the investment; math.inf when nothing is invested.
    """
    if cost <= 0:
        return math.inf
    return (value_increase + annual_savings * ROI_SAVINGS_YEARS) / cost * 100


def share_percent(part: float, whole: float) -> float:
    """part as a percentage of whole; math.inf when whole is 0."""
    return part / whole * 100 if whole > 0 else math.inf


def finite_or_none(value: float) -> Optional[float]:
    """Map non-finite numbers to None (for JSON output)."""
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class EvaluatedRetrofit:
    """A catalog measure evaluated against one building and its results."""
    definition: RetrofitDefinition

    energy_savings_kwh: float
    co2_savings_kg: float
    cost_savings_units: float
    cost_units: float
    payback_years: float  # math.inf when cost_savings_units == 0
    value_increase_units: float

    @property
    def id(self) -> int:
        return self.definition.id

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def lifespan_years(self) -> int:
        return self.definition.lifespan_years

    @property
    def has_payback(self) -> bool:
        return math.isfinite(self.payback_years)

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        d = self.definition
        return {
            "id": d.id,
            "name": d.name,
            "description": d.description,
            "category": d.category.value,
            "energy_savings_percent": d.energy_savings_percent,
            "co2_reduction_percent": d.co2_reduction_percent,
            "lifespan_years": d.lifespan_years,
            "energy_savings_kwh": self.energy_savings_kwh,
            "co2_savings_kg": self.co2_savings_kg,
            "cost_savings_units": self.cost_savings_units,
            "cost_units": self.cost_units,
            "payback_years": finite_or_none(self.payback_years),
            "value_increase_units": self.value_increase_units,
        }


@dataclass(frozen=True)
class RetrofitTotals:
    """Aggregates over the selected and applicable measures."""
    retrofit_ids: Tuple[int, ...]
    total_cost_units: float
    total_energy_savings_kwh: float
    total_co2_savings_kg: float
    total_cost_savings_units: float
    total_value_increase_units: float
    average_payback_years: float  # math.inf when total_cost_savings_units == 0
    return_on_investment_percent: float  # math.inf when total_cost_units == 0
    co2_reduction_percent: float  # share of current emissions; math.inf when they are 0

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "retrofit_ids": list(self.retrofit_ids),
            "total_cost_units": self.total_cost_units,
            "total_energy_savings_kwh": self.total_energy_savings_kwh,
            "total_co2_savings_kg": self.total_co2_savings_kg,
            "total_cost_savings_units": self.total_cost_savings_units,
            "total_value_increase_units": self.total_value_increase_units,
            "average_payback_years": finite_or_none(self.average_payback_years),
            "return_on_investment_percent": finite_or_none(self.return_on_investment_percent),
            "co2_reduction_percent": finite_or_none(self.co2_reduction_percent),
        }


@dataclass(frozen=True)
class RetrofitProjection:
    """Annual figures after the selected measures, floored at zero."""
    annual_energy_usage_kwh: float
    annual_co2_kg: float
    annual_cost_units: float

    @property
    def driving_miles_equivalent(self) -> int:
        return driving_miles_equivalent(self.annual_co2_kg)

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "annual_energy_usage_kwh": self.annual_energy_usage_kwh,
            "annual_co2_kg": self.annual_co2_kg,
            "annual_cost_units": self.annual_cost_units,
            "driving_miles_equivalent": self.driving_miles_equivalent,
        }


class RetrofitCalculator:
    """
    Evaluate retrofit measures for a building.

    Usage:
        calculator = RetrofitCalculator()
        evaluated = calculator.evaluate_applicable(attrs, results)
        totals = calculator.totals(attrs, results, selection={1, 4})
    """

    def __init__(
        self,
        catalog: Optional[RetrofitCatalog] = None,
        engine: Optional[ConstraintEngine] = None,
    ):
        self.catalog = catalog or RetrofitCatalog()
        self.engine = engine or ConstraintEngine(self.catalog)

    def evaluate(
        self,
        definition: RetrofitDefinition,
        attrs: BuildingAttributes,
        results: EnergyResults,
    ) -> EvaluatedRetrofit:
        """
        Calculate savings and returns for one measure.

        Args:
            definition: Catalog measure
            attrs: Building attributes (drive cost and value formulas)
            results: Current energy results (drive savings)

        Returns:
            EvaluatedRetrofit with all metrics
        """
        energy_savings = results.annual_energy_usage_kwh * definition.energy_savings_percent / 100
        co2_savings = results.annual_co2_kg * definition.co2_reduction_percent / 100
        # Modelling simplification: cost savings scale with the energy savings
        # percent; measures carry no separate cost-savings percent.
        cost_savings = results.annual_cost_units * definition.energy_savings_percent / 100
        cost = definition.cost_for(attrs)

        return EvaluatedRetrofit(
            definition=definition,
            energy_savings_kwh=energy_savings,
            co2_savings_kg=co2_savings,
            cost_savings_units=cost_savings,
            cost_units=cost,
            payback_years=simple_payback(cost, cost_savings),
            value_increase_units=definition.value_increase_for(attrs),
        )

    def evaluate_applicable(
        self,
        attrs: BuildingAttributes,
        results: EnergyResults,
    ) -> List[EvaluatedRetrofit]:
        """Evaluate every applicable measure, in catalog order."""
        return [
            self.evaluate(definition, attrs, results)
            for definition in self.engine.get_applicable(attrs)
        ]

    def totals(
        self,
        attrs: BuildingAttributes,
        results: EnergyResults,
        selection: Iterable[int],
    ) -> Optional[RetrofitTotals]:
        """
        Aggregate metrics over selected measures that are applicable.

        Selected ids that are unknown or not applicable are ignored.

        Returns:
            RetrofitTotals, or None when no selected measure is applicable
        """
        selected = set(selection)
        chosen = [
            r for r in self.evaluate_applicable(attrs, results)
            if r.id in selected
        ]

        if not chosen:
            return None

        total_cost = sum(r.cost_units for r in chosen)
        total_cost_savings = sum(r.cost_savings_units for r in chosen)
        total_co2_savings = sum(r.co2_savings_kg for r in chosen)
        total_value_increase = sum(r.value_increase_units for r in chosen)

        totals = RetrofitTotals(
            retrofit_ids=tuple(r.id for r in chosen),
            total_cost_units=total_cost,
            total_energy_savings_kwh=sum(r.energy_savings_kwh for r in chosen),
            total_co2_savings_kg=total_co2_savings,
            total_cost_savings_units=total_cost_savings,
            total_value_increase_units=total_value_increase,
            average_payback_years=simple_payback(total_cost, total_cost_savings),
            return_on_investment_percent=return_on_investment(
                total_value_increase, total_cost_savings, total_cost
            ),
            co2_reduction_percent=share_percent(total_co2_savings, results.annual_co2_kg),
        )
        logger.debug(f"Totals over retrofits {totals.retrofit_ids}: cost {total_cost:,.0f}")
        return totals

    def project(
        self,
        results: EnergyResults,
        totals: Optional[RetrofitTotals],
    ) -> RetrofitProjection:
        """
        Annual figures after applying the selected measures.

        Savings percentages add up across measures and can exceed 100%, so
        each figure is floored at zero. Without totals the current results
        are returned unchanged.
        """
        if totals is None:
            return RetrofitProjection(
                annual_energy_usage_kwh=results.annual_energy_usage_kwh,
                annual_co2_kg=results.annual_co2_kg,
                annual_cost_units=results.annual_cost_units,
            )

        return RetrofitProjection(
            annual_energy_usage_kwh=max(
                0.0, results.annual_energy_usage_kwh - totals.total_energy_savings_kwh
            ),
            annual_co2_kg=max(0.0, results.annual_co2_kg - totals.total_co2_savings_kg),
            annual_cost_units=max(
                0.0, results.annual_cost_units - totals.total_cost_savings_units
            ),
        )

