"""
Retrofit Catalog - Fixed set of retrofit measures.

Defines every available measure with:
- Applicability constraints (what makes the measure irrelevant)
- Cost and property-value formulas over building attributes
- Expected energy and CO2 savings
- Lifespan

Formulas and constraints are plain data (a kind plus coefficients), so
the whole table can be listed, compared and tested without running code
hidden in closures.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.models import (
    BuildingAttributes,
    HeatingSystem,
    InsulationQuality,
    RoofType,
    WindowType,
)
from ..baseline.usage import lookup_factor, require_total


class RetrofitCategory(Enum):
    """Retrofit categories."""
    ENVELOPE = "envelope"
    HVAC = "hvac"
    RENEWABLE = "renewable"


class ConstraintOperator(Enum):
    """Comparison applied between an attribute and a constraint value."""
    EQ = "eq"
    NE = "ne"
    IN = "in"
    NOT_IN = "not_in"


class FormulaKind(Enum):
    """Closed-form cost/value formulas over building attributes."""
    AREA_RATE = "area_rate"            # fixed + area * rate
    ROOF_AREA_RATE = "roof_area_rate"  # area * rate for the roof type
    CAPPED_UNITS = "capped_units"      # min(area * units_per_sqm, max_units) * unit_price


@dataclass(frozen=True)
class Formula:
    """A currency amount computed from building attributes."""
    kind: FormulaKind
    rate: float = 0.0
    fixed: float = 0.0
    roof_rates: Tuple[Tuple[RoofType, float], ...] = ()  # (roof type, rate) pairs
    units_per_sqm: float = 0.0
    max_units: float = 0.0
    unit_price: float = 0.0

    def __post_init__(self):
        if self.kind == FormulaKind.ROOF_AREA_RATE:
            require_total(dict(self.roof_rates), RoofType)

    def evaluate(self, attrs: BuildingAttributes) -> float:
        area = attrs.floor_area_sqm
        if self.kind == FormulaKind.AREA_RATE:
            return self.fixed + area * self.rate
        if self.kind == FormulaKind.ROOF_AREA_RATE:
            return area * lookup_factor(dict(self.roof_rates), RoofType, attrs.roof_type)
        if self.kind == FormulaKind.CAPPED_UNITS:
            return min(area * self.units_per_sqm, self.max_units) * self.unit_price
        raise ValueError(f"Unknown formula kind: {self.kind}")

    def describe(self) -> str:
        """Human-readable formula, e.g. '8,000 + area × 10'."""
        if self.kind == FormulaKind.AREA_RATE:
            if self.fixed:
                return f"{self.fixed:,.0f} + area × {self.rate:g}"
            return f"area × {self.rate:g}"
        if self.kind == FormulaKind.ROOF_AREA_RATE:
            parts = [f"{rate:g} ({roof.value})" for roof, rate in self.roof_rates]
            return f"area × {' / '.join(parts)}"
        if self.kind == FormulaKind.CAPPED_UNITS:
            return (
                f"min(area × {self.units_per_sqm:g}, {self.max_units:g}) × {self.unit_price:g}"
            )
        raise ValueError(f"Unknown formula kind: {self.kind}")


@dataclass(frozen=True)
class ApplicabilityConstraint:
    """A constraint that must be satisfied for a measure to apply."""
    field: str  # Field in BuildingAttributes to check
    operator: ConstraintOperator
    value: Any
    reason: str  # Human-readable explanation when the constraint fails


@dataclass(frozen=True)
class RetrofitDefinition:
    """Retrofit measure definition."""
    id: int
    name: str
    description: str
    category: RetrofitCategory

    cost: Formula
    value_increase: Formula

    energy_savings_percent: float
    co2_reduction_percent: float

    lifespan_years: int

    # If ANY constraint fails the measure is not applicable
    constraints: Tuple[ApplicabilityConstraint, ...] = ()

    def __post_init__(self):
        for name in ("energy_savings_percent", "co2_reduction_percent"):
            percent = getattr(self, name)
            if not 0 <= percent <= 100:
                raise ValueError(f"{self.name}: {name} must be in [0, 100], got {percent}")
        if self.lifespan_years <= 0:
            raise ValueError(f"{self.name}: lifespan_years must be positive")

    def cost_for(self, attrs: BuildingAttributes) -> float:
        return self.cost.evaluate(attrs)

    def value_increase_for(self, attrs: BuildingAttributes) -> float:
        return self.value_increase.evaluate(attrs)


# =============================================================================
# RETROFIT CATALOG
# =============================================================================

RETROFIT_CATALOG: Tuple[RetrofitDefinition, ...] = (

    # =========================================================================
    # ENVELOPE
    # =========================================================================

    RetrofitDefinition(
        id=1,
        name="Roof Insulation Upgrade",
        description="Add additional insulation to roof/attic",
        category=RetrofitCategory.ENVELOPE,
        constraints=(
            ApplicabilityConstraint("insulation_quality", ConstraintOperator.NE,
                                    InsulationQuality.GOOD,
                                    "Insulation is already good"),
        ),
        cost=Formula(
            FormulaKind.ROOF_AREA_RATE,
            roof_rates=((RoofType.PITCHED, 35.0), (RoofType.FLAT, 40.0)),
        ),
        energy_savings_percent=15,
        co2_reduction_percent=15,
        value_increase=Formula(FormulaKind.AREA_RATE, rate=10.0),
        lifespan_years=30,
    ),

    RetrofitDefinition(
        id=2,
        name="Wall Insulation",
        description="Add external or cavity wall insulation",
        category=RetrofitCategory.ENVELOPE,
        constraints=(
            ApplicabilityConstraint("insulation_quality", ConstraintOperator.NE,
                                    InsulationQuality.GOOD,
                                    "Insulation is already good"),
        ),
        cost=Formula(FormulaKind.AREA_RATE, rate=60.0),
        energy_savings_percent=25,
        co2_reduction_percent=25,
        value_increase=Formula(FormulaKind.AREA_RATE, rate=15.0),
        lifespan_years=30,
    ),

    RetrofitDefinition(
        id=3,
        name="Window Replacement",
        description="Replace with high-efficiency double or triple glazing",
        category=RetrofitCategory.ENVELOPE,
        constraints=(
            ApplicabilityConstraint("window_type", ConstraintOperator.NE,
                                    WindowType.TRIPLE,
                                    "Windows are already triple glazed"),
        ),
        cost=Formula(FormulaKind.AREA_RATE, rate=80.0),
        energy_savings_percent=10,
        co2_reduction_percent=10,
        value_increase=Formula(FormulaKind.AREA_RATE, rate=20.0),
        lifespan_years=25,
    ),

    # =========================================================================
    # HVAC
    # =========================================================================

    RetrofitDefinition(
        id=4,
        name="Heat Pump Installation",
        description="Replace conventional heating with air-source heat pump",
        category=RetrofitCategory.HVAC,
        constraints=(
            ApplicabilityConstraint("heating_system", ConstraintOperator.NE,
                                    HeatingSystem.HEAT_PUMP,
                                    "Building already has a heat pump"),
        ),
        cost=Formula(FormulaKind.AREA_RATE, fixed=8000.0, rate=10.0),
        energy_savings_percent=40,
        co2_reduction_percent=60,
        value_increase=Formula(FormulaKind.AREA_RATE, rate=30.0),
        lifespan_years=20,
    ),

    # =========================================================================
    # RENEWABLE
    # =========================================================================

    RetrofitDefinition(
        id=5,
        name="Solar Panel Installation",
        description="Install rooftop solar PV system",
        category=RetrofitCategory.RENEWABLE,
        # Always applicable
        constraints=(),
        # 0.5 panels per m², at most 100 panels
        cost=Formula(FormulaKind.CAPPED_UNITS, units_per_sqm=0.5, max_units=100, unit_price=400.0),
        energy_savings_percent=30,
        co2_reduction_percent=30,
        value_increase=Formula(FormulaKind.AREA_RATE, rate=25.0),
        lifespan_years=25,
    ),
)


class RetrofitCatalog:
    """
    Access and filter the retrofit catalog.

    Usage:
        catalog = RetrofitCatalog()
        envelope = catalog.by_category(RetrofitCategory.ENVELOPE)
        all_measures = catalog.all()
    """

    def __init__(self, definitions: Optional[Tuple[RetrofitDefinition, ...]] = None):
        definitions = RETROFIT_CATALOG if definitions is None else definitions
        self.definitions: Dict[int, RetrofitDefinition] = {}
        for definition in definitions:
            if definition.id in self.definitions:
                raise ValueError(f"Duplicate retrofit id: {definition.id}")
            self.definitions[definition.id] = definition

    def all(self) -> List[RetrofitDefinition]:
        """Get all definitions in catalog order."""
        return list(self.definitions.values())

    def get(self, retrofit_id: int) -> Optional[RetrofitDefinition]:
        """Get a definition by ID."""
        return self.definitions.get(retrofit_id)

    def ids(self) -> List[int]:
        return list(self.definitions)

    def by_category(self, category: RetrofitCategory) -> List[RetrofitDefinition]:
        """Get definitions in a category."""
        return [d for d in self.definitions.values() if d.category == category]

    def __len__(self) -> int:
        return len(self.definitions)
