"""
Usage Model - Annual energy usage from building attributes.

A chain of multiplicative factors applied to a per-area base:
- Building age (older buildings use more, clamped)
- Insulation quality
- Heating system
- Window glazing
- Climate zone
- Occupancy

Factor tables are keyed by the attribute enums and checked for totality at
import time, so a lookup can only fail on a value outside the enum.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Optional, Type, TypeVar
import logging
import math

from ..core.config import settings
from ..core.models import (
    BuildingAttributes,
    ClimateZone,
    HeatingSystem,
    InsulationQuality,
    WindowType,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class UnknownAttributeValueError(ValueError):
    """Raised when a factor lookup gets a value outside its enum."""

    def __init__(self, enum_cls: Type[Enum], value):
        valid = ", ".join(member.value for member in enum_cls)
        super().__init__(f"Unknown {enum_cls.__name__} value {value!r} (valid: {valid})")
        self.enum_cls = enum_cls
        self.value = value


BASE_KWH_PER_SQM = 150.0

AGE_FACTOR_PER_YEAR = 0.005
AGE_FACTOR_MIN = 0.8
AGE_FACTOR_MAX = 1.5

OCCUPANT_FACTOR_PER_PERSON = 0.1

INSULATION_FACTORS: Dict[InsulationQuality, float] = {
    InsulationQuality.POOR: 1.3,
    InsulationQuality.AVERAGE: 1.0,
    InsulationQuality.GOOD: 0.7,
}

HEATING_FACTORS: Dict[HeatingSystem, float] = {
    HeatingSystem.GAS: 1.0,
    HeatingSystem.OIL: 1.2,
    HeatingSystem.ELECTRIC: 0.9,
    HeatingSystem.HEAT_PUMP: 0.4,
}

WINDOW_FACTORS: Dict[WindowType, float] = {
    WindowType.SINGLE: 1.3,
    WindowType.DOUBLE: 1.0,
    WindowType.TRIPLE: 0.8,
}

CLIMATE_FACTORS: Dict[ClimateZone, float] = {
    ClimateZone.COLD: 1.3,
    ClimateZone.MODERATE: 1.0,
    ClimateZone.WARM: 0.7,
}


def require_total(table: Dict[E, float], enum_cls: Type[E]) -> Dict[E, float]:
    """Check that a factor table covers every member of its enum."""
    missing = set(enum_cls) - set(table)
    if missing:
        names = ", ".join(sorted(m.value for m in missing))
        raise RuntimeError(f"Factor table for {enum_cls.__name__} is missing: {names}")
    return table


for _table, _enum in (
    (INSULATION_FACTORS, InsulationQuality),
    (HEATING_FACTORS, HeatingSystem),
    (WINDOW_FACTORS, WindowType),
    (CLIMATE_FACTORS, ClimateZone),
):
    require_total(_table, _enum)


def lookup_factor(table: Dict[E, float], enum_cls: Type[E], value) -> float:
    """
    Look up a factor, accepting an enum member or its string value.

    Raises:
        UnknownAttributeValueError: If value is not a member of enum_cls
    """
    try:
        member = enum_cls(value)
    except ValueError:
        raise UnknownAttributeValueError(enum_cls, value) from None
    return table[member]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def age_factor(year_built: int, current_year: int) -> float:
    """Older buildings use more energy; bounded to [0.8, 1.5]."""
    age = current_year - year_built
    raw = 1 + age * AGE_FACTOR_PER_YEAR
    return min(AGE_FACTOR_MAX, max(AGE_FACTOR_MIN, raw))


def occupancy_factor(occupant_count: int) -> float:
    return 1 + occupant_count * OCCUPANT_FACTOR_PER_PERSON


@dataclass(frozen=True)
class UsageBreakdown:
    """Every factor applied by the usage model, in chain order."""
    base_kwh: float
    age_factor: float
    insulation_factor: float
    heating_factor: float
    window_factor: float
    climate_factor: float
    occupancy_factor: float

    @property
    def unrounded_kwh(self) -> float:
        return (
            self.base_kwh
            * self.age_factor
            * self.insulation_factor
            * self.heating_factor
            * self.window_factor
            * self.climate_factor
            * self.occupancy_factor
        )

    @property
    def annual_usage_kwh(self) -> int:
        return round_half_up(self.unrounded_kwh)

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        data = asdict(self)
        data["annual_usage_kwh"] = self.annual_usage_kwh
        return data


def usage_breakdown(
    attrs: BuildingAttributes,
    current_year: Optional[int] = None,
) -> UsageBreakdown:
    """
    Compute every factor of the usage chain for a building.

    Args:
        attrs: Building attributes
        current_year: Year for the age calculation (default: configured year)

    Returns:
        UsageBreakdown with the base and each multiplier
    """
    if current_year is None:
        current_year = settings.reference_year

    return UsageBreakdown(
        base_kwh=attrs.floor_area_sqm * BASE_KWH_PER_SQM,
        age_factor=age_factor(attrs.year_built, current_year),
        insulation_factor=lookup_factor(INSULATION_FACTORS, InsulationQuality, attrs.insulation_quality),
        heating_factor=lookup_factor(HEATING_FACTORS, HeatingSystem, attrs.heating_system),
        window_factor=lookup_factor(WINDOW_FACTORS, WindowType, attrs.window_type),
        climate_factor=lookup_factor(CLIMATE_FACTORS, ClimateZone, attrs.climate_zone),
        occupancy_factor=occupancy_factor(attrs.occupant_count),
    )


def compute_annual_usage_kwh(
    attrs: BuildingAttributes,
    current_year: Optional[int] = None,
) -> int:
    """Annual energy usage in kWh, rounded to the nearest integer."""
    breakdown = usage_breakdown(attrs, current_year)
    usage = breakdown.annual_usage_kwh
    logger.debug(
        f"Usage {usage} kWh (base {breakdown.base_kwh:.0f}, age x{breakdown.age_factor:.3f})"
    )
    return usage
