"""
Impact Model - CO2 emissions and energy cost from annual usage.

Coefficients are per heating system:
- Emission factors in kg CO2 per kWh
- Cost factors in currency units per kWh
"""

from typing import Dict, Optional
import logging

from ..core.models import BuildingAttributes, EnergyResults, HeatingSystem
from .usage import compute_annual_usage_kwh, lookup_factor, require_total, round_half_up

logger = logging.getLogger(__name__)


EMISSION_FACTORS: Dict[HeatingSystem, float] = {
    HeatingSystem.GAS: 0.20,
    HeatingSystem.OIL: 0.27,
    HeatingSystem.ELECTRIC: 0.45,  # Varies greatly by grid
    HeatingSystem.HEAT_PUMP: 0.15,
}

COST_FACTORS: Dict[HeatingSystem, float] = {
    HeatingSystem.GAS: 0.08,
    HeatingSystem.OIL: 0.09,
    HeatingSystem.ELECTRIC: 0.15,
    HeatingSystem.HEAT_PUMP: 0.13,
}

require_total(EMISSION_FACTORS, HeatingSystem)
require_total(COST_FACTORS, HeatingSystem)

# Divisor turning annual kg CO2 into miles driven in an average car
CO2_KG_PER_DRIVING_MILE = 170


def compute_annual_co2_kg(usage_kwh: float, heating_system: HeatingSystem) -> int:
    """Annual CO2 emissions in kg, rounded."""
    factor = lookup_factor(EMISSION_FACTORS, HeatingSystem, heating_system)
    return round_half_up(usage_kwh * factor)


def compute_annual_cost_units(usage_kwh: float, heating_system: HeatingSystem) -> int:
    """Annual energy cost in currency units, rounded."""
    factor = lookup_factor(COST_FACTORS, HeatingSystem, heating_system)
    return round_half_up(usage_kwh * factor)


def driving_miles_equivalent(co2_kg: float) -> int:
    """Annual emissions expressed as miles driven in an average car."""
    return round_half_up(co2_kg / CO2_KG_PER_DRIVING_MILE)


def estimate(
    attrs: BuildingAttributes,
    current_year: Optional[int] = None,
) -> EnergyResults:
    """
    Run the full usage and impact chain for a building.

    Args:
        attrs: Building attributes
        current_year: Year for the age calculation (default: configured year)

    Returns:
        EnergyResults computed from this snapshot only
    """
    usage = compute_annual_usage_kwh(attrs, current_year)
    results = EnergyResults(
        annual_energy_usage_kwh=usage,
        annual_co2_kg=compute_annual_co2_kg(usage, attrs.heating_system),
        annual_cost_units=compute_annual_cost_units(usage, attrs.heating_system),
    )
    logger.debug(f"Estimated {results}")
    return results
