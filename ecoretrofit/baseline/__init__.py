"""
Baseline Module - Annual energy, emissions and cost for a building.

Features:
- Multiplicative usage model (age, insulation, heating, windows, climate, occupancy)
- Per-heating-system emission and cost factors
"""

from .usage import (
    UnknownAttributeValueError,
    UsageBreakdown,
    usage_breakdown,
    compute_annual_usage_kwh,
    age_factor,
    round_half_up,
)
from .impact import (
    compute_annual_co2_kg,
    compute_annual_cost_units,
    driving_miles_equivalent,
    estimate,
)

__all__ = [
    'UnknownAttributeValueError',
    'UsageBreakdown',
    'usage_breakdown',
    'compute_annual_usage_kwh',
    'age_factor',
    'round_half_up',
    'compute_annual_co2_kg',
    'compute_annual_cost_units',
    'driving_miles_equivalent',
    'estimate',
]
