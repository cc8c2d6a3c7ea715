"""
Pydantic models for building input data and frozen results.

Covers the input record supplied by the form layer (CLI options or a JSON
file) and the derived energy figures recomputed from it.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS
# =============================================================================


class InsulationQuality(str, Enum):
    POOR = "poor"
    AVERAGE = "average"
    GOOD = "good"


class HeatingSystem(str, Enum):
    GAS = "gas"
    OIL = "oil"
    ELECTRIC = "electric"
    HEAT_PUMP = "heat_pump"


class WindowType(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"


class ClimateZone(str, Enum):
    COLD = "cold"
    MODERATE = "moderate"
    WARM = "warm"


class RoofType(str, Enum):
    PITCHED = "pitched"
    FLAT = "flat"


class WallType(str, Enum):
    BRICK = "brick"
    CONCRETE = "concrete"
    WOOD = "wood"


# =============================================================================
# INPUT SCHEMA
# =============================================================================


class BuildingAttributes(BaseModel):
    """
    Building characteristics for one calculation.

    Immutable: edits produce a new record. Accepts snake_case field names and
    the camelCase names used by the web form (floorAreaSqm, yearBuilt, ...).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
        extra="forbid",
    )

    floor_area_sqm: float = Field(default=100.0, gt=0, description="Heated floor area (m²)")
    year_built: int = Field(default=1980, description="Construction year")
    floors: int = Field(default=2, gt=0, description="Number of floors (not used by the model)")
    insulation_quality: InsulationQuality = InsulationQuality.POOR
    heating_system: HeatingSystem = HeatingSystem.GAS
    window_type: WindowType = WindowType.SINGLE
    occupant_count: int = Field(default=2, ge=0, description="Number of occupants")
    climate_zone: ClimateZone = ClimateZone.MODERATE
    roof_type: RoofType = RoofType.PITCHED
    wall_type: WallType = WallType.BRICK  # carried, not used by the model


DEFAULT_ATTRIBUTES = BuildingAttributes()


# =============================================================================
# DERIVED RESULTS
# =============================================================================


@dataclass(frozen=True)
class EnergyResults:
    """Annual energy figures for one BuildingAttributes snapshot."""
    annual_energy_usage_kwh: int
    annual_co2_kg: int
    annual_cost_units: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)
