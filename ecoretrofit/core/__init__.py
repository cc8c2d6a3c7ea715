"""Core models and configuration."""

from .models import (
    BuildingAttributes,
    EnergyResults,
    InsulationQuality,
    HeatingSystem,
    WindowType,
    ClimateZone,
    RoofType,
    WallType,
    DEFAULT_ATTRIBUTES,
)
from .config import Settings, settings

__all__ = [
    "BuildingAttributes",
    "EnergyResults",
    "InsulationQuality",
    "HeatingSystem",
    "WindowType",
    "ClimateZone",
    "RoofType",
    "WallType",
    "DEFAULT_ATTRIBUTES",
    "Settings",
    "settings",
]
