"""
Tests for the usage and impact models.

Tests:
- Reference scenario figures
- Factor tables and monotonicity
- Age factor clamping
- Fail-fast lookups on unknown values
- CO2 and cost coefficients
"""

import pytest

from ecoretrofit.baseline import (
    UnknownAttributeValueError,
    age_factor,
    compute_annual_co2_kg,
    compute_annual_cost_units,
    compute_annual_usage_kwh,
    estimate,
    round_half_up,
    usage_breakdown,
)
from ecoretrofit.baseline.usage import (
    CLIMATE_FACTORS,
    HEATING_FACTORS,
    INSULATION_FACTORS,
    WINDOW_FACTORS,
    lookup_factor,
    require_total,
)
from ecoretrofit.core.models import (
    BuildingAttributes,
    ClimateZone,
    HeatingSystem,
    InsulationQuality,
    WindowType,
)

REFERENCE_YEAR = 2024


class TestReferenceScenario:
    """The default record evaluated in 2024."""

    def test_default_usage(self, default_building):
        """100 × 150 × 1.22 × 1.3 × 1.3 × 1.2 rounds to 37,112 kWh."""
        assert compute_annual_usage_kwh(default_building, REFERENCE_YEAR) == 37112

    def test_default_co2(self):
        """Gas emits 0.20 kg per kWh."""
        assert compute_annual_co2_kg(37112, HeatingSystem.GAS) == 7422

    def test_default_cost(self):
        """Gas costs 0.08 per kWh."""
        assert compute_annual_cost_units(37112, HeatingSystem.GAS) == 2969

    def test_estimate_chains_models(self, default_results):
        """estimate() produces a complete, consistent record."""
        assert default_results.annual_energy_usage_kwh == 37112
        assert default_results.annual_co2_kg == 7422
        assert default_results.annual_cost_units == 2969

    def test_upgraded_building_uses_less(self, default_building, upgraded_building):
        """Best-tier insulation, windows and heat pump beat the default."""
        baseline = compute_annual_usage_kwh(default_building, REFERENCE_YEAR)
        upgraded = compute_annual_usage_kwh(upgraded_building, REFERENCE_YEAR)
        assert upgraded < baseline
        assert upgraded == 4919

    def test_breakdown_matches_usage(self, default_building):
        """The breakdown reproduces the rounded usage."""
        breakdown = usage_breakdown(default_building, REFERENCE_YEAR)
        assert breakdown.base_kwh == 15000
        assert breakdown.age_factor == pytest.approx(1.22)
        assert breakdown.insulation_factor == 1.3
        assert breakdown.window_factor == 1.3
        assert breakdown.occupancy_factor == pytest.approx(1.2)
        assert breakdown.annual_usage_kwh == 37112
        assert breakdown.to_dict()["annual_usage_kwh"] == 37112

    def test_deterministic(self, default_building):
        """Same input, same output."""
        first = estimate(default_building, REFERENCE_YEAR)
        second = estimate(default_building, REFERENCE_YEAR)
        assert first == second


class TestMonotonicity:
    """Better equipment strictly lowers usage, all else equal."""

    def _usage(self, **changes) -> int:
        return compute_annual_usage_kwh(BuildingAttributes(**changes), REFERENCE_YEAR)

    def test_insulation_order(self):
        """poor > average > good."""
        poor = self._usage(insulation_quality=InsulationQuality.POOR)
        average = self._usage(insulation_quality=InsulationQuality.AVERAGE)
        good = self._usage(insulation_quality=InsulationQuality.GOOD)
        assert poor > average > good

    def test_window_order(self):
        """single > double > triple."""
        single = self._usage(window_type=WindowType.SINGLE)
        double = self._usage(window_type=WindowType.DOUBLE)
        triple = self._usage(window_type=WindowType.TRIPLE)
        assert single > double > triple

    def test_heat_pump_beats_gas(self):
        """Switching gas to heat pump lowers usage."""
        gas = self._usage(heating_system=HeatingSystem.GAS)
        heat_pump = self._usage(heating_system=HeatingSystem.HEAT_PUMP)
        assert heat_pump < gas

    def test_climate_order(self):
        """cold > moderate > warm."""
        cold = self._usage(climate_zone=ClimateZone.COLD)
        moderate = self._usage(climate_zone=ClimateZone.MODERATE)
        warm = self._usage(climate_zone=ClimateZone.WARM)
        assert cold > moderate > warm

    def test_more_occupants_use_more(self):
        """Each occupant adds 10%."""
        assert self._usage(occupant_count=0) < self._usage(occupant_count=5)

    def test_usage_non_negative(self, tiny_building):
        """Tiny buildings round down to zero, never below."""
        assert compute_annual_usage_kwh(tiny_building, REFERENCE_YEAR) == 0


class TestAgeFactor:
    """Age adjustment: older buildings use more, clamped to [0.8, 1.5]."""

    def test_new_building_is_neutral(self):
        assert age_factor(2024, 2024) == 1.0

    def test_older_building_uses_more(self):
        assert age_factor(1980, 2024) > age_factor(2000, 2024)

    def test_upper_clamp(self):
        """Very old buildings cap at 1.5."""
        assert age_factor(1924, 2024) == 1.5
        assert age_factor(1000, 2024) == 1.5

    def test_lower_clamp(self):
        """Future construction years floor at 0.8."""
        assert age_factor(2064, 2024) == pytest.approx(0.8)
        assert age_factor(3000, 2024) == 0.8

    def test_inside_bounds(self):
        assert age_factor(2044, 2024) == pytest.approx(0.9)

    @pytest.mark.parametrize("year_built", [-5000, 0, 1500, 1980, 2024, 2100, 10000])
    def test_always_within_bounds(self, year_built):
        """Clamped regardless of how extreme the year is."""
        assert 0.8 <= age_factor(year_built, 2024) <= 1.5

    def test_configured_year_used_by_default(self, default_building, monkeypatch):
        """Without an explicit year the configured year applies."""
        from ecoretrofit.core.config import settings
        monkeypatch.setattr(settings, "current_year", 2024)
        assert compute_annual_usage_kwh(default_building) == 37112


class TestFactorTables:
    """Factor tables are total and lookups fail fast."""

    def test_tables_cover_enums(self):
        for table, enum_cls in (
            (INSULATION_FACTORS, InsulationQuality),
            (HEATING_FACTORS, HeatingSystem),
            (WINDOW_FACTORS, WindowType),
            (CLIMATE_FACTORS, ClimateZone),
        ):
            assert set(table) == set(enum_cls)

    def test_require_total_rejects_partial_table(self):
        with pytest.raises(RuntimeError):
            require_total({InsulationQuality.POOR: 1.3}, InsulationQuality)

    def test_lookup_accepts_string_value(self):
        """Enum values given as strings resolve to the same factor."""
        assert lookup_factor(HEATING_FACTORS, HeatingSystem, "heat_pump") == 0.4

    def test_lookup_unknown_value_raises(self):
        with pytest.raises(UnknownAttributeValueError) as exc_info:
            lookup_factor(INSULATION_FACTORS, InsulationQuality, "excellent")
        assert "excellent" in str(exc_info.value)

    def test_unknown_error_is_value_error(self):
        with pytest.raises(ValueError):
            compute_annual_co2_kg(1000, "coal")

    def test_cost_unknown_heating_raises(self):
        with pytest.raises(UnknownAttributeValueError):
            compute_annual_cost_units(1000, "wood_stove")

    def test_model_rejects_unknown_enum(self):
        """The input record itself refuses values outside the enum."""
        from pydantic import ValidationError
        with pytest.raises(ValidationError):
            BuildingAttributes(insulation_quality="excellent")


class TestImpactCoefficients:
    """Emission and cost factors per heating system."""

    @pytest.mark.parametrize("system,expected", [
        (HeatingSystem.GAS, 200),
        (HeatingSystem.OIL, 270),
        (HeatingSystem.ELECTRIC, 450),
        (HeatingSystem.HEAT_PUMP, 150),
    ])
    def test_emission_factors(self, system, expected):
        assert compute_annual_co2_kg(1000, system) == expected

    @pytest.mark.parametrize("system,expected", [
        (HeatingSystem.GAS, 80),
        (HeatingSystem.OIL, 90),
        (HeatingSystem.ELECTRIC, 150),
        (HeatingSystem.HEAT_PUMP, 130),
    ])
    def test_cost_factors(self, system, expected):
        assert compute_annual_cost_units(1000, system) == expected

    def test_zero_usage(self):
        assert compute_annual_co2_kg(0, HeatingSystem.OIL) == 0
        assert compute_annual_cost_units(0, HeatingSystem.OIL) == 0


class TestRounding:
    """Halves round up, as the web form did."""

    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4

    def test_below_half_rounds_down(self):
        assert round_half_up(7422.4) == 7422
