"""
Pytest configuration and fixtures for EcoRetrofit tests.

Provides reusable test fixtures for:
- Building attribute records (default, upgraded, edge cases)
- Energy results for a fixed reference year
- Retrofit catalog, constraint engine and calculator
- Calculator sessions
"""

import pytest
from pathlib import Path
import tempfile
import shutil

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from ecoretrofit.baseline import estimate
from ecoretrofit.core.models import (
    BuildingAttributes,
    HeatingSystem,
    InsulationQuality,
    WindowType,
)
from ecoretrofit.core.session import CalculatorSession
from ecoretrofit.ecm import ConstraintEngine, RetrofitCatalog
from ecoretrofit.roi import RetrofitCalculator


# Fixed year so that age-dependent figures do not drift
REFERENCE_YEAR = 2024


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory for test outputs, cleaned up after test."""
    tmp = tempfile.mkdtemp(prefix="ecoretrofit_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


# =============================================================================
# BUILDING FIXTURES
# =============================================================================

@pytest.fixture
def reference_year() -> int:
    return REFERENCE_YEAR


@pytest.fixture
def default_building() -> BuildingAttributes:
    """The reset record: 100 m², 1980, poor insulation, gas, single glazing."""
    return BuildingAttributes()


@pytest.fixture
def upgraded_building() -> BuildingAttributes:
    """Default building with best-tier insulation, windows and heating."""
    return BuildingAttributes(
        insulation_quality=InsulationQuality.GOOD,
        window_type=WindowType.TRIPLE,
        heating_system=HeatingSystem.HEAT_PUMP,
    )


@pytest.fixture
def tiny_building() -> BuildingAttributes:
    """Building so small that usage, CO2 and cost all round to zero."""
    return BuildingAttributes(floor_area_sqm=0.001, occupant_count=0)


# =============================================================================
# RESULT FIXTURES
# =============================================================================

@pytest.fixture
def default_results(default_building):
    """Energy results for the default building in the reference year."""
    return estimate(default_building, current_year=REFERENCE_YEAR)


# =============================================================================
# RETROFIT FIXTURES
# =============================================================================

@pytest.fixture
def catalog() -> RetrofitCatalog:
    return RetrofitCatalog()


@pytest.fixture
def engine(catalog) -> ConstraintEngine:
    return ConstraintEngine(catalog)


@pytest.fixture
def calculator(catalog) -> RetrofitCalculator:
    return RetrofitCalculator(catalog)


@pytest.fixture
def session() -> CalculatorSession:
    """Fresh session pinned to the reference year."""
    return CalculatorSession(current_year=REFERENCE_YEAR)
