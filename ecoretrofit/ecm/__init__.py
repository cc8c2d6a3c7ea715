"""
ECM Module - Retrofit measures and their applicability.

Key features:
- Fixed catalog: insulation, windows, heat pump, solar
- Formulas as data: cost and value increase from building attributes
- Constraint-aware: no window replacement on triple glazing, etc.
"""

from .catalog import (
    RetrofitCatalog,
    RetrofitDefinition,
    RetrofitCategory,
    ApplicabilityConstraint,
    ConstraintOperator,
    Formula,
    FormulaKind,
    RETROFIT_CATALOG,
)
from .constraints import ConstraintEngine, ConstraintResult

__all__ = [
    'RetrofitCatalog', 'RetrofitDefinition', 'RetrofitCategory',
    'ApplicabilityConstraint', 'ConstraintOperator',
    'Formula', 'FormulaKind',
    'RETROFIT_CATALOG',
    'ConstraintEngine', 'ConstraintResult',
]
