"""
ROI Module - Savings, payback and value impact of retrofit measures.

Features:
- Per-measure savings and payback
- Totals, return on investment and CO2 share over a selection
- Projected figures after retrofit
"""

from .calculator import (
    RetrofitCalculator,
    EvaluatedRetrofit,
    RetrofitTotals,
    RetrofitProjection,
    return_on_investment,
    simple_payback,
)

__all__ = [
    'RetrofitCalculator',
    'EvaluatedRetrofit',
    'RetrofitTotals',
    'RetrofitProjection',
    'return_on_investment',
    'simple_payback',
]
