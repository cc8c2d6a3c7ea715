"""
EcoRetrofit - Building energy and retrofit calculator.

Estimates annual energy usage, CO2 emissions and energy cost for a building,
then evaluates a fixed catalog of retrofit measures for applicability,
cost, payback and property-value impact.
"""

__version__ = "0.1.0"
