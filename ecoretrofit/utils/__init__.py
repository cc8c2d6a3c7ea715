"""Utility modules."""

from .logging_config import (
    get_logger,
    setup_logging,
    EcoRetrofitFormatter,
    FileFormatter,
)
from .validation import (
    build_attributes,
    canonical_field_name,
    normalize_choice,
    parse_area,
    parse_form_field,
    parse_integer,
    validate_year_built,
    ValidationError,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "EcoRetrofitFormatter",
    "FileFormatter",
    # Validation
    "build_attributes",
    "canonical_field_name",
    "normalize_choice",
    "parse_area",
    "parse_form_field",
    "parse_integer",
    "validate_year_built",
    "ValidationError",
]
