"""
Input validation utilities for EcoRetrofit.

Converts raw form values (CLI options, JSON fields, interactive input)
into a BuildingAttributes record. Nothing non-numeric or outside an enum
gets past this boundary.

Usage:
    from ecoretrofit.utils.validation import build_attributes, ValidationError

    attrs = build_attributes({"floorAreaSqm": "120", "heatingSystem": "heat-pump"})
"""

import math
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type
import logging

from pydantic import ValidationError as PydanticValidationError

from ..core.config import settings
from ..core.models import (
    BuildingAttributes,
    ClimateZone,
    DEFAULT_ATTRIBUTES,
    HeatingSystem,
    InsulationQuality,
    RoofType,
    WallType,
    WindowType,
)

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = "", suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field = field
        self.suggestions = suggestions or []


INTEGER_FIELDS = {"year_built", "floors", "occupant_count"}

CHOICE_FIELDS: Dict[str, Type[Enum]] = {
    "insulation_quality": InsulationQuality,
    "heating_system": HeatingSystem,
    "window_type": WindowType,
    "climate_zone": ClimateZone,
    "roof_type": RoofType,
    "wall_type": WallType,
}

# Alternative spellings accepted for enum values (after lowercasing and
# mapping '-' and ' ' to '_')
CHOICE_ALIASES: Dict[Type[Enum], Dict[str, str]] = {
    HeatingSystem: {"heatpump": "heat_pump", "hp": "heat_pump"},
    WindowType: {
        "single_glazing": "single",
        "double_glazing": "double",
        "triple_glazing": "triple",
    },
    WallType: {"wood_frame": "wood"},
}

# Names used by the web form, mapped to model field names
FORM_FIELD_ALIASES = {
    "squareMeters": "floor_area_sqm",
    "insulation": "insulation_quality",
    "windows": "window_type",
    "occupants": "occupant_count",
    "location": "climate_zone",
}


def canonical_field_name(name: str) -> str:
    """
    Map a snake_case, camelCase or legacy form name to the model field name.

    Raises:
        ValidationError: If the name is not a BuildingAttributes field
    """
    if name in FORM_FIELD_ALIASES:
        return FORM_FIELD_ALIASES[name]

    fields = BuildingAttributes.model_fields
    if name in fields:
        return name
    for field_name, info in fields.items():
        if info.alias == name:
            return field_name

    raise ValidationError(
        f"Unknown building field '{name}'",
        field=name,
        suggestions=[f"Valid fields are: {', '.join(fields)}"],
    )


def parse_integer(value: Any, field: str) -> int:
    """
    Parse a form value as an integer.

    Accepts ints, integral floats and digit strings. Rejects booleans,
    fractions, NaN and anything non-numeric.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a whole number: got {value!r}", field=field)

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        raise ValidationError(f"{field} must be a whole number: got {value!r}", field=field)

    try:
        return int(str(value).strip())
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field} must be a whole number: got '{value}'",
            field=field,
        )


def parse_area(value: Any, field: str = "floor_area_sqm") -> float:
    """
    Parse floor area as a positive, finite number.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Floor area must be a number: got {value!r}", field=field)

    try:
        area = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"Floor area must be a number: got '{value}'",
            field=field,
        )

    if not math.isfinite(area):
        raise ValidationError(f"Floor area must be finite: got {value!r}", field=field)

    if area <= 0:
        raise ValidationError(
            f"Floor area {area} m² must be positive",
            field=field,
            suggestions=["Enter the heated floor area in square meters"],
        )

    return area


def validate_year_built(year: Any, current_year: Optional[int] = None) -> int:
    """
    Validate construction year.

    Any integer is accepted (the usage model clamps the age factor); a year
    in the future is logged.
    """
    year = parse_integer(year, "year_built")
    if current_year is None:
        current_year = settings.reference_year
    if year > current_year:
        logger.warning(f"Construction year {year} is in the future", extra={"field": "year_built"})
    return year


def normalize_choice(enum_cls: Type[Enum], value: Any, field: str) -> Enum:
    """
    Normalize a form value to an enum member.

    Raises:
        ValidationError: If the value matches no member or alias
    """
    if isinstance(value, enum_cls):
        return value

    key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    key = CHOICE_ALIASES.get(enum_cls, {}).get(key, key)

    try:
        return enum_cls(key)
    except ValueError:
        valid = [member.value for member in enum_cls]
        raise ValidationError(
            f"Invalid {field} '{value}'",
            field=field,
            suggestions=[f"Valid values are: {', '.join(valid)}"],
        )


def parse_form_field(name: str, value: Any) -> Tuple[str, Any]:
    """
    Parse one raw form value.

    Returns:
        (model field name, parsed value)
    """
    field = canonical_field_name(name)

    if field == "floor_area_sqm":
        return field, parse_area(value, field)
    if field == "year_built":
        return field, validate_year_built(value)
    if field in INTEGER_FIELDS:
        return field, parse_integer(value, field)
    if field in CHOICE_FIELDS:
        return field, normalize_choice(CHOICE_FIELDS[field], value, field)

    return field, value


def build_attributes(
    data: Mapping[str, Any],
    base: Optional[BuildingAttributes] = None,
) -> BuildingAttributes:
    """
    Build a BuildingAttributes record from raw form values.

    Fields missing from data keep their value from base (default: the
    reset record).

    Raises:
        ValidationError: If any field is unknown or invalid
    """
    base = base or DEFAULT_ATTRIBUTES
    values = base.model_dump()

    for name, raw in data.items():
        field, parsed = parse_form_field(name, raw)
        values[field] = parsed

    try:
        return BuildingAttributes.model_validate(values)
    except PydanticValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(part) for part in first.get("loc", ())) or "building"
        raise ValidationError(f"Invalid {loc}: {first.get('msg')}", field=loc) from e
