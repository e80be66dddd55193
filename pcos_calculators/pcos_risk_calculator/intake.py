"""Profile intake: derived fields, range checks and row coercion.

Range checks live here rather than in the calculator, which scores any
well-typed profile.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pcos_calculators.pcos_risk_calculator.errors import IntakeValidationError
from pcos_calculators.pcos_risk_calculator.models import Profile
from pcos_calculators.pcos_risk_calculator.presets import DEFAULT_PROFILE

logger = logging.getLogger(__name__)

# Inclusive (min, max, message) per field, in form order
FIELD_RANGES: dict[str, tuple[float, float, str]] = {
    "age": (15, 60, "Age must be between 15 and 60"),
    "height": (100, 220, "Invalid height"),
    "weight": (30, 200, "Invalid weight"),
    "cycle_length": (15, 90, "Cycle length must be between 15 and 90 days"),
    "acne_severity": (0, 3, "Acne severity must be between 0 and 3"),
    "excess_hair_growth": (0, 4, "Hair growth must be between 0 and 4"),
    "testosterone": (0, 200, "Invalid testosterone value"),
    "amh": (0, 50, "Invalid AMH value"),
    "lh": (0, 100, "Invalid LH value"),
    "fsh": (0, 50, "Invalid FSH value"),
    "cortisol": (0, 50, "Invalid cortisol value"),
}

PROFILE_COLUMNS = (
    "age",
    "height",
    "weight",
    "family_history",
    "cycle_length",
    "irregular_periods",
    "missed_periods",
    "acne_severity",
    "excess_hair_growth",
    "hair_fall",
    "dark_patches",
    "mood_swings",
    "testosterone",
    "amh",
    "lh",
    "fsh",
    "cortisol",
)


def validate_profile(profile: Profile) -> dict[str, str]:
    """Check every ranged field.

    Returns:
        Field name -> message for each field out of range or NaN; empty when valid
    """
    errors: dict[str, str] = {}
    for field, (low, high, message) in FIELD_RANGES.items():
        value = getattr(profile, field)
        if not low <= value <= high:
            errors[field] = message
    return errors


def build_profile(**fields: Any) -> Profile:
    """Build a validated profile from intake values.

    Unspecified fields take their default intake value. ``bmi`` and
    ``lh_fsh_ratio`` are always recomputed from their sources.

    Raises:
        IntakeValidationError: if any field is out of range
        pydantic.ValidationError: if a value has the wrong type
    """
    data = DEFAULT_PROFILE.model_dump()
    data.update(fields)
    profile = Profile.model_validate(data)

    errors = validate_profile(profile)
    if errors:
        raise IntakeValidationError(errors)
    return profile


def coerce_bool(value: Any) -> bool:
    """Coerce common truthy spellings ('yes', 'Y', 1, 'true') to bool."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in {"1", "true", "t", "yes", "y"}


def rows_to_profiles(
    rows: Iterable[tuple[Any, ...]],
    *,
    invalid_rows: str = "skip",
) -> tuple[list[tuple[str, Profile]], dict[str, Any]]:
    """
    Convert raw database rows into validated (profile_id, Profile) pairs.

    Expected row format: (profile_id, *PROFILE_COLUMNS)
    """
    if invalid_rows not in {"skip", "error"}:
        raise ValueError("invalid_rows must be one of: skip, error")

    profiles: list[tuple[str, Profile]] = []
    skipped = 0
    invalid_fields: dict[str, int] = {}

    for row in rows:
        profile_id, *values = row
        raw = dict(zip(PROFILE_COLUMNS, values))
        missing = [name for name in PROFILE_COLUMNS if raw.get(name) is None and name in FIELD_RANGES]

        if missing:
            errors = {name: "Value is required" for name in missing}
        else:
            for name in (
                "family_history",
                "irregular_periods",
                "missed_periods",
                "hair_fall",
                "dark_patches",
                "mood_swings",
            ):
                raw[name] = coerce_bool(raw.get(name))
            profile = Profile.model_validate(raw)
            errors = validate_profile(profile)

        if errors:
            for name in errors:
                invalid_fields[name] = invalid_fields.get(name, 0) + 1
            if invalid_rows == "error":
                raise IntakeValidationError(errors)
            logger.warning("Skipping intake row %s: %s", profile_id, errors)
            skipped += 1
            continue

        profiles.append((str(profile_id), profile))

    return profiles, {"skipped": skipped, "invalid_fields": invalid_fields}
