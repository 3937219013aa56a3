"""
Data-completeness analysis: grades how much of the expected input is present
in a snapshot, independent of any catalog entry.

Categories (weight in the overall blend)
-----------------------------------------
    basic_profile       20   age, weight_kg, height_cm, gender
    fitness_profile     25   fitness_level, training_experience_months,
                             available_training_days, primary_goal,
                             cardio_per_week, load_preference
    lifestyle           15   sleep_hours_avg, stress_level, pal_factor
    supplement_profile  15   gi_issues, heavy_sweating, sun_exposure_hours,
                             joint_issues
    daily_tracking      15   sleep_hours, sleep_quality, stress_level,
                             energy_level, hydration_liters
    nutrition_tracking  10   calories_consumed, protein_consumed, caffeine_mg,
                             water_consumed_ml

Rules
-----
  - A checklist field counts as filled when it is not ``None``. List fields
    count as filled even when empty: an explicit "none" is an answer.
  - The two tracking categories report ``filled = 0`` unless their
    ``data_points`` reach ``min_data_points``; a thin sample invalidates the
    averages regardless of the individual values.
  - ``percentage = round(filled / total * 100)``;
    ``overall = round(Σ percentage·weight / Σ weight)`` (half-up).
"""

from __future__ import annotations

from typing import Any

from supplement_recommender.models.recommendation import (
    COMPLETENESS_CATEGORIES,
    CategoryCompleteness,
    DataCompleteness,
)
from supplement_recommender.models.snapshot import AggregatedUserData
from supplement_recommender.utils.rounding import round_half_up

CATEGORY_WEIGHTS: dict[str, int] = {
    "basic_profile":      20,
    "fitness_profile":    25,
    "lifestyle":          15,
    "supplement_profile": 15,
    "daily_tracking":     15,
    "nutrition_tracking": 10,
}

_BASIC_PROFILE_FIELDS = ("age", "weight_kg", "height_cm", "gender")
_FITNESS_PROFILE_FIELDS = (
    "fitness_level",
    "training_experience_months",
    "available_training_days",
    "primary_goal",
    "cardio_per_week",
    "load_preference",
)
_LIFESTYLE_FIELDS = ("sleep_hours_avg", "stress_level", "pal_factor")
_SUPPLEMENT_PROFILE_FIELDS = (
    "gi_issues", "heavy_sweating", "sun_exposure_hours", "joint_issues",
)
_DAILY_TRACKING_FIELDS = (
    "sleep_hours", "sleep_quality", "stress_level", "energy_level", "hydration_liters",
)
_NUTRITION_TRACKING_FIELDS = (
    "calories_consumed", "protein_consumed", "caffeine_mg", "water_consumed_ml",
)

# (profile attribute, label) reported when the attribute is None
_CRITICAL_FIELDS: tuple[tuple[str, str], ...] = (
    ("age",                     "age"),
    ("weight_kg",               "weight"),
    ("gender",                  "gender"),
    ("primary_goal",            "primary training goal"),
    ("available_training_days", "training days per week"),
)

_OPTIONAL_PROFILE_FIELDS: tuple[tuple[str, str], ...] = (
    ("fitness_level",   "fitness level"),
    ("load_preference", "load preference"),
    ("cardio_per_week", "cardio sessions per week"),
)


def analyze_completeness(
    data: AggregatedUserData,
    min_data_points: int = 3,
) -> DataCompleteness:
    """Grade the completeness of one snapshot.

    Args:
        data:            Aggregated user snapshot.
        min_data_points: Tracked days required before a rolling-average
                         category counts at all.

    Returns:
        ``DataCompleteness`` with all six categories populated.
    """
    daily_ok = data.daily_averages.data_points >= min_data_points
    nutrition_ok = data.nutrition_averages.data_points >= min_data_points

    categories = {
        "basic_profile": _category(data.profile, _BASIC_PROFILE_FIELDS),
        "fitness_profile": _category(data.profile, _FITNESS_PROFILE_FIELDS),
        "lifestyle": _category(data.profile, _LIFESTYLE_FIELDS),
        "supplement_profile": _category(
            data.supplement_profile, _SUPPLEMENT_PROFILE_FIELDS
        ),
        "daily_tracking": _category(
            data.daily_averages, _DAILY_TRACKING_FIELDS, sufficient=daily_ok
        ),
        "nutrition_tracking": _category(
            data.nutrition_averages, _NUTRITION_TRACKING_FIELDS, sufficient=nutrition_ok
        ),
    }

    weighted = sum(
        categories[name].percentage * CATEGORY_WEIGHTS[name]
        for name in COMPLETENESS_CATEGORIES
    )
    overall = round_half_up(weighted / sum(CATEGORY_WEIGHTS.values()))

    missing_critical = [
        label for attr, label in _CRITICAL_FIELDS
        if getattr(data.profile, attr) is None
    ]

    missing_optional = [
        label for attr, label in _OPTIONAL_PROFILE_FIELDS
        if getattr(data.profile, attr) is None
    ]
    if not data.supplement_profile.supplement_onboarding_completed:
        missing_optional.append("supplement profile (GI issues, joints, sun exposure)")
    if not daily_ok:
        missing_optional.append(
            f"daily check-ins ({data.daily_averages.data_points}/{min_data_points} days)"
        )
    if not nutrition_ok:
        missing_optional.append(
            f"nutrition tracking ({data.nutrition_averages.data_points}/{min_data_points} days)"
        )

    return DataCompleteness(
        overall_percentage=overall,
        categories=categories,
        missing_critical=tuple(missing_critical),
        missing_optional=tuple(missing_optional),
    )


# ── Helpers ───────────────────────────────────────────────────────────────────

def _is_filled(value: Any) -> bool:
    if isinstance(value, (tuple, list)):
        return True
    return value is not None


def _category(
    section: Any,
    fields: tuple[str, ...],
    sufficient: bool = True,
) -> CategoryCompleteness:
    total = len(fields)
    filled = sum(1 for f in fields if _is_filled(getattr(section, f))) if sufficient else 0
    return CategoryCompleteness(
        filled=filled,
        total=total,
        percentage=round_half_up(filled * 100 / total),
    )
