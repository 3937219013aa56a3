"""
Enumerated snapshot fields and their typed accessors.

Catalog conditions never traverse the snapshot with free-form string paths.
Each condition names a ``SnapshotField`` member, and ``FIELD_ACCESSORS`` maps
every member to a getter over ``AggregatedUserData``. The member value is the
dotted path used in catalog files and in factor explanations.

``FIELD_ACCESSORS`` is an integrity contract: every ``SnapshotField`` must have
exactly one getter (verified in ``tests/test_models/test_fields.py``).
"""

from __future__ import annotations

from enum import StrEnum
from operator import attrgetter
from typing import Any, Callable

from supplement_recommender.models.snapshot import AggregatedUserData
from supplement_recommender.taxonomy.data_taxonomy import DataSource


class SnapshotField(StrEnum):
    """Every snapshot leaf a catalog condition may reference."""

    # ── profile ───────────────────────────────────────────────────────────────
    AGE = "profile.age"
    WEIGHT_KG = "profile.weight_kg"
    HEIGHT_CM = "profile.height_cm"
    GENDER = "profile.gender"
    FITNESS_LEVEL = "profile.fitness_level"
    TRAINING_EXPERIENCE_MONTHS = "profile.training_experience_months"
    AVAILABLE_TRAINING_DAYS = "profile.available_training_days"
    PRIMARY_GOAL = "profile.primary_goal"
    TRAINING_GOALS = "profile.training_goals"
    CARDIO_PER_WEEK = "profile.cardio_per_week"
    TRAINING_LOCATION = "profile.training_location"
    LOAD_PREFERENCE = "profile.load_preference"
    SPLIT_PREFERENCE = "profile.split_preference"
    SLEEP_HOURS_AVG = "profile.sleep_hours_avg"
    STRESS_LEVEL = "profile.stress_level"
    PAL_FACTOR = "profile.pal_factor"
    TARGET_WEIGHT_KG = "profile.target_weight_kg"
    BODY_FAT_PERCENTAGE = "profile.body_fat_percentage"

    # ── supplement profile ────────────────────────────────────────────────────
    GI_ISSUES = "supplement_profile.gi_issues"
    HEAVY_SWEATING = "supplement_profile.heavy_sweating"
    HIGH_SALT_INTAKE = "supplement_profile.high_salt_intake"
    SUN_EXPOSURE_HOURS = "supplement_profile.sun_exposure_hours"
    JOINT_ISSUES = "supplement_profile.joint_issues"
    SUPPLEMENT_ONBOARDING_COMPLETED = "supplement_profile.supplement_onboarding_completed"
    LAB_HEMOGLOBIN = "supplement_profile.lab_values.hemoglobin"
    LAB_MCV = "supplement_profile.lab_values.mcv"
    LAB_VITAMIN_D = "supplement_profile.lab_values.vitamin_d"
    LAB_CRP = "supplement_profile.lab_values.crp"
    LAB_ALT = "supplement_profile.lab_values.alt"
    LAB_GGT = "supplement_profile.lab_values.ggt"
    LAB_ESTRADIOL = "supplement_profile.lab_values.estradiol"
    LAB_TESTOSTERONE = "supplement_profile.lab_values.testosterone"

    # ── intolerances ──────────────────────────────────────────────────────────
    INTOLERANCES = "intolerances"

    # ── daily check-in averages ───────────────────────────────────────────────
    DAILY_SLEEP_HOURS = "daily_averages.sleep_hours"
    DAILY_SLEEP_QUALITY = "daily_averages.sleep_quality"
    DAILY_STRESS_LEVEL = "daily_averages.stress_level"
    DAILY_ENERGY_LEVEL = "daily_averages.energy_level"
    DAILY_HYDRATION_LITERS = "daily_averages.hydration_liters"
    DAILY_DATA_POINTS = "daily_averages.data_points"

    # ── nutrition averages ────────────────────────────────────────────────────
    NUTRITION_CALORIES = "nutrition_averages.calories_consumed"
    NUTRITION_PROTEIN = "nutrition_averages.protein_consumed"
    NUTRITION_PROTEIN_GOAL = "nutrition_averages.protein_goal"
    NUTRITION_CARBS = "nutrition_averages.carbs_consumed"
    NUTRITION_FAT = "nutrition_averages.fat_consumed"
    NUTRITION_CAFFEINE_MG = "nutrition_averages.caffeine_mg"
    NUTRITION_WATER_ML = "nutrition_averages.water_consumed_ml"
    NUTRITION_DATA_POINTS = "nutrition_averages.data_points"

    # ── nutrition goals ───────────────────────────────────────────────────────
    TARGET_CALORIES = "nutrition_goals.target_calories"
    TARGET_PROTEIN_G = "nutrition_goals.target_protein_g"
    TRAINING_GOAL = "nutrition_goals.training_goal"
    CALORIE_STATUS = "nutrition_goals.calorie_status"


FieldAccessor = Callable[[AggregatedUserData], Any]


def _lab_value(name: str) -> FieldAccessor:
    """Getter for one lab value; ``None`` when no lab panel exists."""

    def get(data: AggregatedUserData) -> Any:
        lab = data.supplement_profile.lab_values
        return None if lab is None else getattr(lab, name)

    return get


def _build_accessors() -> dict[SnapshotField, FieldAccessor]:
    accessors: dict[SnapshotField, FieldAccessor] = {}
    for member in SnapshotField:
        path = member.value
        if path.startswith("supplement_profile.lab_values."):
            accessors[member] = _lab_value(path.rsplit(".", 1)[1])
        else:
            accessors[member] = attrgetter(path)
    return accessors


FIELD_ACCESSORS: dict[SnapshotField, FieldAccessor] = _build_accessors()

# Section prefix → data source tag used on recommendation factors.
_SOURCE_BY_SECTION: dict[str, DataSource] = {
    "profile":            DataSource.PROFILE,
    "intolerances":       DataSource.PROFILE,
    "supplement_profile": DataSource.SUPPLEMENT_PROFILE,
    "daily_averages":     DataSource.DAILY_CHECKIN,
    "nutrition_averages": DataSource.NUTRITION,
    "nutrition_goals":    DataSource.NUTRITION,
}


def data_source_for(field: SnapshotField) -> DataSource:
    """Return the ``DataSource`` tag for a snapshot field."""
    section = field.value.split(".", 1)[0]
    return _SOURCE_BY_SECTION.get(section, DataSource.CALCULATED)


def resolve_field(field: SnapshotField, data: AggregatedUserData) -> Any:
    """Return the snapshot value for ``field`` (``None`` when not provided)."""
    return FIELD_ACCESSORS[field](data)
