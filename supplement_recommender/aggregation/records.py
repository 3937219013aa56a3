"""
Typed upstream records consumed by the data aggregator.

These mirror the rows returned by the profile store, the daily recovery
check-in log and the nutrition-tracking tables. Unknown columns are ignored
so that a wider upstream schema does not break ingestion.

Records are validated on construction; a source returning a malformed row
fails as a whole and is treated as empty by the aggregator.
"""

from __future__ import annotations

import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from supplement_recommender.models.snapshot import (
    FitnessLevel,
    Gender,
    GiIssue,
    JointIssue,
    LabValues,
    LoadPreference,
    PrimaryGoal,
    SplitPreference,
    TrainingLocation,
)
from supplement_recommender.taxonomy.data_taxonomy import IntoleranceSeverity


class IntoleranceCatalogEntry(BaseModel):
    """Row of the shared intolerance catalog joined onto a user intolerance."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None


class UserIntoleranceRecord(BaseModel):
    """One user → intolerance link with its severity."""

    model_config = ConfigDict(frozen=True)

    severity: IntoleranceSeverity
    intolerance: Optional[IntoleranceCatalogEntry] = None


class ProfileRecord(BaseModel):
    """Profile row including the supplement onboarding answers.

    Upstream column names are kept (``weight``, ``height``); the aggregator
    maps them onto the snapshot's ``weight_kg`` / ``height_cm``.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    age: Optional[int] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    gender: Optional[Gender] = None
    fitness_level: Optional[FitnessLevel] = None
    training_experience_months: Optional[int] = None
    available_training_days: Optional[int] = None
    primary_goal: Optional[PrimaryGoal] = None
    training_goals: Optional[tuple[str, ...]] = None
    cardio_per_week: Optional[int] = None
    training_location: Optional[TrainingLocation] = None
    load_preference: Optional[LoadPreference] = None
    split_preference: Optional[SplitPreference] = None
    sleep_hours_avg: Optional[float] = None
    stress_level: Optional[int] = None
    pal_factor: Optional[float] = None
    target_weight_kg: Optional[float] = None
    body_fat_percentage: Optional[float] = None

    gi_issues: Optional[tuple[GiIssue, ...]] = None
    heavy_sweating: Optional[bool] = None
    high_salt_intake: Optional[bool] = None
    sun_exposure_hours: Optional[float] = None
    joint_issues: Optional[tuple[JointIssue, ...]] = None
    lab_values: Optional[LabValues] = None
    supplement_onboarding_completed: Optional[bool] = None

    user_intolerances: tuple[UserIntoleranceRecord, ...] = ()
    updated_at: Optional[str] = None


class CheckinRecord(BaseModel):
    """One daily recovery check-in. Any metric may be missing."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    sleep_hours: Optional[float] = None
    sleep_quality: Optional[float] = None
    stress_level: Optional[float] = None
    energy_level: Optional[float] = None
    hydration_liters: Optional[float] = None


class NutritionDayRecord(BaseModel):
    """One day of tracked nutrition. Zero means "nothing logged"."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    calories_consumed: float = 0.0
    protein_consumed: float = 0.0
    protein_goal: float = 0.0
    carbs_consumed: float = 0.0
    fat_consumed: float = 0.0
    caffeine_mg: float = 0.0
    water_consumed_ml: float = 0.0

    @field_validator(
        "calories_consumed", "protein_consumed", "protein_goal", "carbs_consumed",
        "fat_consumed", "caffeine_mg", "water_consumed_ml",
        mode="before",
    )
    @classmethod
    def null_as_zero(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @classmethod
    def from_summary_row(cls, row: dict[str, Any]) -> "NutritionDayRecord":
        """Build a record from a ``daily_nutrition_summary`` row.

        The summary table carries no water or caffeine totals; those stay 0
        and therefore never count towards the averages.
        """
        return cls(
            date=row["summary_date"],
            calories_consumed=row.get("total_calories"),
            protein_consumed=row.get("total_protein"),
            protein_goal=row.get("goal_protein"),
            carbs_consumed=row.get("total_carbs"),
            fat_consumed=row.get("total_fat"),
        )


class NutritionGoalsRecord(BaseModel):
    """The user's currently active nutrition goal."""

    model_config = ConfigDict(frozen=True)

    target_calories: Optional[float] = None
    target_protein_g: Optional[float] = None
    training_goal: Optional[str] = None
    target_weight_kg: Optional[float] = None
    is_active: bool = True
    created_at: Optional[str] = None
