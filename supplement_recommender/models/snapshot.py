"""
Aggregated user snapshot - the single input the scoring core reads.

``AggregatedUserData`` is built by the data aggregator from the profile
store, the daily check-in history and the nutrition-tracking history. It is
frozen: the scoring core never mutates it, and every scoring run works on
exactly one snapshot.

Sections
--------
  profile             core profile attributes (age, weight, goals, ...)
  supplement_profile  supplement-specific onboarding answers + lab values
  intolerances        (name, severity) records
  daily_averages      rolling check-in averages + ``data_points``
  nutrition_averages  rolling nutrition averages + ``data_points``
  nutrition_goals     goal / state fields incl. ``calorie_status``
  data_freshness      timestamps; metadata only, never a scoring input

``None`` always means "not provided". An explicitly empty list (e.g. no GI
issues) is a real answer and is kept distinct from ``None``.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from supplement_recommender.taxonomy.data_taxonomy import (
    CalorieStatus,
    IntoleranceSeverity,
)

Gender = Literal["male", "female", "other"]
FitnessLevel = Literal["beginner", "intermediate", "advanced"]
PrimaryGoal = Literal[
    "strength", "hypertrophy", "endurance", "weight_loss", "general_fitness",
]
TrainingLocation = Literal["gym", "home", "both"]
LoadPreference = Literal["low_impact", "normal", "high_intensity"]
SplitPreference = Literal["full_body", "upper_lower", "push_pull", "no_preference"]
GiIssue = Literal["bloating", "irritable_bowel", "diarrhea", "constipation"]
JointIssue = Literal["knee", "tendons", "shoulder", "back"]


class ProfileData(BaseModel):
    """Core profile attributes collected during onboarding."""

    model_config = ConfigDict(frozen=True)

    age: Optional[int] = None
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
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


class LabValues(BaseModel):
    """Optional laboratory values entered by the user."""

    model_config = ConfigDict(frozen=True)

    hemoglobin: Optional[float] = None
    mcv: Optional[float] = None
    vitamin_d: Optional[float] = None
    crp: Optional[float] = None
    alt: Optional[float] = None
    ggt: Optional[float] = None
    estradiol: Optional[float] = None
    testosterone: Optional[float] = None

    def has_any_value(self) -> bool:
        """True if at least one lab value is present."""
        return any(v is not None for v in self.model_dump().values())


class SupplementProfileData(BaseModel):
    """Supplement-specific onboarding answers.

    Attributes:
        gi_issues:          Reported gastro-intestinal issues (may be empty).
        heavy_sweating:     Sweats heavily during training.
        high_salt_intake:   Habitually high dietary salt.
        sun_exposure_hours: Average daily sun exposure.
        joint_issues:       Reported joint complaints (may be empty).
        lab_values:         Lab panel, or ``None`` if never entered.
        supplement_onboarding_completed: Whether the supplement questionnaire
            was finished.
    """

    model_config = ConfigDict(frozen=True)

    gi_issues: tuple[GiIssue, ...] = ()
    heavy_sweating: Optional[bool] = None
    high_salt_intake: Optional[bool] = None
    sun_exposure_hours: Optional[float] = None
    joint_issues: tuple[JointIssue, ...] = ()
    lab_values: Optional[LabValues] = None
    supplement_onboarding_completed: bool = False


class Intolerance(BaseModel):
    """One intolerance record. ``name`` is stored lower-case."""

    model_config = ConfigDict(frozen=True)

    name: str
    severity: IntoleranceSeverity

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return v.strip().lower()


class DailyAverages(BaseModel):
    """Rolling averages over the daily recovery check-ins."""

    model_config = ConfigDict(frozen=True)

    sleep_hours: Optional[float] = None
    sleep_quality: Optional[float] = None
    stress_level: Optional[float] = None
    energy_level: Optional[float] = None
    hydration_liters: Optional[float] = None
    data_points: int = 0

    @field_validator("data_points")
    @classmethod
    def validate_data_points(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"data_points must be >= 0, got {v}.")
        return v


class NutritionAverages(BaseModel):
    """Rolling averages over the nutrition-tracking days."""

    model_config = ConfigDict(frozen=True)

    calories_consumed: Optional[float] = None
    protein_consumed: Optional[float] = None
    protein_goal: Optional[float] = None
    carbs_consumed: Optional[float] = None
    fat_consumed: Optional[float] = None
    caffeine_mg: Optional[float] = None
    water_consumed_ml: Optional[float] = None
    data_points: int = 0

    @field_validator("data_points")
    @classmethod
    def validate_data_points(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"data_points must be >= 0, got {v}.")
        return v


class NutritionGoals(BaseModel):
    """Active nutrition goal and derived energy balance."""

    model_config = ConfigDict(frozen=True)

    target_calories: Optional[float] = None
    target_protein_g: Optional[float] = None
    training_goal: Optional[str] = None
    calorie_status: Optional[CalorieStatus] = None


class DataFreshness(BaseModel):
    """When each upstream source last changed (ISO-8601 strings)."""

    model_config = ConfigDict(frozen=True)

    profile_updated_at: Optional[str] = None
    last_checkin_date: Optional[str] = None
    last_nutrition_date: Optional[str] = None


class AggregatedUserData(BaseModel):
    """Immutable per-run snapshot of everything known about one user."""

    model_config = ConfigDict(frozen=True)

    profile: ProfileData = ProfileData()
    supplement_profile: SupplementProfileData = SupplementProfileData()
    intolerances: tuple[Intolerance, ...] = ()
    daily_averages: DailyAverages = DailyAverages()
    nutrition_averages: NutritionAverages = NutritionAverages()
    nutrition_goals: NutritionGoals = NutritionGoals()
    data_freshness: DataFreshness = DataFreshness()
