"""
Shared pytest fixtures for the supplement recommender test suite.

Provides:
  - ``make_snapshot`` / ``make_condition`` / ``make_candidate``: plain
    factory helpers, importable from test modules via the fixtures below.
  - ``full_snapshot``: a snapshot with every completeness field filled.
  - ``scoring_config``: the default ``ScoringConfig``.
  - ``catalog_file``: the shipped example catalog path.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from supplement_recommender.config import ScoringConfig
from supplement_recommender.models.catalog import CandidateDefinition
from supplement_recommender.models.snapshot import (
    AggregatedUserData,
    DailyAverages,
    Intolerance,
    LabValues,
    NutritionAverages,
    NutritionGoals,
    ProfileData,
    SupplementProfileData,
)
from supplement_recommender.taxonomy.data_taxonomy import (
    CalorieStatus,
    IntoleranceSeverity,
)

PROJECT_ROOT = Path(__file__).parent.parent


# ── Factory helpers ───────────────────────────────────────────────────────────

def make_snapshot(**sections: Any) -> AggregatedUserData:
    """Build a snapshot; keyword args replace whole sections.

    Example::

        make_snapshot(profile=ProfileData(age=30))
    """
    return AggregatedUserData(**sections)


def make_condition(
    field: str,
    operator: str,
    value: Any = None,
    weight: int = 3,
    description: str | None = None,
) -> dict:
    """Raw condition dict, as it would appear in a catalog file."""
    cond: dict[str, Any] = {
        "field": field,
        "operator": operator,
        "weight": weight,
        "description": description or f"{field} {operator} {value}",
    }
    if operator != "not_empty" or value is not None:
        cond["value"] = value
    return cond


def make_candidate(
    id: str = "test-supplement",
    positive: list[dict] | None = None,
    negative: list[dict] | None = None,
    contraindications: list[str] | None = None,
    is_essential: bool = False,
    target_areas: list[str] | None = None,
    **extra: Any,
) -> CandidateDefinition:
    """Validated ``CandidateDefinition`` from raw condition dicts."""
    return CandidateDefinition.model_validate(
        {
            "id": id,
            "name": extra.pop("name", id.replace("-", " ").title()),
            "target_areas": target_areas or ["base_micronutrients"],
            "positive_conditions": positive or [],
            "negative_conditions": negative or [],
            "contraindications": contraindications or [],
            "is_essential": is_essential,
            **extra,
        }
    )


def full_profile() -> ProfileData:
    return ProfileData(
        age=30,
        weight_kg=80.0,
        height_cm=180.0,
        gender="male",
        fitness_level="intermediate",
        training_experience_months=24,
        available_training_days=4,
        primary_goal="hypertrophy",
        cardio_per_week=2,
        load_preference="normal",
        sleep_hours_avg=7.5,
        stress_level=4,
        pal_factor=1.6,
    )


def build_full_snapshot() -> AggregatedUserData:
    return AggregatedUserData(
        profile=full_profile(),
        supplement_profile=SupplementProfileData(
            gi_issues=(),
            heavy_sweating=True,
            high_salt_intake=False,
            sun_exposure_hours=1.0,
            joint_issues=("knee",),
            lab_values=LabValues(vitamin_d=22.0),
            supplement_onboarding_completed=True,
        ),
        intolerances=(
            Intolerance(name="Lactose", severity=IntoleranceSeverity.MILD),
        ),
        daily_averages=DailyAverages(
            sleep_hours=6.5,
            sleep_quality=6.0,
            stress_level=5.0,
            energy_level=6.0,
            hydration_liters=2.5,
            data_points=10,
        ),
        nutrition_averages=NutritionAverages(
            calories_consumed=2600.0,
            protein_consumed=150.0,
            protein_goal=160.0,
            carbs_consumed=300.0,
            fat_consumed=80.0,
            caffeine_mg=200.0,
            water_consumed_ml=2500.0,
            data_points=12,
        ),
        nutrition_goals=NutritionGoals(
            target_calories=2800.0,
            target_protein_g=160.0,
            training_goal="hypertrophy",
            calorie_status=CalorieStatus.SURPLUS,
        ),
    )


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def empty_snapshot() -> AggregatedUserData:
    """A snapshot with nothing provided."""
    return AggregatedUserData()


@pytest.fixture
def full_snapshot() -> AggregatedUserData:
    """A snapshot with every completeness checklist field filled."""
    return build_full_snapshot()


@pytest.fixture
def scoring_config() -> ScoringConfig:
    return ScoringConfig()


@pytest.fixture
def catalog_file() -> Path:
    """Path to the shipped example catalog."""
    return PROJECT_ROOT / "config" / "catalog" / "supplements.json"
