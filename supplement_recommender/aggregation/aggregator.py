"""
Data aggregator: fetches the four upstream sources concurrently and builds
one immutable ``AggregatedUserData`` snapshot.

Failure model
-------------
A source that raises is logged at WARNING and treated as empty (no profile,
zero check-ins, zero nutrition days, no goals). The snapshot is always
built; missing sources surface downstream as lower completeness and
confidence, never as an exception.

Usage::

    source = JsonDirectorySource(Path("data/users"))
    data = aggregate_user_data_sync(source, "user-123", average_days=14)
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Optional, Sequence, TypeVar

from supplement_recommender.aggregation.averages import (
    compute_daily_averages,
    compute_nutrition_averages,
    determine_calorie_status,
    extract_intolerances,
)
from supplement_recommender.aggregation.records import (
    CheckinRecord,
    NutritionDayRecord,
    NutritionGoalsRecord,
    ProfileRecord,
)
from supplement_recommender.aggregation.sources import UserDataSource
from supplement_recommender.models.snapshot import (
    AggregatedUserData,
    DataFreshness,
    NutritionGoals,
    ProfileData,
    SupplementProfileData,
)
from supplement_recommender.utils.time_utils import window_start_date

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_snapshot(
    profile: Optional[ProfileRecord],
    checkins: Sequence[CheckinRecord],
    nutrition_days: Sequence[NutritionDayRecord],
    goals: Optional[NutritionGoalsRecord],
) -> AggregatedUserData:
    """Assemble a snapshot from already fetched records. Pure."""
    p = profile or ProfileRecord()

    profile_data = ProfileData(
        age=p.age,
        weight_kg=p.weight,
        height_cm=p.height,
        gender=p.gender,
        fitness_level=p.fitness_level,
        training_experience_months=p.training_experience_months,
        available_training_days=p.available_training_days,
        primary_goal=p.primary_goal,
        training_goals=p.training_goals,
        cardio_per_week=p.cardio_per_week,
        training_location=p.training_location,
        load_preference=p.load_preference,
        split_preference=p.split_preference,
        sleep_hours_avg=p.sleep_hours_avg,
        stress_level=p.stress_level,
        pal_factor=p.pal_factor,
        target_weight_kg=p.target_weight_kg,
        body_fat_percentage=p.body_fat_percentage,
    )

    supplement_profile = SupplementProfileData(
        gi_issues=p.gi_issues or (),
        heavy_sweating=p.heavy_sweating,
        high_salt_intake=p.high_salt_intake,
        sun_exposure_hours=p.sun_exposure_hours,
        joint_issues=p.joint_issues or (),
        lab_values=p.lab_values,
        supplement_onboarding_completed=bool(p.supplement_onboarding_completed),
    )

    nutrition_goals = NutritionGoals(
        target_calories=goals.target_calories if goals else None,
        target_protein_g=goals.target_protein_g if goals else None,
        training_goal=(goals.training_goal if goals else None) or p.primary_goal,
        calorie_status=determine_calorie_status(goals, profile),
    )

    freshness = DataFreshness(
        profile_updated_at=p.updated_at,
        last_checkin_date=_latest_date(checkins),
        last_nutrition_date=_latest_date(nutrition_days),
    )

    return AggregatedUserData(
        profile=profile_data,
        supplement_profile=supplement_profile,
        intolerances=extract_intolerances(profile),
        daily_averages=compute_daily_averages(checkins),
        nutrition_averages=compute_nutrition_averages(nutrition_days),
        nutrition_goals=nutrition_goals,
        data_freshness=freshness,
    )


async def aggregate_user_data(
    source: UserDataSource,
    user_id: str,
    average_days: int = 14,
    today: Optional[date] = None,
) -> AggregatedUserData:
    """Fetch all sources concurrently and build the snapshot.

    Args:
        source:       Upstream data source.
        user_id:      User to aggregate.
        average_days: Rolling-average window in days.
        today:        Reference date for the window; defaults to today (UTC).

    Returns:
        ``AggregatedUserData``. Never raises for source failures.
    """
    since = window_start_date(average_days, today)
    logger.info(
        "Aggregating data for user %s (%d-day window from %s)",
        user_id, average_days, since,
    )

    profile_res, checkins_res, nutrition_res, goals_res = await asyncio.gather(
        source.fetch_profile(user_id),
        source.fetch_checkins(user_id, since),
        source.fetch_nutrition_days(user_id, since),
        source.fetch_nutrition_goals(user_id),
        return_exceptions=True,
    )

    profile = _or_empty(profile_res, None, "profile", user_id)
    checkins = _or_empty(checkins_res, [], "check-ins", user_id)
    nutrition_days = _or_empty(nutrition_res, [], "nutrition", user_id)
    goals = _or_empty(goals_res, None, "nutrition goals", user_id)

    snapshot = build_snapshot(profile, checkins, nutrition_days, goals)

    logger.info(
        "Aggregation complete for %s: profile=%s checkin_days=%d nutrition_days=%d "
        "goals=%s intolerances=%d",
        user_id,
        profile is not None,
        len(checkins),
        len(nutrition_days),
        goals is not None,
        len(snapshot.intolerances),
    )
    return snapshot


def aggregate_user_data_sync(
    source: UserDataSource,
    user_id: str,
    average_days: int = 14,
    today: Optional[date] = None,
) -> AggregatedUserData:
    """Blocking wrapper around ``aggregate_user_data`` for CLI use."""
    return asyncio.run(aggregate_user_data(source, user_id, average_days, today))


# ── Helpers ───────────────────────────────────────────────────────────────────

def _or_empty(result: T | BaseException, empty: T, label: str, user_id: str) -> T:
    """Return ``result``, or ``empty`` when the fetch raised."""
    if isinstance(result, BaseException):
        if not isinstance(result, Exception):
            raise result
        logger.warning(
            "Source '%s' failed for user %s - treating as empty: %s",
            label, user_id, result,
        )
        return empty
    return result


def _latest_date(records: Sequence[CheckinRecord] | Sequence[NutritionDayRecord]) -> Optional[str]:
    if not records:
        return None
    return max(r.date for r in records).isoformat()
