"""
Pure aggregation helpers: rolling averages, calorie status, intolerances.

Rounding rules
--------------
  daily check-in means          → 0.1
  calories, caffeine, water     → whole numbers
  protein, protein goal, carbs,
  fat                           → 0.1

``data_points`` is always the number of records in the window, including
records that contribute no value to a given metric.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, TypeVar

from supplement_recommender.aggregation.records import (
    CheckinRecord,
    NutritionDayRecord,
    NutritionGoalsRecord,
    ProfileRecord,
)
from supplement_recommender.models.snapshot import (
    DailyAverages,
    Intolerance,
    NutritionAverages,
)
from supplement_recommender.taxonomy.data_taxonomy import CalorieStatus
from supplement_recommender.utils.rounding import round_to

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Weight difference (kg) inside which the user is treated as maintaining
MAINTENANCE_BAND_KG = 1.0

_DEFICIT_GOALS = frozenset({"weight_loss"})
_SURPLUS_GOALS = frozenset({"hypertrophy", "muscle_gain"})


def _mean(
    records: Sequence[R],
    getter: Callable[[R], Optional[float]],
    include: Callable[[float], bool],
) -> Optional[float]:
    values = [v for v in (getter(r) for r in records) if v is not None and include(v)]
    if not values:
        return None
    return sum(values) / len(values)


def _rounded(value: Optional[float], ndigits: int) -> Optional[float]:
    return None if value is None else round_to(value, ndigits)


def compute_daily_averages(history: Sequence[CheckinRecord]) -> DailyAverages:
    """Average each check-in metric over the non-null values in ``history``."""
    if not history:
        return DailyAverages()

    def avg(getter: Callable[[CheckinRecord], Optional[float]]) -> Optional[float]:
        return _rounded(_mean(history, getter, lambda v: True), 1)

    return DailyAverages(
        sleep_hours=avg(lambda r: r.sleep_hours),
        sleep_quality=avg(lambda r: r.sleep_quality),
        stress_level=avg(lambda r: r.stress_level),
        energy_level=avg(lambda r: r.energy_level),
        hydration_liters=avg(lambda r: r.hydration_liters),
        data_points=len(history),
    )


def compute_nutrition_averages(history: Sequence[NutritionDayRecord]) -> NutritionAverages:
    """Average each nutrition metric over the days where it is > 0.

    A zero means nothing was logged that day, so it is excluded rather than
    dragging the mean down.
    """
    if not history:
        return NutritionAverages()

    def avg(
        getter: Callable[[NutritionDayRecord], float],
        ndigits: int,
    ) -> Optional[float]:
        return _rounded(_mean(history, getter, lambda v: v > 0), ndigits)

    return NutritionAverages(
        calories_consumed=avg(lambda r: r.calories_consumed, 0),
        protein_consumed=avg(lambda r: r.protein_consumed, 1),
        protein_goal=avg(lambda r: r.protein_goal, 1),
        carbs_consumed=avg(lambda r: r.carbs_consumed, 1),
        fat_consumed=avg(lambda r: r.fat_consumed, 1),
        caffeine_mg=avg(lambda r: r.caffeine_mg, 0),
        water_consumed_ml=avg(lambda r: r.water_consumed_ml, 0),
        data_points=len(history),
    )


def determine_calorie_status(
    goals: Optional[NutritionGoalsRecord],
    profile: Optional[ProfileRecord],
) -> Optional[CalorieStatus]:
    """Derive the energy-balance state from weights or, failing that, the goal.

    Rules (first match wins):
        1. No active goal or no profile          → ``None``
        2. Current and target weight known:
             target − current < −1 kg            → DEFICIT
             target − current > +1 kg            → SURPLUS
             otherwise                           → MAINTENANCE
        3. Goal ``weight_loss``                  → DEFICIT
        4. Goal ``hypertrophy`` / ``muscle_gain`` → SURPLUS
        5. Anything else                         → MAINTENANCE

    The profile's target weight and primary goal take precedence over the
    values stored on the nutrition goal.
    """
    if goals is None or profile is None:
        return None

    current = profile.weight
    target = profile.target_weight_kg or goals.target_weight_kg

    if not current or not target:
        goal = profile.primary_goal or goals.training_goal
        if goal in _DEFICIT_GOALS:
            return CalorieStatus.DEFICIT
        if goal in _SURPLUS_GOALS:
            return CalorieStatus.SURPLUS
        return CalorieStatus.MAINTENANCE

    diff = target - current
    if diff < -MAINTENANCE_BAND_KG:
        return CalorieStatus.DEFICIT
    if diff > MAINTENANCE_BAND_KG:
        return CalorieStatus.SURPLUS
    return CalorieStatus.MAINTENANCE


def extract_intolerances(profile: Optional[ProfileRecord]) -> tuple[Intolerance, ...]:
    """Flatten the profile's joined intolerance rows into snapshot records.

    Rows whose catalog entry has no name cannot be matched against anything
    and are dropped.
    """
    if profile is None:
        return ()

    result: list[Intolerance] = []
    for row in profile.user_intolerances:
        name = row.intolerance.name if row.intolerance else None
        if not name or not name.strip():
            logger.debug("Skipping unnamed intolerance (severity=%s)", row.severity)
            continue
        result.append(Intolerance(name=name, severity=row.severity))
    return tuple(result)
