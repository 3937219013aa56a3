"""
Tests for supplement_recommender/aggregation/aggregator.py.

What we test
------------
build_snapshot():
  - Maps upstream column names onto snapshot fields.
  - Falls back to the profile goal when no nutrition goal exists.
  - Freshness uses the latest record dates.
  - No inputs at all → default snapshot.

aggregate_user_data():
  - Requests the averaging window ending at ``today``.
  - A failing source is logged and treated as empty; others still count.
  - aggregate_user_data_sync() wraps the coroutine.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Optional

import pytest

from supplement_recommender.aggregation.aggregator import (
    aggregate_user_data,
    aggregate_user_data_sync,
    build_snapshot,
)
from supplement_recommender.aggregation.records import (
    CheckinRecord,
    NutritionDayRecord,
    NutritionGoalsRecord,
    ProfileRecord,
)
from supplement_recommender.models.snapshot import AggregatedUserData
from supplement_recommender.taxonomy.data_taxonomy import CalorieStatus

TODAY = date(2026, 1, 15)


def _profile() -> ProfileRecord:
    return ProfileRecord.model_validate({
        "id": "user-1",
        "age": 34,
        "weight": 82.0,
        "height": 178.0,
        "gender": "male",
        "primary_goal": "hypertrophy",
        "target_weight_kg": 86.0,
        "heavy_sweating": True,
        "gi_issues": ["bloating"],
        "supplement_onboarding_completed": True,
        "lab_values": {"vitamin_d": 24.0},
        "updated_at": "2026-01-10T09:00:00Z",
        "user_intolerances": [
            {"severity": "severe", "intolerance": {"name": "Lactose"}},
        ],
    })


class FakeSource:
    """In-memory source; any value that is an exception is raised on fetch."""

    def __init__(self, profile=None, checkins=(), nutrition=(), goals=None) -> None:
        self.profile = profile
        self.checkins = checkins
        self.nutrition = nutrition
        self.goals = goals
        self.since: Optional[date] = None

    @staticmethod
    def _give(value):
        if isinstance(value, Exception):
            raise value
        return value

    async def fetch_profile(self, user_id):
        return self._give(self.profile)

    async def fetch_checkins(self, user_id, since):
        self.since = since
        return list(self._give(self.checkins))

    async def fetch_nutrition_days(self, user_id, since):
        return list(self._give(self.nutrition))

    async def fetch_nutrition_goals(self, user_id):
        return self._give(self.goals)


# ── build_snapshot ────────────────────────────────────────────────────────────

class TestBuildSnapshot:
    def test_no_inputs_gives_default_snapshot(self):
        assert build_snapshot(None, [], [], None) == AggregatedUserData()

    def test_profile_mapping(self):
        snap = build_snapshot(_profile(), [], [], None)
        assert snap.profile.weight_kg == pytest.approx(82.0)
        assert snap.profile.height_cm == pytest.approx(178.0)
        assert snap.supplement_profile.gi_issues == ("bloating",)
        assert snap.supplement_profile.joint_issues == ()
        assert snap.supplement_profile.lab_values.vitamin_d == pytest.approx(24.0)
        assert snap.supplement_profile.supplement_onboarding_completed is True
        assert [i.name for i in snap.intolerances] == ["lactose"]

    def test_training_goal_falls_back_to_profile_goal(self):
        snap = build_snapshot(_profile(), [], [], None)
        assert snap.nutrition_goals.training_goal == "hypertrophy"
        assert snap.nutrition_goals.calorie_status is None

    def test_goal_record_used(self):
        goals = NutritionGoalsRecord(
            target_calories=2900, target_protein_g=170, training_goal="muscle_gain"
        )
        snap = build_snapshot(_profile(), [], [], goals)
        assert snap.nutrition_goals.target_calories == pytest.approx(2900.0)
        assert snap.nutrition_goals.training_goal == "muscle_gain"
        # 86 - 82 = +4 kg
        assert snap.nutrition_goals.calorie_status == CalorieStatus.SURPLUS

    def test_freshness(self):
        checkins = [
            CheckinRecord(date=date(2026, 1, 12), sleep_hours=7),
            CheckinRecord(date=date(2026, 1, 14), sleep_hours=6),
        ]
        nutrition = [NutritionDayRecord(date=date(2026, 1, 13), calories_consumed=2000)]
        snap = build_snapshot(_profile(), checkins, nutrition, None)
        assert snap.data_freshness.profile_updated_at == "2026-01-10T09:00:00Z"
        assert snap.data_freshness.last_checkin_date == "2026-01-14"
        assert snap.data_freshness.last_nutrition_date == "2026-01-13"
        assert snap.daily_averages.data_points == 2
        assert snap.nutrition_averages.data_points == 1


# ── aggregate_user_data ───────────────────────────────────────────────────────

class TestAggregateUserData:
    def test_window_start_passed_to_source(self):
        source = FakeSource(profile=_profile())
        asyncio.run(aggregate_user_data(source, "user-1", average_days=14, today=TODAY))
        assert source.since == date(2026, 1, 1)

    def test_all_sources(self):
        source = FakeSource(
            profile=_profile(),
            checkins=[CheckinRecord(date=date(2026, 1, d), sleep_hours=7) for d in (12, 13, 14)],
            nutrition=[NutritionDayRecord(date=date(2026, 1, 14), calories_consumed=2500)],
            goals=NutritionGoalsRecord(target_calories=2800),
        )
        snap = asyncio.run(aggregate_user_data(source, "user-1", today=TODAY))
        assert snap.profile.age == 34
        assert snap.daily_averages.sleep_hours == pytest.approx(7.0)
        assert snap.daily_averages.data_points == 3
        assert snap.nutrition_averages.calories_consumed == pytest.approx(2500.0)
        assert snap.nutrition_goals.target_calories == pytest.approx(2800.0)

    def test_failing_source_treated_as_empty(self, caplog):
        source = FakeSource(
            profile=_profile(),
            checkins=RuntimeError("check-in store unavailable"),
            nutrition=[NutritionDayRecord(date=date(2026, 1, 14), calories_consumed=2500)],
        )
        with caplog.at_level(logging.WARNING):
            snap = asyncio.run(aggregate_user_data(source, "user-1", today=TODAY))
        assert snap.daily_averages.data_points == 0
        assert snap.nutrition_averages.data_points == 1
        assert snap.profile.age == 34
        assert "check-in store unavailable" in caplog.text

    def test_all_sources_failing_gives_default_snapshot(self):
        boom = ConnectionError("down")
        source = FakeSource(profile=boom, checkins=boom, nutrition=boom, goals=boom)
        snap = asyncio.run(aggregate_user_data(source, "user-1", today=TODAY))
        assert snap == AggregatedUserData()

    def test_sync_wrapper(self):
        snap = aggregate_user_data_sync(FakeSource(profile=_profile()), "user-1", today=TODAY)
        assert snap.profile.gender == "male"

    def test_invalid_window_raises(self):
        with pytest.raises(ValueError):
            aggregate_user_data_sync(FakeSource(), "user-1", average_days=0, today=TODAY)
