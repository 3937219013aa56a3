"""
Tests for supplement_recommender/models/fields.py.

What we test
------------
FIELD_ACCESSORS:
  - Has exactly one getter for every SnapshotField member.
  - Every getter runs on both an empty and a fully populated snapshot.

resolve_field():
  - Returns profile / average / goal values.
  - Lab values resolve to None when no lab panel exists.

data_source_for():
  - Maps each snapshot section to its DataSource tag.
"""

from __future__ import annotations

import pytest

from supplement_recommender.models.fields import (
    FIELD_ACCESSORS,
    SnapshotField,
    data_source_for,
    resolve_field,
)
from supplement_recommender.models.snapshot import AggregatedUserData
from supplement_recommender.taxonomy.data_taxonomy import CalorieStatus, DataSource


class TestAccessorIntegrity:
    def test_every_member_has_an_accessor(self):
        assert set(FIELD_ACCESSORS) == set(SnapshotField)

    def test_accessors_run_on_empty_snapshot(self):
        data = AggregatedUserData()
        for field, getter in FIELD_ACCESSORS.items():
            getter(data)  # must not raise

    def test_accessors_run_on_full_snapshot(self, full_snapshot):
        for field, getter in FIELD_ACCESSORS.items():
            getter(full_snapshot)

    def test_member_values_are_unique_paths(self):
        values = [m.value for m in SnapshotField]
        assert len(values) == len(set(values))


class TestResolveField:
    def test_profile_value(self, full_snapshot):
        assert resolve_field(SnapshotField.AGE, full_snapshot) == 30

    def test_missing_profile_value_is_none(self):
        assert resolve_field(SnapshotField.AGE, AggregatedUserData()) is None

    def test_daily_average(self, full_snapshot):
        assert resolve_field(SnapshotField.DAILY_SLEEP_HOURS, full_snapshot) == pytest.approx(6.5)

    def test_calorie_status(self, full_snapshot):
        assert resolve_field(SnapshotField.CALORIE_STATUS, full_snapshot) == CalorieStatus.SURPLUS

    def test_lab_value_present(self, full_snapshot):
        assert resolve_field(SnapshotField.LAB_VITAMIN_D, full_snapshot) == pytest.approx(22.0)

    def test_lab_value_absent_in_panel(self, full_snapshot):
        assert resolve_field(SnapshotField.LAB_CRP, full_snapshot) is None

    def test_lab_value_without_panel(self):
        assert resolve_field(SnapshotField.LAB_VITAMIN_D, AggregatedUserData()) is None

    def test_intolerances_returns_records(self, full_snapshot):
        value = resolve_field(SnapshotField.INTOLERANCES, full_snapshot)
        assert [i.name for i in value] == ["lactose"]

    def test_snapshotfield_accepts_dotted_path(self):
        assert SnapshotField("profile.primary_goal") is SnapshotField.PRIMARY_GOAL


class TestDataSourceFor:
    @pytest.mark.parametrize(
        "field, expected",
        [
            (SnapshotField.AGE,                DataSource.PROFILE),
            (SnapshotField.INTOLERANCES,       DataSource.PROFILE),
            (SnapshotField.HEAVY_SWEATING,     DataSource.SUPPLEMENT_PROFILE),
            (SnapshotField.LAB_VITAMIN_D,      DataSource.SUPPLEMENT_PROFILE),
            (SnapshotField.DAILY_SLEEP_HOURS,  DataSource.DAILY_CHECKIN),
            (SnapshotField.NUTRITION_CAFFEINE_MG, DataSource.NUTRITION),
            (SnapshotField.CALORIE_STATUS,     DataSource.NUTRITION),
        ],
    )
    def test_section_mapping(self, field, expected):
        assert data_source_for(field) == expected
