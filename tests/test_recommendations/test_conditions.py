"""
Tests for supplement_recommender/recommendations/conditions.py.

What we test
------------
evaluate_condition():
  - A field that is not provided → available=False, met=False.
  - eq / neq, including bool-vs-number strictness.
  - gt / gte / lt / lte at the boundary.
  - Comparisons against non-numeric values are not met (and logged).
  - in / not_in membership.
  - contains: case-insensitive substring on intolerance names, exact
    membership on plain lists, not met on scalars.
  - not_empty on lists and scalars.
  - Unsupported operators are available, not met, and logged; never raise.
"""

from __future__ import annotations

import logging

import pytest
from pydantic import TypeAdapter

from conftest import make_condition, make_snapshot
from supplement_recommender.models.catalog import Condition
from supplement_recommender.models.snapshot import (
    Intolerance,
    ProfileData,
    SupplementProfileData,
)
from supplement_recommender.recommendations.conditions import evaluate_condition
from supplement_recommender.taxonomy.data_taxonomy import IntoleranceSeverity

_ADAPTER = TypeAdapter(Condition)


def _eval(data, field: str, operator: str, value=None):
    cond = _ADAPTER.validate_python(make_condition(field, operator, value))
    return evaluate_condition(cond, data)


@pytest.fixture
def profile_snapshot():
    return make_snapshot(
        profile=ProfileData(age=30, gender="female", primary_goal="strength"),
        supplement_profile=SupplementProfileData(
            heavy_sweating=True,
            gi_issues=(),
            joint_issues=("knee", "back"),
        ),
        intolerances=(
            Intolerance(name="Lactose intolerance", severity=IntoleranceSeverity.MILD),
        ),
    )


# ── Availability ──────────────────────────────────────────────────────────────

class TestAvailability:
    def test_missing_field_is_unavailable(self, empty_snapshot):
        ev = _eval(empty_snapshot, "profile.age", "gte", 18)
        assert ev.available is False
        assert ev.met is False

    def test_missing_lab_panel_is_unavailable(self, empty_snapshot):
        ev = _eval(empty_snapshot, "supplement_profile.lab_values.vitamin_d", "lt", 30)
        assert ev.available is False

    def test_resolved_value_is_returned(self, profile_snapshot):
        ev = _eval(profile_snapshot, "profile.age", "gte", 18)
        assert ev.value == 30


# ── Equality ──────────────────────────────────────────────────────────────────

class TestEquality:
    def test_eq_met(self, profile_snapshot):
        assert _eval(profile_snapshot, "profile.gender", "eq", "female").met

    def test_eq_not_met_but_available(self, profile_snapshot):
        ev = _eval(profile_snapshot, "profile.gender", "eq", "male")
        assert ev.available is True
        assert ev.met is False

    def test_neq(self, profile_snapshot):
        assert _eval(profile_snapshot, "profile.gender", "neq", "male").met
        assert not _eval(profile_snapshot, "profile.gender", "neq", "female").met

    def test_bool_eq_true(self, profile_snapshot):
        assert _eval(profile_snapshot, "supplement_profile.heavy_sweating", "eq", True).met

    def test_bool_never_equals_number(self, profile_snapshot):
        assert not _eval(profile_snapshot, "supplement_profile.heavy_sweating", "eq", 1).met

    def test_int_equals_float_operand(self, profile_snapshot):
        assert _eval(profile_snapshot, "profile.age", "eq", 30.0).met


# ── Comparison ────────────────────────────────────────────────────────────────

class TestComparison:
    @pytest.mark.parametrize(
        "operator, operand, expected",
        [
            ("gt",  30, False),
            ("gt",  29, True),
            ("gte", 30, True),
            ("gte", 31, False),
            ("lt",  30, False),
            ("lt",  31, True),
            ("lte", 30, True),
            ("lte", 29, False),
        ],
    )
    def test_boundaries(self, profile_snapshot, operator, operand, expected):
        assert _eval(profile_snapshot, "profile.age", operator, operand).met is expected

    def test_non_numeric_value_not_met(self, profile_snapshot, caplog):
        with caplog.at_level(logging.WARNING):
            ev = _eval(profile_snapshot, "profile.gender", "gt", 3)
        assert ev.available is True
        assert ev.met is False
        assert "Type mismatch" in caplog.text

    def test_bool_value_not_compared(self, profile_snapshot):
        assert not _eval(profile_snapshot, "supplement_profile.heavy_sweating", "gte", 0).met


# ── Membership ────────────────────────────────────────────────────────────────

class TestMembership:
    def test_in_met(self, profile_snapshot):
        assert _eval(
            profile_snapshot, "profile.primary_goal", "in", ["strength", "hypertrophy"]
        ).met

    def test_in_not_met(self, profile_snapshot):
        assert not _eval(profile_snapshot, "profile.primary_goal", "in", ["endurance"]).met

    def test_not_in(self, profile_snapshot):
        assert _eval(profile_snapshot, "profile.primary_goal", "not_in", ["endurance"]).met
        assert not _eval(profile_snapshot, "profile.primary_goal", "not_in", ["strength"]).met

    def test_not_in_on_missing_field_is_unavailable(self, empty_snapshot):
        ev = _eval(empty_snapshot, "profile.primary_goal", "not_in", ["endurance"])
        assert ev.available is False
        assert ev.met is False


# ── Contains ──────────────────────────────────────────────────────────────────

class TestContains:
    def test_intolerance_substring_case_insensitive(self, profile_snapshot):
        assert _eval(profile_snapshot, "intolerances", "contains", "LACTOSE").met

    def test_intolerance_no_match(self, profile_snapshot):
        ev = _eval(profile_snapshot, "intolerances", "contains", "gluten")
        assert ev.available is True
        assert ev.met is False

    def test_empty_intolerances_available_not_met(self, empty_snapshot):
        ev = _eval(empty_snapshot, "intolerances", "contains", "lactose")
        assert ev.available is True
        assert ev.met is False

    def test_plain_list_exact_membership(self, profile_snapshot):
        assert _eval(profile_snapshot, "supplement_profile.joint_issues", "contains", "knee").met
        assert not _eval(
            profile_snapshot, "supplement_profile.joint_issues", "contains", "kn"
        ).met

    def test_scalar_field_not_met(self, profile_snapshot, caplog):
        with caplog.at_level(logging.WARNING):
            ev = _eval(profile_snapshot, "profile.gender", "contains", "fem")
        assert ev.met is False
        assert "non-sequence" in caplog.text


# ── Not empty ─────────────────────────────────────────────────────────────────

class TestNotEmpty:
    def test_empty_list_is_available_but_not_met(self, profile_snapshot):
        ev = _eval(profile_snapshot, "supplement_profile.gi_issues", "not_empty")
        assert ev.available is True
        assert ev.met is False

    def test_non_empty_list_met(self, profile_snapshot):
        assert _eval(profile_snapshot, "supplement_profile.joint_issues", "not_empty").met

    def test_scalar_met(self, profile_snapshot):
        assert _eval(profile_snapshot, "profile.gender", "not_empty").met


# ── Unsupported operators ─────────────────────────────────────────────────────

class TestUnsupported:
    def test_unsupported_operator_available_not_met(self, profile_snapshot, caplog):
        with caplog.at_level(logging.WARNING):
            ev = _eval(profile_snapshot, "profile.age", "between", [18, 40])
        assert ev.available is True
        assert ev.met is False
        assert "Unsupported operator 'between'" in caplog.text

    def test_unsupported_operator_on_missing_field(self, empty_snapshot):
        ev = _eval(empty_snapshot, "profile.age", "between", [18, 40])
        assert ev.available is False
        assert ev.met is False
