"""Tests for supplement_recommender.utils.rounding and time_utils."""

from __future__ import annotations

from datetime import date

import pytest

from supplement_recommender.utils.rounding import round_half_up, round_to
from supplement_recommender.utils.time_utils import (
    utcnow,
    window_start_date,
)


@pytest.mark.parametrize(
    "value, expected",
    [(12.5, 13), (12.4999, 12), (0.5, 1), (2.5, 3), (-0.5, 0), (99.5, 100), (7.0, 7)],
)
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected


def test_round_to_one_decimal() -> None:
    assert round_to(7.25, 1) == pytest.approx(7.3)
    assert round_to(7.24, 1) == pytest.approx(7.2)


def test_round_to_whole_number() -> None:
    assert round_to(2000.5, 0) == pytest.approx(2001.0)


def test_utcnow_is_aware() -> None:
    assert utcnow().tzinfo is not None


def test_window_start_date() -> None:
    assert window_start_date(14, date(2026, 1, 15)) == date(2026, 1, 1)


def test_window_start_date_rejects_zero() -> None:
    with pytest.raises(ValueError):
        window_start_date(0, date(2026, 1, 15))
