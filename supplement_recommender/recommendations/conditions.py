"""
Condition evaluation: resolves one catalog condition against a snapshot.

Outcome matrix
--------------
    field not provided (None)      → available=False, met=False
    field provided, operator holds → available=True,  met=True
    field provided, operator fails → available=True,  met=False
    unsupported operator           → available=True,  met=False  (logged)

Operator semantics
------------------
    eq / neq          exact equality / inequality
    gt / gte / lt /   numeric comparison; a non-numeric snapshot value is
    lte               not met and logged as a type mismatch
    in / not_in       membership of the snapshot value in the operand tuple
    contains          intolerance records: case-insensitive substring match
                      on ``name``; other sequences: exact membership
    not_empty         sequence with >= 1 element, or a scalar that is not ""

``evaluate_condition`` never raises. Malformed conditions degrade to
"not met" so one bad catalog entry cannot abort scoring of the catalog.
"""

from __future__ import annotations

import logging
import operator as op
from dataclasses import dataclass
from typing import Any, Callable

from supplement_recommender.models.catalog import (
    ComparisonCondition,
    Condition,
    ContainsCondition,
    EqualityCondition,
    MembershipCondition,
    NotEmptyCondition,
    UnsupportedCondition,
)
from supplement_recommender.models.fields import SnapshotField, resolve_field
from supplement_recommender.models.snapshot import AggregatedUserData, Intolerance

logger = logging.getLogger(__name__)

_COMPARATORS: dict[str, Callable[[float, float], bool]] = {
    "gt":  op.gt,
    "gte": op.ge,
    "lt":  op.lt,
    "lte": op.le,
}


@dataclass(frozen=True)
class ConditionEvaluation:
    """Result of evaluating one condition.

    Attributes:
        met:       Whether the condition held.
        available: Whether the referenced field was provided.
        value:     The resolved snapshot value (``None`` when unavailable).
    """

    met:       bool
    available: bool
    value:     Any = None


def evaluate_condition(
    condition: Condition,
    data: AggregatedUserData,
) -> ConditionEvaluation:
    """Evaluate ``condition`` against ``data``.

    Args:
        condition: Any ``Condition`` variant.
        data:      Aggregated user snapshot.

    Returns:
        ``ConditionEvaluation`` - see the module outcome matrix.
    """
    value = resolve_field(condition.field, data)
    if value is None:
        return ConditionEvaluation(met=False, available=False)

    if isinstance(condition, EqualityCondition):
        equal = _scalar_equals(value, condition.value)
        met = equal if condition.operator == "eq" else not equal

    elif isinstance(condition, ComparisonCondition):
        met = _compare(condition, value)

    elif isinstance(condition, MembershipCondition):
        member = any(_scalar_equals(value, v) for v in condition.value)
        met = member if condition.operator == "in" else not member

    elif isinstance(condition, ContainsCondition):
        met = _contains(condition, value)

    elif isinstance(condition, NotEmptyCondition):
        met = _not_empty(value)

    elif isinstance(condition, UnsupportedCondition):
        logger.warning(
            "Unsupported operator '%s' on field '%s' (%s) - treated as not met",
            condition.operator, condition.field.value, condition.description,
        )
        met = False

    else:  # pragma: no cover - the union is closed
        logger.warning("Unknown condition type %s - treated as not met", type(condition))
        met = False

    return ConditionEvaluation(met=met, available=True, value=value)


# ── Operator helpers ──────────────────────────────────────────────────────────


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _scalar_equals(left: Any, right: Any) -> bool:
    """Exact equality; a bool never equals a number."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def _compare(condition: ComparisonCondition, value: Any) -> bool:
    if not _is_number(value):
        logger.warning(
            "Type mismatch: '%s' %s %s got non-numeric value %r - treated as not met",
            condition.field.value, condition.operator, condition.value, value,
        )
        return False
    return _COMPARATORS[condition.operator](value, condition.value)


def _contains(condition: ContainsCondition, value: Any) -> bool:
    if condition.field is SnapshotField.INTOLERANCES:
        needle = str(condition.value).lower()
        return any(
            needle in record.name.lower()
            for record in value
            if isinstance(record, Intolerance)
        )
    if isinstance(value, (tuple, list)):
        return any(_scalar_equals(item, condition.value) for item in value)
    logger.warning(
        "'contains' on non-sequence field '%s' (value %r) - treated as not met",
        condition.field.value, value,
    )
    return False


def _not_empty(value: Any) -> bool:
    if isinstance(value, (tuple, list)):
        return len(value) > 0
    return value != ""
