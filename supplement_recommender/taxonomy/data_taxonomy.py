"""
User-data taxonomy: enumerations shared by the snapshot, scoring and
completeness models.

  - ``IntoleranceSeverity`` - how strongly a user reacts to a substance.
  - ``DataSource``          - which upstream source a snapshot field came from.
  - ``ConfidenceLevel``     - how much of the scoring evidence was available.
  - ``CalorieStatus``       - energy balance derived from goals and weight.

``VETO_SEVERITIES`` is the canonical set of severities that turn a matching
contraindication into a hard veto.

This module has NO imports from any other ``supplement_recommender`` package.
"""

from enum import StrEnum


class IntoleranceSeverity(StrEnum):
    """Reported severity of a food or substance intolerance."""

    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    LIFE_THREATENING = "life_threatening"


VETO_SEVERITIES: frozenset[IntoleranceSeverity] = frozenset({
    IntoleranceSeverity.SEVERE,
    IntoleranceSeverity.LIFE_THREATENING,
})


class DataSource(StrEnum):
    """Origin of a snapshot field, used to tag recommendation factors."""

    PROFILE = "profile"
    """User profile collected during onboarding."""

    DAILY_CHECKIN = "daily_checkin"
    """Rolling averages of daily recovery check-ins."""

    NUTRITION = "nutrition"
    """Rolling nutrition averages and nutrition goals."""

    SUPPLEMENT_PROFILE = "supplement_profile"
    """Supplement-specific onboarding answers and lab values."""

    CALCULATED = "calculated"
    """Derived value without a single upstream source."""


class ConfidenceLevel(StrEnum):
    """Share of scoring evidence that was actually available."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CalorieStatus(StrEnum):
    """Energy balance of the user's current nutrition plan."""

    DEFICIT = "deficit"
    MAINTENANCE = "maintenance"
    SURPLUS = "surplus"
