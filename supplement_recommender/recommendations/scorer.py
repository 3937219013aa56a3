"""
Candidate scoring: converts one CandidateDefinition + snapshot into a scored
SupplementRecommendation with factor breakdown, reasons and confidence.

Score formula (integer, range 0–100)
------------------------------------
    base      = earned_positive / total_positive * 100     (0 if no weight)
    deduction = met_negative_weight * negative_weight_penalty
    score     = max(0, round_half_up(base - deduction))

    earned_positive     : sum of weights of positive conditions that are
                          available AND met
    total_positive      : sum of ALL positive weights, available or not, so
                          missing data lowers the score instead of being ignored
    met_negative_weight : sum of weights of negative conditions that are
                          available AND met

Contraindication veto
---------------------
A contraindication tag matching (case-insensitive substring) the name of an
intolerance with severity ``severe`` or ``life_threatening`` forces the score
to exactly 0. One synthetic negative factor (weight 10, contribution -10) is
appended per matching tag. Mild and moderate intolerances never veto.

Confidence
----------
    ratio = available factors / all factors   (0 when there are no factors)
    high   : ratio >= 0.8
    medium : ratio >= 0.5
    low    : otherwise
"""

from __future__ import annotations

from supplement_recommender.config import ScoringConfig
from supplement_recommender.models.catalog import CandidateDefinition, Condition
from supplement_recommender.models.fields import SnapshotField, data_source_for
from supplement_recommender.models.recommendation import (
    DataQuality,
    RecommendationFactor,
    SupplementRecommendation,
)
from supplement_recommender.models.snapshot import AggregatedUserData
from supplement_recommender.recommendations.conditions import (
    ConditionEvaluation,
    evaluate_condition,
)
from supplement_recommender.taxonomy.data_taxonomy import (
    VETO_SEVERITIES,
    ConfidenceLevel,
    DataSource,
)
from supplement_recommender.utils.rounding import round_half_up

VETO_WEIGHT = 10
MAX_PRIMARY_REASONS = 3

_HIGH_CONFIDENCE_RATIO = 0.8
_MEDIUM_CONFIDENCE_RATIO = 0.5


def score_candidate(
    candidate: CandidateDefinition,
    data: AggregatedUserData,
    config: ScoringConfig,
) -> SupplementRecommendation:
    """Score one candidate against one snapshot.

    Args:
        candidate: Catalog entry to score.
        data:      Aggregated user snapshot.
        config:    Scoring parameters (uses ``negative_weight_penalty``).

    Returns:
        ``SupplementRecommendation`` with ``match_score`` in [0, 100].
    """
    positive_factors = [
        _build_factor(c, evaluate_condition(c, data), positive=True)
        for c in candidate.positive_conditions
    ]
    negative_factors = [
        _build_factor(c, evaluate_condition(c, data), positive=False)
        for c in candidate.negative_conditions
    ]

    vetoed_tags = find_contraindications(candidate, data)
    for tag in vetoed_tags:
        negative_factors.append(
            RecommendationFactor(
                condition=SnapshotField.INTOLERANCES.value,
                met=True,
                weight=VETO_WEIGHT,
                contribution=-VETO_WEIGHT,
                description=f"Contraindication: {tag} (severe / life-threatening)",
                data_source=DataSource.PROFILE,
                data_available=True,
            )
        )

    if vetoed_tags:
        match_score = 0
    else:
        match_score = compute_match_score(
            earned_positive=sum(f.contribution for f in positive_factors),
            total_positive=sum(f.weight for f in positive_factors),
            met_negative_weight=sum(-f.contribution for f in negative_factors),
            penalty_per_weight=config.negative_weight_penalty,
        )

    all_factors = positive_factors + negative_factors
    available = sum(1 for f in all_factors if f.data_available)

    reasons = sorted(
        (f for f in positive_factors if f.met and f.data_available),
        key=lambda f: f.weight,
        reverse=True,
    )

    return SupplementRecommendation(
        supplement=candidate,
        match_score=match_score,
        positive_factors=tuple(positive_factors),
        negative_factors=tuple(negative_factors),
        primary_reasons=tuple(f.description for f in reasons[:MAX_PRIMARY_REASONS]),
        cautions=tuple(
            f.description for f in negative_factors if f.met and f.data_available
        ),
        data_quality=DataQuality(
            available_data_points=available,
            total_possible_points=len(all_factors),
            confidence_level=determine_confidence(available, len(all_factors)),
        ),
        missing_data=tuple(
            f.description for f in positive_factors if not f.data_available
        ),
        is_contraindicated=bool(vetoed_tags),
    )


def compute_match_score(
    earned_positive:     int,
    total_positive:      int,
    met_negative_weight: int,
    penalty_per_weight:  int = 5,
) -> int:
    """Compute the clamped integer match score.

    Args:
        earned_positive:     Weight of available and met positive conditions.
        total_positive:      Weight of all positive conditions.
        met_negative_weight: Weight of available and met negative conditions.
        penalty_per_weight:  Percentage points removed per negative weight unit.

    Returns:
        Integer in [0, 100]; 0 when ``total_positive`` is 0.
    """
    if total_positive <= 0:
        return 0
    base = earned_positive * 100.0 / total_positive
    raw = base - met_negative_weight * penalty_per_weight
    return max(0, min(100, round_half_up(raw)))


def determine_confidence(available_count: int, total_count: int) -> ConfidenceLevel:
    """Classify the available/total factor ratio.

    Returns:
        ``ConfidenceLevel.HIGH`` at ratio >= 0.8, ``MEDIUM`` at >= 0.5,
        otherwise ``LOW`` (including when there are no factors).
    """
    ratio = available_count / total_count if total_count > 0 else 0.0
    if ratio >= _HIGH_CONFIDENCE_RATIO:
        return ConfidenceLevel.HIGH
    if ratio >= _MEDIUM_CONFIDENCE_RATIO:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def find_contraindications(
    candidate: CandidateDefinition,
    data: AggregatedUserData,
) -> list[str]:
    """Return the candidate's contraindication tags vetoed by the snapshot.

    A tag is vetoed when it is a case-insensitive substring of the name of an
    intolerance whose severity is in ``VETO_SEVERITIES``.
    """
    severe_names = [
        i.name.lower() for i in data.intolerances if i.severity in VETO_SEVERITIES
    ]
    return [
        tag for tag in candidate.contraindications
        if any(tag.lower() in name for name in severe_names)
    ]


# ── Helpers ───────────────────────────────────────────────────────────────────

def _build_factor(
    condition: Condition,
    evaluation: ConditionEvaluation,
    positive: bool,
) -> RecommendationFactor:
    contribution = 0
    if evaluation.available and evaluation.met:
        contribution = condition.weight if positive else -condition.weight
    return RecommendationFactor(
        condition=condition.field.value,
        met=evaluation.met,
        weight=condition.weight,
        contribution=contribution,
        description=condition.description,
        data_source=data_source_for(condition.field),
        data_available=evaluation.available,
    )
