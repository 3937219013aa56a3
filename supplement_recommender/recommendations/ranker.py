"""
Result assembly: scores the whole catalog against one snapshot, applies the
inclusion rules, sorts, truncates and attaches warnings and suggestions.

Usage flow
----------
1. assemble_result(user_id, data, catalog, config)
   -> RecommendationResult  (ranked, filtered, with completeness + fingerprint)

2. get_top_recommendations(result, count=5)
   get_recommendation_by_supplement(result, supplement_id)
   get_recommendations_by_target_area(result, target_area)
   -> read-only views over an assembled result

Inclusion rules
---------------
  - Vetoed (contraindicated) candidates are always dropped.
  - Essential candidates are kept regardless of score.
  - Non-essential candidates are kept when ``score >= min_score_threshold``
    (boundary inclusive).

Sort: essential first, then descending score; ties keep catalog order.
Truncate to ``max_recommendations``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from supplement_recommender.config import ScoringConfig
from supplement_recommender.errors import EmptyCatalogError, MissingSnapshotError
from supplement_recommender.models.catalog import CandidateDefinition
from supplement_recommender.models.recommendation import (
    DataCompleteness,
    RecommendationResult,
    SupplementRecommendation,
)
from supplement_recommender.models.snapshot import AggregatedUserData
from supplement_recommender.recommendations.completeness import analyze_completeness
from supplement_recommender.recommendations.fingerprint import (
    compute_snapshot_fingerprint,
)
from supplement_recommender.recommendations.scorer import score_candidate
from supplement_recommender.taxonomy.supplement_taxonomy import TargetArea
from supplement_recommender.utils.time_utils import utcnow

# Fixed rule thresholds for warnings / suggestions
_LOW_OVERALL_PCT = 50
_LOW_TRACKING_PCT = 50


def assemble_result(
    user_id: str,
    data: Optional[AggregatedUserData],
    catalog: Sequence[CandidateDefinition],
    config: ScoringConfig,
    now: Optional[datetime] = None,
) -> RecommendationResult:
    """Score ``catalog`` against ``data`` and build the final result.

    Args:
        user_id: User the snapshot belongs to.
        data:    Aggregated user snapshot.
        catalog: Candidate definitions to score.
        config:  Scoring parameters.
        now:     Timestamp for ``generated_at``; defaults to ``utcnow()``.

    Returns:
        ``RecommendationResult``.

    Raises:
        MissingSnapshotError: If ``data`` is ``None``.
        EmptyCatalogError:    If ``catalog`` is empty.
    """
    if data is None:
        raise MissingSnapshotError(user_id)
    if not catalog:
        raise EmptyCatalogError()

    scored = [score_candidate(c, data, config) for c in catalog]
    kept = [r for r in scored if _is_included(r, config.min_score_threshold)]
    # list.sort is stable: equal keys keep catalog order
    kept.sort(key=lambda r: (not r.supplement.is_essential, -r.match_score))

    completeness = analyze_completeness(data, min_data_points=config.min_data_points)

    return RecommendationResult(
        user_id=user_id,
        generated_at=now or utcnow(),
        recommendations=tuple(kept[: config.max_recommendations]),
        data_completeness=completeness,
        warnings=tuple(build_warnings(data, completeness, config.min_data_points)),
        suggestions=tuple(build_suggestions(data, completeness)),
        data_hash=compute_snapshot_fingerprint(data),
    )


def build_warnings(
    data: AggregatedUserData,
    completeness: DataCompleteness,
    min_data_points: int = 3,
) -> list[str]:
    """Data-quality warnings for a snapshot.

    Rules (all evaluated, in order):
        1. overall completeness < 50 %
        2. any missing-critical field
        3. daily check-in data points below ``min_data_points``
        4. nutrition data points below ``min_data_points``
    """
    warnings: list[str] = []

    if completeness.overall_percentage < _LOW_OVERALL_PCT:
        warnings.append(
            "Limited data: these recommendations are based on less than 50% of "
            "the possible inputs. Complete your profile for more precise results."
        )

    if completeness.missing_critical:
        warnings.append(
            f"Important data missing: {', '.join(completeness.missing_critical)}. "
            "These inputs are essential for precise recommendations."
        )

    if data.daily_averages.data_points < min_data_points:
        warnings.append(
            "Too few daily check-ins for reliable sleep and stress data. "
            "Log your daily check-in regularly."
        )

    if data.nutrition_averages.data_points < min_data_points:
        warnings.append(
            "Too little nutrition data for a reliable nutrient analysis. "
            "Track your meals more regularly."
        )

    return warnings


def build_suggestions(
    data: AggregatedUserData,
    completeness: DataCompleteness,
) -> list[str]:
    """Ways the user could improve future recommendations.

    Rules (all evaluated, in order):
        1. supplement onboarding not completed
        2. daily_tracking category < 50 %
        3. nutrition_tracking category < 50 %
        4. no lab values entered
    """
    suggestions: list[str] = []

    if not data.supplement_profile.supplement_onboarding_completed:
        suggestions.append(
            "Complete the supplement profile (GI issues, joint issues, sun "
            "exposure) for better recommendations."
        )

    if completeness.categories["daily_tracking"].percentage < _LOW_TRACKING_PCT:
        suggestions.append(
            "Log daily check-ins regularly so sleep and stress data can be used."
        )

    if completeness.categories["nutrition_tracking"].percentage < _LOW_TRACKING_PCT:
        suggestions.append(
            "Track your nutrition to improve vitamin and mineral recommendations."
        )

    lab = data.supplement_profile.lab_values
    if lab is None or not lab.has_any_value():
        suggestions.append(
            "Add lab values (vitamin D, iron, etc.) for evidence-based "
            "micronutrient recommendations."
        )

    return suggestions


# ── Result queries ────────────────────────────────────────────────────────────

def get_recommendation_by_supplement(
    result: RecommendationResult,
    supplement_id: str,
) -> Optional[SupplementRecommendation]:
    """Return the recommendation for ``supplement_id``, or ``None``."""
    for rec in result.recommendations:
        if rec.supplement.id == supplement_id:
            return rec
    return None


def get_recommendations_by_target_area(
    result: RecommendationResult,
    target_area: TargetArea | str,
) -> list[SupplementRecommendation]:
    """Return recommendations tagged with ``target_area``, in ranked order."""
    return [r for r in result.recommendations if target_area in r.supplement.target_areas]


def get_top_recommendations(
    result: RecommendationResult,
    count: int = 5,
) -> list[SupplementRecommendation]:
    """Return the first ``count`` recommendations."""
    return list(result.recommendations[:count])


# ── Helper ────────────────────────────────────────────────────────────────────

def _is_included(rec: SupplementRecommendation, threshold: int) -> bool:
    if rec.is_contraindicated:
        return False
    if rec.supplement.is_essential:
        return True
    return rec.match_score >= threshold
