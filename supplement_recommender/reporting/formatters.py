"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept result models and return plain multi-line strings
suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Score labels
------------
    >= 90  very high
    >= 75  high
    >= 60  medium
    else   low
"""

from __future__ import annotations

from supplement_recommender.models.recommendation import (
    COMPLETENESS_CATEGORIES,
    DataCompleteness,
    RecommendationResult,
    SupplementRecommendation,
)
from supplement_recommender.recommendations.completeness import CATEGORY_WEIGHTS
from supplement_recommender.taxonomy.data_taxonomy import ConfidenceLevel

_CONFIDENCE_LABELS: dict[ConfidenceLevel, str] = {
    ConfidenceLevel.HIGH:   "high",
    ConfidenceLevel.MEDIUM: "medium",
    ConfidenceLevel.LOW:    "low",
}


# ── Labels ────────────────────────────────────────────────────────────────────


def format_match_score(score: int) -> str:
    """Return the display label for a match score."""
    if score >= 90:
        return "very high"
    if score >= 75:
        return "high"
    if score >= 60:
        return "medium"
    return "low"


def format_confidence(level: ConfidenceLevel) -> str:
    return _CONFIDENCE_LABELS.get(level, str(level))


# ── Single recommendation ─────────────────────────────────────────────────────


def format_recommendation_explanation(rec: SupplementRecommendation) -> str:
    """Explain one recommendation: score, reasons, cautions, gaps, notes.

    Example::

        Match: 83% (high)

        Why this supplement:
          + Strength or muscle-building goal
        Cautions:
          ! Less than 7 hours of sleep
        Missing data for a more precise rating:
          ? Vitamin D level below 30 ng/mL

        Data quality: medium
    """
    parts: list[str] = [
        f"Match: {rec.match_score}% ({format_match_score(rec.match_score)})"
    ]

    if rec.primary_reasons:
        parts.append("\nWhy this supplement:")
        parts.extend(f"  + {reason}" for reason in rec.primary_reasons)

    if rec.cautions:
        parts.append("\nCautions:")
        parts.extend(f"  ! {caution}" for caution in rec.cautions)

    if rec.missing_data:
        parts.append("\nMissing data for a more precise rating:")
        parts.extend(f"  ? {missing}" for missing in rec.missing_data)

    parts.append(f"\nData quality: {format_confidence(rec.data_quality.confidence_level)}")

    if rec.supplement.notes:
        parts.append("\nGood to know:")
        parts.extend(f"  i {note}" for note in rec.supplement.notes)

    return "\n".join(parts)


# ── Ranked result ─────────────────────────────────────────────────────────────


def format_result_table(result: RecommendationResult) -> str:
    """Format a ranked result as an ASCII table with warnings/suggestions.

    Example::

        Rank  Supplement                 Score  Label      Confidence  Essential
        ------------------------------------------------------------------------
           1  Vitamin D                     40  low        medium            yes
           2  Creatine Monohydrate         100  very high  high
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Supplement Recommendations ===")
    lines.append(f"  User:         {result.user_id}")
    lines.append(f"  Generated at: {result.generated_at.isoformat()}")
    lines.append(f"  Data:         {result.data_completeness.overall_percentage}% complete")
    lines.append(f"  Fingerprint:  {result.data_hash}")
    lines.append("")

    if not result.recommendations:
        lines.append("  (no supplement reached the score threshold)")
    else:
        header = (
            f"  {'Rank':>4}  {'Supplement':<26}  {'Score':>5}  {'Label':<9}  "
            f"{'Confidence':<10}  {'Essential':>9}"
        )
        lines.append(header)
        lines.append("  " + "-" * (len(header) - 2))
        for rank, rec in enumerate(result.recommendations, start=1):
            lines.append(
                f"  {rank:>4}  {rec.supplement.name[:26]:<26}  {rec.match_score:>5}  "
                f"{format_match_score(rec.match_score):<9}  "
                f"{format_confidence(rec.data_quality.confidence_level):<10}  "
                f"{'yes' if rec.supplement.is_essential else '':>9}"
            )

    if result.warnings:
        lines.append("")
        lines.append("  Warnings:")
        lines.extend(f"    - {w}" for w in result.warnings)

    if result.suggestions:
        lines.append("")
        lines.append("  Suggestions:")
        lines.extend(f"    - {s}" for s in result.suggestions)

    return "\n".join(lines)


# ── Completeness ──────────────────────────────────────────────────────────────


def format_completeness(completeness: DataCompleteness) -> str:
    """Format the completeness breakdown per category.

    Example::

        Category             Weight  Filled  Percent
        ----------------------------------------------
        basic_profile            20     4/4     100%
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Data Completeness ===")
    lines.append(f"  Overall: {completeness.overall_percentage}%")
    lines.append("")

    header = f"  {'Category':<20}  {'Weight':>6}  {'Filled':>6}  {'Percent':>7}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for name in COMPLETENESS_CATEGORIES:
        cat = completeness.categories[name]
        filled = f"{cat.filled}/{cat.total}"
        lines.append(
            f"  {name:<20}  {CATEGORY_WEIGHTS[name]:>6}  {filled:>6}  {cat.percentage:>6}%"
        )

    if completeness.missing_critical:
        lines.append("")
        lines.append("  Missing (critical):")
        lines.extend(f"    - {m}" for m in completeness.missing_critical)

    if completeness.missing_optional:
        lines.append("")
        lines.append("  Missing (optional):")
        lines.extend(f"    - {m}" for m in completeness.missing_optional)

    return "\n".join(lines)
