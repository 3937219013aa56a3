"""
Recommendation output models.

``RecommendationFactor`` explains one evaluated condition.
``SupplementRecommendation`` is the per-candidate score with its factor
breakdown, reasons, cautions and confidence.
``DataCompleteness`` grades the snapshot itself, independent of any candidate.
``RecommendationResult`` bundles the ranked list with completeness, warnings,
suggestions and the snapshot fingerprint.

All models are frozen - a result is produced once per run and handed to the
presentation / storage collaborator unchanged.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from supplement_recommender.models.catalog import CandidateDefinition
from supplement_recommender.taxonomy.data_taxonomy import ConfidenceLevel, DataSource

COMPLETENESS_CATEGORIES: tuple[str, ...] = (
    "basic_profile",
    "fitness_profile",
    "lifestyle",
    "supplement_profile",
    "daily_tracking",
    "nutrition_tracking",
)


class RecommendationFactor(BaseModel):
    """Outcome of evaluating one condition for one candidate.

    Attributes:
        condition:      Dotted snapshot path the condition read.
        met:            Whether the condition held.
        weight:         Condition weight (10 for a contraindication veto).
        contribution:   Signed score contribution: ``+weight`` for a met
                        positive, ``-weight`` for a met negative, else 0.
        description:    Human-readable explanation.
        data_source:    Upstream source of the field.
        data_available: ``False`` when the field was not provided.
    """

    model_config = ConfigDict(frozen=True)

    condition: str
    met: bool
    weight: int
    contribution: int
    description: str
    data_source: DataSource
    data_available: bool


class DataQuality(BaseModel):
    """How much of a candidate's scoring evidence was available."""

    model_config = ConfigDict(frozen=True)

    available_data_points: int
    total_possible_points: int
    confidence_level: ConfidenceLevel

    @model_validator(mode="after")
    def validate_counts(self) -> "DataQuality":
        if not 0 <= self.available_data_points <= self.total_possible_points:
            raise ValueError(
                f"available_data_points ({self.available_data_points}) must be in "
                f"[0, total_possible_points={self.total_possible_points}]."
            )
        return self


class SupplementRecommendation(BaseModel):
    """Scored match of one candidate against one snapshot."""

    model_config = ConfigDict(frozen=True)

    supplement: CandidateDefinition
    match_score: int
    positive_factors: tuple[RecommendationFactor, ...] = ()
    negative_factors: tuple[RecommendationFactor, ...] = ()
    primary_reasons: tuple[str, ...] = ()
    cautions: tuple[str, ...] = ()
    data_quality: DataQuality
    missing_data: tuple[str, ...] = ()
    is_contraindicated: bool = False

    @field_validator("match_score")
    @classmethod
    def validate_match_score(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError(f"match_score must be in [0, 100], got {v}.")
        return v

    @field_validator("primary_reasons")
    @classmethod
    def validate_primary_reasons(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if len(v) > 3:
            raise ValueError(f"At most 3 primary reasons allowed, got {len(v)}.")
        return v

    @model_validator(mode="after")
    def validate_veto(self) -> "SupplementRecommendation":
        if self.is_contraindicated and self.match_score != 0:
            raise ValueError("A contraindicated supplement must score 0.")
        return self


class CategoryCompleteness(BaseModel):
    """Filled / total checklist fields for one completeness category."""

    model_config = ConfigDict(frozen=True)

    filled: int
    total: int
    percentage: int

    @model_validator(mode="after")
    def validate_range(self) -> "CategoryCompleteness":
        if self.total <= 0:
            raise ValueError(f"total must be positive, got {self.total}.")
        if not 0 <= self.filled <= self.total:
            raise ValueError(f"filled ({self.filled}) must be in [0, {self.total}].")
        if not 0 <= self.percentage <= 100:
            raise ValueError(f"percentage must be in [0, 100], got {self.percentage}.")
        return self


class DataCompleteness(BaseModel):
    """Weighted completeness of a snapshot across six categories.

    Attributes:
        overall_percentage: Weighted blend of the category percentages.
        categories:         Category name → ``CategoryCompleteness``; keys are
                            exactly ``COMPLETENESS_CATEGORIES``.
        missing_critical:   Must-have fields that are not provided.
        missing_optional:   Nice-to-have inputs that are missing or too thin.
    """

    model_config = ConfigDict(frozen=True)

    overall_percentage: int
    categories: dict[str, CategoryCompleteness]
    missing_critical: tuple[str, ...] = ()
    missing_optional: tuple[str, ...] = ()

    @model_validator(mode="after")
    def validate_categories(self) -> "DataCompleteness":
        if set(self.categories) != set(COMPLETENESS_CATEGORIES):
            raise ValueError(
                f"categories must be exactly {list(COMPLETENESS_CATEGORIES)}, "
                f"got {sorted(self.categories)}."
            )
        if not 0 <= self.overall_percentage <= 100:
            raise ValueError(
                f"overall_percentage must be in [0, 100], got {self.overall_percentage}."
            )
        return self


class RecommendationResult(BaseModel):
    """Final ranked output of one scoring run.

    Attributes:
        user_id:           User the snapshot belongs to.
        generated_at:      UTC datetime of the run.
        recommendations:   Filtered, sorted and truncated recommendations.
        data_completeness: Completeness grade of the snapshot.
        warnings:          Data-quality warnings.
        suggestions:       Ways to improve future recommendations.
        data_hash:         Snapshot fingerprint for cache invalidation.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    generated_at: datetime
    recommendations: tuple[SupplementRecommendation, ...] = ()
    data_completeness: DataCompleteness
    warnings: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()
    data_hash: str
