"""
Catalog models: candidate definitions and their declarative conditions.

``Condition`` is a closed tagged union discriminated by ``operator``. Each
variant fixes the operand type for its operator family, so an invalid
operator/operand pair (``gt`` with a list, ``in`` with a scalar) is rejected
when the catalog is built rather than when it is scored.

Operator families
-----------------
  EqualityCondition    eq, neq                scalar operand
  ComparisonCondition  gt, gte, lt, lte       numeric operand
  MembershipCondition  in, not_in             tuple of scalars
  ContainsCondition    contains               scalar operand
  NotEmptyCondition    not_empty              no operand
  UnsupportedCondition any other operator     raw operand, never met

``UnsupportedCondition`` exists so that an externally edited catalog with an
unknown operator still loads; the evaluator treats it as a configuration
defect (available, not met, logged).

All models are frozen - a catalog is immutable for the lifetime of a run.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Tag,
    field_validator,
    model_validator,
)

from supplement_recommender.models.fields import SnapshotField
from supplement_recommender.taxonomy.supplement_taxonomy import (
    IndicationBasis,
    SubstanceClass,
    TargetArea,
)

Scalar = Union[bool, int, float, str]

EQUALITY_OPERATORS: frozenset[str] = frozenset({"eq", "neq"})
COMPARISON_OPERATORS: frozenset[str] = frozenset({"gt", "gte", "lt", "lte"})
MEMBERSHIP_OPERATORS: frozenset[str] = frozenset({"in", "not_in"})
KNOWN_OPERATORS: frozenset[str] = (
    EQUALITY_OPERATORS
    | COMPARISON_OPERATORS
    | MEMBERSHIP_OPERATORS
    | {"contains", "not_empty"}
)

MIN_WEIGHT = 1
MAX_WEIGHT = 5


class _ConditionBase(BaseModel):
    """Fields shared by every condition variant.

    Attributes:
        field:       Snapshot field the condition reads.
        weight:      Importance from 1 (minor) to 5 (decisive).
        description: Human-readable explanation shown to the user.
    """

    model_config = ConfigDict(frozen=True)

    field: SnapshotField
    weight: int
    description: str

    @field_validator("weight")
    @classmethod
    def validate_weight(cls, v: int) -> int:
        if not MIN_WEIGHT <= v <= MAX_WEIGHT:
            raise ValueError(
                f"weight must be in [{MIN_WEIGHT}, {MAX_WEIGHT}], got {v}."
            )
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("description must not be empty.")
        return v


class EqualityCondition(_ConditionBase):
    operator: Literal["eq", "neq"]
    value: Scalar


class ComparisonCondition(_ConditionBase):
    operator: Literal["gt", "gte", "lt", "lte"]
    value: float


class MembershipCondition(_ConditionBase):
    operator: Literal["in", "not_in"]
    value: tuple[Scalar, ...]


class ContainsCondition(_ConditionBase):
    operator: Literal["contains"]
    value: Scalar


class NotEmptyCondition(_ConditionBase):
    operator: Literal["not_empty"]
    value: None = None


class UnsupportedCondition(_ConditionBase):
    """Condition whose operator is outside the fixed operator set."""

    operator: str
    value: Any = None

    @field_validator("operator")
    @classmethod
    def validate_unknown(cls, v: str) -> str:
        if v in KNOWN_OPERATORS:
            raise ValueError(
                f"Operator '{v}' is supported; build the matching condition variant."
            )
        return v


def _operator_tag(value: Any) -> str:
    """Map a raw dict or model to its union tag via the ``operator`` key."""
    if isinstance(value, dict):
        operator = value.get("operator")
    else:
        operator = getattr(value, "operator", None)
    if operator in EQUALITY_OPERATORS:
        return "equality"
    if operator in COMPARISON_OPERATORS:
        return "comparison"
    if operator in MEMBERSHIP_OPERATORS:
        return "membership"
    if operator == "contains":
        return "contains"
    if operator == "not_empty":
        return "not_empty"
    return "unsupported"


Condition = Annotated[
    Union[
        Annotated[EqualityCondition, Tag("equality")],
        Annotated[ComparisonCondition, Tag("comparison")],
        Annotated[MembershipCondition, Tag("membership")],
        Annotated[ContainsCondition, Tag("contains")],
        Annotated[NotEmptyCondition, Tag("not_empty")],
        Annotated[UnsupportedCondition, Tag("unsupported")],
    ],
    Discriminator(_operator_tag),
]


class AdditionalQuery(BaseModel):
    """A follow-up question that would sharpen the recommendation."""

    model_config = ConfigDict(frozen=True)

    key: str
    weight: int
    description: str


class CandidateDefinition(BaseModel):
    """One catalog entry (a supplement) with its scoring rules.

    Attributes:
        id:                  Stable slug, e.g. ``"creatine-monohydrate"``.
        name:                Display name.
        target_areas:        One or more ``TargetArea`` tags.
        substance_class:     ``SubstanceClass`` tag.
        indication_basis:    ``IndicationBasis`` tag.
        positive_conditions: Conditions that argue for the supplement.
        negative_conditions: Conditions that argue against it.
        additional_queries:  Follow-up questions (informational only).
        notes:               Free-text hints shown with the recommendation.
        contraindications:   Intolerance tags that veto the supplement when
                             matched by a severe / life-threatening intolerance.
        is_essential:        Bypasses the score threshold (never the veto).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    target_areas: tuple[TargetArea, ...]
    substance_class: SubstanceClass = SubstanceClass.OTHER
    indication_basis: IndicationBasis = IndicationBasis.PROFILE
    positive_conditions: tuple[Condition, ...] = ()
    negative_conditions: tuple[Condition, ...] = ()
    additional_queries: tuple[AdditionalQuery, ...] = ()
    notes: tuple[str, ...] = ()
    contraindications: tuple[str, ...] = ()
    is_essential: bool = False

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("id must not be empty.")
        return v

    @model_validator(mode="after")
    def validate_target_areas(self) -> "CandidateDefinition":
        if not self.target_areas:
            raise ValueError(f"Candidate '{self.id}' needs at least one target area.")
        return self

    def unsupported_conditions(self) -> list[UnsupportedCondition]:
        """Return conditions whose operator is outside the fixed set."""
        return [
            c for c in (*self.positive_conditions, *self.negative_conditions)
            if isinstance(c, UnsupportedCondition)
        ]
