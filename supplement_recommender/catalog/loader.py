"""
Catalog loader: JSON → validated ``CandidateDefinition`` tuple.

File format
-----------
A JSON array of candidate objects::

    [
      {
        "id": "creatine-monohydrate",
        "name": "Creatine Monohydrate",
        "target_areas": ["performance_strength", "muscle_protein"],
        "substance_class": "creatine",
        "positive_conditions": [
          {"field": "profile.primary_goal", "operator": "in",
           "value": ["strength", "hypertrophy"], "weight": 5,
           "description": "Strength or muscle-building goal"}
        ],
        "negative_conditions": [],
        "contraindications": [],
        "is_essential": false
      }
    ]

Validation rules
----------------
- The top level must be a JSON array.
- Every entry must validate as a ``CandidateDefinition``; condition fields must
  name a known snapshot field and weights must be in 1–5.
- Duplicate ids are rejected.
- Operators outside the fixed set load as ``UnsupportedCondition`` and are
  logged; they never match at scoring time.

All problems are collected and raised together as ``CatalogValidationError``.

Usage
-----
    from supplement_recommender.catalog.loader import load_catalog

    catalog = load_catalog(Path("config/catalog/supplements.json"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from supplement_recommender.errors import CatalogValidationError
from supplement_recommender.models.catalog import CandidateDefinition
from supplement_recommender.taxonomy.supplement_taxonomy import (
    SubstanceClass,
    TargetArea,
)

log = logging.getLogger(__name__)


def parse_catalog(
    records: Any,
    source: str = "<memory>",
) -> tuple[CandidateDefinition, ...]:
    """Validate raw catalog records.

    Args:
        records: Decoded JSON (must be a list of objects).
        source:  Label used in error messages (usually the file path).

    Returns:
        Tuple of candidates in file order.

    Raises:
        CatalogValidationError: If any entry is invalid or an id repeats.
    """
    if not isinstance(records, list):
        raise CatalogValidationError(
            source, [(0, f"top level must be a JSON array, got {type(records).__name__}")]
        )

    errors: list[tuple[int, str]] = []
    candidates: list[CandidateDefinition] = []
    seen_ids: set[str] = set()

    for i, rec in enumerate(records):
        try:
            candidate = CandidateDefinition.model_validate(rec)
        except ValidationError as exc:
            first = exc.errors()[0]
            loc = ".".join(str(p) for p in first["loc"])
            prefix = f"{loc}: " if loc else ""
            errors.append((i, f"{prefix}{first['msg']} ({exc.error_count()} error(s))"))
            continue

        if candidate.id in seen_ids:
            errors.append((i, f"duplicate id '{candidate.id}'"))
            continue
        seen_ids.add(candidate.id)

        for cond in candidate.unsupported_conditions():
            log.warning(
                "Catalog %s: '%s' uses unsupported operator '%s' on '%s'; "
                "the condition will never match.",
                source, candidate.id, cond.operator, cond.field.value,
            )
        candidates.append(candidate)

    if errors:
        raise CatalogValidationError(source, errors)

    return tuple(candidates)


def load_catalog(path: Path) -> tuple[CandidateDefinition, ...]:
    """Load and validate a catalog JSON file.

    Args:
        path: Path to the catalog file.

    Returns:
        Tuple of candidates in file order.

    Raises:
        FileNotFoundError:       If ``path`` does not exist.
        CatalogValidationError:  If the file content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogValidationError(
            str(path), [(0, f"invalid JSON at line {exc.lineno}: {exc.msg}")]
        ) from exc

    catalog = parse_catalog(raw, source=str(path))
    log.info(
        "Loaded %d catalog entries from %s (%d essential)",
        len(catalog), path, sum(1 for c in catalog if c.is_essential),
    )
    return catalog


# ── Lookups ───────────────────────────────────────────────────────────────────

def get_supplement_by_id(
    catalog: Sequence[CandidateDefinition],
    supplement_id: str,
) -> Optional[CandidateDefinition]:
    """Return the candidate with ``supplement_id``, or ``None``."""
    for candidate in catalog:
        if candidate.id == supplement_id:
            return candidate
    return None


def get_supplements_by_target_area(
    catalog: Sequence[CandidateDefinition],
    target_area: TargetArea | str,
) -> list[CandidateDefinition]:
    """Return candidates tagged with ``target_area``, in catalog order."""
    return [c for c in catalog if target_area in c.target_areas]


def get_supplements_by_substance_class(
    catalog: Sequence[CandidateDefinition],
    substance_class: SubstanceClass | str,
) -> list[CandidateDefinition]:
    """Return candidates of ``substance_class``, in catalog order."""
    return [c for c in catalog if c.substance_class == substance_class]
