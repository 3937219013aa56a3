"""
Recommendation report writer: JSON output for assembled results.

Pure I/O. Consumes an in-memory ``RecommendationResult`` and writes one
machine-readable file per user and run date.

Output files (written by RecommendationRunner / the ``recommend`` command)
--------------------------------------------------------------------------
  data/outputs/recommendations/
    recommendations_{user_id}_{date}.json  -- full result incl. factors
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

from supplement_recommender.models.recommendation import RecommendationResult

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v1.0.0"


def result_to_payload(result: RecommendationResult) -> dict:
    """Serialize a result into the JSON report structure."""
    payload: dict = {"schema_version": SCHEMA_VERSION}
    payload.update(result.model_dump(mode="json"))
    for rank, rec in enumerate(payload["recommendations"], start=1):
        rec["rank"] = rank
    return payload


def write_result_json(
    result: RecommendationResult,
    output_dir: Path,
    run_date: date | None = None,
) -> Path:
    """Write a recommendation result to a structured JSON file.

    Args:
        result:     Assembled result.
        output_dir: Target directory (created if missing).
        run_date:   Date label for the filename. Defaults to the date of
                    ``result.generated_at``.

    Returns:
        Path to the written JSON file.
    """
    if run_date is None:
        run_date = result.generated_at.date()

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"recommendations_{_safe_slug(result.user_id)}_{run_date}.json"

    with json_path.open("w", encoding="utf-8") as f:
        json.dump(result_to_payload(result), f, indent=2, default=str)

    logger.info(
        "Recommendation JSON written: %s (%d recommendations)",
        json_path, len(result.recommendations),
    )
    return json_path


def _safe_slug(user_id: str) -> str:
    return "".join(c if c.isalnum() or c in "-_" else "_" for c in user_id)
