"""
RecommendationRunner: the effectful shell around the pure scoring core.

Recommendation flow
-------------------
For one user:
  1. Aggregate the snapshot from a ``UserDataSource`` (concurrent fetches,
     failed sources become empty) - skipped by ``run_from_snapshot``.
  2. Score the catalog and assemble the ranked result
     (``recommendations.ranker.assemble_result``).
  3. Log a one-line summary (count, threshold, completeness, fingerprint).
  4. Optionally write the JSON report to ``output_dir``.

The scoring core itself never logs run summaries or touches files; all of
that happens here.

Usage::

    runner = RecommendationRunner(config)
    result = runner.run("user-123", JsonDirectorySource(Path("data/users")), catalog)
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence
from uuid import uuid4

from supplement_recommender.aggregation.aggregator import aggregate_user_data
from supplement_recommender.aggregation.sources import UserDataSource
from supplement_recommender.config import AppConfig
from supplement_recommender.models.catalog import CandidateDefinition
from supplement_recommender.models.recommendation import RecommendationResult
from supplement_recommender.models.snapshot import AggregatedUserData
from supplement_recommender.recommendations.ranker import assemble_result
from supplement_recommender.recommendations.reporter import write_result_json

logger = logging.getLogger(__name__)


class RecommendationRunner:
    """Aggregate → score → report for one user at a time.

    Attributes:
        config: Application configuration; ``config.scoring`` is passed to
                every scoring call.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    async def run_async(
        self,
        user_id: str,
        source: UserDataSource,
        catalog: Sequence[CandidateDefinition],
        output_dir: Optional[Path] = None,
        now: Optional[datetime] = None,
    ) -> RecommendationResult:
        """Async variant of ``run`` for callers already inside an event loop."""
        data = await aggregate_user_data(
            source, user_id, average_days=self.config.scoring.average_window_days
        )
        return self.run_from_snapshot(user_id, data, catalog, output_dir, now)

    def run(
        self,
        user_id: str,
        source: UserDataSource,
        catalog: Sequence[CandidateDefinition],
        output_dir: Optional[Path] = None,
        now: Optional[datetime] = None,
    ) -> RecommendationResult:
        """Aggregate the user's data from ``source`` and assemble the result.

        Args:
            user_id:    User to recommend for.
            source:     Upstream data source.
            catalog:    Candidate definitions.
            output_dir: If set, the JSON report is written there.
            now:        Timestamp override for ``generated_at``.

        Returns:
            ``RecommendationResult``.

        Raises:
            EmptyCatalogError: If ``catalog`` is empty.
        """
        return asyncio.run(self.run_async(user_id, source, catalog, output_dir, now))

    def run_from_snapshot(
        self,
        user_id: str,
        data: Optional[AggregatedUserData],
        catalog: Sequence[CandidateDefinition],
        output_dir: Optional[Path] = None,
        now: Optional[datetime] = None,
    ) -> RecommendationResult:
        """Assemble the result for an already aggregated snapshot.

        Raises:
            MissingSnapshotError: If ``data`` is ``None``.
            EmptyCatalogError:    If ``catalog`` is empty.
        """
        run_slug = str(uuid4())
        started = time.perf_counter()
        logger.info("Run [recommend] starting | user=%s | run_slug=%s", user_id, run_slug)

        try:
            result = assemble_result(
                user_id, data, catalog, self.config.scoring, now=now
            )
        except Exception as exc:
            logger.error(
                "Run [recommend] FAILED: %s | user=%s | run_slug=%s",
                exc, user_id, run_slug,
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        logger.info(
            "Run [recommend] completed | user=%s | recommendations=%d "
            "(threshold: %d%%, data: %d%%) | hash=%s | %.1f ms | run_slug=%s",
            user_id,
            len(result.recommendations),
            self.config.scoring.min_score_threshold,
            result.data_completeness.overall_percentage,
            result.data_hash,
            elapsed_ms,
            run_slug,
        )
        for warning in result.warnings:
            logger.warning("user=%s: %s", user_id, warning)

        if output_dir is not None:
            write_result_json(result, Path(output_dir))

        return result
