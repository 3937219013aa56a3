"""
Snapshot fingerprint for cache invalidation.

The fingerprint covers every scoring-relevant section of the snapshot
(profile, supplement profile, intolerances, both rolling averages and the
nutrition goals). ``data_freshness`` is excluded: timestamps are metadata,
and a new check-in that leaves the averages unchanged must not invalidate a
cached result.

This is NOT a security primitive. SHA-256 is used only because it is stable
across processes and platforms; the digest is truncated to 16 hex chars
(64 bits), which is ample for change detection on one user's data.
"""

from __future__ import annotations

import hashlib
import json

from supplement_recommender.models.snapshot import AggregatedUserData

FINGERPRINT_LENGTH = 16

_EXCLUDED_SECTIONS = {"data_freshness"}


def compute_snapshot_fingerprint(data: AggregatedUserData) -> str:
    """Return a 16-char hex fingerprint of the scoring-relevant snapshot.

    Serialization uses ``sort_keys=True`` for determinism - structurally
    identical snapshots always produce the same fingerprint.

    Args:
        data: Aggregated user snapshot.

    Returns:
        Lower-case hex string of length ``FINGERPRINT_LENGTH``.
    """
    payload = data.model_dump(mode="json", exclude=_EXCLUDED_SECTIONS)
    serialized = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]
