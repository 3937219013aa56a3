"""
User-data sources for the aggregator.

``UserDataSource`` is the protocol the aggregator depends on: four async
fetches, one per upstream source. Any fetch may raise; the aggregator logs
the failure and treats that source as empty.

Implementations
---------------
JsonDirectorySource
    Per-user JSON files on disk (fixtures, offline runs)::

        <root>/<user_id>/profile.json          ProfileRecord object
        <root>/<user_id>/checkins.json         list of CheckinRecord
        <root>/<user_id>/nutrition.json        list of NutritionDayRecord
        <root>/<user_id>/nutrition_goals.json  NutritionGoalsRecord object

    A missing file means "no data" (``None`` / empty list).

RestUserDataSource
    PostgREST-style HTTP API via ``httpx.AsyncClient``.

    Credential setup (.env, gitignored)::

        SUPPLEMENT_RECOMMENDER_SOURCE_URL=https://<project>.example.co/rest/v1
        SUPPLEMENT_RECOMMENDER_SOURCE_KEY=your_key_here

``load_snapshot_file`` reads an already aggregated snapshot (``--snapshot``).
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

import httpx

from supplement_recommender.aggregation.records import (
    CheckinRecord,
    NutritionDayRecord,
    NutritionGoalsRecord,
    ProfileRecord,
)
from supplement_recommender.models.snapshot import AggregatedUserData

logger = logging.getLogger(__name__)


@runtime_checkable
class UserDataSource(Protocol):
    """Async access to the four upstream sources of one user's data."""

    async def fetch_profile(self, user_id: str) -> Optional[ProfileRecord]: ...

    async def fetch_checkins(self, user_id: str, since: date) -> list[CheckinRecord]: ...

    async def fetch_nutrition_days(
        self, user_id: str, since: date
    ) -> list[NutritionDayRecord]: ...

    async def fetch_nutrition_goals(
        self, user_id: str
    ) -> Optional[NutritionGoalsRecord]: ...


# ── JSON directory source ─────────────────────────────────────────────────────

class JsonDirectorySource:
    """Reads per-user JSON files from ``root``.

    Args:
        root: Directory holding one sub-directory per user id.
    """

    PROFILE_FILE = "profile.json"
    CHECKINS_FILE = "checkins.json"
    NUTRITION_FILE = "nutrition.json"
    GOALS_FILE = "nutrition_goals.json"

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _read(self, user_id: str, filename: str) -> Any:
        path = self.root / user_id / filename
        if not path.exists():
            logger.debug("No %s for user %s", filename, user_id)
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    async def _read_async(self, user_id: str, filename: str) -> Any:
        return await asyncio.to_thread(self._read, user_id, filename)

    async def fetch_profile(self, user_id: str) -> Optional[ProfileRecord]:
        raw = await self._read_async(user_id, self.PROFILE_FILE)
        return None if raw is None else ProfileRecord.model_validate(raw)

    async def fetch_checkins(self, user_id: str, since: date) -> list[CheckinRecord]:
        raw = await self._read_async(user_id, self.CHECKINS_FILE) or []
        records = [CheckinRecord.model_validate(r) for r in raw]
        return sorted(
            (r for r in records if r.date >= since),
            key=lambda r: r.date,
            reverse=True,
        )

    async def fetch_nutrition_days(
        self, user_id: str, since: date
    ) -> list[NutritionDayRecord]:
        raw = await self._read_async(user_id, self.NUTRITION_FILE) or []
        records = [NutritionDayRecord.model_validate(r) for r in raw]
        return sorted(
            (r for r in records if r.date >= since),
            key=lambda r: r.date,
            reverse=True,
        )

    async def fetch_nutrition_goals(
        self, user_id: str
    ) -> Optional[NutritionGoalsRecord]:
        raw = await self._read_async(user_id, self.GOALS_FILE)
        return None if raw is None else NutritionGoalsRecord.model_validate(raw)


# ── REST source ───────────────────────────────────────────────────────────────

class RestUserDataSource:
    """PostgREST-style client for the profile, check-in and nutrition tables.

    Usage::

        source = RestUserDataSource(base_url, api_key=os.environ["..."])
        data = await aggregate_user_data(source, "user-123")

    Args:
        base_url:        REST root, e.g. ``https://host/rest/v1``.
        api_key:         Sent as ``apikey`` and bearer token; ``None`` → no auth.
        timeout:         Per-request timeout in seconds.
        max_concurrency: Max simultaneous requests from this source.
        transport:       Optional httpx transport (tests use ``MockTransport``).
    """

    PROFILE_SELECT = (
        "*,user_intolerances(id,severity,"
        "intolerance:intolerances_catalog(id,name,category))"
    )

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 15.0,
        max_concurrency: int = 4,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _get(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        """GET ``/{table}`` and return the JSON row list.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
            httpx.TransportError:  On connection failures / timeouts.
        """
        async with self._semaphore:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.get(f"/{table}", params=params)
                resp.raise_for_status()
                rows = resp.json()
        logger.debug("GET %s → %d rows", table, len(rows))
        return rows

    async def fetch_profile(self, user_id: str) -> Optional[ProfileRecord]:
        rows = await self._get(
            "profiles",
            {"id": f"eq.{user_id}", "select": self.PROFILE_SELECT},
        )
        return ProfileRecord.model_validate(rows[0]) if rows else None

    async def fetch_checkins(self, user_id: str, since: date) -> list[CheckinRecord]:
        rows = await self._get(
            "daily_recovery_with_score",
            {
                "user_id": f"eq.{user_id}",
                "date": f"gte.{since.isoformat()}",
                "order": "date.desc",
            },
        )
        return [CheckinRecord.model_validate(r) for r in rows]

    async def fetch_nutrition_days(
        self, user_id: str, since: date
    ) -> list[NutritionDayRecord]:
        rows = await self._get(
            "daily_nutrition_summary",
            {
                "user_id": f"eq.{user_id}",
                "summary_date": f"gte.{since.isoformat()}",
                "order": "summary_date.desc",
            },
        )
        return [NutritionDayRecord.from_summary_row(r) for r in rows]

    async def fetch_nutrition_goals(
        self, user_id: str
    ) -> Optional[NutritionGoalsRecord]:
        rows = await self._get(
            "user_nutrition_goals",
            {
                "user_id": f"eq.{user_id}",
                "is_active": "eq.true",
                "order": "created_at.desc",
                "limit": "1",
            },
        )
        return NutritionGoalsRecord.model_validate(rows[0]) if rows else None


# ── Pre-aggregated snapshots ──────────────────────────────────────────────────

def load_snapshot_file(path: Path) -> AggregatedUserData:
    """Load an ``AggregatedUserData`` snapshot from a JSON file.

    Raises:
        FileNotFoundError:        If ``path`` does not exist.
        pydantic.ValidationError: If the file does not describe a snapshot.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")
    return AggregatedUserData.model_validate_json(path.read_text(encoding="utf-8"))
