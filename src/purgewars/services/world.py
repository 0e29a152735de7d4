from __future__ import annotations

from datetime import datetime

from purgewars.engine.types import Faction
from purgewars.engine.world import (
    PurgeResult,
    WorldConfig,
    WorldStats,
    apply_match_outcome,
)

from .content import ContentService
from .store import JsonStore
from .telemetry import TelemetryService

WORLD_KEY = "world"


class WorldService:
    """Owns the shared world aggregate: regions plus purge counters.

    Regions and stats are written together as one snapshot, so a region
    update and the purge it causes are committed or lost as a unit.
    """

    def __init__(
        self,
        store: JsonStore,
        content: ContentService,
        config: WorldConfig | None = None,
        telemetry: TelemetryService | None = None,
    ) -> None:
        self._store = store
        self._content = content
        self._config = config or WorldConfig()
        self._telemetry = telemetry
        self.stats = self._load_or_create()

    def _load_or_create(self) -> WorldStats:
        raw = self._store.get(WORLD_KEY)
        if isinstance(raw, dict):
            return WorldStats.from_dict(raw)
        stats = self._content.initial_world()
        self._store.set(WORLD_KEY, stats.to_dict())
        return stats

    def _commit(self, stats: WorldStats) -> None:
        self._store.set(WORLD_KEY, stats.to_dict())
        self.stats = stats

    def apply_victory(
        self, region_id: str, faction: Faction, points: float, now: datetime | None = None
    ) -> PurgeResult:
        """Apply and persist a match outcome without emitting telemetry."""
        result = apply_match_outcome(self.stats, region_id, faction, points, now, self._config)
        if result.stats is not self.stats:
            self._commit(result.stats)
        return result

    def record_victory(self, region_id: str, faction: Faction, points: float, result: PurgeResult) -> None:
        region = result.stats.region(region_id)
        if self._telemetry is None or region is None:
            return
        self._telemetry.log(
            "region_updated",
            {
                "region_id": region_id,
                "faction": faction,
                "points": points,
                "controlling_faction": region.controlling_faction,
            },
        )
        if result.triggered:
            self._telemetry.log(
                "purge_triggered",
                {"winner": result.winner, "purge_count": result.stats.purge_count},
            )

    def report_victory(
        self, region_id: str, faction: Faction, points: float, now: datetime | None = None
    ) -> PurgeResult:
        result = self.apply_victory(region_id, faction, points, now)
        self.record_victory(region_id, faction, points, result)
        return result
