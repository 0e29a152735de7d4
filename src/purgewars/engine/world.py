"""Regional control scores and the world purge.

All functions are pure: they take regions/stats and return new ones.
Persisting the result is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Mapping, Sequence

from .types import Faction


@dataclass(frozen=True)
class WorldConfig:
    max_points: float = 100
    control_threshold: float = 10
    purge_ratio: float = 0.8
    neutral_points: float = 50


@dataclass(frozen=True)
class RegionBonus:
    name: str
    description: str
    effect: str
    value: int

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "RegionBonus":
        value = d.get("value", 0)
        return RegionBonus(
            name=str(d.get("name", "")),
            description=str(d.get("description", "")),
            effect=str(d.get("effect", "")),
            value=int(value) if isinstance(value, int) else 0,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "effect": self.effect,
            "value": self.value,
        }


@dataclass(frozen=True)
class Region:
    id: str
    name: str
    angel_points: float
    demon_points: float
    controlling_faction: Faction | None = None
    is_locked: bool = False
    description: str = ""
    bonus: RegionBonus | None = None
    coordinates: tuple[float, float] = (0.0, 0.0)

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "Region":
        def _num(key: str) -> float:
            v = d.get(key, 0)
            return v if isinstance(v, (int, float)) else 0

        coords = d.get("coordinates", {})
        x = coords.get("x", 0.0) if isinstance(coords, dict) else 0.0
        y = coords.get("y", 0.0) if isinstance(coords, dict) else 0.0
        bonus_raw = d.get("bonus")
        controlling = d.get("controlling_faction")
        return Region(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            description=str(d.get("description", "")),
            angel_points=_num("angel_points"),
            demon_points=_num("demon_points"),
            controlling_faction=controlling if controlling in ("angel", "demon") else None,  # type: ignore[arg-type]
            is_locked=bool(d.get("is_locked", False)),
            bonus=RegionBonus.from_dict(bonus_raw) if isinstance(bonus_raw, dict) else None,
            coordinates=(float(x), float(y)),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "angel_points": self.angel_points,
            "demon_points": self.demon_points,
            "controlling_faction": self.controlling_faction,
            "is_locked": self.is_locked,
            "bonus": self.bonus.to_dict() if self.bonus is not None else None,
            "coordinates": {"x": self.coordinates[0], "y": self.coordinates[1]},
        }


@dataclass(frozen=True)
class WorldStats:
    regions: tuple[Region, ...]
    purge_count: int = 0
    current_purge_winner: Faction | None = None
    last_purge_date: str | None = None
    total_angels: int = 0
    total_demons: int = 0
    active_events: tuple[dict[str, object], ...] = field(default_factory=tuple)

    def region(self, region_id: str) -> Region | None:
        for r in self.regions:
            if r.id == region_id:
                return r
        return None

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "WorldStats":
        regions_raw = d.get("regions", [])
        regions = tuple(
            Region.from_dict(r) for r in regions_raw if isinstance(r, dict)
        ) if isinstance(regions_raw, list) else ()
        events_raw = d.get("active_events", [])
        events = tuple(dict(e) for e in events_raw if isinstance(e, dict)) if isinstance(events_raw, list) else ()
        winner = d.get("current_purge_winner")
        last = d.get("last_purge_date")

        def _int(key: str) -> int:
            v = d.get(key, 0)
            return int(v) if isinstance(v, int) else 0

        return WorldStats(
            regions=regions,
            purge_count=_int("purge_count"),
            current_purge_winner=winner if winner in ("angel", "demon") else None,  # type: ignore[arg-type]
            last_purge_date=last if isinstance(last, str) else None,
            total_angels=_int("total_angels"),
            total_demons=_int("total_demons"),
            active_events=events,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "regions": [r.to_dict() for r in self.regions],
            "purge_count": self.purge_count,
            "current_purge_winner": self.current_purge_winner,
            "last_purge_date": self.last_purge_date,
            "total_angels": self.total_angels,
            "total_demons": self.total_demons,
            "active_events": [dict(e) for e in self.active_events],
        }


@dataclass(frozen=True)
class PurgeResult:
    stats: WorldStats
    triggered: bool
    winner: Faction | None = None


def controlling_faction(
    angel_points: float, demon_points: float, config: WorldConfig | None = None
) -> Faction | None:
    cfg = config or WorldConfig()
    if angel_points > demon_points + cfg.control_threshold:
        return "angel"
    if demon_points > angel_points + cfg.control_threshold:
        return "demon"
    return None


def update_region_control(
    region: Region, winning_faction: Faction, points: float, config: WorldConfig | None = None
) -> Region:
    """Credit `points` to the winner and take half as many from the loser."""
    cfg = config or WorldConfig()
    if points < 0:
        raise ValueError("points must be non-negative")

    angel, demon = region.angel_points, region.demon_points
    if winning_faction == "angel":
        angel = min(cfg.max_points, angel + points)
        demon = max(0, demon - points / 2)
    else:
        demon = min(cfg.max_points, demon + points)
        angel = max(0, angel - points / 2)

    return replace(
        region,
        angel_points=angel,
        demon_points=demon,
        controlling_faction=controlling_faction(angel, demon, cfg),
    )


def purge_leader(regions: Sequence[Region], config: WorldConfig | None = None) -> Faction | None:
    """Return the faction that holds at least the purge ratio of unlocked regions.

    With no unlocked regions, or when both factions hold the same share,
    nobody leads.
    """
    cfg = config or WorldConfig()
    unlocked = [r for r in regions if not r.is_locked]
    if not unlocked:
        return None
    total = len(unlocked)
    angel = sum(1 for r in unlocked if r.controlling_faction == "angel") / total
    demon = sum(1 for r in unlocked if r.controlling_faction == "demon") / total
    if angel < cfg.purge_ratio and demon < cfg.purge_ratio:
        return None
    if angel > demon:
        return "angel"
    if demon > angel:
        return "demon"
    return None


def trigger_purge(
    stats: WorldStats,
    winning_faction: Faction,
    now: datetime | None = None,
    config: WorldConfig | None = None,
) -> WorldStats:
    """Reset every unlocked region to neutral and record the purge."""
    cfg = config or WorldConfig()
    ts = now or datetime.now(tz=timezone.utc)
    regions = tuple(
        r
        if r.is_locked
        else replace(
            r,
            angel_points=cfg.neutral_points,
            demon_points=cfg.neutral_points,
            controlling_faction=None,
        )
        for r in stats.regions
    )
    return replace(
        stats,
        regions=regions,
        purge_count=stats.purge_count + 1,
        current_purge_winner=winning_faction,
        last_purge_date=ts.isoformat(),
    )


def check_purge_condition(
    stats: WorldStats, now: datetime | None = None, config: WorldConfig | None = None
) -> PurgeResult:
    leader = purge_leader(stats.regions, config)
    if leader is None:
        return PurgeResult(stats=stats, triggered=False)
    return PurgeResult(stats=trigger_purge(stats, leader, now, config), triggered=True, winner=leader)


def apply_match_outcome(
    stats: WorldStats,
    region_id: str,
    winning_faction: Faction,
    points: float,
    now: datetime | None = None,
    config: WorldConfig | None = None,
) -> PurgeResult:
    """Update one region and run the purge check as a single transition.

    Unknown region ids leave the world unchanged.
    """
    target = stats.region(region_id)
    if target is None:
        return PurgeResult(stats=stats, triggered=False)
    updated = update_region_control(target, winning_faction, points, config)
    regions = tuple(updated if r.id == region_id else r for r in stats.regions)
    return check_purge_condition(replace(stats, regions=regions), now, config)
