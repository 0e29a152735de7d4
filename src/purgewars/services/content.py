from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from purgewars.engine.types import (
    CLASSES,
    FACTIONS,
    Ability,
    Card,
    CardCatalog,
    ClassInfo,
    ClassType,
    Faction,
)
from purgewars.engine.world import Region, WorldStats


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def _load_schema(path: Path) -> object:
    return _load_json(path)


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _optional_int(obj: Mapping[str, object], key: str) -> int | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _parse_ability(raw: Mapping[str, object]) -> Ability:
    return Ability(
        name=_require_str(raw, "name"),
        description=_require_str(raw, "description"),
        type=_require_str(raw, "type"),  # type: ignore[arg-type]
        effect=_require_str(raw, "effect"),
    )


def _parse_template(raw: Mapping[str, object], faction: Faction) -> Card:
    abilities_raw = raw.get("abilities", [])
    abilities: list[Ability] = []
    if isinstance(abilities_raw, list):
        for a in abilities_raw:
            if isinstance(a, dict):
                abilities.append(_parse_ability(a))
    return Card(
        # Templates get their ids when copied into a deck.
        id="",
        name=_require_str(raw, "name"),
        description=_require_str(raw, "description"),
        faction=faction,
        type=_require_str(raw, "type"),  # type: ignore[arg-type]
        rarity=_require_str(raw, "rarity"),  # type: ignore[arg-type]
        cost=_require_int(raw, "cost"),
        abilities=tuple(abilities),
        attack=_optional_int(raw, "attack"),
        health=_optional_int(raw, "health"),
    )


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def _load_validated(self, name: str) -> dict[str, object]:
        path = self._data_dir / f"{name}.json"
        raw = _load_json(path)
        schema = _load_schema(self._schema_dir / f"{name}.schema.json")
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError(f"{name}.json must be an object")
        return raw

    def load_classes(self) -> dict[ClassType, ClassInfo]:
        raw = self._load_validated("classes")
        raw_classes = raw.get("classes")
        if not isinstance(raw_classes, list):
            raise ContentError("classes.json.classes must be a list")
        out: dict[ClassType, ClassInfo] = {}
        for item in raw_classes:
            if not isinstance(item, dict):
                continue
            cid = _require_str(item, "id")
            out[cid] = ClassInfo(  # type: ignore[index]
                id=cid,  # type: ignore[arg-type]
                name=_require_str(item, "name"),
                description=_require_str(item, "description"),
                health_bonus=_require_int(item, "health_bonus"),
                mana_bonus=_require_int(item, "mana_bonus"),
                special_ability=_require_str(item, "special_ability"),
            )
        missing = [c for c in CLASSES if c not in out]
        if missing:
            raise ContentError(f"classes.json is missing classes: {', '.join(missing)}")
        return out

    def load_catalog(self) -> CardCatalog:
        raw = self._load_validated("cards")
        raw_factions = raw.get("factions")
        if not isinstance(raw_factions, dict):
            raise ContentError("cards.json.factions must be an object")

        pools: dict[Faction, tuple[Card, ...]] = {}
        for faction in FACTIONS:
            raw_pool = raw_factions.get(faction)
            if not isinstance(raw_pool, list):
                raise ContentError(f"cards.json.factions.{faction} must be a list")
            pools[faction] = tuple(
                _parse_template(item, faction) for item in raw_pool if isinstance(item, dict)
            )
        return CardCatalog(faction_cards=pools, classes=self.load_classes())

    def load_regions(self) -> list[Region]:
        raw = self._load_validated("regions")
        raw_regions = raw.get("regions")
        if not isinstance(raw_regions, list):
            raise ContentError("regions.json.regions must be a list")
        regions = [Region.from_dict(r) for r in raw_regions if isinstance(r, dict)]
        ids = [r.id for r in regions]
        if len(set(ids)) != len(ids):
            raise ContentError("regions.json contains duplicate region ids")
        return regions

    def initial_world(self) -> WorldStats:
        return WorldStats(regions=tuple(self.load_regions()))

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_catalog()
        _ = self.load_regions()
