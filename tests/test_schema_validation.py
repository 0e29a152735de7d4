from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from purgewars.paths import get_paths
from purgewars.services.content import ContentError, ContentService


def test_content_schemas_validate() -> None:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    content.validate_all()


def test_catalog_contents() -> None:
    paths = get_paths()
    catalog = ContentService(paths.data_dir, paths.schema_dir).load_catalog()
    assert len(catalog.templates_for("angel")) == 5
    assert len(catalog.templates_for("demon")) == 5
    assert set(catalog.classes) == {"mage", "warrior", "paladin", "necromancer", "shaman"}
    assert catalog.class_info("warrior").health_bonus == 5


def _copy_content(tmp_path: Path) -> ContentService:
    paths = get_paths()
    data_dir = tmp_path / "data"
    shutil.copytree(paths.data_dir, data_dir)
    return ContentService(data_dir, data_dir / "schemas")


def test_schema_violation_is_reported(tmp_path: Path) -> None:
    content = _copy_content(tmp_path)
    cards_path = tmp_path / "data" / "cards.json"
    raw = json.loads(cards_path.read_text(encoding="utf-8"))
    raw["factions"]["angel"][0]["rarity"] = "mythic"
    cards_path.write_text(json.dumps(raw), encoding="utf-8")

    with pytest.raises(ContentError, match="Schema validation failed"):
        content.load_catalog()


def test_missing_content_file(tmp_path: Path) -> None:
    content = _copy_content(tmp_path)
    (tmp_path / "data" / "regions.json").unlink()
    with pytest.raises(ContentError, match="Missing content file"):
        content.load_regions()


def test_invalid_json(tmp_path: Path) -> None:
    content = _copy_content(tmp_path)
    (tmp_path / "data" / "classes.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ContentError, match="Invalid JSON"):
        content.load_classes()
