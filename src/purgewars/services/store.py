from __future__ import annotations

import json
import os
import re
from pathlib import Path

from purgewars.paths import Paths, get_paths


class StoreError(RuntimeError):
    """A read or write against the backing store failed. Safe to retry."""


_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonStore:
    """Whole-object JSON snapshots, one file per key."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid store key: {key!r}")
        return self._root / f"{key}.json"

    def has(self, key: str) -> bool:
        return self._path(key).exists()

    def get(self, key: str) -> object | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read {key}: {e}") from e

    def set(self, key: str, value: object) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        text = json.dumps(value, indent=2, ensure_ascii=False)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            tmp.write_text(text, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            raise StoreError(f"Could not write {key}: {e}") from e


def open_user_store(paths: Paths | None = None) -> JsonStore:
    """Store rooted at the user-data dir (PURGEWARS_USERDATA overrides it)."""
    return JsonStore((paths or get_paths()).userdata_dir)
