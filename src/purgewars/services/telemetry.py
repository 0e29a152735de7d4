from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from purgewars.paths import Paths, get_paths


@dataclass
class TelemetryService:
    """Append-only JSONL log of session events (match, region, purge)."""

    path: Path

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def read(self, event_type: str | None = None) -> list[dict[str, object]]:
        if not self.path.exists():
            return []
        out: list[dict[str, object]] = []
        with self.path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                rec = json.loads(line)
                if event_type is None or rec.get("type") == event_type:
                    out.append(rec)
        return out


def open_user_telemetry(paths: Paths | None = None) -> TelemetryService:
    return TelemetryService((paths or get_paths()).userdata_dir / "telemetry.jsonl")
