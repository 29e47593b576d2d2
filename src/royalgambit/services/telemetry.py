from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping


@dataclass
class TelemetryService:
    """JSONL sink for the engine's trace channel.

    Register with ``state.listeners.append(telemetry.log)``; every record is
    tagged with ``game_id`` so several games can share one file.
    """

    path: Path
    game_id: str = "default"

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "game_id": self.game_id,
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def read(self, game_id: str | None = None) -> list[dict[str, object]]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as f:
            records = [json.loads(line) for line in f if line.strip()]
        if game_id is None:
            return records
        return [r for r in records if r.get("game_id") == game_id]
