from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from royalgambit.engine.match import GameConfig


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _optional_int(obj: Mapping[str, object], key: str, default: int) -> int:
    v = obj.get(key, default)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


def _optional_str(obj: Mapping[str, object], key: str) -> str | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_rules(self, path: Path | None = None) -> GameConfig:
        rules_path = path or self._data_dir / "rules.json"
        raw = _load_json(rules_path)
        schema = _load_json(self._schema_dir / "rules.schema.json")
        validate_json(raw, schema, context=str(rules_path))
        if not isinstance(raw, dict):
            raise ContentError("rules.json must be an object")

        defaults = GameConfig()
        return GameConfig(
            hand_size=_optional_int(raw, "hand_size", defaults.hand_size),
            court_size=_optional_int(raw, "court_size", defaults.court_size),
            draw_after_move=bool(raw.get("draw_after_move", defaults.draw_after_move)),
            starting_fen=_optional_str(raw, "starting_fen"),
        )

    def validate_event_log(self, exported: object) -> None:
        schema = _load_json(self._schema_dir / "event_log.schema.json")
        validate_json(exported, schema, context="event log")
        assert isinstance(exported, dict)
        indices = [e["index"] for e in exported["events"]]
        if any(b <= a for a, b in zip(indices, indices[1:])):
            raise ContentError("Event log indices must be strictly increasing")

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_rules()
