from __future__ import annotations

import json
from pathlib import Path

import pytest

from royalgambit.engine.actions import RescueTargets
from royalgambit.engine.match import GameConfig, make_move, new_game, play_card
from royalgambit.engine.serialize import export_event_log
from royalgambit.paths import get_paths
from royalgambit.services.content import ContentError, ContentService

from support import staged_game


def _content() -> ContentService:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir)


def test_content_schemas_validate() -> None:
    _content().validate_all()


def test_packaged_rules_match_defaults() -> None:
    assert _content().load_rules() == GameConfig()


def test_custom_rules_file(tmp_path: Path) -> None:
    p = tmp_path / "rules.json"
    p.write_text(json.dumps({"hand_size": 4, "draw_after_move": True}), encoding="utf-8")
    cfg = _content().load_rules(p)
    assert cfg.hand_size == 4
    assert cfg.court_size == 3
    assert cfg.draw_after_move is True

    state = new_game(seed=5, config=cfg)
    assert len(state.players["white"].hand) == 4


@pytest.mark.parametrize(
    "raw",
    [
        {"hand_size": 9},
        {"court_size": -1},
        {"draw_after_move": "yes"},
        {"jokers": True},
    ],
)
def test_invalid_rules_rejected(tmp_path: Path, raw: dict) -> None:
    p = tmp_path / "rules.json"
    p.write_text(json.dumps(raw), encoding="utf-8")
    with pytest.raises(ContentError):
        _content().load_rules(p)


def test_broken_json_rejected(tmp_path: Path) -> None:
    p = tmp_path / "rules.json"
    p.write_text("{hand_size: 5", encoding="utf-8")
    with pytest.raises(ContentError, match="Invalid JSON"):
        _content().load_rules(p)
    with pytest.raises(ContentError, match="Missing"):
        _content().load_rules(tmp_path / "absent.json")


def test_exported_event_log_validates() -> None:
    state = staged_game(white_hand=["H5"], black_hand=["C2"], seed=12)
    assert play_card(state, "H5", RescueTargets.single("d2", "e3")).ok
    assert make_move(state, "e7", "e5").ok

    exported = export_event_log(state)
    json.dumps(exported)
    _content().validate_event_log(exported)
    assert [e["type"] for e in exported["events"]] == ["card", "move"]  # type: ignore[index]


def test_event_log_with_bad_indices_rejected() -> None:
    state = new_game(seed=1)
    assert make_move(state, "e2", "e4").ok
    assert make_move(state, "e7", "e5").ok
    exported = export_event_log(state)
    events = exported["events"]
    assert isinstance(events, list)
    events[1]["index"] = 0
    with pytest.raises(ContentError, match="strictly increasing"):
        _content().validate_event_log(exported)

    with pytest.raises(ContentError):
        _content().validate_event_log({"seed": 1, "events": [{"index": 0, "type": "jump"}]})
