from __future__ import annotations

from pathlib import Path

from royalgambit.engine.actions import StrikeTargets
from royalgambit.engine.match import make_move, new_game, play_card, resolve_joust
from royalgambit.services.telemetry import TelemetryService

from support import staged_game


def test_trace_records_written_as_jsonl(tmp_path: Path) -> None:
    sink = TelemetryService(tmp_path / "logs" / "trace.jsonl", game_id="g1")
    state = new_game(seed=3, listeners=[sink.log])
    assert make_move(state, "e2", "e4").ok
    assert not make_move(state, "e2", "e4").ok

    records = sink.read("g1")
    types = [r["type"] for r in records]
    assert types[0] == "GAME_STARTED"
    assert types.count("CARD_DRAWN") == 0
    assert "TURN_PASSED" in types
    assert types[-1] == "ACTION_REJECTED"
    assert records[-1]["payload"]["code"] == "NoLegalChessMove"
    assert sink.read("other") == []


def test_joust_and_piece_records(tmp_path: Path) -> None:
    sink = TelemetryService(tmp_path / "trace.jsonl")
    state = staged_game(white_hand=["S9"], black_hand=["H3"])
    state.listeners.append(sink.log)

    assert play_card(state, "S9", StrikeTargets(primary="g8")).pending_joust
    assert resolve_joust(state, defend=True, wager_card_id="H3").ok

    types = [r["type"] for r in sink.read()]
    assert types.index("JOUST_OFFERED") < types.index("JOUST_RESOLVED") < types.index("PIECE_REMOVED")
    assert "CARD_DRAWN" in types


def test_read_missing_file(tmp_path: Path) -> None:
    assert TelemetryService(tmp_path / "none.jsonl").read() == []
