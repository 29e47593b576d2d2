from __future__ import annotations

from royalgambit.engine.actions import Relocation, RescueTargets, StrikeTargets
from royalgambit.engine.match import get_power_chain_state, make_move, play_card
from royalgambit.engine.power_chain import PowerChainState, PowerChainTracker

from support import staged_game


def test_tracker_counts_consecutive_suits() -> None:
    chains = PowerChainTracker()
    assert not chains.is_boosted("white", "hearts")
    chains.record("white", "hearts")
    assert chains.is_boosted("white", "hearts")
    assert chains.record("white", "hearts") == PowerChainState("hearts", 2)

    assert not chains.is_boosted("white", "spades")
    assert chains.record("white", "spades") == PowerChainState("spades", 1)
    assert not chains.is_boosted("white", "hearts")


def test_opponent_never_touches_chain() -> None:
    chains = PowerChainTracker()
    chains.record("white", "hearts")
    chains.record("black", "spades")
    chains.record("black", "hearts")
    assert chains.get("white") == PowerChainState("hearts", 1)
    assert chains.get("black") == PowerChainState("hearts", 1)
    assert not chains.is_boosted("black", "spades")


def test_chain_survives_interleaved_moves() -> None:
    state = staged_game(white_hand=["H5", "H8"], black_hand=["C2"])

    res = play_card(state, "H5", RescueTargets.single("d2", "e3"))
    assert res.ok
    assert res.events[0].payload["boosted"] is False
    assert get_power_chain_state(state, "white") == PowerChainState("hearts", 1)

    assert make_move(state, "d7", "d6").ok
    assert get_power_chain_state(state, "white") == PowerChainState("hearts", 1)

    res = play_card(
        state,
        "H8",
        RescueTargets(moves=(Relocation("b1", "a3"), Relocation("g1", "h3"))),
    )
    assert res.ok, res.error
    assert res.events[0].payload["boosted"] is True
    assert get_power_chain_state(state, "white") == PowerChainState("hearts", 2)


def test_different_suit_resets_chain() -> None:
    state = staged_game(white_hand=["H5", "S3", "H9"], black_hand=[])

    assert play_card(state, "H5", RescueTargets.single("d2", "d3")).ok
    assert make_move(state, "e7", "e5").ok

    assert play_card(state, "S3", StrikeTargets(primary="e5")).ok
    assert get_power_chain_state(state, "white") == PowerChainState("spades", 1)
    assert make_move(state, "d7", "d6").ok

    # Back to Hearts: a single relocation, not boosted.
    res = play_card(state, "H9", RescueTargets.single("c2", "c3"))
    assert res.ok, res.error
    assert res.events[0].payload["boosted"] is False
    assert get_power_chain_state(state, "white") == PowerChainState("hearts", 1)


def test_court_card_continues_chain() -> None:
    state = staged_game(white_hand=["H5"], white_court=["H8", "D3", "S2"], black_hand=["C2"])
    assert play_card(state, "H5", RescueTargets.single("d2", "d3")).ok
    assert make_move(state, "a7", "a6").ok
    res = play_card(
        state,
        "H8",
        RescueTargets(moves=(Relocation("b1", "a3"), Relocation("g1", "h3"))),
        from_court=True,
    )
    assert res.ok, res.error
    assert get_power_chain_state(state, "white") == PowerChainState("hearts", 2)
