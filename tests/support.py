from __future__ import annotations

from typing import Sequence

from royalgambit.engine.adapter import PythonChessAdapter
from royalgambit.engine.match import GameConfig, GameState, new_game
from royalgambit.engine.types import Card

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


def staged_game(
    fen: str = START_FEN,
    white_hand: Sequence[str] = (),
    black_hand: Sequence[str] = (),
    white_court: Sequence[str] = (),
    black_court: Sequence[str] = (),
    seed: int = 7,
    config: GameConfig | None = None,
) -> GameState:
    """New game whose hands and courts hold exactly the given card ids.

    Dealt cards go to the discard pile and the requested ones are pulled back
    out of the supply, so all 52 cards stay accounted for.
    """
    state = new_game(adapter=PythonChessAdapter(fen), seed=seed, config=config)
    for ps in state.players.values():
        for c in ps.hand + ps.court:
            state.supply.discard_card(c)
        ps.hand.clear()
        ps.court.clear()

    layout = {
        "white": (white_hand, white_court),
        "black": (black_hand, black_court),
    }
    for player, (hand, court) in layout.items():
        ps = state.players[player]  # type: ignore[index]
        ps.hand.extend(_pull(state, cid) for cid in hand)
        ps.court.extend(_pull(state, cid) for cid in court)
    return state


def _pull(state: GameState, card_id: str) -> Card:
    card = state.supply.take(card_id)
    assert card is not None, f"{card_id} already in play"
    return card


def ids(cards: Sequence[Card]) -> list[str]:
    return [c.id for c in cards]


def all_card_ids(state: GameState) -> list[str]:
    return (
        ids(state.supply.draw_pile)
        + ids(state.supply.discard_pile)
        + ids(state.cards_held())
    )


def piece(state: GameState, square: str) -> tuple[str, str] | None:
    p = state.adapter.piece_at(square)
    return (p.type, p.owner) if p else None
