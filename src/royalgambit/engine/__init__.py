"""Headless rules engine for Royal Gambit: chess with a 52-card overlay.

IMPORTANT: This package must never import a UI toolkit.
"""

from .actions import (
    JoustResponseAction,
    MoveAction,
    PlayCardAction,
    Relocation,
    RescueTargets,
    SquarePair,
    StrikeTargets,
    SwapTargets,
    UpgradeTargets,
)
from .adapter import ChessAdapter, PythonChessAdapter
from .match import (
    GameConfig,
    GameState,
    StepResult,
    get_court,
    get_event_log,
    get_hand,
    get_power_chain_state,
    make_move,
    new_game,
    play_card,
    resolve_joust,
    step,
)
from .types import Card, card_from_id

__all__ = [
    "Card",
    "ChessAdapter",
    "GameConfig",
    "GameState",
    "JoustResponseAction",
    "MoveAction",
    "PlayCardAction",
    "PythonChessAdapter",
    "Relocation",
    "RescueTargets",
    "SquarePair",
    "StepResult",
    "StrikeTargets",
    "SwapTargets",
    "UpgradeTargets",
    "card_from_id",
    "get_court",
    "get_event_log",
    "get_hand",
    "get_power_chain_state",
    "make_move",
    "new_game",
    "play_card",
    "resolve_joust",
    "step",
]
