from __future__ import annotations

from typing import TYPE_CHECKING

from .actions import (
    Action,
    CardTargets,
    JoustResponseAction,
    MoveAction,
    PlayCardAction,
    RescueTargets,
    StrikeTargets,
    SwapTargets,
    UpgradeTargets,
)
from .events import GameEvent

if TYPE_CHECKING:
    from .match import GameState


def targets_to_dict(t: CardTargets) -> dict[str, object]:
    if isinstance(t, RescueTargets):
        return {"kind": "rescue", "moves": [[m.from_square, m.to_square] for m in t.moves]}
    if isinstance(t, UpgradeTargets):
        return {"kind": "upgrade", "squares": list(t.squares)}
    if isinstance(t, SwapTargets):
        pair = t.opponent_pair
        return {
            "kind": "swap",
            "primary": [t.primary.first, t.primary.second],
            "opponent_pair": [pair.first, pair.second] if pair else None,
        }
    if isinstance(t, StrikeTargets):
        return {"kind": "strike", "primary": t.primary, "secondary": t.secondary, "fallback": t.fallback}
    # should be unreachable
    return {"kind": "unknown"}


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, MoveAction):
        return {
            "type": "move",
            "player": a.player,
            "from": a.from_square,
            "to": a.to_square,
            "promotion": a.promotion,
        }
    if isinstance(a, PlayCardAction):
        return {
            "type": "card",
            "player": a.player,
            "card_id": a.card_id,
            "from_court": a.from_court,
            "targets": targets_to_dict(a.targets),
        }
    if isinstance(a, JoustResponseAction):
        return {
            "type": "joust",
            "player": a.player,
            "defend": a.defend,
            "wager_card_id": a.wager_card_id,
            "spade_block_card_id": a.spade_block_card_id,
        }
    return {"type": "unknown"}


def event_to_dict(e: GameEvent) -> dict[str, object]:
    return {"index": e.index, "type": e.type, "player": e.player, "payload": dict(e.payload)}


def export_event_log(state: GameState) -> dict[str, object]:
    return {"seed": state.seed, "events": [event_to_dict(e) for e in state.log]}


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current game state."""
    pending = state.pending_joust
    return {
        "seed": state.seed,
        "fen": state.adapter.fen(),
        "current_player": state.current_player,
        "winner": state.winner,
        "last_card_played": (
            {"player": state.last_card_played[0], "card": state.last_card_played[1].id}
            if state.last_card_played
            else None
        ),
        "players": {
            name: {"hand": [c.id for c in ps.hand], "court": [c.id for c in ps.court]}
            for name, ps in state.players.items()
        },
        "draw_pile": [c.id for c in state.supply.draw_pile],
        "discard_pile": [c.id for c in state.supply.discard_pile],
        "power_chains": {
            name: {"suit": state.chains.get(name).active_suit, "count": state.chains.get(name).count}
            for name in state.players
        },
        "pending_joust": (
            {"attacker": pending.attacker, "card": pending.card.id, "targets": targets_to_dict(pending.targets)}
            if pending
            else None
        ),
        "events": [event_to_dict(e) for e in state.log],
        "action_log": [action_to_dict(a) for a in state.action_log],
    }
