from __future__ import annotations

from dataclasses import dataclass

from .types import Player, Suit


@dataclass(frozen=True)
class PowerChainState:
    active_suit: Suit | None = None
    count: int = 0


class PowerChainTracker:
    """Per-player run of consecutive same-suit card plays.

    Chess moves and the opponent's plays never touch a player's chain; only
    that player's next card decides whether the run continues or restarts.
    """

    def __init__(self) -> None:
        self._chains: dict[Player, PowerChainState] = {
            "white": PowerChainState(),
            "black": PowerChainState(),
        }

    def get(self, player: Player) -> PowerChainState:
        return self._chains[player]

    def is_boosted(self, player: Player, suit: Suit) -> bool:
        """Evaluated before the play is recorded: 2nd+ consecutive card of a suit."""
        chain = self._chains[player]
        return chain.active_suit == suit and chain.count >= 1

    def record(self, player: Player, suit: Suit) -> PowerChainState:
        chain = self._chains[player]
        if chain.active_suit == suit:
            updated = PowerChainState(active_suit=suit, count=chain.count + 1)
        else:
            updated = PowerChainState(active_suit=suit, count=1)
        self._chains[player] = updated
        return updated

    def reset(self) -> None:
        for player in self._chains:
            self._chains[player] = PowerChainState()
