from __future__ import annotations

import random
from typing import Callable, Mapping

from .types import Card, card_from_id, full_deck

TraceFn = Callable[[str, Mapping[str, object]], None]


class CardSupply:
    """Shared 52-card draw pile plus discard pile.

    The top of the draw pile is the end of the list. Cards held by players
    live outside the supply; the caller keeps the union at 52 distinct cards.
    """

    def __init__(self, rng: random.Random | None = None, trace: TraceFn | None = None) -> None:
        self._rng = rng or random.Random()
        self._trace = trace
        self._draw_pile: list[Card] = []
        self._discard_pile: list[Card] = []
        self.reset()

    @property
    def draw_pile(self) -> tuple[Card, ...]:
        return tuple(self._draw_pile)

    @property
    def discard_pile(self) -> tuple[Card, ...]:
        return tuple(self._discard_pile)

    @property
    def draw_pile_size(self) -> int:
        return len(self._draw_pile)

    @property
    def discard_pile_size(self) -> int:
        return len(self._discard_pile)

    def reset(self) -> None:
        self._discard_pile = []
        self._draw_pile = full_deck()
        self._rng.shuffle(self._draw_pile)

    def draw_card(self) -> Card | None:
        if not self._draw_pile:
            self._reshuffle_discard()
        if not self._draw_pile:
            self._emit("SUPPLY_EXHAUSTED", {})
            return None
        return self._draw_pile.pop()

    def deal_cards(self, n: int) -> list[Card]:
        dealt: list[Card] = []
        for _ in range(max(0, n)):
            card = self.draw_card()
            if card is None:
                break
            dealt.append(card)
        return dealt

    def discard_card(self, card: Card) -> None:
        self._discard_pile.append(card)

    def take(self, card_id: str) -> Card | None:
        """Pull a specific card out of either pile, or None if neither holds it."""
        wanted = card_from_id(card_id)
        for pile in (self._draw_pile, self._discard_pile):
            if wanted in pile:
                pile.remove(wanted)
                return wanted
        return None

    def _reshuffle_discard(self) -> None:
        if not self._discard_pile:
            return
        self._draw_pile = self._discard_pile
        self._discard_pile = []
        self._rng.shuffle(self._draw_pile)
        self._emit("DECK_RESHUFFLED", {"size": len(self._draw_pile)})

    def _emit(self, event_type: str, payload: Mapping[str, object]) -> None:
        if self._trace is not None:
            self._trace(event_type, payload)
