"""Joust: the defender's face-down challenge against an attacking card.

The card being played is the attacker's wager. Higher rank wins (Ace high,
suit ignored); a tie fails the attacker. Whatever the outcome, every wagered
card ends up in the discard pile.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .actions import CardTargets
from .effects import EffectPlan
from .types import Card, Player

JoustOutcome = Literal["unchallenged", "declined", "succeeds", "blocked"]


@dataclass(frozen=True)
class PendingJoust:
    attacker: Player
    defender: Player
    card: Card
    from_court: bool
    targets: CardTargets
    plan: EffectPlan


@dataclass(frozen=True)
class JoustResult:
    outcome: JoustOutcome
    attacker_card: Card
    defender_card: Card | None = None
    tied: bool = False
    spade_block: Card | None = None

    @property
    def effect_applies(self) -> bool:
        return self.outcome in ("unchallenged", "declined", "succeeds")


def compare_ranks(attacker: Card, defender: Card) -> int:
    """Positive when the attacker's card ranks higher, zero on a tie."""
    return attacker.value - defender.value


def resolve_wager(attacker_card: Card, defender_card: Card | None, spade_block: Card | None = None) -> JoustResult:
    if defender_card is None:
        return JoustResult(outcome="declined", attacker_card=attacker_card, spade_block=spade_block)
    diff = compare_ranks(attacker_card, defender_card)
    return JoustResult(
        outcome="succeeds" if diff > 0 else "blocked",
        attacker_card=attacker_card,
        defender_card=defender_card,
        tied=diff == 0,
        spade_block=spade_block,
    )
