from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Player = Literal["white", "black"]
Suit = Literal["hearts", "diamonds", "clubs", "spades"]
Rank = Literal["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]
PieceType = Literal["pawn", "knight", "bishop", "rook", "queen", "king"]
Square = str

EffectKind = Literal["rescue", "upgrade", "swap", "strike"]

SUITS: tuple[Suit, ...] = ("hearts", "diamonds", "clubs", "spades")
RANKS: tuple[Rank, ...] = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")

# Joust order: Ace high, suit ignored.
RANK_VALUES: dict[Rank, int] = {r: i + 2 for i, r in enumerate(RANKS)}

SUIT_EFFECTS: dict[Suit, EffectKind] = {
    "hearts": "rescue",
    "diamonds": "upgrade",
    "clubs": "swap",
    "spades": "strike",
}

_SUIT_BY_LETTER: dict[str, Suit] = {s[0].upper(): s for s in SUITS}


def opponent(player: Player) -> Player:
    return "black" if player == "white" else "white"


@dataclass(frozen=True)
class Card:
    """Immutable playing card; identity is the id (``H5``, ``SA``, ``D10``)."""

    suit: Suit
    rank: Rank

    @property
    def id(self) -> str:
        return f"{self.suit[0].upper()}{self.rank}"

    @property
    def value(self) -> int:
        return RANK_VALUES[self.rank]

    @property
    def is_ace(self) -> bool:
        return self.rank == "A"

    @property
    def effect(self) -> EffectKind:
        return SUIT_EFFECTS[self.suit]

    def __str__(self) -> str:
        return self.id


def card_from_id(card_id: str) -> Card:
    if len(card_id) < 2:
        raise ValueError(f"Invalid card id: {card_id!r}")
    suit = _SUIT_BY_LETTER.get(card_id[0].upper())
    rank = card_id[1:].upper()
    if suit is None or rank not in RANK_VALUES:
        raise ValueError(f"Invalid card id: {card_id!r}")
    return Card(suit=suit, rank=rank)  # type: ignore[arg-type]


def full_deck() -> list[Card]:
    """All 52 cards, suit-major, in a fixed order."""
    return [Card(suit=s, rank=r) for s in SUITS for r in RANKS]


@dataclass(frozen=True)
class Piece:
    type: PieceType
    owner: Player
