from __future__ import annotations

from dataclasses import dataclass

from .types import PieceType, Player, Square


@dataclass(frozen=True)
class Relocation:
    from_square: Square
    to_square: Square


@dataclass(frozen=True)
class SquarePair:
    first: Square
    second: Square


@dataclass(frozen=True)
class RescueTargets:
    """Hearts: one relocation, two when boosted."""

    moves: tuple[Relocation, ...]

    @staticmethod
    def single(from_square: Square, to_square: Square) -> "RescueTargets":
        return RescueTargets(moves=(Relocation(from_square, to_square),))


@dataclass(frozen=True)
class UpgradeTargets:
    """Diamonds: squares of own pieces to become queens."""

    squares: tuple[Square, ...]

    @staticmethod
    def single(square: Square) -> "UpgradeTargets":
        return UpgradeTargets(squares=(square,))


@dataclass(frozen=True)
class SwapTargets:
    """Clubs: the primary exchange, plus an opponent pair when boosted.

    For a normal swap both primary squares hold own pieces; for an Ace the
    first is own and the second is the opponent's.
    """

    primary: SquarePair
    opponent_pair: SquarePair | None = None

    @staticmethod
    def of(first: Square, second: Square) -> "SwapTargets":
        return SwapTargets(primary=SquarePair(first, second))


@dataclass(frozen=True)
class StrikeTargets:
    """Spades: primary removal, second removal when boosted.

    ``fallback`` is the non-King piece struck instead when a Royal Assassin
    attempt is blocked by a discarded Spade.
    """

    primary: Square
    secondary: Square | None = None
    fallback: Square | None = None


CardTargets = RescueTargets | UpgradeTargets | SwapTargets | StrikeTargets


@dataclass(frozen=True)
class MoveAction:
    player: Player
    from_square: Square
    to_square: Square
    promotion: PieceType | None = None


@dataclass(frozen=True)
class PlayCardAction:
    player: Player
    card_id: str
    targets: CardTargets
    from_court: bool = False


@dataclass(frozen=True)
class JoustResponseAction:
    """Defender's answer to a pending Joust.

    ``wager_card_id`` commits a hand card face-down (``defend`` must be set);
    ``spade_block_card_id`` discards a Spade to stop a Royal Assassin.
    """

    player: Player
    defend: bool = False
    wager_card_id: str | None = None
    spade_block_card_id: str | None = None


Action = MoveAction | PlayCardAction | JoustResponseAction
