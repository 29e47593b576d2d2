"""Suit effect engine: Rescue, Upgrade, Swap and Strike.

Planning is side-effect free. ``plan_effect`` validates the targets against a
scratch view of the board and returns either an ``EffectPlan`` (the exact
mutation sequence to issue through the adapter) or a ``Rejection``. Boosted
effects validate their second part against the board as it will look after
the first part, so a plan is always applicable as a whole.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping

from .actions import CardTargets, RescueTargets, SquarePair, StrikeTargets, SwapTargets, UpgradeTargets
from .adapter import ChessAdapter
from .types import Card, EffectKind, Piece, Player, Square, opponent

TraceFn = Callable[[str, Mapping[str, object]], None]


@dataclass(frozen=True)
class Removal:
    square: Square


@dataclass(frozen=True)
class Placement:
    square: Square
    piece: Piece


Mutation = Removal | Placement


@dataclass(frozen=True)
class Rejection:
    message: str


@dataclass(frozen=True)
class EffectPlan:
    kind: EffectKind
    card: Card
    player: Player
    boosted: bool
    mutations: tuple[Mutation, ...]
    touches_opponent: bool = False
    # Royal Assassin: the King square under attack and the mutations used
    # instead when the defender blocks it with a Spade.
    royal_target: Square | None = None
    fallback_mutations: tuple[Mutation, ...] = field(default_factory=tuple)


class _BoardView:
    """Copy-on-write overlay of the adapter's board used while planning."""

    def __init__(self, adapter: ChessAdapter) -> None:
        self._adapter = adapter
        self._overlay: dict[Square, Piece | None] = {}
        self.mutations: list[Mutation] = []

    def valid(self, square: Square) -> bool:
        return self._adapter.is_valid_square(square)

    def piece_at(self, square: Square) -> Piece | None:
        if square in self._overlay:
            return self._overlay[square]
        return self._adapter.piece_at(square)

    def squares_of(self, owner: Player) -> list[Square]:
        squares = [sq for sq in self._adapter.squares_of(owner) if sq not in self._overlay]
        for sq, p in self._overlay.items():
            if p is not None and p.owner == owner:
                squares.append(sq)
        return sorted(squares)

    def relocate(self, from_square: Square, to_square: Square) -> None:
        piece = self.piece_at(from_square)
        assert piece is not None
        self._remove(from_square)
        self._place(to_square, piece)

    def exchange(self, a: Square, b: Square) -> None:
        pa = self.piece_at(a)
        pb = self.piece_at(b)
        assert pa is not None and pb is not None
        self._remove(a)
        self._remove(b)
        self._place(a, pb)
        self._place(b, pa)

    def promote(self, square: Square) -> None:
        piece = self.piece_at(square)
        assert piece is not None
        self._remove(square)
        self._place(square, Piece(type="queen", owner=piece.owner))

    def _remove(self, square: Square) -> None:
        self._overlay[square] = None
        self.mutations.append(Removal(square))

    def _place(self, square: Square, piece: Piece) -> None:
        self._overlay[square] = piece
        self.mutations.append(Placement(square, piece))


def _require(cond: bool, msg: str) -> Rejection | None:
    if not cond:
        return Rejection(msg)
    return None


def _owned(view: _BoardView, square: Square, owner: Player) -> bool:
    if not view.valid(square):
        return False
    piece = view.piece_at(square)
    return piece is not None and piece.owner == owner


def _plan_rescue(
    view: _BoardView, player: Player, card: Card, targets: CardTargets, boosted: bool
) -> Rejection | None:
    if not isinstance(targets, RescueTargets):
        return Rejection("Hearts needs rescue targets.")
    movable = [
        sq for sq in view.squares_of(player)
        if card.is_ace or view.piece_at(sq) != Piece("king", player)
    ]
    expected = max(1, min(2, len(movable))) if boosted else 1
    chk = _require(len(targets.moves) == expected, f"Rescue needs exactly {expected} piece(s) to move.")
    if chk:
        return chk

    arrived: set[Square] = set()
    for mv in targets.moves:
        chk = (
            _require(view.valid(mv.from_square) and view.valid(mv.to_square), "Rescue squares must be on the board.")
            or _require(_owned(view, mv.from_square, player), "Rescue one of your own pieces.")
            or _require(mv.from_square not in arrived, "Each rescued piece moves once.")
        )
        if chk:
            return chk
        piece = view.piece_at(mv.from_square)
        assert piece is not None
        chk = (
            _require(piece.type != "king" or card.is_ace, "Only an Ace can rescue the King.")
            or _require(view.piece_at(mv.to_square) is None, "Rescue destination must be empty.")
        )
        if chk:
            return chk
        view.relocate(mv.from_square, mv.to_square)
        arrived.add(mv.to_square)
    return None


def _upgradable(piece: Piece | None, player: Player, ace: bool) -> bool:
    if piece is None or piece.owner != player:
        return False
    if piece.type == "pawn":
        return True
    return ace and piece.type not in ("king", "queen")


def _plan_upgrade(
    view: _BoardView, player: Player, card: Card, targets: CardTargets, boosted: bool
) -> Rejection | None:
    if not isinstance(targets, UpgradeTargets):
        return Rejection("Diamonds needs upgrade targets.")
    own = view.squares_of(player)
    pawns = [sq for sq in own if view.piece_at(sq) == Piece("pawn", player)]
    others = [sq for sq in own if sq not in pawns and _upgradable(view.piece_at(sq), player, True)]

    expected = 1
    if boosted:
        if card.is_ace:
            expected = 2 if pawns and len(pawns) + len(others) >= 2 else 1
        else:
            expected = 2 if len(pawns) >= 2 else 1
    chk = _require(len(targets.squares) == expected, f"Upgrade needs exactly {expected} target(s).")
    if chk:
        return chk
    chk = _require(len(set(targets.squares)) == len(targets.squares), "Upgrade targets must differ.")
    if chk:
        return chk

    for sq in targets.squares:
        chk = _require(_owned(view, sq, player), "Upgrade one of your own pieces.")
        if chk:
            return chk
        piece = view.piece_at(sq)
        if card.is_ace:
            chk = _require(_upgradable(piece, player, True), "The King and queens cannot be upgraded.")
        else:
            chk = _require(_upgradable(piece, player, False), "Only an Ace upgrades pieces other than pawns.")
        if chk:
            return chk

    if len(targets.squares) == 2:
        chk = _require(
            any(view.piece_at(sq) == Piece("pawn", player) for sq in targets.squares),
            "A double upgrade needs at least one pawn.",
        )
        if chk:
            return chk

    for sq in targets.squares:
        view.promote(sq)
    return None


def _check_pair(view: _BoardView, pair: SquarePair, first_owner: Player, second_owner: Player) -> bool:
    return (
        pair.first != pair.second
        and _owned(view, pair.first, first_owner)
        and _owned(view, pair.second, second_owner)
    )


def _plan_swap(
    view: _BoardView, player: Player, card: Card, targets: CardTargets, boosted: bool
) -> tuple[Rejection | None, bool]:
    if not isinstance(targets, SwapTargets):
        return Rejection("Clubs needs swap targets."), False
    enemy = opponent(player)
    touches = False

    if card.is_ace:
        chk = _require(
            _check_pair(view, targets.primary, player, enemy),
            "An Ace swap exchanges one of your pieces with an opponent piece.",
        )
        touches = True
    else:
        chk = _require(_check_pair(view, targets.primary, player, player), "Swap two of your own pieces.")
    if chk:
        return chk, touches
    view.exchange(targets.primary.first, targets.primary.second)

    if not boosted:
        return _require(targets.opponent_pair is None, "Only a boosted swap exchanges opponent pieces."), touches

    if targets.opponent_pair is None:
        return _require(len(view.squares_of(enemy)) < 2, "A boosted swap needs an opponent pair."), touches
    chk = _require(_check_pair(view, targets.opponent_pair, enemy, enemy), "Swap two opponent pieces.")
    if chk:
        return chk, True
    view.exchange(targets.opponent_pair.first, targets.opponent_pair.second)
    return None, True


@dataclass(frozen=True)
class _StrikeOutline:
    removals: tuple[Square, ...]
    royal_target: Square | None
    fallback: tuple[Square, ...]


def _plan_strike(
    view: _BoardView,
    adapter: ChessAdapter,
    player: Player,
    card: Card,
    targets: CardTargets,
    boosted: bool,
) -> Rejection | _StrikeOutline:
    if not isinstance(targets, StrikeTargets):
        return Rejection("Spades needs strike targets.")
    enemy = opponent(player)
    king = Piece("king", enemy)

    def strikable(sq: Square) -> Rejection | None:
        chk = _require(_owned(view, sq, enemy), "Strike an opponent piece.")
        if chk:
            return chk
        if view.piece_at(sq) == king:
            return _require(card.is_ace, "Only the Ace of Spades can strike the King.") or _require(
                adapter.is_in_check(enemy), "The King can only be struck while in check."
            )
        return None

    chosen = [targets.primary]
    chk = strikable(targets.primary)
    if chk:
        return chk

    if boosted:
        spare = [sq for sq in view.squares_of(enemy) if sq != targets.primary and view.piece_at(sq) != king]
        if targets.secondary is None:
            chk = _require(not spare, "A boosted strike needs a second target.")
        else:
            chk = _require(targets.secondary != targets.primary, "Strike two different pieces.") or strikable(
                targets.secondary
            )
            chosen.append(targets.secondary)
        if chk:
            return chk
    elif targets.secondary is not None:
        return Rejection("Only a boosted strike removes a second piece.")

    royal = next((sq for sq in chosen if view.piece_at(sq) == king), None)
    if royal is None:
        chk = _require(targets.fallback is None, "A fallback target only applies to a Royal Assassin.")
        if chk:
            return chk
        return _StrikeOutline(removals=tuple(chosen), royal_target=None, fallback=())

    candidates = [
        sq for sq in view.squares_of(enemy) if view.piece_at(sq) != king and sq not in chosen
    ]
    if targets.fallback is None:
        chk = _require(not candidates, "Name a fallback piece in case the Royal Assassin is blocked.")
        if chk:
            return chk
        return _StrikeOutline(removals=tuple(chosen), royal_target=royal, fallback=())
    chk = _require(targets.fallback in candidates, "The fallback must be another non-King opponent piece.")
    if chk:
        return chk
    rest = tuple(sq for sq in chosen if sq != royal)
    return _StrikeOutline(removals=tuple(chosen), royal_target=royal, fallback=(targets.fallback,) + rest)


def plan_effect(
    adapter: ChessAdapter, player: Player, card: Card, targets: CardTargets, boosted: bool
) -> EffectPlan | Rejection:
    """Validate ``targets`` for ``card`` and return the mutations to apply."""
    view = _BoardView(adapter)
    kind = card.effect

    if kind == "strike":
        outline = _plan_strike(view, adapter, player, card, targets, boosted)
        if isinstance(outline, Rejection):
            return outline
        plan = EffectPlan(
            kind=kind,
            card=card,
            player=player,
            boosted=boosted,
            mutations=tuple(Removal(sq) for sq in outline.removals),
            touches_opponent=True,
            royal_target=outline.royal_target,
            fallback_mutations=tuple(Removal(sq) for sq in outline.fallback),
        )
    else:
        touches = False
        if kind == "rescue":
            err = _plan_rescue(view, player, card, targets, boosted)
        elif kind == "upgrade":
            err = _plan_upgrade(view, player, card, targets, boosted)
        else:
            err, touches = _plan_swap(view, player, card, targets, boosted)
        if err:
            return err
        plan = EffectPlan(
            kind=kind,
            card=card,
            player=player,
            boosted=boosted,
            mutations=tuple(view.mutations),
            touches_opponent=touches,
        )

    # A card never hands the opponent a King capture on the next chess move.
    if _leaves_king_attacked(adapter, player, plan.mutations):
        return Rejection("That would leave your King in check.")
    return plan


def _leaves_king_attacked(adapter: ChessAdapter, player: Player, mutations: tuple[Mutation, ...]) -> bool:
    scratch = adapter.copy()
    apply_mutations(scratch, mutations)
    return scratch.is_in_check(player)


def apply_mutations(adapter: ChessAdapter, mutations: Iterable[Mutation], trace: TraceFn | None = None) -> None:
    """Issue a validated mutation sequence through the adapter."""
    for m in mutations:
        if isinstance(m, Removal):
            removed = adapter.remove_piece_at(m.square)
            if trace is not None and removed is not None:
                trace("PIECE_REMOVED", {"square": m.square, "piece": removed.type, "owner": removed.owner})
        else:
            adapter.place_piece(m.square, m.piece.type, m.piece.owner)
            if trace is not None:
                trace("PIECE_PLACED", {"square": m.square, "piece": m.piece.type, "owner": m.piece.owner})
