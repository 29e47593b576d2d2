from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, Literal, Mapping

from .actions import Action, CardTargets, JoustResponseAction, MoveAction, PlayCardAction
from .adapter import ChessAdapter, PythonChessAdapter
from .effects import EffectPlan, Mutation, Rejection, apply_mutations, plan_effect
from .events import EventLog, GameEvent
from .joust import JoustResult, PendingJoust, resolve_wager
from .power_chain import PowerChainState, PowerChainTracker
from .serialize import targets_to_dict
from .supply import CardSupply
from .types import Card, PieceType, Player, Square, opponent

ErrorCode = Literal[
    "InvalidTurn",
    "CardNotFound",
    "IllegalTarget",
    "NoLegalChessMove",
    "JoustNotPending",
    "NoCardToWager",
    "JoustPending",
    "GameOver",
]

TraceListener = Callable[[str, Mapping[str, object]], None]


@dataclass(frozen=True)
class GameConfig:
    hand_size: int = 5
    court_size: int = 3
    # Rules text says "draw at the start of your turn"; default keeps
    # replenishment to card turns only.
    draw_after_move: bool = False
    starting_fen: str | None = None


@dataclass
class PlayerState:
    hand: list[Card] = field(default_factory=list)
    court: list[Card] = field(default_factory=list)


@dataclass
class StepResult:
    """Outcome of one action.

    A card play that opens a Joust returns ok=True with pending_joust=True. The
    turn has not passed yet: it passes when resolve_joust completes the play.
    """

    ok: bool
    events: list[GameEvent]
    error: str | None = None
    code: ErrorCode | None = None
    joust: JoustResult | None = None
    pending_joust: bool = False


@dataclass
class GameState:
    adapter: ChessAdapter
    config: GameConfig
    seed: int | None
    rng: random.Random
    supply: CardSupply
    players: dict[Player, PlayerState]
    chains: PowerChainTracker = field(default_factory=PowerChainTracker)
    log: EventLog = field(default_factory=EventLog)
    current_player: Player = "white"
    winner: Player | None = None
    pending_joust: PendingJoust | None = None
    last_card_played: tuple[Player, Card] | None = None
    action_log: list[Action] = field(default_factory=list)
    listeners: list[TraceListener] = field(default_factory=list)

    def trace(self, event_type: str, payload: Mapping[str, object]) -> None:
        for listener in list(self.listeners):
            listener(event_type, dict(payload))

    def cards_held(self) -> list[Card]:
        held: list[Card] = []
        for ps in self.players.values():
            held.extend(ps.hand)
            held.extend(ps.court)
        return held


def _fail(state: GameState, code: ErrorCode, msg: str) -> StepResult:
    state.trace("ACTION_REJECTED", {"code": code, "error": msg})
    return StepResult(ok=False, events=[], error=msg, code=code)


def _find(cards: list[Card], card_id: str) -> Card | None:
    for c in cards:
        if c.id == card_id:
            return c
    return None


def _top_up_hand(state: GameState, player: Player) -> None:
    hand = state.players[player].hand
    while len(hand) < state.config.hand_size:
        card = state.supply.draw_card()
        if card is None:
            return
        hand.append(card)
        state.trace("CARD_DRAWN", {"player": player, "card_id": card.id})


def _sync_turn(state: GameState) -> None:
    # The adapter is ground truth for the side to move.
    state.current_player = state.adapter.current_turn_owner()


def _check_king_struck(state: GameState, attacker: Player, reason: str = "king_struck") -> None:
    if state.winner is not None:
        return
    if state.adapter.king_square(opponent(attacker)) is None:
        state.winner = attacker
        state.trace("GAME_ENDED", {"winner": attacker, "reason": reason})


def _make_move(state: GameState, action: MoveAction) -> StepResult:
    if action.player != state.current_player:
        return _fail(state, "InvalidTurn", "Not your turn.")
    if state.pending_joust is not None:
        return _fail(state, "JoustPending", "A Joust must be resolved first.")
    if not state.adapter.apply_move(action.from_square, action.to_square, action.promotion):
        return _fail(state, "NoLegalChessMove", "Illegal chess move.")

    event = state.log.append(
        "move",
        action.player,
        {"from": action.from_square, "to": action.to_square, "promotion": action.promotion},
    )
    # A King left en prise after a blocked card play can be taken by a chess move.
    _check_king_struck(state, action.player, reason="king_captured")
    if state.config.draw_after_move:
        _top_up_hand(state, action.player)
    _sync_turn(state)
    state.trace("TURN_PASSED", {"player": state.current_player})
    return StepResult(ok=True, events=[event])


def _commit_card_play(
    state: GameState,
    player: Player,
    card: Card,
    from_court: bool,
    targets: CardTargets,
    plan: EffectPlan,
    joust: JoustResult,
    mutations: tuple[Mutation, ...],
) -> StepResult:
    apply_mutations(state.adapter, mutations, state.trace)

    ps = state.players[player]
    source = ps.court if from_court else ps.hand
    source.remove(card)
    if from_court and len(ps.court) < state.config.court_size:
        replacement = state.supply.draw_card()
        if replacement is not None:
            ps.court.append(replacement)
            state.trace("COURT_REPLENISHED", {"player": player, "card_id": replacement.id})

    chain = state.chains.record(player, card.suit)
    state.last_card_played = (player, card)
    event = state.log.append(
        "card",
        player,
        {
            "card": card.id,
            "source": "court" if from_court else "hand",
            "effect": plan.kind,
            "ace": card.is_ace,
            "boosted": plan.boosted,
            "targets": targets_to_dict(targets),
            "joust": joust.outcome,
            "defender_card": joust.defender_card.id if joust.defender_card else None,
            "spade_block": joust.spade_block.id if joust.spade_block else None,
            "applied": bool(mutations),
            "chain": {"suit": chain.active_suit, "count": chain.count},
        },
    )
    _check_king_struck(state, player)

    _top_up_hand(state, player)
    # Discarded last so the played card cannot come straight back.
    state.supply.discard_card(card)
    state.adapter.pass_turn()
    _sync_turn(state)
    state.trace("TURN_PASSED", {"player": state.current_player})
    return StepResult(ok=True, events=[event], joust=joust)


def _play_card(state: GameState, action: PlayCardAction) -> StepResult:
    if action.player != state.current_player:
        return _fail(state, "InvalidTurn", "Not your turn.")
    if state.pending_joust is not None:
        return _fail(state, "JoustPending", "A Joust must be resolved first.")

    ps = state.players[action.player]
    source = ps.court if action.from_court else ps.hand
    card = _find(source, action.card_id)
    if card is None:
        where = "court" if action.from_court else "hand"
        return _fail(state, "CardNotFound", f"{action.card_id} is not in your {where}.")

    boosted = state.chains.is_boosted(action.player, card.suit)
    plan = plan_effect(state.adapter, action.player, card, action.targets, boosted)
    if isinstance(plan, Rejection):
        return _fail(state, "IllegalTarget", plan.message)

    defender = opponent(action.player)
    if plan.touches_opponent and state.players[defender].hand:
        state.pending_joust = PendingJoust(
            attacker=action.player,
            defender=defender,
            card=card,
            from_court=action.from_court,
            targets=action.targets,
            plan=plan,
        )
        state.trace(
            "JOUST_OFFERED",
            {"attacker": action.player, "defender": defender, "royal": plan.royal_target is not None},
        )
        return StepResult(ok=True, events=[], pending_joust=True)

    joust = JoustResult(outcome="unchallenged", attacker_card=card)
    return _commit_card_play(
        state, action.player, card, action.from_court, action.targets, plan, joust, plan.mutations
    )


def _resolve_joust(state: GameState, action: JoustResponseAction) -> StepResult:
    pending = state.pending_joust
    if pending is None:
        return _fail(state, "JoustNotPending", "No Joust is pending.")
    if action.player != pending.defender:
        return _fail(state, "InvalidTurn", "Only the defender answers a Joust.")

    hand = state.players[pending.defender].hand
    wager: Card | None = None
    if action.defend:
        if not hand:
            return _fail(state, "NoCardToWager", "No hand card to wager.")
        if action.wager_card_id is None:
            return _fail(state, "NoCardToWager", "Choose a hand card to wager.")
        wager = _find(hand, action.wager_card_id)
        if wager is None:
            return _fail(state, "CardNotFound", f"{action.wager_card_id} is not in your hand.")
    elif action.wager_card_id is not None:
        return _fail(state, "IllegalTarget", "Set defend to wager a card.")

    block: Card | None = None
    if action.spade_block_card_id is not None:
        if pending.plan.royal_target is None:
            return _fail(state, "IllegalTarget", "A Spade block only stops a Royal Assassin.")
        block = _find(hand, action.spade_block_card_id)
        if block is None:
            return _fail(state, "CardNotFound", f"{action.spade_block_card_id} is not in your hand.")
        if block.suit != "spades":
            return _fail(state, "IllegalTarget", "Only a Spade blocks the Royal Assassin.")
        if block == wager:
            return _fail(state, "IllegalTarget", "The blocking Spade cannot also be the wager.")

    for c in (wager, block):
        if c is not None:
            hand.remove(c)
            state.supply.discard_card(c)

    result = resolve_wager(pending.card, wager, block)
    mutations: tuple[Mutation, ...] = ()
    if result.effect_applies:
        mutations = pending.plan.fallback_mutations if block is not None else pending.plan.mutations
    state.trace(
        "JOUST_RESOLVED",
        {
            "outcome": result.outcome,
            "tied": result.tied,
            "attacker_card": pending.card.id,
            "defender_card": wager.id if wager else None,
            "spade_block": block.id if block else None,
        },
    )

    state.pending_joust = None
    return _commit_card_play(
        state, pending.attacker, pending.card, pending.from_court, pending.targets, pending.plan, result, mutations
    )


def step(state: GameState, action: Action) -> StepResult:
    """Apply a single action; on failure nothing changes."""
    if state.winner is not None:
        return _fail(state, "GameOver", "Game already ended.")

    if isinstance(action, MoveAction):
        result = _make_move(state, action)
    elif isinstance(action, PlayCardAction):
        result = _play_card(state, action)
    elif isinstance(action, JoustResponseAction):
        result = _resolve_joust(state, action)
    else:
        return _fail(state, "IllegalTarget", "Unknown action.")

    # Only accepted actions are logged, so replaying the log reproduces the game.
    if result.ok:
        state.action_log.append(action)
    return result


def new_game(
    adapter: ChessAdapter | None = None,
    seed: int | None = None,
    config: GameConfig | None = None,
    listeners: Iterable[TraceListener] = (),
) -> GameState:
    cfg = config or GameConfig()
    rng = random.Random(seed)
    board = adapter if adapter is not None else PythonChessAdapter(cfg.starting_fen)
    subscribers = list(listeners)

    def trace(event_type: str, payload: Mapping[str, object]) -> None:
        for listener in list(subscribers):
            listener(event_type, dict(payload))

    supply = CardSupply(rng=rng, trace=trace)
    white = PlayerState(hand=supply.deal_cards(cfg.hand_size))
    black = PlayerState(hand=supply.deal_cards(cfg.hand_size))
    white.court = supply.deal_cards(cfg.court_size)
    black.court = supply.deal_cards(cfg.court_size)

    state = GameState(
        adapter=board,
        config=cfg,
        seed=seed,
        rng=rng,
        supply=supply,
        players={"white": white, "black": black},
        listeners=subscribers,
    )
    _sync_turn(state)
    state.trace("GAME_STARTED", {"seed": seed, "current_player": state.current_player})
    return state


def replay(
    seed: int | None,
    actions: Iterable[Action],
    config: GameConfig | None = None,
    adapter: ChessAdapter | None = None,
) -> GameState:
    state = new_game(adapter=adapter, seed=seed, config=config)
    for a in actions:
        step(state, a)
        if state.winner is not None:
            break
    return state


def make_move(state: GameState, from_square: Square, to_square: Square, promotion: PieceType | None = None) -> StepResult:
    return step(state, MoveAction(state.current_player, from_square, to_square, promotion))


def play_card(state: GameState, card_id: str, targets: CardTargets, from_court: bool = False) -> StepResult:
    return step(state, PlayCardAction(state.current_player, card_id, targets, from_court))


def resolve_joust(
    state: GameState,
    defend: bool,
    wager_card_id: str | None = None,
    spade_block_card_id: str | None = None,
) -> StepResult:
    defender = state.pending_joust.defender if state.pending_joust else opponent(state.current_player)
    return step(state, JoustResponseAction(defender, defend, wager_card_id, spade_block_card_id))


def get_hand(state: GameState, player: Player) -> tuple[Card, ...]:
    return tuple(state.players[player].hand)


def get_court(state: GameState, player: Player) -> tuple[Card, ...]:
    return tuple(state.players[player].court)


def get_power_chain_state(state: GameState, player: Player) -> PowerChainState:
    return state.chains.get(player)


def get_event_log(state: GameState) -> tuple[GameEvent, ...]:
    return state.log.entries()


def is_game_over(state: GameState) -> bool:
    return state.winner is not None or state.adapter.is_checkmate() or state.adapter.is_stalemate()


def get_winner(state: GameState) -> Player | None:
    if state.winner is not None:
        return state.winner
    if state.adapter.is_checkmate():
        return opponent(state.adapter.current_turn_owner())
    return None
