from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Iterator, Literal, Mapping

from .types import Player

EventType = Literal["move", "card"]


@dataclass(frozen=True)
class GameEvent:
    index: int
    type: EventType
    player: Player
    payload: Mapping[str, object]


class EventLog:
    """Append-only record of completed moves and card plays, in order."""

    def __init__(self) -> None:
        self._events: list[GameEvent] = []

    def append(self, event_type: EventType, player: Player, payload: Mapping[str, object]) -> GameEvent:
        event = GameEvent(
            index=len(self._events),
            type=event_type,
            player=player,
            payload=copy.deepcopy(dict(payload)),
        )
        self._events.append(event)
        return event

    def entries(self) -> tuple[GameEvent, ...]:
        return tuple(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[GameEvent]:
        return iter(tuple(self._events))
