"""Notifications emitted by the engine.

The engine never calls into its collaborators directly. Every notification
is appended to an :class:`EventQueue`; hosts either drain the queue once per
frame or register listeners that are invoked synchronously on append.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Deque, Dict, List, Tuple, Union


class GameOverReason(Enum):
    BOARD_FULL = "board_full"
    NO_SPACE_FOR_NEW_PIECE = "no_space_for_new_piece"
    TIME_UP = "time_up"
    PLAYER_ENDED = "player_ended"
    CHALLENGE_COMPLETED = "challenge_completed"


@dataclass(frozen=True)
class GameSummary:
    final_score: int
    final_level: int
    total_rows_cleared: int
    line_statistics: Dict[str, int] = field(default_factory=dict)
    reason: GameOverReason = GameOverReason.BOARD_FULL


@dataclass(frozen=True)
class BoardChanged:
    pass


@dataclass(frozen=True)
class ScoreChanged:
    score: int


@dataclass(frozen=True)
class LevelIncreased:
    old_level: int
    new_level: int


@dataclass(frozen=True)
class RowsCleared:
    count: int
    score_gained: int
    cleared_rows: Tuple[int, ...]


@dataclass(frozen=True)
class GameOver:
    summary: GameSummary


@dataclass(frozen=True)
class GameWon:
    summary: GameSummary


@dataclass(frozen=True)
class RemainingTimeChanged:
    remaining_seconds: int


GameEvent = Union[
    BoardChanged,
    ScoreChanged,
    LevelIncreased,
    RowsCleared,
    GameOver,
    GameWon,
    RemainingTimeChanged,
]

Listener = Callable[[GameEvent], None]


class EventQueue:
    def __init__(self, maxlen: int = 1024) -> None:
        # Bounded so an undrained queue cannot grow without limit
        self._pending: Deque[GameEvent] = deque(maxlen=maxlen)
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: GameEvent) -> None:
        self._pending.append(event)
        for listener in list(self._listeners):
            listener(event)

    def drain(self) -> List[GameEvent]:
        events = list(self._pending)
        self._pending.clear()
        return events

    def clear(self) -> None:
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)
