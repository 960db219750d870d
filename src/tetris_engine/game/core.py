from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import numpy as np

from .errors import InvalidSnapshot, TetrisEngineError
from .events import (
    BoardChanged,
    EventQueue,
    GameEvent,
    GameOver,
    GameOverReason,
    GameSummary,
    GameWon,
    LevelIncreased,
    Listener,
    RemainingTimeChanged,
    RowsCleared,
    ScoreChanged,
)
from .grid import GameGrid
from .pieces import Piece, PieceFactory
from .rules import (
    Difficulty,
    GameMode,
    ScoringRules,
    fall_delay_for_level,
    get_challenge_row_target,
    get_initial_fall_delay,
    get_score_multiplier,
    get_timed_mode_seconds,
)
from .scheduler import PeriodicTimer
from .snapshot import GameSnapshot, PieceState


logger = logging.getLogger(__name__)


class GameStatus(Enum):
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER_BOARD_FULL = "game_over_board_full"
    GAME_OVER_NO_SPACE = "game_over_no_space"
    GAME_OVER_TIME_UP = "game_over_time_up"
    GAME_OVER_PLAYER_ENDED = "game_over_player_ended"
    WON = "won"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES

    @property
    def is_game_over(self) -> bool:
        return self in _GAME_OVER_REASONS


_GAME_OVER_REASONS = {
    GameStatus.GAME_OVER_BOARD_FULL: GameOverReason.BOARD_FULL,
    GameStatus.GAME_OVER_NO_SPACE: GameOverReason.NO_SPACE_FOR_NEW_PIECE,
    GameStatus.GAME_OVER_TIME_UP: GameOverReason.TIME_UP,
    GameStatus.GAME_OVER_PLAYER_ENDED: GameOverReason.PLAYER_ENDED,
}

_TERMINAL_STATUSES = frozenset(_GAME_OVER_REASONS) | {GameStatus.WON}


@dataclass
class GameConfig:
    random_seed: Optional[int] = None
    fast_drop_delay_ms: float = 50.0
    countdown_interval_ms: float = 1000.0


class TetrisEngine:
    """Tick-driven falling-block game session.

    The engine owns the grid, the current and next pieces, the score/level
    counters and two periodic timers (gravity and, in timed mode, the
    countdown). Hosts advance time with :meth:`update` from the same thread
    that forwards player input, so no call is ever re-entered. Player
    actions return ``False`` instead of raising when the game is paused or
    finished, or when the move is blocked.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        factory: Optional[PieceFactory] = None,
        difficulty: Union[Difficulty, int, str] = Difficulty.MEDIUM,
        mode: Union[GameMode, int, str] = GameMode.CLASSIC,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.factory = factory or PieceFactory(seed=self.config.random_seed)
        self.grid = GameGrid()
        self.events = EventQueue()
        self.difficulty = Difficulty.coerce(difficulty)
        self.mode = GameMode.coerce(mode)
        self.status = GameStatus.READY
        self._disposed = False
        self._fall_timer = PeriodicTimer(get_initial_fall_delay(self.difficulty), self._on_fall_timer)
        self._countdown_timer = PeriodicTimer(self.config.countdown_interval_ms, self._on_countdown_timer)
        self._reset_session()

    # ---------- Session lifecycle ----------
    def _reset_session(self) -> None:
        self.grid.clear()
        self.level = 1
        self.score = 0
        self.single_rows_cleared = 0
        self.double_rows_cleared = 0
        self.triple_rows_cleared = 0
        self.tetris_cleared = 0
        self.total_rows_cleared = 0
        self.current_fall_delay_ms = get_initial_fall_delay(self.difficulty)
        self.is_fast_drop_active = False
        self.remaining_time_seconds = (
            get_timed_mode_seconds(self.difficulty) if self.mode == GameMode.TIMED else 0
        )
        self.target_rows = (
            get_challenge_row_target(self.difficulty) if self.mode == GameMode.CHALLENGE else 0
        )
        self.current_piece: Piece = self.factory.create_random()
        self.next_piece: Piece = self.factory.create_random()

    def start_new_game(
        self,
        difficulty: Union[Difficulty, int, str, None] = None,
        mode: Union[GameMode, int, str, None] = None,
    ) -> None:
        self._ensure_alive()
        if difficulty is not None:
            self.difficulty = Difficulty.coerce(difficulty)
        if mode is not None:
            self.mode = GameMode.coerce(mode)
        self._reset_session()
        self.status = GameStatus.RUNNING
        self._sync_timers()
        logger.info("New %s game started (%s)", self.mode.display_name, self.difficulty.display_name)
        self.events.emit(BoardChanged())
        self.events.emit(ScoreChanged(self.score))
        if self.mode == GameMode.TIMED:
            self.events.emit(RemainingTimeChanged(self.remaining_time_seconds))

    def pause_game(self) -> bool:
        if self.status != GameStatus.RUNNING:
            return False
        self.status = GameStatus.PAUSED
        self._sync_timers()
        return True

    def resume_game(self) -> bool:
        if self.status != GameStatus.PAUSED:
            return False
        self.status = GameStatus.RUNNING
        self._sync_timers()
        return True

    def end_game(self) -> bool:
        """Player-initiated termination; allowed while running or paused."""
        if self.status not in (GameStatus.RUNNING, GameStatus.PAUSED):
            return False
        self._end_game(GameStatus.GAME_OVER_PLAYER_ENDED)
        return True

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._fall_timer.cancel()
        self._countdown_timer.cancel()
        self.events.clear()

    def __enter__(self) -> "TetrisEngine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    def _ensure_alive(self) -> None:
        if self._disposed:
            raise TetrisEngineError("Engine has been disposed")

    # ---------- State queries ----------
    @property
    def is_running(self) -> bool:
        return self.status == GameStatus.RUNNING and not self._disposed

    @property
    def is_paused(self) -> bool:
        return self.status == GameStatus.PAUSED

    @property
    def is_game_over(self) -> bool:
        return self.status.is_game_over

    @property
    def is_game_won(self) -> bool:
        return self.status == GameStatus.WON

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def fall_interval_ms(self) -> float:
        """Interval currently driving gravity (fast-drop or level delay)."""
        return self._fall_timer.interval_ms

    @property
    def fall_timer_running(self) -> bool:
        return self._fall_timer.running

    @property
    def countdown_timer_running(self) -> bool:
        return self._countdown_timer.running

    def line_statistics(self) -> Dict[str, int]:
        return {
            "single": self.single_rows_cleared,
            "double": self.double_rows_cleared,
            "triple": self.triple_rows_cleared,
            "tetris": self.tetris_cleared,
        }

    def summary(self, reason: GameOverReason) -> GameSummary:
        return GameSummary(
            final_score=self.score,
            final_level=self.level,
            total_rows_cleared=self.total_rows_cleared,
            line_statistics=self.line_statistics(),
            reason=reason,
        )

    def get_board_with_current_piece(self) -> np.ndarray:
        board = self.grid.clone_state()
        if not self.is_terminal:
            for x, y in self.current_piece.absolute_positions():
                if self.grid.is_within_bounds(x, y):
                    board[y, x] = self.current_piece.color_id
        return board

    def get_state(self) -> np.ndarray:
        # Falling piece overlaid as negative color id
        state = self.grid.clone_state()
        if not self.is_terminal:
            for x, y in self.current_piece.absolute_positions():
                if self.grid.is_within_bounds(x, y):
                    state[y, x] = -self.current_piece.color_id
        return state

    def get_hard_drop_preview(self) -> Piece:
        """Resting position of the current piece, computed on a clone."""
        ghost = self.current_piece.clone()
        while not self.grid.check_collision(ghost.positions_after_move(0, 1)):
            ghost.move(0, 1)
        return ghost

    # ---------- Events ----------
    def add_listener(self, listener: Listener) -> None:
        self.events.subscribe(listener)

    def remove_listener(self, listener: Listener) -> None:
        self.events.unsubscribe(listener)

    def drain_events(self) -> List[GameEvent]:
        return self.events.drain()

    # ---------- Player actions ----------
    def move_left(self) -> bool:
        return self._try_move(-1, 0)

    def move_right(self) -> bool:
        return self._try_move(1, 0)

    def rotate_clockwise(self) -> bool:
        return self._try_rotate(1)

    def rotate_counter_clockwise(self) -> bool:
        return self._try_rotate(-1)

    def activate_fast_drop(self) -> bool:
        if not self.is_running or self.is_fast_drop_active:
            return False
        self.is_fast_drop_active = True
        self._fall_timer.set_interval(self.config.fast_drop_delay_ms)
        return True

    def deactivate_fast_drop(self) -> bool:
        if not self.is_running or not self.is_fast_drop_active:
            return False
        self.is_fast_drop_active = False
        self._fall_timer.set_interval(self.current_fall_delay_ms)
        return True

    def hard_drop(self) -> bool:
        if not self.is_running:
            return False
        while self._move_down():
            pass
        return True

    def _try_move(self, dx: int, dy: int) -> bool:
        if not self.is_running:
            return False
        if self.grid.check_collision(self.current_piece.positions_after_move(dx, dy)):
            return False
        self.current_piece.move(dx, dy)
        self.events.emit(BoardChanged())
        return True

    def _try_rotate(self, direction: int) -> bool:
        if not self.is_running:
            return False
        if self.grid.check_collision(self.current_piece.positions_after_rotation(direction)):
            return False
        if direction > 0:
            self.current_piece.rotate_clockwise()
        else:
            self.current_piece.rotate_counter_clockwise()
        self.events.emit(BoardChanged())
        return True

    # ---------- Gravity, locking and the countdown ----------
    def update(self, dt_ms: float) -> None:
        """Advance both timers by ``dt_ms`` of wall-clock time."""
        if self._disposed or not self.is_running:
            return
        self._countdown_timer.advance(dt_ms)
        self._fall_timer.advance(dt_ms)

    def tick(self) -> bool:
        """One gravity step. Returns True if the piece moved, False if it locked or nothing happened."""
        if not self.is_running:
            return False
        return self._move_down()

    def countdown_tick(self) -> bool:
        if not self.is_running or self.mode != GameMode.TIMED:
            return False
        self.remaining_time_seconds = max(0, self.remaining_time_seconds - 1)
        self.events.emit(RemainingTimeChanged(self.remaining_time_seconds))
        if self.remaining_time_seconds == 0:
            self._end_game(GameStatus.GAME_OVER_TIME_UP)
        return True

    def _on_fall_timer(self) -> None:
        if self._disposed:
            return
        self.tick()

    def _on_countdown_timer(self) -> None:
        if self._disposed:
            return
        self.countdown_tick()

    def _move_down(self) -> bool:
        if self.grid.check_collision(self.current_piece.positions_after_move(0, 1)):
            self._lock_current_piece()
            return False
        self.current_piece.move(0, 1)
        self.events.emit(BoardChanged())
        return True

    def _lock_current_piece(self) -> None:
        piece = self.current_piece
        if not self.grid.add_blocks(piece.absolute_positions(), piece.color_id):
            # Only reachable from a restored piece that overlaps the stack
            logger.warning("Could not lock %s at %s", piece.kind.name, piece.position)
            self._end_game(GameStatus.GAME_OVER_BOARD_FULL)
            return
        logger.debug("Locked %s at %s rotation %d", piece.kind.name, piece.position, piece.rotation)

        cleared = self.grid.remove_full_rows_with_indices()
        if cleared:
            self._award_rows(cleared)

        if (
            self.mode == GameMode.CHALLENGE
            and self.total_rows_cleared >= self.target_rows
            and not self.is_terminal
        ):
            self._win_game()
            return

        if self.grid.is_game_over():
            self._end_game(GameStatus.GAME_OVER_BOARD_FULL)
            return

        self.current_piece = self.next_piece
        self.next_piece = self.factory.create_random()
        if self.grid.check_collision(self.current_piece.absolute_positions()):
            self._end_game(GameStatus.GAME_OVER_NO_SPACE)
            return
        self.events.emit(BoardChanged())

    def _award_rows(self, cleared: List[int]) -> None:
        count = len(cleared)
        gained = self.rules.score_for_lines(count, self.level, get_score_multiplier(self.difficulty))
        self.score += gained
        if count == 1:
            self.single_rows_cleared += 1
        elif count == 2:
            self.double_rows_cleared += 1
        elif count == 3:
            self.triple_rows_cleared += 1
        else:
            self.tetris_cleared += 1
        self.total_rows_cleared += count
        logger.debug("Cleared rows %s for %d points", cleared, gained)
        self.events.emit(RowsCleared(count, gained, tuple(cleared)))
        self.events.emit(ScoreChanged(self.score))

        new_level = self.rules.level_for_rows(self.total_rows_cleared)
        if new_level > self.level:
            old_level = self.level
            self.level = new_level
            self.current_fall_delay_ms = fall_delay_for_level(self.difficulty, self.level)
            if not self.is_fast_drop_active:
                self._fall_timer.set_interval(self.current_fall_delay_ms)
            self.events.emit(LevelIncreased(old_level, new_level))

    def _win_game(self) -> None:
        self.status = GameStatus.WON
        self._sync_timers()
        logger.info("Challenge completed with %d rows, score %d", self.total_rows_cleared, self.score)
        self.events.emit(GameWon(self.summary(GameOverReason.CHALLENGE_COMPLETED)))

    def _end_game(self, status: GameStatus) -> None:
        self.status = status
        self._sync_timers()
        reason = _GAME_OVER_REASONS[status]
        logger.info("Game over (%s), score %d, level %d", reason.value, self.score, self.level)
        self.events.emit(GameOver(self.summary(reason)))

    def _sync_timers(self) -> None:
        """Run the timers iff the game is running."""
        interval = self.config.fast_drop_delay_ms if self.is_fast_drop_active else self.current_fall_delay_ms
        if self._fall_timer.interval_ms != interval:
            self._fall_timer.set_interval(interval)
        if self.is_running:
            self._fall_timer.start()
            if self.mode == GameMode.TIMED:
                self._countdown_timer.start()
            else:
                self._countdown_timer.stop()
        else:
            self._fall_timer.stop()
            self._countdown_timer.stop()

    # ---------- Snapshots ----------
    def create_snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            grid=self.grid.to_cells(),
            grid_rows_cleared=self.grid.rows_cleared,
            current_piece=_piece_state(self.current_piece),
            next_piece=_piece_state(self.next_piece),
            level=self.level,
            difficulty=int(self.difficulty),
            mode=int(self.mode),
            remaining_time_seconds=self.remaining_time_seconds,
            target_rows=self.target_rows,
            total_rows_cleared=self.total_rows_cleared,
            score=self.score,
            single_rows_cleared=self.single_rows_cleared,
            double_rows_cleared=self.double_rows_cleared,
            triple_rows_cleared=self.triple_rows_cleared,
            tetris_cleared=self.tetris_cleared,
            is_paused=self.is_paused,
            current_fall_delay_ms=self.current_fall_delay_ms,
            is_fast_drop_active=self.is_fast_drop_active,
            status=self.status.value,
        )

    def restore_from_snapshot(self, snapshot: Union[GameSnapshot, Dict[str, Any]]) -> None:
        """Rehydrate the session; nothing is modified unless the whole snapshot is valid."""
        self._ensure_alive()
        if not isinstance(snapshot, GameSnapshot):
            snapshot = GameSnapshot.from_dict(snapshot)
        snapshot.validate()
        try:
            status = GameStatus(snapshot.status)
        except ValueError:
            raise InvalidSnapshot(f"Unknown status {snapshot.status!r}") from None
        if snapshot.is_paused and status == GameStatus.RUNNING:
            status = GameStatus.PAUSED

        difficulty = Difficulty.coerce(snapshot.difficulty)
        mode = GameMode.coerce(snapshot.mode)
        current = self.factory.create_from_saved_state(
            snapshot.current_piece.shape_id, snapshot.current_piece.position, snapshot.current_piece.rotation
        )
        upcoming = self.factory.create_from_saved_state(
            snapshot.next_piece.shape_id, snapshot.next_piece.position, snapshot.next_piece.rotation
        )
        grid = GameGrid()
        grid.load_cells(snapshot.grid, snapshot.grid_rows_cleared)

        self.grid = grid
        self.difficulty = difficulty
        self.mode = mode
        self.current_piece = current
        self.next_piece = upcoming
        self.level = snapshot.level
        self.score = snapshot.score
        self.single_rows_cleared = snapshot.single_rows_cleared
        self.double_rows_cleared = snapshot.double_rows_cleared
        self.triple_rows_cleared = snapshot.triple_rows_cleared
        self.tetris_cleared = snapshot.tetris_cleared
        self.total_rows_cleared = snapshot.total_rows_cleared
        self.remaining_time_seconds = snapshot.remaining_time_seconds
        self.target_rows = snapshot.target_rows
        self.current_fall_delay_ms = float(snapshot.current_fall_delay_ms)
        self.is_fast_drop_active = bool(snapshot.is_fast_drop_active)
        self.status = status

        self._sync_timers()
        logger.info("Restored %s game at level %d, score %d", self.mode.display_name, self.level, self.score)
        self.events.emit(BoardChanged())
        self.events.emit(ScoreChanged(self.score))
        if self.mode == GameMode.TIMED:
            self.events.emit(RemainingTimeChanged(self.remaining_time_seconds))


def _piece_state(piece: Piece) -> PieceState:
    return PieceState(shape_id=int(piece.kind), position=piece.position, rotation=piece.rotation)
