from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_engine.game import (
    Difficulty,
    GameConfig,
    GameGrid,
    GameMode,
    TetrisEngine,
    TetrominoType,
)
from tetris_engine.game.rules import get_timed_mode_seconds


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


_COLORS = np.array(
    [
        (30, 30, 36),
        (0, 240, 240),
        (0, 0, 240),
        (240, 160, 0),
        (240, 240, 0),
        (0, 240, 0),
        (160, 0, 240),
        (240, 0, 0),
    ],
    dtype=np.uint8,
)


class TetrisEnv(gym.Env):
    """Step-driven wrapper around :class:`TetrisEngine`.

    Each step applies one action and then one gravity tick, so an episode
    advances in game frames rather than wall-clock time.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(self, difficulty: Union[Difficulty, int, str] = Difficulty.MEDIUM,
                 mode: Union[GameMode, int, str] = GameMode.CLASSIC,
                 render_mode: Optional[str] = None,
                 max_episode_steps: int = 5000,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.engine = TetrisEngine(GameConfig(), difficulty=difficulty, mode=mode)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.terminal_penalty = float(terminal_penalty)

        n_kinds = len(TetrominoType)
        max_time = max(get_timed_mode_seconds(d) for d in Difficulty)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-n_kinds, high=n_kinds,
                                    shape=(GameGrid.HEIGHT, GameGrid.WIDTH), dtype=np.int8),
                "next_piece": spaces.Discrete(n_kinds + 1),
                "level": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(1,), dtype=np.int32),
                "remaining_time": spaces.Box(low=0, high=max_time, shape=(1,), dtype=np.int32),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0
        self._renderer = None
        self._screen = None
        self._font = None

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "board": self.engine.get_state().astype(np.int8),
            "next_piece": int(self.engine.next_piece.kind),
            "level": np.array([self.engine.level], dtype=np.int32),
            "remaining_time": np.array([self.engine.remaining_time_seconds], dtype=np.int32),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.engine.score,
            "level": self.engine.level,
            "rows_cleared": self.engine.total_rows_cleared,
            "line_statistics": self.engine.line_statistics(),
            "status": self.engine.status.value,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.engine.factory.seed(seed)
        options = options or {}
        self.engine.start_new_game(options.get("difficulty"), options.get("mode"))
        self.engine.drain_events()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def _apply(self, action: Action) -> bool:
        """Apply one action; returns True when it already locked the piece."""
        engine = self.engine
        if action == Action.LEFT:
            engine.move_left()
        elif action == Action.RIGHT:
            engine.move_right()
        elif action == Action.ROTATE_CW:
            engine.rotate_clockwise()
        elif action == Action.ROTATE_CCW:
            engine.rotate_counter_clockwise()
        elif action == Action.SOFT_DROP:
            return not engine.tick()
        elif action == Action.HARD_DROP:
            engine.hard_drop()
            return True
        return False

    def step(self, action: Union[int, np.integer]):
        action = Action(int(action))
        score_before = self.engine.score

        locked = self._apply(action)
        if not locked and self.engine.is_running:
            self.engine.tick()
        self.engine.drain_events()

        self._steps += 1
        terminated = bool(self.engine.is_terminal)
        truncated = not terminated and self._steps >= self.max_episode_steps

        reward = float(self.engine.score - score_before)
        if self.engine.is_game_over:
            reward += self.terminal_penalty

        info = self._get_info()
        info["score_delta"] = self.engine.score - score_before
        if self.render_mode == "human":
            self.render()
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            cell = 12
            board = np.abs(self.engine.get_state())
            img = _COLORS[board]
            return np.repeat(np.repeat(img, cell, axis=0), cell, axis=1)
        if self.render_mode == "human":
            import pygame
            from tetris_engine.visualization.renderer import Renderer

            if self._screen is None:
                pygame.init()
                self._renderer = Renderer(cell_size=24)
                self._screen = pygame.display.set_mode(self._renderer.window_size(self.engine.grid.grid.shape))
                self._font = pygame.font.SysFont(None, 24)
            pygame.event.pump()
            self._renderer.draw(self._screen, self.engine, self._font)
        return None

    def close(self) -> None:
        if self._screen is not None:
            import pygame

            pygame.quit()
            self._screen = None
        self._font = None
        self.engine.dispose()
