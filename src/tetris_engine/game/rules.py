from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Union


logger = logging.getLogger(__name__)


class Difficulty(IntEnum):
    EASY = 0
    MEDIUM = 1
    HARD = 2

    @classmethod
    def coerce(cls, value: Union["Difficulty", int, str, None]) -> "Difficulty":
        """Resolve a member, value or name; anything unknown becomes MEDIUM."""
        resolved = _coerce_enum(cls, value)
        if resolved is None:
            logger.warning("Unknown difficulty %r, falling back to MEDIUM", value)
            return cls.MEDIUM
        return resolved

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @property
    def description(self) -> str:
        return _DIFFICULTY_DESCRIPTIONS[self]


class GameMode(IntEnum):
    CLASSIC = 0
    TIMED = 1
    CHALLENGE = 2

    @classmethod
    def coerce(cls, value: Union["GameMode", int, str, None]) -> "GameMode":
        """Resolve a member, value or name; anything unknown becomes CLASSIC."""
        resolved = _coerce_enum(cls, value)
        if resolved is None:
            logger.warning("Unknown game mode %r, falling back to CLASSIC", value)
            return cls.CLASSIC
        return resolved

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @property
    def description(self) -> str:
        return _MODE_DESCRIPTIONS[self]


def _coerce_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        return enum_cls.__members__.get(value.strip().upper())
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return enum_cls(value)
        except ValueError:
            return None
    return None


_DIFFICULTY_DESCRIPTIONS = {
    Difficulty.EASY: "Slower falling speed, standard scoring",
    Difficulty.MEDIUM: "Standard falling speed, 1.5x scoring",
    Difficulty.HARD: "Faster falling speed, double scoring",
}

_MODE_DESCRIPTIONS = {
    GameMode.CLASSIC: "Play until the board fills up",
    GameMode.TIMED: "Score as much as possible before the clock runs out",
    GameMode.CHALLENGE: "Clear the target number of rows to win",
}


@dataclass(frozen=True)
class DifficultyProfile:
    initial_fall_delay_ms: float
    delay_reduction_per_level_ms: float
    minimum_fall_delay_ms: float
    score_multiplier: float
    timed_mode_seconds: int
    challenge_row_target: int


DIFFICULTY_PROFILES: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(1200.0, 40.0, 150.0, 1.0, 180, 20),
    Difficulty.MEDIUM: DifficultyProfile(1000.0, 50.0, 100.0, 1.5, 120, 40),
    Difficulty.HARD: DifficultyProfile(800.0, 60.0, 80.0, 2.0, 90, 60),
}


def get_initial_fall_delay(difficulty: Difficulty) -> float:
    return DIFFICULTY_PROFILES[Difficulty.coerce(difficulty)].initial_fall_delay_ms


def get_delay_reduction_per_level(difficulty: Difficulty) -> float:
    return DIFFICULTY_PROFILES[Difficulty.coerce(difficulty)].delay_reduction_per_level_ms


def get_minimum_fall_delay(difficulty: Difficulty) -> float:
    return DIFFICULTY_PROFILES[Difficulty.coerce(difficulty)].minimum_fall_delay_ms


def get_score_multiplier(difficulty: Difficulty) -> float:
    return DIFFICULTY_PROFILES[Difficulty.coerce(difficulty)].score_multiplier


def get_timed_mode_seconds(difficulty: Difficulty) -> int:
    return DIFFICULTY_PROFILES[Difficulty.coerce(difficulty)].timed_mode_seconds


def get_challenge_row_target(difficulty: Difficulty) -> int:
    return DIFFICULTY_PROFILES[Difficulty.coerce(difficulty)].challenge_row_target


def fall_delay_for_level(difficulty: Difficulty, level: int) -> float:
    profile = DIFFICULTY_PROFILES[Difficulty.coerce(difficulty)]
    return max(
        profile.initial_fall_delay_ms - (level - 1) * profile.delay_reduction_per_level_ms,
        profile.minimum_fall_delay_ms,
    )


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    rows_per_level: int = 10

    def base_score(self, lines: int) -> int:
        if lines <= 0:
            return 0
        if lines > len(self.line_clear_scores):
            return self.line_clear_scores[-1]
        return self.line_clear_scores[lines - 1]

    def score_for_lines(self, lines: int, level: int = 1, multiplier: float = 1.0) -> int:
        return int(round(self.base_score(lines) * level * multiplier))

    def level_for_rows(self, total_rows: int) -> int:
        return total_rows // self.rows_per_level + 1
