"""Game module for the falling-block engine.

Exports the core game engine and supporting classes:
- GameGrid: 10x20 cell matrix, collision checks and row clearing
- Piece / TetrominoType / PieceFactory: shape table, piece instances and spawning
- Difficulty / GameMode / ScoringRules: fall-speed, scoring and mode policies
- TetrisEngine: tick-driven game state machine with snapshots and events
- InputController / InputSymbol: discrete input adapter
"""

from .controller import InputController, InputSymbol
from .core import GameConfig, GameStatus, TetrisEngine
from .errors import InvalidShapeId, InvalidSnapshot, TetrisEngineError
from .events import (
    BoardChanged,
    EventQueue,
    GameEvent,
    GameOver,
    GameOverReason,
    GameSummary,
    GameWon,
    LevelIncreased,
    RemainingTimeChanged,
    RowsCleared,
    ScoreChanged,
)
from .grid import GameGrid
from .pieces import Piece, PieceFactory, TetrominoType, get_blocks
from .rules import Difficulty, GameMode, ScoringRules
from .scheduler import PeriodicTimer
from .snapshot import GameSnapshot, PieceState

__all__ = [
    "GameGrid",
    "Piece",
    "PieceFactory",
    "TetrominoType",
    "get_blocks",
    "Difficulty",
    "GameMode",
    "ScoringRules",
    "GameConfig",
    "GameStatus",
    "TetrisEngine",
    "InputController",
    "InputSymbol",
    "PeriodicTimer",
    "GameSnapshot",
    "PieceState",
    "EventQueue",
    "GameEvent",
    "BoardChanged",
    "ScoreChanged",
    "LevelIncreased",
    "RowsCleared",
    "GameOver",
    "GameWon",
    "RemainingTimeChanged",
    "GameOverReason",
    "GameSummary",
    "TetrisEngineError",
    "InvalidShapeId",
    "InvalidSnapshot",
]
