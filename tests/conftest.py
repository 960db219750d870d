from __future__ import annotations

import os

import pytest

# Headless pygame for renderer tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from tetris_engine.game import (  # noqa: E402
    Difficulty,
    GameConfig,
    GameMode,
    Piece,
    TetrisEngine,
)


def place_piece(engine: TetrisEngine, shape: str, x: int, y: int = 0, rotation: int = 0) -> Piece:
    piece = engine.factory.create(shape)
    piece.x, piece.y, piece.rotation = x, y, rotation
    engine.current_piece = piece
    return piece


@pytest.fixture
def make_engine():
    engines = []

    def _make(difficulty=Difficulty.MEDIUM, mode=GameMode.CLASSIC, seed=1234, start=True):
        engine = TetrisEngine(GameConfig(random_seed=seed), difficulty=difficulty, mode=mode)
        if start:
            engine.start_new_game()
            engine.drain_events()
        engines.append(engine)
        return engine

    yield _make
    for engine in engines:
        engine.dispose()


@pytest.fixture
def engine(make_engine):
    return make_engine()
