from __future__ import annotations


class TetrisEngineError(Exception):
    """Base class for errors surfaced by the engine."""


class InvalidShapeId(TetrisEngineError, ValueError):
    def __init__(self, shape_id: object) -> None:
        super().__init__(f"Unknown tetromino shape id: {shape_id!r}")
        self.shape_id = shape_id


class InvalidSnapshot(TetrisEngineError, ValueError):
    """Raised before any engine state is touched when a snapshot cannot be restored."""
