from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple, Union

from .errors import InvalidShapeId
from .grid import GameGrid


Offset = Tuple[int, int]
Position = Tuple[int, int]


class TetrominoType(IntEnum):
    """Shape identity; the value doubles as the color id stored in the grid."""

    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7

    @property
    def display_name(self) -> str:
        return self.name


# (dx, dy) offsets from the anchor, per rotation index 0..3
SHAPE_TABLE: Dict[TetrominoType, Tuple[Tuple[Offset, ...], ...]] = {
    TetrominoType.I: (
        ((0, 1), (1, 1), (2, 1), (3, 1)),
        ((2, 0), (2, 1), (2, 2), (2, 3)),
        ((0, 2), (1, 2), (2, 2), (3, 2)),
        ((1, 0), (1, 1), (1, 2), (1, 3)),
    ),
    TetrominoType.J: (
        ((0, 0), (0, 1), (1, 1), (2, 1)),
        ((1, 0), (2, 0), (1, 1), (1, 2)),
        ((0, 1), (1, 1), (2, 1), (2, 2)),
        ((1, 0), (1, 1), (0, 2), (1, 2)),
    ),
    TetrominoType.L: (
        ((2, 0), (0, 1), (1, 1), (2, 1)),
        ((1, 0), (1, 1), (1, 2), (2, 2)),
        ((0, 1), (1, 1), (2, 1), (0, 2)),
        ((0, 0), (1, 0), (1, 1), (1, 2)),
    ),
    # O keeps the same footprint in every rotation state
    TetrominoType.O: (
        ((1, 0), (2, 0), (1, 1), (2, 1)),
        ((1, 0), (2, 0), (1, 1), (2, 1)),
        ((1, 0), (2, 0), (1, 1), (2, 1)),
        ((1, 0), (2, 0), (1, 1), (2, 1)),
    ),
    TetrominoType.S: (
        ((1, 0), (2, 0), (0, 1), (1, 1)),
        ((1, 0), (1, 1), (2, 1), (2, 2)),
        ((1, 1), (2, 1), (0, 2), (1, 2)),
        ((0, 0), (0, 1), (1, 1), (1, 2)),
    ),
    TetrominoType.T: (
        ((1, 0), (0, 1), (1, 1), (2, 1)),
        ((1, 0), (1, 1), (2, 1), (1, 2)),
        ((0, 1), (1, 1), (2, 1), (1, 2)),
        ((1, 0), (0, 1), (1, 1), (1, 2)),
    ),
    TetrominoType.Z: (
        ((0, 0), (1, 0), (1, 1), (2, 1)),
        ((2, 0), (1, 1), (2, 1), (1, 2)),
        ((0, 1), (1, 1), (1, 2), (2, 2)),
        ((1, 0), (0, 1), (1, 1), (0, 2)),
    ),
}


def get_blocks(kind: TetrominoType, rotation: int) -> Tuple[Offset, ...]:
    return SHAPE_TABLE[kind][rotation % 4]


def spawn_position() -> Position:
    return (GameGrid.WIDTH // 2 - 2, 0)


@dataclass
class Piece:
    kind: TetrominoType
    x: int = GameGrid.WIDTH // 2 - 2
    y: int = 0
    rotation: int = 0  # 0..3

    @property
    def color_id(self) -> int:
        return int(self.kind)

    @property
    def position(self) -> Position:
        return (self.x, self.y)

    def blocks(self, rotation: Optional[int] = None) -> Tuple[Offset, ...]:
        return get_blocks(self.kind, self.rotation if rotation is None else rotation)

    def reset(self) -> None:
        self.x, self.y = spawn_position()
        self.rotation = 0

    def move(self, dx: int, dy: int) -> None:
        self.x += dx
        self.y += dy

    def rotate_clockwise(self) -> None:
        self.rotation = (self.rotation + 1) % 4

    def rotate_counter_clockwise(self) -> None:
        self.rotation = (self.rotation + 3) % 4

    def cells_at(self, origin_x: int, origin_y: int, rotation: Optional[int] = None) -> List[Position]:
        return [(origin_x + dx, origin_y + dy) for dx, dy in self.blocks(rotation)]

    def absolute_positions(self) -> List[Position]:
        return self.cells_at(self.x, self.y)

    def positions_after_move(self, dx: int, dy: int) -> List[Position]:
        return self.cells_at(self.x + dx, self.y + dy)

    def positions_after_rotation(self, direction: int) -> List[Position]:
        """Positions at the same anchor after rotating; direction is +1 (CW) or -1 (CCW)."""
        return self.cells_at(self.x, self.y, (self.rotation + direction) % 4)

    def clone(self) -> "Piece":
        return Piece(self.kind, self.x, self.y, self.rotation)


ShapeId = Union[TetrominoType, int, str]


def parse_shape_id(shape_id: ShapeId) -> TetrominoType:
    if isinstance(shape_id, TetrominoType):
        return shape_id
    if isinstance(shape_id, str):
        try:
            return TetrominoType[shape_id.strip().upper()]
        except KeyError:
            raise InvalidShapeId(shape_id) from None
    if isinstance(shape_id, bool) or not isinstance(shape_id, int):
        raise InvalidShapeId(shape_id)
    try:
        return TetrominoType(shape_id)
    except ValueError:
        raise InvalidShapeId(shape_id) from None


class PieceFactory:
    """Creates spawned pieces from an owned, seedable RNG."""

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None) -> None:
        self.rng = rng if rng is not None else random.Random(seed)

    def seed(self, seed: Optional[int]) -> None:
        self.rng.seed(seed)

    def create(self, kind: ShapeId) -> Piece:
        piece = Piece(kind=parse_shape_id(kind))
        piece.reset()
        return piece

    def create_random(self) -> Piece:
        return self.create(self.rng.choice(list(TetrominoType)))

    def create_from_saved_state(self, shape_id: ShapeId, position: Position, rotation: int) -> Piece:
        kind = parse_shape_id(shape_id)
        x, y = position
        return Piece(kind=kind, x=int(x), y=int(y), rotation=int(rotation) % 4)
