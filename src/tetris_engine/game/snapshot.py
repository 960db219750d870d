from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .errors import InvalidShapeId, InvalidSnapshot
from .grid import GameGrid
from .pieces import TetrominoType, parse_shape_id


SNAPSHOT_VERSION = "1.0"


@dataclass
class PieceState:
    shape_id: int
    position: Tuple[int, int]
    rotation: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shape_id": int(self.shape_id),
            "name": TetrominoType(self.shape_id).name,
            "position": [int(self.position[0]), int(self.position[1])],
            "rotation": int(self.rotation),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PieceState":
        try:
            x, y = data["position"]
            return cls(shape_id=data["shape_id"], position=(int(x), int(y)), rotation=int(data["rotation"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidSnapshot(f"Malformed piece state: {data!r}") from exc


@dataclass
class GameSnapshot:
    """Plain-data image of a game session, as handed to the persistence layer."""

    grid: List[List[Optional[int]]]
    grid_rows_cleared: int
    current_piece: PieceState
    next_piece: PieceState
    level: int
    difficulty: int
    mode: int
    remaining_time_seconds: int
    target_rows: int
    total_rows_cleared: int
    score: int
    single_rows_cleared: int = 0
    double_rows_cleared: int = 0
    triple_rows_cleared: int = 0
    tetris_cleared: int = 0
    is_paused: bool = False
    current_fall_delay_ms: float = 1000.0
    is_fast_drop_active: bool = False
    status: str = "running"
    version: str = field(default=SNAPSHOT_VERSION)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["grid"] = [list(row) for row in self.grid]
        data["current_piece"] = self.current_piece.to_dict()
        data["next_piece"] = self.next_piece.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameSnapshot":
        try:
            fields = dict(data)
            fields["current_piece"] = PieceState.from_dict(fields["current_piece"])
            fields["next_piece"] = PieceState.from_dict(fields["next_piece"])
            return cls(**fields)
        except (KeyError, TypeError) as exc:
            raise InvalidSnapshot(f"Malformed snapshot: {exc}") from exc

    def validate(self) -> None:
        """Raise :class:`InvalidSnapshot` if this snapshot cannot be restored."""
        if not isinstance(self.grid, list) or len(self.grid) != GameGrid.HEIGHT:
            raise InvalidSnapshot(f"Grid must be a list of {GameGrid.HEIGHT} rows")
        valid_ids = {int(t) for t in TetrominoType}
        for row in self.grid:
            if not isinstance(row, list) or len(row) != GameGrid.WIDTH:
                raise InvalidSnapshot(f"Grid rows must be lists of {GameGrid.WIDTH} cells")
            for cell in row:
                if cell is not None and not (_is_int(cell) and cell in valid_ids):
                    raise InvalidSnapshot(f"Invalid cell value {cell!r}")
        counters = {
            "score": self.score,
            "level": self.level,
            "grid_rows_cleared": self.grid_rows_cleared,
            "total_rows_cleared": self.total_rows_cleared,
            "single_rows_cleared": self.single_rows_cleared,
            "double_rows_cleared": self.double_rows_cleared,
            "triple_rows_cleared": self.triple_rows_cleared,
            "tetris_cleared": self.tetris_cleared,
            "remaining_time_seconds": self.remaining_time_seconds,
            "target_rows": self.target_rows,
        }
        for name, value in counters.items():
            if not _is_int(value):
                raise InvalidSnapshot(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise InvalidSnapshot(f"{name} cannot be negative")
        if self.level < 1:
            raise InvalidSnapshot("Level must be at least 1")
        delay = self.current_fall_delay_ms
        if isinstance(delay, bool) or not isinstance(delay, (int, float)) or delay <= 0:
            raise InvalidSnapshot("current_fall_delay_ms must be a positive number")
        if not isinstance(self.status, str):
            raise InvalidSnapshot(f"Invalid status {self.status!r}")
        for piece in (self.current_piece, self.next_piece):
            if not isinstance(piece, PieceState):
                raise InvalidSnapshot(f"Invalid piece state {piece!r}")
            try:
                parse_shape_id(piece.shape_id)
            except InvalidShapeId as exc:
                raise InvalidSnapshot(str(exc)) from exc
            position = piece.position
            if (
                not isinstance(position, (tuple, list))
                or len(position) != 2
                or not all(_is_int(v) for v in position)
                or not _is_int(piece.rotation)
            ):
                raise InvalidSnapshot(f"Invalid piece placement {position!r} rotation {piece.rotation!r}")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
