import pytest

from tetris_engine.game import InvalidShapeId, Piece, PieceFactory, TetrominoType, get_blocks
from tetris_engine.game.pieces import SHAPE_TABLE, parse_shape_id, spawn_position


def test_every_rotation_has_four_blocks_inside_a_4x4_box():
    for kind, rotations in SHAPE_TABLE.items():
        assert len(rotations) == 4
        for blocks in rotations:
            assert len(blocks) == 4
            assert len(set(blocks)) == 4
            assert all(0 <= dx < 4 and 0 <= dy < 4 for dx, dy in blocks)


def test_o_piece_rotations_are_identical():
    assert len(set(SHAPE_TABLE[TetrominoType.O])) == 1


def test_rotation_index_wraps():
    assert get_blocks(TetrominoType.T, 5) == get_blocks(TetrominoType.T, 1)


def test_spawn_position_is_centered():
    assert spawn_position() == (3, 0)
    piece = Piece(TetrominoType.L)
    assert piece.position == (3, 0)
    assert piece.color_id == 3


def test_rotation_cycles():
    piece = Piece(TetrominoType.T)
    piece.rotate_counter_clockwise()
    assert piece.rotation == 3
    for _ in range(4):
        piece.rotate_clockwise()
    assert piece.rotation == 3


def test_positions_do_not_mutate_piece():
    piece = Piece(TetrominoType.I, x=0, y=0)
    assert piece.absolute_positions() == [(0, 1), (1, 1), (2, 1), (3, 1)]
    assert piece.positions_after_move(1, 2) == [(1, 3), (2, 3), (3, 3), (4, 3)]
    assert piece.positions_after_rotation(1) == [(2, 0), (2, 1), (2, 2), (2, 3)]
    assert piece.position == (0, 0)
    assert piece.rotation == 0


def test_clone_is_independent():
    piece = Piece(TetrominoType.S, x=2, y=5, rotation=1)
    twin = piece.clone()
    twin.move(1, 1)
    assert piece.position == (2, 5)
    assert twin == Piece(TetrominoType.S, x=3, y=6, rotation=1)


@pytest.mark.parametrize("value, expected", [
    (1, TetrominoType.I),
    (7, TetrominoType.Z),
    ("t", TetrominoType.T),
    (TetrominoType.O, TetrominoType.O),
])
def test_parse_shape_id(value, expected):
    assert parse_shape_id(value) is expected


@pytest.mark.parametrize("value", [0, 8, -1, "Q", 2.0, True, None])
def test_parse_shape_id_rejects_unknown(value):
    with pytest.raises(InvalidShapeId) as info:
        parse_shape_id(value)
    assert info.value.shape_id == value


def test_factory_is_deterministic_with_seed():
    a = PieceFactory(seed=42)
    b = PieceFactory(seed=42)
    assert [a.create_random().kind for _ in range(20)] == [b.create_random().kind for _ in range(20)]


def test_factory_reseed_restarts_sequence():
    factory = PieceFactory(seed=3)
    first = [factory.create_random().kind for _ in range(10)]
    factory.seed(3)
    assert [factory.create_random().kind for _ in range(10)] == first


def test_created_pieces_spawn_at_rotation_zero():
    piece = PieceFactory(seed=0).create("J")
    assert piece.kind is TetrominoType.J
    assert piece.position == spawn_position()
    assert piece.rotation == 0


def test_create_from_saved_state():
    piece = PieceFactory().create_from_saved_state(6, (4, 11), 6)
    assert piece.kind is TetrominoType.T
    assert piece.position == (4, 11)
    assert piece.rotation == 2
    with pytest.raises(InvalidShapeId):
        PieceFactory().create_from_saved_state(12, (0, 0), 0)


def test_display_names():
    assert TetrominoType.I.display_name == "I"
