import json

import numpy as np
import pytest

from tetris_engine.game import (
    BoardChanged,
    Difficulty,
    GameMode,
    GameSnapshot,
    GameStatus,
    InvalidSnapshot,
    PieceState,
    ScoreChanged,
)

from conftest import place_piece


def play_a_little(engine):
    engine.grid.grid[19, 0:6] = 4
    place_piece(engine, "I", x=6)
    engine.hard_drop()
    engine.move_left()
    engine.rotate_clockwise()
    engine.tick()
    engine.drain_events()


def test_round_trip_restores_identical_state(make_engine):
    source = make_engine(difficulty=Difficulty.HARD, mode=GameMode.TIMED)
    play_a_little(source)
    source.countdown_tick()
    snapshot = source.create_snapshot()

    target = make_engine(seed=99)
    target.restore_from_snapshot(json.loads(json.dumps(snapshot.to_dict())))

    assert np.array_equal(target.grid.grid, source.grid.grid)
    assert target.grid.rows_cleared == source.grid.rows_cleared
    assert target.current_piece == source.current_piece
    assert target.next_piece == source.next_piece
    assert target.difficulty is Difficulty.HARD
    assert target.mode is GameMode.TIMED
    assert target.score == source.score == 200
    assert target.line_statistics() == source.line_statistics()
    assert target.remaining_time_seconds == 89
    assert target.create_snapshot() == snapshot
    assert target.is_running
    assert target.countdown_timer_running


def test_restore_emits_refresh_events(make_engine):
    source = make_engine()
    play_a_little(source)
    target = make_engine(seed=5)
    target.restore_from_snapshot(source.create_snapshot())
    events = target.drain_events()
    assert BoardChanged() in events
    assert ScoreChanged(source.score) in events


def test_paused_snapshot_restores_paused(engine, make_engine):
    engine.pause_game()
    snapshot = engine.create_snapshot()
    assert snapshot.is_paused
    assert snapshot.status == "paused"

    target = make_engine(seed=8)
    target.restore_from_snapshot(snapshot)
    assert target.is_paused
    assert not target.fall_timer_running
    assert target.resume_game()


def test_legacy_paused_flag_wins_over_running_status(engine, make_engine):
    data = engine.create_snapshot().to_dict()
    data["is_paused"] = True
    data["status"] = "running"
    target = make_engine(seed=8)
    target.restore_from_snapshot(data)
    assert target.status is GameStatus.PAUSED


def test_fast_drop_flag_is_restored(engine, make_engine):
    engine.activate_fast_drop()
    target = make_engine(seed=2)
    target.restore_from_snapshot(engine.create_snapshot())
    assert target.is_fast_drop_active
    assert target.fall_interval_ms == 50


def test_snapshot_dict_is_plain_data(engine):
    data = engine.create_snapshot().to_dict()
    json.dumps(data)
    assert len(data["grid"]) == 20
    assert data["current_piece"]["name"] == engine.current_piece.kind.name
    assert data["version"] == "1.0"


def _corrupt(engine, **changes):
    data = engine.create_snapshot().to_dict()
    data.update(changes)
    return data


@pytest.mark.parametrize("changes", [
    {"grid": [[None] * 10] * 19},
    {"grid": [[None] * 9] * 20},
    {"grid": [[9] * 10] * 20},
    {"score": -1},
    {"level": 0},
    {"total_rows_cleared": -3},
    {"current_fall_delay_ms": 0},
    {"status": "exploded"},
    {"current_piece": {"shape_id": 8, "position": [3, 0], "rotation": 0}},
    {"next_piece": {"shape_id": 2, "rotation": 0}},
    {"grid": None},
    {"grid": ["." * 10] * 20},
    {"grid": [[None] * 10] * 19 + ["not a row"]},
    {"grid": [[None] * 9 + [True]] * 20},
    {"score": "120"},
    {"level": 1.5},
    {"remaining_time_seconds": None},
    {"current_fall_delay_ms": "fast"},
    {"status": None},
    {"current_piece": None},
    {"next_piece": {"shape_id": 2, "position": "3,0", "rotation": 0}},
])
def test_invalid_snapshot_leaves_engine_untouched(make_engine, changes):
    source = make_engine()
    play_a_little(source)
    target = make_engine(seed=77)
    target.move_right()
    before = target.create_snapshot()

    with pytest.raises(InvalidSnapshot):
        target.restore_from_snapshot(_corrupt(source, **changes))

    assert target.create_snapshot() == before
    assert target.is_running


def test_missing_field_is_invalid(engine):
    data = engine.create_snapshot().to_dict()
    del data["score"]
    with pytest.raises(InvalidSnapshot):
        GameSnapshot.from_dict(data)


def test_piece_state_round_trip():
    state = PieceState(shape_id=5, position=(2, 7), rotation=3)
    assert PieceState.from_dict(state.to_dict()) == state


def test_non_mapping_snapshot_is_invalid():
    with pytest.raises(InvalidSnapshot):
        GameSnapshot.from_dict(None)
    with pytest.raises(InvalidSnapshot):
        GameSnapshot.from_dict({"unexpected": 1})
