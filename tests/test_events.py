import dataclasses

import pytest

from tetris_engine.game import BoardChanged, EventQueue, ScoreChanged


def test_drain_returns_events_in_order_and_empties_queue():
    queue = EventQueue()
    queue.emit(BoardChanged())
    queue.emit(ScoreChanged(100))
    assert len(queue) == 2
    assert queue.drain() == [BoardChanged(), ScoreChanged(100)]
    assert queue.drain() == []


def test_listeners_run_synchronously():
    queue = EventQueue()
    seen = []
    queue.subscribe(seen.append)
    queue.subscribe(seen.append)  # duplicate subscription ignored
    queue.emit(ScoreChanged(5))
    assert seen == [ScoreChanged(5)]
    queue.unsubscribe(seen.append)
    queue.emit(ScoreChanged(6))
    assert seen == [ScoreChanged(5)]
    assert len(queue) == 2


def test_queue_is_bounded():
    queue = EventQueue(maxlen=3)
    for score in range(5):
        queue.emit(ScoreChanged(score))
    assert [e.score for e in queue.drain()] == [2, 3, 4]


def test_events_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        ScoreChanged(1).score = 2
