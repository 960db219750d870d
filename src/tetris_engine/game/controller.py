from __future__ import annotations

from enum import IntEnum

from .core import TetrisEngine


class InputSymbol(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP_START = 4
    SOFT_DROP_END = 5
    HARD_DROP = 6


class InputController:
    """Translates discrete input symbols into engine calls.

    Every method returns whether the input produced an observable change,
    so a UI can play feedback only for accepted inputs.
    """

    def __init__(self, engine: TetrisEngine) -> None:
        if engine is None:
            raise ValueError("engine is required")
        self.engine = engine
        self.soft_drop_active = False

    def reset(self) -> None:
        self.soft_drop_active = False

    def move_left(self) -> bool:
        return self.engine.move_left()

    def move_right(self) -> bool:
        return self.engine.move_right()

    def rotate_clockwise(self) -> bool:
        return self.engine.rotate_clockwise()

    def rotate_counter_clockwise(self) -> bool:
        return self.engine.rotate_counter_clockwise()

    def toggle_soft_drop(self, activate: bool) -> bool:
        # New games and restores change fast drop behind the controller
        self.soft_drop_active = self.engine.is_fast_drop_active
        if activate and not self.soft_drop_active:
            self.soft_drop_active = self.engine.activate_fast_drop()
            return self.soft_drop_active
        if not activate and self.soft_drop_active:
            if self.engine.deactivate_fast_drop():
                self.soft_drop_active = False
                return True
        return False

    def hard_drop(self) -> bool:
        return self.engine.hard_drop()

    def process_input(self, symbol: InputSymbol) -> bool:
        if symbol == InputSymbol.MOVE_LEFT:
            return self.move_left()
        if symbol == InputSymbol.MOVE_RIGHT:
            return self.move_right()
        if symbol == InputSymbol.ROTATE_CW:
            return self.rotate_clockwise()
        if symbol == InputSymbol.ROTATE_CCW:
            return self.rotate_counter_clockwise()
        if symbol == InputSymbol.SOFT_DROP_START:
            return self.toggle_soft_drop(True)
        if symbol == InputSymbol.SOFT_DROP_END:
            return self.toggle_soft_drop(False)
        if symbol == InputSymbol.HARD_DROP:
            return self.hard_drop()
        return False
