from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import numpy as np
import pygame

from tetris_engine.game import GameMode, Piece, TetrisEngine


PANEL_CELLS = 6
NEXT_LABEL = "Next"


def _color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        0: (20, 20, 26),
        1: (0, 240, 240),  # I
        2: (0, 0, 240),    # J
        3: (240, 160, 0),  # L
        4: (240, 240, 0),  # O
        5: (0, 240, 0),    # S
        6: (160, 0, 240),  # T
        7: (240, 0, 0),    # Z
    }
    return palette.get(abs(v), (200, 200, 200))


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin

    def window_size(self, board_shape: Tuple[int, int]) -> Tuple[int, int]:
        h, w = board_shape
        width = w * self.cell_size + PANEL_CELLS * self.cell_size + self.margin * 3
        height = h * self.cell_size + self.margin * 2
        return width, height

    def _cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)

    def _grid_surface(self, state: np.ndarray, ghost: Optional[Iterable[Tuple[int, int]]] = None,
                      ghost_value: int = 0) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                pygame.draw.rect(surf, _color_for_value(int(state[y, x])), self._cell_rect(x, y))
        if ghost is not None:
            color = _color_for_value(ghost_value)
            for x, y in ghost:
                if 0 <= x < w and 0 <= y < h and state[y, x] == 0:
                    pygame.draw.rect(surf, color, self._cell_rect(x, y), 2)
        return surf

    def _piece_surface(self, piece: Piece) -> pygame.Surface:
        size = 4 * self.cell_size
        surf = pygame.Surface((size, size))
        surf.fill((10, 10, 14))
        for dx, dy in piece.blocks(0):
            pygame.draw.rect(surf, _color_for_value(piece.color_id), self._cell_rect(dx, dy))
        return surf

    def render_board(self, engine: TetrisEngine) -> pygame.Surface:
        ghost = None
        if not engine.is_terminal:
            ghost = engine.get_hard_drop_preview().absolute_positions()
        return self._grid_surface(
            engine.get_board_with_current_piece(), ghost, engine.current_piece.color_id
        )

    def hud_lines(self, engine: TetrisEngine) -> List[str]:
        lines = [
            f"Score {engine.score}",
            f"Level {engine.level}",
            f"Rows {engine.total_rows_cleared}",
        ]
        if engine.mode == GameMode.TIMED:
            lines.append(f"Time {engine.remaining_time_seconds}s")
        elif engine.mode == GameMode.CHALLENGE:
            lines.append(f"Goal {engine.total_rows_cleared}/{engine.target_rows}")
        return lines

    def draw(self, screen: pygame.Surface, engine: TetrisEngine, font: Optional[pygame.font.Font] = None) -> None:
        board_surf = self.render_board(engine)
        screen.fill((10, 10, 14))
        screen.blit(board_surf, (self.margin, self.margin))

        panel_x = self.margin * 2 + board_surf.get_width()
        y = self.margin
        if font is not None:
            screen.blit(font.render(NEXT_LABEL, True, (230, 230, 230)), (panel_x, y))
            y += font.get_linesize() + 4
        preview = self._piece_surface(engine.next_piece)
        screen.blit(preview, (panel_x, y))
        y += preview.get_height() + self.cell_size

        if font is not None:
            for text in self.hud_lines(engine):
                screen.blit(font.render(text, True, (230, 230, 230)), (panel_x, y))
                y += font.get_linesize() + 4
        pygame.display.flip()
