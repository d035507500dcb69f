from __future__ import annotations

from typing import Dict, Optional, Tuple

import numpy as np
import pygame

from blockfall.game import Frame, SessionState


Color = Tuple[int, int, int]

BACKGROUND: Color = (10, 10, 14)
EMPTY_CELL: Color = (20, 20, 26)
TEXT_COLOR: Color = (230, 230, 230)

PALETTE: Dict[int, Color] = {
    1: (0, 240, 240),  # I
    2: (240, 240, 0),  # O
    3: (160, 0, 240),  # T
    4: (0, 240, 0),    # S
    5: (240, 0, 0),    # Z
    6: (0, 0, 240),    # J
    7: (240, 160, 0),  # L
}


def color_for_value(v: int) -> Color:
    if v == 0:
        return EMPTY_CELL
    return PALETTE.get(abs(v), (200, 200, 200))


def compose_cells(frame: Frame) -> np.ndarray:
    """Board cells with the falling piece written over them."""
    cells = frame.board.copy()
    if frame.piece_matrix is None:
        return cells
    h, w = frame.piece_matrix.shape
    for dy in range(h):
        for dx in range(w):
            v = int(frame.piece_matrix[dy, dx])
            x, y = frame.piece_x + dx, frame.piece_y + dy
            if v and 0 <= y < cells.shape[0] and 0 <= x < cells.shape[1]:
                cells[y, x] = v
    return cells


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_width: int = 180) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, board_shape: Tuple[int, int]) -> Tuple[int, int]:
        h, w = board_shape
        return (
            w * self.cell_size + self.margin * 3 + self.panel_width,
            h * self.cell_size + self.margin * 2,
        )

    def _grid_surface(self, cells: np.ndarray) -> pygame.Surface:
        h, w = cells.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, color_for_value(int(cells[y, x])), rect)
        return surf

    def _hud_lines(self, frame: Frame) -> list[str]:
        lines = [
            f"Score: {frame.score}",
            f"Lines: {frame.lines}",
            f"Level: {frame.level}",
        ]
        if frame.state is SessionState.GAME_OVER:
            lines.append("Game Over")
        return lines

    def _draw_hud(self, screen: pygame.Surface, frame: Frame) -> None:
        if not pygame.font.get_init():
            return
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        x_text = self.margin * 2 + frame.board.shape[1] * self.cell_size
        for i, txt in enumerate(self._hud_lines(frame)):
            img = self._font.render(txt, True, TEXT_COLOR)
            screen.blit(img, (x_text, self.margin + i * 30))

    def draw(self, screen: pygame.Surface, frame: Frame) -> None:
        grid_surf = self._grid_surface(compose_cells(frame))
        screen.fill(BACKGROUND)
        screen.blit(grid_surf, (self.margin, self.margin))
        self._draw_hud(screen, frame)
