from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Tuple

import numpy as np

if TYPE_CHECKING:
    from .pieces import Piece


logger = logging.getLogger(__name__)

Coordinate = Tuple[int, int]

BOARD_WIDTH = 10
BOARD_HEIGHT = 16


class Board:
    """Discrete 2D grid of settled cells.

    The grid uses 0 for empty cells and the shape id (1..7) of the piece that
    filled a cell otherwise. Row 0 is the top. The number of rows never
    changes: cleared rows are replaced by empty rows at the top.
    """

    def __init__(self, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> None:
        self.width = int(width)
        self.height = int(height)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.width}x{self.height}")
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def can_place(self, cells: Iterable[Coordinate]) -> bool:
        for x, y in cells:
            if not self.is_inside(x, y):
                return False
            if self.grid[y, x] != 0:
                return False
        return True

    def apply_piece(self, piece: "Piece") -> None:
        """Write the piece's shape id under each of its occupied cells.

        The placement must already have been validated with
        ``Piece.test_position``; nothing is re-checked here.
        """
        value = int(piece.kind)
        for x, y in piece.cells():
            self.grid[y, x] = value

    def clear_completed_rows(self) -> int:
        full = np.all(self.grid != 0, axis=1)
        num = int(np.count_nonzero(full))
        if num == 0:
            return 0
        # Surviving rows keep their order; empty rows refill the top
        survivors = self.grid[~full]
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, survivors))
        logger.debug("Cleared %d row(s)", num)
        return num

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        top_index = int(non_empty_rows[0])
        return self.height - top_index

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
