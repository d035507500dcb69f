from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from .board import Board


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def _rot90(shape: Shape, k: int) -> Shape:
    k = k % 4
    if k == 0:
        return shape
    return np.rot90(shape, k, axes=(1, 0))  # rotate clockwise when k>0


BASE_SHAPES = {
    TetrominoType.I: np.array([[1, 1, 1, 1]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.T: np.array([[1, 1, 1], [0, 1, 0]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1]], dtype=np.int8),
}


def _build_rotation_states(kind: TetrominoType) -> Tuple[Shape, ...]:
    """Distinct clockwise rotations of a base shape, colored with the shape id."""
    states: List[Shape] = []
    for k in range(4):
        shape = np.ascontiguousarray(_rot90(BASE_SHAPES[kind], k)) * int(kind)
        if any(np.array_equal(shape, existing) for existing in states):
            continue
        shape = shape.astype(np.int8)
        shape.setflags(write=False)
        states.append(shape)
    return tuple(states)


# (shape id, rotation index) -> matrix. I, S and Z have 2 states, O has 1.
ROTATION_STATES: Dict[TetrominoType, Tuple[Shape, ...]] = {
    kind: _build_rotation_states(kind) for kind in TetrominoType
}


def rotation_states(shape_id: Union[int, TetrominoType]) -> Tuple[Shape, ...]:
    try:
        kind = TetrominoType(shape_id)
    except ValueError:
        raise ValueError(f"Unknown shape id: {shape_id!r}") from None
    return ROTATION_STATES[kind]


def spawn_shape(rng: Optional[random.Random] = None) -> TetrominoType:
    rng = rng or random.Random()
    return rng.choice(list(TetrominoType))


@dataclass
class Piece:
    """A falling piece: shape, rotation index and board anchor.

    The anchor (x, y) is the board coordinate of the top-left cell of the
    current rotation matrix. Moves are proposed against a Board and only
    committed when every occupied cell lands inside the board on an empty
    cell; rejected moves leave the piece untouched.
    """

    kind: TetrominoType
    rotation: int = 0
    x: int = 0
    y: int = 0

    @property
    def states(self) -> Tuple[Shape, ...]:
        return ROTATION_STATES[self.kind]

    @property
    def matrix(self) -> Shape:
        return self.states[self.rotation]

    def cells_at(self, origin_x: int, origin_y: int, rotation: Optional[int] = None) -> List[Tuple[int, int]]:
        if rotation is None:
            rotation = self.rotation
        s = self.states[rotation % len(self.states)]
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if s[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells

    def cells(self) -> List[Tuple[int, int]]:
        return self.cells_at(self.x, self.y)

    def test_position(self, board: Board, x: int, y: int, rotation: int) -> bool:
        return board.can_place(self.cells_at(x, y, rotation))

    def test_current_position(self, board: Board) -> bool:
        return self.test_position(board, self.x, self.y, self.rotation)

    def change_position(self, board: Board, new_x: int, new_y: int) -> bool:
        if not self.test_position(board, new_x, new_y, self.rotation):
            return False
        self.x = new_x
        self.y = new_y
        return True

    def rotate(self, board: Board) -> bool:
        # No wall kicks: a rotation that does not fit at the current anchor is dropped.
        new_rotation = (self.rotation + 1) % len(self.states)
        if not self.test_position(board, self.x, self.y, new_rotation):
            return False
        self.rotation = new_rotation
        return True
