import numpy as np
import pytest

from blockfall.game import Board, Piece, TetrominoType


def _random_board(seed: int) -> Board:
    rng = np.random.default_rng(seed)
    board = Board()
    board.grid = rng.integers(0, 8, size=(16, 10)).astype(np.int8)
    # Make a few rows complete
    for row in rng.choice(16, size=3, replace=False):
        board.grid[row] = rng.integers(1, 8, size=10)
    return board


def test_new_board_is_empty_10x16():
    board = Board()
    assert board.grid.shape == (16, 10)
    assert not board.grid.any()


def test_invalid_dimensions_raise():
    with pytest.raises(ValueError):
        Board(0, 16)


def test_apply_piece_writes_shape_id():
    board = Board()
    piece = Piece(TetrominoType.L, x=2, y=14)
    board.apply_piece(piece)
    for x, y in piece.cells():
        assert board.grid[y, x] == int(TetrominoType.L)
    assert int(np.count_nonzero(board.grid)) == 4


def test_clear_single_row_shifts_rows_above_down():
    board = Board()
    for row in range(5):
        board.grid[row, row] = row + 1
    board.grid[5, :] = 7
    before = board.clone_state()

    assert board.clear_completed_rows() == 1
    assert board.grid.shape == (16, 10)
    assert not board.grid[0].any()
    np.testing.assert_array_equal(board.grid[1:6], before[0:5])
    np.testing.assert_array_equal(board.grid[6:], before[6:])


def test_clear_adjacent_rows_does_not_skip_any():
    board = Board()
    board.grid[13:16, :] = 2
    board.grid[12, 0] = 5
    assert board.clear_completed_rows() == 3
    assert board.grid[15, 0] == 5
    assert int(np.count_nonzero(board.grid)) == 1


def test_row_with_a_gap_is_kept():
    board = Board()
    board.grid[15, :] = 4
    board.grid[15, 6] = 0
    assert board.clear_completed_rows() == 0
    assert int(np.count_nonzero(board.grid[15])) == 9


@pytest.mark.parametrize("seed", range(10))
def test_clear_keeps_row_count_and_incomplete_rows(seed):
    board = _random_board(seed)
    before = board.clone_state()
    incomplete = [row for row in before if not np.all(row != 0)]

    cleared = board.clear_completed_rows()

    assert board.grid.shape == (16, 10)
    assert cleared == 16 - len(incomplete)
    assert not board.grid[:cleared].any()
    np.testing.assert_array_equal(board.grid[cleared:], np.array(incomplete, dtype=np.int8).reshape(-1, 10))


def test_max_height():
    board = Board()
    assert board.get_max_height() == 0
    board.grid[12, 3] = 1
    assert board.get_max_height() == 4
