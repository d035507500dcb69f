import numpy as np
import pygame

from blockfall.game import Action, GameConfig, GameSession, Piece, SessionState, TetrominoType
from blockfall.visualization.human_play import build_parser, intents_from_events
from blockfall.visualization.renderer import EMPTY_CELL, PALETTE, Renderer, color_for_value, compose_cells


def _session() -> GameSession:
    session = GameSession(GameConfig(random_seed=5), clock=lambda: 0.0)
    session.current_piece = Piece(TetrominoType.T, x=0, y=0)
    return session


def test_key_events_map_to_intents_in_order():
    events = [
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_LEFT),
        pygame.event.Event(pygame.KEYUP, key=pygame.K_LEFT),
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a),
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_UP),
        pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE),
        pygame.event.Event(pygame.QUIT),
    ]
    assert intents_from_events(events) == [Action.LEFT, Action.ROTATE, Action.HARD_DROP, Action.QUIT]


def test_escape_requests_quit():
    session = _session()
    session.apply_intents(intents_from_events([pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE)]))
    assert session.quit_requested


def test_palette_covers_every_shape():
    assert sorted(PALETTE) == [int(kind) for kind in TetrominoType]
    assert color_for_value(0) == EMPTY_CELL
    assert color_for_value(-3) == PALETTE[3]


def test_compose_cells_overlays_piece_without_touching_board():
    session = _session()
    session.board.grid[15, 9] = 2
    frame = session.snapshot()
    cells = compose_cells(frame)
    assert cells[0, 0] == int(TetrominoType.T)
    assert cells[1, 1] == int(TetrominoType.T)
    assert cells[15, 9] == 2
    assert not frame.board[0].any()


def test_renderer_draws_cells_with_palette():
    session = _session()
    renderer = Renderer(cell_size=10, margin=5)
    screen = pygame.Surface(renderer.window_size(session.board.grid.shape))
    renderer.draw(screen, session.snapshot())

    top_left = tuple(screen.get_at((5 + 2, 5 + 2)))[:3]
    empty = tuple(screen.get_at((5 + 9 * 10 + 2, 5 + 15 * 10 + 2)))[:3]
    assert top_left == PALETTE[int(TetrominoType.T)]
    assert empty == EMPTY_CELL


def test_renderer_handles_game_over_frame():
    session = _session()
    session.board.grid[0:2, 3:9] = 6
    session.spawn_piece()
    assert session.state is SessionState.GAME_OVER
    frame = session.snapshot()
    assert frame.piece_matrix is None
    np.testing.assert_array_equal(compose_cells(frame), frame.board)
    renderer = Renderer(cell_size=4, margin=2)
    renderer.draw(pygame.Surface(renderer.window_size(frame.board.shape)), frame)


def test_cli_defaults():
    args = build_parser().parse_args([])
    assert args.scores == "scores.txt"
    assert args.seed is None
    args = build_parser().parse_args(["--seed", "3", "--log-level", "DEBUG"])
    assert args.seed == 3 and args.log_level == "DEBUG"
