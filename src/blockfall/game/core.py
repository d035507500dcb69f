from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Iterable, Optional, Tuple

import numpy as np

from .board import BOARD_HEIGHT, BOARD_WIDTH, Board
from .ledger import ScoreLedger
from .pieces import Piece, spawn_shape
from .rules import ScoringRules, is_time_to_drop, level_for_lines


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5
    QUIT = 6


class SessionState(Enum):
    SPAWNING = "spawning"
    FALLING = "falling"
    LOCKING = "locking"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = BOARD_WIDTH
    height: int = BOARD_HEIGHT
    random_seed: Optional[int] = None
    spawn_x: int = 4
    spawn_y: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.spawn_x < self.width or not 0 <= self.spawn_y < self.height:
            raise ValueError(f"Spawn anchor ({self.spawn_x}, {self.spawn_y}) lies outside the board")


@dataclass
class Frame:
    """Everything the renderer needs for one frame."""

    board: np.ndarray
    piece_matrix: Optional[np.ndarray]
    piece_x: int
    piece_y: int
    score: int
    lines: int
    level: int
    state: SessionState


@dataclass
class SessionResult:
    score: int
    lines: int
    level: int
    score_is_new_high: bool = False
    lines_is_new_high: bool = False
    saved: Optional[bool] = None


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class GameSession:
    """One running game: board, falling piece, score and gravity timer.

    The session is an ordinary value owned by the control loop. Intents go
    through `step`, gravity through `tick`; both are no-ops once the session
    reached GAME_OVER.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        ledger: Optional[ScoreLedger] = None,
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.ledger = ledger
        self.clock = clock
        self.rng = random.Random(self.config.random_seed)
        self.board = Board(self.config.width, self.config.height)
        self.state = SessionState.SPAWNING
        self.current_piece: Optional[Piece] = None
        self.score = 0
        self.lines = 0
        self.level = 1
        self.last_tick = 0.0
        self.quit_requested = False
        self.result: Optional[SessionResult] = None
        self.reset()

    @property
    def game_over(self) -> bool:
        return self.state is SessionState.GAME_OVER

    def reset(self) -> None:
        self.board.reset()
        self.score = 0
        self.lines = 0
        self.level = 1
        self.quit_requested = False
        self.result = None
        if self.ledger is not None:
            self.ledger.load()
        self.last_tick = self.clock()
        self.spawn_piece()

    def spawn_piece(self) -> None:
        self.state = SessionState.SPAWNING
        piece = Piece(kind=spawn_shape(self.rng), rotation=0, x=self.config.spawn_x, y=self.config.spawn_y)
        # Immediate collision check: no room to spawn ends the session
        if not piece.test_current_position(self.board):
            self.current_piece = None
            self._end_session()
            return
        self.current_piece = piece
        self.state = SessionState.FALLING

    def _end_session(self) -> None:
        self.state = SessionState.GAME_OVER
        self.result = SessionResult(score=self.score, lines=self.lines, level=self.level)
        logger.info("Game over: score=%d lines=%d level=%d", self.score, self.lines, self.level)
        if self.ledger is not None:
            score_high, lines_high = self.ledger.update_and_maybe_save(self.score, self.lines)
            self.result.score_is_new_high = score_high
            self.result.lines_is_new_high = lines_high
            self.result.saved = self.ledger.last_save_ok

    def _lock_piece(self, now: Optional[float] = None) -> int:
        assert self.current_piece is not None
        self.state = SessionState.LOCKING
        self.board.apply_piece(self.current_piece)
        cleared = self.board.clear_completed_rows()
        self.score += self.rules.score_for_lock(cleared, self.level)
        self.lines += cleared
        new_level = max(self.level, level_for_lines(self.lines))
        if new_level != self.level:
            logger.info("Level up: %d -> %d", self.level, new_level)
            self.level = new_level
        self.current_piece = None
        self.last_tick = self.clock() if now is None else now
        self.spawn_piece()
        return cleared

    def _advance(self, now: Optional[float] = None) -> bool:
        """Move the piece one row down, locking it if it cannot move.

        Returns True if the piece moved, False if it was locked.
        """
        assert self.current_piece is not None
        piece = self.current_piece
        if piece.change_position(self.board, piece.x, piece.y + 1):
            self.last_tick = self.clock() if now is None else now
            return True
        self._lock_piece(now)
        return False

    def hard_drop(self) -> int:
        if self.current_piece is None:
            return 0
        piece = self.current_piece
        dropped = 0
        while piece.change_position(self.board, piece.x, piece.y + 1):
            dropped += 1
        self.score += dropped * self.rules.hard_drop_score
        self._lock_piece()
        return dropped

    def tick(self, now: Optional[float] = None) -> bool:
        """Apply gravity if the level's interval has elapsed since the last drop."""
        if self.game_over or self.current_piece is None:
            return False
        if now is None:
            now = self.clock()
        if not is_time_to_drop(now - self.last_tick, self.level):
            return False
        self._advance(now)
        return True

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, dict]:
        if action == Action.QUIT:
            self.quit_requested = True
        if self.game_over:
            return self.get_state(), 0, True, self._info()

        score_before = self.score
        piece = self.current_piece
        if piece is None:
            pass
        elif action == Action.LEFT:
            piece.change_position(self.board, piece.x - 1, piece.y)
        elif action == Action.RIGHT:
            piece.change_position(self.board, piece.x + 1, piece.y)
        elif action == Action.ROTATE:
            piece.rotate(self.board)
        elif action == Action.SOFT_DROP:
            self._advance()
        elif action == Action.HARD_DROP:
            self.hard_drop()

        return self.get_state(), self.score - score_before, self.game_over, self._info()

    def apply_intents(self, actions: Iterable[Action]) -> None:
        for action in actions:
            self.step(action)

    def _info(self) -> dict:
        return {
            "score": self.score,
            "lines": self.lines,
            "level": self.level,
            "state": self.state.value,
        }

    def snapshot(self) -> Frame:
        piece = self.current_piece
        return Frame(
            board=self.board.clone_state(),
            piece_matrix=piece.matrix if piece is not None else None,
            piece_x=piece.x if piece is not None else 0,
            piece_y=piece.y if piece is not None else 0,
            score=self.score,
            lines=self.lines,
            level=self.level,
            state=self.state,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the board for observation
        state = self.board.clone_state()
        if self.current_piece is not None and not self.game_over:
            for x, y in self.current_piece.cells():
                # Use negative to indicate falling piece overlay
                state[y, x] = -int(self.current_piece.kind)
        return state
