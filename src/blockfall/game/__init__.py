"""Game module for blockfall.

Exports the falling-block engine and supporting classes:
- Board: 10x16 grid, piece commits and row clearing
- Piece: falling piece with movement and rotation tests
- TetrominoType: Enum of available piece types
- ScoringRules: Scoring policy; level and gravity tables live in `rules`
- ScoreLedger: Persisted top scores and line counts
- GameSession: Session state machine driven by intents and gravity ticks
"""

from .board import Board
from .pieces import Piece, TetrominoType, rotation_states, spawn_shape
from .rules import ScoringRules
from .ledger import ScoreLedger
from .core import Action, Frame, GameConfig, GameSession, SessionResult, SessionState

__all__ = [
    "Board",
    "Piece",
    "TetrominoType",
    "rotation_states",
    "spawn_shape",
    "ScoringRules",
    "ScoreLedger",
    "Action",
    "Frame",
    "GameConfig",
    "GameSession",
    "SessionResult",
    "SessionState",
]
