from __future__ import annotations

import argparse
import logging
from typing import Dict, Iterable, List, Optional, Sequence

import pygame

from blockfall.game import Action, GameConfig, GameSession, ScoreLedger
from blockfall.game.ledger import DEFAULT_LEDGER_PATH
from .renderer import Renderer


logger = logging.getLogger(__name__)

KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_ESCAPE: Action.QUIT,
}


def intents_from_events(events: Iterable[pygame.event.Event]) -> List[Action]:
    """Translate pygame events into intents, in arrival order."""
    intents: List[Action] = []
    for event in events:
        if event.type == pygame.QUIT:
            intents.append(Action.QUIT)
        elif event.type == pygame.KEYDOWN:
            action = KEY_TO_ACTION.get(event.key)
            if action is not None:
                intents.append(action)
    return intents


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play blockfall with the keyboard.")
    p.add_argument("--scores", type=str, default=DEFAULT_LEDGER_PATH, help="High-score ledger file")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def _log_summary(session: GameSession) -> None:
    result = session.result
    if result is None:
        return
    if result.score_is_new_high:
        logger.info("New high score: %d", result.score)
    if result.lines_is_new_high:
        logger.info("New best line count: %d", result.lines)
    if result.saved is False:
        logger.warning("High scores could not be saved")


def run(scores_path: str = DEFAULT_LEDGER_PATH, seed: Optional[int] = None, cell_size: int = 30, fps: int = 60) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        session = GameSession(GameConfig(random_seed=seed), ledger=ScoreLedger(scores_path))
        renderer = Renderer(cell_size=cell_size)
        screen = pygame.display.set_mode(renderer.window_size(session.board.grid.shape))
        pygame.display.set_caption("blockfall")

        summary_logged = False
        while not session.quit_requested:
            session.apply_intents(intents_from_events(pygame.event.get()))
            session.tick()

            if session.game_over and not summary_logged:
                _log_summary(session)
                summary_logged = True

            renderer.draw(screen, session.snapshot())
            pygame.display.flip()
            clock.tick(fps)
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="[BLOCKFALL] %(asctime)s - %(message)s")
    run(scores_path=args.scores, seed=args.seed, cell_size=args.cell_size, fps=args.fps)


if __name__ == "__main__":  # pragma: no cover
    main()
