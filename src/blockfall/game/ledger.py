from __future__ import annotations

import logging
import os
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_LEDGER_PATH = "scores.txt"
LEDGER_CAPACITY = 5


def _format_line(values: List[int]) -> str:
    return " ".join(str(v) for v in values)


def _parse_line(line: str) -> List[int]:
    tokens = line.split()
    for token in tokens:
        # Plain unsigned decimal only: no signs, underscores or non-ASCII digits
        if not (token.isascii() and token.isdigit()):
            raise ValueError(f"Invalid entry {token!r} in ledger line: {line!r}")
    return [int(token) for token in tokens]


def insert_high(values: List[int], value: int, capacity: int = LEDGER_CAPACITY) -> bool:
    """Insert `value` into the ascending list `values` if it ranks.

    A list with room always accepts the value. A full list only accepts a
    value strictly greater than its minimum, which is evicted.
    """
    if len(values) < capacity:
        values.append(value)
        values.sort()
        return True
    if values and value > values[0]:
        values[0] = value
        values.sort()
        return True
    return False


class ScoreLedger:
    """Top scores and top line counts persisted as two text lines.

    Line 1 holds the scores and line 2 the line counts, both as ascending
    space-separated unsigned integers.
    """

    def __init__(self, path: str = DEFAULT_LEDGER_PATH, capacity: int = LEDGER_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError(f"Ledger capacity must be positive, got {capacity}")
        self.path = path
        self.capacity = capacity
        self.scores: List[int] = []
        self.lines: List[int] = []
        self.last_save_ok: Optional[bool] = None

    def load(self) -> Optional[Tuple[List[int], List[int]]]:
        self.scores = []
        self.lines = []
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            logger.warning("Could not read score ledger %s: %s", self.path, e)
            return None
        except UnicodeDecodeError as e:
            logger.warning("Ignoring malformed score ledger %s: %s", self.path, e)
            return None

        rows = content.splitlines()
        if len(rows) != 2:
            logger.warning("Ignoring malformed score ledger %s: expected 2 lines, found %d", self.path, len(rows))
            return None
        try:
            scores = _parse_line(rows[0])
            lines = _parse_line(rows[1])
        except ValueError as e:
            logger.warning("Ignoring malformed score ledger %s: %s", self.path, e)
            return None

        # Keep the highest entries if the file holds more than fit
        self.scores = sorted(scores)[-self.capacity:]
        self.lines = sorted(lines)[-self.capacity:]
        return list(self.scores), list(self.lines)

    def save(self) -> bool:
        content = f"{_format_line(self.scores)}\n{_format_line(self.lines)}\n"
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            logger.error("Failed to save score ledger %s: %s", self.path, e)
            return False
        logger.info("Saved score ledger to %s", self.path)
        return True

    def update_and_maybe_save(self, score: int, lines: int) -> Tuple[bool, bool]:
        score_is_new_high = insert_high(self.scores, int(score), self.capacity)
        lines_is_new_high = insert_high(self.lines, int(lines), self.capacity)
        if score_is_new_high or lines_is_new_high:
            self.last_save_ok = self.save()
        else:
            self.last_save_ok = None
        return score_is_new_high, lines_is_new_high
