from __future__ import annotations

from dataclasses import dataclass


# Gravity interval per level (level 1 first), in milliseconds.
LEVEL_TIMES_MS: tuple[int, ...] = (1000, 850, 700, 600, 500, 400, 300, 250, 221, 190)
# Lines to exceed before leaving the matching level.
LEVEL_LINES: tuple[int, ...] = (20, 40, 60, 80, 100, 120, 140, 160, 180, 200)

MAX_LEVEL = len(LEVEL_TIMES_MS)


def level_for_lines(lines: int) -> int:
    level = 1
    while level < MAX_LEVEL and lines > LEVEL_LINES[level - 1]:
        level += 1
    return level


def gravity_interval_ms(level: int) -> int:
    index = min(max(level, 1), MAX_LEVEL) - 1
    return LEVEL_TIMES_MS[index]


def is_time_to_drop(elapsed_ms: float, level: int) -> bool:
    return elapsed_ms >= gravity_interval_ms(level)


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    placement_score: int = 0
    hard_drop_score: int = 0

    def __post_init__(self) -> None:
        if any(v < 0 for v in self.line_clear_scores) or self.placement_score < 0 or self.hard_drop_score < 0:
            raise ValueError("Scores must be non-negative")

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        if lines <= 0:
            return 0
        if 1 <= lines <= 4:
            return self.line_clear_scores[lines - 1] * level
        # Only reachable with shapes taller than four rows
        return (self.line_clear_scores[-1] + (lines - 4) * 400) * level

    def score_for_lock(self, lines: int, level: int) -> int:
        return self.score_for_lines(lines, level) + self.placement_score * level
