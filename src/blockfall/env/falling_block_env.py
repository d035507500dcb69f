from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from blockfall.game import Action, GameConfig, GameSession, ScoringRules
from blockfall.visualization.renderer import color_for_value


# Intents an agent may choose; quitting is left to the caller.
AGENT_ACTIONS = (
    Action.LEFT,
    Action.RIGHT,
    Action.ROTATE,
    Action.SOFT_DROP,
    Action.HARD_DROP,
    Action.NONE,
)


class FallingBlockEnv(gym.Env):
    """Step-driven wrapper around a GameSession.

    Gravity follows the step counter instead of the wall clock: with
    `gravity_every=n` the falling piece is pushed down once every n steps.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None,
                 render_mode: Optional[str] = None,
                 gravity_every: int = 0,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        if gravity_every < 0:
            raise ValueError(f"gravity_every must be >= 0, got {gravity_every}")
        self.session = GameSession(config, rules, clock=lambda: 0.0)
        self.render_mode = render_mode
        self.gravity_every = int(gravity_every)
        self.max_episode_steps = int(max_episode_steps)

        height, width = self.session.board.grid.shape
        self.observation_space = spaces.Box(low=-7, high=7, shape=(height, width), dtype=np.int8)
        self.action_space = spaces.Discrete(len(AGENT_ACTIONS))

        self._steps = 0

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.session.score,
            "lines": self.session.lines,
            "level": self.session.level,
            "stack_height": self.session.board.get_max_height(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.session.rng.seed(seed)
        self.session.reset()
        self._steps = 0
        return self.session.get_state(), self._get_info()

    def step(self, action: int):
        obs, gained, done, _ = self.session.step(AGENT_ACTIONS[int(action)])
        self._steps += 1

        if not done and self.gravity_every and self._steps % self.gravity_every == 0:
            score_before = self.session.score
            self.session.step(Action.SOFT_DROP)
            gained += self.session.score - score_before
            obs = self.session.get_state()

        terminated = bool(self.session.game_over)
        truncated = not terminated and self._steps >= self.max_episode_steps
        info = self._get_info()
        info["engine_score_delta"] = gained
        return obs, float(gained), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            state = self.session.get_state()
            cell = 12
            h, w = state.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(state[y, x]))
            return img
        return None
