import gymnasium as gym
import numpy as np
import pytest

import blockfall.env  # noqa: F401
from blockfall.env.falling_block_env import AGENT_ACTIONS, FallingBlockEnv
from blockfall.game import Action, Piece, TetrominoType
from blockfall.rl.random_agent import run_random


def test_registered_env_resets_and_steps():
    env = gym.make("FallingBlocks-10x16-v0")
    obs, info = env.reset(seed=0)
    assert obs.shape == (16, 10)
    assert obs.dtype == np.int8
    assert (obs < 0).sum() == 4
    assert info["score"] == 0
    obs, reward, terminated, truncated, info = env.step(AGENT_ACTIONS.index(Action.NONE))
    assert reward == 0.0 and not terminated and not truncated
    env.close()


def test_reset_with_seed_is_reproducible():
    env = FallingBlockEnv()
    first, _ = env.reset(seed=11)
    second, _ = env.reset(seed=11)
    np.testing.assert_array_equal(first, second)


def test_reward_is_score_delta():
    env = FallingBlockEnv()
    env.reset(seed=0)
    session = env.session
    session.board.grid[15, :] = 1
    session.board.grid[15, 4:6] = 0
    session.current_piece = Piece(TetrominoType.O, x=4, y=0)
    _, reward, terminated, _, info = env.step(AGENT_ACTIONS.index(Action.HARD_DROP))
    assert reward == 100.0
    assert info["lines"] == 1
    assert not terminated


def test_gravity_every_pushes_piece_down():
    env = FallingBlockEnv(gravity_every=2)
    env.reset(seed=0)
    y0 = env.session.current_piece.y
    env.step(AGENT_ACTIONS.index(Action.NONE))
    assert env.session.current_piece.y == y0
    env.step(AGENT_ACTIONS.index(Action.NONE))
    assert env.session.current_piece.y == y0 + 1


def test_truncates_after_max_steps():
    env = FallingBlockEnv(max_episode_steps=2)
    env.reset(seed=0)
    assert not env.step(0)[3]
    assert env.step(0)[3]


def test_rgb_render_shape():
    env = FallingBlockEnv(render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (16 * 12, 10 * 12, 3)


def test_negative_gravity_rejected():
    with pytest.raises(ValueError):
        FallingBlockEnv(gravity_every=-1)


def test_random_agent_runs():
    assert run_random(steps=300, seed=0, gravity_every=1) >= 0.0


def test_close_uses_base_env():
    env = FallingBlockEnv()
    assert "close" not in vars(FallingBlockEnv)
    env.close()
