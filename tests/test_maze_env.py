import numpy as np
from gymnasium.utils.env_checker import check_env

import config
from envs.maze_env import ACTIONS, MazeEnv
from envs.maze_code import Direction


def test_env_passes_gymnasium_checks():
    check_env(MazeEnv(grid_size=7), skip_render_check=True)


def test_reset_marks_actor_at_entrance():
    env = MazeEnv(grid_size=9)
    obs, info = env.reset(seed=1)

    col, row = config.ENTRANCE
    assert obs.shape == (9, 9)
    assert obs[row, col] == config.ID_PLAYER
    assert info["moves"] == 0
    assert info["optimal_moves"] == env.maze.maze_code.total_steps


def test_same_seed_same_maze():
    env = MazeEnv(grid_size=9)
    first, _ = env.reset(seed=3)
    second, _ = env.reset(seed=3)
    assert np.array_equal(first, second)


def test_following_the_code_terminates():
    env = MazeEnv(grid_size=9)
    env.reset(seed=4)

    total = 0
    plan = env.maze.maze_code.expand()
    for i, direction in enumerate(plan):
        obs, reward, terminated, truncated, info = env.step(ACTIONS.index(direction))
        total += reward
        assert not truncated
        assert terminated == (i == len(plan) - 1)

    assert info["result"] == "success"
    assert info["moves"] == len(plan)
    assert reward == config.REWARD_GOAL + config.REWARD_STEP
    col, row = env.maze.actor_cell
    assert obs[row, col] == config.ID_PLAYER


def test_bumping_the_border_is_penalised():
    env = MazeEnv(grid_size=7)
    env.reset(seed=0)

    obs, reward, terminated, truncated, info = env.step(ACTIONS.index(Direction.LEFT))

    assert info["result"] == "blocked"
    assert info["blocked"] == 1
    assert info["cell"] == config.ENTRANCE
    assert reward == config.REWARD_STEP + config.REWARD_BLOCKED
    assert not terminated


def test_episode_is_truncated(monkeypatch):
    monkeypatch.setattr(config, "MAX_EPISODE_MOVES", 3)
    env = MazeEnv(grid_size=7)
    env.reset(seed=0)

    for _ in range(2):
        _, _, _, truncated, _ = env.step(ACTIONS.index(Direction.LEFT))
        assert not truncated
    _, _, terminated, truncated, info = env.step(ACTIONS.index(Direction.LEFT))

    assert truncated
    assert not terminated
    assert info["result"] == "timeout"
