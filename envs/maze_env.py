import gymnasium as gym
from gymnasium import spaces
import numpy as np
import config

from envs.maze import Maze, MazeConfig
from envs.maze_code import Direction
from envs.motion import MotionState
from envs.rendering import MazeRenderer

# 動作: 0:上, 1:下, 2:左, 3:右
ACTIONS = [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]


class MazeEnv(gym.Env):
    metadata = {"render_modes": ["human"], "render_fps": config.FPS}

    def __init__(self, render_mode=None, grid_size=config.GRID_SIZE, loop_probability=0.0):
        super(MazeEnv, self).__init__()

        self.grid_size = grid_size
        self.loop_probability = loop_probability
        self.render_mode = render_mode

        self.renderer = None
        if render_mode == "human":
            self.renderer = MazeRenderer(config.WINDOW_SIZE, config.FPS)

        self.maze = None
        self.moves = 0
        self.blocked = 0

        self.action_space = spaces.Discrete(len(ACTIONS))
        self.observation_space = spaces.Box(
            low=0, high=config.ID_PLAYER, shape=(grid_size, grid_size), dtype=np.int8
        )

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        # 每回合一個新的迷宮實例，種子由 gym 的 np_random 決定
        maze_seed = int(self.np_random.integers(2**31 - 1))
        self.maze = Maze(
            MazeConfig(
                grid_size=self.grid_size,
                loop_probability=self.loop_probability,
                seed=maze_seed,
            ),
            renderer=self.renderer,
        )
        self.moves = 0
        self.blocked = 0

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), self._get_info()

    def step(self, action):
        """送出一格移動，tick 到 handle settle 為止"""
        dc, dr = ACTIONS[int(action)].delta
        handle = self.maze.request_move(dc, dr)

        success = False
        for _ in range(config.MAX_TICKS_PER_MOVE):
            tick = self.maze.advance(config.STEP_SIZE)
            success = success or tick.success
            if self.render_mode == "human":
                self.render()
            if handle.done():
                break

        self.moves += 1
        reward = config.REWARD_STEP
        info_result = None

        if handle.rejected():
            self.blocked += 1
            reward += config.REWARD_BLOCKED
            info_result = "blocked"

        terminated = success
        truncated = False
        if success:
            reward += config.REWARD_GOAL
            info_result = "success"
        elif self.moves >= config.MAX_EPISODE_MOVES:
            truncated = True
            reward += config.REWARD_TRUNCATED
            info_result = "timeout"

        info = self._get_info()
        if info_result is not None:
            info["result"] = info_result

        return self._get_obs(), reward, terminated, truncated, info

    def _get_obs(self):
        """迷宮格子 + 角色位置"""
        obs = np.array(self.maze.grid, dtype=np.int8)
        col, row = self.maze.actor_cell
        obs[row, col] = config.ID_PLAYER
        return obs

    def _get_info(self):
        return {
            "moves": self.moves,
            "blocked": self.blocked,
            "cell": self.maze.actor_cell,
            "optimal_moves": self.maze.maze_code.total_steps,
        }

    def render(self):
        if self.render_mode == "human" and self.renderer is not None:
            succeeded = self.maze.state is MotionState.SUCCEEDED
            self.renderer.render(status_text="Success!" if succeeded else f"Moves: {self.moves}")
            self.renderer.tick()

    def close(self):
        if self.renderer is not None:
            self.renderer.close()
