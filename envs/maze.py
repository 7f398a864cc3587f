import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

import config
from envs.errors import InvalidSizeError, MazeError
from envs.maze_code import encode
from envs.maze_generator import MazeGenerator, exit_region, in_exit_region, validate_size
from envs.motion import MotionController

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]  # (col, row)


def cell_size(view_width, grid_size):
    """每格的連續單位大小 (整數像素)"""
    size = view_width // grid_size
    if size <= 0:
        raise InvalidSizeError(f"view width {view_width} is too small for a {grid_size}x{grid_size} grid")
    return size


@dataclass
class MazeConfig:
    grid_size: int = config.GRID_SIZE
    view_width: int = config.WINDOW_SIZE
    entrance_override: Optional[Cell] = None
    success_callback: Optional[Callable[[], None]] = None
    loop_probability: float = 0.0
    seed: Optional[int] = None

    @property
    def entrance(self):
        return self.entrance_override if self.entrance_override is not None else config.ENTRANCE


@dataclass(frozen=True)
class WallRect:
    col: int
    row: int
    x: int
    y: int
    size: int


class Maze:
    """
    一個迷宮實例：Grid、MazeCode 與 Walls 在建構時一起產生，之後不再改變。
    角色移動交給 MotionController，renderer 只會收到 grid_built / actor_moved
    """

    def __init__(self, maze_config=None, renderer=None, grid=None):
        self.config = maze_config or MazeConfig()
        self.renderer = renderer
        entrance = self.config.entrance

        if grid is None:
            rng = np.random.default_rng(self.config.seed)
            self.grid = MazeGenerator.generate(
                self.config.grid_size, rng, entrance, self.config.loop_probability
            )
        else:
            self.grid = self._adopt_grid(grid, self.config.grid_size, entrance)

        self.grid_size = self.grid.shape[0]
        self.entrance = entrance
        self.exit_region = exit_region(self.grid_size)
        self.cell_size = cell_size(self.config.view_width, self.grid_size)

        # MazeCode (正確路徑的指令集)
        self.maze_code = encode(self.grid, entrance, self.exit_region)
        self.walls = tuple(
            WallRect(int(col), int(row), int(col) * self.cell_size, int(row) * self.cell_size, self.cell_size)
            for row, col in np.argwhere(self.grid == config.ID_WALL)
        )

        self.motion = MotionController(
            self.grid,
            self.cell_size,
            entrance,
            on_success=self._on_success,
            on_position_changed=self._on_position_changed,
        )

        logger.debug("maze %dx%d ready, code: %s", self.grid_size, self.grid_size, self.maze_code)
        if self.renderer is not None:
            self.renderer.grid_built(self)

    @staticmethod
    def _adopt_grid(grid, grid_size, entrance):
        values = np.asarray(grid)
        if values.ndim != 2 or values.shape[0] != values.shape[1]:
            raise InvalidSizeError(f"grid must be square, got shape {values.shape}")
        validate_size(values.shape[0], entrance)
        if values.shape[0] != grid_size:
            raise InvalidSizeError(
                f"grid is {values.shape[0]}x{values.shape[0]} but grid_size is {grid_size}"
            )
        # 只能有路和牆，碰撞與 BFS 才會看到同一張地圖
        if not np.isin(values, [config.ID_PATH, config.ID_WALL]).all():
            raise MazeError("grid cells must be ID_PATH or ID_WALL")
        grid = np.array(values, dtype=np.int8)
        grid.flags.writeable = False
        return grid

    # ------------------------------------------------------------------
    # 狀態
    # ------------------------------------------------------------------

    @property
    def state(self):
        return self.motion.state

    @property
    def actor_cell(self):
        return self.motion.cell

    @property
    def actor_position(self):
        return self.motion.position

    @property
    def succeeded(self):
        return self.motion.succeeded

    def is_exit(self, cell):
        return in_exit_region(cell, self.grid_size)

    # ------------------------------------------------------------------
    # 移動
    # ------------------------------------------------------------------

    def request_move(self, delta_col, delta_row):
        return self.motion.request_move(delta_col, delta_row)

    def move_x(self, n):
        """水平移動 n 格 (負數 = 左, 正數 = 右)"""
        return self.motion.request_move(n, 0)

    def move_y(self, n):
        """垂直移動 n 格 (負數 = 上, 正數 = 下)"""
        return self.motion.request_move(0, n)

    def advance(self, step_size=config.STEP_SIZE):
        return self.motion.advance(step_size)

    def reset(self):
        self.motion.reset()

    def _on_success(self):
        if self.config.success_callback is not None:
            self.config.success_callback()

    def _on_position_changed(self, x, y):
        if self.renderer is not None:
            self.renderer.actor_moved(x, y)
