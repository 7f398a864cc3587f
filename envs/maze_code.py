from collections import deque
from dataclasses import dataclass
from enum import Enum
from itertools import groupby
from typing import Tuple

import config
from envs.errors import UnsolvableMazeError
from envs.maze_generator import exit_region as default_exit_region


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self):
        return self.value

    @property
    def token(self):
        return self.name[0]

    @classmethod
    def from_delta(cls, dcol, drow):
        return cls((dcol, drow))


# BFS 展開順序，同長度路徑時決定走哪條
DIRECTION_PRIORITY = [Direction.RIGHT, Direction.DOWN, Direction.LEFT, Direction.UP]


@dataclass(frozen=True)
class MazeCode:
    """解答路徑的 run-length 編碼：[(方向, 次數), ...]"""

    steps: Tuple[Tuple[Direction, int], ...]

    def __iter__(self):
        return iter(self.steps)

    def __len__(self):
        return len(self.steps)

    def __str__(self):
        return " ".join(f"{direction.token}{count}" for direction, count in self.steps)

    @property
    def total_steps(self):
        return sum(count for _, count in self.steps)

    def expand(self):
        return [direction for direction, count in self.steps for _ in range(count)]


def shortest_path(maze, entrance, exit_cells):
    """
    BFS (4 方向，只走 PATH) 找入口到最近出口格的路徑
    輸出: 路徑座標列表 [(col,row), ...]，包含起點與終點
    """
    n = maze.shape[0]
    targets = set(exit_cells)
    col, row = entrance
    if maze[row, col] != config.ID_PATH:
        raise UnsolvableMazeError(f"entrance {entrance} is not a path cell")

    parent = {entrance: None}
    queue = deque([entrance])
    while queue:
        current = queue.popleft()
        if current in targets:
            path = []
            while current is not None:
                path.append(current)
                current = parent[current]
            return path[::-1]  # 反轉路徑，從起點開始

        col, row = current
        for direction in DIRECTION_PRIORITY:
            dc, dr = direction.delta
            nxt = (col + dc, row + dr)
            if not (0 <= nxt[0] < n and 0 <= nxt[1] < n) or nxt in parent:
                continue
            if maze[nxt[1], nxt[0]] != config.ID_PATH:
                continue
            parent[nxt] = current
            queue.append(nxt)

    raise UnsolvableMazeError(f"no path from {entrance} to the exit region")


def encode(maze, entrance=config.ENTRANCE, exit_cells=None):
    """把入口到出口區的最短路徑壓縮成 MazeCode"""
    if exit_cells is None:
        exit_cells = default_exit_region(maze.shape[0])

    path = shortest_path(maze, entrance, exit_cells)
    directions = [
        Direction.from_delta(b[0] - a[0], b[1] - a[1]) for a, b in zip(path, path[1:])
    ]
    return MazeCode(
        tuple((direction, len(list(group))) for direction, group in groupby(directions))
    )
