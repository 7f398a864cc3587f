import logging
from collections import deque

import numpy as np

import config
from envs.errors import InvalidSizeError, UnsolvableMazeError

logger = logging.getLogger(__name__)

# (dcol, drow)
NEIGHBORS_4 = [(1, 0), (0, 1), (-1, 0), (0, -1)]


def in_exit_region(cell, grid_size):
    col, row = cell
    return row >= grid_size - 2 and col >= grid_size - 2


def exit_region(grid_size):
    """出口區的所有格子，順序固定 (row-major)"""
    return [
        (col, row)
        for row in range(grid_size - 2, grid_size)
        for col in range(grid_size - 2, grid_size)
    ]


def reachable_cells(maze, start):
    """從 start 做 BFS，回傳所有走得到的 PATH 格子 (col, row)"""
    n = maze.shape[0]
    col, row = start
    if maze[row, col] != config.ID_PATH:
        return set()

    seen = {start}
    queue = deque([start])
    while queue:
        col, row = queue.popleft()
        for dc, dr in NEIGHBORS_4:
            nc, nr = col + dc, row + dr
            if 0 <= nc < n and 0 <= nr < n and (nc, nr) not in seen:
                if maze[nr, nc] == config.ID_PATH:
                    seen.add((nc, nr))
                    queue.append((nc, nr))
    return seen


def validate_size(grid_size, entrance=config.ENTRANCE):
    if isinstance(grid_size, bool) or not isinstance(grid_size, (int, np.integer)):
        raise InvalidSizeError(f"grid size must be an integer, got {grid_size!r}")
    if grid_size < config.MIN_GRID_SIZE:
        raise InvalidSizeError(
            f"grid size {grid_size} is below the minimum of {config.MIN_GRID_SIZE}"
        )
    col, row = entrance
    if not (0 <= col < grid_size and 0 <= row < grid_size):
        raise InvalidSizeError(f"entrance {entrance} lies outside a {grid_size}x{grid_size} grid")
    if in_exit_region(entrance, grid_size):
        raise InvalidSizeError(f"entrance {entrance} overlaps the exit region")


class MazeGenerator:
    @staticmethod
    def generate(grid_size, rng, entrance=config.ENTRANCE, loop_probability=0.0):
        """
        生成保證有解的迷宮並返回 numpy 陣列 (row-major, 0 是路, 1 是牆)
        :param grid_size: 迷宮大小 n (n x n)
        :param rng: numpy 的 random generator 實例
        :param entrance: 入口 (col, row)
        :param loop_probability: 額外打通內部牆壁的機率
        :return: maze (唯讀的 numpy array)
        """
        validate_size(grid_size, entrance)

        for attempt in range(1, config.MAX_GENERATION_ATTEMPTS + 1):
            maze = MazeGenerator._carve(grid_size, rng, entrance, loop_probability)
            reached = reachable_cells(maze, entrance)
            if any(cell in reached for cell in exit_region(grid_size)):
                logger.debug("maze %dx%d generated on attempt %d", grid_size, grid_size, attempt)
                maze.flags.writeable = False
                return maze
            logger.warning("maze %dx%d unsolvable on attempt %d, regenerating", grid_size, grid_size, attempt)

        raise UnsolvableMazeError(
            f"could not generate a solvable {grid_size}x{grid_size} maze "
            f"in {config.MAX_GENERATION_ATTEMPTS} attempts"
        )

    @staticmethod
    def _carve(grid_size, rng, entrance, loop_probability):
        # 1. 初始化：全填滿牆壁
        maze = np.full((grid_size, grid_size), config.ID_WALL, dtype=np.int8)

        start_col, start_row = entrance
        maze[start_row, start_col] = config.ID_PATH

        # 2. DFS 生成完美迷宮 (跨過一面牆找距離為 2 的鄰居)
        stack = [(start_col, start_row)]

        while stack:
            col, row = stack[-1]

            neighbors = []
            for dc, dr in [(0, -2), (0, 2), (-2, 0), (2, 0)]:
                nc, nr = col + dc, row + dr
                if 0 <= nc < grid_size and 0 <= nr < grid_size:
                    if maze[nr, nc] == config.ID_WALL:
                        neighbors.append((nc, nr, dc // 2, dr // 2))

            if neighbors:
                nc, nr, wc, wr = neighbors[rng.integers(len(neighbors))]
                # 打通中間的牆
                maze[row + wr, col + wc] = config.ID_PATH
                maze[nr, nc] = config.ID_PATH
                stack.append((nc, nr))
            else:
                stack.pop()

        # 3. 隨機移除內部牆壁以製造多條路徑 (Loops)
        if loop_probability > 0:
            for row in range(1, grid_size - 1):
                for col in range(1, grid_size - 1):
                    if maze[row, col] == config.ID_WALL and rng.random() < loop_probability:
                        maze[row, col] = config.ID_PATH

        # 4. 出口區強制為路，沒接上就挖一條走廊
        reached = reachable_cells(maze, entrance)
        touches_exit = MazeGenerator._touches_exit_region(maze, reached)
        for col, row in exit_region(grid_size):
            maze[row, col] = config.ID_PATH
        if not touches_exit:
            MazeGenerator._carve_exit_corridor(maze, reached)

        # 5. 孤立的路 (打通牆壁產生的) 重新填回牆壁
        reached = reachable_cells(maze, entrance)
        for row, col in np.argwhere(maze == config.ID_PATH):
            if (int(col), int(row)) not in reached:
                maze[row, col] = config.ID_WALL

        return maze

    @staticmethod
    def _touches_exit_region(maze, reached):
        n = maze.shape[0]
        for col, row in exit_region(n):
            if (col, row) in reached:
                return True
            for dc, dr in NEIGHBORS_4:
                if (col + dc, row + dr) in reached:
                    return True
        return False

    @staticmethod
    def _carve_exit_corridor(maze, reached):
        """從最靠近出口區的已挖格子，先橫後直挖一條走廊進出口區"""
        n = maze.shape[0]
        corner = n - 2
        carved = [cell for cell in reached if not in_exit_region(cell, n)]

        def distance(cell):
            col, row = cell
            return max(corner - col, 0) + max(corner - row, 0)

        # 距離相同時取 row-major 最前面的格子，確保結果固定
        col, row = min(carved, key=lambda cell: (distance(cell), cell[1], cell[0]))
        logger.debug("carving exit corridor from (%d, %d)", col, row)

        while col < corner:
            col += 1
            maze[row, col] = config.ID_PATH
        while row < corner:
            row += 1
            maze[row, col] = config.ID_PATH
