import numpy as np
import pytest

import config
from envs.errors import UnsolvableMazeError
from envs.maze_code import Direction, MazeCode, encode, shortest_path
from envs.maze_generator import MazeGenerator, in_exit_region


def test_corridor_grid_code(corridor_grid):
    code = encode(corridor_grid)

    assert list(code) == [(Direction.RIGHT, 3), (Direction.DOWN, 2)]
    assert str(code) == "R3 D2"
    assert len(code) == 2
    assert code.total_steps == 5
    assert code.expand() == [Direction.RIGHT] * 3 + [Direction.DOWN] * 2


def test_ties_prefer_right_then_down(open_grid):
    # 全開的格子有很多條一樣短的路，RIGHT 優先
    code = encode(open_grid)
    assert str(code) == "R3 D2"


def test_shortest_path_includes_both_ends(corridor_grid):
    path = shortest_path(corridor_grid, (0, 1), [(3, 3), (4, 4)])
    assert path[0] == (0, 1)
    assert path[-1] == (3, 3)
    assert len(path) == 6


@pytest.mark.parametrize("grid_size", [5, 6, 9, 14, 21])
def test_code_walks_from_entrance_into_exit_region(grid_size):
    for seed in range(15):
        maze = MazeGenerator.generate(
            grid_size, np.random.default_rng(seed), loop_probability=0.2
        )
        code = encode(maze)

        col, row = config.ENTRANCE
        for i, direction in enumerate(code.expand()):
            dc, dr = direction.delta
            col, row = col + dc, row + dr
            assert 0 <= col < grid_size and 0 <= row < grid_size
            assert maze[row, col] == config.ID_PATH
            # 只有最後一步才進入出口區
            assert in_exit_region((col, row), grid_size) == (i == code.total_steps - 1)


def test_runs_never_repeat_a_direction():
    maze = MazeGenerator.generate(15, np.random.default_rng(3))
    code = encode(maze)
    directions = [direction for direction, _ in code]
    assert all(a != b for a, b in zip(directions, directions[1:]))
    assert all(count >= 1 for _, count in code)


def test_encode_is_deterministic():
    maze = MazeGenerator.generate(13, np.random.default_rng(11), loop_probability=0.3)
    assert encode(maze) == encode(maze)
    assert str(encode(maze)) == str(encode(maze))


def test_blocked_grid_is_unsolvable(corridor_grid):
    grid = corridor_grid.copy()
    grid[2, 3] = config.ID_WALL
    with pytest.raises(UnsolvableMazeError):
        encode(grid)


def test_entrance_on_wall_is_unsolvable(corridor_grid):
    with pytest.raises(UnsolvableMazeError):
        encode(corridor_grid, entrance=(0, 0))


def test_direction_helpers():
    assert Direction.from_delta(1, 0) is Direction.RIGHT
    assert Direction.from_delta(0, -1) is Direction.UP
    assert Direction.LEFT.token == "L"
    assert str(MazeCode(())) == ""
