import numpy as np
import pytest

import config
from envs.errors import InvalidSizeError
from envs.maze_generator import (
    MazeGenerator,
    exit_region,
    in_exit_region,
    reachable_cells,
)


def _path_cells(maze):
    return {(int(col), int(row)) for row, col in np.argwhere(maze == config.ID_PATH)}


@pytest.mark.parametrize("grid_size", range(5, 22))
def test_generated_maze_is_solvable(grid_size):
    for seed in range(20):
        maze = MazeGenerator.generate(grid_size, np.random.default_rng(seed))

        assert maze.shape == (grid_size, grid_size)
        assert maze.dtype == np.int8
        reached = reachable_cells(maze, config.ENTRANCE)
        assert config.ENTRANCE in reached
        assert all(cell in reached for cell in exit_region(grid_size))
        # 每個 PATH 都走得到
        assert _path_cells(maze) == reached


@pytest.mark.parametrize("grid_size", [5, 8, 13])
def test_loops_keep_every_path_reachable(grid_size):
    for seed in range(20):
        maze = MazeGenerator.generate(
            grid_size, np.random.default_rng(seed), loop_probability=0.4
        )
        reached = reachable_cells(maze, config.ENTRANCE)
        assert _path_cells(maze) == reached
        assert all(cell in reached for cell in exit_region(grid_size))


def test_same_seed_gives_same_maze():
    a = MazeGenerator.generate(11, np.random.default_rng(7))
    b = MazeGenerator.generate(11, np.random.default_rng(7))
    assert np.array_equal(a, b)


def test_generated_maze_is_read_only():
    maze = MazeGenerator.generate(7, np.random.default_rng(0))
    with pytest.raises(ValueError):
        maze[0, 0] = config.ID_PATH


@pytest.mark.parametrize("grid_size", [4, 3, 0, -5, 5.0, True, "9"])
def test_invalid_sizes_are_rejected(grid_size):
    with pytest.raises(InvalidSizeError):
        MazeGenerator.generate(grid_size, np.random.default_rng(0))


@pytest.mark.parametrize("entrance", [(5, 5), (6, 6), (-1, 1), (1, 9)])
def test_entrance_in_exit_region_or_outside_is_rejected(entrance):
    with pytest.raises(InvalidSizeError):
        MazeGenerator.generate(7, np.random.default_rng(0), entrance=entrance)


@pytest.mark.parametrize("entrance", [(2, 0), (1, 1), (0, 6), (4, 3)])
def test_entrance_override_is_solvable(entrance):
    for seed in range(10):
        maze = MazeGenerator.generate(9, np.random.default_rng(seed), entrance=entrance)
        reached = reachable_cells(maze, entrance)
        assert any(cell in reached for cell in exit_region(9))


def test_exit_corridor_is_carved_from_nearest_cell():
    maze = np.full((7, 7), config.ID_WALL, dtype=np.int8)
    maze[1, 0] = config.ID_PATH
    maze[1, 1] = config.ID_PATH
    reached = reachable_cells(maze, (0, 1))

    assert not MazeGenerator._touches_exit_region(maze, reached)
    MazeGenerator._carve_exit_corridor(maze, reached)

    # 先橫後直：第 1 列走到 col 5，再往下到 row 5
    assert all(maze[1, col] == config.ID_PATH for col in range(0, 6))
    assert all(maze[row, 5] == config.ID_PATH for row in range(1, 6))
    assert (5, 5) in reachable_cells(maze, (0, 1))


def test_exit_region_membership():
    assert in_exit_region((3, 3), 5)
    assert in_exit_region((4, 4), 5)
    assert not in_exit_region((2, 4), 5)
    assert not in_exit_region((4, 2), 5)
    assert exit_region(5) == [(3, 3), (4, 3), (3, 4), (4, 4)]
