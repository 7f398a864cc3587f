import numpy as np
import pytest


# 5x5：第 1 列 col 0-3 是路，col 3 往下接到出口區
CORRIDOR_GRID = [
    [1, 1, 1, 1, 1],
    [0, 0, 0, 0, 1],
    [1, 1, 1, 0, 1],
    [1, 1, 1, 0, 0],
    [1, 1, 1, 0, 0],
]


@pytest.fixture
def corridor_grid():
    grid = np.array(CORRIDOR_GRID, dtype=np.int8)
    grid.flags.writeable = False
    return grid


@pytest.fixture
def open_grid():
    grid = np.zeros((5, 5), dtype=np.int8)
    grid.flags.writeable = False
    return grid
