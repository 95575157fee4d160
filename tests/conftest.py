"""Shared fixtures: headless matplotlib and small chip grids."""
import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from wafermap.chip_grid import ChipGrid


@pytest.fixture
def ax():
    fig, ax = plt.subplots()
    yield ax
    plt.close(fig)


@pytest.fixture
def two_chip_grid():
    """2x2 logical grid with values at (0,0) and (1,1)."""
    grid = ChipGrid(max_chip_x=1, max_chip_y=1, chip_space=1.0)
    grid.add_value(5, 0, 0)
    grid.add_value(7, 1, 1)
    return grid


@pytest.fixture
def full_grid():
    """5x4 logical grid with a value on every chip."""
    grid = ChipGrid(chip_space=2.0)
    for x in range(5):
        for y in range(4):
            grid.add_value(10 * x + y + 1, x, y)
    return grid
