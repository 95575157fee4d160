# -*- coding: utf-8 -*-
"""
chip_grid.py

The chip grid a wafer map plot draws from: a sparse table of chip values keyed
by logical (x, y) coordinate, plus the grid extent, offsets and chip spacing.
"""

import math

import pandas as pd

from wafermap.config import DEFAULT_CHIP_SPACE


def _is_missing(value):
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


class ChipGrid:
    """
    Sparse chip values for one wafer (one "group").

    The display grid is ``max_chip_x + 2`` by ``max_chip_y + 2`` cells, one
    cell of margin around the chips. ``x_offset``/``y_offset`` shift logical
    coordinates into that grid, so wafers with negative die coordinates can be
    drawn unchanged.

    ``all_groups_min_value``/``all_groups_max_value`` are the bounds across
    every wafer of a lot; continuous color scales use them so that several
    maps share one scale. They default to this grid's own bounds.
    """

    def __init__(self, max_chip_x=0, max_chip_y=0, chip_space=DEFAULT_CHIP_SPACE,
                 x_offset=0, y_offset=0):
        self.max_chip_x = max(0, int(max_chip_x))
        self.max_chip_y = max(0, int(max_chip_y))
        self.chip_space = float(chip_space)
        self.x_offset = int(x_offset)
        self.y_offset = int(y_offset)
        self._values = {}
        self._all_groups_min = None
        self._all_groups_max = None

    @classmethod
    def from_frame(cls, df, value_column, x_column="x", y_column="y",
                   chip_space=DEFAULT_CHIP_SPACE, grid_dims=None):
        """
        Build a grid from a DataFrame with one row per die.

        Coordinates are truncated to int. Negative coordinates are handled
        through the offsets rather than by rewriting them, so hit-testing
        reports the die coordinates found in the frame. Rows without a value
        are skipped.

        Parameters:
          df : DataFrame
              Must contain the coordinate columns and ``value_column``.
          grid_dims : tuple (min_x, max_x, min_y, max_y), optional
              Forces the grid extent, so that a filtered frame keeps the full
              wafer layout.
        """
        if grid_dims is not None:
            min_x, max_x, min_y, max_y = (int(v) for v in grid_dims)
        elif df.empty:
            min_x = max_x = min_y = max_y = 0
        else:
            min_x = int(df[x_column].min())
            max_x = int(df[x_column].max())
            min_y = int(df[y_column].min())
            max_y = int(df[y_column].max())

        offset_x = -min_x if min_x < 0 else 0
        offset_y = -min_y if min_y < 0 else 0

        grid = cls(max_chip_x=max_x + offset_x, max_chip_y=max_y + offset_y,
                   chip_space=chip_space, x_offset=offset_x, y_offset=offset_y)

        valid = df.dropna(subset=[value_column])
        for x, y, value in zip(valid[x_column], valid[y_column], valid[value_column]):
            grid.add_value(value, int(x), int(y))
        return grid

    def to_frame(self, value_column="value"):
        """Return the stored chips as a DataFrame with x, y and value columns."""
        rows = [(x, y, value) for (x, y), value in sorted(self._values.items())]
        return pd.DataFrame(rows, columns=["x", "y", value_column])

    # -------------------------
    # Values
    # -------------------------

    def add_value(self, value, x, y):
        """Store a chip value, growing the grid extent if needed."""
        if _is_missing(value):
            return
        x = int(x)
        y = int(y)
        # numpy scalars from pandas become plain Python numbers
        if hasattr(value, "item"):
            value = value.item()
        self._values[(x, y)] = value
        self.max_chip_x = max(self.max_chip_x, x + self.x_offset)
        self.max_chip_y = max(self.max_chip_y, y + self.y_offset)

    def value_at(self, x, y):
        """Chip value at a logical coordinate, or None."""
        return self._values.get((x, y))

    def unique_values(self):
        """Distinct chip values in ascending order."""
        return sorted(set(self._values.values()))

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(sorted(self._values.items()))

    # -------------------------
    # Bounds
    # -------------------------

    @property
    def min_value(self):
        if not self._values:
            return None
        return min(self._values.values())

    @property
    def max_value(self):
        if not self._values:
            return None
        return max(self._values.values())

    @property
    def all_groups_min_value(self):
        if self._all_groups_min is None:
            return self.min_value
        return self._all_groups_min

    @property
    def all_groups_max_value(self):
        if self._all_groups_max is None:
            return self.max_value
        return self._all_groups_max

    def set_group_bounds(self, min_value, max_value):
        """
        Set the value bounds shared by all wafers of a group.

        An engine reads these when it builds its colors: set them before
        ``ColorIndexEngine.attach`` or call ``invalidate()`` afterwards.
        """
        self._all_groups_min = min_value
        self._all_groups_max = max_value
