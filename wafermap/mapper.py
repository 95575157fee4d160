# -*- coding: utf-8 -*-
"""
mapper.py

Translation between logical chip coordinates (the wafer's own reference frame)
and display coordinates (the order cells are drawn in).

The plot only talks to a mapper, so a wafer measured with the notch up can be
shown notch down, mirrored, or rotated without touching the grid or the plot.
"""


class CoordinateMapper:
    """Identity mapping: display coordinates are logical coordinates."""

    def to_logical(self, display_x, display_y):
        return display_x, display_y

    def to_display(self, x, y):
        return x, y

    def display_extent(self, max_x, max_y):
        """Largest display coordinates for a grid with the given logical maxima."""
        return max_x, max_y


class MirroredMapper(CoordinateMapper):
    """
    Mirror the grid about its vertical and/or horizontal centre line.

    ``max_x``/``max_y`` are the largest logical coordinates of the grid being
    mirrored (usually ``ChipGrid.max_chip_x``/``max_chip_y``).
    """

    def __init__(self, max_x, max_y, flip_x=True, flip_y=False):
        self.max_x = max_x
        self.max_y = max_y
        self.flip_x = flip_x
        self.flip_y = flip_y

    def _flip(self, x, y):
        if self.flip_x:
            x = self.max_x - x
        if self.flip_y:
            y = self.max_y - y
        return x, y

    # a mirror is its own inverse
    def to_logical(self, display_x, display_y):
        return self._flip(display_x, display_y)

    def to_display(self, x, y):
        return self._flip(x, y)


class RotatedMapper(CoordinateMapper):
    """
    Rotate the grid counter-clockwise in quarter turns.

    Odd turns swap the grid's width and height, so the plot sizes its display
    grid from :meth:`display_extent` rather than from the logical maxima.
    """

    def __init__(self, max_x, max_y, quarter_turns=1):
        self.max_x = max_x
        self.max_y = max_y
        self.quarter_turns = int(quarter_turns) % 4

    def to_display(self, x, y):
        turns = self.quarter_turns
        if turns == 1:
            return self.max_y - y, x
        if turns == 2:
            return self.max_x - x, self.max_y - y
        if turns == 3:
            return y, self.max_x - x
        return x, y

    def to_logical(self, display_x, display_y):
        turns = self.quarter_turns
        if turns == 1:
            return display_y, self.max_y - display_x
        if turns == 2:
            return self.max_x - display_x, self.max_y - display_y
        if turns == 3:
            return self.max_x - display_y, display_x
        return display_x, display_y

    def display_extent(self, max_x, max_y):
        if self.quarter_turns % 2:
            return max_y, max_x
        return max_x, max_y
