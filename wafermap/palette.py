# -*- coding: utf-8 -*-
"""
palette.py

Chip colors: the fixed default color table used by the discrete indexes and
an indexed series palette that fills any slot past the table from the
matplotlib qualitative colormaps.
"""

import matplotlib as mpl
from matplotlib.colors import to_rgb

# One entry per palette slot 0..32. Slot 33 (the zero/background slot of the
# consistent index) and anything above come from the series palette.
DEFAULT_COLORS = tuple(to_rgb(c) for c in (
    "#00ff00",  # green
    "#ff5555",
    "#5555ff",
    "#555055",
    "#ffff55",
    "#ff55ff",
    "#55ffff",
    "#ffafaf",  # pink
    "#808080",  # gray
    "#c00000",  # dark red
    "#0000c0",  # dark blue
    "#c0c000",  # dark yellow
    "#c000c0",  # dark magenta
    "#00c0c0",  # dark cyan
    "#404040",  # dark gray
    "#ff4040",  # light red
    "#4040ff",  # light blue
    "#40ff40",  # light green
    "#ffff40",  # light yellow
    "#ff40ff",  # light magenta
    "#40ffff",  # light cyan
    "#c0c0c0",  # light gray
    "#800000",  # very dark red
    "#000080",  # very dark blue
    "#808000",  # very dark yellow
    "#800080",  # very dark magenta
    "#008080",  # very dark cyan
    "#ff8080",  # very light red
    "#8080ff",  # very light blue
    "#ffff80",  # very light yellow
    "#ff80ff",  # very light magenta
    "#80ffff",  # very light cyan
    "#000000",  # black
))


# 60 distinct colors for slots past the default table
SUPPLIER_COLORS = tuple(to_rgb(c) for name in ("tab20", "tab20b", "tab20c")
                        for c in mpl.colormaps[name].colors)


def default_supplier(index):
    """Color for a slot past the default table; wraps after 60 slots."""
    return SUPPLIER_COLORS[index % len(SUPPLIER_COLORS)]


class SeriesPalette:
    """
    Colors by integer index.

    Slots set explicitly win. An unset, non-negative slot is filled from the
    supplier, a callable ``supplier(index) -> color``, the first time it is
    looked up and keeps that color afterwards.
    Negative slots never resolve.
    """

    def __init__(self, supplier=None):
        self._paints = {}
        self._supplier = supplier if supplier is not None else default_supplier

    def paint_at(self, index):
        if index is None or index < 0:
            return None
        if index not in self._paints:
            color = self._supplier(index)
            self._paints[index] = None if color is None else to_rgb(color)
        return self._paints[index]

    def set_paint_at(self, index, color):
        self._paints[index] = to_rgb(color)

    def install(self, colors, start=0):
        """Set consecutive slots from ``start``."""
        for offset, color in enumerate(colors):
            self.set_paint_at(start + offset, color)
