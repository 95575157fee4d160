# -*- coding: utf-8 -*-
"""
color_index.py

Maps chip values onto colors.

There are usually many more distinct chip values than usable colors, so the
engine buckets values into at most ``paint_limit + 1`` palette slots using one
of four methods:

  POSITION     equal-count runs of the ascending unique values per slot
  VALUE        equal-width value ranges per slot
  CONSISTENT   slot derived from the value itself, so a bin number keeps its
               color across wafers (the default)
  BLUE_ORANGE  no slots: a continuous 1000-step blue to red hue gradient over
               the bounds of all wafers in the group

Every build produces a new, read-only :class:`ColorAssignment`.
"""

import enum
import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType

import numpy as np
from matplotlib.colors import hsv_to_rgb, rgb_to_hsv, to_rgb

from wafermap.config import BLUE_ORANGE_SEGMENTS, DEFAULT_PAINT_LIMIT, FALLBACK_COLOR
from wafermap.legend import build_legend_entries
from wafermap.paint_scale import LookupPaintScale
from wafermap.palette import DEFAULT_COLORS, SeriesPalette

logger = logging.getLogger(__name__)


class PaintIndexMethod(enum.IntEnum):
    POSITION = 0
    VALUE = 1
    CONSISTENT = 2
    BLUE_ORANGE = 3


def resolve_method(method):
    """Return a valid PaintIndexMethod; unknown selectors become CONSISTENT."""
    if method is None:
        return PaintIndexMethod.CONSISTENT
    try:
        return PaintIndexMethod(method)
    except ValueError:
        logger.warning("Unknown paint index method %r, using CONSISTENT", method)
        return PaintIndexMethod.CONSISTENT


@dataclass(frozen=True)
class ColorAssignment:
    """Result of one build: either a value -> slot table or a paint scale."""
    method: PaintIndexMethod
    paint_index: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    paint_scale: LookupPaintScale = None

    @property
    def is_continuous(self):
        return self.paint_scale is not None

    def __len__(self):
        return len(self.paint_index)


# -------------------------
# Slot assignment methods
# -------------------------

def consistent_index(unique_values, paint_limit):
    index = {}
    for value in unique_values:
        if not math.isfinite(value):
            continue
        # remainder keeps the sign of the value
        position = int(math.fmod(int(value), paint_limit)) - 1
        if position == -1:
            position = paint_limit
        index[value] = position
    return index


def sequential_index(unique_values):
    return {value: count for count, value in enumerate(unique_values)}


def position_index(unique_values, paint_limit):
    values_per_color = int(math.ceil(len(unique_values) / paint_limit))
    index = {}
    paint = 0
    for count, value in enumerate(unique_values, start=1):
        index[value] = paint
        if count % values_per_color == 0:
            paint += 1
        if paint > paint_limit:
            paint = paint_limit
    return index


def value_index(unique_values, min_value, max_value, paint_limit):
    value_step = (max_value - min_value) / paint_limit
    cut_point = min_value + value_step
    index = {}
    paint = 0
    for value in unique_values:
        # a zero step would never move the cut point
        while value > cut_point and value_step > 0:
            cut_point += value_step
            paint += 1
            if paint > paint_limit:
                paint = paint_limit
                break
        index[value] = paint
    return index


def _finite_or(value, fallback):
    if value is None:
        return fallback
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        return fallback
    return value


def scale_bounds(min_value, max_value):
    """
    Usable (lower, upper) bounds for a continuous scale.

    Missing or non-finite bounds become 0.0 and 1.0. Equal bounds get a
    synthetic lower bound so the span is never zero.
    """
    lower = _finite_or(min_value, 0.0)
    upper = _finite_or(max_value, 1.0)
    if upper == lower:
        if upper > 0.0:
            lower = upper / 2.0
        elif upper == 0.0:
            lower = -1.0
        else:
            lower = upper * 2
        logger.debug("Flat value range, scale widened to [%g, %g]", lower, upper)
    elif lower > upper:
        lower, upper = upper, lower
    return lower, upper


def blue_orange_scale(min_value, max_value, segments=BLUE_ORANGE_SEGMENTS):
    lower, upper = scale_bounds(min_value, max_value)
    blue_hue = rgb_to_hsv(to_rgb("blue"))[0]
    red_hue = rgb_to_hsv(to_rgb("red"))[0]

    steps = np.arange(segments)
    values = lower + (upper - lower) * steps / segments
    hues = blue_hue + (red_hue - blue_hue) * steps / segments
    ones = np.ones(segments)
    colors = hsv_to_rgb(np.column_stack([hues, ones, ones]))

    logger.debug("Blue-orange scale min %g max %g interval %g",
                 lower, upper, (upper - lower) / segments)
    return LookupPaintScale(lower, upper, values, [tuple(c) for c in colors],
                            default_color="red")


# -------------------------
# Engine
# -------------------------

class ColorIndexEngine:
    """
    Builds and serves the color assignment for the attached chip grid.

    Parameters:
      paint_limit : int, optional
          Highest palette slot a value may be assigned. Defaults to 33.
      method : PaintIndexMethod or int, optional
          Bucketing method, fixed for the life of the engine.
      palette : SeriesPalette, optional
          Slot colors; slots past the default table come from its supplier.
    """

    def __init__(self, paint_limit=None, method=None, palette=None):
        self.paint_limit = DEFAULT_PAINT_LIMIT if paint_limit is None else int(paint_limit)
        self.method = resolve_method(method)
        self.palette = palette if palette is not None else SeriesPalette()
        self.bin_descriptions = None
        self._grid = None
        self._assignment = ColorAssignment(self.method)
        self._listeners = []

    @property
    def grid(self):
        return self._grid

    @property
    def assignment(self):
        return self._assignment

    @property
    def paint_scale(self):
        return self._assignment.paint_scale

    # -------------------------
    # Change notification
    # -------------------------

    def add_change_listener(self, listener):
        self._listeners.append(listener)

    def remove_change_listener(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _fire_change(self):
        for listener in list(self._listeners):
            listener(self)

    # -------------------------
    # Building
    # -------------------------

    def attach(self, grid):
        """Use ``grid`` from now on and rebuild the assignment."""
        self._grid = grid
        self.invalidate()

    def invalidate(self):
        """Rebuild the assignment from the current grid."""
        self._assignment = self._build()
        self._fire_change()

    def _build(self):
        grid = self._grid
        if grid is None:
            return ColorAssignment(self.method)

        unique_values = grid.unique_values()
        method = self.method
        paint_index = {}
        paint_scale = None

        if method != PaintIndexMethod.BLUE_ORANGE:
            self.palette.install(DEFAULT_COLORS)

        if method == PaintIndexMethod.CONSISTENT:
            paint_index = consistent_index(unique_values, self.paint_limit)
        elif method == PaintIndexMethod.BLUE_ORANGE:
            paint_scale = blue_orange_scale(grid.all_groups_min_value,
                                            grid.all_groups_max_value)
        elif len(unique_values) <= self.paint_limit:
            paint_index = sequential_index(unique_values)
        elif method == PaintIndexMethod.POSITION:
            paint_index = position_index(unique_values, self.paint_limit)
        else:
            paint_index = value_index(unique_values, grid.min_value, grid.max_value,
                                      self.paint_limit)

        logger.debug("Built %s color assignment for %d unique values",
                     method.name, len(unique_values))
        return ColorAssignment(method, MappingProxyType(paint_index), paint_scale)

    # -------------------------
    # Lookup
    # -------------------------

    def paint_index_for(self, value):
        """Palette slot for ``value``, or None when it has none."""
        if self.method == PaintIndexMethod.CONSISTENT and value == 0:
            return self.paint_limit
        return self._assignment.paint_index.get(value)

    def color_for_index(self, index):
        color = self.palette.paint_at(index)
        if color is None:
            return to_rgb(FALLBACK_COLOR)
        return color

    def color_for(self, value):
        """RGB color for a chip value."""
        if self._assignment.is_continuous:
            return self._assignment.paint_scale.get_paint(value)
        return self.color_for_index(self.paint_index_for(value))

    # -------------------------
    # Legend
    # -------------------------

    def set_bin_descriptions(self, descriptions):
        """Map value labels (as in the legend) to human readable bin names."""
        self.bin_descriptions = dict(descriptions) if descriptions else None
        self._fire_change()

    def legend_entries(self):
        return build_legend_entries(self)
