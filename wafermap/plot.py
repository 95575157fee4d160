#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
plot.py

Draws a wafer map onto a matplotlib Axes: the chip grid clipped to the wafer
circle, the wafer edge, the orientation notch and a legend. Also answers
"which chip is under this point" for the same drawing rectangle.

The Axes is set up as a y-down device frame over the drawing rectangle (see
:func:`prepare_axes`), so cells are placed with the same upper-left
arithmetic the hit-test inverts.

Usage:
    python -m wafermap.plot FoM_summary.csv "VTH (V)"
"""

import logging
import math
import sys
from collections import namedtuple

import matplotlib.patches as patches
import matplotlib.pyplot as plt
import pandas as pd

from wafermap.chip_grid import ChipGrid
from wafermap.color_index import ColorIndexEngine, PaintIndexMethod
from wafermap.config import (BACKGROUND_COLOR, DEFAULT_CHIP_SPACE, DEFAULT_X_CHIPS,
                             DEFAULT_Y_CHIPS, EDGE_COLOR, GRID_LINE_COLOR,
                             MINIMUM_HEIGHT_TO_DRAW, MINIMUM_WIDTH_TO_DRAW, TEXT_COLOR)
from wafermap.geometry import (PlotOrientation, as_bbox, cell_upper_left, chip_index_at,
                               compute_cell_layout, compute_notch, compute_wafer_edge)
from wafermap.legend import format_scientific
from wafermap.logging_config import setup_logging
from wafermap.mapper import CoordinateMapper

logger = logging.getLogger(__name__)

# Result of a hit-test: logical chip coordinate and its display label
ChipHit = namedtuple("ChipHit", ["x", "y", "label"])


def prepare_axes(ax, area):
    """Make ``ax`` a y-down frame exactly covering ``area`` with no decorations."""
    area = as_bbox(area)
    ax.set_xlim(area.x0, area.x1)
    ax.set_ylim(area.y1, area.y0)
    ax.set_aspect('equal')
    ax.axis('off')


class WaferMapPlot:
    """
    A wafer map: chip grid, color engine and coordinate mapper.

    Parameters:
      grid : ChipGrid, optional
          The chip values. Without one an empty default grid is drawn.
      engine : ColorIndexEngine, optional
          Color assignment; a CONSISTENT engine is created if omitted.
      orientation : PlotOrientation
          VERTICAL puts the notch at the bottom, HORIZONTAL on the right.
      mapper : CoordinateMapper, optional
          Logical/display coordinate translation, identity by default.
      show_surrounding_grid : bool
          Draw cells outside the wafer circle instead of clipping them.
      show_chip_values : bool
          Write each chip's integer value in its cell.
    """

    def __init__(self, grid=None, engine=None, orientation=PlotOrientation.VERTICAL,
                 mapper=None, show_surrounding_grid=False, show_chip_values=False):
        self.orientation = orientation
        self.mapper = mapper if mapper is not None else CoordinateMapper()
        self.show_surrounding_grid = show_surrounding_grid
        self.show_chip_values = show_chip_values
        self._listeners = []
        self._grid = grid
        self._engine = None
        self.set_engine(engine if engine is not None else ColorIndexEngine())

    # -------------------------
    # Change notification
    # -------------------------

    def add_change_listener(self, listener):
        """``listener(plot)`` is called whenever the plot needs redrawing."""
        self._listeners.append(listener)

    def remove_change_listener(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def fire_change(self):
        for listener in list(self._listeners):
            listener(self)

    def _engine_changed(self, engine):
        self.fire_change()

    # -------------------------
    # Properties
    # -------------------------

    @property
    def grid(self):
        return self._grid

    def set_grid(self, grid):
        """Swap the chip grid; rebuilds the color assignment."""
        self._grid = grid
        # the engine's change event reaches our listeners
        self._engine.attach(grid)

    @property
    def engine(self):
        return self._engine

    def set_engine(self, engine):
        if self._engine is not None:
            self._engine.remove_change_listener(self._engine_changed)
        self._engine = engine
        engine.add_change_listener(self._engine_changed)
        engine.attach(self._grid)

    def set_orientation(self, orientation):
        if orientation != self.orientation:
            self.orientation = orientation
            self.fire_change()

    def set_mapper(self, mapper):
        self.mapper = mapper if mapper is not None else CoordinateMapper()
        self.fire_change()

    @property
    def x_chips(self):
        """Display grid width in cells, margin included."""
        if self._grid is None:
            return DEFAULT_X_CHIPS
        max_x, _ = self.mapper.display_extent(self._grid.max_chip_x, self._grid.max_chip_y)
        return max_x + 2

    @property
    def y_chips(self):
        """Display grid height in cells, margin included."""
        if self._grid is None:
            return DEFAULT_Y_CHIPS
        _, max_y = self.mapper.display_extent(self._grid.max_chip_x, self._grid.max_chip_y)
        return max_y + 2

    @property
    def chip_space(self):
        if self._grid is None:
            return DEFAULT_CHIP_SPACE
        return self._grid.chip_space

    @property
    def x_offset(self):
        return 0 if self._grid is None else self._grid.x_offset

    @property
    def y_offset(self):
        return 0 if self._grid is None else self._grid.y_offset

    def layout(self, area):
        return compute_cell_layout(area, self.x_chips, self.y_chips, self.chip_space)

    def chip_value(self, display_x, display_y):
        """Value of the chip at a display coordinate, or None."""
        if self._grid is None:
            return None
        x, y = self.mapper.to_logical(display_x, display_y)
        return self._grid.value_at(x, y)

    # -------------------------
    # Drawing
    # -------------------------

    def draw(self, ax, area):
        """Draw grid, edge and notch into ``area``. Returns False if the area is too small."""
        area = as_bbox(area)
        if area.width <= MINIMUM_WIDTH_TO_DRAW or area.height <= MINIMUM_HEIGHT_TO_DRAW:
            logger.debug("Plot area %s too small, nothing drawn", area.bounds)
            return False
        self.draw_chip_grid(ax, area)
        self.draw_wafer_edge(ax, area)
        return True

    def draw_chip_grid(self, ax, area):
        """Add one rectangle per display cell; returns the rectangles."""
        area = as_bbox(area)
        layout = self.layout(area)
        x_chips, y_chips = self.x_chips, self.y_chips
        space = self.chip_space

        clip = None
        if not self.show_surrounding_grid:
            edge = compute_wafer_edge(area)
            clip = patches.Ellipse((edge.x0 + edge.width / 2, edge.y0 + edge.height / 2),
                                   edge.width, edge.height, transform=ax.transData)

        cells = []
        for x in range(1, x_chips + 1):
            upper_left_x = cell_upper_left(layout.origin_x, layout.cell_width, space, x)
            for y in range(1, y_chips + 1):
                upper_left_y = cell_upper_left(layout.origin_y, layout.cell_height, space, y)
                value = self.chip_value(x - 1 - self.x_offset, y_chips - y - 1 - self.y_offset)

                # Missing chips keep the background color
                color = BACKGROUND_COLOR if value is None else self._engine.color_for(value)
                rect = patches.Rectangle((upper_left_x, upper_left_y),
                                         layout.cell_width, layout.cell_height,
                                         facecolor=color, edgecolor=GRID_LINE_COLOR,
                                         linewidth=0.5)
                ax.add_patch(rect)
                if clip is not None:
                    rect.set_clip_path(clip)
                cells.append(rect)

                if self.show_chip_values and value is not None:
                    text = ax.text(upper_left_x + layout.cell_width / 2,
                                   upper_left_y + layout.cell_height / 2,
                                   format_chip_value(value), ha="center", va="center",
                                   fontsize=6, color=TEXT_COLOR)
                    if clip is not None:
                        text.set_clip_path(clip)
        return cells

    def draw_wafer_edge(self, ax, area):
        """Draw the wafer outline and the notch; returns (edge, notch) patches."""
        frame = compute_wafer_edge(area)
        edge = patches.Ellipse((frame.x0 + frame.width / 2, frame.y0 + frame.height / 2),
                               frame.width, frame.height,
                               fill=False, edgecolor=EDGE_COLOR)
        ax.add_patch(edge)

        # horizontal is notch right, vertical is notch down
        notch = patches.Polygon(compute_notch(frame, self.orientation), closed=True,
                                facecolor=BACKGROUND_COLOR, edgecolor=EDGE_COLOR)
        ax.add_patch(notch)
        return edge, notch

    # -------------------------
    # Legend
    # -------------------------

    def legend_entries(self):
        return self._engine.legend_entries()

    def draw_legend(self, ax, **kwargs):
        """Add a matplotlib legend built from :meth:`legend_entries`."""
        handles = [patches.Patch(facecolor=entry.color, edgecolor=entry.outline_color,
                                 label=entry.description or entry.label)
                   for entry in self.legend_entries()]
        if not handles:
            return None
        kwargs.setdefault("loc", "center left")
        kwargs.setdefault("bbox_to_anchor", (1.0, 0.5))
        kwargs.setdefault("fontsize", "small")
        return ax.legend(handles=handles, **kwargs)

    # -------------------------
    # Hit-testing
    # -------------------------

    def find_chip_at_point(self, x, y, area):
        """
        The chip under point (x, y) of a drawing in ``area``.

        Returns a ChipHit ``(x, y, label)`` in logical coordinates, or None
        when that chip has no value.
        """
        layout = self.layout(area)
        space = self.chip_space
        y_chips = self.y_chips

        chip_x = chip_index_at(x, layout.origin_x, layout.cell_width, space)
        chip_y = chip_index_at(y, layout.origin_y, layout.cell_height, space)
        chip_x = chip_x - self.x_offset - 1
        chip_y = y_chips - chip_y - self.y_offset - 1

        logical_x, logical_y = self.mapper.to_logical(chip_x, chip_y)
        value = None if self._grid is None else self._grid.value_at(logical_x, logical_y)
        if value is None:
            return None
        return ChipHit(logical_x, logical_y,
                       format_chip_label(logical_x, logical_y, value,
                                         self._engine.paint_scale is not None))


def format_chip_label(x, y, value, continuous):
    """``"(x,y) value"``; integer value for discrete maps, scientific for continuous."""
    return f"({x},{y}) {format_chip_value(value, continuous)}"


def format_chip_value(value, continuous=False):
    """Integer text for discrete values; scientific for continuous or non-finite ones."""
    if value is None:
        return ""
    if continuous or not math.isfinite(value):
        return format_scientific(value)
    return str(int(value))


# -------------------------
# Quick plotting from a DataFrame
# -------------------------

def plot_wafer_map(df, metric, title=None, method=PaintIndexMethod.BLUE_ORANGE,
                   grid_dims=None, color_limits=None, size=600, legend=True,
                   orientation=PlotOrientation.VERTICAL, show_chip_values=False):
    """
    Plot a wafer map for one metric column of a per-die DataFrame.

    Parameters:
      df : DataFrame
          Must contain columns "x", "y", and the specified metric.
      metric : str
          Column to visualize.
      method : PaintIndexMethod
          How values are colored. Defaults to the continuous blue-orange scale.
      grid_dims : tuple (min_x, max_x, min_y, max_y), optional
          Forces the grid extent, so filtered data keeps the full wafer layout.
      color_limits : tuple (vmin, vmax), optional
          Overrides the automatic scale bounds of the continuous method.
      size : float
          Side of the square drawing area, in data units.

    Returns:
      (fig, ax, plot)
    """
    grid = ChipGrid.from_frame(df, metric, grid_dims=grid_dims)
    logger.info("Loaded %d chips for %s", len(grid), metric)
    if color_limits is not None:
        grid.set_group_bounds(*color_limits)

    plot = WaferMapPlot(grid, ColorIndexEngine(method=method), orientation=orientation,
                        show_chip_values=show_chip_values)

    fig, ax = plt.subplots(figsize=(8, 6))
    plt.subplots_adjust(left=0.05, right=0.75, top=0.9, bottom=0.05)
    area = (0, 0, size, size)
    prepare_axes(ax, area)
    plot.draw(ax, area)
    if legend:
        plot.draw_legend(ax)
    if title:
        ax.set_title(title)
    return fig, ax, plot


if __name__ == "__main__":
    setup_logging()
    if len(sys.argv) < 3:
        print("Usage: python -m wafermap.plot <summary.csv> <metric column>")
        sys.exit(1)

    df_summary = pd.read_csv(sys.argv[1])  # Expected: x, y and the metric column
    fig, ax, plot = plot_wafer_map(df_summary, sys.argv[2], title=sys.argv[2])
    plt.show()
