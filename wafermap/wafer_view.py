#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
wafer_view.py

Interactive wafer map window. Clicking a chip shows its coordinate and value
in the title; the map redraws itself whenever the plot reports a change
(new grid, new orientation, new bin descriptions).

Usage:
1) Run this script for a random demo wafer.
2) Click a chip to see "(x,y) value" in the title.
3) Close the window when finished.
"""

import logging

import matplotlib.pyplot as plt
import numpy as np

from wafermap.chip_grid import ChipGrid
from wafermap.color_index import ColorIndexEngine, PaintIndexMethod
from wafermap.logging_config import setup_logging
from wafermap.plot import WaferMapPlot, prepare_axes

logger = logging.getLogger(__name__)


class WaferMapViewer:
    def __init__(self, plot, size=600, title="Wafer Map", legend=True):
        plt.ion()  # Enable interactive mode
        self.plot = plot
        self.area = (0, 0, size, size)
        self.title = title
        self.legend = legend
        self.selected = None
        self._select_callbacks = []

        # Create figure and axis
        self.fig, self.ax = plt.subplots(figsize=(8, 6))
        plt.subplots_adjust(left=0.05, right=0.75, top=0.9, bottom=0.05)

        # Build the initial plot
        self._init_plot()

        # Redraw whenever the plot changes
        self.plot.add_change_listener(self._plot_changed)

        # Connect the click event so clicking a chip shows its value
        self.fig.canvas.mpl_connect('button_press_event', self.on_click)

    def _init_plot(self):
        """Draw the wafer map and its legend."""
        self.ax.clear()
        prepare_axes(self.ax, self.area)
        self.plot.draw(self.ax, self.area)
        if self.legend:
            self.plot.draw_legend(self.ax)
        self.ax.set_title(self.title)
        self.fig.canvas.draw_idle()
        self.fig.canvas.flush_events()

    def _plot_changed(self, plot):
        self._init_plot()

    def on_select(self, callback):
        """Call ``callback(hit)`` with the ChipHit (or None) after every click."""
        self._select_callbacks.append(callback)

    def on_click(self, event):
        """Handle mouse click events to report the chip under the cursor."""
        if event.inaxes != self.ax:
            return  # Click was outside wafer axes

        if event.xdata is None or event.ydata is None:
            return

        hit = self.plot.find_chip_at_point(event.xdata, event.ydata, self.area)
        self.selected = hit
        if hit is None:
            logger.debug("No chip at (%.1f, %.1f)", event.xdata, event.ydata)
            self.ax.set_title(self.title)
        else:
            self.ax.set_title(f"{self.title}  {hit.label}")
        self.fig.canvas.draw_idle()

        for callback in list(self._select_callbacks):
            callback(hit)

    def close(self):
        self.plot.remove_change_listener(self._plot_changed)
        plt.close(self.fig)

    def show(self):
        """Block execution until the figure window is closed."""
        plt.show(block=True)


def demo_grid(radius=10, seed=0):
    """A round wafer of random bin numbers 1..8, centred on (radius, radius)."""
    rng = np.random.default_rng(seed)
    grid = ChipGrid(chip_space=1.0)
    for x in range(2 * radius + 1):
        for y in range(2 * radius + 1):
            if (x - radius) ** 2 + (y - radius) ** 2 <= radius ** 2:
                grid.add_value(int(rng.integers(1, 9)), x, y)
    return grid


# --- Example Usage ---
if __name__ == "__main__":
    setup_logging()
    plot = WaferMapPlot(demo_grid(), ColorIndexEngine(method=PaintIndexMethod.CONSISTENT),
                        show_chip_values=True)
    viewer = WaferMapViewer(plot, title="Interactive Wafer Map")
    viewer.show()
