# -*- coding: utf-8 -*-
"""
paint_scale.py

Continuous color scale defined by (value, color) break-points.
"""

import numpy as np
from matplotlib.colors import to_rgb


class LookupPaintScale:
    """
    Piecewise-constant color scale over ``[lower_bound, upper_bound]``.

    A value gets the color of the last break-point at or below it. Values
    outside the bounds, or below the first break-point, get ``default_color``.
    """

    def __init__(self, lower_bound, upper_bound, values, colors, default_color="red"):
        if lower_bound >= upper_bound:
            raise ValueError(
                f"lower_bound ({lower_bound}) must be less than upper_bound ({upper_bound})")
        self.lower_bound = float(lower_bound)
        self.upper_bound = float(upper_bound)
        self.default_color = to_rgb(default_color)

        values = np.asarray(values, dtype=float)
        order = np.argsort(values, kind="stable")
        self._values = values[order]
        self._colors = tuple(to_rgb(colors[i]) for i in order)

    def __len__(self):
        return len(self._values)

    @property
    def break_points(self):
        return list(zip(self._values.tolist(), self._colors))

    def get_paint(self, value):
        if value is None:
            return self.default_color
        value = float(value)
        if np.isnan(value) or value < self.lower_bound or value > self.upper_bound:
            return self.default_color
        index = int(np.searchsorted(self._values, value, side="right")) - 1
        if index < 0:
            return self.default_color
        return self._colors[index]
