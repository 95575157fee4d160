# -*- coding: utf-8 -*-
"""
legend.py

Legend entries for a wafer map, derived from a color engine's current
assignment: one entry per assigned value for discrete maps, or up to 21
samples along the scale for continuous maps.
"""

import math
from dataclasses import dataclass

from matplotlib.colors import to_rgb

from wafermap.config import EDGE_COLOR, FALLBACK_COLOR, LEGEND_SAMPLES

# Marker rectangle (x, y, width, height) centred on the legend anchor
LEGEND_SHAPE = (-3.0, -5.0, 6.0, 10.0)


@dataclass(frozen=True)
class LegendEntry:
    label: str
    description: str
    color: tuple
    shape: tuple = LEGEND_SHAPE
    outline_color: tuple = to_rgb(EDGE_COLOR)


def format_scientific(value):
    """
    Format like the ``0.#####E0`` decimal pattern: one integer digit, up to
    five fraction digits without trailing zeros, plain exponent.

    >>> format_scientific(1234.5678)
    '1.23457E3'
    >>> format_scientific(0.0025)
    '2.5E-3'
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "-∞" if value < 0 else "∞"
    if value == 0:
        return "0E0"
    mantissa, exponent = f"{value:.5E}".split("E")
    mantissa = mantissa.rstrip("0").rstrip(".")
    return f"{mantissa}E{int(exponent)}"


def _continuous_entries(engine):
    scale = engine.paint_scale
    lower, upper = scale.lower_bound, scale.upper_bound

    data_max = upper
    if engine.grid is not None and engine.grid.all_groups_max_value is not None:
        data_max = float(engine.grid.all_groups_max_value)
        if not math.isfinite(data_max):
            data_max = upper

    interval = (upper - lower) / LEGEND_SAMPLES
    entries = []
    value = lower
    while value <= upper and len(entries) <= LEGEND_SAMPLES:
        color = scale.get_paint(value) or to_rgb(FALLBACK_COLOR)
        entries.append(LegendEntry(format_scientific(value), "", color))
        old_value = value
        value += interval
        if value > data_max:
            value = data_max
        # no progress: the interval rounded away or the data max was reached
        if value == old_value:
            break
    return entries


def _discrete_entries(engine):
    descriptions = engine.bin_descriptions or {}
    entries = []
    for value, index in sorted(engine.assignment.paint_index.items()):
        label = str(value)
        description = descriptions.get(label) or label
        entries.append(LegendEntry(label, description, engine.color_for_index(index)))
    return entries


def build_legend_entries(engine):
    """Legend entries for ``engine``'s current color assignment."""
    if engine.assignment.is_continuous:
        return _continuous_entries(engine)
    return _discrete_entries(engine)
