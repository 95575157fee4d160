# -*- coding: utf-8 -*-
"""
geometry.py

Wafer map layout math: chip cell size and origin, the wafer edge circle, the
orientation notch, and the inverse lookup from a point back to a chip index.

Everything here is a pure function of a drawing rectangle and grid
parameters. Rectangles are ``matplotlib.transforms.Bbox`` objects (or
``(x, y, width, height)`` tuples) in a y-down device frame: ``y0`` is the top
edge.
"""

import enum
import math
from collections import namedtuple

from matplotlib.transforms import Bbox

from wafermap.config import NOTCH_DEPTH_RATIO

CellLayout = namedtuple("CellLayout", ["cell_width", "cell_height", "origin_x", "origin_y"])


class PlotOrientation(enum.Enum):
    """Where the notch sits: VERTICAL is notch down, HORIZONTAL is notch right."""
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


def as_bbox(rect):
    """Accept a Bbox or an (x, y, width, height) tuple."""
    if isinstance(rect, Bbox):
        return rect
    x, y, width, height = rect
    return Bbox.from_bounds(x, y, width, height)


def _cell_size(axis_length, space, count):
    # (space * count - 1) is the gap allowance used since the first wafer plots
    return (axis_length - (space * count - 1)) / count


def compute_cell_layout(rect, cell_count_x, cell_count_y, space):
    """
    Chip cell size and grid origin for a drawing rectangle.

    A square rectangle packs square cells using its width for both axes.
    Otherwise the width sizes the X cells and the height sizes the Y cells,
    and the origin along the longer side is moved in by half the difference
    between the sides, the same way the wafer edge is centred.
    """
    rect = as_bbox(rect)
    width, height = rect.width, rect.height
    origin_x, origin_y = rect.x0, rect.y0

    if width == height:
        return CellLayout(_cell_size(width, space, cell_count_x),
                          _cell_size(width, space, cell_count_y),
                          origin_x, origin_y)

    major = max(width, height)
    minor = min(width, height)
    if width == minor:
        origin_y += (major - minor) / 2
    else:
        origin_x += (major - minor) / 2

    # TODO: confirm with product whether cells should be sized from the minor side like the edge
    return CellLayout(_cell_size(width, space, cell_count_x),
                      _cell_size(height, space, cell_count_y),
                      origin_x, origin_y)


def compute_wafer_edge(rect):
    """Bounding square of the wafer circle: side min(w, h), centred on the long side."""
    rect = as_bbox(rect)
    width, height = rect.width, rect.height
    diameter = width
    upper_left_x, upper_left_y = rect.x0, rect.y0

    if width != height:
        major = max(width, height)
        minor = min(width, height)
        diameter = minor
        if width == minor:
            upper_left_y += (major - minor) / 2
        else:
            upper_left_x += (major - minor) / 2

    return Bbox.from_bounds(upper_left_x, upper_left_y, diameter, diameter)


def compute_notch(frame, orientation=PlotOrientation.VERTICAL):
    """
    Three integer points of the orientation notch on the wafer edge.

    ``frame`` is the wafer edge bounding square. The notch is centred on the
    right edge for HORIZONTAL and on the bottom edge for VERTICAL.
    """
    frame = as_bbox(frame)
    depth = frame.width * NOTCH_DEPTH_RATIO

    if orientation == PlotOrientation.HORIZONTAL:
        upper_left_x = frame.x0 + frame.width - depth
        upper_left_y = frame.y0 + frame.height / 2 - depth
        x = [int(upper_left_x), int(upper_left_x + depth)]
        x.append(x[1])
        y = [int(upper_left_y + depth * .5), int(upper_left_y), int(upper_left_y + depth)]
    else:
        upper_left_x = frame.x0 + frame.width / 2 - depth
        upper_left_y = frame.y0 + frame.height - depth
        x = [int(upper_left_x + depth * .5), int(upper_left_x), int(upper_left_x + depth)]
        y = [int(upper_left_y), int(upper_left_y + depth)]
        y.append(y[1])

    return list(zip(x, y))


def cell_upper_left(origin, cell_size, space, index):
    """Leading edge of display cell ``index`` (1-based) along one axis."""
    return origin - cell_size + cell_size * index + space * (index - 1)


def chip_index_at(coordinate, origin, cell_size, space):
    """Display cell index (1-based) containing ``coordinate`` along one axis."""
    return int(math.floor((coordinate - origin + cell_size + space) / (cell_size + space)))
