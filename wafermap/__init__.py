"""Semiconductor wafer map plotting: chip layout, color bucketing and legends."""
import logging

from wafermap.chip_grid import ChipGrid
from wafermap.color_index import ColorAssignment, ColorIndexEngine, PaintIndexMethod
from wafermap.geometry import (CellLayout, PlotOrientation, compute_cell_layout,
                               compute_notch, compute_wafer_edge)
from wafermap.legend import LegendEntry, build_legend_entries, format_scientific
from wafermap.mapper import CoordinateMapper, MirroredMapper, RotatedMapper
from wafermap.plot import ChipHit, WaferMapPlot, plot_wafer_map

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
