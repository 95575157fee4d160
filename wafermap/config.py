# -*- coding: utf-8 -*-
"""
config.py

Shared constants for the wafer map plot and its color index engine.
"""

# Color engine
DEFAULT_PAINT_LIMIT = 33
BLUE_ORANGE_SEGMENTS = 1000
LEGEND_SAMPLES = 20

# Plot area below which nothing is drawn
MINIMUM_WIDTH_TO_DRAW = 10
MINIMUM_HEIGHT_TO_DRAW = 10

# Notch depth as a fraction of the wafer diameter
NOTCH_DEPTH_RATIO = 0.005

# Display grid used when no chip grid is attached
DEFAULT_X_CHIPS = 35
DEFAULT_Y_CHIPS = 20
DEFAULT_CHIP_SPACE = 1.0

# Colors (anything matplotlib.colors.to_rgb accepts)
BACKGROUND_COLOR = "white"
GRID_LINE_COLOR = "#c0c0c0"
EDGE_COLOR = "black"
FALLBACK_COLOR = "black"
TEXT_COLOR = "black"
