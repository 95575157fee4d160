"""Tests for the chip value to color engine."""

import numpy as np
import pytest
from matplotlib.colors import rgb_to_hsv

from wafermap.chip_grid import ChipGrid
from wafermap.color_index import (ColorIndexEngine, PaintIndexMethod, position_index,
                                  resolve_method, scale_bounds, value_index)
from wafermap.palette import DEFAULT_COLORS, SeriesPalette

BLACK = (0.0, 0.0, 0.0)
RED = (1.0, 0.0, 0.0)


def grid_of(values):
    """One chip per value along the x axis."""
    grid = ChipGrid()
    for x, value in enumerate(values):
        grid.add_value(value, x, 0)
    return grid


def engine_for(values, method=None, paint_limit=None):
    engine = ColorIndexEngine(paint_limit=paint_limit, method=method)
    engine.attach(grid_of(values))
    return engine


class TestMethodSelection:

    def test_default_is_consistent(self):
        assert ColorIndexEngine().method == PaintIndexMethod.CONSISTENT

    @pytest.mark.parametrize("method", [-1, 4, 99])
    def test_invalid_method_falls_back_to_consistent(self, method):
        assert resolve_method(method) == PaintIndexMethod.CONSISTENT
        assert ColorIndexEngine(method=method).method == PaintIndexMethod.CONSISTENT

    def test_int_selectors(self):
        assert ColorIndexEngine(method=0).method == PaintIndexMethod.POSITION
        assert ColorIndexEngine(method=3).method == PaintIndexMethod.BLUE_ORANGE

    def test_default_paint_limit(self):
        assert ColorIndexEngine().paint_limit == 33


class TestConsistentIndex:
    """Slot derived from the value itself."""

    def test_slots(self):
        engine = engine_for([1, 5, 33, 34])
        index = engine.assignment.paint_index
        assert index[1] == 0
        assert index[5] == 4
        assert index[33] == 33
        assert index[34] == 0

    def test_colors_come_from_default_table(self):
        engine = engine_for([1, 2, 3])
        assert engine.color_for(1) == DEFAULT_COLORS[0]
        assert engine.color_for(2) == DEFAULT_COLORS[1]
        assert engine.color_for(3) == DEFAULT_COLORS[2]

    @pytest.mark.parametrize("values", [[1, 2, 3], [0.0, 7], [12.5, 99]])
    def test_zero_is_pinned_to_reserved_slot(self, values):
        engine = engine_for(values)
        assert engine.paint_index_for(0.0) == 33
        assert engine.color_for(0.0) == engine.palette.paint_at(33)

    def test_reserved_slot_comes_from_series_palette(self):
        palette = SeriesPalette(supplier=lambda index: "#123456")
        engine = ColorIndexEngine(palette=palette)
        engine.attach(grid_of([1, 2]))
        assert engine.color_for(0) == pytest.approx((0x12 / 255, 0x34 / 255, 0x56 / 255))

    def test_fractional_values_truncate(self):
        engine = engine_for([5.9])
        assert engine.paint_index_for(5.9) == 4

    def test_negative_values_fall_back_to_black(self):
        engine = engine_for([-5])
        assert engine.paint_index_for(-5) == -6
        assert engine.color_for(-5) == BLACK

    def test_unknown_value_is_black(self):
        engine = engine_for([1, 2])
        assert engine.color_for(17) == BLACK

    def test_rebuild_reproduces_assignment(self):
        engine = engine_for([1, 2, 3, 40, 41])
        first = engine.assignment
        engine.invalidate()
        assert engine.assignment is not first
        assert dict(engine.assignment.paint_index) == dict(first.paint_index)


class TestFewValues:
    """Position and value methods with no more values than slots."""

    @pytest.mark.parametrize("method", [PaintIndexMethod.POSITION, PaintIndexMethod.VALUE])
    def test_one_slot_per_value_in_ascending_order(self, method):
        engine = engine_for([30, 10, 20], method=method)
        assert dict(engine.assignment.paint_index) == {10: 0, 20: 1, 30: 2}
        assert engine.color_for(10) == engine.palette.paint_at(0)
        assert engine.color_for(30) == DEFAULT_COLORS[2]


class TestPositionIndex:
    """Equal-count runs of values per slot."""

    def test_two_values_per_slot(self):
        values = list(range(100, 166))
        index = position_index(values, 33)
        assert [index[v] for v in values] == [k // 2 for k in range(66)]

    def test_runs_rounded_up(self):
        values = list(range(67))
        index = position_index(values, 33)
        assert index[0] == index[1] == index[2] == 0
        assert index[3] == 1
        assert index[66] == 22

    def test_never_exceeds_paint_limit(self):
        index = position_index(list(range(50)), 3)
        assert max(index.values()) <= 3

    def test_engine_uses_position_index(self):
        values = [float(v) for v in range(40)]
        engine = engine_for(values, method=PaintIndexMethod.POSITION, paint_limit=10)
        index = engine.assignment.paint_index
        assert index[0.0] == index[3.0] == 0
        assert index[4.0] == 1
        assert index[39.0] == 9

    def test_each_slot_has_its_own_color(self):
        values = list(range(66))
        engine = engine_for(values, method=PaintIndexMethod.POSITION, paint_limit=33)
        slots = set(engine.assignment.paint_index.values())
        colors = {engine.color_for_index(slot) for slot in slots}
        assert len(slots) == 33
        assert len(colors) == 33

    def test_rebuild_is_deterministic(self):
        values = list(np.random.default_rng(1).permutation(100))
        engine = engine_for(values, method=PaintIndexMethod.POSITION)
        first = dict(engine.assignment.paint_index)
        engine.attach(grid_of(list(reversed(values))))
        assert dict(engine.assignment.paint_index) == first


class TestValueIndex:
    """Equal-width value ranges per slot."""

    def test_monotonic_in_value(self):
        values = sorted(np.random.default_rng(7).uniform(-50, 250, size=200).tolist())
        engine = engine_for(values, method=PaintIndexMethod.VALUE)
        slots = [engine.assignment.paint_index[v] for v in values]
        assert slots == sorted(slots)
        assert slots[0] == 0
        assert max(slots) <= engine.paint_limit

    def test_equal_width_buckets(self):
        values = [0.0, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0, 3.5, 4.0]
        index = value_index(values, 0.0, 4.0, 4)
        assert [index[v] for v in values] == [0, 0, 0, 1, 1, 2, 2, 3, 3]

    def test_each_slot_has_its_own_color(self):
        values = np.linspace(0.0, 100.0, 200).tolist()
        engine = engine_for(values, method=PaintIndexMethod.VALUE, paint_limit=40)
        slots = set(engine.assignment.paint_index.values())
        colors = {engine.color_for_index(slot) for slot in slots}
        assert len(slots) > 33
        assert len(colors) == len(slots)

    def test_clamped_to_paint_limit(self):
        index = value_index([0.0, 1.0, 100.0], 0.0, 10.0, 2)
        assert index[100.0] == 2


class TestBlueOrangeScale:
    """Continuous hue gradient."""

    def test_thousand_break_points_cover_range(self):
        engine = engine_for([0.0, 2.0, 10.0], method=PaintIndexMethod.BLUE_ORANGE)
        scale = engine.paint_scale
        assert scale is not None
        assert len(scale) == 1000
        assert (scale.lower_bound, scale.upper_bound) == (0.0, 10.0)
        points = scale.break_points
        assert points[0][0] == 0.0
        assert points[-1][0] == pytest.approx(9.99)

    def test_starts_blue_and_ends_near_red(self):
        engine = engine_for([0.0, 10.0], method=PaintIndexMethod.BLUE_ORANGE)
        points = engine.paint_scale.break_points
        assert points[0][1] == pytest.approx((0.0, 0.0, 1.0))
        assert rgb_to_hsv(points[-1][1])[0] < 0.001
        hues = [rgb_to_hsv(color)[0] for _, color in points]
        assert hues == sorted(hues, reverse=True)

    def test_lookup(self):
        engine = engine_for([0.0, 10.0], method=PaintIndexMethod.BLUE_ORANGE)
        points = engine.paint_scale.break_points
        assert engine.color_for(0.0) == points[0][1]
        assert engine.color_for(10.0) == points[-1][1]
        assert engine.color_for(5.0) == points[500][1]
        # outside the scale
        assert engine.color_for(10.5) == RED
        assert engine.color_for(-0.1) == RED

    def test_uses_group_bounds(self):
        grid = grid_of([4.0, 6.0])
        grid.set_group_bounds(0.0, 100.0)
        engine = ColorIndexEngine(method=PaintIndexMethod.BLUE_ORANGE)
        engine.attach(grid)
        assert engine.paint_scale.upper_bound == 100.0

    def test_flat_range_is_widened(self):
        engine = engine_for([5.0], method=PaintIndexMethod.BLUE_ORANGE)
        assert engine.paint_scale.lower_bound == 2.5
        assert engine.paint_scale.upper_bound == 5.0

    @pytest.mark.parametrize("low,high,expected", [
        (5.0, 5.0, (2.5, 5.0)),
        (0.0, 0.0, (-1.0, 0.0)),
        (-4.0, -4.0, (-8.0, -4.0)),
        (None, None, (0.0, 1.0)),
        (float("nan"), float("inf"), (0.0, 1.0)),
        (float("-inf"), 3.0, (0.0, 3.0)),
        (1.0, 1.0, (0.5, 1.0)),
    ])
    def test_degenerate_bounds(self, low, high, expected):
        assert scale_bounds(low, high) == expected

    def test_no_grid_means_no_scale(self):
        engine = ColorIndexEngine(method=PaintIndexMethod.BLUE_ORANGE)
        assert engine.paint_scale is None
        assert engine.color_for(1.0) == BLACK


class TestChangeNotification:

    def test_listeners_called_on_attach_and_descriptions(self):
        calls = []
        engine = ColorIndexEngine()
        engine.add_change_listener(calls.append)
        engine.attach(grid_of([1, 2]))
        engine.set_bin_descriptions({"1": "Pass"})
        assert calls == [engine, engine]

        engine.remove_change_listener(calls.append)
        engine.invalidate()
        assert len(calls) == 2


class TestSeriesPalette:

    def test_slot_color_does_not_depend_on_lookup_order(self):
        forward, backward = SeriesPalette(), SeriesPalette()
        for slot in range(40, 100):
            forward.paint_at(slot)
        for slot in reversed(range(40, 100)):
            backward.paint_at(slot)
        assert [forward.paint_at(s) for s in range(40, 100)] == \
            [backward.paint_at(s) for s in range(40, 100)]

    def test_supplied_colors_are_distinct(self):
        palette = SeriesPalette()
        colors = {palette.paint_at(slot) for slot in range(60)}
        assert len(colors) == 60

    def test_explicit_slots_win(self):
        palette = SeriesPalette()
        palette.install(["red", "blue"], start=5)
        assert palette.paint_at(5) == RED
        assert palette.paint_at(6) == (0.0, 0.0, 1.0)
        assert palette.paint_at(-1) is None
