"""Tests for point, range, brush and lasso inversion."""

import logging
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from pylinesqt import (
    DateScale,
    ImmediateAnimationDriver,
    LassoSelection,
    LinearScale,
    Lines,
    LinesModel,
    PlotSurface,
    SelectorModel,
)
from pylinesqt.scale_binder import ScaleBinder
from pylinesqt.selection import InversionEngine, bisect_clamped


@pytest.fixture
def engine(qapp):
    """Single curve x=[0..4] with the x scale mapped onto [0, 100] pixels."""
    model = LinesModel(x=[0, 1, 2, 3, 4], y=[[1, 3, 2, 5, 4]])
    x = LinearScale(0.0, 4.0)
    x.set_range((0.0, 100.0))
    y = LinearScale(0.0, 5.0)
    y.set_range((100.0, 0.0))
    binder = ScaleBinder(PlotSurface(), {"x": x, "y": y})
    return InversionEngine(model, binder)


class TestBisect:
    def test_left_insertion(self):
        data = np.array([0.0, 1.0, 2.0, 3.0])
        assert bisect_clamped(data, 1.0) == 1
        assert bisect_clamped(data, 1.5) == 2

    def test_clamped(self):
        data = np.array([0.0, 1.0, 2.0])
        assert bisect_clamped(data, -10.0) == 0
        assert bisect_clamped(data, 10.0) == 2


class TestInvertPoint:
    def test_middle_pixel(self, engine):
        assert engine.invert_point(50.0) == 2
        assert engine._model.idx_selected == [2]

    def test_out_of_range_pixels(self, engine):
        assert engine.invert_point(-500.0) == 0
        assert engine.invert_point(500.0) == 4

    def test_touches_model(self, engine):
        calls = []
        engine._model.touched.connect(lambda: calls.append(True))
        engine.invert_point(10.0)
        assert calls == [True]

    def test_no_data(self, qapp):
        model = LinesModel()
        binder = ScaleBinder(PlotSurface(), {"x": LinearScale(), "y": LinearScale()})
        assert InversionEngine(model, binder).invert_point(3.0) is None
        assert model.idx_selected is None

    def test_degenerate_range(self, engine):
        engine._binder.scale("x").set_range((40.0, 40.0))
        assert engine.invert_point(75.0) == 0


class TestInvertRange:
    def test_range(self, engine):
        assert engine.invert_range(25.0, 75.0) == [1, 3]
        assert engine._model.idx_selected == [1, 3]

    def test_reversed_and_clamped(self, engine):
        assert engine.invert_range(1000.0, -1000.0) == [0, 4]

    def test_replaces_lasso_selection(self, engine):
        engine._model.idx_selected = [LassoSelection("C1", "l1", (0,))]
        engine.invert_range(0.0, 50.0)
        assert engine._model.idx_selected == [0, 2]

    def test_degenerate_range(self, engine):
        """Both ends on the same pixel select a single index."""
        assert engine.invert_range(50.0, 50.0) == [2, 2]
        assert engine._model.idx_selected == [2, 2]

    def test_no_data(self, qapp):
        model = LinesModel()
        binder = ScaleBinder(PlotSurface(), {"x": LinearScale(), "y": LinearScale()})
        touched = []
        model.touched.connect(lambda: touched.append(True))
        assert InversionEngine(model, binder).invert_range(0.0, 50.0) is None
        assert model.idx_selected is None
        assert touched == []


class TestInvertMultiRange:
    def test_writes_bounds_to_selector(self, engine):
        selector = SelectorModel()
        engine.selector = selector
        assert engine.invert_multi_range((0.5, 3.0)) == [1, 3]
        assert selector.selected == [0.5, 3.0]

    def test_date_bounds_are_formatted(self, qapp):
        t0 = datetime(2024, 5, 1, tzinfo=timezone.utc)
        times = [t0 + timedelta(days=i) for i in range(4)]
        model = LinesModel(x=times, y=[[1, 2, 3, 4]])
        x = DateScale(times[0], times[-1], date_format="%Y-%m-%d")
        binder = ScaleBinder(PlotSurface(), {"x": x, "y": LinearScale()})
        selector = SelectorModel()
        touched = []
        selector.touched.connect(lambda: touched.append(True))
        engine = InversionEngine(model, binder, selector)
        engine.invert_multi_range((times[1].timestamp(), times[2].timestamp()))
        assert selector.selected == ["2024-05-02", "2024-05-03"]
        assert touched == [True]

    def test_datetime_bounds(self, qapp):
        t0 = datetime(2024, 5, 1, tzinfo=timezone.utc)
        times = [t0 + timedelta(days=i) for i in range(4)]
        model = LinesModel(x=times, y=[[1, 2, 3, 4]])
        x = DateScale(times[0], times[-1], date_format="%Y-%m-%d")
        binder = ScaleBinder(PlotSurface(), {"x": x, "y": LinearScale()})
        selector = SelectorModel()
        engine = InversionEngine(model, binder, selector)
        assert engine.invert_multi_range((times[1], times[2])) == [1, 2]
        assert selector.selected == ["2024-05-02", "2024-05-03"]

    def test_datetime64_bounds(self, qapp):
        times = np.array(["2024-05-01", "2024-05-02", "2024-05-03"], dtype="datetime64[D]")
        model = LinesModel(x=times, y=[[1, 2, 3]])
        x = DateScale(times[0], times[-1], date_format="%Y-%m-%d")
        binder = ScaleBinder(PlotSurface(), {"x": x, "y": LinearScale()})
        engine = InversionEngine(model, binder, SelectorModel())
        assert engine.invert_multi_range((times[0], times[1])) == [0, 1]

    def test_no_data(self, qapp):
        model = LinesModel()
        binder = ScaleBinder(PlotSurface(), {"x": LinearScale(), "y": LinearScale()})
        selector = SelectorModel()
        engine = InversionEngine(model, binder, selector)
        assert engine.invert_multi_range((0.0, 1.0)) is None
        assert selector.selected is None

    def test_without_selector(self, engine, caplog):
        with caplog.at_level(logging.WARNING, logger="pylinesqt.selection"):
            assert engine.invert_multi_range((0.0, 1.0)) == [0, 1]
        assert "without a selector" in caplog.text


class TestLasso:
    """Lasso merge and removal."""

    @staticmethod
    def box(x0, y0, x1, y1):
        return [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]

    def test_selects_points_inside(self, engine):
        # pixels: x = 25 * i, so the box covers indices 1 and 2
        assert engine.update_lasso_selection("l1", self.box(10, -10, 60, 110))
        assert engine._model.idx_selected == [LassoSelection("C1", "l1", (1, 2))]

    def test_nothing_inside(self, engine):
        assert not engine.update_lasso_selection("l1", self.box(500, 500, 600, 600))
        assert engine._model.idx_selected is None

    def test_round_trip_keeps_other_lassos(self, engine):
        other = LassoSelection("C1", "other", (4,))
        engine._model.idx_selected = [other]
        before = list(engine._model.idx_selected)
        engine.update_lasso_selection("l1", self.box(-10, -10, 110, 110))
        assert len(engine._model.idx_selected) == 2
        engine.update_lasso_selection("l1", [])
        assert engine._model.idx_selected == before

    def test_round_trip_from_empty(self, engine):
        engine.update_lasso_selection("l1", self.box(-10, -10, 110, 110))
        engine.update_lasso_selection("l1", None)
        assert engine._model.idx_selected is None

    def test_same_id_replaced(self, engine):
        engine.update_lasso_selection("l1", self.box(-10, -10, 110, 110))
        engine.update_lasso_selection("l1", self.box(10, -10, 35, 110))
        assert engine._model.idx_selected == [LassoSelection("C1", "l1", (1,))]

    def test_undefined_points_skipped(self, qapp, engine):
        engine._model.set_data(x=[0, 1, 2, 3, 4], y=[[1, None, 2, 5, 4]])
        engine.update_lasso_selection("l1", self.box(-10, -10, 110, 110))
        assert engine._model.idx_selected[0].indices == (0, 2, 3, 4)

    def test_custom_containment_test(self, engine):
        seen = []

        def contains(point, vertices):
            seen.append(point)
            return point[0] == 0.0

        engine.update_lasso_selection("l1", self.box(0, 0, 1, 1), contains)
        assert len(seen) == 5
        assert engine._model.idx_selected == [LassoSelection("C1", "l1", (0,))]


class TestLinesEntryPoints:
    def test_scenario_through_mark(self, qapp):
        surface = PlotSurface(102, 100, margin={"top": 0, "bottom": 0, "left": 0, "right": 0})
        model = LinesModel(x=[0, 1, 2, 3, 4], y=[[0, 1, 0, 1, 0]], stroke_width=2)
        x, y = LinearScale(0.0, 4.0), LinearScale(0.0, 1.0)
        mark = Lines(model, scales={"x": x, "y": y}, surface=surface, driver=ImmediateAnimationDriver())
        mark.render()
        assert x.range == (1.0, 101.0)
        assert mark.invert_point(51.0) == 2
        assert mark.invert_range(0.0, 26.0) == [0, 1]
        mark.close()
