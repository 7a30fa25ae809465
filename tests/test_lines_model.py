"""Tests for LinesModel data entry, validation and change signals."""

from datetime import datetime, timezone

import numpy as np
import pytest

from pylinesqt import (
    Interpolation,
    LabelsVisibility,
    LassoSelection,
    LinesConfigError,
    LinesDataError,
    LineStyle,
    LinesModel,
    Point,
    SelectorModel,
)


class TestDataEntry:
    """Tests for set_data and curve construction."""

    def test_shared_x(self, qapp):
        """A single x row is shared by every y row."""
        model = LinesModel()
        model.set_data(x=[0, 1, 2], y=[[1, 2, 3], [3, 2, 1]])
        assert len(model.curves) == 2
        np.testing.assert_array_equal(model.curves[1].x, [0.0, 1.0, 2.0])
        np.testing.assert_array_equal(model.curves[1].y, [3.0, 2.0, 1.0])

    def test_one_x_row_per_curve(self, qapp):
        model = LinesModel(x=[[0, 1], [5, 6, 7]], y=[[1, 2], [1, 2, 3]])
        assert [len(c) for c in model.curves] == [2, 3]

    def test_single_curve_from_1d_y(self, qapp):
        model = LinesModel(x=np.arange(4), y=np.array([1.0, 2.0, 3.0, 4.0]))
        assert len(model.curves) == 1

    def test_missing_x_uses_positions(self, qapp):
        model = LinesModel(y=[[5, 6, 7]])
        np.testing.assert_array_equal(model.curves[0].x, [0.0, 1.0, 2.0])

    def test_default_labels(self, qapp):
        """Curves without a label are named C1, C2, ..."""
        model = LinesModel(x=[0, 1], y=[[0, 1], [1, 0], [2, 2]], labels=["first"])
        assert model.curve_labels() == ["first", "C2", "C3"]

    def test_none_marks_point_undefined(self, qapp):
        model = LinesModel(x=[0, 1, 2], y=[[1, None, 3]])
        curve = model.curves[0]
        assert list(curve.defined) == [True, False, True]
        assert np.isnan(curve.y[1])

    def test_datetime_x_converted_to_seconds(self, qapp):
        t0 = datetime(2024, 1, 1, tzinfo=timezone.utc)
        t1 = datetime(2024, 1, 2, tzinfo=timezone.utc)
        model = LinesModel(x=[t0, t1], y=[[1, 2]])
        np.testing.assert_allclose(model.curves[0].x, [t0.timestamp(), t1.timestamp()])

    def test_datetime64_x(self, qapp):
        x = np.array(["2024-01-01", "2024-01-02"], dtype="datetime64[D]")
        model = LinesModel(x=x, y=[[1, 2]])
        assert model.curves[0].x[1] - model.curves[0].x[0] == pytest.approx(86400.0)

    def test_color_values(self, qapp):
        model = LinesModel(x=[0, 1], y=[[0, 1], [1, 0]], color=[3.0, float("nan")])
        assert model.curves[0].color == 3.0
        assert model.curves[1].color is None

    def test_last_defined_point(self, qapp):
        model = LinesModel(x=[0, 1, 2], y=[[1, 2, None]])
        point = model.curves[0].last_defined_point()
        assert (point.x, point.y) == (1.0, 2.0)
        assert isinstance(point, Point)

    def test_no_defined_point(self, qapp):
        model = LinesModel(x=[0, 1], y=[[None, None]])
        assert model.curves[0].last_defined_point() is None

    def test_clear(self, qapp):
        model = LinesModel(x=[0, 1], y=[[0, 1]])
        model.clear()
        assert model.curves == ()
        assert model.x_data.shape == (0,)


class TestDataErrors:
    """Tests for rejected data."""

    def test_length_mismatch(self, qapp):
        with pytest.raises(LinesDataError):
            LinesModel(x=[0, 1, 2], y=[[1, 2]])

    def test_row_count_mismatch(self, qapp):
        with pytest.raises(LinesDataError):
            LinesModel(x=[[0, 1], [0, 1]], y=[[1, 2], [1, 2], [1, 2]])

    def test_duplicate_names(self, qapp):
        with pytest.raises(LinesDataError):
            LinesModel(x=[0, 1], y=[[0, 1], [1, 0]], labels=["a", "a"])

    def test_non_numeric(self, qapp):
        with pytest.raises(LinesDataError):
            LinesModel(x=[0, 1], y=[["a", "b"]])

    def test_failed_set_data_keeps_previous_curves(self, qapp):
        model = LinesModel(x=[0, 1], y=[[0, 1]])
        with pytest.raises(LinesDataError):
            model.set_data(x=[0, 1, 2], y=[[0, 1]])
        assert len(model.curves) == 1
        np.testing.assert_array_equal(model.curves[0].y, [0.0, 1.0])

    def test_duplicate_labels_rejected_on_relabel(self, qapp):
        model = LinesModel(x=[0, 1], y=[[0, 1], [1, 0]])
        with pytest.raises(LinesDataError):
            model.labels = ["same", "same"]
        assert model.curve_labels() == ["C1", "C2"]


class TestAttributes:
    """Tests for validated model attributes."""

    def test_enum_coercion(self, qapp):
        model = LinesModel()
        model.line_style = "dashed"
        model.interpolation = "step-after"
        model.labels_visibility = "legend"
        assert model.line_style is LineStyle.DASHED
        assert model.interpolation is Interpolation.STEP_AFTER
        assert model.labels_visibility is LabelsVisibility.LEGEND

    @pytest.mark.parametrize(
        "attribute, value",
        [
            ("line_style", "wavy"),
            ("interpolation", "bezier"),
            ("labels_visibility", "both"),
            ("stroke_width", 0),
            ("stroke_width", -1.5),
            ("animate_dur", -10),
            ("colors", []),
        ],
    )
    def test_invalid_values(self, qapp, attribute, value):
        model = LinesModel()
        with pytest.raises(LinesConfigError):
            setattr(model, attribute, value)

    def test_config_error_is_value_error(self, qapp):
        with pytest.raises(ValueError):
            LinesModel(line_style="wavy")

    def test_defaults(self, qapp):
        model = LinesModel()
        assert model.labels_visibility is LabelsVisibility.NONE
        assert model.stroke_width == 2.0
        assert model.curves_subset == ()
        assert model.idx_selected is None

    def test_empty_selection_is_none(self, qapp):
        model = LinesModel()
        model.idx_selected = []
        assert model.idx_selected is None

    def test_numpy_subset(self, qapp):
        model = LinesModel(x=[0, 1], y=[[0, 1], [1, 0], [2, 2]])
        changed = []
        model.propertyChanged.connect(changed.append)
        model.curves_subset = np.array([0, 2])
        assert model.curves_subset == (0, 2)
        assert changed == ["curves_subset"]

    def test_numpy_fill(self, qapp):
        model = LinesModel(fill=np.array(["red", "blue"]))
        assert model.fill == ("red", "blue")
        model.fill = np.array(["green"])
        assert model.fill == ("green",)

    def test_numpy_labels(self, qapp):
        model = LinesModel(x=[0, 1], y=[[0, 1], [1, 0]], labels=np.array(["a", "b"]))
        assert model.curve_labels() == ["a", "b"]


class TestSignals:
    """Tests for change notification."""

    def test_property_changed_emitted_once(self, qapp):
        model = LinesModel()
        names = []
        model.propertyChanged.connect(names.append)
        model.stroke_width = 4
        model.stroke_width = 4.0
        assert names == ["stroke_width"]

    def test_data_updated(self, qapp):
        model = LinesModel()
        calls = []
        model.dataUpdated.connect(lambda: calls.append("data"))
        model.set_data(x=[0, 1], y=[[0, 1]])
        model.labels = ["renamed"]
        assert calls == ["data", "data"]
        assert model.curve_labels() == ["renamed"]

    def test_touch(self, qapp):
        model = LinesModel()
        calls = []
        model.touched.connect(lambda: calls.append(True))
        model.touch()
        assert calls == [True]

    def test_hold_sync(self, qapp):
        model = LinesModel()
        assert not model.dirty
        with model.hold_sync():
            assert model.dirty
            with model.hold_sync():
                assert model.dirty
            assert model.dirty
        assert not model.dirty

    def test_lasso_entries(self, qapp):
        model = LinesModel()
        entry = LassoSelection("a", "l1", (1, 2))
        model.idx_selected = [entry]
        assert model.lasso_entries() == [entry]
        model.idx_selected = [3]
        assert model.lasso_entries() == []


class TestSelectorModel:
    def test_selected(self, qapp):
        selector = SelectorModel()
        names = []
        selector.propertyChanged.connect(names.append)
        selector.selected = (1, 2)
        assert selector.selected == [1, 2]
        assert names == ["selected"]
