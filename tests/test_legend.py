"""Tests for end-of-line labels, legend rows and legend-click toggling."""

import numpy as np
import pytest

from pylinesqt import ImmediateAnimationDriver, LegendLayout, Lines, LinesModel


@pytest.fixture
def abc_lines(qapp, scales, surface):
    model = LinesModel(
        x=np.arange(5),
        y=[[1, 2, 3, 4, 5], [5, 4, 3, 2, 1], [2, 2, 2, 2, 2]],
        labels=["a", "b", "c"],
        fill=["#ff0000", "#00ff00", "#0000ff"],
        opacity=[1, 1, 1],
    )
    mark = Lines(model, scales=scales, surface=surface, driver=ImmediateAnimationDriver())
    mark.render()
    mark.draw_legend()
    yield mark
    mark.close()


def label_visible(mark):
    return [g.label is not None and g.label.isVisible() for g in mark.state.graphics.values()]


def legend_visible(mark):
    return [row.group.isVisible() for row in mark.state.legend_rows.values()]


class TestLegendRows:
    def test_rows(self, abc_lines):
        rows = list(abc_lines.state.legend_rows.values())
        assert [r.element_id for r in rows] == ["legend1", "legend2", "legend3"]
        assert [r.text.textItem.toPlainText() for r in rows] == ["a", "b", "c"]

    def test_row_positions(self, abc_lines):
        layout = LegendLayout(x_disp=10, y_disp=5, inter_y_disp=30)
        count, max_len = abc_lines.draw_legend(abc_lines.surface.legend_container, layout)
        assert (count, max_len) == (3, 1)
        ys = [row.group.pos().y() for row in abc_lines.state.legend_rows.values()]
        assert ys == [5.0, 35.0, 65.0]

    def test_swatch_colors(self, abc_lines):
        colors = [r.swatch.pen().color().name() for r in abc_lines.state.legend_rows.values()]
        assert colors == [c.lower() for c in abc_lines.model.colors[:3]]

    def test_rows_follow_data(self, abc_lines):
        abc_lines.model.labels = ["a", "z", "c"]
        assert list(abc_lines.state.legend_rows) == ["a", "z", "c"]

    def test_max_label_length(self, qapp, scales, surface):
        model = LinesModel(x=[0, 1], y=[[0, 1], [1, 0]], labels=["short", "much longer"])
        mark = Lines(model, scales=scales, surface=surface, driver=ImmediateAnimationDriver())
        mark.render()
        assert mark.draw_legend() == (2, 11)
        mark.close()


class TestLabelsVisibility:
    """Only one of end-of-line labels or legend rows is shown at a time."""

    def test_none(self, abc_lines):
        abc_lines.model.labels_visibility = "none"
        assert not any(label_visible(abc_lines))
        assert not any(legend_visible(abc_lines))

    def test_label(self, abc_lines):
        abc_lines.model.labels_visibility = "label"
        assert all(label_visible(abc_lines))
        assert not any(legend_visible(abc_lines))

    def test_legend(self, abc_lines):
        abc_lines.model.labels_visibility = "legend"
        assert not any(label_visible(abc_lines))
        assert all(legend_visible(abc_lines))

    def test_label_next_to_last_defined_point(self, qapp, scales, surface):
        model = LinesModel(x=np.arange(4), y=[[1, 2, 3, None]], labels_visibility="label")
        mark = Lines(model, scales=scales, surface=surface, driver=ImmediateAnimationDriver())
        mark.render()
        label = mark.state.graphics["C1"].label
        x_scale, y_scale = scales["x"], scales["y"]
        assert label.pos().x() == pytest.approx(x_scale.scale(2.0) + 3.0)
        assert label.pos().y() == pytest.approx(y_scale.scale(3.0))
        mark.close()

    def test_no_label_without_defined_point(self, qapp, scales, surface):
        model = LinesModel(x=np.arange(2), y=[[None, None]], labels_visibility="label")
        mark = Lines(model, scales=scales, surface=surface, driver=ImmediateAnimationDriver())
        mark.render()
        assert mark.state.graphics["C1"].label is None
        mark.close()

    def test_hidden_curve_hides_label(self, abc_lines):
        abc_lines.model.labels_visibility = "label"
        abc_lines.model.curves_subset = [0, 1]
        assert label_visible(abc_lines) == [True, True, False]


class TestToggleCurve:
    """Legend clicks dim and restore one curve."""

    def test_toggle_dims_and_restores(self, abc_lines):
        result = abc_lines.toggle_curve(1)
        graphic = abc_lines.state.graphics["b"]
        assert result.name == "b"
        assert result.curve_opacity == pytest.approx(0.1)
        assert result.swatch_opacity == pytest.approx(0.5)
        assert graphic.path_item.opacity() == pytest.approx(0.1)
        assert abc_lines.state.legend_rows["b"].swatch.opacity() == pytest.approx(0.5)

        result = abc_lines.toggle_curve(1)
        assert result.curve_opacity == pytest.approx(1.0)
        assert result.swatch_opacity == pytest.approx(1.4)
        assert graphic.path_item.opacity() == pytest.approx(1.0)

    def test_other_curves_untouched(self, abc_lines):
        abc_lines.toggle_curve(1)
        assert abc_lines.state.graphics["a"].path_item.opacity() == pytest.approx(1.0)
        assert abc_lines.state.graphics["c"].path_item.opacity() == pytest.approx(1.0)

    def test_model_not_modified(self, abc_lines):
        abc_lines.toggle_curve(0)
        assert abc_lines.model.opacity == (1.0, 1.0, 1.0)

    def test_toggle_survives_redraw(self, abc_lines):
        abc_lines.toggle_curve(2)
        abc_lines.draw()
        assert abc_lines.state.graphics["c"].path_item.opacity() == pytest.approx(0.1)

    def test_toggle_scales_model_opacity(self, abc_lines):
        abc_lines.model.opacity = [1, 0.5, 1]
        result = abc_lines.toggle_curve(1)
        assert result.curve_opacity == pytest.approx(0.05)

    def test_unknown_index(self, abc_lines):
        assert abc_lines.toggle_curve(7) is None

    def test_reset(self, abc_lines):
        abc_lines.toggle_curve(0)
        abc_lines.toggle_curve(1)
        abc_lines.reset_toggles()
        assert abc_lines.state.toggles == {}
        assert all(g.path_item.opacity() == 1.0 for g in abc_lines.state.graphics.values())

    def test_pruned_when_curve_disappears(self, abc_lines):
        abc_lines.toggle_curve(2)
        abc_lines.model.labels = ["a", "b", "d"]
        assert "c" not in abc_lines.state.toggles
