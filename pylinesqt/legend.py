"""End-of-line labels, legend rows and legend-click toggling.

``labels_visibility`` decides which of the two naming devices is shown:

  - "none": neither
  - "label": a text label next to the last defined point of each curve
  - "legend": one legend row (swatch line + text) per curve

Legend clicks dim a curve through :meth:`LegendManager.toggle_curve`. The
dim factor is view state kept in :class:`~pylinesqt.graphics.MarkState`, not
in the model, so it never leaks into other views.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

import pyqtgraph as pg
from PySide6 import QtWidgets

from .config import LegendLayout, LinesConfig
from .graphics import LegendRow, MarkState, detach_item
from .models import LabelsVisibility, ToggleResult
from .style import StyleUpdater

logger = logging.getLogger(__name__)


class LegendManager:
    """Renders curve labels and legend rows for one mark."""

    def __init__(
        self,
        model: Any,
        binder: Any,
        state: MarkState,
        style: StyleUpdater,
        config: LinesConfig,
    ) -> None:
        self._model = model
        self._binder = binder
        self._state = state
        self._style = style
        self._config = config

    def render_labels(self) -> None:
        """Recreate the end-of-line label of every rendered curve."""
        x_scale = self._binder.scale("x")
        y_scale = self._binder.scale("y")
        for graphic in self._state.graphics.values():
            if graphic.label is not None:
                detach_item(graphic.label)
                graphic.label = None
            point = graphic.curve.last_defined_point() if graphic.curve is not None else None
            if point is None or x_scale is None or y_scale is None:
                continue
            label = pg.TextItem(text=graphic.name, anchor=(0, 0.5))
            label.setParentItem(graphic.group)
            label.setPos(
                x_scale.scale(point.x) + x_scale.offset + self._config.label_offset_px,
                y_scale.scale(point.y) + y_scale.offset,
            )
            graphic.label = label
        self.update_visibility()

    def render_legend(
        self, container: QtWidgets.QGraphicsItem, layout: LegendLayout
    ) -> Tuple[int, int]:
        """Build one legend row per curve inside ``container``.

        Args:
            container: Graphics item owned by the host legend box.
            layout: Row offsets and row height computed by the host.

        Returns:
            ``(curve_count, max_label_length)`` for sizing the legend box.
        """
        curves = self._state.curves
        previous = dict(self._state.legend_rows)
        rows = {}
        rect_dim = layout.inter_y_disp * self._config.legend_swatch_ratio
        for index, curve in enumerate(curves):
            row = previous.pop(curve.name, None)
            if row is None:
                row = LegendRow(curve.name, container)
            row.element_id = f"legend{index + 1}"
            row.group.setPos(layout.x_disp, index * layout.inter_y_disp + layout.y_disp)
            row.swatch.setLine(0.0, rect_dim / 2, rect_dim, rect_dim / 2)
            row.text.setText(curve.name)
            row.text.setPos(rect_dim * self._config.legend_text_gap_ratio, rect_dim / 2)
            self._style.style_legend_row(row, curve, index)
            row.swatch.setOpacity(row.swatch_opacity)
            rows[curve.name] = row
        for row in previous.values():
            row.remove()
        self._state.legend_rows = rows
        self.update_visibility()

        max_length = max((len(c.name) for c in curves), default=0)
        return len(curves), max_length

    def update_visibility(self) -> None:
        """Show labels or legend rows according to ``labels_visibility``."""
        mode = self._model.labels_visibility
        show_labels = mode is LabelsVisibility.LABEL
        show_legend = mode is LabelsVisibility.LEGEND
        for graphic in self._state.graphics.values():
            if graphic.label is not None:
                graphic.label.setVisible(show_labels and graphic.displayed)
        for row in self._state.legend_rows.values():
            row.group.setVisible(show_legend)

    def toggle_curve(self, index: int) -> Optional[ToggleResult]:
        """Flip one curve between full and dimmed opacity.

        Args:
            index: Position of the curve in the current collection.

        Returns:
            The new curve and swatch opacities, or None for an unknown index.
        """
        curves = self._state.curves
        if not 0 <= index < len(curves):
            logger.warning("toggle_curve(%d) ignored: %d curves rendered", index, len(curves))
            return None
        name = curves[index].name
        if self._state.toggle_factor(name) == 1.0:
            factor = self._config.dim_opacity
            self._state.toggles[name] = factor
        else:
            factor = 1.0
            self._state.toggles.pop(name, None)
        swatch_opacity = factor + self._config.swatch_opacity_boost

        curve_opacity = factor
        graphic = self._state.graphics.get(name)
        if graphic is not None:
            curve_opacity = self._style.curve_opacity(graphic)
            graphic.path_item.setOpacity(curve_opacity)
        row = self._state.legend_rows.get(name)
        if row is not None:
            row.swatch_opacity = swatch_opacity
            row.swatch.setOpacity(swatch_opacity)
        return ToggleResult(name=name, curve_opacity=curve_opacity, swatch_opacity=swatch_opacity)

    def reset_toggles(self) -> None:
        """Undo every legend click."""
        self._state.toggles.clear()
        for graphic in self._state.graphics.values():
            graphic.path_item.setOpacity(self._style.curve_opacity(graphic))
        for row in self._state.legend_rows.values():
            row.swatch_opacity = 1.0
            row.swatch.setOpacity(1.0)

    def prune_toggles(self) -> None:
        """Forget toggle state of curves that are no longer present."""
        names = {c.name for c in self._state.curves}
        for name in list(self._state.toggles):
            if name not in names:
                del self._state.toggles[name]

    def clear(self) -> None:
        for row in self._state.legend_rows.values():
            row.remove()
        self._state.legend_rows = {}
