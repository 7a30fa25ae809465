"""Presentation attributes of rendered curves and legend rows.

The model stores style as arrays aligned with the curve collection (``fill``,
``opacity``) plus scalars (``stroke_width``, ``line_style``). The updater
translates them into one :class:`~pylinesqt.models.CurveStyle` per curve and
applies single attributes to the existing graphics without recomputing any
path geometry.

Coloring rule, shared by curves and legend: a bound color scale colors every
curve that carries a color value; any other curve gets the positional palette
color ``colors[i % len(colors)]``.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import pyqtgraph as pg
from PySide6 import QtGui
from PySide6.QtCore import Qt

from .graphics import CurveGraphic, LegendRow, MarkState
from .models import Color, Curve, CurveStyle, LineStyle

logger = logging.getLogger(__name__)

DASH_PATTERNS = {
    LineStyle.SOLID: "none",
    LineStyle.DASHED: "10,10",
    LineStyle.DOTTED: "2,10",
}


def dash_pattern(line_style: LineStyle) -> str:
    """Dash array string of ``line_style`` ("none" for solid lines)."""
    return DASH_PATTERNS[LineStyle(line_style)]


def qt_dash_pattern(line_style: LineStyle, width: float) -> Optional[List[float]]:
    """Dash pattern in Qt units (multiples of the pen width), or None if solid."""
    pattern = dash_pattern(line_style)
    if pattern == "none":
        return None
    unit = max(float(width), 1.0)
    return [float(v) / unit for v in pattern.split(",")]


def _set_dash(pen: QtGui.QPen, line_style: LineStyle, width: float) -> None:
    pattern = qt_dash_pattern(line_style, width)
    if pattern is None:
        pen.setStyle(Qt.PenStyle.SolidLine)
    else:
        pen.setDashPattern(pattern)


def make_pen(style: CurveStyle) -> QtGui.QPen:
    pen = pg.mkPen(color=style.stroke, width=style.width)
    _set_dash(pen, style.line_style, style.width)
    return pen


def make_brush(fill: Optional[Color]) -> QtGui.QBrush:
    if fill is None or fill == "none":
        return QtGui.QBrush(Qt.BrushStyle.NoBrush)
    return pg.mkBrush(fill)


class StyleUpdater:
    """Resolves and applies curve styles.

    Args:
        model: The mark's :class:`~pylinesqt.lines_model.LinesModel`.
        binder: Scale binder, consulted for the color slot.
        state: Shared mark state holding the rendered graphics.
    """

    def __init__(self, model: Any, binder: Any, state: MarkState) -> None:
        self._model = model
        self._binder = binder
        self._state = state

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def element_color(self, curve: Optional[Curve], index: int) -> Color:
        color_scale = self._binder.scale("color")
        if color_scale is not None and curve is not None and curve.color is not None:
            return color_scale.scale(curve.color)
        colors = self._model.colors
        return colors[index % len(colors)]

    def fill_at(self, index: int) -> Optional[Color]:
        fill = self._model.fill
        return fill[index] if index < len(fill) else None

    def opacity_at(self, index: int) -> float:
        opacity = self._model.opacity
        if index < len(opacity) and opacity[index] is not None:
            return float(opacity[index])
        return 1.0

    def curve_style(self, curve: Curve, index: int) -> CurveStyle:
        return CurveStyle(
            stroke=self.element_color(curve, index),
            fill=self.fill_at(index),
            opacity=self.opacity_at(index),
            width=self._model.stroke_width,
            line_style=self._model.line_style,
        )

    def curve_opacity(self, graphic: CurveGraphic) -> float:
        return self.opacity_at(graphic.index) * self._state.toggle_factor(graphic.name)

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def style_curve(self, graphic: CurveGraphic) -> None:
        """Apply every presentation attribute of one curve."""
        style = self.curve_style(graphic.curve, graphic.index)
        graphic.path_item.setPen(make_pen(style))
        graphic.path_item.setBrush(make_brush(style.fill))
        graphic.path_item.setOpacity(self.curve_opacity(graphic))

    def style_legend_row(self, row: LegendRow, curve: Curve, index: int) -> None:
        style = self.curve_style(curve, index)
        row.swatch.setPen(make_pen(style))
        row.text.setColor(pg.mkColor(style.stroke))
        row.text.setOpacity(style.opacity)

    def apply_colors(self) -> None:
        """Re-apply stroke, fill and opacity to curves and legend rows."""
        for graphic in self._state.graphics.values():
            pen = QtGui.QPen(graphic.path_item.pen())
            pen.setColor(pg.mkColor(self.element_color(graphic.curve, graphic.index)))
            graphic.path_item.setPen(pen)
            graphic.path_item.setBrush(make_brush(self.fill_at(graphic.index)))
            graphic.path_item.setOpacity(self.curve_opacity(graphic))
        for index, (name, row) in enumerate(self._state.legend_rows.items()):
            graphic = self._state.graphics.get(name)
            curve = graphic.curve if graphic is not None else None
            color = pg.mkColor(self.element_color(curve, index))
            pen = QtGui.QPen(row.swatch.pen())
            pen.setColor(color)
            row.swatch.setPen(pen)
            row.text.setColor(color)
            row.text.setOpacity(self.opacity_at(index))

    def apply_line_style(self) -> None:
        line_style = self._model.line_style
        for item in self._pen_items():
            pen = QtGui.QPen(item.pen())
            _set_dash(pen, line_style, pen.widthF())
            item.setPen(pen)

    def apply_stroke_width(self) -> None:
        width = self._model.stroke_width
        line_style = self._model.line_style
        for item in self._pen_items():
            pen = QtGui.QPen(item.pen())
            pen.setWidthF(width)
            # dash lengths are relative to the width, keep them in pixels
            _set_dash(pen, line_style, width)
            item.setPen(pen)

    def _pen_items(self) -> List[Any]:
        items: List[Any] = [g.path_item for g in self._state.graphics.values()]
        items.extend(row.swatch for row in self._state.legend_rows.values())
        return items
