"""Qt widget hosting a :class:`PlotSurface` and its Lines marks.

The widget embeds a ``pyqtgraph.GraphicsView`` whose scene coordinates are
the surface's pixel coordinates. It keeps the surface size in sync with the
widget and turns mouse clicks into selection writes:

  - click on the plot: point selection on every mark
  - shift+click: range selection between the previous click and this one
  - click on a legend row: toggle that curve

Typical usage:

    widget = LinesWidget()
    lines = widget.add_lines(model, scales={"x": x_scale, "y": y_scale})
    lines.draw_legend()
    widget.pointSelected.connect(on_point)
    widget.show()
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Tuple

import pyqtgraph as pg
from PySide6 import QtCore
from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QVBoxLayout, QWidget

from .lines import Lines
from .lines_model import LinesModel
from .surface import PlotSurface

logger = logging.getLogger(__name__)


class LinesWidget(QWidget):
    """Widget showing one or more Lines marks.

    Attributes:
        pointSelected: Emitted with the selected index after a click.
        rangeSelected: Emitted with ``(start, end)`` after a shift+click.
        curveToggled: Emitted with the curve name after a legend click.
    """

    pointSelected = Signal(int)
    rangeSelected = Signal(int, int)
    curveToggled = Signal(str)

    def __init__(self, parent: Optional[QWidget] = None, surface: Optional[PlotSurface] = None) -> None:
        super().__init__(parent)
        self.surface = surface if surface is not None else PlotSurface()
        self._marks: List[Lines] = []
        self._last_click_x: Optional[float] = None
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.view = pg.GraphicsView(background="w")
        self.view.enableMouse(False)
        self.view.scene().addItem(self.surface.root)
        self.view.scene().sigMouseClicked.connect(self._on_scene_clicked)
        layout.addWidget(self.view)

    @property
    def marks(self) -> List[Lines]:
        return list(self._marks)

    def add_lines(self, model: LinesModel, scales: Mapping[str, Any], **kwargs: Any) -> Lines:
        """Create, render and track a Lines mark on this widget's surface."""
        lines = Lines(model, scales=scales, surface=self.surface, **kwargs)
        lines.render()
        self._marks.append(lines)
        return lines

    def remove_lines(self, lines: Lines) -> None:
        if lines in self._marks:
            self._marks.remove(lines)
            lines.close()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        size = self.view.size()
        width, height = float(size.width()), float(size.height())
        self.view.setRange(QtCore.QRectF(0.0, 0.0, width, height), padding=0)
        self.surface.resize(width, height)

    def closeEvent(self, event) -> None:
        for lines in self._marks:
            lines.close()
        self._marks = []
        super().closeEvent(event)

    def _on_scene_clicked(self, ev) -> None:
        if ev.button() != Qt.MouseButton.LeftButton:
            return
        pos = ev.scenePos()

        hit = self._legend_hit(pos)
        if hit is not None:
            lines, index = hit
            result = lines.toggle_curve(index)
            if result is not None:
                self.curveToggled.emit(result.name)
            return

        if not self.surface.plot_rect().contains(pos):
            return
        x = float(pos.x())
        if ev.modifiers() & Qt.KeyboardModifier.ShiftModifier and self._last_click_x is not None:
            for lines in self._marks:
                indices = lines.invert_range(self._last_click_x, x)
                if indices is not None:
                    self.rangeSelected.emit(indices[0], indices[1])
        else:
            for lines in self._marks:
                index = lines.invert_point(x)
                if index is not None:
                    self.pointSelected.emit(index)
        self._last_click_x = x
        logger.debug("Plot clicked at x=%.1f", x)

    def _legend_hit(self, pos: QtCore.QPointF) -> Optional[Tuple[Lines, int]]:
        """Mark and curve index of the legend row under ``pos``, if any."""
        best = None
        for lines in self._marks:
            for index, row in enumerate(lines.state.legend_rows.values()):
                if not row.group.isVisible():
                    continue
                rect = row.group.mapRectToScene(row.group.childrenBoundingRect())
                if not rect.contains(pos):
                    continue
                # rows may overlap vertically; the nearest swatch wins
                distance = abs(row.swatch.sceneBoundingRect().center().y() - pos.y())
                if best is None or distance < best[0]:
                    best = (distance, lines, index)
        if best is None:
            return None
        return best[1], best[2]
