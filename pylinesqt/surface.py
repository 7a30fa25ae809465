"""Host drawing surface for marks.

The surface owns the root graphics group marks attach to, the plotting
rectangle and the legend container. It computes the padded pixel ranges the
marks' positional scales map onto, reserving the largest padding any mark
asks for (half the stroke width for lines).

Pixel coordinates follow scene conventions: x grows to the right and y grows
downwards, so the y range runs from the bottom edge to the top edge.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pyqtgraph as pg
from PySide6 import QtCore
from PySide6.QtCore import Signal

from .config import LegendLayout
from .errors import LinesConfigError
from .models import PixelRange


class PlotSurface(QtCore.QObject):
    """Plotting rectangle plus graphics roots for marks.

    Signals:
        layoutChanged: Emitted when the size or margins change.
    """

    layoutChanged = Signal()

    def __init__(
        self,
        width: float = 640.0,
        height: float = 480.0,
        margin: Optional[Dict[str, float]] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._width = float(width)
        self._height = float(height)
        self._margin = {"top": 20.0, "bottom": 40.0, "left": 50.0, "right": 100.0}
        if margin:
            self._margin.update({k: float(v) for k, v in margin.items()})
        self._marks: List[Any] = []

        self.root = pg.ItemGroup()
        self.legend_container = pg.ItemGroup()
        self.legend_container.setParentItem(self.root)
        self.legend_container.setZValue(1e6)

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def margin(self) -> Dict[str, float]:
        return dict(self._margin)

    def add_mark(self, mark: Any) -> None:
        if mark not in self._marks:
            self._marks.append(mark)

    def remove_mark(self, mark: Any) -> None:
        if mark in self._marks:
            self._marks.remove(mark)

    def resize(self, width: float, height: float) -> None:
        size = (float(width), float(height))
        if size == (self._width, self._height):
            return
        self._width, self._height = size
        self.layoutChanged.emit()

    def set_margin(self, **margin: float) -> None:
        updated = dict(self._margin)
        updated.update({k: float(v) for k, v in margin.items()})
        if updated != self._margin:
            self._margin = updated
            self.layoutChanged.emit()

    def plot_rect(self) -> QtCore.QRectF:
        m = self._margin
        return QtCore.QRectF(
            m["left"],
            m["top"],
            max(0.0, self._width - m["left"] - m["right"]),
            max(0.0, self._height - m["top"] - m["bottom"]),
        )

    def view_padding(self, axis: str) -> float:
        pads = [float(mark.get_view_padding().get(axis, 0.0)) for mark in self._marks]
        return max(pads, default=0.0)

    def padded_range(self, axis: str) -> PixelRange:
        """Pixel range of ``axis`` inside the plotting rectangle.

        Args:
            axis: "x" or "y".

        Returns:
            ``(start, end)`` pixels; for "y" start is the bottom edge.

        Raises:
            LinesConfigError: For any other axis name.
        """
        rect = self.plot_rect()
        pad = self.view_padding(axis)
        if axis == "x":
            return (rect.left() + pad, rect.right() - pad)
        if axis == "y":
            return (rect.bottom() - pad, rect.top() + pad)
        raise LinesConfigError(f"Unknown positional axis {axis!r}")

    def legend_layout(self, row_height: float = 20.0) -> LegendLayout:
        rect = self.plot_rect()
        return LegendLayout(
            x_disp=rect.right() + 10.0,
            y_disp=rect.top(),
            inter_x_disp=0.0,
            inter_y_disp=row_height,
        )
