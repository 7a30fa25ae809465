"""Graphics items owned by a Lines mark and the shared view state.

Each curve is drawn as a ``QGraphicsPathItem`` inside its own group so the
end-of-line label can live next to it. Legend rows pair a swatch line with a
text item. :class:`MarkState` is the transient state the mark's components
share between draws.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import pyqtgraph as pg
from PySide6 import QtGui, QtWidgets
from PySide6.QtCore import Qt

from .geometry import LineGenerator
from .models import Curve

_uids = itertools.count(1)


def detach_item(item: QtWidgets.QGraphicsItem) -> None:
    scene = item.scene()
    if scene is not None:
        scene.removeItem(item)
    else:
        item.setParentItem(None)


class CurveGraphic:
    """Graphics of one rendered curve."""

    def __init__(self, name: str, parent: QtWidgets.QGraphicsItem) -> None:
        self.uid = next(_uids)
        self.name = name
        self.element_id = ""
        self.index = 0
        self.curve: Optional[Curve] = None

        self.group = pg.ItemGroup()
        self.group.setParentItem(parent)
        self.path_item = QtWidgets.QGraphicsPathItem(self.group)
        self.path_item.setBrush(QtGui.QBrush(Qt.BrushStyle.NoBrush))
        self.label: Optional[pg.TextItem] = None

    def path(self) -> QtGui.QPainterPath:
        return self.path_item.path()

    def set_path(self, path: QtGui.QPainterPath) -> None:
        self.path_item.setPath(path)

    @property
    def displayed(self) -> bool:
        return self.path_item.isVisibleTo(self.group)

    def remove(self) -> None:
        detach_item(self.group)


class LegendRow:
    """One legend entry: a swatch line and the curve's label."""

    def __init__(self, name: str, container: QtWidgets.QGraphicsItem) -> None:
        self.name = name
        self.element_id = ""
        self.swatch_opacity = 1.0

        self.group = pg.ItemGroup()
        self.group.setParentItem(container)
        self.swatch = QtWidgets.QGraphicsLineItem(self.group)
        self.text = pg.TextItem(anchor=(0, 0.5))
        self.text.setParentItem(self.group)

    def remove(self) -> None:
        detach_item(self.group)


@dataclass
class MarkState:
    """Transient state rebuilt on every draw.

    Attributes:
        curves: Curves of the last draw, in model order.
        graphics: Rendered curves keyed by name, in model order.
        legend_rows: Legend rows keyed by name, in model order.
        toggles: Legend-click opacity factor per curve name (absent = 1.0).
        line: Line generator of the last draw.
    """

    curves: Tuple[Curve, ...] = ()
    graphics: Dict[str, CurveGraphic] = field(default_factory=dict)
    legend_rows: Dict[str, LegendRow] = field(default_factory=dict)
    toggles: Dict[str, float] = field(default_factory=dict)
    line: Optional[LineGenerator] = None

    def toggle_factor(self, name: str) -> float:
        return self.toggles.get(name, 1.0)
