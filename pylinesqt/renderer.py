"""Geometry renderer of the Lines mark.

Keeps one :class:`~pylinesqt.graphics.CurveGraphic` per curve name in sync
with the model's curve collection:

  - entering curves get a new path item (no fill) under the surface root
  - surviving curves are restyled and their path transitions in place
  - exiting curves fade out over ``animate_dur`` and are then removed

Path transitions are keyed per curve, so a redraw during a running
transition replaces it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence

from PySide6 import QtGui, QtWidgets

from .animation import AnimationDriver, Transition
from .config import LinesConfig
from .geometry import LineGenerator, interpolate_paths
from .graphics import CurveGraphic, MarkState
from .models import Curve
from .style import StyleUpdater

logger = logging.getLogger(__name__)


class GeometryRenderer:
    """Computes and applies curve geometry.

    Args:
        model: The mark's model.
        state: Shared mark state.
        style: Style updater used for every curve's presentation.
        root: Graphics item the curve groups are attached to.
        driver: Animation driver for path morphs and exits.
        config: View constants.
    """

    def __init__(
        self,
        model: Any,
        state: MarkState,
        style: StyleUpdater,
        root: QtWidgets.QGraphicsItem,
        driver: AnimationDriver,
        config: LinesConfig,
    ) -> None:
        self._model = model
        self._state = state
        self._style = style
        self._root = root
        self._driver = driver
        self._config = config
        self._exiting: Dict[int, CurveGraphic] = {}

    def line_generator(self, scales: Mapping[str, Any]) -> LineGenerator:
        return LineGenerator(
            scales["x"],
            scales["y"],
            interpolation=self._model.interpolation,
            close_path=self._model.close_path,
            tension=self._config.cardinal_tension,
        )

    def render(self, curves: Sequence[Curve], scales: Mapping[str, Any]) -> None:
        """Diff ``curves`` against the rendered set by name and redraw.

        Args:
            curves: Ordered curve collection.
            scales: Slot -> scale mapping with at least "x" and "y".
        """
        state = self._state
        line = self.line_generator(scales)
        state.line = line
        state.curves = tuple(curves)

        previous = dict(state.graphics)
        current: Dict[str, CurveGraphic] = {}
        entered = 0
        for index, curve in enumerate(curves):
            graphic = previous.pop(curve.name, None)
            if graphic is None:
                graphic = CurveGraphic(curve.name, self._root)
                entered += 1
            graphic.curve = curve
            graphic.index = index
            graphic.element_id = f"curve{index + 1}"
            graphic.group.setZValue(index)
            current[curve.name] = graphic

        for graphic in previous.values():
            self._exit(graphic)
        state.graphics = current

        for graphic in current.values():
            self._style.style_curve(graphic)
            self._transition_path(graphic, line(graphic.curve), animate=True)
        self.apply_subset()

        logger.debug(
            "Rendered %d curves (%d entered, %d exited)",
            len(current), entered, len(previous),
        )

    def update_paths(self, scales: Mapping[str, Any], animate: bool = False) -> None:
        """Recompute path geometry only (interpolation, closing, relayout)."""
        line = self.line_generator(scales)
        self._state.line = line
        for graphic in self._state.graphics.values():
            self._transition_path(graphic, line(graphic.curve), animate=animate)

    def apply_subset(self) -> None:
        """Show only the curves listed in ``curves_subset`` (two or more)."""
        subset = self._model.curves_subset
        exclusive = len(subset) > 1
        for graphic in self._state.graphics.values():
            graphic.path_item.setVisible(not exclusive or graphic.index in subset)

    @property
    def exiting(self) -> List[CurveGraphic]:
        """Graphics whose exit transition is still running."""
        return list(self._exiting.values())

    def clear(self) -> None:
        """Stop every transition of this mark and remove all curve graphics."""
        for graphic in list(self._state.graphics.values()) + self.exiting:
            self._driver.cancel((graphic.uid, "d"))
            self._driver.cancel((graphic.uid, "exit"))
            graphic.remove()
        self._exiting = {}
        self._state.graphics = {}
        self._state.curves = ()

    def _transition_path(self, graphic: CurveGraphic, path: QtGui.QPainterPath, animate: bool) -> None:
        duration = self._model.animate_dur if animate else 0
        self._driver.start(
            Transition(
                key=(graphic.uid, "d"),
                start=QtGui.QPainterPath(graphic.path()),
                end=path,
                duration_ms=duration,
                apply=graphic.set_path,
                interpolate=interpolate_paths,
            )
        )

    def _exit(self, graphic: CurveGraphic) -> None:
        self._driver.cancel((graphic.uid, "d"))
        self._exiting[graphic.uid] = graphic
        self._driver.start(
            Transition(
                key=(graphic.uid, "exit"),
                start=graphic.group.opacity(),
                end=0.0,
                duration_ms=self._model.animate_dur,
                apply=graphic.group.setOpacity,
                on_finished=lambda: self._finish_exit(graphic),
            )
        )

    def _finish_exit(self, graphic: CurveGraphic) -> None:
        self._exiting.pop(graphic.uid, None)
        graphic.remove()
