"""Routing of model, scale and surface changes to redraw stages.

Every reactive update of a Lines mark enters here. A change kind maps to a
set of :class:`Stage` values; the stages run in their declared order, so
ranges are always bound before geometry is computed and geometry always
exists before it is styled or labelled.

A stage that raises is logged with its traceback and skipped. The remaining
stages of the same update still run.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Tuple

logger = logging.getLogger(__name__)


class Stage(enum.IntEnum):
    RANGES = 0
    GEOMETRY = 1
    PATHS = 2
    ANIMATED_PATHS = 3
    SUBSET = 4
    COLORS = 5
    STROKE_WIDTH = 6
    LINE_STYLE = 7
    LABELS = 8
    LEGEND_VISIBILITY = 9


DATA_STAGES: Tuple[Stage, ...] = (Stage.RANGES, Stage.GEOMETRY, Stage.LABELS)
LAYOUT_STAGES: Tuple[Stage, ...] = (Stage.RANGES, Stage.ANIMATED_PATHS, Stage.LABELS)
COLOR_SCALE_STAGES: Tuple[Stage, ...] = (Stage.COLORS,)

PROPERTY_STAGES: Dict[str, Tuple[Stage, ...]] = {
    "interpolation": (Stage.PATHS,),
    "close_path": (Stage.PATHS,),
    "colors": (Stage.COLORS,),
    "fill": (Stage.COLORS,),
    "opacity": (Stage.COLORS,),
    "stroke_width": (Stage.STROKE_WIDTH,),
    "line_style": (Stage.LINE_STYLE,),
    "labels_visibility": (Stage.LEGEND_VISIBILITY,),
    "curves_subset": (Stage.SUBSET,),
}


class ChangeDispatcher:
    """Subscribes to change signals and runs the matching stage handlers.

    Args:
        model: Model emitting ``propertyChanged(name)`` and ``dataUpdated``.
        binder: Scale binder; its x/y/color scales are subscribed on connect.
        surface: Surface emitting ``layoutChanged``.
        handlers: Stage -> zero-argument callable.
    """

    def __init__(
        self,
        model: Any,
        binder: Any,
        surface: Any,
        handlers: Mapping[Stage, Callable[[], None]],
    ) -> None:
        self._model = model
        self._binder = binder
        self._surface = surface
        self._handlers = dict(handlers)
        self._connections: List[Tuple[Any, Callable]] = []

    @property
    def connected(self) -> bool:
        return bool(self._connections)

    def connect(self) -> None:
        """Subscribe to every signal once; a second call is a no-op."""
        if self._connections:
            return
        self._subscribe(self._model.propertyChanged, self.on_property_changed)
        self._subscribe(self._model.dataUpdated, self.on_data_updated)
        for axis in ("x", "y"):
            scale = self._binder.scale(axis)
            if scale is not None:
                self._subscribe(scale.domainChanged, self.on_position_domain_changed)
        color = self._binder.scale("color")
        if color is not None:
            self._subscribe(color.domainChanged, self.on_color_scale_changed)
            self._subscribe(color.rangeChanged, self.on_color_scale_changed)
        self._subscribe(self._surface.layoutChanged, self.on_layout_changed)

    def disconnect(self) -> None:
        for signal, slot in self._connections:
            signal.disconnect(slot)
        self._connections = []

    def _subscribe(self, signal: Any, slot: Callable) -> None:
        signal.connect(slot)
        self._connections.append((signal, slot))

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    def on_property_changed(self, name: str) -> None:
        stages = PROPERTY_STAGES.get(name)
        if stages is None:
            return
        self.dispatch(stages)

    def on_data_updated(self) -> None:
        self.dispatch(DATA_STAGES)

    def on_position_domain_changed(self) -> None:
        if self._model.dirty:
            logger.debug("Domain change ignored while the model is held")
            return
        self.dispatch(DATA_STAGES)

    def on_color_scale_changed(self) -> None:
        self.dispatch(COLOR_SCALE_STAGES)

    def on_layout_changed(self) -> None:
        self.dispatch(LAYOUT_STAGES)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def dispatch(self, stages: Iterable[Stage]) -> List[Stage]:
        """Run the handlers of ``stages`` in stage order.

        Returns:
            The stages whose handler completed.
        """
        completed: List[Stage] = []
        for stage in sorted(set(stages)):
            handler = self._handlers.get(stage)
            if handler is None:
                continue
            try:
                handler()
            except Exception:
                logger.exception("Redraw stage %s failed; skipping it", stage.name)
                continue
            completed.append(stage)
        return completed
