"""Lines mark: a reactive set of curves drawn on a :class:`PlotSurface`.

The mark wires one instance of each component together:

  - :class:`~pylinesqt.scale_binder.ScaleBinder` resolves the x, y and color
    scales and binds their pixel ranges to the surface
  - :class:`~pylinesqt.renderer.GeometryRenderer` keeps one path per curve
  - :class:`~pylinesqt.style.StyleUpdater` applies presentation attributes
  - :class:`~pylinesqt.legend.LegendManager` owns labels and legend rows
  - :class:`~pylinesqt.selection.InversionEngine` writes selections
  - :class:`~pylinesqt.dispatcher.ChangeDispatcher` routes model, scale and
    surface signals to redraw stages

Typical usage:

    surface = PlotSurface(800, 500)
    x, y = LinearScale(0, 10), LinearScale(-1, 1)
    model = LinesModel(x=t, y=[np.sin(t), np.cos(t)], labels=["sin", "cos"])
    lines = Lines(model, scales={"x": x, "y": y}, surface=surface)
    lines.render()

    model.line_style = "dashed"      # restyles in place
    lines.invert_point(320.0)        # model.idx_selected == [i]
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from PySide6 import QtWidgets

from .animation import AnimationDriver, QtAnimationDriver
from .config import LegendLayout, LinesConfig
from .dispatcher import ChangeDispatcher, Stage
from .errors import LinesConfigError
from .geometry import PixelPoint, PolygonTest, point_in_polygon
from .graphics import MarkState
from .legend import LegendManager
from .lines_model import LinesModel, SelectorModel
from .models import ToggleResult
from .renderer import GeometryRenderer
from .scale_binder import ScaleBinder
from .selection import InversionEngine
from .style import StyleUpdater
from .surface import PlotSurface

logger = logging.getLogger(__name__)


class Lines:
    """A Lines mark.

    Args:
        model: Data and style model; a new empty one if omitted.
        scales: Slot -> scale mapping; "x" and "y" are required.
        surface: Host surface; a standalone one if omitted.
        selector: Brush selector model for :meth:`invert_multi_range`.
        driver: Animation driver; defaults to the Qt event-loop driver.
        config: View constants.

    Raises:
        LinesConfigError: If the x or y scale is missing, or a slot is unknown.
    """

    def __init__(
        self,
        model: Optional[LinesModel] = None,
        scales: Optional[Mapping[str, Any]] = None,
        surface: Optional[PlotSurface] = None,
        selector: Optional[SelectorModel] = None,
        driver: Optional[AnimationDriver] = None,
        config: Optional[LinesConfig] = None,
    ) -> None:
        scales = dict(scales or {})
        missing = [slot for slot in ("x", "y") if scales.get(slot) is None]
        if missing:
            raise LinesConfigError(f"Lines requires scales for {missing}")

        self.model = model if model is not None else LinesModel()
        self.surface = surface if surface is not None else PlotSurface()
        self.config = config or LinesConfig()
        self._owns_driver = driver is None
        self.driver = driver if driver is not None else QtAnimationDriver()
        self.state = MarkState()

        self.binder = ScaleBinder(self.surface, scales)
        self.style = StyleUpdater(self.model, self.binder, self.state)
        self.renderer = GeometryRenderer(
            self.model, self.state, self.style, self.surface.root, self.driver, self.config
        )
        self.legend = LegendManager(self.model, self.binder, self.state, self.style, self.config)
        self.inversion = InversionEngine(self.model, self.binder, selector)

        self._legend_container: Optional[QtWidgets.QGraphicsItem] = None
        self._legend_layout: Optional[LegendLayout] = None
        self._legend_drawn = False

        self.dispatcher = ChangeDispatcher(
            self.model,
            self.binder,
            self.surface,
            {
                Stage.RANGES: self.binder.bind_ranges,
                Stage.GEOMETRY: self._render_geometry,
                Stage.PATHS: lambda: self.renderer.update_paths(self.binder.as_dict()),
                Stage.ANIMATED_PATHS: lambda: self.renderer.update_paths(
                    self.binder.as_dict(), animate=True
                ),
                Stage.SUBSET: self._apply_subset,
                Stage.COLORS: self.style.apply_colors,
                Stage.STROKE_WIDTH: self.style.apply_stroke_width,
                Stage.LINE_STYLE: self.style.apply_line_style,
                Stage.LABELS: self._render_labels,
                Stage.LEGEND_VISIBILITY: self.legend.update_visibility,
            },
        )

    @property
    def selector(self) -> Optional[SelectorModel]:
        return self.inversion.selector

    @selector.setter
    def selector(self, selector: Optional[SelectorModel]) -> None:
        self.inversion.selector = selector

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def render(self) -> None:
        """Register with the surface, subscribe to changes and draw once."""
        self.surface.add_mark(self)
        self.dispatcher.connect()
        self.draw()
        logger.debug("Lines mark rendered with %d curves", len(self.model.curves))

    def draw(self) -> None:
        """Full redraw: bind ranges, diff the curves, place the labels."""
        self.binder.bind_ranges()
        self._render_geometry()
        self._render_labels()

    def relayout(self) -> None:
        """Re-bind ranges after a size change and morph paths to the new layout."""
        self.binder.bind_ranges()
        self.renderer.update_paths(self.binder.as_dict(), animate=True)
        self._render_labels()

    def close(self) -> None:
        """Disconnect from every signal, stop transitions and remove all graphics."""
        self.dispatcher.disconnect()
        self.renderer.clear()
        if self._owns_driver:
            self.driver.stop_all()
        self.legend.clear()
        self.surface.remove_mark(self)
        self._legend_container = None
        self._legend_layout = None
        self._legend_drawn = False

    def get_view_padding(self) -> Dict[str, float]:
        pad = self.model.stroke_width / 2.0
        return {"x": pad, "y": pad}

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def invert_point(self, pixel: float) -> Optional[int]:
        return self.inversion.invert_point(pixel)

    def invert_range(self, start_pixel: float, end_pixel: float) -> Optional[List[int]]:
        return self.inversion.invert_range(start_pixel, end_pixel)

    def invert_multi_range(self, brush_extent: Sequence[Any]) -> Optional[List[int]]:
        return self.inversion.invert_multi_range(brush_extent)

    def update_lasso_selection(
        self,
        lasso_id: str,
        vertices: Optional[Sequence[PixelPoint]],
        contains: PolygonTest = point_in_polygon,
    ) -> bool:
        return self.inversion.update_lasso_selection(lasso_id, vertices, contains)

    # ------------------------------------------------------------------
    # Legend
    # ------------------------------------------------------------------

    def draw_legend(
        self,
        container: Optional[QtWidgets.QGraphicsItem] = None,
        layout: Optional[LegendLayout] = None,
    ) -> Tuple[int, int]:
        """Draw one legend row per curve.

        Without arguments the rows go into the surface's legend container at
        the surface's legend position, and follow later layout changes.

        Returns:
            ``(curve_count, max_label_length)``.
        """
        self._legend_container = container
        self._legend_layout = layout
        self._legend_drawn = True
        return self._render_legend()

    def toggle_curve(self, index: int) -> Optional[ToggleResult]:
        return self.legend.toggle_curve(index)

    def reset_toggles(self) -> None:
        self.legend.reset_toggles()

    # ------------------------------------------------------------------
    # Stage handlers
    # ------------------------------------------------------------------

    def _render_geometry(self) -> None:
        self.renderer.render(self.model.curves, self.binder.as_dict())
        self.legend.prune_toggles()

    def _render_labels(self) -> None:
        self.legend.render_labels()
        if self._legend_drawn:
            self._render_legend()

    def _render_legend(self) -> Tuple[int, int]:
        container = self._legend_container
        if container is None:
            container = self.surface.legend_container
        layout = self._legend_layout
        if layout is None:
            layout = self.surface.legend_layout()
        return self.legend.render_legend(container, layout)

    def _apply_subset(self) -> None:
        self.renderer.apply_subset()
        self.legend.update_visibility()
