"""Inversion of pixel positions, ranges and lassos into data indices.

Point and range inversion map pixels back through the x scale and locate the
resulting value in the (ascending) abscissae of the first curve with a binary
search. Results are clamped into ``[0, len - 1]``, so out-of-domain pixels
select the first or last point instead of failing. Lasso inversion projects
every defined point of every curve and tests it against the polygon.

All writes go to ``model.idx_selected`` followed by ``model.touch()``; the
brush-extent inversion writes to a linked selector model instead.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

import numpy as np

from .geometry import PixelPoint, PolygonTest, point_in_polygon
from .models import LassoSelection
from .scales import to_seconds

logger = logging.getLogger(__name__)


def bisect_clamped(data: np.ndarray, value: float) -> int:
    """Left insertion index of ``value`` in ``data``, clamped into bounds.

    An empty ``data`` yields 0.
    """
    index = int(np.searchsorted(data, value, side="left"))
    return min(index, max(int(data.shape[0]) - 1, 0))


class InversionEngine:
    """Writes selections derived from pixel-space interactions.

    Args:
        model: The mark's model (curves, ``idx_selected``, ``touch``).
        binder: Scale binder providing the x and y scales.
        selector: Optional brush selector model for multi-range inversion.
    """

    def __init__(self, model: Any, binder: Any, selector: Optional[Any] = None) -> None:
        self._model = model
        self._binder = binder
        self.selector = selector

    def _x_values(self) -> Optional[np.ndarray]:
        data = self._model.x_data
        if data.shape[0] == 0:
            return None
        return data

    def invert_point(self, pixel: float) -> Optional[int]:
        """Select the point under horizontal pixel position ``pixel``.

        Returns:
            The selected index, or None when there is nothing to select.
        """
        data = self._x_values()
        if data is None:
            return None
        value = float(self._binder.scale("x").invert(pixel))
        index = bisect_clamped(data, value)
        self._model.idx_selected = [index]
        self._model.touch()
        logger.debug("invert_point(%s) -> %d", pixel, index)
        return index

    def invert_range(self, start_pixel: float, end_pixel: float) -> Optional[List[int]]:
        """Select the index range between two horizontal pixel positions.

        Returns:
            ``[start_index, end_index]`` with ``start_index <= end_index``, or
            None when there is nothing to select.
        """
        data = self._x_values()
        if data is None:
            return None
        x_scale = self._binder.scale("x")
        indices = sorted(
            bisect_clamped(data, float(x_scale.invert(p))) for p in (start_pixel, end_pixel)
        )
        self._model.idx_selected = indices
        self._model.touch()
        logger.debug("invert_range(%s, %s) -> %s", start_pixel, end_pixel, indices)
        return indices

    def invert_multi_range(self, brush_extent: Sequence[Any]) -> Optional[List[int]]:
        """Push a brushed data-space extent to the linked selector.

        The selector stores the bounds themselves, formatted as dates when
        the x scale is a date scale.

        Args:
            brush_extent: ``(start, end)`` in data space; numbers,
                ``datetime`` or ``numpy.datetime64`` bounds.

        Returns:
            The clamped ``[start_index, end_index]`` of the extent, or None
            when there are no curves.
        """
        data = self._x_values()
        if data is None:
            return None
        x_scale = self._binder.scale("x")
        start, end = brush_extent[0], brush_extent[1]
        indices = [
            bisect_clamped(data, float(to_seconds(start))),
            bisect_clamped(data, float(to_seconds(end))),
        ]

        if getattr(x_scale, "type", None) == "date":
            start, end = x_scale.format_date(start), x_scale.format_date(end)

        if self.selector is None:
            logger.warning("invert_multi_range called without a selector model")
            return indices
        self.selector.selected = [start, end]
        self.selector.touch()
        return indices

    def update_lasso_selection(
        self,
        lasso_id: str,
        vertices: Optional[Sequence[PixelPoint]],
        contains: PolygonTest = point_in_polygon,
    ) -> bool:
        """Merge or remove the selection entries of one lasso.

        Args:
            lasso_id: Identity of the lasso.
            vertices: Polygon in pixels; empty or None removes the lasso.
            contains: Point-in-polygon test ``(point, vertices) -> bool``.

        Returns:
            True if any point of any curve is inside the lasso.
        """
        kept = [e for e in self._model.lasso_entries() if e.lasso_id != lasso_id]
        if not vertices:
            self._model.idx_selected = kept
            self._model.touch()
            return False

        polygon = list(vertices)
        x_scale = self._binder.scale("x")
        y_scale = self._binder.scale("y")
        added: List[LassoSelection] = []
        for curve in self._model.curves:
            px = np.atleast_1d(np.asarray(x_scale.scale(curve.x), dtype=np.float64)) + x_scale.offset
            py = np.atleast_1d(np.asarray(y_scale.scale(curve.y), dtype=np.float64)) + y_scale.offset
            mask = curve.defined & np.isfinite(px) & np.isfinite(py)
            inside = tuple(
                int(i) for i in np.flatnonzero(mask)
                if contains((float(px[i]), float(py[i])), polygon)
            )
            if inside:
                added.append(LassoSelection(curve.name, lasso_id, inside))

        self._model.idx_selected = kept + added
        self._model.touch()
        logger.debug("Lasso %r selected points on %d curves", lasso_id, len(added))
        return bool(added)

