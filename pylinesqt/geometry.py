"""Path geometry for the Lines mark.

Turns curve data into ``QPainterPath`` objects in pixel space. A curve is
split into runs of consecutive defined points; every run starts a new
sub-path, so an undefined ordinate leaves a visible gap instead of a jump.
Within a run the points are joined according to the interpolation mode.

Also provides the point-in-polygon test used by lasso selection.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np
from PySide6 import QtCore, QtGui
from PySide6.QtCore import Qt

from .models import Curve, Interpolation

PixelPoint = Tuple[float, float]
PolygonTest = Callable[[PixelPoint, Sequence[PixelPoint]], bool]


def defined_runs(mask: np.ndarray) -> List[Tuple[int, int]]:
    """Return ``[start, stop)`` bounds of the contiguous True runs in ``mask``."""
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    breaks = np.flatnonzero(np.diff(idx) != 1)
    starts = np.concatenate(([idx[0]], idx[breaks + 1]))
    stops = np.concatenate((idx[breaks] + 1, [idx[-1] + 1]))
    return [(int(a), int(b)) for a, b in zip(starts, stops)]


def _linear(path: QtGui.QPainterPath, px: np.ndarray, py: np.ndarray) -> None:
    for x, y in zip(px[1:], py[1:]):
        path.lineTo(x, y)


def _step_after(path: QtGui.QPainterPath, px: np.ndarray, py: np.ndarray) -> None:
    for i in range(1, px.size):
        path.lineTo(px[i], py[i - 1])
        path.lineTo(px[i], py[i])


def _step_before(path: QtGui.QPainterPath, px: np.ndarray, py: np.ndarray) -> None:
    for i in range(1, px.size):
        path.lineTo(px[i - 1], py[i])
        path.lineTo(px[i], py[i])


def _basis(path: QtGui.QPainterPath, px: np.ndarray, py: np.ndarray) -> None:
    """Uniform cubic B-spline clamped to the first and last points."""
    if px.size < 3:
        _linear(path, px, py)
        return
    qx = np.concatenate(([px[0]], px, [px[-1]]))
    qy = np.concatenate(([py[0]], py, [py[-1]]))
    path.lineTo((5 * px[0] + px[1]) / 6, (5 * py[0] + py[1]) / 6)
    for i in range(qx.size - 3):
        _, x1, x2, x3 = qx[i:i + 4]
        _, y1, y2, y3 = qy[i:i + 4]
        path.cubicTo(
            (2 * x1 + x2) / 3, (2 * y1 + y2) / 3,
            (x1 + 2 * x2) / 3, (y1 + 2 * y2) / 3,
            (x1 + 4 * x2 + x3) / 6, (y1 + 4 * y2 + y3) / 6,
        )
    path.lineTo(px[-1], py[-1])


def _hermite(
    path: QtGui.QPainterPath,
    px: np.ndarray,
    py: np.ndarray,
    mx: np.ndarray,
    my: np.ndarray,
) -> None:
    for i in range(px.size - 1):
        path.cubicTo(
            px[i] + mx[i] / 3, py[i] + my[i] / 3,
            px[i + 1] - mx[i + 1] / 3, py[i + 1] - my[i + 1] / 3,
            px[i + 1], py[i + 1],
        )


def _cardinal(path: QtGui.QPainterPath, px: np.ndarray, py: np.ndarray, tension: float) -> None:
    if px.size < 3:
        _linear(path, px, py)
        return
    a = 1.0 - tension
    mx = np.empty_like(px)
    my = np.empty_like(py)
    mx[1:-1] = a * (px[2:] - px[:-2]) / 2
    my[1:-1] = a * (py[2:] - py[:-2]) / 2
    mx[0], my[0] = a * (px[1] - px[0]), a * (py[1] - py[0])
    mx[-1], my[-1] = a * (px[-1] - px[-2]), a * (py[-1] - py[-2])
    _hermite(path, px, py, mx, my)


def _monotone(path: QtGui.QPainterPath, px: np.ndarray, py: np.ndarray) -> None:
    """Fritsch-Carlson monotone cubic; never overshoots between points."""
    if px.size < 3:
        _linear(path, px, py)
        return
    h = np.diff(px)
    dy = np.diff(py)
    with np.errstate(divide="ignore", invalid="ignore"):
        secant = np.where(h != 0, dy / h, 0.0)
    slope = np.empty_like(px)
    slope[0] = secant[0]
    slope[-1] = secant[-1]
    slope[1:-1] = (secant[:-1] + secant[1:]) / 2
    slope[1:-1][secant[:-1] * secant[1:] <= 0] = 0.0
    for k in range(secant.size):
        if secant[k] == 0:
            slope[k] = slope[k + 1] = 0.0
            continue
        alpha = slope[k] / secant[k]
        beta = slope[k + 1] / secant[k]
        norm = alpha * alpha + beta * beta
        if norm > 9:
            tau = 3 / np.sqrt(norm)
            slope[k] = tau * alpha * secant[k]
            slope[k + 1] = tau * beta * secant[k]
    for i in range(px.size - 1):
        path.cubicTo(
            px[i] + h[i] / 3, py[i] + slope[i] * h[i] / 3,
            px[i + 1] - h[i] / 3, py[i + 1] - slope[i + 1] * h[i] / 3,
            px[i + 1], py[i + 1],
        )


class LineGenerator:
    """Builds pixel-space paths for curves.

    Args:
        x_scale: Scale for abscissae (``scale`` and ``offset``).
        y_scale: Scale for ordinates.
        interpolation: Join mode inside a run of defined points.
        close_path: Close the last sub-path back to its start.
        tension: Cardinal spline tension.
    """

    def __init__(
        self,
        x_scale,
        y_scale,
        interpolation: Interpolation = Interpolation.LINEAR,
        close_path: bool = False,
        tension: float = 0.7,
    ) -> None:
        self.x_scale = x_scale
        self.y_scale = y_scale
        self.interpolation = Interpolation(interpolation)
        self.close_path = close_path
        self.tension = tension

    def project(self, curve: Curve) -> Tuple[np.ndarray, np.ndarray]:
        """Pixel coordinates of every point of ``curve`` (NaN if undefined)."""
        px = np.asarray(self.x_scale.scale(curve.x), dtype=np.float64) + self.x_scale.offset
        py = np.asarray(self.y_scale.scale(curve.y), dtype=np.float64) + self.y_scale.offset
        return np.atleast_1d(px), np.atleast_1d(py)

    def __call__(self, curve: Curve) -> QtGui.QPainterPath:
        path = QtGui.QPainterPath()
        if len(curve) == 0:
            return path
        px, py = self.project(curve)
        mask = curve.defined & np.isfinite(px) & np.isfinite(py)
        for start, stop in defined_runs(mask):
            rx = px[start:stop]
            ry = py[start:stop]
            path.moveTo(rx[0], ry[0])
            self._join(path, rx, ry)
        if self.close_path and path.elementCount() > 0:
            path.closeSubpath()
        return path

    def _join(self, path: QtGui.QPainterPath, px: np.ndarray, py: np.ndarray) -> None:
        mode = self.interpolation
        if mode is Interpolation.LINEAR:
            _linear(path, px, py)
        elif mode is Interpolation.STEP_AFTER:
            _step_after(path, px, py)
        elif mode is Interpolation.STEP_BEFORE:
            _step_before(path, px, py)
        elif mode is Interpolation.BASIS:
            _basis(path, px, py)
        elif mode is Interpolation.CARDINAL:
            _cardinal(path, px, py, self.tension)
        elif mode is Interpolation.MONOTONE:
            _monotone(path, px, py)


def path_elements(path: QtGui.QPainterPath) -> List[Tuple[Any, float, float]]:
    """Flatten ``path`` into ``(element type, x, y)`` tuples."""
    out = []
    for i in range(path.elementCount()):
        e = path.elementAt(i)
        out.append((e.type, e.x, e.y))
    return out


def subpath_count(path: QtGui.QPainterPath) -> int:
    move_to = QtGui.QPainterPath.ElementType.MoveToElement
    return sum(1 for i in range(path.elementCount()) if path.elementAt(i).type == move_to)


def interpolate_paths(
    start: Optional[QtGui.QPainterPath],
    end: QtGui.QPainterPath,
    t: float,
) -> QtGui.QPainterPath:
    """Blend two paths element-wise.

    Paths with a different structure cannot be blended; the end path is used
    as soon as the transition starts.
    """
    if t >= 1.0 or start is None or start.elementCount() != end.elementCount():
        return QtGui.QPainterPath(end)
    out = QtGui.QPainterPath(end)
    for i in range(end.elementCount()):
        a = start.elementAt(i)
        b = end.elementAt(i)
        if a.type != b.type:
            return QtGui.QPainterPath(end)
        out.setElementPositionAt(i, a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)
    return out


def point_in_polygon(point: PixelPoint, vertices: Sequence[PixelPoint]) -> bool:
    """Even-odd membership test of a pixel point against a lasso polygon."""
    if len(vertices) < 3:
        return False
    polygon = QtGui.QPolygonF([QtCore.QPointF(float(x), float(y)) for x, y in vertices])
    return polygon.containsPoint(QtCore.QPointF(float(point[0]), float(point[1])), Qt.FillRule.OddEvenFill)
