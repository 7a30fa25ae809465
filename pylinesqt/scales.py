"""Minimal scale objects bound to the x, y and color slots of a mark.

The mark only relies on the interface shared by these classes:

  - ``scale(values)``: forward transform (data -> pixel, or data -> color)
  - ``invert(pixels)``: inverse transform (x/y only)
  - ``set_range(...)``: output range; the color scale takes no arguments
  - ``type``: declared value type ("linear", "date", "color")
  - ``offset``: pixel offset added to positional output
  - ``domainChanged`` / ``rangeChanged`` signals

Typical usage:

    x = LinearScale(0.0, 10.0)
    x.set_range((40.0, 600.0))
    px = x.scale(np.array([0.0, 5.0]))   # -> array([ 40., 320.])
    x.invert(320.0)                       # -> 5.0
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Sequence, Tuple, Union

import numpy as np
import pyqtgraph as pg
from PySide6 import QtCore
from PySide6.QtCore import Signal

from .config import DEFAULT_COLORS
from .models import Color, PixelRange

ArrayLike = Union[float, Sequence[float], np.ndarray]


def to_seconds(values: Any) -> np.ndarray:
    """Convert datetimes, ``numpy.datetime64`` or numbers to float seconds.

    Args:
        values: Scalar or sequence of ``datetime``, ``numpy.datetime64``,
            numbers or ``None``.

    Returns:
        Float array of POSIX seconds; ``None`` becomes NaN.
    """
    arr = np.asarray(values)
    if np.issubdtype(arr.dtype, np.datetime64):
        out = arr.astype("datetime64[ns]").astype(np.int64) / 1e9
        return np.where(np.isnat(arr), np.nan, out).astype(np.float64)
    if arr.dtype != object:
        return arr.astype(np.float64)

    flat = []
    for v in arr.ravel():
        if v is None:
            flat.append(np.nan)
        elif isinstance(v, datetime):
            if v.tzinfo is None:
                v = v.replace(tzinfo=timezone.utc)
            flat.append(v.timestamp())
        elif isinstance(v, np.datetime64):
            flat.append(float(v.astype("datetime64[ns]").astype(np.int64)) / 1e9)
        else:
            flat.append(float(v))
    return np.asarray(flat, dtype=np.float64).reshape(arr.shape)


def _as_output(result: np.ndarray) -> Union[float, np.ndarray]:
    if result.ndim == 0:
        return float(result)
    return result


class Scale(QtCore.QObject):
    """Base class for scales.

    Signals:
        domainChanged: Emitted when the data-space domain changes.
        rangeChanged: Emitted when the output range changes.
    """

    domainChanged = Signal()
    rangeChanged = Signal()

    type = "linear"

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self.offset = 0.0


class LinearScale(Scale):
    """Affine map from a ``(min, max)`` domain onto a pixel range."""

    type = "linear"

    def __init__(
        self,
        min: float = 0.0,
        max: float = 1.0,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._domain: Tuple[float, float] = (float(min), float(max))
        self._range: PixelRange = (0.0, 1.0)

    @property
    def domain(self) -> Tuple[float, float]:
        return self._domain

    @property
    def range(self) -> PixelRange:
        return self._range

    def set_domain(self, min: float, max: float) -> None:
        domain = (float(min), float(max))
        if domain != self._domain:
            self._domain = domain
            self.domainChanged.emit()

    def fit(self, values: Any) -> None:
        """Set the domain to the finite extent of ``values``."""
        arr = to_seconds(values).ravel()
        finite = arr[np.isfinite(arr)]
        if finite.size == 0:
            return
        self.set_domain(float(finite.min()), float(finite.max()))

    def set_range(self, pixel_range: PixelRange) -> None:
        rng = (float(pixel_range[0]), float(pixel_range[1]))
        if rng != self._range:
            self._range = rng
            self.rangeChanged.emit()

    def scale(self, values: ArrayLike) -> Union[float, np.ndarray]:
        v = np.asarray(values, dtype=np.float64)
        d0, d1 = self._domain
        r0, r1 = self._range
        if d1 == d0:
            return _as_output(np.full_like(v, (r0 + r1) / 2.0))
        return _as_output(r0 + (v - d0) * (r1 - r0) / (d1 - d0))

    def invert(self, pixels: ArrayLike) -> Union[float, np.ndarray]:
        p = np.asarray(pixels, dtype=np.float64)
        d0, d1 = self._domain
        r0, r1 = self._range
        if r1 == r0:
            return _as_output(np.full_like(p, d0))
        return _as_output(d0 + (p - r0) * (d1 - d0) / (r1 - r0))


class DateScale(LinearScale):
    """Linear scale over POSIX seconds that formats values as dates."""

    type = "date"

    def __init__(
        self,
        min: Any = 0.0,
        max: Any = 1.0,
        date_format: str = "%Y-%m-%dT%H:%M:%S",
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(float(to_seconds(min)), float(to_seconds(max)), parent)
        self.date_format = date_format

    def set_domain(self, min: Any, max: Any) -> None:
        super().set_domain(float(to_seconds(min)), float(to_seconds(max)))

    def format_date(self, value: Any) -> str:
        seconds = float(to_seconds(value))
        return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime(self.date_format)


class ColorScale(Scale):
    """Maps numeric values onto a color palette.

    The palette is the scale's own output range, so :meth:`set_range` takes no
    arguments and simply re-applies it.
    """

    type = "color"

    def __init__(
        self,
        min: float = 0.0,
        max: float = 1.0,
        colors: Optional[Sequence[Color]] = None,
        parent: Optional[QtCore.QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._domain: Tuple[float, float] = (float(min), float(max))
        self._colors: Tuple[Color, ...] = tuple(colors) if colors else DEFAULT_COLORS[:2]
        self._applied: Tuple[Color, ...] = ()
        self._cmap: Optional[pg.ColorMap] = None
        self.set_range()

    @property
    def domain(self) -> Tuple[float, float]:
        return self._domain

    @property
    def colors(self) -> Tuple[Color, ...]:
        return self._colors

    def set_domain(self, min: float, max: float) -> None:
        domain = (float(min), float(max))
        if domain != self._domain:
            self._domain = domain
            self.domainChanged.emit()

    def set_colors(self, colors: Sequence[Color]) -> None:
        self._colors = tuple(colors)
        self.set_range()

    def set_range(self) -> None:
        if self._colors == self._applied and self._cmap is not None:
            return
        stops = [pg.mkColor(c) for c in self._colors]
        if len(stops) == 1:
            stops = stops * 2
        self._cmap = pg.ColorMap(np.linspace(0.0, 1.0, len(stops)), stops)
        first = not self._applied
        self._applied = self._colors
        if not first:
            self.rangeChanged.emit()

    def scale(self, value: float) -> str:
        """Return the palette color of ``value`` as a ``#rrggbb`` string."""
        d0, d1 = self._domain
        t = 0.0 if d1 == d0 else (float(value) - d0) / (d1 - d0)
        t = float(np.clip(t, 0.0, 1.0))
        qcolor = self._cmap.map(np.array([t]), mode="qcolor")[0]
        return qcolor.name()
