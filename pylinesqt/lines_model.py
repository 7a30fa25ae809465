"""Reactive data model of a Lines mark.

The model owns everything the mark draws: the curve collection, the
per-index style arrays, the scalar style attributes and the shared selection
state. Every write goes through a validating setter and is announced with a
Qt signal, so views only need to subscribe once.

Signals:
  - ``propertyChanged(str)``: an attribute changed; the argument is its name
  - ``dataUpdated()``: the curve collection was rebuilt
  - ``touched()``: a selection write was committed for other views

Typical usage:

    model = LinesModel()
    model.set_data(x=np.arange(5), y=[[1, 2, 3, 2, 1], [0, 1, None, 3, 4]])
    model.labels = ["up-down", "gappy"]
    model.line_style = "dashed"          # LineStyle.DASHED
    model.line_style = "wavy"            # raises LinesConfigError
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from PySide6 import QtCore
from PySide6.QtCore import Signal

from .config import DEFAULT_COLORS
from .errors import LinesConfigError, LinesDataError
from .models import (
    Curve,
    Interpolation,
    LabelsVisibility,
    LassoSelection,
    LineStyle,
    coerce_enum,
)
from .scales import to_seconds

logger = logging.getLogger(__name__)


def _values_equal(a: Any, b: Any) -> bool:
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        return False


def _model_attribute(name: str, coerce: Optional[Callable[[Any], Any]] = None, doc: str = "") -> property:
    """Build a property that validates, stores and announces ``name``."""
    private = "_" + name

    def getter(self):
        return getattr(self, private)

    def setter(self, value):
        if coerce is not None:
            value = coerce(value)
        if _values_equal(getattr(self, private), value):
            return
        setattr(self, private, value)
        self.propertyChanged.emit(name)

    return property(getter, setter, doc=doc)


def _colors(value: Sequence[Any]) -> Tuple[Any, ...]:
    colors = tuple(value)
    if not colors:
        raise LinesConfigError("colors must contain at least one color")
    return colors


def _opacities(value: Optional[Sequence[Any]]) -> Tuple[Optional[float], ...]:
    if value is None:
        return ()
    return tuple(None if v is None else float(v) for v in value)


def _fill(value: Optional[Sequence[Any]]) -> Tuple[Any, ...]:
    return () if value is None else tuple(value)


def _labels(value: Optional[Sequence[Any]]) -> Tuple[str, ...]:
    return () if value is None else tuple(str(v) for v in value)


def _subset(value: Optional[Sequence[Any]]) -> Tuple[int, ...]:
    return () if value is None else tuple(int(i) for i in value)


def _stroke_width(value: Any) -> float:
    width = float(value)
    if not np.isfinite(width) or width <= 0:
        raise LinesConfigError(f"stroke_width must be positive, got {value!r}")
    return width


def _duration(value: Any) -> int:
    duration = int(value)
    if duration < 0:
        raise LinesConfigError(f"animate_dur must be >= 0, got {value!r}")
    return duration


def _selection(value: Optional[Sequence[Any]]) -> Optional[List[Any]]:
    if value is None:
        return None
    entries = list(value)
    return entries or None


def _as_rows(values: Any, what: str) -> List[np.ndarray]:
    """Split ``values`` into one float array per curve."""
    if values is None:
        return []
    try:
        if isinstance(values, np.ndarray) and values.dtype != object:
            if values.ndim == 1:
                return [to_seconds(values)]
            if values.ndim == 2:
                return [to_seconds(row) for row in values]
            raise LinesDataError(f"{what} must be 1-D or 2-D, got {values.ndim}-D")
        seq = list(values)
        if not seq:
            return []
        if all(np.ndim(v) == 0 for v in seq):
            return [to_seconds(np.asarray(seq, dtype=object))]
        return [to_seconds(np.asarray(list(row), dtype=object)) for row in seq]
    except (TypeError, ValueError) as e:
        if isinstance(e, LinesDataError):
            raise
        raise LinesDataError(f"{what} values must be numeric or dates: {e}") from e


class LinesModel(QtCore.QObject):
    """Curves, style arrays and selection state of one Lines mark.

    Attributes:
        propertyChanged: Signal emitted with the attribute name on change.
        dataUpdated: Signal emitted after the curve collection is rebuilt.
        touched: Signal emitted when a selection write is committed.
    """

    propertyChanged = Signal(str)
    dataUpdated = Signal()
    touched = Signal()

    colors = _model_attribute("colors", _colors, "Positional default palette.")
    fill = _model_attribute("fill", _fill, "Per-curve fill colors.")
    opacity = _model_attribute("opacity", _opacities, "Per-curve opacities.")
    stroke_width = _model_attribute("stroke_width", _stroke_width)
    line_style = _model_attribute(
        "line_style", lambda v: coerce_enum(LineStyle, v, "line_style")
    )
    interpolation = _model_attribute(
        "interpolation", lambda v: coerce_enum(Interpolation, v, "interpolation")
    )
    labels_visibility = _model_attribute(
        "labels_visibility",
        lambda v: coerce_enum(LabelsVisibility, v, "labels_visibility"),
    )
    close_path = _model_attribute("close_path", bool)
    animate_dur = _model_attribute("animate_dur", _duration, "Transition duration in ms.")
    curves_subset = _model_attribute(
        "curves_subset", _subset,
        "Curve indices shown exclusively; fewer than two means all.",
    )
    idx_selected = _model_attribute(
        "idx_selected", _selection,
        "Point/range indices or LassoSelection entries; None when empty.",
    )

    def __init__(
        self,
        parent: Optional[QtCore.QObject] = None,
        *,
        x: Any = None,
        y: Any = None,
        color: Optional[Sequence[Any]] = None,
        labels: Optional[Sequence[str]] = None,
        colors: Sequence[Any] = DEFAULT_COLORS,
        fill: Optional[Sequence[Any]] = None,
        opacity: Optional[Sequence[float]] = None,
        stroke_width: float = 2.0,
        line_style: Any = LineStyle.SOLID,
        interpolation: Any = Interpolation.LINEAR,
        labels_visibility: Any = LabelsVisibility.NONE,
        close_path: bool = False,
        animate_dur: int = 0,
    ) -> None:
        super().__init__(parent)
        self._colors = _colors(colors)
        self._fill = _fill(fill)
        self._opacity = _opacities(opacity)
        self._stroke_width = _stroke_width(stroke_width)
        self._line_style = coerce_enum(LineStyle, line_style, "line_style")
        self._interpolation = coerce_enum(Interpolation, interpolation, "interpolation")
        self._labels_visibility = coerce_enum(
            LabelsVisibility, labels_visibility, "labels_visibility"
        )
        self._close_path = bool(close_path)
        self._animate_dur = _duration(animate_dur)
        self._curves_subset: Tuple[int, ...] = ()
        self._idx_selected: Optional[List[Any]] = None

        self._labels: Tuple[str, ...] = _labels(labels)
        self._x_rows: List[np.ndarray] = []
        self._y_rows: List[np.ndarray] = []
        self._color_values: Tuple[Any, ...] = ()
        self._curves: Tuple[Curve, ...] = ()
        self._dirty = False

        if y is not None:
            self._x_rows, self._y_rows, self._color_values = self._parse(x, y, color)
            self._curves = self._build_curves(self._labels)

    # ------------------------------------------------------------------
    # Curve data
    # ------------------------------------------------------------------

    @property
    def curves(self) -> Tuple[Curve, ...]:
        """Current ordered curve collection."""
        return self._curves

    @property
    def x_data(self) -> np.ndarray:
        """Abscissae used for point/range inversion (the first curve's)."""
        if not self._curves:
            return np.empty(0, dtype=np.float64)
        return self._curves[0].x

    @property
    def labels(self) -> Tuple[str, ...]:
        return self._labels

    @labels.setter
    def labels(self, value: Optional[Sequence[str]]) -> None:
        labels = _labels(value)
        if labels == self._labels:
            return
        curves = self._build_curves(labels)
        self._labels = labels
        self._curves = curves
        self.propertyChanged.emit("labels")
        self.dataUpdated.emit()

    def curve_labels(self) -> List[str]:
        return [c.name for c in self._curves]

    def set_data(self, x: Any, y: Any, color: Optional[Sequence[Any]] = None) -> None:
        """Replace the curve collection.

        Args:
            x: Shared 1-D abscissae, or one row of abscissae per curve.
            y: 1-D ordinates of a single curve, or one row per curve. ``None``
                or NaN entries make the point undefined.
            color: Optional per-curve value fed to the color scale.

        Raises:
            LinesDataError: If rows do not line up or values are not numeric.
        """
        x_rows, y_rows, color_values = self._parse(x, y, color)
        previous = (self._x_rows, self._y_rows, self._color_values)
        self._x_rows, self._y_rows, self._color_values = x_rows, y_rows, color_values
        try:
            curves = self._build_curves(self._labels)
        except LinesDataError:
            self._x_rows, self._y_rows, self._color_values = previous
            raise
        self._curves = curves
        logger.debug("Model data replaced: %d curves", len(curves))
        self.dataUpdated.emit()

    def clear(self) -> None:
        self.set_data(None, None)

    def _parse(self, x: Any, y: Any, color: Optional[Sequence[Any]]):
        y_rows = _as_rows(y, "y")
        x_rows = _as_rows(x, "x")
        if y_rows and not x_rows:
            x_rows = [np.arange(len(y_rows[0]), dtype=np.float64)]
        if y_rows and len(x_rows) not in (1, len(y_rows)):
            raise LinesDataError(
                f"Got {len(x_rows)} x rows for {len(y_rows)} curves; "
                "pass one shared row or one row per curve"
            )
        return x_rows, y_rows, tuple(color) if color is not None else ()

    def _build_curves(self, labels: Sequence[str]) -> Tuple[Curve, ...]:
        curves: List[Curve] = []
        seen = set()
        for i, y_row in enumerate(self._y_rows):
            x_row = self._x_rows[0] if len(self._x_rows) == 1 else self._x_rows[i]
            if x_row.shape[0] != y_row.shape[0]:
                raise LinesDataError(
                    f"Curve {i} has {x_row.shape[0]} x values and {y_row.shape[0]} y values"
                )
            name = labels[i] if i < len(labels) else f"C{i + 1}"
            if name in seen:
                raise LinesDataError(f"Duplicate curve name {name!r}")
            seen.add(name)
            value = self._color_values[i] if i < len(self._color_values) else None
            if isinstance(value, float) and np.isnan(value):
                value = None
            curves.append(Curve(name=name, x=x_row, y=y_row, color=value))
        return tuple(curves)

    # ------------------------------------------------------------------
    # Sync control
    # ------------------------------------------------------------------

    @property
    def dirty(self) -> bool:
        """True while a batch of writes is in progress."""
        return self._dirty

    @contextmanager
    def hold_sync(self) -> Iterator[LinesModel]:
        """Suppress scale-driven redraws while several attributes change."""
        previous = self._dirty
        self._dirty = True
        try:
            yield self
        finally:
            self._dirty = previous

    def touch(self) -> None:
        """Mark the latest selection write as visible to other views."""
        self.touched.emit()

    def lasso_entries(self) -> List[LassoSelection]:
        """Lasso entries of the selection state (empty in point/range mode)."""
        return [e for e in (self._idx_selected or []) if isinstance(e, LassoSelection)]


class SelectorModel(QtCore.QObject):
    """State of a brush selector linked to a mark.

    ``selected`` holds the brushed bounds, formatted as dates when the x scale
    is a date scale.
    """

    propertyChanged = Signal(str)
    touched = Signal()

    selected = _model_attribute("selected", lambda v: None if v is None else list(v))

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self._selected: Optional[List[Any]] = None

    def touch(self) -> None:
        self.touched.emit()
