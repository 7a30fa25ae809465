"""Value types shared by the Lines mark components.

Curves, points, per-curve style records and selection entries are plain
dataclasses. The loosely-typed mode strings of the model (interpolation,
line style, label visibility) are closed ``str`` enums validated with
:func:`coerce_enum` when they enter the model.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Type, TypeVar, Union

import numpy as np

from .errors import LinesConfigError

# Color values accepted wherever a color is configured: names, "#RRGGBB",
# (r, g, b[, a]) tuples or QColor objects (anything pg.mkColor accepts).
Color = Union[str, Tuple[int, int, int], Tuple[int, int, int, int], Any]
PixelRange = Tuple[float, float]

E = TypeVar("E", bound=Enum)


class Interpolation(str, Enum):
    """How consecutive defined points of a curve are joined."""

    LINEAR = "linear"
    STEP_BEFORE = "step-before"
    STEP_AFTER = "step-after"
    BASIS = "basis"
    CARDINAL = "cardinal"
    MONOTONE = "monotone"


class LineStyle(str, Enum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


class LabelsVisibility(str, Enum):
    """Which of the end-of-line labels or legend rows are shown."""

    NONE = "none"
    LABEL = "label"
    LEGEND = "legend"


def coerce_enum(enum_cls: Type[E], value: Any, attribute: str) -> E:
    """Convert ``value`` into a member of ``enum_cls``.

    Args:
        enum_cls: Target enum class.
        value: Enum member or its string value.
        attribute: Attribute name used in the error message.

    Returns:
        The matching enum member.

    Raises:
        LinesConfigError: If ``value`` is not one of the enum's values.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(m.value) for m in enum_cls)
        raise LinesConfigError(
            f"Invalid {attribute} {value!r}; expected one of {allowed}"
        ) from None


@dataclass(frozen=True)
class Point:
    """A single data point of a curve."""

    x: float
    y: Optional[float]
    color: Optional[Any] = None


@dataclass(frozen=True, eq=False)
class Curve:
    """One named curve of the mark.

    Attributes:
        name: Stable identity used to match curves across redraws.
        x: Abscissae as a float array.
        y: Ordinates as a float array, NaN where the point is undefined.
        color: Optional value fed to the color scale for this curve.
    """

    name: str
    x: np.ndarray
    y: np.ndarray
    color: Optional[Any] = None

    def __len__(self) -> int:
        return int(self.x.shape[0])

    @property
    def defined(self) -> np.ndarray:
        """Boolean mask of points that take part in the path."""
        return np.isfinite(self.y) & np.isfinite(self.x)

    def last_defined_point(self) -> Optional[Point]:
        idx = np.flatnonzero(self.defined)
        if idx.size == 0:
            return None
        i = int(idx[-1])
        return Point(float(self.x[i]), float(self.y[i]), self.color)


@dataclass(frozen=True)
class CurveStyle:
    """Resolved presentation of one curve, derived from the model arrays."""

    stroke: Color
    fill: Optional[Color] = None
    opacity: float = 1.0
    width: float = 2.0
    line_style: LineStyle = LineStyle.SOLID


@dataclass(frozen=True)
class LassoSelection:
    """Indices of one curve that fall inside one lasso."""

    curve_name: str
    lasso_id: str
    indices: Tuple[int, ...]


@dataclass(frozen=True)
class ToggleResult:
    """Outcome of a legend click on one curve.

    ``swatch_opacity`` is reported as computed (factor plus boost) and may
    exceed 1.0; Qt clamps it when the swatch is painted.
    """

    name: str
    curve_opacity: float
    swatch_opacity: float
