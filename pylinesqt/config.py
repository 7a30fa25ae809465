"""Configuration dataclasses for the Lines mark.

Provides frozen dataclasses for the view-level constants of the mark and for
the legend layout handed down by the host surface. Model attributes that
users change at runtime live on :class:`~pylinesqt.lines_model.LinesModel`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# d3 category10, the default positional palette
DEFAULT_COLORS: Tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)


@dataclass(frozen=True)
class LinesConfig:
    """View constants of a Lines mark."""

    dim_opacity: float = 0.1  # curve opacity after a legend click
    swatch_opacity_boost: float = 0.4  # added to the dimmed legend swatch
    label_offset_px: float = 3.0  # end-of-line label distance from last point
    cardinal_tension: float = 0.7
    legend_swatch_ratio: float = 0.8  # swatch length relative to row height
    legend_text_gap_ratio: float = 1.2  # text x position relative to swatch


@dataclass(frozen=True)
class LegendLayout:
    """Position of the legend rows inside the host's legend container.

    Attributes:
        x_disp: Horizontal offset of the rows.
        y_disp: Vertical offset of the first row.
        inter_x_disp: Horizontal spacing between columns (unused by lines).
        inter_y_disp: Row height.
    """

    x_disp: float = 0.0
    y_disp: float = 0.0
    inter_x_disp: float = 0.0
    inter_y_disp: float = 20.0
