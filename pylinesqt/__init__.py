from .lines import Lines
from .lines_model import LinesModel, SelectorModel
from .models import (
    Interpolation,
    LineStyle,
    LabelsVisibility,
    Point,
    Curve,
    CurveStyle,
    LassoSelection,
    ToggleResult,
)
from .config import LinesConfig, LegendLayout, DEFAULT_COLORS
from .errors import LinesError, LinesConfigError, LinesDataError

from .scales import LinearScale, DateScale, ColorScale
from .surface import PlotSurface
from .animation import (
    Transition,
    AnimationDriver,
    ImmediateAnimationDriver,
    QtAnimationDriver,
)
from .widget import LinesWidget

__all__ = [
    "Lines",
    "LinesModel",
    "SelectorModel",
    "Interpolation",
    "LineStyle",
    "LabelsVisibility",
    "Point",
    "Curve",
    "CurveStyle",
    "LassoSelection",
    "ToggleResult",
    "LinesConfig",
    "LegendLayout",
    "DEFAULT_COLORS",
    # Errors
    "LinesError",
    "LinesConfigError",
    "LinesDataError",
    # Scales + host surface
    "LinearScale",
    "DateScale",
    "ColorScale",
    "PlotSurface",
    # Animation drivers
    "Transition",
    "AnimationDriver",
    "ImmediateAnimationDriver",
    "QtAnimationDriver",
    # Reusable Qt widgets
    "LinesWidget",
]
