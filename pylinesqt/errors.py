"""Exception hierarchy for the Lines mark.

Configuration and data errors are raised at the model boundary so a corrupt
model is rejected where it is written, not where it is drawn.
"""

from __future__ import annotations


class LinesError(Exception):
    """Base class for all pylinesqt errors."""


class LinesConfigError(LinesError, ValueError):
    """Unknown enum value, unknown scale slot or out-of-range attribute."""


class LinesDataError(LinesError, ValueError):
    """Curve data that cannot be turned into a consistent curve collection."""
