"""Binding of named scale slots to scale objects."""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional, Tuple

from .errors import LinesConfigError

SLOTS: Tuple[str, ...] = ("x", "y", "color")


class ScaleBinder:
    """Resolves the "x", "y" and "color" slots and keeps their ranges bound.

    Args:
        surface: Object providing ``padded_range(axis)``.
        scales: Initial slot -> scale mapping.
    """

    def __init__(self, surface: Any, scales: Optional[Dict[str, Any]] = None) -> None:
        self._surface = surface
        self._scales: Dict[str, Any] = {}
        for slot, scale in (scales or {}).items():
            self.set_scale(slot, scale)

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(list(self._scales.items()))

    def __getitem__(self, slot: str) -> Optional[Any]:
        return self.scale(slot)

    def scale(self, slot: str) -> Optional[Any]:
        self._check(slot)
        return self._scales.get(slot)

    def set_scale(self, slot: str, scale: Optional[Any]) -> None:
        self._check(slot)
        if scale is None:
            self._scales.pop(slot, None)
        else:
            self._scales[slot] = scale

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._scales)

    def bind_ranges(self) -> None:
        """Map x/y onto the surface's padded rectangle; re-apply the palette.

        Idempotent: scales only announce a range change when it differs.
        """
        for axis in ("x", "y"):
            scale = self._scales.get(axis)
            if scale is not None:
                scale.set_range(self._surface.padded_range(axis))
        color = self._scales.get("color")
        if color is not None:
            color.set_range()

    @staticmethod
    def _check(slot: str) -> None:
        if slot not in SLOTS:
            raise LinesConfigError(f"Unknown scale slot {slot!r}; expected one of {SLOTS}")
