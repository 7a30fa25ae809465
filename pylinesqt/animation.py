"""Pluggable transition drivers.

Renderers describe an animation declaratively ("move attribute A of element
E from V0 to V1 over D milliseconds") as a :class:`Transition` and hand it to
a driver. At most one transition runs per key; starting a new one for the
same key stops the old one, so rapid redraws replace transitions instead of
stacking them.

Drivers:
  - :class:`ImmediateAnimationDriver`: applies the end value synchronously
  - :class:`QtAnimationDriver`: interpolates on the Qt event loop with
    ``QVariantAnimation``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Optional

from PySide6 import QtCore

logger = logging.getLogger(__name__)


def lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


@dataclass(frozen=True)
class Transition:
    """A time-bounded interpolation of one attribute of one element."""

    key: Hashable
    start: Any
    end: Any
    duration_ms: int
    apply: Callable[[Any], None]
    interpolate: Callable[[Any, Any, float], Any] = lerp
    on_finished: Optional[Callable[[], None]] = None

    def complete(self) -> None:
        self.apply(self.end)
        if self.on_finished is not None:
            self.on_finished()


class AnimationDriver:
    """Interface of transition drivers."""

    def start(self, transition: Transition) -> None:
        raise NotImplementedError

    def cancel(self, key: Hashable) -> None:
        raise NotImplementedError

    def stop_all(self) -> None:
        for key in self.active_keys():
            self.cancel(key)

    def active_keys(self) -> List[Hashable]:
        return []


class ImmediateAnimationDriver(AnimationDriver):
    """Driver that jumps straight to the end value."""

    def start(self, transition: Transition) -> None:
        transition.complete()

    def cancel(self, key: Hashable) -> None:
        pass


class QtAnimationDriver(QtCore.QObject, AnimationDriver):
    """Driver backed by ``QVariantAnimation`` running on the Qt event loop.

    Animations are children of the driver while they run. A stopped or
    finished animation is disconnected and unparented; dropping its last
    reference destroys it.
    """

    def __init__(
        self,
        parent: Optional[QtCore.QObject] = None,
        easing: QtCore.QEasingCurve.Type = QtCore.QEasingCurve.Type.InOutCubic,
    ) -> None:
        super().__init__(parent)
        self._easing = easing
        self._running: Dict[Hashable, QtCore.QVariantAnimation] = {}
        self._finished: List[QtCore.QVariantAnimation] = []

    def start(self, transition: Transition) -> None:
        self.cancel(transition.key)
        self._release_finished()
        if transition.duration_ms <= 0:
            transition.complete()
            return

        anim = QtCore.QVariantAnimation(self)
        anim.setStartValue(0.0)
        anim.setEndValue(1.0)
        anim.setDuration(int(transition.duration_ms))
        anim.setEasingCurve(QtCore.QEasingCurve(self._easing))
        anim.valueChanged.connect(
            lambda t: transition.apply(
                transition.interpolate(transition.start, transition.end, float(t))
            )
        )
        anim.finished.connect(lambda: self._on_finished(transition, anim))
        self._running[transition.key] = anim
        anim.start()

    def cancel(self, key: Hashable) -> None:
        anim = self._running.pop(key, None)
        if anim is None:
            return
        # stop() does not emit finished, so the superseded callback never runs
        anim.stop()
        self._release(anim)
        logger.debug("Transition %r superseded", key)

    def stop_all(self) -> None:
        """Stop every running transition without completing it."""
        super().stop_all()
        self._release_finished()

    def active_keys(self) -> List[Hashable]:
        return list(self._running)

    @staticmethod
    def _release(anim: QtCore.QVariantAnimation) -> None:
        anim.valueChanged.disconnect()
        anim.finished.disconnect()
        anim.setParent(None)

    def _release_finished(self) -> None:
        finished, self._finished = self._finished, []
        for anim in finished:
            self._release(anim)

    def _on_finished(self, transition: Transition, anim: QtCore.QVariantAnimation) -> None:
        if self._running.get(transition.key) is not anim:
            return
        del self._running[transition.key]
        # still inside its own finished emission; released on the next start
        self._finished.append(anim)
        transition.complete()
