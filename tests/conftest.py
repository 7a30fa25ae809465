"""Pytest configuration for the Lines mark tests.

Qt runs on the offscreen platform so the graphics items can be created
without a display. One QApplication is shared by the whole session.

Animations use the immediate driver unless a test asks for the Qt driver,
so every render leaves the graphics in their final state.
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import numpy as np
import pytest
from PySide6 import QtWidgets

from pylinesqt import (
    ImmediateAnimationDriver,
    LinearScale,
    Lines,
    LinesModel,
    PlotSurface,
)


@pytest.fixture(scope="session")
def qapp():
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    yield app


@pytest.fixture
def surface(qapp):
    """400x300 surface with no margins, so pixels map directly."""
    return PlotSurface(400, 300, margin={"top": 0, "bottom": 0, "left": 0, "right": 0})


@pytest.fixture
def scales(qapp):
    return {"x": LinearScale(0.0, 10.0), "y": LinearScale(0.0, 10.0)}


@pytest.fixture
def model(qapp):
    """Three curves on a shared x of 0..10."""
    x = np.arange(11, dtype=float)
    return LinesModel(
        x=x,
        y=[x, 10.0 - x, np.full(11, 5.0)],
        labels=["rise", "fall", "flat"],
    )


@pytest.fixture
def lines(model, scales, surface):
    mark = Lines(model, scales=scales, surface=surface, driver=ImmediateAnimationDriver())
    mark.render()
    yield mark
    mark.close()
