"""Quick start: a few curves with a legend and click-to-select.

Run:
    python examples/01_lines_quick_start.py

Click inside the plot to select the nearest x index. Click a legend entry to
dim or restore that curve.
"""

import logging
import sys

import numpy as np
from PySide6 import QtWidgets

from pylinesqt import LinearScale, LinesModel, LinesWidget


def main():
    """Run the quick start example."""
    logging.basicConfig(level=logging.INFO)
    app = QtWidgets.QApplication(sys.argv)

    t = np.linspace(0.0, 4.0 * np.pi, 200)
    y = np.vstack([np.sin(t), np.cos(t), 0.5 * np.sin(2 * t)])

    # Punch a hole into the second curve: undefined points leave a gap
    y[1, 80:95] = np.nan

    model = LinesModel(
        x=t,
        y=y,
        labels=["sin", "cos", "half"],
        labels_visibility="legend",
        animate_dur=300,
    )

    x_scale = LinearScale()
    x_scale.fit(t)
    y_scale = LinearScale(-1.2, 1.2)

    widget = LinesWidget()
    widget.setWindowTitle("pylinesqt - quick start")
    widget.resize(900, 500)
    lines = widget.add_lines(model, scales={"x": x_scale, "y": y_scale})
    lines.draw_legend()

    widget.pointSelected.connect(lambda i: print(f"Selected index {i} (x={t[i]:.3f})"))
    widget.curveToggled.connect(lambda name: print(f"Toggled curve {name}"))

    widget.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
