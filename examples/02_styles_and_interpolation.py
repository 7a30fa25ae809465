"""Live restyling of a Lines mark.

Every control writes one model attribute; the mark redraws only what the
attribute affects (paths for interpolation, pens for line style and width,
visibility for labels and the curve subset).

Run:
    python examples/02_styles_and_interpolation.py
"""

import sys

import numpy as np
from PySide6 import QtWidgets
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDoubleSpinBox,
    QFormLayout,
    QHBoxLayout,
    QLineEdit,
    QMainWindow,
    QWidget,
)

from pylinesqt import (
    ColorScale,
    Interpolation,
    LabelsVisibility,
    LinearScale,
    LineStyle,
    LinesModel,
    LinesWidget,
)


class StylesExample(QMainWindow):
    """Lines plot with a side panel of style controls."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("pylinesqt - styles and interpolation")
        self.resize(1100, 600)

        rng = np.random.default_rng(7)
        x = np.arange(12, dtype=float)
        y = np.cumsum(rng.normal(0.0, 1.0, size=(4, x.size)), axis=1)

        self.model = LinesModel(
            x=x,
            y=y,
            labels=["north", "east", "south", "west"],
            color=[0.0, 1.0, 2.0, 3.0],
            labels_visibility="label",
            animate_dur=400,
        )

        y_scale = LinearScale()
        y_scale.fit(y)
        x_scale = LinearScale()
        x_scale.fit(x)
        color_scale = ColorScale(0.0, 3.0, colors=["#1f77b4", "#d62728"])

        self.plot = LinesWidget()
        self.lines = self.plot.add_lines(
            self.model, scales={"x": x_scale, "y": y_scale, "color": color_scale}
        )
        self.lines.draw_legend()

        self._setup_ui()

    def _setup_ui(self):
        """Create the control panel."""
        panel = QWidget()
        form = QFormLayout(panel)

        interpolation = QComboBox()
        interpolation.addItems([m.value for m in Interpolation])
        interpolation.currentTextChanged.connect(
            lambda v: setattr(self.model, "interpolation", v)
        )
        form.addRow("Interpolation", interpolation)

        line_style = QComboBox()
        line_style.addItems([m.value for m in LineStyle])
        line_style.currentTextChanged.connect(lambda v: setattr(self.model, "line_style", v))
        form.addRow("Line style", line_style)

        width = QDoubleSpinBox()
        width.setRange(0.5, 12.0)
        width.setValue(self.model.stroke_width)
        width.valueChanged.connect(lambda v: setattr(self.model, "stroke_width", v))
        form.addRow("Stroke width", width)

        labels = QComboBox()
        labels.addItems([m.value for m in LabelsVisibility])
        labels.setCurrentText(self.model.labels_visibility.value)
        labels.currentTextChanged.connect(
            lambda v: setattr(self.model, "labels_visibility", v)
        )
        form.addRow("Labels", labels)

        close_path = QCheckBox()
        close_path.toggled.connect(lambda v: setattr(self.model, "close_path", v))
        form.addRow("Close path", close_path)

        subset = QLineEdit()
        subset.setPlaceholderText("e.g. 0, 2")
        subset.editingFinished.connect(lambda: self._apply_subset(subset.text()))
        form.addRow("Curve subset", subset)

        central = QWidget()
        layout = QHBoxLayout(central)
        layout.addWidget(self.plot, 4)
        layout.addWidget(panel, 1)
        self.setCentralWidget(central)

    def _apply_subset(self, text):
        """Show only the listed curve indices (two or more)."""
        indices = [int(t) for t in text.replace(",", " ").split() if t.isdigit()]
        self.model.curves_subset = indices


def main():
    """Run the styles example."""
    app = QtWidgets.QApplication(sys.argv)
    window = StylesExample()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
