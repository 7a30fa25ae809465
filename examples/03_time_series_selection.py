"""Time series with point, range, brush and lasso selection.

Run:
    python examples/03_time_series_selection.py

  - click: select one timestamp
  - shift+click: select the range since the previous click
  - "Brush last day": push a date range to a linked selector model
  - "Lasso upper half": select every point in the upper half of the plot
"""

import sys
from datetime import datetime, timedelta, timezone

import numpy as np
from PySide6 import QtWidgets
from PySide6.QtWidgets import QLabel, QMainWindow, QPushButton, QVBoxLayout, QWidget

from pylinesqt import DateScale, LinearScale, LinesModel, LinesWidget, SelectorModel


def create_sample_series(n=500):
    """Two noisy sensor series sampled every 15 minutes."""
    rng = np.random.default_rng(42)
    base = datetime(2024, 6, 1, tzinfo=timezone.utc)
    times = [base + timedelta(minutes=15 * i) for i in range(n)]
    phase = np.linspace(0.0, 10.0 * np.pi, n)
    temperature = 20.0 + 5.0 * np.sin(phase) + rng.normal(0.0, 0.5, n)
    humidity = 20.0 + 4.0 * np.cos(phase) + rng.normal(0.0, 0.5, n)
    # Sensor outage
    humidity[200:230] = np.nan
    return times, np.vstack([temperature, humidity])


class TimeSeriesExample(QMainWindow):
    """Lines plot over a date axis plus selection readout."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("pylinesqt - time series selection")
        self.resize(1100, 600)

        self.times, values = create_sample_series()
        self.model = LinesModel(
            x=self.times, y=values, labels=["temperature", "humidity"], labels_visibility="legend"
        )
        self.model.touched.connect(self._on_selection)

        self.x_scale = DateScale(self.times[0], self.times[-1], date_format="%Y-%m-%d %H:%M")
        y_scale = LinearScale()
        y_scale.fit(values)

        self.selector = SelectorModel()
        self.selector.touched.connect(self._on_brush)

        self.plot = LinesWidget()
        self.lines = self.plot.add_lines(
            self.model, scales={"x": self.x_scale, "y": y_scale}, selector=self.selector
        )
        self.lines.draw_legend()

        self.readout = QLabel("Nothing selected")
        brush = QPushButton("Brush last day")
        brush.clicked.connect(self._brush_last_day)
        lasso = QPushButton("Lasso upper half")
        lasso.clicked.connect(self._lasso_upper_half)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addWidget(self.plot, 1)
        layout.addWidget(self.readout)
        layout.addWidget(brush)
        layout.addWidget(lasso)
        self.setCentralWidget(central)

    def _brush_last_day(self):
        end = self.times[-1]
        self.lines.invert_multi_range((end - timedelta(days=1), end))

    def _lasso_upper_half(self):
        rect = self.plot.surface.plot_rect()
        vertices = [
            (rect.left(), rect.top()),
            (rect.right(), rect.top()),
            (rect.right(), rect.center().y()),
            (rect.left(), rect.center().y()),
        ]
        self.lines.update_lasso_selection("upper", vertices)

    def _on_selection(self):
        selected = self.model.idx_selected
        if not selected:
            self.readout.setText("Nothing selected")
        elif isinstance(selected[0], int):
            stamps = [self.x_scale.format_date(self.model.x_data[i]) for i in selected]
            self.readout.setText("Selected: " + " .. ".join(stamps))
        else:
            counts = ", ".join(f"{e.curve_name}: {len(e.indices)}" for e in selected)
            self.readout.setText(f"Lasso: {counts}")

    def _on_brush(self):
        start, end = self.selector.selected
        self.readout.setText(f"Brushed {start} .. {end}")


def main():
    """Run the time series example."""
    app = QtWidgets.QApplication(sys.argv)
    window = TimeSeriesExample()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
