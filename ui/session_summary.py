# ui/session_summary.py
from __future__ import annotations
from typing import Sequence, Tuple

from PySide6.QtWidgets import QDialog, QVBoxLayout, QLabel, QPushButton
import pyqtgraph as pg

from app.calculation import smooth
from services.typing_engine import Summary
from utils.graph_helper import setup_wpm_plot, update_curve


class SessionSummary(QDialog):
    """Final WPM, accuracy and level, with WPM over the session's ticks."""

    def __init__(
        self,
        summary: Summary,
        history: Sequence[Tuple[float, int]],
        parent=None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Results")
        self.resize(720, 420)

        root = QVBoxLayout(self)
        root.addWidget(QLabel(f"{summary.wpm} WPM", self))
        root.addWidget(QLabel(f"Accuracy: {summary.accuracy}%", self))
        root.addWidget(QLabel(summary.level, self))

        if history:
            times = [float(t) for t, _ in history]
            wpms = smooth([float(w) for _, w in history])
            plot = pg.PlotWidget()
            curve = setup_wpm_plot(plot, "#c8c8ff")
            update_curve(curve, times, wpms)
            root.addWidget(plot, stretch=1)

        btn = QPushButton("OK", self)
        btn.clicked.connect(self.accept)
        root.addWidget(btn)
