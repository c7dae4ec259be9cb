# ui/main_window.py
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QComboBox, QPushButton
)
from PySide6.QtCore import Qt

from app.config import DOMAINS, DEFAULT_DOMAIN
from app.levels import load_level_table
from services.session_controller import SessionController
from ui.session_summary import SessionSummary
from ui.typing_view import TypingView


class MainWindow(QMainWindow):
    def __init__(self, controller: SessionController = None):
        super().__init__()
        self.setWindowTitle("HippoType")
        self.resize(1200, 720)

        self.controller = controller or SessionController(levels=load_level_table(), parent=self)

        root = QWidget(self)
        root_v = QVBoxLayout(root)
        root_v.setContentsMargins(16, 40, 16, 16)
        root_v.setSpacing(24)
        self._build_top_bar(root_v)

        # --- Typing view ---
        self.view = TypingView(self)
        view_h = QHBoxLayout()
        view_h.addStretch(1)
        view_h.addWidget(self.view, 1)
        view_h.addStretch(1)
        root_v.addLayout(view_h, 1)
        self.setCentralWidget(root)

        # Keyboard focus belongs to the typing view
        self.setFocusPolicy(Qt.NoFocus)

        self.view.keyTyped.connect(self.controller.handle_key)
        self.controller.loading.connect(self.view.show_loading)
        self.controller.ready.connect(self.view.show_ready)
        self.controller.snapshotChanged.connect(self.view.show_snapshot)
        self.controller.finished.connect(self._on_finished)

        self.menuBar().setVisible(False)
        self.setStyleSheet(
            """
            QWidget { background: #0f1115; color: #e5e7eb; }
            QLabel#lblInfo { color: #eab308; font-size: 20px; }
            QLabel#lblFocus { color: #6b7280; }
            """
            + self._topbar_qss
        )

        self.new_game(DEFAULT_DOMAIN)

    # ---------------- Top Bar ----------------
    def _build_top_bar(self, parent_layout):
        bar = QWidget(self)
        bar.setObjectName("TopBar")
        h = QHBoxLayout(bar)
        h.setContentsMargins(14, 16, 14, 16)
        h.setSpacing(10)

        self.cmbDomain = QComboBox(bar)
        self.cmbDomain.addItems(list(DOMAINS))
        self.cmbDomain.setFocusPolicy(Qt.NoFocus)
        self.cmbDomain.currentTextChanged.connect(self.new_game)
        h.addWidget(self.cmbDomain)

        btn_new = QPushButton("New game", bar)
        btn_new.setObjectName("TopBtn")
        btn_new.setFocusPolicy(Qt.NoFocus)
        btn_new.clicked.connect(lambda: self.new_game(self.cmbDomain.currentText()))
        h.addWidget(btn_new)

        h.addStretch(1)
        parent_layout.addWidget(bar)

        self._topbar_qss = """
        QWidget#TopBar {
            background: rgba(255,255,255,0.04);
            border: 1px solid rgba(255,255,255,0.08);
            border-radius: 14px;
        }
        QPushButton#TopBtn {
            background: transparent;
            border: 1px solid rgba(255,255,255,0.10);
            border-radius: 9px;
            padding: 6px 12px;
        }
        QPushButton#TopBtn:hover {
            border-color: rgba(255,255,255,0.32);
            background: rgba(255,255,255,0.06);
        }
        """

    # ---------------- Session ----------------
    def new_game(self, domain: str):
        self.setWindowTitle(f"HippoType — {domain}")
        self.controller.new_game(domain)
        self.view.setFocus()

    def _on_finished(self, summary):
        self.setWindowTitle(f"HippoType — {summary.wpm} WPM")
        dlg = SessionSummary(summary, self.controller.wpm_history, parent=self)
        dlg.exec()
