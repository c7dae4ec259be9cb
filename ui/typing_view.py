from __future__ import annotations
import html

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QSizePolicy

from app.config import SESSION_DURATION_MS
from services.typing_engine import Snapshot, Status, Verdict


class TypingView(QWidget):
    """Projects engine snapshots; never keeps typing state of its own."""

    keyTyped = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setFocusPolicy(Qt.StrongFocus)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 30, 0, 30)
        root.setSpacing(28)

        self.lblInfo = QLabel("", self)
        self.lblInfo.setObjectName("lblInfo")
        self.lblInfo.setAlignment(Qt.AlignCenter)
        root.addWidget(self.lblInfo)

        self.lblWords = QLabel("", self)
        self.lblWords.setObjectName("lblWords")
        self.lblWords.setTextFormat(Qt.RichText)
        self.lblWords.setWordWrap(True)
        self.lblWords.setAlignment(Qt.AlignCenter)
        self.lblWords.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.lblWords.setMinimumWidth(900)
        self.lblWords.setMaximumWidth(1100)
        self.lblWords.setMinimumHeight(140)
        self.lblWords.setStyleSheet("font-size: 30px; line-height: 1.35;")
        root.addWidget(self.lblWords, stretch=1, alignment=Qt.AlignHCenter)

        self.lblFocus = QLabel("Click here to keep typing", self)
        self.lblFocus.setObjectName("lblFocus")
        self.lblFocus.setAlignment(Qt.AlignCenter)
        self.lblFocus.setVisible(False)
        root.addWidget(self.lblFocus)

        self._colors = {
            "ok": "#22c55e",
            "err": "#ef4444",
            "mut": "#9aa1a9",
            "caret_bg": "rgba(234,179,8,0.25)",
            "err_ul": "rgba(239,68,68,0.9)",
        }
        self._running = False

    # ---------------- controller slots ----------------
    @Slot(str)
    def show_loading(self, domain: str):
        self._running = False
        self.lblFocus.setVisible(False)
        self.lblInfo.setText("Loading...")
        self.lblWords.setText(html.escape(f"🤖 Generating {domain} content..."))

    @Slot(object)
    def show_ready(self, snap: Snapshot):
        self.lblInfo.setText(f"{SESSION_DURATION_MS // 1000}s")
        self.show_snapshot(snap)
        self.setFocus()

    @Slot(object)
    def show_snapshot(self, snap: Snapshot):
        self._running = snap.status is Status.RUNNING
        if self._running:
            self.lblInfo.setText(f"{snap.seconds_left}s | {snap.wpm} WPM | {snap.accuracy}%")
        elif snap.status is Status.ENDED:
            self.lblInfo.setText(f"{snap.wpm} WPM | {snap.accuracy}%")
            self.lblFocus.setVisible(False)
        self.lblWords.setText(self.render_html(snap))

    # ---------------- rendering ----------------
    def render_html(self, snap: Snapshot) -> str:
        col_ok = self._colors["ok"]
        col_err = self._colors["err"]
        col_mut = self._colors["mut"]
        caret_bg = self._colors["caret_bg"]
        err_ul = self._colors["err_ul"]

        def span(ch: str, style: str) -> str:
            return f'<span style="{style}">{html.escape(ch)}</span>'

        words = []
        for word in snap.words:
            parts = []
            for c in word.chars:
                if c.verdict is Verdict.CORRECT:
                    parts.append(span(c.glyph, f"color:{col_ok}"))
                elif c.verdict is Verdict.INCORRECT:
                    parts.append(span(c.glyph, f"color:{col_err}; border-bottom:2px solid {err_ul}"))
                elif c.verdict is Verdict.CURRENT and snap.status is not Status.ENDED:
                    parts.append(span(c.glyph, f"color:{col_mut}; background:{caret_bg}"))
                else:
                    parts.append(span(c.glyph, f"color:{col_mut}"))
            words.append("".join(parts))
        return " ".join(words)

    # ---------------- input ----------------
    def keyPressEvent(self, ev):
        nk = self._normalize_key(ev)
        if nk is None:
            return super().keyPressEvent(ev)
        ev.accept()
        self.keyTyped.emit(nk)

    def _normalize_key(self, ev) -> str | None:
        if ev.modifiers() & (Qt.ControlModifier | Qt.AltModifier | Qt.MetaModifier):
            return None
        key = ev.key()
        t = ev.text()
        if key == Qt.Key_Backspace:
            return "Backspace"
        if key == Qt.Key_Space:
            return " "
        if t and len(t) == 1 and t.isprintable():
            return t
        return None

    def focusOutEvent(self, ev):
        if self._running:
            self.lblFocus.setVisible(True)
        super().focusOutEvent(ev)

    def focusInEvent(self, ev):
        self.lblFocus.setVisible(False)
        super().focusInEvent(ev)

    def mousePressEvent(self, ev):
        self.setFocus()
        super().mousePressEvent(ev)
