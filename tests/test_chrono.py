from PySide6.QtCore import QEventLoop, QTimer

from core.chrono import SessionTicker


def _run_events(ms):
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec()


def _count_ticks(ticker):
    ticks = []
    ticker.tick.connect(lambda: ticks.append(1))
    return ticks


def test_start_and_stop(qapp):
    ticker = SessionTicker(tick_ms=10)
    ticks = _count_ticks(ticker)
    assert not ticker.is_running
    ticker.start()
    assert ticker.is_running
    _run_events(100)
    assert ticks
    ticker.stop()
    assert not ticker.is_running


def test_restart_keeps_ticking(qapp):
    ticker = SessionTicker(tick_ms=10)
    ticks = _count_ticks(ticker)
    ticker.start()
    ticker.start()
    assert ticker.is_running
    _run_events(100)
    assert ticks
    ticker.stop()
    assert not ticker.is_running


def test_no_tick_after_stop(qapp):
    ticker = SessionTicker(tick_ms=10)
    ticks = _count_ticks(ticker)
    ticker.start()
    _run_events(50)
    ticker.stop()
    seen = len(ticks)
    _run_events(100)
    assert len(ticks) == seen


def test_stop_before_first_tick(qapp):
    ticker = SessionTicker(tick_ms=10)
    ticks = _count_ticks(ticker)
    ticker.start()
    ticker.stop()
    _run_events(50)
    assert ticks == []
