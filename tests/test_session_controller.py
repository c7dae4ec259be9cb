"""Tests for services.session_controller – session lifecycle around the engine."""

from __future__ import annotations

import pytest

from app.config import FALLBACK_TEXTS
from services.session_controller import SessionController
from services.typing_engine import Status


class Recorder:
    def __init__(self, controller: SessionController):
        self.loading = []
        self.ready = []
        self.snapshots = []
        self.finished = []
        controller.loading.connect(lambda d: self.loading.append(d))
        controller.ready.connect(lambda s: self.ready.append(s))
        controller.snapshotChanged.connect(lambda s: self.snapshots.append(s))
        controller.finished.connect(lambda s: self.finished.append(s))


@pytest.fixture
def texts():
    return {"general": "ab cd", "story": "story time", "coding": "code it"}


@pytest.fixture
def controller(qapp, clock, texts):
    c = SessionController(
        provider=lambda domain: texts[domain],
        clock=clock,
        start_worker=lambda worker: worker.run(),
    )
    yield c
    c.ticker.stop()


@pytest.fixture
def deferred(qapp, clock, texts):
    """Controller whose fetch workers run only when the test says so."""
    pending = []
    c = SessionController(
        provider=lambda domain: texts[domain],
        clock=clock,
        start_worker=pending.append,
    )
    c.pending = pending
    yield c
    c.ticker.stop()


def _type(controller, keys):
    for k in keys:
        controller.handle_key(k)


class TestNewGame:
    def test_loads_passage_into_idle_session(self, controller):
        rec = Recorder(controller)
        controller.new_game("story")
        assert rec.loading == ["story"]
        assert controller.session.status is Status.IDLE
        assert [w.text for w in rec.ready[0].words] == ["story", "time"]

    def test_unknown_domain_becomes_general(self, controller):
        controller.new_game("poetry")
        assert controller.domain == "general"
        assert [w.text for w in controller.session.words] == ["ab", "cd"]

    def test_keys_before_passage_are_ignored(self, deferred):
        deferred.new_game("general")
        assert deferred.handle_key("a") is False
        assert not deferred.ticker.is_running

    def test_superseded_passage_is_discarded(self, deferred):
        rec = Recorder(deferred)
        deferred.new_game("story")
        deferred.new_game("coding")
        first, second = deferred.pending
        first.run()
        assert deferred.session is None
        assert rec.ready == []
        second.run()
        assert [w.text for w in deferred.session.words] == ["code", "it"]

    def test_provider_error_uses_fallback(self, qapp, clock):
        def broken(domain):
            raise RuntimeError("boom")

        c = SessionController(provider=broken, clock=clock, start_worker=lambda w: w.run())
        c.new_game("coding")
        assert " ".join(w.text for w in c.session.words) == FALLBACK_TEXTS["coding"]


class TestTicker:
    def test_first_key_starts_ticker(self, controller):
        controller.new_game("general")
        assert not controller.ticker.is_running
        controller.handle_key("a")
        assert controller.ticker.is_running

    def test_ignored_first_key_does_not_start(self, controller):
        controller.new_game("general")
        controller.handle_key("Shift")
        assert not controller.ticker.is_running

    def test_new_game_cancels_running_ticker(self, deferred):
        deferred.new_game("general")
        deferred.pending.pop().run()
        deferred.handle_key("a")
        assert deferred.ticker.is_running
        deferred.new_game("story")
        assert not deferred.ticker.is_running
        assert deferred.session is None

    def test_tick_past_limit_finishes(self, controller, clock):
        rec = Recorder(controller)
        controller.new_game("general")
        controller.handle_key("a")
        clock.advance(10)
        controller.on_tick()
        clock.advance(20)
        controller.on_tick()
        assert controller.session.status is Status.ENDED
        assert not controller.ticker.is_running
        assert len(rec.finished) == 1
        assert rec.finished[0].accuracy == 100
        assert controller.wpm_history == [(10.0, 1)]


class TestFinish:
    def test_last_space_emits_summary_once(self, controller):
        rec = Recorder(controller)
        controller.new_game("general")
        _type(controller, ["a", "x", " ", "c", "d", " "])
        assert len(rec.finished) == 1
        assert rec.finished[0].accuracy == 75
        assert rec.snapshots[-1].status is Status.ENDED

        assert controller.handle_key("a") is False
        controller.on_tick()
        controller.reset()
        assert len(rec.finished) == 1

    def test_reset_ends_session(self, controller, clock):
        rec = Recorder(controller)
        controller.new_game("general")
        controller.handle_key("a")
        clock.advance(6)
        controller.reset()
        assert controller.session.status is Status.ENDED
        assert not controller.ticker.is_running
        assert rec.finished[0].wpm == 2

    def test_every_change_publishes_snapshot(self, controller):
        rec = Recorder(controller)
        controller.new_game("general")
        _type(controller, ["a", "Backspace", "Backspace"])
        # the second backspace at the word start changes nothing
        assert len(rec.snapshots) == 2
        assert rec.snapshots[-1].cursor == (0, 0)
