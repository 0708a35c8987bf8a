"""
Tests for signals.py - the collaborator notification bus.
"""

from datetime import datetime

import pytest

from arcadesnake import IllegalTickError, ScoreRecord, Signal, SignalBus


class TestSignalBus:
    """Tests for SignalBus."""

    def test_delivers_to_matching_listeners(self):
        bus = SignalBus()
        got = []
        bus.subscribe(Signal.EAT, lambda s, p: got.append(("eat", p)))
        bus.subscribe(Signal.POISON, lambda s, p: got.append(("poison", p)))
        bus.emit(Signal.EAT, 1)
        assert got == [("eat", 1)]

    def test_catch_all_listener(self):
        bus = SignalBus()
        got = []
        bus.subscribe_all(lambda s, p: got.append(s))
        bus.emit(Signal.PAUSE, True)
        bus.emit(Signal.RESUME, False)
        assert got == [Signal.PAUSE, Signal.RESUME]

    def test_unsubscribe(self):
        bus = SignalBus()
        got = []

        def listener(signal, payload):
            got.append(signal)

        bus.subscribe(Signal.EAT, listener)
        bus.subscribe_all(listener)
        bus.unsubscribe(listener)
        bus.emit(Signal.EAT)
        assert got == []

    def test_failing_listener_is_isolated(self, caplog):
        bus = SignalBus()
        got = []

        def broken(signal, payload):
            raise RuntimeError("speaker unplugged")

        bus.subscribe(Signal.EAT, broken)
        bus.subscribe(Signal.EAT, lambda s, p: got.append(s))
        bus.emit(Signal.EAT)
        assert got == [Signal.EAT]
        assert "speaker unplugged" in caplog.text

    def test_simulation_errors_propagate(self):
        bus = SignalBus()

        def misuse(signal, payload):
            raise IllegalTickError("late tick")

        bus.subscribe(Signal.GAME_OVER, misuse)
        with pytest.raises(IllegalTickError):
            bus.emit(Signal.GAME_OVER)

    def test_no_replay_for_late_subscribers(self):
        bus = SignalBus()
        bus.emit(Signal.NEW_GAME)
        got = []
        bus.subscribe(Signal.NEW_GAME, lambda s, p: got.append(s))
        assert got == []


class TestScoreRecord:
    """Tests for the persisted score record."""

    def test_to_dict(self):
        record = ScoreRecord("ada", 12, datetime(2024, 5, 1, 9, 30, 15, 123))
        assert record.to_dict() == {
            "name": "ada",
            "score": 12,
            "timestamp": "2024-05-01T09:30:15",
        }
