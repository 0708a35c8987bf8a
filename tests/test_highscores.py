"""
Tests for highscores.py - the persistence collaborator.
"""

import json
from datetime import datetime
from unittest.mock import patch

from arcadesnake import GameConfig, ScoreRecord, Signal, SignalBus
from arcadesnake.highscores import ScoreManager, get_data_path


def record(name, score):
    return ScoreRecord(name, score, datetime(2024, 1, 1, 12, 0, 0))


class TestScoreManager:
    """Tests for ScoreManager."""

    def test_creates_empty_file(self, tmp_path):
        path = tmp_path / "scores.json"
        ScoreManager(GameConfig(), str(path))
        assert json.loads(path.read_text()) == []

    def test_sorted_and_trimmed(self, tmp_path):
        path = tmp_path / "scores.json"
        manager = ScoreManager(GameConfig(MAX_SCORES=3), str(path))
        for name, score in [("a", 4), ("b", 9), ("c", 1), ("d", 7)]:
            manager.add_record(record(name, score))
        assert [s["name"] for s in manager.highscores] == ["b", "d", "a"]
        assert json.loads(path.read_text()) == manager.highscores

    def test_reloads_saved_scores(self, tmp_path):
        path = str(tmp_path / "scores.json")
        ScoreManager(GameConfig(), path).add_record(record("ada", 5))
        assert ScoreManager(GameConfig(), path).highscores[0]["score"] == 5

    def test_corrupt_file_is_logged(self, tmp_path, caplog):
        path = tmp_path / "scores.json"
        path.write_text("{not json")
        manager = ScoreManager(GameConfig(), str(path))
        assert manager.highscores == []
        assert "Error loading highscores" in caplog.text

    def test_non_list_file_is_logged(self, tmp_path, caplog):
        path = tmp_path / "scores.json"
        path.write_text(json.dumps({"name": "ada", "score": 3}))
        manager = ScoreManager(GameConfig(), str(path))
        assert manager.highscores == []
        assert "Error loading highscores" in caplog.text
        manager.add_record(record("bob", 2))
        assert json.loads(path.read_text()) == [record("bob", 2).to_dict()]

    def test_records_from_bus(self, tmp_path):
        bus = SignalBus()
        manager = ScoreManager(GameConfig(), str(tmp_path / "scores.json"))
        manager.attach(bus)
        bus.emit(Signal.SCORE_RECORD, record("ada", 3))
        assert manager.highscores == [record("ada", 3).to_dict()]

    def test_clear(self, tmp_path):
        manager = ScoreManager(GameConfig(), str(tmp_path / "scores.json"))
        manager.add_record(record("ada", 3))
        manager.clear()
        assert manager.highscores == []

    def test_default_path_uses_user_data_dir(self, tmp_path):
        with patch("arcadesnake.highscores.appdirs.user_data_dir", return_value=str(tmp_path)):
            assert get_data_path("highscores.json") == str(tmp_path / "highscores.json")
