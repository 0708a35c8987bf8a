"""
highscores.py

Persistence collaborator: stores the records the engine emits when a run
ends. The engine never reads them back.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

import appdirs

from .config import GameConfig
from .signals import ScoreRecord, Signal, SignalBus

APP_NAME = "ArcadeSnake"
APP_AUTHOR = "ArcadeSnake"

def get_data_path(relative_path: str) -> str:
    """Get path for data files using appdirs for user-specific directories"""
    data_dir = appdirs.user_data_dir(APP_NAME, APP_AUTHOR)
    os.makedirs(data_dir, exist_ok=True)
    return os.path.join(data_dir, relative_path)

def get_log_path(relative_path: str) -> str:
    """Get path for log files using appdirs for user-specific directories"""
    log_dir = appdirs.user_log_dir(APP_NAME, APP_AUTHOR)
    os.makedirs(log_dir, exist_ok=True)
    return os.path.join(log_dir, relative_path)

class ScoreManager:
    """
    Keeps the best scores, highest first, in a JSON file.
    I/O problems are logged and never reach the simulation.
    """
    def __init__(self, config: GameConfig, path: Optional[str] = None):
        self.config = config
        self.path = path or get_data_path("highscores.json")
        self.highscores: List[Dict[str, Any]] = []
        self.load_scores()

    def attach(self, bus: SignalBus) -> None:
        """Start recording scores emitted on ``bus``"""
        bus.subscribe(Signal.SCORE_RECORD, self._on_record)

    def _on_record(self, signal: Signal, record: ScoreRecord) -> None:
        self.add_record(record)

    def load_scores(self) -> None:
        """Load high scores from file"""
        if os.path.exists(self.path):
            try:
                with open(self.path, 'r') as f:
                    loaded = json.load(f)
                if not isinstance(loaded, list):
                    logging.error(f"Error loading highscores: expected a list, got {type(loaded).__name__}")
                    self.highscores = []
                    return
                self.highscores = loaded
                logging.info("High scores loaded successfully.")
            except (OSError, ValueError) as e:
                logging.error(f"Error loading highscores: {e}")
        else:
            # Initialize empty highscores file
            self.save_scores()

    def save_scores(self) -> None:
        """Save high scores to file"""
        try:
            with open(self.path, 'w') as f:
                json.dump(self.highscores, f, indent=4)
            logging.info("High scores saved successfully.")
        except OSError as e:
            logging.error(f"Error saving highscores: {e}")

    def add_record(self, record: ScoreRecord) -> None:
        """Add new score and maintain sorted order"""
        self.highscores.append(record.to_dict())
        self.highscores.sort(key=lambda x: x["score"], reverse=True)
        self.highscores = self.highscores[:self.config.MAX_SCORES]
        self.save_scores()
        logging.info(f"High score added: {record.name} - {record.score}")

    def clear(self) -> None:
        self.highscores = []
        self.save_scores()
