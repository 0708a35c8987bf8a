"""
signals.py

Discrete notifications for rendering, audio and persistence collaborators.
Signals are delivered synchronously and never replayed; a listener that is
not subscribed when a signal fires simply misses it.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List

from .errors import SimulationError

class Signal(Enum):
    EAT = "eat"
    SPEED_BOOST = "speedBoost"
    FREEZE = "freeze"
    POISON = "poison"
    BONUS = "bonus"
    GAME_OVER = "gameOver"
    BUTTON = "button"
    PAUSE = "pause"
    RESUME = "resume"
    NEW_GAME = "newGame"
    MUSIC = "music"
    SCORE_RECORD = "scoreRecord"

@dataclass(frozen=True)
class ScoreRecord:
    """Final result of a run, handed to the persistence collaborator"""
    name: str
    score: int
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "score": self.score,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
        }

Listener = Callable[[Signal, Any], None]

class SignalBus:
    """Fan-out of signals to subscribed listeners"""
    def __init__(self):
        self._listeners: Dict[Signal, List[Listener]] = defaultdict(list)
        self._catch_all: List[Listener] = []
        self.logger = logging.getLogger(__name__)

    def subscribe(self, signal: Signal, listener: Listener) -> None:
        self._listeners[signal].append(listener)

    def subscribe_all(self, listener: Listener) -> None:
        """Receive every signal"""
        self._catch_all.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        for listeners in self._listeners.values():
            while listener in listeners:
                listeners.remove(listener)
        while listener in self._catch_all:
            self._catch_all.remove(listener)

    def emit(self, signal: Signal, payload: Any = None) -> None:
        """
        Deliver ``signal`` to its listeners in subscription order.
        A failing listener is logged and skipped so the simulation keeps going.
        """
        for listener in self._listeners[signal] + self._catch_all:
            try:
                listener(signal, payload)
            except SimulationError:
                raise
            except Exception as e:
                self.logger.error(f"Listener for {signal.value} failed: {e}", exc_info=True)
