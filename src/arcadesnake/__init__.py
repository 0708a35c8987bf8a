"""
Arcade Snake: a tick-driven snake simulation with typed food, obstacles,
timed speed effects and random surprise events.
"""

from .config import (CollisionKind, Direction, EventKind, FoodKind,
                     GameConfig, GameSettings, RunStatus)
from .engine import SimulationEngine, Trigger
from .errors import ConcurrentMutationError, IllegalTickError, SimulationError
from .signals import ScoreRecord, Signal, SignalBus
from .state import Food, GameSnapshot, RunState, SurpriseEvent

__all__ = [
    'CollisionKind', 'Direction', 'EventKind', 'FoodKind',
    'GameConfig', 'GameSettings', 'RunStatus',
    'SimulationEngine', 'Trigger',
    'SimulationError', 'IllegalTickError', 'ConcurrentMutationError',
    'ScoreRecord', 'Signal', 'SignalBus',
    'Food', 'GameSnapshot', 'RunState', 'SurpriseEvent',
]
