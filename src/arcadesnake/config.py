"""
config.py

Enums and configuration records shared by the simulation core and its
collaborators.
"""

from typing import Tuple
from dataclasses import dataclass, fields
from enum import Enum, auto

Position = Tuple[int, int]

##########################
# ENUMS
##########################

class RunStatus(Enum):
    """Represents the different states a run can be in"""
    RUNNING = auto()
    PAUSED = auto()
    GAME_OVER = auto()

class Direction(Enum):
    """Unit movement vectors with helper methods"""
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> 'Direction':
        """Returns the opposite direction, used for preventing 180-degree turns"""
        return Direction((-self.dx, -self.dy))

    def shares_axis(self, other: 'Direction') -> bool:
        """True when both directions move along the same non-zero axis"""
        return (self.dx != 0 and other.dx != 0) or (self.dy != 0 and other.dy != 0)

    @classmethod
    def from_vector(cls, vector: Tuple[int, int]) -> 'Direction':
        """Convert an (x, y) unit vector to a Direction, raising ValueError otherwise"""
        try:
            return cls(tuple(vector))
        except (TypeError, ValueError):
            raise ValueError(f"Not a unit direction vector: {vector!r}") from None

class FoodKind(Enum):
    """Different types of food available in the game"""
    NORMAL = auto()
    BONUS = auto()
    FREEZE = auto()
    POISON = auto()

class EventKind(Enum):
    """Surprise events: a collectable bonus or a deadly trap"""
    BONUS_EVENT = auto()
    TRAP = auto()

class CollisionKind(Enum):
    """Outcome of classifying a candidate head position"""
    NONE = auto()
    WALL = auto()
    SELF = auto()
    OBSTACLE = auto()
    TRAP = auto()

##########################
# CONFIG
##########################

@dataclass
class GameConfig:
    """
    Centralized configuration for simulation tunables.
    All durations are in milliseconds unless noted otherwise.
    """
    # Grid settings
    GRID_SIZE: int = 20
    START_POSITION: Position = (10, 10)
    START_DIRECTION: Direction = Direction.RIGHT

    # Movement cadence
    INITIAL_INTERVAL: int = 150
    MIN_INTERVAL: int = 50
    INTERVAL_STEP: int = 2

    # Timer cadences
    EFFECT_DECAY_PERIOD: int = 100
    SURPRISE_EVENT_PERIOD: int = 5000

    # Food effects (counters are in effect-decay ticks)
    SPEED_BOOST_DURATION: int = 100
    FREEZE_DURATION: int = 50
    # Drawn uniformly when power-ups are enabled: Normal 1/2, others 1/6 each
    FOOD_TABLE: Tuple[FoodKind, ...] = (
        FoodKind.NORMAL,
        FoodKind.NORMAL,
        FoodKind.NORMAL,
        FoodKind.BONUS,
        FoodKind.FREEZE,
        FoodKind.POISON,
    )

    # Obstacles
    MIN_OBSTACLES: int = 3
    MAX_OBSTACLES: int = 7

    # Surprise events (durations are in surprise-event ticks)
    SURPRISE_EVENT_CHANCE: float = 0.1
    BONUS_EVENT_CHANCE: float = 0.7
    BONUS_EVENT_DURATION: int = 30
    TRAP_DURATION: int = 50
    BONUS_EVENT_SCORE: int = 5

    # Scoring
    MAX_SCORES: int = 10
    DEFAULT_PLAYER_NAME: str = "Player"

    # Host window
    CELL_SIZE: int = 24
    FPS: int = 60

@dataclass
class GameSettings:
    """
    Independent boolean toggles. Only ``obstacles`` and ``power_ups``
    change simulation behavior; the rest are carried for collaborators.
    """
    dark_mode: bool = False
    classic_mode: bool = False
    obstacles: bool = False
    power_ups: bool = True
    music: bool = False
    sound: bool = False

    ALIASES = {
        "darkMode": "dark_mode",
        "classicMode": "classic_mode",
        "powerUps": "power_ups",
    }

    @classmethod
    def field_name(cls, name: str) -> str:
        """Resolve a setting name (snake_case or camelCase) to its field"""
        resolved = cls.ALIASES.get(name, name)
        if resolved not in {f.name for f in fields(cls)}:
            raise ValueError(f"Unknown setting: {name!r}")
        return resolved

    def toggle(self, name: str) -> bool:
        """Flip one setting and return its new value"""
        resolved = self.field_name(name)
        value = not getattr(self, resolved)
        setattr(self, resolved, value)
        return value
