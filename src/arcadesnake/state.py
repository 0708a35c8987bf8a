"""
state.py

Entities and the authoritative run aggregate.

RunState is the single mutable aggregate of one run. GameSnapshot is the
read-only copy handed to rendering, audio and persistence collaborators.
"""

from collections import deque
from dataclasses import dataclass, field, replace
from typing import Deque, List, Optional, Set, Tuple

from .config import Direction, EventKind, FoodKind, GameConfig, GameSettings, Position

##########################
# ENTITIES
##########################

@dataclass(frozen=True)
class Food:
    """A food item on the grid"""
    position: Position
    kind: FoodKind = FoodKind.NORMAL

@dataclass
class SurpriseEvent:
    """A time-limited bonus or hazard; duration counts surprise-event ticks"""
    position: Position
    kind: EventKind
    duration: int

    @property
    def is_trap(self) -> bool:
        return self.kind == EventKind.TRAP

##########################
# RUN STATE
##########################

@dataclass
class RunState:
    """
    Everything that belongs to one run. Replaced wholesale on start/reset.

    Attributes:
        snake: deque of (x, y) from head at index 0 to tail at the end
        food: food items currently on the grid
        obstacles: static obstacle cells, fixed for the whole run
        events: active surprise events
        direction: direction applied on the last tick
        pending_direction: direction buffered for the next tick, if any
        score: non-negative score
        interval: base movement interval in milliseconds
        speed_boost_remaining, freeze_remaining: effect counters
    """
    snake: Deque[Position]
    direction: Direction
    interval: int
    food: List[Food] = field(default_factory=list)
    obstacles: Set[Position] = field(default_factory=set)
    events: List[SurpriseEvent] = field(default_factory=list)
    pending_direction: Optional[Direction] = None
    score: int = 0
    speed_boost_remaining: int = 0
    freeze_remaining: int = 0
    paused: bool = False
    game_over: bool = False
    ticks: int = 0

    @classmethod
    def fresh(cls, config: GameConfig) -> 'RunState':
        """Default state for a brand new run, before any entities are spawned"""
        return cls(
            snake=deque([config.START_POSITION]),
            direction=config.START_DIRECTION,
            interval=config.INITIAL_INTERVAL,
        )

    @property
    def head(self) -> Position:
        """Return the head position (first element)."""
        return self.snake[0]

    def food_at(self, position: Position) -> Optional[int]:
        """Index of the first food item at ``position``, or None"""
        for index, item in enumerate(self.food):
            if item.position == position:
                return index
        return None

    def bonus_event_at(self, position: Position) -> Optional[int]:
        """Index of the first BonusEvent at ``position``, or None"""
        for index, event in enumerate(self.events):
            if event.kind == EventKind.BONUS_EVENT and event.position == position:
                return index
        return None

    def trap_positions(self) -> Set[Position]:
        return {event.position for event in self.events if event.is_trap}

    def invariant_violations(self, config: GameConfig) -> List[str]:
        """
        Returns a description of every broken invariant (empty when healthy).
        Checked after each completed tick.
        """
        problems = []
        if len(self.snake) < 1:
            problems.append("snake is empty")
        if self.score < 0:
            problems.append(f"negative score {self.score}")
        if not config.MIN_INTERVAL <= self.interval <= config.INITIAL_INTERVAL:
            problems.append(f"interval {self.interval} out of range")
        if self.speed_boost_remaining < 0 or self.freeze_remaining < 0:
            problems.append("negative effect counter")

        def in_bounds(pos: Position) -> bool:
            return 0 <= pos[0] < config.GRID_SIZE and 0 <= pos[1] < config.GRID_SIZE

        placed = [item.position for item in self.food]
        placed.extend(self.obstacles)
        placed.extend(event.position for event in self.events)
        for pos in placed:
            if not in_bounds(pos):
                problems.append(f"entity out of bounds at {pos}")
        return problems

##########################
# SNAPSHOT
##########################

@dataclass(frozen=True)
class GameSnapshot:
    """
    A read-only copy of the run at a point in time, safe to keep between frames.
    """
    snake: Tuple[Position, ...]
    food: Tuple[Food, ...]
    obstacles: frozenset
    events: Tuple[Tuple[Position, EventKind, int], ...]
    score: int
    direction: Direction
    paused: bool
    game_over: bool
    settings: GameSettings
    interval: int
    grid_size: int

    @classmethod
    def capture(cls, state: RunState, settings: GameSettings,
                config: GameConfig, interval: int) -> 'GameSnapshot':
        return cls(
            snake=tuple(state.snake),
            food=tuple(state.food),
            obstacles=frozenset(state.obstacles),
            events=tuple((e.position, e.kind, e.duration) for e in state.events),
            score=state.score,
            direction=state.direction,
            paused=state.paused,
            game_over=state.game_over,
            settings=replace(settings),
            interval=interval,
            grid_size=config.GRID_SIZE,
        )

    def render_text(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty, # = obstacle, N/B/F/P = food by kind,
        + = bonus event, X = trap, H = snake head, o = snake body
        Row 0 is printed first, matching screen coordinates.
        """
        food_marks = {
            FoodKind.NORMAL: 'N',
            FoodKind.BONUS: 'B',
            FoodKind.FREEZE: 'F',
            FoodKind.POISON: 'P',
        }
        board = [['.' for _ in range(self.grid_size)] for _ in range(self.grid_size)]

        def place(pos: Position, mark: str) -> None:
            x, y = pos
            if 0 <= x < self.grid_size and 0 <= y < self.grid_size:
                board[y][x] = mark

        for pos in self.obstacles:
            place(pos, '#')
        for item in self.food:
            place(item.position, food_marks[item.kind])
        for pos, kind, _ in self.events:
            place(pos, 'X' if kind == EventKind.TRAP else '+')
        for index, pos in enumerate(self.snake):
            place(pos, 'H' if index == 0 else 'o')

        return "\n".join(''.join(row) for row in board)
