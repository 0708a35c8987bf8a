"""
spawning.py

Random placement of food, obstacles and surprise events.

Spawns are uniform over the whole grid and are not checked against
occupied cells, so a new entity may land on the snake or on another
entity.
"""

import logging
import random
from typing import List, Optional, Set

from .config import EventKind, FoodKind, GameConfig, GameSettings, Position
from .state import Food, SurpriseEvent

class RandomPositionSource:
    """Produces grid coordinates uniformly at random"""
    def __init__(self, grid_size: int, rng: Optional[random.Random] = None):
        self.grid_size = grid_size
        self.rng = rng or random.Random()

    def __call__(self) -> Position:
        return (self.rng.randrange(self.grid_size),
                self.rng.randrange(self.grid_size))

class SpawnManager:
    """
    Decides what new food, obstacle and surprise-event entities to create
    and where, subject to the current settings.
    """
    def __init__(self, config: GameConfig, settings: GameSettings,
                 rng: Optional[random.Random] = None,
                 position_source: Optional[RandomPositionSource] = None):
        self.config = config
        self.settings = settings
        self.rng = rng or random.Random()
        self.position_source = position_source or RandomPositionSource(config.GRID_SIZE, self.rng)

    def generate_position(self) -> Position:
        """Uniform random cell over the full grid"""
        return self.position_source()

    def generate_food(self) -> Food:
        """New food item; always Normal when power-ups are disabled"""
        position = self.generate_position()
        if self.settings.power_ups:
            kind = self.rng.choice(self.config.FOOD_TABLE)
        else:
            kind = FoodKind.NORMAL
        return Food(position, kind)

    def generate_obstacles(self) -> Set[Position]:
        """
        Obstacle cells for a new run, empty when obstacles are disabled.
        Draws until ``count`` distinct cells are found.
        """
        if not self.settings.obstacles:
            return set()
        count = self.rng.randint(self.config.MIN_OBSTACLES, self.config.MAX_OBSTACLES)
        obstacles = set()
        while len(obstacles) < count:
            obstacles.add(self.generate_position())
        logging.info(f"Generated {len(obstacles)} obstacles.")
        return obstacles

    def maybe_spawn_surprise_event(self) -> Optional[SurpriseEvent]:
        """
        Roll for a surprise event. Called once per surprise-event period
        regardless of the power-up and obstacle settings.
        """
        if self.rng.random() >= self.config.SURPRISE_EVENT_CHANCE:
            return None
        if self.rng.random() < self.config.BONUS_EVENT_CHANCE:
            kind, duration = EventKind.BONUS_EVENT, self.config.BONUS_EVENT_DURATION
        else:
            kind, duration = EventKind.TRAP, self.config.TRAP_DURATION
        event = SurpriseEvent(self.generate_position(), kind, duration)
        logging.info(f"Spawned surprise event: {kind.name} at {event.position}")
        return event

    def replenish(self, food: List[Food], index: int) -> Food:
        """Replace the food item at ``index`` one-for-one"""
        replacement = self.generate_food()
        del food[index]
        food.append(replacement)
        return replacement
