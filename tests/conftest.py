"""
Shared fixtures for the simulation tests.
"""

import random
from collections import deque

import pytest

from arcadesnake import Direction, Food, FoodKind, GameConfig, GameSettings, SimulationEngine


class Recorder:
    """Collects every signal emitted on a bus."""

    def __init__(self):
        self.received = []

    def __call__(self, signal, payload):
        self.received.append((signal, payload))

    @property
    def signals(self):
        return [signal for signal, _ in self.received]

    def payloads(self, signal):
        return [payload for s, payload in self.received if s == signal]


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def settings():
    return GameSettings()


@pytest.fixture
def engine(config, settings):
    return SimulationEngine(config=config, settings=settings, rng=random.Random(1234))


@pytest.fixture
def recorder(engine):
    rec = Recorder()
    engine.bus.subscribe_all(rec)
    return rec


def place(engine, snake, direction=Direction.RIGHT, food=None):
    """Put the live run into a known layout."""
    engine.state.snake = deque(snake)
    engine.state.direction = direction
    engine.state.pending_direction = None
    if food is not None:
        engine.state.food = list(food)


def food_ahead(engine, kind=FoodKind.NORMAL):
    """A food item on the cell the snake will enter next."""
    x, y = engine.state.head
    d = engine.state.direction
    return Food((x + d.dx, y + d.dy), kind)
