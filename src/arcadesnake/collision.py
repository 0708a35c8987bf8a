"""
collision.py

Classifies a candidate head position against the current world.
"""

from typing import Collection, Iterable

from .config import CollisionKind, Position

class CollisionResolver:
    """
    Pure classification of a move. The whole body counts as solid, tail
    included, so the snake can never move into the cell its tail is about
    to vacate.
    """
    def __init__(self, grid_size: int):
        self.grid_size = grid_size

    def classify(self, head: Position, body: Iterable[Position],
                 obstacles: Collection[Position],
                 traps: Collection[Position]) -> CollisionKind:
        """Returns the first matching collision, checked wall, self, obstacle, trap"""
        x, y = head
        if x < 0 or x >= self.grid_size or y < 0 or y >= self.grid_size:
            return CollisionKind.WALL
        if head in body:
            return CollisionKind.SELF
        if head in obstacles:
            return CollisionKind.OBSTACLE
        if head in traps:
            return CollisionKind.TRAP
        return CollisionKind.NONE
