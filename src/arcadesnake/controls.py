"""
controls.py

Direction input validation and buffering.
"""

import logging
from typing import Tuple, Union

from .config import Direction
from .state import RunState

class InputController:
    """
    Buffers at most one direction change per tick. Illegal requests are
    dropped without raising; they are an ordinary part of play.
    """
    def request(self, state: RunState, new_direction: Union[Direction, Tuple[int, int]]) -> bool:
        """
        Buffer ``new_direction`` for the next tick.
        Returns True when accepted. Raises ValueError for a malformed vector.
        """
        if not isinstance(new_direction, Direction):
            new_direction = Direction.from_vector(new_direction)
        if state.game_over or state.paused:
            return False
        # Same-axis check also covers direct reversal
        if new_direction.shares_axis(state.direction):
            logging.debug(f"Rejected direction {new_direction.name} while moving {state.direction.name}")
            return False
        state.pending_direction = new_direction
        return True

    def consume(self, state: RunState) -> Direction:
        """Apply the buffered direction, if any, and return the one to move in"""
        if state.pending_direction is not None:
            state.direction = state.pending_direction
            state.pending_direction = None
        return state.direction
