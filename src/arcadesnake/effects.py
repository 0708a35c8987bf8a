"""
effects.py

Timed-effect bookkeeping: the speed boost and freeze counters, and the
lifetimes of surprise events. The two run on separate cadences, neither
tied to the movement tick.
"""

import logging
from typing import List

from .state import RunState, SurpriseEvent

class EffectClock:
    """Advances effect counters and surprise-event durations"""

    def decay_effects(self, state: RunState) -> None:
        """One effect-decay tick: counters drop by one, never below zero"""
        if state.speed_boost_remaining > 0:
            state.speed_boost_remaining -= 1
            if state.speed_boost_remaining == 0:
                logging.info("Speed boost expired.")
        if state.freeze_remaining > 0:
            state.freeze_remaining -= 1
            if state.freeze_remaining == 0:
                logging.info("Freeze expired.")

    def advance_events(self, state: RunState) -> List[SurpriseEvent]:
        """One surprise-event tick. Returns the events that expired."""
        expired = []
        remaining = []
        for event in state.events:
            event.duration -= 1
            if event.duration > 0:
                remaining.append(event)
            else:
                expired.append(event)
                logging.info(f"Surprise event {event.kind.name} at {event.position} expired.")
        state.events = remaining
        return expired
