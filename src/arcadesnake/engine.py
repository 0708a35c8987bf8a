"""
engine.py

The simulation engine: owns the live RunState and applies every change to
it. The engine never starts timers. Hosts either call the trigger
operations directly from a single thread, or post triggers onto the
engine's queue from anywhere and drain it on the owning thread.
"""

import logging
import random
import threading
from collections import deque
from contextlib import contextmanager
from datetime import datetime
from enum import Enum, auto
from typing import Any, Deque, FrozenSet, List, Optional, Tuple, Union

from .collision import CollisionResolver
from .config import (CollisionKind, Direction, FoodKind, GameConfig,
                     GameSettings, Position, RunStatus)
from .controls import InputController
from .effects import EffectClock
from .errors import ConcurrentMutationError, IllegalTickError, SimulationError
from .signals import ScoreRecord, Signal, SignalBus
from .spawning import SpawnManager
from .state import Food, GameSnapshot, RunState, SurpriseEvent

class Trigger(Enum):
    """Periodic host timers that drive the engine"""
    MOVE = auto()
    EFFECT_DECAY = auto()
    SURPRISE_EVENT = auto()

class SimulationEngine:
    """
    Orchestrates input, collision, consumption, spawning and effect timing
    for one snake on a square grid.
    """
    def __init__(self, config: Optional[GameConfig] = None,
                 settings: Optional[GameSettings] = None,
                 bus: Optional[SignalBus] = None,
                 rng: Optional[random.Random] = None,
                 spawner: Optional[SpawnManager] = None,
                 player_name: Optional[str] = None):
        self.config = config or GameConfig()
        self.settings = settings or GameSettings()
        self.bus = bus or SignalBus()
        self.spawner = spawner or SpawnManager(self.config, self.settings, rng)
        self.collisions = CollisionResolver(self.config.GRID_SIZE)
        self.clock = EffectClock()
        self.controls = InputController()
        self.player_name = player_name or self.config.DEFAULT_PLAYER_NAME
        self.logger = logging.getLogger(__name__)

        # Run generation; triggers stamped with an older one are stale
        self.generation = 0
        self._pending: Deque[Tuple[int, Trigger]] = deque()
        self._outbox: List[Tuple[Signal, Any]] = []
        self._owner = threading.get_ident()
        self._mutating = False

        self.state = self._new_run()

    ##########################
    # MUTATION DISCIPLINE
    ##########################

    @contextmanager
    def _mutation(self):
        """
        Exclusive access to the run state. Signals raised inside are
        delivered once the mutation has finished.
        """
        if threading.get_ident() != self._owner:
            raise ConcurrentMutationError("Run state mutated from a non-owner thread; use post()")
        if self._mutating:
            raise ConcurrentMutationError("Run state mutated while another mutation is in progress")
        self._mutating = True
        try:
            yield self.state
        except BaseException:
            self._outbox.clear()
            raise
        finally:
            self._mutating = False
        self._flush()

    def _signal(self, signal: Signal, payload: Any = None) -> None:
        self._outbox.append((signal, payload))

    def _flush(self) -> None:
        outbox, self._outbox = self._outbox, []
        for signal, payload in outbox:
            self.bus.emit(signal, payload)

    def _cancel_pending(self) -> None:
        """Drop queued triggers and invalidate any still in flight"""
        self._pending.clear()
        self.generation += 1

    ##########################
    # RUN LIFECYCLE
    ##########################

    def _new_run(self) -> RunState:
        state = RunState.fresh(self.config)
        state.food = [self.spawner.generate_food()]
        state.obstacles = self.spawner.generate_obstacles()
        return state

    def start_game(self) -> None:
        """Replace the run state with a fresh run"""
        with self._mutation():
            self._cancel_pending()
            self.state = self._new_run()
            self._signal(Signal.NEW_GAME)
        self.logger.info(f"New game started (obstacles={len(self.state.obstacles)}, "
                         f"power-ups={'ON' if self.settings.power_ups else 'OFF'}).")

    def reset_game(self) -> None:
        """Alias for start_game()"""
        self.start_game()

    def pause_game(self) -> bool:
        """
        Toggle between running and paused. Returns the new paused flag.
        Has no effect once the run is over.
        """
        with self._mutation() as state:
            if state.game_over:
                return state.paused
            state.paused = not state.paused
            self._signal(Signal.PAUSE if state.paused else Signal.RESUME, state.paused)
        self.logger.info(f"Game {'paused' if self.state.paused else 'resumed'}.")
        return self.state.paused

    def toggle_setting(self, name: str) -> bool:
        """Flip one setting and return its new value. Raises ValueError for unknown names."""
        with self._mutation():
            field_name = GameSettings.field_name(name)
            value = self.settings.toggle(field_name)
            self._signal(Signal.BUTTON)
            if field_name == "music":
                self._signal(Signal.MUSIC, value)
        self.logger.info(f"Setting {field_name} toggled to {'ON' if value else 'OFF'}.")
        return value

    def request_direction(self, vector: Union[Direction, Tuple[int, int]]) -> bool:
        """Buffer a direction change for the next tick. Returns True when accepted."""
        with self._mutation() as state:
            return self.controls.request(state, vector)

    ##########################
    # TICK TRANSITION
    ##########################

    def tick(self) -> None:
        """
        Advance the snake one cell. Does nothing while paused and raises
        IllegalTickError once the run is over.
        """
        with self._mutation() as state:
            if state.game_over:
                raise IllegalTickError("tick() called after game over")
            if state.paused:
                return
            self._advance(state)

    def _advance(self, state: RunState) -> None:
        direction = self.controls.consume(state)
        head_x, head_y = state.head
        head = (head_x + direction.dx, head_y + direction.dy)

        outcome = self.collisions.classify(head, state.snake, state.obstacles,
                                           state.trap_positions())
        if outcome != CollisionKind.NONE:
            self._end_run(state, outcome, head)
            return

        state.snake.appendleft(head)

        # Food is resolved before surprise events
        index = state.food_at(head)
        if index is None:
            state.snake.pop()
        else:
            self._consume_food(state, state.food[index])
            self.spawner.replenish(state.food, index)
            state.interval = max(self.config.MIN_INTERVAL,
                                 state.interval - self.config.INTERVAL_STEP)

        bonus_index = state.bonus_event_at(head)
        if bonus_index is not None:
            state.score += self.config.BONUS_EVENT_SCORE
            del state.events[bonus_index]
            self._signal(Signal.BONUS)
            self.logger.info(f"Bonus event collected at {head}! New score: {state.score}")

        state.ticks += 1
        self._check_invariants(state)

    def _consume_food(self, state: RunState, food: Food) -> None:
        """Apply one food item's effect. The head is already pushed; growth keeps the tail."""
        if food.kind == FoodKind.NORMAL:
            state.score += 1
            self._signal(Signal.EAT)
        elif food.kind == FoodKind.BONUS:
            state.score += 3
            state.speed_boost_remaining = self.config.SPEED_BOOST_DURATION
            self._signal(Signal.SPEED_BOOST)
        elif food.kind == FoodKind.FREEZE:
            state.freeze_remaining = self.config.FREEZE_DURATION
            self._signal(Signal.FREEZE)
        elif food.kind == FoodKind.POISON:
            state.score = max(0, state.score - 1)
            state.snake.pop()
            if len(state.snake) > 1:
                state.snake.pop()
            self._signal(Signal.POISON)
        self.logger.debug(f"Ate {food.kind.name} food at {food.position}. "
                          f"Score: {state.score}, length: {len(state.snake)}")

    def _end_run(self, state: RunState, outcome: CollisionKind, head: Position) -> None:
        state.game_over = True
        state.pending_direction = None
        if outcome == CollisionKind.TRAP:
            state.events = [e for e in state.events if not (e.is_trap and e.position == head)]
        self._cancel_pending()
        self._signal(Signal.GAME_OVER, outcome)
        if state.score > 0:
            self._signal(Signal.SCORE_RECORD,
                         ScoreRecord(self.player_name, state.score, datetime.now()))
        self.logger.info(f"Game Over! Cause: {outcome.name}, score: {state.score}")

    def _check_invariants(self, state: RunState) -> None:
        problems = state.invariant_violations(self.config)
        if problems:
            raise SimulationError("Run state invariants broken: " + "; ".join(problems))

    ##########################
    # EFFECT TIMING
    ##########################

    def decay_effects(self) -> None:
        """Effect-decay tick: boost and freeze counters keep running while paused"""
        with self._mutation() as state:
            self.clock.decay_effects(state)

    def surprise_event_tick(self) -> Optional[SurpriseEvent]:
        """
        Surprise-event tick: maybe spawn one event, then age all events.
        Suspended while paused or over. Returns the spawned event, if any.
        """
        with self._mutation() as state:
            if state.paused or state.game_over:
                return None
            event = self.spawner.maybe_spawn_surprise_event()
            if event is not None:
                state.events.append(event)
            self.clock.advance_events(state)
            return event

    def effective_interval(self) -> int:
        """
        Delay until the next move in milliseconds. A speed boost halves the
        base interval and takes precedence over a freeze, which doubles it.
        """
        state = self.state
        if state.speed_boost_remaining > 0:
            return state.interval // 2
        if state.freeze_remaining > 0:
            return state.interval * 2
        return state.interval

    ##########################
    # TRIGGER QUEUE
    ##########################

    def post(self, trigger: Trigger, generation: Optional[int] = None) -> None:
        """
        Queue a trigger. Safe to call from timer threads.
        ``generation`` is the run the timer fired for; defaults to the current one.
        """
        if generation is None:
            generation = self.generation
        self._pending.append((generation, trigger))

    def process_pending(self) -> int:
        """
        Apply queued triggers in order on the owning thread.
        Returns how many were applied; stale ones are skipped.
        """
        applied = 0
        while self._pending:
            generation, trigger = self._pending.popleft()
            if generation != self.generation:
                continue
            self.dispatch(trigger)
            applied += 1
        return applied

    def dispatch(self, trigger: Trigger) -> None:
        if trigger == Trigger.MOVE:
            if not self.state.game_over:
                self.tick()
        elif trigger == Trigger.EFFECT_DECAY:
            self.decay_effects()
        elif trigger == Trigger.SURPRISE_EVENT:
            self.surprise_event_tick()

    ##########################
    # READ-ONLY ACCESSORS
    ##########################

    @property
    def status(self) -> RunStatus:
        if self.state.game_over:
            return RunStatus.GAME_OVER
        if self.state.paused:
            return RunStatus.PAUSED
        return RunStatus.RUNNING

    @property
    def snake(self) -> Tuple[Position, ...]:
        return tuple(self.state.snake)

    @property
    def food(self) -> Tuple[Food, ...]:
        return tuple(self.state.food)

    @property
    def obstacles(self) -> FrozenSet[Position]:
        return frozenset(self.state.obstacles)

    @property
    def events(self) -> Tuple[SurpriseEvent, ...]:
        return tuple(SurpriseEvent(e.position, e.kind, e.duration) for e in self.state.events)

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def game_over(self) -> bool:
        return self.state.game_over

    @property
    def paused(self) -> bool:
        return self.state.paused

    @property
    def direction(self) -> Direction:
        return self.state.direction

    def snapshot(self) -> GameSnapshot:
        """Everything a renderer needs for one frame"""
        return GameSnapshot.capture(self.state, self.settings, self.config,
                                    self.effective_interval())
