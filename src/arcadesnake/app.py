"""
app.py

pygame host for the simulation engine. Three pygame timers post MOVE,
EFFECT_DECAY and SURPRISE_EVENT triggers onto the engine queue, which is
drained once per frame on the main thread. Rendering is deliberately plain:
one filled rectangle per occupied cell.
"""

import logging
import sys
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

import pygame

from .config import Direction, EventKind, FoodKind, GameConfig, RunStatus
from .engine import SimulationEngine, Trigger
from .highscores import ScoreManager, get_log_path
from .signals import ScoreRecord, Signal, SignalBus
from .state import GameSnapshot

MOVE_EVENT = pygame.USEREVENT + 1
EFFECT_EVENT = pygame.USEREVENT + 2
SURPRISE_EVENT = pygame.USEREVENT + 3

TIMER_TRIGGERS: Dict[int, Trigger] = {
    MOVE_EVENT: Trigger.MOVE,
    EFFECT_EVENT: Trigger.EFFECT_DECAY,
    SURPRISE_EVENT: Trigger.SURPRISE_EVENT,
}

DIRECTION_KEYS: Dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
}

SETTING_KEYS: Dict[int, str] = {
    pygame.K_o: "obstacles",
    pygame.K_u: "power_ups",
    pygame.K_m: "music",
    pygame.K_n: "sound",
    pygame.K_t: "dark_mode",
    pygame.K_c: "classic_mode",
}

HUD_HEIGHT = 32

##########################
# TIMERS
##########################

class TimerWiring:
    """
    Keeps the three pygame timers in step with the engine: all are
    cancelled when a run ends or restarts, movement and surprise events
    stop while paused, and the movement period follows the effective
    interval.
    """
    def __init__(self, engine: SimulationEngine):
        self.engine = engine
        self.config = engine.config
        self.move_period = 0

    def attach(self, bus: SignalBus) -> None:
        bus.subscribe(Signal.NEW_GAME, self._on_new_game)
        bus.subscribe(Signal.GAME_OVER, self._on_game_over)
        bus.subscribe(Signal.PAUSE, self._on_pause)
        bus.subscribe(Signal.RESUME, self._on_resume)

    def _set(self, event_type: int, period: int) -> None:
        pygame.time.set_timer(event_type, period)
        if period == 0:
            # Drop already-fired events so they cannot reach the next run
            pygame.event.clear(event_type)

    def cancel(self) -> None:
        for event_type in TIMER_TRIGGERS:
            self._set(event_type, 0)
        self.move_period = 0

    def arm(self) -> None:
        self.move_period = self.engine.effective_interval()
        self._set(MOVE_EVENT, self.move_period)
        self._set(EFFECT_EVENT, self.config.EFFECT_DECAY_PERIOD)
        self._set(SURPRISE_EVENT, self.config.SURPRISE_EVENT_PERIOD)

    def sync_move(self) -> None:
        """Re-arm the movement timer when the effective interval has changed"""
        if self.engine.status != RunStatus.RUNNING:
            return
        period = self.engine.effective_interval()
        if period != self.move_period:
            self._set(MOVE_EVENT, period)
            self.move_period = period

    def _on_new_game(self, signal: Signal, payload: Any) -> None:
        self.cancel()
        self.arm()

    def _on_game_over(self, signal: Signal, payload: Any) -> None:
        self.cancel()

    def _on_pause(self, signal: Signal, payload: Any) -> None:
        self._set(MOVE_EVENT, 0)
        self._set(SURPRISE_EVENT, 0)
        self.move_period = 0

    def _on_resume(self, signal: Signal, payload: Any) -> None:
        self.move_period = self.engine.effective_interval()
        self._set(MOVE_EVENT, self.move_period)
        self._set(SURPRISE_EVENT, self.config.SURPRISE_EVENT_PERIOD)

##########################
# RENDERING
##########################

class Renderer:
    """Draws a GameSnapshot as coloured cells plus a one-line HUD"""
    LIGHT = {
        "background": (240, 240, 235),
        "text": (20, 20, 20),
    }
    DARK = {
        "background": (18, 18, 24),
        "text": (230, 230, 230),
    }
    FOOD_COLORS = {
        FoodKind.NORMAL: (200, 0, 0),
        FoodKind.BONUS: (255, 165, 0),
        FoodKind.FREEZE: (0, 200, 200),
        FoodKind.POISON: (200, 0, 200),
    }
    EVENT_COLORS = {
        EventKind.BONUS_EVENT: (200, 200, 0),
        EventKind.TRAP: (90, 0, 0),
    }
    OBSTACLE_COLOR = (100, 100, 100)
    HEAD_COLOR = (0, 120, 0)
    BODY_COLOR = (0, 200, 0)
    CLASSIC_COLOR = (40, 60, 40)

    def __init__(self, config: GameConfig):
        self.config = config
        self._font_cache: Dict[int, pygame.font.Font] = {}

    def get_font(self, size: int) -> pygame.font.Font:
        """Get or create a font of the specified size"""
        if size not in self._font_cache:
            self._font_cache[size] = pygame.font.Font(None, size)
        return self._font_cache[size]

    def cell_rect(self, position: Tuple[int, int]) -> pygame.Rect:
        size = self.config.CELL_SIZE
        return pygame.Rect(position[0] * size, HUD_HEIGHT + position[1] * size, size, size)

    def draw(self, surface: pygame.Surface, snapshot: GameSnapshot,
             prompt: Optional[str] = None) -> None:
        """Draw one frame; ``prompt`` is the name typed so far after a scoring run"""
        palette = self.DARK if snapshot.settings.dark_mode else self.LIGHT
        classic = snapshot.settings.classic_mode
        surface.fill(palette["background"])

        for position in snapshot.obstacles:
            pygame.draw.rect(surface, self.OBSTACLE_COLOR, self.cell_rect(position))
        for item in snapshot.food:
            color = self.CLASSIC_COLOR if classic else self.FOOD_COLORS[item.kind]
            pygame.draw.rect(surface, color, self.cell_rect(item.position).inflate(-4, -4))
        for position, kind, _ in snapshot.events:
            pygame.draw.rect(surface, self.EVENT_COLORS[kind], self.cell_rect(position).inflate(-2, -2))
        for index, position in enumerate(snapshot.snake):
            if classic:
                color = self.CLASSIC_COLOR
            else:
                color = self.HEAD_COLOR if index == 0 else self.BODY_COLOR
            pygame.draw.rect(surface, color, self.cell_rect(position).inflate(-1, -1))

        self.draw_text(surface, f"Score: {snapshot.score}", 8, 8, palette["text"])
        if prompt is not None:
            self.draw_text(surface, f"Name: {prompt}_ [ENTER]", 160, 8, palette["text"])
        elif snapshot.game_over:
            self.draw_text(surface, "GAME OVER - [R] Restart", 160, 8, palette["text"])
        elif snapshot.paused:
            self.draw_text(surface, "PAUSED - [P] Resume", 160, 8, palette["text"])

    def draw_text(self, surface: pygame.Surface, text: str, x: int, y: int,
                  color: Tuple[int, int, int], size: int = 24) -> None:
        rendered = self.get_font(size).render(text, True, color)
        surface.blit(rendered, (x, y))

##########################
# MAIN GAME
##########################

class App:
    MAX_NAME_LENGTH = 15

    def __init__(self, config: Optional[GameConfig] = None):
        """Initialize pygame, the engine and its collaborators"""
        pygame.init()
        self.config = config or GameConfig()
        self.engine = SimulationEngine(self.config)
        self.scores = ScoreManager(self.config)
        self.timers = TimerWiring(self.engine)
        self.timers.attach(self.engine.bus)
        self.engine.bus.subscribe(Signal.SCORE_RECORD, self._on_score_record)
        self.engine.bus.subscribe_all(self._on_signal)
        self.renderer = Renderer(self.config)

        # Name entry for the run that just ended
        self.pending_record: Optional[ScoreRecord] = None
        self.player_name = ""

        side = self.config.GRID_SIZE * self.config.CELL_SIZE
        self.screen = pygame.display.set_mode((side, side + HUD_HEIGHT))
        pygame.display.set_caption("Arcade Snake")
        self.clock = pygame.time.Clock()

    def _on_signal(self, signal: Signal, payload: Any) -> None:
        # Audio collaborator hook; sounds are only logged here
        if signal == Signal.MUSIC:
            logging.info(f"Music {'started' if payload else 'stopped'}.")
        elif self.engine.settings.sound:
            logging.debug(f"Sound: {signal.value}")

    def _on_score_record(self, signal: Signal, record: ScoreRecord) -> None:
        """Hold the record until the player has typed a name"""
        self.pending_record = record
        self.player_name = ""

    def submit_score(self) -> None:
        """Store the pending record under the typed name"""
        if self.pending_record is None:
            return
        final_name = self.player_name.strip() or self.config.DEFAULT_PLAYER_NAME
        self.scores.add_record(replace(self.pending_record, name=final_name))
        self.pending_record = None
        self.player_name = ""

    def handle_name_key(self, key: int, unicode: str) -> None:
        if key == pygame.K_RETURN:
            self.submit_score()
            self.engine.reset_game()
        elif key == pygame.K_BACKSPACE:
            self.player_name = self.player_name[:-1]
        elif len(self.player_name) < self.MAX_NAME_LENGTH and unicode and unicode.isprintable():
            self.player_name += unicode

    def handle_key(self, key: int, unicode: str = "") -> None:
        if self.pending_record is not None:
            self.handle_name_key(key, unicode)
        elif key in DIRECTION_KEYS:
            self.engine.request_direction(DIRECTION_KEYS[key])
        elif key in (pygame.K_SPACE, pygame.K_p):
            self.engine.pause_game()
        elif key == pygame.K_r:
            self.engine.reset_game()
        elif key in SETTING_KEYS:
            self.engine.toggle_setting(SETTING_KEYS[key])

    def pump_events(self) -> bool:
        """
        Handle one frame's worth of pygame events. Returns False on quit.
        Timer events in the batch fired before any reset handled in the same
        batch, so they carry the generation read when the batch was fetched.
        """
        events = pygame.event.get()
        generation = self.engine.generation
        for event in events:
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
            if event.type in TIMER_TRIGGERS:
                self.engine.post(TIMER_TRIGGERS[event.type], generation)
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key, getattr(event, "unicode", ""))
        self.engine.process_pending()
        return True

    def run(self) -> None:
        """Main loop: pump events, drain the trigger queue, draw"""
        self.engine.start_game()
        while True:
            self.clock.tick(self.config.FPS)
            if not self.pump_events():
                return
            self.timers.sync_move()
            prompt = self.player_name if self.pending_record is not None else None
            self.renderer.draw(self.screen, self.engine.snapshot(), prompt)
            pygame.display.flip()

    def cleanup(self) -> None:
        """Clean up resources before exit"""
        self.submit_score()
        self.timers.cancel()
        pygame.quit()
        logging.info("----- Game cleanup completed -----")

##########################
# MAIN ENTRY POINT
##########################

def main():
    """
    Main entry point for the game.
    Sets up file logging, then creates and runs the app.
    """
    logging.basicConfig(
        filename=get_log_path("snake_game.log"),
        level=logging.DEBUG,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    logging.info("----- Starting Snake Game -----")
    app = None
    try:
        app = App()
        app.run()
    except Exception as e:
        logging.error(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)
    finally:
        if app is not None:
            app.cleanup()
        else:
            pygame.quit()

if __name__ == "__main__":
    main()
