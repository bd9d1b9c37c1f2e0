"""
Desktop window using pygame.

Maps the keyboard to logical input events, draws the latest snapshot and
overlays the HUD. The simulation itself is ticked by the game's frame
scheduler on the same asyncio loop, never by this window.
"""

import pygame
import asyncio
import logging
from dataclasses import dataclass

from ..config.settings import Settings, get_settings
from ..core.events import EventBus, input_event, keypad_event
from ..core.state import GameState
from ..game.runner import RunnerGame
from ..game.session import LossReason, Snapshot
from ..graphics.renderer import SnapshotRenderer
from ..input.intents import Action, CheatCodeEntry

logger = logging.getLogger(__name__)


LOSS_MESSAGES: dict[LossReason, str] = {
    LossReason.NORMAL: "CRASHED INTO A BED",
    LossReason.GIANT: "FLATTENED BY A GIANT",
    LossReason.MINIBOSS: "THE MINIBOSSES GOT YOU",
    LossReason.BRANCH: "A BRANCH FELL ON YOUR HEAD",
}

KEY_ACTIONS: dict[int, Action] = {
    pygame.K_LEFT: Action.MOVE_LEFT,
    pygame.K_a: Action.MOVE_LEFT,
    pygame.K_RIGHT: Action.MOVE_RIGHT,
    pygame.K_d: Action.MOVE_RIGHT,
    pygame.K_SPACE: Action.JUMP,
    pygame.K_UP: Action.JUMP,
    pygame.K_w: Action.JUMP,
}


@dataclass
class WindowColors:
    text: tuple[int, int, int] = (240, 240, 245)
    accent: tuple[int, int, int] = (255, 215, 0)
    danger: tuple[int, int, int] = (255, 60, 60)
    power: tuple[int, int, int] = (90, 220, 110)
    developer: tuple[int, int, int] = (255, 120, 255)


class SimulatorWindow:
    """
    Game window.

    Keyboard Mapping:
        LEFT/RIGHT, A/D: Move
        SPACE, UP, W: Jump
        RETURN: Start / restart / next level / dismiss level intro
        R: Restart from level 1
        0-9: Developer code digits
        *: Clear code, #: Submit code
        F: Toggle fullscreen
        S: Screenshot
        ESC/Q: Exit
    """

    def __init__(
        self,
        game: RunnerGame | None = None,
        settings: Settings | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.settings = settings or (game.settings if game else get_settings())
        self.event_bus = event_bus or (game.bus if game else EventBus())
        self.game = game or RunnerGame(self.settings, bus=self.event_bus)
        self.renderer = SnapshotRenderer(self.settings)
        self.cheat_entry = CheatCodeEntry(self.game.enable_developer_mode, self.event_bus)
        self.colors = WindowColors()

        self._config = self.settings.simulator
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._big_font: pygame.font.Font | None = None
        self._running = False
        self._frame_count = 0

        logger.info("SimulatorWindow created")

    @property
    def size(self) -> tuple[int, int]:
        scale = self._config.scale
        return self.settings.playfield.width * scale, self.settings.playfield.height * scale

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self._config.title)

        flags = pygame.DOUBLEBUF
        if self._config.fullscreen:
            flags |= pygame.FULLSCREEN | pygame.SCALED

        self._screen = pygame.display.set_mode(self.size, flags)
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont(None, 24 * self._config.scale)
        self._big_font = pygame.font.SysFont(None, 56 * self._config.scale)

        logger.info(f"Pygame initialized: {self.size[0]}x{self.size[1]}")

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)

            elif event.type == pygame.KEYUP:
                self._handle_keyup(event)

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        """Handle key press."""
        key = event.key

        if key in (pygame.K_ESCAPE, pygame.K_q):
            self._running = False
        elif key == pygame.K_f:
            self._toggle_fullscreen()
        elif key == pygame.K_s:
            self._capture_screenshot()
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self._confirm()
        elif key == pygame.K_r:
            # R for Restart, from any screen
            self.game.restart()

        elif key in KEY_ACTIONS:
            self.event_bus.emit(input_event(KEY_ACTIONS[key], pressed=True, source="keyboard"))

        # Developer code keypad (# and * are usually shifted digits)
        elif event.unicode in ("*", "#"):
            self.event_bus.queue_event(keypad_event(event.unicode))
        elif key in range(pygame.K_0, pygame.K_9 + 1):
            self.event_bus.queue_event(keypad_event(chr(key)))
        elif key in range(pygame.K_KP1, pygame.K_KP9 + 1):
            self.event_bus.queue_event(keypad_event(str(key - pygame.K_KP1 + 1)))
        elif key == pygame.K_KP0:
            self.event_bus.queue_event(keypad_event("0"))
        elif key == pygame.K_KP_MULTIPLY:
            self.event_bus.queue_event(keypad_event("*"))

    def _handle_keyup(self, event: pygame.event.Event) -> None:
        """Handle key release."""
        action = KEY_ACTIONS.get(event.key)
        if action is not None:
            self.event_bus.emit(input_event(action, pressed=False, source="keyboard"))

    def _confirm(self) -> None:
        """RETURN does whatever the current screen offers."""
        state = self.game.state

        if state is GameState.PAUSED:
            self.game.dismiss_intro()
        elif state is GameState.WON and self.game.snapshot.level < self.settings.last_level:
            # Ignored until the next-level delay has run out
            if self.game.can_advance_level():
                self.game.advance_level()
        elif state is not GameState.PLAYING:
            self.game.start()

    def _render(self) -> None:
        """Draw the latest snapshot and the HUD."""
        if not self._screen:
            return

        snapshot = self.game.snapshot
        buffer = self.renderer.render(snapshot)
        surface = pygame.surfarray.make_surface(buffer.swapaxes(0, 1))
        if self._config.scale != 1:
            surface = pygame.transform.scale(surface, self.size)
        self._screen.blit(surface, (0, 0))

        self._render_hud(snapshot)
        self._render_overlay(snapshot)

        pygame.display.flip()

    def _render_hud(self, snapshot: Snapshot) -> None:
        if not self._font:
            return

        s = self._config.scale
        lines = [
            (f"Score: {snapshot.score}/{snapshot.win_score}", self.colors.text),
            (f"Best: {snapshot.high_score}", self.colors.text),
            (f"Level {snapshot.level}", self.colors.text),
        ]
        if snapshot.developer_mode:
            lines.append((f"DEV x{self.settings.scoring.developer_multiplier}", self.colors.developer))

        y = 10 * s
        for text, color in lines:
            self._screen.blit(self._font.render(text, True, color), (10 * s, y))
            y += 22 * s

        if snapshot.power_up_active:
            self._blit_centered("FOREST POWER!", self._font, self.colors.power, 0.25)
        if snapshot.warning_active:
            self._blit_centered("THEY ARE COMING!", self._big_font, self.colors.danger, 0.2)

    def _render_overlay(self, snapshot: Snapshot) -> None:
        if not self._big_font:
            return

        if snapshot.state is GameState.MENU:
            self._blit_centered("FOREST DASH", self._big_font, self.colors.accent, 0.4)
            self._blit_centered("Press RETURN to run", self._font, self.colors.text, 0.55)
            if self.cheat_entry.buffer:
                self._blit_centered("*" * len(self.cheat_entry.buffer), self._font,
                                    self.colors.developer, 0.65)

        elif snapshot.state is GameState.LOST:
            message = LOSS_MESSAGES.get(snapshot.loss_reason, "GAME OVER")
            self._blit_centered(message, self._big_font, self.colors.danger, 0.4)
            self._blit_centered(f"Score: {snapshot.score}   RETURN to retry", self._font,
                                self.colors.text, 0.55)

        elif snapshot.state is GameState.WON:
            self._blit_centered("YOU MADE IT!", self._big_font, self.colors.accent, 0.4)
            # The snapshot flag is stale while the delay runs out; ask the game
            if self.game.can_advance_level():
                hint = "RETURN for the next level"
            elif snapshot.level < self.settings.last_level:
                hint = "Next level unlocking...   R to start over"
            else:
                hint = "RETURN to play again"
            self._blit_centered(hint, self._font, self.colors.text, 0.55)

        elif snapshot.state is GameState.PAUSED:
            self._blit_centered(f"LEVEL {snapshot.level}", self._big_font, self.colors.accent, 0.35)
            self._blit_centered("The shadows thicken. Jump twice to survive.", self._font,
                                self.colors.text, 0.5)
            self._blit_centered("Press RETURN", self._font, self.colors.text, 0.6)

    def _blit_centered(self, text: str, font: pygame.font.Font, color, y_frac: float) -> None:
        surface = font.render(text, True, color)
        w, h = self.size
        self._screen.blit(surface, ((w - surface.get_width()) // 2, int(h * y_frac)))

    def _capture_screenshot(self) -> None:
        """Capture and save a screenshot."""
        if self._screen:
            filename = f"screenshot_{self._frame_count}.png"
            pygame.image.save(self._screen, filename)
            logger.info(f"Screenshot saved: {filename}")

    def _toggle_fullscreen(self) -> None:
        """Toggle fullscreen mode."""
        self._config.fullscreen = not self._config.fullscreen
        pygame.display.toggle_fullscreen()
        logger.info(f"Fullscreen: {self._config.fullscreen}")

    async def run(self) -> None:
        """Main window loop."""
        self._init_pygame()
        self._running = True

        logger.info("Simulator started")

        while self._running:
            self._handle_events()

            # Keypad input goes through the queue
            await self.event_bus.process_queue()

            self._render()

            if self._clock:
                self._clock.tick(self._config.fps)

            self._frame_count += 1

            # Yield so the frame scheduler's callbacks can run
            await asyncio.sleep(0)

        self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        self.game.scheduler.stop()
        self.cheat_entry.detach()
        pygame.quit()
        logger.info("Simulator stopped")

    def stop(self) -> None:
        """Stop the window loop."""
        self._running = False
