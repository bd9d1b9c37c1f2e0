"""
Logical input intents.

Input devices (keyboard, touch buttons) never touch the simulation. They
publish INPUT_PRESSED / INPUT_RELEASED events carrying an ``Action``; the
``IntentLatch`` turns those into a per-tick ``InputState`` sample.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from forest_dash.core.events import Event, EventBus, EventType

logger = logging.getLogger(__name__)


class Action(Enum):
    MOVE_LEFT = "move-left"
    MOVE_RIGHT = "move-right"
    JUMP = "jump"


@dataclass(frozen=True)
class InputState:
    left: bool = False
    right: bool = False
    jump_pressed: bool = False  # true only on the tick the jump is pressed


class IntentLatch:
    """Held flags for movement plus a latched jump edge."""

    def __init__(self, bus: EventBus | None = None) -> None:
        self._held: dict[Action, bool] = {action: False for action in Action}
        self._jump_pressed_edge = False
        self._unsubscribers: list[Callable[[], None]] = []

        if bus is not None:
            self.attach(bus)

    def attach(self, bus: EventBus) -> None:
        self._unsubscribers.append(bus.subscribe(EventType.INPUT_PRESSED, self._on_pressed))
        self._unsubscribers.append(bus.subscribe(EventType.INPUT_RELEASED, self._on_released))

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def press(self, action: Action) -> None:
        if action is Action.JUMP and not self._held[Action.JUMP]:
            self._jump_pressed_edge = True
        self._held[action] = True

    def release(self, action: Action) -> None:
        self._held[action] = False

    def is_held(self, action: Action) -> bool:
        return self._held[action]

    def sample(self) -> InputState:
        # "Pressed this tick" semantics for jump.
        pressed = self._jump_pressed_edge
        self._jump_pressed_edge = False
        return InputState(
            left=self._held[Action.MOVE_LEFT],
            right=self._held[Action.MOVE_RIGHT],
            jump_pressed=pressed,
        )

    def clear(self) -> None:
        """Drop every intent, e.g. when play stops with a key still down."""
        for action in self._held:
            self._held[action] = False
        self._jump_pressed_edge = False

    def _on_pressed(self, event: Event) -> None:
        action = event.data.get("action")
        if isinstance(action, Action):
            self.press(action)

    def _on_released(self, event: Event) -> None:
        action = event.data.get("action")
        if isinstance(action, Action):
            self.release(action)


class CheatCodeEntry:
    """
    Collects keypad digits for the developer code.

    ``#`` submits the buffer, ``*`` clears it. This is an informal developer
    toggle, not an access control.
    """

    MAX_LENGTH = 8

    def __init__(self, submit: Callable[[str], bool], bus: EventBus | None = None) -> None:
        self._submit = submit
        self._buffer = ""
        self._unsubscribe: Callable[[], None] | None = None
        if bus is not None:
            self._unsubscribe = bus.subscribe(EventType.KEYPAD_INPUT, self._on_key)

    @property
    def buffer(self) -> str:
        return self._buffer

    def key(self, key: str) -> bool | None:
        """Feed one key. Returns the submit result on ``#``, else None."""
        if key == "*":
            self._buffer = ""
        elif key == "#":
            code, self._buffer = self._buffer, ""
            return self._submit(code)
        elif key.isdigit():
            self._buffer = (self._buffer + key)[-self.MAX_LENGTH:]
        return None

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_key(self, event: Event) -> None:
        self.key(str(event.data.get("key", "")))
