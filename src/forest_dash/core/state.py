"""
State machine for the Forest Dash game flow.

States:
    MENU: Start screen, nothing is simulated
    PLAYING: The frame scheduler drives the simulation
    WON: Level win threshold reached
    LOST: Player hit a lethal obstacle
    PAUSED: Level intro interstitial before resuming play
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Callable, Any
import logging

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Game states."""
    MENU = auto()
    PLAYING = auto()
    WON = auto()
    LOST = auto()
    PAUSED = auto()


@dataclass
class StateContext:
    """Context data attached to the latest transition."""
    level: int = 1
    loss_reason: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


StateListener = Callable[[GameState, GameState, StateContext], None]


class StateMachine:
    """
    Manages game state and transitions.

    Transitions are synchronous and total: a request that is not wired
    is refused with a warning and leaves the state untouched.
    """

    VALID_TRANSITIONS: list[tuple[GameState, GameState]] = [
        # Start / restart (restart is allowed from anywhere)
        (GameState.MENU, GameState.PLAYING),
        (GameState.PLAYING, GameState.PLAYING),
        (GameState.WON, GameState.PLAYING),
        (GameState.LOST, GameState.PLAYING),
        (GameState.PAUSED, GameState.PLAYING),  # Also: intro dismissed

        # Outcomes
        (GameState.PLAYING, GameState.WON),
        (GameState.PLAYING, GameState.LOST),

        # Next level intro
        (GameState.WON, GameState.PAUSED),
    ]

    def __init__(self, initial_state: GameState = GameState.MENU) -> None:
        self._state = initial_state
        self._context = StateContext()
        self._listeners: list[StateListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.info(f"StateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> GameState:
        """Get current state."""
        return self._state

    @property
    def context(self) -> StateContext:
        """Get current context."""
        return self._context

    def can_transition(self, to_state: GameState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: GameState, **context_updates: Any) -> bool:
        """
        Attempt to transition to a new state.

        Args:
            to_state: Target state
            **context_updates: Updates to apply to context

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state

        for key, value in context_updates.items():
            if key == "data":
                self._context.data.update(value)
            elif hasattr(self._context, key):
                setattr(self._context, key, value)

        logger.info(f"State transition: {old_state.name} -> {to_state.name}")

        for listener in self._listeners:
            try:
                listener(old_state, to_state, self._context)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")

        return True

    def add_listener(self, callback: StateListener) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)
