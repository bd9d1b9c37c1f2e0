"""Core framework components for Forest Dash."""

from .state import GameState, StateMachine
from .events import EventBus, Event, EventType
from .rng import ProbabilityGate, RandomSource
from .scheduler import FrameScheduler

__all__ = [
    "GameState",
    "StateMachine",
    "EventBus",
    "Event",
    "EventType",
    "ProbabilityGate",
    "RandomSource",
    "FrameScheduler",
]
