"""Input intents consumed by the simulation."""

from .intents import Action, InputState, IntentLatch, CheatCodeEntry

__all__ = ["Action", "InputState", "IntentLatch", "CheatCodeEntry"]
