"""Runner simulation core."""

from forest_dash.game.entities import (
    BackgroundObject,
    Branch,
    Direction,
    Obstacle,
    ObstacleKind,
    Player,
)
from forest_dash.game.collision import CollisionEngine, CollisionOutcome, overlaps
from forest_dash.game.difficulty import resolve_tier
from forest_dash.game.physics import PhysicsIntegrator
from forest_dash.game.runner import RunnerGame
from forest_dash.game.session import LossReason, SessionState, Snapshot
from forest_dash.game.spawner import IdSequence, Spawner

__all__ = [
    "BackgroundObject",
    "Branch",
    "Direction",
    "Obstacle",
    "ObstacleKind",
    "Player",
    "CollisionEngine",
    "CollisionOutcome",
    "overlaps",
    "resolve_tier",
    "PhysicsIntegrator",
    "RunnerGame",
    "LossReason",
    "SessionState",
    "Snapshot",
    "IdSequence",
    "Spawner",
]
