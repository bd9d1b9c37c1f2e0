"""Collision detection and scoring."""

import logging
from dataclasses import dataclass
from typing import Optional

from forest_dash.config.settings import Settings
from forest_dash.game.entities import Box, ObstacleKind
from forest_dash.game.session import LossReason, SessionState

logger = logging.getLogger(__name__)


def overlaps(a: Box, b: Box) -> bool:
    """Strict AABB intersection; boxes that only touch do not overlap."""
    return (
        a.x < b.x + b.width
        and a.x + a.width > b.x
        and a.y < b.y + b.height
        and a.y + a.height > b.y
    )


@dataclass
class CollisionOutcome:
    """What one tick of collision resolution changed."""

    points: int = 0
    power_up_gained: bool = False
    power_up_expired: bool = False
    loss_reason: Optional[LossReason] = None

    @property
    def lethal(self) -> bool:
        return self.loss_reason is not None


class CollisionEngine:
    def __init__(self, settings: Settings):
        self._settings = settings

    def points_per_pass(self, session: SessionState) -> int:
        scoring = self._settings.scoring
        if session.developer_mode:
            return scoring.points_per_pass * scoring.developer_multiplier
        return scoring.points_per_pass

    def resolve(self, session: SessionState) -> CollisionOutcome:
        """Scan obstacles in spawn order, then branches.

        The first lethal overlap ends the scan.
        """
        outcome = CollisionOutcome()
        player = session.player
        scoring = self._settings.scoring

        i = 0
        while i < len(session.obstacles):
            obstacle = session.obstacles[i]

            if overlaps(player, obstacle):
                if obstacle.kind is ObstacleKind.MUSHROOM:
                    del session.obstacles[i]
                    player.powered = True
                    player.power_passes = 0
                    outcome.power_up_gained = True
                    logger.info("Mushroom picked up, jump boosted")
                    continue

                outcome.loss_reason = LossReason.for_kind(obstacle.kind)
                logger.info(f"Hit {obstacle.kind.value} #{obstacle.id}")
                return outcome

            if not obstacle.passed and player.x > obstacle.right:
                obstacle.mark_passed()
                points = self.points_per_pass(session)
                session.score += points
                outcome.points += points

                if player.powered and obstacle.kind is not ObstacleKind.MUSHROOM:
                    player.power_passes += 1
                    if player.power_passes >= scoring.power_up_passes:
                        player.powered = False
                        outcome.power_up_expired = True
                        logger.info("Power-up expired")

            i += 1

        for branch in session.branches:
            if overlaps(player, branch):
                outcome.loss_reason = LossReason.BRANCH
                logger.info(f"Hit falling branch #{branch.id}")
                return outcome

        return outcome
