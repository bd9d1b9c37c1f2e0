"""Procedural spawning of obstacles, background trees and falling branches."""

import itertools
import logging

from forest_dash.config.settings import LevelSettings, Settings
from forest_dash.core.rng import ProbabilityGate
from forest_dash.game.difficulty import resolve_tier
from forest_dash.game.entities import BackgroundObject, Branch, Obstacle, ObstacleKind
from forest_dash.game.session import SessionState

logger = logging.getLogger(__name__)


class IdSequence:
    """Monotonic ids; never reused for the life of the process."""

    def __init__(self, start: int = 0) -> None:
        self._counter = itertools.count(start)

    def next(self) -> int:
        return next(self._counter)


class Spawner:
    """Decides, once per tick, what enters the playfield.

    Obstacle kind precedence on a positive spawn trial:
    giant, then miniboss, then mushroom, then a normal bed.
    """

    def __init__(self, settings: Settings, gate: ProbabilityGate):
        self._settings = settings
        self._gate = gate
        self._obstacle_ids = IdSequence()
        self._background_ids = IdSequence()
        self._branch_ids = IdSequence()

    def update(self, session: SessionState, rules: LevelSettings) -> None:
        """Run this tick's spawn rolls, appending to the session collections."""
        tier = resolve_tier(rules.tiers, session.score)

        session.frame_counter += 1
        if (
            session.frame_counter > tier.dwell
            and self._gate.trial(self._settings.spawn.spawn_probability)
        ):
            self._spawn_obstacle(session, rules)

        if self._gate.trial(self._settings.spawn.background_probability):
            self._spawn_background(session)

        if rules.falling_branches:
            session.branch_counter += 1
            if session.branch_counter >= self._settings.spawn.branch_interval:
                session.branch_counter = 0
                if self._gate.trial(self._settings.spawn.branch_probability):
                    self._spawn_branch(session)

    def advance(self, session: SessionState, speed: float) -> None:
        """Move every entity for this tick and drop what left the playfield."""
        self.scroll(session, speed)
        self.cull(session)

    def scroll(self, session: SessionState, speed: float) -> None:
        spawn = self._settings.spawn

        for obstacle in session.obstacles:
            obstacle.x -= speed
        for tree in session.backgrounds:
            tree.x -= speed * spawn.parallax
        for branch in session.branches:
            branch.y += branch.speed

    def cull(self, session: SessionState) -> None:
        obstacle_margin = self._settings.obstacles.cull_margin
        tree_margin = self._settings.spawn.background_cull_margin
        floor = self._settings.playfield.height

        session.obstacles[:] = [
            o for o in session.obstacles if not o.is_offscreen(obstacle_margin)
        ]
        session.backgrounds[:] = [
            b for b in session.backgrounds if not b.is_offscreen(tree_margin)
        ]
        session.branches[:] = [b for b in session.branches if b.y < floor]

    def miniboss_probability(self, session: SessionState, rules: LevelSettings) -> float:
        """Current miniboss probability, or 0.0 while ineligible."""
        if rules.danger_score is not None:
            flags = session.flags
            if not flags.miniboss_armed or flags.miniboss_spawned:
                return 0.0
            return rules.miniboss_probability

        band = rules.miniboss_band
        if band is not None and band.low <= session.score <= band.high:
            return band.probability
        return rules.miniboss_probability

    def _spawn_obstacle(self, session: SessionState, rules: LevelSettings) -> None:
        spawn = self._settings.spawn

        if self._gate.trial(rules.giant_probability):
            self._add(session, ObstacleKind.GIANT)
        elif self._roll_miniboss(session, rules):
            self._spawn_miniboss_group(session, rules)
        elif (
            session.score > spawn.mushroom_min_score
            and not session.flags.mushroom_spawned
            and self._gate.trial(spawn.mushroom_probability)
        ):
            self._add(session, ObstacleKind.MUSHROOM)
            session.flags.mushroom_spawned = True
        else:
            self._add(session, ObstacleKind.NORMAL)

        # The miniboss cooldown leaves the counter negative
        if session.frame_counter > 0:
            session.frame_counter = 0

    def _roll_miniboss(self, session: SessionState, rules: LevelSettings) -> bool:
        probability = self.miniboss_probability(session, rules)
        if probability <= 0.0:
            return False
        return self._gate.trial(probability)

    def _spawn_miniboss_group(self, session: SessionState, rules: LevelSettings) -> None:
        cfg = self._settings.obstacles
        for i in range(cfg.miniboss_group_size):
            self._add(session, ObstacleKind.MINIBOSS, offset=i * cfg.miniboss_spacing)

        if rules.danger_score is not None:
            session.flags.miniboss_spawned = True
        session.frame_counter = cfg.miniboss_cooldown
        logger.info(f"Miniboss group spawned at score {session.score}")

    def _add(self, session: SessionState, kind: ObstacleKind, offset: float = 0.0) -> Obstacle:
        cfg = self._settings.obstacles
        variant = 0

        if kind is ObstacleKind.GIANT:
            width, height = cfg.giant_width, cfg.giant_height
            variant = self._gate.randrange(cfg.variant_count)
        elif kind is ObstacleKind.MINIBOSS:
            width, height = cfg.miniboss_width, cfg.miniboss_height
        elif kind is ObstacleKind.MUSHROOM:
            width = height = cfg.mushroom_size
        else:
            width = cfg.bed_width
            height = cfg.bed_base_height + self._gate.randrange(cfg.bed_height_range)
            variant = self._gate.randrange(cfg.variant_count)

        obstacle = Obstacle(
            id=self._obstacle_ids.next(),
            kind=kind,
            x=float(self._settings.playfield.width + offset),
            y=self._settings.ground_line - height,
            width=width,
            height=height,
            variant=variant,
        )
        session.obstacles.append(obstacle)
        logger.debug(f"Spawned {kind.value} #{obstacle.id} h={height}")
        return obstacle

    def _spawn_background(self, session: SessionState) -> None:
        spawn = self._settings.spawn
        scale = self._gate.uniform(0.5, 1.0)
        size = spawn.background_base_size * scale
        session.backgrounds.append(BackgroundObject(
            id=self._background_ids.next(),
            x=float(self._settings.playfield.width),
            y=self._settings.ground_line - size + spawn.background_burial,
            width=size,
            height=size,
            type=self._gate.randrange(spawn.background_types),
        ))

    def _spawn_branch(self, session: SessionState) -> None:
        spawn = self._settings.spawn
        branch = Branch(
            id=self._branch_ids.next(),
            x=self._gate.uniform(0.0, self._settings.playfield.width - spawn.branch_width),
            y=spawn.branch_spawn_y,
            width=spawn.branch_width,
            height=spawn.branch_height,
            speed=spawn.branch_min_speed + self._gate.uniform(0.0, spawn.branch_speed_range),
        )
        session.branches.append(branch)
        logger.debug(f"Branch #{branch.id} falling at {branch.speed:.1f}")
