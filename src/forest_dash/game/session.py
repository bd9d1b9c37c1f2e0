"""Session state owned by the simulation, and the snapshot it publishes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from forest_dash.config.settings import Settings
from forest_dash.core.state import GameState
from forest_dash.game.entities import (
    BackgroundObject,
    BackgroundView,
    Branch,
    BranchView,
    Obstacle,
    ObstacleKind,
    ObstacleView,
    Player,
    PlayerView,
)


class LossReason(Enum):
    NORMAL = "normal"
    GIANT = "giant"
    MINIBOSS = "miniboss"
    BRANCH = "branch"

    @classmethod
    def for_kind(cls, kind: ObstacleKind) -> "LossReason":
        if kind is ObstacleKind.GIANT:
            return cls.GIANT
        if kind is ObstacleKind.MINIBOSS:
            return cls.MINIBOSS
        return cls.NORMAL


@dataclass
class OneShotFlags:
    """Events that may happen at most once per session or per level.

    Only ``SessionState.reset_session`` / ``reset_level`` clear these.
    """

    # Level scoped
    miniboss_armed: bool = False
    miniboss_spawned: bool = False
    warning_shown: bool = False

    # Session scoped
    mushroom_spawned: bool = False

    def clear_level(self) -> None:
        self.miniboss_armed = False
        self.miniboss_spawned = False
        self.warning_shown = False

    def clear_session(self) -> None:
        self.clear_level()
        self.mushroom_spawned = False


def new_player(settings: Settings) -> Player:
    return Player(
        x=settings.player.start_x,
        y=settings.ground_line - settings.player.height,
        width=settings.player.width,
        height=settings.player.height,
    )


@dataclass
class SessionState:
    """The single authoritative, mutable state of a run."""

    player: Player
    level: int = 1
    score: int = 0
    high_score: int = 0  # survives resets for the life of the process
    developer_mode: bool = False

    # Spawn gating
    frame_counter: int = 0
    branch_counter: int = 0

    obstacles: list[Obstacle] = field(default_factory=list)
    backgrounds: list[BackgroundObject] = field(default_factory=list)
    branches: list[Branch] = field(default_factory=list)

    flags: OneShotFlags = field(default_factory=OneShotFlags)
    loss_reason: Optional[LossReason] = None

    @classmethod
    def create(cls, settings: Settings) -> "SessionState":
        return cls(player=new_player(settings))

    def reset_session(self, settings: Settings) -> None:
        """Fresh run from level 1. Keeps high score and developer mode."""
        self.level = 1
        self.score = 0
        self.loss_reason = None
        self.flags.clear_session()
        self._reset_field(settings)

    def reset_level(self, settings: Settings, level: int) -> None:
        """Start ``level`` keeping the cumulative score.

        Developer mode does not carry over into a new level.
        """
        self.level = level
        self.loss_reason = None
        self.developer_mode = False
        self.flags.clear_level()
        self._reset_field(settings)

    def record_high_score(self) -> bool:
        if self.score > self.high_score:
            self.high_score = self.score
            return True
        return False

    def _reset_field(self, settings: Settings) -> None:
        self.player = new_player(settings)
        self.frame_counter = 0
        self.branch_counter = 0
        self.obstacles.clear()
        self.backgrounds.clear()
        self.branches.clear()


@dataclass(frozen=True)
class Snapshot:
    """Read-only copy of one tick, for the presentation layer."""

    state: GameState
    level: int
    score: int
    high_score: int
    player: PlayerView
    obstacles: tuple[ObstacleView, ...]
    backgrounds: tuple[BackgroundView, ...]
    branches: tuple[BranchView, ...]
    loss_reason: Optional[LossReason]
    power_up_active: bool
    warning_active: bool
    developer_mode: bool
    scroll_speed: float
    win_score: int
    visibility_radius: Optional[float] = None
    can_advance_level: bool = False

    @classmethod
    def capture(
        cls,
        session: SessionState,
        *,
        state: GameState,
        scroll_speed: float,
        win_score: int,
        warning_active: bool = False,
        visibility_radius: Optional[float] = None,
        can_advance_level: bool = False,
    ) -> "Snapshot":
        return cls(
            state=state,
            level=session.level,
            score=session.score,
            high_score=session.high_score,
            player=session.player.freeze(),
            obstacles=tuple(o.freeze() for o in session.obstacles),
            backgrounds=tuple(b.freeze() for b in session.backgrounds),
            branches=tuple(b.freeze() for b in session.branches),
            loss_reason=session.loss_reason,
            power_up_active=session.player.powered,
            warning_active=warning_active,
            developer_mode=session.developer_mode,
            scroll_speed=scroll_speed,
            win_score=win_score,
            visibility_radius=visibility_radius,
            can_advance_level=can_advance_level,
        )
