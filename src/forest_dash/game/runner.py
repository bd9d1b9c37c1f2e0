"""
Runner game orchestration.

``RunnerGame`` owns the one authoritative ``SessionState`` and drives it
through the game states:

    MENU --start--> PLAYING --score >= win--> WON --advance--> PAUSED --dismiss--> PLAYING
                       |                       |
                       +--lethal hit--> LOST   +--restart--> PLAYING (full reset)

Per tick, while PLAYING:
    1. win check (before any physics)
    2. danger threshold: arm the miniboss, one-shot warning
    3. physics
    4. spawn rolls
    5. scroll entities
    6. collisions and scoring, loss on the first lethal hit
    7. cull what left the playfield
    8. publish a read-only ``Snapshot``
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Optional

from forest_dash.config.settings import LevelSettings, Settings, get_settings
from forest_dash.core.events import Event, EventBus, EventType
from forest_dash.core.rng import ProbabilityGate, RandomSource
from forest_dash.core.scheduler import FrameScheduler
from forest_dash.core.state import GameState, StateContext, StateMachine
from forest_dash.game.collision import CollisionEngine, CollisionOutcome
from forest_dash.game.difficulty import resolve_tier
from forest_dash.game.physics import PhysicsIntegrator
from forest_dash.game.session import LossReason, SessionState, Snapshot
from forest_dash.game.spawner import Spawner
from forest_dash.input.intents import InputState, IntentLatch

logger = logging.getLogger(__name__)

SchedulerFactory = Callable[..., FrameScheduler]


class RunnerGame:
    """The simulation core plus its state machine."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        bus: EventBus | None = None,
        rng: RandomSource | None = None,
        clock: Callable[[], float] = time.monotonic,
        scheduler_factory: SchedulerFactory = FrameScheduler,
    ) -> None:
        self.settings = settings or get_settings()
        self.bus = bus or EventBus()
        self._clock = clock

        self.state_machine = StateMachine(GameState.MENU)
        self.state_machine.add_listener(self._on_state_changed)

        self.latch = IntentLatch(self.bus)
        self._gate = ProbabilityGate(rng)
        self._physics = PhysicsIntegrator(self.settings)
        self._spawner = Spawner(self.settings, self._gate)
        self._collisions = CollisionEngine(self.settings)
        self._scheduler = scheduler_factory(self._on_frame, fps=self.settings.simulator.fps)

        self._session = SessionState.create(self.settings)
        self._won_at: Optional[float] = None
        self._warning_until: Optional[float] = None
        self._snapshot = self._capture()

    # ---------- Read side ----------

    @property
    def state(self) -> GameState:
        return self.state_machine.state

    @property
    def session(self) -> SessionState:
        """Live simulation state. Presentation code should use ``snapshot``."""
        return self._session

    @property
    def snapshot(self) -> Snapshot:
        """The snapshot published at the last tick boundary or transition."""
        return self._snapshot

    @property
    def rules(self) -> LevelSettings:
        return self.settings.level(self._session.level)

    @property
    def scroll_speed(self) -> float:
        return resolve_tier(self.rules.tiers, self._session.score).speed

    @property
    def warning_active(self) -> bool:
        return self._warning_until is not None and self._clock() < self._warning_until

    @property
    def scheduler(self) -> FrameScheduler:
        return self._scheduler

    def can_advance_level(self) -> bool:
        if self.state is not GameState.WON or self._won_at is None:
            return False
        if self._session.level >= self.settings.last_level:
            return False
        return self._clock() - self._won_at >= self.settings.flow.next_level_delay

    # ---------- Actions ----------

    def start(self) -> None:
        """Start a new session from level 1. Works from any state."""
        # Raises RuntimeError outside a running event loop, before any reset
        self._scheduler.start()
        self._session.reset_session(self.settings)
        self._won_at = None
        self._warning_until = None
        logger.info("New session started")

        self.state_machine.transition(GameState.PLAYING, level=1, loss_reason=None)
        self._emit(EventType.SESSION_STARTED, {"level": 1})
        self._publish()

    restart = start

    def advance_level(self) -> bool:
        """Go to the next level's intro, keeping the cumulative score."""
        if not self.can_advance_level():
            logger.warning("Next level is not available yet")
            return False

        level = self._session.level + 1
        was_developer = self._session.developer_mode
        self._session.reset_level(self.settings, level)
        self._won_at = None
        self._warning_until = None

        self.state_machine.transition(GameState.PAUSED, level=level, loss_reason=None)
        self._scheduler.stop()
        logger.info(f"Level {level} intro")
        if was_developer:
            self._emit(EventType.DEVELOPER_MODE, {"enabled": False})
        self._emit(EventType.LEVEL_STARTED, {"level": level, "score": self._session.score})
        self._publish()
        return True

    def dismiss_intro(self) -> bool:
        """Leave the level intro and resume play."""
        if self.state is not GameState.PAUSED:
            return False
        self._scheduler.start()
        ok = self.state_machine.transition(GameState.PLAYING, level=self._session.level)
        self._publish()
        return ok

    def enable_developer_mode(self, code: str) -> bool:
        """Turn on the developer score multiplier if ``code`` matches.

        An informal cheat for testing long runs, not an access control.
        """
        if code != self.settings.scoring.cheat_code:
            logger.warning("Wrong developer code")
            return False

        self._session.developer_mode = True
        logger.info(
            f"Developer mode ACTIVATED (x{self.settings.scoring.developer_multiplier} points)"
        )
        self._emit(EventType.DEVELOPER_MODE, {"enabled": True})
        self._publish()
        return True

    def disable_developer_mode(self) -> None:
        if self._session.developer_mode:
            self._session.developer_mode = False
            logger.info("Developer mode disabled")
            self._emit(EventType.DEVELOPER_MODE, {"enabled": False})
            self._publish()

    # ---------- Simulation ----------

    def tick(self, inp: InputState | None = None) -> Snapshot:
        """Advance the simulation by one frame.

        A no-op outside PLAYING, so a frame callback that outlives a state
        change cannot drive physics.
        """
        if self.state is not GameState.PLAYING:
            return self._snapshot

        if inp is None:
            inp = self.latch.sample()

        session = self._session
        rules = self.rules

        if session.score >= rules.win_score:
            self._win()
            return self._snapshot

        self._check_danger(rules)

        self._physics.step(session.player, inp, double_jump=rules.double_jump)
        self._spawner.update(session, rules)
        self._spawner.scroll(session, self.scroll_speed)

        # Pass scoring sees obstacles before they are culled
        outcome = self._collisions.resolve(session)
        self._spawner.cull(session)
        self._report(outcome)

        if outcome.lethal:
            self._lose(outcome.loss_reason)
            return self._snapshot

        self._publish()
        return self._snapshot

    def _on_frame(self) -> None:
        self.tick()

    def _check_danger(self, rules: LevelSettings) -> None:
        flags = self._session.flags
        score = self._session.score

        if rules.danger_score is not None:
            if score >= rules.danger_score and not flags.miniboss_armed:
                flags.miniboss_armed = True
                logger.info(f"Danger threshold {rules.danger_score} reached, miniboss armed")
                if not flags.miniboss_spawned:
                    self._show_warning()
        elif rules.warning_score is not None and score >= rules.warning_score:
            # Banner only, the miniboss follows its own odds on this level
            self._show_warning()

    def _show_warning(self) -> None:
        flags = self._session.flags
        if flags.warning_shown:
            return
        flags.warning_shown = True
        self._warning_until = self._clock() + self.settings.flow.warning_duration
        self._emit(EventType.DANGER_WARNING, {"score": self._session.score})

    def _report(self, outcome: CollisionOutcome) -> None:
        if outcome.power_up_gained:
            self._emit(EventType.POWER_UP_GAINED)
        if outcome.points:
            self._emit(
                EventType.SCORE_CHANGED,
                {"score": self._session.score, "points": outcome.points},
            )
        if outcome.power_up_expired:
            self._emit(EventType.POWER_UP_EXPIRED)

    def _win(self) -> None:
        session = self._session
        session.record_high_score()
        self._won_at = self._clock()

        logger.info(f"Level {session.level} won with score {session.score}")
        self.state_machine.transition(GameState.WON, level=session.level)
        self._scheduler.stop()
        self._emit(EventType.GAME_WON, {"level": session.level, "score": session.score})
        self._publish()

    def _lose(self, reason: LossReason) -> None:
        session = self._session
        session.loss_reason = reason
        new_record = session.record_high_score()

        logger.info(f"Game lost ({reason.value}) with score {session.score}")
        self.state_machine.transition(GameState.LOST, loss_reason=reason.value)
        self._scheduler.stop()
        self._emit(
            EventType.GAME_LOST,
            {
                "reason": reason,
                "score": session.score,
                "high_score": session.high_score,
                "new_record": new_record,
            },
        )
        self._publish()

    # ---------- Plumbing ----------

    def _on_state_changed(self, old: GameState, new: GameState, context: StateContext) -> None:
        # Intents never survive a state change
        self.latch.clear()

        self._emit(
            EventType.STATE_CHANGED,
            {"from": old, "to": new, "level": context.level},
        )

    def _emit(self, event_type: EventType, data: dict | None = None) -> None:
        self.bus.emit(Event(type=event_type, data=data or {}, source="runner"))

    def _capture(self) -> Snapshot:
        rules = self.rules
        return Snapshot.capture(
            self._session,
            state=self.state,
            scroll_speed=self.scroll_speed,
            win_score=rules.win_score,
            warning_active=self.warning_active,
            visibility_radius=rules.visibility_radius,
            can_advance_level=self.can_advance_level(),
        )

    def _publish(self) -> None:
        self._snapshot = self._capture()
