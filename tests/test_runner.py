"""Tests for RunnerGame: tick ordering, win/loss, levels and the cheat code."""

import dataclasses
import random

import pytest

from forest_dash.core.events import EventType, input_event
from forest_dash.core.state import GameState
from forest_dash.game.entities import Obstacle, ObstacleKind
from forest_dash.game.runner import RunnerGame
from forest_dash.game.session import LossReason
from forest_dash.input.intents import Action, InputState

from conftest import FakeClock, FakeScheduler, ScriptedRandom

IDLE = InputState()


def place(game, kind=ObstacleKind.NORMAL, x=70.0, width=60, height=50):
    """Add an obstacle resting on the ground."""
    obstacle = Obstacle(
        id=900 + len(game.session.obstacles),
        kind=kind,
        x=x,
        y=game.settings.ground_line - height,
        width=width,
        height=height,
    )
    game.session.obstacles.append(obstacle)
    return obstacle


def event_types(bus):
    return [e.type for e in bus.get_history(limit=100)]


class TestLifecycle:
    def test_starts_in_menu(self, game):
        assert game.state is GameState.MENU
        assert game.snapshot.state is GameState.MENU
        assert not game.scheduler.is_running

    def test_tick_outside_playing_is_a_no_op(self, game):
        before = game.snapshot

        assert game.tick(IDLE) is before
        assert game.session.frame_counter == 0

    def test_start(self, game, bus):
        game.start()

        assert game.state is GameState.PLAYING
        assert game.scheduler.is_running
        assert EventType.SESSION_STARTED in event_types(bus)
        assert EventType.STATE_CHANGED in event_types(bus)

    def test_tick_advances_simulation(self, game):
        game.start()

        snapshot = game.tick(IDLE)

        assert game.session.frame_counter == 1
        assert snapshot is game.snapshot
        assert snapshot.state is GameState.PLAYING
        assert snapshot.scroll_speed == 6

    def test_start_without_event_loop_fails_fast(self, settings, clock):
        game = RunnerGame(settings, rng=ScriptedRandom(), clock=clock)

        with pytest.raises(RuntimeError):
            game.start()

        assert game.state is GameState.MENU
        assert not game.scheduler.is_running

    def test_frame_callback_samples_the_latch(self, game, bus):
        game.start()
        bus.emit(input_event(Action.MOVE_RIGHT))

        game.scheduler.tick_fn()

        assert game.session.player.x == 55


class TestWin:
    def test_win_threshold(self, game, bus):
        game.start()
        game.session.score = 50

        game.tick(IDLE)

        assert game.state is GameState.WON
        assert not game.scheduler.is_running
        assert game.session.high_score == 50
        assert EventType.GAME_WON in event_types(bus)

    def test_win_checked_before_physics(self, game):
        game.start()
        game.session.score = 50
        place(game, x=70.0)

        game.tick(IDLE)

        assert game.state is GameState.WON
        assert game.session.frame_counter == 0

    def test_below_threshold_keeps_playing(self, game):
        game.start()
        game.session.score = 49

        game.tick(IDLE)

        assert game.state is GameState.PLAYING


class TestScoring:
    def test_wide_obstacle_scores_before_cull(self, game):
        game.start()
        player = game.session.player
        player.x, player.y = 0.0, 0.0
        # Trailing edge at +3, behind the player after one scroll
        place(game, ObstacleKind.MINIBOSS, x=-97.0, width=100, height=70)

        game.tick(IDLE)

        assert game.session.score == 1
        assert game.session.obstacles == []


class TestLoss:
    @pytest.mark.parametrize(
        "kind, reason",
        [
            (ObstacleKind.NORMAL, LossReason.NORMAL),
            (ObstacleKind.GIANT, LossReason.GIANT),
            (ObstacleKind.MINIBOSS, LossReason.MINIBOSS),
        ],
    )
    def test_lethal_hit(self, game, bus, kind, reason):
        game.start()
        game.session.score = 3
        place(game, kind)

        game.tick(IDLE)

        assert game.state is GameState.LOST
        assert game.snapshot.loss_reason is reason
        assert game.session.high_score == 3
        assert not game.scheduler.is_running
        assert EventType.GAME_LOST in event_types(bus)

    def test_loss_event_payload(self, game, bus):
        game.start()
        game.session.high_score = 10
        game.session.score = 3
        place(game)

        game.tick(IDLE)

        (lost,) = bus.get_history(EventType.GAME_LOST)
        assert lost.data["score"] == 3
        assert lost.data["high_score"] == 10
        assert lost.data["new_record"] is False

    def test_high_score_never_decreases(self, game):
        game.start()
        game.session.high_score = 10
        game.session.score = 3
        place(game)

        game.tick(IDLE)

        assert game.session.high_score == 10

    def test_loss_clears_held_input(self, game, bus):
        game.start()
        bus.emit(input_event(Action.MOVE_RIGHT))
        place(game, x=120.0)

        for _ in range(10):
            game.tick()
            if game.state is GameState.LOST:
                break

        assert game.state is GameState.LOST
        assert not game.latch.is_held(Action.MOVE_RIGHT)

    def test_no_ticks_after_loss(self, game):
        game.start()
        place(game)
        game.tick(IDLE)
        counter = game.session.frame_counter

        game.tick(IDLE)

        assert game.session.frame_counter == counter

    def test_restart_after_loss(self, game):
        game.start()
        game.session.score = 7
        place(game)
        game.tick(IDLE)

        game.restart()

        assert game.state is GameState.PLAYING
        assert game.session.score == 0
        assert game.session.obstacles == []
        assert game.session.loss_reason is None
        assert game.session.high_score == 7
        assert game.scheduler.is_running


class TestMushroom:
    def test_pickup_keeps_playing(self, game, bus):
        game.start()
        place(game, ObstacleKind.MUSHROOM, width=40, height=40)

        game.tick(IDLE)

        assert game.state is GameState.PLAYING
        assert game.session.obstacles == []
        assert game.snapshot.power_up_active
        assert EventType.POWER_UP_GAINED in event_types(bus)


class TestDanger:
    def test_warning_fires_once(self, game, bus, clock):
        game.start()
        game.session.score = 25

        game.tick(IDLE)

        assert game.session.flags.miniboss_armed
        assert game.snapshot.warning_active
        assert event_types(bus).count(EventType.DANGER_WARNING) == 1

        clock.advance(3.0)
        game.tick(IDLE)

        assert not game.snapshot.warning_active
        assert event_types(bus).count(EventType.DANGER_WARNING) == 1

    def test_no_warning_below_threshold(self, game, bus):
        game.start()
        game.session.score = 24

        game.tick(IDLE)

        assert not game.session.flags.miniboss_armed
        assert EventType.DANGER_WARNING not in event_types(bus)


def win_level_one(game, clock):
    game.start()
    game.session.score = 50
    game.tick(IDLE)
    assert game.state is GameState.WON
    clock.advance(game.settings.flow.next_level_delay)


class TestLevels:
    def test_advance_gated_by_delay(self, game, clock):
        game.start()
        game.session.score = 50
        game.tick(IDLE)

        assert not game.can_advance_level()
        assert not game.advance_level()
        assert game.state is GameState.WON

        clock.advance(2.5)
        assert not game.can_advance_level()

        clock.advance(0.5)
        assert game.can_advance_level()

    def test_advance_to_intro(self, game, clock, bus):
        win_level_one(game, clock)
        place(game, x=500.0)

        assert game.advance_level()

        assert game.state is GameState.PAUSED
        assert game.session.level == 2
        assert game.session.score == 50
        assert game.session.obstacles == []
        assert not game.scheduler.is_running
        assert EventType.LEVEL_STARTED in event_types(bus)

        snapshot = game.snapshot
        assert snapshot.level == 2
        assert snapshot.visibility_radius == 120
        assert snapshot.win_score == 100

    def test_intro_blocks_ticks_until_dismissed(self, game, clock):
        win_level_one(game, clock)
        game.advance_level()

        game.tick(IDLE)
        assert game.session.frame_counter == 0

        assert game.dismiss_intro()
        assert game.state is GameState.PLAYING
        assert game.scheduler.is_running

        game.tick(IDLE)
        assert game.session.frame_counter == 1
        assert game.snapshot.scroll_speed == 8

    def test_dismiss_only_from_intro(self, game):
        assert not game.dismiss_intro()
        game.start()
        assert not game.dismiss_intro()

    def test_level_two_double_jump(self, game, clock):
        win_level_one(game, clock)
        game.advance_level()
        game.dismiss_intro()

        game.tick(InputState(jump_pressed=True))
        game.tick(InputState(jump_pressed=True))

        assert game.session.player.vy == pytest.approx(-11.4)

    def test_level_two_repeats_the_warning(self, game, clock, bus):
        win_level_one(game, clock)
        game.advance_level()
        game.dismiss_intro()
        bus.clear_history()

        game.tick(IDLE)
        game.tick(IDLE)

        assert game.snapshot.warning_active
        assert event_types(bus).count(EventType.DANGER_WARNING) == 1
        # Banner only, no miniboss is armed
        assert not game.session.flags.miniboss_armed

    def test_last_level_win_offers_only_restart(self, game, clock):
        win_level_one(game, clock)
        game.advance_level()
        game.dismiss_intro()
        game.session.score = 100

        game.tick(IDLE)
        clock.advance(10)

        assert game.state is GameState.WON
        assert not game.can_advance_level()
        assert game.session.high_score == 100

        game.start()
        assert game.session.level == 1
        assert game.session.score == 0


class TestDeveloperMode:
    def test_wrong_code(self, game, bus):
        assert not game.enable_developer_mode("0000")
        assert not game.session.developer_mode
        assert EventType.DEVELOPER_MODE not in event_types(bus)

    def test_code_multiplies_points(self, game, bus):
        assert game.enable_developer_mode("1345")
        game.start()
        assert game.snapshot.developer_mode

        place(game, x=-15.0)
        game.tick(IDLE)

        assert game.session.score == 50
        (changed,) = bus.get_history(EventType.SCORE_CHANGED)
        assert changed.data == {"score": 50, "points": 50}

    def test_reset_on_next_level(self, game, clock, bus):
        game.enable_developer_mode("1345")
        win_level_one(game, clock)

        game.advance_level()

        assert not game.session.developer_mode
        toggles = bus.get_history(EventType.DEVELOPER_MODE)
        assert [e.data["enabled"] for e in toggles] == [True, False]

    def test_disable(self, game):
        game.enable_developer_mode("1345")
        game.disable_developer_mode()
        assert not game.snapshot.developer_mode


class TestSnapshot:
    def test_views_are_frozen(self, game):
        game.start()
        place(game, x=500.0)
        snapshot = game.tick(IDLE)

        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.player.x = 0
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.obstacles[0].x = 0

    def test_snapshot_is_a_copy(self, game):
        game.start()
        place(game, x=500.0)
        snapshot = game.tick(IDLE)

        game.tick(IDLE)

        assert snapshot.obstacles[0].x == 494
        assert game.session.obstacles[0].x == 488


def test_long_run_invariants(settings):
    """Random play never breaks the bounds or scoring invariants."""
    source = random.Random(1234)
    game = RunnerGame(
        settings, rng=source, clock=FakeClock(), scheduler_factory=FakeScheduler
    )
    game.start()

    ground_y = settings.ground_line - settings.player.height
    max_x = settings.playfield.width - settings.player.width
    score = 0
    passed: set[int] = set()

    for i in range(3000):
        inp = InputState(
            left=source.random() < 0.2,
            right=source.random() < 0.3,
            jump_pressed=i % 25 == 0,
        )
        game.tick(inp)
        if game.state is not GameState.PLAYING:
            game.start()
            score = 0
            passed.clear()
            continue

        session = game.session
        player = session.player
        assert 0 <= player.x <= max_x
        assert player.y <= ground_y
        assert session.score >= score
        score = session.score

        now_passed = {o.id for o in session.obstacles if o.passed}
        still_present = {o.id for o in session.obstacles}
        assert passed & still_present <= now_passed
        passed = now_passed
