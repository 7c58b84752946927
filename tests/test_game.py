"""Tests for the GameStateMachine module."""

import json
from collections import deque

import pytest
from pydantic import ValidationError

from snake_arena.collision import CollisionKind
from snake_arena.config import GameConfig
from snake_arena.game import ControlEdge, GameStateMachine
from snake_arena.grid import Direction, GridVector
from snake_arena.headless import LoggingPresenter
from snake_arena.models import Phase

TICK = 125.0
FAR_AWAY = GridVector(10, 10)


def _started(config=None, presenter=None):
    game = GameStateMachine(config or GameConfig(seed=0), presenter=presenter)
    game.press_start()
    game.step(0.0)
    assert game.phase is Phase.RUNNING
    game.arena.food = FAR_AWAY
    return game


def _solo(**kwargs):
    return GameConfig(seed=0, autonomous_count=0, **kwargs)


class TestControlEdge:
    def test_fires_once_per_press(self):
        edge = ControlEdge()
        edge.press()
        assert edge.consume()
        assert not edge.consume()

    def test_hold_does_not_refire(self):
        edge = ControlEdge()
        edge.press()
        edge.consume()
        edge.press()
        assert not edge.consume()
        edge.release()
        edge.press()
        assert edge.consume()


class TestInit:
    def test_initial_state(self):
        game = GameStateMachine(GameConfig(seed=0))
        assert game.phase is Phase.WAITING
        assert game.score == 0
        assert game.speed == 1.0
        assert game.move_interval == pytest.approx(TICK)

    def test_human_spawn(self):
        game = GameStateMachine(GameConfig(seed=0))
        assert game.human.head == (510, 330)
        assert len(game.human) == 6
        assert game.human.heading is Direction.RIGHT

    def test_autonomous_spawn(self):
        game = GameStateMachine(GameConfig(seed=0))
        heads = [agent.head for agent in game.autonomous]
        assert heads == [(150, 150), (850, 150), (150, 510), (850, 510)]
        assert all(6 <= len(agent) <= 8 for agent in game.autonomous)

    def test_food_not_on_any_agent(self):
        for seed in range(10):
            game = GameStateMachine(GameConfig(seed=seed))
            assert not any(agent.occupies(game.food) for agent in game.agents)

    def test_presenter_gets_initial_status(self):
        presenter = LoggingPresenter()
        GameStateMachine(GameConfig(seed=0), presenter=presenter)
        assert presenter.last.phase is Phase.WAITING
        assert presenter.last.length == 6


class TestWaiting:
    def test_no_movement_while_waiting(self):
        game = GameStateMachine(GameConfig(seed=0))
        before = game.snapshot()
        for i in range(5):
            assert not game.step(i * TICK)
        assert game.snapshot() == before

    def test_start_edge(self):
        game = GameStateMachine(GameConfig(seed=0))
        game.press_start()
        assert not game.step(0.0)
        assert game.phase is Phase.RUNNING

    def test_pause_edge_also_starts(self):
        game = GameStateMachine(GameConfig(seed=0))
        game.press_pause()
        game.step(0.0)
        assert game.phase is Phase.RUNNING

    def test_start_and_pause_both_pressed_while_waiting(self):
        game = GameStateMachine(GameConfig(seed=0))
        game.press_start()
        game.release_start()
        game.press_pause()
        game.release_pause()
        game.step(0.0)
        assert game.phase is Phase.RUNNING
        assert game.step(TICK)
        assert game.phase is Phase.RUNNING


class TestMovement:
    def test_single_step_without_input(self):
        game = _started(_solo())
        tail = game.human.tail
        assert game.step(TICK)
        assert game.human.head == (530, 330)
        assert len(game.human) == 6
        assert not game.human.occupies(tail)

    def test_turns_apply_on_next_tick(self):
        game = _started(_solo())
        game.submit_direction(Direction.UP)
        assert game.human.heading is Direction.RIGHT
        game.step(TICK)
        assert game.human.head == (510, 310)
        game.submit_direction(Direction.LEFT)
        game.step(2 * TICK)
        assert game.human.head == (490, 310)

    def test_reverse_input_ignored(self):
        game = _started(_solo())
        assert not game.submit_direction(Direction.LEFT)
        game.step(TICK)
        assert game.human.heading is Direction.RIGHT

    def test_autonomous_agents_move(self):
        game = _started()
        before = [agent.head for agent in game.autonomous]
        game.step(TICK)
        after = [agent.head for agent in game.autonomous]
        assert all(a != b for a, b in zip(before, after, strict=True))
        assert game.session.tick == 1

    def test_autonomous_wall_bounce(self):
        game = _started(GameConfig(seed=0, autonomous_count=1))
        agent = game.autonomous[0]
        policy = game.policies[0]
        agent.segments = deque(GridVector(10 + 20 * i, 330) for i in range(5))
        agent.heading = Direction.LEFT
        policy.pending = Direction.LEFT
        policy.interval = 100

        game.step(TICK)
        assert agent.head == (-10, 330)
        assert policy.bouncing

        decisions = []
        decide = policy.decide
        policy.decide = lambda a, arena: decisions.append(decide(a, arena))
        # A decision point would be due on this tick if one were allowed.
        policy.interval = 1

        game.step(2 * TICK)
        assert agent.heading is Direction.RIGHT
        assert agent.head == (10, 330)
        assert not policy.bouncing
        assert decisions == [False]
        assert policy.interval == 1


class TestFood:
    def test_eating(self):
        presenter = LoggingPresenter()
        game = _started(presenter=presenter)
        game.arena.food = game.human.next_head()
        game.step(TICK)
        assert len(game.human) == 7
        assert game.score == 10
        assert presenter.eat_cues == 1
        assert not any(agent.occupies(game.food) for agent in game.agents)
        assert presenter.last.score == 10
        assert presenter.last.length == 7

    def test_food_collected_during_grace(self):
        game = _started(_solo())
        assert game.session.grace
        game.arena.food = game.human.next_head()
        game.step(TICK)
        assert game.score == 10

    def test_score_raises_speed(self):
        game = _started(_solo())
        game.session.score = 50
        game.step(TICK)
        assert game.session.base_speed == pytest.approx(1.1)
        assert game.move_interval == pytest.approx(TICK / 1.1)


class TestPause:
    def test_pause_edge(self):
        game = _started()
        game.press_pause()
        assert not game.step(TICK)
        assert game.phase is Phase.PAUSED

        frozen = game.snapshot()
        assert frozen.paused
        # Held key: a second press without release must not toggle back.
        game.press_pause()
        assert not game.step(2 * TICK)
        assert not game.step(3 * TICK)
        assert game.phase is Phase.PAUSED
        assert game.snapshot().agents == frozen.agents

    def test_resume_after_release(self):
        game = _started()
        game.press_pause()
        game.step(TICK)
        game.release_pause()
        game.press_pause()
        assert game.step(2 * TICK)
        assert game.phase is Phase.RUNNING

    def test_paused_time_keeps_grace(self):
        game = _started(_solo())
        game.step(500.0)
        game.press_pause()
        game.step(600.0)
        game.release_pause()
        game.press_pause()
        game.step(10_000.0)
        assert game.phase is Phase.RUNNING
        assert game.session.grace


class TestFatalCollisions:
    def test_wall_death_after_grace(self):
        game = _started(_solo(grace_period_ms=0.0))
        game.submit_direction(Direction.UP)
        now = 0.0
        while game.phase is Phase.RUNNING and now < 100 * TICK:
            now += TICK
            game.step(now)
        assert game.phase is Phase.GAME_OVER
        assert game.session.death.kind is CollisionKind.WALL
        assert game.human.head.y < 10

    def test_grace_suppresses_wall(self):
        game = _started(_solo(grace_period_ms=10_000.0))
        game.submit_direction(Direction.UP)
        for i in range(1, 20):
            game.step(i * TICK)
        assert game.phase is Phase.RUNNING
        assert game.human.head.y < 0

    def test_wall_precedence_over_agent(self):
        game = _started(GameConfig(seed=0, autonomous_count=1, grace_period_ms=0.0))
        human = game.human
        human.segments = deque(GridVector(10 + 20 * i, 330) for i in range(6))
        human.heading = Direction.LEFT
        game.directions.heading = Direction.LEFT
        blocker = game.autonomous[0]
        blocker.segments = deque(GridVector(-10, 290 + 20 * i) for i in range(5))
        blocker.heading = Direction.UP

        game.step(TICK)
        assert game.phase is Phase.GAME_OVER
        assert blocker.occupies(human.head)
        assert game.session.death.kind is CollisionKind.WALL
        assert game.status().death_reason == "wall"

    def test_agent_collision(self):
        game = _started(GameConfig(seed=0, autonomous_count=1, grace_period_ms=0.0))
        blocker = game.autonomous[0]
        blocker.segments = deque(GridVector(530, 290 + 20 * i) for i in range(5))
        blocker.heading = Direction.UP

        game.step(TICK)
        assert game.phase is Phase.GAME_OVER
        assert game.session.death.kind is CollisionKind.AGENT
        assert game.session.death.agent_index == 0

    def test_no_ticks_after_game_over(self):
        game = _started(_solo(grace_period_ms=0.0))
        game.session.phase = Phase.GAME_OVER
        head = game.human.head
        assert not game.step(TICK)
        assert game.human.head == head


class TestRestart:
    def test_restart_after_game_over(self):
        game = _started(GameConfig(seed=0, grace_period_ms=0.0))
        game.session.score = 70
        game.adjust_speed(0.5)
        game.submit_direction(Direction.UP)
        now = 0.0
        while game.phase is not Phase.GAME_OVER and now < 100 * TICK:
            now += TICK
            game.step(now)
        assert game.phase is Phase.GAME_OVER

        game.restart()
        assert game.phase is Phase.WAITING
        assert game.score == 0
        assert game.session.user_speed == 1.0
        assert game.session.death is None
        assert list(game.human.segments) == [(510 - 20 * i, 330) for i in range(6)]
        assert [a.head for a in game.autonomous] == [
            (150, 150), (850, 150), (150, 510), (850, 510),
        ]
        assert all(6 <= len(a) <= 8 for a in game.autonomous)
        assert len(game.directions) == 0

    def test_stale_edges_cleared(self):
        game = _started()
        game.press_start()
        game.restart()
        game.step(TICK)
        assert game.phase is Phase.WAITING


class TestUserSpeed:
    def test_adjust_and_clamp(self):
        presenter = LoggingPresenter()
        game = GameStateMachine(GameConfig(seed=0), presenter=presenter)
        assert game.adjust_speed(0.1) == pytest.approx(1.1)
        assert game.move_interval == pytest.approx(TICK / 1.1)
        for _ in range(30):
            game.adjust_speed(0.1)
        assert game.session.user_speed == 2.5
        assert not presenter.last.can_speed_up
        assert presenter.last.can_slow_down
        for _ in range(30):
            game.adjust_speed(-0.1)
        assert game.session.user_speed == 0.5
        assert not presenter.last.can_slow_down

    def test_speed_buttons_use_configured_step(self):
        game = GameStateMachine(GameConfig(seed=0))
        assert game.speed_up() == pytest.approx(1.1)
        assert game.slow_down() == pytest.approx(1.0)
        assert game.slow_down() == pytest.approx(0.9)

        coarse = GameStateMachine(GameConfig(seed=0, user_speed_step=0.5))
        assert coarse.speed_up() == pytest.approx(1.5)
        for _ in range(5):
            coarse.speed_up()
        assert coarse.session.user_speed == 2.5


class TestCollaboratorFailures:
    def test_presenter_errors_do_not_stop_ticks(self, caplog):
        class Broken:
            def update(self, status):
                raise RuntimeError("display gone")

            def play_eat_cue(self):
                raise RuntimeError("no audio")

        game = _started(_solo(), presenter=Broken())
        game.arena.food = game.human.next_head()
        assert game.step(TICK)
        assert game.score == 10
        assert "display gone" in caplog.text


class TestSnapshots:
    def test_snapshot_contents(self):
        game = _started()
        snap = game.snapshot()
        assert snap.phase is Phase.RUNNING
        assert snap.grace
        assert not snap.paused
        assert len(snap.agents) == 5
        assert snap.agents[0].kind == "human"
        assert snap.agents[0].heading == (1, 0)
        assert snap.food == (10, 10)

    def test_snapshot_is_read_only(self):
        snap = _started().snapshot()
        with pytest.raises(ValidationError):
            snap.tick = 99

    def test_snapshot_json_serializable(self):
        game = _started()
        game.step(TICK)
        assert isinstance(json.dumps(game.snapshot().model_dump(mode="json")), str)


class TestDeterminism:
    def test_same_seed_same_outcome(self):
        assert self._run(seed=123) == self._run(seed=123)

    def test_different_seeds_differ(self):
        assert self._run(seed=1) != self._run(seed=2)

    @staticmethod
    def _run(seed):
        game = GameStateMachine(GameConfig(seed=seed))
        game.press_start()
        game.step(0.0)
        turns = [Direction.UP, None, Direction.LEFT, None, Direction.DOWN]
        for i, turn in enumerate(turns * 3, start=1):
            if turn is not None:
                game.submit_direction(turn)
            game.step(i * TICK)
        return game.snapshot()
