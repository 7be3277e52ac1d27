import pytest

from match3.components.session_state import SessionOutcome, SessionState
from match3.config import Goal, GoalMode
from match3.systems.goal_system import calculate_stars, evaluate_goal, score_target
from tests.helpers import make_config


def _config(mode, threshold, target_score=0):
    return make_config(goal=Goal(mode, threshold, target_score))


def test_score_goal_scales_with_level():
    config = _config(GoalMode.SCORE, 500)
    state = SessionState(score=900, level=2)
    assert score_target(state, config) == 1000
    assert evaluate_goal(state, config) is None
    state.score = 1000
    assert evaluate_goal(state, config) is SessionOutcome.COMPLETE


def test_target_goal_ignores_level():
    config = _config(GoalMode.TARGET, 300)
    assert evaluate_goal(SessionState(score=300, level=5), config) is SessionOutcome.COMPLETE


@pytest.mark.parametrize(
    "target_score, score, moves_used, expected",
    [
        (0, 0, 4, None),
        (0, 0, 5, SessionOutcome.COMPLETE),
        (200, 150, 5, SessionOutcome.FAILED),
        (200, 200, 2, SessionOutcome.COMPLETE),
    ],
)
def test_move_goal(target_score, score, moves_used, expected):
    config = _config(GoalMode.MOVES, 5, target_score)
    state = SessionState(score=score, moves_used=moves_used)
    assert evaluate_goal(state, config) is expected


def test_time_goal_ends_when_clock_runs_out():
    config = _config(GoalMode.TIME, 60, target_score=100)
    assert evaluate_goal(SessionState(time_remaining=1.0), config) is None
    assert evaluate_goal(SessionState(time_remaining=0.0), config) is SessionOutcome.FAILED
    assert evaluate_goal(SessionState(score=100, time_remaining=30.0), config) is SessionOutcome.COMPLETE


@pytest.mark.parametrize("score, stars", [(1500, 3), (1200, 2), (1000, 1), (999, 0)])
def test_score_stars(score, stars):
    config = _config(GoalMode.SCORE, 1000)
    state = SessionState(score=score, outcome=SessionOutcome.COMPLETE)
    assert calculate_stars(state, config) == stars


@pytest.mark.parametrize("moves_used, stars", [(0, 3), (7, 3), (9, 2), (11, 1), (12, 0)])
def test_move_stars(moves_used, stars):
    config = _config(GoalMode.MOVES, 10)
    state = SessionState(moves_used=moves_used, outcome=SessionOutcome.COMPLETE)
    assert calculate_stars(state, config) == stars


@pytest.mark.parametrize("remaining, stars", [(30.0, 3), (18.0, 2), (6.0, 1), (5.0, 0)])
def test_time_stars(remaining, stars):
    config = _config(GoalMode.TIME, 60)
    state = SessionState(time_remaining=remaining, outcome=SessionOutcome.COMPLETE)
    assert calculate_stars(state, config) == stars


def test_failed_level_earns_no_stars():
    config = _config(GoalMode.SCORE, 100)
    state = SessionState(score=1000, outcome=SessionOutcome.FAILED)
    assert calculate_stars(state, config) == 0
