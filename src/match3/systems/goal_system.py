from __future__ import annotations

from typing import Optional, Sequence

from match3.components.session_state import SessionOutcome, SessionState
from match3.config import GoalMode, PuzzleConfig
from match3.constants import MOVE_STAR_EFFICIENCY, SCORE_STAR_RATIOS, TIME_STAR_FRACTIONS


def score_target(state: SessionState, config: PuzzleConfig) -> float:
    """Score needed to finish the current level in SCORE/TARGET modes."""
    goal = config.goal
    if goal.mode is GoalMode.SCORE:
        return state.level * goal.threshold
    if goal.mode is GoalMode.TARGET:
        return goal.threshold
    return goal.target_score


def evaluate_goal(state: SessionState, config: PuzzleConfig) -> Optional[SessionOutcome]:
    """Return the outcome if the level is over, otherwise None."""
    goal = config.goal
    if goal.mode in (GoalMode.SCORE, GoalMode.TARGET):
        if state.score >= score_target(state, config):
            return SessionOutcome.COMPLETE
        return None
    if goal.target_score > 0 and state.score >= goal.target_score:
        return SessionOutcome.COMPLETE
    if goal.mode is GoalMode.MOVES:
        exhausted = state.moves_used >= goal.threshold
    else:
        exhausted = state.time_remaining <= 0
    if not exhausted:
        return None
    if goal.target_score == 0:
        return SessionOutcome.COMPLETE
    return SessionOutcome.FAILED


def _rate(value: float, thresholds: Sequence[float]) -> int:
    for index, threshold in enumerate(thresholds):
        if value >= threshold:
            return len(thresholds) - index
    return 0


def calculate_stars(state: SessionState, config: PuzzleConfig) -> int:
    if state.outcome is SessionOutcome.FAILED:
        return 0
    goal = config.goal
    if goal.mode in (GoalMode.SCORE, GoalMode.TARGET):
        return _rate(state.score / score_target(state, config), SCORE_STAR_RATIOS)
    if goal.mode is GoalMode.MOVES:
        if state.moves_used == 0:
            return len(MOVE_STAR_EFFICIENCY)
        return _rate(goal.threshold / state.moves_used, MOVE_STAR_EFFICIENCY)
    return _rate(state.time_remaining / goal.threshold, TIME_STAR_FRACTIONS)
