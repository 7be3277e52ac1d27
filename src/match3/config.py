"""Validated puzzle configuration.

Settings are a single frozen object. Any combination that cannot hold the grid
invariants is rejected with ``InvalidConfiguration``.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping

from match3.constants import (
    BASE_SCORE,
    BOMB_RADIUS,
    COMBO_STEP,
    GENERATE_MAX_ATTEMPTS,
    GRID_COLS,
    GRID_ROWS,
    MATCH_MIN_LENGTH,
    MAX_TILE_TYPES,
    RESHUFFLE_MAX_ATTEMPTS,
    SPECIAL_TILE_CHANCE,
    TARGET_SCORE,
    TILE_TYPES,
)
from match3.errors import InvalidConfiguration


class GoalMode(Enum):
    SCORE = "score"
    MOVES = "moves"
    TIME = "time"
    TARGET = "target"


@dataclass(frozen=True, slots=True)
class Goal:
    """Level goal.

    ``threshold`` is the score per level (SCORE), the score to reach (TARGET),
    the move limit (MOVES) or the time limit in seconds (TIME). For the two
    limited modes ``target_score`` decides whether running out counts as a win.
    """
    mode: GoalMode = GoalMode.SCORE
    threshold: float = TARGET_SCORE
    target_score: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.mode, GoalMode):
            raise InvalidConfiguration(f"Unknown goal mode {self.mode!r}")
        if self.threshold <= 0:
            raise InvalidConfiguration(f"Goal threshold must be positive, got {self.threshold}")
        if self.target_score < 0:
            raise InvalidConfiguration(f"Goal target_score must not be negative, got {self.target_score}")


@dataclass(frozen=True, slots=True)
class PuzzleConfig:
    grid_width: int = GRID_COLS
    grid_height: int = GRID_ROWS
    type_count: int = TILE_TYPES
    match_min_length: int = MATCH_MIN_LENGTH
    base_score: int = BASE_SCORE
    combo_step: float = COMBO_STEP
    special_tile_chance: float = SPECIAL_TILE_CHANCE
    bomb_radius: int = BOMB_RADIUS
    goal: Goal = field(default_factory=Goal)
    shuffle_allowed: bool = True
    reshuffle_max_attempts: int = RESHUFFLE_MAX_ATTEMPTS
    generate_max_attempts: int = GENERATE_MAX_ATTEMPTS
    max_type_count: int = MAX_TILE_TYPES

    def __post_init__(self) -> None:
        if self.match_min_length < 3:
            raise InvalidConfiguration(f"match_min_length must be at least 3, got {self.match_min_length}")
        if self.grid_width < self.match_min_length or self.grid_height < self.match_min_length:
            raise InvalidConfiguration(
                f"Grid {self.grid_width}x{self.grid_height} is smaller than the match length {self.match_min_length}"
            )
        if self.type_count < self.match_min_length:
            raise InvalidConfiguration(
                f"type_count {self.type_count} is below the match length {self.match_min_length}"
            )
        if self.type_count > self.max_type_count:
            raise InvalidConfiguration(
                f"type_count {self.type_count} exceeds max_type_count {self.max_type_count}"
            )
        if self.base_score < 0 or self.combo_step < 0 or self.bomb_radius < 0:
            raise InvalidConfiguration("base_score, combo_step and bomb_radius must not be negative")
        if not 0.0 <= self.special_tile_chance <= 1.0:
            raise InvalidConfiguration(f"special_tile_chance must lie in [0, 1], got {self.special_tile_chance}")
        if self.reshuffle_max_attempts < 1 or self.generate_max_attempts < 1:
            raise InvalidConfiguration("Attempt caps must be at least 1")
        if not isinstance(self.goal, Goal):
            raise InvalidConfiguration(f"goal must be a Goal, got {type(self.goal).__name__}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PuzzleConfig":
        """Build a config from a plain mapping such as a parsed settings file.

        Keys are the field names. ``goal`` may be a nested mapping of
        ``mode`` (given by name), ``threshold`` and ``target_score``.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidConfiguration(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        values = dict(data)
        goal = values.get("goal")
        if isinstance(goal, Mapping):
            goal_values = dict(goal)
            unknown_goal = set(goal_values) - {"mode", "threshold", "target_score"}
            if unknown_goal:
                raise InvalidConfiguration(f"Unknown goal keys: {', '.join(sorted(unknown_goal))}")
            mode = goal_values.get("mode", GoalMode.SCORE)
            if not isinstance(mode, GoalMode):
                try:
                    mode = GoalMode(str(mode).lower())
                except ValueError as exc:
                    raise InvalidConfiguration(f"Unknown goal mode {mode!r}") from exc
            goal_values["mode"] = mode
            values["goal"] = Goal(**goal_values)
        return cls(**values)
