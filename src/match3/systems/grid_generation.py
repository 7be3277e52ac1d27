from __future__ import annotations

import logging
import random
from typing import List

from esper import World

from match3.constants import GENERATE_MAX_ATTEMPTS, MATCH_MIN_LENGTH
from match3.errors import InvalidConfiguration, ReshuffleExhausted
from match3.systems.grid_ops import apply_layout, get_board
from match3.systems.match import find_matches_in
from match3.systems.move_oracle import first_valid_swap

logger = logging.getLogger(__name__)


def _completes_run(values: List[int], type_id: int, length: int) -> bool:
    if len(values) < length:
        return False
    return all(value == type_id for value in values[-length:])


def generate_layout(
    width: int,
    height: int,
    type_count: int,
    rng: random.Random,
    *,
    match_min: int = MATCH_MIN_LENGTH,
    max_attempts: int = GENERATE_MAX_ATTEMPTS,
) -> List[List[int]]:
    """Return a ``height`` x ``width`` grid of type ids with no matches.

    Each cell draws from the types that would not complete a run with its left
    or upper neighbours, falling back to every type when none qualifies. The
    whole grid is redrawn until it scans clean. Output is fully determined by
    the state of ``rng``.
    """
    if type_count < match_min:
        raise InvalidConfiguration(f"type_count {type_count} is below the match length {match_min}")
    if width < 1 or height < 1:
        raise InvalidConfiguration(f"Grid {width}x{height} has no cells")
    choices = list(range(type_count))
    for _ in range(max_attempts):
        layout: List[List[int]] = []
        for row in range(height):
            row_values: List[int] = []
            for col in range(width):
                column_values = [layout[r][col] for r in range(row)]
                available = [
                    t for t in choices
                    if not _completes_run(row_values, t, match_min - 1)
                    and not _completes_run(column_values, t, match_min - 1)
                ]
                row_values.append(rng.choice(available or choices))
            layout.append(row_values)
        if not find_matches_in(layout, match_min):
            return layout
    raise InvalidConfiguration(f"Could not generate a match-free {width}x{height} grid")


def regenerate_solvable(
    world: World,
    rng: random.Random,
    *,
    match_min: int = MATCH_MIN_LENGTH,
    max_attempts: int = GENERATE_MAX_ATTEMPTS,
) -> List[List[int]]:
    """Respawn the whole board until it has no matches and at least one valid move."""
    board = get_board(world)
    for attempt in range(1, max_attempts + 1):
        layout = generate_layout(board.cols, board.rows, board.type_count, rng, match_min=match_min)
        if first_valid_swap([list(row) for row in layout], match_min) is None:
            continue
        apply_layout(world, layout)
        logger.debug("Generated solvable board in %d attempt(s)", attempt)
        return layout
    raise ReshuffleExhausted(max_attempts, "Unable to generate a match-free board with valid swaps")
