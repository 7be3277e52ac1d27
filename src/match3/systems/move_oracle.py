from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from esper import World

from match3.components.tile import TileType
from match3.constants import MATCH_MIN_LENGTH, RESHUFFLE_MAX_ATTEMPTS
from match3.errors import ReshuffleExhausted
from match3.systems.grid_ops import Layout, Position, iter_tiles, tile_type_grid
from match3.systems.match import find_matches_in

logger = logging.getLogger(__name__)


def predict_swap_creates_match(
    layout: Layout, src: Position, dst: Position, match_min: int = MATCH_MIN_LENGTH
) -> bool:
    """Return True if swapping src/dst in ``layout`` yields at least one match.

    The layout is swapped in place for the scan and swapped back before
    returning, so callers see it unchanged.
    """
    (sr, sc), (dr, dc) = src, dst
    if layout[sr][sc] is None or layout[dr][dc] is None:
        return False
    layout[sr][sc], layout[dr][dc] = layout[dr][dc], layout[sr][sc]
    try:
        return bool(find_matches_in(layout, match_min))
    finally:
        layout[sr][sc], layout[dr][dc] = layout[dr][dc], layout[sr][sc]


def _iter_adjacent_pairs(rows: int, cols: int):
    for row in range(rows):
        for col in range(cols):
            if col + 1 < cols:
                yield (row, col), (row, col + 1)
            if row + 1 < rows:
                yield (row, col), (row + 1, col)


def find_valid_swaps(world: World, match_min: int = MATCH_MIN_LENGTH) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    layout = tile_type_grid(world)
    rows = len(layout)
    cols = len(layout[0]) if rows else 0
    return [
        (src, dst)
        for src, dst in _iter_adjacent_pairs(rows, cols)
        if predict_swap_creates_match(layout, src, dst, match_min)
    ]


def first_valid_swap(layout: Layout, match_min: int = MATCH_MIN_LENGTH) -> Optional[Tuple[Position, Position]]:
    rows = len(layout)
    cols = len(layout[0]) if rows else 0
    for src, dst in _iter_adjacent_pairs(rows, cols):
        if predict_swap_creates_match(layout, src, dst, match_min):
            return src, dst
    return None


def has_any_legal_move(world: World, match_min: int = MATCH_MIN_LENGTH) -> bool:
    """True when at least one adjacent swap on the live grid produces a match.

    Works on a copied type layout, so the world is never mutated.
    """
    return first_valid_swap(tile_type_grid(world), match_min) is not None


def reshuffle(
    world: World,
    rng: random.Random,
    *,
    max_attempts: int = RESHUFFLE_MAX_ATTEMPTS,
    match_min: int = MATCH_MIN_LENGTH,
) -> int:
    """Permute tile type ids (not entities) until the grid is match-free and solvable.

    Returns the number of attempts used. Raises ReshuffleExhausted once
    ``max_attempts`` permutations all fail; the type ids are then left in the
    last tried order and the caller is expected to regenerate the grid.
    """
    tiles = [world.component_for_entity(entity, TileType) for _, entity in iter_tiles(world)]
    type_ids = [tile.type_id for tile in tiles]
    for attempt in range(1, max_attempts + 1):
        rng.shuffle(type_ids)
        for tile, type_id in zip(tiles, type_ids):
            tile.type_id = type_id
        layout = tile_type_grid(world)
        if find_matches_in(layout, match_min):
            continue
        if first_valid_swap(layout, match_min) is None:
            continue
        logger.info("Reshuffled board in %d attempt(s)", attempt)
        return attempt
    raise ReshuffleExhausted(max_attempts)
