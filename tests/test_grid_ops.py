import random

import pytest

from match3.components.board_position import BoardPosition
from match3.errors import InvalidMove
from match3.systems.grid_ops import (
    compact_column,
    get_entity_at,
    is_adjacent,
    remove_tiles,
    swap_tiles,
    tile_type_grid,
)
from match3.utils.snapshot import take_snapshot
from tests.helpers import base_layout, build_world


def test_is_adjacent():
    assert is_adjacent((0, 0), (0, 1))
    assert is_adjacent((0, 0), (1, 0))
    assert not is_adjacent((0, 0), (1, 1))
    assert not is_adjacent((0, 0), (2, 0))
    assert not is_adjacent((0, 0), (0, 0))


def test_swap_moves_tiles_and_round_trips():
    _, world = build_world(base_layout())
    before = take_snapshot(world)
    ent_a = get_entity_at(world, 1, 1)
    ent_b = get_entity_at(world, 1, 2)

    swap_tiles(world, (1, 1), (1, 2))
    assert get_entity_at(world, 1, 2) == ent_a
    assert get_entity_at(world, 1, 1) == ent_b
    pos_a = world.component_for_entity(ent_a, BoardPosition)
    assert (pos_a.row, pos_a.col) == (1, 2)

    swap_tiles(world, (1, 1), (1, 2))
    assert take_snapshot(world) == before


@pytest.mark.parametrize("a,b", [((0, 0), (0, 2)), ((0, 0), (1, 1)), ((0, 0), (-1, 0)), ((4, 5), (5, 5))])
def test_invalid_swap_raises_without_mutation(a, b):
    _, world = build_world(base_layout())
    before = tile_type_grid(world)
    with pytest.raises(InvalidMove):
        swap_tiles(world, a, b)
    assert tile_type_grid(world) == before


def test_compact_column_preserves_order_and_refills_top():
    _, world = build_world(base_layout())
    column = [get_entity_at(world, row, 1) for row in range(5)]
    remove_tiles(world, [(2, 1), (4, 1)])
    assert get_entity_at(world, 2, 1) is None

    moves, spawned = compact_column(world, 1, random.Random(5))

    assert [get_entity_at(world, row, 1) for row in (2, 3, 4)] == [column[0], column[1], column[3]]
    assert spawned == [(0, 1), (1, 1)]
    assert {(move.source, move.target) for move in moves} == {
        ((0, 1), (2, 1)),
        ((1, 1), (3, 1)),
        ((3, 1), (4, 1)),
    }
    for row in range(5):
        entity = get_entity_at(world, row, 1)
        assert entity is not None
        position = world.component_for_entity(entity, BoardPosition)
        assert (position.row, position.col) == (row, 1)
    assert all(value is not None and 0 <= value < 8 for value in (tile_type_grid(world)[r][1] for r in range(5)))
    # Untouched columns keep their tiles.
    assert tile_type_grid(world)[2][0] == base_layout()[2][0]


def test_compact_full_column_is_noop():
    _, world = build_world(base_layout())
    before = tile_type_grid(world)
    moves, spawned = compact_column(world, 3, random.Random(0))
    assert moves == [] and spawned == []
    assert tile_type_grid(world) == before
