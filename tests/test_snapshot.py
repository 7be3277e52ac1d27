from dataclasses import FrozenInstanceError

import pytest

from match3.components.tile import Selected, SpecialKind
from match3.systems.grid_ops import get_entity_at, remove_tiles
from match3.utils.snapshot import take_snapshot
from tests.helpers import base_layout, build_world


def test_snapshot_mirrors_the_grid():
    layout = base_layout()
    _, world = build_world(layout, specials={(1, 2): SpecialKind.BOMB})
    world.add_component(get_entity_at(world, 0, 0), Selected())

    snapshot = take_snapshot(world)

    assert snapshot.type_ids() == tuple(tuple(row) for row in layout)
    assert snapshot.tile_at(1, 2).special is SpecialKind.BOMB
    assert snapshot.tile_at(0, 0).selected is True
    assert snapshot.tile_at(0, 1).selected is False
    assert snapshot.is_full()
    assert len(list(snapshot.tiles())) == 30


def test_snapshot_is_detached_from_later_changes():
    _, world = build_world(base_layout())
    snapshot = take_snapshot(world)
    remove_tiles(world, [(0, 0)])
    assert snapshot.is_full()
    assert take_snapshot(world).tile_at(0, 0) is None
    with pytest.raises(FrozenInstanceError):
        snapshot.rows = 3
