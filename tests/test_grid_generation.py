import random

import pytest

from match3.errors import InvalidConfiguration
from match3.systems.grid_generation import generate_layout, regenerate_solvable
from match3.systems.grid_ops import iter_tiles
from match3.systems.match import find_matches, find_matches_in
from match3.systems.move_oracle import has_any_legal_move
from match3.world import create_world
from tests.helpers import make_config


SEEDED_8X8_LAYOUT = [
    [0, 0, 3, 1, 1, 2, 0, 4],
    [0, 4, 3, 0, 0, 1, 1, 2],
    [1, 4, 1, 4, 3, 1, 3, 4],
    [2, 0, 1, 3, 2, 3, 1, 1],
    [2, 0, 0, 4, 0, 2, 2, 3],
    [0, 4, 4, 0, 3, 0, 4, 2],
    [4, 2, 4, 1, 0, 0, 2, 2],
    [0, 1, 0, 3, 2, 4, 2, 1],
]


def test_seeded_generation_is_deterministic():
    first = generate_layout(8, 8, 5, random.Random(42))
    second = generate_layout(8, 8, 5, random.Random(42))
    assert first == second
    assert first == SEEDED_8X8_LAYOUT
    assert len(first) == 8 and all(len(row) == 8 for row in first)
    assert all(0 <= value < 5 for row in first for value in row)
    assert find_matches_in(first) == []


@pytest.mark.parametrize("width,height,type_count", [(3, 3, 3), (8, 8, 3), (5, 9, 4), (10, 6, 5), (7, 7, 8)])
def test_generated_layouts_never_contain_matches(width, height, type_count):
    for seed in range(25):
        layout = generate_layout(width, height, type_count, random.Random(seed))
        assert len(layout) == height
        assert all(len(row) == width for row in layout)
        assert find_matches_in(layout) == [], f"seed {seed} produced a match"


def test_longer_match_length_is_respected():
    layout = generate_layout(8, 8, 4, random.Random(7), match_min=4)
    assert find_matches_in(layout, 4) == []


def test_too_few_types_rejected():
    with pytest.raises(InvalidConfiguration):
        generate_layout(8, 8, 2, random.Random(1))


def test_regenerate_solvable_fills_board():
    world = create_world(make_config(6, 6, type_count=5), rng=random.Random(3))
    regenerate_solvable(world, random.Random(3))
    assert len(list(iter_tiles(world))) == 36
    assert find_matches(world) == []
    assert has_any_legal_move(world)
