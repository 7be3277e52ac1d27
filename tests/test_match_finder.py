from match3.systems.match import MatchAxis, find_matches, find_matches_in, matched_positions
from tests.helpers import base_layout, build_world


def test_base_layout_has_no_matches():
    assert find_matches_in(base_layout()) == []


def test_single_horizontal_run_of_three():
    layout = base_layout()
    for col in (2, 3, 4):
        layout[0][col] = 2
    _, world = build_world(layout)

    groups = find_matches(world)

    assert len(groups) == 1
    group = groups[0]
    assert len(group) == 3
    assert group.axis is MatchAxis.HORIZONTAL
    assert group.type_id == 2
    assert group.positions == ((0, 2), (0, 3), (0, 4))


def test_runs_extend_greedily():
    layout = base_layout()
    for row in range(5):
        layout[row][4] = 1
    groups = find_matches_in(layout)
    assert len(groups) == 1
    assert groups[0].axis is MatchAxis.VERTICAL
    assert len(groups[0]) == 5


def test_pair_is_not_a_match():
    layout = base_layout()
    layout[3][0] = layout[3][1] = 0
    assert find_matches_in(layout) == []


def test_shared_tile_reported_in_both_groups():
    layout = base_layout()
    for col in range(3):
        layout[0][col] = 0
    for row in range(3):
        layout[row][0] = 0

    groups = find_matches_in(layout)

    assert [group.axis for group in groups] == [MatchAxis.HORIZONTAL, MatchAxis.VERTICAL]
    assert all((0, 0) in group for group in groups)
    assert len(matched_positions(groups)) == 5


def test_empty_cells_break_runs():
    layout = base_layout()
    layout[1][0] = layout[1][1] = layout[1][3] = 0
    layout[1][2] = None
    assert find_matches_in(layout) == []


def test_custom_minimum_length():
    layout = base_layout()
    for col in range(3):
        layout[2][col] = 1
    assert len(find_matches_in(layout, 3)) == 1
    assert find_matches_in(layout, 4) == []
