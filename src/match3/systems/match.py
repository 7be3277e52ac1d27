from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from esper import World

from match3.constants import MATCH_MIN_LENGTH
from match3.systems.grid_ops import Position, tile_type_grid


class MatchAxis(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True, slots=True)
class MatchGroup:
    """A maximal run of identical type ids on one axis, in scan order."""
    positions: Tuple[Position, ...]
    type_id: int
    axis: MatchAxis

    def __len__(self) -> int:
        return len(self.positions)

    def __contains__(self, position: object) -> bool:
        return position in self.positions


def find_matches_in(
    layout: Sequence[Sequence[Optional[int]]], match_min: int = MATCH_MIN_LENGTH
) -> List[MatchGroup]:
    """Detect every horizontal and vertical run of length >= match_min.

    Rows are scanned left-to-right first, then columns top-to-bottom. A tile
    on both a horizontal and a vertical run appears in both groups; callers
    that remove tiles union the positions. Empty cells (None) break runs.
    """
    rows = len(layout)
    cols = len(layout[0]) if rows else 0
    matches: List[MatchGroup] = []
    # Horizontal runs
    for r in range(rows):
        run: List[Position] = []
        last_type = None
        for c in range(cols):
            tval = layout[r][c]
            if tval is not None and tval == last_type:
                run.append((r, c))
            else:
                if len(run) >= match_min:
                    matches.append(MatchGroup(tuple(run), last_type, MatchAxis.HORIZONTAL))
                run = [(r, c)] if tval is not None else []
                last_type = tval
        if len(run) >= match_min:
            matches.append(MatchGroup(tuple(run), last_type, MatchAxis.HORIZONTAL))
    # Vertical runs
    for c in range(cols):
        run = []
        last_type = None
        for r in range(rows):
            tval = layout[r][c]
            if tval is not None and tval == last_type:
                run.append((r, c))
            else:
                if len(run) >= match_min:
                    matches.append(MatchGroup(tuple(run), last_type, MatchAxis.VERTICAL))
                run = [(r, c)] if tval is not None else []
                last_type = tval
        if len(run) >= match_min:
            matches.append(MatchGroup(tuple(run), last_type, MatchAxis.VERTICAL))
    return matches


def find_matches(world: World, match_min: int = MATCH_MIN_LENGTH) -> List[MatchGroup]:
    return find_matches_in(tile_type_grid(world), match_min)


def matched_positions(groups: Sequence[MatchGroup]) -> List[Position]:
    return sorted({pos for group in groups for pos in group.positions})
