from __future__ import annotations

import random
from typing import Dict, List, Sequence, Tuple

from esper import World

from match3.components.tile import SpecialKind, SpecialTile
from match3.config import Goal, GoalMode, PuzzleConfig
from match3.events.bus import EventBus
from match3.systems.grid_ops import apply_layout, get_entity_at
from match3.world import create_world


def base_layout(rows: int = 5, cols: int = 6, offset: int = 3) -> List[List[int]]:
    """Match-free filler with no equal neighbours and no legal move.

    Types ``offset .. offset+4`` are used, leaving ``0 .. offset-1`` free for
    the cells a test wants to control.
    """
    return [[offset + (r + 2 * c) % 5 for c in range(cols)] for r in range(rows)]


def make_config(rows: int = 5, cols: int = 6, **overrides) -> PuzzleConfig:
    values = dict(
        grid_width=cols,
        grid_height=rows,
        type_count=8,
        special_tile_chance=0.0,
        goal=Goal(GoalMode.SCORE, 1_000_000),
    )
    values.update(overrides)
    return PuzzleConfig(**values)


def build_world(
    layout: Sequence[Sequence[int]],
    config: PuzzleConfig | None = None,
    *,
    seed: int = 0,
    specials: Dict[Tuple[int, int], SpecialKind] | None = None,
) -> Tuple[EventBus, World]:
    rows, cols = len(layout), len(layout[0])
    config = config or make_config(rows, cols)
    bus = EventBus()
    world = create_world(config, rng=random.Random(seed))
    apply_layout(world, layout)
    for (row, col), kind in (specials or {}).items():
        world.add_component(get_entity_at(world, row, col), SpecialTile(kind=kind))
    return bus, world
