import random

from esper import World

from match3.components.board import Board
from match3.components.session_state import SessionState
from match3.config import GoalMode, PuzzleConfig


def create_world(
    config: PuzzleConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> World:
    """Create a world holding the session resource and an empty board.

    Tiles are spawned later by ``regenerate_solvable`` or ``apply_layout``; the board entity only
    carries the dimensions and the (initially empty) cell matrix.
    """
    config = config or PuzzleConfig()
    world = World()
    setattr(world, "random", rng or random.Random())

    state = SessionState()
    if config.goal.mode is GoalMode.TIME:
        state.time_remaining = float(config.goal.threshold)
    world.create_entity(state, config)

    world.create_entity(
        Board(rows=config.grid_height, cols=config.grid_width, type_count=config.type_count)
    )
    return world
