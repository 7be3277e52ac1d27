from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from esper import World

from match3.components.board import Board
from match3.components.board_position import BoardPosition
from match3.components.tile import SpecialKind, SpecialTile, TileType
from match3.errors import InvalidMove

logger = logging.getLogger(__name__)

Position = Tuple[int, int]
Layout = List[List[Optional[int]]]


@dataclass(slots=True)
class GravityMove:
    entity: int
    source: Position
    target: Position


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found")


def get_entity_at(world: World, row: int, col: int) -> int | None:
    board = get_board(world)
    if not board.in_bounds(row, col):
        return None
    return board.cells[row][col]


def iter_tiles(world: World) -> Iterator[Tuple[Position, int]]:
    """Yield occupied cells in row-major order."""
    board = get_board(world)
    for row in range(board.rows):
        for col in range(board.cols):
            entity = board.cells[row][col]
            if entity is not None:
                yield (row, col), entity


def tile_type_grid(world: World) -> Layout:
    """Return a row-major copy of the type ids; empty cells are None."""
    board = get_board(world)
    layout: Layout = []
    for row in range(board.rows):
        row_values: List[Optional[int]] = []
        for col in range(board.cols):
            entity = board.cells[row][col]
            if entity is None:
                row_values.append(None)
            else:
                row_values.append(world.component_for_entity(entity, TileType).type_id)
        layout.append(row_values)
    return layout


def special_kind_of(world: World, entity: int) -> SpecialKind:
    special = world.try_component(entity, SpecialTile)
    return special.kind if special is not None else SpecialKind.NONE


def is_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)


def validate_swap(world: World, a: Position, b: Position) -> None:
    board = get_board(world)
    for pos in (a, b):
        if not board.in_bounds(*pos):
            raise InvalidMove(f"Position {pos} is outside the {board.rows}x{board.cols} grid")
    if not is_adjacent(a, b):
        raise InvalidMove(f"Positions {a} and {b} are not adjacent")
    if board.cells[a[0]][a[1]] is None or board.cells[b[0]][b[1]] is None:
        raise InvalidMove(f"Cannot swap an empty cell ({a} <-> {b})")


def spawn_tile(world: World, row: int, col: int, type_id: int) -> int:
    board = get_board(world)
    entity = world.create_entity(BoardPosition(row=row, col=col), TileType(type_id=type_id))
    board.cells[row][col] = entity
    return entity


def swap_tiles(world: World, a: Position, b: Position) -> None:
    """Exchange the coordinates of the tiles at ``a`` and ``b``.

    Raises InvalidMove before touching the grid when the cells are out of
    bounds, empty or not 4-directionally adjacent. Applying the same swap
    twice restores the original arrangement.
    """
    validate_swap(world, a, b)
    board = get_board(world)
    ent_a = board.cells[a[0]][a[1]]
    ent_b = board.cells[b[0]][b[1]]
    board.cells[a[0]][a[1]], board.cells[b[0]][b[1]] = ent_b, ent_a
    pos_a: BoardPosition = world.component_for_entity(ent_a, BoardPosition)
    pos_b: BoardPosition = world.component_for_entity(ent_b, BoardPosition)
    pos_a.row, pos_a.col, pos_b.row, pos_b.col = pos_b.row, pos_b.col, pos_a.row, pos_a.col


def remove_tiles(world: World, positions: Iterable[Position]) -> List[Position]:
    """Delete the tile entities at positions, leaving the cells empty."""
    board = get_board(world)
    removed: List[Position] = []
    for row, col in sorted(set(positions)):
        entity = board.cells[row][col]
        if entity is None:
            continue
        world.delete_entity(entity, immediate=True)
        board.cells[row][col] = None
        removed.append((row, col))
    return removed


def compact_column(world: World, col: int, rng: random.Random) -> Tuple[List[GravityMove], List[Position]]:
    """Let the tiles of ``col`` fall to the bottom and refill the top.

    Surviving tiles keep their relative order. Fresh tiles are drawn
    uniformly over the board's type count with no adjacency constraint, so the
    refill may create new matches that drive further cascades.
    """
    board = get_board(world)
    survivors = [board.cells[row][col] for row in range(board.rows) if board.cells[row][col] is not None]
    empty = board.rows - len(survivors)
    moves: List[GravityMove] = []
    if empty == 0:
        return moves, []
    for index, entity in enumerate(survivors):
        target_row = empty + index
        position: BoardPosition = world.component_for_entity(entity, BoardPosition)
        if position.row != target_row:
            moves.append(GravityMove(entity=entity, source=(position.row, col), target=(target_row, col)))
            position.row = target_row
        board.cells[target_row][col] = entity
    spawned: List[Position] = []
    for row in range(empty):
        board.cells[row][col] = None
        spawn_tile(world, row, col, rng.randrange(board.type_count))
        spawned.append((row, col))
    return moves, spawned


def collapse_and_refill(
    world: World, columns: Iterable[int], rng: random.Random
) -> Tuple[List[GravityMove], List[Position]]:
    moves: List[GravityMove] = []
    spawned: List[Position] = []
    for col in sorted(set(columns)):
        col_moves, col_spawned = compact_column(world, col, rng)
        moves.extend(col_moves)
        spawned.extend(col_spawned)
    logger.debug("Gravity moved %d tiles and spawned %d", len(moves), len(spawned))
    return moves, spawned


def clear_board(world: World) -> None:
    board = get_board(world)
    for _, entity in list(iter_tiles(world)):
        world.delete_entity(entity, immediate=True)
    board.cells = [[None] * board.cols for _ in range(board.rows)]


def apply_layout(world: World, layout: Sequence[Sequence[int]]) -> None:
    """Replace every tile with fresh entities typed by ``layout``."""
    board = get_board(world)
    if len(layout) != board.rows or any(len(row) != board.cols for row in layout):
        raise ValueError(f"Layout shape does not match the {board.rows}x{board.cols} board")
    clear_board(world)
    for row in range(board.rows):
        for col in range(board.cols):
            spawn_tile(world, row, col, layout[row][col])
