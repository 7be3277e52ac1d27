from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from esper import World

from match3.components.tile import Selected, SpecialKind, TileType
from match3.systems.grid_ops import get_board, special_kind_of


@dataclass(frozen=True, slots=True)
class TileView:
    entity: int
    row: int
    col: int
    type_id: int
    special: SpecialKind
    selected: bool


@dataclass(frozen=True, slots=True)
class GridSnapshot:
    """Immutable copy of the board handed to renderers and listeners."""
    rows: int
    cols: int
    cells: Tuple[Tuple[Optional[TileView], ...], ...]

    def tile_at(self, row: int, col: int) -> Optional[TileView]:
        return self.cells[row][col]

    def tiles(self) -> Iterator[TileView]:
        for row in self.cells:
            for tile in row:
                if tile is not None:
                    yield tile

    def type_ids(self) -> Tuple[Tuple[Optional[int], ...], ...]:
        return tuple(
            tuple(tile.type_id if tile is not None else None for tile in row)
            for row in self.cells
        )

    def is_full(self) -> bool:
        return all(tile is not None for row in self.cells for tile in row)


def take_snapshot(world: World) -> GridSnapshot:
    board = get_board(world)
    rows = []
    for row in range(board.rows):
        views = []
        for col in range(board.cols):
            entity = board.cells[row][col]
            if entity is None:
                views.append(None)
                continue
            tile: TileType = world.component_for_entity(entity, TileType)
            views.append(
                TileView(
                    entity=entity,
                    row=row,
                    col=col,
                    type_id=tile.type_id,
                    special=special_kind_of(world, entity),
                    selected=world.has_component(entity, Selected),
                )
            )
        rows.append(tuple(views))
    return GridSnapshot(rows=board.rows, cols=board.cols, cells=tuple(rows))
