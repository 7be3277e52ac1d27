from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(slots=True)
class Board:
    """Grid dimensions plus the cell matrix of tile entity ids.

    ``cells[row][col]`` is None only while a cascade has emptied the cell and
    gravity/refill has not yet repopulated it. Row 0 is the top row.
    """
    rows: int
    cols: int
    type_count: int
    cells: List[List[Optional[int]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[None] * self.cols for _ in range(self.rows)]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols
