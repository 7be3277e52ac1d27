from dataclasses import dataclass
from enum import Enum


class SpecialKind(Enum):
    NONE = "none"
    BOMB = "bomb"
    CLEAR_ROW = "clear_row"
    CLEAR_COLUMN = "clear_column"
    CLEAR_COLOR = "clear_color"


@dataclass(slots=True)
class TileType:
    """Per-tile type assignment; ``type_id`` ranges over ``0..type_count-1``."""
    type_id: int


@dataclass(slots=True)
class SpecialTile:
    """Present only on tiles promoted by a long match."""
    kind: SpecialKind


@dataclass(slots=True)
class Selected:
    """Tag marking the tile the player picked as the first half of a swap."""
