from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from esper import World

from match3.components.tile import SpecialKind, SpecialTile, TileType
from match3.events.bus import EVENT_SPECIAL_DETONATED, EventBus
from match3.systems.grid_ops import (
    GravityMove,
    Position,
    collapse_and_refill,
    get_board,
    iter_tiles,
    remove_tiles,
    special_kind_of,
)
from match3.systems.match import MatchAxis, MatchGroup
from match3.utils.session import get_config, world_random

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Detonation:
    position: Position
    kind: SpecialKind
    affected: Tuple[Position, ...]


@dataclass(slots=True)
class ResolutionResult:
    """Outcome of one resolution pass.

    ``removed`` excludes the cells retained as new specials; ``scored_count``
    includes them, since every matched or detonated cell is worth points.
    """
    removed: FrozenSet[Position]
    score_delta: int
    spawned_specials: List[Tuple[Position, SpecialKind]] = field(default_factory=list)
    detonations: List[Detonation] = field(default_factory=list)
    scored_count: int = 0


@dataclass(slots=True)
class FallResult:
    moves: List[GravityMove]
    spawned: List[Position]


class ResolutionEngine:
    """Turns match groups into removals, special promotions and score.

    Promotion by run length, relative to the minimum match length:
      - min + 2 or longer: colour bomb (clears every tile of its type)
      - min + 1: line clear along the group's axis
      - exactly min: bomb, with probability ``special_tile_chance``
    Each group spawns at most one special on a representative cell. The cell is
    the swapped tile when the group contains one, otherwise the middle of the
    run. Cells already carrying a special are skipped, and when an earlier
    group has claimed the cell the next-nearest free cell of the run is used,
    lower index first. Groups are processed in finder order, so the outcome is
    deterministic for a given rng state.
    """

    def __init__(self, world: World, event_bus: EventBus | None = None, *, rng: random.Random | None = None):
        self.world = world
        self.event_bus = event_bus
        self.rng = rng or world_random(world)
        self.config = get_config(world)

    # -- scoring -----------------------------------------------------------

    def combo_multiplier(self, combo_index: int) -> float:
        return 1 + (max(combo_index, 1) - 1) * self.config.combo_step

    def score_for(self, tile_count: int, combo_index: int) -> int:
        raw = tile_count * self.config.base_score * self.combo_multiplier(combo_index)
        # Absorb float error so 3 * 10 * 1.3 floors to 39, not 38.
        return math.floor(raw + 1e-9)

    # -- promotion ---------------------------------------------------------

    def promotion_for(self, group: MatchGroup) -> SpecialKind:
        minimum = self.config.match_min_length
        length = len(group)
        if length >= minimum + 2:
            return SpecialKind.CLEAR_COLOR
        if length == minimum + 1:
            if group.axis is MatchAxis.HORIZONTAL:
                return SpecialKind.CLEAR_ROW
            return SpecialKind.CLEAR_COLUMN
        if self.config.special_tile_chance > 0 and self.rng.random() < self.config.special_tile_chance:
            return SpecialKind.BOMB
        return SpecialKind.NONE

    def _pick_cell(
        self, group: MatchGroup, claimed: Dict[Position, SpecialKind], preferred: Sequence[Position]
    ) -> Optional[Position]:
        board = get_board(self.world)
        free: Set[Position] = set()
        for pos in group.positions:
            entity = board.cells[pos[0]][pos[1]]
            if pos in claimed or entity is None:
                continue
            if special_kind_of(self.world, entity) is not SpecialKind.NONE:
                continue
            free.add(pos)
        if not free:
            return None
        for pos in preferred:
            if pos in free:
                return pos
        middle = len(group) // 2
        for index in sorted(range(len(group)), key=lambda i: (abs(i - middle), i)):
            if group.positions[index] in free:
                return group.positions[index]
        return None

    # -- detonation --------------------------------------------------------

    def detonate(self, position: Position) -> Set[Position]:
        """Cells cleared by the special tile at ``position`` (including itself)."""
        board = get_board(self.world)
        row, col = position
        entity = board.cells[row][col]
        if entity is None:
            return set()
        kind = special_kind_of(self.world, entity)
        if kind is SpecialKind.BOMB:
            radius = self.config.bomb_radius
            return {
                (r, c)
                for r in range(row - radius, row + radius + 1)
                for c in range(col - radius, col + radius + 1)
                if board.in_bounds(r, c) and board.cells[r][c] is not None
            }
        if kind is SpecialKind.CLEAR_ROW:
            return {(row, c) for c in range(board.cols) if board.cells[row][c] is not None}
        if kind is SpecialKind.CLEAR_COLUMN:
            return {(r, col) for r in range(board.rows) if board.cells[r][col] is not None}
        if kind is SpecialKind.CLEAR_COLOR:
            type_id = self.world.component_for_entity(entity, TileType).type_id
            return {
                pos for pos, other in iter_tiles(self.world)
                if self.world.component_for_entity(other, TileType).type_id == type_id
            }
        return {position}

    # -- resolution --------------------------------------------------------

    def resolve(
        self,
        groups: Sequence[MatchGroup],
        combo_index: int = 1,
        *,
        preferred: Iterable[Position] = (),
    ) -> ResolutionResult:
        """Decide removals, promotions and score for one pass without mutating the grid."""
        if not groups:
            return ResolutionResult(removed=frozenset(), score_delta=0)
        preferred = tuple(preferred)
        board = get_board(self.world)
        claimed: Dict[Position, SpecialKind] = {}
        spawned: List[Tuple[Position, SpecialKind]] = []
        for group in groups:
            kind = self.promotion_for(group)
            if kind is SpecialKind.NONE:
                continue
            cell = self._pick_cell(group, claimed, preferred)
            if cell is None:
                continue
            claimed[cell] = kind
            spawned.append((cell, kind))

        matched = {pos for group in groups for pos in group.positions}
        affected = set(matched)
        pending = [
            pos for pos in sorted(matched)
            if pos not in claimed and self._has_special(board, pos)
        ]
        detonated: Set[Position] = set()
        detonations: List[Detonation] = []
        while pending:
            pos = pending.pop(0)
            if pos in detonated:
                continue
            detonated.add(pos)
            hits = self.detonate(pos)
            entity = board.cells[pos[0]][pos[1]]
            detonations.append(Detonation(pos, special_kind_of(self.world, entity), tuple(sorted(hits))))
            for hit in sorted(hits):
                if hit in claimed or hit in affected:
                    continue
                affected.add(hit)
                if self._has_special(board, hit):
                    pending.append(hit)

        removed = frozenset(affected - set(claimed))
        score_delta = self.score_for(len(affected), combo_index)
        logger.debug(
            "Resolved %d group(s): %d removed, %d special(s), %d detonation(s), +%d",
            len(groups), len(removed), len(spawned), len(detonations), score_delta,
        )
        return ResolutionResult(
            removed=removed,
            score_delta=score_delta,
            spawned_specials=spawned,
            detonations=detonations,
            scored_count=len(affected),
        )

    def apply(self, result: ResolutionResult) -> FallResult:
        """Promote retained tiles, delete removed ones, then compact and refill."""
        board = get_board(self.world)
        for (row, col), kind in result.spawned_specials:
            entity = board.cells[row][col]
            if entity is not None:
                self.world.add_component(entity, SpecialTile(kind=kind))
        if self.event_bus is not None:
            for detonation in result.detonations:
                self.event_bus.emit(
                    EVENT_SPECIAL_DETONATED,
                    position=detonation.position,
                    kind=detonation.kind,
                    affected=list(detonation.affected),
                )
        removed = remove_tiles(self.world, result.removed)
        moves, spawned = collapse_and_refill(self.world, {col for _, col in removed}, self.rng)
        return FallResult(moves=moves, spawned=spawned)

    def _has_special(self, board, pos: Position) -> bool:
        entity = board.cells[pos[0]][pos[1]]
        return entity is not None and special_kind_of(self.world, entity) is not SpecialKind.NONE
