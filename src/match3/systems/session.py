from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from esper import World

from match3.components.session_state import SessionOutcome, SessionPhase, SessionState
from match3.components.tile import Selected
from match3.config import GoalMode, PuzzleConfig
from match3.errors import InvalidMove, InvalidState, ReshuffleExhausted
from match3.events.bus import (
    EventBus,
    EVENT_BOARD_RESHUFFLED,
    EVENT_CASCADE_STEP,
    EVENT_GOAL_REACHED,
    EVENT_LEVEL_STARTED,
    EVENT_MATCH_RESOLVED,
    EVENT_NO_MOVES_LEFT,
    EVENT_SETTLED,
    EVENT_SWAP_ACCEPTED,
    EVENT_SWAP_REJECTED,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
)
from match3.sinks import (
    ANALYTICS_GAME_OVER,
    ANALYTICS_GAME_START,
    ANALYTICS_LEVEL_COMPLETE,
    MUSIC_GAMEPLAY,
    SOUND_COMBO,
    SOUND_GAME_OVER,
    SOUND_LEVEL_COMPLETE,
    SOUND_MATCH,
    SOUND_SHUFFLE,
    SOUND_TILE_FALL,
    SOUND_TILE_SELECT,
    SOUND_TILE_SWAP,
    AnalyticsSink,
    AudioSink,
)
from match3.systems.goal_system import calculate_stars, evaluate_goal
from match3.systems.grid_generation import regenerate_solvable
from match3.systems.grid_ops import Position, get_board, get_entity_at, is_adjacent, iter_tiles, swap_tiles, validate_swap
from match3.systems.match import MatchGroup, find_matches
from match3.systems.match_resolution import FallResult, ResolutionEngine, ResolutionResult
from match3.systems.move_oracle import find_valid_swaps, has_any_legal_move, reshuffle
from match3.utils.session import get_config, get_session_state, set_phase, world_random
from match3.utils.snapshot import GridSnapshot, take_snapshot

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CascadeStep:
    depth: int
    groups: List[MatchGroup]
    result: ResolutionResult
    fall: FallResult
    snapshot: GridSnapshot


@dataclass(slots=True)
class SwapOutcome:
    """Everything one ``attempt_swap`` call did, in order, for presentation replay."""
    src: Position
    dst: Position
    accepted: bool
    steps: List[CascadeStep] = field(default_factory=list)
    score_delta: int = 0
    reshuffled: bool = False
    outcome: Optional[SessionOutcome] = None
    snapshot: Optional[GridSnapshot] = None


class PuzzleSession:
    """State machine gating player swaps while the grid resolves and settles.

    Idle -> Swapping -> (no match: revert, Idle) | Resolving <-> Falling ->
    goal check -> Ended | (dead board: Reshuffling) -> Idle.

    ``attempt_swap`` runs the whole cascade synchronously; listeners on the
    event bus receive a snapshot after every pass and once settled. The world
    must hold a board created by ``create_world``; an empty board is filled
    with a solvable match-free layout on construction.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        audio: AudioSink | None = None,
        analytics: AnalyticsSink | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.audio = audio or AudioSink()
        self.analytics = analytics or AnalyticsSink()
        self.rng = world_random(world)
        self.engine = ResolutionEngine(world, event_bus, rng=self.rng)
        self._selected: Optional[Position] = None
        self._start_level(regenerate=not any(True for _ in iter_tiles(world)))
        self.audio.play_music(MUSIC_GAMEPLAY)
        self.analytics.log_event(ANALYTICS_GAME_START, level=self.state.level)

    # -- queries -----------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return get_session_state(self.world)

    @property
    def config(self) -> PuzzleConfig:
        return get_config(self.world)

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def selected(self) -> Optional[Position]:
        return self._selected

    def snapshot(self) -> GridSnapshot:
        return take_snapshot(self.world)

    def hint(self) -> Optional[Tuple[Position, Position]]:
        swaps = find_valid_swaps(self.world, self.config.match_min_length)
        return swaps[0] if swaps else None

    def stars(self) -> int:
        return calculate_stars(self.state, self.config)

    # -- player input ------------------------------------------------------

    def select_tile(self, pos: Position) -> Optional[SwapOutcome]:
        """Select a tile; selecting an adjacent tile afterwards swaps the two."""
        self._require_idle()
        pos = tuple(pos)
        if get_entity_at(self.world, *pos) is None:
            raise InvalidMove(f"No tile at {pos}")
        previous = self._selected
        if previous is not None and is_adjacent(previous, pos):
            self.deselect()
            return self.attempt_swap(previous, pos)
        if previous is not None:
            self.deselect()
        self.world.add_component(get_entity_at(self.world, *pos), Selected())
        self._selected = pos
        self.audio.play_sound(SOUND_TILE_SELECT)
        self.event_bus.emit(EVENT_TILE_SELECTED, row=pos[0], col=pos[1])
        return None

    def deselect(self) -> None:
        prev = self._selected
        if prev is None:
            return
        self._selected = None
        entity = get_entity_at(self.world, *prev)
        if entity is not None and self.world.has_component(entity, Selected):
            self.world.remove_component(entity, Selected)
        self.event_bus.emit(EVENT_TILE_DESELECTED, row=prev[0], col=prev[1])

    def attempt_swap(self, src: Position, dst: Position) -> SwapOutcome:
        """Swap two adjacent tiles and resolve the resulting cascade to settlement.

        Raises InvalidState outside Idle and InvalidMove for out-of-bounds or
        non-adjacent cells, in both cases before anything changes. A valid swap
        clears the current selection; one that creates no match is reverted and
        reported through ``swap_rejected``.
        """
        self._require_idle()
        src, dst = tuple(src), tuple(dst)
        validate_swap(self.world, src, dst)
        self.deselect()
        config = self.config
        state = self.state

        set_phase(self.world, self.event_bus, SessionPhase.SWAPPING)
        self.audio.play_sound(SOUND_TILE_SWAP)
        swap_tiles(self.world, src, dst)
        groups = find_matches(self.world, config.match_min_length)
        if not groups:
            swap_tiles(self.world, src, dst)
            set_phase(self.world, self.event_bus, SessionPhase.IDLE)
            self.event_bus.emit(EVENT_SWAP_REJECTED, src=src, dst=dst, reason="no_match")
            return SwapOutcome(src=src, dst=dst, accepted=False, snapshot=self.snapshot())

        state.moves_used += 1
        self.event_bus.emit(EVENT_SWAP_ACCEPTED, src=src, dst=dst, moves_used=state.moves_used)
        outcome = SwapOutcome(src=src, dst=dst, accepted=True)
        outcome.steps = self._run_cascade(groups, preferred=(dst, src))
        outcome.score_delta = sum(step.result.score_delta for step in outcome.steps)
        outcome.reshuffled, outcome.outcome = self._after_settle()
        outcome.snapshot = self.snapshot()
        return outcome

    def tick(self, dt: float) -> Optional[SessionOutcome]:
        """Advance the level clock in TIME mode; ends the level when it runs out."""
        state = self.state
        if self.config.goal.mode is not GoalMode.TIME or state.phase is not SessionPhase.IDLE:
            return None
        state.time_remaining = max(0.0, state.time_remaining - dt)
        result = evaluate_goal(state, self.config)
        if result is not None:
            self._end(result)
        return result

    # -- level flow --------------------------------------------------------

    def next_level(self) -> None:
        state = self.state
        if state.phase is not SessionPhase.ENDED or state.outcome is not SessionOutcome.COMPLETE:
            raise InvalidState("next_level requires a completed level")
        board = get_board(self.world)
        board.type_count = min(self.config.max_type_count, board.type_count + 1)
        state.level += 1
        self._start_level(regenerate=True)

    def reset(self) -> None:
        state = self.state
        state.score = 0
        state.level = 1
        get_board(self.world).type_count = self.config.type_count
        self._start_level(regenerate=True)

    # -- internals ---------------------------------------------------------

    def _require_idle(self) -> None:
        phase = self.state.phase
        if phase is not SessionPhase.IDLE:
            raise InvalidState(f"Swaps are only accepted while idle (phase={phase.name})")

    def _start_level(self, *, regenerate: bool) -> None:
        config = self.config
        state = self.state
        self._selected = None
        state.moves_used = 0
        state.combo_index = 0
        state.outcome = None
        state.time_remaining = float(config.goal.threshold) if config.goal.mode is GoalMode.TIME else 0.0
        if regenerate:
            regenerate_solvable(
                self.world,
                self.rng,
                match_min=config.match_min_length,
                max_attempts=config.generate_max_attempts,
            )
        set_phase(self.world, self.event_bus, SessionPhase.IDLE)
        board = get_board(self.world)
        logger.info("Level %d started (%dx%d, %d types)", state.level, board.cols, board.rows, board.type_count)
        self.event_bus.emit(
            EVENT_LEVEL_STARTED, level=state.level, type_count=board.type_count, snapshot=self.snapshot()
        )

    def _run_cascade(self, groups: List[MatchGroup], *, preferred: Sequence[Position]) -> List[CascadeStep]:
        state = self.state
        match_min = self.config.match_min_length
        steps: List[CascadeStep] = []
        while groups:
            state.combo_index += 1
            set_phase(self.world, self.event_bus, SessionPhase.RESOLVING)
            result = self.engine.resolve(groups, state.combo_index, preferred=preferred if not steps else ())
            state.score += result.score_delta
            self.audio.play_sound(SOUND_MATCH)
            if state.combo_index > 1:
                self.audio.play_sound(SOUND_COMBO)
            self.event_bus.emit(
                EVENT_MATCH_RESOLVED,
                groups=list(groups),
                score_delta=result.score_delta,
                combo_index=state.combo_index,
                removed=result.removed,
                specials=list(result.spawned_specials),
            )
            set_phase(self.world, self.event_bus, SessionPhase.FALLING)
            fall = self.engine.apply(result)
            self.audio.play_sound(SOUND_TILE_FALL)
            snapshot = self.snapshot()
            steps.append(CascadeStep(state.combo_index, list(groups), result, fall, snapshot))
            self.event_bus.emit(EVENT_CASCADE_STEP, depth=state.combo_index, snapshot=snapshot)
            groups = find_matches(self.world, match_min)
        logger.debug("Cascade settled after %d pass(es), score=%d", len(steps), state.score)
        state.combo_index = 0
        self.event_bus.emit(EVENT_SETTLED, snapshot=self.snapshot(), depth=len(steps))
        return steps

    def _after_settle(self) -> Tuple[bool, Optional[SessionOutcome]]:
        config = self.config
        result = evaluate_goal(self.state, config)
        if result is not None:
            self._end(result)
            return False, result
        if has_any_legal_move(self.world, config.match_min_length):
            set_phase(self.world, self.event_bus, SessionPhase.IDLE)
            return False, None
        self.event_bus.emit(EVENT_NO_MOVES_LEFT, before_reshuffle=self.snapshot())
        if not config.shuffle_allowed:
            self._end(SessionOutcome.FAILED)
            return False, SessionOutcome.FAILED
        if not self._reshuffle():
            self._end(SessionOutcome.FAILED)
            return True, SessionOutcome.FAILED
        set_phase(self.world, self.event_bus, SessionPhase.IDLE)
        return True, None

    def _reshuffle(self) -> bool:
        """Make the dead board playable again; False when even regeneration fails."""
        config = self.config
        set_phase(self.world, self.event_bus, SessionPhase.RESHUFFLING)
        regenerated = False
        try:
            reshuffle(
                self.world,
                self.rng,
                max_attempts=config.reshuffle_max_attempts,
                match_min=config.match_min_length,
            )
        except ReshuffleExhausted as exc:
            logger.warning("%s; regenerating the board", exc)
            try:
                regenerate_solvable(
                    self.world,
                    self.rng,
                    match_min=config.match_min_length,
                    max_attempts=config.generate_max_attempts,
                )
            except ReshuffleExhausted as regen_exc:
                logger.error("%s; ending the level", regen_exc)
                return False
            regenerated = True
        self.audio.play_sound(SOUND_SHUFFLE)
        self.event_bus.emit(EVENT_BOARD_RESHUFFLED, snapshot=self.snapshot(), regenerated=regenerated)
        return True

    def _end(self, outcome: SessionOutcome) -> None:
        state = self.state
        state.outcome = outcome
        set_phase(self.world, self.event_bus, SessionPhase.ENDED)
        stars = calculate_stars(state, self.config)
        logger.info("Level %d ended: %s (score=%d, stars=%d)", state.level, outcome.name, state.score, stars)
        if outcome is SessionOutcome.COMPLETE:
            self.audio.play_sound(SOUND_LEVEL_COMPLETE)
            self.analytics.log_event(
                ANALYTICS_LEVEL_COMPLETE, level=state.level, score=state.score, moves=state.moves_used, stars=stars
            )
        else:
            self.audio.play_sound(SOUND_GAME_OVER)
            self.analytics.log_event(ANALYTICS_GAME_OVER, level=state.level, score=state.score, moves=state.moves_used)
        self.event_bus.emit(EVENT_GOAL_REACHED, outcome=outcome, score=state.score, level=state.level, stars=stars)
