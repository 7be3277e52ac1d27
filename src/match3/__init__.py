"""Deterministic match-3 grid engine built on an esper world."""
from match3.components.session_state import SessionOutcome, SessionPhase, SessionState
from match3.components.tile import SpecialKind
from match3.config import Goal, GoalMode, PuzzleConfig
from match3.errors import InvalidConfiguration, InvalidMove, InvalidState, PuzzleError, ReshuffleExhausted
from match3.events.bus import EventBus
from match3.sinks import AnalyticsSink, AudioSink
from match3.systems.grid_generation import generate_layout
from match3.systems.match import MatchAxis, MatchGroup, find_matches, find_matches_in
from match3.systems.match_resolution import ResolutionEngine, ResolutionResult
from match3.systems.move_oracle import find_valid_swaps, has_any_legal_move, reshuffle
from match3.systems.session import CascadeStep, PuzzleSession, SwapOutcome
from match3.utils.snapshot import GridSnapshot, TileView
from match3.world import create_world

__all__ = [
    "AnalyticsSink",
    "AudioSink",
    "CascadeStep",
    "EventBus",
    "Goal",
    "GoalMode",
    "GridSnapshot",
    "InvalidConfiguration",
    "InvalidMove",
    "InvalidState",
    "MatchAxis",
    "MatchGroup",
    "PuzzleConfig",
    "PuzzleError",
    "PuzzleSession",
    "ReshuffleExhausted",
    "ResolutionEngine",
    "ResolutionResult",
    "SessionOutcome",
    "SessionPhase",
    "SessionState",
    "SpecialKind",
    "SwapOutcome",
    "TileView",
    "create_world",
    "find_matches",
    "find_matches_in",
    "find_valid_swaps",
    "generate_layout",
    "has_any_legal_move",
    "reshuffle",
]
