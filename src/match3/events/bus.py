from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps lambdas and bound methods of unreferenced listeners alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SWAPS & SELECTION
# ============================================================================
EVENT_TILE_SELECTED = "tile_selected"        # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"    # payload: row, col
EVENT_SWAP_ACCEPTED = "swap_accepted"        # payload: src=(r,c), dst=(r,c), moves_used=int
EVENT_SWAP_REJECTED = "swap_rejected"        # payload: src=(r,c), dst=(r,c), reason=str


# ============================================================================
# RESOLUTION & CASCADE
# ============================================================================
EVENT_MATCH_RESOLVED = "match_resolved"          # payload: groups=list[MatchGroup], score_delta=int, combo_index=int, removed=frozenset, specials=list
EVENT_SPECIAL_DETONATED = "special_detonated"    # payload: position=(r,c), kind=SpecialKind, affected=list[(r,c)]
EVENT_CASCADE_STEP = "cascade_step"              # payload: depth=int, snapshot=GridSnapshot
EVENT_SETTLED = "settled"                        # payload: snapshot=GridSnapshot, depth=int


# ============================================================================
# BOARD MAINTENANCE
# ============================================================================
EVENT_NO_MOVES_LEFT = "no_moves_left"        # payload: before_reshuffle=GridSnapshot
EVENT_BOARD_RESHUFFLED = "board_reshuffled"  # payload: snapshot=GridSnapshot, regenerated=bool


# ============================================================================
# SESSION FLOW
# ============================================================================
EVENT_PHASE_CHANGED = "phase_changed"    # payload: previous=SessionPhase, new=SessionPhase
EVENT_LEVEL_STARTED = "level_started"    # payload: level=int, type_count=int, snapshot=GridSnapshot
EVENT_GOAL_REACHED = "goal_reached"      # payload: outcome=SessionOutcome, score=int, level=int, stars=int
