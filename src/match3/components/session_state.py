"""Session resource describing score, progress and the interaction phase."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class SessionPhase(Enum):
    IDLE = auto()
    SWAPPING = auto()
    RESOLVING = auto()
    FALLING = auto()
    RESHUFFLING = auto()
    ENDED = auto()


class SessionOutcome(Enum):
    COMPLETE = auto()
    FAILED = auto()


@dataclass(slots=True)
class SessionState:
    """Singleton component owned by the session entity."""
    score: int = 0
    level: int = 1
    combo_index: int = 0
    moves_used: int = 0
    time_remaining: float = 0.0
    phase: SessionPhase = SessionPhase.IDLE
    outcome: Optional[SessionOutcome] = None
