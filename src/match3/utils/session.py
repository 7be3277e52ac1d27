from __future__ import annotations

import random

from esper import World

from match3.components.session_state import SessionPhase, SessionState
from match3.config import PuzzleConfig
from match3.events.bus import EVENT_PHASE_CHANGED, EventBus


def get_config(world: World) -> PuzzleConfig:
    for _, config in world.get_component(PuzzleConfig):
        return config
    raise RuntimeError("PuzzleConfig not found")


def get_session_state(world: World) -> SessionState:
    """Return the shared SessionState component, creating it if absent."""
    existing = list(world.get_component(SessionState))
    if existing:
        return existing[0][1]
    world.create_entity(SessionState())
    return list(world.get_component(SessionState))[0][1]


def world_random(world: World) -> random.Random:
    candidate = getattr(world, "random", None)
    if isinstance(candidate, random.Random):
        return candidate
    rng = random.Random()
    setattr(world, "random", rng)
    return rng


def set_phase(world: World, event_bus: EventBus | None, phase: SessionPhase) -> None:
    """Update the session phase and emit a change event when it differs."""
    state = get_session_state(world)
    previous = state.phase
    if previous == phase:
        return
    state.phase = phase
    if event_bus is not None:
        event_bus.emit(EVENT_PHASE_CHANGED, previous=previous, new=phase)
