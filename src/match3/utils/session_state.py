from __future__ import annotations

from esper import World

from match3.components.session_state import SessionState


def get_session_state(world: World) -> SessionState | None:
    """Return the shared SessionState component, or None before a session exists."""
    for _, state in world.get_component(SessionState):
        return state
    return None


def replace_session_state(world: World, state: SessionState) -> SessionState:
    """Swap in a new SessionState snapshot on the singleton session entity."""
    entity = getattr(world, "session_entity", None)
    if entity is None:
        entity = world.create_entity()
        setattr(world, "session_entity", entity)
    world.add_component(entity, state)
    return state
