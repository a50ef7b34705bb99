import random

from esper import World

from .events.bus import EventBus


def create_world(event_bus: EventBus, *, rng: random.Random | None = None) -> World:
    """Create the ECS world shared by the session and high-score systems.

    The world carries the shared RNG and a singleton entity that later holds the
    SessionState snapshot.
    """
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "event_bus", event_bus)
    setattr(world, "session_entity", world.create_entity())
    return world
