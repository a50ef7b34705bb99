import itertools
from dataclasses import dataclass, replace

from match3.components.position import Position
from match3.components.tile_color import TileColor

_ids = itertools.count(1)


def next_tile_id() -> int:
    """Return a process-unique tile id. Ids increase monotonically and are never reused."""
    return next(_ids)


@dataclass(frozen=True, slots=True)
class Tile:
    """A single colored tile.

    ``id`` is the only stable handle on a tile across board transformations;
    ``position`` is reassigned by swaps and gravity.
    """

    id: int
    color: TileColor
    position: Position

    @classmethod
    def spawn(cls, color: TileColor, position: Position) -> "Tile":
        return cls(id=next_tile_id(), color=color, position=position)

    def move_to(self, position: Position) -> "Tile":
        return replace(self, position=position)
