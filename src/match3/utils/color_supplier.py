from __future__ import annotations

import random
from typing import Protocol, Sequence

from match3.components.tile_color import TileColor


class ColorSupplier(Protocol):
    """Source of tile colors for new boards and refills."""

    def next_color(self) -> TileColor:
        ...


class RandomColorSupplier:
    """Draws each color independently and uniformly from a fixed palette."""

    def __init__(self, rng: random.Random | None = None, palette: Sequence[TileColor] | None = None):
        choices = list(palette) if palette is not None else list(TileColor)
        if not choices:
            raise ValueError("Color palette must contain at least one color")
        self.palette: tuple[TileColor, ...] = tuple(choices)
        self.rng = rng or random.Random()

    def next_color(self) -> TileColor:
        return self.rng.choice(self.palette)
