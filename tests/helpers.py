from __future__ import annotations

from itertools import cycle
from typing import Dict, List, Sequence

from match3.components.tile_color import TileColor
from match3.events.bus import EventBus
from match3.utils.high_score_store import HighScoreStoreError

R = TileColor.RED
G = TileColor.GREEN
B = TileColor.BLUE
Y = TileColor.YELLOW
P = TileColor.PURPLE
O = TileColor.ORANGE


class ScriptedColorSupplier:
    """Hands out a fixed color sequence, repeating it once exhausted."""

    def __init__(self, colors: Sequence[TileColor]):
        if not colors:
            raise ValueError("Script needs at least one color")
        self.calls = 0
        self._colors = cycle(list(colors))

    def next_color(self) -> TileColor:
        self.calls += 1
        return next(self._colors)


class FailingHighScoreStore:
    """Store whose reads and/or writes always fail."""

    def __init__(self, *, fail_get: bool = False, fail_save: bool = True, stored: int = 0):
        self.fail_get = fail_get
        self.fail_save = fail_save
        self.stored = stored
        self.save_attempts: List[int] = []

    def get_high_score(self) -> int:
        if self.fail_get:
            raise HighScoreStoreError("disk unavailable")
        return self.stored

    def save_high_score(self, score: int) -> bool:
        self.save_attempts.append(score)
        if self.fail_save:
            raise HighScoreStoreError("disk full")
        self.stored = max(self.stored, score)
        return True


def record_events(bus: EventBus, *names: str) -> Dict[str, List[dict]]:
    """Subscribe to ``names`` and collect every payload, keyed by event name."""
    received: Dict[str, List[dict]] = {name: [] for name in names}
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **payload: received[_name].append(payload))
    return received


def colors_of(board) -> List[List[TileColor | None]]:
    return [[board.color_at(p) for p in row] for row in board.rows()]
