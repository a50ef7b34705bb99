"""Snapshot of a game session, replaced wholesale on every transition."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import FrozenSet, Iterable, Optional

from match3.components.board import Board
from match3.components.position import Position
from match3.components.tile import Tile


class SessionPhase(Enum):
    """Where the session sits in the tap/resolve cycle."""
    IDLE = auto()
    TILE_SELECTED = auto()
    RESOLVING_CASCADE = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class SessionState:
    board: Board
    score: int = 0
    high_score: int = 0
    selected_position: Optional[Position] = None
    game_over: bool = False
    in_progress_tile_ids: FrozenSet[int] = field(default_factory=frozenset)
    resolving: bool = False

    @property
    def phase(self) -> SessionPhase:
        if self.game_over:
            return SessionPhase.GAME_OVER
        if self.resolving:
            return SessionPhase.RESOLVING_CASCADE
        if self.selected_position is not None:
            return SessionPhase.TILE_SELECTED
        return SessionPhase.IDLE

    @property
    def tiles(self) -> FrozenSet[Tile]:
        return self.board.tiles

    @property
    def accepts_input(self) -> bool:
        return not (self.game_over or self.resolving or self.in_progress_tile_ids)

    def is_selected(self, position: Position) -> bool:
        return self.selected_position == position

    def is_in_progress(self, target: Position | int) -> bool:
        """Whether a tile, given by position or id, is mid-transition."""
        if isinstance(target, Position):
            tile = self.board.tile_at(target)
            return tile is not None and tile.id in self.in_progress_tile_ids
        return target in self.in_progress_tile_ids

    def find_in_progress_tile(self, tile_id: int) -> Tile | None:
        if tile_id not in self.in_progress_tile_ids:
            return None
        return self.board.tile_by_id(tile_id)

    # Transition helpers. Each returns a new snapshot.
    def with_board(self, board: Board, score_delta: int = 0) -> "SessionState":
        return replace(self, board=board, score=self.score + score_delta, selected_position=None)

    def with_selected_position(self, position: Position) -> "SessionState":
        return replace(self, selected_position=position)

    def with_selection_cleared(self) -> "SessionState":
        return replace(self, selected_position=None)

    def with_in_progress(self, tile_ids: Iterable[int]) -> "SessionState":
        return replace(self, in_progress_tile_ids=frozenset(tile_ids))

    def with_in_progress_positions(self, positions: Iterable[Position]) -> "SessionState":
        ids = {tile.id for tile in (self.board.tile_at(p) for p in positions) if tile is not None}
        return replace(self, in_progress_tile_ids=frozenset(ids))

    def with_resolving(self, resolving: bool) -> "SessionState":
        return replace(self, resolving=resolving)

    def with_game_over(self) -> "SessionState":
        return replace(self, game_over=True)

    def with_high_score(self, high_score: int) -> "SessionState":
        return replace(self, high_score=high_score)
