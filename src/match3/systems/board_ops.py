from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Set, Tuple

from match3.components.board import Board
from match3.components.position import Position


@dataclass(frozen=True, slots=True)
class GravityMove:
    tile_id: int
    source: Position
    target: Position


def find_valid_swaps(board: Board) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    swaps: List[Tuple[Position, Position]] = []
    for y in range(board.height):
        for x in range(board.width):
            origin = Position(x, y)
            for neighbour in (origin.right(), origin.below()):
                if not board.is_valid_position(neighbour):
                    continue
                swapped = board.swap(origin, neighbour)
                if swapped is not board and swapped.find_matches():
                    swaps.append((origin, neighbour))
    return swaps


def tile_ids_at(board: Board, positions: Iterable[Position]) -> FrozenSet[int]:
    ids = set()
    for position in positions:
        tile = board.tile_at(position)
        if tile is not None:
            ids.add(tile.id)
    return frozenset(ids)


def gravity_moves(before: Board, after: Board) -> List[GravityMove]:
    """Tiles present on both boards whose position changed, ordered by target."""
    moves: List[GravityMove] = []
    for tile in after:
        previous = before.tile_by_id(tile.id)
        if previous is None or previous.position == tile.position:
            continue
        moves.append(GravityMove(tile_id=tile.id, source=previous.position, target=tile.position))
    moves.sort(key=lambda move: (move.target.x, move.target.y))
    return moves


def moved_tile_ids(before: Board, after: Board) -> FrozenSet[int]:
    return frozenset(move.tile_id for move in gravity_moves(before, after))


def new_tile_ids(before: Board, after: Board) -> FrozenSet[int]:
    """Ids of tiles on ``after`` that did not exist on ``before``."""
    return frozenset(tile.id for tile in after if before.tile_by_id(tile.id) is None)


def group_matches(board: Board, positions: Iterable[Position]) -> List[List[Position]]:
    """Split a flat match set into connected same-color groups.

    Crossing horizontal and vertical runs end up in one group; touching runs of
    different colors stay apart. Groups and their members are sorted by (y, x)
    so payloads are deterministic.
    """
    remaining: Set[Position] = set(positions)
    groups: List[List[Position]] = []
    while remaining:
        seed = min(remaining, key=_row_major)
        remaining.discard(seed)
        group = [seed]
        frontier = [seed]
        while frontier:
            current = frontier.pop()
            for neighbour in _neighbours(current):
                if neighbour in remaining and board.color_at(neighbour) == board.color_at(current):
                    remaining.discard(neighbour)
                    group.append(neighbour)
                    frontier.append(neighbour)
        groups.append(sorted(group, key=_row_major))
    return groups


def sorted_positions(positions: Iterable[Position]) -> List[Position]:
    return sorted(positions, key=_row_major)


def _row_major(position: Position) -> Tuple[int, int]:
    return position.y, position.x


def _neighbours(position: Position) -> Tuple[Position, ...]:
    x, y = position.x, position.y
    return (Position(x + 1, y), Position(x - 1, y), Position(x, y + 1), Position(x, y - 1))
