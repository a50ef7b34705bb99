from __future__ import annotations

from itertools import groupby
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence

from match3.components.position import Position
from match3.components.tile import Tile
from match3.components.tile_color import TileColor
from match3.constants import MIN_MATCH
from match3.utils.color_supplier import ColorSupplier, RandomColorSupplier


class Board:
    """Immutable snapshot of the tile grid.

    Every operation returns a new Board; tiles are never changed in place, so two
    snapshots can be compared by tile id to see what moved. Row 0 is the top row
    and gravity pulls towards ``height - 1``.

    Outside of a resolution step a board holds exactly ``width * height`` tiles.
    Boards returned by ``remove_tiles`` and ``apply_gravity`` may have empty
    cells until ``fill_empty_spaces`` runs.
    """

    __slots__ = ("_width", "_height", "_by_position", "_by_id", "_color_supplier")

    def __init__(
        self,
        width: int,
        height: int,
        tiles: Iterable[Tile] = (),
        color_supplier: ColorSupplier | None = None,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {width}x{height}")
        self._width = width
        self._height = height
        self._color_supplier = color_supplier or RandomColorSupplier()
        by_position: Dict[Position, Tile] = {}
        by_id: Dict[int, Tile] = {}
        for tile in tiles:
            if not self.is_valid_position(tile.position):
                raise ValueError(f"Tile {tile.id} lies outside the {width}x{height} board at {tile.position}")
            if tile.position in by_position:
                raise ValueError(f"Two tiles share position {tile.position}")
            if tile.id in by_id:
                raise ValueError(f"Duplicate tile id {tile.id}")
            by_position[tile.position] = tile
            by_id[tile.id] = tile
        self._by_position = by_position
        self._by_id = by_id

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def create_random(cls, width: int, height: int, color_supplier: ColorSupplier | None = None) -> "Board":
        """Fill every cell with a fresh tile, row by row from the top-left.

        Accidental matches are left in place; clearing them is up to the caller.
        """
        supplier = color_supplier or RandomColorSupplier()
        if width <= 0 or height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {width}x{height}")
        tiles = [
            Tile.spawn(supplier.next_color(), Position(x, y))
            for y in range(height)
            for x in range(width)
        ]
        return cls(width, height, tiles, supplier)

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Optional[TileColor]]],
        color_supplier: ColorSupplier | None = None,
    ) -> "Board":
        """Build a board from a top-to-bottom list of rows; ``None`` leaves a cell empty."""
        if not rows or not rows[0]:
            raise ValueError("Board layout must have at least one row and one column")
        width = len(rows[0])
        tiles: List[Tile] = []
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {y} has {len(row)} cells, expected {width}")
            for x, color in enumerate(row):
                if color is not None:
                    tiles.append(Tile.spawn(color, Position(x, y)))
        return cls(width, len(rows), tiles, color_supplier)

    def _with_tiles(self, tiles: Iterable[Tile]) -> "Board":
        return Board(self._width, self._height, tiles, self._color_supplier)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def color_supplier(self) -> ColorSupplier:
        return self._color_supplier

    @property
    def tiles(self) -> FrozenSet[Tile]:
        return frozenset(self._by_position.values())

    def __len__(self) -> int:
        return len(self._by_position)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._by_position.values())

    def tile_at(self, position: Position) -> Tile | None:
        return self._by_position.get(position)

    def tile_by_id(self, tile_id: int) -> Tile | None:
        return self._by_id.get(tile_id)

    def is_valid_position(self, position: Position) -> bool:
        return 0 <= position.x < self._width and 0 <= position.y < self._height

    def is_full(self) -> bool:
        return len(self._by_position) == self._width * self._height

    def empty_positions(self) -> List[Position]:
        """Unoccupied cells in row-major order."""
        return [
            Position(x, y)
            for y in range(self._height)
            for x in range(self._width)
            if Position(x, y) not in self._by_position
        ]

    def rows(self) -> Iterator[List[Position]]:
        for y in range(self._height):
            yield [Position(x, y) for x in range(self._width)]

    def columns(self) -> Iterator[List[Position]]:
        for x in range(self._width):
            yield [Position(x, y) for y in range(self._height)]

    def color_at(self, position: Position) -> TileColor | None:
        tile = self._by_position.get(position)
        return tile.color if tile is not None else None

    # ------------------------------------------------------------------
    # Swapping
    # ------------------------------------------------------------------
    def swap(self, a: Position, b: Position) -> "Board":
        """Exchange the tiles at two adjacent occupied cells; anything else returns ``self``."""
        if not (self.is_valid_position(a) and self.is_valid_position(b)):
            return self
        if not a.is_adjacent_to(b):
            return self
        tile_a = self._by_position.get(a)
        tile_b = self._by_position.get(b)
        if tile_a is None or tile_b is None:
            return self
        return self._exchange(tile_a, tile_b)

    def swap_by_id(self, id_a: int, id_b: int) -> "Board":
        """Same contract as ``swap`` but addressed by tile identity."""
        tile_a = self._by_id.get(id_a)
        tile_b = self._by_id.get(id_b)
        if tile_a is None or tile_b is None:
            return self
        if not tile_a.position.is_adjacent_to(tile_b.position):
            return self
        return self._exchange(tile_a, tile_b)

    def _exchange(self, tile_a: Tile, tile_b: Tile) -> "Board":
        tiles = [t for t in self._by_position.values() if t.id not in (tile_a.id, tile_b.id)]
        tiles.append(tile_a.move_to(tile_b.position))
        tiles.append(tile_b.move_to(tile_a.position))
        return self._with_tiles(tiles)

    # ------------------------------------------------------------------
    # Match detection
    # ------------------------------------------------------------------
    def find_matches(self) -> FrozenSet[Position]:
        """Every position belonging to a same-color run of at least ``MIN_MATCH``.

        Rows and columns are scanned independently over the whole board and
        the results unioned. Empty cells break runs.
        """
        matched: set[Position] = set()
        for line in self._lines():
            for run in self._runs(line):
                if len(run) >= MIN_MATCH:
                    matched.update(run)
        return frozenset(matched)

    def _lines(self) -> Iterator[List[Position]]:
        yield from self.rows()
        yield from self.columns()

    def _runs(self, line: List[Position]) -> Iterator[List[Position]]:
        for color, group in groupby(line, key=self.color_at):
            if color is None:
                continue
            yield list(group)

    # ------------------------------------------------------------------
    # Clearing, gravity, refill
    # ------------------------------------------------------------------
    def remove_tiles(self, positions: Iterable[Position]) -> "Board":
        doomed = set(positions)
        if not doomed:
            return self
        return self._with_tiles(t for t in self._by_position.values() if t.position not in doomed)

    def apply_gravity(self) -> "Board":
        """Drop tiles to the bottom of each column, keeping their top-to-bottom order."""
        settled: List[Tile] = []
        for column in self.columns():
            stack = [self._by_position[p] for p in column if p in self._by_position]
            first_row = self._height - len(stack)
            for offset, tile in enumerate(stack):
                target = Position(tile.position.x, first_row + offset)
                settled.append(tile if tile.position == target else tile.move_to(target))
        return self._with_tiles(settled)

    def fill_empty_spaces(self) -> "Board":
        """Spawn a new tile, colored by this board's supplier, in every empty cell."""
        empty = self.empty_positions()
        if not empty:
            return self
        spawned = [Tile.spawn(self._color_supplier.next_color(), p) for p in empty]
        return self._with_tiles([*self._by_position.values(), *spawned])

    # ------------------------------------------------------------------
    # Move availability
    # ------------------------------------------------------------------
    def has_valid_moves(self) -> bool:
        """True if any single adjacent swap would produce a match.

        Tries each right and down neighbour with a full rescan per trial, which
        is O((width*height)^2) overall; fine for boards up to roughly 10x10.
        """
        for y in range(self._height):
            for x in range(self._width):
                origin = Position(x, y)
                for neighbour in (origin.right(), origin.below()):
                    if not self.is_valid_position(neighbour):
                        continue
                    swapped = self.swap(origin, neighbour)
                    if swapped is self:
                        continue
                    if swapped.find_matches():
                        return True
        return False

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and self._by_position == other._by_position
        )

    def __hash__(self) -> int:
        return hash((self._width, self._height, self.tiles))

    def __repr__(self) -> str:
        return f"Board({self._width}x{self._height}, tiles={len(self._by_position)})"

    def render_text(self) -> str:
        """Debug dump: one line per row, first letter of each color, ``.`` for empty cells."""
        lines = []
        for row in self.rows():
            cells = []
            for position in row:
                color = self.color_at(position)
                cells.append(color.short_name if color is not None else ".")
            lines.append("".join(cells))
        return "\n".join(lines)
