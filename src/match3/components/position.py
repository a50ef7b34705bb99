from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """Board coordinate; ``x`` is the column, ``y`` the row (row 0 is the top)."""

    x: int
    y: int

    def is_adjacent_to(self, other: "Position") -> bool:
        dx = abs(self.x - other.x)
        dy = abs(self.y - other.y)
        # Orthogonal neighbours only; diagonals are not adjacent.
        return (dx == 1 and dy == 0) or (dx == 0 and dy == 1)

    def right(self) -> "Position":
        return Position(self.x + 1, self.y)

    def below(self) -> "Position":
        return Position(self.x, self.y + 1)
