from enum import Enum


class TileColor(Enum):
    """Fixed tile palette. Values are display RGB triples for whatever renders the board."""

    RED = (229, 115, 115)
    GREEN = (129, 199, 132)
    BLUE = (100, 181, 246)
    YELLOW = (255, 213, 79)
    PURPLE = (186, 104, 200)
    ORANGE = (255, 183, 77)

    @property
    def rgb(self) -> tuple[int, int, int]:
        return self.value

    @property
    def short_name(self) -> str:
        return self.name[0]
