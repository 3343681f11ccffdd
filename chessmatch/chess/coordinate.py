"""
A square on the board, plus the direction arithmetic used to walk over the board.

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from chessmatch.core.exceptions import InvalidCoordinateError

# Files are 0-indexed (a-file is 0), ranks follow the board labels (1 through 8).
FILES = "abcdefgh"
RANKS = "12345678"
NUM_RANKS = len(RANKS)


class Direction(Enum):
    """The eight compass directions. Values are the (delta_file, delta_rank) of a single step."""

    NORTH = (0, 1)
    SOUTH = (0, -1)
    EAST = (1, 0)
    WEST = (-1, 0)
    NORTH_EAST = (1, 1)
    NORTH_WEST = (-1, 1)
    SOUTH_EAST = (1, -1)
    SOUTH_WEST = (-1, -1)


ORTHOGONALS: tuple[Direction, ...] = (
    Direction.NORTH,
    Direction.EAST,
    Direction.SOUTH,
    Direction.WEST,
)
DIAGONALS: tuple[Direction, ...] = (
    Direction.NORTH_EAST,
    Direction.SOUTH_EAST,
    Direction.NORTH_WEST,
    Direction.SOUTH_WEST,
)
ALL_DIRECTIONS: tuple[Direction, ...] = DIAGONALS + ORTHOGONALS


def is_within_bounds(file: int, rank: int) -> bool:
    return (0 <= file < len(FILES)) and (1 <= rank <= NUM_RANKS)


@dataclass(frozen=True, order=True)
class Coordinate:
    file: int
    rank: int

    def __post_init__(self) -> None:
        # invalid values are unrepresentable: fail on construction
        if not is_within_bounds(self.file, self.rank):
            raise InvalidCoordinateError(
                f"Square (file={self.file}, rank={self.rank}) is not on the board."
            )

    @classmethod
    def from_algebraic(cls, sq: str) -> Coordinate:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,1) - (7,8)"""
        if len(sq) != 2:
            raise InvalidCoordinateError(
                f"Square {sq!r} should be exactly two characters (file letter + rank digit)."
            )

        file_char, rank_char = sq[0], sq[1]
        if rank_char not in RANKS:
            raise InvalidCoordinateError(f"Rank of square {sq!r} out of bounds.")

        if file_char not in FILES:
            raise InvalidCoordinateError(f"File of square {sq!r} out of bounds.")

        return cls(FILES.index(file_char), int(rank_char))

    def to_algebraic(self) -> str:
        return f"{FILES[self.file]}{self.rank}"

    def __str__(self) -> str:
        return self.to_algebraic()

    @property
    def file_letter(self) -> str:
        return FILES[self.file]

    def step(self, direction: Direction) -> Optional[Coordinate]:
        """Neighbouring square in the given direction. None if that would leave the board."""
        df, dr = direction.value
        file, rank = self.file + df, self.rank + dr
        if not is_within_bounds(file, rank):
            return None
        return Coordinate(file, rank)

    def north(self) -> Optional[Coordinate]:
        return self.step(Direction.NORTH)

    def south(self) -> Optional[Coordinate]:
        return self.step(Direction.SOUTH)

    def east(self) -> Optional[Coordinate]:
        return self.step(Direction.EAST)

    def west(self) -> Optional[Coordinate]:
        return self.step(Direction.WEST)

    def north_east(self) -> Optional[Coordinate]:
        return self.step(Direction.NORTH_EAST)

    def north_west(self) -> Optional[Coordinate]:
        return self.step(Direction.NORTH_WEST)

    def south_east(self) -> Optional[Coordinate]:
        return self.step(Direction.SOUTH_EAST)

    def south_west(self) -> Optional[Coordinate]:
        return self.step(Direction.SOUTH_WEST)
