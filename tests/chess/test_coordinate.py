"""Unit tests for chessmatch/chess/coordinate.py"""

import pytest

from chessmatch.chess.coordinate import (
    ALL_DIRECTIONS,
    Coordinate,
    Direction,
    is_within_bounds,
)
from chessmatch.core.exceptions import GameError, InvalidCoordinateError


@pytest.mark.parametrize(
    "algebraic, file, rank",
    [
        ("a1", 0, 1),
        ("h8", 7, 8),
        ("e4", 4, 4),
        ("b7", 1, 7),
    ],
)
def test_from_algebraic(algebraic: str, file: int, rank: int) -> None:
    coordinate = Coordinate.from_algebraic(algebraic)
    assert coordinate.file == file
    assert coordinate.rank == rank
    assert coordinate.to_algebraic() == algebraic
    assert str(coordinate) == algebraic


@pytest.mark.parametrize(
    "invalid",
    [
        "", "a", "a9", "i1", "a0", "e44", "4e", "A1",
        "a²",  # superscript digit
        "a٣",  # arabic-indic digit three
        "ａ1",  # fullwidth letter
    ],
)
def test_from_algebraic_rejects_garbage(invalid: str) -> None:
    with pytest.raises(InvalidCoordinateError):
        Coordinate.from_algebraic(invalid)


@pytest.mark.parametrize("file, rank", [(-1, 1), (8, 1), (0, 0), (0, 9)])
def test_out_of_bounds_is_unrepresentable(file: int, rank: int) -> None:
    """Constructing a square off the board fails right away."""
    assert not is_within_bounds(file, rank)
    with pytest.raises(InvalidCoordinateError):
        Coordinate(file, rank)


def test_invalid_coordinate_error_is_a_value_error() -> None:
    """Callers can catch it as a domain error, or as a plain ValueError."""
    with pytest.raises(ValueError):
        Coordinate.from_algebraic("z9")
    with pytest.raises(GameError):
        Coordinate.from_algebraic("z9")


def test_steps_from_the_center() -> None:
    e4 = Coordinate.from_algebraic("e4")
    assert e4.north() == Coordinate.from_algebraic("e5")
    assert e4.south() == Coordinate.from_algebraic("e3")
    assert e4.east() == Coordinate.from_algebraic("f4")
    assert e4.west() == Coordinate.from_algebraic("d4")
    assert e4.north_east() == Coordinate.from_algebraic("f5")
    assert e4.north_west() == Coordinate.from_algebraic("d5")
    assert e4.south_east() == Coordinate.from_algebraic("f3")
    assert e4.south_west() == Coordinate.from_algebraic("d3")


def test_every_step_from_center_stays_on_board() -> None:
    e4 = Coordinate.from_algebraic("e4")
    neighbours = {e4.step(direction) for direction in ALL_DIRECTIONS}
    assert None not in neighbours
    assert len(neighbours) == 8


@pytest.mark.parametrize(
    "square, direction",
    [
        ("a1", Direction.WEST),
        ("a1", Direction.SOUTH),
        ("a1", Direction.SOUTH_WEST),
        ("h8", Direction.NORTH),
        ("h8", Direction.EAST),
        ("h8", Direction.NORTH_EAST),
        ("h1", Direction.SOUTH_EAST),
        ("a8", Direction.NORTH_WEST),
    ],
)
def test_step_off_the_board(square: str, direction: Direction) -> None:
    assert Coordinate.from_algebraic(square).step(direction) is None


def test_coordinates_are_values() -> None:
    """Equal when file and rank are equal, usable as dict keys, and sortable."""
    assert Coordinate(4, 4) == Coordinate.from_algebraic("e4")
    assert len({Coordinate(0, 1), Coordinate.from_algebraic("a1")}) == 1
    assert sorted([Coordinate(1, 1), Coordinate(0, 2), Coordinate(0, 1)]) == [
        Coordinate(0, 1),
        Coordinate(0, 2),
        Coordinate(1, 1),
    ]


def test_file_letter() -> None:
    assert Coordinate.from_algebraic("g5").file_letter == "g"
