"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the raw move sets for each piece type.
Every rule writes straight into the piece's caches (`legal_moves` / `legal_captures`).

Legality (not leaving your own king in check) is checked later by the resolver.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Protocol

from chessmatch.chess.coordinate import (
    ALL_DIRECTIONS,
    DIAGONALS,
    ORTHOGONALS,
    Coordinate,
    Direction,
)
from chessmatch.chess.pieces import Color, Piece, PieceType


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def occupant(self, location: Coordinate) -> Optional[Piece]: ...


class LocationState(Enum):
    """What a moving piece finds on a square."""

    EMPTY = auto()
    CAPTURE = auto()  # occupied by the opponent
    BLOCKED = auto()  # occupied by your own piece
    OUT_OF_BOUNDS = auto()


@dataclass(frozen=True)
class PeekResult:
    location: Optional[Coordinate]
    state: LocationState


# --- DIRECTIONAL SCANNER ---
def peek_location(piece: Piece, location: Coordinate, board: Board) -> LocationState:
    """Classify a square relative to the color of the moving piece."""
    occupant = board.occupant(location)
    if occupant is None:
        return LocationState.EMPTY
    if occupant.color == piece.color:
        return LocationState.BLOCKED
    return LocationState.CAPTURE


def peek_direction(
    piece: Piece,
    direction: Direction,
    board: Board,
    from_location: Optional[Coordinate] = None,
) -> PeekResult:
    """Take a single step (from the piece's own square, unless specified otherwise) and look what is there."""
    start = from_location if from_location is not None else piece.location
    target = start.step(direction)
    if target is None:
        return PeekResult(location=None, state=LocationState.OUT_OF_BOUNDS)
    return PeekResult(location=target, state=peek_location(piece, target, board))


def walk_direction(
    piece: Piece,
    direction: Direction,
    board: Board,
    start: Optional[Coordinate] = None,
    max_steps: Optional[int] = None,
) -> None:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    Keep stepping along the direction:
    * empty squares are added to the moves, and we continue
    * the first square occupied by the opponent is added to the captures, and we stop
    * our own piece or the edge of the board stops us right away

    `max_steps=1` turns this into the single step used by the king.
    """
    location = start if start is not None else piece.location
    steps = 0
    while max_steps is None or steps < max_steps:
        steps += 1
        peek = peek_direction(piece, direction, board, location)
        if peek.state == LocationState.EMPTY:
            assert peek.location is not None
            piece.add_valid_move(peek.location)
            location = peek.location
            continue

        if peek.state == LocationState.CAPTURE:
            assert peek.location is not None
            piece.add_valid_capture(peek.location)
        break


# --- MOVEMENT RULES ---
def forward_direction(color: Color) -> Direction:
    """White moves UP the board, black moves DOWN"""
    return Direction.NORTH if color == Color.WHITE else Direction.SOUTH


def pawn_capture_directions(color: Color) -> tuple[Direction, Direction]:
    if color == Color.WHITE:
        return Direction.NORTH_EAST, Direction.NORTH_WEST
    return Direction.SOUTH_EAST, Direction.SOUTH_WEST


def candidate_pawn_moves(piece: Piece, board: Board) -> None:
    """
    A pawn:
    - moves by a single square forward (onto an empty square only, it never takes forward).
    - It can move by two in their first move, if the first square is empty as well
    - takes diagonally forward (capture only)
    """
    forward = forward_direction(piece.color)
    first_step = peek_direction(piece, forward, board)
    if first_step.state == LocationState.EMPTY:
        assert first_step.location is not None
        piece.add_valid_move(first_step.location)
        if piece.first_move:
            second_step = peek_direction(piece, forward, board, first_step.location)
            if second_step.state == LocationState.EMPTY:
                assert second_step.location is not None
                piece.add_valid_move(second_step.location)

    for direction in pawn_capture_directions(piece.color):
        peek = peek_direction(piece, direction, board)
        if peek.state == LocationState.CAPTURE:
            assert peek.location is not None
            piece.add_valid_capture(peek.location)


# One step along the cardinal direction, then one diagonal step: together this makes the L-shape.
KNIGHT_SECONDARY_DIRECTIONS: dict[Direction, tuple[Direction, Direction]] = {
    Direction.NORTH: (Direction.NORTH_EAST, Direction.NORTH_WEST),
    Direction.EAST: (Direction.NORTH_EAST, Direction.SOUTH_EAST),
    Direction.SOUTH: (Direction.SOUTH_EAST, Direction.SOUTH_WEST),
    Direction.WEST: (Direction.NORTH_WEST, Direction.SOUTH_WEST),
}


def candidate_knight_moves(piece: Piece, board: Board) -> None:
    """Knights jump: the square in between does not matter, only where they land."""
    for cardinal, diagonals in KNIGHT_SECONDARY_DIRECTIONS.items():
        first_step = peek_direction(piece, cardinal, board)
        if first_step.state == LocationState.OUT_OF_BOUNDS:
            continue

        for diagonal in diagonals:
            landing = peek_direction(piece, diagonal, board, first_step.location)
            if landing.state == LocationState.EMPTY:
                assert landing.location is not None
                piece.add_valid_move(landing.location)
            elif landing.state == LocationState.CAPTURE:
                assert landing.location is not None
                piece.add_valid_capture(landing.location)


def candidate_bishop_moves(piece: Piece, board: Board) -> None:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    for direction in DIAGONALS:
        walk_direction(piece, direction, board)


def candidate_rook_moves(piece: Piece, board: Board) -> None:
    """Rooks move either horizontally or vertically"""
    for direction in ORTHOGONALS:
        walk_direction(piece, direction, board)


def candidate_queen_moves(piece: Piece, board: Board) -> None:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    candidate_bishop_moves(piece, board)
    candidate_rook_moves(piece, board)


def candidate_king_moves(piece: Piece, board: Board) -> None:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled by the resolver).
    """
    for direction in ALL_DIRECTIONS:
        walk_direction(piece, direction, board, max_steps=1)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Piece, Board], None]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def squares_between_on_rank(from_square: Coordinate, to_square: Coordinate) -> list[Coordinate]:
    """
    Find the squares in between the two squares specified that are on the same rank.
    Ordered starting next to `from_square`.

    Needed for checking if you can still castle (the resolver checks which of those are empty etc.)
    """
    if from_square.rank != to_square.rank:
        raise ValueError(
            f"squares_between_on_rank requires both squares to lie on the same rank. \n from: {from_square}\n to:{to_square}"
        )

    if from_square == to_square:
        return []

    direction = Direction.EAST if to_square.file > from_square.file else Direction.WEST
    squares_found: list[Coordinate] = []
    square = from_square.step(direction)
    while square is not None and square != to_square:
        squares_found.append(square)
        square = square.step(direction)
    return squares_found
