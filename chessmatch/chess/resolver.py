"""
The move resolver: turns raw piece movement into the legal destinations of every piece, and classifies both kings.

One resolution cycle
----

1. clear all caches, and generate the raw candidate moves / captures of every piece in play (kings last)
2. find the castling moves available to the color to move
3. remove every candidate that would leave the mover's own king capturable
   (simulate the candidate on a copy of the board, regenerate raw moves there, look if the king can be taken)
4. classify both kings: in check / checkmate / stalemate / not in check
"""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from loguru import logger

from chessmatch.chess.board import Board
from chessmatch.chess.castling import CastleRecord, CastleSide
from chessmatch.chess.coordinate import Coordinate
from chessmatch.chess.moves import MOVEMENT_RULES, squares_between_on_rank
from chessmatch.chess.pieces import Color, Piece, PieceType


class KingState(Enum):
    NOT_IN_CHECK = "not_in_check"
    IN_CHECK = "in_check"
    IN_CHECKMATE = "in_checkmate"
    IN_STALEMATE = "in_stalemate"
    # legal position, and the king just got out of a check
    NOT_IN_CHECKMATE = "not_in_checkmate"


@dataclass
class Resolution:
    """Everything a cycle produces on top of the piece caches."""

    king_states: dict[Color, KingState]
    castle_records: dict[Color, list[CastleRecord]] = field(
        default_factory=lambda: {color: [] for color in Color}
    )


# --- RAW GENERATION ---
def generate_raw_moves(board: Board) -> None:
    """
    Before knowing the set of legal moves, we use raycasting to find candidate moves, which will later be tested for legality.

    Kings go last, after every other piece has its caches filled.
    """
    board.clear_all_moves()
    pieces = board.in_play()
    for piece in sorted(pieces, key=lambda p: p.type == PieceType.KING):
        MOVEMENT_RULES[piece.type](piece, board)


def is_king_in_check(board: Board, color: Color) -> bool:
    """Is the king of this color in the capture set of any opposing piece? (caches must be filled)"""
    king = board.king(color)
    return board.is_attacked(king.location, by_color=color.opponent)


# --- SELF-CHECK FILTER ---
def leaves_king_in_check(board: Board, piece_id: UUID, destination: Coordinate) -> bool:
    """
    Return True if the move / capture puts (or leaves) your own king in check

    plan:
    1. Copy the board
    2. make the candidate move
    3. regenerate the raw moves on the copy (one ply only, no filtering there)
    4. determine if king is in check on the new board
    """
    color = board.piece(piece_id).color
    simulated = board.simulate(piece_id, destination)
    generate_raw_moves(simulated)
    return is_king_in_check(simulated, color)


def is_king_capture(board: Board, destination: Coordinate) -> bool:
    occupant = board.occupant(destination)
    return occupant is not None and occupant.type == PieceType.KING


def filter_self_checks(board: Board) -> None:
    """
    Only keep the candidates that do not put (or leave) you in check.

    NOTE: a raw capture of the opposing king only tells us that king is attacked. It is never a legal capture.
    """
    for piece in board.in_play():
        unsafe_moves = [
            location
            for location in sorted(piece.legal_moves)
            if leaves_king_in_check(board, piece.id, location)
        ]
        unsafe_captures = [
            location
            for location in sorted(piece.legal_captures)
            if is_king_capture(board, location)
            or leaves_king_in_check(board, piece.id, location)
        ]
        for location in unsafe_moves:
            piece.remove_valid_move(location)
        for location in unsafe_captures:
            piece.remove_valid_capture(location)


# --- CASTLING ---
def is_square_attacked(board: Board, king: Piece, square: Coordinate) -> bool:
    """
    Would the king be capturable when standing on this (empty) square?

    An empty square never shows up in a capture set, so we put the king on it (on a copy of the board) and look again.
    """
    simulated = board.simulate(king.id, square)
    generate_raw_moves(simulated)
    return simulated.is_attacked(square, by_color=king.color.opponent)


def find_castle_records(board: Board, color: Color, in_check: bool) -> list[CastleRecord]:
    """
    Find the castling moves for the king of the given color
    ---

    **you are allowed to castle if**

    * King and rook have not moved yet.
    * You are not currently put in check (you cannot castle out of a check).
    * Every square in between king and rook is empty.
    * Neither of the two squares the king crosses / lands on is under attack.

    Both of those squares are added to the king's moves (the second one is the castling move).

    NOTE: the in-check rule is stricter than only requiring the crossed / landing squares to be safe: a king in check never castles.
    """
    king = board.king(color)
    if not king.first_move or in_check:
        return []

    records: list[CastleRecord] = []
    for rook in board.pieces_of(color, PieceType.ROOK):
        if not rook.first_move or rook.location.rank != king.location.rank:
            continue

        # queen side: 3 squares (b, c, d), king side: 2 squares (f, g)
        between = squares_between_on_rank(king.location, rook.location)
        if len(between) < 2:
            continue

        if any(board.occupant(square) is not None for square in between):
            continue

        rook_target, king_target = between[0], between[1]
        if any(
            is_square_attacked(board, king, square)
            for square in (rook_target, king_target)
        ):
            continue

        side = (
            CastleSide.KING_SIDE
            if rook.location.file > king.location.file
            else CastleSide.QUEEN_SIDE
        )
        king.add_valid_move(rook_target)
        king.add_valid_move(king_target)
        records.append(
            CastleRecord(
                king_id=king.id,
                king_target=king_target,
                rook_id=rook.id,
                rook_target=rook_target,
                side=side,
            )
        )
    return records


# --- KING STATUS ---
def classify_king(
    board: Board, color: Color, attacked: bool, previous: KingState
) -> KingState:
    """
    Checkmate: attacked, and no legal move / capture left for this side.
    Stalemate: not attacked, and no legal move / capture left for this side.
    """
    has_legal_move = any(
        piece.has_any_valid_moves_or_captures() for piece in board.pieces_of(color)
    )
    if not has_legal_move:
        return KingState.IN_CHECKMATE if attacked else KingState.IN_STALEMATE
    if attacked:
        return KingState.IN_CHECK
    if previous == KingState.IN_CHECK:
        return KingState.NOT_IN_CHECKMATE
    return KingState.NOT_IN_CHECK


# --- ONE FULL CYCLE ---
def resolve(
    board: Board, color_to_move: Color, previous: dict[Color, KingState]
) -> Resolution:
    """Run a full resolution cycle. Fills the caches of every piece in play (in place)."""
    logger.debug(f"Calculating valid moves ({color_to_move.value} to move)")

    generate_raw_moves(board)
    attacked = {color: is_king_in_check(board, color) for color in Color}

    resolution = Resolution(king_states={})
    resolution.castle_records[color_to_move] = find_castle_records(
        board, color_to_move, attacked[color_to_move]
    )

    filter_self_checks(board)

    for color in Color:
        resolution.king_states[color] = classify_king(
            board, color, attacked[color], previous[color]
        )

    logger.debug(
        f"Resolved: {', '.join(f'{c.value}={s.value}' for c, s in resolution.king_states.items())}; "
        f"{len(resolution.castle_records[color_to_move])} castling option(s)"
    )
    return resolution
