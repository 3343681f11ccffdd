"""Unit tests for chessmatch/chess/resolver.py"""

from chessmatch.chess.board import Board
from chessmatch.chess.coordinate import Coordinate
from chessmatch.chess.pieces import Color
from chessmatch.chess.resolver import (
    KingState,
    classify_king,
    filter_self_checks,
    generate_raw_moves,
    is_king_in_check,
    is_square_attacked,
    leaves_king_in_check,
    resolve,
)

NOT_IN_CHECK = {color: KingState.NOT_IN_CHECK for color in Color}


def sq(algebraic: str) -> Coordinate:
    return Coordinate.from_algebraic(algebraic)


def squares(*algebraic: str) -> set[Coordinate]:
    return {sq(a) for a in algebraic}


def test_raw_generation_clears_old_caches() -> None:
    board = Board.standard()
    pawn = board.piece_at(sq("e2"))
    pawn.add_valid_move(sq("e7"))
    generate_raw_moves(board)
    assert pawn.legal_moves == squares("e3", "e4")


def test_captured_pieces_get_no_moves() -> None:
    board = Board.standard()
    pawn = board.piece_at(sq("e2"))
    board.capture(pawn.id)
    generate_raw_moves(board)
    assert not pawn.has_any_valid_moves_or_captures()


def test_starting_position() -> None:
    """20 legal moves for white, nobody in check."""
    board = Board.standard()
    resolution = resolve(board, Color.WHITE, NOT_IN_CHECK)
    assert resolution.king_states == NOT_IN_CHECK
    assert resolution.castle_records[Color.WHITE] == []

    white_moves = sum(len(piece.legal_moves) for piece in board.pieces_of(Color.WHITE))
    assert white_moves == 20


def test_is_king_in_check() -> None:
    board = Board.from_fen("4k3/8/8/8/4r3/8/8/4K3")
    generate_raw_moves(board)
    assert is_king_in_check(board, Color.WHITE)
    assert not is_king_in_check(board, Color.BLACK)


def test_pinned_piece_cannot_move() -> None:
    """The bishop on e2 shields its king from the rook on e7."""
    board = Board.from_fen("4k3/4r3/8/8/8/8/4B3/4K3")
    resolve(board, Color.WHITE, NOT_IN_CHECK)
    bishop = board.piece_at(sq("e2"))
    assert not bishop.has_any_valid_moves_or_captures()


def test_leaves_king_in_check() -> None:
    board = Board.from_fen("4k3/4r3/8/8/8/8/4B3/4K3")
    generate_raw_moves(board)
    bishop = board.piece_at(sq("e2"))
    assert leaves_king_in_check(board, bishop.id, sq("d3"))
    # simulation never touches the real board
    assert bishop.location == sq("e2")


def test_king_cannot_walk_into_check() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/3r4/4K3")
    resolve(board, Color.WHITE, NOT_IN_CHECK)
    king = board.piece_at(sq("e1"))
    assert king.legal_moves == squares("f1")
    assert king.legal_captures == squares("d2")


def test_king_cannot_take_protected_piece() -> None:
    board = Board.from_fen("4k3/8/8/8/8/4b3/3r4/4K3")
    resolve(board, Color.WHITE, NOT_IN_CHECK)
    king = board.piece_at(sq("e1"))
    assert king.legal_captures == set()


def test_capturing_the_king_is_never_legal() -> None:
    """A raw capture of the king only shows the king is attacked."""
    board = Board.from_fen("4k3/8/8/8/4r3/8/8/R3K3")
    generate_raw_moves(board)
    rook = board.piece_at(sq("e4"))
    assert sq("e1") in rook.legal_captures
    filter_self_checks(board)
    assert sq("e1") not in rook.legal_captures


def test_is_square_attacked() -> None:
    board = Board.from_fen("4k3/8/8/5r2/8/8/8/4K3")
    generate_raw_moves(board)
    king = board.king(Color.WHITE)
    assert is_square_attacked(board, king, sq("f1"))
    assert not is_square_attacked(board, king, sq("d1"))


def test_in_check() -> None:
    board = Board.from_fen("4k3/8/8/8/4r3/8/8/4K3")
    resolution = resolve(board, Color.WHITE, NOT_IN_CHECK)
    assert resolution.king_states[Color.WHITE] == KingState.IN_CHECK
    assert resolution.king_states[Color.BLACK] == KingState.NOT_IN_CHECK


def test_checkmate() -> None:
    board = Board.from_fen("R5k1/5ppp/8/8/8/8/8/6K1")
    resolution = resolve(board, Color.BLACK, NOT_IN_CHECK)
    assert resolution.king_states[Color.BLACK] == KingState.IN_CHECKMATE


def test_check_that_can_be_blocked_is_no_mate() -> None:
    board = Board.from_fen("R5k1/5ppp/8/8/8/8/2r5/6K1")
    resolution = resolve(board, Color.BLACK, NOT_IN_CHECK)
    assert resolution.king_states[Color.BLACK] == KingState.IN_CHECK
    # the black rook can only stop the check by blocking on c8
    rook = board.piece_at(sq("c2"))
    assert rook.legal_moves == squares("c8")
    assert rook.legal_captures == set()


def test_stalemate() -> None:
    board = Board.from_fen("7k/5Q2/6K1/8/8/8/8/8")
    resolution = resolve(board, Color.BLACK, NOT_IN_CHECK)
    assert resolution.king_states[Color.BLACK] == KingState.IN_STALEMATE


def test_no_stalemate_while_other_pieces_can_move() -> None:
    board = Board.from_fen("7k/5Q2/6K1/8/8/8/p7/8")
    resolution = resolve(board, Color.BLACK, NOT_IN_CHECK)
    assert resolution.king_states[Color.BLACK] == KingState.NOT_IN_CHECK


def test_classify_king_out_of_check() -> None:
    """Getting out of a check is reported once, as NOT_IN_CHECKMATE."""
    board = Board.from_fen("4k3/8/8/8/8/8/8/4K3")
    resolve(board, Color.WHITE, NOT_IN_CHECK)
    assert (
        classify_king(board, Color.WHITE, attacked=False, previous=KingState.IN_CHECK)
        == KingState.NOT_IN_CHECKMATE
    )
    assert (
        classify_king(
            board, Color.WHITE, attacked=False, previous=KingState.NOT_IN_CHECKMATE
        )
        == KingState.NOT_IN_CHECK
    )
