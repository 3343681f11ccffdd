"""Castling: which castling moves the resolver finds, and how the match applies them."""

import pytest

from chessmatch.chess.board import Board
from chessmatch.chess.castling import CastleSide
from chessmatch.chess.coordinate import Coordinate
from chessmatch.chess.match import MatchState
from chessmatch.chess.pieces import Color, PieceType
from chessmatch.chess.resolver import find_castle_records, generate_raw_moves

BOTH_SIDES_OPEN = "r3k2r/8/8/8/8/8/8/R3K2R w"


def sq(algebraic: str) -> Coordinate:
    return Coordinate.from_algebraic(algebraic)


def castle_sides(match: MatchState, color: Color) -> set[CastleSide]:
    return {record.side for record in match.castle_records[color]}


def test_both_sides_available() -> None:
    match = MatchState.new_match("alice", "bob", BOTH_SIDES_OPEN)
    assert castle_sides(match, Color.WHITE) == {CastleSide.KING_SIDE, CastleSide.QUEEN_SIDE}

    king = match.piece_at(sq("e1"))
    assert {sq("g1"), sq("c1")} <= king.legal_moves

    records = {record.side: record for record in match.castle_records[Color.WHITE]}
    assert records[CastleSide.KING_SIDE].king_target == sq("g1")
    assert records[CastleSide.KING_SIDE].rook_target == sq("f1")
    assert records[CastleSide.QUEEN_SIDE].king_target == sq("c1")
    assert records[CastleSide.QUEEN_SIDE].rook_target == sq("d1")
    assert records[CastleSide.QUEEN_SIDE].rook_id == match.piece_at(sq("a1")).id


def test_only_the_color_to_move_gets_castling_records() -> None:
    match = MatchState.new_match("alice", "bob", BOTH_SIDES_OPEN)
    assert match.castle_records[Color.BLACK] == []


def test_castle_king_side_moves_the_rook() -> None:
    match = MatchState.new_match("alice", "bob", BOTH_SIDES_OPEN)
    rook = match.piece_at(sq("h1"))
    result = match.apply_move_from(sq("e1"), sq("g1"))

    assert result.castle_side == CastleSide.KING_SIDE
    assert match.piece_at(sq("g1")).type == PieceType.KING
    assert match.piece_at(sq("f1")) is rook
    assert not rook.first_move
    assert match.to_fen() == "r3k2r/8/8/8/8/8/8/R4RK1 b"


def test_castle_queen_side_moves_the_rook() -> None:
    match = MatchState.new_match("alice", "bob", BOTH_SIDES_OPEN)
    result = match.apply_move_from(sq("e1"), sq("c1"))
    assert result.castle_side == CastleSide.QUEEN_SIDE
    assert match.to_fen() == "r3k2r/8/8/8/8/8/8/2KR3R b"


def test_rook_on_f1_attacks_black_king_side() -> None:
    """After white castles, the rook on f1 looks at f8: black can only castle queen side."""
    match = MatchState.new_match("alice", "bob", BOTH_SIDES_OPEN)
    match.apply_move_from(sq("e1"), sq("g1"))
    assert castle_sides(match, Color.BLACK) == {CastleSide.QUEEN_SIDE}
    assert sq("g8") not in match.piece_at(sq("e8")).legal_moves


def test_blocked_path() -> None:
    match = MatchState.new_match("alice", "bob", "r3k2r/8/8/8/8/8/8/RN2K2R w")
    assert castle_sides(match, Color.WHITE) == {CastleSide.KING_SIDE}


def test_attacked_path() -> None:
    """The black rook on f5 covers f1, which the king would have to cross."""
    match = MatchState.new_match("alice", "bob", "r3k2r/8/8/5r2/8/8/8/R3K2R w")
    assert castle_sides(match, Color.WHITE) == {CastleSide.QUEEN_SIDE}


def test_cannot_castle_out_of_check() -> None:
    match = MatchState.new_match("alice", "bob", "r3k2r/8/8/8/4r3/8/8/R3K2R w")
    assert castle_sides(match, Color.WHITE) == set()
    king = match.piece_at(sq("e1"))
    assert sq("g1") not in king.legal_moves
    assert sq("c1") not in king.legal_moves


def test_rook_that_moved_cannot_castle() -> None:
    """Moving the rook away and back does not restore its right to castle."""
    match = MatchState.new_match("alice", "bob", "r3k2r/p7/8/8/8/8/8/R3K2R w")
    match.apply_move_from(sq("h1"), sq("h2"))
    match.apply_move_from(sq("a7"), sq("a6"))
    match.apply_move_from(sq("h2"), sq("h1"))
    match.apply_move_from(sq("a6"), sq("a5"))
    assert castle_sides(match, Color.WHITE) == {CastleSide.QUEEN_SIDE}


def test_king_that_moved_cannot_castle() -> None:
    match = MatchState.new_match("alice", "bob", "r3k2r/p7/8/8/8/8/8/R3K2R w")
    match.apply_move_from(sq("e1"), sq("e2"))
    match.apply_move_from(sq("a7"), sq("a6"))
    match.apply_move_from(sq("e2"), sq("e1"))
    match.apply_move_from(sq("a6"), sq("a5"))
    assert castle_sides(match, Color.WHITE) == set()


@pytest.mark.parametrize("in_check", [True, False])
def test_find_castle_records_directly(in_check: bool) -> None:
    board = Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R")
    generate_raw_moves(board)
    records = find_castle_records(board, Color.BLACK, in_check=in_check)
    expected = set() if in_check else {CastleSide.KING_SIDE, CastleSide.QUEEN_SIDE}
    assert {record.side for record in records} == expected
