"""
Standard algebraic notation for applied moves.

Built from the MoveResult alone: the resolver / match never call into this module.
NOTE: No disambiguation (Nbd2) yet: two knights that can reach the same square get the same text.
"""

from chessmatch.chess.castling import CastleSide
from chessmatch.chess.match import MoveResult
from chessmatch.chess.pieces import PIECE_TO_FEN, PieceType
from chessmatch.chess.resolver import KingState

CASTLE_NOTATION: dict[CastleSide, str] = {
    CastleSide.KING_SIDE: "O-O",
    CastleSide.QUEEN_SIDE: "O-O-O",
}

CHECK_SUFFIX: dict[KingState, str] = {
    KingState.IN_CHECK: "+",
    KingState.IN_CHECKMATE: "#",
}


def piece_letter(piece_type: PieceType) -> str:
    """Pawns do not get a letter"""
    return "" if piece_type == PieceType.PAWN else PIECE_TO_FEN[piece_type].upper()


def to_san(result: MoveResult) -> str:
    """
    examples:
    * "e4": pawn moved to e4
    * "Nxf3": knight took on f3
    * "exd5": pawn on the e-file took on d5
    * "Qh4#": queen moved to h4, opponent is mated
    * "O-O": castled king side
    """
    if result.castle_side is not None:
        text = CASTLE_NOTATION[result.castle_side]
    else:
        capture = ""
        if result.is_capture:
            capture = (
                f"{result.source.file_letter}x"
                if result.piece_type == PieceType.PAWN
                else "x"
            )
        text = f"{piece_letter(result.piece_type)}{capture}{result.destination}"
    return text + CHECK_SUFFIX.get(result.opponent_king_state, "")


def format_move_log(results: list[MoveResult]) -> str:
    """Numbered move list, ex) '1.e4 e5 2.Nf3 Nc6'"""
    sans = [to_san(result) for result in results]
    turns = [
        f"{number}.{' '.join(sans[idx : idx + 2])}"
        for number, idx in enumerate(range(0, len(sans), 2), start=1)
    ]
    return " ".join(turns)
