"""Defines the chess pieces: their identity, flags, and the per-cycle caches of legal destinations"""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID, uuid4

from chessmatch.chess.coordinate import Coordinate


class PieceType(Enum):
    PAWN = "pawn"
    ROOK = "rook"
    KNIGHT = "knight"
    BISHOP = "bishop"
    QUEEN = "queen"
    KING = "king"


class Color(Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


PIECE_POINTS: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
}


@dataclass
class Piece:
    """
    A single piece. Created once when the match starts and mutated in place for the rest of the match.

    NOTE: `legal_moves` / `legal_captures` are only valid for the current resolution cycle.
    The resolver clears them before every recomputation.
    """

    type: PieceType
    color: Color
    location: Coordinate
    id: UUID = field(default_factory=uuid4)
    captured: bool = False
    first_move: bool = True
    # TODO: nothing sets this yet. Needs a promotion choice in apply_move before it can be wired up.
    promoted: bool = False
    legal_moves: set[Coordinate] = field(default_factory=set)
    legal_captures: set[Coordinate] = field(default_factory=set)
    points: int = field(init=False)

    def __post_init__(self):
        # NOTE: The King's worth is undefined (does not count towards total points)
        self.points = PIECE_POINTS.get(self.type, 0)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    # --- MUTATIONS (called by the Board / Match only) ---
    def set_moved(self, location: Coordinate) -> None:
        self.first_move = False
        self.location = location

    def set_captured(self) -> None:
        self.captured = True

    # --- CACHE OF LEGAL DESTINATIONS ---
    def add_valid_move(self, location: Coordinate) -> None:
        self.legal_moves.add(location)

    def add_valid_capture(self, location: Coordinate) -> None:
        self.legal_captures.add(location)

    def remove_valid_move(self, location: Coordinate) -> None:
        self.legal_moves.discard(location)

    def remove_valid_capture(self, location: Coordinate) -> None:
        self.legal_captures.discard(location)

    def clear_all_moves(self) -> None:
        self.legal_moves.clear()
        self.legal_captures.clear()

    def has_any_valid_moves_or_captures(self) -> bool:
        return bool(self.legal_moves) or bool(self.legal_captures)
