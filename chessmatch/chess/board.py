"""The Board is the id-indexed store of every piece in the match (captured pieces included)"""

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Self
from uuid import UUID

from chessmatch.chess.coordinate import FILES, NUM_RANKS, RANKS, Coordinate
from chessmatch.chess.pieces import FEN_TO_PIECE, Color, Piece, PieceType
from chessmatch.core.exceptions import InvalidFENError, NotFoundError

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

# Files (0-indexed) the pieces start on in the standard layout
BACK_RANK_FILES: dict[PieceType, tuple[int, ...]] = {
    PieceType.ROOK: (0, 7),
    PieceType.KNIGHT: (1, 6),
    PieceType.BISHOP: (2, 5),
    PieceType.QUEEN: (3,),
    PieceType.KING: (4,),
}


def is_home_square(piece_type: PieceType, color: Color, location: Coordinate) -> bool:
    """Is this the square this kind of piece starts the game on (in the standard layout)?"""
    if piece_type == PieceType.PAWN:
        return location.rank == (2 if color == Color.WHITE else NUM_RANKS - 1)
    back_rank = 1 if color == Color.WHITE else NUM_RANKS
    return location.rank == back_rank and location.file in BACK_RANK_FILES[piece_type]


def is_valid_placement(placement: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    rank_fens = placement.split("/")
    if len(rank_fens) != NUM_RANKS:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character in RANKS:
                file_count += int(character)
            elif character.isascii() and character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != len(FILES):
            return False
    return True


@dataclass
class Board:
    pieces: dict[UUID, Piece]
    # location -> id of the piece standing there. Only pieces in play are indexed.
    _occupancy: dict[Coordinate, UUID] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        self._reindex()

    @classmethod
    def from_pieces(cls, pieces: Iterable[Piece]) -> Self:
        return cls({piece.id: piece for piece in pieces})

    @classmethod
    def standard(cls) -> Self:
        """32 pieces in the standard starting layout"""
        return cls.from_fen(STARTING_PLACEMENT)

    @classmethod
    def from_fen(cls, placement: str) -> Self:
        """Construct a board using the placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.

        NOTE: A piece counts as 'not moved yet' when it stands on its home square (matters for pawns / castling).
        """
        if not is_valid_placement(placement):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN placement: {placement}")

        pieces: list[Piece] = []
        for rank_idx, fen_one_rank in enumerate(placement.split("/")):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = NUM_RANKS - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 0
            for character in fen_one_rank:
                if character not in RANKS:
                    color = Color.WHITE if character.isupper() else Color.BLACK
                    piece_type = FEN_TO_PIECE[character.lower()]
                    location = Coordinate(file, rank)
                    pieces.append(
                        Piece(
                            piece_type,
                            color,
                            location,
                            first_move=is_home_square(piece_type, color, location),
                        )
                    )
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    file += int(character)

        for color in Color:
            num_kings = sum(
                1 for p in pieces if p.type == PieceType.KING and p.color == color
            )
            if num_kings != 1:
                raise InvalidFENError(
                    f"Placement needs exactly one {color.value} king, found {num_kings}: {placement}"
                )
        return cls.from_pieces(pieces)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(NUM_RANKS, 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(len(FILES)):
            piece = self.occupant(Coordinate(file, rank))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- LOOKUPS ---
    def piece(self, piece_id: UUID) -> Piece:
        try:
            return self.pieces[piece_id]
        except KeyError:
            raise NotFoundError(f"No piece with id {piece_id} in this match.") from None

    def occupant(self, location: Coordinate) -> Optional[Piece]:
        piece_id = self._occupancy.get(location)
        return self.pieces[piece_id] if piece_id is not None else None

    def piece_at(self, location: Coordinate) -> Piece:
        piece = self.occupant(location)
        if piece is None:
            raise NotFoundError(f"There is no piece on {location}.")
        return piece

    def in_play(self) -> list[Piece]:
        return [piece for piece in self.pieces.values() if not piece.captured]

    def pieces_of(
        self, color: Color, piece_type: Optional[PieceType] = None
    ) -> list[Piece]:
        """Pieces in play of a given color (and type)"""
        return [
            piece
            for piece in self.in_play()
            if piece.color == color and (piece_type is None or piece.type == piece_type)
        ]

    def king(self, color: Color) -> Piece:
        kings = self.pieces_of(color, PieceType.KING)
        if len(kings) != 1:
            # a captured / missing king is not a position this engine models
            raise NotFoundError(f"Expected one {color.value} king in play, found {len(kings)}.")
        return kings[0]

    def is_attacked(self, location: Coordinate, by_color: Color) -> bool:
        """Can any piece of `by_color` capture on this square (according to the current caches)?"""
        return any(location in piece.legal_captures for piece in self.pieces_of(by_color))

    # --- MUTATIONS ---
    def move_piece(self, piece_id: UUID, destination: Coordinate) -> None:
        """Update the position on the board. The destination should be empty (capture first)."""
        piece = self.piece(piece_id)
        self._occupancy.pop(piece.location, None)
        piece.set_moved(destination)
        self._occupancy[destination] = piece.id

    def capture(self, piece_id: UUID) -> None:
        piece = self.piece(piece_id)
        piece.set_captured()
        if self._occupancy.get(piece.location) == piece.id:
            del self._occupancy[piece.location]

    def clear_all_moves(self) -> None:
        for piece in self.pieces.values():
            piece.clear_all_moves()

    def copy_position(self) -> Self:
        """
        Independent copy of the position, used to simulate moves.
        Every piece is rebuilt (all remaining fields are immutable values), and the caches start out empty.
        """
        return type(self).from_pieces(
            replace(piece, legal_moves=set(), legal_captures=set())
            for piece in self.pieces.values()
        )

    def simulate(self, piece_id: UUID, destination: Coordinate) -> Self:
        """Copy of the board with a single move / capture made on it."""
        board = self.copy_position()
        victim = board.occupant(destination)
        if victim is not None:
            board.capture(victim.id)
        board.move_piece(piece_id, destination)
        return board

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {
            color: sum(piece.points for piece in self.pieces_of(color))
            for color in Color
        }

    def _reindex(self) -> None:
        self._occupancy = {piece.location: piece.id for piece in self.in_play()}
