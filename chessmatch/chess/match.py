"""
The MatchState is the entrypoint into the domain layer for the service layer.
It owns every piece of the match, the turn counter, the king states and castling options,
and it is responsible for applying a single move (a ply) and triggering the resolver afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Self
from uuid import UUID, uuid4

from loguru import logger

from chessmatch.chess.board import Board
from chessmatch.chess.castling import CastleRecord, CastleSide
from chessmatch.chess.coordinate import Coordinate
from chessmatch.chess.pieces import Color, Piece, PieceType
from chessmatch.chess.resolver import KingState, resolve
from chessmatch.core.exceptions import IllegalMoveError, NotYourTurnError


class Outcome(Enum):
    WHITE_WINS = "white_wins"
    BLACK_WINS = "black_wins"
    STALEMATE = "stalemate"


@dataclass(frozen=True)
class MoveResult:
    """
    Everything that happened during a single applied move.
    This is also the entry type of the (append-only) move log, and what the notation is built from.
    """

    piece_id: UUID
    piece_type: PieceType
    color: Color
    player_id: str
    source: Coordinate
    destination: Coordinate
    captured_piece_id: Optional[UUID] = None
    castle_side: Optional[CastleSide] = None
    opponent_king_state: KingState = KingState.NOT_IN_CHECK
    id: UUID = field(default_factory=uuid4)

    @property
    def is_capture(self) -> bool:
        return self.captured_piece_id is not None


@dataclass(frozen=True)
class LegalDestinations:
    moves: list[Coordinate]
    captures: list[Coordinate]


def initial_king_states() -> dict[Color, KingState]:
    return {color: KingState.NOT_IN_CHECK for color in Color}


@dataclass
class MatchState:
    match_id: UUID
    players: dict[Color, str]
    board: Board
    ply: int = 0  # number of moves applied; white moves on even plies
    king_states: dict[Color, KingState] = field(default_factory=initial_king_states)
    castle_records: dict[Color, list[CastleRecord]] = field(
        default_factory=lambda: {color: [] for color in Color}
    )
    move_log: list[MoveResult] = field(default_factory=list)
    outcome: Optional[Outcome] = None

    @classmethod
    def new_match(
        cls,
        white_player_id: str,
        black_player_id: str,
        starting_fen: Optional[str] = None,
    ) -> Self:
        """
        Start a match from the standard layout, or from a custom position.

        A custom position is given as FEN: <placement> [<active color>] (any further FEN fields are ignored).
        Pieces standing on their home squares are considered not to have moved yet.
        """
        board = Board.standard()
        ply = 0
        if starting_fen:
            fields = starting_fen.split(" ")
            board = Board.from_fen(fields[0])
            ply = 1 if len(fields) > 1 and fields[1] == "b" else 0

        match = cls(
            match_id=uuid4(),
            players={Color.WHITE: white_player_id, Color.BLACK: black_player_id},
            board=board,
            ply=ply,
        )
        match.calculate_valid_moves()
        logger.info(
            f"New match {match.match_id}: {white_player_id} (white) vs {black_player_id} (black)"
        )
        return match

    # --- QUERIES ---
    @property
    def color_to_move(self) -> Color:
        return Color.WHITE if self.ply % 2 == 0 else Color.BLACK

    def current_turn(self) -> tuple[int, Color]:
        """(full move number, color to move). The move number starts at 1 and goes up after black moves."""
        return self.ply // 2 + 1, self.color_to_move

    def king_status(self, color: Color) -> KingState:
        return self.king_states[color]

    def legal_destinations_for(self, piece_id: UUID) -> LegalDestinations:
        piece = self.board.piece(piece_id)
        return LegalDestinations(
            moves=sorted(piece.legal_moves), captures=sorted(piece.legal_captures)
        )

    def piece_at(self, location: Coordinate) -> Piece:
        return self.board.piece_at(location)

    def material(self) -> dict[Color, int]:
        return self.board.count_material()

    @property
    def is_finished(self) -> bool:
        return self.outcome is not None

    @property
    def winner(self) -> Optional[str]:
        """Player id of the winner (only after a checkmate)"""
        if self.outcome == Outcome.WHITE_WINS:
            return self.players[Color.WHITE]
        if self.outcome == Outcome.BLACK_WINS:
            return self.players[Color.BLACK]
        return None

    def to_fen(self) -> str:
        """Placement + active color. Informational only (castling rights etc. are not part of it)."""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        return f"{self.board.to_fen()} {active_color}"

    # --- MOVE APPLICATION ---
    def apply_move(self, piece_id: UUID, destination: Coordinate) -> MoveResult:
        """
        Attempt to make a move
        -----

        1. the piece must exist, be in play and be of the color to move
        2. destination must be in the piece's legal moves / captures (nothing is mutated before this point)
        3. take the piece standing on the destination (if capture)
        4. move the piece (castling: move the rook too)
        5. flip the turn and run the resolver for the new position
        6. log the move
        """
        piece = self.board.piece(piece_id)
        if piece.captured:
            raise IllegalMoveError(f"The {piece.type.value} with id {piece_id} has been captured.")

        if piece.color != self.color_to_move:
            raise NotYourTurnError(
                f"It is not {piece.color.value}'s turn. Waiting for {self.color_to_move.value} to make a move first."
            )

        is_capture = destination in piece.legal_captures
        if not is_capture and destination not in piece.legal_moves:
            raise IllegalMoveError(
                f"Move not allowed: {piece.type.value} {piece.location} -> {destination}"
            )

        source = piece.location
        captured_piece_id = self._handle_capture(destination) if is_capture else None
        self.board.move_piece(piece.id, destination)

        castle_side = None
        if piece.type == PieceType.KING:
            castle_side = self._handle_king_castle(piece, destination)

        self._change_turn()
        self.calculate_valid_moves()

        result = MoveResult(
            piece_id=piece.id,
            piece_type=piece.type,
            color=piece.color,
            player_id=self.players[piece.color],
            source=source,
            destination=destination,
            captured_piece_id=captured_piece_id,
            castle_side=castle_side,
            opponent_king_state=self.king_states[piece.color.opponent],
        )
        self.move_log.append(result)
        logger.info(
            f"Match {self.match_id}: {piece.color.value} {piece.type.value} {source} -> {destination}"
            f" (opponent king: {result.opponent_king_state.value})"
        )
        return result

    def apply_move_from(self, source: Coordinate, destination: Coordinate) -> MoveResult:
        """Coordinate-driven version of apply_move (what a front end sends: 'from this square to that square')."""
        return self.apply_move(self.piece_at(source).id, destination)

    def calculate_valid_moves(self) -> None:
        """Run a resolution cycle for the current position and store its results."""
        resolution = resolve(self.board, self.color_to_move, self.king_states)
        self.king_states = resolution.king_states
        self.castle_records = resolution.castle_records
        self._update_outcome()

    # -- PRIVATE HELPERS ---
    def _handle_capture(self, destination: Coordinate) -> UUID:
        victim = self.board.piece_at(destination)
        self.board.capture(victim.id)
        return victim.id

    def _handle_king_castle(self, king: Piece, destination: Coordinate) -> Optional[CastleSide]:
        """The king already moved to its target. If that target belongs to a castling move, also move the rook."""
        for record in self.castle_records[king.color]:
            if record.king_id == king.id and record.king_target == destination:
                self.board.move_piece(record.rook_id, record.rook_target)
                return record.side
        return None

    def _change_turn(self) -> None:
        self.ply += 1
        logger.debug(f"changed turn to: {self.color_to_move.value}")

    def _update_outcome(self) -> None:
        """The match is over as soon as the color to move is mated / stalemated."""
        state = self.king_states[self.color_to_move]
        if state == KingState.IN_CHECKMATE:
            self.outcome = (
                Outcome.BLACK_WINS
                if self.color_to_move == Color.WHITE
                else Outcome.WHITE_WINS
            )
        elif state == KingState.IN_STALEMATE:
            self.outcome = Outcome.STALEMATE


def new_match(white_player_id: str, black_player_id: str) -> MatchState:
    return MatchState.new_match(white_player_id, black_player_id)
