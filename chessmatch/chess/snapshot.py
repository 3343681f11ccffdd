"""
Serialization of a complete match to / from JSON.

Every field of the MatchState round-trips, including the per-cycle caches, castling options and king states,
so a loaded match does not need a new resolution cycle: `load_match(save_match(match)) == match`.
"""

from typing import Optional, Self
from uuid import UUID

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from chessmatch.chess.board import Board
from chessmatch.chess.castling import CastleRecord, CastleSide
from chessmatch.chess.coordinate import Coordinate
from chessmatch.chess.match import MatchState, MoveResult, Outcome
from chessmatch.chess.notation import to_san
from chessmatch.chess.pieces import Color, Piece, PieceType
from chessmatch.chess.resolver import KingState
from chessmatch.core.exceptions import DeserializationError
from chessmatch.core.models import MatchModel
from chessmatch.core.shared_types import Status

SNAPSHOT_VERSION = 1


def _validate_square(value: str) -> str:
    # raises InvalidCoordinateError (a ValueError) -> pydantic reports it as a validation error
    Coordinate.from_algebraic(value)
    return value


def _to_coordinates(squares: list[str]) -> set[Coordinate]:
    return {Coordinate.from_algebraic(square) for square in squares}


def _to_squares(coordinates: set[Coordinate]) -> list[str]:
    return [coordinate.to_algebraic() for coordinate in sorted(coordinates)]


class PieceSnapshot(BaseModel):
    id: UUID
    type: PieceType
    color: Color
    location: str
    captured: bool = False
    first_move: bool = True
    promoted: bool = False
    legal_moves: list[str] = []
    legal_captures: list[str] = []

    @field_validator("location")
    @classmethod
    def validate_location(cls, value: str) -> str:
        return _validate_square(value)

    @field_validator("legal_moves", "legal_captures")
    @classmethod
    def validate_squares(cls, value: list[str]) -> list[str]:
        return [_validate_square(square) for square in value]

    @classmethod
    def from_piece(cls, piece: Piece) -> Self:
        return cls(
            id=piece.id,
            type=piece.type,
            color=piece.color,
            location=piece.location.to_algebraic(),
            captured=piece.captured,
            first_move=piece.first_move,
            promoted=piece.promoted,
            legal_moves=_to_squares(piece.legal_moves),
            legal_captures=_to_squares(piece.legal_captures),
        )

    def to_piece(self) -> Piece:
        return Piece(
            type=self.type,
            color=self.color,
            location=Coordinate.from_algebraic(self.location),
            id=self.id,
            captured=self.captured,
            first_move=self.first_move,
            promoted=self.promoted,
            legal_moves=_to_coordinates(self.legal_moves),
            legal_captures=_to_coordinates(self.legal_captures),
        )


class CastleRecordSnapshot(BaseModel):
    king_id: UUID
    king_target: str
    rook_id: UUID
    rook_target: str
    side: CastleSide

    @field_validator("king_target", "rook_target")
    @classmethod
    def validate_target(cls, value: str) -> str:
        return _validate_square(value)

    @classmethod
    def from_record(cls, record: CastleRecord) -> Self:
        return cls(
            king_id=record.king_id,
            king_target=record.king_target.to_algebraic(),
            rook_id=record.rook_id,
            rook_target=record.rook_target.to_algebraic(),
            side=record.side,
        )

    def to_record(self) -> CastleRecord:
        return CastleRecord(
            king_id=self.king_id,
            king_target=Coordinate.from_algebraic(self.king_target),
            rook_id=self.rook_id,
            rook_target=Coordinate.from_algebraic(self.rook_target),
            side=self.side,
        )


class MoveResultSnapshot(BaseModel):
    id: UUID
    piece_id: UUID
    piece_type: PieceType
    color: Color
    player_id: str
    source: str
    destination: str
    captured_piece_id: Optional[UUID] = None
    castle_side: Optional[CastleSide] = None
    opponent_king_state: KingState

    @field_validator("source", "destination")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)

    @classmethod
    def from_result(cls, result: MoveResult) -> Self:
        return cls(
            id=result.id,
            piece_id=result.piece_id,
            piece_type=result.piece_type,
            color=result.color,
            player_id=result.player_id,
            source=result.source.to_algebraic(),
            destination=result.destination.to_algebraic(),
            captured_piece_id=result.captured_piece_id,
            castle_side=result.castle_side,
            opponent_king_state=result.opponent_king_state,
        )

    def to_result(self) -> MoveResult:
        return MoveResult(
            piece_id=self.piece_id,
            piece_type=self.piece_type,
            color=self.color,
            player_id=self.player_id,
            source=Coordinate.from_algebraic(self.source),
            destination=Coordinate.from_algebraic(self.destination),
            captured_piece_id=self.captured_piece_id,
            castle_side=self.castle_side,
            opponent_king_state=self.opponent_king_state,
            id=self.id,
        )


class MatchSnapshot(BaseModel):
    """The persisted layout of a match."""

    version: int = SNAPSHOT_VERSION
    match_id: UUID
    white_player: str
    black_player: str
    ply: int = Field(ge=0)
    pieces: list[PieceSnapshot]
    white_king_state: KingState
    black_king_state: KingState
    white_castle_records: list[CastleRecordSnapshot] = []
    black_castle_records: list[CastleRecordSnapshot] = []
    move_log: list[MoveResultSnapshot] = []
    outcome: Optional[Outcome] = None

    @field_validator("version")
    @classmethod
    def validate_version(cls, value: int) -> int:
        if value != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported snapshot version {value}, expected {SNAPSHOT_VERSION}.")
        return value

    @model_validator(mode="after")
    def validate_position(self) -> Self:
        """The invariants of a match that a single field cannot check."""
        ids = [piece.id for piece in self.pieces]
        if len(ids) != len(set(ids)):
            raise ValueError("Piece ids must be unique.")

        in_play = [piece for piece in self.pieces if not piece.captured]
        locations = [piece.location for piece in in_play]
        if len(locations) != len(set(locations)):
            raise ValueError("Two pieces in play cannot share a square.")

        for color in Color:
            kings = [p for p in in_play if p.type == PieceType.KING and p.color == color]
            if len(kings) != 1:
                raise ValueError(f"Expected exactly one {color.value} king in play, found {len(kings)}.")

        known_ids = set(ids)
        for record in self.white_castle_records + self.black_castle_records:
            if record.king_id not in known_ids or record.rook_id not in known_ids:
                raise ValueError("Castle record refers to an unknown piece.")
        for entry in self.move_log:
            if entry.piece_id not in known_ids:
                raise ValueError(f"Move log entry refers to unknown piece {entry.piece_id}.")
            if entry.captured_piece_id is not None and entry.captured_piece_id not in known_ids:
                raise ValueError(
                    f"Move log entry refers to unknown captured piece {entry.captured_piece_id}."
                )
        return self

    @classmethod
    def from_match(cls, match: MatchState) -> Self:
        return cls(
            match_id=match.match_id,
            white_player=match.players[Color.WHITE],
            black_player=match.players[Color.BLACK],
            ply=match.ply,
            pieces=[PieceSnapshot.from_piece(piece) for piece in match.board.pieces.values()],
            white_king_state=match.king_states[Color.WHITE],
            black_king_state=match.king_states[Color.BLACK],
            white_castle_records=[
                CastleRecordSnapshot.from_record(r) for r in match.castle_records[Color.WHITE]
            ],
            black_castle_records=[
                CastleRecordSnapshot.from_record(r) for r in match.castle_records[Color.BLACK]
            ],
            move_log=[MoveResultSnapshot.from_result(entry) for entry in match.move_log],
            outcome=match.outcome,
        )

    def to_match(self) -> MatchState:
        return MatchState(
            match_id=self.match_id,
            players={Color.WHITE: self.white_player, Color.BLACK: self.black_player},
            board=Board.from_pieces(piece.to_piece() for piece in self.pieces),
            ply=self.ply,
            king_states={
                Color.WHITE: self.white_king_state,
                Color.BLACK: self.black_king_state,
            },
            castle_records={
                Color.WHITE: [r.to_record() for r in self.white_castle_records],
                Color.BLACK: [r.to_record() for r in self.black_castle_records],
            },
            move_log=[entry.to_result() for entry in self.move_log],
            outcome=self.outcome,
        )


def save_match(match: MatchState) -> str:
    return MatchSnapshot.from_match(match).model_dump_json()


def load_match(data: str | bytes) -> MatchState:
    """Rebuild a match from its JSON snapshot. Only ever creates a new MatchState, never touches an existing one."""
    try:
        snapshot = MatchSnapshot.model_validate_json(data)
    except ValidationError as err:
        raise DeserializationError(f"Cannot load match from the supplied data: {err}") from err

    match = snapshot.to_match()
    logger.info(f"Loaded match {match.match_id} at ply {match.ply}")
    return match


# --- BOUNDARY MODEL (what the Service / Repository work with) ---
OUTCOME_TO_STATUS: dict[Optional[Outcome], Status] = {
    None: Status.IN_PROGRESS,
    Outcome.WHITE_WINS: Status.CHECKMATE,
    Outcome.BLACK_WINS: Status.CHECKMATE,
    Outcome.STALEMATE: Status.STALEMATE,
}


def to_model(match: MatchState) -> MatchModel:
    """Encode into the format the Service layer uses"""
    return MatchModel(
        snapshot=save_match(match),
        current_fen=match.to_fen(),
        moves_san=[to_san(entry) for entry in match.move_log],
        registered_players={
            color.value: player for color, player in match.players.items()
        },
        status=OUTCOME_TO_STATUS[match.outcome].value,
    )


def from_model(model: MatchModel) -> MatchState:
    """The snapshot is the source of truth, the other fields are denormalized copies for the repository"""
    return load_match(model.snapshot)
