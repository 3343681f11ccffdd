"""Requests and Response models"""

from string import ascii_letters, digits
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ValidationInfo, field_validator

from chessmatch.core.exceptions import InvalidRequestError
from chessmatch.core.shared_types import Color, PieceType, Status

PieceColor = str
PlayerName = str


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False

    first_character = value[0]
    second_character = value[1]
    # ASCII letter + ASCII digit
    if not (first_character in ascii_letters and second_character in digits):
        return False
    return True


# --- REQUEST MODELS ---
class CreateMatchRequest(BaseModel):
    white_player: PlayerName
    black_player: PlayerName
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts[0].split("/")) != 8:
            raise InvalidRequestError(
                "FEN placement must contain 8 ranks separated by slashes."
            )
        return value.strip()

    @field_validator("black_player")
    @classmethod
    def validate_different_players(cls, value: str, info: ValidationInfo) -> str:
        if value == info.data.get("white_player"):
            raise InvalidRequestError("A player cannot play against themselves.")
        return value


class GetMatchRequest(BaseModel):
    match_id: UUID


class LegalMovesRequest(BaseModel):
    match_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


class MoveRequest(BaseModel):
    match_id: UUID
    player_name: PlayerName
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


class DeleteMatchRequest(BaseModel):
    match_id: UUID


# --- RESPONSE MODELS ---
class MatchResponse(BaseModel):
    match_id: UUID
    players: dict[PieceColor, PlayerName]
    fen_state: str
    turn_number: int
    color_to_move: Color
    king_states: dict[PieceColor, str]
    status: Status
    winner: Optional[PlayerName] = None
    move_history: list[str]
    last_move: Optional[str] = None


class LegalMovesResponse(BaseModel):
    match_id: UUID
    square: str
    piece_type: PieceType
    color: Color
    moves: list[str]
    captures: list[str]
