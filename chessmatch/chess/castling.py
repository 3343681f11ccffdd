"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from chessmatch.chess.coordinate import Coordinate


class CastleSide(Enum):
    KING_SIDE = "king_side"
    QUEEN_SIDE = "queen_side"


@dataclass(frozen=True)
class CastleRecord:
    """
    A castling move that is available in the current resolution cycle.

    NOTE: King and rook are referred to by id (lookup in the board's piece store), never by reference.
    Records are thrown away and regenerated every cycle, so an old record can never be honored.
    """

    king_id: UUID
    king_target: Coordinate
    rook_id: UUID
    rook_target: Coordinate
    side: CastleSide
