"""
What the service hands to (and gets back from) a MatchRepository.

A MatchModel is a serialized match plus a few columns copied out of it, so the db layer never imports the chess package.
"""

from dataclasses import dataclass

PieceColor = str
PlayerName = str


@dataclass
class MatchModel:
    """One stored match. Built by chessmatch/chess/snapshot.py::to_model, read back with from_model."""

    snapshot: str  # JSON from save_match, the source of truth
    current_fen: str
    moves_san: list[str]
    registered_players: dict[PieceColor, PlayerName]
    status: str
