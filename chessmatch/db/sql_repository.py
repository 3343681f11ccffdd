"""Implementation of (Match)Repository using SQLAlchemy"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from chessmatch.core.models import MatchModel
from chessmatch.db.schema import DBMatch


class SQLMatchRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_match(self, match_id: UUID) -> MatchModel | None:
        """Get match by ID, if record exists."""
        match_db = self._fetch_match(match_id)
        if match_db:
            return self._to_model(match_db)
        return None

    def create_match(self, match_id: UUID, match: MatchModel) -> MatchModel:
        """Store a new match under the given ID and return the stored data.

        NOTE: The ID is the one the domain layer generated for the match, so the snapshot and the record agree.
        """
        match_db = DBMatch(
            id=match_id,
            snapshot=match.snapshot,
            current_fen=match.current_fen,
            moves_san=match.moves_san,
            registered_players=match.registered_players,
            status=match.status,
        )
        self.db.add(match_db)
        self.db.commit()
        self.db.refresh(match_db)
        return self._to_model(match_db)

    def update_match(self, match_id: UUID, match: MatchModel) -> MatchModel | None:
        """Add new info to existing record."""
        match_db = self._fetch_match(match_id)
        if not match_db:
            return None
        match_db.snapshot = match.snapshot
        match_db.current_fen = match.current_fen
        match_db.moves_san = match.moves_san
        match_db.registered_players = match.registered_players
        match_db.status = match.status
        self.db.commit()
        self.db.refresh(match_db)
        return self._to_model(match_db)

    def delete_match(self, match_id: UUID) -> MatchModel | None:
        """Remove a match's record."""
        match_db = self._fetch_match(match_id)
        if not match_db:
            return None
        match_model = self._to_model(match_db)
        self.db.delete(match_db)
        self.db.commit()
        return match_model

    def _fetch_match(self, match_id: UUID) -> DBMatch | None:
        query = select(DBMatch).where(DBMatch.id == match_id)
        return self.db.scalar(query)

    def _to_model(self, match_db: DBMatch) -> MatchModel:
        """Convert SQLAlchemy model to data transfer model."""
        return MatchModel(
            snapshot=match_db.snapshot,
            current_fen=match_db.current_fen,
            moves_san=list(match_db.moves_san),
            registered_players=dict(match_db.registered_players),
            status=match_db.status,
        )
