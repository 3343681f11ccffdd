"""Storage contract for matches (SQLAlchemy implementation in sql_repository.py, an in-memory one in the service tests)"""

from typing import Protocol
from uuid import UUID

from chessmatch.core.models import MatchModel


class MatchRepository(Protocol):
    """
    Keeps one record per match, keyed by the match's own id.

    The ``snapshot`` of a MatchModel is the full match state and the only field the service reads back into a match.
    The other fields are copies of it (FEN, SAN history, players, status) so records can be listed / queried without
    deserializing the snapshot. Implementations store them as given and never derive one from the other.
    """

    def get_match(self, match_id: UUID) -> MatchModel | None:
        """The stored record, None for an unknown id."""
        ...

    def create_match(self, match_id: UUID, match: MatchModel) -> MatchModel:
        """Insert a record for a freshly created match.

        ``match_id`` is generated by the match itself (and is part of the snapshot), the repository does not assign ids.
        """
        ...

    def update_match(self, match_id: UUID, match: MatchModel) -> MatchModel | None:
        """Overwrite the record after a move (snapshot and copies together). None when there is no such record."""
        ...

    def delete_match(self, match_id: UUID) -> MatchModel | None:
        """Drop the record, returning what was stored (None if nothing was)."""
        ...
