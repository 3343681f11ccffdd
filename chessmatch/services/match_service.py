"""Orchestration of communication from API models to the match logic and persistence layers (and the reverse direction)."""

from uuid import UUID

from loguru import logger

from chessmatch.api.models import (
    CreateMatchRequest,
    DeleteMatchRequest,
    GetMatchRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MatchResponse,
    MoveRequest,
)
from chessmatch.chess.coordinate import Coordinate
from chessmatch.chess.match import MatchState
from chessmatch.chess.notation import to_san
from chessmatch.chess.pieces import Color as PieceColor
from chessmatch.chess.snapshot import OUTCOME_TO_STATUS, from_model, to_model
from chessmatch.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
    RepositoryError,
)
from chessmatch.core.models import MatchModel
from chessmatch.core.shared_types import Color, PieceType
from chessmatch.db.repository import MatchRepository


class MatchService:
    """Orchestration of layers for a chess match."""

    def __init__(self, repository: MatchRepository) -> None:
        self.repo = repository

    # -- API logic ---
    def create_match(self, request: CreateMatchRequest) -> MatchResponse:
        """Both players are known up front: the match starts right away."""

        # Use info in CreateMatchRequest to create a new MatchState, and convert into MatchModel
        match = MatchState.new_match(
            white_player_id=request.white_player,
            black_player_id=request.black_player,
            starting_fen=request.starting_fen,
        )
        created = to_model(match)

        # Store the MatchModel in the repository
        self.repo.create_match(match.match_id, created)
        return self._create_match_response(match)

    def get_match_state(self, request: GetMatchRequest) -> MatchResponse:
        """
        Retrieve current match state.
        ----
        Used in "polling" loop by a front end to check when it is the player's turn for instance.
        """
        match = from_model(self._fetch_match(request.match_id))
        return self._create_match_response(match)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal destinations of the piece standing on the requested square."""
        match = from_model(self._fetch_match(request.match_id))

        # raises NotFoundError when the square is empty
        piece = match.piece_at(Coordinate.from_algebraic(request.square))
        destinations = match.legal_destinations_for(piece.id)
        return LegalMovesResponse(
            match_id=request.match_id,
            square=request.square,
            piece_type=PieceType(piece.type.value),
            color=Color(piece.color.value),
            moves=[str(location) for location in destinations.moves],
            captures=[str(location) for location in destinations.captures],
        )

    def make_move(self, request: MoveRequest) -> MatchResponse:
        """Make a move attempt."""
        match = from_model(self._fetch_match(request.match_id))

        if match.is_finished:
            raise GameStateError(
                f"Match {request.match_id} is over ({match.outcome.value}), no more moves can be made."
            )

        player_color = self._player_color(match, request.player_name)
        if player_color != match.color_to_move:
            raise NotYourTurnError(
                f"It is not {request.player_name}'s turn. Waiting for {match.players[match.color_to_move]} to make a move first."
            )

        try:
            match.apply_move_from(
                Coordinate.from_algebraic(request.from_square),
                Coordinate.from_algebraic(request.to_square),
            )
        except IllegalMoveError as err:
            logger.warning(
                f"Rejected move {request.from_square}{request.to_square} by {request.player_name} in match {request.match_id}: {err}"
            )
            raise

        # store in repository
        self.repo.update_match(request.match_id, to_model(match))
        return self._create_match_response(match)

    def delete_match(self, request: DeleteMatchRequest) -> None:
        """Handle a request to delete a match record."""
        self.repo.delete_match(request.match_id)

    # -- Internal helpers --
    def _create_match_response(self, match: MatchState) -> MatchResponse:
        move_history = [to_san(entry) for entry in match.move_log]
        turn_number, color_to_move = match.current_turn()
        return MatchResponse(
            match_id=match.match_id,
            players={color.value: player for color, player in match.players.items()},
            fen_state=match.to_fen(),
            turn_number=turn_number,
            color_to_move=Color(color_to_move.value),
            king_states={color.value: state.value for color, state in match.king_states.items()},
            status=OUTCOME_TO_STATUS[match.outcome],
            winner=match.winner,
            move_history=move_history,
            last_move=move_history[-1] if move_history else None,
        )

    @staticmethod
    def _player_color(match: MatchState, player_name: str) -> PieceColor:
        for color, player in match.players.items():
            if player == player_name:
                return color
        raise GameStateError(f"{player_name} is not playing in match {match.match_id}.")

    def _fetch_match(self, match_id: UUID) -> MatchModel:
        """Attempt to find the match in the repository and raise error if it fails."""
        match_model = self.repo.get_match(match_id)
        if match_model is None:
            raise RepositoryError(f"Match with {match_id=} not found.")
        return match_model
