"""
Custom exceptions shared by all layers.

Everything derives from GameError, so the service / API layer can catch a single type.
Errors about bad input values for the domain also derive from ValueError (pydantic turns those into validation errors).
"""


class GameError(Exception):
    """Top-level exception for anything that goes wrong while handling a match."""


class InvalidCoordinateError(GameError, ValueError):
    """Malformed algebraic text, or a file / rank that lies outside of the board."""


class InvalidFENError(GameError, ValueError):
    """Cannot interpret the supplied string as a board placement."""


class IllegalMoveError(GameError):
    """The destination is not in the legal move / capture set of the piece (or the piece cannot move at all)."""


class NotYourTurnError(IllegalMoveError):
    """Trying to move a piece of the color that is not to move."""


class NotFoundError(GameError, LookupError):
    """Unknown piece id, or asking for the occupant of an empty square."""


class DeserializationError(GameError):
    """Persisted match state could not be turned back into a match."""


class GameStateError(GameError):
    """Request does not fit the current state of the match (finished, unknown player, ...)."""


class InvalidRequestError(GameError):
    """Raised by the validators of the request models (NOT a ValueError, so it is not wrapped by pydantic)."""


class RepositoryError(GameError):
    """Record could not be found / stored in the persistence layer."""
