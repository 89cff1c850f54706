"""
Custom exceptions used across layers.

Everything the application raises on purpose derives from GameError, so the outer layers can catch one type.
The single exception to that rule is BoardInvariantError: it signals a programming error, not a user error.
"""


class GameError(Exception):
    """Top-level custom exception"""


# --- PARSING / VALIDATION ---
class InvalidSquareError(GameError):
    """Text could not be interpreted as a square on the board."""


class InvalidMoveNotationError(GameError):
    """Text could not be interpreted as a move ('e2e4', 'O-O' or 'O-O-O')."""


class InvalidRequestError(GameError):
    """Raised by the request models. Not a ValueError on purpose: pydantic lets it propagate unchanged."""


# --- GAME FLOW ---
class GameStateError(GameError):
    """The game is not in a state that allows the requested action."""


class RepositoryError(GameError):
    """Persistence layer could not serve the request."""


# --- MOVE REJECTIONS ---
class IllegalMoveError(GameError):
    """The move was rejected. The game state is unchanged, so the caller can simply try again."""


class OpponentPieceError(IllegalMoveError):
    """The piece on the origin square belongs to the player that is not on turn."""


class EmptySquareError(IllegalMoveError):
    """There is no piece on the origin (or queried) square."""


class CollisionError(IllegalMoveError):
    """Destination holds a friendly piece, or the path (also a castling path) is blocked."""


class WrongPieceMovementError(IllegalMoveError):
    """The piece cannot reach the destination given how it moves."""


class PawnDoubleMoveError(IllegalMoveError):
    """A pawn that already moved tried to advance two squares."""


class CastlingError(IllegalMoveError):
    """Castling right is gone, or the king starts in, passes through, or ends up in check."""


class SelfCheckError(IllegalMoveError):
    """The move would leave your own king in check."""


# --- BROKEN INVARIANTS ---
class BoardInvariantError(RuntimeError):
    """The board lost (or duplicated) a king. Indicates a bug upstream, never a rule violation."""
