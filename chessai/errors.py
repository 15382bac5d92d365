from __future__ import annotations


class ChessAIError(Exception):
    """Base class for every error raised by the chessai package."""


class ConfigError(ChessAIError, ValueError):
    pass


class IllegalMoveError(ChessAIError, ValueError):
    """A move was applied that the rules engine does not consider legal."""


class PreconditionError(ChessAIError, RuntimeError):
    """The AI controller was invoked when it must not move."""


class GameOverError(PreconditionError):
    pass


class NotAITurnError(PreconditionError):
    pass


class ReentrantSearchError(PreconditionError):
    pass


class SearchInvariantError(ChessAIError, RuntimeError):
    """Search and rules engine disagree about the position.

    Raised when a move taken from the rules engine's own enumeration cannot be
    applied, or when a position without legal moves is not reported terminal.
    """


class PayloadError(ChessAIError, ValueError):
    """A request body could not be understood."""
