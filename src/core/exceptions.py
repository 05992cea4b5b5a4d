"""Custom exceptions. Everything raised on purpose by this package derives from GameError."""


class GameError(Exception):
    """Base class for all errors of the chess client."""


# --- Rules engine ---
class InvalidFENError(GameError):
    """The supplied string cannot be interpreted as a FEN record."""


class InvalidSquareError(GameError):
    """A square index or square name that does not exist on the board."""


class GameStateError(GameError):
    """The engine was asked to do something its current state does not allow."""


class IllegalMoveError(GameError):
    """The move is not in the set of legal moves of the position."""


class NotYourTurnError(GameError):
    """The piece that should move does not belong to the side to move."""


class NoHistoryError(GameError):
    """Undo was requested but no move has been made yet."""


class InvalidTargetError(GameError):
    """The destination of a promotion is not (or no longer) one the pawn can reach."""


# --- Interaction layer ---
class InvalidEventError(GameError):
    """An inbound UI event carries data that cannot describe a board interaction."""


class ControllerStateError(GameError):
    """The controller received a call that its current state does not expect."""
