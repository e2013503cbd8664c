"""Engine errors. All of them are recoverable: a failed call leaves the game untouched."""


class OthelloError(Exception):
    """Base class for every error raised by the engine"""


class IllegalMoveError(OthelloError):
    """The square is not a legal move for the player to move."""


class NoLegalMoveError(OthelloError):
    """The player has no legal move (search or apply asked for one anyway)."""


class GameOverError(NoLegalMoveError):
    """Neither player can move any more."""


class OutOfRangeError(OthelloError, ValueError):
    """Coordinates outside the 8x8 board."""


class InvalidBoardError(OthelloError, ValueError):
    """A serialized board could not be decoded."""
