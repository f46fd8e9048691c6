"""Exception hierarchy for the rules core."""

from __future__ import annotations


class ChessError(Exception):
    """Base class for every error raised by :mod:`chessrules`."""


class PreconditionError(ChessError):
    """An operation was called in a state that does not allow it.

    Examples: reverting with an empty history, reading the captured piece of
    a move that was never applied, or building a castling move to a column
    other than c or g.
    """


class CorruptPositionError(ChessError):
    """The position breaks a structural invariant (e.g. a side has no king).

    This points at a bad position load or an illegal move applied upstream,
    not at an ordinary illegal-move request.
    """


class FenError(ChessError, ValueError):
    """Malformed FEN text."""
