"""Long-algebraic (UCI) move parsing against a position."""

from __future__ import annotations

from chessrules.core.move import Move
from chessrules.core.position import Position


def parse_uci(position: Position, text: str) -> Move:
    """Return the legal move of *position* written as *text*, e.g. ``'e7e8q'``.

    Castling is written as the king's two-square move (``'e1g1'``).
    """
    clean = text.strip().lower()
    if len(clean) not in (4, 5):
        raise ValueError(f"Invalid UCI move: {text!r}")
    for move in position.legal_moves():
        if move.uci == clean:
            return move
    raise ValueError(f"Illegal move: {text}")
