"""Notation package: FEN and UCI parsing and serialization."""

from chessrules.core.notation.fen import (
    STARTING_FEN,
    position_from_fen,
    position_to_fen,
)
from chessrules.core.notation.uci import parse_uci

__all__ = [
    "STARTING_FEN",
    "parse_uci",
    "position_from_fen",
    "position_to_fen",
]
