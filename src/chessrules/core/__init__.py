"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessrules.core import Position, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    for move in pos.legal_moves():
        pos.apply(move)
        print(move, pos.is_in_check())
        pos.revert()
"""

from chessrules.core.board import Board
from chessrules.core.enums import (
    CastlingRights,
    Color,
    GameResult,
    MoveKind,
    PieceType,
)
from chessrules.core.errors import (
    ChessError,
    CorruptPositionError,
    FenError,
    PreconditionError,
)
from chessrules.core.move import (
    PROMOTION_TYPES,
    CastlingMove,
    EnPassantMove,
    Move,
    PlainMove,
    PromotionMove,
)
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import (
    STARTING_FEN,
    parse_uci,
    position_from_fen,
    position_to_fen,
)
from chessrules.core.piece import EMPTY, Piece
from chessrules.core.position import Position
from chessrules.core.rules import RuleSettings, Rules
from chessrules.core.types import (
    Square,
    col_of,
    make_square,
    parse_square,
    relative_row,
    row_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameResult",
    "MoveKind",
    "PieceType",
    # Types / helpers
    "Square",
    "col_of",
    "make_square",
    "parse_square",
    "relative_row",
    "row_of",
    "square_name",
    # Errors
    "ChessError",
    "CorruptPositionError",
    "FenError",
    "PreconditionError",
    # Domain objects
    "Board",
    "CastlingMove",
    "EMPTY",
    "EnPassantMove",
    "Move",
    "MoveGenerator",
    "PROMOTION_TYPES",
    "Piece",
    "PlainMove",
    "Position",
    "PromotionMove",
    "RuleSettings",
    "Rules",
    # Notation
    "STARTING_FEN",
    "parse_uci",
    "position_from_fen",
    "position_to_fen",
]
