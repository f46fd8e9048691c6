"""FEN parsing and serialization."""

from __future__ import annotations

import logging

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, MoveKind, PieceType
from chessrules.core.errors import FenError
from chessrules.core.move import PlainMove
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.types import (
    make_square,
    parse_square,
    relative_row,
    square_name,
)

_LOGGER = logging.getLogger(__name__)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    The en passant field becomes a synthetic pawn double step handed to the
    position as its last move.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise FenError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    # 1. Piece placement
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise FenError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for row, rank_text in enumerate(ranks):
        col = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise FenError(f"Invalid FEN digit {ch!r}: {fen!r}")
                col += step
            else:
                if col >= 8:
                    raise FenError(f"Invalid FEN rank width: {fen!r}")
                try:
                    board[make_square(row, col)] = Piece.from_char(ch)
                except ValueError as exc:
                    raise FenError(f"Invalid FEN piece {ch!r}: {fen!r}") from exc
                col += 1
            if col > 8:
                raise FenError(f"Invalid FEN rank width: {fen!r}")
        if col != 8:
            raise FenError(f"Invalid FEN rank width: {fen!r}")

    for color in Color:
        if len(board.pieces(color, PieceType.KING)) != 1:
            raise FenError(
                f"Invalid FEN: {color} must have exactly one king: {fen!r}"
            )

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise FenError(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        seen: set[str] = set()
        for ch in castling_part:
            right = _CASTLING_CHARS.get(ch)
            if right is None or ch in seen:
                raise FenError(f"Invalid FEN castling field: {castling_part!r}")
            seen.add(ch)
            castling |= right
    castling = _sanitize_castling(board, castling)

    # 4. En passant
    last_move: PlainMove | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except ValueError as exc:
            raise FenError(f"Invalid FEN en-passant square: {ep_part!r}") from exc
        mover = side.opposite
        # The square the pawn skipped lies on the mover's third rank.
        if ep[0] != relative_row(2, mover):
            raise FenError(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )
        pawn = Piece(mover, PieceType.PAWN)
        from_sq = make_square(relative_row(1, mover), ep[1])
        to_sq = make_square(relative_row(3, mover), ep[1])
        if board[to_sq] != pawn:
            raise FenError(f"Invalid FEN: no pawn passed through {ep_part!r}")
        if not (board.is_empty(ep) and board.is_empty(from_sq)):
            raise FenError(f"Invalid FEN: pawn could not have passed {ep_part!r}")
        last_move = PlainMove(from_sq, to_sq, pawn)

    # 5–6. Clocks (optional)
    halfmove = _parse_counter(parts, 4, default=0, minimum=0, name="halfmove clock")
    fullmove = _parse_counter(parts, 5, default=1, minimum=1, name="fullmove number")

    return Position(board, side, last_move, castling, halfmove, fullmove)


def _parse_counter(
    parts: list[str], index: int, *, default: int, minimum: int, name: str
) -> int:
    if len(parts) <= index:
        return default
    try:
        value = int(parts[index])
    except ValueError as exc:
        raise FenError(f"Invalid FEN {name}: {parts[index]!r}") from exc
    if value < minimum:
        raise FenError(f"Invalid FEN {name}: {parts[index]!r}")
    return value


def _sanitize_castling(board: Board, castling: CastlingRights) -> CastlingRights:
    """Drop rights whose king or rook is not on its home square."""
    for color in Color:
        back_row = relative_row(0, color)
        king_home = board[make_square(back_row, 4)] == Piece(color, PieceType.KING)
        for kingside, rook_col in ((True, 7), (False, 0)):
            right = CastlingRights.for_side(color, kingside)
            if not castling & right:
                continue
            rook_home = board[make_square(back_row, rook_col)] == Piece(
                color, PieceType.ROOK
            )
            if not (king_home and rook_home):
                _LOGGER.warning(
                    "Dropping castling right %s: king or rook not on its home square",
                    right.name,
                )
                castling &= ~right
    return castling


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in pos.board.rows():
        empty = 0
        row = ""
        for piece in rank:
            if piece.is_empty:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(
        ch for ch, right in _CASTLING_CHARS.items() if pos.castling & right
    )
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = "-"
    last = pos.last_move
    if last is not None and last.kind == MoveKind.PLAIN and last.is_double_step:
        skipped = make_square((last.from_sq[0] + last.to_sq[0]) // 2, last.to_sq[1])
        ep_str = square_name(skipped)

    return (
        f"{board_str} {side_str} {castling_str} {ep_str} "
        f"{pos.fifty_move_clock} {pos.move_number}"
    )
