"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.enums import Color, MoveKind, PieceType
from chessrules.core.move import (
    KING_COLUMN,
    KINGSIDE_COLUMN,
    PROMOTION_TYPES,
    QUEENSIDE_COLUMN,
    CastlingMove,
    EnPassantMove,
    Move,
    PlainMove,
    PromotionMove,
)
from chessrules.core.piece import Piece
from chessrules.core.types import (
    ALL_SQUARES,
    Square,
    is_on_board,
    make_square,
    relative_row,
)

if TYPE_CHECKING:
    from chessrules.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS


def pawn_direction(color: Color) -> int:
    """Row step of a forward pawn move for *color*."""
    return -1 if color == Color.WHITE else 1


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[Square, ...]]:
    targets: dict[Square, tuple[Square, ...]] = {}
    for row, col in ALL_SQUARES:
        targets[(row, col)] = tuple(
            make_square(row + dr, col + dc)
            for dr, dc in offsets
            if is_on_board(row + dr, col + dc)
        )
    return targets


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> dict[Square, tuple[tuple[Square, ...], ...]]:
    rays_per_square: dict[Square, tuple[tuple[Square, ...], ...]] = {}
    for row, col in ALL_SQUARES:
        square_rays: list[tuple[Square, ...]] = []
        for dr, dc in directions:
            r = row + dr
            c = col + dc
            ray: list[Square] = []
            while is_on_board(r, c):
                ray.append(make_square(r, c))
                r += dr
                c += dc
            square_rays.append(tuple(ray))
        rays_per_square[(row, col)] = tuple(square_rays)
    return rays_per_square


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    The generator holds no state of its own.  Legality is decided by applying
    each pseudo-legal candidate to the position, testing the mover's king and
    reverting, so the position is always restored before returning.  Pins and
    discovered checks need no special handling.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        legal: list[Move] = []
        moving_color = self._pos.side_to_move

        for move in self.generate_pseudo_legal_moves():
            self._pos.apply(move)
            if not self.is_in_check(moving_color):
                legal.append(move)
            self._pos.revert()
        return legal

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move

        for sq, piece in self._board.occupied(color):
            ptype = piece.piece_type
            if ptype == PieceType.PAWN:
                self._gen_pawn(sq, piece, moves)
            elif ptype == PieceType.KNIGHT:
                self._gen_steps(sq, piece, _KNIGHT_TARGETS[sq], moves)
            elif ptype == PieceType.BISHOP:
                self._gen_sliding(sq, piece, _BISHOP_RAYS[sq], moves)
            elif ptype == PieceType.ROOK:
                self._gen_sliding(sq, piece, _ROOK_RAYS[sq], moves)
            elif ptype == PieceType.QUEEN:
                self._gen_sliding(sq, piece, _QUEEN_RAYS[sq], moves)
            elif ptype == PieceType.KING:
                self._gen_steps(sq, piece, _KING_TARGETS[sq], moves)

        # Castling last: it needs attack information for the current board.
        self._gen_castling(color, moves)
        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.find_king(color)
        return self.is_square_attacked(king_sq, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?

        Each piece kind is placed on *sq* in turn; if one of its targets holds
        an enemy piece of that same kind, the square is attacked.  King steps
        never include castling, so this never recurses into move generation.
        """
        board = self._board
        row, col = sq

        # An attacking pawn stands one row "behind" sq from its own viewpoint.
        pawn_row = row - pawn_direction(by_color)
        pawn = Piece(by_color, PieceType.PAWN)
        for pawn_col in (col - 1, col + 1):
            if not is_on_board(pawn_row, pawn_col):
                continue
            if board[make_square(pawn_row, pawn_col)] == pawn:
                return True

        knight = Piece(by_color, PieceType.KNIGHT)
        if any(board[to_sq] == knight for to_sq in _KNIGHT_TARGETS[sq]):
            return True

        king = Piece(by_color, PieceType.KING)
        if any(board[to_sq] == king for to_sq in _KING_TARGETS[sq]):
            return True

        return self._ray_hits(
            _BISHOP_RAYS[sq], by_color, (PieceType.BISHOP, PieceType.QUEEN)
        ) or self._ray_hits(
            _ROOK_RAYS[sq], by_color, (PieceType.ROOK, PieceType.QUEEN)
        )

    def _ray_hits(
        self,
        rays: tuple[tuple[Square, ...], ...],
        by_color: Color,
        sliders: tuple[PieceType, PieceType],
    ) -> bool:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                piece = board[to_sq]
                if piece.is_empty:
                    continue
                if piece.color == by_color and piece.piece_type in sliders:
                    return True
                break
        return False

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        color = piece.color
        assert color is not None
        row, col = sq
        step = pawn_direction(color)
        ahead = row + step
        if not 0 <= ahead < 8:
            return
        promotes = ahead == relative_row(7, color)

        one_step = make_square(ahead, col)
        if board.is_empty(one_step):
            if promotes:
                for pt in PROMOTION_TYPES:
                    moves.append(PromotionMove(sq, one_step, piece, pt))
            else:
                moves.append(PlainMove(sq, one_step, piece))
                if row == relative_row(1, color):
                    two_step = make_square(row + 2 * step, col)
                    if board.is_empty(two_step):
                        moves.append(PlainMove(sq, two_step, piece))

        for cap_col in (col - 1, col + 1):
            if not is_on_board(ahead, cap_col):
                continue
            cap_sq = make_square(ahead, cap_col)
            if board[cap_sq].color != color.opposite:
                continue
            if promotes:
                for pt in PROMOTION_TYPES:
                    moves.append(PromotionMove(sq, cap_sq, piece, pt))
            else:
                moves.append(PlainMove(sq, cap_sq, piece))

        self._gen_en_passant(sq, piece, moves)

    def _gen_en_passant(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        last = self._pos.last_move
        if last is None or last.kind != MoveKind.PLAIN or not last.is_double_step:
            return
        if last.piece.color == piece.color:
            return

        row, col = sq
        landing_row, landing_col = last.to_sq
        if row != landing_row or abs(col - landing_col) != 1:
            return
        if self._board[last.to_sq] != last.piece:
            return

        color = piece.color
        assert color is not None
        to_sq = make_square(row + pawn_direction(color), landing_col)
        if not self._board.is_empty(to_sq):
            return
        moves.append(EnPassantMove(sq, to_sq, piece))

    def _gen_steps(
        self,
        sq: Square,
        piece: Piece,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            if board[to_sq].color != piece.color:
                moves.append(PlainMove(sq, to_sq, piece))

    def _gen_sliding(
        self,
        sq: Square,
        piece: Piece,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target.is_empty:
                    moves.append(PlainMove(sq, to_sq, piece))
                    continue
                if target.color != piece.color:
                    moves.append(PlainMove(sq, to_sq, piece))
                break

    def _gen_castling(self, color: Color, moves: list[Move]) -> None:
        if not self._pos.castling_rights(color):
            return

        board = self._board
        back_row = relative_row(0, color)
        king_sq = make_square(back_row, KING_COLUMN)
        king = Piece(color, PieceType.KING)
        rook = Piece(color, PieceType.ROOK)
        if board[king_sq] != king or self.is_in_check(color):
            return

        opponent = color.opposite
        if self._pos.has_castling_right(color, kingside=True):
            f_sq = make_square(back_row, 5)
            g_sq = make_square(back_row, 6)
            if (
                board[make_square(back_row, 7)] == rook
                and board.is_empty(f_sq)
                and board.is_empty(g_sq)
                and not self.is_square_attacked(f_sq, opponent)
            ):
                moves.append(
                    CastlingMove(king_sq, make_square(back_row, KINGSIDE_COLUMN), king)
                )

        if self._pos.has_castling_right(color, kingside=False):
            b_sq = make_square(back_row, 1)
            c_sq = make_square(back_row, 2)
            d_sq = make_square(back_row, 3)
            if (
                board[make_square(back_row, 0)] == rook
                and board.is_empty(b_sq)
                and board.is_empty(c_sq)
                and board.is_empty(d_sq)
                and not self.is_square_attacked(d_sq, opponent)
            ):
                moves.append(
                    CastlingMove(king_sq, make_square(back_row, QUEENSIDE_COLUMN), king)
                )
