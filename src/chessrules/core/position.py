"""Position — complete game state (board + metadata) with apply/revert."""

from __future__ import annotations

import copy
import logging
from collections import Counter

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, MoveKind, PieceType
from chessrules.core.errors import PreconditionError
from chessrules.core.move import Move, UndoState
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.piece import EMPTY, Piece
from chessrules.core.types import Square, make_square
from chessrules.core.zobrist import side_to_move_key

_LOGGER = logging.getLogger(__name__)


class Position:
    """Full chess position: board + side to move + castling + clocks + history.

    Moves go through :meth:`apply` / :meth:`revert`, which keep a LIFO history
    stack (Command pattern).  :meth:`apply` performs any well-formed move
    without checking legality; ask :meth:`legal_moves` for that.

    Before each move the position fingerprint (placement + side to move) is
    counted in a multiset so that repeated positions can be detected.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "fifty_move_clock",
        "move_number",
        "_initial_last_move",
        "_history",
        "_seen",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        last_move: Move | None = None,
        castling: CastlingRights = CastlingRights.ALL,
        fifty_move_clock: int = 0,
        move_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.fifty_move_clock = fifty_move_clock
        self.move_number = move_number
        # Context for en passant before any move has been applied here.
        self._initial_last_move = last_move
        self._history: list[Move] = []
        self._seen: Counter[int] = Counter()
        if last_move is not None:
            _LOGGER.debug("Position seeded with last move %s", last_move)

    # ── Core move operations ─────────────────────────────────────────────

    def apply(self, move: Move) -> None:
        """Apply *move*, recording its undo snapshot and pushing it on history."""
        if move.is_applied:
            raise PreconditionError(f"Move {move} is already applied")
        board = self.board
        pre_move_key = self.fingerprint
        piece = board[move.from_sq]

        if move.kind == MoveKind.PLAIN:
            captured = board[move.to_sq]
            board[move.from_sq] = EMPTY
            board[move.to_sq] = piece
        elif move.kind == MoveKind.CASTLING:
            captured = EMPTY
            rook = board[move.rook_from]
            board[move.from_sq] = EMPTY
            board[move.rook_from] = EMPTY
            board[move.to_sq] = piece
            board[move.rook_to] = rook
        elif move.kind == MoveKind.EN_PASSANT:
            captured = board[move.captured_sq]
            board[move.captured_sq] = EMPTY
            board[move.from_sq] = EMPTY
            board[move.to_sq] = piece
        elif move.kind == MoveKind.PROMOTION:
            captured = board[move.to_sq]
            board[move.from_sq] = EMPTY
            board[move.to_sq] = Piece(piece.color, move.promotion)
        else:
            raise TypeError(f"Unknown move variant: {move!r}")

        move.record_undo(
            UndoState(
                captured=captured,
                castling=self.castling,
                fifty_move_clock=self.fifty_move_clock,
            )
        )

        self._update_castling(move, piece)

        if (
            piece.piece_type == PieceType.PAWN
            or not captured.is_empty
            or move.kind != MoveKind.PLAIN
        ):
            self.fifty_move_clock = 0
        else:
            self.fifty_move_clock += 1

        self._history.append(move)
        if self.side_to_move == Color.BLACK:
            self.move_number += 1
        self.side_to_move = self.side_to_move.opposite
        self._seen[pre_move_key] += 1

    def revert(self) -> Move:
        """Undo the last :meth:`apply` and return the move that was undone."""
        if not self._history:
            raise PreconditionError("No move to revert")
        move = self._history.pop()
        state = move.release_undo()
        board = self.board

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.move_number -= 1

        if move.kind == MoveKind.PLAIN:
            board[move.from_sq] = board[move.to_sq]
            board[move.to_sq] = state.captured
        elif move.kind == MoveKind.CASTLING:
            board[move.rook_from] = board[move.rook_to]
            board[move.rook_to] = EMPTY
            board[move.from_sq] = board[move.to_sq]
            board[move.to_sq] = EMPTY
        elif move.kind == MoveKind.EN_PASSANT:
            board[move.from_sq] = board[move.to_sq]
            board[move.to_sq] = EMPTY
            board[move.captured_sq] = state.captured
        elif move.kind == MoveKind.PROMOTION:
            board[move.from_sq] = Piece(self.side_to_move, PieceType.PAWN)
            board[move.to_sq] = state.captured
        else:
            raise TypeError(f"Unknown move variant: {move!r}")

        self.castling = state.castling
        self.fifty_move_clock = state.fifty_move_clock

        key = self.fingerprint
        count = self._seen[key] - 1
        if count > 0:
            self._seen[key] = count
        else:
            del self._seen[key]
        return move

    # ── Castling bookkeeping ─────────────────────────────────────────────

    _ROOK_HOMES: dict[Square, CastlingRights] = {
        make_square(7, 0): CastlingRights.WHITE_QUEENSIDE,
        make_square(7, 7): CastlingRights.WHITE_KINGSIDE,
        make_square(0, 0): CastlingRights.BLACK_QUEENSIDE,
        make_square(0, 7): CastlingRights.BLACK_KINGSIDE,
    }

    def _update_castling(self, move: Move, piece: Piece) -> None:
        if piece.piece_type == PieceType.KING and piece.color is not None:
            self.castling &= ~CastlingRights.both(piece.color)

        # A rook leaving its home square, or being captured on it.
        for sq in (move.from_sq, move.to_sq):
            right = self._ROOK_HOMES.get(sq)
            if right is not None:
                self.castling &= ~right

    # ── Queries ──────────────────────────────────────────────────────────

    def piece_at(self, sq: Square) -> Piece:
        return self.board[sq]

    def castling_rights(self, color: Color) -> CastlingRights:
        """The subset of rights still held by *color*."""
        return self.castling & CastlingRights.both(color)

    def has_castling_right(self, color: Color, kingside: bool) -> bool:
        return bool(self.castling & CastlingRights.for_side(color, kingside))

    @property
    def last_move(self) -> Move | None:
        """Most recently applied move (or the seeded one, or ``None``)."""
        if self._history:
            return self._history[-1]
        return self._initial_last_move

    @property
    def history(self) -> tuple[Move, ...]:
        return tuple(self._history)

    @property
    def ply_count(self) -> int:
        """Plies applied since construction."""
        return len(self._history)

    @property
    def fingerprint(self) -> int:
        """Hash of the piece placement and the side to move."""
        key = self.board.zobrist_hash
        if self.side_to_move == Color.BLACK:
            key ^= side_to_move_key()
        return key

    def repetition_count(self) -> int:
        """How many times the current position occurred before this one."""
        return self._seen.get(self.fingerprint, 0)

    def is_repeated(self) -> bool:
        """Whether this exact placement with this side to move occurred before."""
        return self.repetition_count() >= 1

    def is_in_check(self) -> bool:
        """Is the side to move in check?"""
        return MoveGenerator(self).is_in_check(self.side_to_move)

    def legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return MoveGenerator(self).generate_legal_moves()

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Deep copy, history included, sharing no mutable state."""
        pos = Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            last_move=copy.copy(self._initial_last_move),
            castling=self.castling,
            fifty_move_clock=self.fifty_move_clock,
            move_number=self.move_number,
        )
        pos._history = [copy.copy(move) for move in self._history]
        pos._seen = self._seen.copy()
        _LOGGER.debug("Copied position at ply %d", len(self._history))
        return pos

    def __str__(self) -> str:
        return f"{self.board.render()}\n{self.side_to_move} to move"
