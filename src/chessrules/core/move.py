"""Move variants and their undo snapshot.

A move is a closed set of four variants, each tagged with a
:class:`~chessrules.core.enums.MoveKind`.  Consumers dispatch on
``move.kind`` and treat any other value as a programming error.

Variants carry the moving piece plus an undo snapshot (captured piece,
castling rights and fifty-move clock *before* the move).  The snapshot is
filled by :meth:`Position.apply` and released by :meth:`Position.revert`, so
the same move object can go through any number of apply/revert cycles, but
never two applies in a row.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, TypeAlias

from chessrules.core.enums import CastlingRights, Color, MoveKind, PieceType
from chessrules.core.errors import PreconditionError
from chessrules.core.piece import Piece
from chessrules.core.types import Square, make_square, relative_row, square_name

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}

KING_COLUMN = 4
KINGSIDE_COLUMN = 6
QUEENSIDE_COLUMN = 2


@dataclass(slots=True)
class UndoState:
    """Snapshot taken right before a move is applied."""

    captured: Piece
    castling: CastlingRights
    fifty_move_clock: int


@dataclass(slots=True, unsafe_hash=True)
class _MoveBase:
    kind: ClassVar[MoveKind]

    from_sq: Square
    to_sq: Square
    piece: Piece
    _undo: UndoState | None = field(
        default=None, init=False, compare=False, repr=False
    )

    # ── Undo snapshot ────────────────────────────────────────────────────

    @property
    def is_applied(self) -> bool:
        return self._undo is not None

    def record_undo(self, state: UndoState) -> None:
        """Attach the pre-move snapshot; called by ``Position.apply``."""
        if self._undo is not None:
            raise PreconditionError(f"Move {self} is already applied")
        self._undo = state

    def release_undo(self) -> UndoState:
        """Detach and return the snapshot; called by ``Position.revert``."""
        state = self._undo
        if state is None:
            raise PreconditionError(f"Move {self} was not applied")
        self._undo = None
        return state

    @property
    def undo_state(self) -> UndoState:
        if self._undo is None:
            raise PreconditionError(f"Move {self} was not applied yet")
        return self._undo

    @property
    def captured(self) -> Piece:
        """Piece removed by this move (``EMPTY`` if none)."""
        return self.undo_state.captured

    @property
    def prior_castling(self) -> CastlingRights:
        return self.undo_state.castling

    @property
    def prior_fifty_move_clock(self) -> int:
        return self.undo_state.fifty_move_clock

    # ── Display ──────────────────────────────────────────────────────────

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return f"{square_name(self.from_sq)}{square_name(self.to_sq)}"

    def __str__(self) -> str:
        return self.uci


@dataclass(slots=True, unsafe_hash=True)
class PlainMove(_MoveBase):
    """Ordinary relocation, optionally capturing on the destination."""

    kind: ClassVar[MoveKind] = MoveKind.PLAIN

    @property
    def is_double_step(self) -> bool:
        """Pawn advance of two rows (opens an en passant window)."""
        return (
            self.piece.piece_type == PieceType.PAWN
            and abs(self.to_sq[0] - self.from_sq[0]) == 2
        )


@dataclass(slots=True, unsafe_hash=True)
class CastlingMove(_MoveBase):
    """King move of two columns; the rook jumps over it."""

    kind: ClassVar[MoveKind] = MoveKind.CASTLING

    def __post_init__(self) -> None:
        if self.to_sq[1] not in (KINGSIDE_COLUMN, QUEENSIDE_COLUMN):
            raise PreconditionError(
                f"Illegal castling destination column {self.to_sq[1]}"
            )
        if self.from_sq != make_square(self.to_sq[0], KING_COLUMN):
            raise PreconditionError(
                f"Castling must start on the king's home square: {self}"
            )

    @classmethod
    def for_side(cls, color: Color, column: int) -> CastlingMove:
        """Castling move for *color* landing on *column* (2 or 6)."""
        if column not in (KINGSIDE_COLUMN, QUEENSIDE_COLUMN):
            raise PreconditionError(f"Illegal castling destination column {column}")
        row = relative_row(0, color)
        return cls(
            make_square(row, KING_COLUMN),
            make_square(row, column),
            Piece(color, PieceType.KING),
        )

    @property
    def is_kingside(self) -> bool:
        return self.to_sq[1] == KINGSIDE_COLUMN

    @property
    def rook_from(self) -> Square:
        return make_square(self.to_sq[0], 7 if self.is_kingside else 0)

    @property
    def rook_to(self) -> Square:
        return make_square(self.to_sq[0], 5 if self.is_kingside else 3)


@dataclass(slots=True, unsafe_hash=True)
class EnPassantMove(_MoveBase):
    """Diagonal pawn capture of a pawn that just passed it."""

    kind: ClassVar[MoveKind] = MoveKind.EN_PASSANT

    @property
    def captured_sq(self) -> Square:
        """Square of the captured pawn: origin row, destination column."""
        return make_square(self.from_sq[0], self.to_sq[1])


@dataclass(slots=True, unsafe_hash=True)
class PromotionMove(_MoveBase):
    """Pawn reaching the last rank, replaced by *promotion*."""

    kind: ClassVar[MoveKind] = MoveKind.PROMOTION

    promotion: PieceType = PieceType.QUEEN

    def __post_init__(self) -> None:
        if self.promotion not in PROMOTION_TYPES:
            raise PreconditionError(f"Cannot promote to {self.promotion.name}")

    @property
    def promoted_piece(self) -> Piece:
        return Piece(self.piece.color, self.promotion)

    @property
    def uci(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        return base + _PROMO_CHARS[self.promotion]


Move: TypeAlias = PlainMove | CastlingMove | EnPassantMove | PromotionMove
