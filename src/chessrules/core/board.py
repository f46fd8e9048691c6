"""Board - piece placement on an 8x8 grid."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Final

from chessrules.core.enums import Color, PieceType
from chessrules.core.errors import CorruptPositionError
from chessrules.core.piece import EMPTY, Piece
from chessrules.core.types import FILES, Square, make_square
from chessrules.core.zobrist import piece_key

_BACK_RANK: Final = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# Shared read-only template; every Board.initial() gets its own copy.
INITIAL_ROWS: Final[tuple[tuple[Piece, ...], ...]] = (
    tuple(Piece(Color.BLACK, pt) for pt in _BACK_RANK),
    (Piece(Color.BLACK, PieceType.PAWN),) * 8,
    (EMPTY,) * 8,
    (EMPTY,) * 8,
    (EMPTY,) * 8,
    (EMPTY,) * 8,
    (Piece(Color.WHITE, PieceType.PAWN),) * 8,
    tuple(Piece(Color.WHITE, pt) for pt in _BACK_RANK),
)

_RULE = "   --- --- --- --- --- --- --- --- "


class Board:
    """Mutable 8x8 grid; every square always holds a :class:`Piece`.

    The Zobrist hash of the placement is kept up to date on every write.
    """

    __slots__ = ("_grid", "_hash")

    def __init__(self) -> None:
        self._grid: list[list[Piece]] = [[EMPTY] * 8 for _ in range(8)]
        self._hash = 0

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece:
        row, col = sq
        return self._grid[row][col]

    def __setitem__(self, sq: Square, piece: Piece) -> None:
        row, col = sq
        old_piece = self._grid[row][col]
        if old_piece == piece:
            return
        self._hash ^= piece_key(old_piece, sq) ^ piece_key(piece, sq)
        self._grid[row][col] = piece

    def is_empty(self, sq: Square) -> bool:
        row, col = sq
        return self._grid[row][col].is_empty

    # -- Query helpers ------------------------------------------------------

    def occupied(self, color: Color) -> Iterator[tuple[Square, Piece]]:
        """Squares and pieces of *color*, row by row from the eighth rank."""
        for row, rank in enumerate(self._grid):
            for col, piece in enumerate(rank):
                if piece.color == color:
                    yield make_square(row, col), piece

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return [
            sq for sq, piece in self.occupied(color) if piece.piece_type == piece_type
        ]

    def find_king(self, color: Color) -> Square:
        """Return the king square for *color*."""
        king = Piece(color, PieceType.KING)
        for row, rank in enumerate(self._grid):
            for col, piece in enumerate(rank):
                if piece == king:
                    return make_square(row, col)
        raise CorruptPositionError(f"No {color.name} king on board")

    @property
    def zobrist_hash(self) -> int:
        """Structural hash of the piece placement."""
        return self._hash

    def rows(self) -> tuple[tuple[Piece, ...], ...]:
        """Immutable snapshot of the grid."""
        return tuple(tuple(rank) for rank in self._grid)

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._grid = [rank.copy() for rank in self._grid]
        b._hash = self._hash
        return b

    # -- Factory ------------------------------------------------------------

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Piece]]) -> Board:
        """Build a board from 8 rows of 8 pieces, row 0 being the eighth rank."""
        if len(rows) != 8 or any(len(rank) != 8 for rank in rows):
            raise ValueError("Board needs exactly 8 rows of 8 squares")
        b = cls()
        for row, rank in enumerate(rows):
            for col, piece in enumerate(rank):
                b[make_square(row, col)] = piece
        return b

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        return cls.from_rows(INITIAL_ROWS)

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        rows: list[str] = []
        for row, rank in enumerate(self._grid):
            rows.append(f"{8 - row} {' '.join(str(p) for p in rank)}")
        rows.append("  " + " ".join(FILES))
        return "\n".join(rows)

    def render(self) -> str:
        """Boxed diagram with rank and file labels, for diagnostics."""
        lines: list[str] = []
        for row, rank in enumerate(self._grid):
            lines.append(_RULE)
            cells = " | ".join(" " if p.is_empty else str(p) for p in rank)
            lines.append(f"{8 - row} | {cells} |")
        lines.append(_RULE)
        lines.append("    " + "   ".join(FILES.upper()))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
