"""Square type alias and coordinate helpers.

Board layout (row-major, row 0 is the eighth rank):
    a8=(0, 0), b8=(0, 1), ..., h8=(0, 7)
    ...
    a1=(7, 0), b1=(7, 1), ..., h1=(7, 7)
"""

from __future__ import annotations

from typing import TypeAlias

from chessrules.core.enums import Color

Square: TypeAlias = tuple[int, int]  # (row, col), each 0–7

FILES = "abcdefgh"


def row_of(sq: Square) -> int:
    """Row index 0–7 (0 is rank 8)."""
    return sq[0]


def col_of(sq: Square) -> int:
    """Column index 0–7 (a–h)."""
    return sq[1]


def make_square(row: int, col: int) -> Square:
    """Create square from row (0–7) and column (0–7)."""
    return (row, col)


def is_on_board(row: int, col: int) -> bool:
    """Check whether a row/column pair lies on the board."""
    return 0 <= row < 8 and 0 <= col < 8


def relative_row(row: int, color: Color) -> int:
    """Map a row counted from *color*'s own back rank to an absolute row.

    ``relative_row(0, WHITE)`` is white's back rank (7); ``relative_row(1,
    BLACK)`` is black's pawn row (1).
    """
    return 7 - row if color == Color.WHITE else row


def rank_of(sq: Square) -> int:
    """Chess rank 1–8 of *sq*."""
    return 8 - sq[0]


def square_name(sq: Square) -> str:
    """Human-readable name, e.g. (6, 4) → 'e2'."""
    return FILES[sq[1]] + str(rank_of(sq))


def parse_square(name: str) -> Square:
    """Parse square name, e.g. 'e4' → (4, 4)."""
    if len(name) != 2 or name[0] not in FILES or name[1] not in "12345678":
        raise ValueError(f"Invalid square name: {name!r}")
    return make_square(8 - int(name[1]), FILES.index(name[0]))


ALL_SQUARES: tuple[Square, ...] = tuple(
    make_square(row, col) for row in range(8) for col in range(8)
)


# ── Named square constants ──────────────────────────────────────────────────

A8, B8, C8, D8, E8, F8, G8, H8 = ((0, col) for col in range(8))
A7, B7, C7, D7, E7, F7, G7, H7 = ((1, col) for col in range(8))
A6, B6, C6, D6, E6, F6, G6, H6 = ((2, col) for col in range(8))
A5, B5, C5, D5, E5, F5, G5, H5 = ((3, col) for col in range(8))
A4, B4, C4, D4, E4, F4, G4, H4 = ((4, col) for col in range(8))
A3, B3, C3, D3, E3, F3, G3, H3 = ((5, col) for col in range(8))
A2, B2, C2, D2, E2, F2, G2, H2 = ((6, col) for col in range(8))
A1, B1, C1, D1, E1, F1, G1, H1 = ((7, col) for col in range(8))
