"""Zobrist keys for the position fingerprint (piece placement + side to move)."""

from __future__ import annotations

from typing import Final

from chessrules.core.piece import Piece
from chessrules.core.types import Square

_SEED: Final = 0xA5B3C7D9E1F23412
_MASK_64: Final = 0xFFFFFFFFFFFFFFFF


def _splitmix64(state: int) -> int:
    """Deterministic 64-bit bit-mixer suitable for static key generation."""
    z = (state + 0x9E3779B97F4A7C15) & _MASK_64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK_64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK_64
    return z ^ (z >> 31)


def _nth_key(index: int) -> int:
    return _splitmix64(_SEED + index)


# [color][piece_type - 1][row][col]
_PIECE_KEYS: Final = tuple(
    tuple(
        tuple(
            tuple(
                _nth_key((color * 384) + (ptype * 64) + (row * 8) + col)
                for col in range(8)
            )
            for row in range(8)
        )
        for ptype in range(6)
    )
    for color in range(2)
)
_SIDE_TO_MOVE_KEY: Final = _nth_key(2 * 6 * 64)


def piece_key(piece: Piece, sq: Square) -> int:
    """Hash key for a specific piece on a square (0 for the empty square)."""
    if piece.color is None:
        return 0
    row, col = sq
    return _PIECE_KEYS[int(piece.color)][int(piece.piece_type) - 1][row][col]


def side_to_move_key() -> int:
    """Hash toggle key applied when black is to move."""
    return _SIDE_TO_MOVE_KEY
