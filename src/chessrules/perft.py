"""Perft utilities for move generation correctness checks.

Reference values: https://www.chessprogramming.org/Perft_Results
"""

from __future__ import annotations

import logging

from chessrules.core.position import Position

_LOGGER = logging.getLogger(__name__)


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes *depth* plies below *position* using apply/revert."""
    if depth < 0:
        raise ValueError("Depth must be >= 0")
    if depth == 0:
        return 1

    moves = position.legal_moves()
    if depth == 1:
        return len(moves)

    nodes = 0
    for move in moves:
        position.apply(move)
        nodes += perft(position, depth - 1)
        position.revert()
    return nodes


def perft_divide(position: Position, depth: int) -> dict[str, int]:
    """Per-root-move leaf counts, keyed by UCI string."""
    if depth < 1:
        raise ValueError("Depth must be >= 1 for perft divide")

    result: dict[str, int] = {}
    for move in position.legal_moves():
        position.apply(move)
        count = perft(position, depth - 1)
        position.revert()
        _LOGGER.debug("perft divide %s: %d", move, count)
        result[move.uci] = count
    return dict(sorted(result.items()))
