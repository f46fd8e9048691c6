"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chessrules.core.notation import STARTING_FEN, parse_uci, position_from_fen
from chessrules.core.position import Position

# Five positions exercising every move variant and the clocks.
STANDARD_FENS: dict[str, str] = {
    "start": STARTING_FEN,
    "en_passant": "rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3",
    "castling": "r3k2r/pppq1ppp/2npbn2/2b1p3/2B1P3/2NPBN2/PPPQ1PPP/R3K2R w KQkq - 4 8",
    "promotion": "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8",
    "fifty_move": "8/8/4k3/8/2R5/8/4K3/8 w - - 98 80",
}


@pytest.fixture(params=sorted(STANDARD_FENS), ids=str)
def standard_fen(request: pytest.FixtureRequest) -> str:
    """Each of the standard test FEN strings in turn."""
    return STANDARD_FENS[request.param]


@pytest.fixture
def standard_position(standard_fen: str) -> Position:
    return position_from_fen(standard_fen)


@pytest.fixture
def start_position() -> Position:
    return position_from_fen(STARTING_FEN)


@pytest.fixture
def play():
    """Apply a sequence of UCI moves, checking each one is legal."""

    def _play(position: Position, *moves: str) -> Position:
        for text in moves:
            position.apply(parse_uci(position, text))
        return position

    return _play
