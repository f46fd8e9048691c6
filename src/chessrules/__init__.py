"""chessrules — chess rules core: positions, move generation, draw bookkeeping."""

__version__ = "0.1.0"
