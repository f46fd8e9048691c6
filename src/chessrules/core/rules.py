"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessrules.core.enums import Color, GameResult, PieceType
from chessrules.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from chessrules.core.position import Position


@dataclass(slots=True, frozen=True)
class RuleSettings:
    """Draw-rule thresholds.

    ``fifty_move_plies`` is compared against :attr:`Position.fifty_move_clock`,
    which counts plies, so the default of 100 is the usual fifty full moves.
    ``repetition_limit`` counts the current occurrence too (3 = threefold).
    """

    fifty_move_plies: int = 100
    repetition_limit: int = 3


DEFAULT_SETTINGS = RuleSettings()


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_in_check(position):
            return False
        gen = MoveGenerator(position)
        return len(gen.generate_legal_moves()) == 0

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_in_check(position):
            return False
        gen = MoveGenerator(position)
        return len(gen.generate_legal_moves()) == 0

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-color bishops)."""
        board = position.board
        others = [
            (sq, piece)
            for color in Color
            for sq, piece in board.occupied(color)
            if piece.piece_type != PieceType.KING
        ]

        # K vs K
        if not others:
            return True

        # K+minor vs K
        if len(others) == 1:
            return others[0][1].piece_type in (PieceType.KNIGHT, PieceType.BISHOP)

        # K+B vs K+B with same-colour bishops
        if len(others) == 2:
            (sq_a, a), (sq_b, b) = others
            if (
                a.piece_type == PieceType.BISHOP
                and b.piece_type == PieceType.BISHOP
                and a.color != b.color
            ):
                return sum(sq_a) % 2 == sum(sq_b) % 2

        return False

    @staticmethod
    def is_fifty_move_rule(
        position: Position, settings: RuleSettings = DEFAULT_SETTINGS
    ) -> bool:
        return position.fifty_move_clock >= settings.fifty_move_plies

    @staticmethod
    def is_threefold_repetition(
        position: Position, settings: RuleSettings = DEFAULT_SETTINGS
    ) -> bool:
        # repetition_count() excludes the current occurrence.
        return position.repetition_count() + 1 >= settings.repetition_limit

    @staticmethod
    def is_claimable_draw(
        position: Position, settings: RuleSettings = DEFAULT_SETTINGS
    ) -> bool:
        """Whether the side to move may claim an immediate draw by rule."""
        return Rules.is_fifty_move_rule(
            position, settings
        ) or Rules.is_threefold_repetition(position, settings)

    @staticmethod
    def game_result(
        position: Position, settings: RuleSettings = DEFAULT_SETTINGS
    ) -> GameResult:
        """Determine the current game result.

        Positions where a draw may be claimed count as drawn, as does dead
        material.
        """
        gen = MoveGenerator(position)
        legal_moves = gen.generate_legal_moves()

        if not legal_moves:
            if gen.is_in_check(position.side_to_move):
                return (
                    GameResult.BLACK_WINS
                    if position.side_to_move == Color.WHITE
                    else GameResult.WHITE_WINS
                )
            return GameResult.DRAW  # stalemate

        if Rules.is_insufficient_material(position) or Rules.is_claimable_draw(
            position, settings
        ):
            return GameResult.DRAW

        return GameResult.IN_PROGRESS
