"""Tests for pseudo-legal generation, attack detection and the legality filter."""

import pytest

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, MoveKind, PieceType
from chessrules.core.errors import CorruptPositionError
from chessrules.core.move import PlainMove
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import position_from_fen, position_to_fen
from chessrules.core.piece import EMPTY, Piece
from chessrules.core.position import Position
from chessrules.core.types import A1, D5, D6, D7, E2, E4, F3, F6, H1, square_name


def _uci_set(moves) -> set[str]:
    return {m.uci for m in moves}


def _legal(fen: str) -> set[str]:
    return _uci_set(position_from_fen(fen).legal_moves())


# ── Basic generation ─────────────────────────────────────────────────────────


class TestStartingPosition:
    def test_twenty_moves(self, start_position: Position) -> None:
        moves = start_position.legal_moves()
        assert len(moves) == 20
        assert all(m.kind == MoveKind.PLAIN for m in moves)

    def test_piece_breakdown(self, start_position: Position) -> None:
        moves = start_position.legal_moves()
        pawn = [m for m in moves if m.piece.piece_type == PieceType.PAWN]
        knight = [m for m in moves if m.piece.piece_type == PieceType.KNIGHT]
        assert len(pawn) == 16
        assert len(knight) == 4

    def test_generation_leaves_position_unchanged(
        self, standard_position: Position
    ) -> None:
        before = position_to_fen(standard_position)
        standard_position.legal_moves()
        MoveGenerator(standard_position).generate_pseudo_legal_moves()
        assert position_to_fen(standard_position) == before
        assert standard_position.ply_count == 0

    def test_legal_moves_are_unapplied(self, standard_position: Position) -> None:
        assert not any(m.is_applied for m in standard_position.legal_moves())


# ── Attack detection ─────────────────────────────────────────────────────────


class TestSquareAttacked:
    def test_start_position_attacks(self, start_position: Position) -> None:
        gen = MoveGenerator(start_position)
        assert gen.is_square_attacked(F3, Color.WHITE)
        assert gen.is_square_attacked(F6, Color.BLACK)
        assert not gen.is_square_attacked(E4, Color.WHITE)
        assert not gen.is_square_attacked(E4, Color.BLACK)

    def test_slider_blocked(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4P3/4R1K1 w - - 0 1")
        gen = MoveGenerator(pos)
        assert gen.is_square_attacked(E2, Color.WHITE)
        assert not gen.is_square_attacked((3, 4), Color.WHITE)

    def test_pawn_attacks_forward_only(self) -> None:
        pos = position_from_fen("4k3/8/8/8/4p3/8/8/4K3 w - - 0 1")
        gen = MoveGenerator(pos)
        # Black pawn on e4 attacks d3 and f3, not d5.
        assert gen.is_square_attacked((5, 3), Color.BLACK)
        assert gen.is_square_attacked((5, 5), Color.BLACK)
        assert not gen.is_square_attacked((3, 3), Color.BLACK)

    def test_missing_king_is_corrupt(self) -> None:
        board = Board()
        board[A1] = Piece(Color.WHITE, PieceType.ROOK)
        pos = Position(board, castling=CastlingRights.NONE)
        with pytest.raises(CorruptPositionError):
            MoveGenerator(pos).is_in_check(Color.WHITE)
        with pytest.raises(CorruptPositionError):
            pos.legal_moves()


# ── Legality filter ──────────────────────────────────────────────────────────


class TestLegalityFilter:
    def test_king_escapes_rank_check(self) -> None:
        assert _legal("4k3/8/8/8/8/8/8/r3K3 w - - 0 1") == {"e1d2", "e1e2", "e1f2"}

    def test_pinned_knight_cannot_move(self) -> None:
        fen = "4k3/4r3/8/8/8/8/4N3/4K3 w - - 0 1"
        pos = position_from_fen(fen)
        pseudo = MoveGenerator(pos).generate_pseudo_legal_moves()
        assert sum(1 for m in pseudo if m.from_sq == E2) == 6
        assert not any(m.from_sq == E2 for m in pos.legal_moves())

    def test_no_legal_move_leaves_king_attacked(
        self, standard_position: Position
    ) -> None:
        mover = standard_position.side_to_move
        gen = MoveGenerator(standard_position)
        for move in standard_position.legal_moves():
            standard_position.apply(move)
            assert not gen.is_in_check(mover), f"{move} leaves king in check"
            standard_position.revert()

    def test_check_must_be_answered(self) -> None:
        fen = "rnb1kbnr/pppp1ppp/8/4p3/5PPq/8/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        assert _legal(fen) == set()


# ── Castling ─────────────────────────────────────────────────────────────────

CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"


class TestCastling:
    def test_both_sides_available(self) -> None:
        moves = _legal(CASTLING_FEN)
        assert {"e1g1", "e1c1"} <= moves

    def test_generated_as_castling_moves(self) -> None:
        pos = position_from_fen(CASTLING_FEN)
        castles = [m for m in pos.legal_moves() if m.kind == MoveKind.CASTLING]
        assert sorted(m.uci for m in castles) == ["e1c1", "e1g1"]

    def test_black_castling(self) -> None:
        moves = _legal("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
        assert {"e8g8", "e8c8"} <= moves

    @pytest.mark.parametrize(
        ("fen", "kingside", "queenside"),
        [
            ("r3k2r/8/8/8/8/8/8/R3K2R w Qkq - 0 1", False, True),
            ("r3k2r/8/8/8/8/8/8/R3K2R w Kkq - 0 1", True, False),
            ("r3k2r/8/8/8/4r3/8/8/R3K2R w KQkq - 0 1", False, False),
            ("r3k2r/8/8/8/5r2/8/8/R3K2R w KQkq - 0 1", False, True),
            ("r3k2r/8/8/8/3r4/8/8/R3K2R w KQkq - 0 1", True, False),
            ("r3k2r/8/8/8/6r1/8/8/R3K2R w KQkq - 0 1", False, True),
            ("r3k2r/8/8/8/2r5/8/8/R3K2R w KQkq - 0 1", True, False),
            ("r3k2r/8/8/8/1r6/8/8/R3K2R w KQkq - 0 1", True, True),
            ("r3k2r/8/8/8/8/8/8/RN2K2R w KQkq - 0 1", True, False),
            ("r3k2r/8/8/8/8/8/8/R3KB1R w KQkq - 0 1", False, True),
            ("r3k2r/8/8/8/8/8/8/R3K1NR w KQkq - 0 1", False, True),
        ],
        ids=[
            "kingside_right_lost",
            "queenside_right_lost",
            "in_check",
            "kingside_transit_attacked",
            "queenside_transit_attacked",
            "kingside_destination_attacked",
            "queenside_destination_attacked",
            "b_file_attack_irrelevant",
            "queenside_blocked",
            "kingside_blocked_f1",
            "kingside_blocked_g1",
        ],
    )
    def test_gating(self, fen: str, kingside: bool, queenside: bool) -> None:
        moves = _legal(fen)
        assert ("e1g1" in moves) is kingside
        assert ("e1c1" in moves) is queenside

    def test_rook_missing_despite_right(self) -> None:
        pos = position_from_fen(CASTLING_FEN)
        pos.board[H1] = EMPTY
        assert pos.has_castling_right(Color.WHITE, kingside=True)
        moves = _uci_set(pos.legal_moves())
        assert "e1g1" not in moves
        assert "e1c1" in moves

    def test_enemy_rook_on_home_square(self) -> None:
        pos = position_from_fen(CASTLING_FEN)
        pos.board[H1] = Piece(Color.BLACK, PieceType.ROOK)
        assert "e1g1" not in _uci_set(pos.legal_moves())


# ── En passant ───────────────────────────────────────────────────────────────


class TestEnPassant:
    def test_available_right_after_double_step(self, play) -> None:
        pos = position_from_fen("4k3/3p4/8/4P3/8/8/8/4K3 b - - 0 1")
        play(pos, "d7d5")
        ep = [m for m in pos.legal_moves() if m.kind == MoveKind.EN_PASSANT]
        assert [m.uci for m in ep] == ["e5d6"]

    def test_window_closes_after_one_ply(self, play) -> None:
        pos = position_from_fen("4k3/3p4/8/4P3/8/8/8/4K3 b - - 0 1")
        play(pos, "d7d5", "e1d1", "e8f7")
        assert "e5d6" not in _uci_set(pos.legal_moves())

    def test_occupied_destination_never_captured(self) -> None:
        fen = "4k3/3p4/3n4/3pP3/8/8/8/4K3 w - - 0 1"
        seed = PlainMove(D7, D5, Piece(Color.BLACK, PieceType.PAWN))
        pos = Position(
            position_from_fen(fen).board, Color.WHITE, seed, CastlingRights.NONE
        )
        moves = pos.legal_moves()
        assert not any(m.kind == MoveKind.EN_PASSANT for m in moves)
        assert [m.uci for m in moves].count("e5d6") == 1
        assert pos.piece_at(D6) == Piece(Color.BLACK, PieceType.KNIGHT)
        assert position_to_fen(pos).startswith("4k3/3p4/3n4/3pP3/")

    def test_single_step_gives_nothing(self, play) -> None:
        pos = position_from_fen("4k3/3p4/8/8/4P3/8/8/4K3 b - - 0 1")
        play(pos, "d7d6", "e4e5", "d6d5")
        assert not any(m.kind == MoveKind.EN_PASSANT for m in pos.legal_moves())

    def test_non_adjacent_pawn(self, play) -> None:
        pos = position_from_fen("4k3/2p5/8/4P3/8/8/8/4K3 b - - 0 1")
        play(pos, "c7c5")
        assert not any(m.kind == MoveKind.EN_PASSANT for m in pos.legal_moves())

    def test_black_captures_en_passant(self, play) -> None:
        pos = position_from_fen("4k3/8/8/8/3p4/8/4P3/4K3 w - - 0 1")
        play(pos, "e2e4")
        ep = [m for m in pos.legal_moves() if m.kind == MoveKind.EN_PASSANT]
        assert [m.uci for m in ep] == ["d4e3"]

    def test_seeded_from_fen(self) -> None:
        assert "e5d6" in _legal("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")

    def test_horizontal_pin(self) -> None:
        pos = position_from_fen("8/8/8/K2pP2r/8/8/8/4k3 w - d6 0 1")
        pseudo = MoveGenerator(pos).generate_pseudo_legal_moves()
        assert "e5d6" in _uci_set(pseudo)
        assert "e5d6" not in _uci_set(pos.legal_moves())


# ── Promotion ────────────────────────────────────────────────────────────────


class TestPromotion:
    def test_four_choices(self) -> None:
        pos = position_from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        promos = [m for m in pos.legal_moves() if m.kind == MoveKind.PROMOTION]
        assert len(promos) == 4
        assert {m.promotion for m in promos} == {
            PieceType.QUEEN,
            PieceType.ROOK,
            PieceType.BISHOP,
            PieceType.KNIGHT,
        }

    def test_push_and_capture(self) -> None:
        pos = position_from_fen("1r2k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        promos = [m for m in pos.legal_moves() if m.kind == MoveKind.PROMOTION]
        assert len(promos) == 8
        assert {square_name(m.to_sq) for m in promos} == {"a8", "b8"}

    def test_blocked_pawn(self) -> None:
        pos = position_from_fen("n3k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        assert not any(m.kind == MoveKind.PROMOTION for m in pos.legal_moves())

    def test_black_promotion(self) -> None:
        moves = _legal("4k3/8/8/8/8/8/p7/4K3 b - - 0 1")
        assert {"a2a1q", "a2a1r", "a2a1b", "a2a1n"} <= moves
        assert "a2a1" not in moves
