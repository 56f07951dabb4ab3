"""Tests for the rules engine — legality, check, castling, en passant, mate."""

import pytest

from netchess.core.board_state import BoardState
from netchess.core.enums import CastlingRights, Color, PieceType
from netchess.core.move import Move
from netchess.core.notation import state_from_fen
from netchess.core.piece import Piece
from netchess.core.rules import Rules
from netchess.core.types import parse_square


def _legal(state: BoardState, uci: str) -> bool:
    move = Move.from_uci(uci)
    return Rules(state).is_legal(move.from_pos, move.to_pos)


def _play(state: BoardState, *ucis: str) -> BoardState:
    rules = Rules(state)
    for uci in ucis:
        move = Move.from_uci(uci)
        assert rules.is_legal(move.from_pos, move.to_pos), uci
        rules.apply_move(move.from_pos, move.to_pos)
    return state


FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 0 1"


class TestLegalStart:
    def test_own_piece(self) -> None:
        rules = Rules(BoardState.initial())
        assert rules.is_legal_start(parse_square("e2"))
        assert rules.is_legal_start(parse_square("g1"))

    def test_enemy_piece_or_empty(self) -> None:
        rules = Rules(BoardState.initial())
        assert not rules.is_legal_start(parse_square("e7"))
        assert not rules.is_legal_start(parse_square("e4"))

    def test_follows_side_to_move(self) -> None:
        state = _play(BoardState.initial(), "e2e4")
        rules = Rules(state)
        assert rules.is_legal_start(parse_square("e7"))
        assert not rules.is_legal_start(parse_square("e4"))


class TestGeometry:
    def test_initial_move_count(self) -> None:
        assert len(Rules(BoardState.initial()).legal_moves()) == 20

    @pytest.mark.parametrize("uci", ["e2e3", "e2e4", "g1f3", "b1c3"])
    def test_opening_moves(self, uci: str) -> None:
        assert _legal(BoardState.initial(), uci)

    @pytest.mark.parametrize(
        "uci",
        ["e2e5", "e2d3", "g1g3", "f1c4", "a1a3", "d1d3", "e1e2", "a1a2", "e2e2"],
    )
    def test_illegal_opening_moves(self, uci: str) -> None:
        assert not _legal(BoardState.initial(), uci)

    def test_pawn_double_step_only_once(self) -> None:
        state = _play(BoardState.initial(), "e2e3", "a7a6")
        assert not _legal(state, "e3e5")
        assert _legal(state, "e3e4")

    def test_pawn_double_step_blocked(self) -> None:
        state = state_from_fen("4k3/8/8/8/8/4n3/4P3/4K3 w - - 0 1")
        assert not _legal(state, "e2e3")
        assert not _legal(state, "e2e4")

    def test_pawn_captures_diagonally(self) -> None:
        state = state_from_fen("4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1")
        assert _legal(state, "e4d5")
        assert not _legal(state, "e4f5")

    def test_pawn_cannot_capture_forward(self) -> None:
        state = state_from_fen("4k3/8/8/4p3/4P3/8/8/4K3 w - - 0 1")
        assert not _legal(state, "e4e5")

    def test_black_pawn_moves_down(self) -> None:
        state = state_from_fen("4k3/4p3/8/8/8/8/8/4K3 b - - 0 1")
        assert _legal(state, "e7e5")
        assert not _legal(state, "e7e8")

    def test_rook(self) -> None:
        state = state_from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        assert _legal(state, "a1a8")
        assert _legal(state, "a1d1")
        assert not _legal(state, "a1b2")
        assert not _legal(state, "a1f1")

    def test_bishop_blocked(self) -> None:
        state = state_from_fen("4k3/8/8/8/8/2p5/8/B3K3 w - - 0 1")
        assert _legal(state, "a1c3")
        assert not _legal(state, "a1d4")
        assert not _legal(state, "a1a2")

    def test_queen(self) -> None:
        state = state_from_fen("4k3/8/8/8/8/8/8/3QK3 w - - 0 1")
        assert _legal(state, "d1h5")
        assert _legal(state, "d1d7")
        assert not _legal(state, "d1e3")

    def test_knight_jumps(self) -> None:
        state = state_from_fen("4k3/8/8/8/8/8/PPP5/1N2K3 w - - 0 1")
        assert _legal(state, "b1c3")
        assert _legal(state, "b1a3")
        assert not _legal(state, "b1b3")


class TestAttacks:
    def test_pawn_attacks_empty_diagonal(self) -> None:
        rules = Rules(BoardState.initial())
        assert rules.is_square_attacked(parse_square("e3"), Color.WHITE)
        assert not rules.is_square_attacked(parse_square("e4"), Color.WHITE)
        assert rules.is_square_attacked(parse_square("f6"), Color.BLACK)

    def test_slider_blocked(self) -> None:
        state = state_from_fen("4k3/8/8/8/8/8/4P3/4R1K1 w - - 0 1")
        rules = Rules(state)
        assert rules.is_square_attacked(parse_square("e2"), Color.WHITE)
        assert not rules.is_square_attacked(parse_square("e3"), Color.WHITE)

    def test_is_in_check(self) -> None:
        rules = Rules(state_from_fen(FOOLS_MATE))
        assert rules.is_in_check(Color.WHITE)
        assert not rules.is_in_check(Color.BLACK)


class TestSelfCheck:
    def test_pinned_piece_cannot_move(self) -> None:
        state = state_from_fen("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")
        assert not _legal(state, "e2d3")
        assert _legal(state, "e1d1")

    def test_must_answer_check(self) -> None:
        state = state_from_fen("4k3/4r3/8/8/8/8/8/R3K3 w - - 0 1")
        assert not _legal(state, "a1a2")
        assert not _legal(state, "a1e1")
        assert _legal(state, "e1d1")
        assert not _legal(state, "e1e2")

    def test_king_cannot_step_into_attack(self) -> None:
        state = state_from_fen("4k3/8/8/8/8/8/3r4/7K w - - 0 1")
        assert not _legal(state, "h1h2")
        assert _legal(state, "h1g1")

    def test_query_leaves_state_untouched(self) -> None:
        state = state_from_fen("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")
        before = state.copy()
        Rules(state).legal_moves()
        assert state == before


class TestCastling:
    OPEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"

    def test_both_sides_legal(self) -> None:
        state = state_from_fen(self.OPEN)
        assert _legal(state, "e1g1")
        assert _legal(state, "e1c1")

    def test_kingside_moves_rook(self) -> None:
        state = _play(state_from_fen(self.OPEN), "e1g1")
        assert state[parse_square("g1")] == Piece(Color.WHITE, PieceType.KING)
        assert state[parse_square("f1")] == Piece(Color.WHITE, PieceType.ROOK)
        assert state[parse_square("h1")] is None
        assert state[parse_square("e1")] is None
        assert state.castling == CastlingRights.BLACK_BOTH

    def test_black_queenside_moves_rook(self) -> None:
        state = state_from_fen("r3k2r/8/8/8/8/8/8/4K3 b kq - 0 1")
        _play(state, "e8c8")
        assert state[parse_square("c8")] == Piece(Color.BLACK, PieceType.KING)
        assert state[parse_square("d8")] == Piece(Color.BLACK, PieceType.ROOK)
        assert state[parse_square("a8")] is None
        assert state.castling == CastlingRights.NONE

    def test_without_right(self) -> None:
        state = state_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w kq - 0 1")
        assert not _legal(state, "e1g1")
        assert not _legal(state, "e1c1")

    def test_path_blocked(self) -> None:
        state = state_from_fen("r3k2r/8/8/8/8/8/8/RN2KB1R w KQkq - 0 1")
        assert not _legal(state, "e1g1")
        assert not _legal(state, "e1c1")

    def test_rook_missing(self) -> None:
        state = state_from_fen("4k3/8/8/8/8/8/8/4K3 w KQ - 0 1")
        assert not _legal(state, "e1g1")

    def test_out_of_check(self) -> None:
        state = state_from_fen("4k3/4r3/8/8/8/8/8/R3K2R w KQ - 0 1")
        assert not _legal(state, "e1g1")
        assert not _legal(state, "e1c1")

    def test_through_attacked_square(self) -> None:
        state = state_from_fen("4k3/5r2/8/8/8/8/8/R3K2R w KQ - 0 1")
        assert not _legal(state, "e1g1")
        assert _legal(state, "e1c1")

    def test_into_check(self) -> None:
        state = state_from_fen("4k3/6r1/8/8/8/8/8/R3K2R w KQ - 0 1")
        assert not _legal(state, "e1g1")
        assert _legal(state, "e1c1")

    def test_queenside_rook_square_may_be_attacked(self) -> None:
        state = state_from_fen("1r2k3/8/8/8/8/8/8/R3K3 w Q - 0 1")
        assert _legal(state, "e1c1")

    def test_king_move_clears_rights(self) -> None:
        state = _play(state_from_fen(self.OPEN), "e1f1", "e8f8", "f1e1", "f8e8")
        assert state.castling == CastlingRights.NONE
        assert not _legal(state, "e1g1")

    def test_rook_move_clears_one_right(self) -> None:
        state = _play(state_from_fen(self.OPEN), "h1h2")
        assert state.castling == (
            CastlingRights.WHITE_QUEENSIDE | CastlingRights.BLACK_BOTH
        )

    def test_capture_on_corner_clears_right(self) -> None:
        state = _play(state_from_fen(self.OPEN), "a1a8")
        assert state.castling == (
            CastlingRights.WHITE_KINGSIDE | CastlingRights.BLACK_KINGSIDE
        )


class TestEnPassant:
    START = "4k3/3p4/8/4P3/8/8/8/4K3 b - - 0 1"

    def test_double_step_records_pawn(self) -> None:
        state = _play(state_from_fen(self.START), "d7d5")
        assert state.en_passant == parse_square("d5")
        assert state.en_passant_target == parse_square("d6")

    def test_capture_removes_pawn(self) -> None:
        state = _play(state_from_fen(self.START), "d7d5", "e5d6")
        assert state[parse_square("d5")] is None
        assert state[parse_square("d6")] == Piece(
            Color.WHITE, PieceType.PAWN, moved=True
        )
        assert state.en_passant is None

    def test_only_on_next_ply(self) -> None:
        state = _play(state_from_fen(self.START), "d7d5", "e1e2", "e8f7")
        assert not _legal(state, "e5d6")

    def test_single_steps_do_not_qualify(self) -> None:
        state = _play(state_from_fen("4k3/3p4/8/4P3/8/8/8/4K3 b - - 0 1"), "d7d6")
        state = _play(state, "e1e2", "d6d5")
        assert state.en_passant is None
        assert not _legal(state, "e5d6")

    def test_from_fen(self) -> None:
        state = state_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        assert _legal(state, "e5d6")
        assert not _legal(state, "e5f6")

    def test_black_captures(self) -> None:
        state = _play(state_from_fen("4k3/8/8/8/5p2/8/4P3/4K3 w - - 0 1"), "e2e4")
        assert _legal(state, "f4e3")
        _play(state, "f4e3")
        assert state[parse_square("e4")] is None


class TestPromotion:
    def test_white_promotes_to_queen(self) -> None:
        state = _play(state_from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1"), "a7a8")
        assert state[parse_square("a8")] == Piece(Color.WHITE, PieceType.QUEEN)

    def test_black_capture_promotes(self) -> None:
        state = _play(state_from_fen("4k3/8/8/8/8/8/p7/1N2K3 b - - 0 1"), "a2b1")
        assert state[parse_square("b1")] == Piece(Color.BLACK, PieceType.QUEEN)


class TestApplyMove:
    def test_flips_side(self) -> None:
        state = _play(BoardState.initial(), "g1f3")
        assert state.side_to_move == Color.BLACK
        assert state[parse_square("g1")] is None
        assert state[parse_square("f3")] == Piece(Color.WHITE, PieceType.KNIGHT)

    def test_empty_square_raises(self) -> None:
        with pytest.raises(ValueError, match="No piece"):
            Rules(BoardState.initial()).apply_move(
                parse_square("e4"), parse_square("e5")
            )

    def test_fools_mate_sequence(self) -> None:
        state = _play(BoardState.initial(), "f2f3", "e7e5", "g2g4", "d8h4")
        assert state == state_from_fen(FOOLS_MATE)


class TestCheckmate:
    def test_fools_mate(self) -> None:
        rules = Rules(state_from_fen(FOOLS_MATE))
        assert rules.is_checkmate(Color.WHITE)
        assert not rules.is_checkmate(Color.BLACK)

    def test_corner_rook_mate(self) -> None:
        rules = Rules(state_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 0 1"))
        assert rules.is_checkmate(Color.BLACK)

    def test_same_pattern_with_bishop_is_not_mate(self) -> None:
        rules = Rules(state_from_fen("B2k4/8/3K4/8/8/8/8/8 b - - 0 1"))
        assert not rules.is_checkmate(Color.BLACK)

    def test_only_side_to_move_can_be_mated(self) -> None:
        rules = Rules(state_from_fen("R2k4/8/3K4/8/8/8/8/8 w - - 0 1"))
        assert not rules.is_checkmate(Color.BLACK)

    def test_check_with_escape(self) -> None:
        rules = Rules(state_from_fen("R3k3/8/8/8/8/8/8/4K3 b - - 0 1"))
        assert rules.is_in_check(Color.BLACK)
        assert not rules.is_checkmate(Color.BLACK)

    def test_stalemate_is_not_mate(self) -> None:
        state = state_from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
        rules = Rules(state)
        assert not rules.is_checkmate(Color.BLACK)
        assert not rules.has_legal_move(Color.BLACK)
        assert rules.legal_moves() == []

    def test_has_legal_move_restores_side(self) -> None:
        state = BoardState.initial()
        rules = Rules(state)
        assert rules.has_legal_move(Color.BLACK)
        assert state.side_to_move == Color.WHITE
