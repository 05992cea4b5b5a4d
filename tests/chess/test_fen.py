"""Unit tests for /src/chess/fen.py"""

import pytest

from src.chess.castling import CastlingDirection
from src.chess.fen import (
    STARTING_FEN,
    FENState,
    is_valid_castling_rights,
    is_valid_en_passant,
    is_valid_fen,
    is_valid_position,
)
from src.chess.pieces import Color
from src.chess.square import Square
from src.core.exceptions import InvalidFENError


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
        "4k3/8/8/8/8/8/8/4K3 w - - 12 40",
        "r3k2r/8/8/8/8/8/8/R3K2R b Kq - 0 1",
    ],
)
def test_valid_fen(fen: str) -> None:
    assert is_valid_fen(fen)


@pytest.mark.parametrize(
    "fen",
    [
        "",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",  # missing a field
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP w KQkq - 0 1",  # only seven ranks
        "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",  # rank too long
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",  # bad color
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e9 0 1",  # bad en passant square
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - x 1",  # bad counter
        "rnbq1bnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQ - 0 1",  # no black king
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq  0 1",  # empty en passant field
    ],
)
def test_invalid_fen(fen: str) -> None:
    assert not is_valid_fen(fen)


def test_position_needs_one_king_each() -> None:
    assert is_valid_position("4k3/8/8/8/8/8/8/4K3")
    assert not is_valid_position("4k3/8/8/8/8/8/8/3KK3")


@pytest.mark.parametrize("castling, expected", [("KQkq", True), ("Kk", True), ("-", True), ("qK", False), ("KK", False), ("", False)])
def test_castling_rights_field(castling: str, expected: bool) -> None:
    assert is_valid_castling_rights(castling) is expected


@pytest.mark.parametrize("en_passant, expected", [("-", True), ("e3", True), ("d6", True), ("z3", False), ("e9", False), ("", False), ("e", False)])
def test_en_passant_field(en_passant: str, expected: bool) -> None:
    assert is_valid_en_passant(en_passant) is expected


def test_starting_position_fen_state() -> None:
    state = FENState.from_fen(STARTING_FEN)
    assert state.color_to_move == Color.WHITE
    assert all(state.castling_rights.values())
    assert state.en_passant_square is None
    assert state.half_move_clock == 0
    assert state.num_turns == 1


def test_fen_state_reads_every_field() -> None:
    state = FENState.from_fen("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b Kq e3 3 7")
    assert state.color_to_move == Color.BLACK
    assert state.castling_rights[CastlingDirection.WHITE_KING_SIDE]
    assert not state.castling_rights[CastlingDirection.WHITE_QUEEN_SIDE]
    assert state.en_passant_square == Square.from_algebraic("e3")
    assert state.half_move_clock == 3
    assert state.num_turns == 7


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
        "4k3/8/8/8/8/8/8/4K3 w - - 12 40",
    ],
)
def test_fen_state_writes_what_it_read(fen: str) -> None:
    assert FENState.from_fen(fen).to_fen() == fen


def test_invalid_fen_raises() -> None:
    with pytest.raises(InvalidFENError):
        FENState.from_fen("not a fen")
    with pytest.raises(InvalidFENError):
        FENState.from_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq  0 1")


def test_repetition_key_ignores_counters() -> None:
    early = FENState.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
    late = FENState.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 8 5")
    assert early.repetition_key() == late.repetition_key() == "4k3/8/8/8/8/8/8/4K3 w - -"


def test_revoking_castling_rights() -> None:
    state = FENState.from_fen(STARTING_FEN)
    state.revoke_castling_rights(CastlingDirection.WHITE_QUEEN_SIDE)
    assert state.can_castle(Color.WHITE)
    state.revoke_all_castling_rights(Color.WHITE)
    assert not state.can_castle(Color.WHITE)
    assert state.can_castle(Color.BLACK)
    assert state.to_fen() == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w kq - 0 1"


def test_counters() -> None:
    state = FENState.from_fen(STARTING_FEN)
    state.increment_half_move_counter()
    state.increment_half_move_counter()
    state.increment_full_move_counter()
    assert (state.half_move_clock, state.num_turns) == (2, 2)
    state.reset_half_move_counter()
    assert state.half_move_clock == 0
