"""Unit tests for /src/chess/board.py"""

import pytest

from src.chess.board import Board
from src.chess.moves import Move
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square


def uci_move(uci: str) -> Move:
    return Move(Square.from_algebraic(uci[:2]), Square.from_algebraic(uci[2:4]))


@pytest.mark.parametrize(
    "position",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR",
        "r3k2r/8/8/8/8/8/8/R3K2R",
        "8/8/8/8/8/8/8/8",
        "4k3/8/8/3pP3/8/8/8/4K3",
    ],
)
def test_board_fen_roundtrip(position: str) -> None:
    assert Board.from_fen(position).to_fen() == position


def test_empty_board() -> None:
    board = Board.from_fen("8/8/8/8/8/8/8/8")
    assert len(board.position) == 64
    assert board.occupied_squares() == []


def test_starting_position_pieces() -> None:
    board = Board.from_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR")
    assert board.piece(Square.from_algebraic("e1")) == Piece(PieceType.KING, Color.WHITE)
    assert board.piece(Square.from_algebraic("d8")) == Piece(PieceType.QUEEN, Color.BLACK)
    assert len(board.locate_color(Color.WHITE)) == 16
    assert board.find_king(Color.BLACK) == Square.from_algebraic("e8")


def test_is_check() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/8/4R1K1")
    assert board.is_check(Color.BLACK)
    assert not board.is_check(Color.WHITE)


def test_no_king_is_never_in_check() -> None:
    board = Board.from_fen("8/8/8/8/8/8/8/4R3")
    assert not board.is_check(Color.BLACK)


def test_move_piece_returns_the_captured_piece() -> None:
    board = Board.from_fen("4k3/8/8/3p4/4P3/8/8/4K3")
    captured = board.move_piece(uci_move("e4d5"))
    assert captured == Piece(PieceType.PAWN, Color.BLACK)
    assert board.to_fen() == "4k3/8/8/3P4/8/8/8/4K3"


def test_promote_piece_keeps_the_color() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/8/p3K3")
    board.promote_piece(Square.from_algebraic("a1"), to=PieceType.KNIGHT)
    assert board.piece(Square.from_algebraic("a1")) == Piece(PieceType.KNIGHT, Color.BLACK)


def test_remove_piece() -> None:
    board = Board.from_fen("4k3/8/8/8/8/2R5/8/4K3")
    assert board.is_any_occupied([Square.from_algebraic("a1"), Square.from_algebraic("c3")])
    removed = board.remove_piece(Square.from_algebraic("c3"))
    assert removed == Piece(PieceType.ROOK, Color.WHITE)
    assert board.piece(Square.from_algebraic("c3")).is_empty


def test_copy_is_independent() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/4P3/4K3")
    copied = board.copy()
    copied.move_piece(uci_move("e2e4"))
    assert board.to_fen() == "4k3/8/8/8/8/8/4P3/4K3"
    assert copied.to_fen() == "4k3/8/8/8/4P3/8/8/4K3"
