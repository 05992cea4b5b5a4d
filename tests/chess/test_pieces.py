"""Unit tests for /src/chess/pieces.py"""

import pytest

from src.chess.pieces import (
    FEN_TO_PIECE,
    PIECE_TO_FEN,
    Color,
    Piece,
    PieceType,
    from_shared_color,
    to_shared_color,
    to_shared_type,
)
from src.core import shared_types


@pytest.mark.parametrize("char", [char.upper() for char in FEN_TO_PIECE.keys()])
def test_creating_white_piece_from_fen(char: str) -> None:
    """Capital letters are used for white pieces"""
    piece = Piece.from_fen(char)
    assert piece.type == FEN_TO_PIECE[char.lower()]
    assert piece.color == Color.WHITE


@pytest.mark.parametrize("char", [char.lower() for char in FEN_TO_PIECE.keys()])
def test_creating_black_piece_from_fen(char: str) -> None:
    """Lower case letters are used for black pieces"""
    piece = Piece.from_fen(char)
    assert piece.type == FEN_TO_PIECE[char.lower()]
    assert piece.color == Color.BLACK


@pytest.mark.parametrize(
    "piece_type",
    [piece_type for piece_type in PieceType if piece_type != PieceType.EMPTY],
)
def test_pieces_to_fen(piece_type: PieceType) -> None:
    assert Piece(piece_type, Color.WHITE).to_fen() == PIECE_TO_FEN[piece_type].upper()
    assert Piece(piece_type, Color.BLACK).to_fen() == PIECE_TO_FEN[piece_type].lower()


def test_empty_piece() -> None:
    piece = Piece.empty()
    assert piece.is_empty
    assert piece.color == Color.NONE


def test_opponent_color() -> None:
    assert Color.WHITE.opponent == Color.BLACK
    assert Color.BLACK.opponent == Color.WHITE
    assert Color.NONE.opponent == Color.NONE


@pytest.mark.parametrize("color", list(shared_types.Color))
def test_color_conversion_roundtrip(color: shared_types.Color) -> None:
    assert to_shared_color(from_shared_color(color)) == color


@pytest.mark.parametrize(
    "piece_type",
    [piece_type for piece_type in PieceType if piece_type != PieceType.EMPTY],
)
def test_piece_type_conversion(piece_type: PieceType) -> None:
    assert to_shared_type(piece_type) == shared_types.PieceType[piece_type.name]
