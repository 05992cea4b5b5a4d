"""unit tests for src/chess/castling.py"""

import pytest

from src.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingSquares,
    castling_directions,
    castling_from_fen,
    castling_to_fen,
)
from src.chess.pieces import Color
from src.chess.square import Square


def _squares(*names: str) -> list[Square]:
    return [Square.from_algebraic(name) for name in names]


def test_castling_squares_creation() -> None:
    castling_squares = CastlingSquares.from_algebraic("e1", "g1", "h1", "f1")
    assert castling_squares.king_from == Square.from_algebraic("e1")
    assert castling_squares.king_to == Square.from_algebraic("g1")
    assert castling_squares.rook_from == Square.from_algebraic("h1")
    assert castling_squares.rook_to == Square.from_algebraic("f1")


@pytest.mark.parametrize(
    "direction, between, king_path",
    [
        (CastlingDirection.WHITE_KING_SIDE, ["f1", "g1"], ["e1", "f1", "g1"]),
        (CastlingDirection.WHITE_QUEEN_SIDE, ["b1", "c1", "d1"], ["e1", "d1", "c1"]),
        (CastlingDirection.BLACK_KING_SIDE, ["f8", "g8"], ["e8", "f8", "g8"]),
        (CastlingDirection.BLACK_QUEEN_SIDE, ["b8", "c8", "d8"], ["e8", "d8", "c8"]),
    ],
)
def test_castling_paths(
    direction: CastlingDirection, between: list[str], king_path: list[str]
) -> None:
    """b1/b8 must be empty for a queen side castle, but may be attacked: only the king's own path matters."""
    rule = CASTLING_RULES[direction]
    assert rule.squares_between() == _squares(*between)
    assert rule.king_path() == _squares(*king_path)


def test_directions_per_color() -> None:
    assert castling_directions(Color.WHITE) == [
        CastlingDirection.WHITE_KING_SIDE,
        CastlingDirection.WHITE_QUEEN_SIDE,
    ]
    assert all(direction.color == Color.BLACK for direction in castling_directions(Color.BLACK))


@pytest.mark.parametrize(
    "fen, expected_rights",
    [
        ("KQkq", {direction: True for direction in CastlingDirection}),
        (
            "Kq",
            {
                CastlingDirection.WHITE_KING_SIDE: True,
                CastlingDirection.WHITE_QUEEN_SIDE: False,
                CastlingDirection.BLACK_KING_SIDE: False,
                CastlingDirection.BLACK_QUEEN_SIDE: True,
            },
        ),
        ("-", {direction: False for direction in CastlingDirection}),
    ],
)
def test_castling_rights_fen_encoding(
    fen: str, expected_rights: dict[CastlingDirection, bool]
) -> None:
    assert castling_from_fen(fen) == expected_rights
    assert castling_to_fen(expected_rights) == fen
