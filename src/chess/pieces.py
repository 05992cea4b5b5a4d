"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self

from src.core import shared_types


class PieceType(Enum):
    EMPTY = auto()
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


class Color(Enum):
    NONE = auto()
    WHITE = auto()
    BLACK = auto()

    @property
    def opponent(self) -> "Color":
        if self == Color.NONE:
            return Color.NONE
        return Color.BLACK if self == Color.WHITE else Color.WHITE


FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


# --- Conversions to the types used outside of the engine (these never contain the empty square) ---
def to_shared_color(color: Color) -> shared_types.Color:
    return shared_types.Color[color.name]


def from_shared_color(color: shared_types.Color) -> Color:
    return Color[color.name]


def to_shared_type(piece_type: PieceType) -> shared_types.PieceType:
    return shared_types.PieceType[piece_type.name]


@dataclass
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def empty(cls) -> Self:
        return cls(PieceType.EMPTY, Color.NONE)

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    @property
    def is_empty(self) -> bool:
        return self.type == PieceType.EMPTY
