"""State of a promotion waiting for the user to pick a piece, and the symbols the rules engine expects"""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Self

from src.core.models import PROMOTION_CHOICES, MoveDescriptor, PieceRef
from src.core.shared_types import Color, PieceType

# FEN alphabet: upper case for white, lower case for black
PROMOTION_SYMBOLS: dict[PieceType, str] = {
    PieceType.QUEEN: "q",
    PieceType.ROOK: "r",
    PieceType.BISHOP: "b",
    PieceType.KNIGHT: "n",
}


def promotion_symbol(kind: PieceType, color: Color) -> str:
    if kind not in PROMOTION_CHOICES:
        raise ValueError(f"A pawn cannot promote into a {kind}. Choose from {', '.join(PROMOTION_CHOICES)}")
    symbol = PROMOTION_SYMBOLS[kind]
    return symbol.upper() if color == Color.WHITE else symbol


class PromotionPhase(Enum):
    AWAITING_CHOICE = auto()
    RESOLVED = auto()
    ABANDONED = auto()


@dataclass(frozen=True)
class PendingPromotion:
    """A promotion move that cannot be submitted before the user picked the piece kind."""

    move: MoveDescriptor
    pawn: PieceRef
    phase: PromotionPhase = PromotionPhase.AWAITING_CHOICE

    @classmethod
    def start(cls, move: MoveDescriptor, pawn: PieceRef) -> Self:
        if not move.is_promotion:
            raise ValueError(f"Not a promotion move: {move}")
        return cls(move, pawn)

    @property
    def color(self) -> Color:
        return self.pawn.color

    @property
    def is_awaiting(self) -> bool:
        return self.phase == PromotionPhase.AWAITING_CHOICE

    def resolve(self, kind: PieceType) -> Self:
        return replace(self, move=self.move.with_choice(kind), phase=PromotionPhase.RESOLVED)

    def abandon(self) -> Self:
        return replace(self, phase=PromotionPhase.ABANDONED)
