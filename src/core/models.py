"""
Boundary layer data model(s).

These objects are passed between the rules engine, the move controller and the UI collaborators.
Neither side needs to know the other's internal representation: squares travel as indices (0-63),
pieces as PieceRef and candidate moves as MoveDescriptor.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from src.core.shared_types import Color, DrawReason, MoveKind, PieceType, VerdictState

# Square index: file = index % 8, row = index // 8. Row 0 is the top of the board (rank 8), so 0 is a8 and 63 is h1.
SquareIndex = int

PROMOTION_CHOICES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass(frozen=True)
class PieceRef:
    """A specific piece, standing on a specific square at the time it was reported."""

    color: Color
    type: PieceType
    index: SquareIndex


@dataclass(frozen=True)
class MoveDescriptor:
    """
    A candidate move as offered by the rules engine.
    ----

    Every variant carries a source and a destination index.
    Only PROMOTION descriptors may carry `chosen_kind`, and it stays None until the user picked a piece.
    For CASTLING the squares are the ones of the king.
    """

    kind: MoveKind
    source: SquareIndex
    destination: SquareIndex
    chosen_kind: Optional[PieceType] = None

    def __post_init__(self) -> None:
        if self.chosen_kind is None:
            return
        if self.kind != MoveKind.PROMOTION:
            raise ValueError(f"Only promotion moves carry a chosen piece kind, got {self.kind}")
        if self.chosen_kind not in PROMOTION_CHOICES:
            raise ValueError(f"Cannot promote into a {self.chosen_kind}")

    @property
    def is_promotion(self) -> bool:
        return self.kind == MoveKind.PROMOTION

    @property
    def is_resolved(self) -> bool:
        """A promotion is resolved once the piece kind is known. All other moves are always resolved."""
        return not self.is_promotion or self.chosen_kind is not None

    def with_choice(self, kind: PieceType) -> MoveDescriptor:
        return replace(self, chosen_kind=kind)


@dataclass(frozen=True)
class Verdict:
    """Terminal verdict of a position: still going, won by a color or drawn."""

    state: VerdictState
    winner: Optional[Color] = None
    reason: Optional[DrawReason] = None

    @classmethod
    def ongoing(cls) -> Verdict:
        return cls(VerdictState.ONGOING)

    @classmethod
    def won_by(cls, color: Color) -> Verdict:
        return cls(VerdictState.WON, winner=color)

    @classmethod
    def draw(cls, reason: Optional[DrawReason] = None) -> Verdict:
        return cls(VerdictState.DRAW, reason=reason)

    @property
    def is_terminal(self) -> bool:
        return self.state != VerdictState.ONGOING

    def describe(self) -> str:
        if self.state == VerdictState.WON:
            assert self.winner is not None
            return f"{self.winner.capitalize()} has won!"
        if self.state == VerdictState.DRAW:
            return f"It is a draw ({self.reason})!" if self.reason else "It is a draw!"
        return "Game in progress"


@dataclass(frozen=True)
class SquareSafety:
    """Answer to 'could each king stand on this square without being attacked?'"""

    index: SquareIndex
    white_king_safe: bool
    black_king_safe: bool
