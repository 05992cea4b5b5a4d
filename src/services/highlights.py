"""Which highlight a destination square gets, depending on the kind of move that lands there"""

from typing import Iterable

from src.core.models import MoveDescriptor, SquareIndex
from src.core.shared_types import HighlightCategory, MoveKind

HIGHLIGHT_CATEGORIES: dict[MoveKind, HighlightCategory] = {
    MoveKind.NEUTRAL: HighlightCategory.MOVE,
    MoveKind.DOUBLE_PAWN: HighlightCategory.MOVE,
    MoveKind.CAPTURE: HighlightCategory.CAPTURE,
    MoveKind.EN_PASSANT: HighlightCategory.CAPTURE,
    MoveKind.PROMOTION: HighlightCategory.PROMOTION,
    MoveKind.CASTLING: HighlightCategory.CASTLING,
}


def highlight_category(kind: MoveKind) -> HighlightCategory:
    return HIGHLIGHT_CATEGORIES[kind]


def group_destinations(
    moves: Iterable[MoveDescriptor],
) -> dict[HighlightCategory, list[SquareIndex]]:
    """
    Destination squares per highlight category, in the order the moves were offered.
    Categories without any destination are left out.
    """
    groups: dict[HighlightCategory, list[SquareIndex]] = {}
    for move in moves:
        groups.setdefault(highlight_category(move.kind), []).append(move.destination)
    return groups
