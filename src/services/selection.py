"""Selection state of the board: nothing selected, or one piece with the moves offered for it"""

from dataclasses import dataclass
from typing import Optional

from src.core.models import MoveDescriptor, PieceRef, SquareIndex


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class PieceSelected:
    """
    `offered_moves` is the complete legal move set of `piece` at the moment it was selected.
    It is never reused once a move was made, undone or the position was reset.
    """

    piece: PieceRef
    offered_moves: tuple[MoveDescriptor, ...]

    def move_to(self, destination: SquareIndex) -> Optional[MoveDescriptor]:
        # a pawn reaching the last rank is offered a single PROMOTION move per destination, so this is never ambiguous
        return next(
            (move for move in self.offered_moves if move.destination == destination),
            None,
        )


SelectionState = Idle | PieceSelected
