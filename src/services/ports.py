"""
Protocols for the collaborators of the move controller (can be implemented by any UI toolkit / rules engine).

The controller only ever talks to these. Concrete implementations get injected through its constructor.
"""

from typing import Callable, Optional, Protocol, Sequence

from src.core.models import MoveDescriptor, PieceRef, SquareIndex, SquareSafety, Verdict
from src.core.shared_types import Color, HighlightCategory, PieceType

PromotionCallback = Callable[[Optional[PieceType]], None]
RestartCallback = Callable[[], None]


class TerminalListener(Protocol):
    """Gets called by the rules engine when a move ends the game."""

    def on_win(self, color: Color) -> None: ...
    def on_draw(self) -> None: ...


class RulesEngine(Protocol):
    """Chess rules: legal moves, making/undoing moves and the terminal verdict."""

    def add_listener(self, listener: TerminalListener) -> None: ...

    def all_pieces(self) -> list[PieceRef]:
        """Every piece currently on the board."""
        ...

    def legal_moves(self, piece: PieceRef) -> list[MoveDescriptor]:
        """Legal moves of the piece, whichever side is to move."""
        ...

    def make_move(self, move: MoveDescriptor) -> None:
        """Raises NotYourTurnError if the moving piece does not belong to the side to move."""
        ...

    def execute_promotion_move(self, pawn: PieceRef, symbol: str, destination: SquareIndex) -> None:
        """Raises NotYourTurnError, or InvalidTargetError if the pawn cannot promote on `destination`."""
        ...

    def undo_last_move(self) -> None:
        """Raises NoHistoryError if no move has been made."""
        ...

    def set_position(self, fen: str) -> None: ...

    def fen(self) -> str: ...

    def is_square_safe_for_king(self, color: Color, index: SquareIndex) -> bool: ...

    def verdict(self) -> Verdict: ...


class BoardRenderer(Protocol):
    """Draws the board. Emits the click events the controller consumes."""

    def highlight_squares(self, category: HighlightCategory, indices: Sequence[SquareIndex]) -> None: ...
    def clear_highlights(self) -> None: ...
    def redraw_all(self, pieces: Sequence[PieceRef]) -> None: ...
    def add_piece(self, index: SquareIndex, piece: PieceRef) -> None: ...
    def remove_piece(self, index: SquareIndex) -> None: ...


class PromotionChooser(Protocol):
    """
    Modal asking which piece a pawn promotes into.
    Must eventually call `on_choice` exactly once: with the chosen kind, or with None when the user closed it.
    """

    def open(self, color: Color, on_choice: PromotionCallback) -> None: ...


class GameEndNotifier(Protocol):
    """Tells the user the game is over and offers to start again (by calling `on_restart`)."""

    def notify(self, verdict: Verdict, on_restart: RestartCallback) -> None: ...


class MessageSink(Protocol):
    """Short, non-fatal messages for the user."""

    def warn(self, message: str) -> None: ...
    def inform(self, message: str) -> None: ...


class InfoPanel(Protocol):
    """Debug side panel next to the board."""

    def show_piece(self, piece: PieceRef) -> None: ...
    def show_square_safety(self, report: SquareSafety) -> None: ...
