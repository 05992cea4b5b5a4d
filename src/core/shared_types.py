"""
Type definitions used across layers
"""

from enum import StrEnum

# --- NOTE the rules engine (src/chess) keeps its own Color/PieceType enums that include the empty square.
# --- The versions below are the boundary versions: only real colors and real pieces.


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class MoveKind(StrEnum):
    """Tag of a candidate move. Decides how it is highlighted and how it is dispatched."""

    NEUTRAL = "neutral"
    DOUBLE_PAWN = "double pawn"
    CAPTURE = "capture"
    EN_PASSANT = "en passant"
    PROMOTION = "promotion"
    CASTLING = "castling"


class HighlightCategory(StrEnum):
    MOVE = "move"
    CAPTURE = "capture"
    PROMOTION = "promotion"
    CASTLING = "castling"


class VerdictState(StrEnum):
    ONGOING = "ongoing"
    WON = "won"
    DRAW = "draw"


class DrawReason(StrEnum):
    STALEMATE = "stalemate"
    REPETITION = "draw by repetition"
    FIFTY_MOVE_RULE = "draw by 50 moves"


class Outcome(StrEnum):
    """What a controller entry point ended up doing with the input it received."""

    SELECTED = "selected"
    APPLIED = "applied"
    WRONG_TURN = "wrong turn"
    AWAITING_CHOICE = "awaiting choice"
    ABANDONED = "abandoned"
    INVALID_TARGET = "invalid target"
    NO_HISTORY = "no history"
    UNDONE = "undone"
    RESET = "reset"
    IGNORED = "ignored"
