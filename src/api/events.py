"""Inbound events from the board UI"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

from src.chess.square import NUM_SQUARES
from src.core.exceptions import InvalidEventError
from src.core.models import PieceRef
from src.core.shared_types import Color, PieceType


def _validate_index(value: int) -> int:
    if not 0 <= value < NUM_SQUARES:
        raise InvalidEventError(f"Square index {value} is not on the board.")
    return value


class PieceClicked(BaseModel):
    """The user clicked the image of a piece."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["piece"] = "piece"
    color: Color
    piece_type: PieceType
    index: int

    @field_validator("index")
    @classmethod
    def validate_index(cls, value: int) -> int:
        return _validate_index(value)

    @classmethod
    def of(cls, piece: PieceRef) -> "PieceClicked":
        return cls(color=piece.color, piece_type=piece.type, index=piece.index)

    def to_piece_ref(self) -> PieceRef:
        return PieceRef(color=self.color, type=self.piece_type, index=self.index)


class SquareClicked(BaseModel):
    """The user clicked a square (empty, or one of the highlighted destinations)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["square"] = "square"
    index: int

    @field_validator("index")
    @classmethod
    def validate_index(cls, value: int) -> int:
        return _validate_index(value)


BoardEvent = PieceClicked | SquareClicked
