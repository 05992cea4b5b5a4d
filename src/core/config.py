"""Settings of the move controller"""

from pydantic import BaseModel, ConfigDict, field_validator

from src.chess.fen import STARTING_FEN, is_valid_fen
from src.core.exceptions import InvalidFENError


class ControllerSettings(BaseModel):
    """
    starting_fen: the position `reset()` returns to when no other position is given.
    announce_results: forward checkmate/draw verdicts to the end-of-game notifier.
    """

    model_config = ConfigDict(frozen=True)

    starting_fen: str = STARTING_FEN
    announce_results: bool = True

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: str) -> str:
        value = value.strip()
        if not is_valid_fen(value):
            raise InvalidFENError(f"Cannot use {value!r} as starting position.")
        return value
