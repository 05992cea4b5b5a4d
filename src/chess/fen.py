"""
Representation of a single position on the board. The part that can be encoded in a FEN string.
"""

from dataclasses import dataclass
from string import ascii_lowercase
from typing import Optional, Self

from src.chess.castling import (
    CASTLING_ORDER,
    CastlingDirection,
    castling_directions,
    castling_from_fen,
    castling_to_fen,
)
from src.chess.pieces import FEN_TO_PIECE, Color
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import InvalidFENError

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """

    # there should be 6 parts to the string
    parts = fen.split(" ")
    if len(parts) != 6:
        return False

    position, color, castling, en_passant, half_move_clock, num_turns = parts
    return (
        is_valid_position(position)
        and is_valid_color_code(color)
        and is_valid_castling_rights(castling)
        and is_valid_en_passant(en_passant)
        and is_valid_move_counter(half_move_clock)
        and is_valid_move_counter(num_turns)
    )


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            if character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            return False

    # both sides need exactly one king, otherwise check detection has nothing to look at
    return position.count("K") == 1 and position.count("k") == 1


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """Either '-' or a non-empty subsequence of 'KQkq' (order matters)."""
    if castling == "-":
        return True
    canonical = "".join(direction.value for direction in CASTLING_ORDER)
    remaining = iter(canonical)
    return bool(castling) and all(character in remaining for character in castling)


def is_valid_en_passant(en_passant: str) -> bool:
    """Valid en passant square encoding should be a square that exists on the board or a '-'"""
    return (en_passant == "-") or is_valid_square(en_passant)


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    num_files, num_ranks = BOARD_DIMENSIONS

    if len(square) < 2:
        return False

    # NOTE: The following works as long as we do not go beyond 26 files.
    file_char, rank_char = square[0], square[1:]
    if file_char not in ascii_lowercase[:num_files]:
        return False

    if not rank_char.isdigit():
        return False

    return 1 <= int(rank_char) <= num_ranks


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    <board position string><active color><castling rights><en passant square><# half move clock><number turns played>

    * The active color is either "w" or "b"
    * Castling rights: "K"/"Q" for white king/queen side, "k"/"q" for black. "-" once all are revoked.
    * The en passant square is the square a pawn could take on. "-" if not available.
    * The half move clock counts moves since the last pawn move or capture (fifty-move rule).
    * The number of turns starts at 1 and increments after every move black makes.

    ex) The standard starting position has a FEN
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    """

    position: str
    color_to_move: Color
    castling_rights: dict[CastlingDirection, bool]
    en_passant_square: Optional[Square]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        (
            position,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            num_turns,
        ) = fen.split(" ")

        return cls(
            position=position,
            color_to_move=Color.WHITE if active_color == "w" else Color.BLACK,
            castling_rights=castling_from_fen(castling_str),
            en_passant_square=(
                Square.from_algebraic(en_passant_algebraic)
                if en_passant_algebraic != "-"
                else None
            ),
            half_move_clock=int(half_move_clock),
            num_turns=int(num_turns),
        )

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        return f"{self.repetition_key()} {self.half_move_clock} {self.num_turns}"

    def repetition_key(self) -> str:
        """The first four FEN fields. Two positions are 'the same' for the repetition rule when these match."""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return f"{self.position} {active_color} {castling_to_fen(self.castling_rights)} {en_passant_algebraic}"

    # --- castling rights ---
    def can_castle(self, color: Color) -> bool:
        return any(self.castling_rights[direction] for direction in castling_directions(color))

    def revoke_castling_rights(self, direction: CastlingDirection) -> None:
        self.castling_rights[direction] = False

    def revoke_all_castling_rights(self, color: Color) -> None:
        for direction in castling_directions(color):
            self.revoke_castling_rights(direction)

    # --- counters ---
    def increment_half_move_counter(self) -> None:
        self.half_move_clock += 1

    def reset_half_move_counter(self) -> None:
        self.half_move_clock = 0

    def increment_full_move_counter(self) -> None:
        self.num_turns += 1
