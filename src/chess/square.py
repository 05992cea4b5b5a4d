"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)
NUM_SQUARES = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    @classmethod
    def from_index(cls, index: int) -> Square:
        """
        The UI numbers the squares 0-63 in reading order, starting at the top left.
        With white at the bottom that makes index 0 the square a8 and index 63 the square h1.
        """
        if not 0 <= index < NUM_SQUARES:
            raise InvalidSquareError(f"Square index must lie in [0, {NUM_SQUARES - 1}], got {index}")
        num_files, num_ranks = BOARD_DIMENSIONS
        row, column = divmod(index, num_files)
        return cls(file=column + 1, rank=num_ranks - row)

    def to_index(self) -> int:
        num_files, num_ranks = BOARD_DIMENSIONS
        return (num_ranks - self.rank) * num_files + (self.file - 1)

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def shifted(self, df: int, dr: int) -> Square:
        return Square(self.file + df, self.rank + dr)
