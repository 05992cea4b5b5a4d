"""The Game board implements all rules that effect the `position` (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.moves import ATTACK_RULES, MOVEMENT_RULES, CandidateMovesFn, Move
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square


@dataclass
class Board:
    position: dict[Square, Piece]

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board from the first part of a FEN string (the piece placement).

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        * ranks are listed from the 8th down to the 1st, separated by slashes
        * within a rank the a-file comes first
        * a digit denotes that many consecutive empty squares
        * capitals are white pieces, lower case are black pieces
        """
        position: dict[Square, Piece] = {}
        for rank_idx, fen_one_rank in enumerate(fen_str.split("/")):
            rank = BOARD_DIMENSIONS[1] - rank_idx
            file = 1
            for character in fen_one_rank:
                if character.isalpha():
                    position[Square(file, rank)] = Piece.from_fen(character)
                    file += 1
                else:
                    for _ in range(int(character)):
                        position[Square(file, rank)] = Piece.empty()
                        file += 1
        return cls(position)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece(Square(file, rank))
            if piece.is_empty:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- queries ---
    def piece(self, square: Square) -> Piece:
        return self.position[square]

    def locate_color(self, color: Color) -> list[Square]:
        return [square for square, piece in self.position.items() if piece.color == color]

    def occupied_squares(self) -> list[Square]:
        return [square for square, piece in self.position.items() if not piece.is_empty]

    def find_king(self, color: Color) -> Optional[Square]:
        king = Piece(PieceType.KING, color)
        return next(
            (square for square, piece in self.position.items() if piece == king), None
        )

    def is_any_occupied(self, squares: list[Square]) -> bool:
        return any(not self.piece(square).is_empty for square in squares)

    def is_under_attack(self, square: Square, by_color: Color) -> bool:
        """Could any piece of `by_color` capture on this square (whether or not it is occupied)?"""
        return any(rule(square, by_color, self) for rule in ATTACK_RULES.values())

    def is_any_under_attack(self, squares: list[Square], by_color: Color) -> bool:
        return any(self.is_under_attack(square, by_color) for square in squares)

    def is_check(self, color: Color) -> bool:
        """Is the king of `color` attacked? A board without that king is never in check."""
        king_square = self.find_king(color)
        if king_square is None:
            return False
        return self.is_under_attack(king_square, color.opponent)

    def generate_candidate_moves(self, square: Square) -> list[Move]:
        """
        Moves following the basic movement rules of the piece on `square`.
        These still need to be tested for legality (not leaving your own king in check).

        NOTE: castling and en passant are taken care of in the Game class.
        """
        piece = self.piece(square)
        if piece.is_empty:
            return []
        movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
        return movement_rule(square, self)

    # --- mutations ---
    def remove_piece(self, square: Square) -> Piece:
        removed = self.piece(square)
        self.position[square] = Piece.empty()
        return removed

    def move_piece(self, move: Move) -> Piece:
        """Update the position on the board. Returns whatever stood on the target square."""
        captured = self.piece(move.to_square)
        self.position[move.to_square] = self.piece(move.from_square)
        self.position[move.from_square] = Piece.empty()
        return captured

    def promote_piece(self, square: Square, to: PieceType) -> None:
        piece = self.piece(square)
        self.position[square] = Piece(to, piece.color)

    def copy(self) -> Self:
        """Pieces are never mutated in place (promotion swaps in a new Piece), so a shallow copy is enough to try out moves."""
        return type(self)(dict(self.position))
