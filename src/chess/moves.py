"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define candidate move sets (and attack checks) for each piece type.

Legality (not leaving your own king in check) is checked later by Game
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.chess.castling import CASTLING_RULES, CastlingDirection
from src.chess.pieces import PIECE_TO_FEN, Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Piece: ...


Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
KNIGHT_JUMPS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_STEPS: list[Vector] = STRAIGHTS + DIAGONALS


@dataclass
class Move:
    """Engine-internal move: squares plus the flags the board update needs"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None
    castling_direction: Optional[CastlingDirection] = None
    is_en_passant: bool = False
    is_double_push: bool = False

    def to_uci(self) -> str:
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"


def pawn_direction(color: Color) -> int:
    """White moves UP the board, black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_start_rank(color: Color) -> int:
    return 2 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 1


def promotion_rank(color: Color) -> int:
    return BOARD_DIMENSIONS[1] if color == Color.WHITE else 1


# --- MOVEMENT RULES ---
def sliding_moves(square: Square, board: Board, directions: list[Vector]) -> list[Move]:
    """
    Raycasting: walk along every direction until the edge of the board or the first occupied square.
    That first occupied square is included only if it holds an opponent's piece.
    """
    color = board.piece(square).color
    moves: list[Move] = []
    for df, dr in directions:
        target = square.shifted(df, dr)
        while target.is_within_bounds():
            occupant = board.piece(target)
            if not occupant.is_empty:
                if occupant.color == color.opponent:
                    moves.append(Move(square, target))
                break
            moves.append(Move(square, target))
            target = target.shifted(df, dr)
    return moves


def stepping_moves(square: Square, board: Board, deltas: list[Vector]) -> list[Move]:
    """Knights and kings: a single hop per delta, onto an empty square or an opponent's piece."""
    color = board.piece(square).color
    moves: list[Move] = []
    for df, dr in deltas:
        target = square.shifted(df, dr)
        if target.is_within_bounds() and board.piece(target).color != color:
            moves.append(Move(square, target))
    return moves


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves a single square forward onto an empty square.
    - can move two squares from its starting rank if both squares are empty.
    - takes diagonally

    NOTE: En passant is taken care of in the Game class
    """
    color = board.piece(square).color
    forward = pawn_direction(color)
    moves: list[Move] = []

    one_step = square.shifted(0, forward)
    if one_step.is_within_bounds() and board.piece(one_step).is_empty:
        moves.append(Move(square, one_step))
        two_steps = one_step.shifted(0, forward)
        if square.rank == pawn_start_rank(color) and board.piece(two_steps).is_empty:
            moves.append(Move(square, two_steps, is_double_push=True))

    for df in (-1, 1):
        target = square.shifted(df, forward)
        if target.is_within_bounds() and board.piece(target).color == color.opponent:
            moves.append(Move(square, target))
    return moves


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    return stepping_moves(square, board, KNIGHT_JUMPS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    return sliding_moves(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    return sliding_moves(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    return sliding_moves(square, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """Castling is modelled as a special king move (handled by Game)."""
    return stepping_moves(square, board, KING_STEPS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- ATTACKING RULES ---
def first_piece_along(square: Square, board: Board, direction: Vector) -> Optional[Piece]:
    """The first non-empty piece seen when looking from `square` along `direction`"""
    df, dr = direction
    target = square.shifted(df, dr)
    while target.is_within_bounds():
        occupant = board.piece(target)
        if not occupant.is_empty:
            return occupant
        target = target.shifted(df, dr)
    return None


def is_attacked_by_slider(
    square: Square, by_color: Color, board: Board, directions: list[Vector], piece_types: set[PieceType]
) -> bool:
    for direction in directions:
        occupant = first_piece_along(square, board, direction)
        if occupant is not None and occupant.color == by_color and occupant.type in piece_types:
            return True
    return False


def is_attacked_by_stepper(
    square: Square, by_color: Color, board: Board, deltas: list[Vector], piece_type: PieceType
) -> bool:
    attacker = Piece(piece_type, by_color)
    for df, dr in deltas:
        origin = square.shifted(df, dr)
        if origin.is_within_bounds() and board.piece(origin) == attacker:
            return True
    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawn attacks are not symmetric: a white pawn attacking this square stands one rank BELOW it.
    Hence the deltas point opposite to the pawn's own capture direction.
    """
    backwards = -pawn_direction(by_color)
    return is_attacked_by_stepper(
        square, by_color, board, [(1, backwards), (-1, backwards)], PieceType.PAWN
    )


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    return is_attacked_by_stepper(square, by_color, board, KNIGHT_JUMPS, PieceType.KNIGHT)


def is_attacked_by_bishop(square: Square, by_color: Color, board: Board) -> bool:
    return is_attacked_by_slider(square, by_color, board, DIAGONALS, {PieceType.BISHOP})


def is_attacked_by_rook(square: Square, by_color: Color, board: Board) -> bool:
    return is_attacked_by_slider(square, by_color, board, STRAIGHTS, {PieceType.ROOK})


def is_attacked_by_queen(square: Square, by_color: Color, board: Board) -> bool:
    return is_attacked_by_slider(
        square, by_color, board, STRAIGHTS + DIAGONALS, {PieceType.QUEEN}
    )


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return is_attacked_by_stepper(square, by_color, board, KING_STEPS, PieceType.KING)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Square, Color, Board], bool]
ATTACK_RULES: dict[PieceType, IsAttackedFn] = {
    PieceType.PAWN: is_attacked_by_pawn,
    PieceType.KNIGHT: is_attacked_by_knight,
    PieceType.BISHOP: is_attacked_by_bishop,
    PieceType.ROOK: is_attacked_by_rook,
    PieceType.QUEEN: is_attacked_by_queen,
    PieceType.KING: is_attacked_by_king,
}


# -- CASTLING MOVES ---
def candidate_castling_move(direction: CastlingDirection) -> Move:
    squares = CASTLING_RULES[direction]
    return Move(squares.king_from, squares.king_to, castling_direction=direction)


def castling_rook_move(direction: CastlingDirection) -> Move:
    squares = CASTLING_RULES[direction]
    return Move(squares.rook_from, squares.rook_to)


# -- EN PASSANT MOVES ---
def en_passant_moves(en_passant_square: Square, color: Color, board: Board) -> list[Move]:
    """Own pawns standing diagonally behind the en passant square (seen from the side to move) can take on it."""
    behind = -pawn_direction(color)
    own_pawn = Piece(PieceType.PAWN, color)
    moves: list[Move] = []
    for df in (-1, 1):
        origin = en_passant_square.shifted(df, behind)
        if origin.is_within_bounds() and board.piece(origin) == own_pawn:
            moves.append(Move(origin, en_passant_square, is_en_passant=True))
    return moves


# -- PAWN PROMOTION MOVES --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
]


def is_pawn_push_to_promotion_square(move: Move, board: Board) -> bool:
    """check if the move is a pawn move that reaches the far rank for its color"""
    moving_piece = board.piece(move.from_square)
    return (
        moving_piece.type == PieceType.PAWN
        and move.to_square.rank == promotion_rank(moving_piece.color)
    )
