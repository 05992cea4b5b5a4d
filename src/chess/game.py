"""
The Game class is the rules engine the move controller talks to.
It owns the position (board + FEN state), the move history (as FEN strings, which is all undo needs) and the game status.

Everything crossing its public API uses the boundary types of src/core: square indices, PieceRef, MoveDescriptor, Verdict.
Internally it works with Square / Piece / Move from src/chess.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional, Protocol, Self

from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, CastlingDirection, castling_directions
from src.chess.fen import STARTING_FEN, FENState
from src.chess.moves import (
    PROMOTION_OPTIONS,
    Move,
    candidate_castling_move,
    castling_rook_move,
    en_passant_moves,
    is_pawn_push_to_promotion_square,
    pawn_direction,
)
from src.chess.pieces import (
    FEN_TO_PIECE,
    Color,
    Piece,
    PieceType,
    from_shared_color,
    to_shared_color,
    to_shared_type,
)
from src.chess.square import NUM_SQUARES, Square
from src.core import shared_types
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidTargetError,
    NoHistoryError,
    NotYourTurnError,
)
from src.core.models import MoveDescriptor, PieceRef, Verdict
from src.core.shared_types import DrawReason, MoveKind

logger = logging.getLogger(__name__)

# 50 moves by each side without a pawn move or a capture
FIFTY_MOVE_RULE_HALF_MOVES = 100
REPETITIONS_FOR_DRAW = 3


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_REPETITION = "draw by repetition"
    DRAW_FIFTY_MOVE_RULE = "draw by 50 moves"


DRAW_REASONS: dict[Status, DrawReason] = {
    Status.STALEMATE: DrawReason.STALEMATE,
    Status.DRAW_REPETITION: DrawReason.REPETITION,
    Status.DRAW_FIFTY_MOVE_RULE: DrawReason.FIFTY_MOVE_RULE,
}


class GameListener(Protocol):
    """Gets told when a move ends the game."""

    def on_win(self, color: shared_types.Color) -> None: ...
    def on_draw(self) -> None: ...


@dataclass
class AcceptedMove:
    """Snapshot of the pieces involved, taken before the board gets updated."""

    move: Move
    moving_piece: Piece
    captured_piece: Piece

    @classmethod
    def from_move_and_board(cls, move: Move, board: Board) -> Self:
        captured_square = (
            en_passant_capture_square(move) if move.is_en_passant else move.to_square
        )
        return cls(move, board.piece(move.from_square), board.piece(captured_square))

    @property
    def is_capture(self) -> bool:
        return not self.captured_piece.is_empty


def en_passant_capture_square(move: Move) -> Square:
    """The pawn taken en passant stands next to the moving pawn: the file it moves to, the rank it comes from."""
    return Square(file=move.to_square.file, rank=move.from_square.rank)


@dataclass
class Game:
    board: Board
    moves: list[Move]
    history: list[str]  # FEN strings, one per move made, holding the position BEFORE that move
    state: FENState
    status: Status
    listeners: list[GameListener] = field(default_factory=list)

    @classmethod
    def new_game(cls, starting_fen: Optional[str] = None) -> Self:
        """Start a game from the canonical starting position, or from the given FEN."""
        state = FENState.from_fen(starting_fen or STARTING_FEN)
        game = cls(
            board=Board.from_fen(state.position),
            moves=[],
            history=[],
            state=state,
            status=Status.IN_PROGRESS,
        )
        game.status = game._evaluate_status()
        return game

    # --- RULES ENGINE API (what the move controller consumes) ---
    def add_listener(self, listener: GameListener) -> None:
        self.listeners.append(listener)

    def all_pieces(self) -> list[PieceRef]:
        return sorted(
            (self._piece_ref(square) for square in self.board.occupied_squares()),
            key=lambda ref: ref.index,
        )

    def legal_moves(self, piece: PieceRef) -> list[MoveDescriptor]:
        """
        Legal moves of one piece, for either color.
        ----

        The side to move is NOT enforced here: the UI may show the moves of the opponent's pieces.
        Whose turn it is gets enforced once a move is actually made.
        Once the game has ended, no piece has any legal move.
        """
        square = self._locate(piece)
        if self.status != Status.IN_PROGRESS:
            return []
        return [self._describe(move) for move in self._legal_moves_from(square)]

    def make_move(self, move: MoveDescriptor) -> None:
        """
        Attempt to make a move
        -----

        1. the game must still be in progress
        2. the piece on the source square must belong to the side to move
        3. the move must be legal (a promotion must already carry the piece to promote into)
        4. update history, board, FEN state and status
        """
        self._assert_in_progress()
        source = Square.from_index(move.source)
        self._assert_your_turn(self.board.piece(source))

        if not move.is_resolved:
            raise IllegalMoveError(f"Promotion from {move.source} to {move.destination} needs a piece to promote into")

        internal_move = self._find_legal_move(source, Square.from_index(move.destination))
        if internal_move is None:
            raise IllegalMoveError(f"Move not allowed: {move}")

        if self._is_promotion(internal_move):
            if move.chosen_kind is None:
                raise IllegalMoveError(f"Pawn reaching the last rank must promote: {move}")
            internal_move.promote_to = PieceType[move.chosen_kind.name]
        self._apply(internal_move)

    def execute_promotion_move(self, pawn: PieceRef, symbol: str, destination: int) -> None:
        """
        Promote `pawn` by moving it onto `destination` and replacing it with the piece encoded by `symbol`.
        ----

        `symbol` uses the FEN alphabet: upper case for white, lower case for black ('Q', 'n', ...).

        Raises InvalidTargetError when the pawn is no longer where the reference says it is, or when
        `destination` is not a promotion square that pawn can reach right now.
        """
        self._assert_in_progress()
        pawn_piece = Piece(PieceType.PAWN, from_shared_color(pawn.color))
        self._assert_your_turn(pawn_piece)
        promote_to = self._parse_promotion_symbol(symbol, pawn_piece.color)

        if not 0 <= destination < NUM_SQUARES:
            raise InvalidTargetError(f"Promotion target {destination} is not on the board")
        if not 0 <= pawn.index < NUM_SQUARES:
            raise InvalidTargetError(f"Pawn reference points off the board: {pawn}")

        source = Square.from_index(pawn.index)
        if self.board.piece(source) != pawn_piece:
            raise InvalidTargetError(f"No {pawn.color} pawn on square {pawn.index} anymore")

        internal_move = self._find_legal_move(source, Square.from_index(destination))
        if internal_move is None or not self._is_promotion(internal_move):
            raise InvalidTargetError(f"Pawn on {pawn.index} cannot promote on square {destination}")

        internal_move.promote_to = promote_to
        self._apply(internal_move)

    def undo_last_move(self) -> None:
        if not self.history:
            raise NoHistoryError("You are back to the beginning!")
        previous_fen = self.history.pop()
        undone = self.moves.pop()
        self._load(previous_fen)
        logger.info("Undid %s", undone.to_uci())

    def set_position(self, fen: str) -> None:
        """Throw away the game so far and continue from the given FEN."""
        self._load(fen)
        self.moves.clear()
        self.history.clear()
        # positions of the old game must not count towards a repetition in the new one
        self.status = self._evaluate_status()
        logger.info("Position set to %s", fen)

    def fen(self) -> str:
        return self.state.to_fen()

    def is_square_safe_for_king(self, color: shared_types.Color, index: int) -> bool:
        """
        Could the king of `color` stand on this square without being attacked?
        The king is lifted off the board first, so it does not shield the square from a slider behind it.
        """
        square = Square.from_index(index)
        king_color = from_shared_color(color)
        board = self.board.copy()
        king_square = board.find_king(king_color)
        if king_square is not None:
            board.remove_piece(king_square)
        return not board.is_under_attack(square, king_color.opponent)

    def verdict(self) -> Verdict:
        if self.status == Status.CHECKMATE:
            # the side to move just got mated
            return Verdict.won_by(to_shared_color(self.state.color_to_move.opponent))
        if self.status in DRAW_REASONS:
            return Verdict.draw(DRAW_REASONS[self.status])
        return Verdict.ongoing()

    # -- PRIVATE HELPERS ---
    def _piece_ref(self, square: Square) -> PieceRef:
        piece = self.board.piece(square)
        return PieceRef(
            color=to_shared_color(piece.color),
            type=to_shared_type(piece.type),
            index=square.to_index(),
        )

    def _locate(self, piece: PieceRef) -> Square:
        """The square of the referenced piece. Refuses references that do not match the board (anymore)."""
        square = Square.from_index(piece.index)
        if self.board.piece(square).is_empty or self._piece_ref(square) != piece:
            raise GameStateError(f"Stale piece reference: {piece} is not on the board")
        return square

    def _assert_in_progress(self) -> None:
        if self.status != Status.IN_PROGRESS:
            raise GameStateError(f"Game is not in progress. status: {self.status}")

    def _assert_your_turn(self, piece: Piece) -> None:
        if piece.is_empty:
            raise IllegalMoveError("There is no piece to move on that square")
        if piece.color != self.state.color_to_move:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {to_shared_color(self.state.color_to_move)} to make a move first."
            )

    def _parse_promotion_symbol(self, symbol: str, color: Color) -> PieceType:
        piece_type = FEN_TO_PIECE.get(symbol.lower())
        if piece_type not in PROMOTION_OPTIONS:
            raise IllegalMoveError(f"Cannot promote into {symbol!r}")
        if symbol.isupper() != (color == Color.WHITE):
            raise IllegalMoveError(f"Promotion symbol {symbol!r} does not match the color of the pawn")
        return piece_type

    def _find_legal_move(self, source: Square, target: Square) -> Optional[Move]:
        return next(
            (move for move in self._legal_moves_from(source) if move.to_square == target),
            None,
        )

    # -- LEGAL MOVES HELPERS ---
    def _legal_moves_from(self, square: Square) -> list[Move]:
        """
        Combines the following
        ----

        1. candidate moves from the basic movement rules (the board does this calculation)
        2. castling moves, if the piece is a king
        3. en passant moves, if the piece is a pawn of the side to move
        4. removes every move that would leave your own king in check
        """
        piece = self.board.piece(square)
        candidate_moves = self.board.generate_candidate_moves(square)

        if piece.type == PieceType.KING and self.state.can_castle(piece.color):
            candidate_moves.extend(
                candidate_castling_move(direction)
                for direction in self._legal_castling_directions(piece.color)
                if CASTLING_RULES[direction].king_from == square
            )

        ep_square = self.state.en_passant_square
        if piece.type == PieceType.PAWN and ep_square and piece.color == self.state.color_to_move:
            candidate_moves.extend(
                move
                for move in en_passant_moves(ep_square, piece.color, self.board)
                if move.from_square == square
            )

        return [
            move
            for move in candidate_moves
            if not self._is_putting_yourself_in_check(move, piece.color)
        ]

    def _has_legal_move(self, color: Color) -> bool:
        return any(self._legal_moves_from(square) for square in self.board.locate_color(color))

    def _is_putting_yourself_in_check(self, move: Move, color: Color) -> bool:
        """Try the move on a copy of the board and see if your own king is attacked afterwards."""
        board = self.board.copy()
        self._move_pieces(board, move)
        return board.is_check(color)

    def _legal_castling_directions(self, color: Color) -> list[CastlingDirection]:
        """
        You are allowed to castle in a direction if
        ---

        * the right for it was not revoked (and king and rook are actually on their starting squares)
        * all squares in between king and rook are empty
        * the king does not start on, pass through or land on an attacked square (so no castling out of check)
        """
        own_king = Piece(PieceType.KING, color)
        own_rook = Piece(PieceType.ROOK, color)
        legal_directions: list[CastlingDirection] = []
        for direction in castling_directions(color):
            squares = CASTLING_RULES[direction]
            if not self.state.castling_rights[direction]:
                continue
            if self.board.piece(squares.king_from) != own_king or self.board.piece(squares.rook_from) != own_rook:
                continue
            if self.board.is_any_occupied(squares.squares_between()):
                continue
            if self.board.is_any_under_attack(squares.king_path(), color.opponent):
                continue
            legal_directions.append(direction)
        return legal_directions

    def _is_promotion(self, move: Move) -> bool:
        return is_pawn_push_to_promotion_square(move, self.board)

    def _describe(self, move: Move) -> MoveDescriptor:
        """Tag the move for the outside world. Promotion wins over capture: a capturing promotion is a PROMOTION."""
        if move.castling_direction is not None:
            kind = MoveKind.CASTLING
        elif move.is_en_passant:
            kind = MoveKind.EN_PASSANT
        elif self._is_promotion(move):
            kind = MoveKind.PROMOTION
        elif move.is_double_push:
            kind = MoveKind.DOUBLE_PAWN
        elif not self.board.piece(move.to_square).is_empty:
            kind = MoveKind.CAPTURE
        else:
            kind = MoveKind.NEUTRAL
        return MoveDescriptor(kind, move.from_square.to_index(), move.to_square.to_index())

    # -- UPDATING THE GAME ---
    def _apply(self, move: Move) -> None:
        """
        1. store the FEN before the move in the history
        2. update the board (castling moves two pieces, en passant removes a pawn that is not on the target square)
        3. update the FEN state
        4. register the move and check for the end of the game
        """
        accepted_move = AcceptedMove.from_move_and_board(move, self.board)
        self.history.append(self.state.to_fen())
        self._move_pieces(self.board, move)
        self._update_fen_state(accepted_move)
        self.moves.append(move)
        self.status = self._evaluate_status()
        logger.info("Played %s, status: %s", move.to_uci(), self.status)
        if self.status != Status.IN_PROGRESS:
            self._notify_listeners()

    def _move_pieces(self, board: Board, move: Move) -> None:
        board.move_piece(move)
        if move.castling_direction is not None:
            board.move_piece(castling_rook_move(move.castling_direction))
        elif move.is_en_passant:
            board.remove_piece(en_passant_capture_square(move))
        elif move.promote_to is not None:
            board.promote_piece(move.to_square, to=move.promote_to)

    def _update_fen_state(self, accepted_move: AcceptedMove) -> None:
        """NOTE this runs AFTER the board has been updated, but BEFORE the color to move flips."""
        move = accepted_move.move
        player_color = self.state.color_to_move
        self.state.position = self.board.to_fen()
        if accepted_move.moving_piece.type == PieceType.KING:
            self.state.revoke_all_castling_rights(player_color)
        self._revoke_castling_rights_if_needed(move)

        self.state.en_passant_square = (
            move.from_square.shifted(0, pawn_direction(player_color))
            if move.is_double_push
            else None
        )

        if accepted_move.moving_piece.type == PieceType.PAWN or accepted_move.is_capture:
            self.state.reset_half_move_counter()
        else:
            self.state.increment_half_move_counter()

        if player_color == Color.BLACK:
            self.state.increment_full_move_counter()
        self.state.color_to_move = player_color.opponent

    def _revoke_castling_rights_if_needed(self, move: Move) -> None:
        """
        Any move that starts or ends on the king's or the rook's starting square of a direction revokes that direction:
        moving the king (castling included), moving that rook, or capturing that rook where it stands.
        """
        touched = {move.from_square, move.to_square}
        for direction, squares in CASTLING_RULES.items():
            if touched & {squares.king_from, squares.rook_from}:
                self.state.revoke_castling_rights(direction)

    def _load(self, fen: str) -> None:
        state = FENState.from_fen(fen)
        self.state = state
        self.board = Board.from_fen(state.position)
        self.status = self._evaluate_status()

    # --- CHECKS FOR ENDING THE GAME ---
    def _evaluate_status(self) -> Status:
        """Status of the current position, seen from the side to move."""
        color = self.state.color_to_move
        if not self._has_legal_move(color):
            return Status.CHECKMATE if self.board.is_check(color) else Status.STALEMATE
        if self._is_three_fold_repetition():
            return Status.DRAW_REPETITION
        if self.state.half_move_clock >= FIFTY_MOVE_RULE_HALF_MOVES:
            return Status.DRAW_FIFTY_MOVE_RULE
        return Status.IN_PROGRESS

    def _is_three_fold_repetition(self) -> bool:
        """The current position (ignoring the move counters) occurred twice before."""
        current = self.state.repetition_key()
        earlier = sum(
            1 for fen in self.history if FENState.from_fen(fen).repetition_key() == current
        )
        return earlier + 1 >= REPETITIONS_FOR_DRAW

    def _notify_listeners(self) -> None:
        verdict = self.verdict()
        for listener in self.listeners:
            if verdict.winner is not None:
                listener.on_win(verdict.winner)
            else:
                listener.on_draw()
