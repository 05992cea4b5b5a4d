"""
Interactive move controller.

Turns clicks on the board into moves on the rules engine:

* selection & highlighting of legal destinations
* dispatching moves and enforcing whose turn it is
* the promotion sub-flow (waits for the user to pick a piece)
* undo / reset and reporting the end of the game

All collaborators are injected (see src/services/ports.py). Every entry point returns an Outcome describing what happened.
"""

import logging
import threading
from typing import Optional

from src.api.events import BoardEvent, PieceClicked
from src.core.config import ControllerSettings
from src.core.exceptions import (
    ControllerStateError,
    GameStateError,
    InvalidTargetError,
    NoHistoryError,
    NotYourTurnError,
)
from src.core.models import MoveDescriptor, PieceRef, SquareIndex, SquareSafety, Verdict
from src.core.shared_types import Color, Outcome, PieceType
from src.services.highlights import group_destinations
from src.services.ports import (
    BoardRenderer,
    GameEndNotifier,
    InfoPanel,
    MessageSink,
    PromotionChooser,
    RulesEngine,
)
from src.services.promotion import PendingPromotion, promotion_symbol
from src.services.selection import Idle, PieceSelected, SelectionState

logger = logging.getLogger(__name__)

WRONG_TURN_MESSAGE = "It is not your turn to go!"


class MoveController:
    """Owns the selection state and the pending promotion. The rules engine owns everything else."""

    def __init__(
        self,
        engine: RulesEngine,
        renderer: BoardRenderer,
        chooser: PromotionChooser,
        notifier: GameEndNotifier,
        messages: MessageSink,
        info_panel: Optional[InfoPanel] = None,
        settings: Optional[ControllerSettings] = None,
    ) -> None:
        self.engine = engine
        self.renderer = renderer
        self.chooser = chooser
        self.notifier = notifier
        self.messages = messages
        self.info_panel = info_panel
        self.settings = settings or ControllerSettings()

        self.selection: SelectionState = Idle()
        self.pending: Optional[PendingPromotion] = None
        self._promotion_outcome: Optional[Outcome] = None
        self._announced = False
        # single writer: moves, promotions, undo and reset never run concurrently on the engine
        self._engine_lock = threading.RLock()

        self.engine.add_listener(self)

    @property
    def is_awaiting_promotion(self) -> bool:
        return self.pending is not None and self.pending.is_awaiting

    def refresh(self) -> None:
        """Draw the current position from scratch (call once the board is on screen)."""
        self.renderer.redraw_all(self.engine.all_pieces())

    def handle(self, event: BoardEvent) -> Outcome:
        """Route a validated UI event."""
        if isinstance(event, PieceClicked):
            return self.on_piece_clicked(event.to_piece_ref())
        return self.on_square_clicked(event.index)

    # -- SELECTION & HIGHLIGHTING ---
    def on_piece_clicked(self, piece: PieceRef) -> Outcome:
        """
        Select the piece and highlight where it can go.
        ----

        Clicking a piece standing on one of the offered destinations (a capture) chooses that destination instead,
        just like clicking the highlighted square itself.
        """
        if self._input_suspended("piece click"):
            return Outcome.IGNORED

        if isinstance(self.selection, PieceSelected) and self.selection.move_to(piece.index):
            return self.on_destination_clicked(piece.index)

        try:
            offered_moves = tuple(self.engine.legal_moves(piece))
        except GameStateError as error:
            # the click was meant for a piece that has moved since the board was drawn
            logger.debug("Ignoring click on a stale piece: %s", error)
            return Outcome.IGNORED

        self.renderer.clear_highlights()
        self.selection = PieceSelected(piece, offered_moves)
        for category, indices in group_destinations(offered_moves).items():
            self.renderer.highlight_squares(category, indices)
        logger.debug("Selected %s with %d legal moves", piece, len(offered_moves))

        if self.info_panel is not None:
            self.info_panel.show_piece(piece)
        return Outcome.SELECTED

    def on_square_clicked(self, index: SquareIndex) -> Outcome:
        """A click on a square: a destination if one is offered there, otherwise just a safety probe."""
        if self._input_suspended("square click"):
            return Outcome.IGNORED

        if isinstance(self.selection, PieceSelected) and self.selection.move_to(index):
            return self.on_destination_clicked(index)

        if self.info_panel is not None:
            self.info_panel.show_square_safety(self.square_safety(index))
        return Outcome.IGNORED

    def on_destination_clicked(self, index: SquareIndex) -> Outcome:
        if self._input_suspended("destination click"):
            return Outcome.IGNORED
        if not isinstance(self.selection, PieceSelected):
            return Outcome.IGNORED

        move = self.selection.move_to(index)
        if move is None:
            return Outcome.IGNORED
        if move.is_promotion:
            return self.begin_promotion(move)
        return self.submit(move)

    # -- MOVE DISPATCH ---
    def submit(self, move: MoveDescriptor) -> Outcome:
        """Play an ordinary (non-promotion) move. Playing out of turn is reported, not raised."""
        if move.is_promotion:
            raise ValueError(f"Promotions go through begin_promotion(), got {move}")

        with self._engine_lock:
            try:
                self.engine.make_move(move)
            except NotYourTurnError as error:
                return self._reject_wrong_turn(error)

        logger.info("Played %s from %d to %d", move.kind, move.source, move.destination)
        self._after_move(move.destination)
        return Outcome.APPLIED

    # -- PROMOTION ---
    def begin_promotion(self, move: MoveDescriptor) -> Outcome:
        """
        Suspend input and ask the chooser which piece to promote into.
        ----

        The chooser answers through a callback. If it answers right away (a blocking dialog),
        the outcome of the whole promotion is returned; otherwise AWAITING_CHOICE.
        """
        if not isinstance(self.selection, PieceSelected):
            raise ControllerStateError("A promotion needs the pawn to be selected first")

        pending = PendingPromotion.start(move, self.selection.piece)
        self.pending = pending
        self._promotion_outcome = None
        logger.debug("Waiting for promotion choice for %s", pending.pawn)

        self.chooser.open(pending.color, lambda choice: self._on_promotion_choice(pending, choice))

        if self.pending is pending:
            return Outcome.AWAITING_CHOICE
        assert self._promotion_outcome is not None
        return self._promotion_outcome

    def resolve_promotion(self, choice: Optional[PieceType]) -> Outcome:
        """Finish the pending promotion. `None` means the user closed the chooser without picking."""
        pending = self.pending
        if pending is None or not pending.is_awaiting:
            raise ControllerStateError("No promotion is waiting for a choice")

        if choice is None:
            abandoned = pending.abandon()
            self.pending = None
            logger.info("Promotion of %s abandoned (%s)", abandoned.pawn, abandoned.phase.name)
            self._return_to_idle()
            outcome = Outcome.ABANDONED
        else:
            # validate before leaving the awaiting state: an invalid kind keeps the chooser's question open
            symbol = promotion_symbol(choice, pending.color)
            resolved = pending.resolve(choice)
            self.pending = None
            outcome = self._execute_promotion(resolved, symbol)

        self._promotion_outcome = outcome
        return outcome

    def _on_promotion_choice(self, pending: PendingPromotion, choice: Optional[PieceType]) -> None:
        if self.pending is not pending:
            logger.debug("Ignoring promotion choice %s for a promotion that is no longer pending", choice)
            return
        self.resolve_promotion(choice)

    def _execute_promotion(self, resolved: PendingPromotion, symbol: str) -> Outcome:
        destination = resolved.move.destination
        with self._engine_lock:
            try:
                self.engine.execute_promotion_move(resolved.pawn, symbol, destination)
            except NotYourTurnError as error:
                return self._reject_wrong_turn(error)
            except InvalidTargetError as error:
                # stale destination (e.g. the position changed while the chooser was open): nothing was played
                logger.warning("Dropped promotion of %s on %d: %s", resolved.pawn, destination, error)
                self._return_to_idle()
                return Outcome.INVALID_TARGET

        logger.info("Promoted %s into %s on %d", resolved.pawn, resolved.move.chosen_kind, destination)
        self._after_move(destination)
        return Outcome.APPLIED

    # -- HISTORY & LIFECYCLE ---
    def undo(self) -> Outcome:
        if self._input_suspended("undo"):
            return Outcome.IGNORED

        self._return_to_idle()
        with self._engine_lock:
            try:
                self.engine.undo_last_move()
            except NoHistoryError as error:
                logger.info("Nothing to undo: %s", error)
                self.messages.inform(str(error))
                return Outcome.NO_HISTORY

        self._announced = False
        self.refresh()
        return Outcome.UNDONE

    def reset(self, encoding: Optional[str] = None) -> Outcome:
        """Back to the starting position (or the given FEN). Drops any selection and any pending promotion."""
        with self._engine_lock:
            self.engine.set_position(encoding or self.settings.starting_fen)

        if self.pending is not None:
            logger.info("Reset drops the pending promotion of %s", self.pending.pawn)
            self.pending = None
        self._return_to_idle()
        self._announced = False
        self.refresh()
        logger.info("Board reset")
        return Outcome.RESET

    def check_terminal(self) -> Verdict:
        verdict = self.engine.verdict()
        if verdict.is_terminal:
            self._announce(verdict)
        return verdict

    def on_win(self, color: Color) -> None:
        """Called by the rules engine when a move mates."""
        self._announce(Verdict.won_by(color))

    def on_draw(self) -> None:
        """Called by the rules engine when a move draws the game."""
        verdict = self.engine.verdict()
        self._announce(verdict if verdict.is_terminal else Verdict.draw())

    def square_safety(self, index: SquareIndex) -> SquareSafety:
        """Read-only: could either king stand on this square?"""
        return SquareSafety(
            index=index,
            white_king_safe=self.engine.is_square_safe_for_king(Color.WHITE, index),
            black_king_safe=self.engine.is_square_safe_for_king(Color.BLACK, index),
        )

    def export_fen(self) -> str:
        return self.engine.fen()

    # -- INTERNAL HELPERS ---
    def _input_suspended(self, what: str) -> bool:
        if self.is_awaiting_promotion:
            logger.debug("Ignoring %s while waiting for a promotion choice", what)
            return True
        return False

    def _return_to_idle(self) -> None:
        self.selection = Idle()
        self.renderer.clear_highlights()

    def _reject_wrong_turn(self, error: NotYourTurnError) -> Outcome:
        logger.warning("Move rejected: %s", error)
        self.messages.warn(WRONG_TURN_MESSAGE)
        self._return_to_idle()
        return Outcome.WRONG_TURN

    def _after_move(self, destination: SquareIndex) -> None:
        self._return_to_idle()
        pieces = self.engine.all_pieces()
        self.renderer.redraw_all(pieces)
        if self.info_panel is not None:
            moved = next((piece for piece in pieces if piece.index == destination), None)
            if moved is not None:
                self.info_panel.show_piece(moved)
        self.check_terminal()

    def _announce(self, verdict: Verdict) -> None:
        """Tell the notifier once per terminal position."""
        if self._announced or not self.settings.announce_results:
            return
        self._announced = True
        logger.info("Game over: %s", verdict.describe())
        self.notifier.notify(verdict, on_restart=self.reset)
