"""Unit tests for /src/core/models.py"""

import pytest

from src.core.models import PROMOTION_CHOICES, MoveDescriptor, Verdict
from src.core.shared_types import Color, DrawReason, MoveKind, PieceType, VerdictState


def test_only_promotions_carry_a_chosen_kind() -> None:
    with pytest.raises(ValueError):
        MoveDescriptor(MoveKind.CAPTURE, 52, 43, chosen_kind=PieceType.QUEEN)


@pytest.mark.parametrize("kind", [PieceType.KING, PieceType.PAWN])
def test_cannot_choose_king_or_pawn(kind: PieceType) -> None:
    with pytest.raises(ValueError):
        MoveDescriptor(MoveKind.PROMOTION, 8, 0, chosen_kind=kind)


def test_promotion_is_resolved_once_a_kind_is_chosen() -> None:
    move = MoveDescriptor(MoveKind.PROMOTION, 8, 0)
    assert move.is_promotion
    assert not move.is_resolved

    resolved = move.with_choice(PieceType.KNIGHT)
    assert resolved.is_resolved
    assert resolved.chosen_kind == PieceType.KNIGHT
    assert (resolved.source, resolved.destination) == (8, 0)
    assert move.chosen_kind is None


@pytest.mark.parametrize("kind", [kind for kind in MoveKind if kind != MoveKind.PROMOTION])
def test_other_moves_are_always_resolved(kind: MoveKind) -> None:
    move = MoveDescriptor(kind, 52, 36)
    assert move.is_resolved
    assert not move.is_promotion


def test_promotion_choices() -> None:
    assert PROMOTION_CHOICES == (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


@pytest.mark.parametrize(
    "verdict, terminal, description",
    [
        (Verdict.ongoing(), False, "Game in progress"),
        (Verdict.won_by(Color.WHITE), True, "White has won!"),
        (Verdict.won_by(Color.BLACK), True, "Black has won!"),
        (Verdict.draw(), True, "It is a draw!"),
        (Verdict.draw(DrawReason.STALEMATE), True, "It is a draw (stalemate)!"),
    ],
)
def test_verdict(verdict: Verdict, terminal: bool, description: str) -> None:
    assert verdict.is_terminal is terminal
    assert verdict.describe() == description


def test_verdict_states() -> None:
    assert Verdict.won_by(Color.BLACK).state == VerdictState.WON
    assert Verdict.won_by(Color.BLACK).winner == Color.BLACK
    assert Verdict.draw(DrawReason.REPETITION).reason == DrawReason.REPETITION
