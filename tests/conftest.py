"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing the service layer (a fully wired controller on a real rules engine).
"""

from typing import Iterator, Optional

import pytest
from fakes import RecordingNotifier, ScriptedChooser, Table, TableFactory

from src.chess.game import Game


@pytest.fixture
def make_table() -> Iterator[TableFactory]:
    """Call the inner function with an optional FEN, chooser and notifier to get a fully wired controller."""

    def _make_table(
        fen: Optional[str] = None,
        chooser: Optional[ScriptedChooser] = None,
        notifier: Optional[RecordingNotifier] = None,
    ) -> Table:
        return Table(
            Game.new_game(fen),
            chooser or ScriptedChooser(),
            notifier or RecordingNotifier(),
        )

    yield _make_table


@pytest.fixture
def table(make_table: TableFactory) -> Table:
    """Controller on the standard starting position."""
    return make_table()
