import random

import pytest

from knockoutpairing.controllers.tournament import apply_command
from knockoutpairing.models.tournament import (
    FinishMatch,
    SelectWinner,
    StartMatch,
    Tournament,
)


@pytest.fixture
def rng():
    return random.Random(1234)


def play_current_round(tournament: Tournament, pick_player1: bool = True) -> Tournament:
    """Start, decide and finish every pending match of the current round."""
    for match in tournament.current_round_data.matches:
        if match.is_bye:
            continue
        winner = match.player1 if pick_player1 else match.player2
        tournament = apply_command(tournament, StartMatch(match.id))
        tournament = apply_command(tournament, SelectWinner(match.id, winner))
        tournament = apply_command(tournament, FinishMatch(match.id))
    return tournament


@pytest.fixture
def play_round():
    return play_current_round
