"""Round management for tournaments.

This module handles tournament creation, round completion checks, and round
progression including detection of the tournament winner.
"""

# Knockout Pairing
# Copyright (C) 2025  Knockout Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import dataclasses
from typing import Iterable, List, Optional, Sequence

from knockoutpairing.constants import MIN_PLAYERS
from knockoutpairing.exceptions import (
    InvalidRosterException,
    RoundNotCompleteException,
    TournamentCompleteException,
)
from knockoutpairing.models.tournament import Match, RoundData, Tournament
from knockoutpairing.utils import setup_logger
from knockoutpairing.utils.random_source import RandomProvider

from .bracket_generator import generate_matches

logger = setup_logger(__name__)


def is_round_complete(matches: Iterable[Match]) -> bool:
    """Check if every match in a round is finished."""
    return all(match.is_finished for match in matches)


def get_winners(matches: Iterable[Match]) -> List[str]:
    """Winners of finished matches, in match order."""
    return [match.winner for match in matches if match.is_finished and match.winner]


def create_tournament(
    game_name: str,
    players: Sequence[str],
    rng: Optional[RandomProvider] = None,
) -> Tournament:
    """Create a tournament with round 1 already paired.

    Args:
        game_name: Name of the game being played
        players: Unique player names
        rng: Random provider for the round 1 bracket

    Returns:
        New Tournament at round 1

    Raises:
        InvalidRosterException: If fewer than two players are given
    """
    if len(players) < MIN_PLAYERS:
        logger.error(f"Cannot create tournament with {len(players)} player(s)")
        raise InvalidRosterException(
            f"At least {MIN_PLAYERS} players are required, got {len(players)}"
        )

    bye_history = {player: 0 for player in players}
    matches, bye_history = generate_matches(players, bye_history, 1, rng)

    tournament = Tournament(
        game_name=game_name,
        players=tuple(players),
        rounds=(RoundData(round_number=1, matches=tuple(matches)),),
        current_round=1,
        bye_history=bye_history,
        is_complete=False,
        winner=None,
    )
    logger.info(f"Created tournament '{game_name}' with {len(players)} players")
    return tournament


def advance_round(
    tournament: Tournament, rng: Optional[RandomProvider] = None
) -> Tournament:
    """Close the current round and either crown the winner or pair the next round.

    Args:
        tournament: Tournament whose current round is complete
        rng: Random provider for the next bracket

    Returns:
        New Tournament, either complete or one round further

    Raises:
        TournamentCompleteException: If the tournament already has a winner
        RoundNotCompleteException: If a match of the current round is unfinished
    """
    if tournament.is_complete:
        logger.warning(f"Tournament '{tournament.game_name}' is already complete")
        raise TournamentCompleteException(
            f"Tournament already won by {tournament.winner}"
        )

    current = tournament.current_round_data
    if current is None or not is_round_complete(current.matches):
        logger.warning(f"Cannot advance: round {tournament.current_round} is not complete")
        raise RoundNotCompleteException("Current round is not complete")

    winners = get_winners(current.matches)

    if len(winners) == 1:
        logger.info(
            f"Tournament '{tournament.game_name}' complete, winner: {winners[0]}"
        )
        return dataclasses.replace(tournament, is_complete=True, winner=winners[0])

    if not winners:
        logger.error(f"Round {current.round_number} finished without any winner")
        raise RoundNotCompleteException(
            f"Round {current.round_number} has no winners to advance"
        )

    next_round_number = tournament.current_round + 1
    matches, bye_history = generate_matches(
        winners, tournament.bye_history, next_round_number, rng
    )

    logger.info(
        f"Advanced to round {next_round_number} with {len(winners)} players"
    )
    return dataclasses.replace(
        tournament,
        rounds=tournament.rounds
        + (RoundData(round_number=next_round_number, matches=tuple(matches)),),
        current_round=next_round_number,
        bye_history=bye_history,
    )


# ========== Queries ==========


def running_matches(tournament: Tournament) -> List[Match]:
    """Matches currently being played, in round order."""
    return [match for _, match in tournament.iter_matches() if match.is_in_progress]


def completed_matches(tournament: Tournament) -> List[Match]:
    """Finished matches (byes excluded), latest round first."""
    return [
        match
        for round_data in reversed(tournament.rounds)
        for match in round_data.matches
        if match.is_finished and not match.is_bye
    ]
