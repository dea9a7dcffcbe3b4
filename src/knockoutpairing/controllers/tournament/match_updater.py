"""Match updates for tournaments.

Two entry points live here. :func:`update_match` merges a raw ``winner`` /
``status`` patch into a match without checking the transition, which is what
simple front ends send. :func:`apply_command` takes one of the transition
commands and refuses anything the match's state does not allow.
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
from typing import Any, Mapping, Optional

from knockoutpairing.constants import (
    MATCH_STATUSES,
    STATUS_FINISHED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    UPDATABLE_MATCH_FIELDS,
)
from knockoutpairing.exceptions import (
    InvalidTransitionException,
    MatchNotFoundException,
    TournamentCompleteException,
)
from knockoutpairing.models.tournament import (
    EngineConfig,
    FinishMatch,
    Match,
    MatchCommand,
    ResetMatch,
    SelectWinner,
    StartMatch,
    Tournament,
)
from knockoutpairing.utils import setup_logger

logger = setup_logger(__name__)


def _ensure_not_complete(tournament: Tournament) -> None:
    if tournament.is_complete:
        logger.warning(
            f"Rejected match update: '{tournament.game_name}' is already complete"
        )
        raise TournamentCompleteException(
            f"Tournament already won by {tournament.winner}"
        )


def _replace_match(tournament: Tournament, updated: Match) -> Tournament:
    """Copy of ``tournament`` with the match sharing ``updated.id`` swapped out."""
    rounds = tuple(
        round_data.with_matches(
            updated if match.id == updated.id else match
            for match in round_data.matches
        )
        if round_data.find_match(updated.id) is not None
        else round_data
        for round_data in tournament.rounds
    )
    return dataclasses.replace(tournament, rounds=rounds)


def update_match(
    tournament: Tournament,
    match_id: str,
    updates: Mapping[str, Any],
    strict: bool = False,
) -> Tournament:
    """Merge ``updates`` into the match with ``match_id``.

    The match is looked up across all rounds. Transitions are not checked
    here; the caller decides whether the new winner/status make sense.

    Args:
        tournament: Tournament holding the match
        match_id: Id of the match to change
        updates: Mapping with ``winner`` and/or ``status``
        strict: Raise instead of returning the tournament unchanged when the
            id is unknown

    Returns:
        New Tournament with the merged match

    Raises:
        TournamentCompleteException: If the tournament already has a winner
        InvalidTransitionException: If ``updates`` has other keys or an
            unknown status
        MatchNotFoundException: If ``strict`` and no round holds the id
    """
    _ensure_not_complete(tournament)

    unknown = set(updates) - UPDATABLE_MATCH_FIELDS
    if unknown:
        raise InvalidTransitionException(
            f"Cannot update match fields: {', '.join(sorted(unknown))}"
        )
    if "status" in updates and updates["status"] not in MATCH_STATUSES:
        raise InvalidTransitionException(f"Unknown match status: {updates['status']!r}")

    found = tournament.find_match(match_id)
    if found is None:
        if strict:
            logger.error(f"Cannot update match {match_id}: not found")
            raise MatchNotFoundException(match_id)
        logger.warning(f"Ignoring update for unknown match {match_id}")
        return tournament

    _, match = found
    updated = dataclasses.replace(match, **dict(updates))
    logger.debug(f"Updated match {match_id}: {dict(updates)}")
    return _replace_match(tournament, updated)


def apply_command(
    tournament: Tournament,
    command: MatchCommand,
    config: Optional[EngineConfig] = None,
) -> Tournament:
    """Apply a transition command after validating it against the match.

    Args:
        tournament: Tournament holding the match
        command: StartMatch, SelectWinner, FinishMatch or ResetMatch
        config: Engine settings; ``allow_historical_edits`` permits commands
            on rounds before the current one

    Returns:
        New Tournament with the transitioned match

    Raises:
        TournamentCompleteException: If the tournament already has a winner
        MatchNotFoundException: If no round holds the match
        InvalidTransitionException: If the match's state forbids the command
    """
    config = config or EngineConfig()
    _ensure_not_complete(tournament)

    found = tournament.find_match(command.match_id)
    if found is None:
        logger.error(f"Cannot apply {type(command).__name__}: match {command.match_id} not found")
        raise MatchNotFoundException(command.match_id)

    round_number, match = found
    if round_number != tournament.current_round and not config.allow_historical_edits:
        raise InvalidTransitionException(
            f"Match {match.id} belongs to round {round_number}, "
            f"current round is {tournament.current_round}"
        )
    if match.is_bye:
        raise InvalidTransitionException(f"Bye match {match.id} cannot be changed")

    if isinstance(command, StartMatch):
        if not match.is_pending:
            raise InvalidTransitionException(
                f"Cannot start match {match.id}: status is {match.status}"
            )
        updated = dataclasses.replace(match, status=STATUS_IN_PROGRESS)
    elif isinstance(command, SelectWinner):
        if not match.is_in_progress:
            raise InvalidTransitionException(
                f"Cannot select winner for match {match.id}: status is {match.status}"
            )
        if not match.has_player(command.winner):
            raise InvalidTransitionException(
                f"{command.winner} does not play in match {match.id}"
            )
        updated = dataclasses.replace(match, winner=command.winner)
    elif isinstance(command, FinishMatch):
        if not match.is_in_progress:
            raise InvalidTransitionException(
                f"Cannot finish match {match.id}: status is {match.status}"
            )
        if match.winner is None:
            raise InvalidTransitionException("Please select a winner first")
        updated = dataclasses.replace(match, status=STATUS_FINISHED)
    elif isinstance(command, ResetMatch):
        if not match.is_finished:
            raise InvalidTransitionException(
                f"Cannot reset match {match.id}: status is {match.status}"
            )
        updated = dataclasses.replace(match, status=STATUS_PENDING, winner=None)
    else:
        raise InvalidTransitionException(f"Unknown match command: {command!r}")

    logger.info(f"{type(command).__name__} applied to match {match.id}")
    return _replace_match(tournament, updated)
