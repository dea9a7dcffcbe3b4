"""Single-elimination tournament engine for Knockout Pairing.

This package is the public entry point: the pure engine operations, the
models they work on, and :class:`TournamentSession` for callers that want
persistence and change notification wired in.
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

from knockoutpairing.controllers.tournament import (
    advance_round,
    apply_command,
    completed_matches,
    create_tournament,
    generate_matches,
    get_winners,
    is_round_complete,
    running_matches,
    update_match,
)
from knockoutpairing.models.tournament import (
    EngineConfig,
    FinishMatch,
    Match,
    MatchCommand,
    ResetMatch,
    RoundData,
    SelectWinner,
    StartMatch,
    Tournament,
)
from knockoutpairing.tournament.session import TournamentSession

__all__ = [
    "Tournament",
    "RoundData",
    "Match",
    "EngineConfig",
    "MatchCommand",
    "StartMatch",
    "SelectWinner",
    "FinishMatch",
    "ResetMatch",
    "TournamentSession",
    "create_tournament",
    "generate_matches",
    "is_round_complete",
    "get_winners",
    "advance_round",
    "update_match",
    "apply_command",
    "running_matches",
    "completed_matches",
]
