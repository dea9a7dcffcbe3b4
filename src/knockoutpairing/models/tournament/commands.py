"""Match transition commands.

Each command names one user action on a match. They are validated against
the match's current state before being applied, see
:func:`knockoutpairing.controllers.tournament.match_updater.apply_command`.
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

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class StartMatch:
    """pending -> in-progress"""

    match_id: str


@dataclass(frozen=True)
class SelectWinner:
    """Pick the winner of an in-progress match; may be changed until finished."""

    match_id: str
    winner: str


@dataclass(frozen=True)
class FinishMatch:
    """in-progress -> finished, requires a selected winner"""

    match_id: str


@dataclass(frozen=True)
class ResetMatch:
    """Back to pending with the winner cleared (user correction)."""

    match_id: str


MatchCommand = Union[StartMatch, SelectWinner, FinishMatch, ResetMatch]
