"""Match data class."""

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
from typing import Any, Dict, Optional

from knockoutpairing.constants import (
    BYE_MATCH_ID_FORMAT,
    MATCH_ID_FORMAT,
    MATCH_STATUSES,
    STATUS_FINISHED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
)
from knockoutpairing.type_hints import MatchStatus


@dataclass(frozen=True)
class Match:
    """A single contest between two players, or a bye.

    Attributes
    ----------
    id : str
        Identifier unique within the tournament, ``r<round>-m<index>`` or
        ``r<round>-bye``.
    player1 : str
        First participant, always present.
    player2 : str or None
        Second participant. ``None`` marks a bye.
    winner : str or None
        Name of the winner once one has been picked.
    status : str
        One of ``pending``, ``in-progress`` or ``finished``.
    """

    id: str
    player1: str
    player2: Optional[str] = None
    winner: Optional[str] = None
    status: MatchStatus = STATUS_PENDING

    @classmethod
    def regular(cls, round_number: int, index: int, player1: str, player2: str) -> "Match":
        """Create a pending match between two players."""
        return cls(
            id=MATCH_ID_FORMAT.format(round_number=round_number, index=index),
            player1=player1,
            player2=player2,
        )

    @classmethod
    def bye(cls, round_number: int, player: str) -> "Match":
        """Create a bye; it is finished from the start with the player as winner."""
        return cls(
            id=BYE_MATCH_ID_FORMAT.format(round_number=round_number),
            player1=player,
            player2=None,
            winner=player,
            status=STATUS_FINISHED,
        )

    @property
    def is_bye(self) -> bool:
        return self.player2 is None

    @property
    def is_pending(self) -> bool:
        return self.status == STATUS_PENDING

    @property
    def is_in_progress(self) -> bool:
        return self.status == STATUS_IN_PROGRESS

    @property
    def is_finished(self) -> bool:
        return self.status == STATUS_FINISHED

    def has_player(self, name: Optional[str]) -> bool:
        """Check whether ``name`` plays in this match."""
        return name is not None and name in (self.player1, self.player2)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "player1": self.player1,
            "player2": self.player2,
            "winner": self.winner,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        status = data.get("status", STATUS_PENDING)
        if status not in MATCH_STATUSES:
            raise ValueError(f"Unknown match status: {status!r}")
        return cls(
            id=data["id"],
            player1=data["player1"],
            player2=data.get("player2"),
            winner=data.get("winner"),
            status=status,
        )
