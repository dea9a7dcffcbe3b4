"""Tournament aggregate - the snapshot every engine operation works on.

A :class:`Tournament` is immutable. Engine operations never change one in
place; they build a new value with :func:`dataclasses.replace`, so an older
snapshot can be kept around for undo or shared with other readers.
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

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Optional, Tuple

from knockoutpairing.type_hints import ByeHistory

from .match import Match
from .round_data import RoundData


@dataclass(frozen=True)
class Tournament:
    """State of a single-elimination tournament.

    Attributes
    ----------
    game_name : str
        Free text name of the game being played.
    players : tuple of str
        Full roster, fixed at creation.
    rounds : tuple of RoundData
        Rounds in play order. A round is appended only once the previous one
        is complete.
    current_round : int
        Number of the last round; always ``len(rounds)``.
    bye_history : mapping of str to int
        Byes received per player, read-only. Counts never decrease.
    is_complete : bool
        True once a round produced exactly one winner.
    winner : str or None
        Tournament winner once complete.
    """

    game_name: str
    players: Tuple[str, ...]
    rounds: Tuple[RoundData, ...] = field(default_factory=tuple)
    current_round: int = 0
    bye_history: ByeHistory = field(default_factory=dict, hash=False)
    is_complete: bool = False
    winner: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.players, tuple):
            object.__setattr__(self, "players", tuple(self.players))
        if not isinstance(self.rounds, tuple):
            object.__setattr__(self, "rounds", tuple(self.rounds))
        object.__setattr__(self, "bye_history", MappingProxyType(dict(self.bye_history)))

    # ========== Lookups ==========

    @property
    def current_round_data(self) -> Optional[RoundData]:
        """The round at ``current_round``, or None before any round exists."""
        if 1 <= self.current_round <= len(self.rounds):
            return self.rounds[self.current_round - 1]
        return None

    def get_round(self, round_number: int) -> Optional[RoundData]:
        """Get a round by number (1-indexed)."""
        if 1 <= round_number <= len(self.rounds):
            return self.rounds[round_number - 1]
        return None

    def iter_matches(self) -> Iterator[Tuple[int, Match]]:
        """Yield ``(round_number, match)`` for every match in play order."""
        for round_data in self.rounds:
            for match in round_data.matches:
                yield round_data.round_number, match

    def find_match(self, match_id: str) -> Optional[Tuple[int, Match]]:
        """Locate a match in any round.

        Returns:
            ``(round_number, match)`` or None if no round holds the id
        """
        for round_number, match in self.iter_matches():
            if match.id == match_id:
                return round_number, match
        return None

    def byes_for(self, player: str) -> int:
        return self.bye_history.get(player, 0)

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize tournament to dictionary.

        Returns:
            Dictionary containing all tournament data
        """
        return {
            "gameName": self.game_name,
            "players": list(self.players),
            "rounds": [r.to_dict() for r in self.rounds],
            "currentRound": self.current_round,
            "byeHistory": dict(self.bye_history),
            "isComplete": self.is_complete,
            "winner": self.winner,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tournament":
        """Deserialize tournament from dictionary.

        Args:
            data: Dictionary containing tournament data

        Returns:
            Reconstructed Tournament object
        """
        rounds: List[RoundData] = [RoundData.from_dict(r) for r in data.get("rounds", [])]
        return cls(
            game_name=data["gameName"],
            players=tuple(data["players"]),
            rounds=tuple(rounds),
            current_round=data.get("currentRound", len(rounds)),
            bye_history={str(k): int(v) for k, v in data.get("byeHistory", {}).items()},
            is_complete=data.get("isComplete", False),
            winner=data.get("winner"),
        )
