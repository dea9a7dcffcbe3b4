"""Data model for tournament round."""

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
from typing import Any, Dict, Iterable, Optional, Tuple

from .match import Match


@dataclass(frozen=True)
class RoundData:
    """Container for all matches of a single tournament round.

    Attributes
    ----------
    round_number : int
        Round number (1-indexed).
    matches : tuple of Match
        Regular matches in pairing order, followed by the bye match if any.
    """

    round_number: int
    matches: Tuple[Match, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any iterable but always store a tuple
        if not isinstance(self.matches, tuple):
            object.__setattr__(self, "matches", tuple(self.matches))

    @property
    def is_complete(self) -> bool:
        return all(match.is_finished for match in self.matches)

    @property
    def bye_match(self) -> Optional[Match]:
        for match in self.matches:
            if match.is_bye:
                return match
        return None

    def find_match(self, match_id: str) -> Optional[Match]:
        for match in self.matches:
            if match.id == match_id:
                return match
        return None

    def with_matches(self, matches: Iterable[Match]) -> "RoundData":
        """Copy of this round holding ``matches`` instead."""
        return RoundData(round_number=self.round_number, matches=tuple(matches))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize round data to dictionary."""
        return {
            "roundNumber": self.round_number,
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundData":
        """Deserialize round data from dictionary."""
        return cls(
            round_number=data["roundNumber"],
            matches=tuple(Match.from_dict(m) for m in data.get("matches", [])),
        )
