"""Repository interface for tournament snapshots.

The engine never touches storage. Callers get a repository injected and save
the snapshot after every accepted change.
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

import json
import threading
from typing import Dict, List, Optional, Protocol

from knockoutpairing.constants import DEFAULT_STORAGE_KEY
from knockoutpairing.models.tournament import Tournament
from knockoutpairing.utils import setup_logger

logger = setup_logger(__name__)


class TournamentRepository(Protocol):
    """Keyed storage of tournament snapshots."""

    def get(self, key: str) -> Optional[Tournament]: ...

    def put(self, key: str, tournament: Tournament) -> None: ...

    def delete(self, key: str) -> bool: ...


class InMemoryRepository:
    """Repository keeping serialized snapshots in a dict.

    Snapshots are stored as JSON text, so a loaded tournament never shares
    state with the one that was saved.
    """

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Tournament]:
        with self._lock:
            raw = self._data.get(key)
        if raw is None:
            return None
        return Tournament.from_dict(json.loads(raw))

    def put(self, key: str, tournament: Tournament) -> None:
        raw = json.dumps(tournament.to_dict())
        with self._lock:
            self._data[key] = raw
        logger.debug(f"Stored tournament '{tournament.game_name}' under {key}")

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data)


class TournamentStore:
    """Single-slot ``save``/``load``/``clear`` view over a repository."""

    def __init__(
        self, repository: TournamentRepository, key: str = DEFAULT_STORAGE_KEY
    ) -> None:
        self.repository = repository
        self.key = key

    def save(self, tournament: Tournament) -> None:
        self.repository.put(self.key, tournament)

    def load(self) -> Optional[Tournament]:
        return self.repository.get(self.key)

    def clear(self) -> None:
        if self.repository.delete(self.key):
            logger.info(f"Cleared stored tournament {self.key}")
