"""JSON file storage for tournament snapshots."""

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
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Optional, Union

from knockoutpairing.constants import DEFAULT_STORAGE_PATH, SAVE_FILE_EXTENSION
from knockoutpairing.exceptions import FileLoadException, FileSaveException
from knockoutpairing.models.tournament import Tournament
from knockoutpairing.utils import setup_logger

logger = setup_logger(__name__)


def _write_atomic(path: Path, tournament: Tournament) -> None:
    """Write the snapshot to a temp file beside ``path`` then swap it in."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise FileSaveException(f"Could not save tournament to {path}: {e}") from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(tournament.to_dict(), f, indent=4)
        os.replace(tmp_name, path)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise FileSaveException(f"Could not save tournament to {path}: {e}") from e


def _read(path: Path) -> Optional[Tournament]:
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return Tournament.from_dict(data)
    except (OSError, json.JSONDecodeError) as e:
        raise FileLoadException(f"Could not read tournament file {path}: {e}") from e
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise FileLoadException(f"Invalid tournament data in {path}: {e}") from e


class JsonTournamentStore:
    """Single tournament kept in one JSON file.

    Writes are atomic and serialized by a lock, so concurrent savers in one
    process end up with the last complete snapshot on disk.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_STORAGE_PATH) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def save(self, tournament: Tournament) -> None:
        """Save the snapshot, replacing any previous one.

        Raises:
            FileSaveException: If the file cannot be written
        """
        with self._lock:
            _write_atomic(self.path, tournament)
        logger.debug(f"Tournament saved to {self.path}")

    def load(self) -> Optional[Tournament]:
        """Load the saved snapshot.

        Returns:
            The tournament, or None if nothing has been saved

        Raises:
            FileLoadException: If the file exists but cannot be parsed
        """
        with self._lock:
            tournament = _read(self.path)
        if tournament is not None:
            logger.info(f"Loaded tournament: {tournament.game_name}")
        return tournament

    def clear(self) -> None:
        with self._lock:
            self.path.unlink(missing_ok=True)
        logger.info(f"Cleared tournament file {self.path}")


class JsonFileRepository:
    """Repository storing one JSON file per key in a directory."""

    _SAFE_KEY = re.compile(r"[^A-Za-z0-9_.-]+")

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)
        self._lock = threading.Lock()

    def _path_for(self, key: str) -> Path:
        safe = self._SAFE_KEY.sub("_", key).strip(".")
        if not safe:
            raise ValueError(f"Invalid repository key: {key!r}")
        return self.directory / f"{safe}{SAVE_FILE_EXTENSION}"

    def get(self, key: str) -> Optional[Tournament]:
        with self._lock:
            return _read(self._path_for(key))

    def put(self, key: str, tournament: Tournament) -> None:
        with self._lock:
            _write_atomic(self._path_for(key), tournament)

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        with self._lock:
            if not path.exists():
                return False
            path.unlink()
        return True
