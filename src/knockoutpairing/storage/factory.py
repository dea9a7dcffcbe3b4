"""Open the snapshot store an :class:`EngineConfig` points at."""

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

from typing import Union

from knockoutpairing.constants import DEFAULT_STORAGE_KEY
from knockoutpairing.models.tournament import EngineConfig
from knockoutpairing.storage.json_store import JsonTournamentStore
from knockoutpairing.storage.repository import TournamentStore
from knockoutpairing.utils import setup_logger

logger = setup_logger(__name__)


def open_store(
    config: EngineConfig, key: str = DEFAULT_STORAGE_KEY
) -> Union[JsonTournamentStore, TournamentStore]:
    """Build the single-tournament store selected by ``config``.

    Args:
        config: ``database_url`` picks the relational store, otherwise the
            JSON file at ``storage_path`` is used
        key: Tournament id inside the relational store

    Returns:
        An object with ``save``/``load``/``clear``
    """
    if config.database_url:
        from knockoutpairing.storage.sql import SqlTournamentStore

        logger.info(f"Using relational store for tournament {key}")
        return TournamentStore(SqlTournamentStore(config.database_url), key)

    logger.info(f"Using JSON store at {config.storage_path}")
    return JsonTournamentStore(config.storage_path)
