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

# --- Constants ---
SAVE_FILE_EXTENSION = ".json"
DEFAULT_STORAGE_PATH = f"tournament{SAVE_FILE_EXTENSION}"
DEFAULT_STORAGE_KEY = "tournament"

# Match status values (serialized as-is)
STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in-progress"
STATUS_FINISHED = "finished"
MATCH_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_FINISHED)

# Match identifiers
MATCH_ID_FORMAT = "r{round_number}-m{index}"
BYE_MATCH_ID_FORMAT = "r{round_number}-bye"

# A tournament needs at least this many players to produce a bracket
MIN_PLAYERS = 2

# Fields a generic match update may touch
UPDATABLE_MATCH_FIELDS = frozenset({"winner", "status"})

# Environment variables read by the relational store
DATABASE_URL_ENV_VARS = ("KNOCKOUT_DATABASE_URL", "DATABASE_URL")
DEFAULT_DATABASE_URL = "sqlite://"

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
