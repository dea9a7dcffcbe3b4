"""EngineConfig data class."""

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
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from knockoutpairing.constants import DEFAULT_LOG_LEVEL, DEFAULT_STORAGE_PATH
from knockoutpairing.exceptions import (
    FileLoadException,
    InvalidConfigurationException,
)
from knockoutpairing.utils import set_log_level
from knockoutpairing.utils.random_source import RandomProvider, make_random


@dataclass
class EngineConfig:
    """Settings for callers driving the tournament engine.

    Attributes
    ----------
    allow_historical_edits : bool
        Allow transition commands on matches outside the current round,
        e.g. to correct a past result.
    strict_match_lookup : bool
        Make generic match updates raise on unknown ids instead of
        returning the tournament unchanged.
    seed : int or None
        Seed for the random provider. None draws fresh randomness.
    storage_path : str
        File used by the JSON snapshot store.
    database_url : str or None
        SQLAlchemy URL. When set, ``open_store`` uses the relational store
        instead of the JSON file.
    log_level : str
        Level name applied to the package loggers by ``apply_log_level``.
    """

    allow_historical_edits: bool = False
    strict_match_lookup: bool = False
    seed: Optional[int] = None
    storage_path: str = DEFAULT_STORAGE_PATH
    database_url: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if self.seed is not None and (
            isinstance(self.seed, bool) or not isinstance(self.seed, int)
        ):
            raise InvalidConfigurationException(
                f"seed must be an integer or null: {self.seed!r}"
            )
        level = logging.getLevelName(str(self.log_level).upper())
        if not isinstance(level, int):
            raise InvalidConfigurationException(
                f"Unknown log level: {self.log_level!r}"
            )
        if not self.storage_path:
            raise InvalidConfigurationException("storage_path cannot be empty")

    def make_random(self) -> RandomProvider:
        """Random provider honouring ``seed``."""
        return make_random(self.seed)

    def apply_log_level(self) -> None:
        """Set the package log level. Call once when the application starts."""
        set_log_level(self.log_level)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "allow_historical_edits": self.allow_historical_edits,
            "strict_match_lookup": self.strict_match_lookup,
            "seed": self.seed,
            "storage_path": self.storage_path,
            "database_url": self.database_url,
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Deserialize configuration from dictionary."""
        unknown = set(data) - set(cls().to_dict())
        if unknown:
            raise InvalidConfigurationException(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            )
        return cls(
            allow_historical_edits=bool(data.get("allow_historical_edits", False)),
            strict_match_lookup=bool(data.get("strict_match_lookup", False)),
            seed=data.get("seed"),
            storage_path=data.get("storage_path", DEFAULT_STORAGE_PATH),
            database_url=data.get("database_url"),
            log_level=data.get("log_level", DEFAULT_LOG_LEVEL),
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "EngineConfig":
        """Load configuration from a JSON file.

        Raises:
            FileLoadException: If the file cannot be read or parsed
            InvalidConfigurationException: If a value is invalid
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise FileLoadException(f"Cannot load configuration {path}: {e}") from e

        if not isinstance(data, dict):
            raise InvalidConfigurationException(
                f"Configuration root must be an object: {path}"
            )
        return cls.from_dict(data)
