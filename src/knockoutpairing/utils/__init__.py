"""Shared utilities for Knockout Pairing."""

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

import logging
from typing import Optional, Union

from knockoutpairing.constants import LOG_FORMAT

_ROOT_LOGGER_NAME = "knockoutpairing"


def setup_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Return a module logger under the package logger hierarchy.

    The package root logger gets a single stream handler the first time any
    module asks for a logger, so applications that configure logging
    themselves only need to adjust levels.

    Args:
        name: Usually ``__name__`` of the calling module
        level: Optional level applied to the returned logger

    Returns:
        Configured logger
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)

    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def set_log_level(level: Union[int, str]) -> None:
    """Set the level of every Knockout Pairing logger at once."""
    if isinstance(level, str):
        level = level.upper()
    logging.getLogger(_ROOT_LOGGER_NAME).setLevel(level)


__all__ = ["setup_logger", "set_log_level"]
