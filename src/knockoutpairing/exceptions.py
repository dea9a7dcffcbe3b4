"""Exceptions for use in Knockout Pairing"""

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


# ========== Base Application Exception ==========


class KnockoutPairingException(Exception):
    """Base exception for all Knockout Pairing errors.

    All custom exceptions in the application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    """

    pass


# ========== Tournament Exceptions ==========


class TournamentException(KnockoutPairingException):
    """Base exception for tournament-related errors."""

    pass


class TournamentStateException(TournamentException):
    """Raised when tournament is in an invalid state for the requested operation."""

    pass


class InvalidRosterException(TournamentException):
    """Raised when a tournament is created with fewer than two players."""

    pass


class RoundNotCompleteException(TournamentException):
    """Raised when advancing while the current round still has unfinished matches."""

    pass


class TournamentCompleteException(TournamentException):
    """Raised when modifying a tournament that already has a winner."""

    pass


# ========== Match Exceptions ==========


class MatchException(KnockoutPairingException):
    """Base exception for match-related errors."""

    pass


class MatchNotFoundException(MatchException):
    """Raised when a match id is absent from every round."""

    def __init__(self, match_id: str) -> None:
        super().__init__(f"Match not found: {match_id}")
        self.match_id = match_id


class InvalidTransitionException(MatchException):
    """Raised when a match update is not allowed from the match's current state."""

    pass


# ========== Validation Exceptions ==========


class ValidationException(KnockoutPairingException):
    """Base exception for validation errors."""

    pass


class GameNameValidationException(ValidationException):
    """Raised when a tournament's game name is invalid."""

    pass


class PlayerNameValidationException(ValidationException):
    """Raised when a player name is empty or duplicated."""

    pass


# ========== File/Resource Exceptions ==========


class ResourceException(KnockoutPairingException):
    """Base exception for resource-related errors."""

    pass


class FileLoadException(ResourceException):
    """Raised when a file cannot be loaded."""

    pass


class FileSaveException(ResourceException):
    """Raised when a file cannot be saved."""

    pass


class StorageException(ResourceException):
    """Raised when the database backing a tournament store fails."""

    pass


class TournamentNotFoundException(ResourceException):
    """Raised when a stored tournament id does not exist."""

    def __init__(self, tournament_id: str) -> None:
        super().__init__(f"Tournament not found: {tournament_id}")
        self.tournament_id = tournament_id


# ========== Configuration Exceptions ==========


class ConfigurationException(KnockoutPairingException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
