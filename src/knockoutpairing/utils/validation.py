"""Validation utilities for Knockout Pairing.

The engine trusts its callers to hand it a clean roster. This module holds the
checks a setup form runs before calling :func:`create_tournament`.
"""

from typing import Any, Iterable, List, Optional

from knockoutpairing.constants import MIN_PLAYERS
from knockoutpairing.exceptions import (
    GameNameValidationException,
    PlayerNameValidationException,
)


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Any = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


# ========== Game Name Validation ==========


def validate_game_name(game_name: Optional[str]) -> ValidationResult:
    """Validate the free-text game name of a tournament.

    Args:
        game_name: Name entered by the organiser

    Returns:
        ValidationResult with the trimmed name
    """
    if not game_name or not game_name.strip():
        return ValidationResult(
            is_valid=False,
            error_message="Please enter a game name",
        )
    return ValidationResult(is_valid=True, sanitized_value=game_name.strip())


def validate_game_name_strict(game_name: Optional[str]) -> str:
    """Validate game name and return it trimmed or raise exception.

    Raises:
        GameNameValidationException: If the name is empty
    """
    result = validate_game_name(game_name)
    if not result.is_valid:
        raise GameNameValidationException(result.error_message)
    return result.sanitized_value


# ========== Player Name Validation ==========


def validate_player_name(
    name: Optional[str], existing: Iterable[str] = ()
) -> ValidationResult:
    """Validate a single player name against the names already entered.

    Args:
        name: Name to add
        existing: Names already on the roster

    Returns:
        ValidationResult with the trimmed name
    """
    if not name or not name.strip():
        return ValidationResult(
            is_valid=False,
            error_message="Player name cannot be empty",
        )

    name = name.strip()
    if name in set(existing):
        return ValidationResult(
            is_valid=False,
            error_message="Player name already exists",
        )

    return ValidationResult(is_valid=True, sanitized_value=name)


def parse_player_list(text: str, existing: Iterable[str] = ()) -> ValidationResult:
    """Parse newline-separated player names for bulk entry.

    Blank lines are ignored. Any name repeated in the input or already on the
    roster makes the whole batch invalid, and every duplicate is reported.

    Example:
        >>> parse_player_list("Ann\\nBob\\n\\nCy").sanitized_value
        ['Ann', 'Bob', 'Cy']
    """
    already = set(existing)
    names: List[str] = []
    duplicates: List[str] = []

    for line in text.splitlines():
        name = line.strip()
        if not name:
            continue
        if name in already or name in names:
            duplicates.append(name)
        else:
            names.append(name)

    if duplicates:
        return ValidationResult(
            is_valid=False,
            error_message=f"Duplicate players: {', '.join(duplicates)}",
        )
    return ValidationResult(is_valid=True, sanitized_value=names)


# ========== Roster Validation ==========


def validate_roster(players: Optional[Iterable[str]]) -> ValidationResult:
    """Validate a complete roster before the tournament starts."""
    roster: List[str] = []
    for player in players or ():
        result = validate_player_name(player, roster)
        if not result:
            return result
        roster.append(result.sanitized_value)

    if len(roster) < MIN_PLAYERS:
        return ValidationResult(
            is_valid=False,
            error_message=f"At least {MIN_PLAYERS} players are required",
        )
    return ValidationResult(is_valid=True, sanitized_value=roster)


def validate_roster_strict(players: Optional[Iterable[str]]) -> List[str]:
    """Validate roster and return the trimmed names or raise exception.

    Raises:
        PlayerNameValidationException: If a name is empty or repeated, or
            there are too few players
    """
    result = validate_roster(players)
    if not result.is_valid:
        raise PlayerNameValidationException(result.error_message)
    return result.sanitized_value
