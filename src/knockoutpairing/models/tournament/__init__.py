from knockoutpairing.models.tournament.commands import (
    FinishMatch,
    MatchCommand,
    ResetMatch,
    SelectWinner,
    StartMatch,
)
from knockoutpairing.models.tournament.engine_config import EngineConfig
from knockoutpairing.models.tournament.match import Match
from knockoutpairing.models.tournament.round_data import RoundData
from knockoutpairing.models.tournament.tournament import Tournament

__all__ = [
    "Match",
    "RoundData",
    "Tournament",
    "EngineConfig",
    "MatchCommand",
    "StartMatch",
    "SelectWinner",
    "FinishMatch",
    "ResetMatch",
]
