"""Persistence collaborators for tournament snapshots."""

from knockoutpairing.storage.factory import open_store
from knockoutpairing.storage.json_store import JsonFileRepository, JsonTournamentStore
from knockoutpairing.storage.notifications import ChangeNotifier
from knockoutpairing.storage.repository import (
    InMemoryRepository,
    TournamentRepository,
    TournamentStore,
)

__all__ = [
    "TournamentRepository",
    "InMemoryRepository",
    "TournamentStore",
    "JsonTournamentStore",
    "JsonFileRepository",
    "ChangeNotifier",
    "open_store",
]
