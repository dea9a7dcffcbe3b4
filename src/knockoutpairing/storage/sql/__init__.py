from knockoutpairing.storage.sql.engine import (
    Base,
    create_all,
    create_engine,
    create_session_factory,
    resolve_database_url,
)
from knockoutpairing.storage.sql.store import SqlTournamentStore

__all__ = [
    "Base",
    "SqlTournamentStore",
    "create_all",
    "create_engine",
    "create_session_factory",
    "resolve_database_url",
]
