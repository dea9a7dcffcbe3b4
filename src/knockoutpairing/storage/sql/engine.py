from __future__ import annotations

import os
from typing import Optional

from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from knockoutpairing.constants import DATABASE_URL_ENV_VARS, DEFAULT_DATABASE_URL

Base = declarative_base()


def resolve_database_url(url: Optional[str] = None) -> str:
    """Pick the database URL.

    Resolution order:
    - explicit ``url`` arg
    - env ``KNOCKOUT_DATABASE_URL``
    - env ``DATABASE_URL``
    - in-memory SQLite
    """
    if url:
        return url
    for name in DATABASE_URL_ENV_VARS:
        value = os.getenv(name)
        if value:
            return value
    return DEFAULT_DATABASE_URL


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or url.endswith(":memory:")


def create_engine(url: Optional[str] = None, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for the tournament tables."""
    database_url = resolve_database_url(url)
    if _is_memory_sqlite(database_url):
        # One shared connection, otherwise every session sees an empty database
        return _sa_create_engine(
            database_url,
            echo=echo,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return _sa_create_engine(database_url, echo=echo, future=True)


def create_session_factory(engine: Engine):
    """Return a configured sessionmaker bound to the engine."""
    return sessionmaker(
        bind=engine, autoflush=False, autocommit=False, future=True,
        expire_on_commit=False,
    )


def create_all(engine: Engine) -> None:
    """Create all tournament tables (idempotent)."""
    from . import models  # noqa: F401 - ensure models are imported

    Base.metadata.create_all(engine)
