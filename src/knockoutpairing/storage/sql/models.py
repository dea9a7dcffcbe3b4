from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)

from .engine import Base


class TournamentRecord(Base):
    __tablename__ = "tournaments"

    id = Column(String(36), primary_key=True)
    game_name = Column(String, nullable=False)
    is_complete = Column(Boolean, nullable=False, default=False)
    winner = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())


class PlayerRecord(Base):
    __tablename__ = "players"
    __table_args__ = (
        UniqueConstraint("tournament_id", "name", name="uq_players_tournament_name"),
        Index("ix_players_tournament_id", "tournament_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    tournament_id = Column(
        String(36), ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String, nullable=False)
    # Roster order as entered at setup
    position = Column(Integer, nullable=False)
    bye_count = Column(Integer, nullable=False, default=0)


class RoundRecord(Base):
    __tablename__ = "rounds"
    __table_args__ = (
        UniqueConstraint(
            "tournament_id", "round_number", name="uq_rounds_tournament_number"
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    tournament_id = Column(
        String(36), ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False
    )
    round_number = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class MatchRecord(Base):
    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("tournament_id", "match_key", name="uq_matches_tournament_key"),
        Index("ix_matches_round_id", "round_id"),
        Index("ix_matches_tournament_status", "tournament_id", "status"),
    )

    # Autoincrement id doubles as creation order within a round
    id = Column(Integer, primary_key=True, autoincrement=True)
    round_id = Column(
        Integer, ForeignKey("rounds.id", ondelete="CASCADE"), nullable=False
    )
    tournament_id = Column(
        String(36), ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False
    )
    match_key = Column(String, nullable=False)  # r<round>-m<index> / r<round>-bye
    player1_name = Column(String, nullable=False)
    player2_name = Column(String, nullable=True)  # NULL for a bye
    winner = Column(String, nullable=True)
    status = Column(String(16), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
