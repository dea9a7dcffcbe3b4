"""Relational storage for tournaments.

Tournaments, players, rounds and matches live in separate tables linked by
``tournament_id`` / ``round_id``. A :class:`Tournament` snapshot is rebuilt
by reading rounds in number order and matches in creation order.
"""

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

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Union

from dateutil import parser as date_parser
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from knockoutpairing.constants import MATCH_STATUSES, STATUS_FINISHED, STATUS_IN_PROGRESS
from knockoutpairing.exceptions import (
    InvalidTransitionException,
    MatchNotFoundException,
    StorageException,
    TournamentNotFoundException,
)
from knockoutpairing.models.tournament import Match, RoundData, Tournament
from knockoutpairing.storage.notifications import ChangeNotifier
from knockoutpairing.type_hints import ByeHistory
from knockoutpairing.utils import setup_logger

from .engine import create_all, create_engine, create_session_factory
from .models import MatchRecord, PlayerRecord, RoundRecord, TournamentRecord

logger = setup_logger(__name__)


def _to_utc_naive(value: Union[datetime, str]) -> datetime:
    """Normalise a timestamp to naive UTC, the way the database stores them."""
    if isinstance(value, str):
        value = date_parser.isoparse(value)
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _match_from_record(record: MatchRecord) -> Match:
    return Match(
        id=record.match_key,
        player1=record.player1_name,
        player2=record.player2_name,
        winner=record.winner,
        status=record.status,
    )


def _match_record(tournament_id: str, round_id: int, match: Match) -> MatchRecord:
    return MatchRecord(
        round_id=round_id,
        tournament_id=tournament_id,
        match_key=match.id,
        player1_name=match.player1,
        player2_name=match.player2,
        winner=match.winner,
        status=match.status,
    )


class SqlTournamentStore:
    """Tournament storage on any database SQLAlchemy supports.

    Also usable as a repository keyed by tournament id (``get``/``put``/
    ``delete``). When a :class:`ChangeNotifier` is given, subscribers are told
    after every committed change to a tournament's matches.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        echo: bool = False,
        notifier: Optional[ChangeNotifier] = None,
    ) -> None:
        self.engine = create_engine(url, echo=echo)
        self._session_factory = create_session_factory(self.engine)
        self.notifier = notifier
        try:
            create_all(self.engine)
        except SQLAlchemyError as e:
            raise StorageException(f"Could not create tournament tables: {e}") from e

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        try:
            with self._session_factory() as session, session.begin():
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Database error: {e}")
            raise StorageException(str(e)) from e

    def _notify(self, tournament_id: str) -> None:
        if self.notifier is None:
            return
        tournament = self.fetch(tournament_id)
        if tournament is not None:
            self.notifier.notify(tournament_id, tournament)

    @staticmethod
    def _require_tournament(session: Session, tournament_id: str) -> TournamentRecord:
        record = session.get(TournamentRecord, tournament_id)
        if record is None:
            raise TournamentNotFoundException(tournament_id)
        return record

    @staticmethod
    def _insert_round(session: Session, tournament_id: str, round_data: RoundData) -> None:
        round_record = RoundRecord(
            tournament_id=tournament_id, round_number=round_data.round_number
        )
        session.add(round_record)
        session.flush()
        # Flush per match so autoincrement ids follow match order
        for match in round_data.matches:
            session.add(_match_record(tournament_id, round_record.id, match))
            session.flush()

    @staticmethod
    def _write_byes(session: Session, tournament_id: str, bye_history: ByeHistory) -> None:
        for name, count in bye_history.items():
            session.execute(
                update(PlayerRecord)
                .where(
                    PlayerRecord.tournament_id == tournament_id,
                    PlayerRecord.name == name,
                )
                .values(bye_count=count)
            )

    @classmethod
    def _insert_tournament(
        cls, session: Session, tournament_id: str, tournament: Tournament
    ) -> None:
        session.add(
            TournamentRecord(
                id=tournament_id,
                game_name=tournament.game_name,
                is_complete=tournament.is_complete,
                winner=tournament.winner,
            )
        )
        for position, name in enumerate(tournament.players):
            session.add(
                PlayerRecord(
                    tournament_id=tournament_id,
                    name=name,
                    position=position,
                    bye_count=tournament.byes_for(name),
                )
            )
        session.flush()
        for round_data in tournament.rounds:
            cls._insert_round(session, tournament_id, round_data)

    @classmethod
    def _sync(
        cls, session: Session, record: TournamentRecord, tournament: Tournament
    ) -> None:
        """Make the rows of ``record`` match ``tournament`` exactly."""
        tournament_id = record.id
        record.game_name = tournament.game_name
        record.is_complete = tournament.is_complete
        record.winner = tournament.winner
        record.updated_at = func.now()

        cls._write_byes(session, tournament_id, tournament.bye_history)

        wanted_rounds = {r.round_number for r in tournament.rounds}
        wanted_matches = {m.id for _, m in tournament.iter_matches()}

        stored_rounds: Dict[int, RoundRecord] = {}
        for round_record in list(
            session.scalars(
                select(RoundRecord).where(RoundRecord.tournament_id == tournament_id)
            )
        ):
            if round_record.round_number in wanted_rounds:
                stored_rounds[round_record.round_number] = round_record
            else:
                session.execute(
                    delete(MatchRecord).where(MatchRecord.round_id == round_record.id)
                )
                session.delete(round_record)

        stored_matches: Dict[str, MatchRecord] = {}
        for row in list(
            session.scalars(
                select(MatchRecord).where(MatchRecord.tournament_id == tournament_id)
            )
        ):
            if row.match_key in wanted_matches:
                stored_matches[row.match_key] = row
            else:
                session.delete(row)
        session.flush()

        for round_data in tournament.rounds:
            round_record = stored_rounds.get(round_data.round_number)
            if round_record is None:
                cls._insert_round(session, tournament_id, round_data)
                continue
            for match in round_data.matches:
                row = stored_matches.get(match.id)
                if row is None:
                    session.add(_match_record(tournament_id, round_record.id, match))
                    session.flush()
                elif (row.status, row.winner) != (match.status, match.winner):
                    row.status = match.status
                    row.winner = match.winner
                    row.updated_at = func.now()

    # ========== Writes ==========

    def create(self, tournament: Tournament, tournament_id: Optional[str] = None) -> str:
        """Insert a tournament with its roster and existing rounds.

        Returns:
            The tournament id
        """
        tournament_id = tournament_id or str(uuid.uuid4())
        with self._transaction() as session:
            self._insert_tournament(session, tournament_id, tournament)
        logger.info(f"Stored tournament '{tournament.game_name}' as {tournament_id}")
        return tournament_id

    def append_round(
        self, tournament_id: str, round_data: RoundData, bye_history: ByeHistory
    ) -> None:
        """Store a newly generated round and the bye counts that came with it."""
        with self._transaction() as session:
            self._require_tournament(session, tournament_id)
            self._insert_round(session, tournament_id, round_data)
            self._write_byes(session, tournament_id, bye_history)
        logger.info(f"Stored round {round_data.round_number} for {tournament_id}")
        self._notify(tournament_id)

    def save_byes(self, tournament_id: str, bye_history: ByeHistory) -> None:
        with self._transaction() as session:
            self._require_tournament(session, tournament_id)
            self._write_byes(session, tournament_id, bye_history)

    def update_match(
        self,
        tournament_id: str,
        match_id: str,
        status: str,
        winner: Optional[str],
    ) -> None:
        """Row update of a match's status and winner, stamping ``updated_at``.

        Raises:
            InvalidTransitionException: If ``status`` is not a match status
            MatchNotFoundException: If the tournament has no such match
        """
        if status not in MATCH_STATUSES:
            raise InvalidTransitionException(f"Unknown match status: {status!r}")

        with self._transaction() as session:
            result = session.execute(
                update(MatchRecord)
                .where(
                    MatchRecord.tournament_id == tournament_id,
                    MatchRecord.match_key == match_id,
                )
                .values(status=status, winner=winner, updated_at=func.now())
            )
            if result.rowcount == 0:
                raise MatchNotFoundException(match_id)

        logger.debug(f"Match {match_id} of {tournament_id} set to {status}")
        self._notify(tournament_id)

    def complete(self, tournament_id: str, winner: str) -> None:
        """Mark a tournament as won."""
        with self._transaction() as session:
            record = self._require_tournament(session, tournament_id)
            record.is_complete = True
            record.winner = winner
            record.updated_at = func.now()
        logger.info(f"Tournament {tournament_id} complete, winner: {winner}")

    def save(self, tournament_id: str, tournament: Tournament) -> None:
        """Bring the stored rows in line with a snapshot.

        Changed matches get a fresh ``updated_at``. Rounds and matches the
        snapshot no longer holds are deleted, so saving an older snapshot
        rolls the database back with it.
        """
        with self._transaction() as session:
            record = self._require_tournament(session, tournament_id)
            self._sync(session, record, tournament)
        self._notify(tournament_id)

    def delete(self, tournament_id: str) -> bool:
        """Remove a tournament and everything linked to it."""
        with self._transaction() as session:
            if session.get(TournamentRecord, tournament_id) is None:
                return False
            for model in (MatchRecord, RoundRecord, PlayerRecord):
                session.execute(delete(model).where(model.tournament_id == tournament_id))
            session.execute(
                delete(TournamentRecord).where(TournamentRecord.id == tournament_id)
            )
        logger.info(f"Deleted tournament {tournament_id}")
        return True

    # ========== Reads ==========

    def fetch(self, tournament_id: str) -> Optional[Tournament]:
        """Rebuild a tournament snapshot, or None if the id is unknown."""
        with self._transaction() as session:
            record = session.get(TournamentRecord, tournament_id)
            if record is None:
                return None

            players = list(
                session.scalars(
                    select(PlayerRecord)
                    .where(PlayerRecord.tournament_id == tournament_id)
                    .order_by(PlayerRecord.position)
                )
            )
            round_records = list(
                session.scalars(
                    select(RoundRecord)
                    .where(RoundRecord.tournament_id == tournament_id)
                    .order_by(RoundRecord.round_number)
                )
            )
            matches_by_round: Dict[int, List[Match]] = {r.id: [] for r in round_records}
            for row in session.scalars(
                select(MatchRecord)
                .where(MatchRecord.tournament_id == tournament_id)
                .order_by(MatchRecord.id)
            ):
                matches_by_round.setdefault(row.round_id, []).append(_match_from_record(row))

            rounds = tuple(
                RoundData(round_number=r.round_number, matches=tuple(matches_by_round[r.id]))
                for r in round_records
            )
            return Tournament(
                game_name=record.game_name,
                players=tuple(p.name for p in players),
                rounds=rounds,
                current_round=len(rounds),
                bye_history={p.name: p.bye_count for p in players},
                is_complete=bool(record.is_complete),
                winner=record.winner,
            )

    def list_tournaments(self) -> List[str]:
        """Ids of all stored tournaments, newest first."""
        with self._transaction() as session:
            return list(
                session.scalars(
                    select(TournamentRecord.id).order_by(
                        TournamentRecord.created_at.desc(), TournamentRecord.id
                    )
                )
            )

    def _matches(self, tournament_id: str, *criteria, order_by) -> List[Match]:
        with self._transaction() as session:
            rows = session.scalars(
                select(MatchRecord)
                .where(MatchRecord.tournament_id == tournament_id, *criteria)
                .order_by(*order_by)
            )
            return [_match_from_record(row) for row in rows]

    def running_matches(self, tournament_id: str) -> List[Match]:
        """In-progress matches, oldest first."""
        return self._matches(
            tournament_id,
            MatchRecord.status == STATUS_IN_PROGRESS,
            order_by=(MatchRecord.created_at, MatchRecord.id),
        )

    def completed_matches(self, tournament_id: str) -> List[Match]:
        """Finished matches (byes excluded), most recently updated first."""
        return self._matches(
            tournament_id,
            MatchRecord.status == STATUS_FINISHED,
            MatchRecord.player2_name.is_not(None),
            order_by=(MatchRecord.updated_at.desc(), MatchRecord.id.desc()),
        )

    def matches_changed_since(
        self, tournament_id: str, since: Union[datetime, str]
    ) -> List[Match]:
        """Matches updated at or after ``since``, for polling views.

        Args:
            tournament_id: Tournament to look at
            since: Timestamp or ISO-8601 string; naive values are taken as UTC

        Returns:
            Changed matches, oldest change first. A change stamped in the same
            second as ``since`` may be returned again on the next poll.
        """
        cutoff = _to_utc_naive(since)
        return self._matches(
            tournament_id,
            MatchRecord.updated_at >= cutoff,
            order_by=(MatchRecord.updated_at, MatchRecord.id),
        )

    # ========== Repository interface ==========

    def get(self, key: str) -> Optional[Tournament]:
        return self.fetch(key)

    def put(self, key: str, tournament: Tournament) -> None:
        """Create or replace the tournament stored under ``key``."""
        try:
            with self._transaction() as session:
                record = session.get(TournamentRecord, key)
                if record is None:
                    self._insert_tournament(session, key, tournament)
                else:
                    self._sync(session, record, tournament)
        except StorageException as e:
            if not isinstance(e.__cause__, IntegrityError):
                raise
            # Another writer created the key first
            logger.warning(f"Tournament {key} was created concurrently, saving over it")
            self.save(key, tournament)
            return
        self._notify(key)
