import logging
import random

import pytest

from knockoutpairing.exceptions import (
    FileSaveException,
    MatchNotFoundException,
    PlayerNameValidationException,
    RoundNotCompleteException,
    TournamentStateException,
)
from knockoutpairing.models.tournament import (
    EngineConfig,
    FinishMatch,
    SelectWinner,
    StartMatch,
)
from knockoutpairing.storage import (
    ChangeNotifier,
    InMemoryRepository,
    JsonTournamentStore,
    TournamentStore,
    open_store,
)
from knockoutpairing.storage.sql import SqlTournamentStore
from knockoutpairing.tournament import TournamentSession


@pytest.fixture
def store(tmp_path):
    return JsonTournamentStore(tmp_path / "tournament.json")


def _play_match(session, match):
    session.apply(StartMatch(match.id))
    session.apply(SelectWinner(match.id, match.player1))
    return session.apply(FinishMatch(match.id))


def test_start_validates_and_persists(store):
    session = TournamentSession(store=store, config=EngineConfig(seed=1))
    tournament = session.start("  Chess ", ["Ann", " Bob ", "Cy"])

    assert tournament.game_name == "Chess"
    assert tournament.players == ("Ann", "Bob", "Cy")
    assert store.load() == tournament


def test_start_rejects_bad_roster(store):
    session = TournamentSession(store=store)
    with pytest.raises(PlayerNameValidationException):
        session.start("Chess", ["Ann", "Ann"])
    assert session.tournament is None
    assert store.load() is None


def test_operations_need_a_tournament():
    session = TournamentSession()
    with pytest.raises(TournamentStateException):
        session.advance()


def test_every_change_is_saved_and_announced(store):
    notifier = ChangeNotifier()
    seen = []
    notifier.subscribe("cup", lambda tid, t: seen.append(t))
    session = TournamentSession(
        store=store, notifier=notifier, rng=random.Random(5), tournament_id="cup"
    )

    session.start("Chess", ["Ann", "Bob", "Cy", "Dee"])
    for match in session.tournament.current_round_data.matches:
        _play_match(session, match)
    session.advance()

    assert store.load() == session.tournament
    assert seen[-1] == session.tournament
    assert len(seen) == 1 + 2 * 3 + 1


def test_failed_advance_changes_nothing(store):
    session = TournamentSession(store=store, rng=random.Random(5))
    before = session.start("Chess", ["Ann", "Bob", "Cy", "Dee"])

    with pytest.raises(RoundNotCompleteException):
        session.advance()
    assert session.tournament is before
    assert store.load() == before


def test_session_plays_to_a_winner(store):
    session = TournamentSession(store=store, config=EngineConfig(seed=9))
    session.start("Chess", ["Ann", "Bob", "Cy", "Dee", "Eve"])

    while not session.tournament.is_complete:
        for match in session.tournament.current_round_data.matches:
            if not match.is_bye:
                _play_match(session, match)
        session.advance()

    assert session.tournament.winner in session.tournament.players
    assert store.load().winner == session.tournament.winner


def test_undo_restores_previous_snapshot(store):
    session = TournamentSession(store=store, rng=random.Random(2))
    start = session.start("Chess", ["Ann", "Bob"])
    assert not session.can_undo

    session.apply(StartMatch("r1-m1"))
    restored = session.undo()

    assert restored == start
    assert store.load() == start
    with pytest.raises(TournamentStateException):
        session.undo()


def test_generic_updates_follow_strict_config(store):
    session = TournamentSession(store=store, rng=random.Random(2))
    session.start("Chess", ["Ann", "Bob"])
    assert session.update_match("r7-m1", {"status": "finished"}) is session.tournament

    strict = TournamentSession(
        store=store, config=EngineConfig(strict_match_lookup=True), rng=random.Random(2)
    )
    strict.start("Chess", ["Ann", "Bob"])
    with pytest.raises(MatchNotFoundException):
        strict.update_match("r7-m1", {"status": "finished"})


def test_load_and_reset(store):
    first = TournamentSession(store=store, rng=random.Random(4))
    tournament = first.start("Chess", ["Ann", "Bob", "Cy"])

    second = TournamentSession(store=store)
    assert second.load() == tournament

    second.reset()
    assert second.tournament is None
    assert store.load() is None


class FlakyStore:
    """In-memory store that can be told to fail its next save."""

    def __init__(self):
        self.inner = TournamentStore(InMemoryRepository())
        self.fail_next_save = False

    def save(self, tournament):
        if self.fail_next_save:
            self.fail_next_save = False
            raise FileSaveException("disk full")
        self.inner.save(tournament)

    def load(self):
        return self.inner.load()

    def clear(self):
        self.inner.clear()


def test_failed_save_leaves_session_unchanged():
    store = FlakyStore()
    session = TournamentSession(store=store, rng=random.Random(3))
    before = session.start("Chess", ["Ann", "Bob", "Cy", "Dee"])

    store.fail_next_save = True
    with pytest.raises(FileSaveException):
        session.apply(StartMatch("r1-m1"))

    assert session.tournament is before
    assert not session.can_undo
    assert store.load() == before


def test_failed_save_during_undo_keeps_history():
    store = FlakyStore()
    session = TournamentSession(store=store, rng=random.Random(3))
    start = session.start("Chess", ["Ann", "Bob"])
    started = session.apply(StartMatch("r1-m1"))

    store.fail_next_save = True
    with pytest.raises(FileSaveException):
        session.undo()

    assert session.tournament is started
    assert session.can_undo
    assert store.load() == started
    assert session.undo() == start


def test_undo_of_advance_reaches_relational_store(rng):
    store = TournamentStore(SqlTournamentStore("sqlite://"), "cup")
    session = TournamentSession(store=store, rng=rng)
    session.start("Chess", ["Ann", "Bob", "Cy", "Dee"])
    for match in session.tournament.current_round_data.matches:
        _play_match(session, match)
    session.advance()

    restored = session.undo()

    assert store.load() == restored
    assert store.load().current_round == 1


def test_from_config_uses_json_file(tmp_path):
    path = tmp_path / "cup.json"
    session = TournamentSession.from_config(EngineConfig(seed=4, storage_path=str(path)))
    tournament = session.start("Chess", ["Ann", "Bob", "Cy"])

    assert isinstance(session.store, JsonTournamentStore)
    assert JsonTournamentStore(path).load() == tournament


def test_from_config_uses_database_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'cup.db'}"
    config = EngineConfig(seed=4, database_url=url)
    session = TournamentSession.from_config(config, tournament_id="cup")
    tournament = session.start("Chess", ["Ann", "Bob", "Cy"])

    assert SqlTournamentStore(url).fetch("cup") == tournament
    assert open_store(config, "cup").load() == tournament


def test_session_leaves_log_level_alone():
    root = logging.getLogger("knockoutpairing")
    previous = root.level
    TournamentSession(config=EngineConfig(log_level="ERROR"))
    assert root.level == previous
