import dataclasses

import pytest
from sqlalchemy.exc import IntegrityError

from knockoutpairing.controllers.tournament import (
    advance_round,
    apply_command,
    create_tournament,
)
from knockoutpairing.exceptions import (
    InvalidTransitionException,
    MatchNotFoundException,
    TournamentNotFoundException,
)
from knockoutpairing.models.tournament import StartMatch
from knockoutpairing.storage import ChangeNotifier
from knockoutpairing.storage.sql import SqlTournamentStore, resolve_database_url


@pytest.fixture
def store():
    return SqlTournamentStore("sqlite://")


@pytest.fixture
def tournament(rng):
    return create_tournament("Chess", ["Ann", "Bob", "Cy", "Dee", "Eve"], rng)


def test_resolve_database_url(monkeypatch):
    monkeypatch.delenv("KNOCKOUT_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    assert resolve_database_url() == "sqlite://"

    monkeypatch.setenv("DATABASE_URL", "sqlite:///fallback.db")
    assert resolve_database_url() == "sqlite:///fallback.db"

    monkeypatch.setenv("KNOCKOUT_DATABASE_URL", "sqlite:///preferred.db")
    assert resolve_database_url() == "sqlite:///preferred.db"
    assert resolve_database_url("sqlite:///explicit.db") == "sqlite:///explicit.db"


def test_create_and_fetch_reproduces_snapshot(store, tournament):
    tournament_id = store.create(tournament)
    assert store.fetch(tournament_id) == tournament
    assert store.list_tournaments() == [tournament_id]


def test_fetch_unknown_tournament(store):
    assert store.fetch("missing") is None


def test_full_tournament_through_store(store, tournament, rng, play_round):
    tournament_id = store.create(tournament)

    while not tournament.is_complete:
        tournament = play_round(tournament)
        for match in tournament.current_round_data.matches:
            if not match.is_bye:
                store.update_match(tournament_id, match.id, match.status, match.winner)
        tournament = advance_round(tournament, rng)
        if tournament.is_complete:
            store.complete(tournament_id, tournament.winner)
        else:
            store.append_round(
                tournament_id, tournament.current_round_data, tournament.bye_history
            )

    assert store.fetch(tournament_id) == tournament


def test_save_syncs_changed_matches_and_new_rounds(store, tournament, rng, play_round):
    tournament_id = store.create(tournament)

    tournament = advance_round(play_round(tournament), rng)
    store.save(tournament_id, tournament)

    assert store.fetch(tournament_id) == tournament


def test_running_and_completed_matches(store, tournament):
    tournament_id = store.create(tournament)
    store.update_match(tournament_id, "r1-m1", "in-progress", None)

    assert [m.id for m in store.running_matches(tournament_id)] == ["r1-m1"]
    assert store.completed_matches(tournament_id) == []

    winner = tournament.find_match("r1-m2")[1].player1
    store.update_match(tournament_id, "r1-m2", "finished", winner)

    completed = store.completed_matches(tournament_id)
    assert [m.id for m in completed] == ["r1-m2"]
    assert completed[0].winner == winner


def test_matches_changed_since(store, tournament):
    tournament_id = store.create(tournament)
    store.update_match(tournament_id, "r1-m1", "in-progress", None)

    changed = store.matches_changed_since(tournament_id, "2000-01-01T00:00:00Z")
    assert {m.id for m in changed} == {m.id for m in tournament.rounds[0].matches}
    assert store.matches_changed_since(tournament_id, "2999-01-01T00:00:00+02:00") == []


def test_update_match_errors(store, tournament):
    tournament_id = store.create(tournament)
    with pytest.raises(MatchNotFoundException):
        store.update_match(tournament_id, "r5-m1", "finished", "Ann")
    with pytest.raises(InvalidTransitionException):
        store.update_match(tournament_id, "r1-m1", "paused", None)


def test_append_round_to_unknown_tournament(store, tournament):
    with pytest.raises(TournamentNotFoundException):
        store.append_round("missing", tournament.rounds[0], {})


def test_repository_interface(store, tournament):
    store.put("league-1", tournament)
    assert store.get("league-1") == tournament

    changed = apply_command(tournament, StartMatch("r1-m1"))
    store.put("league-1", changed)
    assert store.get("league-1") == changed

    assert store.delete("league-1")
    assert store.get("league-1") is None
    assert not store.delete("league-1")


def test_notifier_sees_committed_changes(tournament):
    notifier = ChangeNotifier()
    store = SqlTournamentStore("sqlite://", notifier=notifier)
    tournament_id = store.create(tournament)
    seen = []
    notifier.subscribe(tournament_id, lambda tid, t: seen.append(t))

    store.update_match(tournament_id, "r1-m1", "in-progress", None)

    assert len(seen) == 1
    assert seen[0].find_match("r1-m1")[1].status == "in-progress"


def test_save_older_snapshot_drops_later_rounds(store, tournament, rng, play_round):
    tournament_id = store.create(tournament)
    played = play_round(tournament)
    store.save(tournament_id, played)
    store.save(tournament_id, advance_round(played, rng))

    store.save(tournament_id, played)

    restored = store.fetch(tournament_id)
    assert restored == played
    assert restored.current_round == 1
    assert store.running_matches(tournament_id) == []


def test_save_drops_matches_missing_from_snapshot(store, rng):
    longer = create_tournament("Chess", ["Ann", "Bob", "Cy", "Dee"], rng)
    tournament_id = store.create(longer)
    first_round = longer.rounds[0]
    shorter = dataclasses.replace(
        longer, rounds=(first_round.with_matches(first_round.matches[:1]),)
    )

    store.save(tournament_id, shorter)

    assert store.fetch(tournament_id) == shorter


def test_put_older_snapshot_replaces_newer(store, tournament, rng, play_round):
    played = play_round(tournament)
    store.put("league-1", advance_round(played, rng))

    store.put("league-1", played)

    assert store.get("league-1") == played


def test_save_byes(store, tournament):
    tournament_id = store.create(tournament)
    byes = {player: 2 for player in tournament.players}

    store.save_byes(tournament_id, byes)

    assert store.fetch(tournament_id).bye_history == byes
    with pytest.raises(TournamentNotFoundException):
        store.save_byes("missing", byes)


def test_put_saves_over_tournament_created_meanwhile(tmp_path, tournament, monkeypatch):
    url = f"sqlite:///{tmp_path / 'tournaments.db'}"
    store = SqlTournamentStore(url)
    other_writer = SqlTournamentStore(url)
    changed = apply_command(tournament, StartMatch("r1-m1"))

    def lose_race(session, key, snapshot):
        other_writer.create(tournament, tournament_id=key)
        raise IntegrityError("INSERT INTO tournaments", {}, Exception("UNIQUE constraint failed"))

    monkeypatch.setattr(store, "_insert_tournament", lose_race)
    store.put("league-1", changed)

    assert store.get("league-1") == changed
    assert other_writer.get("league-1") == changed
