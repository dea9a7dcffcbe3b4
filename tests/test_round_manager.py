import math
import random

import pytest

from knockoutpairing.controllers.tournament import (
    advance_round,
    completed_matches,
    create_tournament,
    get_winners,
    is_round_complete,
    running_matches,
    update_match,
)
from knockoutpairing.exceptions import (
    InvalidRosterException,
    RoundNotCompleteException,
    TournamentCompleteException,
)
from knockoutpairing.models.tournament import Match


def test_create_tournament_sets_up_round_one(rng):
    tournament = create_tournament("Chess", ["A", "B", "C", "D", "E"], rng)

    assert tournament.game_name == "Chess"
    assert tournament.players == ("A", "B", "C", "D", "E")
    assert tournament.current_round == 1
    assert len(tournament.rounds) == 1
    assert tournament.rounds[0].round_number == 1
    assert len(tournament.rounds[0].matches) == 3
    assert not tournament.is_complete
    assert tournament.winner is None
    assert set(tournament.bye_history) == set(tournament.players)
    assert sum(tournament.bye_history.values()) == 1


@pytest.mark.parametrize("players", [[], ["Only"]])
def test_create_tournament_rejects_small_rosters(players, rng):
    with pytest.raises(InvalidRosterException):
        create_tournament("Chess", players, rng)


def test_is_round_complete():
    finished = Match("r1-m1", "A", "B", "A", "finished")
    pending = Match("r1-m2", "C", "D")
    in_progress = Match("r1-m3", "E", "F", None, "in-progress")
    bye = Match.bye(1, "G")

    assert is_round_complete([finished, bye])
    assert is_round_complete([bye])
    assert not is_round_complete([finished, pending])
    assert not is_round_complete([finished, in_progress])


def test_get_winners_keeps_match_order():
    matches = [
        Match("r1-m1", "A", "B", "B", "finished"),
        Match("r1-m2", "C", "D", "C", "in-progress"),
        Match("r1-m3", "E", "F", None, "finished"),
        Match.bye(1, "G"),
    ]
    assert get_winners(matches) == ["B", "G"]


def test_advance_requires_complete_round(rng):
    tournament = create_tournament("Chess", ["A", "B", "C", "D"], rng)
    with pytest.raises(RoundNotCompleteException):
        advance_round(tournament, rng)


def test_four_players_play_two_rounds(rng, play_round):
    tournament = create_tournament("Chess", ["A", "B", "C", "D"], rng)
    assert len(tournament.rounds[0].matches) == 2
    assert tournament.rounds[0].bye_match is None

    tournament = play_round(tournament)
    round_one_winners = get_winners(tournament.rounds[0].matches)
    tournament = advance_round(tournament, rng)

    assert tournament.current_round == 2
    final = tournament.rounds[1].matches
    assert len(final) == 1
    assert {final[0].player1, final[0].player2} == set(round_one_winners)

    tournament = play_round(tournament)
    champion = tournament.rounds[1].matches[0].player1
    tournament = advance_round(tournament, rng)

    assert tournament.is_complete
    assert tournament.winner == champion
    assert len(tournament.rounds) == 2
    assert tournament.current_round == 2


def test_three_players_bye_holder_reaches_final(rng, play_round):
    tournament = create_tournament("Chess", ["A", "B", "C"], rng)
    matches = tournament.rounds[0].matches
    assert len(matches) == 2
    bye = tournament.rounds[0].bye_match
    regular = matches[0]
    assert {bye.player1, regular.player1, regular.player2} == {"A", "B", "C"}

    tournament = play_round(tournament)
    tournament = advance_round(tournament, rng)

    final = tournament.rounds[1].matches
    assert len(final) == 1
    assert {final[0].player1, final[0].player2} == {bye.player1, regular.player1}

    tournament = play_round(tournament)
    tournament = advance_round(tournament, rng)
    assert tournament.is_complete
    assert tournament.winner == final[0].player1


@pytest.mark.parametrize("num_players", [5, 6, 7, 9, 12, 13])
def test_rounds_halve_until_one_winner(num_players, play_round):
    rng = random.Random(num_players)
    players = [f"P{i}" for i in range(num_players)]
    tournament = create_tournament("Chess", players, rng)

    while not tournament.is_complete:
        assert tournament.current_round == len(tournament.rounds)
        tournament = play_round(tournament)
        winners = get_winners(tournament.current_round_data.matches)
        rounds_before = len(tournament.rounds)
        tournament = advance_round(tournament, rng)
        if tournament.is_complete:
            assert winners == [tournament.winner]
            assert len(tournament.rounds) == rounds_before
        else:
            assert len(tournament.rounds) == rounds_before + 1
            new_round = tournament.current_round_data
            assert len(new_round.matches) == math.ceil(len(winners) / 2)

    assert tournament.winner in players
    assert len(tournament.rounds) == math.ceil(math.log2(num_players))


def test_advance_on_complete_tournament_fails(rng, play_round):
    tournament = create_tournament("Chess", ["A", "B"], rng)
    tournament = advance_round(play_round(tournament), rng)
    assert tournament.is_complete

    with pytest.raises(TournamentCompleteException):
        advance_round(tournament, rng)


def test_round_finished_without_winners_does_not_advance(rng):
    tournament = create_tournament("Chess", ["A", "B"], rng)
    tournament = update_match(tournament, "r1-m1", {"status": "finished"})
    with pytest.raises(RoundNotCompleteException):
        advance_round(tournament, rng)


def test_advance_does_not_modify_input(rng, play_round):
    tournament = play_round(create_tournament("Chess", ["A", "B", "C", "D"], rng))
    snapshot = tournament.to_dict()
    advance_round(tournament, rng)
    assert tournament.to_dict() == snapshot


def test_bye_history_accumulates_across_rounds(play_round):
    rng = random.Random(3)
    tournament = create_tournament("Chess", [f"P{i}" for i in range(7)], rng)
    tournament = advance_round(play_round(tournament), rng)

    # 7 players -> bye in round 1; 4 winners -> no bye in round 2
    assert sum(tournament.bye_history.values()) == 1
    tournament = advance_round(play_round(tournament), rng)
    assert tournament.is_complete is False
    assert sum(tournament.bye_history.values()) == 1


def test_running_and_completed_matches(rng, play_round):
    tournament = create_tournament("Chess", ["A", "B", "C", "D", "E"], rng)
    first, second = tournament.rounds[0].matches[:2]
    tournament = update_match(tournament, first.id, {"status": "in-progress"})

    assert [m.id for m in running_matches(tournament)] == [first.id]
    assert completed_matches(tournament) == []

    tournament = update_match(
        tournament, first.id, {"status": "finished", "winner": first.player1}
    )
    assert running_matches(tournament) == []
    assert [m.id for m in completed_matches(tournament)] == [first.id]
    assert second.id not in [m.id for m in completed_matches(tournament)]
