"""Bracket construction for a single round.

This module turns a list of players into the matches of one round: the
roster is shuffled, one player sits out with a bye when the count is odd,
and the rest are paired in shuffled order.
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

from typing import List, Optional, Sequence, Tuple

from knockoutpairing.models.tournament import Match
from knockoutpairing.type_hints import ByeHistory, Pairing
from knockoutpairing.utils import setup_logger
from knockoutpairing.utils.random_source import RandomProvider, resolve_random

logger = setup_logger(__name__)


def select_bye_player(
    shuffled_players: Sequence[str],
    bye_history: ByeHistory,
    rng: Optional[RandomProvider] = None,
) -> Optional[str]:
    """Determine which player sits out this round.

    Priority:
    1. A player who has never had a bye, chosen uniformly at random
    2. If all have had one, the player with the fewest byes; ties go to
       whoever comes first in ``shuffled_players``

    Args:
        shuffled_players: Candidates in shuffled order
        bye_history: Byes received so far; missing players count as zero
        rng: Random provider used for the uniform pick

    Returns:
        The bye recipient, or None when there are no candidates
    """
    if not shuffled_players:
        return None

    rng = resolve_random(rng)
    no_bye_players = [p for p in shuffled_players if not bye_history.get(p, 0)]

    if no_bye_players:
        selected = rng.choice(no_bye_players)
        logger.debug(f"Assigning first bye to: {selected}")
        return selected

    # min() keeps the first of equal keys, i.e. shuffle order breaks ties
    selected = min(shuffled_players, key=lambda p: bye_history.get(p, 0))
    logger.warning(
        f"All bye candidates have already received a bye. "
        f"Assigning bye #{bye_history.get(selected, 0) + 1} to: {selected}"
    )
    return selected


def pair_sequentially(players: Sequence[str]) -> List[Pairing]:
    """Pair players two at a time: (0, 1), (2, 3), ...

    Raises:
        ValueError: If ``players`` has an odd length
    """
    if len(players) % 2:
        raise ValueError(f"Cannot pair an odd number of players: {len(players)}")
    return [(players[i], players[i + 1]) for i in range(0, len(players), 2)]


def generate_matches(
    players: Sequence[str],
    bye_history: ByeHistory,
    round_number: int,
    rng: Optional[RandomProvider] = None,
) -> Tuple[List[Match], ByeHistory]:
    """Generate the matches of one round.

    The inputs are not modified. A lone player gets a bye, which makes them
    the de-facto winner of the round.

    Args:
        players: Players taking part in this round
        bye_history: Byes received so far
        round_number: Number of the round being generated (1-indexed)
        rng: Random provider for the shuffle and bye pick

    Returns:
        Tuple of (matches, updated bye history). Regular matches come first
        in pairing order, the bye match (if any) last.
    """
    if not players:
        logger.warning(f"No players to pair for round {round_number}")
        return [], bye_history

    rng = resolve_random(rng)
    shuffled = list(players)
    rng.shuffle(shuffled)
    updated_history = dict(bye_history)

    bye_player = None
    if len(shuffled) % 2 == 1:
        bye_player = select_bye_player(shuffled, updated_history, rng)
        updated_history[bye_player] = updated_history.get(bye_player, 0) + 1
        shuffled.remove(bye_player)

    matches = [
        Match.regular(round_number, index, player1, player2)
        for index, (player1, player2) in enumerate(pair_sequentially(shuffled), 1)
    ]

    if bye_player is not None:
        matches.append(Match.bye(round_number, bye_player))

    logger.info(
        f"Generated round {round_number}: "
        f"{len(shuffled) // 2} matches, bye: {bye_player or 'None'}"
    )
    return matches, updated_history
