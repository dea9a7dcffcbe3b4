"""TournamentSession - drives the engine on behalf of a front end.

The engine functions are pure. A front end still needs somewhere to keep the
latest snapshot, persist it after every change and tell other views about
it. This class coordinates those collaborators around the engine:
- a store with ``save``/``load``/``clear`` (injected, never global)
- an optional :class:`ChangeNotifier`
- a random provider built from :class:`EngineConfig`
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

from typing import Any, Iterable, List, Mapping, Optional, Protocol

from knockoutpairing.constants import DEFAULT_STORAGE_KEY
from knockoutpairing.controllers.tournament import (
    advance_round,
    apply_command,
    create_tournament,
    update_match,
)
from knockoutpairing.exceptions import TournamentStateException
from knockoutpairing.models.tournament import EngineConfig, MatchCommand, Tournament
from knockoutpairing.storage.factory import open_store
from knockoutpairing.storage.notifications import ChangeNotifier
from knockoutpairing.utils import setup_logger
from knockoutpairing.utils.random_source import RandomProvider
from knockoutpairing.utils.validation import (
    validate_game_name_strict,
    validate_roster_strict,
)

logger = setup_logger(__name__)


class SnapshotStore(Protocol):
    def save(self, tournament: Tournament) -> None: ...

    def load(self) -> Optional[Tournament]: ...

    def clear(self) -> None: ...


class TournamentSession:
    """Holds the current tournament and persists every accepted change.

    Failed operations leave both the session and the store untouched.
    """

    def __init__(
        self,
        store: Optional[SnapshotStore] = None,
        config: Optional[EngineConfig] = None,
        notifier: Optional[ChangeNotifier] = None,
        rng: Optional[RandomProvider] = None,
        tournament_id: str = DEFAULT_STORAGE_KEY,
    ) -> None:
        self.config = config or EngineConfig()
        self.store = store
        self.notifier = notifier
        self.rng = rng if rng is not None else self.config.make_random()
        self.tournament_id = tournament_id
        self._tournament: Optional[Tournament] = None
        self._history: List[Tournament] = []

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        notifier: Optional[ChangeNotifier] = None,
        tournament_id: str = DEFAULT_STORAGE_KEY,
    ) -> "TournamentSession":
        """Session persisting to the store ``config`` selects (see :func:`open_store`)."""
        return cls(
            store=open_store(config, tournament_id),
            config=config,
            notifier=notifier,
            tournament_id=tournament_id,
        )

    # ========== Properties ==========

    @property
    def tournament(self) -> Optional[Tournament]:
        """Latest snapshot, or None before setup."""
        return self._tournament

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    def _require(self) -> Tournament:
        if self._tournament is None:
            raise TournamentStateException("No tournament has been started")
        return self._tournament

    def _commit(self, tournament: Tournament, remember: bool = True) -> Tournament:
        # Session state moves only once the store accepted the snapshot
        if self.store is not None:
            self.store.save(tournament)
        if remember and self._tournament is not None:
            self._history.append(self._tournament)
        self._tournament = tournament
        if self.notifier is not None:
            self.notifier.notify(self.tournament_id, tournament)
        return tournament

    # ========== Lifecycle ==========

    def start(self, game_name: str, players: Iterable[str]) -> Tournament:
        """Validate the setup form and create round 1.

        Raises:
            GameNameValidationException: If the game name is empty
            PlayerNameValidationException: If names are empty, repeated or
                fewer than two
        """
        name = validate_game_name_strict(game_name)
        roster = validate_roster_strict(players)
        tournament = create_tournament(name, roster, self.rng)
        self._commit(tournament, remember=False)
        self._history.clear()
        return tournament

    def load(self) -> Optional[Tournament]:
        """Replace the session state with whatever the store holds."""
        if self.store is None:
            return self._tournament
        self._tournament = self.store.load()
        self._history.clear()
        return self._tournament

    def reset(self) -> None:
        """Discard the tournament and clear the store."""
        if self.store is not None:
            self.store.clear()
        self._tournament = None
        self._history.clear()
        logger.info("Tournament reset")

    def undo(self) -> Tournament:
        """Go back to the snapshot before the last change."""
        if not self._history:
            raise TournamentStateException("Nothing to undo")
        previous = self._commit(self._history[-1], remember=False)
        self._history.pop()
        return previous

    # ========== Engine operations ==========

    def apply(self, command: MatchCommand) -> Tournament:
        return self._commit(apply_command(self._require(), command, self.config))

    def update_match(self, match_id: str, updates: Mapping[str, Any]) -> Tournament:
        tournament = self._require()
        updated = update_match(
            tournament, match_id, updates, strict=self.config.strict_match_lookup
        )
        if updated is tournament:
            return tournament
        return self._commit(updated)

    def advance(self) -> Tournament:
        return self._commit(advance_round(self._require(), self.rng))
