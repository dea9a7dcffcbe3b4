"""Change notification for views following a tournament."""

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

import threading
from collections import defaultdict
from typing import Callable, Dict, List

from knockoutpairing.models.tournament import Tournament
from knockoutpairing.utils import setup_logger

logger = setup_logger(__name__)

ChangeCallback = Callable[[str, Tournament], None]


class ChangeNotifier:
    """Tells subscribers that the matches of a tournament changed.

    Callbacks run synchronously in subscription order. A failing callback is
    logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[ChangeCallback]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, tournament_id: str, callback: ChangeCallback) -> Callable[[], None]:
        """Register ``callback`` for ``tournament_id``.

        Returns:
            Function that removes the subscription
        """
        with self._lock:
            self._subscribers[tournament_id].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(tournament_id, [])
                if callback in callbacks:
                    callbacks.remove(callback)
                if not callbacks:
                    self._subscribers.pop(tournament_id, None)

        return unsubscribe

    def subscriber_count(self, tournament_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(tournament_id, []))

    def notify(self, tournament_id: str, tournament: Tournament) -> int:
        """Deliver ``tournament`` to every subscriber of ``tournament_id``.

        Returns:
            Number of callbacks that completed without raising
        """
        with self._lock:
            callbacks = list(self._subscribers.get(tournament_id, []))

        delivered = 0
        for callback in callbacks:
            try:
                callback(tournament_id, tournament)
                delivered += 1
            except Exception:
                logger.exception(f"Change subscriber failed for tournament {tournament_id}")
        return delivered
