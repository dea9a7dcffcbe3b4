"""Injectable source of randomness for bracket generation.

Shuffling the roster and picking a bye recipient are the only random steps
in the engine. Both go through a :class:`RandomProvider` so tests can pass a
seeded generator and get reproducible brackets.
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

import random
from typing import Any, List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomProvider(Protocol):
    """Minimal interface the engine needs; ``random.Random`` satisfies it."""

    def shuffle(self, x: List[Any]) -> None: ...

    def choice(self, seq: Sequence[T]) -> T: ...


_default_random = random.Random()


def make_random(seed: Optional[int] = None) -> random.Random:
    """Create a random provider, seeded when ``seed`` is given."""
    return random.Random(seed) if seed is not None else random.Random()


def resolve_random(rng: Optional[RandomProvider]) -> RandomProvider:
    return rng if rng is not None else _default_random
