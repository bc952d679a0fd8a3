from __future__ import annotations

import random
from collections import deque
from typing import Deque, Optional

from .coord import Coordinate, all_coords

ORIGIN = Coordinate(0, 0)


class ShotSequencer:
    """Hands out every cell of the grid once, in a random order fixed at creation.

    Once every cell has been used, ``next`` keeps returning the origin.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random(seed)
        shots = list(all_coords())
        self.rng.shuffle(shots)
        self._pending: Deque[Coordinate] = deque(shots)

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def exhausted(self) -> bool:
        return not self._pending

    def next(self) -> Coordinate:
        if not self._pending:
            return ORIGIN
        return self._pending.popleft()
