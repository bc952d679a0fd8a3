import random

import pytest

from broadside.battleship.coord import BOARD_SIZE, all_coords
from broadside.battleship.shots import ORIGIN, ShotSequencer


@pytest.mark.parametrize("seed", [0, 1, 42, 2024])
def test_every_cell_exactly_once(seed: int) -> None:
    seq = ShotSequencer(seed=seed)
    shots = [seq.next() for _ in range(BOARD_SIZE * BOARD_SIZE)]
    assert sorted(shots, key=lambda c: (c.col, c.row)) == list(all_coords())
    assert seq.exhausted


def test_same_seed_same_order() -> None:
    a = ShotSequencer(seed=7)
    b = ShotSequencer(rng=random.Random(7))
    assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]


def test_order_is_shuffled() -> None:
    seq = ShotSequencer(seed=3)
    shots = [seq.next() for _ in range(BOARD_SIZE * BOARD_SIZE)]
    assert shots != list(all_coords())


def test_exhausted_sequencer_repeats_origin() -> None:
    seq = ShotSequencer(seed=5)
    for _ in range(BOARD_SIZE * BOARD_SIZE):
        seq.next()
    assert len(seq) == 0
    assert seq.next() == ORIGIN
    assert seq.next() == ORIGIN
