from __future__ import annotations

from typing import List, Union

import pytest

from broadside.battleship.game import Board, parse_layout
from broadside.net.net import ConnectionClosed

FLEET = """\
##........
..........
...###....
..........
#.........
#.....##..
#.........
..........
.....#....
.........#
"""

Step = Union[str, Exception]


class ScriptedChannel:
    """Plays back a fixed list of lines/exceptions and records what was written."""

    def __init__(self, script: List[Step]) -> None:
        self.script = list(script)
        self.sent: List[str] = []
        self.timeouts: List[float] = []

    def read_line(self, timeout: float) -> str:
        self.timeouts.append(timeout)
        if not self.script:
            raise ConnectionClosed("script exhausted")
        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    def write_line(self, text: str) -> None:
        self.sent.append(text)


def board_from(text: str) -> Board:
    return Board.build(parse_layout(text))


@pytest.fixture
def fleet_text() -> str:
    return FLEET


@pytest.fixture
def fleet_board() -> Board:
    return board_from(FLEET)
