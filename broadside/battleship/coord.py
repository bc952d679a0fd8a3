from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

BOARD_SIZE = 10
COORDS = [chr(ord('A') + i) for i in range(BOARD_SIZE)]


@dataclass(frozen=True)
class Coordinate:
    """One cell of the square grid. ``col`` is the letter, ``row`` the number."""

    col: int
    row: int

    def __str__(self) -> str:
        return format_coord(self)

    def neighbors4(self) -> List["Coordinate"]:
        out: List[Coordinate] = []
        for dc, dr in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            c, r = self.col + dc, self.row + dr
            if 0 <= c < BOARD_SIZE and 0 <= r < BOARD_SIZE:
                out.append(Coordinate(c, r))
        return out

    def neighbors8(self) -> List["Coordinate"]:
        out: List[Coordinate] = []
        for dc in (-1, 0, 1):
            for dr in (-1, 0, 1):
                if dc == 0 and dr == 0:
                    continue
                c, r = self.col + dc, self.row + dr
                if 0 <= c < BOARD_SIZE and 0 <= r < BOARD_SIZE:
                    out.append(Coordinate(c, r))
        return out


def parse_coord(text: str) -> Optional[Coordinate]:
    # returns None instead of raising, callers decide what a bad token means
    if text is None:
        return None
    t = text.strip()
    if len(t) < 2:
        return None
    letter = t[0].upper()
    if letter not in COORDS:
        return None
    digits = t[1:]
    if not (digits.isascii() and digits.isdigit()):
        return None
    col = COORDS.index(letter)
    row = int(digits) - 1
    if not 0 <= row < BOARD_SIZE:
        return None
    return Coordinate(col, row)


def format_coord(coord: Coordinate) -> str:
    return f"{COORDS[coord.col]}{coord.row + 1}"


def all_coords() -> Iterator[Coordinate]:
    for col in range(BOARD_SIZE):
        for row in range(BOARD_SIZE):
            yield Coordinate(col, row)
