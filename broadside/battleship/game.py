from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Deque, List, Optional, Sequence, Set, Union

from .coord import BOARD_SIZE, Coordinate, all_coords

logger = logging.getLogger(__name__)

SHIP_MARK = "#"

Grid = List[List[bool]]  # indexed [row][col]


class CellState(Enum):
    UNKNOWN = "unknown"
    WATER = "water"
    SHIP = "ship"
    HIT_SHIP = "hit_ship"
    MISS = "miss"


class Outcome(Enum):
    MISS = "miss"
    HIT = "hit"
    HIT_SUNK = "hit_sunk"
    LAST_SUNK = "last_sunk"

    @property
    def sunk(self) -> bool:
        return self in (Outcome.HIT_SUNK, Outcome.LAST_SUNK)


class LayoutLoadError(OSError):
    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"cannot load layout from {source}: {reason}")
        self.source = source
        self.reason = reason


def empty_grid() -> Grid:
    return [[False for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]


def parse_layout(text: str, source: str = "<string>") -> Grid:
    """Turn a text grid into an occupancy grid.

    One row per line, ``#`` is a ship cell and anything else is water.
    Short lines are padded with water; lines past the last row are ignored.
    """
    lines = text.splitlines()
    if len(lines) < BOARD_SIZE:
        raise LayoutLoadError(source, f"expected {BOARD_SIZE} rows, got {len(lines)}")
    grid = empty_grid()
    for row in range(BOARD_SIZE):
        line = lines[row].strip()
        for col, ch in enumerate(line[:BOARD_SIZE]):
            grid[row][col] = ch == SHIP_MARK
    return grid


def load_layout(path: Union[str, Path]) -> Grid:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LayoutLoadError(str(path), str(exc)) from exc
    return parse_layout(text, source=str(path))


def find_segments(occupied: Sequence[Sequence[bool]]) -> List[Set[Coordinate]]:
    # 4-connected components, iterative so large ships can't blow the stack
    seen: Set[Coordinate] = set()
    segments: List[Set[Coordinate]] = []
    for start in all_coords():
        if start in seen or not occupied[start.row][start.col]:
            continue
        segment: Set[Coordinate] = set()
        work = [start]
        seen.add(start)
        while work:
            cur = work.pop()
            segment.add(cur)
            for n in cur.neighbors4():
                if n not in seen and occupied[n.row][n.col]:
                    seen.add(n)
                    work.append(n)
        segments.append(segment)
    return segments


class Board:
    """A grid of ground truth plus what is known about each cell.

    The own board is built from an occupancy grid and starts out showing
    ships and water. The enemy board has no ground truth at all: every cell
    starts ``UNKNOWN`` and is filled in from the outcomes our shots get back.
    """

    def __init__(self, occupied: Optional[Sequence[Sequence[bool]]] = None) -> None:
        self.is_enemy = occupied is None
        if occupied is None:
            self.occupied: Grid = empty_grid()
            self.view: List[List[CellState]] = [
                [CellState.UNKNOWN for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)
            ]
        else:
            if len(occupied) < BOARD_SIZE or any(len(r) < BOARD_SIZE for r in occupied[:BOARD_SIZE]):
                raise ValueError(f"occupancy grid must be {BOARD_SIZE}x{BOARD_SIZE}")
            self.occupied = [[bool(occupied[r][c]) for c in range(BOARD_SIZE)] for r in range(BOARD_SIZE)]
            self.view = [
                [CellState.SHIP if self.occupied[r][c] else CellState.WATER for c in range(BOARD_SIZE)]
                for r in range(BOARD_SIZE)
            ]
        self.segments: List[Set[Coordinate]] = find_segments(self.occupied)

    @classmethod
    def build(cls, occupied: Sequence[Sequence[bool]]) -> "Board":
        return cls(occupied)

    @classmethod
    def enemy(cls) -> "Board":
        return cls(None)

    @classmethod
    def from_layout(cls, path: Union[str, Path]) -> "Board":
        board = cls(load_layout(path))
        logger.debug("loaded %d ships from %s", len(board.segments), path)
        return board

    def cell(self, coord: Coordinate) -> CellState:
        return self.view[coord.row][coord.col]

    def set_cell(self, coord: Coordinate, state: CellState) -> None:
        self.view[coord.row][coord.col] = state

    def segment_of(self, coord: Coordinate) -> Optional[Set[Coordinate]]:
        for segment in self.segments:
            if coord in segment:
                return segment
        return None

    def _segment_sunk(self, segment: Set[Coordinate]) -> bool:
        return all(self.cell(p) == CellState.HIT_SHIP for p in segment)

    def all_sunk(self) -> bool:
        return all(self._segment_sunk(s) for s in self.segments)

    def score_shot(self, coord: Coordinate) -> Outcome:
        """Resolve the opponent's shot at ``coord`` against our own ships."""
        if not self.occupied[coord.row][coord.col]:
            self.set_cell(coord, CellState.MISS)
            return Outcome.MISS

        self.set_cell(coord, CellState.HIT_SHIP)
        segment = self.segment_of(coord)
        if segment is None or not self._segment_sunk(segment):
            return Outcome.HIT
        if self.all_sunk():
            return Outcome.LAST_SUNK
        return Outcome.HIT_SUNK

    def absorb_opponent_result(self, coord: Coordinate, outcome: Outcome) -> None:
        """Record what the opponent said about our shot at ``coord``."""
        if outcome is Outcome.MISS:
            self.set_cell(coord, CellState.MISS)
            return
        self.set_cell(coord, CellState.HIT_SHIP)
        if outcome.sunk:
            ship = self.infer_sunk_ship(coord)
            self.mark_surroundings(ship)

    def infer_sunk_ship(self, start: Coordinate) -> Set[Coordinate]:
        # only row/column steps are followed, so diagonal hits never join a ship
        ship: Set[Coordinate] = set()
        visited: Set[Coordinate] = {start}
        queue: Deque[Coordinate] = deque([start])
        while queue:
            cur = queue.popleft()
            ship.add(cur)
            for n in cur.neighbors4():
                if n not in visited and self.cell(n) == CellState.HIT_SHIP:
                    visited.add(n)
                    queue.append(n)
        return ship

    def mark_surroundings(self, ship: Set[Coordinate]) -> int:
        marked = 0
        for part in ship:
            for n in part.neighbors8():
                if self.cell(n) == CellState.UNKNOWN:
                    self.set_cell(n, CellState.WATER)
                    marked += 1
        logger.debug("sunk ship of %d cells, %d cells marked as water", len(ship), marked)
        return marked
