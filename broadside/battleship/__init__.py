from .coord import BOARD_SIZE, COORDS, Coordinate, format_coord, parse_coord
from .game import Board, CellState, LayoutLoadError, Outcome, load_layout, parse_layout
from .shots import ShotSequencer

__all__ = [
    "BOARD_SIZE",
    "COORDS",
    "Board",
    "CellState",
    "Coordinate",
    "LayoutLoadError",
    "Outcome",
    "ShotSequencer",
    "format_coord",
    "load_layout",
    "parse_coord",
    "parse_layout",
]
