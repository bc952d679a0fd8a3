from __future__ import annotations

import sys
from typing import Callable, List

from .battleship.coord import BOARD_SIZE, COORDS
from .battleship.game import SHIP_MARK, Board, CellState
from .session import GameResult

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
CYAN = "\033[36m"

# cell glyphs, plain text compatible with the layout file format
OWN_GLYPHS = {
    CellState.MISS: ("~", YELLOW),
    CellState.HIT_SHIP: ("@", RED),
    CellState.SHIP: (SHIP_MARK, BLUE),
}
ENEMY_GLYPHS = {
    CellState.HIT_SHIP: ("#", RED),
    CellState.MISS: (".", YELLOW),
    CellState.WATER: (".", CYAN),
}

Glyph = Callable[[CellState], str]


def paint(text: str, color: str, enabled: bool) -> str:
    return color + text + RESET if enabled else text


def layout_glyph(color: bool) -> Glyph:
    def glyph(state: CellState) -> str:
        if state in (CellState.SHIP, CellState.HIT_SHIP):
            return paint(SHIP_MARK, BLUE, color)
        return paint(".", DIM, color)
    return glyph


def own_glyph(color: bool) -> Glyph:
    def glyph(state: CellState) -> str:
        ch, col = OWN_GLYPHS.get(state, (".", DIM))
        return paint(ch, col, color)
    return glyph


def enemy_glyph(color: bool, reveal: bool) -> Glyph:
    def glyph(state: CellState) -> str:
        if state in ENEMY_GLYPHS:
            ch, col = ENEMY_GLYPHS[state]
            return paint(ch, col, color)
        # unknown cells are only hidden when the game did not end in a win
        return paint("." if reveal else "?", DIM, color)
    return glyph


def draw_board(board: Board, glyph: Glyph) -> List[str]:
    lines: List[str] = ["    " + " ".join(COORDS)]
    for r in range(BOARD_SIZE):
        cells = " ".join(glyph(board.view[r][c]) for c in range(BOARD_SIZE))
        lines.append(f"{r + 1:>2}  {cells}")
    return lines


def draw_dual(left: List[str], right: List[str], left_title: str, right_title: str, gap: int = 6) -> str:
    # widths are measured on the label row, which never carries colour codes
    width = len(left[0])
    out = [left_title.ljust(width + gap) + right_title]
    for i in range(max(len(left), len(right))):
        lhs = left[i] if i < len(left) else " " * width
        rhs = right[i] if i < len(right) else ""
        out.append(lhs + " " * gap + rhs)
    return "\n".join(out)


def announce(text: str, color: bool = True) -> None:
    print(paint(text, BOLD, color))
    sys.stdout.flush()


def show_layout(board: Board, color: bool = True) -> None:
    announce("Your fleet:", color)
    print("\n".join(draw_board(board, layout_glyph(color))))


def status_line(result: GameResult) -> str:
    if result.won:
        return "You win"
    if result.lost:
        return "You lose"
    return "Communication error"


def final_report(result: GameResult, own: Board, enemy: Board, color: bool = True) -> str:
    if result.won:
        title = paint(status_line(result), GREEN, color)
    else:
        title = paint(status_line(result), RED, color)
    if result.aborted and result.reason:
        title += f" ({result.reason})"
    boards = draw_dual(
        draw_board(enemy, enemy_glyph(color, reveal=result.won)),
        draw_board(own, own_glyph(color)),
        "Their board",
        "Your board",
    )
    return title + "\n\n" + boards


def show_result(result: GameResult, own: Board, enemy: Board, color: bool = True) -> None:
    print(final_report(result, own, enemy, color))
    sys.stdout.flush()
