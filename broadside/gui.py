from __future__ import annotations

from typing import Tuple

import pygame

from .battleship.coord import BOARD_SIZE, COORDS
from .battleship.game import Board, CellState
from .session import GameResult
from .ui import status_line

# --------------------------- Pygame rendering ---------------------------

WINDOW_BG = (15, 18, 25)
GRID_BG = (23, 28, 38)
GRID_LINE = (50, 58, 72)
TEXT = (230, 235, 245)
SUBTEXT = (155, 165, 185)
HIT = (232, 93, 117)
MISS = (240, 190, 90)
WATER = (40, 70, 110)
UNKNOWN = (70, 76, 90)
SHIP = (60, 130, 200)
SHIP_OUTLINE = (40, 95, 160)
VICTORY = (90, 200, 120)
DEFEAT = (220, 60, 80)

CELL_SIZE = 40
PANEL_PADDING = 28
BOARD_GAP = 60
TOP_BAR = 84
BOTTOM_BAR = 60


class ResultWindow:
    """Shows both final boards after a game; closes on Esc or window close."""

    def __init__(self, result: GameResult, own: Board, enemy: Board) -> None:
        pygame.init()
        pygame.display.set_caption("Broadside - " + status_line(result))
        total_width = (CELL_SIZE * BOARD_SIZE) * 2 + BOARD_GAP + PANEL_PADDING * 2
        total_height = TOP_BAR + (CELL_SIZE * BOARD_SIZE) + BOTTOM_BAR
        self.screen = pygame.display.set_mode((total_width, total_height))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Arial", 22)
        self.font_small = pygame.font.SysFont("Arial", 18)
        self.font_big = pygame.font.SysFont("Arial", 36, bold=True)
        self.result = result
        self.own = own
        self.enemy = enemy
        self.running = True

    def get_board_rects(self) -> Tuple[pygame.Rect, pygame.Rect]:
        left_x = PANEL_PADDING
        right_x = PANEL_PADDING + CELL_SIZE * BOARD_SIZE + BOARD_GAP
        y = TOP_BAR
        left_rect = pygame.Rect(left_x, y, CELL_SIZE * BOARD_SIZE, CELL_SIZE * BOARD_SIZE)
        right_rect = pygame.Rect(right_x, y, CELL_SIZE * BOARD_SIZE, CELL_SIZE * BOARD_SIZE)
        return left_rect, right_rect

    def draw(self) -> None:
        self.screen.fill(WINDOW_BG)
        left_rect, right_rect = self.get_board_rects()

        self.draw_title("Their Board", left_rect.x, TOP_BAR - 56)
        self.draw_title("Your Board", right_rect.x, TOP_BAR - 56)
        self.draw_board(left_rect, self.enemy)
        self.draw_board(right_rect, self.own)

        color = VICTORY if self.result.won else DEFEAT
        surf = self.font_big.render(status_line(self.result), True, color)
        self.screen.blit(surf, (self.screen.get_width() // 2 - surf.get_width() // 2, 8))
        if self.result.reason:
            self.draw_status_bar(self.result.reason)
        pygame.display.flip()

    def draw_title(self, text: str, x: int, y: int) -> None:
        txt = self.font.render(text, True, TEXT)
        self.screen.blit(txt, (x, y))

    def draw_status_bar(self, text: str) -> None:
        surf = self.font.render(text, True, SUBTEXT)
        self.screen.blit(surf, (PANEL_PADDING, self.screen.get_height() - BOTTOM_BAR + 16))

    def draw_board(self, rect: pygame.Rect, board: Board) -> None:
        pygame.draw.rect(self.screen, GRID_BG, rect, border_radius=8)
        for i in range(BOARD_SIZE + 1):
            x = rect.x + i * CELL_SIZE
            y = rect.y + i * CELL_SIZE
            pygame.draw.line(self.screen, GRID_LINE, (rect.x, y), (rect.right, y))
            pygame.draw.line(self.screen, GRID_LINE, (x, rect.y), (x, rect.bottom))
        # letters name columns, numbers name rows
        for i in range(BOARD_SIZE):
            letter = self.font_small.render(COORDS[i], True, SUBTEXT)
            num = self.font_small.render(str(i + 1), True, SUBTEXT)
            self.screen.blit(letter, (rect.x + i * CELL_SIZE + CELL_SIZE // 2 - letter.get_width() // 2, rect.y - 22))
            self.screen.blit(num, (rect.x - 24, rect.y + i * CELL_SIZE + CELL_SIZE // 2 - num.get_height() // 2))
        for r in range(BOARD_SIZE):
            for c in range(BOARD_SIZE):
                self.draw_cell(rect.x + c * CELL_SIZE, rect.y + r * CELL_SIZE, board.view[r][c])

    def draw_cell(self, cx: int, cy: int, state: CellState) -> None:
        inner = (cx + 2, cy + 2, CELL_SIZE - 4, CELL_SIZE - 4)
        center = (cx + CELL_SIZE // 2, cy + CELL_SIZE // 2)
        if state == CellState.SHIP:
            pygame.draw.rect(self.screen, SHIP, inner)
            pygame.draw.rect(self.screen, SHIP_OUTLINE, inner, 2)
        elif state == CellState.HIT_SHIP:
            pygame.draw.rect(self.screen, SHIP_OUTLINE, inner)
            pygame.draw.circle(self.screen, HIT, center, CELL_SIZE // 3)
        elif state == CellState.MISS:
            pygame.draw.circle(self.screen, MISS, center, CELL_SIZE // 6)
        elif state == CellState.WATER:
            pygame.draw.rect(self.screen, WATER, inner)
        elif state == CellState.UNKNOWN and not self.result.won:
            pygame.draw.circle(self.screen, UNKNOWN, center, 3)

    def run(self) -> None:
        while self.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    self.running = False
            self.draw()
            self.clock.tick(30)
        pygame.quit()


def show_result_window(result: GameResult, own: Board, enemy: Board) -> None:
    ResultWindow(result, own, enemy).run()
