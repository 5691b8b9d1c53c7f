import math
from typing import Optional, Union

import pygame

from .board import SIZE
from .controller import Command
from .node import MoveType, Node
from .render import describe_suggestion, move_glyph
from .search import SearchResult

# --- Constants for Interface ---
TILE_SIZE = 100
MARGIN = 10
SCORE_HEIGHT = 80
STATUS_HEIGHT = 70
BG_COLOR = (250, 248, 239)
GRID_COLOR = (187, 173, 160)
EMPTY_CELL_COLOR = (205, 193, 180)
TEXT_COLOR_LIGHT = (249, 246, 242)
TEXT_COLOR_DARK = (119, 110, 101)
TILE_COLORS = {
    0: EMPTY_CELL_COLOR, 2: (238, 228, 218), 4: (237, 224, 200),
    8: (242, 177, 121), 16: (245, 149, 99), 32: (246, 124, 95),
    64: (246, 94, 59), 128: (237, 207, 114), 256: (237, 204, 97),
    512: (237, 200, 80), 1024: (237, 197, 63), 2048: (237, 194, 46),
    4096: (60, 58, 50), 8192: (60, 58, 50), 16384: (60, 58, 50),
    32768: (60, 58, 50)
}

KEY_BINDINGS = {
    pygame.K_UP: MoveType.UP, pygame.K_w: MoveType.UP,
    pygame.K_DOWN: MoveType.DOWN, pygame.K_s: MoveType.DOWN,
    pygame.K_LEFT: MoveType.LEFT, pygame.K_a: MoveType.LEFT,
    pygame.K_RIGHT: MoveType.RIGHT, pygame.K_d: MoveType.RIGHT,
    pygame.K_RETURN: Command.ACCEPT, pygame.K_KP_ENTER: Command.ACCEPT,
    pygame.K_q: Command.QUIT,
}


class PygameInterface:
    def __init__(self):
        self.grid_width = SIZE * TILE_SIZE + (SIZE + 1) * MARGIN
        self.grid_height = self.grid_width
        self.window_width = self.grid_width
        self.window_height = SCORE_HEIGHT + self.grid_height + STATUS_HEIGHT

        pygame.init()
        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        pygame.display.set_caption("2048 - alpha-beta advisor")

        self.font_score = pygame.font.SysFont("Arial", 40, bold=True)
        self.font_status = pygame.font.SysFont("Arial", 18)
        self.font_large = pygame.font.SysFont("Arial", 60, bold=True)

    # --- Pygame Drawing Helpers ---
    def _get_tile_color(self, value):
        log_value = int(math.log2(value)) if value > 0 else 0
        color_key = 2 ** min(log_value, 15) if value > 0 else 0
        return TILE_COLORS.get(color_key, TILE_COLORS[32768])

    def _get_text_color(self, value):
        return TEXT_COLOR_DARK if value <= 8 else TEXT_COLOR_LIGHT

    def _get_tile_font_size(self, value):
        s = str(value)
        if len(s) <= 2: return 55
        if len(s) == 3: return 45
        if len(s) == 4: return 35
        return 30

    def _draw_board(self, node: Node, status_lines):
        self.screen.fill(BG_COLOR)
        pygame.draw.rect(self.screen, GRID_COLOR, (0, SCORE_HEIGHT, self.window_width, self.grid_height))

        values = node.board.values()
        for r in range(SIZE):
            for c in range(SIZE):
                value = int(values[r][c])
                rect = pygame.Rect(
                    MARGIN + c * (TILE_SIZE + MARGIN),
                    SCORE_HEIGHT + MARGIN + r * (TILE_SIZE + MARGIN),
                    TILE_SIZE, TILE_SIZE)
                pygame.draw.rect(self.screen, self._get_tile_color(value), rect, border_radius=5)
                if value:
                    font = pygame.font.SysFont("Arial", self._get_tile_font_size(value), bold=True)
                    text = font.render(str(value), True, self._get_text_color(value))
                    self.screen.blit(text, text.get_rect(center=rect.center))

        score_text = self.font_score.render(f"Score: {node.score} {move_glyph(node.move)}", True, TEXT_COLOR_DARK)
        self.screen.blit(score_text, score_text.get_rect(center=(self.window_width // 2, SCORE_HEIGHT // 2)))

        y = SCORE_HEIGHT + self.grid_height + 10
        for line in status_lines:
            if line:
                text = self.font_status.render(line, True, TEXT_COLOR_DARK)
                self.screen.blit(text, (MARGIN, y))
            y += 22

    def show(self, node: Node, suggestion: Optional[SearchResult], status: str) -> None:
        lines = [describe_suggestion(suggestion) if suggestion is not None else "", status]
        self._draw_board(node, lines)
        pygame.display.flip()
        pygame.event.pump()

    def read_command(self, block: bool = True) -> Union[MoveType, Command, None]:
        events = [pygame.event.wait()] if block else pygame.event.get()
        for event in events:
            if event.type == pygame.QUIT:
                return Command.QUIT
            if event.type == pygame.KEYDOWN:
                return KEY_BINDINGS.get(event.key)
        return None

    def show_final(self, node: Node) -> None:
        self._draw_board(node, [])
        overlay = pygame.Surface((self.window_width, self.window_height), pygame.SRCALPHA)
        overlay.fill((238, 228, 218, 180))
        self.screen.blit(overlay, (0, 0))
        msg = self.font_large.render("Game Over!", True, TEXT_COLOR_DARK)
        score_msg = self.font_large.render(f"Final Score: {node.score}", True, TEXT_COLOR_DARK)
        self.screen.blit(msg, msg.get_rect(center=(self.window_width // 2, self.window_height // 2 - 50)))
        self.screen.blit(score_msg, score_msg.get_rect(center=(self.window_width // 2, self.window_height // 2 + 20)))
        pygame.display.flip()

        while True:
            event = pygame.event.wait()
            if event.type in (pygame.QUIT, pygame.KEYDOWN):
                break
        pygame.quit()
