"""
Terminal front-ends for GameController.

CursesInterface draws the board centred in the terminal and reads single key
presses; ConsoleInterface prints to a stream and reads whole lines, which is
handy for pipes and for headless automated runs.
"""

import curses
import sys
from typing import List, Optional, TextIO, Union

from .controller import Command
from .node import MoveType, Node
from .render import board_lines, describe_suggestion, move_glyph, render_final, render_node
from .search import SearchResult

CommandType = Union[MoveType, Command, None]

_ENTER_KEYS = (10, 13, curses.KEY_ENTER)

KEY_BINDINGS = {
    curses.KEY_UP: MoveType.UP,
    curses.KEY_DOWN: MoveType.DOWN,
    curses.KEY_LEFT: MoveType.LEFT,
    curses.KEY_RIGHT: MoveType.RIGHT,
    ord("w"): MoveType.UP,
    ord("W"): MoveType.UP,
    ord("s"): MoveType.DOWN,
    ord("S"): MoveType.DOWN,
    ord("a"): MoveType.LEFT,
    ord("A"): MoveType.LEFT,
    ord("d"): MoveType.RIGHT,
    ord("D"): MoveType.RIGHT,
    ord("q"): Command.QUIT,
    ord("Q"): Command.QUIT,
}
KEY_BINDINGS.update({key: Command.ACCEPT for key in _ENTER_KEYS})

LINE_BINDINGS = {
    "w": MoveType.UP,
    "s": MoveType.DOWN,
    "a": MoveType.LEFT,
    "d": MoveType.RIGHT,
    "up": MoveType.UP,
    "down": MoveType.DOWN,
    "left": MoveType.LEFT,
    "right": MoveType.RIGHT,
    "": Command.ACCEPT,
    "q": Command.QUIT,
    "quit": Command.QUIT,
}


def command_for_key(key: int) -> CommandType:
    return KEY_BINDINGS.get(key)


def command_for_line(line: str) -> CommandType:
    return LINE_BINDINGS.get(line.strip().lower())


class CursesInterface:
    HELP = "arrows/WASD move, ENTER takes the suggestion, Q quits"

    def __init__(self, stdscr):
        self.screen = stdscr
        curses.cbreak()
        curses.noecho()
        self.screen.keypad(True)
        try:
            curses.curs_set(0)
        except curses.error:
            pass

    def _put(self, y: int, text: str) -> None:
        height, width = self.screen.getmaxyx()
        if not 0 <= y < height:
            return
        x = max(0, (width - len(text)) // 2)
        try:
            self.screen.addnstr(y, x, text, max(0, width - x - 1))
        except curses.error:
            # writing the bottom-right cell raises even when the text fits
            pass

    def _draw(self, node: Node, footer: List[str]) -> None:
        self.screen.erase()
        height, _ = self.screen.getmaxyx()
        lines = [move_glyph(node.move)] + board_lines(node.board)
        top = (height - len(lines)) // 2
        self._put(top - 2, str(node.score))
        for i, line in enumerate(lines):
            self._put(top + i, line)
        for i, line in enumerate(footer):
            self._put(top + len(lines) + 1 + i, line)
        self.screen.refresh()

    def show(self, node: Node, suggestion: Optional[SearchResult], status: str) -> None:
        footer = [describe_suggestion(suggestion) if suggestion is not None else "", status, self.HELP]
        self._draw(node, footer)

    def read_command(self, block: bool = True) -> CommandType:
        self.screen.timeout(-1 if block else 0)
        key = self.screen.getch()
        if key == -1:
            return None
        return command_for_key(key)

    def show_final(self, node: Node) -> None:
        self._draw(node, ["Game Over!", f"Final Score: {node.score}", "press any key"])
        self.screen.timeout(-1)
        self.screen.getch()


class ConsoleInterface:
    """Line-oriented front-end: one command per line, an empty line accepts."""

    def __init__(self, out: Optional[TextIO] = None, source: Optional[TextIO] = None, prompt: bool = True):
        self.out = out if out is not None else sys.stdout
        self.source = source if source is not None else sys.stdin
        self.prompt = prompt

    def show(self, node: Node, suggestion: Optional[SearchResult], status: str) -> None:
        print(f"\nScore: {node.score}", file=self.out)
        print(render_node(node), file=self.out)
        if suggestion is not None:
            print(describe_suggestion(suggestion), file=self.out)

    def read_command(self, block: bool = True) -> CommandType:
        if not block:
            return None
        if self.prompt:
            print("move [w/a/s/d, enter=suggestion, q]: ", end="", file=self.out, flush=True)
        line = self.source.readline()
        if not line:
            # end of input
            return Command.QUIT
        return command_for_line(line)

    def show_final(self, node: Node) -> None:
        print(render_final(node), file=self.out)
