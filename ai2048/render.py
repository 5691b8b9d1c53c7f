"""Plain-text rendering shared by the terminal and console front-ends."""

from typing import List, Optional

from .board import SIZE, Board
from .node import MoveType, Node
from .search import SearchResult

CELL_WIDTH = 4

MOVE_GLYPHS = {
    MoveType.UP: "^",
    MoveType.DOWN: "V",
    MoveType.LEFT: "<",
    MoveType.RIGHT: ">",
}

# (left, right) padding by number of digits
_PADDING = {0: (2, 2), 1: (2, 1), 2: (1, 1), 3: (1, 0), 4: (0, 0)}


def render_cell(value: int) -> str:
    text = str(value) if value else ""
    left, right = _PADDING.get(len(text), (0, 0))
    return " " * left + text + " " * right


def board_lines(board: Board) -> List[str]:
    separator = "+" + ("-" * CELL_WIDTH + "+") * SIZE
    output: List[str] = []
    values = board.values()
    for row in range(SIZE):
        output.append(separator)
        cells = [render_cell(int(value)) for value in values[row]]
        output.append("|" + "|".join(cells) + "|")
    output.append(separator)
    return output


def render_board(board: Board) -> str:
    return "\n".join(board_lines(board))


def move_glyph(move: MoveType) -> str:
    return MOVE_GLYPHS.get(move, "")


def render_node(node: Node) -> str:
    return move_glyph(node.move) + "\n" + render_board(node.board)


def describe_suggestion(result: Optional[SearchResult], depth: Optional[int] = None) -> str:
    if result is None or result.value < 0:
        return "No Suggestion!"
    text = f"Suggestion: {result.move.name} {move_glyph(result.move)} (value {result.value:.0f}"
    if depth is not None:
        text += f", depth {depth}"
    return text + f", pruned {result.pruned_nodes})"


def render_final(node: Node) -> str:
    return f"{render_node(node)}\n\nGame Over!\nFinal Score: {node.score}"
