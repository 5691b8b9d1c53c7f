import pytest

from ai2048.board import SIZE, Board
from ai2048.node import MoveType, Node, Player

# two empty cells, only LEFT and DOWN can move
NEARLY_FULL = [
    [2, 4, 8, 16],
    [32, 64, 128, 256],
    [2, 4, 8, 16],
    [0, 0, 2, 4],
]

# full, no equal neighbours
CHECKERBOARD = [
    [2, 4, 2, 4],
    [4, 2, 4, 2],
    [2, 4, 2, 4],
    [4, 2, 4, 2],
]


def rows(*lines):
    """Pad a few leading rows out to a full 4x4 grid of values."""
    grid = [list(line) + [0] * (SIZE - len(line)) for line in lines]
    while len(grid) < SIZE:
        grid.append([0] * SIZE)
    return grid


def make_node(grid, player=Player.HUMAN, score=0, move=MoveType.START):
    return Node(move, Board.from_values(grid), player, score)


@pytest.fixture
def nearly_full_node():
    return make_node(NEARLY_FULL)


@pytest.fixture
def checkerboard_node():
    return make_node(CHECKERBOARD)
