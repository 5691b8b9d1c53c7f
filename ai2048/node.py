from __future__ import annotations

import logging
import random
import time
from enum import Enum
from typing import Optional, Tuple

from .board import SIZE, Board, Direction

logger = logging.getLogger(__name__)

__all__ = [
    "Player",
    "MoveType",
    "Node",
]

WIN_EXPONENT = 11  # 2048
WIN_SHIFT = 47

SMOOTHNESS_CEILING = 240
MONOTONICITY_CEILING = 240
SMOOTHNESS_WEIGHT = 10
MONOTONICITY_WEIGHT = 100
EMPTY_WEIGHT = 270
LARGEST_WEIGHT = 100

# chance of a spawn being a 2 (exponent 1) rather than a 4 (exponent 2)
SPAWN_TWO_PROBABILITY = 0.9
SPAWN_EXPONENTS = (1, 2)


class Player(Enum):
    HUMAN = 0
    RANDOM = 1


class MoveType(Enum):
    START = 0
    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4
    RAND = 5
    GAMEOVER = 6

    @property
    def direction(self) -> Optional[Direction]:
        return Direction[self.name] if self in HUMAN_MOVES else None

    @classmethod
    def from_direction(cls, direction: Direction) -> "MoveType":
        return cls[direction.name]


# successor order for the sliding player
HUMAN_MOVES: Tuple[MoveType, ...] = (MoveType.UP, MoveType.DOWN, MoveType.LEFT, MoveType.RIGHT)


class Node:
    """
    One position in the game tree: the board, who moves next, the score so far
    and the edge that led here. Successors are built on first request and kept
    until `drop_successors` is called.
    """

    __slots__ = ("_move", "_board", "_player", "_score", "_successors")

    def __init__(self, move: MoveType, board: Board, player: Player, score: int = 0) -> None:
        self._move = move
        self._board = board
        self._player = player
        self._score = score
        self._successors: Optional[Tuple[Node, ...]] = None

    @classmethod
    def initial(cls, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> "Node":
        """Empty board plus two spawns of a 2 or a 4 on distinct cells."""
        if rng is None:
            if seed is None:
                seed = time.time_ns() // 1_000_000
            rng = random.Random(seed)

        board = Board()
        r1, c1 = rng.randrange(SIZE), rng.randrange(SIZE)
        board.write(r1, c1, rng.choice(SPAWN_EXPONENTS))
        while True:
            r2, c2 = rng.randrange(SIZE), rng.randrange(SIZE)
            if (r1, c1) != (r2, c2):
                board.write(r2, c2, rng.choice(SPAWN_EXPONENTS))
                break

        logger.debug(f"Initial position {board!r}")
        return cls(MoveType.START, board, Player.HUMAN, 0)

    @property
    def move(self) -> MoveType:
        return self._move

    @property
    def board(self) -> Board:
        """A copy; nodes never change once built."""
        return self._board.copy()

    @property
    def player(self) -> Player:
        return self._player

    @property
    def score(self) -> int:
        return self._score

    def has_2048(self) -> bool:
        return self._board.contains_exponent(WIN_EXPONENT)

    def max_tile(self) -> int:
        largest = self._board.largest_exponent()
        return 0 if largest == 0 else 1 << largest

    def successors(self) -> Tuple[Node, ...]:
        if self._successors is None:
            self._successors = tuple(self._expand())
        return self._successors

    def drop_successors(self) -> None:
        self._successors = None

    def _expand(self):
        if self.has_2048():
            return

        if self._player is Player.RANDOM:
            for row in range(SIZE):
                for col in range(SIZE):
                    if self._board.exponent(row, col):
                        continue
                    for exponent in SPAWN_EXPONENTS:
                        board = self._board.copy()
                        board.write(row, col, exponent)
                        yield Node(MoveType.RAND, board, Player.HUMAN, self._score)
        else:
            for move in HUMAN_MOVES:
                board = self._board.copy()
                gained = board.slide(move.direction)
                if gained >= 0:
                    yield Node(move, board, Player.RANDOM, self._score + gained)

    def is_game_over(self) -> bool:
        if self._successors is not None:
            return not self._successors
        # same answer as expanding, without building the children
        if self.has_2048():
            return True
        if self._player is Player.RANDOM:
            return self._board.empty_spaces() == 0
        return not self._board.can_slide()

    def successor_for(self, move: MoveType) -> Optional[Node]:
        for node in self.successors():
            if node.move is move:
                return node
        return None

    def heuristic(self) -> int:
        if self.is_game_over() and not self.has_2048():
            return 0

        stats = self._board.stats()
        value = (
            SMOOTHNESS_WEIGHT * (SMOOTHNESS_CEILING - stats.smoothness)
            + MONOTONICITY_WEIGHT * (MONOTONICITY_CEILING - stats.monotonicity)
            + EMPTY_WEIGHT * stats.empty
            + LARGEST_WEIGHT * stats.largest
        )
        if self.has_2048():
            # any win outranks every position still in play
            value += (self._score + 1) << WIN_SHIFT
        return value

    def random_successor(self, rng: random.Random) -> Node:
        """Uniform choice over all successors."""
        return rng.choice(self.successors())

    def weighted_random_successor(self, rng: random.Random) -> Node:
        """
        Spawn step of the live game: a uniformly chosen empty cell gets a 2 with
        probability 0.9 and a 4 otherwise. Relies on RANDOM successors being
        listed per cell as (2, 4) pairs.
        """
        assert self._player is Player.RANDOM, "Only the spawning player draws weighted successors."
        successors = self.successors()
        assert successors, "No empty cell to spawn into."
        cell = rng.randrange(len(successors) // 2)
        offset = 0 if rng.random() < SPAWN_TWO_PROBABILITY else 1
        return successors[2 * cell + offset]

    def __repr__(self) -> str:
        return (
            f"Node(move={self._move.name}, player={self._player.name}, "
            f"score={self._score}, board={self._board!r})"
        )
