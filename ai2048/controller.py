from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Any, NamedTuple, Optional

from .node import HUMAN_MOVES, MoveType, Node, Player
from .search import DEFAULT_DEADLINE_MS, SearchResult, suggest_with_deadline
from .render import describe_suggestion

logger = logging.getLogger(__name__)

__all__ = [
    "Command",
    "GameSummary",
    "GameController",
]


class Command(Enum):
    ACCEPT = 0
    QUIT = 1


class GameSummary(NamedTuple):
    score: int
    max_tile: int
    turns: int
    won: bool
    quit: bool


class GameController:
    """
    Runs one game: the sliding player's turns come from a front-end (or from
    the search, in automated mode) and the spawning player's turns from `rng`.

    A front-end is any object with
        show(node, suggestion, status)
        read_command(block=True) -> MoveType | Command | None
        show_final(node)
    """

    def __init__(
        self,
        node: Optional[Node] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        deadline_ms: float = DEFAULT_DEADLINE_MS,
        auto: bool = False,
        suggest: bool = True,
        expectimax: bool = False,
        max_depth: Optional[int] = None,
        ui: Any = None,
    ):
        if ui is None and not auto:
            raise ValueError("Interactive play needs a front-end")

        self.rng = rng if rng is not None else random.Random(seed)
        self.node = node if node is not None else Node.initial(rng=self.rng)
        self.deadline_ms = deadline_ms
        self.auto = auto
        self.suggest = suggest or auto
        self.expectimax = expectimax
        self.max_depth = max_depth
        self.ui = ui

        self.turns = 0
        self.quit = False
        self.status = ""
        self._suggestion: Optional[SearchResult] = None
        self._suggested_for: Optional[Node] = None

    @property
    def finished(self) -> bool:
        return self.quit or self.node.is_game_over()

    def suggestion(self) -> SearchResult:
        """Search result for the current node, computed once per node."""
        if self._suggested_for is not self.node:
            node = self.node

            def on_depth(depth: int, result: SearchResult) -> None:
                self.status = describe_suggestion(result, depth)
                if self.ui is not None:
                    self.ui.show(node, result, self.status)

            self._suggestion = suggest_with_deadline(
                node,
                self.deadline_ms,
                callback=on_depth,
                expectimax=self.expectimax,
                max_depth=self.max_depth,
            )
            self._suggested_for = node
        return self._suggestion

    def step(self) -> bool:
        """Play one turn. Returns False once the game is over or abandoned."""
        if self.finished:
            return False
        if self.node.player is Player.HUMAN:
            self._human_turn()
        else:
            self._random_turn()
        return not self.finished

    def _human_turn(self) -> None:
        suggestion = self.suggestion() if self.suggest else None
        if self.ui is not None:
            self.ui.show(self.node, suggestion, self.status)

        if self.auto:
            if self.ui is not None and self.ui.read_command(block=False) is Command.QUIT:
                self.quit = True
                return
            move = suggestion.move
        else:
            command = self.ui.read_command(block=True)
            if command is None:
                return
            if command is Command.QUIT:
                self.quit = True
                return
            if command is Command.ACCEPT:
                if suggestion is None or suggestion.value < 0:
                    return
                move = suggestion.move
            else:
                move = command

        if move not in HUMAN_MOVES:
            logger.debug(f"No move to play for {move}")
            return
        successor = self.node.successor_for(move)
        if successor is None:
            logger.debug(f"Ignoring invalid move {move.name}")
            return

        logger.debug(f"Turn {self.turns + 1}: {move.name} score={successor.score}")
        self.node = successor
        self.turns += 1

    def _random_turn(self) -> None:
        self.node = self.node.weighted_random_successor(self.rng)

    def summary(self) -> GameSummary:
        return GameSummary(
            score=self.node.score,
            max_tile=self.node.max_tile(),
            turns=self.turns,
            won=self.node.has_2048(),
            quit=self.quit,
        )

    def run(self) -> GameSummary:
        logger.info(
            f"Starting game (auto={self.auto}, deadline={self.deadline_ms}ms, "
            f"expectimax={self.expectimax})"
        )
        while self.step():
            pass

        if self.ui is not None:
            self.ui.show_final(self.node)

        summary = self.summary()
        logger.info(
            f"Game finished. Score: {summary.score}, Max Tile: {summary.max_tile}, "
            f"Turns: {summary.turns}, Won: {summary.won}, Quit: {summary.quit}"
        )
        return summary
