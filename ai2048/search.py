"""
Alpha-beta over the two-player 2048 tree: the sliding player maximises the
heuristic, the spawning player minimises it (or averages over it, in
expectimax mode). A move pair counts as one ply of depth.
"""

from __future__ import annotations

import logging
import math
import time
from enum import Enum
from typing import Callable, NamedTuple, Optional, Sequence

from .node import MoveType, Node, Player

logger = logging.getLogger(__name__)

__all__ = [
    "Termination",
    "SearchResult",
    "alpha_beta",
    "depth_predicate",
    "deadline_predicate",
    "suggest_move",
    "suggest_with_deadline",
]

DEPTH_FLOOR = 2
DEFAULT_DEADLINE_MS = 300

# weights of the (2, 4) spawn pair at each empty cell
SPAWN_WEIGHTS = (0.9, 0.1)


class Termination(Enum):
    CONTINUE = 0
    END = 1
    ABORT = 2


class SearchResult(NamedTuple):
    value: float
    move: MoveType
    termination: Termination
    pruned_nodes: int = 0


Predicate = Callable[[Node, int], Termination]
DepthCallback = Callable[[int, SearchResult], None]

NO_SUGGESTION = SearchResult(-1, MoveType.START, Termination.END, 0)


def _release(nodes: Sequence[Node]) -> None:
    for node in nodes:
        node.drop_successors()


def alpha_beta(
    node: Node,
    predicate: Predicate,
    depth: int = 0,
    alpha: float = -math.inf,
    beta: float = math.inf,
    expectimax: bool = False,
) -> SearchResult:
    status = predicate(node, depth)
    if status is Termination.ABORT:
        bound = alpha if node.player is Player.HUMAN else beta
        return SearchResult(bound, MoveType.GAMEOVER, Termination.ABORT, 0)
    if status is Termination.END or node.is_game_over():
        return SearchResult(node.heuristic(), MoveType.GAMEOVER, Termination.END, 0)

    if node.player is Player.HUMAN:
        return _maximize(node, predicate, depth, alpha, beta, expectimax)
    if expectimax:
        return _expect(node, predicate, depth, beta)
    return _minimize(node, predicate, depth, alpha, beta)


def _maximize(node, predicate, depth, alpha, beta, expectimax):
    successors = node.successors()
    best_value = -math.inf
    best_move = MoveType.GAMEOVER
    pruned = 0
    explored = 0

    for child in successors:
        explored += 1
        # depth only advances below the spawning player
        result = alpha_beta(child, predicate, depth, alpha, beta, expectimax)
        pruned += result.pruned_nodes
        if result.termination is Termination.ABORT:
            return SearchResult(alpha, best_move, Termination.ABORT, pruned + len(successors) - explored)

        if result.value > best_value:
            best_value = result.value
            best_move = child.move
        alpha = max(alpha, result.value)
        if beta <= alpha:
            _release(successors[explored:])
            break

    return SearchResult(best_value, best_move, Termination.END, pruned + len(successors) - explored)


def _minimize(node, predicate, depth, alpha, beta):
    successors = node.successors()
    best_value = math.inf
    pruned = 0
    explored = 0

    for child in successors:
        explored += 1
        result = alpha_beta(child, predicate, depth + 1, alpha, beta, False)
        pruned += result.pruned_nodes
        if result.termination is Termination.ABORT:
            return SearchResult(beta, MoveType.RAND, Termination.ABORT, pruned + len(successors) - explored)

        best_value = min(best_value, result.value)
        beta = min(beta, result.value)
        if beta <= alpha:
            _release(successors[explored:])
            break

    return SearchResult(best_value, MoveType.RAND, Termination.END, pruned + len(successors) - explored)


def _expect(node, predicate, depth, beta):
    """Spawn-weighted average of the children, each searched with a full window."""
    successors = node.successors()
    total = 0.0
    weight_sum = 0.0
    pruned = 0

    for index, child in enumerate(successors):
        result = alpha_beta(child, predicate, depth + 1, -math.inf, math.inf, True)
        pruned += result.pruned_nodes
        if result.termination is Termination.ABORT:
            return SearchResult(beta, MoveType.RAND, Termination.ABORT, pruned + len(successors) - index - 1)
        weight = SPAWN_WEIGHTS[index % 2]
        total += weight * result.value
        weight_sum += weight

    return SearchResult(min(beta, total / weight_sum), MoveType.RAND, Termination.END, pruned)


def depth_predicate(max_depth: int) -> Predicate:
    def predicate(node: Node, depth: int) -> Termination:
        return Termination.END if depth >= max_depth else Termination.CONTINUE
    return predicate


def deadline_predicate(
    max_depth: int,
    start: float,
    deadline_ms: float,
    floor: int = DEPTH_FLOOR,
    clock: Callable[[], float] = time.monotonic,
) -> Predicate:
    """
    Depth limit plus a wall-clock deadline. Searches no deeper than `floor`
    are never aborted, so the shallowest iteration always completes.
    """
    def predicate(node: Node, depth: int) -> Termination:
        if max_depth > floor and (clock() - start) * 1000.0 >= deadline_ms:
            return Termination.ABORT
        if depth >= max_depth:
            return Termination.END
        return Termination.CONTINUE
    return predicate


def suggest_move(
    node: Node,
    max_depth: int,
    expectimax: bool = False,
    predicate: Optional[Predicate] = None,
) -> SearchResult:
    """Best move from `node` searching `max_depth` move pairs ahead.

    Returns NO_SUGGESTION (negative value, MoveType.START) when the game is over.
    """
    if node.is_game_over():
        return NO_SUGGESTION
    if predicate is None:
        predicate = depth_predicate(max_depth)
    return alpha_beta(node, predicate, 0, -math.inf, math.inf, expectimax)


def suggest_with_deadline(
    node: Node,
    deadline_ms: float = DEFAULT_DEADLINE_MS,
    callback: Optional[DepthCallback] = None,
    expectimax: bool = False,
    max_depth: Optional[int] = None,
    clock: Callable[[], float] = time.monotonic,
) -> SearchResult:
    """
    Iterative deepening from DEPTH_FLOOR until the deadline passes.

    Each completed depth replaces the current best result and is reported to
    `callback(depth, result)`. An iteration cut short by the deadline is thrown
    away, so the answer always comes from the deepest finished search.
    """
    start = clock()
    best = NO_SUGGESTION
    if node.is_game_over():
        return best

    if max_depth is not None:
        max_depth = max(max_depth, DEPTH_FLOOR)

    depth = DEPTH_FLOOR
    while max_depth is None or depth <= max_depth:
        predicate = deadline_predicate(depth, start, deadline_ms, clock=clock)
        result = suggest_move(node, depth, expectimax, predicate=predicate)
        if result.termination is Termination.ABORT:
            logger.debug(f"Depth {depth} aborted after {(clock() - start) * 1000.0:.0f}ms")
            break

        best = result
        logger.debug(
            f"Depth {depth} done: {result.move.name} value={result.value} pruned={result.pruned_nodes}"
        )
        if callback is not None:
            callback(depth, result)
        depth += 1

    return best
