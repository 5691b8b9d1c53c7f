import math

import pytest

from ai2048.node import MoveType, Player
from ai2048.search import (
    DEPTH_FLOOR,
    NO_SUGGESTION,
    SPAWN_WEIGHTS,
    SearchResult,
    Termination,
    alpha_beta,
    deadline_predicate,
    depth_predicate,
    suggest_move,
    suggest_with_deadline,
)

from .conftest import CHECKERBOARD, NEARLY_FULL, make_node, rows

# three empty cells, all four slides legal
ROOMY = [
    [2, 4, 8, 16],
    [32, 64, 128, 256],
    [4, 2, 0, 0],
    [8, 16, 0, 2],
]


def minimax(node, depth, max_depth):
    if depth >= max_depth or node.is_game_over():
        return node.heuristic()
    if node.player is Player.HUMAN:
        return max(minimax(child, depth, max_depth) for child in node.successors())
    return min(minimax(child, depth + 1, max_depth) for child in node.successors())


def expectimax(node, depth, max_depth):
    if depth >= max_depth or node.is_game_over():
        return node.heuristic()
    if node.player is Player.HUMAN:
        return max(expectimax(child, depth, max_depth) for child in node.successors())
    total = weights = 0.0
    for index, child in enumerate(node.successors()):
        weight = SPAWN_WEIGHTS[index % 2]
        total += weight * expectimax(child, depth + 1, max_depth)
        weights += weight
    return total / weights


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestAlphaBeta:
    @pytest.mark.parametrize("grid", [NEARLY_FULL, ROOMY])
    @pytest.mark.parametrize("max_depth", [1, 2])
    def test_matches_plain_minimax(self, grid, max_depth):
        expected = minimax(make_node(grid), 0, max_depth)
        result = alpha_beta(make_node(grid), depth_predicate(max_depth))
        assert result.value == expected
        assert result.termination is Termination.END

    @pytest.mark.parametrize("grid", [NEARLY_FULL, ROOMY])
    def test_expectimax_matches_reference(self, grid):
        expected = expectimax(make_node(grid), 0, 2)
        result = alpha_beta(make_node(grid), depth_predicate(2), expectimax=True)
        assert result.value == pytest.approx(expected)

    def test_returned_move_leads_to_the_best_value(self):
        node = make_node(ROOMY)
        result = alpha_beta(node, depth_predicate(1))
        values = {child.move: minimax(child, 0, 1) for child in make_node(ROOMY).successors()}
        assert result.move in values
        assert values[result.move] == max(values.values())

    def test_spawn_node_reports_rand(self):
        node = make_node(NEARLY_FULL, player=Player.RANDOM)
        assert alpha_beta(node, depth_predicate(1)).move is MoveType.RAND

    def test_leaf_returns_heuristic(self):
        node = make_node(ROOMY)
        result = alpha_beta(node, depth_predicate(0))
        assert result == SearchResult(node.heuristic(), MoveType.GAMEOVER, Termination.END, 0)

    def test_terminal_returns_heuristic(self, checkerboard_node):
        result = alpha_beta(checkerboard_node, depth_predicate(3))
        assert result.value == 0
        assert result.move is MoveType.GAMEOVER

    def test_abort_returns_the_bound(self):
        always_abort = lambda node, depth: Termination.ABORT
        human = alpha_beta(make_node(ROOMY), always_abort, alpha=5, beta=9)
        assert human == SearchResult(5, MoveType.GAMEOVER, Termination.ABORT, 0)
        spawn = alpha_beta(make_node(ROOMY, player=Player.RANDOM), always_abort, alpha=5, beta=9)
        assert spawn.value == 9

    def test_abort_propagates_to_the_root(self):
        def abort_below_root(node, depth):
            return Termination.ABORT if depth >= 1 else Termination.CONTINUE

        result = alpha_beta(make_node(ROOMY), abort_below_root)
        assert result.termination is Termination.ABORT
        assert result.value == -math.inf

    def test_ties_go_to_the_first_successor(self):
        node = make_node(rows([0, 0, 0, 0], [0, 2, 0, 0]))

        # stop right after the slide: every direction just moves the lone tile
        def one_slide(child, depth):
            return Termination.END if child.player is Player.RANDOM else Termination.CONTINUE

        values = {child.heuristic() for child in node.successors()}
        assert len(values) == 1
        assert alpha_beta(node, one_slide).move is MoveType.UP

    def test_spawn_cutoff_releases_skipped_siblings(self):
        node = make_node(NEARLY_FULL, player=Player.RANDOM)
        children = node.successors()
        cached = [child.successors() for child in children]
        # anything beats an alpha this high, so the first spawn cuts off the rest
        result = alpha_beta(node, depth_predicate(1), alpha=2 ** 60)
        assert result.pruned_nodes == len(children) - 1
        assert children[0].successors() is cached[0]
        for child, before in zip(children[1:], cached[1:]):
            assert child.successors() is not before

    def test_slide_cutoff_is_counted(self):
        node = make_node(ROOMY)
        result = alpha_beta(node, depth_predicate(1), beta=-1)
        assert result.pruned_nodes >= len(node.successors()) - 1

    def test_no_pruning_means_no_count(self):
        node = make_node(NEARLY_FULL)
        result = alpha_beta(node, depth_predicate(0))
        assert result.pruned_nodes == 0


class TestPredicates:
    def test_depth_predicate(self):
        predicate = depth_predicate(2)
        node = make_node(ROOMY)
        assert predicate(node, 1) is Termination.CONTINUE
        assert predicate(node, 2) is Termination.END

    def test_deadline_never_aborts_the_floor(self):
        clock = FakeClock(10.0)
        predicate = deadline_predicate(DEPTH_FLOOR, start=0.0, deadline_ms=1, clock=clock)
        node = make_node(ROOMY)
        assert predicate(node, 0) is Termination.CONTINUE
        assert predicate(node, DEPTH_FLOOR) is Termination.END

    def test_deadline_aborts_deeper_searches(self):
        clock = FakeClock(0.0)
        predicate = deadline_predicate(3, start=0.0, deadline_ms=50, clock=clock)
        node = make_node(ROOMY)
        assert predicate(node, 0) is Termination.CONTINUE
        clock.now = 0.049
        assert predicate(node, 3) is Termination.END
        clock.now = 0.050
        assert predicate(node, 0) is Termination.ABORT


class TestSuggest:
    def test_no_suggestion_when_game_is_over(self, checkerboard_node):
        assert suggest_move(checkerboard_node, 2) == NO_SUGGESTION
        assert suggest_with_deadline(checkerboard_node, 100) == NO_SUGGESTION
        assert NO_SUGGESTION.value < 0
        assert NO_SUGGESTION.move is MoveType.START

    def test_suggestion_is_a_legal_move(self, nearly_full_node):
        result = suggest_move(nearly_full_node, 2)
        assert nearly_full_node.successor_for(result.move) is not None

    def test_tiny_deadline_keeps_the_floor_result(self):
        calls = []
        result = suggest_with_deadline(make_node(ROOMY), 0, callback=lambda d, r: calls.append((d, r)))
        expected = suggest_move(make_node(ROOMY), 2)
        assert (result.value, result.move) == (expected.value, expected.move)
        assert [depth for depth, _ in calls] == [2]
        assert calls[0][1] == result

    def test_deepens_until_max_depth(self):
        calls = []
        result = suggest_with_deadline(
            make_node(NEARLY_FULL), 10_000,
            callback=lambda d, r: calls.append(d), max_depth=3, clock=FakeClock(),
        )
        assert calls == [2, 3]
        expected = suggest_move(make_node(NEARLY_FULL), 3)
        assert (result.value, result.move) == (expected.value, expected.move)

    def test_returns_deepest_completed_depth(self):
        clock = FakeClock()
        calls = []

        def callback(depth, result):
            calls.append(depth)
            if depth == 3:
                # the depth-4 iteration starts past the deadline
                clock.now = 1.0

        result = suggest_with_deadline(make_node(NEARLY_FULL), 500, callback=callback, clock=clock)
        assert calls == [2, 3]
        expected = suggest_move(make_node(NEARLY_FULL), 3)
        assert (result.value, result.move) == (expected.value, expected.move)

    def test_expectimax_suggestion(self, nearly_full_node):
        result = suggest_with_deadline(nearly_full_node, 0, expectimax=True)
        assert result.move in (MoveType.DOWN, MoveType.LEFT)
        assert result.value > 0
