# Bit-board 2048 with an anytime alpha-beta / expectimax move advisor
from .board import Board, BoardStats, Direction, INVALID_MOVE
from .node import Node, Player, MoveType, HUMAN_MOVES
from .search import (
    Termination,
    SearchResult,
    NO_SUGGESTION,
    alpha_beta,
    depth_predicate,
    deadline_predicate,
    suggest_move,
    suggest_with_deadline,
)
from .controller import Command, GameController, GameSummary
from .render import render_board, render_node, render_final, move_glyph, describe_suggestion

__all__ = [
    "Board",
    "BoardStats",
    "Direction",
    "INVALID_MOVE",

    "Node",
    "Player",
    "MoveType",
    "HUMAN_MOVES",

    "Termination",
    "SearchResult",
    "NO_SUGGESTION",
    "alpha_beta",
    "depth_predicate",
    "deadline_predicate",
    "suggest_move",
    "suggest_with_deadline",

    "Command",
    "GameController",
    "GameSummary",

    "render_board",
    "render_node",
    "render_final",
    "move_glyph",
    "describe_suggestion",
]
