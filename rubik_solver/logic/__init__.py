# rubik_solver/logic/__init__.py
from rubik_solver.logic.move_engine import apply_move, apply_sequence
from rubik_solver.logic.moves import ALL_MOVES, Move, inverse_move, inverse_sequence
from rubik_solver.logic.notation import format_sequence, parse_move, parse_sequence
from rubik_solver.logic.scramble import generate_scramble, scrambled_state

__all__ = [
    "apply_move",
    "apply_sequence",
    "ALL_MOVES",
    "Move",
    "inverse_move",
    "inverse_sequence",
    "format_sequence",
    "parse_move",
    "parse_sequence",
    "generate_scramble",
    "scrambled_state",
]
