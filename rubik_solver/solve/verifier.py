# rubik_solver/solve/verifier.py
from __future__ import annotations

from typing import Iterable

from rubik_solver.core.cube_state import CubeState
from rubik_solver.logic.move_engine import apply_sequence
from rubik_solver.logic.moves import Move
from rubik_solver.logic.notation import parse_sequence


def verify(initial: CubeState, moves: Iterable[Move]) -> bool:
    """Indica si aplicar `moves` sobre `initial` deja el cubo resuelto."""
    return apply_sequence(initial, moves).is_solved()


def verify_notation(initial: CubeState, text: str) -> bool:
    """Como `verify`, para soluciones recibidas como texto (p. ej. importadas).

    Raises:
        InvalidNotation: Si el texto no es notación válida.
    """
    return verify(initial, parse_sequence(text))
