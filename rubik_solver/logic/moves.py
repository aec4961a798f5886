# rubik_solver/logic/moves.py
from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Literal, NamedTuple, Tuple

from rubik_solver.core.cube_state import FACES, Face
from rubik_solver.core.errors import InvalidMoveToken

Axis = Literal["x", "y", "z"]

SUFFIX_OF_TURNS: Dict[int, str] = {1: "", 3: "'", 2: "2"}
TURNS_OF_SUFFIX: Dict[str, int] = {s: t for t, s in SUFFIX_OF_TURNS.items()}

AXIS_OF_FACE: Dict[Face, Axis] = {
    "U": "y", "D": "y",
    "L": "x", "R": "x",
    "F": "z", "B": "z",
}
OPPOSITE_FACE: Dict[Face, Face] = {
    "U": "D", "D": "U",
    "L": "R", "R": "L",
    "F": "B", "B": "F",
}


class Move(NamedTuple):
    """Giro de una cara: `turns` cuartos de vuelta en sentido horario.

    - turns=1: horario ("R")
    - turns=3: antihorario ("R'")
    - turns=2: media vuelta ("R2")
    """

    face: Face
    turns: int

    @property
    def token(self) -> str:
        return self.face + SUFFIX_OF_TURNS.get(self.turns, "?")

    @property
    def axis(self) -> Axis:
        return AXIS_OF_FACE[self.face]

    def __str__(self) -> str:
        return self.token


# Orden canónico de enumeración: U, U', U2, D, D', D2, ..., B, B', B2
ALL_MOVES: Tuple[Move, ...] = tuple(Move(f, t) for f in FACES for t in (1, 3, 2))
MOVE_SET: FrozenSet[Move] = frozenset(ALL_MOVES)


def check_move(move: Move) -> Move:
    """Devuelve `move` si pertenece a los 18 movimientos canónicos.

    Raises:
        InvalidMoveToken: Si no pertenece.
    """
    try:
        known = move in MOVE_SET
    except TypeError:
        # Valor no hasheable (p. ej. una lista): dato corrupto
        known = False
    if not known:
        raise InvalidMoveToken(move)
    return move


def inverse_move(m: Move) -> Move:
    """Devuelve el movimiento inverso.

    Ejemplos:
        - R  -> R'
        - R' -> R
        - R2 -> R2
    """
    check_move(m)
    return Move(m.face, 4 - m.turns)


def inverse_sequence(moves: Iterable[Move]) -> List[Move]:
    """Invierte una secuencia: orden reverso y cada movimiento invertido.

    Sirve para deshacer un scramble o los pasos de una solución.
    """
    return [inverse_move(m) for m in reversed(list(moves))]
