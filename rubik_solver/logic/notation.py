# rubik_solver/logic/notation.py
from __future__ import annotations

import re
from typing import Iterable, List

from rubik_solver.core.errors import InvalidNotation
from rubik_solver.logic.moves import TURNS_OF_SUFFIX, Move, check_move

TOKEN_RE = re.compile(r"([UDLRFB])(['2])?")


def parse_move(token: str, position: int = 0) -> Move:
    """Convierte un token ("R", "U'", "F2") en un `Move`.

    Args:
        token: Token de movimiento, sin espacios.
        position: Posición del token en la secuencia (sólo para el error).

    Raises:
        InvalidNotation: Si el token no respeta `^[UDLRFB](['2])?$`.
    """
    match = TOKEN_RE.fullmatch(token)
    if match is None:
        raise InvalidNotation(token, position)
    face, suffix = match.groups()
    return Move(face, TURNS_OF_SUFFIX[suffix or ""])


def parse_sequence(text: str) -> List[Move]:
    """Convierte una secuencia escrita como texto en una lista de movimientos.

    La entrada debe separar movimientos por espacios. Por ejemplo:
        "R U R' U'" -> [R, U, R', U']

    No hay resultado parcial: ante el primer token inválido se rechaza todo.

    Raises:
        InvalidNotation: Con el token ofensivo y su posición (base 0).
    """
    return [parse_move(tok, pos) for pos, tok in enumerate(text.split())]


def format_sequence(moves: Iterable[Move]) -> str:
    """Serializa movimientos en notación canónica separada por un espacio."""
    return " ".join(check_move(m).token for m in moves)
