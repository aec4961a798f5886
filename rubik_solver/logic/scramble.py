# rubik_solver/logic/scramble.py
from __future__ import annotations

import random
from typing import List, Optional, Tuple

from rubik_solver.core.cube_state import FACES, CubeState
from rubik_solver.logic.move_engine import apply_sequence
from rubik_solver.logic.moves import AXIS_OF_FACE, Move

TURNS: Tuple[int, ...] = (1, 3, 2)


def generate_scramble(n: int, seed: Optional[int] = None) -> List[Move]:
    """Genera una secuencia de mezcla (scramble) aleatoria para el cubo.

    Cada movimiento usa una cara de un eje distinto al del movimiento anterior
    (ejes: U/D, L/R, F/B). Así se evitan tanto "R R'" como "R L", que no
    aportan mezcla. El sufijo ("", "'", "2") se elige uniformemente.

    Args:
        n: Cantidad de movimientos a generar.
        seed: Semilla opcional para obtener resultados reproducibles. Si es None,
            el scramble será distinto en cada ejecución.

    Returns:
        Lista de exactamente `n` movimientos.

    Raises:
        ValueError: Si `n` es negativo.
    """
    if n < 0:
        raise ValueError("n no puede ser negativo.")

    rng = random.Random(seed)

    seq: List[Move] = []
    last_axis: Optional[str] = None

    for _ in range(n):
        candidates = [f for f in FACES if AXIS_OF_FACE[f] != last_axis]
        face = rng.choice(candidates)
        last_axis = AXIS_OF_FACE[face]

        seq.append(Move(face, rng.choice(TURNS)))

    return seq


def scrambled_state(n: int, seed: Optional[int] = None) -> Tuple[CubeState, List[Move]]:
    """Mezcla un cubo resuelto y devuelve el estado junto con su scramble."""
    scramble = generate_scramble(n, seed)
    return apply_sequence(CubeState.solved(), scramble), scramble
