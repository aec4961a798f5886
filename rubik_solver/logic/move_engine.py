# rubik_solver/logic/move_engine.py
"""
Motor de movimientos basado en permutaciones de stickers.

Cada sticker se modela como un par (posición del cubie, normal). Un giro
horario de una cara es una rotación de -90° (regla de la mano derecha) sobre la
normal exterior de esa cara, aplicada a los stickers de su capa. De ahí sale,
una sola vez al importar el módulo, una permutación de los 54 índices por cada
uno de los 18 movimientos; aplicar un movimiento es sólo reindexar una tupla.
"""
from __future__ import annotations

from operator import itemgetter
from typing import Dict, Iterable, List, Sequence, Tuple

from rubik_solver.core.cube_state import (
    FACE_NORMAL,
    FACELET_GEOMETRY,
    FACES,
    GEOMETRY_TO_FACELET,
    Color,
    CubeState,
    Face,
    Vec3i,
)
from rubik_solver.core.errors import InvalidMoveToken
from rubik_solver.logic.moves import ALL_MOVES, Move

Permutation = Tuple[int, ...]


def _rot_x(v: Vec3i, turns: int) -> Vec3i:
    """Rota un vector 90°*turns alrededor de X (regla de la mano derecha)."""
    x, y, z = v
    turns %= 4
    if turns == 0:
        return (x, y, z)
    if turns == 1:
        return (x, -z, y)
    if turns == 2:
        return (x, -y, -z)
    return (x, z, -y)


def _rot_y(v: Vec3i, turns: int) -> Vec3i:
    """Rota un vector 90°*turns alrededor de Y (regla de la mano derecha)."""
    x, y, z = v
    turns %= 4
    if turns == 0:
        return (x, y, z)
    if turns == 1:
        return (z, y, -x)
    if turns == 2:
        return (-x, y, -z)
    return (-z, y, x)


def _rot_z(v: Vec3i, turns: int) -> Vec3i:
    """Rota un vector 90°*turns alrededor de Z (regla de la mano derecha)."""
    x, y, z = v
    turns %= 4
    if turns == 0:
        return (x, y, z)
    if turns == 1:
        return (-y, x, z)
    if turns == 2:
        return (-x, -y, z)
    return (y, -x, z)


_ROTATIONS = (_rot_x, _rot_y, _rot_z)


def _clockwise_perm(face: Face) -> Permutation:
    """Permutación del giro horario de `face`: nuevo[i] = viejo[perm[i]]."""
    normal = FACE_NORMAL[face]
    axis = next(k for k in range(3) if normal[k] != 0)
    layer = normal[axis]
    rotate = _ROTATIONS[axis]
    # Horario visto desde afuera = -90° sobre la normal exterior
    turns = -layer

    perm = list(range(54))
    for src, (pos, n) in enumerate(FACELET_GEOMETRY):
        if pos[axis] != layer:
            continue
        dest = GEOMETRY_TO_FACELET[(rotate(pos, turns), rotate(n, turns))]
        perm[dest] = src
    return tuple(perm)


def _compose(first: Permutation, then: Permutation) -> Permutation:
    """Permutación equivalente a aplicar `first` y luego `then`."""
    return tuple(first[i] for i in then)


def _build_tables() -> Dict[Move, Permutation]:
    tables: Dict[Move, Permutation] = {}
    for face in FACES:
        cw = _clockwise_perm(face)
        half = _compose(cw, cw)
        tables[Move(face, 1)] = cw
        tables[Move(face, 2)] = half
        tables[Move(face, 3)] = _compose(half, cw)
    return tables


MOVE_PERMS: Dict[Move, Permutation] = _build_tables()
MOVE_GETTERS: Dict[Move, itemgetter] = {m: itemgetter(*MOVE_PERMS[m]) for m in ALL_MOVES}


def face_cycles(face: Face) -> List[Tuple[int, ...]]:
    """Ciclos (índices planos) que recorre el giro horario de `face`.

    Cada ciclo `(a, b, c, d)` significa: el sticker en `a` pasa a `b`, el de
    `b` a `c`, etc. Un giro de cara da 5 ciclos de 4: esquinas y aristas de la
    propia cara, y 3 ciclos con los tríos de stickers de las caras vecinas.
    """
    perm = MOVE_PERMS[Move(face, 1)]
    dest_of = {src: dest for dest, src in enumerate(perm)}
    seen = set()
    cycles: List[Tuple[int, ...]] = []
    for start in range(54):
        if start in seen or dest_of[start] == start:
            continue
        cycle = []
        i = start
        while i not in seen:
            seen.add(i)
            cycle.append(i)
            i = dest_of[i]
        cycles.append(tuple(cycle))
    return cycles


def permute(flat: Sequence[Color], move: Move) -> Tuple[Color, ...]:
    """Aplica `move` a una tupla plana de 54 stickers (uso interno del solver).

    Raises:
        InvalidMoveToken: Si `move` no es uno de los 18 movimientos.
    """
    try:
        getter = MOVE_GETTERS[move]
    except (KeyError, TypeError):
        raise InvalidMoveToken(move) from None
    return getter(flat)


def _checked_flat(state: CubeState) -> Tuple[Color, ...]:
    flat = state.flat
    if len(flat) != 54:
        raise ValueError(f"Estado con {len(flat)} stickers, se esperaban 54")
    return flat


def apply_move(state: CubeState, move: Move) -> CubeState:
    """Aplica un movimiento y devuelve un estado nuevo.

    Args:
        state: Estado de partida (no se modifica).
        move: Uno de los 18 movimientos canónicos.

    Raises:
        InvalidMoveToken: Si `move` no es uno de los 18 movimientos.
    """
    return CubeState.from_flat(permute(_checked_flat(state), move))


def apply_sequence(state: CubeState, moves: Iterable[Move]) -> CubeState:
    """Aplica una secuencia de movimientos en orden (plegado de `apply_move`)."""
    flat = _checked_flat(state)
    for m in moves:
        flat = permute(flat, m)
    return CubeState.from_flat(flat)
