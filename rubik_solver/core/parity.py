# rubik_solver/core/parity.py
"""
Chequeo de alcanzabilidad a nivel de cubies.

Los stickers se agrupan en 8 esquinas y 12 aristas a partir de la misma
geometría (posición, normal) que usan las tablas de movimientos. Un estado
estructuralmente válido es alcanzable sólo si:

- cada cubie existe en el cubo resuelto y aparece una sola vez,
- la suma de giros de las esquinas es 0 (mod 3),
- la suma de volteos de las aristas es 0 (mod 2),
- las paridades de las permutaciones de esquinas y aristas coinciden.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, FrozenSet, List, Sequence, Tuple

from rubik_solver.core.cube_state import (
    COLORS_SOLVED,
    FACELET_GEOMETRY,
    SOLVED_FLAT,
    Color,
    CubeState,
    Vec3i,
)

_UD_COLORS = frozenset((COLORS_SOLVED["U"], COLORS_SOLVED["D"]))


def _det(a: Vec3i, b: Vec3i, c: Vec3i) -> int:
    return (
        a[0] * (b[1] * c[2] - b[2] * c[1])
        - a[1] * (b[0] * c[2] - b[2] * c[0])
        + a[2] * (b[0] * c[1] - b[1] * c[0])
    )


def _order_corner(idxs: Sequence[int]) -> Tuple[int, int, int]:
    """Ordena los 3 stickers de una esquina: primero el U/D, luego en sentido horario."""
    ref = next(i for i in idxs if FACELET_GEOMETRY[i][1][1] != 0)
    a, b = [i for i in idxs if i != ref]
    n_ref, n_a, n_b = (FACELET_GEOMETRY[i][1] for i in (ref, a, b))
    if _det(n_ref, n_a, n_b) != -1:
        a, b = b, a
    return (ref, a, b)


def _order_edge(idxs: Sequence[int]) -> Tuple[int, int]:
    """Ordena los 2 stickers de una arista: primero el de referencia (U/D, o F/B en la capa E)."""
    axis = 1 if any(FACELET_GEOMETRY[i][1][1] != 0 for i in idxs) else 2
    ref = next(i for i in idxs if FACELET_GEOMETRY[i][1][axis] != 0)
    other = next(i for i in idxs if i != ref)
    return (ref, other)


def _build_cubies() -> Tuple[Tuple[Tuple[int, ...], ...], Tuple[Tuple[int, ...], ...]]:
    by_pos: Dict[Vec3i, List[int]] = defaultdict(list)
    for idx, (pos, _normal) in enumerate(FACELET_GEOMETRY):
        by_pos[pos].append(idx)

    corners: List[Tuple[int, ...]] = []
    edges: List[Tuple[int, ...]] = []
    for pos in sorted(by_pos):
        idxs = by_pos[pos]
        if len(idxs) == 3:
            corners.append(_order_corner(idxs))
        elif len(idxs) == 2:
            edges.append(_order_edge(idxs))
    return tuple(corners), tuple(edges)


# Grupos de stickers (índices planos) por cubie, en orden fijo
CORNER_FACELETS, EDGE_FACELETS = _build_cubies()


def _home_table(groups: Sequence[Tuple[int, ...]]) -> Dict[FrozenSet[Color], Tuple[int, Tuple[Color, ...]]]:
    table = {}
    for k, group in enumerate(groups):
        colors = tuple(SOLVED_FLAT[i] for i in group)
        table[frozenset(colors)] = (k, colors)
    return table


_CORNER_HOME = _home_table(CORNER_FACELETS)
_EDGE_HOME = _home_table(EDGE_FACELETS)


def _parity(perm: Sequence[int]) -> int:
    seen = [False] * len(perm)
    cycles = 0
    for start in range(len(perm)):
        if seen[start]:
            continue
        cycles += 1
        j = start
        while not seen[j]:
            seen[j] = True
            j = perm[j]
    return (len(perm) - cycles) % 2


def reachability_violations(state: CubeState) -> List[str]:
    """Lista los motivos por los que `state` no es alcanzable desde el resuelto.

    Si el estado ya falla `validate`, se devuelven esas violaciones (no tiene
    sentido descomponerlo en cubies).

    Returns:
        Lista vacía si el estado es alcanzable.
    """
    violations = state.validate()
    if violations:
        return violations

    flat = state.flat
    corner_perm: List[int] = []
    twist = 0
    for k, group in enumerate(CORNER_FACELETS):
        colors = tuple(flat[i] for i in group)
        home = _CORNER_HOME.get(frozenset(colors))
        if home is None:
            violations.append(f"Esquina inexistente {''.join(colors)} en la posición {k}")
            continue
        ori = next((j for j, c in enumerate(colors) if c in _UD_COLORS), 0)
        if colors[ori:] + colors[:ori] != home[1]:
            violations.append(f"Esquina espejada {''.join(colors)} en la posición {k}")
            continue
        corner_perm.append(home[0])
        twist += ori

    edge_perm: List[int] = []
    flip = 0
    for k, group in enumerate(EDGE_FACELETS):
        colors = tuple(flat[i] for i in group)
        home = _EDGE_HOME.get(frozenset(colors))
        if home is None:
            violations.append(f"Arista inexistente {''.join(colors)} en la posición {k}")
            continue
        edge_perm.append(home[0])
        flip += 0 if colors[0] == home[1][0] else 1

    if violations:
        return violations

    if len(set(corner_perm)) != len(corner_perm):
        violations.append("Hay esquinas repetidas")
    if len(set(edge_perm)) != len(edge_perm):
        violations.append("Hay aristas repetidas")
    if violations:
        return violations

    if twist % 3:
        violations.append(f"Suma de giros de esquinas {twist} no es múltiplo de 3")
    if flip % 2:
        violations.append(f"Suma de volteos de aristas {flip} es impar")
    if _parity(corner_perm) != _parity(edge_perm):
        violations.append("Las paridades de esquinas y aristas no coinciden")
    return violations


def is_reachable(state: CubeState) -> bool:
    """Indica si `state` se puede obtener girando caras desde el cubo resuelto.

    Returns:
        True si no hay violaciones estructurales ni de paridad.
    """
    return not reachability_violations(state)
