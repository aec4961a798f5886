# rubik_solver/solve/pruning.py
"""
Tablas de poda (pattern databases) para la heurística del IDDFS.

Un patrón conserva sólo un subconjunto de posiciones (todos los stickers de
esquina, o todos los de arista) y de ellas sólo marca cuáles tienen alguno de
ciertos colores. Los movimientos permutan posiciones, así que la proyección de
`mover(estado)` es `mover(proyección)`: la distancia BFS desde la proyección
del resuelto nunca supera la distancia real. El máximo entre varios patrones
sigue siendo una cota inferior admisible.
"""
from __future__ import annotations

import logging
import pickle
import threading
from dataclasses import dataclass
from operator import itemgetter
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

from rubik_solver.core.cube_state import COLORS_SOLVED, FACES, SOLVED_FLAT, Color
from rubik_solver.core.parity import CORNER_FACELETS, EDGE_FACELETS
from rubik_solver.logic.move_engine import MOVE_PERMS
from rubik_solver.logic.moves import ALL_MOVES

logger = logging.getLogger(__name__)

CORNER_POSITIONS: Tuple[int, ...] = tuple(sorted(i for g in CORNER_FACELETS for i in g))
EDGE_POSITIONS: Tuple[int, ...] = tuple(sorted(i for g in EDGE_FACELETS for i in g))

MARK = "x"
BLANK = "."


@dataclass(frozen=True)
class Pattern:
    """Proyección de un estado: posiciones observadas y colores marcados."""

    name: str
    positions: Tuple[int, ...]
    marked: FrozenSet[Color]


_UD = frozenset((COLORS_SOLVED["U"], COLORS_SOLVED["D"]))

DEFAULT_PATTERNS: Tuple[Pattern, ...] = (
    Pattern("corner-orientation", CORNER_POSITIONS, _UD),
    Pattern("corners-U", CORNER_POSITIONS, frozenset(COLORS_SOLVED["U"])),
    Pattern("corners-D", CORNER_POSITIONS, frozenset(COLORS_SOLVED["D"])),
) + tuple(
    Pattern(f"edges-{f}", EDGE_POSITIONS, frozenset(COLORS_SOLVED[f])) for f in FACES
)


class _Projector:
    def __init__(self, pattern: Pattern) -> None:
        self.getter = itemgetter(*pattern.positions)
        self.trans = str.maketrans(
            {c: (MARK if c in pattern.marked else BLANK) for c in COLORS_SOLVED.values()}
        )

    def __call__(self, flat: Sequence[Color]) -> str:
        return "".join(self.getter(flat)).translate(self.trans)


def build_distances(pattern: Pattern) -> Dict[str, int]:
    """BFS desde la proyección del cubo resuelto.

    Returns:
        Diccionario proyección -> cantidad mínima de movimientos (HTM).
    """
    slot = {p: k for k, p in enumerate(pattern.positions)}
    # Permutación de cada movimiento restringida a las posiciones del patrón
    sub_getters = [
        itemgetter(*(slot[MOVE_PERMS[m][p]] for p in pattern.positions)) for m in ALL_MOVES
    ]

    start = _Projector(pattern)(SOLVED_FLAT)
    dist: Dict[str, int] = {start: 0}
    frontier: List[str] = [start]
    depth = 0
    while frontier:
        depth += 1
        nxt: List[str] = []
        for key in frontier:
            for g in sub_getters:
                child = "".join(g(key))
                if child not in dist:
                    dist[child] = depth
                    nxt.append(child)
        frontier = nxt

    logger.debug("Patrón %s: %d estados, profundidad máxima %d", pattern.name, len(dist), depth - 1)
    return dist


class PruningTable:
    """Conjunto de patrones con sus distancias; sólo lectura tras construirse.

    Se puede compartir entre búsquedas concurrentes sin sincronización.
    """

    def __init__(
        self,
        patterns: Iterable[Pattern] = DEFAULT_PATTERNS,
        distances: Optional[Sequence[Dict[str, int]]] = None,
    ) -> None:
        self.patterns: Tuple[Pattern, ...] = tuple(patterns)
        if distances is None:
            distances = [build_distances(p) for p in self.patterns]
        if len(distances) != len(self.patterns):
            raise ValueError("Cantidad de tablas distinta a la de patrones")
        self.distances: Tuple[Dict[str, int], ...] = tuple(distances)
        self._lookups = [(_Projector(p), d) for p, d in zip(self.patterns, self.distances)]

    def estimate(self, flat: Sequence[Color]) -> int:
        """Cota inferior de movimientos hasta el resuelto.

        Una proyección que no figura en una tabla (estado inalcanzable) aporta 0.
        """
        best = 0
        for project, dist in self._lookups:
            d = dist.get(project(flat), 0)
            if d > best:
                best = d
        return best

    def sizes(self) -> Dict[str, int]:
        """Cantidad de proyecciones alcanzables por patrón.

        Returns:
            Diccionario nombre del patrón -> entradas de su tabla.
        """
        return {p.name: len(d) for p, d in zip(self.patterns, self.distances)}

    def __getstate__(self) -> dict:
        return {"patterns": self.patterns, "distances": self.distances}

    def __setstate__(self, state: dict) -> None:
        self.__init__(state["patterns"], state["distances"])

    def dump(self, path: Union[str, Path]) -> None:
        """Guarda la tabla en `path` con pickle para no reconstruirla.

        Args:
            path: Archivo de destino (se sobrescribe).
        """
        with open(path, "wb") as f:
            pickle.dump(self, f, protocol=pickle.HIGHEST_PROTOCOL)

    @classmethod
    def load(cls, path: Union[str, Path]) -> PruningTable:
        """Lee una tabla guardada con `dump`.

        Args:
            path: Archivo generado por `dump`.

        Returns:
            La tabla leída.

        Raises:
            ValueError: Si el archivo no contiene una `PruningTable`.
        """
        with open(path, "rb") as f:
            table = pickle.load(f)
        if not isinstance(table, cls):
            raise ValueError(f"{path} no contiene una tabla de poda")
        return table


_default: Optional[PruningTable] = None
_default_lock = threading.Lock()


def default_table() -> PruningTable:
    """Tabla con `DEFAULT_PATTERNS`, construida una sola vez por proceso."""
    global _default
    with _default_lock:
        if _default is None:
            logger.info("Construyendo tablas de poda...")
            _default = PruningTable()
            logger.info("Tablas de poda listas: %s", _default.sizes())
        return _default
