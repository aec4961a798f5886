# rubik_solver/solve/iddfs_solver.py
from __future__ import annotations

import logging
import multiprocessing
import time
from concurrent.futures import FIRST_COMPLETED, Future, ProcessPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple

from rubik_solver.config import CANCEL_CHECK_INTERVAL, DEFAULT_MAX_DEPTH, WORKER_POLL_INTERVAL
from rubik_solver.core.cube_state import FACES, SOLVED_FLAT, Color, CubeState, Face
from rubik_solver.core.errors import Cancelled, DepthExceeded, InternalInconsistency, InvalidState
from rubik_solver.core.parity import reachability_violations
from rubik_solver.logic.move_engine import MOVE_GETTERS
from rubik_solver.logic.moves import ALL_MOVES, OPPOSITE_FACE, Move, inverse_sequence
from rubik_solver.solve.pruning import PruningTable, default_table
from rubik_solver.solve.verifier import verify

logger = logging.getLogger(__name__)

Flat = Tuple[Color, ...]
OnDepthCallback = Callable[[int], None]
ShouldCancelCallback = Callable[[], bool]


@dataclass(frozen=True)
class SolveOptions:
    """Opciones de `solve`.

    Attributes:
        scramble: Scramble que generó el estado desde el resuelto. Si se da, se
            prueba primero su inversa (verificada); si no resuelve, se busca.
        timeout: Segundos máximos de búsqueda; al vencer se lanza `Cancelled`.
        should_cancel: Callback de cancelación (retorna True para cancelar).
        on_depth: Callback que recibe cada cota de profundidad probada.
        workers: Procesos para repartir las ramas de la raíz (1 = secuencial).
        use_pruning: Usar las tablas de poda como heurística (si no, h = 0/1).
        check_reachability: Rechazar estados inalcanzables antes de buscar.
        table: Tabla de poda ya construida (por defecto, `default_table()`).
    """

    scramble: Optional[Sequence[Move]] = None
    timeout: Optional[float] = None
    should_cancel: Optional[ShouldCancelCallback] = None
    on_depth: Optional[OnDepthCallback] = None
    workers: int = 1
    use_pruning: bool = True
    check_reachability: bool = True
    table: Optional[PruningTable] = None


def _build_successors() -> Dict[Optional[Face], Tuple[Tuple[Move, Any], ...]]:
    """Movimientos a expandir según la cara del último movimiento.

    Podas:
    - No repetir la misma cara (U luego U/U'/U2 se expresa como un solo giro).
    - Caras opuestas conmutan: sólo se expande el par en orden canónico (U D, no D U).
      La secuencia descartada tiene una equivalente anterior en el orden
      canónico, así que la primera solución encontrada no cambia.
    """
    table: Dict[Optional[Face], Tuple[Tuple[Move, Any], ...]] = {}
    for last in (None,) + FACES:
        allowed = []
        for mv in ALL_MOVES:
            if last is not None and mv.face == last:
                continue
            if last is not None and mv.face == OPPOSITE_FACE[last] and FACES.index(mv.face) < FACES.index(last):
                continue
            allowed.append((mv, MOVE_GETTERS[mv]))
        table[last] = tuple(allowed)
    return table


_SUCCESSORS = _build_successors()


class _BranchAbandoned(Exception):
    """Otra rama de la raíz ya tiene una solución anterior en el orden canónico."""


class _Search:
    """Contexto de una búsqueda IDDFS; vive lo que dura una llamada a `solve`."""

    def __init__(
        self,
        table: Optional[PruningTable],
        deadline: Optional[float] = None,
        should_cancel: Optional[ShouldCancelCallback] = None,
        stop: Any = None,
        branch: int = 0,
    ) -> None:
        self.table = table
        self.deadline = deadline
        self.should_cancel = should_cancel
        # Modo paralelo: índice de la mejor rama raíz con solución (-1 = cancelar)
        self.stop = stop
        self.branch = branch
        self.nodes = 0

    def heuristic(self, flat: Flat) -> int:
        """Cota inferior admisible de movimientos restantes."""
        if flat == SOLVED_FLAT:
            return 0
        if self.table is None:
            return 1
        return max(1, self.table.estimate(flat))

    def check_cancel(self) -> None:
        """Corta la búsqueda si se pidió cancelar o venció el tiempo.

        Raises:
            Cancelled: Por el callback de cancelación o por timeout.
            _BranchAbandoned: (modo paralelo) Si una rama anterior ya resolvió o se canceló todo.
        """
        if self.should_cancel is not None and self.should_cancel():
            raise Cancelled()
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise Cancelled("Tiempo de búsqueda agotado")
        if self.stop is not None and self.stop.value < self.branch:
            raise _BranchAbandoned()

    def dfs(
        self,
        flat: Flat,
        depth: int,
        bound: int,
        path: List[Move],
        seen_on_path: Set[Flat],
        last_face: Optional[Face],
    ) -> Optional[List[Move]]:
        """DFS limitado por `bound` con poda `depth + h(hijo) <= bound`.

        Args:
            flat: Estado actual (tupla plana de stickers).
            depth: Movimientos aplicados hasta ahora.
            bound: Cota de profundidad de esta iteración.
            path: Ruta acumulada (movimientos aplicados hasta ahora).
            seen_on_path: Estados de la rama actual (evita ciclos).
            last_face: Cara del último movimiento (para podas).

        Returns:
            La solución como lista de movimientos si se encuentra; si no, None.
        """
        if flat == SOLVED_FLAT:
            return list(path)

        self.nodes += 1
        if self.nodes % CANCEL_CHECK_INTERVAL == 0:
            self.check_cancel()

        for mv, getter in _SUCCESSORS[last_face]:
            child = getter(flat)
            if depth + 1 + self.heuristic(child) > bound:
                continue

            # Evitar ciclos dentro de la misma rama
            if child in seen_on_path:
                continue

            path.append(mv)
            seen_on_path.add(child)

            ans = self.dfs(child, depth + 1, bound, path, seen_on_path, mv.face)
            if ans is not None:
                return ans

            # Backtrack
            seen_on_path.remove(child)
            path.pop()

        return None

    def run(
        self,
        start: Flat,
        max_depth: int,
        on_depth: Optional[OnDepthCallback] = None,
        workers: int = 1,
    ) -> Optional[List[Move]]:
        """IDDFS: cotas max(1, h(start))..max_depth; devuelve la primera solución o None."""
        executor: Optional[ProcessPoolExecutor] = None
        stop: Any = None
        if workers > 1:
            ctx = multiprocessing.get_context()
            stop = ctx.Value("i", len(ALL_MOVES))
            executor = ProcessPoolExecutor(
                max_workers=workers,
                mp_context=ctx,
                initializer=_init_worker,
                initargs=(self.table, stop),
            )

        try:
            self.check_cancel()
            for depth_limit in range(max(1, self.heuristic(start)), max_depth + 1):
                self.check_cancel()

                if on_depth is not None:
                    on_depth(depth_limit)
                logger.debug("IDDFS: probando profundidad %d (%d nodos)", depth_limit, self.nodes)

                if executor is not None:
                    res = self._run_parallel_bound(executor, stop, start, depth_limit)
                else:
                    res = self.dfs(start, 0, depth_limit, [], {start}, None)
                if res is not None:
                    return res
            return None
        finally:
            if executor is not None:
                stop.value = -1
                executor.shutdown(wait=True, cancel_futures=True)

    def _run_parallel_bound(
        self,
        executor: ProcessPoolExecutor,
        stop: Any,
        start: Flat,
        bound: int,
    ) -> Optional[List[Move]]:
        """Reparte las ramas de la raíz entre los workers para una cota dada.

        Se devuelve la solución de la rama de menor índice, igual que en la
        búsqueda secuencial. Cuando una rama encuentra solución, las ramas
        posteriores se abandonan; las anteriores siguen hasta terminar.
        """
        stop.value = len(ALL_MOVES)
        futures: Dict[Future, int] = {
            executor.submit(_search_branch, start, k, bound): k
            for k, (mv, _getter) in enumerate(_SUCCESSORS[None])
        }
        found: Dict[int, List[Move]] = {}
        pending = set(futures)

        try:
            while pending:
                done, pending = wait(pending, timeout=WORKER_POLL_INTERVAL, return_when=FIRST_COMPLETED)
                for fut in done:
                    if fut.cancelled():
                        continue
                    res = fut.result()
                    if res is not None:
                        k = futures[fut]
                        found[k] = res
                        if k < stop.value:
                            stop.value = k

                if found:
                    best = min(found)
                    for fut in [f for f in pending if futures[f] > best]:
                        fut.cancel()
                        pending.discard(fut)

                self.check_cancel()
        except BaseException:
            stop.value = -1
            for fut in pending:
                fut.cancel()
            raise

        return found[min(found)] if found else None


# --------------------------
# Workers (modo paralelo)
# --------------------------
_worker_table: Optional[PruningTable] = None
_worker_stop: Any = None


def _init_worker(table: Optional[PruningTable], stop: Any) -> None:
    global _worker_table, _worker_stop
    _worker_table = table
    _worker_stop = stop


def _search_branch(start: Flat, branch: int, bound: int) -> Optional[List[Move]]:
    """Explora, dentro de un worker, el subárbol del movimiento raíz `branch`."""
    mv, getter = _SUCCESSORS[None][branch]
    search = _Search(_worker_table, stop=_worker_stop, branch=branch)
    child = getter(start)
    if 1 + search.heuristic(child) > bound:
        return None
    try:
        return search.dfs(child, 1, bound, [mv], {start, child}, mv.face)
    except _BranchAbandoned:
        return None


# --------------------------
# Public API
# --------------------------
def solve(
    state: CubeState,
    max_depth: int = DEFAULT_MAX_DEPTH,
    options: Optional[SolveOptions] = None,
) -> List[Move]:
    """Busca una secuencia de movimientos que lleve `state` al cubo resuelto.

    El algoritmo es IDDFS (búsqueda en profundidad iterativa) con una cota
    inferior admisible (tablas de poda) para cortar ramas, de modo que la
    solución devuelta es la más corta y, entre las más cortas, la primera en
    el orden canónico de movimientos (U, U', U2, D, ..., B2).

    Args:
        state: Cubo a resolver.
        max_depth: Profundidad máxima que se probará en la búsqueda.
        options: Opciones adicionales (scramble conocido, cancelación, workers...).

    Returns:
        Lista de movimientos, verificada. Vacía si el cubo ya está resuelto.

    Raises:
        InvalidState: Si el estado viola algún invariante (o es inalcanzable).
        DepthExceeded: Si no hay solución con a lo sumo `max_depth` movimientos.
        Cancelled: Si el callback de cancelación o el timeout cortan la búsqueda.
        InternalInconsistency: Si la solución encontrada no verifica.
    """
    opts = options or SolveOptions()

    violations = state.validate()
    if violations:
        raise InvalidState(violations)

    if state.is_solved():
        return []

    if opts.scramble is not None:
        candidate = inverse_sequence(opts.scramble)
        if verify(state, candidate):
            logger.debug("Solución tomada del scramble (%d movimientos)", len(candidate))
            return candidate
        logger.warning("El scramble no corresponde al estado actual; se busca una solución")

    if opts.check_reachability:
        violations = reachability_violations(state)
        if violations:
            raise InvalidState(violations)

    # El plazo corre desde antes de construir las tablas de poda
    deadline = None
    if opts.timeout is not None:
        deadline = time.monotonic() + opts.timeout

    table = opts.table
    if table is None and opts.use_pruning:
        table = default_table()

    search = _Search(table, deadline, opts.should_cancel)
    moves = search.run(state.flat, max_depth, opts.on_depth, opts.workers)
    if moves is None:
        raise DepthExceeded(max_depth)

    # Postcondición: nunca se devuelve una solución sin verificar
    if not verify(state, moves):
        raise InternalInconsistency(moves)

    logger.info("Solución de %d movimientos (%d nodos expandidos)", len(moves), search.nodes)
    return moves
