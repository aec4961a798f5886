# rubik_solver/app/solve_worker.py
from __future__ import annotations

import traceback
from typing import List, Optional, Sequence

from PySide6.QtCore import QThread, Signal

from rubik_solver.config import DEFAULT_MAX_DEPTH
from rubik_solver.core.cube_state import CubeState
from rubik_solver.core.errors import SolveError
from rubik_solver.logic.moves import Move
from rubik_solver.solve.iddfs_solver import SolveOptions, solve


class SolveWorker(QThread):
    """Hilo de trabajo para buscar una solución del cubo sin bloquear la UI.

    Ejecuta `solve` sobre el estado recibido (inmutable, no hace falta copiarlo)
    y publica progreso y resultado por señales. La cancelación se pide con
    `requestInterruption()`.

    Signals:
        depth_update(int): Se emite con cada cota de profundidad probada.
        finished_solution(object): Se emite con la solución (list[Move]).
        failed(object): Se emite con el `SolveError` si la búsqueda no tuvo éxito
            (estado inválido, profundidad agotada, cancelación...).
        error(str): Se emite con el traceback si ocurre una excepción inesperada.
    """

    depth_update = Signal(int)          # profundidad actual
    finished_solution = Signal(object)  # list[Move]
    failed = Signal(object)             # SolveError
    error = Signal(str)                 # traceback si algo falla

    def __init__(
        self,
        state: CubeState,
        max_depth: int = DEFAULT_MAX_DEPTH,
        scramble: Optional[Sequence[Move]] = None,
        timeout: Optional[float] = None,
        workers: int = 1,
    ) -> None:
        """Crea el worker.

        Args:
            state: Estado del cubo a resolver.
            max_depth: Profundidad máxima permitida para la búsqueda IDDFS.
            scramble: Scramble que produjo el estado, si se conoce.
            timeout: Segundos máximos de búsqueda.
            workers: Procesos para la búsqueda en paralelo.
        """
        super().__init__()
        self.state: CubeState = state
        self.max_depth: int = max_depth
        self.scramble: Optional[List[Move]] = list(scramble) if scramble is not None else None
        self.timeout: Optional[float] = timeout
        self.workers: int = workers

    def run(self) -> None:
        """Punto de entrada del hilo.

        Llama al solver y emite el resultado por señales.
        """
        options = SolveOptions(
            scramble=self.scramble,
            timeout=self.timeout,
            should_cancel=self.isInterruptionRequested,
            on_depth=self.depth_update.emit,
            workers=self.workers,
        )
        try:
            sol = solve(self.state, self.max_depth, options)
        except SolveError as exc:
            self.failed.emit(exc)
        except Exception:
            msg = traceback.format_exc()
            self.error.emit(msg)
        else:
            self.finished_solution.emit(sol)
