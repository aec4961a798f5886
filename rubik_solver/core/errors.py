# rubik_solver/core/errors.py
from __future__ import annotations

from typing import Any, List, Optional, Sequence


class CubeError(Exception):
    """Error base de todo el paquete."""


class InvalidNotation(CubeError, ValueError):
    """Texto de notación mal formado.

    Attributes:
        token: Token ofensivo, tal como aparece en la entrada.
        position: Posición (base 0) del token dentro de la secuencia.
    """

    def __init__(self, token: str, position: int) -> None:
        super().__init__(f"Token inválido {token!r} en la posición {position}")
        self.token = token
        self.position = position


class InvalidMoveToken(CubeError, ValueError):
    """Movimiento fuera del conjunto canónico de 18."""

    def __init__(self, move: Any) -> None:
        super().__init__(f"Movimiento no soportado: {move!r}")
        self.move = move


class SolveError(CubeError):
    """Error base del solver."""


class InvalidState(SolveError):
    """El estado no cumple los invariantes; el solver no busca."""

    def __init__(self, violations: Sequence[str]) -> None:
        self.violations: List[str] = list(violations)
        super().__init__("Estado inválido: " + "; ".join(self.violations))


class DepthExceeded(SolveError):
    """No hay solución con a lo sumo `max_depth` movimientos."""

    def __init__(self, max_depth: int) -> None:
        super().__init__(f"Sin solución hasta profundidad {max_depth}")
        self.max_depth = max_depth


class Cancelled(SolveError):
    """Búsqueda cancelada por el llamador (callback o timeout)."""

    def __init__(self, message: str = "Búsqueda cancelada") -> None:
        super().__init__(message)


class InternalInconsistency(SolveError):
    """La solución encontrada no pasó la verificación final.

    Indica un bug del motor de movimientos o de la búsqueda; nunca se
    reemplaza por una solución inventada.
    """

    def __init__(self, moves: Optional[Sequence[Any]] = None) -> None:
        self.moves = list(moves) if moves is not None else []
        super().__init__(
            f"La solución encontrada no resuelve el cubo ({len(self.moves)} movimientos)"
        )
