# rubik_solver/core/__init__.py
from rubik_solver.core.cube_state import COLORS_SOLVED, FACES, CubeState
from rubik_solver.core.errors import (
    Cancelled,
    CubeError,
    DepthExceeded,
    InternalInconsistency,
    InvalidMoveToken,
    InvalidNotation,
    InvalidState,
    SolveError,
)
from rubik_solver.core.parity import is_reachable, reachability_violations

__all__ = [
    "COLORS_SOLVED",
    "FACES",
    "CubeState",
    "Cancelled",
    "CubeError",
    "DepthExceeded",
    "InternalInconsistency",
    "InvalidMoveToken",
    "InvalidNotation",
    "InvalidState",
    "SolveError",
    "is_reachable",
    "reachability_violations",
]
