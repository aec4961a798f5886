# rubik_solver/solve/__init__.py
from rubik_solver.solve.iddfs_solver import SolveOptions, solve
from rubik_solver.solve.pruning import PruningTable, default_table
from rubik_solver.solve.verifier import verify, verify_notation

__all__ = ["SolveOptions", "solve", "PruningTable", "default_table", "verify", "verify_notation"]
