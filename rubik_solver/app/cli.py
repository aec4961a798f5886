# rubik_solver/app/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from rubik_solver.config import DEFAULT_MAX_DEPTH, DEFAULT_SCRAMBLE_LENGTH
from rubik_solver.core.cube_state import CubeState
from rubik_solver.core.errors import CubeError, InvalidState, SolveError
from rubik_solver.logic.move_engine import apply_sequence
from rubik_solver.logic.moves import Move
from rubik_solver.logic.notation import format_sequence, parse_sequence
from rubik_solver.logic.scramble import generate_scramble
from rubik_solver.solve.iddfs_solver import SolveOptions, solve
from rubik_solver.solve.pruning import PruningTable
from rubik_solver.solve.verifier import verify

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    """Arma el parser de la línea de comandos.

    Returns:
        Parser con los subcomandos `scramble`, `solve` y `verify`.
    """
    parser = argparse.ArgumentParser(prog="rubik-solver", description="Motor de movimientos y solver del cubo Rubik 3x3")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log en nivel DEBUG")
    sub = parser.add_subparsers(dest="command", required=True)

    p_scr = sub.add_parser("scramble", help="Genera un scramble aleatorio")
    p_scr.add_argument("-n", "--length", type=int, default=DEFAULT_SCRAMBLE_LENGTH)
    p_scr.add_argument("--seed", type=int, default=None)
    p_scr.add_argument("--net", action="store_true", help="Dibuja también el cubo mezclado")

    p_solve = sub.add_parser("solve", help="Resuelve el cubo mezclado con una secuencia")
    p_solve.add_argument("sequence", nargs="?", default="", help="Scramble aplicado al cubo resuelto, ej: \"R U2 F' L D'\"")
    p_solve.add_argument("--facelets", help="Estado como 54 letras de color (orden U D L R F B)")
    p_solve.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH)
    p_solve.add_argument("--timeout", type=float, default=None, help="Segundos máximos de búsqueda")
    p_solve.add_argument("--workers", type=int, default=1)
    p_solve.add_argument("--trust-scramble", action="store_true", help="Probar primero la inversa del scramble")
    p_solve.add_argument("--no-pruning", action="store_true", help="Buscar sin tablas de poda")
    p_solve.add_argument("--table-cache", type=Path, default=None, help="Archivo donde guardar/leer las tablas de poda")

    p_ver = sub.add_parser("verify", help="Verifica que una solución resuelva un scramble")
    p_ver.add_argument("sequence", help="Scramble aplicado al cubo resuelto")
    p_ver.add_argument("solution", help="Solución a verificar")
    return parser


def _load_table(path: Optional[Path]) -> Optional[PruningTable]:
    if path is None:
        return None
    if path.exists():
        logger.info("Leyendo tablas de poda de %s", path)
        return PruningTable.load(path)
    table = PruningTable()
    table.dump(path)
    logger.info("Tablas de poda guardadas en %s", path)
    return table


def _cmd_scramble(args: argparse.Namespace) -> int:
    scramble = generate_scramble(args.length, args.seed)
    print(format_sequence(scramble))
    if args.net:
        print(apply_sequence(CubeState.solved(), scramble).to_net())
    return EXIT_OK


def _cmd_solve(args: argparse.Namespace) -> int:
    scramble: List[Move] = []
    if args.facelets:
        state = CubeState.from_string(args.facelets)
    else:
        scramble = parse_sequence(args.sequence)
        state = apply_sequence(CubeState.solved(), scramble)

    options = SolveOptions(
        scramble=scramble if (args.trust_scramble and scramble) else None,
        timeout=args.timeout,
        workers=args.workers,
        use_pruning=not args.no_pruning,
        table=None if args.no_pruning else _load_table(args.table_cache),
    )
    try:
        moves = solve(state, args.max_depth, options)
    except InvalidState as exc:
        print(f"Estado inválido: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT
    except SolveError as exc:
        print(f"Sin solución: {exc}", file=sys.stderr)
        return EXIT_FAILED

    print(format_sequence(moves))
    return EXIT_OK


def _cmd_verify(args: argparse.Namespace) -> int:
    state = apply_sequence(CubeState.solved(), parse_sequence(args.sequence))
    ok = verify(state, parse_sequence(args.solution))
    print("OK" if ok else "NO RESUELVE")
    return EXIT_OK if ok else EXIT_FAILED


COMMANDS = {
    "scramble": _cmd_scramble,
    "solve": _cmd_solve,
    "verify": _cmd_verify,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Punto de entrada de la línea de comandos.

    Returns:
        Código de salida: 0 éxito, 1 sin solución / no verifica, 2 entrada inválida.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        return COMMANDS[args.command](args)
    except (CubeError, ValueError) as exc:
        print(f"Entrada inválida: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT
