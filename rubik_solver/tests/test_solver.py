import time
import unittest
from unittest import mock

from rubik_solver.core import Cancelled, CubeState, DepthExceeded, InternalInconsistency, InvalidState
from rubik_solver.core.parity import CORNER_FACELETS
from rubik_solver.logic.move_engine import apply_sequence
from rubik_solver.logic.moves import inverse_sequence
from rubik_solver.logic.notation import parse_sequence
from rubik_solver.logic.scramble import generate_scramble, scrambled_state
from rubik_solver.solve.iddfs_solver import SolveOptions, solve
from rubik_solver.solve.pruning import default_table
from rubik_solver.solve.verifier import verify


def _state(text):
    return apply_sequence(CubeState.solved(), parse_sequence(text))


def _twisted_corner():
    flat = list(_state("R U").flat)
    a, b, c = CORNER_FACELETS[0]
    flat[a], flat[b], flat[c] = flat[c], flat[a], flat[b]
    return CubeState.from_flat(flat)


class TestSolver(unittest.TestCase):
    def test_solver_small_scramble(self):
        c = _state("R U R' U'")
        sol = solve(c, max_depth=6)
        self.assertLessEqual(len(sol), 4)
        self.assertTrue(apply_sequence(c, sol).is_solved())

    def test_solved_input_returns_empty(self):
        depths = []
        self.assertEqual(solve(CubeState.solved(), options=SolveOptions(on_depth=depths.append)), [])
        self.assertEqual(depths, [])

    def test_single_move(self):
        self.assertEqual(solve(_state("R")), parse_sequence("R'"))
        self.assertEqual(solve(_state("F2")), parse_sequence("F2"))

    def test_two_moves(self):
        self.assertEqual(solve(_state("R U")), parse_sequence("U' R'"))

    def test_five_move_scramble(self):
        c = _state("R U2 F' L D'")
        sol = solve(c)
        self.assertLessEqual(len(sol), 5)
        self.assertTrue(verify(c, sol))

    def test_depth_callback_starts_at_lower_bound(self):
        c = _state("R U")
        depths = []
        solve(c, options=SolveOptions(on_depth=depths.append))
        first = max(1, default_table().estimate(c.flat))
        self.assertLessEqual(first, 2)
        self.assertEqual(depths, list(range(first, 3)))

    def test_depth_callback_without_pruning_starts_at_one(self):
        depths = []
        solve(_state("R U F"), options=SolveOptions(on_depth=depths.append, use_pruning=False))
        self.assertEqual(depths, [1, 2, 3])

    def test_bounds_below_lower_bound_are_skipped(self):
        c, _ = scrambled_state(25, seed=7)
        h = default_table().estimate(c.flat)
        self.assertGreater(h, 1)
        depths = []
        with self.assertRaises(DepthExceeded):
            solve(c, max_depth=h - 1, options=SolveOptions(on_depth=depths.append))
        self.assertEqual(depths, [])

    def test_deterministic(self):
        c = _state("L F' U2 B")
        self.assertEqual(solve(c), solve(c))

    def test_without_pruning(self):
        c = _state("R U R'")
        sol = solve(c, max_depth=4, options=SolveOptions(use_pruning=False))
        self.assertEqual(len(sol), 3)
        self.assertTrue(verify(c, sol))

    def test_trusted_scramble(self):
        for seed in range(5):
            for n in (5, 17, 25):
                scramble = generate_scramble(n, seed=seed)
                c = apply_sequence(CubeState.solved(), scramble)
                sol = solve(c, options=SolveOptions(scramble=scramble))
                self.assertEqual(sol, inverse_sequence(scramble))
                self.assertTrue(verify(c, sol))

    def test_stale_scramble_falls_back_to_search(self):
        c = _state("R U")
        with self.assertLogs("rubik_solver.solve.iddfs_solver", level="WARNING"):
            sol = solve(c, options=SolveOptions(scramble=parse_sequence("F")))
        self.assertEqual(len(sol), 2)
        self.assertTrue(verify(c, sol))

    def test_depth_exceeded(self):
        with self.assertRaises(DepthExceeded) as ctx:
            solve(_state("R U F"), max_depth=1)
        self.assertEqual(ctx.exception.max_depth, 1)

    def test_invalid_state(self):
        flat = list(CubeState.solved().flat)
        flat[0] = "Y"
        with self.assertRaises(InvalidState) as ctx:
            solve(CubeState.from_flat(flat))
        self.assertEqual(len(ctx.exception.violations), 2)

    def test_unreachable_state(self):
        with self.assertRaises(InvalidState):
            solve(_twisted_corner())

    def test_unreachable_state_without_check_terminates(self):
        options = SolveOptions(check_reachability=False)
        with self.assertRaises(DepthExceeded):
            solve(_twisted_corner(), max_depth=3, options=options)

    def test_cancel_callback(self):
        with self.assertRaises(Cancelled):
            solve(_state("R U"), options=SolveOptions(should_cancel=lambda: True))

    def test_timeout(self):
        with self.assertRaises(Cancelled):
            solve(_state("R U F D"), options=SolveOptions(timeout=0))

    def test_timeout_counts_table_build(self):
        table = default_table()

        def slow_build():
            time.sleep(0.2)
            return table

        with mock.patch("rubik_solver.solve.iddfs_solver.default_table", side_effect=slow_build):
            with self.assertRaises(Cancelled):
                solve(_state("R"), options=SolveOptions(timeout=0.1))

    def test_cancel_requested_during_table_build(self):
        table = default_table()
        requested = []

        def build_and_cancel():
            requested.append(True)
            return table

        options = SolveOptions(should_cancel=lambda: bool(requested))
        with mock.patch("rubik_solver.solve.iddfs_solver.default_table", side_effect=build_and_cancel):
            with self.assertRaises(Cancelled):
                solve(_state("R"), options=options)

    def test_failed_postcondition_is_reported(self):
        with mock.patch("rubik_solver.solve.iddfs_solver.verify", return_value=False):
            with self.assertRaises(InternalInconsistency):
                solve(_state("R"))

    def test_parallel_matches_sequential(self):
        c = _state("R U2 F'")
        expected = solve(c)
        self.assertEqual(solve(c, options=SolveOptions(workers=2)), expected)

    def test_parallel_depth_exceeded(self):
        with self.assertRaises(DepthExceeded):
            solve(_state("R U F"), max_depth=2, options=SolveOptions(workers=2))

    def test_parallel_timeout(self):
        default_table()
        c, _ = scrambled_state(25, seed=7)
        start = time.monotonic()
        with self.assertRaises(Cancelled):
            solve(c, options=SolveOptions(workers=2, timeout=0.5))
        self.assertLess(time.monotonic() - start, 15)

    def test_parallel_cancel_stops_workers(self):
        default_table()
        c, _ = scrambled_state(25, seed=7)
        depths = []
        options = SolveOptions(
            workers=2,
            on_depth=depths.append,
            should_cancel=lambda: bool(depths),
        )
        start = time.monotonic()
        with self.assertRaises(Cancelled):
            solve(c, options=options)
        self.assertLess(time.monotonic() - start, 15)
        self.assertEqual(len(depths), 1)


if __name__ == "__main__":
    unittest.main()
