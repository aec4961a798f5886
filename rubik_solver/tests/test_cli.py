import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from rubik_solver.app.cli import EXIT_BAD_INPUT, EXIT_FAILED, EXIT_OK, main
from rubik_solver.core import CubeState
from rubik_solver.logic.move_engine import apply_sequence
from rubik_solver.logic.notation import parse_sequence
from rubik_solver.solve.verifier import verify


def _run(*argv):
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = main(list(argv))
    return code, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):
    def test_scramble(self):
        code, out, _ = _run("scramble", "-n", "10", "--seed", "3")
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(len(out.split()), 10)
        self.assertEqual(_run("scramble", "-n", "10", "--seed", "3")[1], out)

    def test_scramble_net(self):
        code, out, _ = _run("scramble", "-n", "0", "--net")
        self.assertEqual(code, EXIT_OK)
        self.assertIn("W W W", out)

    def test_solve(self):
        code, out, _ = _run("solve", "R U2 F'")
        self.assertEqual(code, EXIT_OK)
        state = apply_sequence(CubeState.solved(), parse_sequence("R U2 F'"))
        self.assertTrue(verify(state, parse_sequence(out)))

    def test_solve_facelets(self):
        state = apply_sequence(CubeState.solved(), parse_sequence("L D"))
        code, out, _ = _run("solve", "--facelets", state.to_string())
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out.strip(), "D' L'")

    def test_solve_bad_notation(self):
        code, _, err = _run("solve", "R U X")
        self.assertEqual(code, EXIT_BAD_INPUT)
        self.assertIn("X", err)

    def test_solve_invalid_facelets(self):
        code, _, _ = _run("solve", "--facelets", "W" * 54)
        self.assertEqual(code, EXIT_BAD_INPUT)

    def test_solve_depth_exceeded(self):
        code, _, _ = _run("solve", "R U F", "--max-depth", "1")
        self.assertEqual(code, EXIT_FAILED)

    def test_solve_with_table_cache(self):
        with tempfile.TemporaryDirectory() as tmp:
            cache = Path(tmp) / "tables.pkl"
            self.assertEqual(_run("solve", "R U", "--table-cache", str(cache))[0], EXIT_OK)
            self.assertTrue(cache.exists())
            code, out, _ = _run("solve", "R U", "--table-cache", str(cache))
            self.assertEqual(code, EXIT_OK)
            self.assertEqual(out.strip(), "U' R'")

    def test_verify(self):
        self.assertEqual(_run("verify", "R U", "U' R'")[0], EXIT_OK)
        code, out, _ = _run("verify", "R U", "R' U'")
        self.assertEqual(code, EXIT_FAILED)
        self.assertIn("NO RESUELVE", out)


if __name__ == "__main__":
    unittest.main()
