import dataclasses
import unittest

from rubik_solver.core import COLORS_SOLVED, FACES, CubeState
from rubik_solver.logic.move_engine import apply_move, apply_sequence
from rubik_solver.logic.moves import Move
from rubik_solver.logic.notation import parse_sequence


def _solved_faces():
    return {f: [COLORS_SOLVED[f]] * 9 for f in FACES}


class TestCubeState(unittest.TestCase):
    def test_solved_is_valid_and_solved(self):
        c = CubeState.solved()
        self.assertTrue(c.is_solved())
        self.assertEqual(c.validate(), [])
        self.assertEqual(len(c.flat), 54)
        self.assertEqual(c.face("F"), ("G",) * 9)
        self.assertEqual(c.face("U"), ("W",) * 9)

    def test_equality_is_structural(self):
        a = apply_sequence(CubeState.solved(), parse_sequence("R U"))
        b = apply_sequence(CubeState.solved(), parse_sequence("R U"))
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a, CubeState.solved())

    def test_to_hashable_keys_by_content(self):
        a = apply_sequence(CubeState.solved(), parse_sequence("R U"))
        seen = {a.to_hashable(): "R U"}
        b = CubeState.from_string(a.to_string())
        self.assertEqual(seen[b.to_hashable()], "R U")
        self.assertEqual(len(a.to_hashable()), 6)
        self.assertEqual(a.to_hashable()[FACES.index("F")], a.face("F"))

    def test_state_is_immutable(self):
        c = CubeState.solved()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            c.faces = ()

    def test_from_faces_matches_solved(self):
        self.assertEqual(CubeState.from_faces(_solved_faces()), CubeState.solved())

    def test_string_round_trip(self):
        c = apply_sequence(CubeState.solved(), parse_sequence("R U2 F' L D'"))
        self.assertEqual(CubeState.from_string(c.to_string()), c)

    def test_from_flat_requires_54(self):
        with self.assertRaises(ValueError):
            CubeState.from_flat(["W"] * 53)

    def test_missing_face_is_reported(self):
        faces = _solved_faces()
        del faces["L"]
        violations = CubeState.from_faces(faces).validate()
        self.assertTrue(any("L" in v for v in violations))
        self.assertTrue(violations)

    def test_short_face_is_reported(self):
        faces = _solved_faces()
        faces["U"] = ["W"] * 8
        violations = CubeState.from_faces(faces).validate()
        # 8 stickers en U, y el blanco aparece 8 veces
        self.assertEqual(len(violations), 2)

    def test_wrong_color_count_is_reported(self):
        faces = _solved_faces()
        faces["U"][0] = "Y"
        violations = CubeState.from_faces(faces).validate()
        # blanco 8 veces, amarillo 10 veces
        self.assertEqual(len(violations), 2)

    def test_unknown_color_is_reported(self):
        faces = _solved_faces()
        faces["U"][0] = "X"
        violations = CubeState.from_faces(faces).validate()
        self.assertEqual(len(violations), 2)
        self.assertTrue(any("'X'" in v for v in violations))

    def test_swapped_centers_are_reported(self):
        faces = _solved_faces()
        faces["U"][4], faces["D"][4] = "Y", "W"
        violations = CubeState.from_faces(faces).validate()
        self.assertEqual(len(violations), 2)

    def test_fingerprint(self):
        solved = CubeState.solved()
        moved = apply_move(solved, Move("R", 1))
        self.assertEqual(solved.fingerprint(), CubeState.solved().fingerprint())
        self.assertNotEqual(solved.fingerprint(), moved.fingerprint())
        self.assertLessEqual(moved.fingerprint().bit_length(), 162)

    def test_fingerprint_is_total(self):
        faces = _solved_faces()
        faces["U"] = ["X"] * 3
        self.assertIsInstance(CubeState.from_faces(faces).fingerprint(), int)

    def test_to_net(self):
        net = CubeState.solved().to_net().splitlines()
        self.assertEqual(len(net), 9)
        self.assertEqual(net[0].strip(), "W W W")
        self.assertEqual(net[3], "O O O G G G R R R B B B")


if __name__ == "__main__":
    unittest.main()
