import unittest
from collections import Counter

from cuboard.cube import (
    SOLVED_FACELETS, Axis, CenterOrientation, Corner, CornerOrientation, CornerPosition, CubeMove,
    CubeState, CubeStateRaw, Edge, EdgeOrientation, EdgePosition, InvalidCubeState, format_moves,
)


class TestPieceOrientation(unittest.TestCase):
    def test_arithmetic_wraps(self):
        self.assertEqual(CornerOrientation(2) + CornerOrientation(2), CornerOrientation(1))
        self.assertEqual(-CornerOrientation(1), CornerOrientation(2))
        self.assertEqual(EdgeOrientation(1) + EdgeOrientation(1), EdgeOrientation(0))
        self.assertEqual(CenterOrientation(1) - CenterOrientation(3), CenterOrientation(2))

    def test_total_and_balancing(self):
        twists = [CornerOrientation(1), CornerOrientation(1)]
        self.assertEqual(CornerOrientation.total(twists), CornerOrientation(2))
        self.assertEqual(CornerOrientation.balancing(twists), CornerOrientation(1))
        self.assertEqual(EdgeOrientation.balancing([]), EdgeOrientation(0))

    def test_out_of_range(self):
        with self.assertRaises(ValueError):
            CornerOrientation(3)
        with self.assertRaises(ValueError):
            EdgeOrientation(-1)

    def test_kinds_do_not_mix(self):
        self.assertNotEqual(CornerOrientation(1), EdgeOrientation(1))
        with self.assertRaises(TypeError):
            CornerOrientation(1) + EdgeOrientation(1)


class TestPieces(unittest.TestCase):
    def test_show_reads_twisted_stickers(self):
        self.assertEqual(Corner(CornerPosition.UFR).show(), "UFR")
        self.assertEqual(Corner(CornerPosition.UFR, CornerOrientation(1)).show(), "FRU")
        self.assertEqual(Corner(CornerPosition.DLB, CornerOrientation(2)).show(), "BDL")
        self.assertEqual(Edge(EdgePosition.UR, EdgeOrientation(1)).show(), "RU")


class TestCubeState(unittest.TestCase):
    def test_solved(self):
        state = CubeState.solved()
        self.assertTrue(state.is_solved())
        self.assertEqual(state.to_facelets(), SOLVED_FACELETS)
        self.assertEqual(state.to_raw(), CubeStateRaw())

    def test_raw_round_trip(self):
        raw = CubeStateRaw(
            corners_position=[1, 0, 2, 3, 4, 5, 6, 7],
            corners_orientation=[1, 2, 0, 0, 0, 0, 0, 0],
            edges_position=[1, 0, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11],
            edges_orientation=[1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
        )
        self.assertEqual(CubeState.from_raw(raw).to_raw(), raw)

    def test_twisted_corners_are_not_solved(self):
        raw = CubeStateRaw(corners_orientation=[1, 2, 0, 0, 0, 0, 0, 0])
        state = CubeState.from_raw(raw)
        facelets = state.to_facelets()

        self.assertFalse(state.is_solved())
        self.assertEqual(facelets[9], "U")
        self.assertEqual(facelets[8], "F")
        self.assertEqual(Counter(facelets), Counter(SOLVED_FACELETS))

    def test_swapped_edges_move_stickers(self):
        raw = CubeStateRaw(
            corners_position=[1, 0, 2, 3, 4, 5, 6, 7],
            edges_position=[1, 0, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11],
        )
        facelets = CubeState.from_raw(raw).to_facelets()

        self.assertEqual(facelets[5], "U")
        self.assertEqual(facelets[10], "F")
        self.assertEqual(facelets[19], "R")
        self.assertEqual(facelets[4], "U")
        self.assertEqual(Counter(facelets), Counter(SOLVED_FACELETS))

    def test_repeated_position_rejected(self):
        raw = CubeStateRaw(corners_position=[0, 0, 2, 3, 4, 5, 6, 7])
        with self.assertRaises(InvalidCubeState):
            CubeState.from_raw(raw)

    def test_out_of_range_position_rejected(self):
        raw = CubeStateRaw(edges_position=[12] + list(range(1, 12)))
        with self.assertRaises(InvalidCubeState):
            CubeState.from_raw(raw)

    def test_orientation_sum_rejected(self):
        with self.assertRaises(InvalidCubeState):
            CubeState.from_raw(CubeStateRaw(corners_orientation=[1] + [0] * 7))
        with self.assertRaises(InvalidCubeState):
            CubeState.from_raw(CubeStateRaw(edges_orientation=[1] + [0] * 11))

    def test_length_mismatch_rejected(self):
        with self.assertRaises(InvalidCubeState):
            CubeState.from_raw(CubeStateRaw(corners_position=list(range(7))))

    def test_centers(self):
        state = CubeState(CubeState.solved().corners, CubeState.solved().edges,
                          tuple(CenterOrientation() for _ in range(6)))
        self.assertEqual(len(state.centers), 6)
        with self.assertRaises(InvalidCubeState):
            CubeState(state.corners, state.edges, (CenterOrientation(),))

    def test_invalid_state_is_a_value_error(self):
        self.assertTrue(issubclass(InvalidCubeState, ValueError))


class TestCubeMove(unittest.TestCase):
    def test_notation(self):
        self.assertEqual(str(CubeMove.R), "R")
        self.assertEqual(str(CubeMove.Rp), "R'")
        self.assertEqual(CubeMove.parse("B'"), CubeMove.Bp)
        self.assertEqual(CubeMove.parse(" U "), CubeMove.U)
        for move in CubeMove:
            self.assertEqual(CubeMove.parse(str(move)), move)
        with self.assertRaises(ValueError):
            CubeMove.parse("M")

    def test_wire_codes(self):
        self.assertIs(CubeMove.from_code(0), CubeMove.U)
        self.assertIs(CubeMove.from_code(11), CubeMove.Bp)
        self.assertIsNone(CubeMove.from_code(12))
        self.assertIsNone(CubeMove.from_code(31))

    def test_face_and_direction(self):
        self.assertEqual(CubeMove.Fp.face(), CubeMove.F)
        self.assertEqual(CubeMove.F.face(), CubeMove.F)
        self.assertEqual(CubeMove.F.rev(), CubeMove.Fp)
        self.assertEqual(CubeMove.Lp.inverse(), CubeMove.L)
        self.assertTrue(CubeMove.Dp.is_prime)
        self.assertEqual(CubeMove.Bp.face_index, 5)

    def test_mirror(self):
        self.assertEqual(CubeMove.U.mirror(), CubeMove.Dp)
        self.assertEqual(CubeMove.Rp.mirror(), CubeMove.L)
        self.assertEqual(CubeMove.B.mirror(), CubeMove.Fp)
        for move in CubeMove:
            self.assertEqual(move.mirror().mirror(), move)

    def test_commute(self):
        self.assertEqual(CubeMove.Lp.axis, Axis.RL)
        self.assertTrue(CubeMove.U.commute(CubeMove.Dp))
        self.assertTrue(CubeMove.F.commute(CubeMove.F))
        self.assertFalse(CubeMove.U.commute(CubeMove.R))
        self.assertFalse(CubeMove.B.commute(CubeMove.L))

    def test_format_moves(self):
        self.assertEqual(format_moves([]), "")
        self.assertEqual(format_moves([CubeMove.R, CubeMove.R, CubeMove.Up]), "R2U'")
        self.assertEqual(format_moves([CubeMove.F, CubeMove.Fp, CubeMove.F]), "FF'F")


if __name__ == "__main__":
    unittest.main()
