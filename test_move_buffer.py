import unittest

from cuboard.cube import CubeMove
from cuboard.move_buffer import ADJACENT_FACES, CuboardKey, MoveBuffer, MoveBufferError, parse_keys

U, Up, R, Rp, F, Fp, D, Dp, L, Lp, B, Bp = CubeMove


def feed(buffer, moves):
    return [buffer.input(move) for move in moves]


class TestParseKeys(unittest.TestCase):
    def test_every_unshifted_key(self):
        for main in CubeMove:
            for num, adjacent in enumerate(ADJACENT_FACES[main.face()]):
                for first in (adjacent, adjacent.rev()):
                    self.assertEqual(parse_keys([first, main]),
                                     [(CuboardKey(main, num, False), range(0, 2))])

    def test_every_shifted_key(self):
        for main in CubeMove:
            for num, adjacent in enumerate(ADJACENT_FACES[main.face()]):
                self.assertEqual(parse_keys([adjacent, adjacent, main]),
                                 [(CuboardKey(main, num, True), range(0, 3))])

    def test_examples(self):
        self.assertEqual(parse_keys([L, U]), [(CuboardKey(U, 0, False), range(0, 2))])
        self.assertEqual(parse_keys([B, B, U]), [(CuboardKey(U, 1, True), range(0, 3))])
        self.assertEqual(parse_keys([D, D, Rp]), [(CuboardKey(Rp, 0, True), range(0, 3))])

    def test_sequence_of_keys(self):
        keys = parse_keys([L, U, B, B, U, F, R])
        self.assertEqual([key for key, _ in keys],
                         [CuboardKey(U, 0, False), CuboardKey(U, 1, True), CuboardKey(R, 1, False)])
        self.assertEqual([covered for _, covered in keys], [range(0, 2), range(2, 5), range(5, 7)])

    def test_start_offset(self):
        self.assertEqual(parse_keys([R, R, L, U], start=2), [(CuboardKey(U, 0, False), range(2, 4))])

    def test_stops_at_non_key(self):
        self.assertEqual(parse_keys([]), [])
        self.assertEqual(parse_keys([R]), [])
        self.assertEqual(parse_keys([R, R]), [])
        self.assertEqual(parse_keys([R, R, R]), [])
        # Opposite faces are not adjacent
        self.assertEqual(parse_keys([U, D]), [])
        self.assertEqual(parse_keys([L, U, U, D, F, R]), [(CuboardKey(U, 0, False), range(0, 2))])

    def test_key_str(self):
        self.assertEqual(str(CuboardKey(U, 0, False)), "U.0")
        self.assertEqual(str(CuboardKey(Rp, 3, True)), "^R'.3")


class TestMoveBuffer(unittest.TestCase):
    def setUp(self):
        self.buffer = MoveBuffer()

    def test_empty(self):
        self.assertEqual(self.buffer.moves, [])
        self.assertEqual(self.buffer.keys, [])
        self.assertTrue(self.buffer.is_completed())
        self.assertEqual(self.buffer.finish(), [])

    def test_key_recognised_when_complete(self):
        self.assertEqual(feed(self.buffer, [L, U]), [False, True])
        self.assertEqual(self.buffer.keys, [(CuboardKey(U, 0, False), range(0, 2))])
        self.assertTrue(self.buffer.is_completed())
        self.assertEqual(self.buffer.remains(), [])

    def test_same_moves_accumulate(self):
        feed(self.buffer, [R, R, R])
        self.assertEqual(self.buffer.moves, [R, R, R])
        self.assertEqual(self.buffer.keys, [])
        self.assertFalse(self.buffer.is_completed())

    def test_opposite_turn_cancels(self):
        feed(self.buffer, [R, R, Rp])
        self.assertEqual(self.buffer.moves, [R])
        feed(self.buffer, [Rp])
        self.assertEqual(self.buffer.moves, [])

    def test_cancels_across_commuting_moves(self):
        feed(self.buffer, [R, L, Rp])
        self.assertEqual(self.buffer.moves, [L])

    def test_groups_same_face_inside_commuting_run(self):
        feed(self.buffer, [R, L, R])
        self.assertEqual(self.buffer.moves, [L, R, R])

    def test_non_commuting_move_breaks_the_run(self):
        feed(self.buffer, [R, U, R])
        self.assertEqual(self.buffer.moves, [R, U, R])

    def test_regroups_commuting_turns(self):
        # U, D and U commute, the two U turns are grouped at the end
        feed(self.buffer, [L, U, D, U])
        self.assertEqual(self.buffer.moves, [L, D, U, U])

    def test_undo_invalidates_key(self):
        feed(self.buffer, [L, U])
        self.assertTrue(self.buffer.input(Up))
        self.assertEqual(self.buffer.moves, [L])
        self.assertEqual(self.buffer.keys, [])
        self.assertEqual(self.buffer.remains(), [L])

    def test_key_invalidated_then_rebuilt(self):
        feed(self.buffer, [F, U, Up, R])
        self.assertEqual(self.buffer.moves, [F, R])
        self.assertEqual(self.buffer.keys, [(CuboardKey(R, 1, False), range(0, 2))])

    def test_keys_follow_each_other(self):
        feed(self.buffer, [L, U, F, F, R])
        self.assertEqual([key for key, _ in self.buffer.keys],
                         [CuboardKey(U, 0, False), CuboardKey(R, 1, True)])

    def test_finish_keeps_pending_moves(self):
        feed(self.buffer, [L, U, R])
        self.assertEqual(self.buffer.finish(), [CuboardKey(U, 0, False)])
        self.assertEqual(self.buffer.moves, [R])
        self.assertEqual(self.buffer.keys, [])
        feed(self.buffer, [F])
        self.assertEqual(self.buffer.keys, [(CuboardKey(F, 1, False), range(0, 2))])

    def test_cancel(self):
        feed(self.buffer, [L, U, R])
        self.buffer.cancel()
        self.assertEqual(self.buffer.moves, [])
        self.assertEqual(self.buffer.keys, [])

    def test_views_are_copies(self):
        feed(self.buffer, [L, U])
        self.buffer.moves.append(R)
        self.buffer.keys.clear()
        self.assertEqual(self.buffer.moves, [L, U])
        self.assertEqual(len(self.buffer.keys), 1)

    def test_inconsistent_keys_detected(self):
        feed(self.buffer, [L, U])
        self.buffer._keys.append((CuboardKey(U, 0, False), range(3, 5)))
        with self.assertRaises(MoveBufferError):
            self.buffer._check_invariants()

    def test_keys_beyond_moves_detected(self):
        self.buffer._keys.append((CuboardKey(U, 0, False), range(0, 2)))
        with self.assertRaises(MoveBufferError):
            self.buffer._check_invariants()


if __name__ == "__main__":
    unittest.main()
